from dataclasses import dataclass, field, replace

from agent_start.constants import DEFAULT_INSTRUCTIONS
from agent_start.engine.placeholder import PlaceholderResolver
from agent_start.engine.utd import UTDProcessor
from agent_start.errors import TaskLoadError, TaskNotFoundError
from agent_start.models import Task


@dataclass
class LoadedTask:
    name: str
    prompt: str = ""
    command: str = ""
    warnings: list[str] = field(default_factory=list)


class TaskResolver:
    def resolve(
        self,
        name: str,
        local_tasks: dict[str, Task],
        global_tasks: dict[str, Task],
    ) -> Task:
        """Look up by local name, local alias, global name, then global alias."""
        for tasks in (local_tasks, global_tasks):
            if name in tasks:
                return replace(tasks[name], name=name)
            for key, task in tasks.items():
                if task.alias == name:
                    return replace(task, name=key)
        raise TaskNotFoundError(name)

    def list_all(
        self, local_tasks: dict[str, Task], global_tasks: dict[str, Task]
    ) -> dict[str, Task]:
        merged = {name: replace(task, name=name) for name, task in global_tasks.items()}
        merged.update(
            {name: replace(task, name=name) for name, task in local_tasks.items()}
        )
        return merged


class TaskLoader:
    def __init__(self, utd: UTDProcessor, resolver: PlaceholderResolver) -> None:
        self._utd = utd
        self._resolver = resolver

    def load(
        self,
        task: Task,
        instructions: str,
        default_shell: str,
        default_timeout: int,
    ) -> LoadedTask:
        result = self._utd.process(task.utd_input(), default_shell, default_timeout)
        if result.skipped:
            raise TaskLoadError(
                f"task {task.name!r} processing failed", result.warnings
            )

        prompt = self._resolver.resolve(
            result.content, {"instructions": instructions or DEFAULT_INSTRUCTIONS}
        )
        return LoadedTask(
            name=task.name,
            prompt=prompt,
            command=task.command,
            warnings=list(result.warnings),
        )
