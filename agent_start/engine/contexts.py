from dataclasses import dataclass, field

from agent_start.engine.utd import UTDProcessor
from agent_start.models import CommandType, Context


@dataclass
class LoadedContext:
    name: str
    content: str = ""
    file_path: str = ""
    warnings: list[str] = field(default_factory=list)


class ContextLoader:
    def __init__(self, utd: UTDProcessor) -> None:
        self._utd = utd

    def load(
        self,
        contexts: dict[str, Context],
        context_order: list[str],
        command_type: CommandType,
        default_shell: str,
        default_timeout: int,
    ) -> list[LoadedContext]:
        """Process contexts in declaration order.

        Only ``interactive`` invocations include optional contexts. A context
        whose content cannot be produced is kept with empty content so its
        warnings can still be reported.
        """
        loaded: list[LoadedContext] = []
        for name in context_order:
            context = contexts.get(name)
            if context is None:
                continue
            if command_type != CommandType.INTERACTIVE and not context.required:
                continue

            result = self._utd.process(
                context.utd_input(), default_shell, default_timeout
            )
            if result.skipped:
                loaded.append(LoadedContext(name=name, warnings=list(result.warnings)))
                continue
            loaded.append(
                LoadedContext(
                    name=name,
                    content=result.content,
                    file_path=result.file_path,
                    warnings=list(result.warnings),
                )
            )
        return loaded
