"""Prepare and launch one agent invocation."""

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional

from agent_start.assets.cache import FileCache
from agent_start.assets.github import GitHubCatalogClient, ICatalogClient
from agent_start.assets.resolver import AssetResolver
from agent_start.config.loader import ConfigLoader, LoadedConfig
from agent_start.config.validator import ConfigValidator
from agent_start.constants import DEFAULT_COMMAND_TIMEOUT
from agent_start.core.context import RuntimeContext
from agent_start.core.filesystem import IFileSystem, LocalFileSystem
from agent_start.core.process import IProcessReplacer, default_process_replacer
from agent_start.core.runner import ICommandRunner, ShellCommandRunner, detect_shell
from agent_start.engine.agents import AgentSelector
from agent_start.engine.contexts import ContextLoader, LoadedContext
from agent_start.engine.executor import ExecuteParams, Executor
from agent_start.engine.placeholder import PlaceholderResolver
from agent_start.engine.roles import (
    LoadedRole,
    RoleLoader,
    RoleSelector,
    SelectionContext,
)
from agent_start.engine.tasks import LoadedTask, TaskLoader, TaskResolver
from agent_start.engine.utd import UTDProcessor
from agent_start.errors import RoleNotFoundError, TaskNotFoundError
from agent_start.models import CommandType, Config, Role, Settings, Task

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LaunchRequest:
    command_type: CommandType
    prompt: str = ""
    task_name: str = ""
    instructions: str = ""
    agent: str = ""
    model: str = ""
    role: str = ""


@dataclass
class LaunchPlan:
    params: ExecuteParams
    role: LoadedRole
    contexts: list[LoadedContext]
    task: Optional[LoadedTask] = None
    command: str = ""
    prompt: str = ""
    warnings: list[tuple[str, str]] = field(default_factory=list)


def build_asset_resolver(
    fs: IFileSystem,
    context: RuntimeContext,
    settings: Settings,
    client: Optional[ICatalogClient] = None,
) -> AssetResolver:
    if settings.asset_path:
        base = context.resolve_path(settings.asset_path)
    else:
        base = context.default_asset_dir
    return AssetResolver(FileCache(fs, base), client or GitHubCatalogClient())


class Launcher:
    def __init__(
        self,
        loader: ConfigLoader,
        validator: ConfigValidator,
        assets: Callable[[Config], AssetResolver],
        agent_selector: AgentSelector,
        role_selector: RoleSelector,
        role_loader: RoleLoader,
        context_loader: ContextLoader,
        task_resolver: TaskResolver,
        task_loader: TaskLoader,
        executor: Executor,
    ) -> None:
        self._loader = loader
        self._validator = validator
        self._assets = assets
        self._agent_selector = agent_selector
        self._role_selector = role_selector
        self._role_loader = role_loader
        self._context_loader = context_loader
        self._task_resolver = task_resolver
        self._task_loader = task_loader
        self._executor = executor

    @classmethod
    def create_default(
        cls,
        context: RuntimeContext,
        fs: Optional[IFileSystem] = None,
        runner: Optional[ICommandRunner] = None,
        replacer: Optional[IProcessReplacer] = None,
        client: Optional[ICatalogClient] = None,
    ) -> "Launcher":
        fs = fs or LocalFileSystem()
        utd = UTDProcessor(fs, runner or ShellCommandRunner(), context)
        placeholders = PlaceholderResolver()
        return cls(
            loader=ConfigLoader(fs, context),
            validator=ConfigValidator(),
            assets=lambda cfg: build_asset_resolver(fs, context, cfg.settings, client),
            agent_selector=AgentSelector(),
            role_selector=RoleSelector(),
            role_loader=RoleLoader(utd, fs),
            context_loader=ContextLoader(utd),
            task_resolver=TaskResolver(),
            task_loader=TaskLoader(utd, placeholders),
            executor=Executor(replacer or default_process_replacer(), placeholders),
        )

    def assets(self, cfg: Config) -> AssetResolver:
        return self._assets(cfg)

    def load_config(self) -> LoadedConfig:
        loaded = self._loader.load()
        self._validator.validate(loaded.merged)
        return loaded

    def list_tasks(self, loaded: LoadedConfig) -> dict[str, Task]:
        return self._task_resolver.list_all(
            loaded.local_config.tasks, loaded.global_config.tasks
        )

    def find_task(self, name: str, loaded: LoadedConfig) -> Task:
        try:
            return self._task_resolver.resolve(
                name, loaded.local_config.tasks, loaded.global_config.tasks
            )
        except TaskNotFoundError:
            cfg = loaded.merged
            task, found = self._assets(cfg).resolve_task(
                name, cfg, cfg.settings.download_allowed
            )
            if not found:
                raise
            return task

    def find_role(
        self, request: LaunchRequest, task: Optional[Task], cfg: Config
    ) -> Role:
        ctx = SelectionContext(
            role_flag=request.role,
            task_role=task.role if task else "",
            default_role=cfg.settings.default_role,
        )
        try:
            return self._role_selector.select(ctx, cfg.roles)
        except RoleNotFoundError as exc:
            role, found = self._assets(cfg).resolve_role(
                exc.name, cfg, cfg.settings.download_allowed
            )
            if not found:
                raise
            return role

    def prepare(self, request: LaunchRequest, loaded: LoadedConfig) -> LaunchPlan:
        """Resolve every piece of the invocation without executing it.

        The caller owns the returned role file and must release it through
        ``release`` when the plan is not handed to ``execute``.
        """
        cfg = loaded.merged
        task = None
        if request.command_type == CommandType.TASK:
            task = self.find_task(request.task_name, loaded)

        agent = self._agent_selector.select(
            request.agent,
            task.agent if task else "",
            cfg.settings.default_agent,
            cfg.agents,
        )
        model = self._agent_selector.resolve_model(agent, request.model)
        role = self.find_role(request, task, cfg)

        shell = cfg.settings.shell or detect_shell()
        timeout = cfg.settings.command_timeout or DEFAULT_COMMAND_TIMEOUT
        logger.debug(
            "Using agent=%s model=%s role=%s shell=%s",
            agent.name,
            model,
            role.name,
            shell,
        )

        loaded_role = self._role_loader.load(role, shell, timeout)
        try:
            contexts = self._context_loader.load(
                cfg.contexts, cfg.context_order, request.command_type, shell, timeout
            )
            loaded_task = None
            user_prompt = request.prompt
            if task is not None:
                loaded_task = self._task_loader.load(
                    task, request.instructions, shell, timeout
                )
                user_prompt = loaded_task.prompt
        except Exception:
            self._role_loader.cleanup(loaded_role)
            raise

        params = ExecuteParams(
            agent=agent,
            model=model,
            shell=shell,
            user_prompt=user_prompt,
            role_content=loaded_role.content,
            role_file_path=loaded_role.file_path,
            contexts=contexts,
        )
        plan = LaunchPlan(
            params=params,
            role=loaded_role,
            contexts=contexts,
            task=loaded_task,
            command=self._executor.build_command(params),
            prompt=self._executor.build_prompt(contexts, user_prompt),
        )
        plan.warnings.extend(("role", warning) for warning in loaded_role.warnings)
        for context in contexts:
            plan.warnings.extend(
                (f"context {context.name}", warning) for warning in context.warnings
            )
        if loaded_task is not None:
            plan.warnings.extend(("task", warning) for warning in loaded_task.warnings)
        return plan

    def release(self, plan: LaunchPlan) -> None:
        self._role_loader.cleanup(plan.role)

    def execute(self, plan: LaunchPlan) -> None:
        """Hand the process to the agent.

        On a real process replacement the ``finally`` block never runs and the
        role file stays behind for the agent to read. It runs only when the
        launch fails or when the replacement is emulated by a child process.
        """
        try:
            self._executor.execute(plan.params)
        finally:
            self.release(plan)
