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

__all__ = [
    "AgentSelector",
    "ContextLoader",
    "ExecuteParams",
    "Executor",
    "LoadedContext",
    "LoadedRole",
    "LoadedTask",
    "PlaceholderResolver",
    "RoleLoader",
    "RoleSelector",
    "SelectionContext",
    "TaskLoader",
    "TaskResolver",
    "UTDProcessor",
]
