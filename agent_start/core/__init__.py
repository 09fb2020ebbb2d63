from agent_start.core.context import RuntimeContext
from agent_start.core.filesystem import IFileSystem, LocalFileSystem
from agent_start.core.process import (
    ExecProcessReplacer,
    IProcessReplacer,
    SpawnProcessReplacer,
    default_process_replacer,
)
from agent_start.core.runner import ICommandRunner, ShellCommandRunner, detect_shell

__all__ = [
    "ExecProcessReplacer",
    "ICommandRunner",
    "IFileSystem",
    "IProcessReplacer",
    "LocalFileSystem",
    "RuntimeContext",
    "ShellCommandRunner",
    "SpawnProcessReplacer",
    "default_process_replacer",
    "detect_shell",
]
