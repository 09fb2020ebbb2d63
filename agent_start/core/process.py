import logging
import os
import subprocess
import sys
from abc import ABC, abstractmethod
from typing import NoReturn

from agent_start.core.runner import shell_flag
from agent_start.errors import ExecutionError

logger = logging.getLogger(__name__)


class IProcessReplacer(ABC):
    @abstractmethod
    def replace(self, shell: str, command: str) -> NoReturn:
        """Hand the process over to command; never returns on success."""


class ExecProcessReplacer(IProcessReplacer):
    def replace(self, shell: str, command: str) -> NoReturn:
        logger.debug("exec %s %s %r", shell, shell_flag(shell), command)
        sys.stdout.flush()
        sys.stderr.flush()
        try:
            os.execvp(shell, [shell, shell_flag(shell), command])
        except OSError as exc:
            raise ExecutionError(f"failed to execute {shell}: {exc}") from exc


class SpawnProcessReplacer(IProcessReplacer):
    """Runs the child with inherited stdio and exits with its status."""

    def replace(self, shell: str, command: str) -> NoReturn:
        logger.debug("spawn %s %s %r", shell, shell_flag(shell), command)
        try:
            completed = subprocess.run([shell, shell_flag(shell), command], check=False)
        except OSError as exc:
            raise ExecutionError(f"failed to execute {shell}: {exc}") from exc
        sys.exit(completed.returncode)


def default_process_replacer() -> IProcessReplacer:
    if os.name == "nt":
        return SpawnProcessReplacer()
    return ExecProcessReplacer()
