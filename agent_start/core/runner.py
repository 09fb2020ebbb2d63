import logging
import shutil
import subprocess
from abc import ABC, abstractmethod

from agent_start.errors import CommandError

logger = logging.getLogger(__name__)

_SHELL_FLAGS: dict[str, str] = {
    "node": "-e",
    "nodejs": "-e",
    "bun": "-e",
    "deno": "eval",
    "ruby": "-e",
    "perl": "-E",
}


def shell_flag(shell: str) -> str:
    """Flag that makes the interpreter evaluate the next argument as code."""
    return _SHELL_FLAGS.get(shell, "-c")


def detect_shell() -> str:
    if shutil.which("bash"):
        return "bash"
    return "sh"


class ICommandRunner(ABC):
    @abstractmethod
    def run(self, shell: str, command: str, timeout: int) -> str:
        """Run command through shell and return combined stdout and stderr."""


class ShellCommandRunner(ICommandRunner):
    def run(self, shell: str, command: str, timeout: int) -> str:
        logger.debug("Running %r with %s (timeout %ss)", command, shell, timeout)
        try:
            completed = subprocess.run(
                [shell, shell_flag(shell), command],
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                timeout=timeout if timeout > 0 else None,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            raise CommandError(f"command timeout after {timeout} seconds") from exc
        except OSError as exc:
            raise CommandError(f"cannot run {shell}: {exc}") from exc

        if completed.returncode != 0:
            output = (completed.stdout or "").strip()
            detail = f": {output}" if output else ""
            raise CommandError(f"exit status {completed.returncode}{detail}")
        return completed.stdout or ""
