"""Unified Template Design: resolve file / command / prompt into text."""

import logging

from agent_start.core.context import RuntimeContext
from agent_start.core.filesystem import IFileSystem
from agent_start.core.runner import ICommandRunner
from agent_start.errors import CommandError
from agent_start.models import UTDInput, UTDResult
from agent_start.utils import contains_any

logger = logging.getLogger(__name__)

FILE_PLACEHOLDERS = ("{file}", "{file_contents}")
COMMAND_PLACEHOLDERS = ("{command}", "{command_output}")


class UTDProcessor:
    def __init__(
        self, fs: IFileSystem, runner: ICommandRunner, context: RuntimeContext
    ) -> None:
        self._fs = fs
        self._runner = runner
        self._context = context

    def process(
        self, utd: UTDInput, default_shell: str, default_timeout: int
    ) -> UTDResult:
        result = UTDResult()

        if utd.is_empty():
            result.warnings.append(
                "Empty section: at least one of file, command, or prompt required"
            )
            result.skipped = True
            return result

        shell = utd.shell or default_shell
        timeout = utd.command_timeout or default_timeout
        has_file = bool(utd.file)
        has_command = bool(utd.command)
        has_prompt = bool(utd.prompt)

        file_contents = ""
        file_path = ""
        if has_file:
            resolved = self._context.resolve_path(utd.file)
            file_path = str(resolved)
            result.file_path = file_path
            try:
                file_contents = self._fs.read_text(resolved)
            except (OSError, UnicodeDecodeError):
                if has_prompt and contains_any(utd.prompt, FILE_PLACEHOLDERS):
                    result.warnings.append(f"File not found: {file_path}")
                    result.skipped = True
                    return result
                result.warnings.append(f"File not found: {file_path} (ignored)")

        command_output = ""
        if has_command:
            try:
                command_output = self._runner.run(shell, utd.command, timeout)
                command_output = command_output.rstrip("\n")
            except CommandError as exc:
                logger.debug("Command %r failed: %s", utd.command, exc)
                result.warnings.append(f"Command failed: {exc}")

        if has_prompt:
            content = utd.prompt

            uses_file = contains_any(content, FILE_PLACEHOLDERS)
            if has_file and not uses_file:
                result.warnings.append("File defined but not used in prompt")
            if not has_file and uses_file:
                result.warnings.append("No file defined but prompt uses {file}")
                result.skipped = True
                return result

            uses_command = contains_any(content, COMMAND_PLACEHOLDERS)
            if has_command and not uses_command:
                result.warnings.append("Command defined but not used in prompt")
            if not has_command and uses_command:
                result.warnings.append("No command defined but prompt uses {command}")
                result.skipped = True
                return result

            content = content.replace("{file}", file_path)
            content = content.replace("{file_contents}", file_contents)
            content = content.replace("{command}", utd.command)
            content = content.replace("{command_output}", command_output)
            result.content = content
        elif has_file and has_command:
            if contains_any(file_contents, COMMAND_PLACEHOLDERS):
                content = file_contents.replace("{command}", utd.command)
                result.content = content.replace("{command_output}", command_output)
            else:
                result.warnings.append("Command defined but not used in file")
                result.content = file_contents
        elif has_file:
            result.content = file_contents
        else:
            result.content = command_output

        return result
