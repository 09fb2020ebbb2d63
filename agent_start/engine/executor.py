import logging
from dataclasses import dataclass, field
from typing import NoReturn

from agent_start.core.process import IProcessReplacer
from agent_start.engine.contexts import LoadedContext
from agent_start.engine.placeholder import PlaceholderResolver
from agent_start.errors import ExecutionError
from agent_start.models import Agent

logger = logging.getLogger(__name__)

PROMPT_SEPARATOR = "\n\n"


@dataclass
class ExecuteParams:
    agent: Agent
    model: str
    shell: str
    user_prompt: str = ""
    role_content: str = ""
    role_file_path: str = ""
    contexts: list[LoadedContext] = field(default_factory=list)


class Executor:
    def __init__(
        self, replacer: IProcessReplacer, resolver: PlaceholderResolver
    ) -> None:
        self._replacer = replacer
        self._resolver = resolver

    def build_prompt(self, contexts: list[LoadedContext], user_prompt: str) -> str:
        parts = [context.content for context in contexts if context.content]
        if user_prompt:
            parts.append(user_prompt)
        return PROMPT_SEPARATOR.join(parts)

    def build_command(self, params: ExecuteParams) -> str:
        values = {
            "bin": params.agent.bin,
            "model": params.model,
            "prompt": self.build_prompt(params.contexts, params.user_prompt),
            "role": params.role_content,
            "role_file": params.role_file_path,
        }
        return self._resolver.resolve(params.agent.command, values)

    def execute(self, params: ExecuteParams) -> NoReturn:
        """Replace the current process with the agent command.

        Returns control only by raising ``ExecutionError``; callers must
        release temporary resources before relying on this call.
        """
        if not params.agent.command:
            raise ExecutionError(f"agent {params.agent.name!r} has no command template")
        if not params.shell:
            raise ExecutionError("no shell available to run the agent command")
        command = self.build_command(params)
        logger.info("Executing agent %s", params.agent.name)
        self._replacer.replace(params.shell, command)
