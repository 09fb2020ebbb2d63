from dataclasses import replace

from agent_start.errors import (
    AgentNotFoundError,
    AgentSelectionError,
    ModelSelectionError,
)
from agent_start.models import Agent


class AgentSelector:
    def select(
        self,
        agent_flag: str,
        task_agent: str,
        default_agent: str,
        agents: dict[str, Agent],
    ) -> Agent:
        name = agent_flag or task_agent or default_agent
        if not name:
            raise AgentSelectionError(
                "no agent specified and no default agent configured"
            )
        agent = agents.get(name)
        if agent is None:
            raise AgentNotFoundError(name, "in configuration")
        return replace(agent, name=name)

    def resolve_model(self, agent: Agent, model_flag: str) -> str:
        """Map a model name to its full identifier.

        An unknown ``--model`` value is passed through as a full identifier.
        """
        if model_flag:
            return agent.models.get(model_flag, model_flag)
        if agent.default_model:
            model = agent.models.get(agent.default_model)
            if model is None:
                raise ModelSelectionError(
                    f"default model {agent.default_model!r} not found in agent "
                    f"{agent.name!r} models"
                )
            return model
        raise ModelSelectionError(
            f"no model specified and no default model for agent {agent.name!r}"
        )
