import re
from dataclasses import dataclass

from agent_start.constants import LOG_LEVELS
from agent_start.errors import ConfigValidationError
from agent_start.models import Agent, Config, UTDInput

_NAME_RE = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")
_UTD_MESSAGE = (
    "at least one of 'file', 'command', or 'prompt' must be specified (UTD pattern)"
)


@dataclass(frozen=True)
class ValidationIssue:
    field: str
    message: str

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


class ConfigValidator:
    def validate(self, cfg: Config) -> None:
        issues = self.collect(cfg)
        if issues:
            raise ConfigValidationError(issues)

    def collect(self, cfg: Config) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []
        for name, agent in cfg.agents.items():
            issues.extend(self._validate_agent(name, agent))
        for section, entities in (("roles", cfg.roles), ("contexts", cfg.contexts)):
            for name, entity in entities.items():
                issues.extend(self._validate_utd(section, name, entity.utd_input()))
        for name, task in cfg.tasks.items():
            issues.extend(self._validate_utd("tasks", name, task.utd_input()))
            if task.alias and not _NAME_RE.match(task.alias):
                issues.append(
                    ValidationIssue(
                        f"tasks.{name}.alias",
                        "alias must be lowercase alphanumeric with hyphens",
                    )
                )
            if task.agent and task.agent not in cfg.agents:
                issues.append(
                    ValidationIssue(
                        f"tasks.{name}.agent",
                        f"agent '{task.agent}' not found in configuration",
                    )
                )
        issues.extend(self._validate_settings(cfg))
        return issues

    def _validate_agent(self, name: str, agent: Agent) -> list[ValidationIssue]:
        field = f"agents.{name}"
        issues: list[ValidationIssue] = []
        if not _NAME_RE.match(name):
            issues.append(
                ValidationIssue(
                    field, "agent name must be lowercase alphanumeric with hyphens"
                )
            )
        if not agent.bin:
            issues.append(ValidationIssue(f"{field}.bin", "bin field is required"))
        if not agent.command:
            issues.append(
                ValidationIssue(f"{field}.command", "command field is required")
            )
        for placeholder in ("{bin}", "{model}"):
            if placeholder not in agent.command:
                issues.append(
                    ValidationIssue(
                        f"{field}.command",
                        f"command must contain {placeholder} placeholder",
                    )
                )
        if not agent.models:
            issues.append(
                ValidationIssue(
                    f"{field}.models", "agent requires at least one model definition"
                )
            )
        for model_name in agent.models:
            if not _NAME_RE.match(model_name):
                issues.append(
                    ValidationIssue(
                        f"{field}.models.{model_name}",
                        "model name must be lowercase alphanumeric with hyphens",
                    )
                )
        if agent.default_model and agent.default_model not in agent.models:
            issues.append(
                ValidationIssue(
                    f"{field}.default_model",
                    f"default_model '{agent.default_model}' not found in models table",
                )
            )
        return issues

    def _validate_utd(
        self, section: str, name: str, utd: UTDInput
    ) -> list[ValidationIssue]:
        field = f"{section}.{name}"
        issues: list[ValidationIssue] = []
        if not _NAME_RE.match(name):
            issues.append(
                ValidationIssue(
                    field,
                    f"{section[:-1]} name must be lowercase alphanumeric with hyphens",
                )
            )
        if utd.is_empty():
            issues.append(ValidationIssue(field, _UTD_MESSAGE))
        return issues

    def _validate_settings(self, cfg: Config) -> list[ValidationIssue]:
        settings = cfg.settings
        issues: list[ValidationIssue] = []
        if settings.default_agent and settings.default_agent not in cfg.agents:
            issues.append(
                ValidationIssue(
                    "settings.default_agent",
                    f"default_agent '{settings.default_agent}' not found in agents",
                )
            )
        if settings.log_level and settings.log_level not in LOG_LEVELS:
            issues.append(
                ValidationIssue(
                    "settings.log_level",
                    f"log_level must be one of: {', '.join(LOG_LEVELS)}",
                )
            )
        return issues
