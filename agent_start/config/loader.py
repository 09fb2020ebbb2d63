import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

from jsonschema import Draft202012Validator

from agent_start.config.merge import merge
from agent_start.config.parser import (
    parse_agent,
    parse_context,
    parse_role,
    parse_settings,
    parse_task,
)
from agent_start.config.schema import (
    AGENTS_SCHEMA,
    CONTEXTS_SCHEMA,
    ROLES_SCHEMA,
    SETTINGS_SCHEMA,
    TASKS_SCHEMA,
)
from agent_start.constants import (
    AGENTS_FILENAME,
    CONTEXTS_FILENAME,
    ROLES_FILENAME,
    SETTINGS_FILENAME,
    TASKS_FILENAME,
)
from agent_start.core.context import RuntimeContext
from agent_start.core.filesystem import IFileSystem
from agent_start.errors import InvalidConfigSchemaError
from agent_start.models import Config
from agent_start.utils import parse_toml

logger = logging.getLogger(__name__)


def format_schema_error(error: Any) -> str:
    path = ".".join([str(part) for part in error.path])
    return f"{error.message} at {path}" if path else str(error.message)


@dataclass(frozen=True)
class LoadedConfig:
    global_config: Config
    local_config: Config
    merged: Config


class ConfigLoader:
    def __init__(self, fs: IFileSystem, context: RuntimeContext) -> None:
        self._fs = fs
        self._context = context
        self._validators = {
            SETTINGS_FILENAME: Draft202012Validator(SETTINGS_SCHEMA),
            AGENTS_FILENAME: Draft202012Validator(AGENTS_SCHEMA),
            ROLES_FILENAME: Draft202012Validator(ROLES_SCHEMA),
            CONTEXTS_FILENAME: Draft202012Validator(CONTEXTS_SCHEMA),
            TASKS_FILENAME: Draft202012Validator(TASKS_SCHEMA),
        }

    def load(self) -> LoadedConfig:
        global_config = self.load_global()
        local_config = self.load_local()
        return LoadedConfig(
            global_config=global_config,
            local_config=local_config,
            merged=merge(global_config, local_config),
        )

    def load_global(self) -> Config:
        return self.load_dir(self._context.global_config_dir)

    def load_local(self) -> Config:
        return self.load_dir(self._context.local_config_dir)

    def load_dir(self, root: Path) -> Config:
        config = Config.empty()

        settings = self._read_table(root / SETTINGS_FILENAME, "settings")
        if settings is not None:
            config.settings = parse_settings(settings)

        self._load_entities(
            root / AGENTS_FILENAME, "agents", parse_agent, config.agents
        )
        self._load_entities(root / ROLES_FILENAME, "roles", parse_role, config.roles)
        self._load_entities(
            root / CONTEXTS_FILENAME, "contexts", parse_context, config.contexts
        )
        config.context_order = list(config.contexts)
        self._load_entities(root / TASKS_FILENAME, "tasks", parse_task, config.tasks)
        return config

    def _load_entities(
        self,
        path: Path,
        table: str,
        parse: Callable[[str, dict[str, Any]], Any],
        target: dict[str, Any],
    ) -> None:
        entries = self._read_table(path, table)
        if not entries:
            return
        for name, raw in entries.items():
            target[name] = parse(name, raw)

    def _read_table(self, path: Path, table: str) -> dict[str, Any] | None:
        if not self._fs.exists(path):
            return None
        logger.debug("Loading %s", path)
        payload = parse_toml(self._fs.read_text(path), path)
        error = next(iter(self._validators[path.name].iter_errors(payload)), None)
        if error is not None:
            raise InvalidConfigSchemaError(path, format_schema_error(error))
        section = payload.get(table)
        if section is None:
            return None
        return section
