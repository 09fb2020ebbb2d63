"""JSON schemas for the TOML configuration files of one layer."""

from typing import Any

_STRING = {"type": "string"}
_TIMEOUT = {"type": "integer", "minimum": 0}

_UTD_PROPERTIES: dict[str, Any] = {
    "description": _STRING,
    "file": _STRING,
    "command": _STRING,
    "prompt": _STRING,
    "shell": _STRING,
    "command_timeout": _TIMEOUT,
}


def _entity_file_schema(table: str, properties: dict[str, Any]) -> dict[str, Any]:
    return {
        "type": "object",
        "properties": {
            table: {
                "type": "object",
                "additionalProperties": {
                    "type": "object",
                    "properties": properties,
                },
            }
        },
    }


SETTINGS_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "settings": {
            "type": "object",
            "properties": {
                "default_agent": _STRING,
                "default_role": _STRING,
                "log_level": _STRING,
                "shell": _STRING,
                "command_timeout": _TIMEOUT,
                "asset_download": {"type": "boolean"},
                "asset_repo": _STRING,
                "asset_path": _STRING,
            },
        }
    },
}

AGENTS_SCHEMA = _entity_file_schema(
    "agents",
    {
        "bin": _STRING,
        "command": _STRING,
        "description": _STRING,
        "url": _STRING,
        "models_url": _STRING,
        "default_model": _STRING,
        "models": {"type": "object", "additionalProperties": _STRING},
    },
)

ROLES_SCHEMA = _entity_file_schema("roles", dict(_UTD_PROPERTIES))

CONTEXTS_SCHEMA = _entity_file_schema(
    "contexts", {**_UTD_PROPERTIES, "required": {"type": "boolean"}}
)

TASKS_SCHEMA = _entity_file_schema(
    "tasks",
    {
        **_UTD_PROPERTIES,
        "alias": _STRING,
        "role": _STRING,
        "agent": _STRING,
    },
)
