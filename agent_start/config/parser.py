"""Build configuration models from parsed TOML tables."""

from typing import Any

from agent_start.models import Agent, Context, Role, Settings, Task


def _str(raw: dict[str, Any], key: str) -> str:
    value = raw.get(key, "")
    return value if isinstance(value, str) else str(value)


def _int(raw: dict[str, Any], key: str) -> int:
    value = raw.get(key, 0)
    return value if isinstance(value, int) and not isinstance(value, bool) else 0


def parse_settings(raw: dict[str, Any]) -> Settings:
    asset_download = raw.get("asset_download")
    return Settings(
        default_agent=_str(raw, "default_agent"),
        default_role=_str(raw, "default_role"),
        log_level=_str(raw, "log_level"),
        shell=_str(raw, "shell"),
        command_timeout=_int(raw, "command_timeout"),
        asset_download=asset_download if isinstance(asset_download, bool) else None,
        asset_repo=_str(raw, "asset_repo"),
        asset_path=_str(raw, "asset_path"),
    )


def parse_agent(name: str, raw: dict[str, Any]) -> Agent:
    models = raw.get("models", {})
    if not isinstance(models, dict):
        models = {}
    return Agent(
        name=name,
        bin=_str(raw, "bin"),
        command=_str(raw, "command"),
        description=_str(raw, "description"),
        url=_str(raw, "url"),
        models_url=_str(raw, "models_url"),
        default_model=_str(raw, "default_model"),
        models={str(key): str(value) for key, value in models.items()},
    )


def parse_role(name: str, raw: dict[str, Any]) -> Role:
    return Role(
        name=name,
        description=_str(raw, "description"),
        file=_str(raw, "file"),
        command=_str(raw, "command"),
        prompt=_str(raw, "prompt"),
        shell=_str(raw, "shell"),
        command_timeout=_int(raw, "command_timeout"),
    )


def parse_context(name: str, raw: dict[str, Any]) -> Context:
    return Context(
        name=name,
        description=_str(raw, "description"),
        file=_str(raw, "file"),
        command=_str(raw, "command"),
        prompt=_str(raw, "prompt"),
        required=bool(raw.get("required", False)),
        shell=_str(raw, "shell"),
        command_timeout=_int(raw, "command_timeout"),
    )


def parse_task(name: str, raw: dict[str, Any]) -> Task:
    return Task(
        name=name,
        alias=_str(raw, "alias"),
        description=_str(raw, "description"),
        role=_str(raw, "role"),
        agent=_str(raw, "agent"),
        file=_str(raw, "file"),
        command=_str(raw, "command"),
        prompt=_str(raw, "prompt"),
        shell=_str(raw, "shell"),
        command_timeout=_int(raw, "command_timeout"),
    )
