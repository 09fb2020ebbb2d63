import tomllib
from datetime import datetime
from pathlib import Path
from typing import Any

from agent_start.errors import InvalidConfigSchemaError, InvalidTomlFormatError


def parse_toml(text: str, path: Path) -> dict[str, Any]:
    try:
        payload = tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        raise InvalidTomlFormatError(path, str(exc)) from exc
    if not isinstance(payload, dict):
        raise InvalidConfigSchemaError(path, "must be a TOML table")
    return payload


def dump_toml_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, list):
        return "[" + ", ".join(dump_toml_value(item) for item in value) + "]"
    escaped = (
        str(value).replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
    )
    return f'"{escaped}"'


def dump_toml_table(table_name: str, values: dict[str, Any]) -> str:
    lines = [f"[{table_name}]"]
    for key, value in values.items():
        if value is None:
            continue
        lines.append(f"{key} = {dump_toml_value(value)}")
    return "\n".join(lines) + "\n"


def compact_home_path(path: str | Path) -> str:
    text = str(path)
    home = str(Path.home())
    if text == home:
        return "~"
    home_prefix = f"{home}/"
    if text.startswith(home_prefix):
        return f"~/{text[len(home_prefix):]}"
    return text


def compact_home_paths_in_text(text: str) -> str:
    home = str(Path.home())
    if text == home:
        return "~"
    return text.replace(f"{home}/", "~/")


def contains_any(text: str, needles: tuple[str, ...]) -> bool:
    return any(needle in text for needle in needles)
