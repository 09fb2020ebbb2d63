import re
from datetime import datetime
from typing import Callable, Mapping, Optional

_PLACEHOLDER_RE = re.compile(r"\{(\w+)\}")


def current_timestamp() -> str:
    return datetime.now().astimezone().isoformat(timespec="seconds")


class PlaceholderResolver:
    """Flat ``{key}`` substitution; ``{date}`` is always available.

    The template is scanned once, so substituted values are never
    themselves searched for placeholders.
    """

    def __init__(self, now: Optional[Callable[[], str]] = None) -> None:
        self._now = now or current_timestamp

    def resolve(self, template: str, values: Mapping[str, str]) -> str:
        date: list[str] = []

        def substitute(match: re.Match) -> str:
            key = match.group(1)
            if key in values:
                return values[key]
            if key == "date":
                if not date:
                    date.append(self._now())
                return date[0]
            return match.group(0)

        return _PLACEHOLDER_RE.sub(substitute, template)
