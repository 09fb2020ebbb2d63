import logging

from rich.console import Console
from rich.logging import RichHandler

LEVELS: dict[str, int] = {
    "quiet": logging.ERROR,
    "normal": logging.WARNING,
    "info": logging.WARNING,
    "verbose": logging.INFO,
    "debug": logging.DEBUG,
}


def level_for(name: str) -> int:
    return LEVELS.get(name.lower(), logging.WARNING) if name else logging.WARNING


def configure_logging(level: str = "normal") -> None:
    root = logging.getLogger("agent_start")
    root.setLevel(level_for(level))
    if not any(isinstance(handler, RichHandler) for handler in root.handlers):
        handler = RichHandler(
            console=Console(stderr=True), show_time=False, show_path=False
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
        root.addHandler(handler)
    root.propagate = False
