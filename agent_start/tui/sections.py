from typing import Optional

from rich.panel import Panel

from agent_start.tui.enums import UIStyle
from agent_start.utils import compact_home_paths_in_text


class UISection:
    @staticmethod
    def wrap(
        title: str,
        body,
        style: str = UIStyle.BLUE.value,
        subtitle: Optional[str] = None,
    ) -> Panel:
        return Panel(
            body, title=title, subtitle=subtitle, border_style=style, padding=(0, 1)
        )

    @staticmethod
    def note(title: str, body: str, style: str) -> Panel:
        return Panel(body, title=title, border_style=style, padding=(0, 1))

    @staticmethod
    def bullets(title: str, lines: list[str], style: str) -> Panel:
        text = "\n".join(f"- {compact_home_paths_in_text(line)}" for line in lines)
        return UISection.note(title, text, style=style)
