from typing import Optional

from rich.console import Console
from rich.text import Text

from agent_start.launcher import LaunchPlan
from agent_start.models import AssetMeta, CachedAsset, Task
from agent_start.tui.enums import UIStyle
from agent_start.tui.sections import UISection
from agent_start.tui.tables import AssetTable, PlanTable, TaskTable
from agent_start.utils import compact_home_path


class StartConsoleUI:
    def __init__(
        self, console: Console | None = None, err_console: Console | None = None
    ) -> None:
        self.console = console or Console()
        self.err_console = err_console or Console(stderr=True)

    def render_warnings(self, warnings: list[tuple[str, str]]) -> None:
        if not warnings:
            return
        lines = [f"{source}: {message}" for source, message in warnings]
        self.err_console.print(
            UISection.bullets("warnings", lines, style=UIStyle.YELLOW.value)
        )

    def render_plan(self, plan: LaunchPlan) -> None:
        params = plan.params
        summary: dict[str, str] = {
            "Agent": params.agent.name,
            "Model": params.model,
            "Role": plan.role.name,
            "Role file": compact_home_path(plan.role.file_path),
            "Shell": params.shell,
        }
        if plan.task is not None:
            summary["Task"] = plan.task.name
        self.console.print(
            UISection.wrap(
                "dry run", PlanTable.summary_block(summary), style=UIStyle.BLUE.value
            )
        )

        if plan.contexts:
            items = [
                (context.name, context.file_path, bool(context.content))
                for context in plan.contexts
            ]
            self.console.print(
                UISection.wrap(
                    "contexts",
                    PlanTable.contexts_table(items),
                    style=UIStyle.CYAN.value,
                )
            )

        self.console.print(
            UISection.wrap("command", Text(plan.command), style=UIStyle.MAGENTA.value)
        )
        self.render_warnings(plan.warnings)

    def render_tasks(
        self, tasks: dict[str, Task], missing: Optional[str] = None
    ) -> None:
        if missing:
            self.console.print(
                UISection.note(
                    "task",
                    f"Task not found: [bold]{missing}[/bold]",
                    style=UIStyle.RED.value,
                )
            )
        if not tasks:
            self.console.print(
                UISection.note(
                    "tasks", "No tasks configured.", style=UIStyle.YELLOW.value
                )
            )
            return
        self.console.print(
            UISection.wrap(
                "tasks", TaskTable.tasks_table(tasks), style=UIStyle.BLUE.value
            )
        )

    def render_catalog(self, items: list[AssetMeta], query: str = "") -> None:
        if not items:
            message = f"No assets match '{query}'." if query else "Catalog is empty."
            self.console.print(
                UISection.note("catalog", message, style=UIStyle.YELLOW.value)
            )
            return
        self.console.print(
            UISection.wrap(
                "catalog",
                AssetTable.catalog_table(items),
                style=UIStyle.BLUE.value,
                subtitle=f"{len(items)} found",
            )
        )

    def render_asset_info(self, meta: AssetMeta) -> None:
        self.console.print(
            UISection.wrap(
                f"{meta.kind}/{meta.name}",
                AssetTable.info_table(meta),
                style=UIStyle.CYAN.value,
            )
        )

    def render_cached(self, items: list[CachedAsset]) -> None:
        if not items:
            self.console.print(
                UISection.note(
                    "cache", "No cached assets.", style=UIStyle.YELLOW.value
                )
            )
            return
        self.console.print(
            UISection.wrap(
                "cache", AssetTable.cached_table(items), style=UIStyle.BLUE.value
            )
        )

    def render_asset_saved(
        self, kind: str, name: str, path: str = "", removed: bool = False
    ) -> None:
        verb = "removed" if removed else "installed"
        border_style = UIStyle.YELLOW.value if removed else UIStyle.GREEN.value
        body = f"Asset {verb}: [bold]{kind}/{name}[/bold]"
        if path:
            body += f"\n{compact_home_path(path)}"
        self.console.print(UISection.note("asset", body, style=border_style))
