from rich.table import Column, Table

from agent_start.models import AssetMeta, CachedAsset, Task
from agent_start.tui.enums import UIStyle
from agent_start.utils import compact_home_path


class TaskTable:
    @staticmethod
    def tasks_table(tasks: dict[str, Task]) -> Table:
        table = Table(
            Column(header="Task", width=24),
            Column(header="Alias", width=10),
            Column(header="Description", overflow="ellipsis"),
            expand=True,
            header_style="bold",
        )
        for name in sorted(tasks):
            task = tasks[name]
            table.add_row(name, task.alias, task.description)
        return table


class PlanTable:
    @staticmethod
    def summary_block(rows: dict[str, str]) -> Table:
        table = Table.grid(padding=(0, 2))
        table.add_column(style="bold")
        table.add_column(overflow="fold")
        for key, value in rows.items():
            table.add_row(key, value)
        return table

    @staticmethod
    def contexts_table(items: list[tuple[str, str, bool]]) -> Table:
        table = Table(
            Column(header="Context", width=20),
            Column(header="Status", width=10),
            Column(header="File", overflow="ellipsis"),
            expand=True,
            header_style="bold",
        )
        for name, file_path, loaded in items:
            style = UIStyle.GREEN.value if loaded else UIStyle.YELLOW.value
            status = "loaded" if loaded else "skipped"
            table.add_row(
                name,
                f"[{style}]{status}[/{style}]",
                compact_home_path(file_path) if file_path else "",
            )
        return table


class AssetTable:
    @staticmethod
    def catalog_table(items: list[AssetMeta]) -> Table:
        table = Table(
            Column(header="Type", width=9),
            Column(header="Category", width=14),
            Column(header="Name", width=24),
            Column(header="Description", overflow="ellipsis"),
            expand=True,
            header_style="bold",
        )
        for item in items:
            table.add_row(item.kind, item.category, item.name, item.description)
        return table

    @staticmethod
    def info_table(meta: AssetMeta) -> Table:
        table = Table(show_header=False, box=None)
        for key, value in meta.as_dict().items():
            if value:
                table.add_row(f"[bold]{key}[/bold]", value)
        return table

    @staticmethod
    def cached_table(items: list[CachedAsset]) -> Table:
        table = Table(
            Column(header="Type", width=9),
            Column(header="Category", width=14),
            Column(header="Name", width=24),
            Column(header="Path", overflow="ellipsis"),
            expand=True,
            header_style="bold",
        )
        for item in items:
            table.add_row(
                item.kind, item.category, item.name, compact_home_path(item.path)
            )
        return table
