from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, Optional

import click
from rich.console import Console

from agent_start.config.loader import LoadedConfig
from agent_start.core.context import RuntimeContext
from agent_start.errors import StartError, TaskNotFoundError
from agent_start.launcher import LaunchRequest, Launcher
from agent_start.log_config import configure_logging
from agent_start.models import AssetKind, CommandType
from agent_start.tui import StartConsoleUI


KIND_VALUES = [kind.value for kind in AssetKind]


def _kind_argument(required: bool = True) -> Callable:
    return click.argument(
        "kind",
        required=required,
        type=click.Choice(KIND_VALUES, case_sensitive=False),
    )


@contextmanager
def _user_errors() -> Iterator[None]:
    try:
        yield
    except StartError as exc:
        raise click.ClickException(str(exc)) from exc


def _launcher_from_obj(obj: Dict[str, Any]) -> Launcher:
    factory = obj.get("launcher_factory") or Launcher.create_default
    return factory(RuntimeContext.from_environment())


def _load(obj: Dict[str, Any], launcher: Launcher) -> LoadedConfig:
    loaded = launcher.load_config()
    if not obj.get("log_level") and loaded.merged.settings.log_level:
        configure_logging(loaded.merged.settings.log_level)
    return loaded


def _request(
    obj: Dict[str, Any], command_type: CommandType, **kwargs: str
) -> LaunchRequest:
    return LaunchRequest(
        command_type=command_type,
        agent=obj.get("agent", ""),
        model=obj.get("model", ""),
        role=obj.get("role", ""),
        **kwargs,
    )


def _launch(obj: Dict[str, Any], request: LaunchRequest) -> None:
    ui = StartConsoleUI(Console())
    launcher = _launcher_from_obj(obj)

    with _user_errors():
        loaded = _load(obj, launcher)
        try:
            plan = launcher.prepare(request, loaded)
        except TaskNotFoundError:
            ui.render_tasks(launcher.list_tasks(loaded), missing=request.task_name)
            raise click.exceptions.Exit(1)

        if obj.get("dry_run"):
            try:
                ui.render_plan(plan)
            finally:
                launcher.release(plan)
            return

        ui.render_warnings(plan.warnings)
        launcher.execute(plan)


@click.group(
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.option("-a", "--agent", default="", help="Agent to launch.")
@click.option("-m", "--model", default="", help="Model name or full identifier.")
@click.option("-r", "--role", default="", help="Role (system prompt) to use.")
@click.option("--dry-run", is_flag=True, help="Show the command without running it.")
@click.option("--verbose", is_flag=True, help="Log resolution steps.")
@click.option("--debug", is_flag=True, help="Log everything.")
@click.pass_context
def cli(
    ctx: click.Context,
    agent: str,
    model: str,
    role: str,
    dry_run: bool,
    verbose: bool,
    debug: bool,
) -> None:
    """Launch AI agents with layered roles, contexts and tasks."""
    obj = ctx.ensure_object(dict)
    log_level = "debug" if debug else "verbose" if verbose else ""
    obj.update(
        agent=agent, model=model, role=role, dry_run=dry_run, log_level=log_level
    )
    configure_logging(log_level or "normal")

    if ctx.invoked_subcommand is None:
        _launch(obj, _request(obj, CommandType.INTERACTIVE))


@cli.command(help="Send a prompt with the required contexts.")
@click.argument("text", nargs=-1, required=True)
@click.pass_obj
def prompt(obj: Dict[str, Any], text: tuple[str, ...]) -> None:
    _launch(obj, _request(obj, CommandType.PROMPT, prompt=" ".join(text)))


@cli.command(help="Run a predefined task, or list tasks when NAME is omitted.")
@click.argument("name", required=False)
@click.argument("instructions", nargs=-1)
@click.pass_obj
def task(
    obj: Dict[str, Any], name: Optional[str], instructions: tuple[str, ...]
) -> None:
    if not name:
        ui = StartConsoleUI(Console())
        launcher = _launcher_from_obj(obj)
        with _user_errors():
            loaded = _load(obj, launcher)
            ui.render_tasks(launcher.list_tasks(loaded))
        return

    request = _request(
        obj, CommandType.TASK, task_name=name, instructions=" ".join(instructions)
    )
    _launch(obj, request)


@cli.group(help="Browse and manage catalog assets.")
def assets() -> None:
    pass


@assets.command("search", help="Search the catalog by name, description or tag.")
@click.argument("query", required=False, default="")
@click.option(
    "--type",
    "kind",
    type=click.Choice(KIND_VALUES, case_sensitive=False),
    help="Only show assets of this type.",
)
@click.pass_obj
def assets_search(obj: Dict[str, Any], query: str, kind: Optional[str]) -> None:
    ui = StartConsoleUI(Console())
    launcher = _launcher_from_obj(obj)
    with _user_errors():
        cfg = _load(obj, launcher).merged
        asset_kind = AssetKind(kind.lower()) if kind else None
        items = launcher.assets(cfg).search(query, cfg.settings.repo, asset_kind)
    ui.render_catalog(items, query=query)


@assets.command("info", help="Show catalog metadata for one asset.")
@_kind_argument()
@click.argument("name")
@click.pass_obj
def assets_info(obj: Dict[str, Any], kind: str, name: str) -> None:
    ui = StartConsoleUI(Console())
    launcher = _launcher_from_obj(obj)
    with _user_errors():
        cfg = _load(obj, launcher).merged
        meta = launcher.assets(cfg).info(
            AssetKind(kind.lower()), name, cfg.settings.repo
        )
    ui.render_asset_info(meta)


@assets.command("add", help="Download an asset into the local cache.")
@_kind_argument()
@click.argument("name")
@click.pass_obj
def assets_add(obj: Dict[str, Any], kind: str, name: str) -> None:
    ui = StartConsoleUI(Console())
    launcher = _launcher_from_obj(obj)
    with _user_errors():
        cfg = _load(obj, launcher).merged
        cached = launcher.assets(cfg).install(
            AssetKind(kind.lower()), name, cfg.settings.repo
        )
    ui.render_asset_saved(cached.kind, cached.name, str(cached.path))


@assets.command("list", help="List cached assets.")
@_kind_argument(required=False)
@click.pass_obj
def assets_list(obj: Dict[str, Any], kind: Optional[str]) -> None:
    ui = StartConsoleUI(Console())
    launcher = _launcher_from_obj(obj)
    kinds = [AssetKind(kind.lower())] if kind else list(AssetKind)
    with _user_errors():
        resolver = launcher.assets(_load(obj, launcher).merged)
        items = [item for asset_kind in kinds for item in resolver.cached(asset_kind)]
    ui.render_cached(items)


@assets.command("remove", help="Remove an asset from the local cache.")
@_kind_argument()
@click.argument("name")
@click.pass_obj
def assets_remove(obj: Dict[str, Any], kind: str, name: str) -> None:
    ui = StartConsoleUI(Console())
    launcher = _launcher_from_obj(obj)
    with _user_errors():
        resolver = launcher.assets(_load(obj, launcher).merged)
        removed = resolver.remove(AssetKind(kind.lower()), name)
    if not removed:
        raise click.ClickException(f"Cached asset not found: {kind}/{name}")
    ui.render_asset_saved(kind, name, removed=True)


def main() -> int:
    try:
        result = cli(standalone_mode=False)
    except click.exceptions.Exit as exc:
        code = exc.exit_code
        return code if isinstance(code, int) else 1
    except click.ClickException as exc:
        exc.show()
        return 2
    return result if isinstance(result, int) else 0


if __name__ == "__main__":
    raise SystemExit(main())
