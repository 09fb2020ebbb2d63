from pathlib import Path

import pytest

from agent_start.errors import (
    ConfigValidationError,
    RoleNotFoundError,
    TaskLoadError,
    TaskNotFoundError,
)
from agent_start.launcher import LaunchRequest, Launcher, build_asset_resolver
from agent_start.assets.cache import FileCache
from agent_start.models import AssetMeta, CommandType, Settings

AGENTS_TOML = """
[agents.claude]
bin = "claude"
command = "{bin} --model {model} --append-system-prompt-file {role_file} '{prompt}'"
default_model = "sonnet"

[agents.claude.models]
sonnet = "claude-sonnet-4"
haiku = "claude-haiku-4"
"""

ROLES_TOML = """
[roles.reviewer]
prompt = "You review code."

[roles.plain]
file = "~/roles/plain.md"
"""

CONTEXTS_TOML = """
[contexts.env]
command = "uname"
prompt = "OS: {command_output}"
required = true

[contexts.readme]
file = "README.md"
"""

TASKS_TOML = """
[tasks.code-review]
alias = "cr"
prompt = "Review with focus: {instructions}"
role = "reviewer"
"""


@pytest.fixture
def configured(global_dir: Path, project_dir: Path, tmp_path: Path, write_text) -> Path:
    write_text(
        global_dir / "config.toml",
        '[settings]\ndefault_agent = "claude"\ndefault_role = "reviewer"\n'
        'shell = "bash"\n',
    )
    write_text(global_dir / "agents.toml", AGENTS_TOML)
    write_text(global_dir / "roles.toml", ROLES_TOML)
    write_text(global_dir / "contexts.toml", CONTEXTS_TOML)
    write_text(global_dir / "tasks.toml", TASKS_TOML)
    write_text(tmp_path / "roles" / "plain.md", "Plain role")
    write_text(project_dir / "README.md", "Readme body")
    return global_dir


@pytest.fixture
def launcher(runtime_context, fake_runner, replacer, catalog_client) -> Launcher:
    fake_runner.outputs["uname"] = "Linux\n"
    return Launcher.create_default(
        runtime_context,
        runner=fake_runner,
        replacer=replacer,
        client=catalog_client,
    )


def _prepare(launcher: Launcher, **kwargs):
    return launcher.prepare(LaunchRequest(**kwargs), launcher.load_config())


def test_interactive_includes_all_contexts(launcher, configured) -> None:
    plan = _prepare(launcher, command_type=CommandType.INTERACTIVE)
    try:
        assert [context.name for context in plan.contexts] == ["env", "readme"]
        assert plan.prompt == "OS: Linux\n\nReadme body"
        assert plan.params.model == "claude-sonnet-4"
        assert plan.params.shell == "bash"
        assert plan.role.is_temp is True
        assert Path(plan.role.file_path).read_text(encoding="utf-8") == (
            "You review code."
        )
    finally:
        launcher.release(plan)
    assert not Path(plan.role.file_path).exists()


def test_prompt_uses_required_contexts_only(launcher, configured) -> None:
    plan = _prepare(
        launcher,
        command_type=CommandType.PROMPT,
        prompt="Explain this",
        model="haiku",
        role="plain",
    )

    assert [context.name for context in plan.contexts] == ["env"]
    assert plan.prompt == "OS: Linux\n\nExplain this"
    assert plan.params.model == "claude-haiku-4"
    assert plan.role.is_temp is False
    assert plan.command.startswith("claude --model claude-haiku-4 ")
    assert str(Path.home() / "roles" / "plain.md") in plan.command
    launcher.release(plan)


def test_task_by_alias_with_instructions(launcher, configured) -> None:
    plan = _prepare(
        launcher,
        command_type=CommandType.TASK,
        task_name="cr",
        instructions="security",
    )
    try:
        assert plan.task.name == "code-review"
        assert plan.prompt == "OS: Linux\n\nReview with focus: security"
    finally:
        launcher.release(plan)


def test_missing_task_without_catalog_entry_raises(launcher, configured) -> None:
    with pytest.raises(TaskNotFoundError):
        _prepare(launcher, command_type=CommandType.TASK, task_name="ghost")


def test_task_is_resolved_from_catalog(
    runtime_context, fake_runner, replacer, make_catalog, row, configured, tmp_path
) -> None:
    client = make_catalog(
        [row("tasks", "git", "commit-msg")],
        files={"assets/tasks/git/commit-msg.toml": '[task]\nprompt = "Write it"\n'},
    )
    launcher = Launcher.create_default(
        runtime_context, runner=fake_runner, replacer=replacer, client=client
    )

    plan = _prepare(launcher, command_type=CommandType.TASK, task_name="commit-msg")
    try:
        assert plan.task.prompt == "Write it"
    finally:
        launcher.release(plan)
    cached = tmp_path / ".config" / "start" / "assets" / "tasks" / "git"
    assert (cached / "commit-msg.toml").exists()


def test_unknown_role_flag_raises_after_catalog_miss(launcher, configured) -> None:
    with pytest.raises(RoleNotFoundError, match="'ghost'"):
        _prepare(launcher, command_type=CommandType.PROMPT, prompt="x", role="ghost")


def test_role_flag_is_resolved_from_cache(
    launcher, configured, runtime_context, fs, catalog_client
) -> None:
    FileCache(fs, runtime_context.default_asset_dir).set(
        "roles",
        "go-expert",
        '[role]\nprompt = "You write Go."\n',
        AssetMeta(kind="roles", category="coding", name="go-expert"),
    )

    plan = _prepare(
        launcher, command_type=CommandType.PROMPT, prompt="x", role="go-expert"
    )
    try:
        assert plan.role.name == "go-expert"
        assert plan.role.content == "You write Go."
    finally:
        launcher.release(plan)
    assert catalog_client.index_calls == 0


def test_default_role_is_resolved_from_cache(
    launcher, configured, global_dir: Path, write_text, runtime_context, fs
) -> None:
    write_text(
        global_dir / "config.toml",
        '[settings]\ndefault_agent = "claude"\ndefault_role = "go-expert"\n'
        'shell = "bash"\n',
    )
    FileCache(fs, runtime_context.default_asset_dir).set(
        "roles",
        "go-expert",
        '[role]\nprompt = "You write Go."\n',
        AssetMeta(kind="roles", category="coding", name="go-expert"),
    )

    plan = _prepare(launcher, command_type=CommandType.PROMPT, prompt="x")
    try:
        assert plan.role.name == "go-expert"
        assert plan.role.content == "You write Go."
    finally:
        launcher.release(plan)


def test_task_role_is_resolved_from_catalog(
    runtime_context,
    fake_runner,
    replacer,
    make_catalog,
    row,
    configured,
    global_dir: Path,
    write_text,
    tmp_path: Path,
) -> None:
    write_text(
        global_dir / "tasks.toml",
        '[tasks.design]\nprompt = "Design {instructions}"\nrole = "architect"\n',
    )
    client = make_catalog(
        [row("roles", "general", "architect")],
        files={"assets/roles/general/architect.toml": '[role]\nprompt = "Design"\n'},
    )
    fake_runner.outputs["uname"] = "Linux\n"
    launcher = Launcher.create_default(
        runtime_context, runner=fake_runner, replacer=replacer, client=client
    )

    plan = _prepare(launcher, command_type=CommandType.TASK, task_name="design")
    try:
        assert plan.role.name == "architect"
        assert plan.role.content == "Design"
    finally:
        launcher.release(plan)
    cached = tmp_path / ".config" / "start" / "assets" / "roles" / "general"
    assert (cached / "architect.toml").exists()


def test_failure_after_role_load_removes_temp_file(
    launcher, configured, global_dir: Path, write_text, monkeypatch, fs
) -> None:
    write_text(
        global_dir / "tasks.toml",
        '[tasks.broken]\nprompt = "{file_contents}"\n',
    )
    created: list[Path] = []
    original_temp_file = fs.temp_file

    def tracking_temp_file(prefix: str, suffix: str) -> Path:
        path = original_temp_file(prefix, suffix)
        created.append(path)
        return path

    monkeypatch.setattr(launcher._role_loader._fs, "temp_file", tracking_temp_file)

    with pytest.raises(TaskLoadError):
        _prepare(launcher, command_type=CommandType.TASK, task_name="broken")

    assert len(created) == 1
    assert not created[0].exists()


def test_execute_replaces_process_and_releases(launcher, configured, replacer) -> None:
    plan = _prepare(launcher, command_type=CommandType.PROMPT, prompt="go")

    launcher.execute(plan)

    assert replacer.calls == [("bash", plan.command)]
    assert not Path(plan.role.file_path).exists()


def test_invalid_config_is_rejected(launcher, global_dir: Path, write_text) -> None:
    write_text(global_dir / "tasks.toml", '[tasks.fix]\nagent = "ghost"\nprompt = "x"\n')

    with pytest.raises(ConfigValidationError, match="tasks.fix.agent"):
        launcher.load_config()


def test_asset_resolver_uses_configured_path(fs, runtime_context, project_dir) -> None:
    resolver = build_asset_resolver(
        fs, runtime_context, Settings(asset_path="cache-dir")
    )

    assert resolver._cache.base == project_dir / "cache-dir"


def test_asset_resolver_defaults_under_global_config(fs, runtime_context) -> None:
    resolver = build_asset_resolver(fs, runtime_context, Settings())

    assert resolver._cache.base == runtime_context.default_asset_dir
