from pathlib import Path

import pytest

from agent_start.assets.cache import FileCache
from agent_start.assets.resolver import AssetResolver
from agent_start.errors import AssetNotFoundError, AssetParseError, CatalogFetchError
from agent_start.models import AssetKind, AssetMeta, Config, Task

TASK_BODY = '[task]\ndescription = "From catalog"\nprompt = "Review {instructions}"\n'
TASK_PATH = "assets/tasks/git/pre-commit-review.toml"


@pytest.fixture
def cache(fs, tmp_path: Path) -> FileCache:
    return FileCache(fs, tmp_path / "assets")


@pytest.fixture
def client(make_catalog, row):
    return make_catalog(
        [row("tasks", "git", "pre-commit-review", "Review staged", "git")],
        files={TASK_PATH: TASK_BODY},
    )


@pytest.fixture
def resolver(cache, client) -> AssetResolver:
    return AssetResolver(cache, client)


def _seed(cache: FileCache, body: str = TASK_BODY) -> None:
    meta = AssetMeta(kind="tasks", category="git", name="pre-commit-review")
    cache.set("tasks", "pre-commit-review", body, meta)


def test_config_hit_skips_cache_and_network(resolver, client) -> None:
    cfg = Config(tasks={"pre-commit-review": Task(name="pre-commit-review", prompt="mine")})

    task, found = resolver.resolve_task("pre-commit-review", cfg, True)

    assert found is True
    assert task.prompt == "mine"
    assert client.index_calls == 0


def test_cache_hit_skips_network(resolver, cache, client) -> None:
    _seed(cache, '[task]\nprompt = "cached"\n')

    task, found = resolver.resolve_task("pre-commit-review", Config.empty(), True)

    assert found is True
    assert task.prompt == "cached"
    assert task.name == "pre-commit-review"
    assert client.index_calls == 0


def test_download_disabled_returns_not_found(resolver, client) -> None:
    task, found = resolver.resolve_task("pre-commit-review", Config.empty(), False)

    assert (task, found) == (None, False)
    assert client.index_calls == 0


def test_download_fetches_and_caches(resolver, cache, client) -> None:
    task, found = resolver.resolve_task("pre-commit-review", Config.empty(), True)

    assert found is True
    assert task.description == "From catalog"
    assert client.asset_calls == [TASK_PATH]
    assert cache.get("tasks", "pre-commit-review") == TASK_BODY

    client.index_calls = 0
    resolver.resolve_task("pre-commit-review", Config.empty(), True)
    assert client.index_calls == 0


def test_not_in_catalog_is_not_found(resolver, client) -> None:
    task, found = resolver.resolve_task("ghost", Config.empty(), True)

    assert (task, found) == (None, False)
    assert client.index_calls == 1
    assert client.asset_calls == []


def test_network_failure_raises(resolver, client) -> None:
    client.fail = True

    with pytest.raises(CatalogFetchError, match="catalog index"):
        resolver.resolve_task("pre-commit-review", Config.empty(), True)


def test_corrupted_cache_entry_is_replaced_from_catalog(resolver, cache) -> None:
    _seed(cache, "[task\nbroken")

    task, found = resolver.resolve_task("pre-commit-review", Config.empty(), True)

    assert found is True
    assert task.description == "From catalog"
    assert cache.get("tasks", "pre-commit-review") == TASK_BODY


def test_downloaded_body_without_table_raises(cache, make_catalog, row) -> None:
    client = make_catalog(
        [row("roles", "general", "writer")],
        files={"assets/roles/general/writer.toml": '[task]\nprompt = "x"\n'},
    )

    with pytest.raises(AssetParseError, match=r"\[role\]"):
        AssetResolver(cache, client).resolve_role("writer", Config.empty(), True)


def test_cache_write_failure_is_not_fatal(resolver, cache, monkeypatch) -> None:
    from agent_start.errors import CacheError

    def failing_set(*args, **kwargs):
        raise CacheError("read-only")

    monkeypatch.setattr(cache, "set", failing_set)

    task, found = resolver.resolve_task("pre-commit-review", Config.empty(), True)

    assert found is True
    assert task.prompt == "Review {instructions}"


def test_search_and_info(resolver) -> None:
    assert [a.name for a in resolver.search("staged", "owner/repo")] == [
        "pre-commit-review"
    ]
    assert resolver.info(AssetKind.TASKS, "pre-commit-review", "owner/repo").category == "git"

    with pytest.raises(AssetNotFoundError):
        resolver.info(AssetKind.ROLES, "pre-commit-review", "owner/repo")


def test_install_writes_markdown_companion(cache, make_catalog, row, tmp_path) -> None:
    client = make_catalog(
        [row("tasks", "git", "pre-commit-review")],
        files={
            TASK_PATH: TASK_BODY,
            "assets/tasks/git/pre-commit-review.md": "# Review guide",
        },
    )
    resolver = AssetResolver(cache, client)

    cached = resolver.install(AssetKind.TASKS, "pre-commit-review", "owner/repo")

    assert cached.path == tmp_path / "assets" / "tasks" / "git" / "pre-commit-review.toml"
    companion = cached.path.with_name("pre-commit-review.md")
    assert companion.read_text(encoding="utf-8") == "# Review guide"
    assert [item.name for item in resolver.cached(AssetKind.TASKS)] == [
        "pre-commit-review"
    ]


def test_install_without_companion_still_succeeds(resolver) -> None:
    cached = resolver.install(AssetKind.TASKS, "pre-commit-review", "owner/repo")

    assert cached.path.exists()
    assert not cached.path.with_name("pre-commit-review.md").exists()


def test_remove(resolver, cache) -> None:
    _seed(cache)

    assert resolver.remove(AssetKind.TASKS, "pre-commit-review") is True
    assert resolver.remove(AssetKind.TASKS, "pre-commit-review") is False


def test_search_can_filter_by_kind(cache, make_catalog, row) -> None:
    client = make_catalog(
        [row("tasks", "git", "review"), row("roles", "general", "reviewer")]
    )
    resolver = AssetResolver(cache, client)

    assert [a.kind for a in resolver.search("review", "owner/repo")] == [
        "tasks",
        "roles",
    ]
    assert [a.name for a in resolver.search("review", "o/r", AssetKind.ROLES)] == [
        "reviewer"
    ]
