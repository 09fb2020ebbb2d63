import sys
from pathlib import Path
from typing import Any, Callable

from click.testing import CliRunner
import pytest


def _ensure_repo_on_path() -> None:
    repo_root = Path(__file__).resolve().parent.parent
    if str(repo_root) not in sys.path:
        sys.path.insert(0, str(repo_root))


_ensure_repo_on_path()

from agent_start.assets.github import ICatalogClient  # noqa: E402
from agent_start.core.context import RuntimeContext  # noqa: E402
from agent_start.core.filesystem import LocalFileSystem  # noqa: E402
from agent_start.core.process import IProcessReplacer  # noqa: E402
from agent_start.core.runner import ICommandRunner  # noqa: E402
from agent_start.engine.utd import UTDProcessor  # noqa: E402
from agent_start.errors import CatalogFetchError  # noqa: E402


INDEX_HEADER = "type,category,name,description,tags,bin,sha,size,created,updated"


class FakeRunner(ICommandRunner):
    def __init__(self, outputs: dict[str, Any] | None = None) -> None:
        self.outputs = dict(outputs or {})
        self.calls: list[tuple[str, str, int]] = []

    def run(self, shell: str, command: str, timeout: int) -> str:
        self.calls.append((shell, command, timeout))
        output = self.outputs.get(command, "")
        if isinstance(output, Exception):
            raise output
        return output


class FakeCatalogClient(ICatalogClient):
    def __init__(
        self, index: str = INDEX_HEADER + "\n", files: dict[str, str] | None = None
    ) -> None:
        self.index = index
        self.files = dict(files or {})
        self.fail = False
        self.index_calls = 0
        self.asset_calls: list[str] = []

    def fetch_index(self, repo: str, branch: str) -> str:
        self.index_calls += 1
        if self.fail:
            raise CatalogFetchError("network unreachable")
        return self.index

    def fetch_asset(self, repo: str, branch: str, path: str) -> str:
        self.asset_calls.append(path)
        if self.fail or path not in self.files:
            raise CatalogFetchError(f"HTTP 404 for {path}")
        return self.files[path]


class RecordingReplacer(IProcessReplacer):
    def __init__(self) -> None:
        self.calls: list[tuple[str, str]] = []

    def replace(self, shell: str, command: str):  # type: ignore[override]
        self.calls.append((shell, command))


def catalog_row(
    kind: str,
    category: str,
    name: str,
    description: str = "",
    tags: str = "",
) -> str:
    return (
        f"{kind},{category},{name},{description},{tags},,abc123,42,"
        "2025-01-01T00:00:00Z,2025-02-01T12:30:00Z"
    )


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / ".config"))
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    monkeypatch.setattr(Path, "home", lambda: tmp_path)


@pytest.fixture
def project_dir(tmp_path: Path, monkeypatch) -> Path:
    path = tmp_path / "project"
    path.mkdir()
    monkeypatch.chdir(path)
    return path


@pytest.fixture
def runtime_context(tmp_path: Path, project_dir: Path) -> RuntimeContext:
    return RuntimeContext(work_dir=project_dir, home_dir=tmp_path)


@pytest.fixture
def global_dir(tmp_path: Path) -> Path:
    return tmp_path / ".config" / "start"


@pytest.fixture
def local_dir(project_dir: Path) -> Path:
    return project_dir / ".start"


@pytest.fixture
def write_text() -> Callable[[Path, str], Path]:
    def _write(path: Path, content: str) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def fs() -> LocalFileSystem:
    return LocalFileSystem()


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def catalog_client() -> FakeCatalogClient:
    return FakeCatalogClient()


@pytest.fixture
def make_catalog() -> Callable[..., FakeCatalogClient]:
    def _make(rows: list[str], files: dict[str, str] | None = None):
        index = "\n".join([INDEX_HEADER, *rows]) + "\n"
        return FakeCatalogClient(index=index, files=files)

    return _make


@pytest.fixture
def row() -> Callable[..., str]:
    return catalog_row


@pytest.fixture
def replacer() -> RecordingReplacer:
    return RecordingReplacer()


@pytest.fixture
def utd(fs, fake_runner, runtime_context) -> UTDProcessor:
    return UTDProcessor(fs, fake_runner, runtime_context)


@pytest.fixture
def cli_runner(tmp_path: Path) -> CliRunner:
    class HomeCliRunner(CliRunner):
        def invoke(self, cli: Any, args: Any = None, **kwargs: Any):  # type: ignore[override]
            env = dict(kwargs.pop("env", {}) or {})
            env.setdefault("HOME", str(tmp_path))
            env.setdefault("XDG_CONFIG_HOME", str(tmp_path / ".config"))
            kwargs["env"] = env
            return super().invoke(cli, args=args, **kwargs)

    return HomeCliRunner()
