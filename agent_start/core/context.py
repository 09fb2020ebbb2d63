from dataclasses import dataclass
from pathlib import Path

from agent_start.constants import ASSETS_DIRNAME, CONFIG_DIRNAME, LOCAL_CONFIG_DIRNAME


@dataclass(frozen=True)
class RuntimeContext:
    """Working and home directories for one invocation.

    Passed explicitly to everything that resolves paths so tests can use
    synthetic directories instead of the real process state.
    """

    work_dir: Path
    home_dir: Path

    @classmethod
    def from_environment(cls) -> "RuntimeContext":
        return cls(work_dir=Path.cwd(), home_dir=Path.home())

    @property
    def global_config_dir(self) -> Path:
        return self.home_dir / ".config" / CONFIG_DIRNAME

    @property
    def local_config_dir(self) -> Path:
        return self.work_dir / LOCAL_CONFIG_DIRNAME

    @property
    def default_asset_dir(self) -> Path:
        return self.global_config_dir / ASSETS_DIRNAME

    def resolve_path(self, path: str) -> Path:
        if path == "~":
            return self.home_dir
        if path.startswith("~/"):
            return self.home_dir / path[2:]
        candidate = Path(path)
        if candidate.is_absolute():
            return candidate
        return self.work_dir / candidate
