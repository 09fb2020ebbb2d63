import logging
from dataclasses import dataclass, field, replace
from pathlib import Path

from agent_start.constants import ROLE_TEMP_PREFIX, ROLE_TEMP_SUFFIX
from agent_start.core.filesystem import IFileSystem
from agent_start.engine.utd import UTDProcessor
from agent_start.errors import RoleLoadError, RoleNotFoundError, RoleSelectionError
from agent_start.models import Role

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SelectionContext:
    role_flag: str = ""
    task_role: str = ""
    default_role: str = ""


@dataclass
class LoadedRole:
    name: str
    content: str = ""
    file_path: str = ""
    is_temp: bool = False
    warnings: list[str] = field(default_factory=list)


class RoleSelector:
    """Pick a role: ``--role`` flag, then the task's role, then ``default_role``."""

    def choose_name(self, ctx: SelectionContext) -> str:
        for candidate in (ctx.role_flag, ctx.task_role, ctx.default_role):
            if candidate:
                return candidate
        raise RoleSelectionError(
            "no role specified: use --role flag or set default_role in settings"
        )

    def select(self, ctx: SelectionContext, roles: dict[str, Role]) -> Role:
        name = self.choose_name(ctx)
        role = roles.get(name)
        if role is None:
            raise RoleNotFoundError(name, "in configuration")
        return replace(role, name=name)


class RoleLoader:
    def __init__(self, utd: UTDProcessor, fs: IFileSystem) -> None:
        self._utd = utd
        self._fs = fs

    def load(self, role: Role, default_shell: str, default_timeout: int) -> LoadedRole:
        result = self._utd.process(role.utd_input(), default_shell, default_timeout)
        if result.skipped:
            raise RoleLoadError(
                f"role {role.name!r} processing failed", result.warnings
            )

        loaded = LoadedRole(
            name=role.name, content=result.content, warnings=list(result.warnings)
        )
        if role.is_simple():
            loaded.file_path = result.file_path
            return loaded

        try:
            temp_path = self._fs.temp_file(ROLE_TEMP_PREFIX, ROLE_TEMP_SUFFIX)
        except OSError as exc:
            raise RoleLoadError(f"failed to create temp file for role: {exc}") from exc
        try:
            self._fs.write_text(temp_path, loaded.content, mode=0o600)
        except OSError as exc:
            self._discard(temp_path)
            raise RoleLoadError(f"failed to write temp file for role: {exc}") from exc

        logger.debug("Role %s materialized at %s", role.name, temp_path)
        loaded.file_path = str(temp_path)
        loaded.is_temp = True
        return loaded

    def cleanup(self, loaded: LoadedRole) -> None:
        if loaded.is_temp and loaded.file_path:
            self._fs.remove(Path(loaded.file_path))

    def _discard(self, path: Path) -> None:
        try:
            self._fs.remove(path)
        except OSError as exc:
            logger.warning("Could not remove %s: %s", path, exc)
