import glob
import logging
from datetime import datetime
from pathlib import Path
from typing import Any

from agent_start.assets.catalog import parse_timestamp
from agent_start.core.filesystem import IFileSystem
from agent_start.errors import CacheError, StartError
from agent_start.models import AssetMeta, CachedAsset
from agent_start.utils import dump_toml_table, parse_toml

logger = logging.getLogger(__name__)

ASSET_SUFFIX = ".toml"
META_SUFFIX = ".meta.toml"


class FileCache:
    """Downloaded assets at ``<base>/<kind>/<category>/<name>.toml``.

    Each asset has a ``<name>.meta.toml`` sidecar with its catalog record.
    The category is not known at lookup time, so lookups glob across all
    category directories and take the first match.
    """

    def __init__(self, fs: IFileSystem, base: Path) -> None:
        self._fs = fs
        self._base = base

    @property
    def base(self) -> Path:
        return self._base

    def find(self, kind: str, name: str) -> Path | None:
        pattern = self._pattern(kind, f"{glob.escape(name)}{ASSET_SUFFIX}")
        try:
            matches = self._fs.glob(pattern)
        except OSError as exc:
            raise CacheError(f"failed to search cache: {exc}") from exc
        return matches[0] if matches else None

    def get(self, kind: str, name: str) -> str | None:
        path = self.find(kind, name)
        if path is None:
            return None
        try:
            return self._fs.read_text(path)
        except (OSError, UnicodeDecodeError) as exc:
            raise CacheError(f"failed to read cached asset {path}: {exc}") from exc

    def set(self, kind: str, name: str, content: str, meta: AssetMeta) -> Path:
        directory = self._base / kind / meta.category
        asset_path = directory / f"{name}{ASSET_SUFFIX}"
        try:
            self._fs.write_text(asset_path, content)
            self._fs.write_text(
                directory / f"{name}{META_SUFFIX}", serialize_meta(meta)
            )
        except OSError as exc:
            raise CacheError(f"failed to write asset to cache: {exc}") from exc
        return asset_path

    def write_extra(
        self, kind: str, category: str, filename: str, content: str
    ) -> Path:
        path = self._base / kind / category / filename
        try:
            self._fs.write_text(path, content)
        except OSError as exc:
            raise CacheError(f"failed to write {path}: {exc}") from exc
        return path

    def list(self, kind: str) -> list[CachedAsset]:
        pattern = self._pattern(kind, f"*{ASSET_SUFFIX}")
        try:
            matches = self._fs.glob(pattern)
        except OSError as exc:
            raise CacheError(f"failed to list cached assets: {exc}") from exc

        assets: list[CachedAsset] = []
        for path in matches:
            if path.name.endswith(META_SUFFIX):
                continue
            category = path.parent.name
            name = path.name[: -len(ASSET_SUFFIX)]
            assets.append(
                CachedAsset(
                    kind=kind,
                    category=category,
                    name=name,
                    path=path,
                    meta=self._read_meta(path, kind, category, name),
                )
            )
        return assets

    def delete(self, kind: str, name: str) -> bool:
        path = self.find(kind, name)
        if path is None:
            return False
        meta_path = path.with_name(f"{name}{META_SUFFIX}")
        try:
            self._fs.remove(path)
            if self._fs.exists(meta_path):
                self._fs.remove(meta_path)
        except OSError as exc:
            raise CacheError(f"failed to delete cached asset: {exc}") from exc
        return True

    def _pattern(self, kind: str, filename: str) -> str:
        return str(Path(glob.escape(str(self._base / kind))) / "*" / filename)

    def _read_meta(
        self, path: Path, kind: str, category: str, name: str
    ) -> AssetMeta:
        fallback = AssetMeta(kind=kind, category=category, name=name)
        meta_path = path.with_name(f"{name}{META_SUFFIX}")
        if not self._fs.exists(meta_path):
            return fallback
        try:
            payload = parse_toml(self._fs.read_text(meta_path), meta_path)
        except (OSError, UnicodeDecodeError, StartError) as exc:
            logger.warning("Ignoring unreadable metadata %s: %s", meta_path, exc)
            return fallback
        raw = payload.get("metadata")
        if not isinstance(raw, dict):
            return fallback
        return AssetMeta(
            kind=kind,
            category=category,
            name=name,
            description=str(raw.get("description", "")),
            tags=str(raw.get("tags", "")),
            bin=str(raw.get("bin", "")),
            sha=str(raw.get("sha", "")),
            size=_as_int(raw.get("size", 0)),
            created=_as_datetime(raw.get("created")),
            updated=_as_datetime(raw.get("updated")),
        )


def serialize_meta(meta: AssetMeta) -> str:
    return dump_toml_table(
        "metadata",
        {
            "type": meta.kind,
            "category": meta.category,
            "name": meta.name,
            "description": meta.description,
            "tags": meta.tags,
            "bin": meta.bin,
            "sha": meta.sha,
            "size": meta.size,
            "created": meta.created,
            "updated": meta.updated,
        },
    )


def _as_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def _as_datetime(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value:
        try:
            return parse_timestamp(value)
        except ValueError:
            return None
    return None
