"""Locate a named asset: loaded config, then local cache, then the catalog."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Optional

from agent_start.assets.cache import FileCache
from agent_start.assets.catalog import (
    filter_assets_by_kind,
    find_asset,
    parse_catalog_index,
    search_assets,
)
from agent_start.assets.github import ICatalogClient
from agent_start.config.parser import parse_agent, parse_context, parse_role, parse_task
from agent_start.constants import DEFAULT_ASSET_BRANCH
from agent_start.errors import (
    AssetNotFoundError,
    AssetParseError,
    CacheError,
    CatalogFetchError,
    StartError,
)
from agent_start.models import AssetKind, AssetMeta, CachedAsset, Config, Role, Task
from agent_start.utils import parse_toml

logger = logging.getLogger(__name__)

_PARSERS: dict[AssetKind, Callable[[str, dict[str, Any]], Any]] = {
    AssetKind.AGENTS: parse_agent,
    AssetKind.ROLES: parse_role,
    AssetKind.CONTEXTS: parse_context,
    AssetKind.TASKS: parse_task,
}

# Kinds whose catalog entries may ship a markdown companion file.
_MARKDOWN_KINDS = (AssetKind.TASKS, AssetKind.ROLES)


@dataclass(frozen=True)
class AssetResolution:
    entity: Optional[Any] = None
    source: str = ""

    @property
    def found(self) -> bool:
        return self.entity is not None


NOT_FOUND = AssetResolution()


def asset_path(kind: AssetKind, category: str, filename: str) -> str:
    return f"assets/{kind.value}/{category}/{filename}"


def parse_asset(kind: AssetKind, name: str, text: str, origin: str) -> Any:
    try:
        payload = parse_toml(text, Path(origin))
    except StartError as exc:
        raise AssetParseError(
            f"failed to parse {kind.value} asset {name!r}: {exc}"
        ) from exc
    table = payload.get(kind.table_name)
    if not isinstance(table, dict):
        raise AssetParseError(
            f"{kind.value} asset {name!r} has no [{kind.table_name}] table"
        )
    return _PARSERS[kind](name, table)


class AssetResolver:
    def __init__(
        self,
        cache: FileCache,
        client: ICatalogClient,
        branch: str = DEFAULT_ASSET_BRANCH,
    ) -> None:
        self._cache = cache
        self._client = client
        self._branch = branch

    def resolve(
        self,
        kind: AssetKind,
        name: str,
        cfg: Config,
        download_allowed: bool,
    ) -> AssetResolution:
        entity = cfg.entities(kind).get(name)
        if entity is not None:
            return AssetResolution(entity=entity, source="config")

        cached = self._from_cache(kind, name)
        if cached is not None:
            return AssetResolution(entity=cached, source="cache")

        if not download_allowed:
            logger.debug(
                "%s %s not found locally; downloads disabled", kind.value, name
            )
            return NOT_FOUND

        return self._from_catalog(kind, name, cfg.settings.repo)

    def resolve_task(
        self, name: str, cfg: Config, download_allowed: bool
    ) -> tuple[Optional[Task], bool]:
        resolution = self.resolve(AssetKind.TASKS, name, cfg, download_allowed)
        return resolution.entity, resolution.found

    def resolve_role(
        self, name: str, cfg: Config, download_allowed: bool
    ) -> tuple[Optional[Role], bool]:
        resolution = self.resolve(AssetKind.ROLES, name, cfg, download_allowed)
        return resolution.entity, resolution.found

    def fetch_catalog(self, repo: str) -> list[AssetMeta]:
        try:
            text = self._client.fetch_index(repo, self._branch)
        except CatalogFetchError as exc:
            raise CatalogFetchError(f"failed to fetch catalog index: {exc}") from exc
        return parse_catalog_index(text)

    def search(
        self, query: str, repo: str, kind: Optional[AssetKind] = None
    ) -> list[AssetMeta]:
        assets = self.fetch_catalog(repo)
        if kind is not None:
            assets = filter_assets_by_kind(assets, kind.value)
        return search_assets(assets, query)

    def info(self, kind: AssetKind, name: str, repo: str) -> AssetMeta:
        meta = find_asset(self.fetch_catalog(repo), kind.value, name)
        if meta is None:
            raise AssetNotFoundError(f"{kind.value}/{name}", "in catalog")
        return meta

    def install(self, kind: AssetKind, name: str, repo: str) -> CachedAsset:
        meta = self.info(kind, name, repo)
        body = self._client.fetch_asset(
            repo, self._branch, asset_path(kind, meta.category, f"{name}.toml")
        )
        parse_asset(kind, name, body, f"{repo}:{kind.value}/{name}.toml")

        if kind in _MARKDOWN_KINDS:
            self._install_markdown(kind, meta, repo)

        path = self._cache.set(kind.value, name, body, meta)
        return CachedAsset(
            kind=kind.value, category=meta.category, name=name, path=path, meta=meta
        )

    def cached(self, kind: AssetKind) -> list[CachedAsset]:
        return self._cache.list(kind.value)

    def remove(self, kind: AssetKind, name: str) -> bool:
        return self._cache.delete(kind.value, name)

    def _from_cache(self, kind: AssetKind, name: str) -> Optional[Any]:
        try:
            text = self._cache.get(kind.value, name)
        except CacheError as exc:
            logger.warning("Ignoring asset cache: %s", exc)
            return None
        if text is None:
            return None
        try:
            entity = parse_asset(kind, name, text, str(self._cache.base))
        except AssetParseError as exc:
            logger.warning("Ignoring corrupted cache entry: %s", exc)
            return None
        logger.debug("%s %s resolved from cache", kind.value, name)
        return entity

    def _from_catalog(self, kind: AssetKind, name: str, repo: str) -> AssetResolution:
        meta = find_asset(self.fetch_catalog(repo), kind.value, name)
        if meta is None:
            logger.debug("%s %s not in catalog %s", kind.value, name, repo)
            return NOT_FOUND

        try:
            body = self._client.fetch_asset(
                repo, self._branch, asset_path(kind, meta.category, f"{name}.toml")
            )
        except CatalogFetchError as exc:
            raise CatalogFetchError(
                f"failed to download {kind.value} {name!r}: {exc}"
            ) from exc

        try:
            self._cache.set(kind.value, name, body, meta)
        except CacheError as exc:
            logger.warning("Could not cache %s %s: %s", kind.value, name, exc)

        entity = parse_asset(kind, name, body, f"{repo}:{kind.value}/{name}.toml")
        logger.info("Downloaded %s %s from %s", kind.value, name, repo)
        return AssetResolution(entity=entity, source="catalog")

    def _install_markdown(self, kind: AssetKind, meta: AssetMeta, repo: str) -> None:
        try:
            text = self._client.fetch_asset(
                repo, self._branch, asset_path(kind, meta.category, f"{meta.name}.md")
            )
        except CatalogFetchError:
            logger.debug("No markdown companion for %s %s", kind.value, meta.name)
            return
        try:
            self._cache.write_extra(kind.value, meta.category, f"{meta.name}.md", text)
        except CacheError as exc:
            logger.warning("Could not cache markdown for %s: %s", meta.name, exc)
