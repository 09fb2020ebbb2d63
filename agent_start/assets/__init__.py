from agent_start.assets.cache import FileCache
from agent_start.assets.catalog import (
    filter_assets_by_kind,
    find_asset,
    parse_catalog_index,
    search_assets,
)
from agent_start.assets.github import GitHubCatalogClient, ICatalogClient
from agent_start.assets.resolver import AssetResolution, AssetResolver

__all__ = [
    "AssetResolution",
    "AssetResolver",
    "FileCache",
    "GitHubCatalogClient",
    "ICatalogClient",
    "filter_assets_by_kind",
    "find_asset",
    "parse_catalog_index",
    "search_assets",
]
