"""Catalog index parsing and lookup.

The index is a CSV file with a header row and ten columns:
type, category, name, description, tags, bin, sha, size, created, updated.
Tags are joined with semicolons; timestamps are RFC3339.
"""

import csv
import io
from datetime import datetime

from agent_start.constants import CATALOG_COLUMNS
from agent_start.errors import CatalogParseError
from agent_start.models import AssetMeta


def parse_timestamp(value: str) -> datetime:
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def parse_catalog_index(text: str) -> list[AssetMeta]:
    reader = csv.reader(io.StringIO(text))
    try:
        header = next(reader)
    except StopIteration as exc:
        raise CatalogParseError("failed to read CSV header: empty index") from exc
    except csv.Error as exc:
        raise CatalogParseError(f"failed to read CSV header: {exc}") from exc
    if len(header) != len(CATALOG_COLUMNS):
        raise CatalogParseError(
            f"invalid CSV header: expected {len(CATALOG_COLUMNS)} columns, "
            f"got {len(header)}"
        )

    assets: list[AssetMeta] = []
    try:
        for record in reader:
            if not record:
                continue
            assets.append(_parse_record(record))
    except csv.Error as exc:
        raise CatalogParseError(f"failed to read CSV row: {exc}") from exc
    return assets


def _parse_record(record: list[str]) -> AssetMeta:
    if len(record) != len(CATALOG_COLUMNS):
        raise CatalogParseError(
            f"invalid CSV row: expected {len(CATALOG_COLUMNS)} columns, "
            f"got {len(record)}"
        )
    try:
        size = int(record[7])
    except ValueError as exc:
        raise CatalogParseError(f"invalid size value '{record[7]}'") from exc
    try:
        created = parse_timestamp(record[8])
    except ValueError as exc:
        raise CatalogParseError(f"invalid created timestamp '{record[8]}'") from exc
    try:
        updated = parse_timestamp(record[9])
    except ValueError as exc:
        raise CatalogParseError(f"invalid updated timestamp '{record[9]}'") from exc

    return AssetMeta(
        kind=record[0],
        category=record[1],
        name=record[2],
        description=record[3],
        tags=record[4],
        bin=record[5],
        sha=record[6],
        size=size,
        created=created,
        updated=updated,
    )


def search_assets(assets: list[AssetMeta], query: str) -> list[AssetMeta]:
    if not query:
        return list(assets)
    needle = query.lower()
    return [
        asset
        for asset in assets
        if needle in asset.name.lower()
        or needle in asset.description.lower()
        or needle in asset.tags.lower()
    ]


def filter_assets_by_kind(assets: list[AssetMeta], kind: str) -> list[AssetMeta]:
    return [asset for asset in assets if asset.kind == kind]


def find_asset(assets: list[AssetMeta], kind: str, name: str) -> AssetMeta | None:
    for asset in assets:
        if asset.kind == kind and asset.name == name:
            return asset
    return None
