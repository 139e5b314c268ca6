"""Attach modern and Dwaparyug names to every region feature."""

from __future__ import annotations

from typing import Any, Mapping

from .io_ne import COUNTRY_NAME_COLUMNS
from .models import ALTERNATE_NAME_FIELD, MODERN_NAME_FIELD, RegionCollection, RegionFeature
from .naming import NamingTable


UNKNOWN_REALM = "Unknown Realm"


def resolve_modern_name(properties: Mapping[str, Any]) -> str:
    """First non-blank name column in priority order, else the sentinel."""
    for column in COUNTRY_NAME_COLUMNS:
        value = properties.get(column)
        if isinstance(value, str) and value.strip():
            return value
    return UNKNOWN_REALM


def resolve_alternate_name(modern_name: str, table: NamingTable) -> str:
    mapped = table.lookup(modern_name)
    return mapped if mapped is not None else modern_name


def enrich_feature(feature: RegionFeature, table: NamingTable) -> RegionFeature:
    modern_name = resolve_modern_name(feature.properties)
    return feature.with_properties(
        {
            MODERN_NAME_FIELD: modern_name,
            ALTERNATE_NAME_FIELD: resolve_alternate_name(modern_name, table),
        }
    )


def enrich_collection(collection: RegionCollection, table: NamingTable) -> RegionCollection:
    """Return a new collection with `MODERN_NAME` and `DWAPARA_NAME` on every feature.

    Total: never drops a feature and never touches the input collection.
    """
    features = tuple(enrich_feature(feature, table) for feature in collection.features)
    return RegionCollection(features=features, extra=collection.extra)
