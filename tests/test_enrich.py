from __future__ import annotations

from typing import Any

import pytest

from dwapara_atlas.enrich import (
    UNKNOWN_REALM,
    enrich_collection,
    enrich_feature,
    resolve_alternate_name,
    resolve_modern_name,
)
from dwapara_atlas.models import ALTERNATE_NAME_FIELD, MODERN_NAME_FIELD, RegionCollection, RegionFeature
from dwapara_atlas.naming import NamingTable

from helpers import feature, feature_collection


def _enrich_one(properties: dict[str, Any] | None, table: NamingTable) -> RegionFeature:
    return enrich_feature(RegionFeature.from_mapping(feature(properties)), table)


def test_admin_name_is_mapped(naming_table: NamingTable) -> None:
    enriched = _enrich_one({"ADMIN": "India"}, naming_table)
    assert enriched.modern_name == "India"
    assert enriched.alternate_name == "Bharata Khanda"


def test_unmapped_name_falls_back_to_modern(naming_table: NamingTable) -> None:
    enriched = _enrich_one({"ADMIN": "Atlantis"}, naming_table)
    assert enriched.modern_name == "Atlantis"
    assert enriched.alternate_name == "Atlantis"


@pytest.mark.parametrize(
    "properties",
    [
        None,
        {},
        {"NAME_LONG": None, "ADMIN": None, "SOVEREIGNT": None},
        {"NAME_LONG": "", "ADMIN": "   "},
        {"ADMIN": 42, "POP_EST": 1000},
    ],
)
def test_missing_names_resolve_to_sentinel(properties: dict[str, Any] | None, naming_table: NamingTable) -> None:
    enriched = _enrich_one(properties, naming_table)
    assert enriched.modern_name == UNKNOWN_REALM
    assert enriched.alternate_name == UNKNOWN_REALM


def test_name_priority_order() -> None:
    assert resolve_modern_name({"NAME_LONG": "Long", "ADMIN": "Admin", "SOVEREIGNT": "Sov"}) == "Long"
    assert resolve_modern_name({"ADMIN": "Admin", "SOVEREIGNT": "Sov"}) == "Admin"
    assert resolve_modern_name({"NAME_LONG": None, "SOVEREIGNT": "Sov"}) == "Sov"


def test_long_name_wins_even_when_admin_is_mapped(naming_table: NamingTable) -> None:
    enriched = _enrich_one({"NAME_LONG": "Russian Federation", "ADMIN": "Russia"}, naming_table)
    assert enriched.modern_name == "Russian Federation"
    assert enriched.alternate_name == "Russian Federation"


def test_mapped_alternates_differ_from_modern(naming_table: NamingTable) -> None:
    for modern, alternate in naming_table.items():
        assert resolve_alternate_name(modern, naming_table) == alternate
        assert alternate != modern


def test_collection_preserves_order_length_and_properties(
    sample_collection: RegionCollection, naming_table: NamingTable
) -> None:
    enriched = enrich_collection(sample_collection, naming_table)
    assert len(enriched) == len(sample_collection)
    assert [f.modern_name for f in enriched] == ["India", "Atlantis", "Russian Federation", "Japan", UNKNOWN_REALM]
    assert [f.alternate_name for f in enriched] == [
        "Bharata Khanda",
        "Atlantis",
        "Russian Federation",
        "Yamato Isles",
        UNKNOWN_REALM,
    ]
    assert enriched.features[0].properties["ISO_A3"] == "IND"
    assert enriched.features[0].geometry == sample_collection.features[0].geometry


def test_collection_input_is_not_mutated(sample_collection: RegionCollection, naming_table: NamingTable) -> None:
    before = sample_collection.to_geojson()
    enriched = enrich_collection(sample_collection, naming_table)
    assert sample_collection.to_geojson() == before
    for original, derived in zip(sample_collection, enriched):
        assert MODERN_NAME_FIELD not in original.properties
        assert ALTERNATE_NAME_FIELD not in original.properties
        assert derived.properties is not original.properties
    assert enriched is not sample_collection


def test_enrichment_is_idempotent(sample_collection: RegionCollection, naming_table: NamingTable) -> None:
    once = enrich_collection(sample_collection, naming_table)
    twice = enrich_collection(once, naming_table)
    assert twice.to_geojson() == once.to_geojson()


def test_collection_extra_members_survive(naming_table: NamingTable) -> None:
    raw = feature_collection(feature({"ADMIN": "Nepal"}))
    raw["name"] = "ne_110m_admin_0_countries"
    enriched = enrich_collection(RegionCollection.from_geojson(raw), naming_table)
    out = enriched.to_geojson()
    assert out["name"] == "ne_110m_admin_0_countries"
    assert out["features"][0]["properties"][ALTERNATE_NAME_FIELD] == "Kirati Realm"


def test_empty_collection(naming_table: NamingTable) -> None:
    enriched = enrich_collection(RegionCollection.from_geojson(feature_collection()), naming_table)
    assert len(enriched) == 0
