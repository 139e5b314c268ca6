"""Domain models shared across pipeline modules."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Iterator, Mapping


MODERN_NAME_FIELD = "MODERN_NAME"
ALTERNATE_NAME_FIELD = "DWAPARA_NAME"


def _freeze(data: Mapping[str, Any]) -> Mapping[str, Any]:
    return MappingProxyType(copy.deepcopy(dict(data)))


@dataclass(frozen=True, slots=True)
class RegionFeature:
    """One GeoJSON feature: an immutable geometry plus a read-only property bag."""

    geometry: Mapping[str, Any] | None
    properties: Mapping[str, Any]
    extra: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], *, index: int = 0) -> RegionFeature:
        if not isinstance(data, Mapping):
            raise ValueError(f"Expected mapping for feature at index {index}")
        kind = data.get("type", "Feature")
        if kind != "Feature":
            raise ValueError(f"Expected GeoJSON Feature at index {index}, got '{kind}'")

        geometry_raw = data.get("geometry")
        if geometry_raw is not None and not isinstance(geometry_raw, Mapping):
            raise ValueError(f"Expected mapping or null for 'geometry' at index {index}")

        properties_raw = data.get("properties")
        if properties_raw is None:
            properties_raw = {}
        elif not isinstance(properties_raw, Mapping):
            raise ValueError(f"Expected mapping or null for 'properties' at index {index}")

        extra = {k: v for k, v in data.items() if k not in {"type", "geometry", "properties"}}
        return cls(
            geometry=_freeze(geometry_raw) if geometry_raw is not None else None,
            properties=_freeze(properties_raw),
            extra=_freeze(extra),
        )

    def with_properties(self, updates: Mapping[str, Any]) -> RegionFeature:
        """Return a new feature whose properties are these plus `updates`."""
        merged = copy.deepcopy(dict(self.properties))
        merged.update(updates)
        return RegionFeature(
            geometry=self.geometry,
            properties=MappingProxyType(merged),
            extra=self.extra,
        )

    @property
    def modern_name(self) -> str | None:
        value = self.properties.get(MODERN_NAME_FIELD)
        return value if isinstance(value, str) else None

    @property
    def alternate_name(self) -> str | None:
        value = self.properties.get(ALTERNATE_NAME_FIELD)
        return value if isinstance(value, str) else None

    def to_geojson(self) -> dict[str, Any]:
        out: dict[str, Any] = copy.deepcopy(dict(self.extra))
        out["type"] = "Feature"
        out["geometry"] = _thaw(self.geometry) if self.geometry is not None else None
        out["properties"] = _thaw(self.properties)
        return out


@dataclass(frozen=True, slots=True)
class RegionCollection:
    """Ordered GeoJSON feature collection; order only affects draw order."""

    features: tuple[RegionFeature, ...]
    extra: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def from_geojson(cls, data: Any) -> RegionCollection:
        """Parse a decoded GeoJSON body, raising `ValueError` when malformed."""
        if not isinstance(data, Mapping):
            raise ValueError("Expected JSON object at root of dataset")
        kind = data.get("type")
        if kind != "FeatureCollection":
            raise ValueError(f"Expected GeoJSON FeatureCollection, got '{kind}'")
        features_raw = data.get("features")
        if not isinstance(features_raw, list):
            raise ValueError("Expected 'features' list in dataset")
        features = tuple(
            RegionFeature.from_mapping(item, index=idx) for idx, item in enumerate(features_raw)
        )
        extra = {k: v for k, v in data.items() if k not in {"type", "features"}}
        return cls(features=features, extra=_freeze(extra))

    def __len__(self) -> int:
        return len(self.features)

    def __iter__(self) -> Iterator[RegionFeature]:
        return iter(self.features)

    def to_geojson(self) -> dict[str, Any]:
        out: dict[str, Any] = copy.deepcopy(dict(self.extra))
        out["type"] = "FeatureCollection"
        out["features"] = [feature.to_geojson() for feature in self.features]
        return out


def _thaw(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: _thaw(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_thaw(v) for v in value]
    return value


@dataclass(frozen=True, slots=True)
class BuildManifest:
    """Build metadata used for deterministic audit trails."""

    generated_at_utc: str
    config_hash_sha256: str
    git_commit: str | None
    lifecycle_state: str
    view: str
    artifacts: Mapping[str, str]

    @classmethod
    def create(
        cls,
        *,
        config_hash_sha256: str,
        git_commit: str | None,
        lifecycle_state: str,
        view: str,
        artifacts: Mapping[str, str],
    ) -> BuildManifest:
        now = datetime.now(timezone.utc).isoformat()
        return cls(
            generated_at_utc=now,
            config_hash_sha256=config_hash_sha256,
            git_commit=git_commit,
            lifecycle_state=lifecycle_state,
            view=view,
            artifacts=artifacts,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "generated_at_utc": self.generated_at_utc,
            "config_hash_sha256": self.config_hash_sha256,
            "git_commit": self.git_commit,
            "lifecycle_state": self.lifecycle_state,
            "view": self.view,
            "artifacts": dict(self.artifacts),
        }
