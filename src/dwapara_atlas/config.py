"""Typed configuration loader for `config.yaml`."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, cast

import yaml

from .io_ne import ADMIN0_GEOJSON_URL


def _mapping(value: Any, field_name: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ValueError(f"Expected mapping for '{field_name}'")
    return cast(Mapping[str, Any], value)


def _str(value: Any, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Expected non-empty string for '{field_name}'")
    return value.strip()


def _int(value: Any, field_name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValueError(f"Expected integer for '{field_name}'")
    return value


def _float(value: Any, field_name: str) -> float:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    raise ValueError(f"Expected float for '{field_name}'")


def _bool(value: Any, field_name: str) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"Expected bool for '{field_name}'")
    return value


def _path_from_cfg(value: Any, field_name: str, root_dir: Path) -> Path:
    raw = _str(value, field_name)
    p = Path(raw)
    return p if p.is_absolute() else root_dir / p


def _is_url(value: str) -> bool:
    return value.startswith(("http://", "https://"))


@dataclass(frozen=True, slots=True)
class MetadataCard:
    label: str
    value: str


@dataclass(frozen=True, slots=True)
class ProjectConfig:
    title: str
    description: str
    usage: str
    metadata_cards: tuple[MetadataCard, ...]

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> ProjectConfig:
        cards_raw = raw.get("metadata_cards", [])
        if not isinstance(cards_raw, list):
            raise ValueError("Expected list for 'project.metadata_cards'")
        cards: list[MetadataCard] = []
        for idx, item in enumerate(cards_raw):
            card = _mapping(item, f"project.metadata_cards[{idx}]")
            cards.append(
                MetadataCard(
                    label=_str(card.get("label"), f"project.metadata_cards[{idx}].label"),
                    value=_str(card.get("value"), f"project.metadata_cards[{idx}].value"),
                )
            )
        return cls(
            title=_str(raw.get("title"), "project.title"),
            description=_str(raw.get("description"), "project.description"),
            usage=_str(raw.get("usage"), "project.usage"),
            metadata_cards=tuple(cards),
        )


@dataclass(frozen=True, slots=True)
class PathsConfig:
    naming_table: Path
    build_root: Path
    output_html: Path
    manifests_dir: Path
    logs_dir: Path

    @property
    def build_directories(self) -> tuple[Path, ...]:
        return (
            self.build_root,
            self.output_html.parent,
            self.manifests_dir,
            self.logs_dir,
        )

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any], root_dir: Path) -> PathsConfig:
        return cls(
            naming_table=_path_from_cfg(raw.get("naming_table"), "paths.naming_table", root_dir),
            build_root=_path_from_cfg(raw.get("build_root"), "paths.build_root", root_dir),
            output_html=_path_from_cfg(raw.get("output_html"), "paths.output_html", root_dir),
            manifests_dir=_path_from_cfg(raw.get("manifests_dir"), "paths.manifests_dir", root_dir),
            logs_dir=_path_from_cfg(raw.get("logs_dir"), "paths.logs_dir", root_dir),
        )


@dataclass(frozen=True, slots=True)
class DatasetConfig:
    location: str
    request_timeout_s: float | None
    download_url: str

    @property
    def is_remote(self) -> bool:
        return _is_url(self.location)

    @property
    def local_path(self) -> Path | None:
        return None if self.is_remote else Path(self.location)

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any], root_dir: Path) -> DatasetConfig:
        location_raw = _str(raw.get("location"), "dataset.location")
        if _is_url(location_raw):
            location = location_raw
        else:
            location = str(_path_from_cfg(location_raw, "dataset.location", root_dir))

        timeout_raw = raw.get("request_timeout_s")
        timeout = None if timeout_raw is None else _float(timeout_raw, "dataset.request_timeout_s")
        if timeout is not None and timeout <= 0:
            raise ValueError("dataset.request_timeout_s must be > 0 when provided")

        return cls(
            location=location,
            request_timeout_s=timeout,
            download_url=_str(raw.get("download_url", ADMIN0_GEOJSON_URL), "dataset.download_url"),
        )


@dataclass(frozen=True, slots=True)
class MapViewConfig:
    center: tuple[float, float]
    zoom: int
    min_zoom: int
    max_zoom: int
    scroll_wheel_zoom: bool
    prefer_canvas: bool
    background: str

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> MapViewConfig:
        center_raw = raw.get("center")
        if not isinstance(center_raw, list) or len(center_raw) != 2:
            raise ValueError("Expected [lat, lon] list for 'map.center'")
        lat = _float(center_raw[0], "map.center[0]")
        lon = _float(center_raw[1], "map.center[1]")
        if lat < -90.0 or lat > 90.0:
            raise ValueError("map.center latitude must be between -90 and 90")
        if lon < -180.0 or lon > 180.0:
            raise ValueError("map.center longitude must be between -180 and 180")

        zoom = _int(raw.get("zoom"), "map.zoom")
        min_zoom = _int(raw.get("min_zoom"), "map.min_zoom")
        max_zoom = _int(raw.get("max_zoom"), "map.max_zoom")
        if min_zoom > max_zoom:
            raise ValueError("map.min_zoom cannot be greater than map.max_zoom")
        if not min_zoom <= zoom <= max_zoom:
            raise ValueError("map.zoom must lie between map.min_zoom and map.max_zoom")

        return cls(
            center=(lat, lon),
            zoom=zoom,
            min_zoom=min_zoom,
            max_zoom=max_zoom,
            scroll_wheel_zoom=_bool(raw.get("scroll_wheel_zoom", True), "map.scroll_wheel_zoom"),
            prefer_canvas=_bool(raw.get("prefer_canvas", True), "map.prefer_canvas"),
            background=_str(raw.get("background", "#020617"), "map.background"),
        )


@dataclass(frozen=True, slots=True)
class TilesConfig:
    url: str
    attribution: str

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> TilesConfig:
        return cls(
            url=_str(raw.get("url"), "tiles.url"),
            attribution=_str(raw.get("attribution"), "tiles.attribution"),
        )


@dataclass(frozen=True, slots=True)
class PathStyleConfig:
    color: str
    weight: float
    fill_color: str
    fill_opacity: float

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any], prefix: str) -> PathStyleConfig:
        fill_opacity = _float(raw.get("fill_opacity"), f"{prefix}.fill_opacity")
        if not 0.0 <= fill_opacity <= 1.0:
            raise ValueError(f"{prefix}.fill_opacity must be between 0 and 1")
        return cls(
            color=_str(raw.get("color"), f"{prefix}.color"),
            weight=_float(raw.get("weight"), f"{prefix}.weight"),
            fill_color=_str(raw.get("fill_color"), f"{prefix}.fill_color"),
            fill_opacity=fill_opacity,
        )


@dataclass(frozen=True, slots=True)
class HoverStyleConfig:
    weight: float
    fill_opacity: float

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> HoverStyleConfig:
        fill_opacity = _float(raw.get("fill_opacity"), "style.hover.fill_opacity")
        if not 0.0 <= fill_opacity <= 1.0:
            raise ValueError("style.hover.fill_opacity must be between 0 and 1")
        return cls(
            weight=_float(raw.get("weight"), "style.hover.weight"),
            fill_opacity=fill_opacity,
        )


@dataclass(frozen=True, slots=True)
class StyleConfig:
    default: PathStyleConfig
    hover: HoverStyleConfig

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> StyleConfig:
        return cls(
            default=PathStyleConfig.from_mapping(
                _mapping(raw.get("default"), "style.default"), "style.default"
            ),
            hover=HoverStyleConfig.from_mapping(_mapping(raw.get("hover"), "style.hover")),
        )


@dataclass(frozen=True, slots=True)
class TooltipConfig:
    sticky: bool
    direction: str
    opacity: float
    class_name: str

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> TooltipConfig:
        direction = _str(raw.get("direction", "auto"), "tooltip.direction").casefold()
        allowed = {"auto", "top", "bottom", "left", "right", "center"}
        if direction not in allowed:
            raise ValueError("tooltip.direction must be one of: " + ", ".join(sorted(allowed)))
        return cls(
            sticky=_bool(raw.get("sticky", True), "tooltip.sticky"),
            direction=direction,
            opacity=_float(raw.get("opacity", 0.9), "tooltip.opacity"),
            class_name=_str(raw.get("class_name", "dwapara-tooltip"), "tooltip.class_name"),
        )


@dataclass(frozen=True, slots=True)
class MessagesConfig:
    initializing: str
    loading: str

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> MessagesConfig:
        return cls(
            initializing=_str(raw.get("initializing"), "messages.initializing"),
            loading=_str(raw.get("loading"), "messages.loading"),
        )

    @classmethod
    def default(cls) -> MessagesConfig:
        return cls(
            initializing="Initializing astral projection…",
            loading="Loading cartography…",
        )


@dataclass(frozen=True, slots=True)
class BuildConfig:
    write_manifest: bool
    write_enriched_geojson: bool

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> BuildConfig:
        return cls(
            write_manifest=_bool(raw.get("write_manifest"), "build.write_manifest"),
            write_enriched_geojson=_bool(
                raw.get("write_enriched_geojson", False), "build.write_enriched_geojson"
            ),
        )


@dataclass(frozen=True, slots=True)
class AppConfig:
    source_path: Path
    project: ProjectConfig
    paths: PathsConfig
    dataset: DatasetConfig
    map: MapViewConfig
    tiles: TilesConfig
    style: StyleConfig
    tooltip: TooltipConfig
    messages: MessagesConfig
    build: BuildConfig

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any], source_path: Path) -> AppConfig:
        root_dir = source_path.parent.resolve()
        messages_raw = raw.get("messages")
        messages = (
            MessagesConfig.default()
            if messages_raw is None
            else MessagesConfig.from_mapping(_mapping(messages_raw, "messages"))
        )
        return cls(
            source_path=source_path.resolve(),
            project=ProjectConfig.from_mapping(_mapping(raw.get("project"), "project")),
            paths=PathsConfig.from_mapping(_mapping(raw.get("paths"), "paths"), root_dir),
            dataset=DatasetConfig.from_mapping(_mapping(raw.get("dataset"), "dataset"), root_dir),
            map=MapViewConfig.from_mapping(_mapping(raw.get("map"), "map")),
            tiles=TilesConfig.from_mapping(_mapping(raw.get("tiles"), "tiles")),
            style=StyleConfig.from_mapping(_mapping(raw.get("style"), "style")),
            tooltip=TooltipConfig.from_mapping(_mapping(raw.get("tooltip", {}), "tooltip")),
            messages=messages,
            build=BuildConfig.from_mapping(_mapping(raw.get("build"), "build")),
        )


def load_config(path: str | Path) -> AppConfig:
    """Load and validate the YAML config file into typed settings."""
    cfg_path = Path(path).resolve()
    if not cfg_path.exists():
        raise FileNotFoundError(f"Config file not found: {cfg_path}")
    with cfg_path.open("r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh)
    if not isinstance(raw, Mapping):
        raise ValueError("Top-level config must be a YAML mapping")
    return AppConfig.from_mapping(cast(Mapping[str, Any], raw), cfg_path)
