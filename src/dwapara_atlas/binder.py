"""Per-feature tooltip and hover styling, and the folium map that carries them."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from html import escape
from typing import Any

import folium

from .config import AppConfig, StyleConfig
from .models import RegionCollection, RegionFeature


UNNAMED_DOMINION = "Unnamed Dominion"
TOOLTIP_FIELD = "DWAPARA_TOOLTIP"
LAYER_NAME = "Dwaparyug realms"

_TOOLTIP_CSS = (
    "background-color: #0f172a; color: #e2e8f0; border: 1px solid #38bdf8; "
    "border-radius: 4px; font-size: 13px; padding: 4px 8px;"
)

_LOGGER = logging.getLogger("dwapara_atlas.binder")


@dataclass(frozen=True, slots=True)
class FeatureStyle:
    """Leaflet path options shared by every region."""

    color: str
    weight: float
    fill_color: str
    fill_opacity: float

    def emphasized(self, *, weight: float, fill_opacity: float) -> FeatureStyle:
        return replace(self, weight=weight, fill_opacity=fill_opacity)

    def to_path_options(self) -> dict[str, Any]:
        return {
            "color": self.color,
            "weight": self.weight,
            "fillColor": self.fill_color,
            "fillOpacity": self.fill_opacity,
        }


DEFAULT_STYLE = FeatureStyle(color="#38bdf8", weight=1.0, fill_color="#0ea5e9", fill_opacity=0.22)
HOVER_STYLE = DEFAULT_STYLE.emphasized(weight=2.5, fill_opacity=0.38)


@dataclass(frozen=True, slots=True)
class StylePair:
    default: FeatureStyle
    hover: FeatureStyle

    @classmethod
    def from_config(cls, cfg: StyleConfig) -> StylePair:
        default = FeatureStyle(
            color=cfg.default.color,
            weight=cfg.default.weight,
            fill_color=cfg.default.fill_color,
            fill_opacity=cfg.default.fill_opacity,
        )
        return cls(
            default=default,
            hover=default.emphasized(weight=cfg.hover.weight, fill_opacity=cfg.hover.fill_opacity),
        )


DEFAULT_STYLES = StylePair(default=DEFAULT_STYLE, hover=HOVER_STYLE)


class HoverState:
    """Style of one rendered feature as the pointer enters and leaves it."""

    __slots__ = ("styles", "_hovered")

    def __init__(self, styles: StylePair = DEFAULT_STYLES) -> None:
        self.styles = styles
        self._hovered = False

    @property
    def hovered(self) -> bool:
        return self._hovered

    @property
    def style(self) -> FeatureStyle:
        return self.styles.hover if self._hovered else self.styles.default

    def enter(self) -> FeatureStyle:
        self._hovered = True
        return self.style

    def leave(self) -> FeatureStyle:
        self._hovered = False
        return self.style


def tooltip_lines(feature: RegionFeature) -> tuple[str, ...]:
    alternate = feature.alternate_name or UNNAMED_DOMINION
    modern = feature.modern_name or alternate
    if modern != alternate:
        return (alternate, f"Modern: {modern}")
    return (alternate,)


@dataclass(frozen=True, slots=True)
class FeatureBinding:
    feature: RegionFeature
    tooltip_html: str


def bind_feature(feature: RegionFeature) -> FeatureBinding:
    return FeatureBinding(
        feature=feature,
        tooltip_html="<br>".join(escape(line) for line in tooltip_lines(feature)),
    )


def build_map(
    collection: RegionCollection,
    cfg: AppConfig,
    *,
    styles: StylePair | None = None,
) -> folium.Map:
    """Build the interactive Leaflet map for an enriched collection."""
    pair = styles or StylePair.from_config(cfg.style)
    view = cfg.map
    fmap = folium.Map(
        location=list(view.center),
        zoom_start=view.zoom,
        min_zoom=view.min_zoom,
        max_zoom=view.max_zoom,
        tiles=None,
        prefer_canvas=view.prefer_canvas,
        scroll_wheel_zoom=view.scroll_wheel_zoom,
    )
    folium.TileLayer(
        tiles=cfg.tiles.url,
        attr=cfg.tiles.attribution,
        name="Backdrop",
        min_zoom=view.min_zoom,
        max_zoom=view.max_zoom,
        control=False,
    ).add_to(fmap)
    fmap.get_root().header.add_child(
        folium.Element(f"<style>.leaflet-container {{ background: {escape(view.background)}; }}</style>")
    )

    if not collection.features:
        _LOGGER.warning("Collection has no regions; rendering backdrop only.")
        return fmap

    data = collection.to_geojson()
    for feature_json, feature in zip(data["features"], collection.features):
        feature_json["properties"][TOOLTIP_FIELD] = bind_feature(feature).tooltip_html

    # Leaflet applies these on mouseover and restores the default with resetStyle.
    hover = HoverState(pair)
    hover_options = hover.enter().to_path_options()
    default_options = hover.leave().to_path_options()
    folium.GeoJson(
        data,
        name=LAYER_NAME,
        style_function=lambda _feature: dict(default_options),
        highlight_function=lambda _feature: dict(hover_options),
        tooltip=folium.GeoJsonTooltip(
            fields=[TOOLTIP_FIELD],
            labels=False,
            sticky=cfg.tooltip.sticky,
            class_name=cfg.tooltip.class_name,
            style=_TOOLTIP_CSS,
            direction=cfg.tooltip.direction,
            opacity=cfg.tooltip.opacity,
        ),
    ).add_to(fmap)
    _LOGGER.debug("Bound tooltips and hover styles to %d regions", len(collection))
    return fmap
