"""View selection over the lifecycle state and HTML rendering of each view."""

from __future__ import annotations

from dataclasses import dataclass
from html import escape
from typing import Union

import folium

from .binder import build_map
from .config import AppConfig
from .lifecycle import Failed, LifecycleState, Loading, Ready, Uninitialized
from .models import RegionCollection


@dataclass(frozen=True, slots=True)
class InitializingView:
    name = "initializing"


@dataclass(frozen=True, slots=True)
class LoadingView:
    name = "loading"


@dataclass(frozen=True, slots=True)
class ErrorView:
    message: str
    name = "error"


@dataclass(frozen=True, slots=True)
class MapView:
    collection: RegionCollection
    name = "map"


View = Union[InitializingView, LoadingView, ErrorView, MapView]


def select_view(state: LifecycleState) -> View:
    """Pick exactly one view; nothing but the lifecycle state is consulted."""
    if isinstance(state, Uninitialized):
        return InitializingView()
    if isinstance(state, Loading):
        return LoadingView()
    if isinstance(state, Failed):
        return ErrorView(state.message)
    if isinstance(state, Ready):
        return MapView(state.collection)
    raise TypeError(f"Unknown lifecycle state: {state!r}")


_CHROME_CSS = "\n".join(
    [
        "    body { margin: 0; background: #020617; color: #e2e8f0; font-family: Arial, sans-serif; }",
        "    .atlas-header, .atlas-legend {",
        "      position: fixed; left: 16px; z-index: 1000; max-width: 420px;",
        "      background: rgba(15, 23, 42, 0.85); border: 1px solid #1e293b;",
        "      border-radius: 8px; padding: 12px 16px;",
        "    }",
        "    .atlas-header { top: 16px; }",
        "    .atlas-legend { bottom: 24px; }",
        "    .atlas-header h1 { margin: 0 0 6px 0; font-size: 20px; }",
        "    .atlas-header p, .atlas-legend p { margin: 0 0 8px 0; font-size: 13px; color: #94a3b8; }",
        "    .atlas-legend h2 { margin: 0 0 6px 0; font-size: 15px; }",
        "    .metadata-panel { display: flex; gap: 8px; flex-wrap: wrap; }",
        "    .metadata-card { border: 1px solid #1e293b; border-radius: 6px; padding: 6px 8px; }",
        "    .metadata-card span { display: block; font-size: 11px; color: #64748b; }",
        "    .metadata-card strong { font-size: 12px; }",
    ]
)

_PANEL_CSS = "\n".join(
    [
        "    .atlas-panel {",
        "      position: fixed; inset: 0; display: grid; place-items: center;",
        "      padding: 1.5rem; text-align: center;",
        "    }",
        "    .atlas-panel.muted { background: rgba(15, 23, 42, 0.6); color: #94a3b8; }",
        "    .atlas-panel.error { background: rgba(127, 29, 29, 0.2); color: #fecaca; }",
    ]
)


def render_view(view: View, cfg: AppConfig) -> str:
    """Render a view as a complete HTML document."""
    if isinstance(view, InitializingView):
        return _panel_document(cfg, message=cfg.messages.initializing, tone="muted")
    if isinstance(view, LoadingView):
        return _panel_document(cfg, message=cfg.messages.loading, tone="muted")
    if isinstance(view, ErrorView):
        return _panel_document(cfg, message=view.message, tone="error")
    if isinstance(view, MapView):
        return _map_document(view.collection, cfg)
    raise TypeError(f"Unknown view: {view!r}")


def render_state(state: LifecycleState, cfg: AppConfig) -> tuple[View, str]:
    view = select_view(state)
    return (view, render_view(view, cfg))


def _chrome_html(cfg: AppConfig) -> str:
    project = cfg.project
    cards = [
        "\n".join(
            [
                "      <article class='metadata-card'>",
                f"        <span>{escape(card.label)}</span>",
                f"        <strong>{escape(card.value)}</strong>",
                "      </article>",
            ]
        )
        for card in project.metadata_cards
    ]
    return "\n".join(
        [
            "  <section class='atlas-header'>",
            f"    <h1>{escape(project.title)}</h1>",
            f"    <p>{escape(project.description)}</p>",
            "  </section>",
            "  <section class='atlas-legend'>",
            "    <h2>How to use</h2>",
            f"    <p>{escape(project.usage)}</p>",
            "    <div class='metadata-panel'>",
            *cards,
            "    </div>",
            "  </section>",
        ]
    )


def _panel_document(cfg: AppConfig, *, message: str, tone: str) -> str:
    return "\n".join(
        [
            "<!doctype html>",
            "<html lang='en'>",
            "<head>",
            "  <meta charset='utf-8'>",
            "  <meta name='viewport' content='width=device-width, initial-scale=1'>",
            f"  <title>{escape(cfg.project.title)}</title>",
            "  <style>",
            _CHROME_CSS,
            _PANEL_CSS,
            "  </style>",
            "</head>",
            "<body>",
            f"  <div class='atlas-panel {tone}' role='status'>{escape(message)}</div>",
            _chrome_html(cfg),
            "</body>",
            "</html>",
            "",
        ]
    )


def _map_document(collection: RegionCollection, cfg: AppConfig) -> str:
    fmap = build_map(collection, cfg)
    root = fmap.get_root()
    root.header.add_child(folium.Element(f"<title>{escape(cfg.project.title)}</title>"))
    root.header.add_child(folium.Element(f"<style>\n{_CHROME_CSS}\n</style>"))
    root.html.add_child(folium.Element(_chrome_html(cfg)))
    return root.render()
