from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

from dwapara_atlas.component import AtlasComponent
from dwapara_atlas.config import AppConfig
from dwapara_atlas.naming import NamingTable
from dwapara_atlas.shell import ErrorView, InitializingView, LoadingView, MapView
from dwapara_atlas.sources import DatasetFetchError

from helpers import GatedSource, StaticSource


def test_mount_walks_initializing_loading_map(
    app_config: AppConfig, naming_table: NamingTable, sample_geojson: dict[str, Any]
) -> None:
    async def scenario() -> list[str]:
        component = AtlasComponent(app_config, naming_table, source=StaticSource(sample_geojson))
        names = [component.view().name]
        component.mount()
        names.append(component.view().name)
        view = await component.settle()
        names.append(view.name)
        component.unmount()
        return names

    assert asyncio.run(scenario()) == ["initializing", "loading", "map"]


def test_render_before_mount_shows_initializing(app_config: AppConfig, naming_table: NamingTable) -> None:
    component = AtlasComponent(app_config, naming_table, source=StaticSource({}))
    assert isinstance(component.view(), InitializingView)
    assert not component.mounted
    assert "Initializing astral projection…" in component.render()


def test_failed_fetch_renders_error(app_config: AppConfig, naming_table: NamingTable) -> None:
    source = StaticSource(error=DatasetFetchError("Failed to load dataset: Service Unavailable"))

    async def scenario() -> str:
        component = AtlasComponent(app_config, naming_table, source=source)
        component.mount()
        view = await component.settle()
        assert isinstance(view, ErrorView)
        return component.render()

    assert "Failed to load dataset: Service Unavailable" in asyncio.run(scenario())


def test_unmount_mid_fetch_keeps_loading(
    app_config: AppConfig, naming_table: NamingTable, sample_geojson: dict[str, Any]
) -> None:
    async def scenario() -> AtlasComponent:
        source = GatedSource([sample_geojson])
        component = AtlasComponent(app_config, naming_table, source=source)
        task = component.mount()
        await asyncio.sleep(0)
        component.unmount()
        source.release()
        await task
        return component

    component = asyncio.run(scenario())
    assert not component.mounted
    assert isinstance(component.view(), LoadingView)
    assert not isinstance(component.view(), MapView)


def test_default_source_follows_config(app_config: AppConfig, naming_table: NamingTable, dataset_file: Path) -> None:
    async def scenario() -> str:
        component = AtlasComponent(app_config, naming_table)
        component.mount()
        return (await component.settle()).name

    assert asyncio.run(scenario()) == "map"


def test_render_follows_settled_state(
    app_config: AppConfig, naming_table: NamingTable, sample_geojson: dict[str, Any]
) -> None:
    async def scenario() -> str:
        component = AtlasComponent(app_config, naming_table, source=StaticSource(sample_geojson))
        component.mount()
        await component.settle()
        return component.render()

    html = asyncio.run(scenario())
    assert "leaflet" in html.lower()
    assert "Bharata Khanda" in html
