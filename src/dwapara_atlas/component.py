"""Mountable atlas: lifecycle controller plus presentation shell."""

from __future__ import annotations

import asyncio
import logging

from .config import AppConfig
from .lifecycle import DatasetLoadController, LifecycleState, StateListener
from .naming import NamingTable
from .shell import View, render_state, select_view
from .sources import DatasetSource, source_from_config


_LOGGER = logging.getLogger("dwapara_atlas.component")


class AtlasComponent:
    """One mount of the world map.

    `mount()` starts the single dataset fetch, `unmount()` detaches so late
    results are dropped, and `render()` always reflects the current state.
    """

    def __init__(
        self,
        cfg: AppConfig,
        naming_table: NamingTable,
        *,
        source: DatasetSource | None = None,
        listener: StateListener | None = None,
    ) -> None:
        self.cfg = cfg
        self.controller = DatasetLoadController(
            source if source is not None else source_from_config(cfg.dataset),
            naming_table,
            listener=listener,
        )
        self._mounted = False

    @property
    def mounted(self) -> bool:
        return self._mounted

    @property
    def state(self) -> LifecycleState:
        return self.controller.state

    def mount(self) -> asyncio.Task[None]:
        task = self.controller.activate()
        self._mounted = True
        _LOGGER.debug("Atlas mounted (activation %d)", self.controller.generation)
        return task

    def unmount(self) -> None:
        self.controller.deactivate()
        self._mounted = False

    def view(self) -> View:
        return select_view(self.controller.state)

    def render(self) -> str:
        _view, html = render_state(self.controller.state, self.cfg)
        return html

    async def settle(self) -> View:
        """Wait for the in-flight fetch (if any) and return the resulting view."""
        await self.controller.wait()
        return self.view()
