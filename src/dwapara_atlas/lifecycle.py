"""Load lifecycle for the region dataset: fetch, enrich, publish.

The controller moves through ``Uninitialized -> Loading -> (Ready | Failed)``
once per activation. Every activation gets a generation token; a result that
arrives after `deactivate()` (or after a newer activation) carries a stale
token and is dropped without touching the observable state.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Union

from .enrich import enrich_collection
from .models import RegionCollection
from .naming import NamingTable
from .sources import DatasetError, DatasetSource


UNKNOWN_LOAD_ERROR = "Unknown error while loading dataset"

_LOGGER = logging.getLogger("dwapara_atlas.lifecycle")


@dataclass(frozen=True, slots=True)
class Uninitialized:
    @property
    def label(self) -> str:
        return "uninitialized"


@dataclass(frozen=True, slots=True)
class Loading:
    @property
    def label(self) -> str:
        return "loading"


@dataclass(frozen=True, slots=True)
class Failed:
    message: str

    @property
    def label(self) -> str:
        return "error"


@dataclass(frozen=True, slots=True)
class Ready:
    collection: RegionCollection

    @property
    def label(self) -> str:
        return "ready"


LifecycleState = Union[Uninitialized, Loading, Failed, Ready]
StateListener = Callable[[LifecycleState], None]


def describe_failure(exc: BaseException) -> str:
    message = str(exc).strip()
    return message or UNKNOWN_LOAD_ERROR


class DatasetLoadController:
    """Own the lifecycle state of one mounted map."""

    def __init__(
        self,
        source: DatasetSource,
        naming_table: NamingTable,
        *,
        listener: StateListener | None = None,
    ) -> None:
        self._source = source
        self._naming_table = naming_table
        self._listener = listener
        self._state: LifecycleState = Uninitialized()
        self._generation = 0
        self._subscribed = False
        self._task: asyncio.Task[None] | None = None

    @property
    def state(self) -> LifecycleState:
        return self._state

    @property
    def subscribed(self) -> bool:
        return self._subscribed

    @property
    def generation(self) -> int:
        return self._generation

    def activate(self) -> asyncio.Task[None]:
        """Enter `Loading` and schedule the single fetch of this activation.

        Must be called from a running event loop.
        """
        if self._subscribed:
            raise RuntimeError("Controller is already active; deactivate it before re-activating")
        loop = asyncio.get_running_loop()
        self._generation += 1
        token = self._generation
        self._subscribed = True
        self._publish(token, Loading())
        self._task = loop.create_task(self._load(token), name=f"dwapara-load-{token}")
        return self._task

    def deactivate(self) -> None:
        """Detach the consumer; results still in flight are discarded."""
        if not self._subscribed:
            return
        self._subscribed = False
        self._generation += 1
        _LOGGER.info("Controller detached while %s", self._state.label)

    async def wait(self) -> LifecycleState:
        """Wait for the latest fetch task to finish and return the current state."""
        if self._task is not None:
            await self._task
        return self._state

    async def load(self) -> LifecycleState:
        self.activate()
        return await self.wait()

    async def _load(self, token: int) -> None:
        try:
            raw = await self._source.fetch()
        except DatasetError as exc:
            self._publish(token, Failed(describe_failure(exc)))
            return
        except Exception as exc:
            _LOGGER.warning("Unexpected %s from dataset source %s", type(exc).__name__, self._source.location)
            self._publish(token, Failed(describe_failure(exc)))
            return

        if not self._is_current(token):
            _LOGGER.debug("Discarding stale dataset from activation %d", token)
            return

        try:
            collection = RegionCollection.from_geojson(raw)
        except ValueError as exc:
            self._publish(token, Failed(f"Malformed dataset: {exc}"))
            return

        self._publish(token, Ready(enrich_collection(collection, self._naming_table)))

    def _is_current(self, token: int) -> bool:
        return self._subscribed and token == self._generation

    def _publish(self, token: int, state: LifecycleState) -> bool:
        if not self._is_current(token):
            _LOGGER.debug(
                "Discarding %s transition from activation %d (current %d, subscribed=%s)",
                state.label,
                token,
                self._generation,
                self._subscribed,
            )
            return False
        self._state = state
        if isinstance(state, Failed):
            _LOGGER.error("Dataset load failed: %s", state.message)
        elif isinstance(state, Ready):
            _LOGGER.info("Dataset ready with %d regions", len(state.collection))
        else:
            _LOGGER.info("Lifecycle -> %s", state.label)
        if self._listener is not None:
            try:
                self._listener(state)
            except Exception:
                _LOGGER.exception("State listener failed on %s transition", state.label)
        return True
