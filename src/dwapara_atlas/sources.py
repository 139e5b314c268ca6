"""Asynchronous acquisition of the raw region dataset."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Protocol

import requests

from .config import DatasetConfig


_LOGGER = logging.getLogger("dwapara_atlas.sources")


class DatasetError(Exception):
    """Base class for failures while acquiring the dataset."""


class DatasetFetchError(DatasetError):
    """Transport failure, missing file or non-success response status."""


class DatasetFormatError(DatasetError):
    """Body could not be decoded as JSON."""


class DatasetSource(Protocol):
    location: str

    async def fetch(self) -> Any:
        """Return the decoded JSON body or raise `DatasetError`."""
        ...


class HttpDatasetSource:
    """Fetch the dataset over HTTP with `requests`, off the event loop.

    No timeout is applied unless one is configured; a hung request keeps the
    caller waiting.
    """

    def __init__(
        self,
        url: str,
        *,
        timeout_s: float | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.location = url
        self._timeout_s = timeout_s
        self._session = session or requests.Session()

    async def fetch(self) -> Any:
        return await asyncio.to_thread(self._fetch_blocking)

    def _fetch_blocking(self) -> Any:
        _LOGGER.debug("GET %s", self.location)
        try:
            response = self._session.get(self.location, timeout=self._timeout_s)
        except requests.RequestException as exc:
            raise DatasetFetchError(f"Failed to load dataset: {exc}") from exc
        if not response.ok:
            reason = (response.reason or "").strip() or f"HTTP {response.status_code}"
            raise DatasetFetchError(f"Failed to load dataset: {reason}")
        try:
            return response.json()
        except ValueError as exc:
            raise DatasetFormatError(f"Dataset at {self.location} is not valid JSON: {exc}") from exc


class FileDatasetSource:
    """Read the dataset from a local GeoJSON file, off the event loop."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self.location = str(path)

    async def fetch(self) -> Any:
        return await asyncio.to_thread(self._fetch_blocking)

    def _fetch_blocking(self) -> Any:
        _LOGGER.debug("Reading %s", self.path)
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise DatasetFetchError(f"Failed to load dataset: file not found: {self.path}") from exc
        except (OSError, UnicodeDecodeError) as exc:
            raise DatasetFetchError(f"Failed to load dataset: {exc}") from exc
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise DatasetFormatError(f"Dataset at {self.path} is not valid JSON: {exc}") from exc


def source_from_config(cfg: DatasetConfig, *, session: requests.Session | None = None) -> DatasetSource:
    if cfg.is_remote:
        return HttpDatasetSource(cfg.location, timeout_s=cfg.request_timeout_s, session=session)
    return FileDatasetSource(Path(cfg.location))
