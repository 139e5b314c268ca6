"""Shared fakes for dataset sources and HTTP sessions."""

from __future__ import annotations

import asyncio
import copy
from typing import Any, Sequence

import requests


def feature(properties: dict[str, Any] | None, geometry: dict[str, Any] | None = None) -> dict[str, Any]:
    return {
        "type": "Feature",
        "geometry": geometry
        if geometry is not None
        else {"type": "Polygon", "coordinates": [[[0, 0], [1, 0], [1, 1], [0, 0]]]},
        "properties": properties,
    }


def feature_collection(*features: dict[str, Any]) -> dict[str, Any]:
    return {"type": "FeatureCollection", "features": list(features)}


class StaticSource:
    """Returns a payload (or raises an error) without suspending for long."""

    location = "memory://static"

    def __init__(self, payload: Any = None, *, error: BaseException | None = None) -> None:
        self.payload = payload
        self.error = error
        self.calls = 0

    async def fetch(self) -> Any:
        self.calls += 1
        await asyncio.sleep(0)
        if self.error is not None:
            raise self.error
        return copy.deepcopy(self.payload)


class GatedSource:
    """Each fetch call blocks on its own gate until the test releases it."""

    location = "memory://gated"

    def __init__(self, payloads: Sequence[Any]) -> None:
        self.payloads = list(payloads)
        self.gates = [asyncio.Event() for _ in self.payloads]
        self.calls = 0

    async def fetch(self) -> Any:
        idx = self.calls
        self.calls += 1
        await self.gates[idx].wait()
        payload = self.payloads[idx]
        if isinstance(payload, BaseException):
            raise payload
        return copy.deepcopy(payload)

    def release(self, idx: int = 0) -> None:
        self.gates[idx].set()


class FakeResponse:
    def __init__(
        self,
        *,
        status_code: int = 200,
        reason: str = "OK",
        payload: Any = None,
        json_error: Exception | None = None,
    ) -> None:
        self.status_code = status_code
        self.reason = reason
        self._payload = payload
        self._json_error = json_error

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self) -> Any:
        if self._json_error is not None:
            raise self._json_error
        return copy.deepcopy(self._payload)

    def raise_for_status(self) -> None:
        if not self.ok:
            raise requests.HTTPError(f"{self.status_code} {self.reason}")


class FakeSession:
    def __init__(self, response: FakeResponse | None = None, *, error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.requests: list[tuple[str, dict[str, Any]]] = []

    def get(self, url: str, **kwargs: Any) -> FakeResponse:
        self.requests.append((url, kwargs))
        if self.error is not None:
            raise self.error
        assert self.response is not None
        return self.response
