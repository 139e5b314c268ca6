from __future__ import annotations

import json
from pathlib import Path

import pytest
import requests

from dwapara_atlas.io_ne import ADMIN0_GEOJSON_URL, download_admin0_geojson

from helpers import FakeResponse, FakeSession, feature, feature_collection


def test_download_writes_feature_collection(tmp_path: Path) -> None:
    payload = feature_collection(feature({"ADMIN": "Nepal"}))
    session = FakeSession(FakeResponse(payload=payload))
    target = tmp_path / "data" / "dwapara.geojson"

    out = download_admin0_geojson(target, session=session)  # type: ignore[arg-type]

    assert out == target
    assert json.loads(target.read_text(encoding="utf-8")) == payload
    assert session.requests == [(ADMIN0_GEOJSON_URL, {"timeout": 60.0})]


def test_existing_file_is_reused_unless_forced(tmp_path: Path) -> None:
    target = tmp_path / "dwapara.geojson"
    target.write_text("{}", encoding="utf-8")
    session = FakeSession(FakeResponse(payload=feature_collection()))

    download_admin0_geojson(target, session=session)  # type: ignore[arg-type]
    assert session.requests == []
    assert target.read_text(encoding="utf-8") == "{}"

    download_admin0_geojson(target, force=True, session=session)  # type: ignore[arg-type]
    assert len(session.requests) == 1
    assert json.loads(target.read_text(encoding="utf-8"))["type"] == "FeatureCollection"


def test_http_error_is_raised(tmp_path: Path) -> None:
    session = FakeSession(FakeResponse(status_code=404, reason="Not Found"))
    with pytest.raises(requests.HTTPError):
        download_admin0_geojson(tmp_path / "d.geojson", session=session)  # type: ignore[arg-type]
    assert not (tmp_path / "d.geojson").exists()


def test_non_collection_payload_is_rejected(tmp_path: Path) -> None:
    session = FakeSession(FakeResponse(payload={"type": "Feature"}))
    with pytest.raises(ValueError, match="FeatureCollection"):
        download_admin0_geojson(tmp_path / "d.geojson", session=session)  # type: ignore[arg-type]
