"""Natural Earth dataset conventions and download helper."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import requests


ADMIN0_GEOJSON_URL = (
    "https://raw.githubusercontent.com/nvkelso/natural-earth-vector/master/geojson/"
    "ne_110m_admin_0_countries.geojson"
)

# Resolution order for the canonical modern name of an admin-0 feature.
NAME_LONG_COLUMN = "NAME_LONG"
ADMIN_COLUMN = "ADMIN"
SOVEREIGNTY_COLUMN = "SOVEREIGNT"
COUNTRY_NAME_COLUMNS = (NAME_LONG_COLUMN, ADMIN_COLUMN, SOVEREIGNTY_COLUMN)

_LOGGER = logging.getLogger("dwapara_atlas.io_ne")


def download_admin0_geojson(
    output_path: Path,
    *,
    url: str = ADMIN0_GEOJSON_URL,
    force: bool = False,
    timeout_s: float | None = 60.0,
    session: requests.Session | None = None,
) -> Path:
    """Download the Natural Earth admin-0 GeoJSON to `output_path`.

    An existing file is reused unless `force` is set. The payload is checked
    to be a FeatureCollection before anything is written.
    """
    if output_path.exists() and not force:
        _LOGGER.info("Dataset already present at %s; skipping download.", output_path)
        return output_path

    http = session or requests.Session()
    _LOGGER.info("Downloading admin-0 countries GeoJSON from %s", url)
    response = http.get(url, timeout=timeout_s)
    response.raise_for_status()
    payload: Any = response.json()
    if not isinstance(payload, dict) or payload.get("type") != "FeatureCollection":
        raise ValueError(f"Downloaded payload from {url} is not a GeoJSON FeatureCollection")

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")
    feature_count = len(payload.get("features") or [])
    _LOGGER.info("Saved %d features to %s", feature_count, output_path)
    return output_path
