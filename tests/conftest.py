from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
import yaml

from dwapara_atlas.config import AppConfig, load_config
from dwapara_atlas.models import RegionCollection
from dwapara_atlas.naming import NamingTable, load_naming_table

from helpers import feature, feature_collection


REPO_ROOT = Path(__file__).resolve().parents[1]
NAMING_TABLE_PATH = REPO_ROOT / "data" / "dwapara_names.yaml"


@pytest.fixture(scope="session")
def naming_table() -> NamingTable:
    return load_naming_table(NAMING_TABLE_PATH)


@pytest.fixture
def sample_geojson() -> dict[str, Any]:
    return feature_collection(
        feature({"ADMIN": "India", "ISO_A3": "IND"}),
        feature({"ADMIN": "Atlantis"}),
        feature({"NAME_LONG": "Russian Federation", "ADMIN": "Russia", "SOVEREIGNT": "Russia"}),
        feature({"SOVEREIGNT": "Japan"}),
        feature(None),
    )


@pytest.fixture
def sample_collection(sample_geojson: dict[str, Any]) -> RegionCollection:
    return RegionCollection.from_geojson(sample_geojson)


def _config_payload() -> dict[str, Any]:
    with (REPO_ROOT / "config.yaml").open("r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh)
    raw["paths"] = {
        "naming_table": str(NAMING_TABLE_PATH),
        "build_root": "build",
        "output_html": "build/site/index.html",
        "manifests_dir": "build/manifests",
        "logs_dir": "build/logs",
    }
    raw["dataset"]["location"] = "data/dwapara.geojson"
    return raw


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump(_config_payload(), allow_unicode=True), encoding="utf-8")
    return path


@pytest.fixture
def dataset_file(tmp_path: Path, sample_geojson: dict[str, Any]) -> Path:
    path = tmp_path / "data" / "dwapara.geojson"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(sample_geojson), encoding="utf-8")
    return path


@pytest.fixture
def app_config(config_path: Path) -> AppConfig:
    return load_config(config_path)
