from __future__ import annotations

import json
from pathlib import Path

from dwapara_atlas.cli import main


def test_build_renders_map_and_manifest(config_path: Path, dataset_file: Path) -> None:
    assert main(["build", "--config", str(config_path)]) == 0

    root = config_path.parent
    html = (root / "build" / "site" / "index.html").read_text(encoding="utf-8")
    assert "leaflet" in html.lower()
    assert "Bharata Khanda" in html
    manifest = json.loads((root / "build" / "manifests" / "build_manifest.json").read_text(encoding="utf-8"))
    assert manifest["view"] == "map"
    assert manifest["lifecycle_state"] == "ready"
    assert (root / "build" / "logs" / "build.log").exists()


def test_build_without_dataset_renders_error_page(config_path: Path) -> None:
    assert main(["build", "--config", str(config_path)]) == 1

    html = (config_path.parent / "build" / "site" / "index.html").read_text(encoding="utf-8")
    assert "Failed to load dataset: file not found" in html
    assert "leaflet" not in html.lower()


def test_strict_build_stops_at_validation(config_path: Path, dataset_file: Path) -> None:
    assert main(["build", "--strict", "--config", str(config_path)]) == 1
    assert not (config_path.parent / "build" / "site" / "index.html").exists()


def test_validate_command(config_path: Path, dataset_file: Path) -> None:
    assert main(["validate", "--config", str(config_path)]) == 0
    assert main(["validate", "--strict", "--config", str(config_path)]) == 1


def test_inspect_command(config_path: Path, dataset_file: Path) -> None:
    assert main(["inspect", "--config", str(config_path)]) == 0
    assert (config_path.parent / "build" / "manifests" / "enrichment_report.json").exists()
    assert (config_path.parent / "build" / "site" / "inspect.html").exists()


def test_inspect_without_dataset_fails(config_path: Path) -> None:
    assert main(["inspect", "--config", str(config_path)]) == 1


def test_fetch_dataset_skips_existing_file(config_path: Path, dataset_file: Path) -> None:
    before = dataset_file.read_text(encoding="utf-8")
    assert main(["fetch-dataset", "--config", str(config_path)]) == 0
    assert dataset_file.read_text(encoding="utf-8") == before
