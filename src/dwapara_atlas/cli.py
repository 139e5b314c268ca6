"""CLI entrypoint for the Dwapara atlas builder."""

from __future__ import annotations

import argparse
import asyncio
import logging
from typing import Sequence

import requests

from .component import AtlasComponent
from .config import AppConfig, load_config
from .io_ne import download_admin0_geojson
from .inspect_report import generate_enrichment_report
from .lifecycle import LifecycleState, Ready
from .models import BuildManifest, RegionCollection
from .naming import NamingTable, load_naming_table
from .shell import MapView, View
from .sources import DatasetError, source_from_config
from .util import detect_git_commit, ensure_directories, sha256_file, setup_logging, write_json, write_text
from .validate import Validator, format_report_lines

LOGGER = logging.getLogger("dwapara_atlas.cli")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dwapara-atlas",
        description="Dwaparyug world atlas builder.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_common(p: argparse.ArgumentParser) -> None:
        p.add_argument("--config", default="config.yaml", help="Path to YAML config.")
        p.add_argument("--verbose", action="store_true", help="Enable debug logs.")

    build_p = subparsers.add_parser("build", help="Load, enrich and render the atlas page.")
    add_common(build_p)
    build_p.add_argument(
        "--strict",
        action="store_true",
        help="Treat naming-table duplicates and a missing dataset as validation errors.",
    )

    validate_p = subparsers.add_parser("validate", help="Validate config, naming table and dataset.")
    add_common(validate_p)
    validate_p.add_argument(
        "--strict",
        action="store_true",
        help="Treat naming-table duplicates and a missing dataset as errors.",
    )

    fetch_p = subparsers.add_parser(
        "fetch-dataset",
        help="Download the Natural Earth admin-0 countries GeoJSON to the dataset path.",
    )
    add_common(fetch_p)
    fetch_p.add_argument(
        "--force",
        action="store_true",
        help="Download again even when the dataset file already exists.",
    )

    inspect_p = subparsers.add_parser(
        "inspect",
        help="Write a JSON + HTML report of naming coverage over the dataset.",
    )
    add_common(inspect_p)

    return parser


def _load_and_setup(args: argparse.Namespace) -> AppConfig:
    cfg = load_config(args.config)
    log_path = cfg.paths.logs_dir / "build.log"
    setup_logging(log_path, verbose=args.verbose)
    ensure_directories(cfg.paths.build_directories)
    return cfg


def _run_validate(cfg: AppConfig, *, strict: bool) -> int:
    report = Validator(cfg).run(strict=strict)
    for line in format_report_lines(report):
        LOGGER.info(line)
    return 0 if report.ok else 1


async def _mount_and_settle(cfg: AppConfig, table: NamingTable) -> tuple[LifecycleState, View, str]:
    component = AtlasComponent(cfg, table)
    component.mount()
    try:
        view = await component.settle()
        html = component.render()
    finally:
        component.unmount()
    return (component.state, view, html)


def _run_build(cfg: AppConfig, *, strict: bool) -> int:
    LOGGER.info("Starting atlas build.")

    report = Validator(cfg).run(strict=strict)
    for line in format_report_lines(report):
        LOGGER.info(line)
    if not report.ok:
        LOGGER.error("Build aborted due to validation errors.")
        return 1

    table = load_naming_table(cfg.paths.naming_table)
    state, view, html = asyncio.run(_mount_and_settle(cfg, table))
    write_text(cfg.paths.output_html, html)
    LOGGER.info("Rendered %s view to %s", view.name, cfg.paths.output_html)

    artifacts = {"output_html": str(cfg.paths.output_html)}
    if cfg.build.write_enriched_geojson and isinstance(state, Ready):
        enriched_path = cfg.paths.build_root / "dwapara_enriched.geojson"
        write_json(enriched_path, state.collection.to_geojson())
        artifacts["enriched_geojson"] = str(enriched_path)
        LOGGER.info("Enriched dataset written to %s", enriched_path)

    if cfg.build.write_manifest:
        manifest = BuildManifest.create(
            config_hash_sha256=sha256_file(cfg.source_path),
            git_commit=detect_git_commit(cfg.source_path.parent),
            lifecycle_state=state.label,
            view=view.name,
            artifacts=artifacts,
        )
        manifest_path = cfg.paths.manifests_dir / "build_manifest.json"
        write_json(manifest_path, manifest.to_dict())
        LOGGER.info("Build manifest written to %s", manifest_path)

    if not isinstance(view, MapView):
        LOGGER.error("Build finished without a map (view=%s).", view.name)
        return 1
    LOGGER.info("Build finished.")
    return 0


def _run_fetch_dataset(cfg: AppConfig, *, force: bool) -> int:
    target = cfg.dataset.local_path
    if target is None:
        LOGGER.error("dataset.location is a URL (%s); nothing to download.", cfg.dataset.location)
        return 1
    try:
        download_admin0_geojson(
            target,
            url=cfg.dataset.download_url,
            force=force,
            timeout_s=cfg.dataset.request_timeout_s or 60.0,
        )
    except (requests.RequestException, ValueError) as exc:
        LOGGER.error("Dataset download failed: %s", exc)
        return 1
    return 0


def _run_inspect(cfg: AppConfig) -> int:
    try:
        table = load_naming_table(cfg.paths.naming_table)
        raw = asyncio.run(source_from_config(cfg.dataset).fetch())
        collection = RegionCollection.from_geojson(raw)
        html_path, json_path = generate_enrichment_report(cfg, collection, table)
    except (DatasetError, ValueError, FileNotFoundError) as exc:
        LOGGER.error("Inspection report failed: %s", exc)
        return 1
    LOGGER.info("Inspection HTML report written to %s", html_path)
    LOGGER.info("Inspection JSON report written to %s", json_path)
    return 0


def _dispatch(args: argparse.Namespace) -> int:
    cfg = _load_and_setup(args)
    command = str(args.command)
    if command == "build":
        return _run_build(cfg, strict=bool(args.strict))
    if command == "validate":
        return _run_validate(cfg, strict=bool(args.strict))
    if command == "fetch-dataset":
        return _run_fetch_dataset(cfg, force=bool(args.force))
    if command == "inspect":
        return _run_inspect(cfg)
    raise ValueError(f"Unknown command: {command}")


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    return _dispatch(args)


if __name__ == "__main__":
    raise SystemExit(main())
