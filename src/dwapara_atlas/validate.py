"""Validation layer for config, naming table, and dataset inputs."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Iterable

from .config import AppConfig
from .inspect_report import summarize_enrichment
from .models import RegionCollection
from .naming import NamingTable, load_naming_table


@dataclass(slots=True)
class ValidationReport:
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    infos: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def add_error(self, msg: str) -> None:
        self.errors.append(msg)

    def add_warning(self, msg: str) -> None:
        self.warnings.append(msg)

    def add_info(self, msg: str) -> None:
        self.infos.append(msg)


class Validator:
    """Top-level input validator."""

    def __init__(self, cfg: AppConfig) -> None:
        self.cfg = cfg

    def run(self, *, strict: bool = False) -> ValidationReport:
        report = ValidationReport()
        table = self._validate_naming_table(report, strict=strict)
        self._validate_dataset(report, table=table, strict=strict)
        self._validate_map_view(report)
        return report

    def _validate_naming_table(self, report: ValidationReport, *, strict: bool) -> NamingTable | None:
        path = self.cfg.paths.naming_table
        try:
            table = load_naming_table(path)
        except Exception as exc:
            report.add_error(f"Failed loading naming table '{path}': {exc}")
            return None
        if len(table) == 0:
            report.add_error(f"Naming table is empty: {path}")
            return table
        report.add_info(f"Loaded {len(table)} naming entries from {path}")

        if table.duplicates:
            msg = "Naming table repeats entries (identical values, first kept): " + _format_name_list(
                list(table.duplicates)
            )
            if strict:
                report.add_error(msg)
            else:
                report.add_warning(msg)

        identity = sorted(modern for modern, alternate in table.items() if modern == alternate)
        if identity:
            report.add_warning("Naming entries map to themselves: " + _format_name_list(identity))
        return table

    def _validate_dataset(
        self,
        report: ValidationReport,
        *,
        table: NamingTable | None,
        strict: bool,
    ) -> None:
        dataset = self.cfg.dataset
        if dataset.is_remote:
            report.add_info(f"Dataset is remote ({dataset.location}); skipping local checks.")
            return

        path = dataset.local_path
        if path is None or not path.exists():
            msg = f"Dataset file not found: {dataset.location} (run `fetch-dataset`)"
            if strict:
                report.add_error(msg)
            else:
                report.add_warning(msg)
            return

        try:
            collection = RegionCollection.from_geojson(json.loads(path.read_text(encoding="utf-8")))
        except (OSError, ValueError) as exc:
            report.add_error(f"Dataset {path} is not a usable FeatureCollection: {exc}")
            return
        report.add_info(f"Dataset {path} holds {len(collection)} regions")

        if table is not None:
            summary = summarize_enrichment(collection, table)
            report.add_info(
                "Enrichment coverage: "
                f"mapped={summary.mapped_count}, "
                f"unmapped={summary.unmapped_count}, "
                f"unknown={summary.unknown_count}"
            )
            if summary.unused_entries:
                report.add_warning(
                    "Naming entries with no matching region: "
                    + _format_name_list(list(summary.unused_entries))
                )

    def _validate_map_view(self, report: ValidationReport) -> None:
        view = self.cfg.map
        report.add_info(
            f"Initial view: center={view.center}, zoom={view.zoom} "
            f"(bounds {view.min_zoom}..{view.max_zoom})"
        )
        if "{z}" not in self.cfg.tiles.url:
            report.add_error("tiles.url must contain a '{z}' placeholder")


def _format_name_list(values: list[str], limit: int = 12) -> str:
    if len(values) <= limit:
        return ", ".join(values)
    shown = ", ".join(values[:limit])
    return f"{shown}, ... (+{len(values) - limit} more)"


def format_report_lines(report: ValidationReport) -> Iterable[str]:
    if report.infos:
        for info in report.infos:
            yield f"[INFO] {info}"
    if report.warnings:
        for warning in report.warnings:
            yield f"[WARN] {warning}"
    if report.errors:
        for error in report.errors:
            yield f"[ERROR] {error}"
    if report.ok:
        yield "[OK] Validation passed."
