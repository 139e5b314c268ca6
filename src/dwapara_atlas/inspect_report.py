"""Enrichment coverage report for debugging the naming table against a dataset."""

from __future__ import annotations

from dataclasses import dataclass
from html import escape
from pathlib import Path
from typing import Any

from .config import AppConfig
from .enrich import UNKNOWN_REALM, enrich_collection
from .models import RegionCollection
from .naming import NamingTable
from .util import write_json, write_text


@dataclass(frozen=True, slots=True)
class EnrichmentSummary:
    rows: tuple[dict[str, Any], ...]
    mapped_count: int
    unmapped_count: int
    unknown_count: int
    unmapped_names: tuple[str, ...]
    unused_entries: tuple[str, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "mapped_count": self.mapped_count,
            "unmapped_count": self.unmapped_count,
            "unknown_count": self.unknown_count,
            "unmapped_names": list(self.unmapped_names),
            "unused_entries": list(self.unused_entries),
        }


def summarize_enrichment(collection: RegionCollection, table: NamingTable) -> EnrichmentSummary:
    """Classify every region as mapped, unmapped, or unknown after enrichment."""
    enriched = enrich_collection(collection, table)
    rows: list[dict[str, Any]] = []
    used: set[str] = set()
    unmapped: set[str] = set()
    mapped_count = 0
    unknown_count = 0
    for idx, feature in enumerate(enriched.features):
        modern = feature.modern_name or UNKNOWN_REALM
        alternate = feature.alternate_name or modern
        if modern == UNKNOWN_REALM:
            status = "unknown"
            unknown_count += 1
        elif modern in table:
            status = "mapped"
            mapped_count += 1
            used.add(modern)
        else:
            status = "unmapped"
            unmapped.add(modern)
        rows.append(
            {
                "index": idx,
                "modern_name": modern,
                "alternate_name": alternate,
                "status": status,
            }
        )

    return EnrichmentSummary(
        rows=tuple(rows),
        mapped_count=mapped_count,
        unmapped_count=len(rows) - mapped_count - unknown_count,
        unknown_count=unknown_count,
        unmapped_names=tuple(sorted(unmapped)),
        unused_entries=tuple(sorted(name for name in table if name not in used)),
    )


def generate_enrichment_report(
    cfg: AppConfig,
    collection: RegionCollection,
    table: NamingTable,
) -> tuple[Path, Path]:
    """Write the JSON + HTML coverage report and return their paths."""
    summary = summarize_enrichment(collection, table)
    payload = {
        "meta": {
            "dataset": cfg.dataset.location,
            "naming_table": str(cfg.paths.naming_table),
            "regions_total": len(collection),
            "naming_entries": len(table),
            "naming_duplicates": list(table.duplicates),
        },
        "summary": summary.to_dict(),
        "regions": list(summary.rows),
    }

    json_path = cfg.paths.manifests_dir / "enrichment_report.json"
    html_path = cfg.paths.output_html.parent / "inspect.html"
    write_json(json_path, payload)
    write_text(html_path, _render_html(payload))
    return (html_path, json_path)


def _render_html(payload: dict[str, Any]) -> str:
    summary = payload["summary"]
    rows: list[str] = []
    for row in payload["regions"]:
        rows.append(
            "\n".join(
                [
                    f"    <tr class='{escape(row['status'])}'>",
                    f"      <td>{row['index']}</td>",
                    f"      <td>{escape(row['modern_name'])}</td>",
                    f"      <td>{escape(row['alternate_name'])}</td>",
                    f"      <td>{escape(row['status'])}</td>",
                    "    </tr>",
                ]
            )
        )
    unused = ", ".join(escape(name) for name in summary["unused_entries"]) or "none"

    return "\n".join(
        [
            "<!doctype html>",
            "<html lang='en'>",
            "<head>",
            "  <meta charset='utf-8'>",
            "  <title>Dwapara atlas enrichment report</title>",
            "  <style>",
            "    body { font-family: Arial, sans-serif; margin: 16px; }",
            "    table { border-collapse: collapse; }",
            "    td, th { border: 1px solid #ddd; padding: 4px 8px; font-size: 13px; }",
            "    tr.mapped td:last-child { color: #197a2f; }",
            "    tr.unmapped td:last-child { color: #99610f; }",
            "    tr.unknown td:last-child { color: #b22d2d; }",
            "  </style>",
            "</head>",
            "<body>",
            "  <h1>Enrichment coverage</h1>",
            (
                f"  <p>mapped={summary['mapped_count']}, "
                f"unmapped={summary['unmapped_count']}, "
                f"unknown={summary['unknown_count']}</p>"
            ),
            f"  <p>Unused naming entries: {unused}</p>",
            "  <table>",
            "    <tr><th>#</th><th>Modern</th><th>Dwaparyug</th><th>Status</th></tr>",
            *rows,
            "  </table>",
            "</body>",
            "</html>",
            "",
        ]
    )
