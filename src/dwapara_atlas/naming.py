"""Dwaparyug naming table loading and lookup."""

from __future__ import annotations

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterable, Iterator, Mapping

import yaml


_LOGGER = logging.getLogger("dwapara_atlas.naming")


def _require_str(value: Any, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Expected non-empty string for '{field_name}'")
    return value.strip()


class NamingTable:
    """Read-only mapping from canonical modern name to alternate-era name.

    Lookups are exact and case-sensitive. A missing entry is a normal outcome,
    callers fall back to the modern name themselves.
    """

    __slots__ = ("_entries", "_duplicates")

    def __init__(
        self,
        entries: Mapping[str, str],
        *,
        duplicates: Iterable[str] = (),
    ) -> None:
        self._entries: Mapping[str, str] = MappingProxyType(dict(entries))
        self._duplicates: tuple[str, ...] = tuple(duplicates)

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[str, str]]) -> NamingTable:
        """Build a table, collapsing identical duplicates and rejecting conflicts."""
        entries: dict[str, str] = {}
        duplicates: list[str] = []
        for modern, alternate in pairs:
            existing = entries.get(modern)
            if existing is None:
                entries[modern] = alternate
                continue
            if existing != alternate:
                raise ValueError(
                    f"Conflicting naming entries for '{modern}': '{existing}' vs '{alternate}'"
                )
            duplicates.append(modern)
        return cls(entries, duplicates=duplicates)

    def lookup(self, modern_name: str) -> str | None:
        return self._entries.get(modern_name)

    @property
    def duplicates(self) -> tuple[str, ...]:
        """Keys that appeared more than once (with the same value) in the source."""
        return self._duplicates

    def items(self) -> Iterable[tuple[str, str]]:
        return self._entries.items()

    def __contains__(self, modern_name: object) -> bool:
        return modern_name in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"NamingTable({len(self._entries)} entries)"


def load_naming_table(path: Path) -> NamingTable:
    """Load the naming table from a YAML list of `{modern, alternate}` mappings."""
    if not path.exists():
        raise FileNotFoundError(f"Naming table file not found: {path}")
    with path.open("r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh)
    if not isinstance(raw, list):
        raise ValueError(f"Expected list in {path}")

    pairs: list[tuple[str, str]] = []
    for idx, item in enumerate(raw):
        if not isinstance(item, dict):
            raise ValueError(f"Expected mapping at index {idx} in {path}")
        modern = _require_str(item.get("modern"), f"[{idx}].modern")
        alternate = _require_str(item.get("alternate"), f"[{idx}].alternate")
        pairs.append((modern, alternate))

    table = NamingTable.from_pairs(pairs)
    if table.duplicates:
        _LOGGER.warning(
            "Naming table %s repeats %d entries: %s",
            path,
            len(table.duplicates),
            ", ".join(table.duplicates),
        )
    _LOGGER.debug("Loaded %d naming entries from %s", len(table), path)
    return table
