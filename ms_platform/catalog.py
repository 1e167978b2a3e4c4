# ms_platform/catalog.py
# Catalog rows: compatibility enum, immutable entries and reconciliation against the mods folder.
# Copyright (c) 2025-2026 CrossWatch / Cenodude (https://github.com/cenodude/CrossWatch)
from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path
from typing import Any

from _logging import log

from .identity import ARCHIVE_EXTENSIONS, base_identity, is_archive

SLUG_SENTINELS = frozenset({"null", "unset"})

CSV_HEADER: tuple[str, ...] = (
    "filename",
    "slug",
    "modrinth_title",
    "modrinth_project_url",
    "client_side",
    "server_side",
)


class Compat(str, Enum):
    REQUIRED = "required"
    OPTIONAL = "optional"
    UNSUPPORTED = "unsupported"
    UNKNOWN = "unknown"
    NOT_FOUND = "not_found"
    ERROR = "error"

    @classmethod
    def parse(cls, raw: Any) -> "Compat":
        if isinstance(raw, Compat):
            return raw
        s = str(raw or "").strip().lower()
        try:
            return cls(s)
        except ValueError:
            return cls.UNKNOWN

    def __str__(self) -> str:
        return self.value


def slug_is_unset(slug: Any) -> bool:
    s = str(slug or "").strip()
    return not s or s.lower() in SLUG_SENTINELS


@dataclass(frozen=True)
class CatalogEntry:
    filename: str
    slug: str = ""
    title: str = ""
    url: str = ""
    client_side: Compat = Compat.UNKNOWN
    server_side: Compat = Compat.UNKNOWN

    def __post_init__(self) -> None:
        for name in ("filename", "slug", "title", "url"):
            v = getattr(self, name)
            object.__setattr__(self, name, "" if v is None else str(v))
        object.__setattr__(self, "client_side", Compat.parse(self.client_side))
        object.__setattr__(self, "server_side", Compat.parse(self.server_side))

    @classmethod
    def from_row(cls, cols: Sequence[Any]) -> "CatalogEntry":
        vals = [("" if c is None else str(c)) for c in cols]
        vals += [""] * (len(CSV_HEADER) - len(vals))
        return cls(
            filename=vals[0].strip(),
            slug=vals[1].strip(),
            title=vals[2],
            url=vals[3],
            client_side=Compat.parse(vals[4]),
            server_side=Compat.parse(vals[5]),
        )

    def to_row(self) -> list[str]:
        return [
            self.filename,
            self.slug,
            self.title,
            self.url,
            self.client_side.value,
            self.server_side.value,
        ]

    def to_dict(self) -> dict[str, str]:
        return {
            "filename": self.filename,
            "slug": self.slug,
            "title": self.title,
            "url": self.url,
            "client_side": self.client_side.value,
            "server_side": self.server_side.value,
        }

    def with_filename(self, filename: str) -> "CatalogEntry":
        return replace(self, filename=filename)


def entries_from_rows(rows: Iterable[Sequence[Any]]) -> list[CatalogEntry]:
    """Header row already stripped by the caller; blank lines are dropped."""
    out: list[CatalogEntry] = []
    for cols in rows:
        if not cols or not any(str(c or "").strip() for c in cols):
            continue
        out.append(CatalogEntry.from_row(cols))
    return out


# Reconcile

@dataclass(frozen=True)
class ReconcileResult:
    entries: tuple[CatalogEntry, ...]
    updated: int = 0
    added: int = 0

    @property
    def changed(self) -> bool:
        return (self.updated + self.added) > 0


def scan_archives(directory: Path, extensions: Iterable[str] = ARCHIVE_EXTENSIONS) -> list[str]:
    d = Path(directory)
    if not d.is_dir():
        log(f"Mods directory does not exist: {d}", level="WARNING", module="CATALOG")
        return []
    exts = tuple(extensions)
    return sorted(p.name for p in d.iterdir() if p.is_file() and is_archive(p.name, exts))


def reconcile(
    entries: Sequence[CatalogEntry],
    disk_files: Iterable[str],
    extensions: Iterable[str] = ARCHIVE_EXTENSIONS,
) -> ReconcileResult:
    exts = tuple(extensions)
    rows = list(entries)
    by_base: dict[str, int] = {}
    for i, e in enumerate(rows):
        by_base[base_identity(e.filename, exts)] = i

    updated = added = 0
    for filename in sorted(disk_files):
        base = base_identity(filename, exts)
        idx = by_base.get(base)
        if idx is not None:
            if rows[idx].filename != filename:
                log(f"Version bump: {rows[idx].filename} -> {filename}", level="INFO", module="CATALOG")
                rows[idx] = rows[idx].with_filename(filename)
                updated += 1
            continue
        log(f"New mod: {filename}", level="INFO", module="CATALOG")
        rows.append(CatalogEntry(filename=filename))
        by_base[base] = len(rows) - 1
        added += 1

    return ReconcileResult(entries=tuple(rows), updated=updated, added=added)


__all__ = [
    "CSV_HEADER",
    "CatalogEntry",
    "Compat",
    "ReconcileResult",
    "SLUG_SENTINELS",
    "entries_from_rows",
    "reconcile",
    "scan_archives",
    "slug_is_unset",
]
