# ms_platform/catalog_store.py
# Catalog CSV read/write (separator sniffing, sorted atomic writes, file backup).
# Copyright (c) 2025-2026 CrossWatch / Cenodude (https://github.com/cenodude/CrossWatch)
from __future__ import annotations

import csv
import os
import shutil
import uuid
from collections.abc import Iterable
from pathlib import Path

from _logging import log

from .catalog import CSV_HEADER, CatalogEntry

WRITE_SEPARATOR = ";"


class CatalogStoreError(OSError):
    pass


def detect_separator(path: Path) -> str:
    try:
        with Path(path).open("r", encoding="utf-8-sig", newline="") as f:
            header = f.readline()
    except (OSError, ValueError) as e:
        log(f"Failed to detect CSV separator for {path}: {e}", level="WARNING", module="CATALOG")
        raise CatalogStoreError(f"Failed to read catalog: {path}: {e}") from e
    if not header:
        return ","
    if "\t" in header:
        return "\t"
    if ";" in header:
        return ";"
    return ","


def read_rows(path: Path, separator: str | None = None) -> list[list[str]]:
    """All rows including the header; the caller strips it."""
    p = Path(path)
    if not p.exists():
        raise CatalogStoreError(f"Catalog file could not be found: {p}")
    sep = separator or detect_separator(p)
    try:
        with p.open("r", encoding="utf-8-sig", newline="") as f:
            rows = [row for row in csv.reader(f, delimiter=sep)]
    except (OSError, ValueError, csv.Error) as e:
        log(f"Error reading catalog {p}: {e}", level="ERROR", module="CATALOG")
        raise CatalogStoreError(f"Failed to read catalog: {p}: {e}") from e
    log(f"Read {len(rows)} rows from {p}", level="INFO", module="CATALOG")
    return rows


def strip_header(rows: list[list[str]]) -> list[list[str]]:
    return rows[1:] if rows else []


def write_catalog(path: Path, entries: Iterable[CatalogEntry]) -> int:
    p = Path(path)
    ordered = sorted(entries, key=lambda e: e.filename.casefold())
    tmp = p.with_name(p.name + f".tmp.{uuid.uuid4().hex[:8]}")
    try:
        p.parent.mkdir(parents=True, exist_ok=True)
        with tmp.open("w", encoding="utf-8", newline="") as f:
            w = csv.writer(f, delimiter=WRITE_SEPARATOR, lineterminator="\n")
            w.writerow(CSV_HEADER)
            for e in ordered:
                w.writerow(e.to_row())
        os.replace(tmp, p)
    except OSError as e:
        tmp.unlink(missing_ok=True)
        log(f"Error writing catalog {p}: {e}", level="ERROR", module="CATALOG")
        raise CatalogStoreError(f"Failed to write catalog: {p}: {e}") from e
    log(f"Wrote {len(ordered)} mods to {p}", level="INFO", module="CATALOG")
    return len(ordered)


def backup_file(source: Path, backup: Path) -> None:
    try:
        Path(backup).parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(source, backup)
    except OSError as e:
        log(f"Failed to create backup: {source} -> {backup}: {e}", level="ERROR", module="CATALOG")
        raise CatalogStoreError(f"Failed to back up catalog: {source}: {e}") from e
    log(f"Backup created: {backup}", level="INFO", module="CATALOG")


__all__ = [
    "CatalogStoreError",
    "WRITE_SEPARATOR",
    "backup_file",
    "detect_separator",
    "read_rows",
    "strip_header",
    "write_catalog",
]
