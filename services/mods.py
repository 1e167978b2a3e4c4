# services/mods.py
# ModSorter - catalog operations (load, reload, enrich, prepare, save)
# Copyright (c) 2025-2026 CrossWatch / Cenodude (https://github.com/cenodude/CrossWatch)
from __future__ import annotations

import threading
from collections.abc import Iterable, Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any

from _logging import log
from ms_platform.catalog import CatalogEntry, entries_from_rows, reconcile, scan_archives
from ms_platform.catalog_store import (
    CatalogStoreError,
    backup_file,
    read_rows,
    strip_header,
    write_catalog,
)
from ms_platform.config_base import ModPaths, mod_paths
from ms_platform.dir_replace import copy_allowed, prepare_directory
from ms_platform.enrich import LookupClient, enrich
from ms_platform.planner import plan_distribution
from providers.metadata._meta_MODRINTH import ModrinthClient

_OP_LOCK = threading.Lock()
_OP_NAME: str | None = None


class OperationInProgress(RuntimeError):
    pass


@dataclass(frozen=True)
class OperationResult:
    entries: tuple[CatalogEntry, ...] = ()
    message: str = ""
    counts: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": True,
            "message": self.message,
            "counts": dict(self.counts),
            "count": len(self.entries),
            "mods": [e.to_dict() for e in self.entries],
        }


def is_running() -> str | None:
    return _OP_NAME if _OP_LOCK.locked() else None


@contextmanager
def _exclusive(name: str) -> Iterator[None]:
    global _OP_NAME
    if not _OP_LOCK.acquire(blocking=False):
        raise OperationInProgress(f"'{_OP_NAME}' is already running")
    _OP_NAME = name
    try:
        yield
    finally:
        _OP_NAME = None
        _OP_LOCK.release()


def _client(cfg: Mapping[str, Any], client: LookupClient | None) -> LookupClient:
    return client if client is not None else ModrinthClient(cfg)


def _read_entries(paths: ModPaths, *, missing_ok: bool = False) -> list[CatalogEntry]:
    if missing_ok and not paths.catalog_csv.exists():
        log(f"No catalog at {paths.catalog_csv}; starting empty", level="INFO", module="MODS")
        return []
    return entries_from_rows(strip_header(read_rows(paths.catalog_csv)))


def load_catalog(cfg: Mapping[str, Any]) -> OperationResult:
    paths = mod_paths(cfg)
    entries = tuple(_read_entries(paths, missing_ok=True))
    return OperationResult(entries, f"Loaded {len(entries)} mods")


def reload_catalog(cfg: Mapping[str, Any], client: LookupClient | None = None) -> OperationResult:
    """Pick up version bumps and new archives from the mods folder, then enrich."""
    paths = mod_paths(cfg)
    with _exclusive("reload"):
        rows = _read_entries(paths, missing_ok=True)
        rec = reconcile(rows, scan_archives(paths.mods_dir, paths.extensions), paths.extensions)
        enriched = enrich(rec.entries, _client(cfg, client))
        if rec.changed:
            write_catalog(paths.catalog_csv, enriched)
            msg = f"Updated {rec.updated} mods, added {rec.added} new mods"
        else:
            msg = f"Loaded {len(enriched)} mods"
        log(msg, level="SUCCESS", module="MODS")
        return OperationResult(enriched, msg, {"updated": rec.updated, "added": rec.added})


def enrich_catalog(cfg: Mapping[str, Any], client: LookupClient | None = None) -> OperationResult:
    paths = mod_paths(cfg)
    with _exclusive("enrich"):
        enriched = enrich(_read_entries(paths), _client(cfg, client))
        write_catalog(paths.catalog_csv, enriched)
        msg = f"Enriched {len(enriched)} mods with Modrinth data"
        log(msg, level="SUCCESS", module="MODS")
        return OperationResult(enriched, msg, _compat_counts(enriched))


def prepare_targets(cfg: Mapping[str, Any], client: LookupClient | None = None) -> OperationResult:
    """Enrich, plan, then rebuild the server and client folders from the mods folder.

    The server folder is prepared and repopulated before the client folder is
    touched, so a client-side failure leaves a complete server folder behind.
    """
    paths = mod_paths(cfg)
    with _exclusive("prepare"):
        enriched = enrich(_read_entries(paths), _client(cfg, client))
        allow = plan_distribution(enriched)

        prepare_directory(paths.server_output_dir, paths.server_backup_dir, paths.reserved_dir)
        server = copy_allowed(allow.server, paths.mods_dir, paths.server_output_dir, paths.extensions)

        prepare_directory(paths.client_output_dir, paths.client_backup_dir, paths.reserved_dir)
        client_rep = copy_allowed(allow.client, paths.mods_dir, paths.client_output_dir, paths.extensions)

        counts = {
            "server": server.copied,
            "client": client_rep.copied,
            "server_allowed": len(allow.server),
            "client_allowed": len(allow.client),
            "matched": server.matched,
        }
        msg = f"Prepared {server.copied} server mods and {client_rep.copied} client mods"
        log(msg, level="SUCCESS", module="MODS")
        return OperationResult(enriched, msg, counts)


def save_catalog(cfg: Mapping[str, Any], entries: Iterable[CatalogEntry]) -> OperationResult:
    paths = mod_paths(cfg)
    snapshot = tuple(entries)
    with _exclusive("save"):
        if paths.catalog_csv.exists():
            try:
                backup_file(paths.catalog_csv, paths.catalog_csv_backup)
            except CatalogStoreError as e:
                log(f"Continuing without backup: {e}", level="WARNING", module="MODS")
        write_catalog(paths.catalog_csv, snapshot)
        return OperationResult(snapshot, f"Saved {len(snapshot)} mods")


def _compat_counts(entries: Iterable[CatalogEntry]) -> dict[str, int]:
    out: dict[str, int] = {}
    for e in entries:
        for k in (f"client_{e.client_side.value}", f"server_{e.server_side.value}"):
            out[k] = out.get(k, 0) + 1
    return out


__all__ = [
    "OperationInProgress",
    "OperationResult",
    "enrich_catalog",
    "is_running",
    "load_catalog",
    "prepare_targets",
    "reload_catalog",
    "save_catalog",
]
