# ms_platform/enrich.py
# Fan-out/fan-in enrichment of catalog entries against the metadata service.
# Copyright (c) 2025-2026 CrossWatch / Cenodude (https://github.com/cenodude/CrossWatch)
from __future__ import annotations

import threading
from collections.abc import Sequence
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from typing import Any, Protocol

from _logging import log

from .catalog import CatalogEntry

DEFAULT_FANOUT_LIMIT = 32


class EnrichmentError(RuntimeError):
    """The worker pool itself faulted; no partial result is returned."""


class EnrichmentCancelled(EnrichmentError):
    pass


class _Result(Protocol):
    def to_entry(self) -> CatalogEntry: ...


class LookupClient(Protocol):
    def lookup(self, filename: str, slug: str) -> _Result: ...


def _as_entry(row: Any) -> CatalogEntry:
    if isinstance(row, CatalogEntry):
        return row
    return CatalogEntry.from_row(list(row))


def _fanout_limit(client: Any, max_workers: int | None) -> int:
    if max_workers is not None:
        return max(1, int(max_workers))
    return max(1, int(getattr(client, "fanout_limit", DEFAULT_FANOUT_LIMIT) or DEFAULT_FANOUT_LIMIT))


def enrich(
    rows: Sequence[Any],
    client: LookupClient | None = None,
    *,
    max_workers: int | None = None,
    cancel: threading.Event | None = None,
) -> tuple[CatalogEntry, ...]:
    """Look up every row concurrently and return the enriched rows in input order.

    Rows are CatalogEntry objects or raw rows (index 0 filename, index 1 slug).
    Each lookup degrades its own row on failure; siblings are never affected.
    Setting ``cancel`` aborts the batch and discards every partial result.
    """
    entries = [_as_entry(r) for r in rows]
    if not entries:
        return ()
    if client is None:
        from providers.metadata._meta_MODRINTH import ModrinthClient
        client = ModrinthClient()

    workers = min(len(entries), _fanout_limit(client, max_workers))
    log(f"Enriching {len(entries)} rows with {workers} workers", level="INFO", module="ENRICH")

    ex = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="enrich")
    try:
        futs: list[Future[Any]] = [ex.submit(client.lookup, e.filename, e.slug) for e in entries]
        pending: set[Future[Any]] = set(futs)
        while pending:
            if cancel is not None and cancel.is_set():
                for f in pending:
                    f.cancel()
                log("Enrichment cancelled; partial results discarded", level="WARNING", module="ENRICH")
                raise EnrichmentCancelled("enrichment cancelled")
            _, pending = wait(pending, timeout=0.25 if cancel is not None else None, return_when=FIRST_COMPLETED)

        out: list[CatalogEntry] = []
        for e, f in zip(entries, futs):
            try:
                out.append(f.result().to_entry())
            except Exception as exc:
                raise EnrichmentError(f"lookup worker failed for {e.filename}: {exc}") from exc
    finally:
        ex.shutdown(wait=cancel is None or not cancel.is_set(), cancel_futures=True)

    counts: dict[str, int] = {}
    for e in out:
        counts[e.client_side.value] = counts.get(e.client_side.value, 0) + 1
    log(f"Enriched {len(out)} rows (client compat: {counts})", level="SUCCESS", module="ENRICH")
    return tuple(out)


__all__ = ["DEFAULT_FANOUT_LIMIT", "EnrichmentCancelled", "EnrichmentError", "LookupClient", "enrich"]
