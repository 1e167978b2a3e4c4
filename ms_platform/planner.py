# ms_platform/planner.py
# Server/client allow-sets from enriched compatibility flags.
# Copyright (c) 2025-2026 CrossWatch / Cenodude (https://github.com/cenodude/CrossWatch)
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from _logging import log

from .catalog import CatalogEntry, Compat

_SHIPS: frozenset[Compat] = frozenset({Compat.REQUIRED, Compat.OPTIONAL})


@dataclass(frozen=True)
class AllowSets:
    server: frozenset[str]
    client: frozenset[str]

    def counts(self) -> dict[str, int]:
        return {"server": len(self.server), "client": len(self.client)}


def ships(compat: Compat) -> bool:
    return compat in _SHIPS


def plan_distribution(entries: Iterable[CatalogEntry]) -> AllowSets:
    # not_found on either side ships everywhere; error/unknown/unsupported ship nowhere on their own
    server: set[str] = set()
    client: set[str] = set()
    for e in entries:
        if ships(e.server_side):
            server.add(e.filename)
        if ships(e.client_side):
            client.add(e.filename)
        if Compat.NOT_FOUND in (e.server_side, e.client_side):
            server.add(e.filename)
            client.add(e.filename)
    plan = AllowSets(server=frozenset(server), client=frozenset(client))
    log(f"Planned {len(plan.server)} server / {len(plan.client)} client mods", level="INFO", module="PLAN")
    return plan


__all__ = ["AllowSets", "plan_distribution", "ships"]
