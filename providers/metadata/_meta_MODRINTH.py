# providers/metadata/_meta_MODRINTH.py
# ModSorter - Modrinth project lookup (title + client/server compatibility)
# Copyright (c) 2025-2026 CrossWatch / Cenodude (https://github.com/cenodude/CrossWatch)
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Literal
from urllib.parse import quote

import requests

from _logging import log
from ms_platform.catalog import CatalogEntry, Compat, slug_is_unset
from ms_platform.config_base import DEFAULT_CFG

LookupStatus = Literal["ok", "skipped", "not_found", "error"]


@dataclass(frozen=True)
class LookupResult:
    filename: str
    slug: str
    status: LookupStatus
    title: str = ""
    url: str = ""
    client_side: Compat = Compat.UNKNOWN
    server_side: Compat = Compat.UNKNOWN

    @classmethod
    def degraded(cls, filename: str, slug: str, status: LookupStatus) -> "LookupResult":
        compat = Compat.ERROR if status == "error" else Compat.NOT_FOUND
        return cls(filename, slug, status, client_side=compat, server_side=compat)

    def to_entry(self) -> CatalogEntry:
        return CatalogEntry(
            filename=self.filename,
            slug=self.slug,
            title=self.title,
            url=self.url,
            client_side=self.client_side,
            server_side=self.server_side,
        )


class ModrinthClient:
    name = "MODRINTH"

    def __init__(self, cfg: Mapping[str, Any] | None = None) -> None:
        md = dict(DEFAULT_CFG["modrinth"])
        md.update(((cfg or {}).get("modrinth") or {}))
        self.api_base = str(md.get("api_base") or "").rstrip("/")
        self.site_base = str(md.get("site_base") or "").rstrip("/")
        self.user_agent = str(md.get("user_agent") or "ModSorter/1.2")
        try:
            self.timeout = max(1.0, float(md.get("timeout", 15)))
        except (TypeError, ValueError):
            self.timeout = 15.0
        try:
            self.fanout_limit = max(1, int(md.get("fanout_limit", 32)))
        except (TypeError, ValueError):
            self.fanout_limit = 32

    def project_url(self, slug: str) -> str:
        return f"{self.site_base}/mod/{slug}"

    def lookup(self, filename: str, slug: str) -> LookupResult:
        """One GET per row; never raises, failures degrade this row only."""
        slug = str(slug or "")
        if slug_is_unset(slug):
            log(f"[{filename}] No valid slug, skipping lookup", level="INFO", module="MODRINTH")
            return LookupResult.degraded(filename, slug, "skipped")

        key = slug.strip()
        url = f"{self.api_base}/project/{quote(key, safe='')}"
        log(f"[{filename}] GET {url}", level="DEBUG", module="MODRINTH")
        try:
            r = requests.get(
                url,
                headers={"User-Agent": self.user_agent, "Accept": "application/json"},
                timeout=self.timeout,
            )
        except requests.exceptions.ConnectionError as e:
            log(f"[{filename}] Connection failed for {key}: {e}", level="WARNING", module="MODRINTH")
            return LookupResult.degraded(filename, slug, "error")
        except requests.exceptions.Timeout:
            log(f"[{filename}] Request for {key} timed out after {self.timeout:g}s", level="WARNING", module="MODRINTH")
            return LookupResult.degraded(filename, slug, "error")
        except requests.exceptions.RequestException as e:
            log(f"[{filename}] Request for {key} failed: {e}", level="WARNING", module="MODRINTH")
            return LookupResult.degraded(filename, slug, "error")

        status = r.status_code
        if status == 404:
            log(f"[{filename}] Slug '{key}' not found on Modrinth (404)", level="INFO", module="MODRINTH")
            return LookupResult.degraded(filename, slug, "not_found")
        if status != 200:
            log(f"[{filename}] Lookup for {key} failed with status {status}", level="WARNING", module="MODRINTH")
            return LookupResult.degraded(filename, slug, "error")

        try:
            data = r.json()
        except ValueError:
            data = None
        if not isinstance(data, dict):
            log(f"[{filename}] Malformed response for {key}", level="WARNING", module="MODRINTH")
            return LookupResult.degraded(filename, slug, "error")

        client_side = Compat.parse(data.get("client_side"))
        server_side = Compat.parse(data.get("server_side"))
        log(f"[{filename}] {key}: {client_side}/{server_side}", level="INFO", module="MODRINTH")
        return LookupResult(
            filename=filename,
            slug=slug,
            status="ok",
            title=str(data.get("title") or ""),
            url=self.project_url(key),
            client_side=client_side,
            server_side=server_side,
        )


__all__ = ["LookupResult", "LookupStatus", "ModrinthClient"]
