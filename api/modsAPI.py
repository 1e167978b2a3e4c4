# api/modsAPI.py
# ModSorter - catalog operations over HTTP
# Copyright (c) 2025-2026 CrossWatch / Cenodude (https://github.com/cenodude/CrossWatch)
from __future__ import annotations

from typing import Any, Callable

from fastapi import APIRouter, Body
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from _logging import log
from ms_platform.catalog import CatalogEntry
from ms_platform.config_base import load_config
from services import mods as svc

router = APIRouter(prefix="/api/mods", tags=["mods"])


class ModEntryIn(BaseModel):
    filename: str
    slug: str = ""
    title: str = ""
    url: str = ""
    client_side: str = "unknown"
    server_side: str = "unknown"

    def to_entry(self) -> CatalogEntry:
        return CatalogEntry(
            filename=self.filename.strip(),
            slug=self.slug.strip(),
            title=self.title,
            url=self.url,
            client_side=self.client_side,
            server_side=self.server_side,
        )


def _nostore(res: JSONResponse) -> JSONResponse:
    res.headers["Cache-Control"] = "no-store"
    return res


def _run(op: str, fn: Callable[[], svc.OperationResult]) -> JSONResponse:
    try:
        result = fn()
    except svc.OperationInProgress as e:
        return _nostore(JSONResponse({"ok": False, "error": str(e), "running": svc.is_running()}, status_code=409))
    except Exception as e:
        log(f"{op} failed: {e}", level="ERROR", module="MODS")
        return _nostore(JSONResponse({"ok": False, "error": f"{op} failed: {e}"}, status_code=500))
    return _nostore(JSONResponse(result.to_dict()))


@router.get("")
def api_mods() -> JSONResponse:
    return _run("load", lambda: svc.load_catalog(load_config()))


@router.get("/status")
def api_mods_status() -> dict[str, Any]:
    running = svc.is_running()
    return {"running": bool(running), "operation": running}


@router.post("/reload")
def api_mods_reload() -> JSONResponse:
    return _run("reload", lambda: svc.reload_catalog(load_config()))


@router.post("/enrich")
def api_mods_enrich() -> JSONResponse:
    return _run("enrich", lambda: svc.enrich_catalog(load_config()))


@router.post("/prepare")
def api_mods_prepare() -> JSONResponse:
    return _run("prepare", lambda: svc.prepare_targets(load_config()))


@router.post("/save")
def api_mods_save(payload: list[ModEntryIn] = Body(...)) -> JSONResponse:
    entries = [m.to_entry() for m in payload if m.filename.strip()]
    return _run("save", lambda: svc.save_catalog(load_config(), entries))
