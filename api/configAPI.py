# api/configAPI.py
# ModSorter - configuration API
# Copyright (c) 2025-2026 CrossWatch / Cenodude (https://github.com/cenodude/CrossWatch)
from __future__ import annotations

import os
from typing import Any

from fastapi import APIRouter, Body
from fastapi.responses import JSONResponse

from _logging import log
from ms_platform import config_base
from ms_platform.config_base import load_config, save_config

router = APIRouter(prefix="/api", tags=["config"])

_PATH_KEYS = tuple(config_base.DEFAULT_CFG["paths"].keys())


def _nostore(res: JSONResponse) -> JSONResponse:
    res.headers["Cache-Control"] = "no-store"
    return res


@router.get("/config")
def api_config() -> JSONResponse:
    return _nostore(JSONResponse(load_config()))


@router.post("/config")
def api_config_save(payload: dict[str, Any] = Body(...)) -> dict[str, Any]:
    merged = config_base._deep_merge(load_config(), dict(payload or {}))

    # store paths with forward slashes like the settings dialog shows them
    paths = merged.get("paths")
    if isinstance(paths, dict):
        for k in _PATH_KEYS:
            v = paths.get(k)
            if isinstance(v, str) and v.strip():
                paths[k] = v.strip().replace("\\", "/")

    save_config(merged)
    if not os.getenv("MS_LOG_LEVEL"):
        log.set_level(str((merged.get("runtime") or {}).get("log_level") or "info"))
    log(f"Saved configuration to {config_base.config_path()}", level="INFO", module="CONFIG")
    return {"ok": True}
