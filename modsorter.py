# /modsorter.py
# ModSorter - Modrinth-aware server/client mod sorter
# Copyright (c) 2025-2026 CrossWatch / Cenodude (https://github.com/cenodude/CrossWatch)
from __future__ import annotations

import argparse
import time
from typing import Any

import uvicorn
from fastapi import FastAPI, Request

from _logging import _debug_enabled, log
from api import register as register_api
from ms_platform.config_base import config_path, load_config, mod_paths

__version__ = "1.2.0"


def create_app() -> FastAPI:
    app = FastAPI(title="ModSorter", version=__version__)

    @app.middleware("http")
    async def error_access_logger(request: Request, call_next: Any) -> Any:
        t0 = time.time()
        response = await call_next(request)
        status = getattr(response, "status_code", 0) or 0
        if status >= 500 or (status >= 400 and _debug_enabled()):
            dt_ms = int((time.time() - t0) * 1000)
            log(f'"{request.method} {request.url.path}" {status} ({dt_ms} ms)', level="WARNING", module="HTTP")
        return response

    @app.get("/healthz")
    def healthz() -> dict[str, Any]:
        return {"ok": True, "version": __version__}

    register_api(app)
    return app


app = create_app()


# Entry point
def main(argv: list[str] | None = None) -> None:
    cfg = load_config()
    srv = cfg.get("server") or {}
    ap = argparse.ArgumentParser(prog="modsorter", description="Sort mods into server and client folders.")
    ap.add_argument("--host", default=str(srv.get("host") or "0.0.0.0"))
    ap.add_argument("--port", type=int, default=int(srv.get("port") or 8788))
    args = ap.parse_args(argv)

    paths = mod_paths(cfg)
    print("\nModSorter running:")
    print(f"  Local:   http://127.0.0.1:{args.port}")
    print(f"  Bind:    {args.host}:{args.port}")
    print(f"  Config:  {config_path()} (JSON)")
    print(f"  Mods:    {paths.mods_dir}")
    print(f"  Catalog: {paths.catalog_csv}\n")

    debug = bool((cfg.get("runtime") or {}).get("debug"))
    uvicorn.run(
        app,
        host=args.host,
        port=args.port,
        log_level=("debug" if debug else "warning"),
        access_log=debug,
    )


if __name__ == "__main__":
    main()
