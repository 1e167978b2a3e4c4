# ms_platform/config_base.py
# ModSorter - configuration (config.json) with defaults, deep merge and path helpers
# Copyright (c) 2025-2026 CrossWatch / Cenodude (https://github.com/cenodude/CrossWatch)
from __future__ import annotations

import copy
import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Tuple

# ------------------------------------------------------------
# Base dir resolution
# ------------------------------------------------------------
def CONFIG_BASE() -> Path:
    """
    Determine the base directory for config.json and relative paths.

    Priority:
      1) $CONFIG_BASE if set
      2) /config (when running in a container that mounts /config)
      3) Project root (one level up from this file)
    """
    env = os.getenv("CONFIG_BASE")
    if env:
        return Path(env)

    if Path("/app").exists():
        return Path("/config")

    return Path(__file__).resolve().parents[1]


# Default config structure
DEFAULT_CFG: Dict[str, Any] = {
    # --- Paths (relative entries resolve against CONFIG_BASE) ---------------
    "paths": {
        "mods_dir": "./mods",                           # Source directory with all installed mod archives
        "server_output_dir": "./server_mods",           # Server target (recreated on prepare)
        "client_output_dir": "./client_mods",           # Client target (recreated on prepare)
        "server_backup_dir": "./server_mods_backup",    # Single-generation backup of the server target
        "client_backup_dir": "./client_mods_backup",    # Single-generation backup of the client target
        "catalog_csv": "modlist.csv",                   # Catalog (filename;slug;title;url;client_side;server_side)
        "catalog_csv_backup": "modlist.csv.bak",        # Copy taken before every save
    },

    # --- Files ---------------------------------------------------------------
    "files": {
        "extensions": [".jar"],                         # Archive extensions considered mods (case-insensitive)
        "reserved_dir": ".connector",                   # Subtree inside each target that is never deleted
    },

    # --- Modrinth ------------------------------------------------------------
    "modrinth": {
        "api_base": "https://api.modrinth.com/v2",
        "site_base": "https://modrinth.com",
        "user_agent": "ModSorter/1.2",
        "timeout": 15,                                  # Per-request timeout (seconds)
        "fanout_limit": 32,                             # Max concurrent lookups per enrichment batch
    },

    # --- Runtime / Diagnostics ----------------------------------------------
    "runtime": {
        "debug": False,                                 # Enables DEBUG log lines
        "log_level": "info",
    },

    # --- HTTP server ---------------------------------------------------------
    "server": {
        "host": "0.0.0.0",
        "port": 8788,
    },
}


# ------------------------------------------------------------
# Helpers: paths, IO, merging
# ------------------------------------------------------------
def _cfg_file() -> Path:
    return CONFIG_BASE() / "config.json"

def config_path() -> Path:
    return _cfg_file()


def _read_json(p: Path) -> Dict[str, Any]:
    with p.open("r", encoding="utf-8") as f:
        return json.load(f)


def _write_json_atomic(p: Path, data: Mapping[str, Any]) -> None:
    p.parent.mkdir(parents=True, exist_ok=True)
    import secrets, threading, time
    suffix = f".{time.time_ns()}.{os.getpid()}.{threading.get_ident()}.{secrets.token_hex(4)}.tmp"
    tmp = p.with_suffix(suffix)

    with tmp.open("w", encoding="utf-8", newline="\n") as f:
        json.dump(dict(data), f, indent=2, ensure_ascii=False)
        f.write("\n")
    tmp.replace(p)


def _deep_merge(base: Dict[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    out = copy.deepcopy(base)
    for k, v in (override or {}).items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out


def normalize_path(path: str | os.PathLike[str], base: Path | None = None) -> Path:
    """Backslashes to '/', '~' expanded, relative paths anchored at the config base, '..' folded."""
    raw = str(path).strip().replace("\\", "/")
    p = Path(os.path.expanduser(raw))
    if not p.is_absolute():
        p = (base or CONFIG_BASE()) / p
    return Path(os.path.normpath(str(p)))


def _norm_extensions(exts: Any) -> Tuple[str, ...]:
    if isinstance(exts, str):
        exts = [exts]
    out: list[str] = []
    for e in exts or []:
        s = str(e).strip().lower()
        if not s:
            continue
        if not s.startswith("."):
            s = "." + s
        if s not in out:
            out.append(s)
    return tuple(out) or (".jar",)


@dataclass(frozen=True)
class ModPaths:
    mods_dir: Path
    server_output_dir: Path
    client_output_dir: Path
    server_backup_dir: Path
    client_backup_dir: Path
    catalog_csv: Path
    catalog_csv_backup: Path
    extensions: Tuple[str, ...] = (".jar",)
    reserved_dir: str = ".connector"


def mod_paths(cfg: Mapping[str, Any]) -> ModPaths:
    paths = dict(DEFAULT_CFG["paths"]); paths.update(cfg.get("paths") or {})
    files = dict(DEFAULT_CFG["files"]); files.update(cfg.get("files") or {})
    return ModPaths(
        mods_dir=normalize_path(paths["mods_dir"]),
        server_output_dir=normalize_path(paths["server_output_dir"]),
        client_output_dir=normalize_path(paths["client_output_dir"]),
        server_backup_dir=normalize_path(paths["server_backup_dir"]),
        client_backup_dir=normalize_path(paths["client_backup_dir"]),
        catalog_csv=normalize_path(paths["catalog_csv"]),
        catalog_csv_backup=normalize_path(paths["catalog_csv_backup"]),
        extensions=_norm_extensions(files.get("extensions")),
        reserved_dir=str(files.get("reserved_dir") or ".connector").strip() or ".connector",
    )


# ------------------------------------------------------------
# Public API
# ------------------------------------------------------------
def load_config() -> Dict[str, Any]:
    """Read config.json merged over DEFAULT_CFG; a missing or corrupt file yields the defaults."""
    p = _cfg_file()
    user_cfg: Dict[str, Any] = {}
    if p.exists():
        try:
            user_cfg = _read_json(p)
        except (OSError, ValueError):
            user_cfg = {}
        if not isinstance(user_cfg, dict):
            user_cfg = {}
    return _deep_merge(DEFAULT_CFG, user_cfg)


def save_config(cfg: Mapping[str, Any]) -> None:
    _write_json_atomic(_cfg_file(), cfg)


__all__ = [
    "CONFIG_BASE",
    "DEFAULT_CFG",
    "ModPaths",
    "config_path",
    "load_config",
    "save_config",
    "mod_paths",
    "normalize_path",
]
