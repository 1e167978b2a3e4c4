# ModSorter test scripts
from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Any

import pytest

os.environ.setdefault("MS_LOG_LEVEL", "off")

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

API_BASE = "https://api.modrinth.test/v2"
SITE_BASE = "https://modrinth.test"


@pytest.fixture()
def config_base(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.setenv("CONFIG_BASE", str(tmp_path))
    return tmp_path


@pytest.fixture()
def mods_cfg(tmp_path: Path) -> dict[str, Any]:
    (tmp_path / "mods").mkdir()
    return {
        "paths": {
            "mods_dir": str(tmp_path / "mods"),
            "server_output_dir": str(tmp_path / "server_mods"),
            "client_output_dir": str(tmp_path / "client_mods"),
            "server_backup_dir": str(tmp_path / "server_mods_backup"),
            "client_backup_dir": str(tmp_path / "client_mods_backup"),
            "catalog_csv": str(tmp_path / "modlist.csv"),
            "catalog_csv_backup": str(tmp_path / "modlist.csv.bak"),
        },
        "modrinth": {"api_base": API_BASE, "site_base": SITE_BASE, "timeout": 2},
    }


def write_jars(directory: Path, *names: str) -> None:
    directory.mkdir(parents=True, exist_ok=True)
    for n in names:
        (directory / n).write_bytes(f"jar:{n}".encode("utf-8"))
