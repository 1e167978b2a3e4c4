# ModSorter test scripts
from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
from fastapi.testclient import TestClient

from conftest import write_jars


@pytest.fixture()
def client(config_base: Path, mods_cfg: dict[str, Any]) -> TestClient:
    (config_base / "config.json").write_text(json.dumps(mods_cfg), encoding="utf-8")
    from modsorter import create_app

    return TestClient(create_app())


def test_reload_prepare_and_save_over_http(client: TestClient, mods_cfg: dict[str, Any]) -> None:
    paths = mods_cfg["paths"]
    write_jars(Path(paths["mods_dir"]), "a-1.0.jar", "b-2.0.jar")

    r = client.post("/api/mods/reload")
    assert r.status_code == 200
    data = r.json()
    assert data["ok"] is True
    assert data["counts"] == {"updated": 0, "added": 2}
    assert [m["client_side"] for m in data["mods"]] == ["not_found", "not_found"]

    r = client.post("/api/mods/prepare")
    assert r.status_code == 200
    assert r.json()["counts"]["server"] == 2
    assert sorted(p.name for p in Path(paths["client_output_dir"]).iterdir()) == ["a-1.0.jar", "b-2.0.jar"]

    r = client.post("/api/mods/save", json=[{"filename": "a-1.0.jar", "slug": "null"}])
    assert r.status_code == 200
    listed = client.get("/api/mods").json()
    assert [(m["filename"], m["slug"]) for m in listed["mods"]] == [("a-1.0.jar", "null")]


def test_failures_surface_as_errors(client: TestClient) -> None:
    r = client.post("/api/mods/enrich")
    assert r.status_code == 500
    body = r.json()
    assert body["ok"] is False
    assert "enrich failed" in body["error"]


def test_busy_returns_409(client: TestClient) -> None:
    from services import mods as svc

    with svc._exclusive("prepare"):
        r = client.post("/api/mods/prepare")
        assert r.status_code == 409
        assert client.get("/api/mods/status").json() == {"running": True, "operation": "prepare"}


def test_config_roundtrip(client: TestClient, config_base: Path) -> None:
    r = client.post("/api/config", json={"files": {"reserved_dir": ".keep"}, "paths": {"mods_dir": "C:\\mods"}})
    assert r.json() == {"ok": True}
    cfg = client.get("/api/config").json()
    assert cfg["files"]["reserved_dir"] == ".keep"
    assert cfg["files"]["extensions"] == [".jar"]
    assert cfg["paths"]["mods_dir"] == "C:/mods"
    assert json.loads((config_base / "config.json").read_text(encoding="utf-8"))["modrinth"]["timeout"] == 2


def test_client_errors_are_logged_when_runtime_debug_is_on(
    config_base: Path, mods_cfg: dict[str, Any], monkeypatch: pytest.MonkeyPatch
) -> None:
    import _logging
    import modsorter

    cfg = dict(mods_cfg, runtime={"debug": True})
    (config_base / "config.json").write_text(json.dumps(cfg), encoding="utf-8")
    monkeypatch.setattr(_logging, "_DEBUG_CACHE", None)
    lines: list[str] = []
    monkeypatch.setattr(modsorter, "log", lambda msg, level="INFO", module=None: lines.append(msg))

    r = TestClient(modsorter.create_app()).get("/api/nope")

    assert r.status_code == 404
    assert len(lines) == 1 and lines[0].startswith('"GET /api/nope" 404')
