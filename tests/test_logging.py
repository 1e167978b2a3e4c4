# ModSorter test scripts
from __future__ import annotations

import io
from pathlib import Path

import pytest

from _logging import Logger
from ms_platform.config_base import save_config


def test_level_falls_back_to_runtime_config(config_base: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("MS_LOG_LEVEL", raising=False)
    save_config({"runtime": {"log_level": "WARNING"}})
    out = io.StringIO()
    lg = Logger(stream=out, use_color=False, show_time=False)
    assert lg.level_name == "warn"
    lg("hidden", level="INFO", module="T")
    lg("shown", level="WARNING", module="T")
    assert out.getvalue().splitlines() == ["[T] WARN shown"]


def test_env_level_overrides_config(config_base: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MS_LOG_LEVEL", "error")
    save_config({"runtime": {"log_level": "debug"}})
    assert Logger(stream=io.StringIO()).level_name == "error"


def test_unknown_level_defaults_to_info(config_base: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("MS_LOG_LEVEL", raising=False)
    save_config({"runtime": {"log_level": "loud"}})
    lg = Logger(stream=io.StringIO())
    assert lg.level_name == "info"
    lg.set_level("warning")
    assert lg.level_name == "warn"
