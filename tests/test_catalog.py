# ModSorter test scripts
from __future__ import annotations

from pathlib import Path

import pytest

from ms_platform.catalog import (
    CatalogEntry,
    Compat,
    entries_from_rows,
    reconcile,
    scan_archives,
    slug_is_unset,
)


def test_compat_parse_normalizes_and_defaults() -> None:
    assert Compat.parse("required") is Compat.REQUIRED
    assert Compat.parse(" Optional ") is Compat.OPTIONAL
    assert Compat.parse("NOT_FOUND") is Compat.NOT_FOUND
    assert Compat.parse("bogus") is Compat.UNKNOWN
    assert Compat.parse(None) is Compat.UNKNOWN
    assert Compat.parse("") is Compat.UNKNOWN


@pytest.mark.parametrize("slug", ["", "   ", "null", "NULL", "unset", " Unset "])
def test_unset_slugs(slug: str) -> None:
    assert slug_is_unset(slug)


def test_real_slug_is_set() -> None:
    assert not slug_is_unset("sodium")


def test_entry_defaults_and_row_roundtrip() -> None:
    e = CatalogEntry("a.jar")
    assert e.client_side is Compat.UNKNOWN and e.server_side is Compat.UNKNOWN
    assert e.to_row() == ["a.jar", "", "", "", "unknown", "unknown"]

    short = CatalogEntry.from_row(["b-1.0.jar", "bslug"])
    assert short.slug == "bslug"
    assert short.title == ""
    assert short.client_side is Compat.UNKNOWN


def test_entry_is_immutable() -> None:
    e = CatalogEntry("a.jar")
    with pytest.raises(AttributeError):
        e.filename = "b.jar"  # type: ignore[misc]


def test_entries_from_rows_skips_blank_lines() -> None:
    rows = [["a.jar", "a"], [], ["", ""], ["b.jar", ""]]
    assert [e.filename for e in entries_from_rows(rows)] == ["a.jar", "b.jar"]


def test_reconcile_bumps_versions_and_adds_new_rows() -> None:
    entries = [
        CatalogEntry("sodium-0.5.0.jar", "sodium", "Sodium", "", "required", "unsupported"),
        CatalogEntry("lithium-0.11.1.jar", "lithium"),
    ]
    disk = ["sodium-0.5.8.jar", "lithium-0.11.1.jar", "ferritecore-6.0.0.jar"]

    res = reconcile(entries, disk)

    assert res.updated == 1
    assert res.added == 1
    assert res.changed
    names = [e.filename for e in res.entries]
    assert names == ["sodium-0.5.8.jar", "lithium-0.11.1.jar", "ferritecore-6.0.0.jar"]
    bumped = res.entries[0]
    assert bumped.slug == "sodium" and bumped.title == "Sodium"
    assert res.entries[2].slug == ""
    assert entries[0].filename == "sodium-0.5.0.jar"


def test_reconcile_unchanged() -> None:
    entries = [CatalogEntry("a-1.0.jar", "a")]
    res = reconcile(entries, ["a-1.0.jar"])
    assert not res.changed
    assert res.entries == tuple(entries)


def test_scan_archives(tmp_path: Path) -> None:
    (tmp_path / "b-1.jar").write_text("x")
    (tmp_path / "A.JAR").write_text("x")
    (tmp_path / "readme.txt").write_text("x")
    (tmp_path / "sub.jar").mkdir()
    assert scan_archives(tmp_path) == ["A.JAR", "b-1.jar"]
    assert scan_archives(tmp_path / "missing") == []
