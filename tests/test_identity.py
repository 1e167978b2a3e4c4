# ModSorter test scripts
from __future__ import annotations

import pytest

from ms_platform.identity import base_identity, is_archive


@pytest.mark.parametrize(
    "filename, expected",
    [
        ("name-1.2.3.jar", "name"),
        ("name.jar", "name"),
        ("NAME-2.0.JAR", "NAME"),
        ("fabric-api-0.92.0+1.20.1.jar", "fabric-api"),
        ("sodium-fabric-mc1.20.1-0.5.3.jar", "sodium-fabric-mc1.20.1"),
        ("journeymap-1.20.1-5.9.7-fabric.jar", "journeymap"),
    ],
)
def test_base_identity_strips_version_and_extension(filename: str, expected: str) -> None:
    assert base_identity(filename) == expected


def test_base_identity_is_total() -> None:
    assert base_identity("") == ""
    assert base_identity("README") == "README"
    assert base_identity("notes.txt") == "notes"
    assert base_identity("-1.0.jar") == "-1.0"


def test_versions_share_identity() -> None:
    assert base_identity("lithium-0.11.1.jar") == base_identity("lithium-0.11.2.jar")


def test_custom_extensions() -> None:
    assert base_identity("pack-1.0.zip", (".zip",)) == "pack"
    assert is_archive("Pack.ZIP", (".zip",))
    assert not is_archive("pack.jar.disabled")
