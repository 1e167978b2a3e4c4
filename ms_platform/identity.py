# ms_platform/identity.py
# Version-stripped base identity for mod archive filenames.
# Copyright (c) 2025-2026 CrossWatch / Cenodude (https://github.com/cenodude/CrossWatch)
from __future__ import annotations

import re
from collections.abc import Iterable

ARCHIVE_EXTENSIONS: tuple[str, ...] = (".jar",)

# "-<digit>..." up to the end of the stem: sodium-fabric-0.5.8+mc1.20.1 -> sodium-fabric
_VERSION_SUFFIX = re.compile(r"-\d.*$", re.IGNORECASE | re.DOTALL)


def _stem(filename: str, extensions: Iterable[str]) -> str:
    low = filename.lower()
    for ext in extensions:
        e = str(ext).lower()
        if e and low.endswith(e):
            return filename[: len(filename) - len(e)]
    dot = filename.rfind(".")
    return filename[:dot] if dot > 0 else filename


def base_identity(filename: str, extensions: Iterable[str] = ARCHIVE_EXTENSIONS) -> str:
    """Join key shared by every version of the same mod.

    >>> base_identity("lithium-0.11.2.jar")
    'lithium'
    >>> base_identity("lithium.jar")
    'lithium'
    """
    name = str(filename or "").strip()
    stem = _stem(name, extensions)
    base = _VERSION_SUFFIX.sub("", stem)
    return base or stem


def is_archive(filename: str, extensions: Iterable[str] = ARCHIVE_EXTENSIONS) -> bool:
    low = str(filename or "").lower()
    return any(low.endswith(str(e).lower()) for e in extensions if e)


__all__ = ["ARCHIVE_EXTENSIONS", "base_identity", "is_archive"]
