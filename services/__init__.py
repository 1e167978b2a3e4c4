# services/__init__.py
from __future__ import annotations

from . import mods

__all__ = ["mods"]
