# ms_platform/dir_replace.py
# Backup -> clear -> repopulate for a destination folder, preserving one reserved subtree.
# Copyright (c) 2025-2026 CrossWatch / Cenodude (https://github.com/cenodude/CrossWatch)
from __future__ import annotations

import shutil
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from _logging import log

from .identity import ARCHIVE_EXTENSIONS, is_archive

RESERVED_DIR = ".connector"


class ReplaceError(OSError):
    pass


class BackupError(ReplaceError):
    pass


class CopyError(ReplaceError):
    pass


class ReplaceState(str, Enum):
    START = "start"
    BACKED_UP = "backed_up"
    CLEARED = "cleared"
    REPOPULATED = "repopulated"
    DONE = "done"


@dataclass(frozen=True)
class ReplacementPlan:
    target: Path
    backup: Path
    reserved: str = RESERVED_DIR

    @property
    def reserved_path(self) -> Path:
        return self.target / self.reserved

    @property
    def holding(self) -> Path:
        # sibling of the target, never inside it: server_mods -> server_mods_connector_temp
        tag = self.reserved.lstrip(".") or "reserved"
        return self.target.parent / f"{self.target.name}_{tag}_temp"


@dataclass
class PrepareReport:
    target: Path
    backup: Path
    state: ReplaceState = ReplaceState.START
    history: list[ReplaceState] = field(default_factory=lambda: [ReplaceState.START])
    created: bool = False
    reserved_present: bool = False
    reserved_extracted: bool = False
    reserved_restored: bool = False
    backed_up: list[str] = field(default_factory=list)
    clear_errors: list[str] = field(default_factory=list)
    restore_error: str | None = None

    def advance(self, state: ReplaceState) -> None:
        self.state = state
        self.history.append(state)


@dataclass(frozen=True)
class CopyReport:
    dest: Path
    matched: int
    copied: int
    skipped: int
    files: tuple[str, ...] = ()


def delete_directory(path: Path) -> None:
    """Remove a directory tree; a missing path is a no-op."""
    p = Path(path)
    if not p.exists() and not p.is_symlink():
        log(f"Directory does not exist, skipping deletion: {p}", level="DEBUG", module="FS")
        return
    if p.is_dir() and not p.is_symlink():
        shutil.rmtree(p)
    else:
        p.unlink()
    log(f"Deleted: {p}", level="DEBUG", module="FS")


def _remove_entry(p: Path) -> None:
    if p.is_dir() and not p.is_symlink():
        shutil.rmtree(p)
    else:
        p.unlink()


def _copy_entry(src: Path, dst: Path) -> None:
    if src.is_dir() and not src.is_symlink():
        shutil.copytree(src, dst, symlinks=True, dirs_exist_ok=True)
    else:
        shutil.copy2(src, dst, follow_symlinks=False)


class DirectoryReplacement:
    """Single-target replacement state machine.

    START -> BACKED_UP -> CLEARED -> REPOPULATED -> DONE, with the reserved
    subtree moved to a sibling holding folder between BACKED_UP and REPOPULATED.
    Backup failures raise; clear and restore failures are logged only.
    Callers serialize runs against the same target/backup pair.
    """

    def __init__(self, plan: ReplacementPlan) -> None:
        self.plan = plan
        self.report = PrepareReport(target=plan.target, backup=plan.backup)

    def run(self) -> PrepareReport:
        plan, rep = self.plan, self.report
        if not plan.target.exists():
            log(f"Target does not exist, creating it: {plan.target}", level="INFO", module="FS")
            plan.target.mkdir(parents=True, exist_ok=True)
            rep.created = True
            rep.advance(ReplaceState.DONE)
            return rep

        rep.reserved_present = plan.reserved_path.exists()
        self._backup()
        rep.advance(ReplaceState.BACKED_UP)

        if rep.reserved_present:
            self._extract_reserved()
        self._clear()
        rep.advance(ReplaceState.CLEARED)

        plan.target.mkdir(parents=True, exist_ok=True)
        if rep.reserved_extracted:
            self._restore_reserved()
        rep.advance(ReplaceState.REPOPULATED)

        rep.advance(ReplaceState.DONE)
        log(
            f"Prepared {plan.target}: backed up {len(rep.backed_up)} entries"
            + (", reserved subtree preserved" if rep.reserved_present else ""),
            level="SUCCESS",
            module="FS",
        )
        return rep

    # Phases
    def _backup(self) -> None:
        plan, rep = self.plan, self.report
        try:
            if plan.backup.exists() or plan.backup.is_symlink():
                log(f"Deleting previous backup: {plan.backup}", level="INFO", module="FS")
                delete_directory(plan.backup)
            plan.backup.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            log(f"Cannot reset backup directory {plan.backup}: {e}", level="ERROR", module="FS")
            raise BackupError(f"Failed to reset backup directory: {plan.backup}: {e}") from e

        try:
            children = sorted(plan.target.iterdir(), key=lambda p: p.name)
        except OSError as e:
            raise BackupError(f"Failed to list target directory: {plan.target}: {e}") from e

        for child in children:
            if child.name == plan.reserved:
                log(f"Skipping reserved subtree during backup: {child}", level="DEBUG", module="FS")
                continue
            try:
                _copy_entry(child, plan.backup / child.name)
            except OSError as e:
                log(f"Backup failed for {child.name}: {e}", level="ERROR", module="FS")
                raise BackupError(f"Failed to back up {child} -> {plan.backup}: {e}") from e
            rep.backed_up.append(child.name)
        log(f"Backed up {len(rep.backed_up)} entries to {plan.backup}", level="INFO", module="FS")

    def _extract_reserved(self) -> None:
        plan, rep = self.plan, self.report
        holding = plan.holding
        try:
            if holding.exists():
                log(f"Discarding stale holding directory from an earlier run: {holding}", level="WARNING", module="FS")
                delete_directory(holding)
            holding.mkdir(parents=True)
            shutil.move(str(plan.reserved_path), str(holding / plan.reserved))
        except OSError as e:
            # still inside the target; _clear() skips it by name
            log(f"Could not move {plan.reserved} out of {plan.target}: {e}", level="ERROR", module="FS")
            return
        rep.reserved_extracted = True
        log(f"Moved {plan.reserved} to holding location: {holding}", level="INFO", module="FS")

    def _clear(self) -> None:
        plan, rep = self.plan, self.report
        try:
            children = list(plan.target.iterdir())
        except OSError as e:
            log(f"Failed to list {plan.target} for cleanup: {e}", level="ERROR", module="FS")
            rep.clear_errors.append(f"{plan.target}: {e}")
            return
        for child in children:
            if child.name == plan.reserved:
                log(f"Preserving: {child}", level="INFO", module="FS")
                continue
            try:
                _remove_entry(child)
            except OSError as e:
                log(f"Failed to delete {child} (check permissions or if file is in use): {e}", level="ERROR", module="FS")
                rep.clear_errors.append(f"{child.name}: {e}")

    def _restore_reserved(self) -> None:
        plan, rep = self.plan, self.report
        held = plan.holding / plan.reserved
        if plan.reserved_path.exists():
            log(f"{plan.reserved} already present in {plan.target}; discarding held copy", level="WARNING", module="FS")
        else:
            try:
                shutil.move(str(held), str(plan.reserved_path))
                rep.reserved_restored = True
                log(f"{plan.reserved} restored to {plan.reserved_path}", level="INFO", module="FS")
            except OSError as e:
                rep.restore_error = str(e)
                log(
                    f"Failed to move {plan.reserved} back; it remains in {plan.holding}: {e}",
                    level="ERROR",
                    module="FS",
                )
                return
        try:
            delete_directory(plan.holding)
        except OSError as e:
            log(f"Failed to delete holding directory {plan.holding}: {e}", level="WARNING", module="FS")


def prepare_directory(target: Path, backup: Path, reserved: str = RESERVED_DIR) -> PrepareReport:
    return DirectoryReplacement(ReplacementPlan(Path(target), Path(backup), reserved)).run()


def copy_allowed(
    allowed: Iterable[str],
    source_dir: Path,
    dest_dir: Path,
    extensions: Iterable[str] = ARCHIVE_EXTENSIONS,
) -> CopyReport:
    src, dest = Path(source_dir), Path(dest_dir)
    allow = frozenset(allowed)
    exts = tuple(extensions)
    if not dest.is_dir():
        raise CopyError(f"Destination directory does not exist: {dest}")
    if not src.is_dir():
        raise CopyError(f"Mods directory does not exist: {src}")

    try:
        files = sorted((p for p in src.iterdir() if p.is_file() and is_archive(p.name, exts)), key=lambda p: p.name)
    except OSError as e:
        raise CopyError(f"Failed to read contents of mods directory: {src}: {e}") from e

    copied: list[str] = []
    for f in files:
        if f.name not in allow:
            log(f"Skipping {f.name} (not allowed for {dest.name})", level="DEBUG", module="FS")
            continue
        try:
            shutil.copy2(f, dest / f.name)
        except OSError as e:
            log(f"Failed to copy {f.name}: {e}", level="ERROR", module="FS")
            raise CopyError(f"Failed to copy mod file: {f.name} to {dest}: {e}") from e
        copied.append(f.name)

    rep = CopyReport(dest=dest, matched=len(files), copied=len(copied), skipped=len(files) - len(copied), files=tuple(copied))
    log(f"Copied {rep.copied} of {rep.matched} mods to {dest}", level="SUCCESS", module="FS")
    return rep


__all__ = [
    "BackupError",
    "CopyError",
    "CopyReport",
    "DirectoryReplacement",
    "PrepareReport",
    "RESERVED_DIR",
    "ReplaceError",
    "ReplaceState",
    "ReplacementPlan",
    "copy_allowed",
    "delete_directory",
    "prepare_directory",
]
