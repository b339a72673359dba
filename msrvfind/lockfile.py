"""Temporarily moving a Cargo lock file out of the way."""

from __future__ import annotations

import enum
import os
from pathlib import Path

from msrvfind.errors import IoError, IoErrorSource

CARGO_LOCK_REPLACEMENT = "Cargo.lock-ignored-for-cargo-msrv"


class _State(enum.Enum):
    START = enum.auto()
    MOVED = enum.auto()
    COMPLETE = enum.auto()


class LockfileHandler:
    """Moves a lock file aside and back again; usable as a context manager."""

    def __init__(self, lock_file: str | os.PathLike) -> None:
        self.lock_file = Path(lock_file)
        self._state = _State.START

    @property
    def replacement(self) -> Path:
        """Where the lock file is kept while moved aside."""
        return self.lock_file.parent / CARGO_LOCK_REPLACEMENT

    @property
    def is_moved(self) -> bool:
        """Whether the lock file is currently moved aside."""
        return self._state is _State.MOVED

    def move_lockfile(self) -> "LockfileHandler":
        """Rename the lock file to its replacement name."""
        if self._state is not _State.START:
            raise RuntimeError("the lock file has already been moved")
        self._rename(self.lock_file, self.replacement)
        self._state = _State.MOVED
        return self

    def move_lockfile_back(self) -> "LockfileHandler":
        """Restore the lock file from its replacement name."""
        if self._state is not _State.MOVED:
            raise RuntimeError("the lock file is not moved")
        self._rename(self.replacement, self.lock_file)
        self._state = _State.COMPLETE
        return self

    def _rename(self, source: Path, target: Path) -> None:
        try:
            os.replace(source, target)
        except OSError as exc:
            raise IoError(exc, IoErrorSource.RENAME_FILE, self.lock_file) from exc

    def __enter__(self) -> "LockfileHandler":
        return self.move_lockfile()

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._state is _State.MOVED:
            self.move_lockfile_back()