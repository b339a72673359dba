"""Error types reported by the tool, and its process exit codes."""

from __future__ import annotations

import enum
import os
from typing import Any


class CargoMsrvError(Exception):
    """Base class of every error the tool reports."""


class IoErrorSource(enum.Enum):
    """The operation that was running when an I/O error occurred."""

    CURRENT_DIR = "Unable to determine current working directory"
    OPEN_FILE = "Unable to open file '{}'"
    READ_FILE = "Unable to read file '{}'"
    WRITE_FILE = "Unable to write file '{}'"
    REMOVE_FILE = "Unable to remove file '{}'"
    RENAME_FILE = "Unable to rename file '{}'"
    SPAWN_PROCESS = "Unable to spawn process '\"{}\"'"
    WAIT_FOR_PROCESS_AND_COLLECT_OUTPUT = (
        "Unable to collect output from '\"{}\"', or process did not terminate properly"
    )

    def describe(self, subject: Any = None) -> str:
        """Render the description, filling in the file or process involved."""
        return self.value.format(subject)


class IoError(CargoMsrvError):
    """An operating-system error together with the operation that caused it."""

    def __init__(self, error: OSError, source: IoErrorSource, subject: Any = None) -> None:
        self.error = error
        self.source = source
        self.subject = None if subject is None else os.fsdecode(subject)
        super().__init__(
            f"IO error: '{error}'. caused by: '{source.describe(self.subject)}'."
        )


_NOT_OVERRIDDEN = "<not overridden>"


class NoToolchainsToTryError(CargoMsrvError):
    """The filtered set of Rust releases to check turned out to be empty."""

    def __init__(self, clues: tuple[Any, Any] | None = None) -> None:
        self._clues = clues
        message = "No Rust releases to check: the filtered search space is empty."
        if clues is not None:
            user_min, user_max = clues
            shown_min = _NOT_OVERRIDDEN if user_min is None else str(user_min)
            shown_max = _NOT_OVERRIDDEN if user_max is None else str(user_max)
            message += (
                f" Search space limited by user to min Rust '{shown_min}', "
                f"and max Rust '{shown_max}'"
            )
        super().__init__(message)

    @classmethod
    def with_clues(cls, user_min: Any, user_max: Any) -> "NoToolchainsToTryError":
        """Create the error, noting the user-supplied bounds of the search space."""
        return cls((user_min, user_max))

    def has_clues(self) -> bool:
        """Whether the user limited the search space."""
        return self._clues is not None


class RustupInstallFailed(CargoMsrvError):
    """rustup could not install a toolchain."""

    def __init__(self, toolchain_spec: str, stderr: str) -> None:
        self.toolchain_spec = str(toolchain_spec)
        self.stderr = str(stderr)
        reported = "\n    ".join(self.stderr.rstrip().splitlines())
        super().__init__(
            f"Unable to install toolchain '{self.toolchain_spec}', rustup reported:\n"
            f"    {reported}"
        )


class PathError(CargoMsrvError):
    """A path could not be used as given."""

    def __init__(self, message: str, path: Any = None) -> None:
        self.path = path
        super().__init__(message)

    @classmethod
    def no_parent(cls, path: Any) -> "PathError":
        """The path has no parent directory."""
        return cls(f"No parent directory for '{os.fsdecode(path)}'", path)

    @classmethod
    def invalid_utf8(cls, path: Any = None) -> "PathError":
        """The path holds characters that are not valid UTF-8."""
        if path is None:
            return cls("Path contains non UTF-8 characters")
        return cls(
            f"Path contains non UTF-8 characters (path: '{os.fsdecode(path)}')", path
        )


class SetMsrvError(CargoMsrvError):
    """The MSRV could not be written to the manifest."""

    def __init__(self) -> None:
        super().__init__(
            "Unable to set the MSRV in the 'package.metadata' table: "
            "'package.metadata' is not a table"
        )


class ExitCode(enum.IntEnum):
    """Process exit codes."""

    SUCCESS = 0
    FAILURE = 1