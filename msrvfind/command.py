"""Running rustup and reading what it reports."""

from __future__ import annotations

import logging
import os
import subprocess
from dataclasses import dataclass
from typing import Iterable

from msrvfind.errors import CargoMsrvError, IoError, IoErrorSource

_log = logging.getLogger(__name__)


@dataclass(frozen=True)
class RustupOutput:
    """Exit status and captured output of a finished rustup process."""

    exit_status: int
    raw_stdout: bytes = b""
    raw_stderr: bytes = b""

    @property
    def stdout(self) -> str:
        """Captured standard output, with invalid UTF-8 replaced."""
        return self.raw_stdout.decode("utf-8", errors="replace")

    @property
    def stderr(self) -> str:
        """Captured standard error, with invalid UTF-8 replaced."""
        return self.raw_stderr.decode("utf-8", errors="replace")

    def success(self) -> bool:
        """Whether the process exited with status zero."""
        return self.exit_status == 0


class RustupCommand:
    """Builder for a single rustup invocation; output is discarded unless captured."""

    def __init__(self, program: str = "rustup") -> None:
        self._program = program
        self._args: list[str] = []
        self._cwd: str | None = None
        self._capture_stdout = False
        self._capture_stderr = False

    def with_dir(self, path: str | os.PathLike) -> "RustupCommand":
        """Run the process in the given directory."""
        self._cwd = os.fspath(path)
        return self

    def with_args(self, args: Iterable[str | os.PathLike]) -> "RustupCommand":
        """Append arguments after the rustup subcommand."""
        self._args.extend(os.fspath(arg) for arg in args)
        return self

    def with_stdout(self) -> "RustupCommand":
        """Capture standard output."""
        self._capture_stdout = True
        return self

    def with_stderr(self) -> "RustupCommand":
        """Capture standard error."""
        self._capture_stderr = True
        return self

    def run(self) -> RustupOutput:
        """Execute `rustup run [...]`."""
        return self.execute("run")

    def install(self) -> RustupOutput:
        """Execute `rustup install [...]`."""
        return self.execute("install")

    def show(self) -> RustupOutput:
        """Execute `rustup show [...]`."""
        return self.execute("show")

    def execute(self, cmd: str) -> RustupOutput:
        """Execute the given rustup subcommand and wait for it to finish."""
        _log.debug("cmd=%r args=%r", cmd, self._args)

        argv = [self._program, cmd, *self._args]
        try:
            process = subprocess.Popen(
                argv,
                cwd=self._cwd,
                stdout=subprocess.PIPE if self._capture_stdout else subprocess.DEVNULL,
                stderr=subprocess.PIPE if self._capture_stderr else subprocess.DEVNULL,
            )
        except OSError as exc:
            raise IoError(exc, IoErrorSource.SPAWN_PROCESS, cmd) from exc

        try:
            with process:
                stdout, stderr = process.communicate()
        except OSError as exc:
            raise IoError(
                exc, IoErrorSource.WAIT_FOR_PROCESS_AND_COLLECT_OUTPUT, cmd
            ) from exc

        return RustupOutput(process.returncode, stdout or b"", stderr or b"")


def parse_default_target(show_output: str) -> str:
    """Take the host triple: the third word of the first line of `rustup show`."""
    lines = show_output.splitlines()
    if not lines:
        raise CargoMsrvError("The default host triple (target) could not be found.")
    words = lines[0].split()
    if len(words) < 3:
        raise CargoMsrvError("The default host triple (target) could not be found.")
    return words[2]


def default_target() -> str:
    """The default host triple reported by rustup, used when no target is given."""
    output = RustupCommand().with_stdout().show()
    return parse_default_target(output.stdout)