"""Exceptions raised by the update pipeline."""

from __future__ import annotations

from pathlib import Path


class FastDLError(Exception):
    """Base class for FastDL failures."""


class ThrottleRejection(FastDLError):
    """A run was requested before the cooldown elapsed."""

    def __init__(self, wait_seconds: int) -> None:
        self.wait_seconds = wait_seconds
        super().__init__(f"Please wait {wait_seconds}s before running again.")


class CompressionError(FastDLError):
    """The external compressor failed on a single file.

    Fatal to the current run.
    """

    def __init__(self, path: Path, detail: str, returncode: int | None = None) -> None:
        self.path = Path(path)
        self.detail = detail
        self.returncode = returncode
        super().__init__(f"Compression failed for {self.path.name}: {detail}")
