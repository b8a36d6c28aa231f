"""Single-file compression through an external binary."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Protocol, runtime_checkable

from fastdl.errors import CompressionError
from fastdl.events import EventSink, ProgressEvent
from fastdl.sync.paths import display_path

logger = logging.getLogger(__name__)


@runtime_checkable
class Compressor(Protocol):
    """Turns one file into its compressed artifact, in place."""

    suffix: str

    async def compress(self, path: Path, sink: EventSink) -> Path: ...


class Bzip2Compressor:
    """Shells out to ``bzip2 -f``, which replaces ``path`` with ``path.bz2``.

    Any compressor binary with the same ``-f <file>`` calling convention
    (gzip, xz) works by changing ``binary`` and ``suffix``.
    """

    def __init__(
        self,
        binary: str = "bzip2",
        suffix: str = ".bz2",
        display_root: Path | None = None,
    ) -> None:
        self.binary = binary
        self.suffix = suffix
        self.display_root = display_root

    async def compress(self, path: Path, sink: EventSink) -> Path:
        path = Path(path)
        try:
            proc = await asyncio.create_subprocess_exec(
                self.binary,
                "-f",
                str(path),
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
            _, stderr = await proc.communicate()
        except OSError as e:
            # binary missing or not executable
            err = CompressionError(path, f"{self.binary}: {e.strerror or e}")
        else:
            if proc.returncode == 0:
                artifact = path.with_name(path.name + self.suffix)
                sink.emit(ProgressEvent.progress(
                    f"Compressed: {display_path(artifact, self.display_root)}"
                ))
                return artifact
            detail = stderr.decode(errors="replace").strip()
            err = CompressionError(
                path,
                detail or f"{self.binary} exited with status {proc.returncode}",
                returncode=proc.returncode,
            )

        logger.warning("%s", err)
        sink.emit(ProgressEvent.error(str(err)))
        raise err
