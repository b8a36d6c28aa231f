"""Recursive mirror of a source asset tree into the output tree."""

from __future__ import annotations

import asyncio
import logging
import os
import shutil
from dataclasses import dataclass
from pathlib import Path

from fastdl.events import EventSink, ProgressEvent
from fastdl.sync.compressor import Compressor
from fastdl.sync.paths import display_path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileEntry:
    """One directory entry seen while walking a source tree."""

    name: str
    is_dir: bool
    is_symlink: bool = False


@dataclass
class SyncStats:
    """Running counters for one or more synced trees."""

    copied: int = 0
    compressed: int = 0
    skipped: int = 0

    def add(self, other: SyncStats) -> None:
        self.copied += other.copied
        self.compressed += other.compressed
        self.skipped += other.skipped


def list_entries(directory: Path) -> list[FileEntry]:
    """List ``directory`` in the order the OS enumerates it."""
    with os.scandir(directory) as it:
        return [
            FileEntry(name=e.name, is_dir=e.is_dir(), is_symlink=e.is_symlink())
            for e in it
        ]


class TreeSynchronizer:
    """Copies every file of a tree, skipping one reserved extension.

    Each copied file is handed to the compressor right away, so the output
    tree only ever holds compressed artifacts once a file is done. Entries
    are processed one at a time; blocking filesystem calls run in a worker
    thread so the event loop stays responsive.
    """

    def __init__(
        self,
        compressor: Compressor,
        excluded_extension: str = ".bsp",
        display_root: Path | None = None,
    ) -> None:
        self.compressor = compressor
        self.excluded_extension = excluded_extension.lower()
        self.display_root = display_root

    def is_excluded(self, name: str) -> bool:
        return Path(name).suffix.lower() == self.excluded_extension

    async def sync(self, src_dir: Path, dst_dir: Path, sink: EventSink) -> SyncStats:
        """Mirror ``src_dir`` into ``dst_dir``; ``dst_dir`` must already exist.

        Raises whatever the filesystem or the compressor raises, leaving the
        partially populated destination as is.
        """
        src_dir, dst_dir = Path(src_dir), Path(dst_dir)
        stats = SyncStats()
        entries = await asyncio.to_thread(list_entries, src_dir)

        for entry in entries:
            src_path = src_dir / entry.name
            dst_path = dst_dir / entry.name

            if entry.is_dir and entry.is_symlink:
                # symlink loops would never terminate, so links are not followed
                sink.emit(ProgressEvent.progress(f"Skipping symlinked directory: {entry.name}"))
                stats.skipped += 1
                continue

            if entry.is_dir:
                await asyncio.to_thread(dst_path.mkdir, parents=True, exist_ok=True)
                stats.add(await self.sync(src_path, dst_path, sink))
                continue

            if self.is_excluded(entry.name):
                sink.emit(ProgressEvent.progress(f"Skipping map file: {entry.name}"))
                stats.skipped += 1
                continue

            await asyncio.to_thread(shutil.copy2, src_path, dst_path)
            stats.copied += 1
            sink.emit(ProgressEvent.progress(
                f"Copied: {display_path(dst_path, self.display_root)}"
            ))
            await self.compressor.compress(dst_path, sink)
            stats.compressed += 1

        logger.debug("Synced %s -> %s (%s)", src_dir, dst_dir, stats)
        return stats
