"""One full update run over every configured project and asset category."""

from __future__ import annotations

import asyncio
import logging
import shutil
import time
from pathlib import Path

from pydantic import BaseModel

from fastdl.config.models import FastDLConfig
from fastdl.events import EventSink, ProgressEvent
from fastdl.sync.compressor import Bzip2Compressor, Compressor
from fastdl.sync.walker import SyncStats, TreeSynchronizer

logger = logging.getLogger(__name__)


class RunResult(BaseModel):
    """Summary of a run that reached the end."""

    projects: list[str]
    categories_synced: int = 0
    categories_missing: int = 0
    copied: int = 0
    compressed: int = 0
    skipped: int = 0
    duration_seconds: float = 0.0


def source_category_path(config: FastDLConfig, project: str, category: str) -> Path:
    base = Path(config.paths.sources_root).resolve() / project
    if config.sync.source_subdir:
        base = base / config.sync.source_subdir
    return base / category


def output_category_path(config: FastDLConfig, project: str, category: str) -> Path:
    return Path(config.paths.output_root).resolve() / project / category


def _source_label(config: FastDLConfig, project: str, category: str) -> str:
    parts = [project, config.sync.source_subdir, category]
    return "/".join(p for p in parts if p)


def _reset_dir(path: Path) -> None:
    """Remove ``path`` recursively if present, then recreate it empty."""
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    elif path.exists() or path.is_symlink():
        path.unlink()
    path.mkdir(parents=True, exist_ok=True)


async def run_update(
    config: FastDLConfig,
    sink: EventSink,
    compressor: Compressor | None = None,
) -> RunResult:
    """Rebuild every ``<project>/<category>`` folder of the output tree.

    Projects and categories are processed in configured order, strictly one
    after the other. On failure an ``error`` event is emitted and the
    exception propagates; categories already written stay on disk.
    """
    output_root = Path(config.paths.output_root).resolve()
    if compressor is None:
        compressor = Bzip2Compressor(
            binary=config.sync.compressor,
            suffix=config.sync.compressed_suffix,
            display_root=output_root,
        )
    synchronizer = TreeSynchronizer(
        compressor,
        excluded_extension=config.sync.excluded_extension,
        display_root=output_root,
    )

    started = time.monotonic()
    result = RunResult(projects=list(config.sync.projects))
    totals = SyncStats()
    logger.info("FastDL update started (%d projects)", len(config.sync.projects))
    sink.emit(ProgressEvent.progress("FastDL update started"))

    try:
        for project in config.sync.projects:
            sink.emit(ProgressEvent.progress(f"--- Starting {project} ---"))

            for category in config.sync.categories:
                src = source_category_path(config, project, category)
                dst = output_category_path(config, project, category)

                await asyncio.to_thread(_reset_dir, dst)

                if not await asyncio.to_thread(src.exists):
                    sink.emit(ProgressEvent.progress(
                        f"No {_source_label(config, project, category)}, skipping"
                    ))
                    result.categories_missing += 1
                    continue

                sink.emit(ProgressEvent.progress(f"Processing {project}/{category}"))
                totals.add(await synchronizer.sync(src, dst, sink))
                result.categories_synced += 1

            sink.emit(ProgressEvent.progress(f"Finished {project}"))
    except Exception as e:
        logger.error("FastDL update aborted: %s", e)
        sink.emit(ProgressEvent.error(str(e)))
        raise

    result.copied = totals.copied
    result.compressed = totals.compressed
    result.skipped = totals.skipped
    result.duration_seconds = round(time.monotonic() - started, 3)
    logger.info(
        "FastDL update complete: %d copied, %d skipped in %.1fs",
        result.copied,
        result.skipped,
        result.duration_seconds,
    )
    sink.emit(ProgressEvent.done("All FastDL updates complete"))
    return result
