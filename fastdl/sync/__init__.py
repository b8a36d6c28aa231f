"""Update pipeline: tree walking, compression and the run orchestrator."""

from fastdl.sync.compressor import Bzip2Compressor, Compressor
from fastdl.sync.orchestrator import (
    RunResult,
    output_category_path,
    run_update,
    source_category_path,
)
from fastdl.sync.walker import FileEntry, SyncStats, TreeSynchronizer, list_entries

__all__ = [
    "Bzip2Compressor",
    "Compressor",
    "FileEntry",
    "RunResult",
    "SyncStats",
    "TreeSynchronizer",
    "list_entries",
    "output_category_path",
    "run_update",
    "source_category_path",
]
