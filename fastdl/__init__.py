"""FastDL - mirror game server assets into a compressed download tree."""

from fastdl.config import FastDLConfig, load_config
from fastdl.events import EventKind, EventSink, ProgressEvent
from fastdl.gate import RunCoordinator, TriggerDecision
from fastdl.service import UpdateService
from fastdl.sync import Bzip2Compressor, RunResult, TreeSynchronizer, run_update

__version__ = "0.1.0"

__all__ = [
    "Bzip2Compressor",
    "EventKind",
    "EventSink",
    "FastDLConfig",
    "ProgressEvent",
    "RunCoordinator",
    "RunResult",
    "TreeSynchronizer",
    "TriggerDecision",
    "UpdateService",
    "load_config",
    "run_update",
]
