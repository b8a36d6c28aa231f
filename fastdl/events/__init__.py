"""Progress events and the sinks that carry them to observers."""

from fastdl.events.models import EventKind, ProgressEvent
from fastdl.events.sinks import (
    ConsoleSink,
    EventSink,
    FanoutSink,
    ListSink,
    LoggingSink,
    QueueSink,
)

__all__ = [
    "ConsoleSink",
    "EventKind",
    "EventSink",
    "FanoutSink",
    "ListSink",
    "LoggingSink",
    "ProgressEvent",
    "QueueSink",
]
