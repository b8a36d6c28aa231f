"""Progress event models streamed to observers during a run."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class EventKind(str, Enum):
    """Channel names an observer can listen on."""

    progress = "progress"
    error = "error"
    done = "done"


class ProgressEvent(BaseModel):
    """An immutable (kind, message) pair."""

    model_config = ConfigDict(frozen=True)

    kind: EventKind
    message: str = Field(min_length=1)

    @classmethod
    def progress(cls, message: str) -> ProgressEvent:
        return cls(kind=EventKind.progress, message=message)

    @classmethod
    def error(cls, message: str) -> ProgressEvent:
        return cls(kind=EventKind.error, message=message)

    @classmethod
    def done(cls, message: str) -> ProgressEvent:
        return cls(kind=EventKind.done, message=message)

    @property
    def is_terminal(self) -> bool:
        return self.kind is not EventKind.progress
