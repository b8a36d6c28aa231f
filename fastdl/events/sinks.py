"""Event sinks: where a run's progress events end up.

The pipeline only ever calls ``emit``; transports (console, log, SSE
connection) are bound at the edge by picking a sink.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from typing import Protocol, runtime_checkable

from rich.console import Console
from rich.markup import escape

from fastdl.events.models import EventKind, ProgressEvent

logger = logging.getLogger(__name__)


@runtime_checkable
class EventSink(Protocol):
    """Anything that accepts progress events."""

    def emit(self, event: ProgressEvent) -> None: ...


class ListSink:
    """Collects events in memory, in emission order."""

    def __init__(self) -> None:
        self.events: list[ProgressEvent] = []

    def emit(self, event: ProgressEvent) -> None:
        self.events.append(event)

    def messages(self, kind: EventKind | None = None) -> list[str]:
        return [e.message for e in self.events if kind is None or e.kind is kind]


class LoggingSink:
    """Mirrors events into the stdlib log."""

    def __init__(self, name: str = "fastdl.run") -> None:
        self._logger = logging.getLogger(name)

    def emit(self, event: ProgressEvent) -> None:
        if event.kind is EventKind.error:
            self._logger.error(event.message)
        else:
            self._logger.info(event.message)


# Message prefix -> rich style, same buckets the status page colours by
_STYLES = (
    ("Copied:", "green"),
    ("Compressed:", "cyan"),
    ("Skipping", "yellow"),
)


class ConsoleSink:
    """Prints events to a rich console."""

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console()

    def emit(self, event: ProgressEvent) -> None:
        message = escape(event.message)
        if event.kind is EventKind.error:
            self._console.print(f"[bold red]Error:[/bold red] {message}", highlight=False)
            return
        if event.kind is EventKind.done:
            self._console.print(f"[bold magenta]{message}[/bold magenta]", highlight=False)
            return
        style = next((s for prefix, s in _STYLES if event.message.startswith(prefix)), None)
        if style:
            self._console.print(f"[{style}]{message}[/{style}]", highlight=False)
        else:
            self._console.print(message, highlight=False)


class QueueSink:
    """Feeds one streaming connection through an asyncio queue.

    Must be emitted to from the event loop thread. The producer calls
    ``end`` when no more events will come; the consumer calls ``close`` when
    the observer went away, after which events are dropped.
    """

    def __init__(self) -> None:
        self.queue: asyncio.Queue[ProgressEvent | None] = asyncio.Queue()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def emit(self, event: ProgressEvent) -> None:
        if self._closed:
            logger.debug("Observer gone, dropping %s event", event.kind.value)
            return
        self.queue.put_nowait(event)

    def end(self) -> None:
        if not self._closed:
            self.queue.put_nowait(None)

    def close(self) -> None:
        self._closed = True

    async def stream(self) -> AsyncIterator[ProgressEvent]:
        """Yield events until ``end`` is called."""
        while True:
            event = await self.queue.get()
            if event is None:
                return
            yield event


class FanoutSink:
    """Broadcasts every event to several sinks, in order."""

    def __init__(self, *sinks: EventSink) -> None:
        self._sinks = sinks

    def emit(self, event: ProgressEvent) -> None:
        for sink in self._sinks:
            sink.emit(event)
