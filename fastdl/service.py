"""Trigger handling: gate a request, then run the update in the background."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import UTC, datetime

from fastdl.config.models import FastDLConfig
from fastdl.errors import ThrottleRejection
from fastdl.events import EventSink, ProgressEvent
from fastdl.gate import RunCoordinator, TriggerDecision
from fastdl.sync.compressor import Compressor
from fastdl.sync.orchestrator import RunResult, run_update

logger = logging.getLogger(__name__)


class UpdateService:
    """Owns the single RunCoordinator of a process and launches runs.

    ``trigger`` is the entry point for observers: it never blocks on the run
    itself. ``run`` awaits the whole run and is meant for one-shot callers.
    """

    def __init__(
        self,
        config: FastDLConfig,
        coordinator: RunCoordinator | None = None,
        compressor: Compressor | None = None,
    ) -> None:
        self.config = config
        self.coordinator = coordinator or RunCoordinator(config.sync.cooldown_seconds)
        self.compressor = compressor
        self.last_result: RunResult | None = None
        self.last_error: str | None = None
        self.last_started_at: datetime | None = None
        self._tasks: set[asyncio.Task] = set()

    @property
    def running(self) -> bool:
        return any(not t.done() for t in self._tasks)

    def trigger(
        self,
        sink: EventSink,
        on_finish: Callable[[], None] | None = None,
    ) -> TriggerDecision:
        """Start a background run, or tell ``sink`` how long to wait.

        ``on_finish`` fires once the background run ends, successfully or
        not; it is not called for a rejected request. Must be called from
        inside a running event loop; the gate is left untouched otherwise.
        """
        asyncio.get_running_loop()
        decision = self.coordinator.request_run()
        if not decision.accepted:
            sink.emit(ProgressEvent.error(str(ThrottleRejection(decision.wait_seconds))))
            return decision

        task = asyncio.create_task(self._run_logged(sink, on_finish))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return decision

    async def run(self, sink: EventSink) -> RunResult:
        """Claim the gate and run to completion. Raises ThrottleRejection."""
        self.coordinator.claim()
        return await self._execute(sink)

    async def wait_idle(self) -> None:
        """Wait for background runs to finish (failures are already logged)."""
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

    async def _execute(self, sink: EventSink) -> RunResult:
        self.last_started_at = datetime.now(UTC)
        try:
            result = await run_update(self.config, sink, self.compressor)
        except Exception as e:
            self.last_error = str(e)
            raise
        self.last_result = result
        self.last_error = None
        return result

    async def _run_logged(
        self, sink: EventSink, on_finish: Callable[[], None] | None
    ) -> None:
        try:
            await self._execute(sink)
        except Exception:
            # already reported to the observer by run_update
            logger.exception("Background FastDL update failed")
        finally:
            if on_finish is not None:
                on_finish()
