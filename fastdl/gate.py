"""Cooldown gate deciding whether a trigger may start a new run."""

from __future__ import annotations

import logging
import math
import threading
import time
from collections.abc import Callable

from pydantic import BaseModel, ConfigDict

from fastdl.errors import ThrottleRejection

logger = logging.getLogger(__name__)


class TriggerDecision(BaseModel):
    """Outcome of a run request. ``wait_seconds`` is 0 when accepted."""

    model_config = ConfigDict(frozen=True)

    accepted: bool
    wait_seconds: int = 0


class RunCoordinator:
    """Holds the last accepted run start and enforces the cooldown.

    The timestamp is claimed at acceptance time, before the run starts, so a
    request arriving mid-run is rejected too. It only guards run *starts*: a
    run slower than the cooldown can still overlap the next one.
    """

    def __init__(
        self,
        cooldown_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if cooldown_seconds <= 0:
            raise ValueError("cooldown_seconds must be positive")
        self._cooldown = cooldown_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._last_update_ts: float | None = None

    @property
    def cooldown_seconds(self) -> float:
        return self._cooldown

    @property
    def last_update_ts(self) -> float | None:
        """Clock reading of the last accepted run, or None if never run."""
        with self._lock:
            return self._last_update_ts

    def request_run(self, now: float | None = None) -> TriggerDecision:
        """Accept and record a run start, or report how long to wait."""
        if now is None:
            now = self._clock()
        with self._lock:
            if self._last_update_ts is not None:
                # millisecond resolution keeps float noise out of the ceil
                elapsed = round(now - self._last_update_ts, 3)
                if elapsed < self._cooldown:
                    wait = math.ceil(self._cooldown - elapsed)
                    logger.info("Run rejected, %ds of cooldown left", wait)
                    return TriggerDecision(accepted=False, wait_seconds=wait)
            self._last_update_ts = now
        logger.info("Run accepted")
        return TriggerDecision(accepted=True)

    def claim(self, now: float | None = None) -> None:
        """Like ``request_run`` but raises ThrottleRejection when rejected."""
        decision = self.request_run(now)
        if not decision.accepted:
            raise ThrottleRejection(decision.wait_seconds)
