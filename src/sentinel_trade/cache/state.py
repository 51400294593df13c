"""Availability state machine for the remote cache backend."""
import logging
import time
from collections.abc import Callable
from enum import Enum

logger = logging.getLogger(__name__)


class BackendState(str, Enum):
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"


class BackendAvailability:
    """Tracks whether the remote backend should be used: AVAILABLE <-> UNAVAILABLE.

    transition() is the only mutation point. It is called from connection
    probes and from the failure paths of individual operations; repeated
    transitions to the current state are no-ops, so racing callers converge.
    Runs on a single event loop, so no lock is held.
    """

    def __init__(
        self,
        reprobe_seconds: float = 30.0,
        *,
        initial: BackendState = BackendState.UNAVAILABLE,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._state = initial
        self._reprobe_seconds = reprobe_seconds
        self._clock = clock
        self._changed_at = clock()
        self._last_probe_at: float | None = None

    @property
    def state(self) -> BackendState:
        return self._state

    @property
    def available(self) -> bool:
        return self._state is BackendState.AVAILABLE

    def transition(self, target: BackendState, reason: str = "") -> bool:
        """Move to target state. Returns True if the state changed."""
        if target is self._state:
            return False
        self._state = target
        self._changed_at = self._clock()
        if target is BackendState.AVAILABLE:
            logger.info("Remote cache available%s", f" ({reason})" if reason else "")
        else:
            logger.warning(
                "Remote cache unavailable, using in-memory fallback%s",
                f" ({reason})" if reason else "",
            )
        return True

    def mark_available(self, reason: str = "") -> bool:
        return self.transition(BackendState.AVAILABLE, reason)

    def mark_unavailable(self, reason: str = "") -> bool:
        return self.transition(BackendState.UNAVAILABLE, reason)

    def should_probe(self) -> bool:
        """True when unavailable and the reprobe interval has elapsed since the last try."""
        if self.available:
            return False
        last = max(self._changed_at, self._last_probe_at or self._changed_at)
        return self._clock() - last >= self._reprobe_seconds

    def record_probe(self) -> None:
        self._last_probe_at = self._clock()
