"""
Deadline tracking for annotate batches.

One :class:`Deadline` is created per batch and shared by every item's
confirmation watch, so the total time a request may block is bounded
by ``request_timeout_seconds`` no matter how many items it carries.
"""

from __future__ import annotations

import math
import time
from dataclasses import dataclass, field


@dataclass(frozen=True)
class Deadline:
    """Absolute deadline on the monotonic clock.

    Attributes:
        deadline: Absolute deadline timestamp (monotonic clock)
        timeout_seconds: Original timeout the deadline was derived from
        start_time: When the deadline was created
    """

    deadline: float
    timeout_seconds: float
    start_time: float = field(default_factory=time.monotonic)

    @classmethod
    def after(cls, seconds: float) -> Deadline:
        if seconds < 0:
            raise ValueError(f"Timeout must be non-negative, got {seconds}")
        now = time.monotonic()
        return cls(deadline=now + seconds, timeout_seconds=seconds, start_time=now)

    def remaining(self) -> float:
        """Seconds left, never negative."""
        return max(0.0, self.deadline - time.monotonic())

    def remaining_whole_seconds(self) -> int:
        """Remaining time rounded up, at least 1 (server-side watch timeouts are integers)."""
        return max(1, math.ceil(self.remaining()))

    @property
    def elapsed(self) -> float:
        return time.monotonic() - self.start_time

    def is_expired(self) -> bool:
        return time.monotonic() >= self.deadline
