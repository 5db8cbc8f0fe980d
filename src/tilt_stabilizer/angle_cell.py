"""
Single-writer / single-reader cell holding the latest tilt estimate.

The sensor thread publishes a whole ``AngleSnapshot`` at once; the frame
thread reads one snapshot. Readers never observe a half-updated estimate.
"""

import threading
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class AngleSnapshot:
    """Immutable view of the estimator's state at one instant."""
    angle: float = 0.0
    sample_count: int = 0
    timestamp: Optional[float] = None  # of the last accepted sample

    @property
    def has_data(self) -> bool:
        return self.sample_count > 0


class AngleCell:
    """Lock-guarded latest-value cell."""

    def __init__(self):
        self._lock = threading.Lock()
        self._snapshot = AngleSnapshot()

    def load(self) -> AngleSnapshot:
        with self._lock:
            return self._snapshot

    def store(self, snapshot: AngleSnapshot) -> None:
        with self._lock:
            self._snapshot = snapshot

    def reset(self) -> None:
        self.store(AngleSnapshot())
