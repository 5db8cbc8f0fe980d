"""
Device tilt estimation from gravity samples.

Converts the in-plane component of the gravity vector into a roll angle
around the camera's optical axis and low-pass filters it with an
exponential moving average.

The estimator runs continuously, whether or not a recording is active.
``ingest`` is called from the sensor thread and ``current_angle`` from
the frame thread; the shared state lives in an ``AngleCell``.
"""

import logging
import math
from typing import Optional

from .angle_cell import AngleCell, AngleSnapshot
from .angles import normalize_angle
from .datatypes import GravitySample

logger = logging.getLogger(__name__)

DEFAULT_SMOOTHING_FACTOR = 0.9


def tilt_from_gravity(x: float, y: float) -> float:
    """
    Tilt angle (radians, in (-pi, pi]) for a gravity vector's x/y components.

    atan2 gives the direction of gravity in the screen plane; the -pi/2
    puts "gravity along -y" (device upright) at zero, the +pi corrects
    for the camera being mounted facing away from the screen, and the
    sign flip makes counter-clockwise device roll positive.
    """
    angle = math.atan2(y, x) - math.pi / 2
    angle += math.pi
    angle = -angle
    return normalize_angle(angle)


class OrientationEstimator:
    """
    Smoothed tilt estimate fed by a stream of gravity samples.

    Args:
        smoothing_factor: Weight given to the previous estimate, in [0, 1).
            0 disables smoothing.
    """

    def __init__(self, smoothing_factor: float = DEFAULT_SMOOTHING_FACTOR):
        if not 0.0 <= smoothing_factor < 1.0:
            raise ValueError(f"smoothing_factor must be in [0, 1), got {smoothing_factor}")
        self.smoothing_factor = smoothing_factor
        self._cell = AngleCell()

        # Only touched by the writer thread
        self.samples_ingested = 0
        self.samples_ignored = 0

    def ingest(self, sample: GravitySample) -> None:
        """Fold one gravity sample into the estimate."""
        if sample.is_degenerate:
            # atan2(0, 0) carries no direction; keep what we had
            self.samples_ignored += 1
            logger.debug("Ignoring degenerate gravity sample at t=%s", sample.timestamp)
            return

        raw = tilt_from_gravity(sample.x, sample.y)
        previous = self._cell.load()

        if previous.has_data and self.smoothing_factor > 0.0:
            angle = self._smooth(previous.angle, raw)
        else:
            angle = raw

        self._cell.store(AngleSnapshot(
            angle=angle,
            sample_count=previous.sample_count + 1,
            timestamp=sample.timestamp,
        ))
        self.samples_ingested += 1

    def _smooth(self, previous: float, raw: float) -> float:
        """
        angle = a * previous + (1 - a) * raw, taken along the shorter arc.

        Blending through the difference keeps a reading that crosses the
        +/-pi seam from being averaged through zero.
        """
        # equals the linear form whenever |raw - previous| < pi
        delta = normalize_angle(raw - previous)
        return normalize_angle(previous + (1.0 - self.smoothing_factor) * delta)

    def current_angle(self) -> float:
        """Latest smoothed tilt; 0.0 before the first usable sample."""
        return self._cell.load().angle

    def snapshot(self) -> AngleSnapshot:
        return self._cell.load()

    @property
    def last_timestamp(self) -> Optional[float]:
        return self._cell.load().timestamp

    def reset(self) -> None:
        """Return to the cold-start state."""
        self._cell.reset()
        self.samples_ingested = 0
        self.samples_ignored = 0
