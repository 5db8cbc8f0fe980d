"""
Per-recording baseline ("what counts as upright").

At record-start the current tilt is snapped to the nearest right angle.
Landscape recordings always calibrate to +pi/2, whichever way the device
was turned, so both landscape grips produce the same output framing.
"""

import logging
import math

from .angles import HALF_PI, normalize_angle, quantize_to_right_angle
from .datatypes import BaselineOrientation, GravitySample

logger = logging.getLogger(__name__)


def coarse_orientation(sample: GravitySample) -> BaselineOrientation:
    """
    Classify how the device is held from one gravity sample.

    Gravity mostly along the device's x axis means it is on its side.
    Face-up/face-down or otherwise degenerate readings default to portrait.
    """
    if sample.is_degenerate:
        return BaselineOrientation.PORTRAIT
    if abs(sample.x) > abs(sample.y):
        return BaselineOrientation.LANDSCAPE
    return BaselineOrientation.PORTRAIT


class BaselineCalibrator:
    """Computes the quantized baseline angle for a recording."""

    def capture_baseline(self, current_angle: float, orientation: BaselineOrientation) -> float:
        """
        Quantized baseline for a recording starting at ``current_angle``.

        Args:
            current_angle: Estimator tilt at record-start (radians)
            orientation: Coarse orientation chosen for the recording

        Returns:
            One of -pi/2, 0, pi/2, pi
        """
        if not math.isfinite(current_angle):
            raise ValueError(f"Cannot calibrate from non-finite angle {current_angle}")

        baseline = quantize_to_right_angle(current_angle)

        if orientation is BaselineOrientation.LANDSCAPE and baseline == -HALF_PI:
            baseline = normalize_angle(baseline + math.pi)

        logger.info(
            f"Baseline captured: {math.degrees(baseline):.0f} deg "
            f"(tilt {math.degrees(current_angle):.1f} deg, {orientation.value})"
        )
        return baseline
