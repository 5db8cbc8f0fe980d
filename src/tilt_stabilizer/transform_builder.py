"""
Rotation + zoom needed to level a frame without exposing empty corners.

Rotating a W x H rectangle by theta gives an axis-aligned bounding box of
    W|cos| + H|sin|  by  W|sin| + H|cos|.
Scaling the rotated image up by the larger of the two box/rectangle
ratios is the smallest uniform zoom for which the centered crop back to
W x H is completely filled.
"""

import math
from typing import Tuple

from .angles import wrap_angle
from .datatypes import BaselineOrientation, FrameDimensions, StabilizationTransform


def rotated_bounds(theta: float, ref_width: float, ref_height: float) -> Tuple[float, float]:
    """Width and height of the bounding box of a rectangle rotated by theta."""
    cos_t = abs(math.cos(theta))
    sin_t = abs(math.sin(theta))
    rotated_width = ref_width * cos_t + ref_height * sin_t
    rotated_height = ref_width * sin_t + ref_height * cos_t
    return rotated_width, rotated_height


def coverage_scale(theta: float, ref_width: float, ref_height: float) -> float:
    """Minimum zoom so the rotated-then-cropped frame has no border gaps."""
    rotated_width, rotated_height = rotated_bounds(theta, ref_width, ref_height)
    return max(rotated_width / ref_width, rotated_height / ref_height)


class StabilizationTransformBuilder:
    """Turns an effective tilt angle into a per-frame transform."""

    def build(
        self,
        effective_angle: float,
        dims: FrameDimensions,
        orientation: BaselineOrientation,
    ) -> StabilizationTransform:
        """
        Build the transform for one frame.

        Args:
            effective_angle: Tilt relative to the recording baseline (radians)
            dims: Encoded frame dimensions
            orientation: Recording baseline orientation; selects which
                side of the frame is treated as upright width

        Returns:
            StabilizationTransform whose rotation is the (normalized)
            effective angle
        """
        if not math.isfinite(effective_angle):
            raise ValueError(f"Effective angle must be finite, got {effective_angle}")

        theta = wrap_angle(effective_angle)
        if theta == 0.0:
            # Skip the trig; cos/sin identities already give exactly 1.0
            return StabilizationTransform(rotation_radians=0.0, scale=1.0)

        ref_width, ref_height = dims.reference(orientation)
        scale = coverage_scale(theta, ref_width, ref_height)
        return StabilizationTransform(rotation_radians=theta, scale=scale)
