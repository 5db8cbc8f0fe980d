"""
Data structures passed between the stabilization components.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

import numpy as np


@dataclass(frozen=True)
class GravitySample:
    """One gravity reading in the device frame (units of g)."""
    x: float
    y: float
    z: float
    timestamp: float = 0.0  # seconds

    @property
    def is_degenerate(self) -> bool:
        """True when the vector has no usable in-plane component."""
        if not (math.isfinite(self.x) and math.isfinite(self.y)):
            return True
        return self.x == 0.0 and self.y == 0.0


class BaselineOrientation(Enum):
    """Coarse device orientation chosen once per recording."""

    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"

    @property
    def display_rotation(self) -> float:
        """
        Display rotation hint (radians) for the external video writer.

        Frames are always delivered in the sensor's native landscape
        layout, so portrait recordings ask the player to rotate by 90 deg.
        """
        if self is BaselineOrientation.PORTRAIT:
            return math.pi / 2
        return 0.0


@dataclass(frozen=True)
class FrameDimensions:
    """Pixel size of the frames for one capture session."""
    width: int
    height: int

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Frame dimensions must be positive, got {self.width}x{self.height}")

    def reference(self, orientation: BaselineOrientation) -> Tuple[int, int]:
        """(width, height) of the intended-upright rectangle."""
        if orientation is BaselineOrientation.LANDSCAPE:
            return self.height, self.width
        return self.width, self.height

    @property
    def center(self) -> Tuple[float, float]:
        """Pivot in pixel-center coordinates (pixel i spans i-0.5..i+0.5)."""
        return (self.width - 1) / 2, (self.height - 1) / 2


@dataclass(frozen=True)
class StabilizationTransform:
    """Rotation and uniform scale applied to one frame."""
    rotation_radians: float
    scale: float

    @property
    def is_identity(self) -> bool:
        return self.rotation_radians == 0.0 and self.scale == 1.0

    @property
    def rotation_degrees(self) -> float:
        return math.degrees(self.rotation_radians)


IDENTITY_TRANSFORM = StabilizationTransform(rotation_radians=0.0, scale=1.0)


class SessionState(Enum):
    """Lifecycle of one recording's stabilization context."""

    IDLE = "idle"
    CALIBRATING = "calibrating"
    ACTIVE = "active"


@dataclass
class StabilizedFrame:
    """Warped frame handed back to the encoder."""
    image: np.ndarray
    timestamp: float  # untouched capture timestamp
    transform: StabilizationTransform


@dataclass
class SessionStats:
    """Per-recording frame counters."""
    frames_processed: int = 0
    frames_dropped: int = 0   # warp failed
    frames_rejected: int = 0  # arrived while not active
    max_scale: float = 1.0
    first_frame_timestamp: Optional[float] = None
