"""
Tilt Stabilizer
===============

Real-time horizon leveling for handheld video driven by the device's
gravity sensor.

Main components:
- orientation_estimator: Gravity vector -> smoothed tilt angle
- baseline_calibrator: Per-recording upright reference, snapped to a right angle
- transform_builder: Rotation and border-free zoom for a tilt
- frame_warper: Affine warp of an image buffer about its center
- session: Recording state machine tying the above together
- feeds: Mailbox threads connecting sensor and frame producers to the core
"""

__version__ = "0.1.0"

from .config import Config
from .datatypes import (
    GravitySample,
    BaselineOrientation,
    FrameDimensions,
    StabilizationTransform,
    StabilizedFrame,
    SessionState,
    SessionStats,
)
from .angles import normalize_angle, quantize_to_right_angle
from .orientation_estimator import OrientationEstimator, tilt_from_gravity
from .baseline_calibrator import BaselineCalibrator, coarse_orientation
from .transform_builder import StabilizationTransformBuilder, coverage_scale
from .frame_warper import FrameWarper, affine_matrix
from .session import StabilizationSession
from .feeds import SensorFeed, FrameWorker

__all__ = [
    "Config",
    "GravitySample",
    "BaselineOrientation",
    "FrameDimensions",
    "StabilizationTransform",
    "StabilizedFrame",
    "SessionState",
    "SessionStats",
    "normalize_angle",
    "quantize_to_right_angle",
    "OrientationEstimator",
    "tilt_from_gravity",
    "BaselineCalibrator",
    "coarse_orientation",
    "StabilizationTransformBuilder",
    "coverage_scale",
    "FrameWarper",
    "affine_matrix",
    "StabilizationSession",
    "SensorFeed",
    "FrameWorker",
    "__version__",
]
