"""
Synthetic gravity streams and test frames.

Used by the ``simulate`` command and the tests to exercise the pipeline
without a device.
"""

import math
from typing import Iterator, List, Optional

import numpy as np
import cv2

from .datatypes import FrameDimensions, GravitySample


def gravity_for_tilt(theta: float, z: float = 0.0, timestamp: float = 0.0) -> GravitySample:
    """
    Gravity sample that the estimator reads back as tilt ``theta``.

    Inverse of ``tilt_from_gravity``: the in-plane component has unit
    length scaled by sqrt(1 - z^2).
    """
    planar = math.sqrt(max(0.0, 1.0 - z * z))
    direction = -theta - math.pi / 2
    return GravitySample(
        x=planar * math.cos(direction),
        y=planar * math.sin(direction),
        z=z,
        timestamp=timestamp,
    )


class SyntheticTiltMotion:
    """
    Handheld-style tilt: a slow sinusoidal sway around a base angle plus
    sensor noise.

    Args:
        base_angle: Tilt the device is held at (radians)
        amplitude: Peak sway (radians)
        frequency_hz: Sway frequency
        noise_std: Gaussian noise added to each sample's angle (radians)
        seed: Random seed for reproducibility
    """

    def __init__(
        self,
        base_angle: float = 0.0,
        amplitude: float = math.radians(10),
        frequency_hz: float = 0.5,
        noise_std: float = math.radians(0.5),
        seed: Optional[int] = None,
    ):
        self.base_angle = base_angle
        self.amplitude = amplitude
        self.frequency_hz = frequency_hz
        self.noise_std = noise_std
        self.rng = np.random.default_rng(seed)

    def angle_at(self, t: float) -> float:
        """Noise-free tilt at time t."""
        return self.base_angle + self.amplitude * math.sin(2 * math.pi * self.frequency_hz * t)

    def samples(self, duration: float, rate_hz: float = 60.0) -> Iterator[GravitySample]:
        """Gravity samples at a fixed rate over ``duration`` seconds."""
        n = int(round(duration * rate_hz))
        for i in range(n):
            t = i / rate_hz
            theta = self.angle_at(t)
            if self.noise_std > 0:
                theta += float(self.rng.normal(0.0, self.noise_std))
            yield gravity_for_tilt(theta, timestamp=t)


def frame_timestamps(duration: float, fps: float) -> List[float]:
    """Capture timestamps for a constant frame rate."""
    return [i / fps for i in range(int(round(duration * fps)))]


def checkerboard_frame(dims: FrameDimensions, square: int = 32, channels: int = 3) -> np.ndarray:
    """
    Checkerboard with a centered cross-hair and a corner marker.

    The marker makes rotation direction visible; the cross-hair makes
    drift of the pivot visible.
    """
    ys, xs = np.mgrid[0:dims.height, 0:dims.width]
    board = (((xs // square) + (ys // square)) % 2 * 155 + 50).astype(np.uint8)

    if channels == 1:
        frame = board
    else:
        frame = np.repeat(board[:, :, np.newaxis], channels, axis=2)

    cx, cy = dims.width // 2, dims.height // 2
    cv2.line(frame, (cx, 0), (cx, dims.height - 1), (0, 0, 255), 2)
    cv2.line(frame, (0, cy), (dims.width - 1, cy), (0, 0, 255), 2)
    marker = max(4, min(dims.width, dims.height) // 8)
    cv2.rectangle(frame, (0, 0), (marker, marker), (0, 255, 0), -1)
    return frame
