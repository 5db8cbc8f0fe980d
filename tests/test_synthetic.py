"""
Tests for the synthetic sensor and frame generators.
"""

import math

import numpy as np
import pytest

from tilt_stabilizer.datatypes import FrameDimensions
from tilt_stabilizer.orientation_estimator import tilt_from_gravity
from tilt_stabilizer.synthetic import (
    SyntheticTiltMotion,
    checkerboard_frame,
    frame_timestamps,
    gravity_for_tilt,
)


@pytest.mark.parametrize("theta", [0.0, 0.4, -1.2, math.pi / 2, 3.0])
def test_gravity_for_tilt_reads_back(theta):
    sample = gravity_for_tilt(theta, z=0.3)
    assert math.hypot(sample.x, sample.y) == pytest.approx(math.sqrt(1 - 0.09))
    assert tilt_from_gravity(sample.x, sample.y) == pytest.approx(theta, abs=1e-12)


def test_motion_sample_count_and_timestamps():
    samples = list(SyntheticTiltMotion(seed=0).samples(duration=2.0, rate_hz=60.0))
    assert len(samples) == 120
    assert samples[0].timestamp == 0.0
    assert samples[1].timestamp == pytest.approx(1 / 60)


def test_motion_is_reproducible_with_seed():
    a = [s.x for s in SyntheticTiltMotion(seed=9).samples(0.5)]
    b = [s.x for s in SyntheticTiltMotion(seed=9).samples(0.5)]
    assert a == b


def test_frame_timestamps():
    assert frame_timestamps(0.1, 30) == pytest.approx([0.0, 1 / 30, 2 / 30])


def test_checkerboard_frame_shapes():
    dims = FrameDimensions(80, 60)
    color = checkerboard_frame(dims)
    gray = checkerboard_frame(dims, channels=1)
    assert color.shape == (60, 80, 3)
    assert gray.shape == (60, 80)
    assert color.dtype == np.uint8
    # corner marker
    assert tuple(color[2, 2]) == (0, 255, 0)
