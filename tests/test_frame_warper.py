"""
Tests for the affine frame warp.
"""

import math

import numpy as np
import pytest
import cv2

from tilt_stabilizer.datatypes import FrameDimensions, StabilizationTransform
from tilt_stabilizer.frame_warper import FrameWarper, affine_matrix
from tilt_stabilizer.synthetic import checkerboard_frame
from tilt_stabilizer.transform_builder import coverage_scale

IDENTITY = StabilizationTransform(rotation_radians=0.0, scale=1.0)


@pytest.fixture
def warper():
    return FrameWarper()


def test_identity_reproduces_frame(warper):
    dims = FrameDimensions(160, 120)
    frame = checkerboard_frame(dims)
    out = warper.warp(frame, IDENTITY, dims)
    np.testing.assert_array_equal(out, frame)
    assert out is not frame


def test_identity_matrix_render_matches_source():
    dims = FrameDimensions(64, 48)
    frame = checkerboard_frame(dims, square=8)
    out = cv2.warpAffine(frame, affine_matrix(IDENTITY, dims), (dims.width, dims.height))
    np.testing.assert_allclose(out, frame, atol=1)


def test_matrix_matches_opencv_rotation_matrix():
    dims = FrameDimensions(1280, 720)
    transform = StabilizationTransform(rotation_radians=0.3, scale=1.25)
    expected = cv2.getRotationMatrix2D((639.5, 359.5), math.degrees(0.3), 1.25)
    np.testing.assert_allclose(affine_matrix(transform, dims), expected, atol=1e-9)


def test_center_is_fixed_point():
    dims = FrameDimensions(300, 200)
    M = affine_matrix(StabilizationTransform(rotation_radians=1.1, scale=1.7), dims)
    center = M @ np.array([149.5, 99.5, 1.0])
    np.testing.assert_allclose(center, [149.5, 99.5], atol=1e-9)


def test_output_matches_dims_for_mismatched_frame(warper):
    dims = FrameDimensions(120, 90)
    frame = np.full((80, 100, 3), 128, dtype=np.uint8)
    out = warper.warp(frame, StabilizationTransform(0.1, 1.1), dims)
    assert out.shape == (90, 120, 3)

    # identity transform on a partial frame still yields a dims-sized buffer
    out = warper.warp(frame, IDENTITY, dims)
    assert out.shape == (90, 120, 3)


def test_rotation_without_zoom_exposes_corners(warper):
    dims = FrameDimensions(200, 100)
    frame = np.full((100, 200, 3), 200, dtype=np.uint8)
    out = warper.warp(frame, StabilizationTransform(math.radians(30), 1.0), dims)
    assert (out[0, 0] == 0).all()
    assert (out[-1, -1] == 0).all()


def test_half_turn_keeps_center_pixel_of_odd_frame():
    dims = FrameDimensions(5, 5)
    frame = np.zeros((5, 5), dtype=np.uint8)
    frame[2, 2] = 255
    out = FrameWarper(interpolation="nearest").warp(frame, StabilizationTransform(math.pi, 1.0), dims)
    assert out[2, 2] == 255
    assert out.sum() == 255


@pytest.mark.parametrize("width, height", [(200, 100), (1080, 1920)])
def test_exact_coverage_zoom_leaves_no_gaps(warper, width, height):
    dims = FrameDimensions(width, height)
    frame = np.full((height, width, 3), 200, dtype=np.uint8)
    theta = math.radians(30)
    scale = coverage_scale(theta, width, height)
    out = warper.warp(frame, StabilizationTransform(theta, scale), dims)
    # only the outermost ring may blend with the border
    assert (out > 0).all()
    assert (out[1:-1, 1:-1] == 200).all()


def test_grayscale_and_single_channel_shapes(warper):
    dims = FrameDimensions(64, 48)
    transform = StabilizationTransform(0.2, 1.2)

    gray = np.full((48, 64), 90, dtype=np.uint8)
    assert warper.warp(gray, transform, dims).shape == (48, 64)

    single = np.full((48, 64, 1), 90, dtype=np.uint8)
    assert warper.warp(single, transform, dims).shape == (48, 64, 1)


def test_bgra_and_dtype_preserved(warper):
    dims = FrameDimensions(64, 48)
    frame = np.ones((48, 64, 4), dtype=np.float32)
    out = warper.warp(frame, StabilizationTransform(0.2, 1.3), dims)
    assert out.shape == (48, 64, 4)
    assert out.dtype == np.float32


@pytest.mark.parametrize("interpolation", ["nearest", "linear", "cubic"])
def test_interpolation_modes(interpolation):
    dims = FrameDimensions(64, 48)
    out = FrameWarper(interpolation=interpolation).warp(checkerboard_frame(dims), StabilizationTransform(0.5, 1.5), dims)
    assert out.shape == (48, 64, 3)


def test_unknown_interpolation_rejected():
    with pytest.raises(ValueError):
        FrameWarper(interpolation="lanczos")


@pytest.mark.parametrize("frame", [np.zeros((0, 10, 3), dtype=np.uint8), np.zeros(5), "not an image"])
def test_invalid_frame_rejected(warper, frame):
    with pytest.raises(ValueError):
        warper.warp(frame, IDENTITY, FrameDimensions(10, 10))
