"""
Applies a stabilization transform to an image buffer.

The warp rotates and zooms the frame about its center and renders the
result into a new buffer of exactly the session's frame dimensions, so the
encoder never sees a change in frame size.
"""

from typing import Literal

import numpy as np
import cv2

from .datatypes import FrameDimensions, StabilizationTransform


def _translation(tx: float, ty: float) -> np.ndarray:
    return np.array([
        [1, 0, tx],
        [0, 1, ty],
        [0, 0, 1]
    ], dtype=np.float64)


def _rotation(theta: float) -> np.ndarray:
    # Image rows grow downward, so this is a counter-clockwise rotation on
    # screen (same convention as cv2.getRotationMatrix2D)
    c, s = np.cos(theta), np.sin(theta)
    return np.array([
        [c, s, 0],
        [-s, c, 0],
        [0, 0, 1]
    ], dtype=np.float64)


def _scaling(scale: float) -> np.ndarray:
    return np.array([
        [scale, 0, 0],
        [0, scale, 0],
        [0, 0, 1]
    ], dtype=np.float64)


def affine_matrix(transform: StabilizationTransform, dims: FrameDimensions) -> np.ndarray:
    """
    2x3 source-to-destination matrix for a transform.

    Composition (applied right to left):
        translate(+center) . scale . rotate . translate(-center)
    Moving the center to the origin first keeps the frame pivoting in
    place instead of drifting off-frame.
    """
    cx, cy = dims.center
    M = (
        _translation(cx, cy)
        @ _scaling(transform.scale)
        @ _rotation(transform.rotation_radians)
        @ _translation(-cx, -cy)
    )
    return M[:2, :]


class FrameWarper:
    """
    Stateless frame renderer.

    Args:
        interpolation: Resampling filter
        border_value: Fill for pixels that map outside the source
    """

    def __init__(
        self,
        interpolation: Literal["nearest", "linear", "cubic"] = "linear",
        border_value: int = 0,
    ):
        # Interpolation flags for OpenCV
        self._interp_flags = {
            "nearest": cv2.INTER_NEAREST,
            "linear": cv2.INTER_LINEAR,
            "cubic": cv2.INTER_CUBIC,
        }
        if interpolation not in self._interp_flags:
            raise ValueError(f"Unknown interpolation: {interpolation}")
        self.interpolation = interpolation
        self.border_value = border_value

    def warp(
        self,
        frame: np.ndarray,
        transform: StabilizationTransform,
        dims: FrameDimensions,
    ) -> np.ndarray:
        """
        Render ``frame`` through ``transform`` into a new dims-sized buffer.

        Args:
            frame: Input image (H, W) or (H, W, C)
            transform: Rotation/scale to apply about the frame center
            dims: Output dimensions (also defines the pivot)

        Returns:
            Newly allocated image of shape (dims.height, dims.width[, C])

        Raises:
            ValueError: if the frame is empty or not an image array.
            MemoryError, cv2.error: if the output cannot be rendered; the
                caller is expected to drop the frame.
        """
        if not isinstance(frame, np.ndarray) or frame.ndim not in (2, 3) or frame.size == 0:
            raise ValueError("Frame must be a non-empty (H, W) or (H, W, C) array")

        same_size = frame.shape[0] == dims.height and frame.shape[1] == dims.width
        if transform.is_identity and same_size:
            return frame.copy()

        M = affine_matrix(transform, dims)
        warped = cv2.warpAffine(
            frame, M, (dims.width, dims.height),
            flags=self._interp_flags[self.interpolation],
            borderMode=cv2.BORDER_CONSTANT,
            borderValue=self.border_value
        )

        # OpenCV squeezes single-channel (H, W, 1) input down to (H, W)
        if frame.ndim == 3 and warped.ndim == 2:
            warped = warped[:, :, np.newaxis]
        return warped
