"""
Stabilization context for one recording.

The session captures a baseline when recording starts and, for every
frame, turns the estimator's current tilt into a transform relative to
that baseline and warps the frame with it.

Threading model:
- ``start``/``stop`` come from the control thread.
- ``process_frame`` runs on a dedicated frame thread.
- The estimator is fed from the sensor thread and is read here through
  its snapshot cell.

``stop`` waits for an in-flight warp to finish before it clears the
baseline, so a frame never sees half-reset session state.
"""

import logging
import math
import threading
from typing import Optional, Tuple

import numpy as np
import cv2

from .angles import describe_tilt, normalize_angle
from .baseline_calibrator import BaselineCalibrator
from .config import Config
from .datatypes import (
    BaselineOrientation,
    FrameDimensions,
    SessionState,
    SessionStats,
    StabilizationTransform,
    StabilizedFrame,
)
from .frame_warper import FrameWarper
from .orientation_estimator import OrientationEstimator
from .transform_builder import StabilizationTransformBuilder

logger = logging.getLogger(__name__)


class StabilizationSession:
    """
    Idle -> Calibrating -> Active -> Idle state machine around one recording.

    Args:
        estimator: Shared, continuously updated tilt estimator
        calibrator: Baseline calibrator (default instance if None)
        builder: Transform builder (default instance if None)
        warper: Frame warper (default instance if None)
        log_every_n_frames: Emit a sampled debug line every N frames
    """

    def __init__(
        self,
        estimator: OrientationEstimator,
        calibrator: Optional[BaselineCalibrator] = None,
        builder: Optional[StabilizationTransformBuilder] = None,
        warper: Optional[FrameWarper] = None,
        log_every_n_frames: int = 30,
    ):
        self.estimator = estimator
        self.calibrator = calibrator or BaselineCalibrator()
        self.builder = builder or StabilizationTransformBuilder()
        self.warper = warper or FrameWarper()
        self.log_every_n_frames = log_every_n_frames

        self._cond = threading.Condition()
        self._state = SessionState.IDLE
        self._draining = False
        self._in_flight = 0

        # Written once per recording under the lock, read-only while active
        self._baseline: Optional[float] = None
        self._orientation: Optional[BaselineOrientation] = None
        self._dims: Optional[FrameDimensions] = None

        self.stats = SessionStats()

    @classmethod
    def from_config(cls, estimator: OrientationEstimator, config: Config) -> "StabilizationSession":
        """Create a session with components configured from ``config``."""
        warper = FrameWarper(
            interpolation=config.warp.interpolation,
            border_value=config.warp.border_value,
        )
        return cls(
            estimator,
            warper=warper,
            log_every_n_frames=config.session.log_every_n_frames,
        )

    # ------------------------------------------------------------------
    # Control
    # ------------------------------------------------------------------

    def start(self, orientation: BaselineOrientation, dims: FrameDimensions) -> bool:
        """
        Begin a recording: capture the baseline and become active.

        Returns:
            False if the session is not idle (the call is ignored and the
            existing baseline is kept), True otherwise.
        """
        with self._cond:
            if self._state is not SessionState.IDLE or self._draining:
                logger.warning(f"start() ignored: session is {self._state.value}")
                return False

            self._state = SessionState.CALIBRATING
            try:
                baseline = self.calibrator.capture_baseline(self.estimator.current_angle(), orientation)
            except ValueError:
                self._state = SessionState.IDLE
                raise

            self._baseline = baseline
            self._orientation = orientation
            self._dims = dims
            self.stats = SessionStats()
            self._state = SessionState.ACTIVE

        logger.info(f"Stabilization active: {orientation.value}, {dims.width}x{dims.height}")
        return True

    def stop(self) -> bool:
        """
        End the recording.

        New frames are rejected immediately; the call then blocks until any
        warp already in progress has finished before discarding the
        baseline.

        Returns:
            False if the session was already idle.
        """
        with self._cond:
            if self._state is SessionState.IDLE or self._draining:
                return False

            self._draining = True
            while self._in_flight > 0:
                self._cond.wait()

            self._baseline = None
            self._orientation = None
            self._dims = None
            self._state = SessionState.IDLE
            self._draining = False
            stats = self.stats

        logger.info(
            f"Stabilization stopped: {stats.frames_processed} frames, "
            f"{stats.frames_dropped} dropped, {stats.frames_rejected} rejected, "
            f"max scale {stats.max_scale:.3f}"
        )
        return True

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        with self._cond:
            return self._state

    @property
    def is_active(self) -> bool:
        return self.state is SessionState.ACTIVE

    @property
    def baseline(self) -> Optional[float]:
        """Quantized baseline angle of the current recording, if any."""
        with self._cond:
            return self._baseline

    @property
    def orientation(self) -> Optional[BaselineOrientation]:
        with self._cond:
            return self._orientation

    @property
    def dims(self) -> Optional[FrameDimensions]:
        with self._cond:
            return self._dims

    @property
    def first_frame_timestamp(self) -> Optional[float]:
        """Timestamp of the first warped frame; the writer starts its session here."""
        with self._cond:
            return self.stats.first_frame_timestamp

    def _context(self) -> Optional[Tuple[float, BaselineOrientation, FrameDimensions]]:
        with self._cond:
            if self._state is not SessionState.ACTIVE or self._draining:
                return None
            return self._baseline, self._orientation, self._dims

    def _effective_angle(self, baseline: float) -> float:
        return normalize_angle(self.estimator.current_angle() - baseline)

    def effective_angle(self) -> Optional[float]:
        """Current tilt relative to the baseline, or None when not active."""
        context = self._context()
        if context is None:
            return None
        return self._effective_angle(context[0])

    def transform_for_frame(self) -> Optional[StabilizationTransform]:
        """Transform a frame arriving now would get, or None when not active."""
        context = self._context()
        if context is None:
            return None
        baseline, orientation, dims = context
        return self.builder.build(self._effective_angle(baseline), dims, orientation)

    # ------------------------------------------------------------------
    # Frame path
    # ------------------------------------------------------------------

    def _admit(self) -> Optional[Tuple[float, BaselineOrientation, FrameDimensions]]:
        with self._cond:
            if self._state is not SessionState.ACTIVE or self._draining:
                self.stats.frames_rejected += 1
                return None
            self._in_flight += 1
            return self._baseline, self._orientation, self._dims

    def _release(self) -> None:
        with self._cond:
            self._in_flight -= 1
            self._cond.notify_all()

    def process_frame(self, frame: np.ndarray, timestamp: float) -> Optional[StabilizedFrame]:
        """
        Stabilize one frame.

        Args:
            frame: Captured image (H, W[, C])
            timestamp: Capture timestamp; passed through unchanged

        Returns:
            StabilizedFrame, or None if the session is not active or the
            frame had to be dropped.
        """
        context = self._admit()
        if context is None:
            logger.debug("Frame at t=%s rejected: session not active", timestamp)
            return None

        try:
            baseline, orientation, dims = context
            effective = self._effective_angle(baseline)
            transform = self.builder.build(effective, dims, orientation)

            try:
                image = self.warper.warp(frame, transform, dims)
            except (MemoryError, cv2.error, ValueError) as e:
                with self._cond:
                    self.stats.frames_dropped += 1
                logger.warning("Dropping frame at t=%s: %s", timestamp, e)
                return None

            with self._cond:
                stats = self.stats
                stats.frames_processed += 1
                stats.max_scale = max(stats.max_scale, transform.scale)
                if stats.first_frame_timestamp is None:
                    stats.first_frame_timestamp = timestamp
                count = stats.frames_processed

            if self.log_every_n_frames and count % self.log_every_n_frames == 0:
                logger.debug(
                    "frame %d: tilt=%.4f rad, effective=%.1f deg, baseline=%.0f deg (%s), scale=%.3f - %s",
                    count,
                    self.estimator.current_angle(),
                    math.degrees(effective),
                    math.degrees(baseline),
                    orientation.value,
                    transform.scale,
                    describe_tilt(effective),
                )

            return StabilizedFrame(image=image, timestamp=timestamp, transform=transform)
        finally:
            self._release()
