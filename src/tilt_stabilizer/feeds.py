"""
Background workers that connect the external producers to the core.

Sensor samples and video frames arrive at unrelated rates from different
threads. Each producer pushes into its own bounded mailbox and a daemon
thread drains it:

- SensorFeed: GravitySample -> OrientationEstimator.ingest
- FrameWorker: (frame, timestamp) -> StabilizationSession.process_frame -> sink

``put`` never blocks; when a mailbox is full the new item is dropped and
counted, leaving backpressure to the producer.
"""

import logging
import threading
from queue import Queue, Empty, Full
from typing import Any, Callable, Optional

import numpy as np

from .datatypes import GravitySample, StabilizedFrame
from .orientation_estimator import OrientationEstimator
from .session import StabilizationSession

logger = logging.getLogger(__name__)


class _MailboxWorker:
    """Bounded queue drained by one daemon thread."""

    name = "mailbox"

    def __init__(self, maxsize: int, poll_timeout: float = 0.05):
        self.queue: Queue = Queue(maxsize=maxsize)
        self.poll_timeout = poll_timeout
        self.running = False
        self.thread: Optional[threading.Thread] = None
        self.lock = threading.Lock()

        # Statistics
        self.items_handled = 0
        self.items_dropped = 0
        self.errors = 0

    def start(self) -> bool:
        """Start the background thread. Returns False if already running."""
        if self.running:
            return False
        self.running = True
        self.thread = threading.Thread(target=self._run_loop, name=self.name, daemon=True)
        self.thread.start()
        return True

    def stop(self, drain: bool = True, timeout: float = 1.0) -> None:
        """
        Stop the background thread.

        Args:
            drain: Handle everything already queued before stopping
            timeout: Seconds to wait for the thread to exit
        """
        if drain and self.running:
            self.queue.join()
        self.running = False
        if self.thread:
            self.thread.join(timeout=timeout)
            self.thread = None

    def _offer(self, item: Any) -> bool:
        try:
            self.queue.put_nowait(item)
            return True
        except Full:
            with self.lock:
                self.items_dropped += 1
            return False

    def _run_loop(self) -> None:
        while self.running:
            try:
                item = self.queue.get(timeout=self.poll_timeout)
            except Empty:
                continue
            try:
                self._handle(item)
                with self.lock:
                    self.items_handled += 1
            except Exception:
                with self.lock:
                    self.errors += 1
                logger.exception(f"{self.name}: failed to handle item")
            finally:
                self.queue.task_done()

    def _handle(self, item: Any) -> None:
        raise NotImplementedError

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.stop()
        return False


class SensorFeed(_MailboxWorker):
    """Delivers gravity samples to the estimator on its own thread."""

    name = "sensor-feed"

    def __init__(self, estimator: OrientationEstimator, maxsize: int = 256, poll_timeout: float = 0.05):
        super().__init__(maxsize, poll_timeout)
        self.estimator = estimator

    def put(self, sample: GravitySample) -> bool:
        """Queue one sample; False if the mailbox was full."""
        return self._offer(sample)

    def _handle(self, sample: GravitySample) -> None:
        self.estimator.ingest(sample)


class FrameWorker(_MailboxWorker):
    """
    Stabilizes queued frames and hands the results to ``sink``.

    ``sink`` stands in for the external encoder; it receives every
    StabilizedFrame the session produces. Rejected or dropped frames never
    reach it.
    """

    name = "frame-worker"

    def __init__(
        self,
        session: StabilizationSession,
        sink: Callable[[StabilizedFrame], None],
        maxsize: int = 5,
        poll_timeout: float = 0.05,
    ):
        super().__init__(maxsize, poll_timeout)
        self.session = session
        self.sink = sink

    def put(self, frame: np.ndarray, timestamp: float) -> bool:
        """Queue one captured frame; False if the mailbox was full."""
        return self._offer((frame, timestamp))

    def _handle(self, item) -> None:
        frame, timestamp = item
        result = self.session.process_frame(frame, timestamp)
        if result is not None:
            self.sink(result)
