"""
Command-line interface for the tilt stabilizer.
"""

import math
import sys
from pathlib import Path
from typing import Optional
import logging

import click
from tqdm import tqdm

from .config import Config
from .datatypes import BaselineOrientation, FrameDimensions
from .feeds import FrameWorker, SensorFeed
from .orientation_estimator import OrientationEstimator
from .session import StabilizationSession
from .synthetic import SyntheticTiltMotion, checkerboard_frame, frame_timestamps, gravity_for_tilt
from .transform_builder import StabilizationTransformBuilder, rotated_bounds


# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

ORIENTATIONS = [o.value for o in BaselineOrientation]


@click.group()
@click.version_option(version="0.1.0")
def main():
    """Tilt Stabilizer - gravity-driven horizon leveling for handheld video."""
    pass


@main.command()
@click.argument("output_path", type=click.Path(path_type=Path))
def init_config(output_path: Path):
    """
    Create a default configuration file.
    """
    cfg = Config()
    cfg.to_yaml(output_path)
    click.echo(f"Created configuration file: {output_path}")


@main.command()
@click.option("--angle-deg", type=float, required=True, help="Effective tilt in degrees")
@click.option("--width", type=int, default=1080, help="Frame width in pixels")
@click.option("--height", type=int, default=1920, help="Frame height in pixels")
@click.option(
    "--orientation",
    type=click.Choice(ORIENTATIONS),
    default="portrait",
    help="Recording baseline orientation"
)
def transform(angle_deg: float, width: int, height: int, orientation: str):
    """
    Show the rotation and zoom applied for a given tilt.
    """
    try:
        dims = FrameDimensions(width, height)
    except ValueError as e:
        raise click.BadParameter(str(e))

    base = BaselineOrientation(orientation)
    result = StabilizationTransformBuilder().build(math.radians(angle_deg), dims, base)
    ref_w, ref_h = dims.reference(base)
    rotated_w, rotated_h = rotated_bounds(result.rotation_radians, ref_w, ref_h)

    click.echo(f"Reference frame: {ref_w}x{ref_h} ({orientation})")
    click.echo(f"  Rotation: {result.rotation_degrees:.2f} deg")
    click.echo(f"  Rotated bounds: {rotated_w:.1f}x{rotated_h:.1f}")
    click.echo(f"  Scale: {result.scale:.4f}")


@main.command()
@click.option(
    "-c", "--config",
    type=click.Path(exists=True, path_type=Path),
    help="Configuration YAML file"
)
@click.option("--duration", type=float, default=2.0, help="Recording length in seconds")
@click.option("--fps", type=float, default=30.0, help="Frame rate")
@click.option("--sensor-rate", type=float, default=60.0, help="Gravity sample rate in Hz")
@click.option("--width", type=int, default=320, help="Frame width in pixels")
@click.option("--height", type=int, default=240, help="Frame height in pixels")
@click.option("--hold-deg", type=float, default=0.0, help="Angle the device is held at")
@click.option("--sway-deg", type=float, default=10.0, help="Peak sway amplitude in degrees")
@click.option(
    "--orientation",
    type=click.Choice(ORIENTATIONS),
    default="portrait",
    help="Recording baseline orientation"
)
@click.option("--seed", type=int, default=None, help="Random seed")
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Enable verbose output"
)
def simulate(
    config: Optional[Path],
    duration: float,
    fps: float,
    sensor_rate: float,
    width: int,
    height: int,
    hold_deg: float,
    sway_deg: float,
    orientation: str,
    seed: Optional[int],
    verbose: bool,
):
    """
    Run a recording with synthetic sensor data and frames.

    Sensor samples and frames are pushed through the same threaded feeds
    a device integration would use.
    """
    cfg = Config.from_yaml(config) if config else Config()
    cfg.verbose = cfg.verbose or verbose
    if cfg.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        dims = FrameDimensions(width, height)
    except ValueError as e:
        raise click.BadParameter(str(e))

    motion = SyntheticTiltMotion(
        base_angle=math.radians(hold_deg),
        amplitude=math.radians(sway_deg),
        seed=seed,
    )
    estimator = OrientationEstimator(smoothing_factor=cfg.estimator.smoothing_factor)
    session = StabilizationSession.from_config(estimator, cfg)

    outputs = []
    sensor_feed = SensorFeed(estimator, cfg.feeds.sensor_queue_size, cfg.feeds.poll_timeout_s)
    frame_worker = FrameWorker(session, outputs.append, cfg.feeds.frame_queue_size, cfg.feeds.poll_timeout_s)

    samples = list(motion.samples(duration, sensor_rate))
    frames = frame_timestamps(duration, fps)
    frame = checkerboard_frame(dims)

    # Prime the estimator with the resting pose before recording starts
    estimator.ingest(gravity_for_tilt(motion.base_angle))

    try:
        with sensor_feed, frame_worker:
            session.start(BaselineOrientation(orientation), dims)

            sample_idx = 0
            for t in tqdm(frames, desc="Frames", unit="frame", disable=not cfg.verbose):
                while sample_idx < len(samples) and samples[sample_idx].timestamp <= t:
                    sensor_feed.put(samples[sample_idx])
                    sample_idx += 1
                # Block so the synthetic source does not outrun the worker
                frame_worker.queue.put((frame, t))

            frame_worker.queue.join()
            session.stop()
    except Exception as e:
        click.echo(click.style(f"Error: {e}", fg="red"))
        if cfg.verbose:
            import traceback
            traceback.print_exc()
        sys.exit(1)

    stats = session.stats
    click.echo("Simulation complete")
    click.echo(f"  Frames in: {len(frames)}")
    click.echo(f"  Frames stabilized: {stats.frames_processed}")
    click.echo(f"  Frames dropped: {stats.frames_dropped}")
    click.echo(f"  Sensor samples: {estimator.samples_ingested} ({sensor_feed.items_dropped} dropped)")
    click.echo(f"  Max scale: {stats.max_scale:.3f}")
    if outputs:
        angles = [math.degrees(out.transform.rotation_radians) for out in outputs]
        click.echo(f"  Rotation range: {min(angles):.1f} .. {max(angles):.1f} deg")


if __name__ == "__main__":
    main()
