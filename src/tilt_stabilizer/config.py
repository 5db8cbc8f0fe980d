"""
Configuration management for the tilt stabilizer.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal
import yaml


@dataclass
class EstimatorConfig:
    """Tilt estimation configuration."""

    smoothing_factor: float = 0.9  # weight on history; 0 disables smoothing


@dataclass
class WarpConfig:
    """Frame warping configuration."""

    interpolation: Literal["nearest", "linear", "cubic"] = "linear"
    border_value: int = 0


@dataclass
class SessionConfig:
    """Recording session configuration."""

    log_every_n_frames: int = 30  # sampled debug logging, 0 disables


@dataclass
class FeedConfig:
    """Mailbox sizes for the sensor and frame worker threads."""

    sensor_queue_size: int = 256  # ~4s at 60 Hz
    frame_queue_size: int = 5
    poll_timeout_s: float = 0.05


@dataclass
class Config:
    """Main configuration container."""

    estimator: EstimatorConfig = field(default_factory=EstimatorConfig)
    warp: WarpConfig = field(default_factory=WarpConfig)
    session: SessionConfig = field(default_factory=SessionConfig)
    feeds: FeedConfig = field(default_factory=FeedConfig)

    verbose: bool = False

    @classmethod
    def from_yaml(cls, path: Path) -> "Config":
        """Load configuration from YAML file."""
        with open(path, "r") as f:
            data = yaml.safe_load(f)
        return cls._from_dict(data or {})

    @classmethod
    def _from_dict(cls, data: dict) -> "Config":
        """Create Config from dictionary."""
        config = cls()

        if "estimator" in data:
            config.estimator = EstimatorConfig(**data["estimator"])
        if "warp" in data:
            config.warp = WarpConfig(**data["warp"])
        if "session" in data:
            config.session = SessionConfig(**data["session"])
        if "feeds" in data:
            config.feeds = FeedConfig(**data["feeds"])

        config.verbose = data.get("verbose", False)

        return config

    def to_yaml(self, path: Path) -> None:
        """Save configuration to YAML file."""
        import dataclasses

        data = dataclasses.asdict(self)
        with open(path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)
