"""
Tests for YAML configuration loading and saving.
"""

import yaml

from tilt_stabilizer.config import Config


def test_defaults():
    cfg = Config()
    assert cfg.estimator.smoothing_factor == 0.9
    assert cfg.warp.interpolation == "linear"
    assert cfg.session.log_every_n_frames == 30
    assert cfg.feeds.frame_queue_size == 5
    assert cfg.verbose is False


def test_yaml_round_trip(tmp_path):
    cfg = Config()
    cfg.estimator.smoothing_factor = 0.5
    cfg.warp.border_value = 16
    cfg.verbose = True

    path = tmp_path / "config.yaml"
    cfg.to_yaml(path)
    loaded = Config.from_yaml(path)

    assert loaded == cfg


def test_partial_yaml_keeps_other_defaults(tmp_path):
    path = tmp_path / "partial.yaml"
    path.write_text(yaml.dump({"warp": {"interpolation": "cubic"}}))

    cfg = Config.from_yaml(path)

    assert cfg.warp.interpolation == "cubic"
    assert cfg.warp.border_value == 0
    assert cfg.estimator.smoothing_factor == 0.9


def test_empty_yaml(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert Config.from_yaml(path) == Config()
