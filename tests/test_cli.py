"""
Tests for the tilt-stabilizer command line.
"""

from click.testing import CliRunner

from tilt_stabilizer.cli import main
from tilt_stabilizer.config import Config


def test_transform_reports_scale():
    runner = CliRunner()
    result = runner.invoke(main, ["transform", "--angle-deg", "45", "--width", "1080", "--height", "1920"])
    assert result.exit_code == 0, result.output
    assert "Rotation: 45.00 deg" in result.output
    assert "Scale: 1.9642" in result.output


def test_transform_rejects_bad_dimensions():
    runner = CliRunner()
    result = runner.invoke(main, ["transform", "--angle-deg", "10", "--width", "0"])
    assert result.exit_code != 0


def test_init_config(tmp_path):
    path = tmp_path / "tilt.yaml"
    runner = CliRunner()
    result = runner.invoke(main, ["init-config", str(path)])
    assert result.exit_code == 0, result.output
    assert Config.from_yaml(path) == Config()


def test_simulate(tmp_path):
    path = tmp_path / "tilt.yaml"
    Config().to_yaml(path)

    runner = CliRunner()
    result = runner.invoke(main, [
        "simulate",
        "--config", str(path),
        "--duration", "0.5",
        "--fps", "30",
        "--width", "96",
        "--height", "64",
        "--seed", "4",
    ])

    assert result.exit_code == 0, result.output
    assert "Frames in: 15" in result.output
    assert "Frames stabilized: 15" in result.output
    assert "Frames dropped: 0" in result.output


def test_simulate_landscape_hold():
    runner = CliRunner()
    result = runner.invoke(main, [
        "simulate",
        "--duration", "0.2",
        "--width", "64",
        "--height", "48",
        "--hold-deg", "-90",
        "--orientation", "landscape",
    ])
    assert result.exit_code == 0, result.output
    assert "Frames stabilized: 6" in result.output
