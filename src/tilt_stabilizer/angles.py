"""
Angle helpers shared by the estimator, calibrator and transform builder.

All angles are radians. The canonical range is the half-open interval
(-pi, pi]: -pi itself is folded onto +pi.
"""

import math

HALF_PI = math.pi / 2
TWO_PI = 2 * math.pi


def normalize_angle(angle: float) -> float:
    """
    Fold an angle into (-pi, pi] with a single +/- 2*pi correction.

    Callers only ever pass differences or sums of two already-normalized
    angles, so one correction is always enough.
    """
    if angle > math.pi:
        angle -= TWO_PI
    elif angle <= -math.pi:
        angle += TWO_PI
    return angle


def wrap_angle(angle: float) -> float:
    """Fold an angle of any magnitude into (-pi, pi]."""
    wrapped = math.remainder(angle, TWO_PI)
    if wrapped <= -math.pi:
        wrapped += TWO_PI
    return wrapped


def round_half_away(value: float) -> float:
    """Round to the nearest integer, ties away from zero (unlike round())."""
    return math.copysign(math.floor(abs(value) + 0.5), value)


def quantize_to_right_angle(angle: float) -> float:
    """
    Snap an angle to the nearest multiple of pi/2.

    Returns one of -pi/2, 0, pi/2, pi. Exact 45 degree ties round away
    from zero.
    """
    quarter_turns = round_half_away(angle / HALF_PI)
    # -0.0 from copysign would survive normalization
    return normalize_angle(quarter_turns * HALF_PI) + 0.0


def describe_tilt(angle: float) -> str:
    """Human readable guess at how the device is held for a given angle."""
    degrees = math.degrees(angle)
    if -45 < degrees < 45:
        return "near baseline orientation"
    if 45 <= degrees <= 135:
        return "tilted ~90 deg in one direction"
    if -135 <= degrees <= -45:
        return "tilted ~90 deg in the opposite direction"
    return "possibly upside-down or beyond 90 deg tilt"
