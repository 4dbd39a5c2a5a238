from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from src.models.geocode import Coordinate, DMSValue

# 6 decimal places is ~0.11 m at the equator
COORDINATE_PRECISION = Decimal("0.000001")

NEGATIVE_REFERENCES = {"S", "W"}


def round_coordinate(value: float) -> float:
    """
    Round a decimal-degree value to 6 places, half away from zero.

    The value is scaled through its decimal string form so that binary float
    noise (e.g. 2.2944999999999998) cannot push a half-way value the wrong way
    and split one place across two cache keys.
    """
    return float(Decimal(repr(float(value))).quantize(COORDINATE_PRECISION, rounding=ROUND_HALF_UP))


def convert_dms_to_dd(degrees, minutes, seconds, reference: Optional[str]) -> float:
    """
    Convert degrees/minutes/seconds plus a hemisphere letter to signed decimal degrees.

    S and W give negative values. Any other reference (including None or an
    unknown letter) leaves the sign unchanged rather than failing.
    """
    dd = float(degrees) + float(minutes) / 60 + float(seconds) / 3600
    if reference and reference.strip().upper() in NEGATIVE_REFERENCES:
        dd *= -1
    return round_coordinate(dd)


def dms_to_dd(value: DMSValue) -> float:
    degrees, minutes, seconds = value.values
    return convert_dms_to_dd(degrees, minutes, seconds, value.reference)


def normalize_coordinate(latitude: DMSValue, longitude: DMSValue) -> Coordinate:
    """Build the canonical cache coordinate from two DMS values."""
    return Coordinate(lat=dms_to_dd(latitude), lon=dms_to_dd(longitude))
