"""Pure stateless unit conversions and BMI — math only, never raises.

NotAvailable is reported as None. Internal math keeps full precision; only
the display helpers round.
"""

from __future__ import annotations

import logging
import math

from pulseid.emergency.errors import InvalidUnit
from pulseid.emergency.models import BMICategory, BMIResult, Profile

logger = logging.getLogger(__name__)

METERS_PER_INCH = 0.0254
INCHES_PER_FOOT = 12
CM_PER_INCH = 2.54
LBS_PER_KG = 2.20462

BMI_MIN = 10.0
BMI_MAX = 50.0

NOT_AVAILABLE = "Not available"

HEIGHT_UNITS = ("cm", "ft")
WEIGHT_UNITS = ("kg", "lbs")


def _to_float(value: object) -> float | None:
    """Parse a finite float from a number or numeric string. None on failure."""
    if value is None or isinstance(value, bool):
        return None
    try:
        result = float(str(value).strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(result):
        return None
    return result


def _to_whole(value: object, default: int | None = None) -> int | None:
    """Parse a whole number (\"5\", 5, 5.0). Blank or missing gives `default`."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return default
    num = _to_float(value)
    if num is None or not num.is_integer():
        return None
    return int(num)


def _split_feet_inches(text: str) -> tuple[str, str] | None:
    """Split the 5'11\" display form into its feet and inches parts."""
    if "'" not in text:
        return None
    feet, _, inches = text.partition("'")
    return feet.strip(), inches.replace('"', "").strip()


def height_to_meters(
    value: object,
    unit: str | None,
    feet: object = None,
    inches: object = None,
) -> float | None:
    """Height in metres, or None when it cannot be derived.

    cm: `value` must be positive. ft: `feet` is a non-negative whole number
    and `inches` a whole number in [0, 11]; a missing `inches` counts as 0.
    When `feet` is absent, a 5'11\" style `value` is accepted too.
    """
    if unit == "cm":
        cm = _to_float(value)
        if cm is None or cm <= 0:
            logger.debug("height not available: bad cm value")
            return None
        return cm / 100.0

    if unit == "ft":
        if feet is None and isinstance(value, str):
            parts = _split_feet_inches(value)
            if parts is not None:
                feet, inches = parts
        ft = _to_whole(feet)
        inch = _to_whole(inches, default=0)
        if ft is None or inch is None or ft < 0 or not 0 <= inch <= 11:
            logger.debug("height not available: bad feet/inches")
            return None
        meters = (ft * INCHES_PER_FOOT + inch) * METERS_PER_INCH
        return meters if meters > 0 else None

    logger.debug("height not available: unit %r", unit)
    return None


def weight_to_kilograms(value: object, unit: str | None) -> float | None:
    """Weight in kilograms, or None when it cannot be derived."""
    num = _to_float(value)
    if num is None or num <= 0:
        return None
    if unit == "kg":
        return num
    if unit == "lbs":
        return num / LBS_PER_KG
    logger.debug("weight not available: unit %r", unit)
    return None


def bmi(height_m: float | None, weight_kg: float | None) -> float | None:
    """weight / height², or None outside the plausible human range [10, 50]."""
    h = _to_float(height_m)
    w = _to_float(weight_kg)
    if h is None or w is None or h <= 0 or w <= 0:
        return None
    result = w / (h * h)
    if not math.isfinite(result) or result < BMI_MIN or result > BMI_MAX:
        return None
    return result


def classify_bmi(value: float | None) -> BMICategory | None:
    """WHO adult categories. Lower bounds are inclusive."""
    if value is None or not math.isfinite(value):
        return None
    if value < 18.5:
        return BMICategory.underweight
    if value < 25:
        return BMICategory.normal
    if value < 30:
        return BMICategory.overweight
    return BMICategory.obese


# ---------------------------------------------------------------------------
# Inverses (canonical metric form back to display units)
# ---------------------------------------------------------------------------


def meters_to_height(meters: float | None, unit: str) -> float | tuple[int, int] | None:
    """cm value, or a (feet, inches) pair with inches rounded to the nearest whole."""
    m = _to_float(meters)
    if m is None or m <= 0:
        return None
    if unit == "cm":
        return m * 100.0
    if unit == "ft":
        total_inches = round(m / METERS_PER_INCH)
        return total_inches // INCHES_PER_FOOT, total_inches % INCHES_PER_FOOT
    return None


def kilograms_to_weight(kg: float | None, unit: str) -> float | None:
    w = _to_float(kg)
    if w is None or w <= 0:
        return None
    if unit == "kg":
        return w
    if unit == "lbs":
        return w * LBS_PER_KG
    return None


# ---------------------------------------------------------------------------
# Display conversions used when the editor switches units
# ---------------------------------------------------------------------------


def convert_height(value: str, from_unit: str, to_unit: str) -> str | tuple[str, str] | None:
    """Re-express a displayed height in another unit.

    cm -> ft gives (feet, inches) strings; ft ("5'11") -> cm gives whole
    centimetres. Raises InvalidUnit for an unknown unit, returns None when
    the value does not parse.
    """
    for unit in (from_unit, to_unit):
        if unit not in HEIGHT_UNITS:
            raise InvalidUnit(unit)
    if from_unit == to_unit:
        return value
    meters = height_to_meters(value, from_unit)
    if meters is None:
        return None
    if to_unit == "ft":
        feet, inches = meters_to_height(meters, "ft")
        return str(feet), str(inches)
    return str(round(meters * 100))


def convert_weight(value: str, from_unit: str, to_unit: str) -> str | None:
    """Re-express a displayed weight in another unit, to one decimal."""
    for unit in (from_unit, to_unit):
        if unit not in WEIGHT_UNITS:
            raise InvalidUnit(unit)
    if from_unit == to_unit:
        return value
    kg = weight_to_kilograms(value, from_unit)
    if kg is None:
        return None
    return f"{kilograms_to_weight(kg, to_unit):.1f}"


# ---------------------------------------------------------------------------
# Profile-level helpers
# ---------------------------------------------------------------------------


def profile_height_m(profile: Profile) -> float | None:
    return height_to_meters(
        profile.height, profile.height_unit, profile.height_feet, profile.height_inches
    )


def profile_bmi(profile: Profile) -> float | None:
    """BMI derived from the profile's height and weight, None when unavailable."""
    return bmi(profile_height_m(profile), weight_to_kilograms(profile.weight, profile.weight_unit))


def format_bmi(value: float | None) -> str:
    """'21.6 (Normal)' or 'Not available'."""
    category = classify_bmi(value)
    if value is None or category is None:
        return NOT_AVAILABLE
    return f"{value:.1f} ({category.value})"


def bmi_result(
    height: object,
    height_unit: str | None,
    weight: object,
    weight_unit: str | None,
    height_feet: object = None,
    height_inches: object = None,
) -> BMIResult:
    height_m = height_to_meters(height, height_unit, height_feet, height_inches)
    weight_kg = weight_to_kilograms(weight, weight_unit)
    value = bmi(height_m, weight_kg)
    return BMIResult(
        height_m=height_m,
        weight_kg=weight_kg,
        bmi=value,
        category=classify_bmi(value),
        display=format_bmi(value),
    )
