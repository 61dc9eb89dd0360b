"""Field parsing utilities for Enfora telemetry sentences.

Enfora frames carry comma- and space-separated tokens, many of which may be
empty. These utilities treat empty or malformed tokens as "no data" and
return None instead of raising, allowing callers to distinguish "not
reported" from a reported zero.
"""

# Analog channels and battery voltage are reported in millivolts
_MILLI = 0.001

_NEGATIVE_HEMISPHERES = ("S", "W")


def parse_int_field(value: str | None) -> int | None:
    """Parse a string field to int, returning None if empty or invalid.

    Args:
        value: Raw token from the sentence, possibly None for a capture
            group that did not participate in the match

    Returns:
        Parsed integer value, or None if the token is empty or unparseable

    Example:
        >>> parse_int_field("08")
        8
        >>> parse_int_field("-")  # sign without digits
        None
    """
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def parse_float_field(value: str | None) -> float | None:
    """Parse a string field to float, returning None if empty or invalid.

    Example:
        >>> parse_float_field("12.50")
        12.5
        >>> parse_float_field("")
        None
    """
    if not value:
        return None
    try:
        return float(value)
    except ValueError:
        return None


def convert_to_decimal_degrees(
    degrees: str | None,
    minutes: str | None,
    hemisphere: str | None,
) -> float | None:
    """Convert a split NMEA coordinate to decimal degrees.

    The telemetry grammar already separates the degrees digits (two for
    latitude, three for longitude) from the decimal minutes, so no
    decimal-point arithmetic is needed here. Sign convention:
    - North/East = positive
    - South/West = negative

    The conversion formula is:
        decimal_degrees = degrees + (minutes / 60)

    Args:
        degrees: Whole degrees (e.g. "02" or "003")
        minutes: Decimal minutes (e.g. "30.000000")
        hemisphere: "N", "S", "E" or "W"

    Returns:
        Decimal degrees, or None if any part is empty or unparseable

    Example:
        >>> convert_to_decimal_degrees("02", "30.000000", "N")
        2.5
        >>> convert_to_decimal_degrees("003", "15.000000", "W")
        -3.25
    """
    if not hemisphere:
        return None

    whole = parse_int_field(degrees)
    fraction = parse_float_field(minutes)
    if whole is None or fraction is None:
        return None

    decimal_degrees = whole + fraction / 60.0

    if hemisphere in _NEGATIVE_HEMISPHERES:
        return -decimal_degrees

    return decimal_degrees


def scale_milli(raw: int) -> float:
    """Rescale a raw millivolt reading to volts (12345 -> 12.345)."""
    return raw * _MILLI
