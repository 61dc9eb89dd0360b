"""Telemetry frame decoder.

Enfora terminals report positions as a vendor event header followed by a
truncated GPRMC sentence and optional telemetry tokens, wrapped in a binary
envelope::

    [7-byte header][ASCII sentence][7-byte trailer]

Sentence Format:
    12 012345678901234 511 12345 -500 $GPRMC,102030.000,A,0230.000000,N,
    00315.000000,W,12.50,181.20,010223,120,08,*45 85 1234 5678 12345

    (wrapped here for width; the sentence is a single line)

Fields, in wire order (optional ones may be empty or missing):
    event code          mandatory, see Event Codes below
    IMEI                mandatory, exactly 15 digits
    I/O status          bitmask, bits 0-8 -> io1..io9
    analog inputs 1, 2  signed millivolts -> adc1, adc2 (volts)
    GPRMC time          hhmmss, fractional seconds discarded
    validity            A = valid fix, V = no fix
    latitude            DDMM.MMMM + N/S
    longitude           DDDMM.MMMM + E/W
    speed, course       knots and degrees, 0.0 when empty
    GPRMC date          ddmmyy
    altitude            signed meters
    satellites          count
    checksum            located after "*", not validated
    battery level       percent, exactly 2 digits
    trip odometer       digits
    GPS odometer        digits
    battery voltage     millivolts, exactly 5 digits -> power (volts)

Event Codes:
    0      = Routine report
    10, 11 = Ignition on, ignition off
    other  = Alarm, see ``enfora.alarms``

Most tokens after the IMEI may be empty or missing entirely, so fields are
read through a ``GroupCursor`` rather than fixed offsets.
"""

import logging
import re
from typing import Any

from enfora.alarms import map_alarm
from enfora.cursor import GroupCursor
from enfora.dates import assemble_datetime
from enfora.fields import scale_milli
from enfora.session import DeviceResolver
from enfora.types import (
    KEY_ALARM,
    KEY_BATTERY_LEVEL,
    KEY_IGNITION,
    KEY_ODOMETER,
    KEY_ODOMETER_TRIP,
    KEY_POWER,
    KEY_SATELLITES,
    PREFIX_ADC,
    PREFIX_IO,
    Position,
)

__all__ = ["HEADER_LENGTH", "TRAILER_LENGTH", "decode_telemetry"]

logger = logging.getLogger(__name__)

HEADER_LENGTH = 7
TRAILER_LENGTH = 7

_EVENT_IGNITION_ON = 10
_EVENT_IGNITION_OFF = 11

_IO_FLAG_COUNT = 9
_ADC_CHANNEL_COUNT = 2

# Tokens before GPRMC are atomic: a garbled digit run fails in linear time
# instead of being re-split between the event, IMEI, I/O and analog groups.
_PATTERN = re.compile(
    r"(?>\s*(\d+))"                 # event
    r"(?>\s*(\d{15}))"              # imei
    r"(?>\s*(\d*))"                 # i/o status
    r"(?>\s*(-?\d*))"               # adc1 (mV)
    r"(?>\s*(-?\d*))"               # adc2 (mV)
    r"\s*\$?GPRMC,"
    r"(\d\d)(\d\d)(\d\d)\.?\d*,"    # time (hhmmss)
    r"([AV]),"                      # validity
    r"(\d\d)(\d\d\.\d+),"           # latitude
    r"([NS]),"
    r"(\d\d\d)(\d\d\.\d+),"         # longitude
    r"([EW]),"
    r"(\d+\.\d+)?,"                 # speed
    r"(\d+\.\d+)?,"                 # course
    r"(\d\d)(\d\d)(\d\d),"          # date (ddmmyy)
    r"(?:(-?\d*),)?"                # altitude
    r"(?:(-?\d*),)?"                # satellites
    r"[^*]*+\*\d+"                  # checksum
    r"(?:\s*(\d{2}))?"              # battery level (%)
    r"\s*(\d*)"                     # trip odometer
    r"\s*(\d*)"                     # gps odometer
    r"(?:\s*(\d{5}))?"              # battery voltage (mV)
    r".*",
    re.DOTALL,
)


def _extract_sentence(buf: bytes) -> str | None:
    """Strip the binary envelope, or return None if nothing is left."""
    if len(buf) <= HEADER_LENGTH + TRAILER_LENGTH:
        return None
    body = buf[HEADER_LENGTH : len(buf) - TRAILER_LENGTH]
    return body.decode("ascii", errors="replace")


def _decode_event(event: int, attributes: dict[str, Any]) -> None:
    if event in (_EVENT_IGNITION_ON, _EVENT_IGNITION_OFF):
        attributes[KEY_IGNITION] = event == _EVENT_IGNITION_ON
    elif event > 0:
        alarm = map_alarm(event)
        if alarm is not None:
            attributes[KEY_ALARM] = alarm


def _decode_io(cursor: GroupCursor, attributes: dict[str, Any]) -> None:
    """Read the status bitmask and analog inputs that precede GPRMC."""
    if cursor.has_next():
        status = cursor.next_int(0)
        for index in range(1, _IO_FLAG_COUNT + 1):
            attributes[f"{PREFIX_IO}{index}"] = bool(status >> (index - 1) & 1)

    for index in range(1, _ADC_CHANNEL_COUNT + 1):
        if cursor.has_next():
            millivolts = cursor.next_int()
            if millivolts is not None:
                attributes[f"{PREFIX_ADC}{index}"] = scale_milli(millivolts)


def _decode_trailer(cursor: GroupCursor, attributes: dict[str, Any]) -> None:
    """Read the optional tokens after the checksum."""
    if cursor.has_next():
        attributes[KEY_BATTERY_LEVEL] = cursor.next_int()

    if cursor.has_next():
        attributes[KEY_ODOMETER_TRIP] = cursor.next_int()

    if cursor.has_next():
        attributes[KEY_ODOMETER] = cursor.next_int()

    if cursor.has_next():
        attributes[KEY_POWER] = scale_milli(cursor.next_int(0))


def _build_position(device_id: Any, cursor: GroupCursor, event: int) -> Position | None:
    """Construct a Position from the groups following the IMEI.

    If the GPRMC date and time do not form a real calendar instant (devices
    without GPS time send 000000), the event and telemetry are still
    returned with fix_time=None and valid=False.
    """
    attributes: dict[str, Any] = {}
    _decode_event(event, attributes)
    _decode_io(cursor, attributes)

    hour, minute, second = (cursor.next_int(0) for _ in range(3))

    valid = cursor.next() == "A"
    latitude = cursor.next_coordinate()
    longitude = cursor.next_coordinate()
    speed = cursor.next_float(0.0)
    course = cursor.next_float(0.0)

    # ddmmyy on the wire
    day, month, year = (cursor.next_int(0) for _ in range(3))
    if latitude is None or longitude is None:
        return None

    fix_time = assemble_datetime(hour, minute, second, day, month, year)
    if fix_time is None:
        valid = False

    altitude = None
    if cursor.has_next():
        altitude = cursor.next_float()

    if cursor.has_next():
        satellites = cursor.next_int()
        if satellites is not None:
            attributes[KEY_SATELLITES] = satellites

    _decode_trailer(cursor, attributes)

    return Position(
        device_id=device_id,
        valid=valid,
        latitude=latitude,
        longitude=longitude,
        fix_time=fix_time,
        speed=speed,
        course=course,
        altitude=altitude,
        attributes=attributes,
    )


def decode_telemetry(
    buf: bytes,
    remote: Any,
    resolver: DeviceResolver,
) -> Position | None:
    """Decode a telemetry frame into a Position.

    This is the main entry point for telemetry decoding. It performs:
    1. Envelope stripping (7-byte header, 7-byte trailer)
    2. Grammar matching of the embedded sentence
    3. Device resolution from the IMEI
    4. Field extraction, coordinate conversion and timestamp assembly

    Args:
        buf: One complete telemetry frame
        remote: Connection context the frame arrived on
        resolver: Maps *remote* and the frame's IMEI to a device identity

    Returns:
        Position if decoding succeeds, or None if:
        - The frame is too short to hold a sentence
        - The sentence does not match the grammar
        - The device cannot be resolved

    Note:
        A returned Position with valid=False is a successfully decoded
        frame whose GPRMC status was ``V`` (no fix). This is different from
        returning None, which means the frame was discarded. A Position
        with fix_time=None carries an event whose GPRMC date and time were
        not a real calendar instant.
    """
    sentence = _extract_sentence(buf)
    if sentence is None:
        logger.debug("Dropping short frame (%d bytes)", len(buf))
        return None

    match = _PATTERN.match(sentence)
    if match is None:
        logger.debug("Dropping unrecognised sentence %r", sentence)
        return None

    cursor = GroupCursor(match)
    event = cursor.next_int(0)
    imei = cursor.next()

    device_id = resolver.resolve(remote, imei)
    if device_id is None:
        logger.debug("Dropping frame from unknown device %s", imei)
        return None

    return _build_position(device_id, cursor, event)
