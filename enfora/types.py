"""Record types produced by the Enfora frame decoder.

Design Decisions:
    1. Two record types: a telemetry frame establishes a new fix and yields a
       ``Position``; an acknowledgement frame only reports the text of a
       command response and yields a ``CommandResult`` anchored at the
       device's last known fix. The acknowledgement never advances the fix.

    2. Mandatory fix fields are plain attributes; everything else lives in
       ``attributes``. A key is present only if its source token was present
       on the wire, so consumers can distinguish "not reported" from a
       reported zero.

    3. ``device_id`` is opaque. Whatever the device resolver returns is
       carried through unchanged.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

# Attribute keys shared with downstream consumers
KEY_IGNITION = "ignition"
KEY_ALARM = "alarm"
KEY_SATELLITES = "sat"
KEY_BATTERY_LEVEL = "batteryLevel"
KEY_ODOMETER_TRIP = "tripOdometer"
KEY_ODOMETER = "odometer"
KEY_POWER = "power"
KEY_RESULT = "result"

# Indexed keys: io1..io9, adc1..adc2
PREFIX_IO = "io"
PREFIX_ADC = "adc"


@dataclass
class Position:
    """A GPS fix decoded from a telemetry frame.

    Attributes:
        device_id: Identity returned by the device resolver for the frame's
            IMEI. Opaque to the decoder.

        valid: True when the embedded GPRMC status was ``A``.

        latitude: Latitude in decimal degrees, positive=North.

        longitude: Longitude in decimal degrees, positive=East.

        fix_time: UTC timestamp assembled from the GPRMC time and date
            groups, or None if they were not a real calendar instant
            (valid is then False).

        speed: Ground speed in knots as transmitted. 0.0 if the field
            was empty.

        course: Course over ground in degrees. 0.0 if the field was empty.

        altitude: Altitude in meters, or None if not reported.

        attributes: Optional telemetry keyed by the ``KEY_*`` and
            ``PREFIX_*`` names of this module.

    Example:
        >>> position.latitude
        2.5
        >>> position.attributes["io1"]
        True
    """

    device_id: Any
    valid: bool
    latitude: float
    longitude: float
    fix_time: datetime | None
    speed: float = 0.0
    course: float = 0.0
    altitude: float | None = None
    attributes: dict[str, Any] = field(default_factory=dict)


@dataclass
class LastFix:
    """The most recent fix known for a device.

    Attributes:
        latitude: Latitude in decimal degrees, 0.0 if never reported.
        longitude: Longitude in decimal degrees, 0.0 if never reported.
        valid: Validity of that fix. False if never reported.
        device_time: Time of that fix, or None if the device has not
            reported a position yet.
    """

    latitude: float = 0.0
    longitude: float = 0.0
    valid: bool = False
    device_time: datetime | None = None


@dataclass
class CommandResult:
    """A command acknowledgement decoded from an ``OK``/``ERROR`` frame.

    Location and time are copied from the device's last known fix;
    ``fix_time`` equals that fix's ``device_time``.

    Attributes:
        device_id: Identity bound to the connection the frame arrived on.
        valid: Validity of the last known fix.
        latitude: Latitude of the last known fix.
        longitude: Longitude of the last known fix.
        device_time: Time of the last known fix, or None.
        fix_time: Same as ``device_time``.
        attributes: Holds ``result``, the raw acknowledgement text.
    """

    device_id: Any
    valid: bool
    latitude: float
    longitude: float
    device_time: datetime | None
    fix_time: datetime | None
    attributes: dict[str, Any] = field(default_factory=dict)

    @property
    def result(self) -> str:
        return self.attributes.get(KEY_RESULT, "")
