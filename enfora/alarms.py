"""Event code to alarm category mapping.

Event codes 10 and 11 report ignition on/off and are handled by the
telemetry decoder directly; 0 is a routine report. Every other code is
looked up here.
"""

__all__ = [
    "ALARM_ACCELERATION",
    "ALARM_BRAKING",
    "ALARM_GPS_ANTENNA_CUT",
    "ALARM_OVERSPEED",
    "ALARM_POWER_CUT",
    "ALARM_POWER_OFF",
    "ALARM_POWER_ON",
    "ALARM_POWER_RESTORED",
    "ALARM_SOS",
    "map_alarm",
]

ALARM_SOS = "sos"
ALARM_POWER_CUT = "powerCut"
ALARM_POWER_RESTORED = "powerRestored"
ALARM_POWER_OFF = "powerOff"
ALARM_POWER_ON = "powerOn"
ALARM_GPS_ANTENNA_CUT = "gpsAntennaCut"
ALARM_OVERSPEED = "overspeed"
ALARM_BRAKING = "hardBraking"
ALARM_ACCELERATION = "hardAcceleration"

# Enfora event code -> alarm category
_EVENT_TO_ALARM: dict[int, str] = {
    12: ALARM_SOS,
    14: ALARM_POWER_CUT,
    15: ALARM_POWER_RESTORED,
    17: ALARM_POWER_OFF,
    18: ALARM_POWER_ON,
    19: ALARM_GPS_ANTENNA_CUT,
    40: ALARM_OVERSPEED,
    91: ALARM_BRAKING,
    92: ALARM_ACCELERATION,
}


def map_alarm(code: int) -> str | None:
    """Return the alarm category for *code*, or None if it is not an alarm.

    Example:
        >>> map_alarm(12)
        'sos'
        >>> map_alarm(99)
        None
    """
    return _EVENT_TO_ALARM.get(code)
