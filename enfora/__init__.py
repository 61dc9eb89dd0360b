"""Decoder for Enfora GPS tracker telemetry and command acknowledgement frames."""

from enfora.acknowledgement import decode_acknowledgement
from enfora.alarms import map_alarm
from enfora.classifier import is_acknowledgement
from enfora.dates import assemble_datetime
from enfora.decoder import EnforaDecoder
from enfora.session import DeviceRegistry, DeviceResolver, LastFixProvider
from enfora.telemetry import decode_telemetry
from enfora.types import CommandResult, LastFix, Position

__all__ = [
    "CommandResult",
    "DeviceRegistry",
    "DeviceResolver",
    "EnforaDecoder",
    "LastFix",
    "LastFixProvider",
    "Position",
    "assemble_datetime",
    "decode_acknowledgement",
    "decode_telemetry",
    "is_acknowledgement",
    "map_alarm",
]
