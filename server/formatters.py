"""JSON formatting utilities for decoded records."""

import json
from datetime import datetime
from typing import Any

from enfora import CommandResult, LastFix, Position

__all__ = ["format_last_fix", "format_record", "format_record_message"]


def _isoformat(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def format_record(record: Position | CommandResult) -> dict[str, Any]:
    """Convert a decoded record into a JSON-compatible dict."""
    if isinstance(record, CommandResult):
        return {
            "type": "result",
            "device_id": record.device_id,
            "valid": record.valid,
            "lat": record.latitude,
            "lon": record.longitude,
            "fix_time": _isoformat(record.fix_time),
            "device_time": _isoformat(record.device_time),
            "attributes": record.attributes,
        }

    return {
        "type": "position",
        "device_id": record.device_id,
        "valid": record.valid,
        "lat": record.latitude,
        "lon": record.longitude,
        "alt": record.altitude,
        "speed_knots": record.speed,
        "course_degrees": record.course,
        "fix_time": _isoformat(record.fix_time),
        "attributes": record.attributes,
    }


def format_record_message(record: Position | CommandResult) -> str:
    """Serialize a decoded record into a JSON string for WebSocket transmission."""
    return json.dumps(format_record(record))


def format_last_fix(imei: str, fix: LastFix) -> dict[str, Any]:
    return {
        "device_id": imei,
        "valid": fix.valid,
        "lat": fix.latitude,
        "lon": fix.longitude,
        "device_time": _isoformat(fix.device_time),
    }
