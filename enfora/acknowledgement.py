"""Command acknowledgement decoder.

Acknowledgement frame layout::

    [9-byte envelope][ASCII response text][2-byte trailer]

The response text (e.g. ``OK`` or ``ERROR: bad parameter``) is stored
verbatim. The frame carries no IMEI, so the device is the one already bound
to the connection, and no position is decoded: the record is anchored at
the device's last known fix.
"""

import logging
from typing import Any

from enfora.session import DeviceResolver, LastFixProvider
from enfora.types import KEY_RESULT, CommandResult

__all__ = ["ACK_HEADER_LENGTH", "ACK_TRAILER_LENGTH", "decode_acknowledgement"]

logger = logging.getLogger(__name__)

ACK_HEADER_LENGTH = 9
ACK_TRAILER_LENGTH = 2


def _extract_text(buf: bytes) -> str:
    """Return the response text between the envelope and the trailer."""
    body = buf[ACK_HEADER_LENGTH : len(buf) - ACK_TRAILER_LENGTH]
    return body.decode("ascii", errors="replace")


def decode_acknowledgement(
    buf: bytes,
    remote: Any,
    resolver: DeviceResolver,
    last_fix_provider: LastFixProvider,
) -> CommandResult | None:
    """Decode an ``OK``/``ERROR`` command response.

    Args:
        buf: One complete acknowledgement frame
        remote: Connection context the frame arrived on
        resolver: Maps *remote* to the device bound to that connection
        last_fix_provider: Supplies the fix the record is anchored at

    Returns:
        CommandResult carrying the response text, or None if no device is
        bound to *remote*

    Example:
        >>> result = decode_acknowledgement(frame, remote, registry, registry)
        >>> result.attributes["result"]
        'OK'
    """
    device_id = resolver.resolve(remote)
    if device_id is None:
        logger.debug("Dropping acknowledgement from unbound remote %s", remote)
        return None

    fix = last_fix_provider.last_fix(device_id)

    return CommandResult(
        device_id=device_id,
        valid=fix.valid,
        latitude=fix.latitude,
        longitude=fix.longitude,
        device_time=fix.device_time,
        # An acknowledgement never advances the fix
        fix_time=fix.device_time,
        attributes={KEY_RESULT: _extract_text(buf)},
    )
