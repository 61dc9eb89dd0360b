"""Single entry point dispatching frames to the matching decoder."""

import logging
from typing import Any

from enfora.acknowledgement import decode_acknowledgement
from enfora.classifier import is_acknowledgement
from enfora.session import DeviceResolver, LastFixProvider
from enfora.telemetry import decode_telemetry
from enfora.types import CommandResult, Position

__all__ = ["EnforaDecoder"]

logger = logging.getLogger(__name__)


class EnforaDecoder:
    """Decode delimited Enfora frames into records.

    Exactly one decode path runs per frame: acknowledgement frames (any
    ``OK`` or ``ERROR`` in the buffer) become ``CommandResult`` records,
    everything else is decoded as telemetry into ``Position`` records.

    The decoder holds no state of its own and may be shared between
    connections as long as its collaborators are safe for concurrent use.

    Usage::

        registry = DeviceRegistry(["012345678901234"])
        decoder = EnforaDecoder(registry, registry)
        record = decoder.decode(frame, remote=("10.0.0.5", 1720))
        if record is not None:
            sink(record)

    Args:
        resolver: Maps connections and IMEIs to device identities.
        last_fix_provider: Supplies the fix acknowledgements are anchored at.
    """

    def __init__(
        self,
        resolver: DeviceResolver,
        last_fix_provider: LastFixProvider,
    ) -> None:
        self._resolver = resolver
        self._last_fix_provider = last_fix_provider

    def decode(
        self,
        buf: bytes | bytearray,
        remote: Any = None,
    ) -> Position | CommandResult | None:
        """Decode one frame.

        Returns None whenever no record can be produced: unknown device or
        sentence not matching the grammar. Callers should drop the frame
        silently; damaged frames are routine on cellular links. Unexpected
        errors are logged and also reported as None so one bad frame never
        ends a connection.
        """
        buf = bytes(buf)
        try:
            if is_acknowledgement(buf):
                return decode_acknowledgement(
                    buf, remote, self._resolver, self._last_fix_provider
                )
            return decode_telemetry(buf, remote, self._resolver)
        except Exception:
            logger.warning("Failed to decode frame %s", buf.hex(), exc_info=True)
            return None
