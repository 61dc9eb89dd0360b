"""Frame classification: command acknowledgement or telemetry report."""

__all__ = ["ACK_MARKERS", "is_acknowledgement"]

# Any of these anywhere in the buffer marks a command acknowledgement
ACK_MARKERS = (b"OK", b"ERROR")


def is_acknowledgement(buf: bytes) -> bool:
    """Return True if *buf* is a textual ``OK``/``ERROR`` command response.

    The scan is case sensitive and covers the whole buffer, header and
    trailer included. Everything else is treated as a telemetry frame.

    Example:
        >>> is_acknowledgement(b"\\x00\\x0c\\x00\\x00\\x00\\x00\\x00\\x00\\x00OK\\r\\n")
        True
    """
    return any(marker in buf for marker in ACK_MARKERS)
