"""Device session collaborators.

The decoder never looks devices up itself. It is handed two collaborators:

* a ``DeviceResolver`` that maps a connection (and, for telemetry frames,
  the IMEI carried in the frame) to an opaque device identity, and
* a ``LastFixProvider`` that returns the last known fix of a device, used
  to anchor command acknowledgements.

``DeviceRegistry`` is an in-memory implementation of both, suitable for
tests and the development server.
"""

import logging
import threading
from collections.abc import Iterable
from typing import Any, Protocol

from enfora.types import LastFix, Position

__all__ = ["DeviceRegistry", "DeviceResolver", "LastFixProvider"]

logger = logging.getLogger(__name__)


class DeviceResolver(Protocol):
    def resolve(self, remote: Any, imei: str | None = None) -> Any | None:
        """Return the device identity for *remote* (and *imei*), or None."""
        ...


class LastFixProvider(Protocol):
    def last_fix(self, device_id: Any) -> LastFix:
        """Return the most recent fix known for *device_id*."""
        ...


class DeviceRegistry:
    """Thread-safe in-memory device directory keyed by IMEI.

    Device identities are the IMEI strings themselves. A telemetry frame
    that resolves binds its remote address to the device, so that later
    acknowledgement frames on the same connection (which carry no IMEI)
    resolve to it as well. A binding lasts until ``unbind()`` is called for
    that remote, which the owner of the connection should do on disconnect.

    Args:
        imeis: IMEIs known up front.
        auto_register: Accept any IMEI on first contact instead of
            rejecting unknown devices.
    """

    def __init__(
        self,
        imeis: Iterable[str] = (),
        auto_register: bool = False,
    ) -> None:
        self._lock = threading.Lock()
        self._auto_register = auto_register
        self._fixes: dict[str, LastFix] = {imei: LastFix() for imei in imeis}
        self._bindings: dict[Any, str] = {}

    def register(self, imei: str) -> None:
        with self._lock:
            self._fixes.setdefault(imei, LastFix())

    def __contains__(self, imei: object) -> bool:
        with self._lock:
            return imei in self._fixes

    def resolve(self, remote: Any, imei: str | None = None) -> str | None:
        """Resolve a connection to a device identity.

        With an *imei*, the device must be known (or ``auto_register`` set);
        the remote address is then bound to it. Without one, the device
        previously bound to *remote* is returned.
        """
        with self._lock:
            if imei is None:
                return self._bindings.get(remote)

            if imei not in self._fixes:
                if not self._auto_register:
                    logger.debug("Unknown device %s from %s", imei, remote)
                    return None
                logger.info("Registered device %s", imei)
                self._fixes[imei] = LastFix()

            self._bindings[remote] = imei
            return imei

    def unbind(self, remote: Any) -> None:
        """Forget the device bound to *remote*."""
        with self._lock:
            self._bindings.pop(remote, None)

    def last_fix(self, device_id: Any) -> LastFix:
        with self._lock:
            return self._fixes.get(device_id, LastFix())

    def remember(self, position: Position) -> None:
        """Record *position* as the last known fix of its device.

        Positions without a fix time do not replace the last known fix.
        """
        if position.fix_time is None:
            return
        with self._lock:
            self._fixes[position.device_id] = LastFix(
                latitude=position.latitude,
                longitude=position.longitude,
                valid=position.valid,
                device_time=position.fix_time,
            )
