"""Runtime settings for the development server, read from the environment.

Variables:
    ENFORA_DEVICES        comma-separated IMEIs known at startup
    ENFORA_AUTO_REGISTER  accept unknown IMEIs on first contact ("1"/"true")
    ENFORA_LOG_LEVEL      logging level name (default INFO)
    ENFORA_QUEUE_SIZE     per-websocket-client queue bound (default 10)
    ENFORA_WS_TIMEOUT     seconds without a message before a websocket is
                          closed (default 30)
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass, field

__all__ = ["Settings"]

_TRUE_VALUES = ("1", "true", "yes", "on")


def _parse_devices(value: str) -> tuple[str, ...]:
    return tuple(imei.strip() for imei in value.split(",") if imei.strip())


@dataclass
class Settings:
    """Server configuration."""

    devices: tuple[str, ...] = field(default_factory=tuple)
    auto_register: bool = False
    log_level: str = "INFO"
    queue_size: int = 10
    websocket_timeout: float = 30.0

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """Build settings from *environ* (default: ``os.environ``).

        Raises:
            ValueError: If a numeric variable is not a number.
        """
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            devices=_parse_devices(env.get("ENFORA_DEVICES", "")),
            auto_register=env.get("ENFORA_AUTO_REGISTER", "").lower() in _TRUE_VALUES,
            log_level=env.get("ENFORA_LOG_LEVEL", defaults.log_level).upper(),
            queue_size=int(env.get("ENFORA_QUEUE_SIZE", defaults.queue_size)),
            websocket_timeout=float(
                env.get("ENFORA_WS_TIMEOUT", defaults.websocket_timeout)
            ),
        )
