"""Pytest fixtures shared by the decoder tests."""

import pytest

from enfora import DeviceRegistry, EnforaDecoder
from tests.helpers import IMEI


@pytest.fixture
def registry() -> DeviceRegistry:
    return DeviceRegistry([IMEI])


@pytest.fixture
def decoder(registry: DeviceRegistry) -> EnforaDecoder:
    return EnforaDecoder(registry, registry)
