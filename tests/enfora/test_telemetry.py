"""Tests for telemetry frame decoding."""

import time
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from enfora import DeviceRegistry, EnforaDecoder, decode_telemetry
from tests.helpers import (
    FULL_SENTENCE,
    HEADER,
    IMEI,
    MINIMAL_SENTENCE,
    TRAILER,
    make_frame,
    make_sentence,
)

REMOTE = ("10.0.0.5", 1720)


def _decode(sentence: str, registry: DeviceRegistry):
    return decode_telemetry(make_frame(sentence), REMOTE, registry)


class TestDecodeTelemetry:
    """Tests for decode_telemetry function."""

    def test_full_sentence(self, registry):
        result = _decode(FULL_SENTENCE, registry)
        assert result is not None
        assert result.device_id == IMEI
        assert result.valid is True
        assert result.latitude == pytest.approx(2.5)
        assert result.longitude == pytest.approx(-3.25)
        assert result.speed == pytest.approx(12.5)
        assert result.course == pytest.approx(181.2)
        assert result.altitude == pytest.approx(120.0)
        assert result.fix_time == datetime(2023, 2, 1, 10, 20, 30, tzinfo=timezone.utc)

        attributes = result.attributes
        assert attributes["alarm"] == "sos"
        assert all(attributes[f"io{i}"] for i in range(1, 10))
        assert attributes["adc1"] == pytest.approx(12.345)
        assert attributes["adc2"] == pytest.approx(-0.5)
        assert attributes["sat"] == 8
        assert attributes["batteryLevel"] == 85
        assert attributes["tripOdometer"] == 1234
        assert attributes["odometer"] == 5678
        assert attributes["power"] == pytest.approx(12.345)

    def test_minimal_sentence_has_no_optional_attributes(self, registry):
        result = _decode(MINIMAL_SENTENCE, registry)
        assert result is not None
        assert result.valid is False
        assert result.latitude == pytest.approx(-2.5)
        assert result.longitude == pytest.approx(3.25)
        assert result.speed == 0.0 and result.course == 0.0
        assert result.altitude is None
        assert result.attributes == {}

    def test_empty_altitude_and_satellites(self, registry):
        result = _decode(make_sentence(tail=",,*12"), registry)
        assert result is not None
        assert result.altitude is None
        assert "sat" not in result.attributes

    def test_negative_altitude(self, registry):
        result = _decode(make_sentence(tail="-15,04,*12"), registry)
        assert result is not None
        assert result.altitude == pytest.approx(-15.0)
        assert result.attributes["sat"] == 4

    def test_battery_level_only(self, registry):
        result = _decode(make_sentence(tail="*12 67"), registry)
        assert result is not None
        assert result.attributes["batteryLevel"] == 67
        assert "tripOdometer" not in result.attributes
        assert "power" not in result.attributes

    def test_fractional_seconds_discarded(self, registry):
        sentence = FULL_SENTENCE.replace("102030.000", "102030.987")
        result = _decode(sentence, registry)
        assert result is not None
        assert result.fix_time.second == 30
        assert result.fix_time.microsecond == 0

    def test_dollar_sign_optional(self, registry):
        sentence = FULL_SENTENCE.replace("$GPRMC", "GPRMC")
        assert _decode(sentence, registry) == _decode(FULL_SENTENCE, registry)

    def test_status_and_single_analog_channel(self, registry):
        sentence = f"0 {IMEI} 3 -1200 GPRMC,102030,A,0230.0,N,00315.0,W,,,010223,*1"
        result = _decode(sentence, registry)
        assert result is not None
        assert result.attributes["io1"] is True
        assert result.attributes["io2"] is True
        assert result.attributes["io3"] is False
        assert result.attributes["adc1"] == pytest.approx(-1.2)
        assert "adc2" not in result.attributes

    def test_lone_minus_sign_is_absent(self, registry):
        sentence = f"0 {IMEI} 0 - GPRMC,102030,A,0230.0,N,00315.0,W,,,010223,*1"
        result = _decode(sentence, registry)
        assert result is not None
        assert "adc1" not in result.attributes

    def test_trailing_garbage_ignored(self, registry):
        result = _decode(FULL_SENTENCE + " garbage\x01\x02", registry)
        assert result is not None
        assert result.attributes["power"] == pytest.approx(12.345)

    def test_missing_gprmc_literal(self, registry):
        sentence = FULL_SENTENCE.replace("$GPRMC,", "")
        assert _decode(sentence, registry) is None

    def test_truncated_sentence(self, registry):
        assert _decode(FULL_SENTENCE[:60], registry) is None

    def test_short_imei(self, registry):
        assert _decode(MINIMAL_SENTENCE.replace(IMEI, IMEI[:14]), registry) is None

    def test_missing_checksum(self, registry):
        assert _decode(make_sentence(tail="120,08,"), registry) is None

    def test_buffer_shorter_than_envelope(self, registry):
        assert decode_telemetry(b"\x00" * 10, REMOTE, registry) is None
        assert decode_telemetry(HEADER + TRAILER, REMOTE, registry) is None
        assert decode_telemetry(b"", REMOTE, registry) is None

    def test_unknown_device(self):
        assert _decode(FULL_SENTENCE, DeviceRegistry()) is None

    def test_resolver_called_with_imei(self):
        resolver = MagicMock()
        resolver.resolve.return_value = 42
        result = decode_telemetry(make_frame(FULL_SENTENCE), REMOTE, resolver)
        resolver.resolve.assert_called_once_with(REMOTE, IMEI)
        assert result is not None and result.device_id == 42

    def test_resolver_not_called_on_mismatch(self):
        resolver = MagicMock()
        assert decode_telemetry(make_frame("garbage" * 5), REMOTE, resolver) is None
        resolver.resolve.assert_not_called()

    @pytest.mark.parametrize("date", ["320223", "011323", "000223"])
    def test_impossible_date_keeps_event(self, registry, date):
        result = _decode(make_sentence(event=12, status="1", date=date), registry)
        assert result is not None
        assert result.fix_time is None
        assert result.valid is False
        assert result.attributes["alarm"] == "sos"
        assert result.attributes["io1"] is True

    def test_device_without_gps_time(self, registry):
        sentence = make_sentence(event=10, date="000000").replace("102030", "000000")
        result = _decode(sentence, registry)
        assert result is not None
        assert result.fix_time is None
        assert result.attributes["ignition"] is True

    def test_date_is_day_month_year(self, registry):
        result = _decode(make_sentence(date="311299"), registry)
        assert result is not None
        assert result.fix_time.date().isoformat() == "2099-12-31"

    def test_idempotent(self, registry):
        frame = make_frame(FULL_SENTENCE)
        assert decode_telemetry(frame, REMOTE, registry) == decode_telemetry(
            frame, REMOTE, registry
        )


class TestEventCodes:
    """Tests for event code interpretation."""

    def test_ignition_on(self, registry):
        result = _decode(make_sentence(event=10), registry)
        assert result.attributes["ignition"] is True
        assert "alarm" not in result.attributes

    def test_ignition_off(self, registry):
        result = _decode(make_sentence(event=11), registry)
        assert result.attributes["ignition"] is False
        assert "alarm" not in result.attributes

    @pytest.mark.parametrize(
        ("event", "alarm"),
        [
            (12, "sos"),
            (14, "powerCut"),
            (15, "powerRestored"),
            (17, "powerOff"),
            (18, "powerOn"),
            (19, "gpsAntennaCut"),
            (40, "overspeed"),
            (91, "hardBraking"),
            (92, "hardAcceleration"),
        ],
    )
    def test_alarm_events(self, registry, event, alarm):
        result = _decode(make_sentence(event=event), registry)
        assert result.attributes["alarm"] == alarm
        assert "ignition" not in result.attributes

    @pytest.mark.parametrize("event", [0, 1, 99])
    def test_unmapped_events_leave_alarm_unset(self, registry, event):
        result = _decode(make_sentence(event=event), registry)
        assert result is not None
        assert "alarm" not in result.attributes
        assert "ignition" not in result.attributes


class TestStatusBits:
    """Tests for the I/O status bitmask."""

    def test_every_nine_bit_mask(self, registry):
        for mask in range(512):
            result = _decode(make_sentence(status=str(mask)), registry)
            flags = [result.attributes[f"io{i}"] for i in range(1, 10)]
            assert flags == [bool(mask & (1 << bit)) for bit in range(9)], mask

    @pytest.mark.parametrize("mask", [512, 1024, 512 + 5, 65535])
    def test_high_bits_ignored(self, registry, mask):
        result = _decode(make_sentence(status=str(mask)), registry)
        flags = [result.attributes[f"io{i}"] for i in range(1, 10)]
        assert flags == [bool(mask & (1 << bit)) for bit in range(9)]
        assert "io10" not in result.attributes

    def test_absent_status_sets_no_flags(self, registry):
        result = _decode(make_sentence(), registry)
        assert not any(key.startswith("io") for key in result.attributes)


class TestGarbledInput:
    """Garbled frames must be rejected quickly, never stall the decoder."""

    _TIME_LIMIT = 1.0

    @pytest.mark.parametrize(
        "sentence",
        [
            "1" * 600,
            "1 " * 300,
            f"12 {IMEI} " + "1" * 600,
            f"12 {IMEI} 511 " + "-1" * 300,
            FULL_SENTENCE.replace("*45", "") + ",1" * 300,
        ],
        ids=["digits", "spaced-digits", "long-status", "minus-runs", "no-checksum"],
    )
    def test_rejected_in_bounded_time(self, registry, sentence):
        decoder = EnforaDecoder(registry, registry)
        started = time.perf_counter()
        assert decoder.decode(make_frame(sentence), REMOTE) is None
        assert time.perf_counter() - started < self._TIME_LIMIT

    def test_decoding_continues_after_garbled_frame(self, registry):
        decoder = EnforaDecoder(registry, registry)
        assert decoder.decode(make_frame("1" * 1000), REMOTE) is None
        assert decoder.decode(make_frame(FULL_SENTENCE), REMOTE) is not None
