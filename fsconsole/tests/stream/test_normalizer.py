import json

from fsconsole.stream.normalizer import (
    LogIdFactory,
    LogNormalizer,
    SOURCE_SYSTEM,
    SOURCE_WEBSOCKET,
    decode_json,
    decode_pattern,
    iso_timestamp,
)
from fsconsole.stream.state import Severity


def _normalizer(now=1700000000.0):
    return LogNormalizer(clock=lambda: now)


def test_json_payload_becomes_one_entry():
    entry = _normalizer().normalize('{"type":"ERROR","command":"MOUNT","message":"boom"}')

    assert entry.severity is Severity.ERROR
    assert entry.source == "MOUNT"
    assert entry.message == "boom"


def test_json_fields_default_and_time_is_used():
    entry = _normalizer().normalize(json.dumps({"time": 0, "data": {"k": 1}}))

    assert entry.severity is Severity.INFO
    assert entry.source == SOURCE_SYSTEM
    assert entry.message == '{"time": 0, "data": {"k": 1}}'
    assert entry.timestamp == "1970-01-01T00:00:00.000Z"
    assert entry.payload == {"k": 1}


def test_unknown_severity_maps_to_info():
    entry = _normalizer().normalize('{"type":"DEBUG","message":"x"}')
    assert entry.severity is Severity.INFO


def test_pattern_line():
    entry = _normalizer().normalize("[1700000000] [SUCCESS] mkdisk: Disk created")

    assert entry.severity is Severity.SUCCESS
    assert entry.source == "mkdisk"
    assert entry.message == "Disk created"
    assert entry.timestamp == "2023-11-14T22:13:20.000Z"


def test_non_object_json_falls_through_to_pattern_or_raw():
    assert decode_json("[1, 2]") is None
    entry = _normalizer().normalize("42")
    assert entry.severity is Severity.INFO
    assert entry.source == SOURCE_SYSTEM
    assert entry.message == "42"


def test_raw_text_is_wrapped_verbatim():
    entry = _normalizer(now=1.5).normalize("hello world")

    assert entry.severity is Severity.INFO
    assert entry.source == SOURCE_SYSTEM
    assert entry.message == "hello world"
    assert entry.timestamp == "1970-01-01T00:00:01.500Z"


def test_pattern_requires_full_shape():
    assert decode_pattern("[abc] [INFO] x: y") is None
    assert decode_pattern("[1] [INFO] no colon here") is None


def test_out_of_range_time_uses_clock():
    entry = _normalizer(now=0.0).normalize('{"message":"m","time":1e20}')
    assert entry.timestamp == "1970-01-01T00:00:00.000Z"


def test_bytes_payloads():
    n = _normalizer()
    assert n.normalize(b"plain").message == "plain"

    bad = n.normalize(b"\xff\xfe")
    assert bad.severity is Severity.ERROR
    assert bad.source == SOURCE_WEBSOCKET
    assert bad.message.startswith("Error processing message")
    assert set(bad.payload) == {"original_message", "error"}


def test_ids_are_unique():
    factory = LogIdFactory(clock=lambda: 2.0)
    assert factory() == "log_2000_1"
    assert factory() == "log_2000_2"

    n = _normalizer()
    ids = {n.normalize("x").id for _ in range(50)}
    assert len(ids) == 50


def test_custom_strategy_order():
    n = LogNormalizer(clock=lambda: 0.0, strategies=(decode_pattern,))
    entry = n.normalize('{"message":"m"}')
    assert entry.message == '{"message":"m"}'


def test_iso_timestamp_millis():
    assert iso_timestamp(1.2345) == "1970-01-01T00:00:01.234Z"
