"""Tests for ResultFailures convenience factories and describe_type."""

import pytest

from railway import ErrorCode, ResultFailures, describe_type


class TestConvenienceFactories:
    def test_invalid_base45(self):
        result = ResultFailures.invalid_base45("character 'a' at position 0")
        assert result.is_failure()
        assert result.error().code == ErrorCode.INVALID_BASE45
        assert result.error().message == "character 'a' at position 0"

    def test_inflate_error_keeps_exception(self):
        ex = ValueError("invalid block type")
        result = ResultFailures.inflate_error("corrupt stream", ex)
        assert result.error().code == ErrorCode.INFLATE_ERROR
        assert result.error().exception is ex

    def test_cbor_truncated(self):
        assert ResultFailures.cbor_truncated("x").error().code == ErrorCode.CBOR_TRUNCATED

    def test_cbor_malformed(self):
        assert ResultFailures.cbor_malformed("x").error().code == ErrorCode.CBOR_MALFORMED

    def test_unexpected_type_describes_actual_value(self):
        result = ResultFailures.unexpected_type("CWT claims", "map", [1, 2])
        assert result.error().code == ErrorCode.CBOR_UNEXPECTED_TYPE
        assert result.error().message == "CWT claims: expected map, got array (2 items)"

    def test_missing_claim(self):
        result = ResultFailures.missing_claim("issued-at claim (6) is missing")
        assert result.error().code == ErrorCode.MISSING_CLAIM

    def test_schema_violation(self):
        result = ResultFailures.schema_violation("'dn' must be an integer")
        assert result.error().code == ErrorCode.SCHEMA_VIOLATION

    def test_factories_leave_stage_unset(self):
        assert ResultFailures.schema_violation("x").error().stage is None


class TestDescribeType:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (None, "null"),
            (True, "boolean"),
            (7, "integer"),
            (1.5, "float"),
            (b"\x00\x01", "byte string (2 bytes)"),
            ("AT", "text string"),
            ([1, 2, 3], "array (3 items)"),
            ({1: 2}, "map (1 entries)"),
            (object(), "object"),
        ],
    )
    def test_names(self, value, expected):
        assert describe_type(value) == expected
