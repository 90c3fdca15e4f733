"""
Unit tests for the inflate stage.

Test categories:
  - Happy path: zlib-wrapped and raw DEFLATE streams inflate
  - Error path: corrupt, truncated, checksum-broken and oversized streams
    → Result.failure(INFLATE_ERROR)
"""

from __future__ import annotations

import os
import zlib

import pytest
from railway import ErrorCode, ResultAssertions

from greenpass.codec.inflate import has_zlib_header, inflate
from tests.conftest import raw_deflate

_PLAIN = b"CBOR bytes " * 50
_CAP = 1024 * 1024


class TestInflateValidStreams:
    def test_zlib_wrapped_stream(self) -> None:
        """
        GIVEN a zlib stream (header 0x78 0xDA, as in published DGCs)
        WHEN inflated
        THEN the original bytes come back.
        """
        compressed = zlib.compress(_PLAIN, 9)
        assert compressed[:2] == b"\x78\xda"
        ResultAssertions.assert_success_value(inflate(compressed, _CAP), _PLAIN)

    def test_raw_deflate_stream(self) -> None:
        """
        GIVEN a raw DEFLATE stream without a container header
        WHEN inflated
        THEN the original bytes come back.
        """
        ResultAssertions.assert_success_value(inflate(raw_deflate(_PLAIN), _CAP), _PLAIN)

    def test_raw_stream_with_zlib_looking_header(self) -> None:
        """
        GIVEN a raw DEFLATE stream whose first two bytes (0x78 0x01) also form a
              valid zlib header: a stored block holding 0xA0, then an empty final block
        WHEN inflated
        THEN the zlib attempt fails and the raw retry returns the content.
        """
        data = b"\x78\x01\x00\xfe\xff\xa0" + b"\x01\x00\x00\xff\xff"
        assert has_zlib_header(data)
        ResultAssertions.assert_success_value(inflate(data, _CAP), b"\xa0")

    def test_trailing_bytes_after_stream_are_ignored(self) -> None:
        """
        GIVEN a complete stream followed by junk
        WHEN inflated
        THEN only the stream content is returned.
        """
        data = zlib.compress(_PLAIN) + b"junk"
        ResultAssertions.assert_success_value(inflate(data, _CAP), _PLAIN)

    def test_output_exactly_at_cap_is_accepted(self) -> None:
        """
        GIVEN a stream inflating to exactly the cap
        WHEN inflated
        THEN it succeeds.
        """
        data = zlib.compress(b"\x00" * 4096)
        ResultAssertions.assert_success_value(inflate(data, 4096), b"\x00" * 4096)


class TestInflateInvalidStreams:
    def test_empty_input_is_truncated(self) -> None:
        """
        GIVEN no bytes
        WHEN inflated
        THEN the stream is reported as truncated.
        """
        result = inflate(b"", _CAP)
        ResultAssertions.assert_failure(result, ErrorCode.INFLATE_ERROR)
        ResultAssertions.assert_failure_message_contains(result, "truncated")

    @pytest.mark.parametrize("cut", [1, 2, 10, 40])
    def test_truncated_stream(self, cut: int) -> None:
        """
        GIVEN a zlib stream missing its last bytes
        WHEN inflated
        THEN it fails.
        """
        data = zlib.compress(os.urandom(512))
        ResultAssertions.assert_failure(inflate(data[:-cut], _CAP), ErrorCode.INFLATE_ERROR)

    def test_corrupt_checksum(self) -> None:
        """
        GIVEN a zlib stream whose Adler-32 trailer was altered
        WHEN inflated
        THEN it fails.
        """
        data = bytearray(zlib.compress(_PLAIN))
        data[-1] ^= 0xFF
        ResultAssertions.assert_failure(inflate(bytes(data), _CAP), ErrorCode.INFLATE_ERROR)

    def test_invalid_block_type(self) -> None:
        """
        GIVEN a raw stream whose first block uses reserved type 3
        WHEN inflated
        THEN it fails as corrupt.
        """
        result = inflate(b"\x07\x00\x00\x00", _CAP)
        ResultAssertions.assert_failure(result, ErrorCode.INFLATE_ERROR)
        ResultAssertions.assert_failure_message_contains(result, "corrupt")

    def test_decompression_bomb_is_capped(self) -> None:
        """
        GIVEN 10 MiB of zeros compressed to a few KiB
        WHEN inflated with a 64 KiB cap
        THEN it fails instead of producing the whole output.
        """
        bomb = zlib.compress(b"\x00" * (10 * 1024 * 1024), 9)
        result = inflate(bomb, 64 * 1024)
        ResultAssertions.assert_failure(result, ErrorCode.INFLATE_ERROR)
        ResultAssertions.assert_failure_message_contains(result, "exceeds the limit")


class TestHasZlibHeader:
    @pytest.mark.parametrize("header", [b"\x78\x01", b"\x78\x5e", b"\x78\x9c", b"\x78\xda"])
    def test_standard_headers(self, header: bytes) -> None:
        assert has_zlib_header(header)

    @pytest.mark.parametrize("data", [b"", b"\x78", b"\x78\x00", b"\x07\x00", b"\x79\x9c"])
    def test_non_headers(self, data: bytes) -> None:
        assert not has_zlib_header(data)
