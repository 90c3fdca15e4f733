"""
Inflate stage — DEFLATE-compressed bytes → CBOR bytes.

Stage layer — uses the standard library's zlib engine:
  - raw DEFLATE streams (no container) are inflated with wbits=-15
  - streams starting with a valid 2-byte zlib header (as produced by
    every published DGC sample) are inflated with wbits=15, which also
    verifies the trailing Adler-32 checksum

The header check is a heuristic: a raw stream may open with two bytes
that also pass it. Such a stream fails as zlib and is then inflated raw.

Output is produced incrementally and capped: a stream that would inflate
beyond `max_output` bytes fails instead of exhausting memory.
"""

from __future__ import annotations

import zlib

import structlog
from railway.result import Result
from railway.result_failures import ResultFailures

log = structlog.get_logger()

_RAW_DEFLATE_WBITS = -15
_ZLIB_WBITS = 15


def has_zlib_header(data: bytes) -> bool:
    """
    True if `data` starts with a well-formed zlib header (RFC 1950).

    CM must be 8 (deflate), CINFO at most 7, no preset dictionary,
    and CMF*256 + FLG a multiple of 31.
    """
    if len(data) < 2:
        return False
    cmf, flg = data[0], data[1]
    return (
        cmf & 0x0F == 8
        and cmf >> 4 <= 7
        and not flg & 0x20
        and ((cmf << 8) | flg) % 31 == 0
    )


def _inflate_as(data: bytes, wbits: int, max_output: int) -> Result[tuple[bytes, int]]:
    """Inflate with one framing; the success value is (output, trailing byte count)."""
    decompressor = zlib.decompressobj(wbits)
    try:
        output = decompressor.decompress(data, max_output + 1)
    except zlib.error as e:
        return ResultFailures.inflate_error(f"corrupt compressed stream: {e}", e)

    if len(output) > max_output:
        return ResultFailures.inflate_error(
            f"decompressed size exceeds the limit of {max_output} bytes"
        )
    if not decompressor.eof:
        return ResultFailures.inflate_error("compressed stream is truncated")
    return Result.success((output, len(decompressor.unused_data)))


def inflate(data: bytes, max_output: int) -> Result[bytes]:
    """
    Decompress `data`, refusing to produce more than `max_output` bytes.

    Returns Result[bytes] on success.
    Returns Result.failure(INFLATE_ERROR, ...) when the stream is corrupt,
    ends before its final block, or exceeds the output cap. When a stream
    with a zlib-looking header fails, it is retried as raw DEFLATE and the
    zlib failure is reported only if that fails too.
    """
    wrapped = has_zlib_header(data)
    result = _inflate_as(data, _ZLIB_WBITS if wrapped else _RAW_DEFLATE_WBITS, max_output)
    if wrapped and result.is_failure():
        raw = _inflate_as(data, _RAW_DEFLATE_WBITS, max_output)
        if raw.is_success():
            wrapped, result = False, raw

    return result.peek(
        lambda inflated: log.debug(
            "inflate.complete",
            container="zlib" if wrapped else "raw",
            compressed=len(data),
            inflated=len(inflated[0]),
            trailing=inflated[1],
        )
    ).map(lambda inflated: inflated[0])
