"""
CBOR decoding stage — bytes → a generic decoded value.

Stage layer — uses `cbor2` for the wire format and maps its outcomes onto
the decoder's failure taxonomy:

  - input ends inside an item          → CBOR_TRUNCATED
  - anything else cbor2 rejects        → CBOR_MALFORMED
    (bad initial byte, invalid UTF-8, runaway nesting)
  - an item outside CborValue          → CBOR_MALFORMED
    (undefined, unassigned simple values, map keys that are containers)

The decoded value is the closed union CborValue. Every tag is a
transparent wrapper around its content: 18 (COSE_Sign1) and unknown tags
go through the tag hook, and the tags cbor2 would otherwise turn into
datetime, Decimal, set, UUID and friends are overridden to hand back the
raw content. Consumers never cast: they go through the expect_* helpers,
which turn a wrong shape into CBOR_UNEXPECTED_TYPE.
"""

from __future__ import annotations

from collections.abc import Mapping
from io import BytesIO
from typing import Any

import cbor2
import structlog
from railway.result import Result
from railway.result_failures import ResultFailures

log = structlog.get_logger()

COSE_SIGN1_TAG = 18

# Tags cbor2 decodes into rich Python objects (dates, bignums, decimals,
# rationals, regexes, MIME, UUIDs, IP addresses, sets, complex numbers)
# plus the sharing and string-reference extensions.
_INTERPRETED_TAGS = (
    0, 1, 2, 3, 4, 5, 21, 22, 23, 25, 28, 29, 30, 32, 33, 34, 35, 36, 37,
    52, 54, 100, 256, 258, 260, 261, 1004, 43000, 55799,
)

type CborValue = (
    int | float | bool | None | bytes | str | list[CborValue] | dict[Any, CborValue]
)

_SCALARS = (int, float, bytes, str)  # bool is an int subclass


def _unwrap_tag(tag: cbor2.CBORTag, immutable: bool) -> Any:
    """Tag hook: unknown tags are transparent wrappers around their content."""
    return tag.value


def _transparent(value: Any, immutable: bool = False) -> Any:
    return value


_TRANSPARENT_DECODERS: Mapping[int, Any] = dict.fromkeys(_INTERPRETED_TAGS, _transparent)


class _Unsupported(ValueError):
    """An item decoded cleanly but has no place in CborValue."""


def _check_union(value: Any, path: frozenset[int] = frozenset()) -> None:
    """Walk a decoded tree and reject anything outside CborValue."""
    if value is None or isinstance(value, _SCALARS):
        return
    if isinstance(value, list | dict):
        if id(value) in path:
            raise _Unsupported("cyclic shared reference")
        inner = path | {id(value)}
        if isinstance(value, dict):
            for key, item in value.items():
                if key is not None and not isinstance(key, _SCALARS):
                    raise _Unsupported(f"unsupported map key of type {type(key).__name__}")
                _check_union(item, inner)
        else:
            for item in value:
                _check_union(item, inner)
        return
    raise _Unsupported(f"unsupported CBOR item {value!r}")


def decode_cbor(data: bytes) -> Result[CborValue]:
    """
    Decode the first CBOR item in `data`.

    Returns Result[CborValue] on success; bytes after the first item are
    ignored. A decoded CBOR null comes back as the NULL sentinel because
    the railway forbids Success(None).
    """
    if not data:
        return ResultFailures.cbor_truncated("no bytes to decode")

    decoder = cbor2.CBORDecoder(
        BytesIO(data),
        tag_hook=_unwrap_tag,
        semantic_decoders=_TRANSPARENT_DECODERS,
    )
    try:
        value = decoder.decode()
        _check_union(value)
    except cbor2.CBORDecodeEOF as e:
        return ResultFailures.cbor_truncated(f"input ends inside an item: {e}", e)
    except _Unsupported as e:
        return ResultFailures.cbor_malformed(str(e), e)
    except (
        cbor2.CBORDecodeError,
        ValueError,
        TypeError,
        ArithmeticError,
        RecursionError,
        MemoryError,
    ) as e:
        return ResultFailures.cbor_malformed(f"not a valid CBOR item: {e}", e)

    log.debug("cbor.decoded", size=len(data))
    return Result.success(NULL if value is None else value)


class _Null:
    """Sentinel standing in for a top-level CBOR null on the success track."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "NULL"


NULL = _Null()


# ─────────────────────── Shape helpers ───────────────────────


def expect_map(value: object, what: str) -> Result[dict[Any, Any]]:
    """Require a CBOR map."""
    match value:
        case dict():
            return Result.success(value)
        case _:
            return ResultFailures.unexpected_type(what, "map", _plain(value))


def expect_array(value: object, what: str) -> Result[list[Any]]:
    """Require a CBOR array."""
    match value:
        case list():
            return Result.success(value)
        case _:
            return ResultFailures.unexpected_type(what, "array", _plain(value))


def expect_bytes(value: object, what: str) -> Result[bytes]:
    """Require a CBOR byte string."""
    match value:
        case bytes():
            return Result.success(value)
        case _:
            return ResultFailures.unexpected_type(what, "byte string", _plain(value))


def _plain(value: object) -> object:
    return None if value is NULL else value
