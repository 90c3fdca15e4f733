"""
COSE_Sign1 envelope stage — top-level CBOR value → payload bytes.

COSE_Sign1 = #6.18([ protected : bstr, unprotected : map,
                     payload : bstr, signature : bstr ])

Tag 18 has already been unwrapped by the CBOR stage. Only the payload is
kept; the protected header, unprotected header and signature are dropped
without being looked at.

TRUST BOUNDARY: no signature is verified here or anywhere else in the
decoder. A certificate that decodes cleanly may still be forged.
"""

from __future__ import annotations

from typing import Any

import structlog
from railway.result import Result
from railway.result_failures import ResultFailures

from greenpass.codec.cbor import expect_array, expect_bytes

log = structlog.get_logger()

_SIGN1_ARITY = 4
_PAYLOAD_INDEX = 2


def _check_arity(items: list[Any]) -> Result[list[Any]]:
    if len(items) != _SIGN1_ARITY:
        return ResultFailures.unexpected_type(
            "COSE_Sign1 envelope", f"array of {_SIGN1_ARITY} items", items
        )
    return Result.success(items)


def unwrap_cose_sign1(value: object) -> Result[bytes]:
    """
    Extract the payload byte string from a COSE_Sign1 structure.

    Returns Result[bytes] on success.
    Returns Result.failure(CBOR_UNEXPECTED_TYPE, ...) when the value is not a
    4-element array or its payload is not a byte string.
    """
    return (
        expect_array(value, "COSE_Sign1 envelope")
        .flat_map(_check_arity)
        .flat_map(lambda items: expect_bytes(items[_PAYLOAD_INDEX], "COSE_Sign1 payload"))
        .peek(lambda payload: log.debug("cose.unwrapped", payload_size=len(payload)))
    )
