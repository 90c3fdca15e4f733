"""
CWT claims stage — COSE payload bytes → CwtClaims.

The payload is itself CBOR: a map keyed by small integers (RFC 8392).
Claims used:

    1     iss   issuing country          optional, text
    4     exp   expiration time          required, NumericDate
    6     iat   issued-at time           required, NumericDate
    -260  hcert health certificate       required, map {1: <HCERT payload>}

NumericDate is seconds since the epoch, integer or float; fractional
seconds are kept. Other claims are ignored.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

import structlog
from railway.failure import ErrorCode
from railway.result import Result
from railway.result_failures import ResultFailures, describe_type

from greenpass.codec.cbor import decode_cbor, expect_map
from greenpass.domain.models import CwtClaims

log = structlog.get_logger()

CLAIM_ISSUER = 1
CLAIM_EXPIRATION = 4
CLAIM_ISSUED_AT = 6
CLAIM_HCERT = -260


def _numeric_date(value: Any, name: str) -> Result[datetime]:
    """Convert a NumericDate claim into a UTC instant."""
    match value:
        case bool():
            return ResultFailures.schema_violation(f"{name} must be a number, got boolean")
        case int() | float():
            return Result.from_computation(
                lambda: datetime.fromtimestamp(value, tz=UTC),
                ErrorCode.SCHEMA_VIOLATION,
                f"{name} {value!r} is not a representable instant",
            )
        case _:
            return ResultFailures.schema_violation(
                f"{name} must be a number, got {describe_type(value)}"
            )


def _claim(claims: dict[Any, Any], key: int) -> Any:
    """
    The value under integer claim `key`, or None.

    A CBOR `true` or a float key compares equal to 1 or 4 in Python; only a
    real integer key names a claim.
    """
    for candidate, value in claims.items():
        if type(candidate) is int and candidate == key:
            return value
    return None


def _required_timestamp(claims: dict[Any, Any], key: int, name: str) -> Result[datetime]:
    return Result.from_optional(
        _claim(claims, key), f"{name} claim ({key}) is missing", ErrorCode.MISSING_CLAIM
    ).flat_map(lambda value: _numeric_date(value, f"{name} claim ({key})"))


def _payload_maps(container: dict[Any, Any]) -> Result[tuple[dict[Any, Any], ...]]:
    payloads: list[dict[Any, Any]] = []
    for key, payload in container.items():
        if not isinstance(payload, dict):
            return ResultFailures.schema_violation(
                f"hcert payload under key {key!r} must be a map, got {describe_type(payload)}"
            )
        payloads.append(payload)
    return Result.success(tuple(payloads))


def _hcert_payloads(container: Any) -> Result[tuple[dict[Any, Any], ...]]:
    """
    Validate the -260 claim and return its HCERT payload maps in order.

    The published schema keys the single payload by 1; every entry is
    read so a container with more than one pass is not silently cut short.
    """
    if not isinstance(container, dict):
        return ResultFailures.schema_violation(
            f"hcert claim ({CLAIM_HCERT}) must be a map, got {describe_type(container)}"
        )
    return (
        Result.success(container)
        .ensure(bool, ErrorCode.SCHEMA_VIOLATION, f"hcert claim ({CLAIM_HCERT}) is empty")
        .flat_map(_payload_maps)
    )


def _issuer(claims: dict[Any, Any]) -> Result[str] | None:
    """The issuer claim as a Result, or None when it is absent."""
    value = _claim(claims, CLAIM_ISSUER)
    if value is None:
        return None
    if not isinstance(value, str):
        return ResultFailures.schema_violation(
            f"issuer claim ({CLAIM_ISSUER}) must be text, got {describe_type(value)}"
        )
    return Result.success(value)


def read_claims(claims: dict[Any, Any]) -> Result[CwtClaims]:
    """
    Build CwtClaims from an already-decoded claims map.

    Missing issued-at, expiration or hcert → MISSING_CLAIM.
    A present claim of the wrong shape → SCHEMA_VIOLATION.
    A missing issuer is not an error.
    """
    issuer = _issuer(claims)
    if issuer is not None and issuer.is_failure():
        return Result.failure_from(issuer.error())

    return Result.combine(
        _required_timestamp(claims, CLAIM_ISSUED_AT, "issued-at"),
        _required_timestamp(claims, CLAIM_EXPIRATION, "expiration"),
        lambda created, expires: (created, expires),
    ).flat_map(
        lambda window: Result.from_optional(
            _claim(claims, CLAIM_HCERT),
            f"hcert claim ({CLAIM_HCERT}) is missing",
            ErrorCode.MISSING_CLAIM,
        )
        .flat_map(_hcert_payloads)
        .map(
            lambda payloads: CwtClaims(
                created=window[0],
                expires=window[1],
                hcert_payloads=payloads,
                issuer=issuer.value() if issuer is not None else None,
            )
        )
    )


def extract_claims(payload: bytes) -> Result[CwtClaims]:
    """
    Decode the COSE payload and extract the CWT claims.

    Returns Result[CwtClaims] on success. CBOR failures from decoding the
    payload propagate unchanged; a payload that is not a map fails with
    CBOR_UNEXPECTED_TYPE.
    """
    return (
        decode_cbor(payload)
        .flat_map(lambda value: expect_map(value, "CWT claims"))
        .flat_map(read_claims)
        .peek(
            lambda claims: log.debug(
                "cwt.extracted",
                issuer=claims.issuer,
                passes=len(claims.hcert_payloads),
            )
        )
    )
