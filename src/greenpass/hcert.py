"""
HCERT schema stage — HCERT payload maps → GreenPass / HealthCert.

Structural transcription of the EU DCC JSON schema (short keys):

    dob   date of birth (kept as text, may be partial)
    nam   {fn, gn, fnt, gnt}   surname, given name, standardized forms
    ver   schema version
    v     vaccination entries  {tg vp mp ma dn sd dt co is ci}
    t     test entries         {tg tt nm? ma? sc dr? tr tc co is ci}
    r     recovery entries     {tg fr co is df du ci}

Entries are concatenated in a fixed order — vaccinations, then tests,
then recoveries — each keeping its source order. Nothing is checked
against value sets or for plausibility; unknown keys are ignored.

Field access may raise _SchemaViolation internally; it is converted to a
SCHEMA_VIOLATION failure at the public boundary (map_pass / map_health_cert).
"""

from __future__ import annotations

import re
from collections.abc import Callable
from datetime import UTC, date, datetime
from typing import Any

import structlog
from dateutil.parser import isoparse, isoparser
from railway.result import Result
from railway.result_failures import ResultFailures, describe_type

from greenpass.domain.models import (
    CertInfo,
    CwtClaims,
    EntryIdentity,
    GreenPass,
    HealthCert,
    Recovery,
    Test,
    Vaccine,
)

log = structlog.get_logger()

_DATE_PARSER = isoparser()
# dateutil also takes "2021", "2021-02" and "20210101"; entry dates are never partial
_FULL_DATE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


class _SchemaViolation(ValueError):
    """Raised by field readers; never escapes this module."""


class _Fields:
    """Typed, read-only access to one HCERT map; failures name `where`."""

    def __init__(self, values: dict[Any, Any], where: str) -> None:
        self._values = values
        self._where = where

    def _get(self, key: str) -> Any:
        value = self._values.get(key)
        if value is None:
            raise _SchemaViolation(f"{self._where} is missing {key!r}")
        return value

    def _wrong(self, key: str, expected: str, value: Any) -> _SchemaViolation:
        return _SchemaViolation(
            f"{self._where}: {key!r} must be {expected}, got {describe_type(value)}"
        )

    def text(self, key: str) -> str:
        value = self._get(key)
        if not isinstance(value, str):
            raise self._wrong(key, "text", value)
        if not value.isprintable():
            raise _SchemaViolation(
                f"{self._where}: {key!r} contains non-printable characters: {value!r}"
            )
        return value

    def optional_text(self, key: str) -> str | None:
        if self._values.get(key) is None:
            return None
        return self.text(key)

    def integer(self, key: str) -> int:
        value = self._get(key)
        if isinstance(value, bool) or not isinstance(value, int):
            raise self._wrong(key, "an integer", value)
        return value

    def calendar_date(self, key: str) -> date:
        text = self.text(key)
        if _FULL_DATE.fullmatch(text) is None:
            raise _SchemaViolation(
                f"{self._where}: {key!r} must be a full YYYY-MM-DD date: {text!r}"
            )
        try:
            return _DATE_PARSER.parse_isodate(text)
        except ValueError as e:
            raise _SchemaViolation(
                f"{self._where}: {key!r} is not an ISO 8601 date: {text!r}"
            ) from e

    def instant(self, key: str) -> datetime:
        text = self.text(key)
        try:
            parsed = isoparse(text)
            if parsed.tzinfo is None:
                return parsed.replace(tzinfo=UTC)
            return parsed.astimezone(UTC)
        except (ValueError, OverflowError) as e:
            raise _SchemaViolation(
                f"{self._where}: {key!r} is not an ISO 8601 date-time: {text!r}"
            ) from e

    def optional_instant(self, key: str) -> datetime | None:
        if self._values.get(key) is None:
            return None
        return self.instant(key)

    def nested(self, key: str, where: str) -> _Fields:
        value = self._get(key)
        if not isinstance(value, dict):
            raise self._wrong(key, "a map", value)
        return _Fields(value, where)

    def array(self, key: str) -> list[Any] | None:
        value = self._values.get(key)
        if value is None:
            return None
        if not isinstance(value, list):
            raise self._wrong(key, "an array", value)
        return value


# ─────────────────────── Entry mappers ───────────────────────


def _identity(fields: _Fields) -> EntryIdentity:
    return EntryIdentity(
        disease=fields.text("tg"),
        country=fields.text("co"),
        issuer=fields.text("is"),
        cert_id=fields.text("ci"),
    )


def _vaccine(fields: _Fields) -> Vaccine:
    return Vaccine(
        identity=_identity(fields),
        prophylaxis_kind=fields.text("vp"),
        product=fields.text("mp"),
        market_auth=fields.text("ma"),
        dose_number=fields.integer("dn"),
        dose_total=fields.integer("sd"),
        date=fields.calendar_date("dt"),
    )


def _test(fields: _Fields) -> Test:
    return Test(
        identity=_identity(fields),
        test_type=fields.text("tt"),
        collected_at=fields.instant("sc"),
        result=fields.text("tr"),
        testing_centre=fields.text("tc"),
        test_name=fields.optional_text("nm"),
        device_id=fields.optional_text("ma"),
        result_at=fields.optional_instant("dr"),
    )


def _recovery(fields: _Fields) -> Recovery:
    return Recovery(
        identity=_identity(fields),
        first_positive=fields.calendar_date("fr"),
        valid_from=fields.calendar_date("df"),
        valid_until=fields.calendar_date("du"),
    )


# Processing order is fixed: vaccinations, tests, recoveries.
_ENTRY_KINDS: tuple[tuple[str, str, Callable[[_Fields], CertInfo]], ...] = (
    ("v", "vaccination", _vaccine),
    ("t", "test", _test),
    ("r", "recovery", _recovery),
)


def _entries(payload: _Fields) -> tuple[CertInfo, ...]:
    found_collection = False
    entries: list[CertInfo] = []
    for key, kind, build in _ENTRY_KINDS:
        items = payload.array(key)
        if items is None:
            continue
        found_collection = True
        for index, item in enumerate(items, start=1):
            where = f"{kind} entry {index}"
            if not isinstance(item, dict):
                raise _SchemaViolation(f"{where} must be a map, got {describe_type(item)}")
            entries.append(build(_Fields(item, where)))

    if not found_collection:
        raise _SchemaViolation(
            "hcert payload is missing its entry collection ('v', 't' or 'r')"
        )
    if not entries:
        raise _SchemaViolation("hcert payload entry collections are all empty")
    return tuple(entries)


def _build_pass(payload: dict[Any, Any]) -> GreenPass:
    fields = _Fields(payload, "hcert payload")
    name = fields.nested("nam", "hcert name ('nam')")
    return GreenPass(
        date_of_birth=fields.text("dob"),
        surname=name.text("fn"),
        given_name=name.text("gn"),
        std_surname=name.text("fnt"),
        std_given_name=name.text("gnt"),
        version=fields.text("ver"),
        entries=_entries(fields),
    )


# ─────────────────────── Public mappers ───────────────────────


def map_pass(payload: dict[Any, Any]) -> Result[GreenPass]:
    """
    Map one HCERT payload map to a GreenPass.

    Returns Result.failure(SCHEMA_VIOLATION, ...) naming the entry kind and
    field when a required field is absent or has the wrong shape.
    """
    try:
        return Result.success(_build_pass(payload))
    except _SchemaViolation as e:
        return ResultFailures.schema_violation(str(e), e)


def map_health_cert(claims: CwtClaims) -> Result[HealthCert]:
    """Map every HCERT payload in `claims` and assemble the HealthCert."""
    return (
        Result.all_of(map_pass(payload) for payload in claims.hcert_payloads)
        .map(
            lambda passes: HealthCert(
                created=claims.created,
                expires=claims.expires,
                passes=tuple(passes),
                issuer=claims.issuer,
            )
        )
        .peek(
            lambda cert: log.debug(
                "hcert.mapped", passes=len(cert.passes), entries=cert.total_entries
            )
        )
    )
