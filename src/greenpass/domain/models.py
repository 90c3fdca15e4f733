"""
Domain models — immutable data structures for a decoded health certificate.

These are pure value objects with no behavior beyond a few read-only
conveniences. They hold only owned scalars, text and dates: nothing refers
back into the raw bytes the pipeline decoded them from.

All models are frozen dataclasses (immutable) following functional principles.
Entry kinds form a closed union (CertInfo); the identifying fields every
kind carries live in an embedded EntryIdentity rather than a base class.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any


@dataclass(frozen=True, slots=True)
class EntryIdentity:
    """
    Fields shared by vaccination, test and recovery entries.

    `country` is where the event (vaccination, test, first positive test)
    took place; `issuer` is the certificate-issuing entity.
    """

    disease: str  # tg
    country: str  # co
    issuer: str  # is
    cert_id: str  # ci


@dataclass(frozen=True, slots=True)
class Vaccine:
    """Attests that the holder has been vaccinated against a disease."""

    identity: EntryIdentity
    prophylaxis_kind: str  # vp
    product: str  # mp
    market_auth: str  # ma
    dose_number: int  # dn
    dose_total: int  # sd
    date: date  # dt

    kind = "vaccination"


@dataclass(frozen=True, slots=True)
class Test:
    """
    Attests that a test for a disease has been conducted.

    NAA tests carry `test_name`; rapid antigen tests carry `device_id`
    (the JRC database identifier). Both are optional.
    """

    __test__ = False  # not a pytest test class

    identity: EntryIdentity
    test_type: str  # tt
    collected_at: datetime  # sc
    result: str  # tr
    testing_centre: str  # tc
    test_name: str | None = None  # nm
    device_id: str | None = None  # ma
    result_at: datetime | None = None  # dr

    kind = "test"


@dataclass(frozen=True, slots=True)
class Recovery:
    """Attests recovery from a disease after a positive test."""

    identity: EntryIdentity
    first_positive: date  # fr
    valid_from: date  # df
    valid_until: date  # du

    kind = "recovery"


type CertInfo = Vaccine | Test | Recovery


@dataclass(frozen=True, slots=True)
class GreenPass:
    """
    One person's certificate payload.

    `date_of_birth` stays text: the schema allows partial dates
    ("1998", "1998-02") and some issuers leave it empty.
    """

    date_of_birth: str  # dob
    surname: str  # nam.fn
    given_name: str  # nam.gn
    std_surname: str  # nam.fnt
    std_given_name: str  # nam.gnt
    version: str  # ver
    entries: tuple[CertInfo, ...] = field(default_factory=tuple)

    @property
    def vaccinations(self) -> tuple[Vaccine, ...]:
        return tuple(e for e in self.entries if isinstance(e, Vaccine))

    @property
    def tests(self) -> tuple[Test, ...]:
        return tuple(e for e in self.entries if isinstance(e, Test))

    @property
    def recoveries(self) -> tuple[Recovery, ...]:
        return tuple(e for e in self.entries if isinstance(e, Recovery))


@dataclass(frozen=True, slots=True)
class HealthCert:
    """
    The whole decoded certificate.

    `issuer` is the ISO country code of the issuing member state and may
    be absent. `created` and `expires` are UTC instants; the decoder does
    not check that one precedes the other.
    """

    created: datetime
    expires: datetime
    passes: tuple[GreenPass, ...]
    issuer: str | None = None

    @property
    def total_entries(self) -> int:
        return sum(len(p.entries) for p in self.passes)


@dataclass(frozen=True, slots=True)
class CwtClaims:
    """
    The CWT claims the decoder uses, as extracted from the COSE payload.

    `hcert_payloads` are the raw HCERT maps (one per pass) still to be
    mapped by the schema mapper.
    """

    created: datetime
    expires: datetime
    hcert_payloads: tuple[dict[Any, Any], ...] = field(repr=False)
    issuer: str | None = None
