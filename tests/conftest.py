"""
Shared test fixtures and helpers for the greenpass test suite.

Provides builders for synthetic certificates: HCERT entry maps, CWT
claims, and the full Base45 → zlib → COSE_Sign1 encoding, so each test
can change exactly the part it is about.
"""

from __future__ import annotations

import copy
import zlib
from typing import Any

import base45
import cbor2
import pytest

ISSUED_AT = 1625270337  # 2021-07-02T23:58:57Z
EXPIRES_AT = 1656806337  # 2022-07-02T23:58:57Z

_VACCINATION_ENTRY: dict[str, Any] = {
    "tg": "840539006",
    "vp": "1119349007",
    "mp": "EU/1/20/1528",
    "ma": "ORG-100030215",
    "dn": 1,
    "sd": 2,
    "dt": "2021-02-18",
    "co": "AT",
    "is": "Ministry of Health, Austria",
    "ci": "URN:UVCI:01:AT:10807843F94AEE0EE5093FBC254BD813#B",
}

_TEST_ENTRY: dict[str, Any] = {
    "tg": "840539006",
    "tt": "LP6464-4",
    "nm": "Roche LightCycler qPCR",
    "sc": "2021-02-20T04:34:56Z",
    "tr": "260415000",
    "tc": "Testing center Vienna 1",
    "co": "AT",
    "is": "Ministry of Health, Austria",
    "ci": "URN:UVCI:01:AT:B5921A35D6A0D696421B3E2462178297#I",
}

_RECOVERY_ENTRY: dict[str, Any] = {
    "tg": "840539006",
    "fr": "2021-02-20",
    "co": "AT",
    "is": "Ministry of Health, Austria",
    "df": "2021-04-04",
    "du": "2021-10-04",
    "ci": "URN:UVCI:01:AT:858CC18CFCF5965EF82F60E493349AA5#K",
}


def vaccination_entry(**overrides: Any) -> dict[str, Any]:
    """A valid vaccination entry map; keyword overrides replace fields."""
    return {**copy.deepcopy(_VACCINATION_ENTRY), **overrides}


def naat_test_entry(**overrides: Any) -> dict[str, Any]:
    """A valid NAA test entry map."""
    return {**copy.deepcopy(_TEST_ENTRY), **overrides}


def recovery_entry(**overrides: Any) -> dict[str, Any]:
    """A valid recovery entry map."""
    return {**copy.deepcopy(_RECOVERY_ENTRY), **overrides}


def hcert_payload(**overrides: Any) -> dict[str, Any]:
    """A valid HCERT payload with one vaccination entry."""
    payload: dict[str, Any] = {
        "v": [vaccination_entry()],
        "dob": "1998-02-26",
        "nam": {
            "fn": "Musterfrau-Gößinger",
            "gn": "Gabriele",
            "fnt": "MUSTERFRAU<GOESSINGER",
            "gnt": "GABRIELE",
        },
        "ver": "1.2.1",
    }
    payload.update(overrides)
    return payload


def cwt_claims(hcert: dict[str, Any] | None = None, **overrides: Any) -> dict[Any, Any]:
    """A valid CWT claims map wrapping `hcert` under -260/1."""
    claims: dict[Any, Any] = {
        1: "AT",
        4: EXPIRES_AT,
        6: ISSUED_AT,
        -260: {1: hcert if hcert is not None else hcert_payload()},
    }
    claims.update(overrides)
    return claims


def cose_sign1(payload: bytes, tagged: bool = True) -> bytes:
    """CBOR-encode a COSE_Sign1 around `payload` with a dummy signature."""
    envelope = [cbor2.dumps({1: -7}), {4: b"\xd9\x19\x37\x5f\xc1\xe7\xb6\xb2"}, payload, bytes(64)]
    return cbor2.dumps(cbor2.CBORTag(18, envelope) if tagged else envelope)


def raw_deflate(data: bytes) -> bytes:
    """Compress without any container header."""
    compressor = zlib.compressobj(9, zlib.DEFLATED, -15)
    return compressor.compress(data) + compressor.flush()


def to_base45(data: bytes) -> str:
    encoded = base45.b45encode(data)
    return encoded.decode("ascii") if isinstance(encoded, bytes) else encoded


def encode_certificate(
    claims: dict[Any, Any] | None = None,
    *,
    tagged: bool = True,
    container: str = "zlib",
) -> str:
    """Full encoding: claims → CBOR → COSE_Sign1 → zlib/raw DEFLATE → Base45."""
    cose = cose_sign1(cbor2.dumps(claims if claims is not None else cwt_claims()), tagged)
    compressed = zlib.compress(cose, 9) if container == "zlib" else raw_deflate(cose)
    return to_base45(compressed)


@pytest.fixture()
def valid_qr_text() -> str:
    """Base45 text (no prefix) of a synthetic one-vaccination certificate."""
    return encode_certificate()
