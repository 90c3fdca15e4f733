"""
Pipeline — the decode railway from QR text to HealthCert.

Domain layer — PURE: no I/O, no global state, no logging of failures.
Every call is independent and safe to run concurrently with others.

The stages connect via flat_map, forming a railway:

  decode_base45(text)
    → inflate(raw, cap)
      → decode_cbor(cbor_bytes)
        → unwrap_cose_sign1(value)
          → extract_claims(payload)
            → map_health_cert(claims)

Each stage returns Result[T]. The first failure short-circuits the rest
and is tagged with the name of the stage that produced it.
"""

from __future__ import annotations

from railway.result import Result

from greenpass.codec.base45 import decode_base45
from greenpass.codec.cbor import decode_cbor
from greenpass.codec.inflate import inflate
from greenpass.cose import unwrap_cose_sign1
from greenpass.cwt import extract_claims
from greenpass.domain.models import HealthCert
from greenpass.hcert import map_health_cert

DEFAULT_MAX_INFLATED_BYTES = 1024 * 1024

STAGES = ("base45", "inflate", "cbor", "cose", "cwt", "hcert")


def decode(text: str, max_inflated_bytes: int = DEFAULT_MAX_INFLATED_BYTES) -> Result[HealthCert]:
    """
    Decode the Base45 content of a DGC QR code into a HealthCert.

    `text` must already be stripped of any scheme prefix such as "HC1:".
    `max_inflated_bytes` caps the decompressed size (decompression bombs).

    Returns Result[HealthCert] on success, or the failure of the first
    stage that rejected the input, with `error().stage` naming it.
    The COSE signature is NOT verified.
    """
    return (
        decode_base45(text).at_stage("base45")
        .flat_map(lambda raw: inflate(raw, max_inflated_bytes).at_stage("inflate"))
        .flat_map(lambda data: decode_cbor(data).at_stage("cbor"))
        .flat_map(lambda value: unwrap_cose_sign1(value).at_stage("cose"))
        .flat_map(lambda payload: extract_claims(payload).at_stage("cwt"))
        .flat_map(lambda claims: map_health_cert(claims).at_stage("hcert"))
    )
