"""
greenpass — EU Digital Green Certificate decoder.

Turns the Base45 text carried by a DGC QR code into a typed, immutable
HealthCert:

  Base45 → inflate → CBOR → COSE_Sign1 → CWT claims → HCERT → HealthCert

Built on the Railway-Oriented Programming (ROP) framework: every stage
returns a Result, and a failure names the stage and the kind of problem.

The COSE signature is never verified. A successfully decoded certificate
is NOT proof of authenticity.
"""

from greenpass.pipeline import DEFAULT_MAX_INFLATED_BYTES, decode

__version__ = "0.1.0"

__all__ = ["DEFAULT_MAX_INFLATED_BYTES", "decode"]
