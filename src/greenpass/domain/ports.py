"""
Ports — Protocol-based interfaces for the decoder's external collaborators.

The decode pipeline itself is a pure function and needs no ports. What sits
around it does I/O and is injected at the composition root:

  TextSource → decode() → ReportRenderer

Each port is a Protocol (structural typing) so adapters satisfy
the contract simply by implementing the methods — no inheritance.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from railway.result import Result

from greenpass.domain.models import HealthCert


@runtime_checkable
class TextSource(Protocol):
    """
    Port: supply the Base45 text recovered from a QR code.

    Barcode scanning is out of scope; the text arrives from a file, stdin,
    or any caller-provided source. Scheme prefixes (e.g. "HC1:") are left
    in place — stripping them is the caller's decision.
    """

    def read_text(self) -> Result[str]: ...


@runtime_checkable
class ReportRenderer(Protocol):
    """
    Port: turn a decoded HealthCert into human-readable text.

    Read-only traversal. The decoder guarantees every string field is valid
    text and every date/instant is a real calendar value, so renderers
    do not re-validate.
    """

    def render(self, cert: HealthCert) -> str: ...
