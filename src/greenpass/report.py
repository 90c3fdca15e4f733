"""
Report renderer — HealthCert → human-readable plain text (English).

Read-only traversal of a decoded certificate. Codes are shown together with
their value-set display names when `show_value_set_names` is on; unknown
codes are shown as-is.
"""

from __future__ import annotations

from datetime import date, datetime

from greenpass.domain.models import (
    CertInfo,
    EntryIdentity,
    GreenPass,
    HealthCert,
    Recovery,
    Test,
    Vaccine,
)
from greenpass.valuesets import (
    DISEASE_AGENT_TARGETED,
    TEST_RESULT,
    TEST_TYPE,
    VACCINE_MANUFACTURER,
    VACCINE_MEDICINAL_PRODUCT,
    VACCINE_PROPHYLAXIS,
    ValueSetEntry,
    display_name,
)

UNVERIFIED_NOTICE = "Signature NOT verified: this report does not prove authenticity."


def _instant(value: datetime) -> str:
    return value.isoformat().replace("+00:00", "Z")


def _day(value: date) -> str:
    return value.isoformat()


class _Lines:
    def __init__(self, show_names: bool) -> None:
        self._lines: list[str] = []
        self._show_names = show_names

    def add(self, label: str, value: str, indent: int = 0) -> None:
        self._lines.append(f"{'  ' * indent}{label + ':':<22} {value}")

    def code(
        self, label: str, value_set: dict[str, ValueSetEntry], code: str, indent: int
    ) -> None:
        name = display_name(value_set, code)
        if self._show_names and name != code:
            self.add(label, f"{name} ({code})", indent)
        else:
            self.add(label, code, indent)

    def heading(self, text: str, indent: int = 0) -> None:
        self._lines.append(f"{'  ' * indent}{text}")

    def blank(self) -> None:
        self._lines.append("")

    def text(self) -> str:
        return "\n".join(self._lines) + "\n"


def _identity(out: _Lines, identity: EntryIdentity) -> None:
    out.code("Disease", DISEASE_AGENT_TARGETED, identity.disease, 2)
    out.add("Country", identity.country, 2)
    out.add("Issuer", identity.issuer, 2)
    out.add("Certificate ID", identity.cert_id, 2)


def _entry(out: _Lines, index: int, entry: CertInfo) -> None:
    out.heading(f"[{index}] {entry.kind.capitalize()}", 1)
    match entry:
        case Vaccine():
            out.code("Vaccine", VACCINE_PROPHYLAXIS, entry.prophylaxis_kind, 2)
            out.code("Product", VACCINE_MEDICINAL_PRODUCT, entry.product, 2)
            out.code("Manufacturer", VACCINE_MANUFACTURER, entry.market_auth, 2)
            out.add("Dose", f"{entry.dose_number} of {entry.dose_total}", 2)
            out.add("Vaccinated on", _day(entry.date), 2)
        case Test():
            out.code("Test type", TEST_TYPE, entry.test_type, 2)
            if entry.test_name is not None:
                out.add("Test name", entry.test_name, 2)
            if entry.device_id is not None:
                out.add("Test device", entry.device_id, 2)
            out.add("Sample collected", _instant(entry.collected_at), 2)
            if entry.result_at is not None:
                out.add("Result produced", _instant(entry.result_at), 2)
            out.code("Result", TEST_RESULT, entry.result, 2)
            out.add("Testing centre", entry.testing_centre, 2)
        case Recovery():
            out.add("First positive test", _day(entry.first_positive), 2)
            out.add("Valid from", _day(entry.valid_from), 2)
            out.add("Valid until", _day(entry.valid_until), 2)
    _identity(out, entry.identity)


def _green_pass(out: _Lines, number: int, green_pass: GreenPass) -> None:
    out.heading(f"Pass {number} (schema {green_pass.version})")
    out.add("Surname", green_pass.surname, 1)
    out.add("Given name", green_pass.given_name, 1)
    out.add("Standardized surname", green_pass.std_surname, 1)
    out.add("Standardized given", green_pass.std_given_name, 1)
    out.add("Date of birth", green_pass.date_of_birth or "(not given)", 1)
    for index, entry in enumerate(green_pass.entries, start=1):
        _entry(out, index, entry)


def render_report(cert: HealthCert, show_value_set_names: bool = True) -> str:
    """Render `cert` as plain text, one labelled field per line."""
    out = _Lines(show_value_set_names)
    out.heading("EU Digital COVID Certificate")
    out.add("Issuing country", cert.issuer or "unknown")
    out.add("Issued at", _instant(cert.created))
    out.add("Expires at", _instant(cert.expires))
    out.heading(UNVERIFIED_NOTICE)
    for number, green_pass in enumerate(cert.passes, start=1):
        out.blank()
        _green_pass(out, number, green_pass)
    return out.text()


class HealthCertReportRenderer:
    """
    Render HealthCert values as plain-text reports.

    Implements the ReportRenderer port.
    """

    def __init__(self, show_value_set_names: bool = True) -> None:
        self._show_value_set_names = show_value_set_names

    def render(self, cert: HealthCert) -> str:
        return render_report(cert, self._show_value_set_names)
