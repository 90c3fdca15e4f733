"""
Unit tests for the plain-text report renderer.

Test categories:
  - Header: issuer, validity window, unverified-signature notice
  - Entries: per-kind fields, value-set names on and off
  - Optional data: absent issuer, dob, optional test fields
"""

from __future__ import annotations

from datetime import UTC, datetime

from railway import ResultAssertions

from greenpass.domain.models import HealthCert
from greenpass.domain.ports import ReportRenderer
from greenpass.hcert import map_pass
from greenpass.report import UNVERIFIED_NOTICE, HealthCertReportRenderer, render_report
from tests.conftest import hcert_payload, naat_test_entry, recovery_entry, vaccination_entry


def _cert(*payloads: dict, issuer: str | None = "AT") -> HealthCert:
    return HealthCert(
        created=datetime(2021, 7, 2, 23, 58, 57, tzinfo=UTC),
        expires=datetime(2022, 7, 2, 23, 58, 57, tzinfo=UTC),
        passes=tuple(ResultAssertions.assert_success(map_pass(p)) for p in payloads),
        issuer=issuer,
    )


def _field(report: str, label: str) -> str:
    """Value of the first line labelled `label`."""
    for line in report.splitlines():
        if line.strip().startswith(f"{label}:"):
            return line.split(":", 1)[1].strip()
    raise AssertionError(f"no {label!r} line in report:\n{report}")


class TestHeader:
    def test_header_fields(self) -> None:
        report = render_report(_cert(hcert_payload()))

        assert report.startswith("EU Digital COVID Certificate\n")
        assert _field(report, "Issuing country") == "AT"
        assert _field(report, "Issued at") == "2021-07-02T23:58:57Z"
        assert _field(report, "Expires at") == "2022-07-02T23:58:57Z"
        assert UNVERIFIED_NOTICE in report

    def test_missing_issuer(self) -> None:
        report = render_report(_cert(hcert_payload(), issuer=None))
        assert _field(report, "Issuing country") == "unknown"

    def test_report_ends_with_newline(self) -> None:
        assert render_report(_cert(hcert_payload())).endswith("\n")


class TestPassSection:
    def test_person_fields(self) -> None:
        report = render_report(_cert(hcert_payload()))

        assert "Pass 1 (schema 1.2.1)" in report
        assert _field(report, "Surname") == "Musterfrau-Gößinger"
        assert _field(report, "Given name") == "Gabriele"
        assert _field(report, "Standardized surname") == "MUSTERFRAU<GOESSINGER"
        assert _field(report, "Date of birth") == "1998-02-26"

    def test_empty_dob(self) -> None:
        report = render_report(_cert(hcert_payload(dob="")))
        assert _field(report, "Date of birth") == "(not given)"

    def test_entries_numbered_in_order(self) -> None:
        report = render_report(
            _cert(hcert_payload(t=[naat_test_entry()], r=[recovery_entry()]))
        )
        headings = [line.strip() for line in report.splitlines() if line.strip().startswith("[")]
        assert headings == ["[1] Vaccination", "[2] Test", "[3] Recovery"]

    def test_every_pass_rendered(self) -> None:
        report = render_report(_cert(hcert_payload(), hcert_payload(ver="1.3.0")))
        assert "Pass 1 (schema 1.2.1)" in report
        assert "Pass 2 (schema 1.3.0)" in report


class TestVaccinationSection:
    def test_codes_with_names(self) -> None:
        report = render_report(_cert(hcert_payload()))

        assert _field(report, "Disease") == "COVID-19 (840539006)"
        assert _field(report, "Vaccine") == "SARS-CoV-2 mRNA vaccine (1119349007)"
        assert _field(report, "Product") == "Comirnaty (EU/1/20/1528)"
        assert _field(report, "Manufacturer") == "Biontech Manufacturing GmbH (ORG-100030215)"
        assert _field(report, "Dose") == "1 of 2"
        assert _field(report, "Vaccinated on") == "2021-02-18"
        assert _field(report, "Issuer") == "Ministry of Health, Austria"

    def test_codes_without_names(self) -> None:
        report = HealthCertReportRenderer(show_value_set_names=False).render(
            _cert(hcert_payload())
        )
        assert _field(report, "Product") == "EU/1/20/1528"
        assert "Comirnaty" not in report

    def test_unknown_code_shown_as_is(self) -> None:
        report = render_report(_cert(hcert_payload(v=[vaccination_entry(mp="Sputnik-X")])))
        assert _field(report, "Product") == "Sputnik-X"


class TestTestSection:
    def test_naat_test(self) -> None:
        report = render_report(_cert(hcert_payload(v=None, t=[naat_test_entry()])))

        assert _field(report, "Test type") == (
            "Nucleic acid amplification with probe detection (LP6464-4)"
        )
        assert _field(report, "Test name") == "Roche LightCycler qPCR"
        assert _field(report, "Sample collected") == "2021-02-20T04:34:56Z"
        assert _field(report, "Result") == "Not detected (260415000)"
        assert _field(report, "Testing centre") == "Testing center Vienna 1"
        assert "Test device:" not in report
        assert "Result produced:" not in report

    def test_antigen_test_with_result_time(self) -> None:
        entry = naat_test_entry(tt="LP217198-3", ma="1232", dr="2021-02-20T13:00:00Z")
        del entry["nm"]

        report = render_report(_cert(hcert_payload(v=None, t=[entry])))

        assert _field(report, "Test device") == "1232"
        assert _field(report, "Result produced") == "2021-02-20T13:00:00Z"
        assert "Test name:" not in report


class TestRecoverySection:
    def test_recovery_dates(self) -> None:
        report = render_report(_cert(hcert_payload(v=None, r=[recovery_entry()])))

        assert _field(report, "First positive test") == "2021-02-20"
        assert _field(report, "Valid from") == "2021-04-04"
        assert _field(report, "Valid until") == "2021-10-04"


class TestRendererPort:
    def test_satisfies_report_renderer_port(self) -> None:
        assert isinstance(HealthCertReportRenderer(), ReportRenderer)
