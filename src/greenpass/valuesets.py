"""
Value sets — EU Digital COVID Certificate code lists for display.

Source: "Value Sets for the Digital COVID Certificates" (European
Commission, eHealth Network, 2022-01), sections 2.1–2.6.

Presentation only. The decoder never checks codes against these tables:
an unknown code is passed through and rendered as itself.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, unique


@unique
class AuthorizationStatus(Enum):
    """Regulatory status of a vaccine medicinal product in the EU."""

    CENTRALLY_AUTHORIZED = "centrally authorized"
    IN_ROLLING_REVIEW = "in rolling review by EMA"
    NOT_AUTHORIZED = "not centrally authorized"


@dataclass(frozen=True, slots=True)
class ValueSetEntry:
    code: str
    display: str
    code_system: str | None = None
    # Value-set version that introduced the code; None for the original set.
    since_version: str | None = None
    authorization: AuthorizationStatus | None = None
    # Manufacturers only: listed in the EMA Organisation Management Service.
    in_oms: bool | None = None


def _index(*entries: ValueSetEntry) -> dict[str, ValueSetEntry]:
    return {entry.code: entry for entry in entries}


_SNOMED = "SNOMED CT"
_LOINC = "LOINC"
_ATC = "Anatomical Therapeutic Chemical Classification System"
_UNION_REGISTER = "Union Register of medicinal products"
_OMS = "EMA Organisation Management Service"

# 2.1 Disease or agent targeted
DISEASE_AGENT_TARGETED = _index(
    ValueSetEntry("840539006", "COVID-19", _SNOMED),
)

# 2.2 COVID-19 vaccine or prophylaxis
VACCINE_PROPHYLAXIS = _index(
    ValueSetEntry("1119305005", "SARS-CoV-2 antigen vaccine", _SNOMED),
    ValueSetEntry("1119349007", "SARS-CoV-2 mRNA vaccine", _SNOMED),
    ValueSetEntry("J07BX03", "covid-19 vaccines", _ATC),
)

_C = AuthorizationStatus.CENTRALLY_AUTHORIZED
_R = AuthorizationStatus.IN_ROLLING_REVIEW
_N = AuthorizationStatus.NOT_AUTHORIZED

# 2.3 COVID-19 vaccine medicinal product
VACCINE_MEDICINAL_PRODUCT = _index(
    ValueSetEntry("EU/1/20/1528", "Comirnaty", _UNION_REGISTER, None, _C),
    ValueSetEntry("EU/1/20/1507", "Spikevax", _UNION_REGISTER, None, _C),
    ValueSetEntry("EU/1/21/1529", "Vaxzevria", _UNION_REGISTER, None, _C),
    ValueSetEntry("EU/1/20/1525", "COVID-19 Vaccine Janssen", _UNION_REGISTER, None, _C),
    ValueSetEntry("EU/1/21/1618", "Nuvaxovid", _UNION_REGISTER, None, _C),
    ValueSetEntry("CVnCoV", "CVnCoV", None, "1.0", _R),
    ValueSetEntry("NVX-CoV2373", "NVX-CoV2373", None, "1.0", _R),
    ValueSetEntry("Sputnik-V", "Sputnik V", None, "1.0", _R),
    ValueSetEntry("Convidecia", "Convidecia", None, "1.0", _N),
    ValueSetEntry("EpiVacCorona", "EpiVacCorona", None, "1.0", _N),
    ValueSetEntry("BBIBP-CorV", "BBIBP-CorV", None, "1.0", _N),
    ValueSetEntry(
        "Inactivated-SARS-CoV-2-Vero-Cell", "Inactivated SARS-CoV-2 (Vero Cell)", None, "1.0", _N
    ),
    ValueSetEntry("CoronaVac", "CoronaVac", None, "1.0", _N),
    ValueSetEntry("Covaxin", "Covaxin (also known as BBV152 A, B, C)", None, "1.0", _N),
    ValueSetEntry("Covishield", "Covishield (ChAdOx1_nCoV-19)", None, "1.2", _N),
    ValueSetEntry("Covid-19-recombinant", "Covid-19 (recombinant)", None, "1.3", _N),
    ValueSetEntry("R-COVI", "R-COVI", None, "1.3", _N),
    ValueSetEntry("CoviVac", "CoviVac", None, "1.4", _N),
    ValueSetEntry("Sputnik-Light", "Sputnik Light", None, "1.4", _N),
    ValueSetEntry("Hayat-Vax", "Hayat-Vax", None, "1.4", _N),
    ValueSetEntry("Abdala", "Abdala", None, "1.5", _N),
    ValueSetEntry("WIBP-CorV", "WIBP-CorV", None, "1.5", _N),
    ValueSetEntry("MVC-COV1901", "MVC COVID-19 vaccine", None, "1.6", _N),
)

# 2.4 COVID-19 vaccine marketing authorization holder or manufacturer
VACCINE_MANUFACTURER = _index(
    ValueSetEntry("ORG-100001699", "AstraZeneca AB", _OMS, in_oms=True),
    ValueSetEntry("ORG-100030215", "Biontech Manufacturing GmbH", _OMS, in_oms=True),
    ValueSetEntry("ORG-100001417", "Janssen-Cilag International", _OMS, in_oms=True),
    ValueSetEntry("ORG-100031184", "Moderna Biotech Spain S.L.", _OMS, in_oms=True),
    ValueSetEntry("ORG-100006270", "Curevac AG", _OMS, in_oms=True),
    ValueSetEntry("ORG-100013793", "CanSino Biologics", _OMS, in_oms=True),
    ValueSetEntry(
        "ORG-100020693",
        "China Sinopharm International Corp. - Beijing location",
        _OMS,
        in_oms=True,
    ),
    ValueSetEntry(
        "ORG-100010771",
        "Sinopharm Weiqida Europe Pharmaceutical s.r.o. - Prague location",
        _OMS,
        in_oms=True,
    ),
    ValueSetEntry(
        "ORG-100024420",
        "Sinopharm Zhijun (Shenzhen) Pharmaceutical Co. Ltd. - Shenzhen location",
        _OMS,
        in_oms=True,
    ),
    ValueSetEntry("ORG-100032020", "Novavax CZ a.s.", _OMS, in_oms=True),
    ValueSetEntry("ORG-100001981", "Serum Institute Of India Private Limited", _OMS, in_oms=True),
    ValueSetEntry("ORG-100007893", "R-Pharm CJSC", _OMS, in_oms=True),
    ValueSetEntry("ORG-100023050", "Gulf Pharmaceutical Industries", _OMS, in_oms=True),
    ValueSetEntry("ORG-100033914", "Medigen Vaccine Biologics Corporation", _OMS, in_oms=True),
    ValueSetEntry(
        "Gamaleya-Research-Institute", "Gamaleya Research Institute", None, "1.0", in_oms=False
    ),
    ValueSetEntry("Vector-Institute", "Vector Institute", None, "1.0", in_oms=False),
    ValueSetEntry("Sinovac-Biotech", "Sinovac Biotech", None, "1.0", in_oms=False),
    ValueSetEntry("Bharat-Biotech", "Bharat Biotech", None, "1.0", in_oms=False),
    ValueSetEntry("Fiocruz", "Fiocruz", None, "1.3", in_oms=False),
    ValueSetEntry(
        "Chumakov-Federal-Scientific-Center",
        "Chumakov Federal Scientific Center for Research and Development "
        "of Immune-and-Biological Products",
        None,
        "1.4",
        in_oms=False,
    ),
    ValueSetEntry(
        "CIGB",
        "Center for Genetic Engineering and Biotechnology (CIGB)",
        None,
        "1.5",
        in_oms=False,
    ),
    ValueSetEntry(
        "Sinopharm-WIBP",
        "Sinopharm - Wuhan Institute of Biological Products",
        None,
        "1.5",
        in_oms=False,
    ),
)

# 2.5 Type of test
TEST_TYPE = _index(
    ValueSetEntry("LP6464-4", "Nucleic acid amplification with probe detection", _LOINC),
    ValueSetEntry("LP217198-3", "Rapid immunoassay", _LOINC),
)

# 2.6 Test result
TEST_RESULT = _index(
    ValueSetEntry("260415000", "Not detected", _SNOMED),
    ValueSetEntry("260373001", "Detected", _SNOMED),
)


def display_name(value_set: dict[str, ValueSetEntry], code: str) -> str:
    """Display text for `code`, or the code itself when the set does not know it."""
    entry = value_set.get(code)
    return entry.display if entry is not None else code
