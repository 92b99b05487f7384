"""
Pytest configuration and shared fixtures for smelter_recon tests.
"""

import os

import pytest

from smelter_recon.config import get_settings
from smelter_recon.models import DeclaredFacility, ReferenceFacility
from smelter_recon.reconciliation.index import ReferenceIndex

# Engine defaults must not depend on the developer's environment
for _name in list(os.environ):
    if _name.startswith("SMELTER_RECON_"):
        del os.environ[_name]


@pytest.fixture(autouse=True)
def fresh_settings():
    """Reload settings for every test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def acme_gold() -> ReferenceFacility:
    """The single reference record used by the end-to-end scenarios."""
    return ReferenceFacility(
        facility_id="F1",
        standard_facility_name="Acme Smelting Ltd",
        metal="Gold",
        assessment_status_raw="CMRT: Conformant",
    )


@pytest.fixture
def acme_index(acme_gold) -> ReferenceIndex:
    return ReferenceIndex([acme_gold])


@pytest.fixture
def reference_facilities() -> list[ReferenceFacility]:
    """A small multi-standard reference set."""
    return [
        ReferenceFacility.from_list_row("CMRT", "CID000015", "Asahi Refining Canada Ltd.", "Gold"),
        ReferenceFacility.from_list_row("CMRT", "CID001147", "Metalor Technologies SA", "Gold"),
        ReferenceFacility.from_list_row(
            "CMRT", "CID002036", "Thaisarco", "Tin", assessment_status="Active"
        ),
        ReferenceFacility.from_list_row(
            "CMRT", "CID001070", "Mineracao Taboca S.A.", "Tin", "Non-Conformant"
        ),
        ReferenceFacility.from_list_row("EMRT", "CID002036", "Thaisarco", "Tin", "Conformant"),
        ReferenceFacility.from_list_row("EMRT", "CID003525", "Umicore Olen", "Cobalt"),
        ReferenceFacility.from_list_row("AMRT", "AL0001", "Hydro Aluminium Sunndal", "Aluminum"),
        ReferenceFacility(
            facility_id="",
            standard_facility_name="Universal Refiners GmbH",
            metal="",
            assessment_status_raw="RMI Conformant",
        ),
    ]


@pytest.fixture
def reference_index(reference_facilities) -> ReferenceIndex:
    return ReferenceIndex(reference_facilities, standards=["CMRT", "EMRT"], metals=["Gold", "Tin"])


@pytest.fixture
def declared_rows() -> list[DeclaredFacility]:
    """A supplier submission covering every match tier."""
    return [
        DeclaredFacility(metal="Gold", name="Asahi", identification_number="cid000015"),
        DeclaredFacility(metal="Gold", name="METALOR TECHNOLOGIES", country="Switzerland"),
        DeclaredFacility(metal="Tin", name="Thaisarco", identification_number=""),
        DeclaredFacility(metal="Tin", name="Mineracao Taboca"),
        DeclaredFacility(metal="Gold", name="Unknown Gold Works"),
    ]
