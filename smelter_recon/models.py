"""
Data models for facility reconciliation.

These dataclasses represent the declared facilities submitted by a supplier,
the authoritative reference facilities they are checked against, and the
per-facility outcome of a comparison. All of them are immutable once built.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from smelter_recon.constants import DEFAULT_ASSESSMENT_STATUS


class MatchTier(Enum):
    """Strength of the match that produced an outcome."""

    NONE = "none"
    EXACT = "exact"
    FUZZY = "fuzzy"


class ConformanceStatus(Enum):
    """Final classification of a declared facility."""

    CONFORMANT = "conformant"
    ACTIVE = "active"
    NON_CONFORMANT = "non-conformant"
    ATTENTION_REQUIRED = "attention-required"


@dataclass(frozen=True)
class DeclaredFacility:
    """A smelter/refinery row from a supplier's due-diligence template."""

    metal: str
    name: str
    country: str | None = None
    identification_number: str | None = None


@dataclass(frozen=True)
class ReferenceFacility:
    """A facility from an authoritative reference list."""

    facility_id: str
    standard_facility_name: str
    metal: str
    assessment_status_raw: str  # May carry a "CMRT: " style prefix
    country: str | None = None
    region: str | None = None
    city: str | None = None
    cross_reference: str | None = None
    list_type: str | None = None  # Standard the record was loaded under

    @classmethod
    def from_list_row(
        cls,
        list_type: str,
        facility_id: str | None,
        standard_facility_name: str | None,
        metal: str | None,
        assessment_status: str | None = None,
        country: str | None = None,
        region: str | None = None,
        city: str | None = None,
        cross_reference: str | None = None,
    ) -> ReferenceFacility:
        """
        Build a record from a reference-list row.

        The assessment status is prefixed with the list type so that the
        standard survives into the engine, and defaults to "Conformant" when
        the row has none (reference lists only hold assessed facilities).

        Args:
            list_type: Standard code the list was published under ("CMRT", ...)
            facility_id: Smelter identification number
            standard_facility_name: Canonical facility name
            metal: Metal the facility processes
            assessment_status: Raw status text from the list, if any

        Returns:
            ReferenceFacility with a "<LIST_TYPE>: <status>" status string
        """
        status = (assessment_status or "").strip() or DEFAULT_ASSESSMENT_STATUS
        return cls(
            facility_id=facility_id or "",
            standard_facility_name=standard_facility_name or "",
            metal=metal or "",
            assessment_status_raw=f"{list_type}: {status}",
            country=country or None,
            region=region or None,
            city=city or None,
            cross_reference=cross_reference or None,
            list_type=list_type,
        )


@dataclass(frozen=True)
class MatchOutcome:
    """Result of reconciling one declared facility."""

    outcome_id: str  # "<supplier>-<row index>"
    supplier_name: str
    facility: DeclaredFacility
    match_tier: MatchTier
    confidence: float | None
    matched_facility: ReferenceFacility | None
    matched_standards: frozenset[str]
    status: ConformanceStatus
    source_standard: str | None = None  # First standard the match was found in
    matcher_name: str = ""

    @property
    def metal(self) -> str:
        return self.facility.metal

    @property
    def name(self) -> str:
        return self.facility.name

    @property
    def country(self) -> str | None:
        return self.facility.country

    @property
    def identification_number(self) -> str | None:
        return self.facility.identification_number

    @property
    def matched_facility_id(self) -> str | None:
        return self.matched_facility.facility_id if self.matched_facility else None

    @property
    def matched_facility_name(self) -> str | None:
        return self.matched_facility.standard_facility_name if self.matched_facility else None

    @property
    def assessment_status_raw(self) -> str | None:
        return self.matched_facility.assessment_status_raw if self.matched_facility else None


@dataclass(frozen=True)
class Breakdown:
    """Conformant count, total and percentage for one metal or standard."""

    conformant: int
    total: int
    percentage: int


@dataclass(frozen=True)
class ComparisonSummary:
    """Aggregate statistics over a list of outcomes."""

    total_checked: int
    standards_used: tuple[str, ...]
    metals_checked: tuple[str, ...]
    conformant: int
    active: int
    non_conformant: int
    attention_required: int
    conformant_percentage: int
    by_metal: dict[str, Breakdown]
    by_standard: dict[str, Breakdown]

    def count(self, status: ConformanceStatus) -> int:
        """Get the number of outcomes with the given status."""
        return {
            ConformanceStatus.CONFORMANT: self.conformant,
            ConformanceStatus.ACTIVE: self.active,
            ConformanceStatus.NON_CONFORMANT: self.non_conformant,
            ConformanceStatus.ATTENTION_REQUIRED: self.attention_required,
        }[status]
