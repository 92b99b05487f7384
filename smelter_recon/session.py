"""
Comparison sessions.

A session checks one or more supplier submissions against the reference
facilities selected for a set of standards and metals:

1. Validate the selection (ComparisonSettings)
2. Build one ReferenceIndex for the selection
3. Keep each submission's rows for the selected metals and compare them
4. Summarize everything over the selected standards and metals
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict, Field, field_validator

from smelter_recon.constants import DEFAULT_METALS, DEFAULT_STANDARDS
from smelter_recon.errors import ComparisonError
from smelter_recon.models import (
    ComparisonSummary,
    DeclaredFacility,
    MatchOutcome,
    ReferenceFacility,
)
from smelter_recon.reconciliation.engine import compare_with_stats
from smelter_recon.reconciliation.index import ReferenceIndex
from smelter_recon.reconciliation.standards import extract_standard
from smelter_recon.reconciliation.summary import summarize

logger = logging.getLogger(__name__)


def _dedupe(values: Iterable[str]) -> list[str]:
    seen: list[str] = []
    for value in values:
        if value not in seen:
            seen.append(value)
    return seen


class ComparisonSettings(BaseModel):
    """Standards and metals selected for a comparison run."""

    model_config = ConfigDict(frozen=True)

    standards: list[str] = Field(min_length=1, description="Standard codes, e.g. CMRT")
    metals: list[str] = Field(min_length=1, description="Metals to check, e.g. Gold")

    @field_validator("standards", mode="before")
    @classmethod
    def clean_standards(cls, v):
        """Trim, upper-case and de-duplicate standard codes; drop blanks."""
        if isinstance(v, str):
            v = [v]
        if isinstance(v, (list, tuple)):
            return _dedupe(s.strip().upper() for s in v if isinstance(s, str) and s.strip())
        return v

    @field_validator("metals", mode="before")
    @classmethod
    def clean_metals(cls, v):
        """Trim and de-duplicate metals; drop blanks."""
        if isinstance(v, str):
            v = [v]
        if isinstance(v, (list, tuple)):
            return _dedupe(m.strip() for m in v if isinstance(m, str) and m.strip())
        return v

    @classmethod
    def with_default_metals(
        cls,
        available_metals: Iterable[str],
        standards: Iterable[str] = DEFAULT_STANDARDS,
    ) -> ComparisonSettings:
        """
        Preselect the common 3TG/battery metals that the reference data holds.

        Raises:
            pydantic.ValidationError: if none of the default metals is available
        """
        available = {m.strip().casefold() for m in available_metals if m}
        metals = [m for m in DEFAULT_METALS if m.casefold() in available]
        return cls(standards=list(standards), metals=metals)

    def includes_metal(self, metal: str | None) -> bool:
        key = (metal or "").strip().casefold()
        return any(key == m.casefold() for m in self.metals)

    def includes_standard(self, standard: str | None) -> bool:
        return (standard or "").strip().upper() in self.standards


@dataclass(frozen=True)
class SupplierSubmission:
    """Declared facilities parsed from one supplier template."""

    supplier_name: str
    facilities: tuple[DeclaredFacility, ...]


@dataclass
class ComparisonReport:
    """Everything a comparison run produced."""

    outcomes: list[MatchOutcome]
    summary: ComparisonSummary
    stats: dict[str, int] = field(default_factory=dict)
    skipped_suppliers: list[str] = field(default_factory=list)


def select_reference_facilities(
    references: Iterable[ReferenceFacility],
    settings: ComparisonSettings,
) -> list[ReferenceFacility]:
    """
    Keep the reference records of the selected standards and metals.

    A record's standard is its list type, or the standard its status names.
    Records without a facility name are dropped.
    """
    selected = []
    for facility in references:
        if not (facility.standard_facility_name or "").strip():
            continue
        standard = facility.list_type or extract_standard(facility.assessment_status_raw)
        if settings.includes_standard(standard) and settings.includes_metal(facility.metal):
            selected.append(facility)
    return selected


def run_comparison(
    settings: ComparisonSettings,
    references: Sequence[ReferenceFacility],
    submissions: Sequence[SupplierSubmission],
    max_workers: int | None = None,
    show_progress: bool | None = None,
) -> ComparisonReport:
    """
    Compare several supplier submissions against one reference selection.

    Args:
        settings: Selected standards and metals
        references: Reference records already selected for ``settings``
        submissions: Supplier submissions to check
        max_workers: Worker threads per submission (default: settings)
        show_progress: Show progress bars (default: settings)

    Returns:
        ComparisonReport with outcomes of all submissions, in order

    Raises:
        ComparisonError: no reference records, or no submission had rows for
            the selected metals
    """
    if not references:
        raise ComparisonError(
            "No reference facilities for the selected standards and metals",
            {"standards": settings.standards, "metals": settings.metals},
        )

    index = ReferenceIndex(references, standards=settings.standards, metals=settings.metals)

    outcomes: list[MatchOutcome] = []
    totals: dict[str, int] = {}
    skipped: list[str] = []
    for submission in submissions:
        rows = [f for f in submission.facilities if settings.includes_metal(f.metal)]
        if not rows:
            logger.warning(f"No facilities for the selected metals in {submission.supplier_name}")
            skipped.append(submission.supplier_name)
            continue

        supplier_outcomes, stats = compare_with_stats(
            submission.supplier_name,
            rows,
            index,
            max_workers=max_workers,
            show_progress=show_progress,
        )
        outcomes.extend(supplier_outcomes)
        for key, value in stats.to_dict().items():
            totals[key] = totals.get(key, 0) + value

    if not outcomes:
        raise ComparisonError(
            "No comparison results generated",
            {"submissions": len(submissions), "skipped": skipped},
        )

    summary = summarize(outcomes, settings.standards, settings.metals)
    logger.info(
        f"Comparison complete: {summary.total_checked:,} facilities | "
        f"standards: {', '.join(settings.standards)} | metals: {', '.join(settings.metals)} | "
        f"{summary.conformant_percentage}% conformant"
    )
    return ComparisonReport(
        outcomes=outcomes,
        summary=summary,
        stats=totals,
        skipped_suppliers=skipped,
    )
