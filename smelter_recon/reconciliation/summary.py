"""
Comparison Summary Module.

Aggregates outcomes into totals and per-metal / per-standard breakdowns.
Pure and order-independent; recomputed on demand.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence

from smelter_recon.models import Breakdown, ComparisonSummary, ConformanceStatus, MatchOutcome


def percentage(part: int, whole: int) -> int:
    """Whole-number percentage, rounding halves up; 0 when whole is 0."""
    if whole <= 0:
        return 0
    return math.floor(part * 100 / whole + 0.5)


def _same_metal(a: str | None, b: str | None) -> bool:
    return (a or "").strip().casefold() == (b or "").strip().casefold()


def summarize(
    outcomes: Sequence[MatchOutcome],
    standards_used: Iterable[str] = (),
    metals_checked: Iterable[str] = (),
) -> ComparisonSummary:
    """
    Compute summary statistics for a comparison.

    Per-metal breakdowns use the outcomes of that metal as denominator.
    Per-standard breakdowns count conformant outcomes found in that standard,
    report as total the outcomes whose metal was checked, and take the
    percentage over ALL outcomes. Downstream reports depend on that exact
    percentage, so it is kept as is.

    Args:
        outcomes: Outcomes to aggregate
        standards_used: Standards selected for the comparison
        metals_checked: Metals selected for the comparison

    Returns:
        ComparisonSummary
    """
    outcomes = list(outcomes)
    standards = tuple(standards_used)
    metals = tuple(metals_checked)
    total = len(outcomes)

    counts = {status: 0 for status in ConformanceStatus}
    for outcome in outcomes:
        counts[outcome.status] += 1

    by_metal: dict[str, Breakdown] = {}
    for metal in metals:
        metal_outcomes = [o for o in outcomes if _same_metal(o.metal, metal)]
        conformant = sum(1 for o in metal_outcomes if o.status is ConformanceStatus.CONFORMANT)
        by_metal[metal] = Breakdown(
            conformant=conformant,
            total=len(metal_outcomes),
            percentage=percentage(conformant, len(metal_outcomes)),
        )

    checked_total = sum(1 for o in outcomes if any(_same_metal(o.metal, m) for m in metals))
    by_standard: dict[str, Breakdown] = {}
    for standard in standards:
        conformant = sum(
            1
            for o in outcomes
            if standard in o.matched_standards and o.status is ConformanceStatus.CONFORMANT
        )
        by_standard[standard] = Breakdown(
            conformant=conformant,
            total=checked_total,
            percentage=percentage(conformant, total),
        )

    return ComparisonSummary(
        total_checked=total,
        standards_used=standards,
        metals_checked=metals,
        conformant=counts[ConformanceStatus.CONFORMANT],
        active=counts[ConformanceStatus.ACTIVE],
        non_conformant=counts[ConformanceStatus.NON_CONFORMANT],
        attention_required=counts[ConformanceStatus.ATTENTION_REQUIRED],
        conformant_percentage=percentage(counts[ConformanceStatus.CONFORMANT], total),
        by_metal=by_metal,
        by_standard=by_standard,
    )
