"""
Comparison Engine.

Routes every declared facility of a supplier submission through
normalization, matching and classification, producing one MatchOutcome per
declared facility in submission order.

Matching one facility never depends on another, so a submission can be
matched on a thread pool. The reference index is only read while matching.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from functools import partial

from tqdm import tqdm

from smelter_recon.config import get_settings
from smelter_recon.models import DeclaredFacility, MatchOutcome
from smelter_recon.reconciliation.classifier import classify_match
from smelter_recon.reconciliation.index import ReferenceIndex
from smelter_recon.reconciliation.matchers import (
    FacilityMatcher,
    default_matchers,
    match_facility,
)
from smelter_recon.utils.parallel import execute_parallel
from smelter_recon.utils.stats import ExecutionStats

logger = logging.getLogger(__name__)


def resolve_facility(
    supplier_name: str,
    row: tuple[int, DeclaredFacility],
    index: ReferenceIndex,
    matchers: Sequence[FacilityMatcher],
    fuzzy_classify_threshold: float | None = None,
    stats: ExecutionStats | None = None,
) -> MatchOutcome:
    """
    Match and classify one declared facility.

    Args:
        supplier_name: Supplier the facility was declared by
        row: (row index, declared facility)
        index: Reference index
        matchers: Matchers to try
        fuzzy_classify_threshold: Minimum fuzzy confidence to trust the
            matched status (default: settings)
        stats: Optional counters; the matcher name (or "no_match") is
            incremented from the worker thread

    Returns:
        MatchOutcome for the row
    """
    position, facility = row
    result = match_facility(facility, index, matchers)
    status = classify_match(
        result.tier,
        result.confidence,
        result.facility.assessment_status_raw if result.facility else None,
        fuzzy_threshold=fuzzy_classify_threshold,
    )

    if result.matched:
        logger.debug(
            f"{supplier_name}: {facility.name!r} -> {result.facility.standard_facility_name!r} "
            f"[{result.matcher_name}, {result.confidence:.3f}, {status.value}]"
        )
    else:
        logger.debug(f"{supplier_name}: no match for {facility.name!r} ({facility.metal})")

    if stats is not None:
        stats.increment(result.matcher_name if result.matched else "no_match")

    return MatchOutcome(
        outcome_id=f"{supplier_name}-{position}",
        supplier_name=supplier_name,
        facility=facility,
        match_tier=result.tier,
        confidence=result.confidence,
        matched_facility=result.facility,
        matched_standards=result.matched_standards,
        status=status,
        source_standard=result.source_standard,
        matcher_name=result.matcher_name,
    )


def compare_with_stats(
    supplier_name: str,
    declared: Sequence[DeclaredFacility],
    index: ReferenceIndex,
    matchers: Sequence[FacilityMatcher] | None = None,
    fuzzy_classify_threshold: float | None = None,
    max_workers: int | None = None,
    show_progress: bool | None = None,
) -> tuple[list[MatchOutcome], ExecutionStats]:
    """
    Compare a supplier's declared facilities and count outcomes per matcher.

    Args:
        supplier_name: Supplier name, used in outcome ids
        declared: Declared facilities in submission order
        index: Reference index
        matchers: Matchers to try (default: id -> name -> fuzzy)
        fuzzy_classify_threshold: See classify_match (default: settings)
        max_workers: Worker threads; 1 matches sequentially (default: settings)
        show_progress: Show a tqdm progress bar (default: settings)

    Returns:
        Tuple of (outcomes in submission order, stats)
        stats has matcher_name -> success_count plus "no_match"
    """
    settings = get_settings()
    if matchers is None:
        matchers = default_matchers()
    if max_workers is None:
        max_workers = settings.max_workers
    if show_progress is None:
        show_progress = settings.show_progress

    stats = ExecutionStats(no_match=0, **{m.name: 0 for m in matchers})
    rows = list(enumerate(declared))
    worker = partial(
        resolve_facility,
        supplier_name,
        index=index,
        matchers=matchers,
        fuzzy_classify_threshold=fuzzy_classify_threshold,
        stats=stats,
    )

    outcomes: list[MatchOutcome] = []
    if max_workers > 1 and len(rows) > 1:
        for _, outcome, error in execute_parallel(
            rows,
            worker,
            max_workers=max_workers,
            desc=f"Matching {supplier_name}",
            unit="facility",
            show_progress=show_progress,
        ):
            if error is not None:
                raise error
            outcomes.append(outcome)
    else:
        for row in tqdm(
            rows,
            desc=f"Matching {supplier_name}",
            unit="facility",
            disable=not show_progress,
        ):
            outcomes.append(worker(row))

    logger.info(f"{supplier_name}: {len(outcomes):,} facilities compared | {stats.to_dict()}")
    return outcomes, stats


def compare(
    supplier_name: str,
    declared: Sequence[DeclaredFacility],
    index: ReferenceIndex,
    **kwargs,
) -> list[MatchOutcome]:
    """
    Compare a supplier's declared facilities against the reference index.

    Accepts the same keyword arguments as compare_with_stats.

    Returns:
        One MatchOutcome per declared facility, in submission order
    """
    outcomes, _ = compare_with_stats(supplier_name, declared, index, **kwargs)
    return outcomes
