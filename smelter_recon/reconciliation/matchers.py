"""
Facility Matching Module.

Matches declared facilities against the reference index.
Each matching strategy is isolated and testable; strategies are tried in
priority order and the first success wins:

1. Exact facility id
2. Exact normalized name (same metal)
3. Fuzzy name

When several records tie on id or normalized name, the first one in index
insertion order is the representative match. That choice is reproducible but
arbitrary: it depends on the order the reference source returned the records.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, field

from smelter_recon.config import get_settings
from smelter_recon.constants import MAX_FUZZY_CONFIDENCE
from smelter_recon.models import DeclaredFacility, MatchTier, ReferenceFacility
from smelter_recon.reconciliation.index import ReferenceIndex
from smelter_recon.reconciliation.normalization import normalize

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatchResult:
    """Result of attempting to match a declared facility."""

    tier: MatchTier
    confidence: float | None = None
    facility: ReferenceFacility | None = None
    standards: tuple[str, ...] = field(default_factory=tuple)  # First-seen order
    matcher_name: str = ""

    @property
    def matched(self) -> bool:
        return self.tier is not MatchTier.NONE

    @property
    def matched_standards(self) -> frozenset[str]:
        return frozenset(self.standards)

    @property
    def source_standard(self) -> str | None:
        return self.standards[0] if self.standards else None

    @classmethod
    def no_match(cls, matcher_name: str = "") -> MatchResult:
        return cls(tier=MatchTier.NONE, matcher_name=matcher_name)


class FacilityMatcher(ABC):
    """Abstract base class for facility matchers."""

    @abstractmethod
    def match(self, facility: DeclaredFacility, index: ReferenceIndex) -> MatchResult:
        """
        Attempt to match a declared facility.

        Args:
            facility: The declared facility
            index: Reference index to search

        Returns:
            MatchResult with match details
        """
        ...

    @property
    @abstractmethod
    def name(self) -> str:
        """Name of this matcher for debugging."""
        ...

    @property
    @abstractmethod
    def priority(self) -> int:
        """Priority (lower = tried first)."""
        ...

    def _exact(self, hits: list[ReferenceFacility], index: ReferenceIndex) -> MatchResult:
        return MatchResult(
            tier=MatchTier.EXACT,
            confidence=1.0,
            facility=hits[0],
            standards=tuple(index.standards_for(hits)),
            matcher_name=self.name,
        )


class ExactIdMatcher(FacilityMatcher):
    """
    Matches on the declared smelter identification number.

    Most precise match type. The metal is not checked: an id identifies the
    facility across every list it appears in.
    """

    @property
    def name(self) -> str:
        return "exact_id"

    @property
    def priority(self) -> int:
        return 1

    def match(self, facility: DeclaredFacility, index: ReferenceIndex) -> MatchResult:
        if not (facility.identification_number or "").strip():
            return MatchResult.no_match(self.name)

        hits = index.find_by_id(facility.identification_number)
        if hits:
            return self._exact(hits, index)
        return MatchResult.no_match(self.name)


class ExactNameMatcher(FacilityMatcher):
    """
    Matches the normalized declared name within the declared metal.
    """

    @property
    def name(self) -> str:
        return "exact_name"

    @property
    def priority(self) -> int:
        return 2

    def match(self, facility: DeclaredFacility, index: ReferenceIndex) -> MatchResult:
        normalized = normalize(facility.name)
        if not normalized:
            return MatchResult.no_match(self.name)

        hits = index.find_by_normalized_name(normalized, facility.metal)
        if hits:
            return self._exact(hits, index)
        return MatchResult.no_match(self.name)


class FuzzyNameMatcher(FacilityMatcher):
    """
    Matches using weighted edit-distance similarity.

    Takes the top-ranked candidate and rejects it when its confidence is below
    ``accept_threshold``. The standards of an accepted match are gathered from
    every record sharing the candidate's normalized name, not just the one the
    ranker returned.
    """

    def __init__(
        self,
        accept_threshold: float | None = None,
        min_match_length: int | None = None,
    ):
        """
        Initialize fuzzy matcher.

        Args:
            accept_threshold: Minimum confidence (0-1) to accept (default: settings)
            min_match_length: Minimum normalized query length (default: settings)
        """
        settings = get_settings()
        self.accept_threshold = (
            settings.fuzzy_accept_threshold if accept_threshold is None else accept_threshold
        )
        self.min_match_length = (
            settings.min_match_length if min_match_length is None else min_match_length
        )

    @property
    def name(self) -> str:
        return "fuzzy_name"

    @property
    def priority(self) -> int:
        return 3

    def match(self, facility: DeclaredFacility, index: ReferenceIndex) -> MatchResult:
        candidates = index.fuzzy_search(
            facility.name, facility.metal, min_length=self.min_match_length, limit=1
        )
        if not candidates:
            return MatchResult.no_match(self.name)

        best = candidates[0]
        confidence = min(best.confidence, MAX_FUZZY_CONFIDENCE)
        if confidence < self.accept_threshold:
            logger.debug(
                f"Fuzzy candidate rejected for {facility.name!r}: "
                f"{best.facility.standard_facility_name!r} ({confidence:.3f})"
            )
            return MatchResult.no_match(self.name)

        equivalents = index.find_by_normalized_name(
            index.normalized_name_of(best.facility), facility.metal
        )
        return MatchResult(
            tier=MatchTier.FUZZY,
            confidence=confidence,
            facility=best.facility,
            standards=tuple(index.standards_for(equivalents or [best.facility])),
            matcher_name=self.name,
        )


def default_matchers() -> list[FacilityMatcher]:
    """The standard id -> name -> fuzzy chain."""
    return [ExactIdMatcher(), ExactNameMatcher(), FuzzyNameMatcher()]


def match_facility(
    facility: DeclaredFacility,
    index: ReferenceIndex,
    matchers: Sequence[FacilityMatcher] | None = None,
) -> MatchResult:
    """
    Try all matchers in priority order, return first match.

    Args:
        facility: Declared facility to match
        index: Reference index
        matchers: List of matchers (default: standard matchers)

    Returns:
        MatchResult from first successful matcher, or a NONE-tier result
    """
    if matchers is None:
        matchers = default_matchers()

    for matcher in sorted(matchers, key=lambda m: m.priority):
        result = matcher.match(facility, index)
        if result.matched:
            return result

    return MatchResult.no_match("all_matchers")
