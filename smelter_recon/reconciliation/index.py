"""
Reference Index Module.

Holds the authoritative facility records for one comparison session and the
lookup structures built over them:
- case-insensitive facility id lookup
- normalized name lookup (metal-aware)
- per-metal fuzzy search indexes, built lazily and cached

The index is read-only after construction. The fuzzy cache is filled behind a
lock, so one index can be shared by several matching threads.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from dataclasses import dataclass

from rapidfuzz import fuzz, process

from smelter_recon.config import get_settings
from smelter_recon.models import ReferenceFacility
from smelter_recon.reconciliation.normalization import normalize
from smelter_recon.reconciliation.standards import collect_standards, extract_standard

logger = logging.getLogger(__name__)


SCORE_PRECISION = 9  # Decimal places kept in fuzzy distances

# Cache key for metals no indexed record carries; only metal-less records match them
_UNLISTED_METAL = "\0unlisted"


def _metal_key(metal: str | None) -> str:
    return (metal or "").strip().casefold()


@dataclass(frozen=True)
class FuzzyCandidate:
    """A ranked fuzzy search hit."""

    facility: ReferenceFacility
    distance: float  # 0 = perfect, 1 = nothing in common

    @property
    def confidence(self) -> float:
        return round(1.0 - self.distance, SCORE_PRECISION)


class FuzzyIndex:
    """
    Fuzzy search structure over one metal subset of the reference records.

    Each record is scored on two keys, the normalized facility name and the
    normalized facility id. A key only counts when its similarity reaches
    ``key_threshold``; the candidate distance is the weighted mean distance of
    the keys that count.
    """

    def __init__(
        self,
        positions: list[int],
        names: list[str],
        ids: list[str],
        name_weight: float,
        id_weight: float,
        key_threshold: float,
    ):
        self.positions = positions
        self.names = names
        self.ids = ids
        self.name_weight = name_weight
        self.id_weight = id_weight
        self.key_threshold = key_threshold

    def __len__(self) -> int:
        return len(self.positions)

    def _key_scores(self, query: str, choices: list[str]) -> dict[int, float]:
        hits = process.extract(
            query,
            choices,
            scorer=fuzz.token_sort_ratio,
            processor=None,
            score_cutoff=round(self.key_threshold * 100, SCORE_PRECISION),
            limit=None,
        )
        return {idx: score / 100.0 for _, score, idx in hits}

    def search(self, query: str) -> list[tuple[int, float]]:
        """
        Score a normalized query against every record in the subset.

        Returns:
            List of (index position, distance), best first. Equal distances
            keep insertion order.
        """
        if not self.positions or not query:
            return []

        name_scores = self._key_scores(query, self.names)
        id_scores = self._key_scores(query, self.ids)

        ranked: list[tuple[float, int]] = []
        for local in sorted(set(name_scores) | set(id_scores)):
            weighted = 0.0
            total_weight = 0.0
            if local in name_scores:
                weighted += self.name_weight * (1.0 - name_scores[local])
                total_weight += self.name_weight
            if local in id_scores:
                weighted += self.id_weight * (1.0 - id_scores[local])
                total_weight += self.id_weight
            if total_weight == 0:
                continue
            # Rounded so a key sitting exactly on a threshold stays on it
            distance = round(weighted / total_weight, SCORE_PRECISION)
            ranked.append((distance, self.positions[local]))

        ranked.sort()
        return [(position, distance) for distance, position in ranked]


class ReferenceIndex:
    """
    Authoritative facility records plus the lookups the matchers need.

    Every supplied record is indexed. The selected standards and metals are
    kept only for summary attribution, they never filter the records.
    """

    def __init__(
        self,
        facilities: Iterable[ReferenceFacility],
        standards: Iterable[str] | None = None,
        metals: Iterable[str] | None = None,
        name_weight: float | None = None,
        id_weight: float | None = None,
        key_threshold: float | None = None,
    ):
        """
        Build the index.

        Args:
            facilities: Reference records, in the order the source returned them
            standards: Standards the caller selected (for summaries)
            metals: Metals the caller selected (for summaries)
            name_weight: Fuzzy weight of the name key (default: settings)
            id_weight: Fuzzy weight of the id key (default: settings)
            key_threshold: Minimum per-key similarity (default: settings)
        """
        settings = get_settings()
        self.name_weight = settings.name_weight if name_weight is None else name_weight
        self.id_weight = settings.id_weight if id_weight is None else id_weight
        self.key_threshold = settings.key_threshold if key_threshold is None else key_threshold

        self._facilities: tuple[ReferenceFacility, ...] = tuple(facilities)
        self.selected_standards: tuple[str, ...] = tuple(standards or ())
        self.selected_metals: tuple[str, ...] = tuple(metals or ())

        self._normalized_names: list[str] = []
        self._normalized_ids: list[str] = []
        self._metal_keys: list[str] = []
        self._by_id: dict[str, list[int]] = {}
        self._by_name: dict[str, list[int]] = {}
        standards_found: set[str] = set()
        metals_found: dict[str, str] = {}

        for position, facility in enumerate(self._facilities):
            name = normalize(facility.standard_facility_name)
            self._normalized_names.append(name)
            self._normalized_ids.append(normalize(facility.facility_id))
            self._metal_keys.append(_metal_key(facility.metal))

            id_key = (facility.facility_id or "").strip().casefold()
            if id_key:
                self._by_id.setdefault(id_key, []).append(position)
            if name:
                self._by_name.setdefault(name, []).append(position)

            standard = extract_standard(facility.assessment_status_raw)
            if standard:
                standards_found.add(standard)
            if facility.metal and facility.metal.strip():
                metals_found.setdefault(_metal_key(facility.metal), facility.metal.strip())

        self._standards = frozenset(standards_found)
        self._metals = tuple(sorted(metals_found.values()))
        self._metal_key_set = frozenset(metals_found)

        self._fuzzy_cache: dict[str, FuzzyIndex] = {}
        self._fuzzy_lock = threading.Lock()

        logger.info(
            f"Reference index built: {len(self._facilities):,} facilities, "
            f"{len(self._by_id):,} ids, {len(self._by_name):,} names, "
            f"standards={sorted(self._standards)}"
        )

    def __len__(self) -> int:
        return len(self._facilities)

    @property
    def facilities(self) -> tuple[ReferenceFacility, ...]:
        return self._facilities

    @property
    def standards(self) -> frozenset[str]:
        """Every standard extracted from the indexed records."""
        return self._standards

    @property
    def metals(self) -> tuple[str, ...]:
        """Distinct non-empty metals of the indexed records."""
        return self._metals

    def _metal_matches(self, position: int, metal_key: str) -> bool:
        # Empty metal on either side acts as a wildcard
        record_key = self._metal_keys[position]
        return not metal_key or not record_key or record_key == metal_key

    def find_by_id(self, facility_id: str | None) -> list[ReferenceFacility]:
        """All records whose facility id equals the query, ignoring case."""
        key = (facility_id or "").strip().casefold()
        if not key:
            return []
        return [self._facilities[p] for p in self._by_id.get(key, [])]

    def find_by_normalized_name(
        self, name: str | None, metal: str | None
    ) -> list[ReferenceFacility]:
        """
        All records with the given normalized name and a compatible metal.

        Args:
            name: An already normalized facility name
            metal: Declared metal; records without a metal always qualify

        Returns:
            Matching records in insertion order
        """
        if not name:
            return []
        metal_key = _metal_key(metal)
        return [
            self._facilities[p]
            for p in self._by_name.get(name, [])
            if self._metal_matches(p, metal_key)
        ]

    def fuzzy_index_for(self, metal: str | None) -> FuzzyIndex:
        """
        Get the fuzzy index for one metal, building it on first use.

        The subset holds records of that metal plus records without a metal.
        An empty metal selects every record. Every metal that no record
        carries shares one subset of the metal-less records. The cache holds
        at most one entry per indexed metal, plus the unlisted and wildcard
        entries.
        """
        metal_key = _metal_key(metal)
        cache_key = metal_key
        if metal_key and metal_key not in self._metal_key_set:
            cache_key = _UNLISTED_METAL

        with self._fuzzy_lock:
            cached = self._fuzzy_cache.get(cache_key)
            if cached is not None:
                return cached

            positions = [
                p for p in range(len(self._facilities)) if self._metal_matches(p, metal_key)
            ]
            fuzzy_index = FuzzyIndex(
                positions=positions,
                names=[self._normalized_names[p] for p in positions],
                ids=[self._normalized_ids[p] for p in positions],
                name_weight=self.name_weight,
                id_weight=self.id_weight,
                key_threshold=self.key_threshold,
            )
            self._fuzzy_cache[cache_key] = fuzzy_index
            label = "unlisted" if cache_key == _UNLISTED_METAL else metal_key or "*"
            logger.debug(f"Fuzzy index for metal {label!r}: {len(positions):,} records")
            return fuzzy_index

    def fuzzy_search(
        self,
        name: str | None,
        metal: str | None,
        min_length: int | None = None,
        limit: int | None = None,
    ) -> list[FuzzyCandidate]:
        """
        Rank records of a compatible metal by similarity to a name.

        Args:
            name: Declared facility name (normalized here)
            metal: Declared metal
            min_length: Queries shorter than this after normalization return
                nothing (default: settings)
            limit: Maximum number of candidates (default: all)

        Returns:
            FuzzyCandidate list, best first
        """
        if min_length is None:
            min_length = get_settings().min_match_length
        query = normalize(name)
        if len(query) < min_length:
            return []

        ranked = self.fuzzy_index_for(metal).search(query)
        if limit is not None:
            ranked = ranked[:limit]
        return [
            FuzzyCandidate(facility=self._facilities[p], distance=distance)
            for p, distance in ranked
        ]

    def normalized_name_of(self, facility: ReferenceFacility) -> str:
        return normalize(facility.standard_facility_name)

    def standards_for(self, facilities: Iterable[ReferenceFacility]) -> list[str]:
        """Distinct standards of several records, in record order."""
        return collect_standards(f.assessment_status_raw for f in facilities)


def build_index(
    references: Iterable[ReferenceFacility],
    standards: Iterable[str] | None = None,
    metals: Iterable[str] | None = None,
) -> ReferenceIndex:
    """Build a ReferenceIndex using the configured fuzzy settings."""
    return ReferenceIndex(references, standards=standards, metals=metals)
