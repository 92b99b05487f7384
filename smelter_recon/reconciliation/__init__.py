"""
Facility Reconciliation Module.

Reconciles supplier-declared smelters/refiners against reference facility
lists. Concerns are split into testable components:
- Normalization (canonical facility names)
- Reference index (id, name and fuzzy lookups)
- Matching (exact id -> exact name -> fuzzy)
- Classification (status text -> ConformanceStatus)
- Summary (totals and breakdowns)
"""

from smelter_recon.reconciliation.classifier import classify, classify_match
from smelter_recon.reconciliation.engine import compare, compare_with_stats
from smelter_recon.reconciliation.index import (
    FuzzyCandidate,
    ReferenceIndex,
    build_index,
)
from smelter_recon.reconciliation.matchers import (
    ExactIdMatcher,
    ExactNameMatcher,
    FacilityMatcher,
    FuzzyNameMatcher,
    MatchResult,
    match_facility,
)
from smelter_recon.reconciliation.normalization import normalize
from smelter_recon.reconciliation.standards import extract_standard
from smelter_recon.reconciliation.summary import summarize

__all__ = [
    # Normalization
    "normalize",
    "extract_standard",
    # Index
    "ReferenceIndex",
    "FuzzyCandidate",
    "build_index",
    # Matchers
    "FacilityMatcher",
    "ExactIdMatcher",
    "ExactNameMatcher",
    "FuzzyNameMatcher",
    "MatchResult",
    "match_facility",
    # Classification
    "classify",
    "classify_match",
    # Engine
    "compare",
    "compare_with_stats",
    "summarize",
]
