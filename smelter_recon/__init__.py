"""
Smelter Recon - reconciles supplier smelter declarations against reference lists.

This package provides:
- Typed records for declared and reference facilities
- A reference index with exact and fuzzy lookups
- Two-tier facility matching and conformance classification
- Comparison summaries, result views and export rows
"""

import logging

# Set up NullHandler to prevent "No handler found" warnings
# when used as a library. Applications should configure their own handlers.
logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

from smelter_recon.models import (
    Breakdown,
    ComparisonSummary,
    ConformanceStatus,
    DeclaredFacility,
    MatchOutcome,
    MatchTier,
    ReferenceFacility,
)
from smelter_recon.reconciliation import (
    ReferenceIndex,
    build_index,
    classify,
    compare,
    normalize,
    summarize,
)

__all__ = [
    "__version__",
    # Models
    "DeclaredFacility",
    "ReferenceFacility",
    "MatchOutcome",
    "MatchTier",
    "ConformanceStatus",
    "ComparisonSummary",
    "Breakdown",
    # Engine
    "ReferenceIndex",
    "build_index",
    "compare",
    "summarize",
    "normalize",
    "classify",
]
