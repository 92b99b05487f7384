"""
Conformance Classification Module.

Maps a matched facility's raw assessment status to a ConformanceStatus.

Status text is reduced to a set of keywords first ("non-conformant",
"conformant", "active") and the keywords are then resolved by priority. A
"non-conformant" phrase is consumed as one keyword, so it can never also
count as "conformant".
"""

from __future__ import annotations

import re
from enum import Enum

from smelter_recon.config import get_settings
from smelter_recon.models import ConformanceStatus, MatchTier
from smelter_recon.reconciliation.standards import split_status


class StatusKeyword(Enum):
    """Keywords recognized in assessment status text."""

    NON_CONFORMANT = "non_conformant"
    CONFORMANT = "conformant"
    ACTIVE = "active"


# Alternation order matters: the non-conformant form must be tried first at
# each position so its "conform" is not matched on its own.
_KEYWORD_PATTERN = re.compile(r"(non[\s-]?conform)|(conform)|(active)", re.IGNORECASE)

_KEYWORD_PRIORITY = (
    (StatusKeyword.NON_CONFORMANT, ConformanceStatus.NON_CONFORMANT),
    (StatusKeyword.CONFORMANT, ConformanceStatus.CONFORMANT),
    (StatusKeyword.ACTIVE, ConformanceStatus.ACTIVE),
)


def extract_keywords(status_text: str | None) -> set[StatusKeyword]:
    """Find the status keywords present in a status string."""
    found: set[StatusKeyword] = set()
    for match in _KEYWORD_PATTERN.finditer(status_text or ""):
        if match.group(1):
            found.add(StatusKeyword.NON_CONFORMANT)
        elif match.group(2):
            found.add(StatusKeyword.CONFORMANT)
        else:
            found.add(StatusKeyword.ACTIVE)
    return found


def classify(status_text: str | None) -> ConformanceStatus:
    """
    Classify a raw assessment status.

    A "<STANDARD>: " prefix is stripped before classifying.

    Examples:
        >>> classify("CMRT: Conformant")
        <ConformanceStatus.CONFORMANT: 'conformant'>
        >>> classify("CMRT: Non-Conformant")
        <ConformanceStatus.NON_CONFORMANT: 'non-conformant'>
        >>> classify("Active")
        <ConformanceStatus.ACTIVE: 'active'>

    Returns:
        ConformanceStatus; ATTENTION_REQUIRED when nothing is recognized
    """
    _, remainder = split_status(status_text)
    keywords = extract_keywords(remainder)
    for keyword, status in _KEYWORD_PRIORITY:
        if keyword in keywords:
            return status
    return ConformanceStatus.ATTENTION_REQUIRED


def classify_match(
    tier: MatchTier,
    confidence: float | None,
    status_text: str | None,
    fuzzy_threshold: float | None = None,
) -> ConformanceStatus:
    """
    Classify the outcome of a match.

    - NONE tier: always ATTENTION_REQUIRED
    - FUZZY tier below ``fuzzy_threshold``: ATTENTION_REQUIRED, whatever the
      matched status says
    - otherwise: classify(status_text)

    Args:
        tier: Match tier
        confidence: Match confidence (None for no match)
        status_text: Raw assessment status of the matched record
        fuzzy_threshold: Minimum fuzzy confidence to trust the status
            (default: settings)
    """
    if tier is MatchTier.NONE:
        return ConformanceStatus.ATTENTION_REQUIRED

    if tier is MatchTier.FUZZY:
        if fuzzy_threshold is None:
            fuzzy_threshold = get_settings().fuzzy_classify_threshold
        if confidence is None or confidence < fuzzy_threshold:
            return ConformanceStatus.ATTENTION_REQUIRED

    return classify(status_text)
