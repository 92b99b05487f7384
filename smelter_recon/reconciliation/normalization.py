"""
Facility Name Normalization.

Canonicalizes free-text facility names so that "Acme Corp." and
"ACME CORPORATION" compare equal. The exact-name and fuzzy tiers both go
through normalize(), which keeps the two tiers consistent.
"""

from __future__ import annotations

import re

from smelter_recon.constants import LEGAL_SUFFIXES

_SUFFIX_PATTERN = re.compile(
    r"\b(?:" + "|".join(re.escape(s) for s in LEGAL_SUFFIXES) + r")\b\.?"
)
_NON_WORD_PATTERN = re.compile(r"[^\w\s]")
_WHITESPACE_PATTERN = re.compile(r"\s+")


def normalize(text: str | None) -> str:
    """
    Normalize a facility name for comparison.

    Steps:
    1. Lower-case
    2. Strip legal-entity suffixes (ltd, inc, corp, ...) with optional period
    3. Remove everything that is not a word character or whitespace
    4. Collapse whitespace and trim

    Suffixes are stripped a second time after punctuation removal, so
    dotted forms like "S.A." or "L.T.D." are caught and the function is
    idempotent.

    Args:
        text: Raw facility name (None is treated as empty)

    Returns:
        Normalized name, possibly empty
    """
    if not text:
        return ""

    value = _SUFFIX_PATTERN.sub("", text.lower())
    value = _NON_WORD_PATTERN.sub("", value)
    value = _SUFFIX_PATTERN.sub("", value)
    return _WHITESPACE_PATTERN.sub(" ", value).strip()
