"""
Standard extraction from assessment status text.

Reference statuses look like "CMRT: Conformant" when the loader prefixed the
list type, or free text such as "RMI Conformant (Conflict Minerals)" when it
did not. These helpers recover which standard a status belongs to.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from smelter_recon.constants import KNOWN_STANDARDS, STANDARD_KEYWORDS

_PREFIX_PATTERN = re.compile(
    r"^\s*(" + "|".join(re.escape(s) for s in KNOWN_STANDARDS) + r")\s*:\s*",
    re.IGNORECASE,
)


def split_status(status: str | None) -> tuple[str | None, str]:
    """
    Split a "<STANDARD>: " prefix off a status string.

    Returns:
        Tuple of (standard code or None, remaining status text)
    """
    if not status:
        return None, ""
    match = _PREFIX_PATTERN.match(status)
    if match is None:
        return None, status.strip()
    return match.group(1).upper(), status[match.end() :].strip()


def extract_standard(status: str | None) -> str | None:
    """
    Determine the standard a status string belongs to.

    A literal prefix wins. Otherwise keywords are searched in order
    ("conflict minerals" -> CMRT, "aluminium" -> AMRT, bare "rmi" or
    "conformant" -> RMI).

    Returns:
        Standard code, or None when nothing is recognized
    """
    prefix, _ = split_status(status)
    if prefix:
        return prefix
    if not status:
        return None

    lowered = status.lower()
    for keyword, standard in STANDARD_KEYWORDS:
        if keyword in lowered:
            return standard
    return None


def collect_standards(statuses: Iterable[str | None]) -> list[str]:
    """Distinct standards of several statuses, in first-seen order."""
    seen: list[str] = []
    for status in statuses:
        standard = extract_standard(status)
        if standard and standard not in seen:
            seen.append(standard)
    return seen
