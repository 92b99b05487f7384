"""
Result views and export rows.

Filtering, sorting and flattening of MatchOutcome lists for display and
spreadsheet export. Nothing here writes files; callers decide where rows go.
"""

from __future__ import annotations

from collections.abc import Iterable

import pandas as pd

from smelter_recon.models import ConformanceStatus, MatchOutcome

EXPORT_COLUMNS = [
    "Supplier",
    "Smelter Name",
    "Metal",
    "Country",
    "Smelter ID",
    "Match Status",
    "Assessment Status",
    "Confidence Score",
    "Matched Facility Name",
    "Matched Facility ID",
    "Matched Standards",
]

# Sortable fields -> key function
_SORT_KEYS = {
    "supplier_name": lambda o: o.supplier_name.casefold(),
    "name": lambda o: o.name.casefold(),
    "metal": lambda o: o.metal.casefold(),
    "country": lambda o: (o.country or "").casefold(),
    "status": lambda o: o.status.value,
    "confidence": lambda o: -1.0 if o.confidence is None else o.confidence,
    "matched_facility_name": lambda o: (o.matched_facility_name or "").casefold(),
}


def filter_outcomes(
    outcomes: Iterable[MatchOutcome],
    search: str = "",
    status: ConformanceStatus | None = None,
    metal: str | None = None,
    supplier: str | None = None,
) -> list[MatchOutcome]:
    """
    Filter outcomes the way the results table does.

    Args:
        outcomes: Outcomes to filter
        search: Case-insensitive substring of facility name, country or supplier
        status: Keep only this status
        metal: Keep only this metal
        supplier: Keep only this supplier

    Returns:
        Matching outcomes, original order kept
    """
    needle = search.strip().casefold()
    kept = []
    for outcome in outcomes:
        if needle and not any(
            needle in (value or "").casefold()
            for value in (outcome.name, outcome.country, outcome.supplier_name)
        ):
            continue
        if status is not None and outcome.status is not status:
            continue
        if metal is not None and outcome.metal != metal:
            continue
        if supplier is not None and outcome.supplier_name != supplier:
            continue
        kept.append(outcome)
    return kept


def sort_outcomes(
    outcomes: Iterable[MatchOutcome],
    field: str = "supplier_name",
    descending: bool = False,
) -> list[MatchOutcome]:
    """
    Sort outcomes by one field (stable).

    Raises:
        ValueError: if field is not sortable
    """
    if field not in _SORT_KEYS:
        raise ValueError(f"Cannot sort by {field!r}; expected one of {sorted(_SORT_KEYS)}")
    return sorted(outcomes, key=_SORT_KEYS[field], reverse=descending)


def to_export_row(outcome: MatchOutcome) -> dict[str, object]:
    """Flatten one outcome into report columns."""
    return {
        "Supplier": outcome.supplier_name,
        "Smelter Name": outcome.name,
        "Metal": outcome.metal,
        "Country": outcome.country or "",
        "Smelter ID": outcome.identification_number or "",
        "Match Status": outcome.status.value,
        "Assessment Status": outcome.assessment_status_raw or "",
        "Confidence Score": "" if outcome.confidence is None else round(outcome.confidence, 3),
        "Matched Facility Name": outcome.matched_facility_name or "",
        "Matched Facility ID": outcome.matched_facility_id or "",
        "Matched Standards": ", ".join(sorted(outcome.matched_standards)),
    }


def to_export_rows(outcomes: Iterable[MatchOutcome]) -> list[dict[str, object]]:
    return [to_export_row(o) for o in outcomes]


def to_dataframe(outcomes: Iterable[MatchOutcome]) -> pd.DataFrame:
    """Export rows as a DataFrame with a fixed column order."""
    return pd.DataFrame(to_export_rows(outcomes), columns=EXPORT_COLUMNS)
