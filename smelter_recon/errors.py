"""
Exceptions raised at the comparison session boundary.

The matching engine itself never raises for sparse or malformed records;
these only surface when a whole comparison run cannot produce a result.
"""

from __future__ import annotations

from typing import Any


class ReconciliationError(Exception):
    """Base class for smelter_recon errors."""

    code = "RECONCILIATION_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if not self.details:
            return self.message
        return f"{self.message} ({self.details})"


class ComparisonError(ReconciliationError):
    """A comparison run produced no usable result."""

    code = "COMPARISON_ERROR"
