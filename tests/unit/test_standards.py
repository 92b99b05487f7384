"""
Unit tests for smelter_recon.reconciliation.standards module.
"""

import pytest

from smelter_recon.reconciliation.standards import (
    collect_standards,
    extract_standard,
    split_status,
)


class TestSplitStatus:
    """Tests for split_status()."""

    def test_splits_known_prefix(self):
        assert split_status("CMRT: Conformant") == ("CMRT", "Conformant")

    def test_prefix_is_case_insensitive(self):
        assert split_status("emrt: Active") == ("EMRT", "Active")

    def test_unknown_prefix_is_kept(self):
        """Only known standard codes count as prefixes."""
        assert split_status("XYZ: Conformant") == (None, "XYZ: Conformant")

    def test_no_prefix(self):
        assert split_status("Conformant") == (None, "Conformant")

    @pytest.mark.parametrize("status", ["", None])
    def test_empty(self, status):
        assert split_status(status) == (None, "")


class TestExtractStandard:
    """Tests for extract_standard()."""

    @pytest.mark.parametrize(
        "status,expected",
        [
            ("CMRT: Conformant", "CMRT"),
            ("AMRT: Non-Conformant", "AMRT"),
            ("Conflict Minerals Conformant", "CMRT"),
            ("Extended Minerals - Active", "EMRT"),
            ("Aluminium Stewardship", "AMRT"),
            ("EMRT Active", "EMRT"),
            ("RMI listed", "RMI"),
            ("Conformant", "RMI"),
        ],
    )
    def test_recognized(self, status, expected):
        assert extract_standard(status) == expected

    @pytest.mark.parametrize("status", ["Active", "In Communication", "", None])
    def test_unrecognized(self, status):
        assert extract_standard(status) is None

    def test_prefix_wins_over_keywords(self):
        """A literal prefix beats keywords found later in the text."""
        assert extract_standard("EMRT: Conflict Minerals Conformant") == "EMRT"


class TestCollectStandards:
    """Tests for collect_standards()."""

    def test_distinct_in_first_seen_order(self):
        statuses = ["EMRT: Active", "CMRT: Conformant", "EMRT: Conformant", "Pending"]
        assert collect_standards(statuses) == ["EMRT", "CMRT"]

    def test_empty(self):
        assert collect_standards([]) == []
