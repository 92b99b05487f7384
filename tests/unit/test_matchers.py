"""
Tests for the facility matching module.

Tests are organized by matcher:
1. Exact id
2. Exact name
3. Fuzzy name
4. Priority chain
"""

import pytest

from smelter_recon.constants import MAX_FUZZY_CONFIDENCE
from smelter_recon.models import DeclaredFacility, MatchTier, ReferenceFacility
from smelter_recon.reconciliation.index import ReferenceIndex
from smelter_recon.reconciliation.matchers import (
    ExactIdMatcher,
    ExactNameMatcher,
    FuzzyNameMatcher,
    MatchResult,
    default_matchers,
    match_facility,
)


@pytest.fixture
def multi_standard_index() -> ReferenceIndex:
    """The same facility listed under two standards."""
    return ReferenceIndex(
        [
            ReferenceFacility("F1", "Acme Smelting Ltd", "Gold", "CMRT: Conformant"),
            ReferenceFacility("F1", "ACME SMELTING LIMITED", "Gold", "EMRT: Active"),
            ReferenceFacility("F2", "Borealis Refinery", "Gold", "CMRT: Non-Conformant"),
        ]
    )


class TestExactIdMatcher:
    """Tests for ExactIdMatcher."""

    def test_matches_id_ignoring_case(self, acme_index, acme_gold):
        facility = DeclaredFacility(metal="Gold", name="Something Else", identification_number="f1")

        result = ExactIdMatcher().match(facility, acme_index)

        assert result.tier is MatchTier.EXACT
        assert result.confidence == 1.0
        assert result.facility == acme_gold
        assert result.matched_standards == frozenset({"CMRT"})
        assert result.matcher_name == "exact_id"

    def test_unions_standards_of_all_hits(self, multi_standard_index):
        facility = DeclaredFacility(metal="Gold", name="x", identification_number="F1")

        result = ExactIdMatcher().match(facility, multi_standard_index)

        assert result.matched_standards == frozenset({"CMRT", "EMRT"})
        assert result.source_standard == "CMRT"

    def test_first_hit_is_representative(self, multi_standard_index):
        """Ties resolve to the first record in index order."""
        facility = DeclaredFacility(metal="Gold", name="x", identification_number="F1")

        result = ExactIdMatcher().match(facility, multi_standard_index)

        assert result.facility.standard_facility_name == "Acme Smelting Ltd"

    @pytest.mark.parametrize("identification_number", [None, "", "   "])
    def test_missing_id_does_not_match(self, acme_index, identification_number):
        facility = DeclaredFacility(
            metal="Gold", name="Acme Smelting", identification_number=identification_number
        )
        assert not ExactIdMatcher().match(facility, acme_index).matched

    def test_unknown_id(self, acme_index):
        facility = DeclaredFacility(metal="Gold", name="Acme", identification_number="F404")
        assert ExactIdMatcher().match(facility, acme_index).tier is MatchTier.NONE


class TestExactNameMatcher:
    """Tests for ExactNameMatcher."""

    def test_matches_normalized_name(self, acme_index):
        facility = DeclaredFacility(metal="Gold", name="ACME SMELTING")

        result = ExactNameMatcher().match(facility, acme_index)

        assert result.tier is MatchTier.EXACT
        assert result.confidence == 1.0
        assert result.matcher_name == "exact_name"

    def test_other_metal_does_not_match(self, acme_index):
        facility = DeclaredFacility(metal="Tin", name="Acme Smelting Ltd")
        assert not ExactNameMatcher().match(facility, acme_index).matched

    def test_name_reducing_to_nothing_does_not_match(self):
        """A name made only of suffixes must not match other empty names."""
        index = ReferenceIndex([ReferenceFacility("F9", "Company Ltd", "Gold", "CMRT: Conformant")])
        facility = DeclaredFacility(metal="Gold", name="Co.")
        assert not ExactNameMatcher().match(facility, index).matched


class TestFuzzyNameMatcher:
    """Tests for FuzzyNameMatcher."""

    def test_typo_matches_fuzzy(self, acme_index, acme_gold):
        facility = DeclaredFacility(metal="Gold", name="Acme Smeltng")

        result = FuzzyNameMatcher().match(facility, acme_index)

        assert result.tier is MatchTier.FUZZY
        assert result.facility == acme_gold
        assert 0.6 <= result.confidence < 1.0
        assert result.matched_standards == frozenset({"CMRT"})

    def test_confidence_below_threshold_is_rejected(self, acme_index):
        """A candidate under the accept threshold becomes a NONE-tier result."""
        facility = DeclaredFacility(metal="Gold", name="Acme Smeltng")

        result = FuzzyNameMatcher(accept_threshold=0.99).match(facility, acme_index)

        assert result.tier is MatchTier.NONE
        assert result.confidence is None
        assert result.facility is None

    def test_confidence_at_threshold_is_accepted(self):
        """A candidate scoring exactly the accept threshold is a fuzzy match."""
        # token_sort_ratio("abcxy", "abcde") == 60
        index = ReferenceIndex([ReferenceFacility("F1", "Abcde", "Gold", "CMRT: Conformant")])
        facility = DeclaredFacility(metal="Gold", name="abcxy")

        result = FuzzyNameMatcher().match(facility, index)

        assert result.tier is MatchTier.FUZZY
        assert result.confidence == 0.6

    def test_unrelated_name_does_not_match(self, acme_index):
        facility = DeclaredFacility(metal="Gold", name="Zinc Works")
        assert FuzzyNameMatcher().match(facility, acme_index).tier is MatchTier.NONE

    def test_fuzzy_confidence_never_reaches_one(self):
        """Reordered words score perfectly but stay below exact confidence."""
        index = ReferenceIndex([ReferenceFacility("F1", "Acme Smelting", "Gold", "CMRT: Conformant")])
        facility = DeclaredFacility(metal="Gold", name="Smelting Acme")

        result = FuzzyNameMatcher().match(facility, index)

        assert result.tier is MatchTier.FUZZY
        assert result.confidence == MAX_FUZZY_CONFIDENCE

    def test_recovers_standards_of_equivalent_records(self, multi_standard_index):
        """Every record sharing the candidate's normalized name adds its standard."""
        facility = DeclaredFacility(metal="Gold", name="Acme Smeltng")

        result = FuzzyNameMatcher().match(facility, multi_standard_index)

        assert result.tier is MatchTier.FUZZY
        assert result.facility.facility_id == "F1"
        assert result.matched_standards == frozenset({"CMRT", "EMRT"})


class TestMatchFacility:
    """Tests for the priority chain."""

    def test_id_wins_over_name(self, multi_standard_index):
        """An id match is used even when the name points to another record."""
        facility = DeclaredFacility(
            metal="Gold", name="Borealis Refinery", identification_number="F1"
        )

        result = match_facility(facility, multi_standard_index)

        assert result.matcher_name == "exact_id"
        assert result.facility.facility_id == "F1"

    def test_name_used_when_id_unknown(self, multi_standard_index):
        facility = DeclaredFacility(
            metal="Gold", name="Borealis Refinery", identification_number="CID-UNKNOWN"
        )

        result = match_facility(facility, multi_standard_index)

        assert result.matcher_name == "exact_name"
        assert result.facility.facility_id == "F2"

    def test_matchers_sorted_by_priority(self, acme_index):
        """Order of the matcher list does not matter."""
        facility = DeclaredFacility(metal="Gold", name="Acme Smelting")

        result = match_facility(facility, acme_index, list(reversed(default_matchers())))

        assert result.matcher_name == "exact_name"

    def test_no_match(self, acme_index):
        facility = DeclaredFacility(metal="Tin", name="Acme Smelting Ltd")

        result = match_facility(facility, acme_index)

        assert result == MatchResult.no_match("all_matchers")
        assert result.matched_standards == frozenset()
        assert result.source_standard is None

    def test_empty_index_never_matches(self):
        index = ReferenceIndex([])
        facility = DeclaredFacility(metal="Gold", name="Acme", identification_number="F1")
        assert match_facility(facility, index).tier is MatchTier.NONE
