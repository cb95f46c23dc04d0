"""Unit tests for fuzzy name matching."""

import pytest

from personnel_registry.core.fuzzy_matcher import FuzzyMatcher


class TestFuzzyMatcher:
    """Test cases for the FuzzyMatcher class."""

    @pytest.fixture
    def fuzzy_matcher(self):
        """Create a fuzzy matcher instance for testing."""
        return FuzzyMatcher(threshold=0.6)

    @pytest.fixture
    def names(self):
        return ["Anna", "Bertil", "Maja", "Johanna"]

    def test_typo_suggestion(self, fuzzy_matcher, names):
        """Test that a transposition still finds the name."""
        assert fuzzy_matcher.suggest_corrections("anan", names)[0] == "Anna"

    def test_no_suggestion_for_unrelated(self, fuzzy_matcher, names):
        """Test that unrelated text yields nothing."""
        assert fuzzy_matcher.suggest_corrections("xyz", names) == []

    def test_duplicates_collapsed(self, fuzzy_matcher):
        """Test that repeated names are suggested once."""
        suggestions = fuzzy_matcher.suggest_corrections("Bertl", ["Bertil", "Bertil", "Bertil"])

        assert suggestions == ["Bertil"]

    def test_max_suggestions(self, fuzzy_matcher):
        """Test the suggestion cap."""
        candidates = ["Anna", "Anne", "Anni", "Anny"]

        assert len(fuzzy_matcher.suggest_corrections("Ann", candidates, max_suggestions=2)) == 2
        assert fuzzy_matcher.suggest_corrections("Ann", candidates, max_suggestions=0) == []

    def test_custom_threshold(self, fuzzy_matcher, names):
        """Test a per-call threshold."""
        assert fuzzy_matcher.suggest_corrections("Maj", names, threshold=1.0) == []
