"""Unit tests for the search query tokenizer."""

import pytest

from personnel_registry.core.query_parser import QueryParser


class TestQueryParser:
    """Test cases for the QueryParser class."""

    @pytest.fixture
    def parser(self):
        """Create a parser instance for testing."""
        return QueryParser()

    @pytest.mark.parametrize("query, expected", [("5", 5), ("  12 ", 12), ("+3", 3), ("-4", -4)])
    def test_integer_queries_are_id_lookups(self, parser, query, expected):
        """Test that bare integers become id lookups."""
        parsed = parser.parse(query)

        assert parsed.id_lookup == expected
        assert parsed.term == ""
        assert parsed.has_filters is False

    @pytest.mark.parametrize("query", ["5a", "1 2", "1.5", "1_000"])
    def test_non_integer_queries(self, parser, query):
        """Test that almost-integers are treated as text."""
        assert parser.parse(query).id_lookup is None

    def test_plain_term(self, parser):
        """Test a query without filters."""
        parsed = parser.parse("  Anna ")

        assert parsed.term == "Anna"
        assert parsed.lowered_term == "anna"
        assert parsed.night_only is False
        assert parsed.active is None
        assert parsed.tokens == []

    def test_night_filter(self, parser):
        """Test the night-shift filter."""
        parsed = parser.parse("shift:night")

        assert parsed.night_only is True
        assert parsed.term == ""
        assert parsed.tokens == ["shift:night"]

    def test_day_overrides_night(self, parser):
        """Test that shift:day cancels shift:night regardless of position."""
        assert parser.parse("shift:night shift:day").night_only is False
        assert parser.parse("shift:day shift:night").night_only is False

    def test_status_filters(self, parser):
        """Test the activity filters."""
        assert parser.parse("status:active").active is True
        assert parser.parse("status:inactive").active is False
        assert parser.parse("status:avliden").active is False

    def test_inactive_overrides_active(self, parser):
        """Test that an inactive token wins over an active token."""
        assert parser.parse("status:inactive status:active").active is False

    def test_case_insensitive_tokens(self, parser):
        """Test that tokens are recognized in any case."""
        parsed = parser.parse("SHIFT:Night Status:INACTIVE anna")

        assert parsed.night_only is True
        assert parsed.active is False
        assert parsed.term == "anna"
        assert parsed.tokens == ["shift:night", "status:inactive"]

    def test_tokens_stripped_from_term(self, parser):
        """Test that filters are removed and the residual term is trimmed."""
        parsed = parser.parse("shift:night Anna Berg status:active")

        assert parsed.term == "Anna Berg"
        assert parsed.night_only is True
        assert parsed.active is True

    def test_empty_and_none_queries(self, parser):
        """Test that empty input parses to an unfiltered empty term."""
        for query in ("", "   ", None):
            parsed = parser.parse(query)
            assert parsed.id_lookup is None
            assert parsed.term == ""
            assert parsed.has_filters is False
