"""Unit tests for the search engine core functionality."""

import pytest
from datetime import timedelta

from personnel_registry.core.engine import SearchEngine
from personnel_registry.core.index import IndexManager
from personnel_registry.models.employee import Ant, Bee, utcnow


class TestSearchEngine:
    """Test cases for the SearchEngine class."""

    @pytest.fixture
    def index_manager(self):
        """Index manager with a small mixed crew."""
        manager = IndexManager()
        old = utcnow() - timedelta(days=400)
        manager.add(Ant(name="Anna", works_night_shift=True))                   # 1
        manager.add(Ant(name="Annika", works_night_shift=False))                # 2
        manager.add(Ant(name="Johanna", works_night_shift=True, hire_date=old))  # 3
        manager.add(Bee(name="Anneli", wings=4))                                # 4
        manager.add(Ant(name="Bertil", works_night_shift=False, hire_date=old))  # 5
        return manager

    @pytest.fixture
    def engine(self, index_manager):
        """Create a search engine instance for testing."""
        return SearchEngine(index_manager, search_limit=200)

    @staticmethod
    def _ids(results):
        return sorted(record.id for record in results)

    def test_engine_initialization(self, engine):
        """Test search engine initialization."""
        assert engine.search_limit == 200
        assert engine.get_stats()["total_queries"] == 0

    def test_id_lookup(self, engine):
        """Test that numeric queries look up by id."""
        assert self._ids(engine.search("5")) == [5]
        assert engine.search("42") == []
        assert engine.get_stats()["id_lookups"] == 2

    def test_prefix_fast_path(self, engine):
        """Test that an existing prefix bucket answers the query."""
        results = engine.search("ann")

        assert self._ids(results) == [1, 2, 4]
        assert engine.get_stats()["prefix_hits"] == 1

    def test_prefix_path_excludes_inner_matches(self, engine):
        """Test that the prefix path only returns names starting with the term."""
        assert self._ids(engine.search("anna")) == [1]

    def test_substring_slow_path(self, engine):
        """Test that a term without a prefix bucket falls back to substring matching."""
        results = engine.search("hanna")

        assert self._ids(results) == [3]
        assert engine.get_stats()["substring_scans"] == 1

    def test_case_insensitive_search(self, engine):
        """Test case-insensitive matching on both paths."""
        assert self._ids(engine.search("ANNIKA")) == [2]
        assert self._ids(engine.search("TIL")) == [5]

    def test_night_filter(self, engine):
        """Test that shift:night keeps only night-shift ants."""
        assert self._ids(engine.search("shift:night")) == [1, 3]

    def test_night_filter_excludes_bees(self, engine):
        """Test that bees never pass a night filter."""
        assert 4 not in self._ids(engine.search("ann shift:night"))

    def test_day_token_disables_night_filter(self, engine):
        """Test that shift:day overrides shift:night."""
        assert self._ids(engine.search("shift:night shift:day")) == [1, 2, 3, 4, 5]

    def test_status_filters(self, engine):
        """Test the activity filters."""
        assert self._ids(engine.search("status:inactive")) == [3, 5]
        assert self._ids(engine.search("status:avliden")) == [3, 5]
        assert self._ids(engine.search("status:active")) == [1, 2, 4]

    def test_combined_filters_and_term(self, engine):
        """Test filters combined with a residual term."""
        assert self._ids(engine.search("shift:night status:active an")) == [1]
        assert self._ids(engine.search("hanna status:inactive")) == [3]

    def test_empty_query_returns_everything(self, engine):
        """Test that an empty query lists all records."""
        assert self._ids(engine.search("")) == [1, 2, 3, 4, 5]
        assert self._ids(engine.search("   ")) == [1, 2, 3, 4, 5]

    def test_no_match(self, engine):
        """Test that unmatched terms return an empty list."""
        assert engine.search("xyz") == []

    def test_search_touches_read_time(self, engine, index_manager):
        """Test that matched records get a fresh read time."""
        before = utcnow()
        results = engine.search("ann")

        assert results
        for record in results:
            assert record.last_read_time >= before

    def test_search_limit(self, index_manager):
        """Test that results stop at the search limit."""
        engine = SearchEngine(index_manager, search_limit=2)

        assert len(engine.search("")) == 2
        assert len(engine.search("ann")) == 2
        assert len(engine.search("status:inactive")) == 2
        assert engine.get_stats()["limit_reached"] == 3

    def test_search_limit_not_reached(self, engine):
        """Test that every match is returned when under the limit."""
        assert len(engine.search("n")) == 4

    def test_matches_filters(self, engine):
        """Test the filter predicate directly."""
        parsed = engine.parser.parse("shift:night")

        assert engine.matches_filters(Ant(name="N", works_night_shift=True), parsed) is True
        assert engine.matches_filters(Ant(name="D", works_night_shift=False), parsed) is False
        assert engine.matches_filters(Bee(name="B", wings=2), parsed) is False

    def test_performance_metrics(self, engine):
        """Test statistics tracking."""
        engine.search("5")
        engine.search("ann")
        engine.search("hanna")
        engine.search("status:active")

        stats = engine.get_stats()

        assert stats["total_queries"] == 4
        assert stats["id_lookups"] == 1
        assert stats["prefix_hits"] == 1
        assert stats["substring_scans"] == 1
        assert stats["filter_scans"] == 1
        assert stats["average_execution_time_ms"] >= 0
        assert stats["index_stats"]["total_records"] == 5
