"""Employee search engine implementation."""

import time
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

import structlog

from ..models.employee import Employee, is_active, utcnow
from ..models.query import ParsedQuery
from .index import IndexManager
from .query_parser import QueryParser

logger = structlog.get_logger(__name__)

DEFAULT_SEARCH_LIMIT = 200


class SearchEngine:
    """Evaluates parsed queries against the index manager."""

    def __init__(
        self,
        index_manager: IndexManager,
        search_limit: int = DEFAULT_SEARCH_LIMIT,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        """
        Initialize the search engine.

        Args:
            index_manager: Store to search
            search_limit: Maximum number of records one search returns
            clock: Source of the read timestamps written to matched records
        """
        self.index_manager = index_manager
        self.search_limit = search_limit
        self.clock = clock
        self.parser = QueryParser()

        self._stats = {
            "total_queries": 0,
            "id_lookups": 0,
            "prefix_hits": 0,
            "substring_scans": 0,
            "filter_scans": 0,
            "limit_reached": 0,
            "total_execution_time": 0.0,
        }

    def search(self, query: Optional[str]) -> List[Employee]:
        """
        Search for employees matching a free-text query.

        The query may contain the inline filters ``shift:night``,
        ``shift:day``, ``status:active``, ``status:inactive`` and
        ``status:avliden``. A query that is a bare integer is an id lookup.

        Args:
            query: Search query, case-insensitive

        Returns:
            Matching records in store order, at most ``search_limit`` of them
        """
        start_time = time.time()
        parsed = self.parser.parse(query)
        self._stats["total_queries"] += 1

        if parsed.id_lookup is not None:
            self._stats["id_lookups"] += 1
            results = self._lookup_id(parsed.id_lookup)
            strategy = "id"
        elif not parsed.term:
            self._stats["filter_scans"] += 1
            results = self._collect(self.index_manager.values(), parsed)
            strategy = "filter_scan"
        else:
            results, strategy = self._term_search(parsed)

        if len(results) >= self.search_limit:
            self._stats["limit_reached"] += 1

        execution_time = (time.time() - start_time) * 1000
        self._stats["total_execution_time"] += execution_time
        logger.debug(
            "search_completed",
            strategy=strategy,
            results=len(results),
            execution_time_ms=round(execution_time, 3),
        )
        return results

    def matches_filters(
        self, employee: Employee, parsed: ParsedQuery, now: Optional[datetime] = None
    ) -> bool:
        """
        Check a record against the structural filters of a query.

        Args:
            employee: Record to test
            parsed: Parsed query carrying the filters
            now: Reference time for the activity predicate

        Returns:
            True if the record passes every requested filter
        """
        if parsed.active is not None and is_active(employee, now) != parsed.active:
            return False

        if parsed.night_only:
            if employee.kind != "Ant" or not employee.works_night_shift:
                return False

        return True

    def _lookup_id(self, employee_id: int) -> List[Employee]:
        record = self.index_manager.get(employee_id)
        if record is None:
            return []
        record.last_read_time = self.clock()
        return [record]

    def _term_search(self, parsed: ParsedQuery) -> Tuple[List[Employee], str]:
        lowered = parsed.lowered_term

        ids = self.index_manager.ids_for_prefix(lowered)
        if ids is not None:
            self._stats["prefix_hits"] += 1
            candidates = (self.index_manager.get(employee_id) for employee_id in ids)
            return self._collect(candidates, parsed), "prefix"

        self._stats["substring_scans"] += 1
        candidates = (
            record
            for record in self.index_manager.values()
            if lowered in (record.name or "").lower()
        )
        return self._collect(candidates, parsed), "substring"

    def _collect(
        self, candidates: Iterable[Optional[Employee]], parsed: ParsedQuery
    ) -> List[Employee]:
        now = self.clock()
        results: List[Employee] = []
        if self.search_limit <= 0:
            return results

        for record in candidates:
            if record is None or not self.matches_filters(record, parsed, now):
                continue
            record.last_read_time = now
            results.append(record)
            if len(results) >= self.search_limit:
                break
        return results

    def get_stats(self) -> Dict[str, Any]:
        """Get engine statistics."""
        stats = self._stats.copy()

        if stats["total_queries"] > 0:
            stats["average_execution_time_ms"] = (
                stats["total_execution_time"] / stats["total_queries"]
            )
        else:
            stats["average_execution_time_ms"] = 0.0

        stats["index_stats"] = self.index_manager.get_stats()
        return stats
