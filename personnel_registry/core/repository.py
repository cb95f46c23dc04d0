"""Employee repository contract and its in-memory implementation."""

from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

import structlog

from ..config.settings import Settings
from ..models.employee import Employee, TaxRateLookup, calculate_tax_rate, get_details, utcnow
from .engine import SearchEngine
from .fuzzy_matcher import FuzzyMatcher
from .index import IndexManager
from .snapshot import SnapshotCodec, SnapshotLoadResult

logger = structlog.get_logger(__name__)


class EmployeeRepository(ABC):
    """Storage contract consumed by the console menu."""

    @abstractmethod
    def add_employee(self, employee: Employee) -> None:
        """Store a new record; sets ``employee.id`` when it is 0."""

    @abstractmethod
    def delete_employee(self, employee_id: int) -> None:
        """Remove a record. Unknown ids are ignored."""

    @abstractmethod
    def get_all_employees(self) -> List[Employee]:
        """Every stored record."""

    @abstractmethod
    def get_employee_by_id(self, employee_id: int) -> Optional[Employee]:
        """The record with ``employee_id``, or None."""

    @abstractmethod
    def search_employees(self, search_term: str) -> List[Employee]:
        """Records matching a free-text query with optional inline filters."""

    @abstractmethod
    def update_employee(self, employee: Employee) -> None:
        """Replace a stored record, or add it if its id is unknown."""

    @abstractmethod
    def get_last_read_time(self) -> datetime:
        """Time the store was last read."""


class InMemoryEmployeeRepository(EmployeeRepository):
    """
    Dictionary-backed repository with name, prefix and night-shift indexes.

    Records handed out by the read operations are the stored objects
    themselves. Changing one in place is visible to the store, but the
    indexes only follow after :meth:`update_employee` is called with it.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        """
        Initialize the repository.

        Args:
            settings: Application settings; defaults are used when None
            clock: Source of read timestamps
        """
        self.settings = settings or Settings()
        self.clock = clock
        self.index_manager = IndexManager()
        self.search_engine = SearchEngine(
            self.index_manager,
            search_limit=self.settings.search_result_limit,
            clock=clock,
        )
        self.fuzzy_matcher = FuzzyMatcher(self.settings.suggestion_threshold)
        self.snapshot_codec = SnapshotCodec(clock=clock)

    # --- contract ---

    def add_employee(self, employee: Employee) -> None:
        employee_id = self.index_manager.add(employee)
        logger.info("employee_added", employee_id=employee_id, kind=employee.kind)

    def delete_employee(self, employee_id: int) -> None:
        removed = self.index_manager.delete(employee_id)
        if removed is not None:
            logger.info("employee_deleted", employee_id=employee_id)

    def get_all_employees(self) -> List[Employee]:
        now = self.clock()
        records = self.index_manager.values()
        for record in records:
            record.last_read_time = now
        return records

    def get_employee_by_id(self, employee_id: int) -> Optional[Employee]:
        record = self.index_manager.get(employee_id)
        if record is not None:
            record.last_read_time = self.clock()
        return record

    def search_employees(self, search_term: str) -> List[Employee]:
        return self.search_engine.search(search_term)

    def update_employee(self, employee: Employee) -> None:
        existed = employee.id in self.index_manager
        employee_id = self.index_manager.update(employee)
        logger.info("employee_updated", employee_id=employee_id, inserted=not existed)

    def get_last_read_time(self) -> datetime:
        # Reads are served from memory, so the store is always current.
        return self.clock()

    # --- extras ---

    def suggest_names(self, search_term: str) -> List[str]:
        """
        Stored names close to a term, for "did you mean" hints.

        Args:
            search_term: Text that produced no search results

        Returns:
            Up to ``max_suggestions`` distinct names, best first
        """
        return self.fuzzy_matcher.suggest_corrections(
            search_term,
            (record.name for record in self.index_manager),
            max_suggestions=self.settings.max_suggestions,
        )

    def calculate_tax_rate(self, employee: Employee) -> TaxRateLookup:
        """Tax rate for a record using the configured rates."""
        return calculate_tax_rate(employee, self.settings.tax_rates)

    def describe(self, employee: Employee) -> str:
        """One-line description of a record using the configured rates."""
        return get_details(employee, self.settings.tax_rates, now=self.clock())

    def save_snapshot(self, path: Optional[Union[str, Path]] = None) -> int:
        """
        Write every record to a JSON-lines snapshot.

        Args:
            path: Destination, defaults to the configured snapshot path

        Returns:
            Number of records written

        Raises:
            OSError: If the file cannot be written
        """
        target = path or self.settings.default_snapshot_path
        return self.snapshot_codec.save(self.index_manager.values(), target)

    def load_snapshot(self, path: Optional[Union[str, Path]] = None) -> SnapshotLoadResult:
        """
        Restore records from a JSON-lines snapshot.

        Records keep their embedded ids and replace resident records with the
        same id. Afterwards the id counter is past every resident and loaded
        id. A missing file loads nothing.

        Args:
            path: Source, defaults to the configured snapshot path

        Returns:
            SnapshotLoadResult with loaded and skipped counts
        """
        source = path or self.settings.default_snapshot_path
        read = self.snapshot_codec.load(source)

        for record in read.records:
            self.index_manager.put(record)

        result = SnapshotLoadResult(
            path=read.path,
            found=read.found,
            loaded=len(read.records),
            skipped=len(read.skipped_lines),
            next_id=self.index_manager.next_id,
        )
        if read.found:
            logger.info(
                "snapshot_loaded",
                path=result.path,
                loaded=result.loaded,
                skipped=result.skipped,
                next_id=result.next_id,
            )
        return result

    def get_stats(self) -> Dict[str, Any]:
        """Get repository statistics."""
        return self.search_engine.get_stats()

    def __len__(self) -> int:
        return len(self.index_manager)


def create_repository(settings: Optional[Settings] = None) -> InMemoryEmployeeRepository:
    """
    Build the repository selected by the settings.

    Only the in-memory store ships with this package; a request for another
    backend is logged and served by the in-memory store.
    """
    settings = settings or Settings()
    if not settings.use_in_memory_store:
        logger.warning("database_store_unavailable", fallback="in_memory")
    return InMemoryEmployeeRepository(settings)
