"""Index data structures for the employee store."""

import time
from typing import Any, Dict, Iterator, List, Optional, Set

import structlog

from ..models.employee import Employee
from .normalizer import TextNormalizer

logger = structlog.get_logger(__name__)


class NameIndex:
    """Exact-name index mapping a lowercased full name to employee ids."""

    def __init__(self) -> None:
        """Initialize the name index."""
        self._buckets: Dict[str, Set[int]] = {}
        self._stats = {
            "total_keys": 0,
            "last_updated": None,
        }

    def add(self, key: str, employee_id: int) -> None:
        """
        Add an employee id under a normalized name.

        Args:
            key: Normalized name
            employee_id: Id to store
        """
        self._buckets.setdefault(key, set()).add(employee_id)
        self._touch()

    def remove(self, key: str, employee_id: int) -> None:
        """
        Remove an employee id from a name bucket, pruning the bucket if empty.

        Args:
            key: Normalized name the id was indexed under
            employee_id: Id to remove
        """
        bucket = self._buckets.get(key)
        if bucket is None:
            return
        bucket.discard(employee_id)
        if not bucket:
            del self._buckets[key]
        self._touch()

    def get_ids(self, key: str) -> Optional[Set[int]]:
        """Get a copy of the ids stored under a name, or None if absent."""
        bucket = self._buckets.get(key)
        if bucket is None:
            return None
        return set(bucket)

    def items(self) -> Iterator:
        return iter(self._buckets.items())

    def __len__(self) -> int:
        return len(self._buckets)

    def __contains__(self, key: object) -> bool:
        return key in self._buckets

    def clear(self) -> None:
        """Clear all buckets."""
        self._buckets.clear()
        self._stats = {
            "total_keys": 0,
            "last_updated": None,
        }

    def get_stats(self) -> Dict[str, Any]:
        """Get index statistics."""
        return self._stats.copy()

    def _touch(self) -> None:
        self._stats["total_keys"] = len(self._buckets)
        self._stats["last_updated"] = time.time()


class PrefixIndex(NameIndex):
    """Prefix index mapping every name prefix (up to the limit) to employee ids."""

    def __init__(self, normalizer: Optional[TextNormalizer] = None) -> None:
        """
        Initialize the prefix index.

        Args:
            normalizer: Supplies the prefix expansion and its length limit
        """
        super().__init__()
        self.normalizer = normalizer or TextNormalizer()

    def add(self, key: str, employee_id: int) -> None:
        """Add an employee id to the bucket of every prefix of ``key``."""
        for prefix in self.normalizer.iter_prefixes(key):
            self._buckets.setdefault(prefix, set()).add(employee_id)
        self._touch()

    def remove(self, key: str, employee_id: int) -> None:
        """Remove an employee id from every prefix bucket of ``key``."""
        for prefix in self.normalizer.iter_prefixes(key):
            bucket = self._buckets.get(prefix)
            if bucket is None:
                continue
            bucket.discard(employee_id)
            if not bucket:
                del self._buckets[prefix]
        self._touch()


class IndexManager:
    """Owns the primary id map and keeps every secondary index in lockstep with it."""

    def __init__(self, normalizer: Optional[TextNormalizer] = None) -> None:
        """
        Initialize the index manager.

        Args:
            normalizer: Name normalizer shared by the name and prefix indexes
        """
        self.normalizer = normalizer or TextNormalizer()
        self.name_index = NameIndex()
        self.prefix_index = PrefixIndex(self.normalizer)
        self._records: Dict[int, Employee] = {}
        # id -> name key the record was indexed under, so removal does not
        # depend on the (shared, mutable) record still carrying the old name.
        self._indexed_keys: Dict[int, str] = {}
        self._night_shift: Set[int] = set()
        self._next_id = 1

    @property
    def next_id(self) -> int:
        """Id the next unassigned record will receive (unless already taken)."""
        return self._next_id

    def add(self, employee: Employee) -> int:
        """
        Store a record, assigning an id if it has none.

        An existing record with the same id is replaced.

        Args:
            employee: Record to store; ``employee.id`` is set when it is 0

        Returns:
            The record's id
        """
        if employee.id == 0:
            employee.id = self._allocate_id()
        else:
            self._observe_id(employee.id)
        self._store(employee)
        return employee.id

    def update(self, employee: Employee) -> int:
        """
        Replace a stored record and rebuild its index entries.

        Behaves like :meth:`add` when the id is not stored.

        Returns:
            The record's id
        """
        if employee.id in self._records:
            self._store(employee)
            return employee.id
        return self.add(employee)

    def put(self, employee: Employee) -> None:
        """
        Store a record under its embedded id without id allocation.

        Used when restoring snapshots. The id counter is still advanced past
        the embedded id.
        """
        self._observe_id(employee.id)
        self._store(employee)

    def delete(self, employee_id: int) -> Optional[Employee]:
        """
        Remove a record and all of its index entries.

        Args:
            employee_id: Id to remove

        Returns:
            The removed record, or None if the id was not stored
        """
        record = self._records.pop(employee_id, None)
        if record is None:
            return None
        self._unindex(employee_id)
        return record

    def get(self, employee_id: int) -> Optional[Employee]:
        """Get a stored record without touching its read time."""
        return self._records.get(employee_id)

    def values(self) -> List[Employee]:
        """Get a new list with every stored record."""
        return list(self._records.values())

    def ids_for_name(self, name: str) -> Optional[Set[int]]:
        """Ids whose full name equals ``name`` case-insensitively."""
        return self.name_index.get_ids(self.normalizer.normalize(name))

    def ids_for_prefix(self, prefix: str) -> Optional[Set[int]]:
        """Ids whose lowercased name starts with ``prefix``, if a bucket exists."""
        return self.prefix_index.get_ids(prefix)

    def night_shift_ids(self) -> Set[int]:
        """Ids of stored ants working the night shift."""
        return set(self._night_shift)

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, employee_id: object) -> bool:
        return employee_id in self._records

    def __iter__(self) -> Iterator[Employee]:
        return iter(self._records.values())

    def clear(self) -> None:
        """Clear all records and indexes. The id counter is kept."""
        self._records.clear()
        self._indexed_keys.clear()
        self._night_shift.clear()
        self.name_index.clear()
        self.prefix_index.clear()

    def check_consistency(self) -> List[str]:
        """
        Verify that the secondary indexes exactly mirror the primary map.

        Returns:
            Human readable violations; empty when the indexes are consistent
        """
        problems: List[str] = []

        for employee_id, record in self._records.items():
            if employee_id == 0:
                problems.append("id 0 is stored")
            if record.id != employee_id:
                problems.append(f"record stored under {employee_id} carries id {record.id}")

            key = self.normalizer.normalize(record.name)
            if self._indexed_keys.get(employee_id) != key:
                problems.append(f"id {employee_id} indexed under a stale name")

            bucket = self.name_index.get_ids(key)
            if not bucket or employee_id not in bucket:
                problems.append(f"id {employee_id} missing from name bucket {key!r}")

            for prefix in self.normalizer.iter_prefixes(key):
                bucket = self.prefix_index.get_ids(prefix)
                if not bucket or employee_id not in bucket:
                    problems.append(f"id {employee_id} missing from prefix bucket {prefix!r}")

            night = record.kind == "Ant" and record.works_night_shift
            if night != (employee_id in self._night_shift):
                problems.append(f"id {employee_id} night-shift membership is wrong")

        for key, ids in self.name_index.items():
            if not ids:
                problems.append(f"empty name bucket {key!r}")
            for employee_id in ids:
                if self._indexed_keys.get(employee_id) != key:
                    problems.append(f"name bucket {key!r} holds foreign id {employee_id}")

        for prefix, ids in self.prefix_index.items():
            if not ids:
                problems.append(f"empty prefix bucket {prefix!r}")
            for employee_id in ids:
                key = self._indexed_keys.get(employee_id)
                if key is None or not key.startswith(prefix):
                    problems.append(f"prefix bucket {prefix!r} holds foreign id {employee_id}")

        for employee_id in self._night_shift - set(self._records):
            problems.append(f"night-shift set holds unknown id {employee_id}")

        if problems:
            logger.debug("index_inconsistent", violations=len(problems))
        return problems

    def get_stats(self) -> Dict[str, Any]:
        """Get combined statistics for the primary map and all indexes."""
        return {
            "total_records": len(self._records),
            "next_id": self._next_id,
            "name_index": self.name_index.get_stats(),
            "prefix_index": self.prefix_index.get_stats(),
            "night_shift": len(self._night_shift),
        }

    # --- internal helpers ---

    def _allocate_id(self) -> int:
        while self._next_id in self._records:
            self._next_id += 1
        employee_id = self._next_id
        self._next_id += 1
        return employee_id

    def _observe_id(self, employee_id: int) -> None:
        if employee_id >= self._next_id:
            self._next_id = employee_id + 1

    def _store(self, employee: Employee) -> None:
        if employee.id in self._records:
            self._unindex(employee.id)
        self._records[employee.id] = employee
        self._index(employee)

    def _index(self, employee: Employee) -> None:
        key = self.normalizer.normalize(employee.name)
        self.name_index.add(key, employee.id)
        self.prefix_index.add(key, employee.id)
        self._indexed_keys[employee.id] = key

        if employee.kind == "Ant" and employee.works_night_shift:
            self._night_shift.add(employee.id)
        else:
            self._night_shift.discard(employee.id)

    def _unindex(self, employee_id: int) -> None:
        self._night_shift.discard(employee_id)
        key = self._indexed_keys.pop(employee_id, None)
        if key is None:
            return
        self.name_index.remove(key, employee_id)
        self.prefix_index.remove(key, employee_id)
