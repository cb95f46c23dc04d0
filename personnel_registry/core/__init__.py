"""Core store, index and search functionality."""

from .engine import SearchEngine
from .fuzzy_matcher import FuzzyMatcher
from .index import IndexManager, NameIndex, PrefixIndex
from .normalizer import TextNormalizer
from .query_parser import QueryParser
from .repository import EmployeeRepository, InMemoryEmployeeRepository, create_repository
from .snapshot import SnapshotCodec, SnapshotLoadResult

__all__ = [
    "SearchEngine",
    "FuzzyMatcher",
    "IndexManager",
    "NameIndex",
    "PrefixIndex",
    "TextNormalizer",
    "QueryParser",
    "EmployeeRepository",
    "InMemoryEmployeeRepository",
    "create_repository",
    "SnapshotCodec",
    "SnapshotLoadResult",
]
