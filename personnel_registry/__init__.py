"""
Personnel Registry - indexed in-memory store for worker ants and bees.

This package provides an employee repository with exact-name and prefix
indexes, filtered free-text search, and JSON-lines snapshots that survive
malformed lines and id collisions.
"""

__version__ = "1.0.0"

from .config import Settings, load_settings
from .core.repository import EmployeeRepository, InMemoryEmployeeRepository, create_repository
from .models.employee import Ant, Bee, Employee

__all__ = [
    "Settings",
    "load_settings",
    "EmployeeRepository",
    "InMemoryEmployeeRepository",
    "create_repository",
    "Ant",
    "Bee",
    "Employee",
]
