"""Data models for the personnel registry."""

from .employee import (
    DEFAULT_TAX_RATES,
    EMPLOYEE_TYPES,
    Ant,
    Bee,
    Employee,
    EmployeeBase,
    TaxRateLookup,
    calculate_tax_rate,
    get_details,
    is_active,
    utcnow,
)
from .query import ParsedQuery

__all__ = [
    "DEFAULT_TAX_RATES",
    "EMPLOYEE_TYPES",
    "Ant",
    "Bee",
    "Employee",
    "EmployeeBase",
    "TaxRateLookup",
    "calculate_tax_rate",
    "get_details",
    "is_active",
    "utcnow",
    "ParsedQuery",
]
