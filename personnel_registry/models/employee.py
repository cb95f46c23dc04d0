"""Employee record models and per-variant behaviour tables."""

from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Literal, Mapping, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_pascal


DEFAULT_TAX_RATES: Dict[str, float] = {"DAY": 0.30, "NIGHT": 0.45}


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class EmployeeBase(BaseModel):
    """Attributes shared by every employee variant."""

    model_config = ConfigDict(alias_generator=to_pascal, populate_by_name=True)

    id: int = Field(default=0, ge=0, description="Store-assigned id, 0 until first insert")
    name: str = Field(..., description="Free text name")
    hire_date: datetime = Field(default_factory=utcnow, description="Start of employment (UTC)")
    last_read_time: datetime = Field(
        default_factory=utcnow, description="Last time the record was read from the store"
    )

    @field_validator("hire_date", "last_read_time")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        """Treat naive datetimes as UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v


class Ant(EmployeeBase):
    """Worker ant. Taxed by shift."""

    kind: Literal["Ant"] = "Ant"
    works_night_shift: bool = Field(..., description="Whether the ant works the night shift")


class Bee(EmployeeBase):
    """Worker bee."""

    kind: Literal["Bee"] = "Bee"
    wings: int = Field(..., ge=0, description="Number of wings")


Employee = Union[Ant, Bee]

# Variant tag -> model class. New variants are registered here and in the
# dispatch tables below.
EMPLOYEE_TYPES: Dict[str, Type[EmployeeBase]] = {
    "Ant": Ant,
    "Bee": Bee,
}

LIFESPANS: Dict[str, timedelta] = {
    "Ant": timedelta(days=365),
    "Bee": timedelta(days=42),
}

_TAX_KEYS: Dict[str, Callable[[Employee], str]] = {
    "Ant": lambda e: "NIGHT" if e.works_night_shift else "DAY",
    "Bee": lambda e: "DAY",
}


class TaxRateLookup(BaseModel):
    """Outcome of a tax rate lookup, including where the rate came from."""

    key: str = Field(..., description="Rate key that was looked up (DAY/NIGHT)")
    rate: float = Field(..., ge=0.0, le=1.0, description="Tax rate as a fraction")
    source: Literal["config", "default"] = Field(
        ..., description="'config' if found in the configured rates, 'default' otherwise"
    )


def is_active(employee: Employee, now: Optional[datetime] = None) -> bool:
    """
    Return True while the employee is still within its variant lifespan.

    Args:
        employee: The record to check
        now: Reference time, defaults to the current UTC time

    Returns:
        False once the lifespan since ``hire_date`` has elapsed (deceased)
    """
    now = now or utcnow()
    return now - employee.hire_date < LIFESPANS[employee.kind]


def calculate_tax_rate(
    employee: Employee, tax_rates: Optional[Mapping[str, float]] = None
) -> TaxRateLookup:
    """
    Look up the tax rate for an employee.

    Args:
        employee: The record to tax
        tax_rates: Configured rates keyed by "DAY"/"NIGHT"

    Returns:
        TaxRateLookup with source "default" when the key is not configured
    """
    key = _TAX_KEYS[employee.kind](employee)
    if tax_rates and key in tax_rates:
        return TaxRateLookup(key=key, rate=tax_rates[key], source="config")
    return TaxRateLookup(key=key, rate=DEFAULT_TAX_RATES[key], source="default")


def _status_label(employee: Employee, now: Optional[datetime]) -> str:
    return "Active" if is_active(employee, now) else "Inactive (deceased)"


def _ant_details(employee: Ant, rate: float, now: Optional[datetime]) -> str:
    shift = "Night" if employee.works_night_shift else "Day"
    return (
        f"[ANT] ID: {employee.id}, Name: {employee.name}, Shift: {shift}, "
        f"Status: {_status_label(employee, now)}, Tax: {rate * 100:.1f}%"
    )


def _bee_details(employee: Bee, rate: float, now: Optional[datetime]) -> str:
    return (
        f"[BEE] ID: {employee.id}, Name: {employee.name}, Wings: {employee.wings}, "
        f"Status: {_status_label(employee, now)}, Tax: {rate * 100:.1f}%"
    )


_DETAIL_RENDERERS: Dict[str, Callable[..., str]] = {
    "Ant": _ant_details,
    "Bee": _bee_details,
}


def get_details(
    employee: Employee,
    tax_rates: Optional[Mapping[str, float]] = None,
    now: Optional[datetime] = None,
) -> str:
    """Render a one-line description of an employee."""
    rate = calculate_tax_rate(employee, tax_rates).rate
    return _DETAIL_RENDERERS[employee.kind](employee, rate, now)
