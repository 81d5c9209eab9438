"""
Input entities for FinCast.

Purpose
-------
Immutable value objects for the three input collections and the state
snapshot that groups them with the year and the initial balance:

- MonthlyRule:
    Recurring adjustment on a (clamped) day of every month, from
    ``active_from`` onwards.

- PlannedEvent:
    One-off adjustment of the forecast line on a single date.

- RealMovement:
    Recorded actual adjustment, applied to the real line from its date on.

- ForecastState:
    Explicit context object passed to the projector and the reconciliation
    engine. Collections are stored as tuples so a projection pass always
    reads a consistent snapshot; editing produces a new state.

Design principles
-----------------
- Frozen dataclasses with structural equality
- Validation at construction: invalid entities never exist
- ``create`` factories accept raw user input (strings, floats) and
  normalize it to Decimal / date / int before construction

Example
-------
>>> from datetime import date
>>> from decimal import Decimal
>>> rent = MonthlyRule(amount=Decimal("-750"), day_of_month=1,
...                    active_from=date(2025, 1, 1), title="Rent")
>>> salary = MonthlyRule.create(amount="2100.50", day_of_month=31,
...                             active_from="2025-01-01", title="Salary")
>>> state = ForecastState(year=2025, initial_balance=Decimal("1000"),
...                       rules=[rent, salary])
>>> len(state.rules)
2
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Optional, Tuple

from .constants import DEFAULT_INITIAL_BALANCE, MAX_DAY_OF_MONTH, MIN_DAY_OF_MONTH
from .exceptions import ValidationError
from .utils import (
    AmountLike,
    DateLike,
    check_day_of_month,
    check_year,
    parse_amount,
    parse_iso_date,
)

__all__ = [
    "MonthlyRule",
    "PlannedEvent",
    "RealMovement",
    "ForecastState",
]


def _check_amount(amount: object) -> None:
    if not isinstance(amount, Decimal) or not amount.is_finite():
        raise ValidationError(f"amount must be a finite Decimal, got {amount!r}")


def _check_date(value: object, name: str) -> None:
    if not isinstance(value, date):
        raise ValidationError(f"{name} must be a datetime.date, got {value!r}")


def _check_text(value: object, name: str) -> None:
    if not isinstance(value, str):
        raise ValidationError(f"{name} must be a string, got {value!r}")


# ---------------------------------------------------------------------------
# Monthly Rule
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MonthlyRule:
    """
    Recurring monthly adjustment.

    Parameters
    ----------
    amount : Decimal
        Signed amount added to the balance each time the rule fires
        (positive: income, negative: expense).
    day_of_month : int
        Day in 1..31. Clamped to the month's last day in short months.
    active_from : datetime.date
        First date on which the rule may fire.
    title : str, optional
        Label shown in lists (e.g. "Salary", "Rent").

    Examples
    --------
    >>> MonthlyRule(Decimal("-50"), 31, date(2025, 1, 1))
    MonthlyRule(amount=-50, day_of_month=31, active_from=2025-01-01)
    """
    amount: Decimal
    day_of_month: int
    active_from: date
    title: str = ""

    def __post_init__(self) -> None:
        _check_amount(self.amount)
        if (
            isinstance(self.day_of_month, bool)
            or not isinstance(self.day_of_month, int)
            or not (MIN_DAY_OF_MONTH <= self.day_of_month <= MAX_DAY_OF_MONTH)
        ):
            raise ValidationError(
                f"day_of_month must be an integer in "
                f"{MIN_DAY_OF_MONTH}..{MAX_DAY_OF_MONTH}, got {self.day_of_month!r}"
            )
        _check_date(self.active_from, "active_from")
        _check_text(self.title, "title")

    @classmethod
    def create(
        cls,
        amount: AmountLike,
        day_of_month: int | str,
        active_from: DateLike,
        title: Optional[str] = None,
    ) -> MonthlyRule:
        """Build a rule from raw user input."""
        return cls(
            amount=parse_amount(amount),
            day_of_month=check_day_of_month(day_of_month),
            active_from=parse_iso_date(active_from, name="active_from"),
            title=title or "",
        )

    def __repr__(self) -> str:
        title = f", title={self.title!r}" if self.title else ""
        return (
            f"MonthlyRule(amount={self.amount}, day_of_month={self.day_of_month}, "
            f"active_from={self.active_from.isoformat()}{title})"
        )


# ---------------------------------------------------------------------------
# Planned Event
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PlannedEvent:
    """
    Single-day adjustment of the forecast line.

    Parameters
    ----------
    amount : Decimal
        Signed amount added on ``date``.
    date : datetime.date
        Day on which the event lands.
    title : str, optional
    description : str, optional
    """
    amount: Decimal
    date: date
    title: str = ""
    description: str = ""

    def __post_init__(self) -> None:
        _check_amount(self.amount)
        _check_date(self.date, "date")
        _check_text(self.title, "title")
        _check_text(self.description, "description")

    @classmethod
    def create(
        cls,
        amount: AmountLike,
        date: DateLike,
        title: Optional[str] = None,
        description: Optional[str] = None,
    ) -> PlannedEvent:
        """Build an event from raw user input."""
        return cls(
            amount=parse_amount(amount),
            date=parse_iso_date(date),
            title=title or "",
            description=description or "",
        )


# ---------------------------------------------------------------------------
# Real Movement
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RealMovement:
    """
    Recorded actual adjustment, applied only to the real line.

    The movement shifts the real balance of its own day and of every later
    day of the same year.
    """
    amount: Decimal
    date: date
    title: str = ""
    note: str = ""

    def __post_init__(self) -> None:
        _check_amount(self.amount)
        _check_date(self.date, "date")
        _check_text(self.title, "title")
        _check_text(self.note, "note")

    @classmethod
    def create(
        cls,
        amount: AmountLike,
        date: DateLike,
        title: Optional[str] = None,
        note: Optional[str] = None,
    ) -> RealMovement:
        """Build a movement from raw user input."""
        return cls(
            amount=parse_amount(amount),
            date=parse_iso_date(date),
            title=title or "",
            note=note or "",
        )


# ---------------------------------------------------------------------------
# State snapshot
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ForecastState:
    """
    Everything the projector and the reconciliation engine read.

    Parameters
    ----------
    year : int
        Projected calendar year (1..9999).
    initial_balance : Decimal
        Balance on January 1st before any rule or event.
    rules, events, movements : sequences
        Input collections, in insertion order. Stored as tuples.

    Notes
    -----
    Equality is structural, so ``import_snapshot(export_snapshot(s)) == s``
    can be asserted directly.
    """
    year: int
    initial_balance: Decimal = DEFAULT_INITIAL_BALANCE
    rules: Tuple[MonthlyRule, ...] = field(default_factory=tuple)
    events: Tuple[PlannedEvent, ...] = field(default_factory=tuple)
    movements: Tuple[RealMovement, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if isinstance(self.year, bool) or not isinstance(self.year, int):
            raise ValidationError(f"year must be an integer, got {self.year!r}")
        check_year(self.year)
        _check_amount(self.initial_balance)
        object.__setattr__(self, "rules", tuple(self.rules))
        object.__setattr__(self, "events", tuple(self.events))
        object.__setattr__(self, "movements", tuple(self.movements))
        for rule in self.rules:
            if not isinstance(rule, MonthlyRule):
                raise ValidationError(f"rules must hold MonthlyRule items, got {rule!r}")
        for event in self.events:
            if not isinstance(event, PlannedEvent):
                raise ValidationError(f"events must hold PlannedEvent items, got {event!r}")
        for movement in self.movements:
            if not isinstance(movement, RealMovement):
                raise ValidationError(
                    f"movements must hold RealMovement items, got {movement!r}"
                )

    @classmethod
    def default(
        cls,
        year: Optional[int] = None,
        initial_balance: Optional[Decimal] = None,
    ) -> ForecastState:
        """Empty state for *year* (current year when None)."""
        return cls(
            year=date.today().year if year is None else year,
            initial_balance=(
                DEFAULT_INITIAL_BALANCE if initial_balance is None else initial_balance
            ),
        )
