"""
Type definitions for FinCast.

Purpose
-------
TypedDict definitions for the persisted snapshot document, so that the
serializer's dictionaries document their own shape.

Usage
-----
>>> from fincast.types import SnapshotDict
>>> doc: SnapshotDict = {
...     "year": 2025,
...     "initialBalance": 1000,
...     "monthlyRules": [],
...     "plannedEvents": [],
...     "realMovements": [],
... }

Type Definitions
----------------
MonthlyRuleDict
    {"title", "amount", "dayOfMonth", "activeFrom"}

PlannedEventDict
    {"title", "amount", "date", "description"}

RealMovementDict
    {"title", "amount", "date", "note"}

SnapshotDict
    {"year", "initialBalance", "monthlyRules", "plannedEvents", "realMovements"}

FeedPointDict
    {"day", "label", "forecast", "real"}
"""

from decimal import Decimal
from typing import List
from typing_extensions import TypedDict, NotRequired

__all__ = [
    "MonthlyRuleDict",
    "PlannedEventDict",
    "RealMovementDict",
    "SnapshotDict",
    "FeedPointDict",
]


class MonthlyRuleDict(TypedDict):
    """Serialized MonthlyRule. Dates are ISO strings."""

    title: str
    amount: Decimal
    dayOfMonth: int
    activeFrom: str


class PlannedEventDict(TypedDict):
    """Serialized PlannedEvent."""

    title: str
    amount: Decimal
    date: str
    description: str


class RealMovementDict(TypedDict):
    """Serialized RealMovement."""

    title: str
    amount: Decimal
    date: str
    note: str


class SnapshotDict(TypedDict):
    """
    Persisted/exported state document.

    Every key is optional on import; export always writes all of them.
    """

    year: NotRequired[int]
    initialBalance: NotRequired[Decimal]
    monthlyRules: NotRequired[List[MonthlyRuleDict]]
    plannedEvents: NotRequired[List[PlannedEventDict]]
    realMovements: NotRequired[List[RealMovementDict]]


class FeedPointDict(TypedDict):
    """One sampled chart point, with amounts as floats."""

    day: int
    label: str
    forecast: float
    real: float
