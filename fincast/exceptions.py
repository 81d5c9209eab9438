"""
Custom exceptions for FinCast.

Purpose
-------
Provides a unified exception hierarchy for consistent error handling
across all FinCast modules. All exceptions inherit from FinCastError,
enabling catch-all handling at the command-line boundary.

Exception Hierarchy
-------------------
FinCastError (base)
├── ValidationError - User-entered amount, day-of-month or date rejected
├── ParseError - Malformed import document or corrupt store file
└── RangeAssumptionViolation - Internal calendar invariant broken

Usage
-----
>>> from fincast.exceptions import FinCastError, ParseError
>>>
>>> try:
...     state = import_snapshot(text, current)
... except ParseError as e:
...     print(f"Import failed: {e}")
"""


class FinCastError(Exception):
    """
    Base exception for all FinCast errors.

    Examples
    --------
    >>> try:
    ...     store.add_rule(amount="abc", day_of_month=1, active_from="2025-01-01")
    ... except FinCastError as e:
    ...     click.echo(f"Error: {e}", err=True)
    """
    pass


class ValidationError(FinCastError):
    """
    Entry-time validation failures.

    Raised when a user-entered value is missing or out of range:
    - Amount missing or not a finite number
    - Day of month outside 1..31
    - Date missing or not an ISO calendar date
    - List index that does not refer to an existing entry

    Nothing is created or updated when this is raised.

    Examples
    --------
    >>> raise ValidationError(
    ...     "day_of_month must be in 1..31, got 32. "
    ...     "Use 31 to fire on the last day of every month."
    ... )
    """
    pass


class ParseError(FinCastError):
    """
    Malformed snapshot document.

    Raised when an import document (or the persisted store file) is not
    valid JSON, is not a JSON object, or does not match the document
    schema. The current state is left untouched.

    Examples
    --------
    >>> raise ParseError("Snapshot is not valid JSON: Expecting value (line 1)")
    """
    pass


class RangeAssumptionViolation(FinCastError):
    """
    Internal calendar invariant broken.

    Raised by the calendar utilities and the projector when they receive
    inputs that should have been rejected at the entry boundary:
    - A day of month outside 1..31
    - A year outside 1..9999 (no valid day count)
    - A day index outside 1..days_in_year(year)

    Examples
    --------
    >>> raise RangeAssumptionViolation(
    ...     "day index 367 out of range for 2025 (1..365)"
    ... )
    """
    pass
