"""
Entity store for FinCast.

Purpose
-------
Holds the current ForecastState and persists it to a single JSON file
(a minimal key-value store: one key, the whole snapshot). Every edit
validates its input, builds a new immutable state, and saves it, so the
file always mirrors what the user last saw.

Contract
--------
- load():   state from disk, defaults for absent fields; a missing file
            yields the default state; a corrupt file raises ParseError.
- save():   idempotent, overwrites the whole file.
- export_snapshot() / import_snapshot(): JSON document round trip; a bad
            import raises ParseError and leaves state and file untouched.

Editing operations cover the list actions (add,
edit, delete for each collection, plus year and initial balance). They
raise ValidationError and change nothing when the input is invalid.

Example
-------
>>> from pathlib import Path
>>> store = EntityStore(Path("/tmp/fincast.json"), default_year=2025)
>>> store.add_rule(amount="-750", day_of_month=1, active_from="2025-01-01", title="Rent")
>>> store.add_movement(amount="-42.10", date="2025-03-14", note="Dentist")
>>> len(store.state.rules), len(store.state.movements)
(1, 1)
"""

from __future__ import annotations

import dataclasses
import logging
import os
import warnings
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Optional, Tuple, TypeVar

from .config import AppSettings
from .entities import ForecastState, MonthlyRule, PlannedEvent, RealMovement
from .exceptions import ValidationError
from .serialization import export_snapshot, import_snapshot, read_document
from .utils import AmountLike, DateLike, check_year, parse_amount

__all__ = ["EntityStore"]

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _check_index(items: Tuple[T, ...], index: int, kind: str) -> None:
    if not (0 <= index < len(items)):
        raise ValidationError(
            f"No {kind} at index {index} (have {len(items)})."
        )


def _replace_at(items: Tuple[T, ...], index: int, item: T) -> Tuple[T, ...]:
    return items[:index] + (item,) + items[index + 1:]


def _remove_at(items: Tuple[T, ...], index: int) -> Tuple[T, ...]:
    return items[:index] + items[index + 1:]


class EntityStore:
    """
    File-backed holder of the current ForecastState.

    Parameters
    ----------
    path : Path
        JSON file the state is persisted to. Parent directories are created
        on first save.
    default_year : int, optional
        Year used when the file holds none. None means the current year.
    default_initial_balance : Decimal, optional
        Initial balance used when the file holds none (0 when None).

    Notes
    -----
    The state is loaded lazily on first access of ``state``.
    """

    def __init__(
        self,
        path: Path,
        *,
        default_year: Optional[int] = None,
        default_initial_balance: Optional[Decimal] = None,
    ) -> None:
        self.path = Path(path)
        self.default_year = default_year
        self.default_initial_balance = default_initial_balance
        self._state: Optional[ForecastState] = None

    @classmethod
    def from_settings(cls, settings: AppSettings, path: Optional[Path] = None) -> EntityStore:
        """Build a store from AppSettings (``path`` overrides ``store_path``)."""
        return cls(
            path if path is not None else settings.store_path,
            default_year=settings.default_year,
            default_initial_balance=settings.default_initial_balance,
        )

    def __repr__(self) -> str:
        return f"EntityStore(path={str(self.path)!r})"

    # -----------------------------------------------------------------------
    # Load / save
    # -----------------------------------------------------------------------

    def default_state(self) -> ForecastState:
        """State used for fields absent from the persisted document."""
        return ForecastState.default(
            year=self.default_year,
            initial_balance=self.default_initial_balance,
        )

    def load(self) -> ForecastState:
        """
        Read the persisted state.

        Raises
        ------
        ParseError
            If the file exists but does not hold a valid snapshot.
        """
        defaults = self.default_state()
        if not self.path.exists():
            logger.info("No store at %s, starting from defaults", self.path)
            self._state = defaults
            return defaults

        self._state = import_snapshot(read_document(self.path), defaults)
        logger.info("Loaded state for %d from %s", self._state.year, self.path)
        return self._state

    def save(self, state: ForecastState) -> None:
        """Overwrite the persisted document with *state*."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                f.write(export_snapshot(state))
            os.replace(tmp_path, self.path)
        except BaseException:
            tmp_path.unlink(missing_ok=True)
            raise
        self._state = state
        logger.debug("Saved state to %s", self.path)

    @property
    def state(self) -> ForecastState:
        """Current state (loaded from disk on first access)."""
        if self._state is None:
            return self.load()
        return self._state

    # -----------------------------------------------------------------------
    # Snapshots
    # -----------------------------------------------------------------------

    def export_snapshot(self, state: Optional[ForecastState] = None) -> str:
        """JSON snapshot of *state* (the current state when None)."""
        return export_snapshot(self.state if state is None else state)

    def import_snapshot(self, document: str) -> ForecastState:
        """
        Merge *document* into the current state and persist the result.

        Raises
        ------
        ParseError
            On a malformed document. State and file are left untouched.
        """
        merged = import_snapshot(document, self.state)
        self.save(merged)
        return merged

    # -----------------------------------------------------------------------
    # Editing
    # -----------------------------------------------------------------------

    def _commit(self, **changes) -> ForecastState:
        new_state = dataclasses.replace(self.state, **changes)
        self.save(new_state)
        return new_state

    def _warn_outside_year(self, when: date, what: str) -> None:
        year = self.state.year
        if when.year != year:
            warnings.warn(
                f"{what} dated {when.isoformat()} is outside {year}; "
                f"it is kept but has no effect on the {year} lines.",
                UserWarning,
            )

    def _warn_inactive_rule(self, rule: MonthlyRule) -> None:
        year = self.state.year
        if rule.active_from.year > year:
            warnings.warn(
                f"Rule active from {rule.active_from.isoformat()} never fires in {year}.",
                UserWarning,
            )

    def set_year(self, year: int) -> ForecastState:
        """Change the projected year."""
        return self._commit(year=check_year(year))

    def set_initial_balance(self, amount: AmountLike) -> ForecastState:
        """Change the balance on January 1st."""
        return self._commit(initial_balance=parse_amount(amount, name="initial_balance"))

    # Monthly rules ---------------------------------------------------------

    def add_rule(
        self,
        amount: AmountLike,
        day_of_month: int,
        active_from: DateLike,
        title: Optional[str] = None,
    ) -> ForecastState:
        """Append a monthly rule."""
        rule = MonthlyRule.create(amount, day_of_month, active_from, title)
        self._warn_inactive_rule(rule)
        return self._commit(rules=self.state.rules + (rule,))

    def update_rule(
        self,
        index: int,
        amount: Optional[AmountLike] = None,
        day_of_month: Optional[int] = None,
        active_from: Optional[DateLike] = None,
        title: Optional[str] = None,
    ) -> ForecastState:
        """Replace the rule at *index*; None keeps the current value."""
        rules = self.state.rules
        _check_index(rules, index, "monthly rule")
        current = rules[index]
        rule = MonthlyRule.create(
            amount=current.amount if amount is None else amount,
            day_of_month=current.day_of_month if day_of_month is None else day_of_month,
            active_from=current.active_from if active_from is None else active_from,
            title=current.title if title is None else title,
        )
        self._warn_inactive_rule(rule)
        return self._commit(rules=_replace_at(rules, index, rule))

    def remove_rule(self, index: int) -> ForecastState:
        """Delete the rule at *index*."""
        rules = self.state.rules
        _check_index(rules, index, "monthly rule")
        return self._commit(rules=_remove_at(rules, index))

    # Planned events --------------------------------------------------------

    def add_event(
        self,
        amount: AmountLike,
        date: DateLike,
        title: Optional[str] = None,
        description: Optional[str] = None,
    ) -> ForecastState:
        """Append a planned event."""
        event = PlannedEvent.create(amount, date, title, description)
        self._warn_outside_year(event.date, "Planned event")
        return self._commit(events=self.state.events + (event,))

    def update_event(
        self,
        index: int,
        amount: Optional[AmountLike] = None,
        date: Optional[DateLike] = None,
        title: Optional[str] = None,
        description: Optional[str] = None,
    ) -> ForecastState:
        """Replace the event at *index*; None keeps the current value."""
        events = self.state.events
        _check_index(events, index, "planned event")
        current = events[index]
        event = PlannedEvent.create(
            amount=current.amount if amount is None else amount,
            date=current.date if date is None else date,
            title=current.title if title is None else title,
            description=current.description if description is None else description,
        )
        self._warn_outside_year(event.date, "Planned event")
        return self._commit(events=_replace_at(events, index, event))

    def remove_event(self, index: int) -> ForecastState:
        """Delete the event at *index*."""
        events = self.state.events
        _check_index(events, index, "planned event")
        return self._commit(events=_remove_at(events, index))

    # Real movements --------------------------------------------------------

    def add_movement(
        self,
        amount: AmountLike,
        date: DateLike,
        title: Optional[str] = None,
        note: Optional[str] = None,
    ) -> ForecastState:
        """Append a real movement."""
        movement = RealMovement.create(amount, date, title, note)
        self._warn_outside_year(movement.date, "Real movement")
        return self._commit(movements=self.state.movements + (movement,))

    def update_movement(
        self,
        index: int,
        amount: Optional[AmountLike] = None,
        date: Optional[DateLike] = None,
        title: Optional[str] = None,
        note: Optional[str] = None,
    ) -> ForecastState:
        """Replace the movement at *index*; None keeps the current value."""
        movements = self.state.movements
        _check_index(movements, index, "real movement")
        current = movements[index]
        movement = RealMovement.create(
            amount=current.amount if amount is None else amount,
            date=current.date if date is None else date,
            title=current.title if title is None else title,
            note=current.note if note is None else note,
        )
        self._warn_outside_year(movement.date, "Real movement")
        return self._commit(movements=_replace_at(movements, index, movement))

    def remove_movement(self, index: int) -> ForecastState:
        """Delete the movement at *index*."""
        movements = self.state.movements
        _check_index(movements, index, "real movement")
        return self._commit(movements=_remove_at(movements, index))
