"""
Serialization module for FinCast snapshots.

Purpose
-------
Converts a ForecastState to and from the JSON snapshot document used for
persistence, export and import:

    {
      "year": 2025,
      "initialBalance": 1000,
      "monthlyRules":  [{"title", "amount", "dayOfMonth", "activeFrom"}],
      "plannedEvents": [{"title", "amount", "date", "description"}],
      "realMovements": [{"title", "amount", "date", "note"}]
    }

Import semantics
----------------
- Amounts are written and parsed as exact Decimal JSON numbers
  (simplejson ``use_decimal``); they never pass through binary floats.
- It is validated in full (SnapshotConfig) before anything is applied.
- Only top-level fields present in the document replace the current
  values; absent (or null) fields are left untouched.
- Any failure raises ParseError before anything is merged; callers keep
  their previous state object.

Example
-------
>>> text = export_snapshot(state)
>>> restored = import_snapshot(text, ForecastState.default())
>>> restored == state
True
>>> export_filename(2025)
'finances-2025.json'
"""

from __future__ import annotations
from typing import Any, Dict, List
from pathlib import Path
import dataclasses
import simplejson
import logging

from pydantic import ValidationError as PydanticValidationError

from .config import (
    MonthlyRuleConfig,
    PlannedEventConfig,
    RealMovementConfig,
    SnapshotConfig,
)
from .constants import EXPORT_FILENAME_TEMPLATE, JSON_INDENT
from .entities import ForecastState, MonthlyRule, PlannedEvent, RealMovement
from .exceptions import ParseError, ValidationError
from .types import MonthlyRuleDict, PlannedEventDict, RealMovementDict, SnapshotDict

__all__ = [
    "rule_to_dict",
    "rule_from_config",
    "event_to_dict",
    "event_from_config",
    "movement_to_dict",
    "movement_from_config",
    "state_to_dict",
    "export_snapshot",
    "import_snapshot",
    "export_filename",
    "write_export",
    "read_document",
    "read_import",
]

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Entity Serialization
# ---------------------------------------------------------------------------

def rule_to_dict(rule: MonthlyRule) -> MonthlyRuleDict:
    """Convert a MonthlyRule to its document entry."""
    return {
        "title": rule.title,
        "amount": rule.amount,
        "dayOfMonth": rule.day_of_month,
        "activeFrom": rule.active_from.isoformat(),
    }


def rule_from_config(config: MonthlyRuleConfig) -> MonthlyRule:
    """Build a MonthlyRule from a validated document entry."""
    return MonthlyRule(
        amount=config.amount,
        day_of_month=config.day_of_month,
        active_from=config.active_from,
        title=config.title,
    )


def event_to_dict(event: PlannedEvent) -> PlannedEventDict:
    """Convert a PlannedEvent to its document entry."""
    return {
        "title": event.title,
        "amount": event.amount,
        "date": event.date.isoformat(),
        "description": event.description,
    }


def event_from_config(config: PlannedEventConfig) -> PlannedEvent:
    """Build a PlannedEvent from a validated document entry."""
    return PlannedEvent(
        amount=config.amount,
        date=config.date,
        title=config.title,
        description=config.description,
    )


def movement_to_dict(movement: RealMovement) -> RealMovementDict:
    """Convert a RealMovement to its document entry."""
    return {
        "title": movement.title,
        "amount": movement.amount,
        "date": movement.date.isoformat(),
        "note": movement.note,
    }


def movement_from_config(config: RealMovementConfig) -> RealMovement:
    """Build a RealMovement from a validated document entry."""
    return RealMovement(
        amount=config.amount,
        date=config.date,
        title=config.title,
        note=config.note,
    )


# ---------------------------------------------------------------------------
# Snapshot Serialization
# ---------------------------------------------------------------------------

def state_to_dict(state: ForecastState) -> SnapshotDict:
    """
    Convert a ForecastState to the snapshot document.

    Parameters
    ----------
    state : ForecastState
        State to serialize.

    Returns
    -------
    dict
        Document with every top-level key present.
    """
    return {
        "year": state.year,
        "initialBalance": state.initial_balance,
        "monthlyRules": [rule_to_dict(r) for r in state.rules],
        "plannedEvents": [event_to_dict(e) for e in state.events],
        "realMovements": [movement_to_dict(m) for m in state.movements],
    }


def export_snapshot(state: ForecastState) -> str:
    """Serialize *state* to a pretty-printed JSON document."""
    return simplejson.dumps(
        state_to_dict(state), indent=JSON_INDENT, ensure_ascii=False, use_decimal=True
    )


def _parse_document(document: str) -> SnapshotConfig:
    try:
        data: Any = simplejson.loads(document, use_decimal=True)
    except (TypeError, ValueError) as e:
        raise ParseError(f"Snapshot is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ParseError(
            f"Snapshot must be a JSON object, got {type(data).__name__}."
        )

    try:
        return SnapshotConfig.model_validate(data)
    except PydanticValidationError as e:
        raise ParseError(f"Snapshot does not match the document schema: {e}") from e


def import_snapshot(document: str, current: ForecastState) -> ForecastState:
    """
    Merge a snapshot document into *current*.

    Parameters
    ----------
    document : str
        JSON text of a (possibly partial) snapshot.
    current : ForecastState
        State the document is merged into. Never mutated.

    Returns
    -------
    ForecastState
        New state: fields present in the document replace those of
        *current*; the rest are kept.

    Raises
    ------
    ParseError
        If the document is not valid JSON, not an object, or does not
        match the schema. Nothing is applied in that case.

    Examples
    --------
    >>> merged = import_snapshot('{"year": 2026}', state)
    >>> merged.year, merged.rules == state.rules
    (2026, True)
    """
    config = _parse_document(document)

    changes: Dict[str, Any] = {}
    try:
        if config.year is not None:
            changes["year"] = config.year
        if config.initial_balance is not None:
            changes["initial_balance"] = config.initial_balance
        if config.monthly_rules is not None:
            changes["rules"] = tuple(rule_from_config(c) for c in config.monthly_rules)
        if config.planned_events is not None:
            changes["events"] = tuple(event_from_config(c) for c in config.planned_events)
        if config.real_movements is not None:
            changes["movements"] = tuple(
                movement_from_config(c) for c in config.real_movements
            )
        merged = dataclasses.replace(current, **changes)
    except ValidationError as e:
        raise ParseError(f"Snapshot holds an invalid entry: {e}") from e

    logger.debug("Imported snapshot fields: %s", sorted(changes))
    return merged


# ---------------------------------------------------------------------------
# File helpers
# ---------------------------------------------------------------------------

def export_filename(year: int) -> str:
    """File name of an export for *year*: ``finances-<year>.json``."""
    return EXPORT_FILENAME_TEMPLATE.format(year=year)


def write_export(state: ForecastState, directory: Path) -> Path:
    """
    Write ``finances-<year>.json`` for *state* into *directory*.

    Returns
    -------
    Path
        Path of the written file.
    """
    path = Path(directory) / export_filename(state.year)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(export_snapshot(state))
    logger.info("Exported %s", path)
    return path


def read_document(path: Path) -> str:
    """
    Read the text of a snapshot file.

    Raises
    ------
    ParseError
        If the file is not valid UTF-8.
    """
    with open(path, "rb") as f:
        raw = f.read()
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ParseError(f"Snapshot {path} is not valid UTF-8: {e}") from e


def read_import(path: Path, current: ForecastState) -> ForecastState:
    """Read a snapshot file and merge it into *current* (see import_snapshot)."""
    return import_snapshot(read_document(path), current)
