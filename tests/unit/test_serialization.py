"""
Unit tests for serialization.py module.

Tests export format, lossless round trip, partial imports and rejection
of malformed documents.
"""

import json
from datetime import date
from decimal import Decimal

import pytest

from fincast.entities import ForecastState, MonthlyRule, PlannedEvent, RealMovement
from fincast.exceptions import ParseError
from fincast.serialization import (
    export_filename,
    export_snapshot,
    import_snapshot,
    read_import,
    rule_to_dict,
    state_to_dict,
    write_export,
)


# ============================================================================
# EXPORT
# ============================================================================

class TestExport:
    """Test state_to_dict and export_snapshot."""

    def test_document_keys(self, state):
        """All top-level keys use the camelCase document names."""
        doc = state_to_dict(state)
        assert set(doc) == {
            "year", "initialBalance", "monthlyRules", "plannedEvents", "realMovements"
        }
        assert doc["year"] == 2025
        assert doc["initialBalance"] == 1000

    def test_rule_entry(self, rule_day_31):
        """Rule entries carry dayOfMonth and ISO activeFrom."""
        assert rule_to_dict(rule_day_31) == {
            "title": "Gym",
            "amount": -50,
            "dayOfMonth": 31,
            "activeFrom": "2025-01-01",
        }

    def test_entries_in_order(self, state):
        """Collections keep insertion order."""
        doc = state_to_dict(state)
        assert [r["title"] for r in doc["monthlyRules"]] == ["Gym", "Salary"]
        assert doc["plannedEvents"][0]["description"] == "Yearly car insurance"
        assert doc["realMovements"][0]["note"] == "Unexpected"

    def test_pretty_printed_json(self, state):
        """Export is indented, valid JSON."""
        text = export_snapshot(state)
        assert text.startswith("{\n  \"year\": 2025")
        assert json.loads(text)["monthlyRules"][1]["amount"] == 2100.5

    def test_non_ascii_kept(self):
        """Titles are written as-is."""
        state = ForecastState(
            year=2025,
            events=[PlannedEvent(Decimal("-90"), date(2025, 5, 2), title="Cumpleaños")],
        )
        assert "Cumpleaños" in export_snapshot(state)

    def test_export_filename(self):
        """finances-<year>.json"""
        assert export_filename(2025) == "finances-2025.json"


# ============================================================================
# IMPORT
# ============================================================================

class TestImport:
    """Test import_snapshot merge semantics."""

    def test_round_trip(self, state):
        """import(export(s)) over a default state restores s exactly."""
        restored = import_snapshot(export_snapshot(state), ForecastState.default(year=1999))
        assert restored == state

    def test_round_trip_cents(self):
        """Cent amounts survive the JSON number representation."""
        state = ForecastState(
            year=2025,
            initial_balance=Decimal("1234.56"),
            movements=[RealMovement(Decimal("-0.1"), date(2025, 1, 1))],
        )
        restored = import_snapshot(export_snapshot(state), ForecastState.default(year=2025))
        assert restored.initial_balance == Decimal("1234.56")
        assert restored.movements[0].amount == Decimal("-0.1")

    def test_round_trip_high_precision(self):
        """Amounts beyond float precision are written and read back digit for digit."""
        state = ForecastState(
            year=2025,
            initial_balance=Decimal("12345678901234567.89"),
            movements=[RealMovement(Decimal("0.1234567890123456789"), date(2025, 1, 1))],
        )
        text = export_snapshot(state)
        assert "12345678901234567.89" in text
        assert "0.1234567890123456789" in text

        restored = import_snapshot(text, ForecastState.default(year=2025))
        assert restored == state

    def test_amounts_parsed_as_decimal(self):
        """Floats in the document become Decimal without binary error."""
        merged = import_snapshot('{"initialBalance": 0.1}', ForecastState(year=2025))
        assert merged.initial_balance == Decimal("0.1")
        assert isinstance(merged.initial_balance, Decimal)

    def test_partial_import_keeps_absent_fields(self, state):
        """A document without plannedEvents keeps the current events."""
        doc = {
            "year": 2026,
            "initialBalance": 500,
            "monthlyRules": [],
            "realMovements": [],
        }
        merged = import_snapshot(json.dumps(doc), state)

        assert merged.year == 2026
        assert merged.initial_balance == Decimal("500")
        assert merged.rules == ()
        assert merged.movements == ()
        assert merged.events == state.events

    def test_null_fields_are_absent(self, state):
        """null top-level values leave the current values untouched."""
        merged = import_snapshot('{"year": null, "plannedEvents": null}', state)
        assert merged == state

    def test_empty_object_changes_nothing(self, state):
        """{} is a valid, empty import."""
        assert import_snapshot("{}", state) == state

    def test_entry_defaults(self):
        """Missing or null text fields become empty strings."""
        doc = {
            "monthlyRules": [{"amount": 10, "dayOfMonth": 1, "activeFrom": "2025-01-01"}],
            "plannedEvents": [{"title": None, "amount": 5, "date": "2025-02-01"}],
        }
        merged = import_snapshot(json.dumps(doc), ForecastState(year=2025))

        assert merged.rules == (MonthlyRule(Decimal("10"), 1, date(2025, 1, 1)),)
        assert merged.events[0].title == ""
        assert merged.events[0].description == ""

    def test_unknown_keys_ignored(self, state):
        """Extra keys do not break an import."""
        merged = import_snapshot('{"version": 3, "year": 2030}', state)
        assert merged.year == 2030

    def test_current_not_mutated(self, state):
        """The state passed in is left as it was."""
        before = export_snapshot(state)
        import_snapshot('{"year": 2030, "monthlyRules": []}', state)
        assert export_snapshot(state) == before


# ============================================================================
# MALFORMED DOCUMENTS
# ============================================================================

class TestImportErrors:
    """Test that every malformed document raises ParseError."""

    @pytest.mark.parametrize(
        "document",
        [
            "not json",
            "{\"year\": 2025,",
            "",
        ],
    )
    def test_invalid_json(self, state, document):
        """Syntax errors raise ParseError."""
        with pytest.raises(ParseError, match="not valid JSON"):
            import_snapshot(document, state)

    @pytest.mark.parametrize("document", ["[]", "42", "\"text\"", "null"])
    def test_not_an_object(self, state, document):
        """Top level must be a JSON object."""
        with pytest.raises(ParseError, match="JSON object"):
            import_snapshot(document, state)

    @pytest.mark.parametrize(
        "doc",
        [
            {"year": "next"},
            {"year": 0},
            {"initialBalance": "lots"},
            {"monthlyRules": {"amount": 1}},
            {"monthlyRules": [{"amount": 1, "dayOfMonth": 40, "activeFrom": "2025-01-01"}]},
            {"monthlyRules": [{"amount": 1, "dayOfMonth": 1}]},
            {"plannedEvents": [{"amount": 1, "date": "2025-02-30"}]},
            {"realMovements": [{"date": "2025-01-01"}]},
        ],
    )
    def test_schema_violations(self, state, doc):
        """Wrong types, ranges and missing entry fields raise ParseError."""
        with pytest.raises(ParseError):
            import_snapshot(json.dumps(doc), state)

    def test_nothing_applied_on_error(self, state):
        """A valid field next to an invalid one is not merged either."""
        doc = {"year": 2030, "realMovements": [{"amount": "x", "date": "2025-01-01"}]}
        with pytest.raises(ParseError):
            import_snapshot(json.dumps(doc), state)
        assert state.year == 2025


# ============================================================================
# FILE HELPERS
# ============================================================================

class TestFiles:
    """Test write_export and read_import."""

    def test_write_export(self, state, tmp_path):
        """Writes finances-<year>.json into the directory."""
        path = write_export(state, tmp_path / "exports")

        assert path == tmp_path / "exports" / "finances-2025.json"
        assert path.read_text(encoding="utf-8") == export_snapshot(state)

    def test_read_import(self, state, tmp_path):
        """Reads back what write_export wrote."""
        path = write_export(state, tmp_path)
        assert read_import(path, ForecastState(year=2000)) == state

    def test_read_import_bad_file(self, state, tmp_path):
        """A corrupt file raises ParseError."""
        path = tmp_path / "broken.json"
        path.write_text("{oops", encoding="utf-8")
        with pytest.raises(ParseError):
            read_import(path, state)

    def test_read_import_not_utf8(self, state, tmp_path):
        """Bytes that are not UTF-8 raise ParseError."""
        path = tmp_path / "latin.json"
        path.write_bytes(b'{"year": 2025, "x": "\xff\xfe"}')
        with pytest.raises(ParseError, match="UTF-8"):
            read_import(path, state)
