"""
Tests for saved calculation persistence.

Validates:
1. Save, load, list and delete
2. Replace-by-name issues a new id
3. Designs without a finite positive volume or positive panel sizes are refused
4. A concurrent save of the same name is retried once
"""

import dataclasses

import pytest

from backend.database import SessionLocal
from backend.models_db import Calculation
from backend.services import calculation_store
from backend.services.calculation_store import (
    CalculationConflictError,
    delete_calculation,
    get_calculation,
    list_calculations,
    save_calculation,
)
from engine.enclosure import DriverParameters, PanelDimensions, design_enclosure
from engine.errors import InfeasibleDesignError, NonPositiveGeometryError


def _sealed():
    return design_enclosure(DriverParameters(40, 0.4, 50), 'sealed')


def _ported():
    return design_enclosure(DriverParameters(35, 0.35, 60), 'ported')


class TestCalculationStore:
    """Test the calculation store against a real SQLite session."""

    def test_save_and_load(self, db):
        row = save_calculation(db, "Bookshelf", "Fs 40 Hz, Qts 0.4, Vas 50 L", _sealed())
        loaded = get_calculation(db, row.id)
        assert loaded.name == "Bookshelf"
        assert loaded.parsed_text == "Fs 40 Hz, Qts 0.4, Vas 50 L"
        assert (loaded.fs, loaded.qts, loaded.vas) == (40.0, 0.4, 50.0)
        assert loaded.enclosure_type == "sealed"
        assert (loaded.width, loaded.height, loaded.depth) == (2.9, 4.6, 1.8)
        assert loaded.volume == pytest.approx(23.54, abs=0.05)
        assert loaded.created_at is not None

    def test_list_newest_first(self, db):
        first = save_calculation(db, "First", "", _sealed())
        second = save_calculation(db, "Second", "", _ported())
        ids = [row.id for row in list_calculations(db)]
        assert ids == [second.id, first.id]

    def test_replace_by_name(self, db):
        original = save_calculation(db, "Sub", "", _sealed())
        other = save_calculation(db, "Other", "", _sealed())
        replaced = save_calculation(db, "Sub", "retuned", _ported())

        assert replaced.id != original.id
        assert get_calculation(db, original.id) is None
        rows = list_calculations(db)
        assert [row.name for row in rows] == ["Sub", "Other"]
        assert rows[0].enclosure_type == "ported"
        assert other.id in [row.id for row in rows]

    def test_delete(self, db):
        row = save_calculation(db, "Gone", "", _sealed())
        assert delete_calculation(db, row.id) is True
        assert get_calculation(db, row.id) is None
        assert delete_calculation(db, row.id) is False

    def test_missing_id(self, db):
        assert get_calculation(db, 999999) is None

    def test_refuses_non_finite_volume(self, db):
        design = _sealed()
        broken = dataclasses.replace(
            design, result=dataclasses.replace(design.result, box_volume_liters=float('inf'))
        )
        with pytest.raises(InfeasibleDesignError):
            save_calculation(db, "Broken", "", broken)
        assert list_calculations(db) == []

    def test_refuses_zero_dimension(self, db):
        broken = dataclasses.replace(
            _sealed(), dimensions=PanelDimensions(width_cm=0.0, height_cm=0.1, depth_cm=0.0)
        )
        with pytest.raises(NonPositiveGeometryError):
            save_calculation(db, "Flat", "", broken)
        assert list_calculations(db) == []


def _insert_competitor(name):
    """Commit a row under ``name`` from a separate session."""
    other = SessionLocal()
    try:
        other.add(Calculation(
            name=name, parsed_text="", fs=50.0, qts=0.5, vas=20.0, enclosure_type="sealed",
            width=1.0, height=1.6, depth=0.6, volume=1.0,
        ))
        other.commit()
    finally:
        other.close()


class TestConcurrentSave:
    """Test replace-by-name when another request saves the same name."""

    def test_retry_replaces_competing_row(self, db, monkeypatch):
        real_find = calculation_store._find_existing
        calls = []

        def find_then_lose_race(session, name):
            found = real_find(session, name)
            if not calls:
                _insert_competitor(name)
            calls.append(name)
            return found

        monkeypatch.setattr(calculation_store, "_find_existing", find_then_lose_race)
        row = save_calculation(db, "Contested", "", _ported())

        assert len(calls) == 2
        rows = list_calculations(db)
        assert [r.name for r in rows] == ["Contested"]
        assert rows[0].id == row.id
        assert rows[0].enclosure_type == "ported"

    def test_persistent_conflict(self, db, monkeypatch):
        save_calculation(db, "Taken", "", _sealed())
        monkeypatch.setattr(calculation_store, "_find_existing", lambda session, name: None)

        with pytest.raises(CalculationConflictError):
            save_calculation(db, "Taken", "", _ported())
        assert [r.enclosure_type for r in list_calculations(db)] == ["sealed"]
