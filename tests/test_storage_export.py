"""
tests/test_storage_export.py

Tests for the plan store, the Excel exporter and the faculty check.
Requires 'pytest' to run.
"""
import io
import json

import openpyxl
import pytest

from seat_allocator.auth import (
    FACULTY_NOT_FOUND,
    INVALID_JSON,
    KEY_MISMATCH,
    load_faculty_auth,
    read_faculty_auth_text,
    save_faculty_auth,
    validate_faculty,
)
from seat_allocator.engine import generate_seating_plan
from seat_allocator.excel_exporter import SeatingExporter
from seat_allocator.storage import PlanStore

from conftest import make_layout, make_roster


@pytest.fixture
def plan(schedule):
    roster = make_roster({"CSE": 5, "ECE": 4, "IT": 2})
    layout = make_layout(("101", 4, 2), ("102", 4, 1))
    return generate_seating_plan(roster, layout, schedule, seed=11)


def test_store_round_trip(tmp_path, plan):
    store = PlanStore(str(tmp_path / "nested" / "plan.json"))
    assert store.load() is None

    store.save(plan)
    loaded = store.load()
    assert loaded.to_dict() == plan.to_dict()
    assert loaded.summary == plan.summary
    assert loaded.schedule == plan.schedule


def test_store_last_write_wins_and_clear(tmp_path, plan, schedule):
    store = PlanStore(str(tmp_path / "plan.json"))
    store.save(plan)

    smaller = generate_seating_plan(make_roster({"CSE": 1}), make_layout(("101", 1, 1)), schedule, seed=1)
    store.save(smaller)
    assert len(store.load().assignments) == 1

    store.clear()
    assert store.load() is None
    store.clear()


def test_saved_json_shape(tmp_path, plan):
    path = tmp_path / "plan.json"
    PlanStore(str(path)).save(plan)
    data = json.loads(path.read_text())

    assert set(data) == {"plan", "examConfig", "summary", "seed"}
    assert data["seed"] == 11
    first = data["plan"][0]
    assert first["id"] == "CSE001"
    assert {"block", "floor", "room", "bench", "position"} <= set(first)


def test_excel_export_sheets(tmp_path, plan):
    path = tmp_path / "seating.xlsx"
    SeatingExporter(plan).export(str(path))

    wb = openpyxl.load_workbook(path)
    assert wb.sheetnames[:3] == ["Summary", "Students", "Exam Schedule"]
    assert "A-1-101" in wb.sheetnames

    students = wb["Students"]
    assert students.max_row == len(plan.assignments) + 1
    assert students.cell(2, 1).value == "CSE001"

    room = wb["A-1-101"]
    assert room.cell(3, 1).value == "WINDOW"
    assert room.cell(4, 2).value == "Left"

    schedule_ws = wb["Exam Schedule"]
    assert schedule_ws.cell(6, 1).value == "01/12/2025"
    assert schedule_ws.cell(8, 1).value == "03/12/2025"


def test_excel_export_to_buffer(plan):
    buffer = io.BytesIO()
    SeatingExporter(plan).export(buffer)
    buffer.seek(0)
    wb = openpyxl.load_workbook(buffer)
    assert wb["Summary"].cell(1, 1).value == "Room Occupancy Summary"


def test_faculty_validation(tmp_path):
    path = tmp_path / "faculty-auth.json"
    path.write_text(json.dumps({"secureKey": "Exam#2025", "facultyIds": ["F001", "f002"]}))
    auth = load_faculty_auth(str(path))

    assert validate_faculty(auth, "f001", "Exam#2025") == (True, None)
    assert validate_faculty(auth, "F002", "Exam#2025") == (True, None)
    assert validate_faculty(auth, "F001", "exam#2025") == (False, KEY_MISMATCH)
    assert validate_faculty(auth, "F404", "Exam#2025") == (False, FACULTY_NOT_FOUND)


def test_faculty_auth_file_must_have_key(tmp_path):
    path = tmp_path / "faculty-auth.json"
    path.write_text(json.dumps({"facultyIds": []}))
    with pytest.raises(ValueError):
        load_faculty_auth(str(path))


def test_save_faculty_auth_keeps_text_and_rejects_bad_json(tmp_path):
    path = str(tmp_path / "conf" / "faculty-auth.json")
    content = '{"secureKey": "s", "facultyIds": ["F1"]}\n'
    save_faculty_auth(path, content)
    assert read_faculty_auth_text(path) == content
    assert load_faculty_auth(path)["facultyIds"] == ["F1"]

    with pytest.raises(ValueError) as exc:
        save_faculty_auth(path, "{nope")
    assert str(exc.value) == INVALID_JSON
    assert read_faculty_auth_text(path) == content
