"""
tests/test_models.py

Unit tests for layout validation, flattening, bench labels and the
exam schedule.
Requires 'pytest' to run.
"""
from datetime import date, time

import pytest

from seat_allocator.errors import LayoutError, ScheduleError
from seat_allocator.layout import flatten_layout
from seat_allocator.models import Block, ExamSchedule, Floor, Layout, Room
from seat_allocator.utils import bench_label, iter_exam_dates


def test_flatten_keeps_declaration_order():
    layout = Layout([
        Block("B", [Floor("2", [Room("201", 1, 2)]), Floor("1", [Room("101", 1, 1)])]),
        Block("A", [Floor("1", [Room("A1", 2, 1)])]),
    ])
    seats = flatten_layout(layout)

    assert [(s.block_id, s.floor_id, s.room_id, s.position) for s in seats] == [
        ("B", "2", "201", 1), ("B", "2", "201", 2),
        ("B", "1", "101", 1),
        ("A", "1", "A1", 1), ("A", "1", "A1", 2),
    ]
    assert len(seats) == layout.total_seats


@pytest.mark.parametrize("benches, occupants", [(0, 2), (-1, 2), (3, 0), ("abc", 2), (2.5, 2), (True, 2), ("", 2)])
def test_invalid_counts_name_the_room(benches, occupants):
    with pytest.raises(LayoutError) as exc:
        Layout([Block("A", [Floor("1", [Room("ok", 1, 1), Room("303", benches, occupants)])])])
    assert exc.value.room.startswith("303")


def test_numeric_strings_are_coerced():
    layout = Layout.from_dict({"classrooms": [
        {"block": "A", "floor": "1", "roomNumber": "101", "benchCount": "4"},
        {"block": "A", "floor": "1", "roomNumber": "102", "benchCount": 3.0, "occupantsPerBench": "1"},
    ]})
    rooms = layout.blocks[0].floors[0].rooms
    assert (rooms[0].bench_count, rooms[0].occupants_per_bench) == (4, 2)
    assert (rooms[1].bench_count, rooms[1].occupants_per_bench) == (3, 1)
    assert layout.total_seats == 11


def test_duplicate_room_in_same_floor():
    with pytest.raises(LayoutError):
        Layout([Block("A", [Floor("1", [Room("101", 2), Room("101", 3)])])])

    # Same room number on another floor is fine
    layout = Layout([Block("A", [Floor("1", [Room("101", 2)]), Floor("2", [Room("101", 2)])])])
    assert layout.total_seats == 8


def test_repeated_block_id_is_rejected():
    data = {"blocks": [
        {"id": "A", "floors": [{"id": "1", "rooms": [{"id": "101", "benches": 2}]}]},
        {"id": "A", "floors": [{"id": "1", "rooms": [{"id": "101", "benches": 2}]}]},
    ]}
    with pytest.raises(LayoutError) as exc:
        Layout.from_dict(data)
    assert exc.value.room.startswith("101")
    assert "more than once" in str(exc.value)


def test_repeated_floor_id_is_rejected():
    with pytest.raises(LayoutError):
        Layout([Block("A", [Floor("1", [Room("101", 2)]), Floor("1", [Room("101", 2)])])])

    # A repeated floor holding different rooms is still a valid layout
    layout = Layout([Block("A", [Floor("1", [Room("101", 2)]), Floor("1", [Room("102", 2)])])])
    assert len(flatten_layout(layout)) == 8


@pytest.mark.parametrize("data", [
    5,
    "x",
    [1, 2],
    {"blocks": "A"},
    {"blocks": [3]},
    {"blocks": [{"id": "A", "floors": {"id": "1"}}]},
    {"blocks": [{"id": "A", "floors": ["1"]}]},
    {"blocks": [{"id": "A", "floors": [{"id": "1", "rooms": ["101"]}]}]},
    {"classrooms": {"block": "A"}},
    {"classrooms": [None]},
])
def test_malformed_layout_shapes(data):
    with pytest.raises(LayoutError):
        Layout.from_dict(data)


def test_malformed_classroom_rows():
    with pytest.raises(LayoutError):
        Layout.from_classrooms([{"block": "A", "roomNumber": "101", "benchCount": 2}, "102"])


def test_missing_bench_count():
    with pytest.raises(LayoutError):
        Layout.from_dict({"blocks": [{"id": "A", "floors": [{"id": "1", "rooms": [{"id": "101"}]}]}]})


@pytest.mark.parametrize("position, per_bench, expected", [
    (1, 2, "1L"), (2, 2, "1R"), (3, 2, "2L"), (8, 2, "4R"),
    (1, 1, "1"), (5, 1, "5"),
    (1, 3, "1-1"), (3, 3, "1-3"), (4, 3, "2-1"),
])
def test_bench_label(position, per_bench, expected):
    assert bench_label(position, per_bench) == expected


def test_exam_dates_are_inclusive_and_restartable():
    schedule = ExamSchedule(date(2025, 12, 30), date(2026, 1, 2))
    first = list(schedule.exam_dates())
    assert first == [date(2025, 12, 30), date(2025, 12, 31), date(2026, 1, 1), date(2026, 1, 2)]
    assert list(schedule.exam_dates()) == first
    assert schedule.day_count == 4
    assert list(iter_exam_dates(date(2025, 1, 1), date(2025, 1, 1))) == [date(2025, 1, 1)]


def test_schedule_rejects_reversed_dates():
    with pytest.raises(ScheduleError):
        ExamSchedule(date(2025, 12, 5), date(2025, 12, 1))


def test_schedule_rejects_end_time_before_start():
    with pytest.raises(ScheduleError):
        ExamSchedule(date(2025, 12, 1), date(2025, 12, 1), time(12, 0), time(9, 0))


def test_schedule_from_form_values():
    schedule = ExamSchedule.from_dict({
        "startDate": "2025-12-01T00:00:00.000Z",
        "endDate": "2025-12-02",
        "startTime": {"hour": "09", "minute": "30"},
        "endTime": "12:30",
        "useSamePlan": "false",
    })
    assert schedule.start_date == date(2025, 12, 1)
    assert schedule.daily_start_time == time(9, 30)
    assert schedule.reuse_same_plan is False
    assert schedule.to_dict()["startTime"] == "09:30"


def test_schedule_bad_date_text():
    with pytest.raises(ScheduleError):
        ExamSchedule.from_dict({"startDate": "01/12/2025", "endDate": "2025-12-02"})
