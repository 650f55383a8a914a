"""
tests/conftest.py

Shared builders for rosters and layouts.
"""
from datetime import date
from typing import Dict, List

import pytest

from seat_allocator.models import Block, ExamSchedule, Floor, Layout, Room, Student


def make_roster(counts: Dict[str, int]) -> List[Student]:
    """{'CSE': 2, 'ECE': 1} -> CSE001, CSE002, ECE001."""
    students = []
    for branch, count in counts.items():
        for i in range(1, count + 1):
            sid = f"{branch or 'NA'}{i:03d}"
            students.append(Student(name=f"Student {sid}", id=sid, branch=branch, contact=f"98{i:08d}"))
    return students


def make_layout(*rooms: tuple) -> Layout:
    """Each room is (room_id, benches, occupants_per_bench), all in block A floor 1."""
    return Layout([Block("A", [Floor("1", [Room(r, b, o) for r, b, o in rooms])])])


@pytest.fixture
def schedule() -> ExamSchedule:
    return ExamSchedule(start_date=date(2025, 12, 1), end_date=date(2025, 12, 3))
