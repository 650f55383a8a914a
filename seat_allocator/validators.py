"""
seat_allocator/validators.py

Pre-allocation gates (duplicate ids, capacity) and post-allocation
checks over a finished assignment list.
"""

from typing import List, Sequence, Set, Tuple

from .errors import CapacityError, DuplicateIdError, IncompleteAllocationError
from .layout import is_adjacent
from .models import SeatingAssignment, Student


def check_unique_ids(students: Sequence[Student]):
    """Ids are compared case-insensitively; the first repeat wins the error."""
    seen: Set[str] = set()
    for student in students:
        key = student.id.strip().casefold()
        if key in seen:
            raise DuplicateIdError(student.id)
        seen.add(key)


def validate_capacity(roster_size: int, seat_count: int):
    """Hard precondition: raises CapacityError when the roster does not fit."""
    if roster_size > seat_count:
        raise CapacityError(required=roster_size, available=seat_count)


def find_adjacency_violations(assignments: Sequence[SeatingAssignment]) -> List[Tuple[SeatingAssignment, SeatingAssignment]]:
    """
    Pairs of occupied, adjacent seats in the same room holding students
    of the same branch. Empty seats break adjacency.
    """
    ordered = sorted(assignments, key=lambda a: (a.seat.room_key, a.seat.position))
    violations = []
    for first, second in zip(ordered, ordered[1:]):
        if is_adjacent(first.seat, second.seat) and first.branch == second.branch:
            violations.append((first, second))
    return violations


def validate_plan(assignments: Sequence[SeatingAssignment], roster: Sequence[Student]):
    """
    Checks the assignment list is a bijection from the roster onto
    distinct seats. Any failure means an allocator defect.
    """
    if len(assignments) != len(roster):
        raise IncompleteAllocationError(seated=len(assignments), total=len(roster))

    seats = {a.seat for a in assignments}
    ids = {a.student.id for a in assignments}
    roster_ids = {s.id for s in roster}
    if len(seats) != len(assignments) or ids != roster_ids:
        seated = min(len(seats), len(ids & roster_ids))
        raise IncompleteAllocationError(seated=seated, total=len(roster))
