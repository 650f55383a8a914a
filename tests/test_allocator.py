"""
tests/test_allocator.py

Unit tests for the branch-interleaving seat allocator.
Requires 'pytest' to run.
"""
import pytest

from seat_allocator.allocator import SeatAllocator
from seat_allocator.errors import IncompleteAllocationError
from seat_allocator.layout import flatten_layout
from seat_allocator.validators import find_adjacency_violations

from conftest import make_layout, make_roster


def allocate(counts, *rooms, seed=1):
    roster = make_roster(counts)
    seats = flatten_layout(make_layout(*rooms))
    return roster, seats, SeatAllocator(roster, seats, seed).run()


@pytest.mark.parametrize("seed", range(50))
def test_two_branches_alternate_on_one_room(seed):
    """A(X), B(X), C(Y), D(Y) on 2 benches x 2 must never sit X,X or Y,Y side by side."""
    _, _, assignments = allocate({"X": 2, "Y": 2}, ("101", 2, 2), seed=seed)

    by_position = {a.seat.position: a.branch for a in assignments}
    assert sorted(by_position) == [1, 2, 3, 4]
    for pos in (1, 2, 3):
        assert by_position[pos] != by_position[pos + 1]


@pytest.mark.parametrize("seed", range(20))
def test_every_student_gets_exactly_one_seat(seed):
    roster, seats, assignments = allocate(
        {"CSE": 7, "ECE": 5, "IT": 3, "": 2},
        ("101", 6, 2), ("102", 5, 1), ("103", 4, 2),
        seed=seed,
    )
    assert len(assignments) == len(roster)
    assert len({a.seat for a in assignments}) == len(assignments)
    assert sorted(a.student.id for a in assignments) == sorted(s.id for s in roster)
    assert all(a.seat in seats for a in assignments)


@pytest.mark.parametrize("seed", range(30))
def test_no_violations_when_seats_cover_twice_the_largest_branch(seed):
    # 17 students, 20 seats, largest branch 10: 2 * 10 <= 20
    _, _, assignments = allocate(
        {"CSE": 10, "ECE": 4, "MECH": 3},
        ("101", 5, 2), ("102", 4, 1), ("103", 3, 2),
        seed=seed,
    )
    assert len(assignments) == 17
    assert find_adjacency_violations(assignments) == []


@pytest.mark.parametrize("seed", range(10))
def test_dominant_branch_is_spread_with_empty_seats(seed):
    # X=3, Y=1 in 6 seats: only possible by leaving gaps
    _, _, assignments = allocate({"X": 3, "Y": 1}, ("101", 3, 2), seed=seed)
    assert len(assignments) == 4
    assert find_adjacency_violations(assignments) == []


def test_single_branch_still_seats_everyone():
    _, _, assignments = allocate({"CSE": 4}, ("101", 2, 2))
    assert len(assignments) == 4
    # Unsatisfiable: every neighbouring pair shares the branch
    assert len(find_adjacency_violations(assignments)) == 3


def test_single_branch_uses_spare_seats_as_gaps():
    _, _, assignments = allocate({"CSE": 3}, ("101", 3, 2))
    assert len(assignments) == 3
    assert sorted(a.seat.position for a in assignments) == [1, 3, 5]
    assert find_adjacency_violations(assignments) == []


def test_empty_branch_is_an_ordinary_group():
    _, _, assignments = allocate({"": 2, "CSE": 2}, ("101", 2, 2))
    assert len(assignments) == 4
    assert find_adjacency_violations(assignments) == []


def test_room_change_resets_adjacency():
    # Two single-seat rooms: same branch in both is not a violation
    _, _, assignments = allocate({"CSE": 2}, ("101", 1, 1), ("102", 1, 1))
    assert {a.room_id for a in assignments} == {"101", "102"}
    assert find_adjacency_violations(assignments) == []


def test_same_seed_same_result():
    roster = make_roster({"CSE": 6, "ECE": 6, "IT": 2})
    seats = flatten_layout(make_layout(("101", 4, 2), ("102", 4, 2)))

    first = SeatAllocator(roster, seats, 1234).run()
    second = SeatAllocator(roster, seats, 1234).run()
    assert [a.to_dict() for a in first] == [a.to_dict() for a in second]


def test_bench_labels_follow_positions():
    _, _, assignments = allocate({"X": 2, "Y": 2}, ("101", 2, 2))
    labels = {a.seat.position: a.bench_label for a in assignments}
    assert labels == {1: "1L", 2: "1R", 3: "2L", 4: "2R"}

    _, _, single = allocate({"X": 1, "Y": 1}, ("201", 2, 1))
    assert {a.seat.position: a.bench_label for a in single} == {1: "1", 2: "2"}


def test_short_seat_list_raises_incomplete():
    roster = make_roster({"CSE": 2, "ECE": 1})
    seats = flatten_layout(make_layout(("101", 1, 2)))

    with pytest.raises(IncompleteAllocationError) as exc:
        SeatAllocator(roster, seats, 5).run()
    assert exc.value.seated == 2
    assert exc.value.total == 3
