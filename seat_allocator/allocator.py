"""
seat_allocator/allocator.py

Greedy branch-interleaving seat allocation.

Students are queued per branch (each queue shuffled), the branches are
put in a shuffled round-robin cycle, and the flattened seat list is
walked in order. Each seat takes the next branch in the cycle that
differs from the branch on the previous seat of the same room. The
adjacency rule is best-effort: it never stops a student from being
seated.
"""

import logging
import random
from collections import deque
from typing import Deque, Dict, List, Optional, Sequence

from .errors import IncompleteAllocationError
from .models import Seat, SeatingAssignment, Student

LOG = logging.getLogger(__name__)


class SeatAllocator:
    """
    One allocation run. Deterministic for a given roster, seat list and seed.
    """

    def __init__(self, students: Sequence[Student], seats: Sequence[Seat], seed: int):
        self.students = list(students)
        self.seats = list(seats)
        self.seed = seed
        self.rng = random.Random(seed)

        self.queues: Dict[str, Deque[Student]] = {}
        self.cycle: List[str] = []
        self.cursor = 0

        self.skipped_seats = 0
        self.forced_placements = 0

    def _build_queues(self):
        by_branch: Dict[str, List[Student]] = {}
        for student in self.students:
            by_branch.setdefault(student.branch, []).append(student)

        # Sorted first so the shuffle only depends on the seed, not roster order of branches.
        self.cycle = sorted(by_branch)
        for branch in self.cycle:
            members = by_branch[branch]
            self.rng.shuffle(members)
            self.queues[branch] = deque(members)
        self.rng.shuffle(self.cycle)
        self.cursor = 0

    def _remaining(self) -> int:
        return sum(len(q) for q in self.queues.values())

    def _cycle_order(self) -> List[str]:
        """Non-empty branches starting at the cursor."""
        n = len(self.cycle)
        order = [self.cycle[(self.cursor + i) % n] for i in range(n)]
        return [branch for branch in order if self.queues[branch]]

    def _choose_branch(self, previous: Optional[str], seats_left: int) -> Optional[str]:
        """
        Returns the branch to seat next, or None to leave this seat empty.

        A branch holding at least half of the remaining seats
        (2k >= seats_left + 1) goes first, otherwise it could not be
        spread out in the seats still available.
        """
        order = self._cycle_order()
        candidates = [branch for branch in order if branch != previous]

        urgent = [b for b in candidates if 2 * len(self.queues[b]) >= seats_left + 1]
        if urgent:
            return max(urgent, key=lambda b: len(self.queues[b]))
        if candidates:
            return candidates[0]

        # Only the previous seat's branch is left.
        if seats_left > self._remaining():
            return None
        self.forced_placements += 1
        return order[0]

    def _advance_cursor(self, branch: str):
        self.cursor = (self.cycle.index(branch) + 1) % len(self.cycle)

    def run(self) -> List[SeatingAssignment]:
        """Walks the seats in order and returns assignments in seating order."""
        self._build_queues()
        assignments: List[SeatingAssignment] = []
        total = len(self.students)

        previous: Optional[str] = None
        last_seat: Optional[Seat] = None

        for index, seat in enumerate(self.seats):
            if len(assignments) == total:
                break

            # Adjacency only holds for the immediately preceding position of the same room.
            if last_seat is None or last_seat.room_key != seat.room_key or last_seat.position != seat.position - 1:
                previous = None

            seats_left = len(self.seats) - index
            branch = self._choose_branch(previous, seats_left)
            last_seat = seat

            if branch is None:
                self.skipped_seats += 1
                previous = None
                continue

            student = self.queues[branch].popleft()
            self._advance_cursor(branch)
            assignments.append(SeatingAssignment(student=student, seat=seat, bench_label=seat.bench_label))
            previous = branch

        if len(assignments) != total:
            LOG.error(
                "Allocation incomplete: seated=%d total=%d seats=%d seed=%s skipped=%d",
                len(assignments), total, len(self.seats), self.seed, self.skipped_seats,
            )
            raise IncompleteAllocationError(seated=len(assignments), total=total)

        if self.forced_placements:
            LOG.warning(
                "Adjacency rule broken %d times (seed=%s): not enough other branches left",
                self.forced_placements, self.seed,
            )
        return assignments
