"""
seat_allocator/reports.py

Derived views over a finished allocation: exam dates, the per-room
branch summary and the AllocationPlan handed back to callers.
"""

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

from .models import ExamSchedule, RoomBranchSummary, SeatingAssignment
from .validators import find_adjacency_violations


def build_room_branch_summary(assignments: Sequence[SeatingAssignment]) -> RoomBranchSummary:
    """room id -> branch -> count. Rooms and branches appear in first-seen order."""
    summary: RoomBranchSummary = {}
    for assignment in assignments:
        branches = summary.setdefault(assignment.room_id, {})
        branches[assignment.branch] = branches.get(assignment.branch, 0) + 1
    return summary


def sort_by_student_id(assignments: Sequence[SeatingAssignment]) -> List[SeatingAssignment]:
    return sorted(assignments, key=lambda a: a.student.id)


@dataclass(frozen=True)
class AllocationPlan:
    """
    The engine's output: assignments sorted by student id, the exam
    schedule and the seed that produced them. The summary is rebuilt
    from the assignments on every access.
    """
    assignments: Tuple[SeatingAssignment, ...]
    schedule: ExamSchedule
    seed: Optional[int] = None

    @classmethod
    def build(cls, assignments: Sequence[SeatingAssignment], schedule: ExamSchedule,
              seed: Optional[int] = None) -> "AllocationPlan":
        return cls(tuple(sort_by_student_id(assignments)), schedule, seed)

    @property
    def summary(self) -> RoomBranchSummary:
        return build_room_branch_summary(self.assignments)

    def exam_dates(self) -> Iterator[date]:
        return self.schedule.exam_dates()

    @property
    def adjacency_violations(self) -> int:
        return len(find_adjacency_violations(self.assignments))

    def find_student(self, hall_ticket: str) -> Optional[SeatingAssignment]:
        """Case-insensitive lookup by student id."""
        key = (hall_ticket or "").strip().casefold()
        if not key:
            return None
        for assignment in self.assignments:
            if assignment.student.id.casefold() == key:
                return assignment
        return None

    def by_room(self) -> Dict[Tuple[str, str, str], List[SeatingAssignment]]:
        """Assignments per (block, floor, room), each list in seat order."""
        rooms: Dict[Tuple[str, str, str], List[SeatingAssignment]] = {}
        for assignment in sorted(self.assignments, key=lambda a: (a.seat.room_key, a.seat.position)):
            rooms.setdefault(assignment.seat.room_key, []).append(assignment)
        return rooms

    def to_dict(self) -> Dict[str, Any]:
        return {
            "plan": [a.to_dict() for a in self.assignments],
            "examConfig": self.schedule.to_dict(),
            "summary": self.summary,
            "seed": self.seed,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AllocationPlan":
        assignments = [SeatingAssignment.from_dict(row) for row in data.get("plan", [])]
        return cls.build(assignments, ExamSchedule.from_dict(data["examConfig"]), data.get("seed"))
