"""
seat_allocator/engine.py

Entry points tying the pipeline together:
normalize -> flatten -> capacity gate -> allocate -> summarize -> sort.

Every call is independent; nothing here touches files or shared state.
"""

import logging
import secrets
from typing import Any, Dict, List, Optional, Sequence

from .allocator import SeatAllocator
from .data_loader import Row, normalize_roster, records_to_students
from .errors import IncompleteAllocationError, NoRecordsError
from .layout import flatten_layout
from .models import ExamSchedule, Layout, Student
from .reports import AllocationPlan
from .validators import check_unique_ids, validate_capacity, validate_plan

LOG = logging.getLogger(__name__)


def new_seed() -> int:
    return secrets.randbits(32)


def generate_seating_plan(roster: Sequence[Student], layout: Layout, schedule: ExamSchedule,
                          seed: Optional[int] = None) -> AllocationPlan:
    """
    Seats every student of an already-normalized roster.
    Raises NoRecordsError, DuplicateIdError, CapacityError before any
    allocation work, or IncompleteAllocationError on an allocator defect.
    """
    if not roster:
        raise NoRecordsError()
    check_unique_ids(roster)

    seats = flatten_layout(layout)
    validate_capacity(len(roster), len(seats))

    if seed is None:
        seed = new_seed()

    allocator = SeatAllocator(roster, seats, seed)
    assignments = allocator.run()
    try:
        validate_plan(assignments, roster)
    except IncompleteAllocationError:
        LOG.error("Allocation produced an invalid plan (seed=%s, students=%d, seats=%d)",
                  seed, len(roster), len(seats))
        raise

    plan = AllocationPlan.build(assignments, schedule, seed)
    LOG.info(
        "Seated %d students in %d seats across %d rooms (seed=%s, empty seats left=%d, adjacency violations=%d)",
        len(roster), len(seats), len(plan.summary), seed, len(seats) - len(roster), plan.adjacency_violations,
    )
    return plan


def generate_from_sources(sources: Sequence[Sequence[Row]], layout: Layout, schedule: ExamSchedule,
                          seed: Optional[int] = None,
                          header_rules: Optional[Dict[str, List[str]]] = None) -> AllocationPlan:
    """Same as generate_seating_plan, starting from raw tabular sources."""
    roster = normalize_roster(sources, header_rules)
    return generate_seating_plan(roster, layout, schedule, seed)


def generate_from_records(records: Sequence[Dict[str, Any]], layout: Layout, schedule: ExamSchedule,
                          seed: Optional[int] = None) -> AllocationPlan:
    """For rosters already pulled out of documents by an external extraction service."""
    return generate_seating_plan(records_to_students(records), layout, schedule, seed)
