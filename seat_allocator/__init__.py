"""
Exam seat allocation engine.
"""

from .engine import generate_from_records, generate_from_sources, generate_seating_plan
from .errors import (
    CapacityError,
    DuplicateIdError,
    IncompleteAllocationError,
    LayoutError,
    NoRecordsError,
    RosterFormatError,
    ScheduleError,
    SchemaError,
    SeatAllocationError,
)
from .models import ExamSchedule, Layout, Student
from .reports import AllocationPlan

__version__ = "1.0.0"
