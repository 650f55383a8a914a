"""
seat_allocator/errors.py

Error kinds raised by the allocation engine. None of them are retried
internally; callers turn them into user-facing messages.
"""


class SeatAllocationError(Exception):
    """Base class for every error the engine raises."""

    @property
    def user_message(self) -> str:
        return str(self)


class SchemaError(SeatAllocationError):
    """A required roster column could not be located under any known synonym."""

    def __init__(self, field: str, source_index: int = 0):
        self.field = field
        self.source_index = source_index
        super().__init__(
            f"Roster source {source_index + 1} has no column for required field '{field}'"
        )


class NoRecordsError(SeatAllocationError):
    def __init__(self):
        super().__init__("No student records were found in the supplied roster")


class DuplicateIdError(SeatAllocationError):
    def __init__(self, student_id: str):
        self.student_id = student_id
        super().__init__(f"Duplicate student id '{student_id}' in roster")


class LayoutError(SeatAllocationError):
    """A layout entry is malformed; names the offending room."""

    def __init__(self, room: str, reason: str):
        self.room = room
        self.reason = reason
        super().__init__(f"Invalid layout for room {room}: {reason}")


class CapacityError(SeatAllocationError):
    def __init__(self, required: int, available: int):
        self.required = required
        self.available = available
        super().__init__(
            f"Not enough seats for all students. {required} students need seats, "
            f"but capacity is only {available}."
        )


class IncompleteAllocationError(SeatAllocationError):
    """Internal invariant violated: fewer students seated than exist."""

    def __init__(self, seated: int, total: int):
        self.seated = seated
        self.total = total
        super().__init__(
            f"Allocation seated {seated} of {total} students (short by {total - seated})"
        )

    @property
    def user_message(self) -> str:
        return "The seating plan could not be generated. Please contact the administrator."


class ScheduleError(SeatAllocationError):
    """Exam dates or daily times are invalid."""


class RosterFormatError(SeatAllocationError):
    """A roster file could not be decoded or parsed as a table."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Could not read roster file '{source}': {reason}")
