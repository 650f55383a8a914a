"""
seat_allocator/utils.py

Shared constants and small parsing helpers.
"""
import math
import re
from datetime import date, datetime, time, timedelta
from typing import Any, Dict, Iterator, List

from .errors import LayoutError, ScheduleError

# --- Roster Header Synonyms ---
# Canonical field -> accepted column names, in priority order.
# Matching is done on the normalized form (see normalize_header).
HEADER_SYNONYMS: Dict[str, List[str]] = {
    "name": ["name", "student name", "full name", "candidate name", "studentname", "student"],
    "id": [
        "id", "hall ticket number", "hall ticket no", "hall ticket", "hallticketnumber",
        "roll number", "roll no", "roll", "registration number", "reg no", "register number",
        "student id", "usn", "enrollment number",
    ],
    "branch": ["branch", "department", "dept", "group", "stream", "course", "discipline"],
    "contact": [
        "contact", "contact number", "contactnumber", "phone", "phone number", "mobile",
        "mobile number", "mobile no", "phone no",
    ],
}

REQUIRED_FIELDS: List[str] = ["name", "id", "branch", "contact"]
# Rows missing one of these are dropped as blank/malformed.
ROW_KEY_FIELDS: List[str] = ["name", "id"]

MIN_CONTAINS_LENGTH: int = 3

# --- Layout Defaults ---
DEFAULT_OCCUPANTS_PER_BENCH: int = 2

# Layout file column synonyms, matched like roster headers.
LAYOUT_COLUMNS: Dict[str, List[str]] = {
    "block": ["block", "block id", "building"],
    "floor": ["floor", "floor id", "level"],
    "room": ["room", "room number", "room no", "room id", "classroom"],
    "benches": ["benches", "bench count", "no of benches", "number of benches"],
    "occupantsPerBench": ["occupants per bench", "seats per bench", "occupants", "per bench"],
}

# --- Schedule Defaults ---
DATE_FORMAT: str = "%Y-%m-%d"
TIME_FORMAT: str = "%H:%M"
DEFAULT_START_TIME_STR: str = "09:00"
DEFAULT_END_TIME_STR: str = "12:00"

_NON_ALNUM = re.compile(r"[^0-9a-z]+")


def normalize_header(header: Any) -> str:
    """Casefolds and drops everything but letters and digits: 'Roll No.' -> 'rollno'."""
    if header is None:
        return ""
    return _NON_ALNUM.sub("", str(header).casefold())


def clean_cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and math.isnan(value):
        return ""
    text = str(value).strip()
    if text.lower() in ("nan", "none"):
        return ""
    # Excel turns numeric roll numbers into floats: 1001 -> 1001.0
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return text


def parse_positive_int(value: Any, room_label: str, field_name: str) -> int:
    """
    Coerces a layout count to a positive int. Accepts ints and integer
    strings; rejects booleans, fractional numbers, blanks and text.
    """
    if isinstance(value, bool):
        raise LayoutError(room_label, f"{field_name} must be a number, got {value!r}")
    if isinstance(value, int):
        number = value
    elif isinstance(value, float):
        if math.isnan(value) or not value.is_integer():
            raise LayoutError(room_label, f"{field_name} must be a whole number, got {value!r}")
        number = int(value)
    elif isinstance(value, str) and re.fullmatch(r"\s*[+-]?\d+\s*", value):
        number = int(value)
    else:
        raise LayoutError(room_label, f"{field_name} must be a whole number, got {value!r}")

    if number <= 0:
        raise LayoutError(room_label, f"{field_name} must be positive, got {number}")
    return number


def bench_label(position: int, occupants_per_bench: int) -> str:
    """
    Bench number for a 1-based seat position, with an L/R side suffix on
    two-seat benches. Benches holding three or more get '-<slot>'.
    """
    bench_number = math.ceil(position / occupants_per_bench)
    if occupants_per_bench == 1:
        return str(bench_number)
    if occupants_per_bench == 2:
        side = "L" if position % 2 == 1 else "R"
        return f"{bench_number}{side}"
    slot = (position - 1) % occupants_per_bench + 1
    return f"{bench_number}-{slot}"


def parse_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value or "").strip()
    try:
        # Accept full ISO timestamps too ('2025-12-01T00:00:00.000Z')
        return datetime.strptime(text[:10], DATE_FORMAT).date()
    except ValueError:
        raise ScheduleError(f"Invalid date '{text}', expected YYYY-MM-DD")


def parse_time(value: Any) -> time:
    if isinstance(value, time):
        return value
    if isinstance(value, dict):
        value = f"{value.get('hour', '')}:{value.get('minute', '')}"
    text = str(value or "").strip()
    try:
        return datetime.strptime(text, TIME_FORMAT).time()
    except ValueError:
        raise ScheduleError(f"Invalid time '{text}', expected HH:MM")


def iter_exam_dates(start_date: date, end_date: date) -> Iterator[date]:
    """Every calendar day from start_date to end_date inclusive."""
    current = start_date
    while current <= end_date:
        yield current
        current += timedelta(days=1)
