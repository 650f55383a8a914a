"""
seat_allocator/models.py

Data model for students, the physical exam layout and seating results.
"""

from dataclasses import dataclass, field
from datetime import date, time
from typing import Any, Dict, Iterator, List, Tuple

from . import utils
from .errors import LayoutError, ScheduleError


@dataclass(frozen=True)
class Student:
    """
    One roster entry. `branch` is the category that must not repeat
    on adjacent seats; `contact` is carried through untouched.
    """
    name: str
    id: str
    branch: str = ""
    contact: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "id": self.id, "branch": self.branch, "contact": self.contact}


@dataclass
class Room:
    room_id: str
    bench_count: int
    occupants_per_bench: int = utils.DEFAULT_OCCUPANTS_PER_BENCH

    @property
    def seat_count(self) -> int:
        return self.bench_count * self.occupants_per_bench


@dataclass
class Floor:
    floor_id: str
    rooms: List[Room] = field(default_factory=list)


@dataclass
class Block:
    block_id: str
    floors: List[Floor] = field(default_factory=list)


@dataclass
class Layout:
    """
    Blocks -> floors -> rooms, all in declaration order.
    Counts are validated once here; everything downstream can trust them.
    """
    blocks: List[Block] = field(default_factory=list)

    def __post_init__(self):
        self._validate()

    def _validate(self):
        # (block, floor, room) must be unique across the whole layout,
        # a repeated block or floor id would otherwise duplicate seats.
        seen = set()
        for block, floor, room in self.iter_rooms():
            label = room_label(block.block_id, floor.floor_id, room.room_id)
            if not str(room.room_id).strip():
                raise LayoutError(label, "room number is required")
            key = (block.block_id, floor.floor_id, room.room_id)
            if key in seen:
                raise LayoutError(label, "room declared more than once")
            seen.add(key)
            room.bench_count = utils.parse_positive_int(room.bench_count, label, "bench count")
            room.occupants_per_bench = utils.parse_positive_int(
                room.occupants_per_bench, label, "occupants per bench"
            )

    def iter_rooms(self) -> Iterator[Tuple[Block, Floor, Room]]:
        for block in self.blocks:
            for floor in block.floors:
                for room in floor.rooms:
                    yield block, floor, room

    @property
    def total_seats(self) -> int:
        return sum(room.seat_count for _, _, room in self.iter_rooms())

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Layout":
        """
        Builds a layout from either the nested form
        {"blocks": [{"id", "floors": [{"id", "rooms": [...]}]}]}
        or a flat {"classrooms": [{"block", "floor", "roomNumber", "benchCount"}]}.
        Anything else raises LayoutError.
        """
        _expect(data, dict, "layout", "an object")
        if "classrooms" in data and "blocks" not in data:
            return cls.from_classrooms(data["classrooms"])

        blocks = []
        for raw_block in _expect(data.get("blocks", []), list, "layout", "a list of blocks"):
            _expect(raw_block, dict, "layout", "each block to be an object")
            block_id = str(_first(raw_block, "id", "block", "blockId", default="")).strip()
            where = f"block {block_id}"
            floors = []
            for raw_floor in _expect(raw_block.get("floors", []), list, where, "a list of floors"):
                _expect(raw_floor, dict, where, "each floor to be an object")
                floor_id = str(_first(raw_floor, "id", "floor", "floorId", default="")).strip()
                floor_where = f"block {block_id}, floor {floor_id}"
                rooms = [
                    _room_from_dict(raw_room, block_id, floor_id)
                    for raw_room in _expect(raw_floor.get("rooms", []), list, floor_where, "a list of rooms")
                ]
                floors.append(Floor(floor_id, rooms))
            blocks.append(Block(block_id, floors))
        return cls(blocks)

    @classmethod
    def from_classrooms(cls, rows: List[Dict[str, Any]]) -> "Layout":
        """Groups one-row-per-room declarations into blocks and floors, first appearance first."""
        _expect(rows, list, "layout", "a list of classrooms")
        blocks: Dict[str, Block] = {}
        floors: Dict[Tuple[str, str], Floor] = {}
        for row in rows:
            _expect(row, dict, "layout", "each classroom to be an object")
            block_id = str(_first(row, "block", "blockId", default="")).strip()
            floor_id = str(_first(row, "floor", "floorId", default="")).strip()
            if block_id not in blocks:
                blocks[block_id] = Block(block_id)
            key = (block_id, floor_id)
            if key not in floors:
                floors[key] = Floor(floor_id)
                blocks[block_id].floors.append(floors[key])
            floors[key].rooms.append(_room_from_dict(row, block_id, floor_id))
        return cls(list(blocks.values()))


def room_label(block_id: str, floor_id: str, room_id: str) -> str:
    return f"{room_id} (block {block_id}, floor {floor_id})"


def _expect(value: Any, kind: type, where: str, expected: str) -> Any:
    if not isinstance(value, kind):
        raise LayoutError(where, f"expected {expected}, got {type(value).__name__}")
    return value


def _first(data: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


def _room_from_dict(raw: Dict[str, Any], block_id: str, floor_id: str) -> Room:
    _expect(raw, dict, f"block {block_id}, floor {floor_id}", "each room to be an object")
    room_id = str(_first(raw, "id", "room", "roomNumber", "roomId", default="")).strip()
    benches = _first(raw, "benches", "benchCount", "bench_count")
    if benches is None:
        raise LayoutError(room_label(block_id, floor_id, room_id), "bench count is required")
    occupants = _first(
        raw, "occupantsPerBench", "occupants_per_bench", "seatsPerBench",
        default=utils.DEFAULT_OCCUPANTS_PER_BENCH,
    )
    return Room(room_id=room_id, bench_count=benches, occupants_per_bench=occupants)


@dataclass(frozen=True)
class Seat:
    """One addressable seat. `position` is 1-based within its room."""
    block_id: str
    floor_id: str
    room_id: str
    position: int
    occupants_per_bench: int = utils.DEFAULT_OCCUPANTS_PER_BENCH

    @property
    def room_key(self) -> Tuple[str, str, str]:
        return (self.block_id, self.floor_id, self.room_id)

    @property
    def bench_label(self) -> str:
        return utils.bench_label(self.position, self.occupants_per_bench)


@dataclass(frozen=True)
class SeatingAssignment:
    student: Student
    seat: Seat
    bench_label: str

    @property
    def room_id(self) -> str:
        return self.seat.room_id

    @property
    def branch(self) -> str:
        return self.student.branch

    def to_dict(self) -> Dict[str, Any]:
        return {
            **self.student.to_dict(),
            "block": self.seat.block_id,
            "floor": self.seat.floor_id,
            "room": self.seat.room_id,
            "position": self.seat.position,
            "occupantsPerBench": self.seat.occupants_per_bench,
            "bench": self.bench_label,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SeatingAssignment":
        student = Student(
            name=data["name"], id=data["id"],
            branch=data.get("branch", ""), contact=data.get("contact", ""),
        )
        seat = Seat(
            block_id=data["block"], floor_id=data["floor"], room_id=data["room"],
            position=int(data["position"]),
            occupants_per_bench=int(data.get("occupantsPerBench", utils.DEFAULT_OCCUPANTS_PER_BENCH)),
        )
        return cls(student, seat, data.get("bench") or seat.bench_label)


@dataclass(frozen=True)
class ExamSchedule:
    """Descriptive exam-period metadata; never influences seating."""
    start_date: date
    end_date: date
    daily_start_time: time = utils.parse_time(utils.DEFAULT_START_TIME_STR)
    daily_end_time: time = utils.parse_time(utils.DEFAULT_END_TIME_STR)
    reuse_same_plan: bool = True

    def __post_init__(self):
        if self.end_date < self.start_date:
            raise ScheduleError(
                f"Exam end date {self.end_date.isoformat()} is before start date {self.start_date.isoformat()}"
            )
        if self.daily_end_time <= self.daily_start_time:
            raise ScheduleError(
                f"Daily end time {self.daily_end_time.strftime(utils.TIME_FORMAT)} must be after "
                f"start time {self.daily_start_time.strftime(utils.TIME_FORMAT)}"
            )

    def exam_dates(self) -> Iterator[date]:
        """Fresh iterator over every exam day, both ends included."""
        return utils.iter_exam_dates(self.start_date, self.end_date)

    @property
    def day_count(self) -> int:
        return (self.end_date - self.start_date).days + 1

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExamSchedule":
        reuse = data.get("useSamePlan", data.get("reuseSamePlan", True))
        if isinstance(reuse, str):
            reuse = reuse.strip().lower() in ("1", "true", "yes", "on")
        return cls(
            start_date=utils.parse_date(data.get("startDate")),
            end_date=utils.parse_date(data.get("endDate")),
            daily_start_time=utils.parse_time(data.get("startTime") or utils.DEFAULT_START_TIME_STR),
            daily_end_time=utils.parse_time(data.get("endTime") or utils.DEFAULT_END_TIME_STR),
            reuse_same_plan=bool(reuse),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "startDate": self.start_date.isoformat(),
            "endDate": self.end_date.isoformat(),
            "startTime": self.daily_start_time.strftime(utils.TIME_FORMAT),
            "endTime": self.daily_end_time.strftime(utils.TIME_FORMAT),
            "useSamePlan": self.reuse_same_plan,
        }


# room id -> branch -> occupant count
RoomBranchSummary = Dict[str, Dict[str, int]]
