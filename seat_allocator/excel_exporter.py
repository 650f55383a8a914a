"""
seat_allocator/excel_exporter.py

Writes a seating plan to an Excel workbook: summary, student list,
exam schedule and one bench-grid sheet per room.
"""

import logging
import re
from typing import IO, List, Set, Union

import openpyxl
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from . import utils
from .models import SeatingAssignment
from .reports import AllocationPlan

LOG = logging.getLogger(__name__)

# --- Styling Constants ---
HEADER_FILL = PatternFill(start_color="4F81BD", end_color="4F81BD", fill_type="solid")
HEADER_FONT = Font(color="FFFFFF", bold=True, size=11)
TITLE_FONT = Font(size=12, bold=True)
MARKER_FILL = PatternFill(start_color="D3D3D3", end_color="D3D3D3", fill_type="solid")
MARKER_FONT = Font(size=11, bold=True)
CENTER_ALIGN = Alignment(horizontal="center", vertical="center", wrap_text=True)
THIN_BORDER_SIDE = Side(style="thin", color="BFBFBF")
THIN_BORDER = Border(left=THIN_BORDER_SIDE, right=THIN_BORDER_SIDE, top=THIN_BORDER_SIDE, bottom=THIN_BORDER_SIDE)

STUDENT_COLUMNS = ["Hall Ticket", "Name", "Branch", "Contact", "Block", "Floor", "Room", "Bench"]
MAX_SHEET_TITLE = 31
_INVALID_TITLE_CHARS = re.compile(r"[\[\]:*?/\\]")


class SeatingExporter:
    def __init__(self, plan: AllocationPlan):
        self.plan = plan
        self._used_titles: Set[str] = set()

    def export(self, target: Union[str, IO[bytes]]):
        """Saves the workbook to a path or a binary buffer."""
        wb = self.build_workbook()
        wb.save(target)
        LOG.info("Exported seating plan for %d students", len(self.plan.assignments))

    def build_workbook(self) -> openpyxl.Workbook:
        self._used_titles = set()
        wb = openpyxl.Workbook()
        wb.remove(wb.active)

        self._write_summary(self._create_sheet(wb, "Summary"))
        self._write_students(self._create_sheet(wb, "Students"))
        self._write_schedule(self._create_sheet(wb, "Exam Schedule"))
        for (block_id, floor_id, room_id), assignments in self.plan.by_room().items():
            ws = self._create_sheet(wb, f"{block_id}-{floor_id}-{room_id}")
            self._write_room(ws, block_id, floor_id, room_id, assignments)
        return wb

    def _create_sheet(self, wb: openpyxl.Workbook, title: str) -> Worksheet:
        base = _INVALID_TITLE_CHARS.sub("_", title)[:MAX_SHEET_TITLE] or "Sheet"
        candidate = base
        n = 2
        while candidate.lower() in self._used_titles:
            suffix = f"~{n}"
            candidate = base[:MAX_SHEET_TITLE - len(suffix)] + suffix
            n += 1
        self._used_titles.add(candidate.lower())
        return wb.create_sheet(title=candidate)

    def _write_header(self, ws: Worksheet, row: int, headers: List[str]):
        for col, header in enumerate(headers, 1):
            cell = ws.cell(row, col, header)
            cell.fill = HEADER_FILL
            cell.font = HEADER_FONT
            cell.alignment = CENTER_ALIGN
            cell.border = THIN_BORDER

    def _write_summary(self, ws: Worksheet):
        ws.cell(1, 1, "Room Occupancy Summary").font = TITLE_FONT
        self._write_header(ws, 3, ["Room", "Branch", "Students"])
        row = 4
        for room_id, branches in self.plan.summary.items():
            for branch, count in sorted(branches.items()):
                ws.cell(row, 1, room_id)
                ws.cell(row, 2, branch or "-")
                ws.cell(row, 3, count)
                row += 1
        ws.cell(row, 1, "Total").font = Font(bold=True)
        ws.cell(row, 3, len(self.plan.assignments)).font = Font(bold=True)
        _set_widths(ws, [14, 18, 10])

    def _write_students(self, ws: Worksheet):
        self._write_header(ws, 1, STUDENT_COLUMNS)
        for row, a in enumerate(self.plan.assignments, 2):
            values = [a.student.id, a.student.name, a.student.branch, a.student.contact,
                      a.seat.block_id, a.seat.floor_id, a.seat.room_id, a.bench_label]
            for col, value in enumerate(values, 1):
                ws.cell(row, col, value).border = THIN_BORDER
        ws.freeze_panes = "A2"
        _set_widths(ws, [16, 28, 12, 16, 8, 8, 10, 8])

    def _write_schedule(self, ws: Worksheet):
        schedule = self.plan.schedule
        ws.cell(1, 1, "Exam Schedule").font = TITLE_FONT
        ws.cell(2, 1, "Timing")
        ws.cell(2, 2, f"{schedule.daily_start_time.strftime(utils.TIME_FORMAT)} - "
                      f"{schedule.daily_end_time.strftime(utils.TIME_FORMAT)}")
        ws.cell(3, 1, "Same plan every day")
        ws.cell(3, 2, "Yes" if schedule.reuse_same_plan else "No")
        self._write_header(ws, 5, ["Date", "Day"])
        for row, exam_date in enumerate(self.plan.exam_dates(), 6):
            ws.cell(row, 1, exam_date.strftime("%d/%m/%Y"))
            ws.cell(row, 2, exam_date.strftime("%A"))
        _set_widths(ws, [20, 16])

    def _write_room(self, ws: Worksheet, block_id: str, floor_id: str, room_id: str,
                    assignments: List[SeatingAssignment]):
        """Bench rows top to bottom, one column per seat on the bench."""
        per_bench = assignments[0].seat.occupants_per_bench
        width = per_bench + 1

        ws.merge_cells(start_row=1, start_column=1, end_row=1, end_column=width)
        ws.cell(1, 1, f"Block {block_id} / Floor {floor_id} / Room {room_id}").font = TITLE_FONT

        self._write_marker(ws, 3, width, "WINDOW")
        headers = ["Bench"] + [_side_header(i, per_bench) for i in range(1, per_bench + 1)]
        self._write_header(ws, 4, headers)

        by_position = {a.seat.position: a for a in assignments}
        last_position = max(by_position)
        bench_count = -(-last_position // per_bench)

        row = 5
        for bench in range(1, bench_count + 1):
            ws.cell(row, 1, bench).alignment = CENTER_ALIGN
            for slot in range(1, per_bench + 1):
                occupant = by_position.get((bench - 1) * per_bench + slot)
                text = f"{occupant.student.id}\n{occupant.student.branch}" if occupant else ""
                cell = ws.cell(row, slot + 1, text)
                cell.alignment = CENTER_ALIGN
                cell.border = THIN_BORDER
            row += 1

        self._write_marker(ws, row, width, "DOOR")
        _set_widths(ws, [8] + [18] * per_bench)

    def _write_marker(self, ws: Worksheet, row: int, width: int, label: str):
        ws.merge_cells(start_row=row, start_column=1, end_row=row, end_column=width)
        cell = ws.cell(row, 1, label)
        cell.font = MARKER_FONT
        cell.alignment = CENTER_ALIGN
        cell.fill = MARKER_FILL


def _side_header(slot: int, per_bench: int) -> str:
    if per_bench == 2:
        return "Left" if slot == 1 else "Right"
    return f"Seat {slot}"


def _set_widths(ws: Worksheet, widths: List[int]):
    for col, width in enumerate(widths, 1):
        ws.column_dimensions[get_column_letter(col)].width = width
