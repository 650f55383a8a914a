"""
main.py

Command-line entry point for the Exam Seat Allocator.
Reads roster and layout files, seats every student, exports the plan
to Excel and saves it as the current plan.

Example:
    python main.py --roster data/cse.csv --roster data/ece.xlsx --layout data/layout.json \
        --start-date 2025-12-01 --end-date 2025-12-05 --seed 42
"""

import argparse
import logging
import os
import sys
from datetime import date
from typing import List, Optional

from seat_allocator import utils
from seat_allocator.data_loader import load_layout, load_roster
from seat_allocator.engine import generate_seating_plan
from seat_allocator.errors import SeatAllocationError
from seat_allocator.excel_exporter import SeatingExporter
from seat_allocator.models import ExamSchedule
from seat_allocator.reports import AllocationPlan
from seat_allocator.storage import PlanStore

# --- Configuration ---
DATA_DIR = "data"
OUTPUT_DIR = "output"
PLAN_FILE = os.path.join(".data", "seating-plan.json")
SEATING_FILE = os.path.join(OUTPUT_DIR, "Exam_Seating_Plan.xlsx")
DEFAULT_LAYOUT_FILE = os.path.join(DATA_DIR, "layout.json")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate an exam seating plan.")
    parser.add_argument("--roster", action="append", required=True,
                        help="Roster file (.csv, .txt, .xlsx). Repeat for several files.")
    parser.add_argument("--layout", default=DEFAULT_LAYOUT_FILE,
                        help="Layout file (.json, .csv, .xlsx)")
    parser.add_argument("--start-date", default=date.today().isoformat())
    parser.add_argument("--end-date", default=None, help="Defaults to the start date")
    parser.add_argument("--start-time", default=utils.DEFAULT_START_TIME_STR)
    parser.add_argument("--end-time", default=utils.DEFAULT_END_TIME_STR)
    parser.add_argument("--same-plan", dest="same_plan", action="store_true", default=True,
                        help="Reuse the plan on every exam day (default)")
    parser.add_argument("--no-same-plan", dest="same_plan", action="store_false")
    parser.add_argument("--seed", type=int, default=None, help="Fix the random seed for a reproducible plan")
    parser.add_argument("--output", default=SEATING_FILE, help="Excel file to write")
    parser.add_argument("--plan-file", default=PLAN_FILE, help="Where the current plan is saved")
    return parser


def print_plan_summary(plan: AllocationPlan):
    print("\n--- Room Occupancy ---")
    for room_id, branches in plan.summary.items():
        counts = ", ".join(f"{branch or '-'}: {count}" for branch, count in sorted(branches.items()))
        print(f"  ✓ Room {room_id}: {sum(branches.values())} students ({counts})")

    dates = list(plan.exam_dates())
    print(f"\nExam days: {len(dates)} ({dates[0].isoformat()} to {dates[-1].isoformat()})")
    print(f"Seed: {plan.seed}")
    if plan.adjacency_violations:
        print(f"⚠ {plan.adjacency_violations} adjacent seat pairs share a branch (not enough branch mix)")
    else:
        print("✓ No two adjacent seats share a branch")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    print("=" * 70)
    print("EXAM SEAT ALLOCATOR".center(70))
    print("=" * 70)

    try:
        schedule = ExamSchedule(
            start_date=utils.parse_date(args.start_date),
            end_date=utils.parse_date(args.end_date or args.start_date),
            daily_start_time=utils.parse_time(args.start_time),
            daily_end_time=utils.parse_time(args.end_time),
            reuse_same_plan=args.same_plan,
        )

        print("\n📂 Loading data...")
        roster = load_roster(args.roster)
        layout = load_layout(args.layout)
        print(f"✓ Loaded {len(roster)} students")
        print(f"✓ Loaded layout with {layout.total_seats} seats")

        print("\n🔄 Allocating seats...")
        plan = generate_seating_plan(roster, layout, schedule, seed=args.seed)
    except SeatAllocationError as e:
        print(f"\n❌ {e.user_message}")
        return 1
    except FileNotFoundError as e:
        print(f"\n❌ {e}")
        return 1

    print_plan_summary(plan)

    output_dir = os.path.dirname(args.output)
    if output_dir:
        os.makedirs(output_dir, exist_ok=True)
    SeatingExporter(plan).export(args.output)
    PlanStore(args.plan_file).save(plan)

    print("\n--- Seat Allocation Complete. ---")
    print(f"Excel file: {args.output}")
    print(f"Saved plan: {args.plan_file}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
