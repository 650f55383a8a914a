"""
Flask web interface for the Exam Seat Allocator.

Admins upload rosters and a room layout to generate the plan; students
look up their seat by hall ticket number; faculty are checked against
the authorization file.

Run: python web_app.py
Visit: http://localhost:5000
"""

import io
import json
import os
import secrets
from typing import List

from flask import Flask, jsonify, render_template_string, request, send_file

from seat_allocator.auth import load_faculty_auth, read_faculty_auth_text, save_faculty_auth, validate_faculty
from seat_allocator.data_loader import read_roster_bytes
from seat_allocator.engine import generate_from_sources
from seat_allocator.errors import IncompleteAllocationError, SeatAllocationError
from seat_allocator.excel_exporter import SeatingExporter
from seat_allocator.models import ExamSchedule, Layout
from seat_allocator.storage import PlanStore

app = Flask(__name__)
app.secret_key = secrets.token_hex(16)

# --- Configuration ---
app.config.setdefault("PLAN_FILE", os.path.join(".data", "seating-plan.json"))
app.config.setdefault("FACULTY_AUTH_FILE", os.path.join(".data", "faculty-auth.json"))

NO_PLAN_MESSAGE = "No seating plan has been generated yet."
AUTH_FILE_MISSING = "Authorization file not found."

INDEX_PAGE = """
<!DOCTYPE html>
<html>
<head><title>Exam Seat Allocator</title></head>
<body style="font-family: sans-serif; max-width: 720px; margin: 40px auto;">
  <h1>🪑 Exam Seat Allocator</h1>
  {% if has_plan %}
    <p>A seating plan is available for {{ student_count }} students
       ({{ start_date }} to {{ end_date }}).</p>
    <form action="/api/seat" method="get">
      <input name="hallTicket" placeholder="Hall ticket number" required>
      <button type="submit">Find my seat</button>
    </form>
    <p><a href="/download/seating.xlsx">Download seating plan (Excel)</a></p>
  {% else %}
    <p>{{ no_plan_message }}</p>
  {% endif %}
</body>
</html>
"""


def _get_store() -> PlanStore:
    return PlanStore(app.config["PLAN_FILE"])


def _error(message: str, status: int):
    return jsonify({"success": False, "error": message}), status


def _read_uploaded_sources() -> List[list]:
    sources = []
    for upload in request.files.getlist("roster"):
        if not upload or not upload.filename:
            continue
        sources.append(read_roster_bytes(upload.filename, upload.read()))
    return sources


@app.route("/")
def index():
    plan = _get_store().load()
    return render_template_string(
        INDEX_PAGE,
        has_plan=plan is not None,
        student_count=len(plan.assignments) if plan else 0,
        start_date=plan.schedule.start_date.isoformat() if plan else "",
        end_date=plan.schedule.end_date.isoformat() if plan else "",
        no_plan_message=NO_PLAN_MESSAGE,
    )


@app.route("/api/plan", methods=["POST"])
def create_plan():
    """Admin: generate a new plan from uploaded rosters and a layout."""
    try:
        layout_data = json.loads(request.form.get("layout", ""))
    except json.JSONDecodeError:
        return _error("Layout must be valid JSON.", 400)

    seed_text = request.form.get("seed", "").strip()
    if seed_text and not seed_text.lstrip("-").isdigit():
        return _error("Seed must be a whole number.", 400)
    seed = int(seed_text) if seed_text else None

    try:
        sources = _read_uploaded_sources()
        if not sources:
            return _error("Please upload at least one roster file.", 400)
        if isinstance(layout_data, list):
            layout = Layout.from_classrooms(layout_data)
        else:
            layout = Layout.from_dict(layout_data)
        schedule = ExamSchedule.from_dict(request.form)
        plan = generate_from_sources(sources, layout, schedule, seed=seed)
    except IncompleteAllocationError as e:
        print(f"ERROR during seat allocation: {e}")
        return _error(e.user_message, 500)
    except SeatAllocationError as e:
        return _error(e.user_message, 400)

    _get_store().save(plan)
    print(f"✓ Generated seating plan for {len(plan.assignments)} students (seed {plan.seed})")
    return jsonify({"success": True, **plan.to_dict()})


@app.route("/api/plan", methods=["GET"])
def get_plan():
    plan = _get_store().load()
    if plan is None:
        return _error(NO_PLAN_MESSAGE, 404)
    return jsonify({"success": True, **plan.to_dict()})


@app.route("/api/plan", methods=["DELETE"])
def delete_plan():
    _get_store().clear()
    return jsonify({"success": True})


@app.route("/api/seat")
def student_seat():
    hall_ticket = request.args.get("hallTicket", "").strip()
    if not hall_ticket:
        return _error("No hall ticket number provided.", 400)

    plan = _get_store().load()
    if plan is None:
        return _error(NO_PLAN_MESSAGE, 404)

    assignment = plan.find_student(hall_ticket)
    if assignment is None:
        return _error(f'No seat found for hall ticket "{hall_ticket}".', 404)
    return jsonify({"success": True, "seat": assignment.to_dict(), "examConfig": plan.schedule.to_dict()})


@app.route("/download/seating.xlsx")
def download_seating():
    plan = _get_store().load()
    if plan is None:
        return NO_PLAN_MESSAGE, 404

    buffer = io.BytesIO()
    SeatingExporter(plan).export(buffer)
    buffer.seek(0)
    return send_file(
        buffer,
        as_attachment=True,
        download_name="Exam_Seating_Plan.xlsx",
        mimetype="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    )


@app.route("/api/faculty/validate", methods=["POST"])
def faculty_validate():
    data = request.get_json(silent=True) or {}
    try:
        auth_data = load_faculty_auth(app.config["FACULTY_AUTH_FILE"])
    except FileNotFoundError:
        return jsonify({"isValid": False, "error": AUTH_FILE_MISSING}), 503
    except ValueError as e:
        print(f"Error reading faculty auth data: {e}")
        return jsonify({"isValid": False, "error": "Failed to read faculty authorization data."}), 500

    is_valid, error = validate_faculty(auth_data, data.get("facultyId", ""), data.get("secureKey"))
    return jsonify({"isValid": is_valid, "error": error})


@app.route("/api/faculty/auth", methods=["GET"])
def faculty_auth_get():
    """Admin: the raw authorization document, for editing."""
    try:
        data = read_faculty_auth_text(app.config["FACULTY_AUTH_FILE"])
    except FileNotFoundError:
        return _error(AUTH_FILE_MISSING, 404)
    except OSError as e:
        print(f"Error reading faculty auth data: {e}")
        return _error("Failed to read faculty authorization data.", 500)
    return jsonify({"success": True, "data": data})


@app.route("/api/faculty/auth", methods=["PUT"])
def faculty_auth_update():
    """Admin: replace the authorization document with the request body."""
    try:
        save_faculty_auth(app.config["FACULTY_AUTH_FILE"], request.get_data(as_text=True))
    except ValueError as e:
        return _error(str(e), 400)
    except OSError as e:
        print(f"Error writing faculty auth data: {e}")
        return _error("Failed to save faculty authorization data.", 500)
    return jsonify({"success": True})


# --- Main Execution ---
if __name__ == "__main__":
    print("=" * 70)
    print("🌐 Starting Exam Seat Allocator Web Interface".center(70))
    print("=" * 70)
    print("\n📍 Open your browser and visit: http://localhost:5000")
    print("⚡ Press Ctrl+C to stop the server\n")
    app.run(debug=True, port=5000, use_reloader=False)
