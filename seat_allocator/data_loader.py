"""
seat_allocator/data_loader.py

Turns roster files/text (with fuzzy headers) into Student records and
reads layout declarations from JSON, CSV or Excel files.
"""

import csv
import io
import json
import logging
import os
import zipfile
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from . import utils
from .errors import LayoutError, NoRecordsError, RosterFormatError, SchemaError
from .models import Layout, Student
from .validators import check_unique_ids

LOG = logging.getLogger(__name__)

Row = Sequence[Any]

EXCEL_EXTENSIONS = (".xlsx", ".xlsm", ".xls")


def _claim_columns(headers: Sequence[Any], rules: Dict[str, List[str]],
                   fields: Sequence[str]) -> Dict[str, int]:
    """
    Two passes: exact synonym matches first, then headers that contain a
    synonym. Each header column is claimed by at most one field.
    """
    normalized = [utils.normalize_header(h) for h in headers]
    found: Dict[str, int] = {}
    claimed = set()

    for field_name in fields:
        for synonym in rules.get(field_name, []):
            target = utils.normalize_header(synonym)
            for idx, header in enumerate(normalized):
                if idx not in claimed and header == target:
                    found[field_name] = idx
                    claimed.add(idx)
                    break
            if field_name in found:
                break

    for field_name in fields:
        if field_name in found:
            continue
        for synonym in rules.get(field_name, []):
            target = utils.normalize_header(synonym)
            if len(target) < utils.MIN_CONTAINS_LENGTH:
                continue
            for idx, header in enumerate(normalized):
                if idx not in claimed and target in header:
                    found[field_name] = idx
                    claimed.add(idx)
                    break
            if field_name in found:
                break

    return found


def match_headers(headers: Sequence[Any],
                  header_rules: Optional[Dict[str, List[str]]] = None,
                  source_index: int = 0) -> Dict[str, int]:
    """
    Maps each canonical Student field to a column index.
    Raises SchemaError naming the first field with no matching header.
    """
    rules = header_rules or utils.HEADER_SYNONYMS
    found = _claim_columns(headers, rules, utils.REQUIRED_FIELDS)
    for field_name in utils.REQUIRED_FIELDS:
        if field_name not in found:
            raise SchemaError(field_name, source_index)
    return found


def _is_blank_row(row: Row) -> bool:
    return all(utils.clean_cell(cell) == "" for cell in row)


def _rows_to_students(rows: Sequence[Row], header_rules: Optional[Dict[str, List[str]]],
                      source_index: int) -> List[Student]:
    rows = [row for row in rows if not _is_blank_row(row)]
    if not rows:
        LOG.warning("Roster source %d is empty", source_index + 1)
        return []

    columns = match_headers(rows[0], header_rules, source_index)
    students: List[Student] = []
    dropped = 0

    for row in rows[1:]:
        values = {
            field_name: utils.clean_cell(row[idx]) if idx < len(row) else ""
            for field_name, idx in columns.items()
        }
        if any(not values[key] for key in utils.ROW_KEY_FIELDS):
            dropped += 1
            continue
        students.append(Student(
            name=values["name"],
            id=values["id"],
            branch=values["branch"],
            contact=values["contact"],
        ))

    if dropped:
        LOG.info("Roster source %d: dropped %d rows without a name or id", source_index + 1, dropped)
    return students


def normalize_roster(sources: Sequence[Sequence[Row]],
                     header_rules: Optional[Dict[str, List[str]]] = None) -> List[Student]:
    """
    Normalizes one or more tabular sources (header row first) into a
    roster, concatenated in source order then row order.
    """
    roster: List[Student] = []
    for source_index, rows in enumerate(sources):
        students = _rows_to_students(rows, header_rules, source_index)
        LOG.info("Roster source %d: %d students", source_index + 1, len(students))
        roster.extend(students)

    if not roster:
        raise NoRecordsError()
    check_unique_ids(roster)
    return roster


def records_to_students(records: Sequence[Dict[str, Any]],
                        header_rules: Optional[Dict[str, List[str]]] = None) -> List[Student]:
    """
    Normalizes pre-extracted records (e.g. from a document-extraction
    service). Dict keys act as the header row; the output is untrusted
    and goes through the same checks as file input.
    """
    headers: List[str] = []
    for record in records:
        for key in record:
            if key not in headers:
                headers.append(key)
    rows: List[Row] = [headers]
    rows.extend([record.get(key) for key in headers] for record in records)
    return normalize_roster([rows], header_rules)


def _sniff_delimiter(text: str) -> str:
    sample = "\n".join(text.splitlines()[:20])
    try:
        return csv.Sniffer().sniff(sample, delimiters=",;\t|").delimiter
    except csv.Error:
        return ","


def read_roster_text(text: str, source_name: str = "roster") -> List[List[Any]]:
    """Parses delimited text into rows of strings, header row included."""
    if not text.strip():
        return []
    try:
        df = pd.read_csv(
            io.StringIO(text),
            sep=_sniff_delimiter(text),
            header=None,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            skipinitialspace=True,
            engine="python",
        )
    except pd.errors.ParserError as e:
        raise RosterFormatError(source_name, str(e).strip())
    return df.values.tolist()


def _read_excel(source: Any, source_name: str) -> List[List[Any]]:
    try:
        df = pd.read_excel(source, header=None, dtype=object)
    except (ValueError, zipfile.BadZipFile) as e:
        raise RosterFormatError(source_name, f"not a readable Excel workbook ({e})")
    return df.values.tolist()


def _decode(data: bytes, source_name: str) -> str:
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise RosterFormatError(source_name, "file is not UTF-8 text")


def _read_table_file(filepath: str) -> List[List[Any]]:
    if not os.path.exists(filepath):
        raise FileNotFoundError(f"File not found: {filepath}")

    source_name = os.path.basename(filepath)
    if filepath.lower().endswith(EXCEL_EXTENSIONS):
        return _read_excel(filepath, source_name)

    with open(filepath, mode="rb") as f:
        return read_roster_text(_decode(f.read(), source_name), source_name)


def read_roster_bytes(filename: str, data: bytes) -> List[List[Any]]:
    """Parses an uploaded roster; the extension picks Excel or delimited text."""
    if filename.lower().endswith(EXCEL_EXTENSIONS):
        return _read_excel(io.BytesIO(data), filename)
    return read_roster_text(_decode(data, filename), filename)


def load_roster_file(filepath: str) -> List[List[Any]]:
    """Reads a .csv/.txt or Excel roster into rows, header row first."""
    LOG.info("Loading roster from %s", filepath)
    return _read_table_file(filepath)


def load_roster(filepaths: Sequence[str],
                header_rules: Optional[Dict[str, List[str]]] = None) -> List[Student]:
    return normalize_roster([load_roster_file(path) for path in filepaths], header_rules)


def load_layout(filepath: str) -> Layout:
    """
    Reads a layout from JSON (nested or flat 'classrooms' form) or from
    a CSV/Excel table with one row per room.
    """
    LOG.info("Loading layout from %s", filepath)
    if filepath.lower().endswith(".json"):
        with open(filepath, mode="r", encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise LayoutError(os.path.basename(filepath), f"not valid JSON ({e})")
        if isinstance(data, list):
            return Layout.from_classrooms(data)
        return Layout.from_dict(data)

    try:
        table = _read_table_file(filepath)
    except RosterFormatError as e:
        raise LayoutError(e.source, e.reason)
    rows = [row for row in table if not _is_blank_row(row)]
    if not rows:
        raise LayoutError(os.path.basename(filepath), "layout file has no rooms")
    return Layout.from_classrooms(layout_rows_to_dicts(rows, os.path.basename(filepath)))


def layout_rows_to_dicts(rows: Sequence[Row], source_name: str = "layout") -> List[Dict[str, Any]]:
    columns = _claim_columns(rows[0], utils.LAYOUT_COLUMNS, list(utils.LAYOUT_COLUMNS))
    for required in ("room", "benches"):
        if required not in columns:
            raise LayoutError(source_name, f"missing '{required}' column")

    records = []
    for row in rows[1:]:
        record = {}
        for key, idx in columns.items():
            value = utils.clean_cell(row[idx]) if idx < len(row) else ""
            if value != "":
                record[key] = value
        records.append(record)
    return records
