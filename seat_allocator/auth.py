"""
seat_allocator/auth.py

Faculty credential check against an authorization document:
{"secureKey": "...", "facultyIds": ["F001", ...]}
"""

import json
import os
from typing import Any, Dict, Optional, Tuple

KEY_MISMATCH = "Secure key mismatch"
FACULTY_NOT_FOUND = "Faculty ID not found"
INVALID_JSON = "Invalid JSON format."


def read_faculty_auth_text(filepath: str) -> str:
    """Raw document text, as shown to an admin for editing."""
    with open(filepath, mode="r", encoding="utf-8") as f:
        return f.read()


def load_faculty_auth(filepath: str) -> Dict[str, Any]:
    data = json.loads(read_faculty_auth_text(filepath))
    if not isinstance(data, dict) or "secureKey" not in data:
        raise ValueError("Faculty authorization data must be an object with a 'secureKey'")
    return data


def save_faculty_auth(filepath: str, content: str):
    """
    Replaces the authorization document with `content` as given.
    Raises ValueError(INVALID_JSON) when it does not parse; nothing is
    written in that case.
    """
    try:
        json.loads(content)
    except json.JSONDecodeError:
        raise ValueError(INVALID_JSON)

    directory = os.path.dirname(filepath)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(filepath, mode="w", encoding="utf-8") as f:
        f.write(content)


def validate_faculty(auth_data: Dict[str, Any], faculty_id: str,
                     secure_key: Optional[str]) -> Tuple[bool, Optional[str]]:
    """
    The key must match exactly (case-sensitive); the faculty id is
    matched case-insensitively against the authorized list.
    """
    if (secure_key or "") != str(auth_data.get("secureKey", "")):
        return False, KEY_MISMATCH

    wanted = (faculty_id or "").strip().casefold()
    authorized = {str(fid).strip().casefold() for fid in auth_data.get("facultyIds", [])}
    if not wanted or wanted not in authorized:
        return False, FACULTY_NOT_FOUND
    return True, None
