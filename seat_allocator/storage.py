"""
seat_allocator/storage.py

Single-slot store for the most recent seating plan (a JSON file).
Last write wins; clear() removes it.
"""

import json
import logging
import os
from typing import Optional

from .reports import AllocationPlan

LOG = logging.getLogger(__name__)


class PlanStore:
    def __init__(self, path: str):
        self.path = path

    def save(self, plan: AllocationPlan):
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.path, mode="w", encoding="utf-8") as f:
            json.dump(plan.to_dict(), f, indent=2)
        LOG.info("Saved seating plan (%d students) to %s", len(plan.assignments), self.path)

    def load(self) -> Optional[AllocationPlan]:
        """Returns None when no plan has been saved."""
        try:
            with open(self.path, mode="r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return None
        return AllocationPlan.from_dict(data)

    def clear(self):
        try:
            os.remove(self.path)
        except FileNotFoundError:
            pass
