"""Sub-task and main task status values."""
from __future__ import annotations

from typing import Dict

PENDING = "PENDING"
IN_PROGRESS = "IN_PROGRESS"
COMPLETED = "COMPLETED"
CANCELLED = "CANCELLED"

# Block colors on the timeline track, keyed by status.
STATUS_META: Dict[str, Dict[str, str]] = {
    PENDING: {
        "label": "Pending",
        "color": "#60A5FA",    # blue-400
    },
    IN_PROGRESS: {
        "label": "In progress",
        "color": "#FACC15",    # yellow-400
    },
    COMPLETED: {
        "label": "Completed",
        "color": "#4ADE80",    # green-400
    },
    CANCELLED: {
        "label": "Cancelled",
        "color": "#9CA3AF",    # gray-400
    },
}

DEFAULT_STATUS = PENDING


def is_valid_status(value: str | None) -> bool:
    return value in STATUS_META


def status_label(value: str) -> str:
    meta = STATUS_META.get(value, STATUS_META[DEFAULT_STATUS])
    return meta["label"]


def status_color(value: str) -> str:
    meta = STATUS_META.get(value, STATUS_META[DEFAULT_STATUS])
    return meta["color"]


__all__ = [
    "PENDING",
    "IN_PROGRESS",
    "COMPLETED",
    "CANCELLED",
    "STATUS_META",
    "DEFAULT_STATUS",
    "is_valid_status",
    "status_label",
    "status_color",
]
