# ui/timeline_layout.py
"""Geometry helpers for the timeline track; no Flet imports so they stay testable."""
from __future__ import annotations

import math
from typing import Any, Dict, List, Mapping

from core.settings import TIMELINE
from core.statuses import status_label


def block_width_percent(estimated_time: int, total_duration: int) -> float:
    """Share of the track a sub-task block occupies, in percent."""
    if total_duration <= 0 or estimated_time <= 0:
        return 0.0
    return min(100.0, estimated_time / total_duration * 100.0)


def offset_to_minutes(offset_px: float, px_per_minute: float = TIMELINE.px_per_minute) -> int:
    """Convert a double-click offset inside a block into a cut time.

    Halves round up, matching what a browser's ``Math.round`` would give for
    the same click.
    """
    if px_per_minute <= 0:
        raise ValueError("px_per_minute must be positive")
    return int(math.floor(offset_px / px_per_minute + 0.5))


def timeline_blocks(main_task: Mapping[str, Any]) -> List[Dict[str, Any]]:
    """Sub-tasks still on the timeline, with their width share attached.

    Promoted sub-tasks are drawn in the Today panel instead and are skipped.
    """
    total = int(main_task.get("totalDuration") or 0)
    blocks = []
    for sub in main_task.get("subTasks") or []:
        if sub.get("isInToday"):
            continue
        blocks.append({**sub, "widthPercent": block_width_percent(sub["estimatedTime"], total)})
    return blocks


def format_minutes(minutes: int) -> str:
    hours, rest = divmod(max(0, int(minutes)), 60)
    if not hours:
        return f"{rest} min"
    if not rest:
        return f"{hours} h"
    return f"{hours} h {rest} min"


def block_tooltip(block: Mapping[str, Any]) -> str:
    minutes = format_minutes(block["estimatedTime"])
    share = block.get("widthPercent", 0.0)
    return f"{block['title']} ({minutes}), {status_label(block['status'])}, {share:.0f}%"


__all__ = [
    "block_tooltip",
    "block_width_percent",
    "format_minutes",
    "offset_to_minutes",
    "timeline_blocks",
]
