from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from core.errors import InvalidCutTime, NotFound
from core.log import get_logger
from core.settings import TIMELINE, TimelineSettings
from datetime_utils import utc_now
from models.sub_task import SubTask
from services.task_repository import TaskRepository, require_id
from storage.db import storage_guard


log = get_logger("splitter")


@dataclass
class CutResult:
    updated_original: SubTask
    new_sub_task: SubTask


class SubTaskSplitter:
    """Cuts one sub-task into two parts that keep the original's total time.

    The original row is shortened in place (it keeps its id and rank) and a
    second row is inserted right after it with ``parent_id`` pointing back at
    the original. ``total_duration`` of the main task is not touched: the two
    estimates always add up to the pre-cut value.
    """

    def __init__(
        self,
        repo: Optional[TaskRepository] = None,
        settings: TimelineSettings = TIMELINE,
    ):
        self.repo = repo or TaskRepository()
        self.settings = settings

    def cut(self, sub_task_id: str, cut_time: int) -> CutResult:
        if isinstance(cut_time, bool) or not isinstance(cut_time, int):
            raise InvalidCutTime("Invalid cut time")
        require_id(sub_task_id, "SubTask")

        with storage_guard("cut sub-task"), self.repo.session_factory() as s:
            original = s.get(SubTask, sub_task_id)
            if original is None:
                raise NotFound("SubTask not found")
            if cut_time <= 0 or cut_time >= original.estimated_time:
                raise InvalidCutTime("Invalid cut time")

            base_title = original.title
            second = SubTask(
                title=f"{base_title}{self.settings.second_part_suffix}",
                description=original.description,
                estimated_time=original.estimated_time - cut_time,
                main_task_id=original.main_task_id,
                order=original.order + self.settings.cut_order_offset,
                parent_id=original.id,
            )
            original.estimated_time = cut_time
            original.title = f"{base_title}{self.settings.first_part_suffix}"
            original.updated_at = utc_now()

            # both rows go out in a single commit
            s.add(original)
            s.add(second)
            s.commit()
            s.refresh(original)
            s.refresh(second)

        log.info(
            "Sub-task %s cut at %s min -> %s (%s min)",
            original.id,
            cut_time,
            second.id,
            second.estimated_time,
        )
        return CutResult(updated_original=original, new_sub_task=second)


__all__ = ["CutResult", "SubTaskSplitter"]
