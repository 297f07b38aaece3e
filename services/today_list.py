from __future__ import annotations

from typing import List, Optional

from sqlalchemy import func, select as sa_select, update
from sqlmodel import select

from core.errors import InvalidRequest, NotFound
from core.log import get_logger
from datetime_utils import utc_now
from models.main_task import MainTask
from models.sub_task import SubTask
from services.task_repository import SUB_TASKS, TaskRepository, require_id
from storage.db import storage_guard


log = get_logger("today")

SCHEDULED = "SCHEDULED"
FOCUSED = "FOCUSED"


def state_of(sub: SubTask) -> str:
    return FOCUSED if sub.is_in_today else SCHEDULED


def _next_today_rank():
    # aliased so the subquery is not correlated with the row being updated
    ranked = SUB_TASKS.alias("ranked")
    return (
        sa_select(func.coalesce(func.max(ranked.c.today_order), 0) + 1)
        .where(ranked.c.is_in_today == True)  # noqa: E712
        .scalar_subquery()
    )


class TodayListManager:
    """Moves sub-tasks between the timeline and the Today focus list.

    ``promote`` and ``demote`` are idempotent: asking for the state a sub-task
    is already in returns it unchanged.
    """

    def __init__(self, repo: Optional[TaskRepository] = None):
        self.repo = repo or TaskRepository()

    def promote(self, sub_task_id: str) -> SubTask:
        """Append the sub-task to the end of the Today list."""

        require_id(sub_task_id, "SubTask")
        with storage_guard("promote sub-task"), self.repo.session_factory() as s:
            now = utc_now()
            # rank and state guard in one statement, so two concurrent
            # promotions can neither share a rank nor focus a row twice
            result = s.connection().execute(
                update(SUB_TASKS)
                .where(SUB_TASKS.c.id == sub_task_id)
                .where(SUB_TASKS.c.is_in_today == False)  # noqa: E712
                .values(
                    is_in_today=True,
                    today_order=_next_today_rank(),
                    today_added_at=now,
                    updated_at=now,
                )
            )
            sub = s.get(SubTask, sub_task_id)
            if sub is None:
                raise NotFound("SubTask not found")
            s.commit()
            s.refresh(sub)

        if result.rowcount:
            log.info("Sub-task %s promoted to Today at #%s", sub.id, sub.today_order)
        else:
            log.debug("Sub-task %s already in Today", sub.id)
        return sub

    def demote(self, sub_task_id: str, main_task_id: Optional[str] = None) -> SubTask:
        """Send the sub-task back to its timeline; other Today ranks keep their gaps."""

        sub = self.repo.get_sub_task(sub_task_id)
        if main_task_id is not None and sub.main_task_id != main_task_id:
            raise NotFound("SubTask not found in main task")
        if not sub.is_in_today:
            return sub
        updated = self.repo.update_sub_task_today_state(sub_task_id, False, None)
        log.info("Sub-task %s returned to timeline", sub_task_id)
        return updated

    def list_today(self, user_id: Optional[str]) -> List[SubTask]:
        if not isinstance(user_id, str) or not user_id.strip():
            raise InvalidRequest("User ID is required")

        with storage_guard("list today"), self.repo.session_factory() as s:
            stmt = (
                select(SubTask)
                .join(MainTask, MainTask.id == SubTask.main_task_id)
                .where(MainTask.user_id == user_id)
                .where(SubTask.is_in_today == True)  # noqa: E712
                .order_by(
                    SubTask.today_order.asc(),
                    SubTask.today_added_at.asc(),
                    SubTask.id.asc(),
                )
            )
            return list(s.exec(stmt))


__all__ = ["FOCUSED", "SCHEDULED", "TodayListManager", "state_of"]
