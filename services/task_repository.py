from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, List, Optional

from sqlalchemy import func, select as sa_select, update
from sqlmodel import Session, select

from core.errors import InvalidRequest, NotFound
from core.log import get_logger
from core.settings import TIMELINE
from core.statuses import is_valid_status
from datetime_utils import parse_iso_datetime, utc_now
from models.main_task import MainTask
from models.project import Project
from models.sub_task import SubTask
from storage.db import get_session, storage_guard


log = get_logger("repository")

MAIN_TASKS = MainTask.__table__
SUB_TASKS = SubTask.__table__

# Equal ranks come from cutting the same row twice; the newest part sits
# directly after the row it was cut from.
SUB_TASK_ORDERING = (SubTask.order.asc(), SubTask.created_at.desc(), SubTask.id.desc())


@dataclass
class TimelineTask:
    """A main task together with its ordered sub-tasks and resolved project."""

    main_task: MainTask
    sub_tasks: List[SubTask] = field(default_factory=list)
    project: Optional[Project] = None


def _require_text(value: Optional[str], name: str) -> str:
    cleaned = value.strip() if isinstance(value, str) else ""
    if not cleaned:
        raise InvalidRequest(f"{name} is required")
    return cleaned


def require_id(value, entity: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise NotFound(f"{entity} not found")
    return value


def _is_whole_number(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _require_minutes(value, name: str) -> int:
    if not _is_whole_number(value) or value <= 0:
        raise InvalidRequest(f"{name} must be a positive number of minutes")
    return value


def _total_duration_subquery(main_task_id: str):
    return (
        sa_select(func.coalesce(func.sum(SUB_TASKS.c.estimated_time), 0))
        .where(SUB_TASKS.c.main_task_id == main_task_id)
        .scalar_subquery()
    )


class TaskRepository:
    """Store access for main tasks and sub-tasks.

    Owns the aggregate rule that a main task's ``total_duration`` is the sum
    of its sub-tasks' ``estimated_time``.
    """

    def __init__(self, session_factory: Callable[[], Session] = get_session):
        self._session_factory = session_factory

    @property
    def session_factory(self) -> Callable[[], Session]:
        return self._session_factory

    # ---------- projects ----------
    def create_project(
        self,
        title: str,
        color: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> Project:
        cleaned = _require_text(title, "Title")
        with storage_guard("create project"), self._session_factory() as s:
            project = Project(
                title=cleaned,
                color=color or TIMELINE.default_color,
                user_id=user_id or None,
            )
            s.add(project)
            s.commit()
            s.refresh(project)
            return project

    # ---------- main tasks ----------
    def list_main_tasks(self, user_id: Optional[str]) -> List[TimelineTask]:
        if not isinstance(user_id, str) or not user_id.strip():
            raise InvalidRequest("User ID is required")

        with storage_guard("list main tasks"), self._session_factory() as s:
            stmt = (
                select(MainTask)
                .where(MainTask.user_id == user_id)
                .order_by(MainTask.start_time.asc(), MainTask.created_at.asc())
            )
            tasks = list(s.exec(stmt))
            ids = [t.id for t in tasks]

            sub_tasks: Dict[str, List[SubTask]] = {task_id: [] for task_id in ids}
            if ids:
                sub_stmt = (
                    select(SubTask)
                    .where(SubTask.main_task_id.in_(ids))
                    .order_by(*SUB_TASK_ORDERING)
                )
                for sub in s.exec(sub_stmt):
                    sub_tasks[sub.main_task_id].append(sub)

            project_ids = {t.project_id for t in tasks if t.project_id}
            projects: Dict[str, Project] = {}
            if project_ids:
                proj_stmt = select(Project).where(Project.id.in_(project_ids))
                projects = {p.id: p for p in s.exec(proj_stmt)}

        return [
            TimelineTask(
                main_task=t,
                sub_tasks=sub_tasks[t.id],
                project=projects.get(t.project_id) if t.project_id else None,
            )
            for t in tasks
        ]

    def get_main_task(self, main_task_id: str) -> MainTask:
        require_id(main_task_id, "MainTask")
        with storage_guard("load main task"), self._session_factory() as s:
            task = s.get(MainTask, main_task_id)
        if task is None:
            raise NotFound("MainTask not found")
        return task

    def create_main_task(
        self,
        title: str,
        description: Optional[str],
        start_time: datetime | str | None,
        project_id: Optional[str],
        user_id: Optional[str],
        *,
        color: Optional[str] = None,
    ) -> MainTask:
        cleaned = _require_text(title, "Title")
        owner = _require_text(user_id, "User ID")
        start = parse_iso_datetime(start_time)
        if start is None:
            raise InvalidRequest("Start time is required")

        with storage_guard("create main task"), self._session_factory() as s:
            if project_id and s.get(Project, project_id) is None:
                raise NotFound("Project not found")
            task = MainTask(
                title=cleaned,
                description=description or None,
                start_time=start,
                total_duration=0,
                color=color or TIMELINE.default_color,
                project_id=project_id or None,
                user_id=owner,
            )
            s.add(task)
            s.commit()
            s.refresh(task)
            log.info("Main task %s created for user %s", task.id, owner)
            return task

    def recompute_total_duration(self, main_task_id: str) -> MainTask:
        require_id(main_task_id, "MainTask")
        with storage_guard("recompute total duration"), self._session_factory() as s:
            if s.get(MainTask, main_task_id) is None:
                raise NotFound("MainTask not found")
            self._write_total_duration(s, main_task_id)
            s.commit()
            task = s.get(MainTask, main_task_id)
            s.refresh(task)
            return task

    def _write_total_duration(self, s: Session, main_task_id: str) -> None:
        # one statement: the sum is taken and stored without a read in between
        s.connection().execute(
            update(MAIN_TASKS)
            .where(MAIN_TASKS.c.id == main_task_id)
            .values(
                total_duration=_total_duration_subquery(main_task_id),
                updated_at=utc_now(),
            )
        )

    # ---------- sub-tasks ----------
    def get_sub_task(self, sub_task_id: str) -> SubTask:
        require_id(sub_task_id, "SubTask")
        with storage_guard("load sub-task"), self._session_factory() as s:
            sub = s.get(SubTask, sub_task_id)
        if sub is None:
            raise NotFound("SubTask not found")
        return sub

    def list_sub_tasks(self, main_task_id: str) -> List[SubTask]:
        require_id(main_task_id, "MainTask")
        with storage_guard("list sub-tasks"), self._session_factory() as s:
            if s.get(MainTask, main_task_id) is None:
                raise NotFound("MainTask not found")
            stmt = (
                select(SubTask)
                .where(SubTask.main_task_id == main_task_id)
                .order_by(*SUB_TASK_ORDERING)
            )
            return list(s.exec(stmt))

    def create_sub_task(
        self,
        title: str,
        description: Optional[str],
        estimated_time: int,
        main_task_id: str,
        order: Optional[float] = None,
    ) -> SubTask:
        cleaned = _require_text(title, "Title")
        minutes = _require_minutes(estimated_time, "Estimated time")
        require_id(main_task_id, "MainTask")
        if order is not None and (isinstance(order, bool) or not isinstance(order, (int, float))):
            raise InvalidRequest("Order must be a number")

        with storage_guard("create sub-task"), self._session_factory() as s:
            if s.get(MainTask, main_task_id) is None:
                raise NotFound("MainTask not found")
            if order is None:
                order = self._next_order(s, main_task_id)
            sub = SubTask(
                title=cleaned,
                description=description or None,
                estimated_time=minutes,
                main_task_id=main_task_id,
                order=float(order),
            )
            s.add(sub)
            s.flush()
            self._write_total_duration(s, main_task_id)
            s.commit()
            s.refresh(sub)
            log.info("Sub-task %s (%s min) added to %s", sub.id, minutes, main_task_id)
            return sub

    def _next_order(self, s: Session, main_task_id: str) -> float:
        stmt = select(func.max(SubTask.order)).where(SubTask.main_task_id == main_task_id)
        current = s.exec(stmt).one()
        return (current or 0.0) + TIMELINE.append_order_step

    def update_sub_task_today_state(
        self,
        sub_task_id: str,
        is_in_today: bool,
        today_order: Optional[int] = None,
    ) -> SubTask:
        """Write the Today fields only; ``total_duration`` is untouched."""

        require_id(sub_task_id, "SubTask")
        if not isinstance(is_in_today, bool):
            raise InvalidRequest("isInToday must be a boolean")
        if is_in_today and not _is_whole_number(today_order):
            raise InvalidRequest("todayOrder is required when isInToday is set")

        with storage_guard("update today state"), self._session_factory() as s:
            sub = s.get(SubTask, sub_task_id)
            if sub is None:
                raise NotFound("SubTask not found")
            now = utc_now()
            if is_in_today:
                if not sub.is_in_today:
                    sub.today_added_at = now
                sub.today_order = today_order
            else:
                sub.today_order = None
                sub.today_added_at = None
            sub.is_in_today = is_in_today
            sub.updated_at = now
            s.add(sub)
            s.commit()
            s.refresh(sub)
            return sub

    def set_sub_task_status(
        self,
        sub_task_id: str,
        status: str,
        actual_time: Optional[int] = None,
    ) -> SubTask:
        require_id(sub_task_id, "SubTask")
        if not is_valid_status(status):
            raise InvalidRequest(f"Unsupported status: {status}")
        if actual_time is not None and (not _is_whole_number(actual_time) or actual_time < 0):
            raise InvalidRequest("Actual time must be a non-negative number of minutes")

        with storage_guard("update sub-task status"), self._session_factory() as s:
            sub = s.get(SubTask, sub_task_id)
            if sub is None:
                raise NotFound("SubTask not found")
            sub.status = status
            if actual_time is not None:
                sub.actual_time = actual_time
            sub.updated_at = utc_now()
            s.add(sub)
            s.commit()
            s.refresh(sub)
            return sub


__all__ = ["TaskRepository", "TimelineTask", "SUB_TASK_ORDERING"]
