"""Request/response boundary for the timeline operations.

Callers (the Flet presenter, or an HTTP adapter) hand over already-resolved
intents as camelCase payloads and get back an :class:`ApiResponse`. Every
domain error is turned into a status code and an ``{"error": ...}`` body here;
nothing below this module catches them.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional

from core.errors import InvalidRequest, PlannerError, StorageError
from core.log import get_logger
from datetime_utils import to_iso_utc
from models.main_task import MainTask
from models.project import Project
from models.sub_task import SubTask
from services.subtask_splitter import SubTaskSplitter
from services.task_repository import TaskRepository, TimelineTask
from services.today_list import TodayListManager


log = get_logger("api")

GENERIC_ERROR = "Internal server error"


@dataclass
class ApiResponse:
    status: int
    body: Any

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


# ---------- serialization ----------
def serialize_project(project: Optional[Project]) -> Optional[Dict[str, Any]]:
    if project is None:
        return None
    return {
        "id": project.id,
        "title": project.title,
        "color": project.color,
        "userId": project.user_id,
    }


def serialize_sub_task(sub: SubTask) -> Dict[str, Any]:
    return {
        "id": sub.id,
        "title": sub.title,
        "description": sub.description,
        "estimatedTime": sub.estimated_time,
        "actualTime": sub.actual_time,
        "order": sub.order,
        "status": sub.status,
        "isInToday": sub.is_in_today,
        "todayOrder": sub.today_order,
        "mainTaskId": sub.main_task_id,
        "parentId": sub.parent_id,
        "createdAt": to_iso_utc(sub.created_at),
        "updatedAt": to_iso_utc(sub.updated_at),
    }


def serialize_main_task(
    task: MainTask,
    sub_tasks: Optional[List[SubTask]] = None,
    project: Optional[Project] = None,
) -> Dict[str, Any]:
    return {
        "id": task.id,
        "title": task.title,
        "description": task.description,
        "startTime": to_iso_utc(task.start_time),
        "totalDuration": task.total_duration,
        "color": task.color,
        "status": task.status,
        "projectId": task.project_id,
        "userId": task.user_id,
        "subTasks": [serialize_sub_task(sub) for sub in (sub_tasks or [])],
        "project": serialize_project(project),
        "createdAt": to_iso_utc(task.created_at),
        "updatedAt": to_iso_utc(task.updated_at),
    }


def serialize_timeline_task(entry: TimelineTask) -> Dict[str, Any]:
    return serialize_main_task(entry.main_task, entry.sub_tasks, entry.project)


# ---------- payload helpers ----------
def _whole(value: Any) -> Any:
    """JSON clients may send ``60.0`` for 60; the services validate everything else."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _optional_number(value: Any, name: str) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidRequest(f"{name} must be a number")
    return float(value)


class TimelineApi:
    def __init__(
        self,
        repo: Optional[TaskRepository] = None,
        splitter: Optional[SubTaskSplitter] = None,
        today: Optional[TodayListManager] = None,
    ):
        self.repo = repo or TaskRepository()
        self.splitter = splitter or SubTaskSplitter(self.repo)
        self.today = today or TodayListManager(self.repo)

    def _handle(self, action: str, fn: Callable[[], Any], *, status: int = 200) -> ApiResponse:
        try:
            body = fn()
        except StorageError as exc:
            log.error("Error %s: %s", action, exc.__cause__ or exc)
            return ApiResponse(StorageError.status_code, {"error": GENERIC_ERROR})
        except PlannerError as exc:
            log.warning("Rejected %s: %s", action, exc.message)
            return ApiResponse(exc.status_code, {"error": exc.message})
        return ApiResponse(status, body)

    # ---------- main tasks ----------
    def list_tasks(self, params: Mapping[str, Any]) -> ApiResponse:
        def run():
            tasks = self.repo.list_main_tasks(params.get("userId"))
            return [serialize_timeline_task(entry) for entry in tasks]

        return self._handle("fetching tasks", run)

    def create_main_task(self, payload: Mapping[str, Any]) -> ApiResponse:
        def run():
            task = self.repo.create_main_task(
                payload.get("title"),
                payload.get("description"),
                payload.get("startTime"),
                payload.get("projectId"),
                payload.get("userId"),
                color=payload.get("color"),
            )
            return serialize_main_task(task)

        return self._handle("creating main task", run, status=201)

    def create_project(self, payload: Mapping[str, Any]) -> ApiResponse:
        def run():
            project = self.repo.create_project(
                payload.get("title"),
                payload.get("color"),
                payload.get("userId"),
            )
            return serialize_project(project)

        return self._handle("creating project", run, status=201)

    # ---------- sub-tasks ----------
    def create_sub_task(self, payload: Mapping[str, Any]) -> ApiResponse:
        def run():
            sub = self.repo.create_sub_task(
                payload.get("title"),
                payload.get("description"),
                _whole(payload.get("estimatedTime")),
                payload.get("mainTaskId"),
                _optional_number(payload.get("order"), "order"),
            )
            return serialize_sub_task(sub)

        return self._handle("creating subtask", run, status=201)

    def update_today_state(self, payload: Mapping[str, Any]) -> ApiResponse:
        def run():
            sub = self.repo.update_sub_task_today_state(
                payload.get("id"),
                payload.get("isInToday"),
                _whole(payload.get("todayOrder")),
            )
            return serialize_sub_task(sub)

        return self._handle("updating subtask", run)

    def cut_sub_task(self, payload: Mapping[str, Any]) -> ApiResponse:
        def run():
            result = self.splitter.cut(
                payload.get("subTaskId"),
                _whole(payload.get("cutTime")),
            )
            return {
                "updatedOriginal": serialize_sub_task(result.updated_original),
                "newSubTask": serialize_sub_task(result.new_sub_task),
            }

        return self._handle("cutting subtask", run)

    # ---------- Today list ----------
    def promote(self, payload: Mapping[str, Any]) -> ApiResponse:
        return self._handle(
            "promoting subtask",
            lambda: serialize_sub_task(self.today.promote(payload.get("subTaskId"))),
        )

    def demote(self, payload: Mapping[str, Any]) -> ApiResponse:
        return self._handle(
            "demoting subtask",
            lambda: serialize_sub_task(
                self.today.demote(payload.get("subTaskId"), payload.get("mainTaskId"))
            ),
        )

    def list_today(self, params: Mapping[str, Any]) -> ApiResponse:
        return self._handle(
            "fetching today list",
            lambda: [serialize_sub_task(sub) for sub in self.today.list_today(params.get("userId"))],
        )


__all__ = [
    "ApiResponse",
    "TimelineApi",
    "serialize_main_task",
    "serialize_project",
    "serialize_sub_task",
    "serialize_timeline_task",
]
