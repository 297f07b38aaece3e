# models/main_task.py
from __future__ import annotations

from datetime import datetime
from typing import Optional
import uuid

from sqlmodel import Field, SQLModel

from core.statuses import DEFAULT_STATUS
from datetime_utils import utc_now


class MainTask(SQLModel, table=True):
    __tablename__ = "main_tasks"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    title: str
    description: Optional[str] = None
    start_time: datetime = Field(index=True)
    # minutes; always the sum of the sub-tasks' estimated_time
    total_duration: int = 0
    color: str = "#3B82F6"
    status: str = DEFAULT_STATUS
    project_id: Optional[str] = Field(default=None, foreign_key="projects.id")
    user_id: str = Field(index=True)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


__all__ = ["MainTask"]
