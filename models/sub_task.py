# models/sub_task.py
from __future__ import annotations

from datetime import datetime
from typing import Optional
import uuid

from sqlmodel import Field, SQLModel

from core.statuses import DEFAULT_STATUS
from datetime_utils import utc_now


class SubTask(SQLModel, table=True):
    __tablename__ = "sub_tasks"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    title: str
    description: Optional[str] = None
    estimated_time: int                      # minutes, > 0
    actual_time: Optional[int] = None
    order: float = Field(default=0.0)        # relative rank inside the main task
    status: str = DEFAULT_STATUS
    is_in_today: bool = Field(default=False, index=True)
    today_order: Optional[int] = None        # set iff is_in_today
    today_added_at: Optional[datetime] = None
    main_task_id: str = Field(foreign_key="main_tasks.id", index=True)
    parent_id: Optional[str] = Field(default=None, foreign_key="sub_tasks.id")
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


__all__ = ["SubTask"]
