"""ORM models exposed by the timeline planner."""
from .project import Project
from .main_task import MainTask
from .sub_task import SubTask

__all__ = ["Project", "MainTask", "SubTask"]
