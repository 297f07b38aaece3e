from datetime import datetime, timezone
from pathlib import Path
import os
import sys
import tempfile

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# keep the log file and data dir out of the real user profile
os.environ.setdefault("TIMELINE_PLANNER_DATA_DIR", tempfile.mkdtemp(prefix="timeline-planner-"))

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

import models  # noqa: F401
from services.subtask_splitter import SubTaskSplitter
from services.task_repository import TaskRepository
from services.timeline_api import TimelineApi
from services.today_list import TodayListManager


USER = "user-1"
MONDAY_9AM = datetime(2025, 1, 6, 9, 0, tzinfo=timezone.utc)


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    return engine


@pytest.fixture()
def session_factory(engine):
    def factory():
        return Session(engine)

    return factory


@pytest.fixture()
def repo(session_factory):
    return TaskRepository(session_factory)


@pytest.fixture()
def splitter(repo):
    return SubTaskSplitter(repo)


@pytest.fixture()
def today(repo):
    return TodayListManager(repo)


@pytest.fixture()
def api(repo, splitter, today):
    return TimelineApi(repo, splitter, today)


@pytest.fixture()
def main_task(repo):
    return repo.create_main_task("Website", "Landing page", MONDAY_9AM, None, USER)
