# storage/db.py
from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import SQLModel, Session, create_engine

from core.errors import StorageError
from core.log import get_logger
from core.settings import DB_PATH

# Ensure SQLModel metadata is populated
import models.project  # noqa: F401
import models.main_task  # noqa: F401
import models.sub_task  # noqa: F401
from storage import migrations


log = get_logger("storage")

_engine = None


def get_engine():
    """Return (and lazily create) the SQLite engine behind ``DB_PATH``."""

    global _engine
    if _engine is None:
        DB_PATH.parent.mkdir(parents=True, exist_ok=True)
        _engine = create_engine(f"sqlite:///{DB_PATH.as_posix()}", echo=False)
    return _engine


def init_db(engine=None) -> None:
    actual_engine = engine if engine is not None else get_engine()
    SQLModel.metadata.create_all(actual_engine)
    migrations.run_all(actual_engine)


def get_session() -> Session:
    return Session(get_engine())


@contextmanager
def storage_guard(action: str) -> Iterator[None]:
    """Re-raise any SQLAlchemy failure inside the block as :class:`StorageError`.

    The caller's session is closed (and therefore rolled back) by its own
    ``with`` block before the error reaches this frame.
    """

    try:
        yield
    except SQLAlchemyError as exc:
        log.error("%s failed: %s", action, exc)
        raise StorageError(f"{action} failed") from exc


__all__ = ["get_engine", "init_db", "get_session", "storage_guard"]
