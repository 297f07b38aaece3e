"""Ad-hoc database migrations for the timeline planner.

``create_all`` never alters an existing table, so a database file written by an
earlier build (before cutting and the Today list) or edited by hand is brought
up to the current schema here. Every step checks before it changes anything.
"""

from __future__ import annotations

from sqlalchemy import text


def _column_exists(conn, table: str, column: str) -> bool:
    result = conn.execute(text(f"PRAGMA table_info('{table}')"))
    return any(row[1] == column for row in result)


def _table_exists(conn, table: str) -> bool:
    result = conn.execute(
        text("SELECT name FROM sqlite_master WHERE type='table' AND name=:name"),
        {"name": table},
    )
    return result.first() is not None


def ensure_sub_task_columns(conn) -> None:
    """Databases created before cutting and the Today list lack these columns."""

    if not _table_exists(conn, "sub_tasks"):
        return
    columns = {
        "actual_time": "INTEGER",
        "is_in_today": "BOOLEAN NOT NULL DEFAULT 0",
        "today_order": "INTEGER",
        "today_added_at": "DATETIME",
        "parent_id": "VARCHAR REFERENCES sub_tasks(id)",
    }
    for name, ddl_type in columns.items():
        if not _column_exists(conn, "sub_tasks", name):
            conn.execute(text(f"ALTER TABLE sub_tasks ADD COLUMN {name} {ddl_type}"))

    # a row left focused without a rank is not on the Today list
    conn.execute(
        text(
            """
            UPDATE sub_tasks
            SET is_in_today = 0, today_added_at = NULL
            WHERE is_in_today = 1 AND today_order IS NULL
            """
        )
    )
    conn.execute(
        text(
            """
            UPDATE sub_tasks
            SET today_order = NULL
            WHERE is_in_today = 0 AND today_order IS NOT NULL
            """
        )
    )


def ensure_main_task_columns(conn) -> None:
    if not _table_exists(conn, "main_tasks"):
        return
    columns = {
        "description": "VARCHAR",
        "color": "VARCHAR NOT NULL DEFAULT '#3B82F6'",
        "status": "VARCHAR NOT NULL DEFAULT 'PENDING'",
    }
    for name, ddl_type in columns.items():
        if not _column_exists(conn, "main_tasks", name):
            conn.execute(text(f"ALTER TABLE main_tasks ADD COLUMN {name} {ddl_type}"))


def ensure_today_index(conn) -> None:
    if not _table_exists(conn, "sub_tasks"):
        return
    conn.execute(
        text(
            """
            CREATE INDEX IF NOT EXISTS ix_sub_tasks_today
            ON sub_tasks (is_in_today, today_order)
            """
        )
    )


def run_all(engine) -> None:
    with engine.begin() as conn:
        ensure_main_task_columns(conn)
        ensure_sub_task_columns(conn)
        ensure_today_index(conn)


__all__ = ["run_all"]
