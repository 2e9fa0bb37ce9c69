"""SQLite schema management (code-first approach)."""

import logging

from taskmind.core import db_client


logger = logging.getLogger(__name__)


# Central list of all collections in the schema
COLLECTIONS = [
    "tasks",
    "task_streaks",
    "daily_summaries",
]

_TIMESTAMP_DEFAULT = "(strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))"

_TABLES: dict[str, str] = {
    "tasks": f"""
        CREATE TABLE IF NOT EXISTS tasks (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            owner_id TEXT NOT NULL,
            title TEXT NOT NULL,
            description TEXT,
            due_date TEXT,
            priority TEXT NOT NULL DEFAULT 'medium' CHECK (priority IN ('low', 'medium', 'high')),
            category TEXT,
            frequency TEXT NOT NULL DEFAULT 'once'
                CHECK (frequency IN ('once', 'daily', 'weekly', 'monthly', 'yearly')),
            is_completed INTEGER NOT NULL DEFAULT 0,
            completed_at TEXT,
            status TEXT NOT NULL DEFAULT 'active' CHECK (status IN ('active', 'completed', 'paused', 'archived')),
            total_completions INTEGER NOT NULL DEFAULT 0,
            last_completed_date TEXT,
            created TEXT NOT NULL DEFAULT {_TIMESTAMP_DEFAULT},
            updated TEXT NOT NULL DEFAULT {_TIMESTAMP_DEFAULT}
        )
    """,
    "task_streaks": f"""
        CREATE TABLE IF NOT EXISTS task_streaks (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            owner_id TEXT NOT NULL,
            task_id TEXT NOT NULL,
            dates_completed TEXT NOT NULL DEFAULT '[]',
            current_streak INTEGER NOT NULL DEFAULT 0,
            longest_streak INTEGER NOT NULL DEFAULT 0,
            last_completed_date TEXT,
            completion_history TEXT NOT NULL DEFAULT '[]',
            created TEXT NOT NULL DEFAULT {_TIMESTAMP_DEFAULT},
            updated TEXT NOT NULL DEFAULT {_TIMESTAMP_DEFAULT}
        )
    """,
    "daily_summaries": f"""
        CREATE TABLE IF NOT EXISTS daily_summaries (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            owner_id TEXT NOT NULL,
            date TEXT NOT NULL,
            tasks_completed INTEGER NOT NULL DEFAULT 0,
            completed_task_ids TEXT NOT NULL DEFAULT '[]',
            streak_count INTEGER NOT NULL DEFAULT 1,
            created TEXT NOT NULL DEFAULT {_TIMESTAMP_DEFAULT},
            updated TEXT NOT NULL DEFAULT {_TIMESTAMP_DEFAULT}
        )
    """,
}

_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_tasks_owner_frequency ON tasks (owner_id, frequency, is_completed)",
    "CREATE UNIQUE INDEX IF NOT EXISTS idx_task_streaks_owner_task ON task_streaks (owner_id, task_id)",
    "CREATE UNIQUE INDEX IF NOT EXISTS idx_daily_summaries_owner_date ON daily_summaries (owner_id, date)",
]


async def init_db(*, db_path: str | None = None) -> None:
    """Create all tables and indexes (idempotent)."""
    conn = await db_client.get_connection(db_path=db_path)

    for collection in COLLECTIONS:
        await conn.execute(_TABLES[collection])

    for index in _INDEXES:
        await conn.execute(index)

    await conn.commit()
    logger.info("SQLite schema initialized", extra={"collections": COLLECTIONS})
