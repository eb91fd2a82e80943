"""SQLite 持久化。

说明：
- 对外统一暴露 `SQLiteDB/sqlite_db` 单例。
- 具体表与领域逻辑拆分在 `proxynode/db/sqlite/*.py` 的 mixin 中。
"""

from __future__ import annotations

from proxynode.core.config import settings
from proxynode.db.sqlite.connection import SQLiteConnectionMixin
from proxynode.db.sqlite.events_repo import SQLiteEventsRepo
from proxynode.db.sqlite.logs_repo import SQLiteLogsRepo
from proxynode.db.sqlite.nodes_repo import SQLiteNodesRepo
from proxynode.db.sqlite.schema import SQLiteSchemaMixin


class SQLiteDB(
    SQLiteConnectionMixin,
    SQLiteSchemaMixin,
    SQLiteNodesRepo,
    SQLiteEventsRepo,
    SQLiteLogsRepo,
):
    _instance = None
    _db_path = settings.db_path

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        self._ensure_data_dir()
        self._init_db()
        self._last_event_cleanup_at = 0.0


sqlite_db = SQLiteDB()
