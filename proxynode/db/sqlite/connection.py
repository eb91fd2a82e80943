"""SQLite 连接与基础工具。"""

from __future__ import annotations

import logging
import os
import sqlite3
from contextlib import contextmanager
from datetime import datetime
from typing import Iterator

logger = logging.getLogger(__name__)


class SQLiteConnectionMixin:
    _db_path: str

    def _ensure_data_dir(self) -> None:
        data_dir = os.path.dirname(self._db_path)
        if data_dir:
            os.makedirs(data_dir, exist_ok=True)

    def _now_str(self) -> str:
        return datetime.now().strftime("%Y-%m-%d %H:%M:%S")

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path, timeout=5.0)
        conn.row_factory = sqlite3.Row
        try:
            conn.execute("PRAGMA journal_mode=WAL")
            conn.execute("PRAGMA synchronous=NORMAL")
            conn.execute("PRAGMA busy_timeout=5000")
        except sqlite3.Error:
            logger.debug("SQLite pragma 设置失败: %s", self._db_path, exc_info=True)
        return conn

    @contextmanager
    def transaction(self, conn: sqlite3.Connection, *, immediate: bool = True) -> Iterator[sqlite3.Cursor]:
        """统一事务包装。

        注意：
        - 默认使用 `BEGIN IMMEDIATE`，节点 upsert 与心跳更新按单行原子提交。
        - 异常时回滚并继续抛出，由调用方决定是否致命。
        """
        cursor = conn.cursor()
        try:
            cursor.execute("BEGIN IMMEDIATE" if immediate else "BEGIN")
            yield cursor
            conn.commit()
        except Exception:
            conn.rollback()
            raise
