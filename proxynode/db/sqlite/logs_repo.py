"""系统事件日志（event_logs）表操作。"""

from __future__ import annotations

import json
import time
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from proxynode.core.config import settings


class SQLiteLogsRepo:
    _last_event_cleanup_at: float

    def _decode_event_log_row(self, row: Dict[str, Any]) -> Dict[str, Any]:
        raw = row.pop("metadata_json", None)
        try:
            row["metadata"] = json.loads(raw) if raw else None
        except (TypeError, ValueError):
            row["metadata"] = None
        return row

    def create_event_log(
        self,
        *,
        source: str,
        action: str,
        event: Optional[str] = None,
        status: Optional[str] = None,
        level: Optional[str] = None,
        message: Optional[str] = None,
        resource_type: Optional[str] = None,
        resource_id: Optional[str] = None,
        error_type: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> int:
        metadata_json = json.dumps(metadata, ensure_ascii=False, default=str) if metadata is not None else None

        conn = self._get_conn()
        try:
            cursor = conn.cursor()
            cursor.execute(
                '''
                INSERT INTO event_logs (
                    created_at, source, action, event, status, level, message,
                    resource_type, resource_id, error_type, metadata_json
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                ''',
                (
                    self._now_str(),
                    str(source or "system").strip().lower(),
                    str(action or "unknown").strip(),
                    str(event).strip() if event is not None else None,
                    str(status).strip().lower() if status is not None else None,
                    str(level).strip().upper() if level is not None else None,
                    message,
                    resource_type,
                    resource_id,
                    error_type,
                    metadata_json,
                ),
            )
            log_id = int(cursor.lastrowid)
            conn.commit()
        finally:
            conn.close()
        self._maybe_cleanup_event_logs()
        return log_id

    def list_event_logs(
        self,
        *,
        action: Optional[str] = None,
        resource_id: Optional[str] = None,
        limit: int = 200,
    ) -> List[Dict[str, Any]]:
        safe_limit = min(max(int(limit), 1), 500)
        conditions: List[str] = []
        params: List[Any] = []
        if action:
            conditions.append("action = ?")
            params.append(str(action).strip())
        if resource_id:
            conditions.append("resource_id = ?")
            params.append(str(resource_id).strip())
        where_clause = f"WHERE {' AND '.join(conditions)}" if conditions else ""
        params.append(safe_limit)

        conn = self._get_conn()
        try:
            cursor = conn.cursor()
            cursor.execute(f"SELECT * FROM event_logs {where_clause} ORDER BY id DESC LIMIT ?", params)
            rows = cursor.fetchall()
        finally:
            conn.close()
        return [self._decode_event_log_row(dict(row)) for row in rows]

    def _maybe_cleanup_event_logs(self) -> None:
        now = time.time()
        interval = max(60, int(settings.event_log_cleanup_interval_sec))
        if now - self._last_event_cleanup_at < interval:
            return
        self._last_event_cleanup_at = now
        self.cleanup_event_logs(int(settings.event_log_retention_days))

    def cleanup_event_logs(self, retention_days: int) -> int:
        days = max(1, int(retention_days))
        cutoff = (datetime.now() - timedelta(days=days)).strftime("%Y-%m-%d %H:%M:%S")
        conn = self._get_conn()
        try:
            cursor = conn.cursor()
            cursor.execute('DELETE FROM event_logs WHERE created_at < ?', (cutoff,))
            deleted = int(cursor.rowcount or 0)
            conn.commit()
        finally:
            conn.close()
        return deleted
