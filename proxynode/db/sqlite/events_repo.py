"""集群变更事件（events）表操作。"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional


class SQLiteEventsRepo:
    def create_event(self, topic: str, data: Optional[Dict[str, Any]] = None) -> int:
        safe_topic = str(topic or "").strip()
        if not safe_topic:
            raise ValueError("事件 topic 不能为空")
        data_json = json.dumps(data, ensure_ascii=False) if data is not None else None
        conn = self._get_conn()
        try:
            cursor = conn.cursor()
            cursor.execute(
                'INSERT INTO events (topic, data_json, created_at) VALUES (?, ?, ?)',
                (safe_topic, data_json, self._now_str()),
            )
            event_id = int(cursor.lastrowid)
            conn.commit()
        finally:
            conn.close()
        return event_id

    def list_events(self, *, topic: Optional[str] = None, after_id: int = 0, limit: int = 200) -> List[Dict[str, Any]]:
        safe_limit = min(max(int(limit), 1), 500)
        conditions = ["id > ?"]
        params: List[Any] = [max(0, int(after_id or 0))]
        if topic:
            conditions.append("topic = ?")
            params.append(str(topic).strip())
        params.append(safe_limit)

        conn = self._get_conn()
        try:
            cursor = conn.cursor()
            cursor.execute(
                f'SELECT * FROM events WHERE {" AND ".join(conditions)} ORDER BY id ASC LIMIT ?',
                params,
            )
            rows = cursor.fetchall()
        finally:
            conn.close()

        items = []
        for row in rows:
            item = dict(row)
            raw = item.pop("data_json", None)
            try:
                item["data"] = json.loads(raw) if raw else None
            except (TypeError, ValueError):
                item["data"] = None
            items.append(item)
        return items
