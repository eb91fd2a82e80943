"""集群节点目录（nodes）表操作。"""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple

NODE_RECORD_FIELDS = (
    "_id",
    "name",
    "type",
    "timestamp",
    "port",
    "protocol",
    "management_domain",
    "memory",
    "load1",
    "load5",
    "load15",
    "services",
)

_FIELD_COLUMNS = {field: field for field in NODE_RECORD_FIELDS}
_FIELD_COLUMNS["services"] = "services_json"


class SQLiteNodesRepo:
    def _encode_node_value(self, field: str, value: Any) -> Any:
        if value is None:
            return None
        if field == "services":
            return json.dumps([str(item) for item in value], ensure_ascii=False)
        if field == "timestamp" and isinstance(value, datetime):
            return value.isoformat(sep=" ", timespec="microseconds")
        if field == "port":
            return int(value)
        if field in {"memory", "load1", "load5", "load15"}:
            return float(value)
        return str(value)

    def _encode_node_fields(self, fields: Dict[str, Any], *, skip: Iterable[str] = ()) -> List[Tuple[str, Any]]:
        unknown = [key for key in fields if key not in _FIELD_COLUMNS]
        if unknown:
            raise ValueError(f"未知节点字段: {', '.join(sorted(unknown))}")
        skipped = set(skip)
        return [
            (_FIELD_COLUMNS[key], self._encode_node_value(key, value))
            for key, value in fields.items()
            if key not in skipped
        ]

    def _decode_node_row(self, row: Dict[str, Any]) -> Dict[str, Any]:
        """行转文档：NULL 列视为字段缺失，不出现在结果中。"""
        doc: Dict[str, Any] = {}
        for field, column in _FIELD_COLUMNS.items():
            value = row.get(column)
            if value is None:
                continue
            if field == "services":
                try:
                    parsed = json.loads(value)
                except (TypeError, ValueError):
                    parsed = []
                value = [str(item) for item in parsed] if isinstance(parsed, list) else []
            doc[field] = value
        return doc

    def get_node(self, node_id: str) -> Optional[Dict[str, Any]]:
        conn = self._get_conn()
        try:
            cursor = conn.cursor()
            cursor.execute('SELECT * FROM nodes WHERE _id = ?', (str(node_id),))
            row = cursor.fetchone()
        finally:
            conn.close()
        return self._decode_node_row(dict(row)) if row else None

    def list_nodes(self) -> List[Dict[str, Any]]:
        conn = self._get_conn()
        try:
            cursor = conn.cursor()
            cursor.execute('SELECT * FROM nodes ORDER BY name ASC, _id ASC')
            rows = cursor.fetchall()
        finally:
            conn.close()
        return [self._decode_node_row(dict(row)) for row in rows]

    def upsert_node(self, node_id: str, fields: Dict[str, Any]) -> None:
        """按 _id 写入字段集合：不存在则创建，存在则只覆盖给出的字段。"""
        pairs = self._encode_node_fields(fields, skip=("_id",))
        columns = ["_id"] + [column for column, _ in pairs]
        params = [str(node_id)] + [value for _, value in pairs]
        placeholders = ", ".join("?" for _ in columns)
        if pairs:
            updates = ", ".join(f"{column} = excluded.{column}" for column, _ in pairs)
            conflict = f"DO UPDATE SET {updates}"
        else:
            conflict = "DO NOTHING"

        conn = self._get_conn()
        try:
            with self.transaction(conn) as cursor:
                cursor.execute(
                    f'''
                    INSERT INTO nodes ({", ".join(columns)})
                    VALUES ({placeholders})
                    ON CONFLICT(_id) {conflict}
                    ''',
                    params,
                )
        finally:
            conn.close()

    def update_node(self, node_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """条件更新：只修改已存在的节点，返回更新后的文档；节点不存在时返回 None 且不创建。"""
        pairs = self._encode_node_fields(fields, skip=("_id",))
        if not pairs:
            return self.get_node(node_id)
        sets = ", ".join(f"{column} = ?" for column, _ in pairs)
        params = [value for _, value in pairs] + [str(node_id)]

        conn = self._get_conn()
        try:
            with self.transaction(conn) as cursor:
                cursor.execute(f'UPDATE nodes SET {sets} WHERE _id = ?', params)
                if cursor.rowcount == 0:
                    return None
                cursor.execute('SELECT * FROM nodes WHERE _id = ?', (str(node_id),))
                row = cursor.fetchone()
        finally:
            conn.close()
        return self._decode_node_row(dict(row)) if row else None
