"""SQLite schema 初始化。"""

from __future__ import annotations


class SQLiteSchemaMixin:
    def _init_db(self) -> None:
        conn = self._get_conn()
        cursor = conn.cursor()

        # 除主键外全部可空：未写入的字段保持“缺失”，注册时不会覆盖候选配置
        cursor.execute(
            '''
            CREATE TABLE IF NOT EXISTS nodes (
                _id TEXT PRIMARY KEY,
                name TEXT,
                type TEXT,
                timestamp TEXT,
                port INTEGER,
                protocol TEXT,
                management_domain TEXT,
                memory REAL,
                load1 REAL,
                load5 REAL,
                load15 REAL,
                services_json TEXT
            )
            '''
        )
        cursor.execute('CREATE INDEX IF NOT EXISTS idx_nodes_name ON nodes(name)')

        cursor.execute(
            '''
            CREATE TABLE IF NOT EXISTS events (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                topic TEXT NOT NULL,
                data_json TEXT,
                created_at TIMESTAMP NOT NULL
            )
            '''
        )
        cursor.execute('CREATE INDEX IF NOT EXISTS idx_events_topic ON events(topic, id)')

        cursor.execute(
            '''
            CREATE TABLE IF NOT EXISTS event_logs (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                created_at TIMESTAMP NOT NULL,
                source TEXT NOT NULL,
                action TEXT NOT NULL,
                event TEXT,
                status TEXT,
                level TEXT,
                message TEXT,
                resource_type TEXT,
                resource_id TEXT,
                error_type TEXT,
                metadata_json TEXT
            )
            '''
        )
        cursor.execute('CREATE INDEX IF NOT EXISTS idx_event_logs_created ON event_logs(created_at DESC)')
        cursor.execute('CREATE INDEX IF NOT EXISTS idx_event_logs_action ON event_logs(action)')

        conn.commit()
        conn.close()
