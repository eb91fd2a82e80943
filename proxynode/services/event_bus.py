"""集群变更事件发布。

事件写入共享库的 `events` 表供其他进程轮询，同时同步通知进程内订阅者。
发布是尽力而为的：存储或订阅者异常只记录日志，不向调用方抛出。
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional

from proxynode.db.sqlite import sqlite_db

logger = logging.getLogger(__name__)

NODE_CHANGE_TOPIC = "node.change"

EventListener = Callable[[str, Optional[Dict[str, Any]]], None]


class EventBus:
    def __init__(self) -> None:
        self._listeners: Dict[str, List[EventListener]] = {}

    def subscribe(self, topic: str, listener: EventListener) -> None:
        self._listeners.setdefault(topic, []).append(listener)

    def unsubscribe(self, topic: str, listener: EventListener) -> None:
        listeners = self._listeners.get(topic) or []
        if listener in listeners:
            listeners.remove(listener)

    def publish(self, topic: str, data: Optional[Dict[str, Any]] = None) -> Optional[int]:
        event_id: Optional[int] = None
        try:
            event_id = sqlite_db.create_event(topic, data)
        except Exception:  # noqa: BLE001
            logger.exception("事件发布失败: topic=%s", topic)

        for listener in list(self._listeners.get(topic) or []):
            try:
                listener(topic, data)
            except Exception:  # noqa: BLE001
                logger.exception("事件订阅者处理失败: topic=%s", topic)
        return event_id


event_bus = EventBus()
