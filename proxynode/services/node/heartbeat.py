"""节点心跳：周期性采集内存/负载并刷新节点存活字段。"""
from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta
from typing import Optional

from proxynode.core.config import settings
from proxynode.db.sqlite import sqlite_db
from proxynode.models.node import Node
from proxynode.services.node.metrics import SystemMetrics, system_metrics
from proxynode.services.task_runtime import spawn

logger = logging.getLogger(__name__)


class NodeHeartbeat:
    """单个已注册节点的心跳循环。

    每个周期只写 timestamp/memory/load1/load5/load15，且只更新已存在的记录，
    不会重建被外部删除的节点。周期之间严格串行，失败不重试也不退避。
    """

    def __init__(
        self,
        node: Node,
        *,
        metrics: Optional[SystemMetrics] = None,
        interval_seconds: Optional[float] = None,
    ) -> None:
        self.node = node
        self._metrics = metrics or system_metrics
        if interval_seconds is None:
            interval_seconds = settings.node_heartbeat_interval_sec
        self._interval = max(0.01, float(interval_seconds))
        self._task: Optional[asyncio.Task] = None
        self._stop_event = asyncio.Event()
        self.cycles = 0

    @property
    def running(self) -> bool:
        return bool(self._task and not self._task.done())

    async def start(self) -> None:
        self._stop_event.clear()
        if self.running:
            return
        self._task = spawn(
            self._loop(),
            task_name="node.heartbeat.loop",
            metadata={"node_id": self.node.id},
        )

    async def stop(self) -> None:
        self._stop_event.set()
        if self._task and not self._task.done():
            self._task.cancel()
            await asyncio.gather(self._task, return_exceptions=True)
        self._task = None

    async def _loop(self) -> None:
        while not self._stop_event.is_set():
            try:
                await self._tick()
            except Exception:  # noqa: BLE001
                logger.exception("NodeHeartbeat tick failed: %s", self.node.id)
            await asyncio.sleep(self._interval)

    def _next_timestamp(self) -> datetime:
        now = datetime.now()
        previous = self.node.timestamp
        if previous is not None and previous.tzinfo is None and now <= previous:
            now = previous + timedelta(microseconds=1)
        return now

    async def _tick(self) -> None:
        node = self.node
        node.timestamp = self._next_timestamp()

        try:
            node.memory = self._metrics.memory_utilization()
        except Exception as exc:  # noqa: BLE001
            node.memory = 0.0
            logger.error("node: Failed to get memory: %s", exc)

        try:
            load = self._metrics.load_averages()
        except Exception as exc:  # noqa: BLE001
            node.load1 = 0.0
            node.load5 = 0.0
            node.load15 = 0.0
            logger.error("node: Failed to get load: %s", exc)
        else:
            node.load1 = load.load1
            node.load5 = load.load5
            node.load15 = load.load15

        try:
            updated = sqlite_db.update_node(node.id, node.liveness_fields())
        except Exception as exc:  # noqa: BLE001
            logger.error("node: Failed to update node %s: %s", node.id, exc)
        else:
            if updated is None:
                logger.warning("node: Failed to update node %s: record not found", node.id)

        self.cycles += 1
