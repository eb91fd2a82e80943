"""节点注册：启动时认领或沿用节点记录，并启动心跳。"""
from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Iterable, Optional

from proxynode.db.sqlite import sqlite_db
from proxynode.models.node import CONFIG_FIELDS, NODE_TYPE_MANAGEMENT, Node
from proxynode.services.event_bus import NODE_CHANGE_TOPIC, EventBus, event_bus
from proxynode.services.node.errors import NodeRegistrationError
from proxynode.services.node.heartbeat import NodeHeartbeat
from proxynode.services.node.metrics import SystemMetrics
from proxynode.services.node.names import generate_name

logger = logging.getLogger(__name__)


class RegisteredNode:
    """注册结果：本进程的“自身节点”句柄。

    句柄只在注册成功时创建一次。`node` 的存活字段会被心跳原地修改，
    读取方不应假设多个字段之间是一致的快照。
    """

    def __init__(self, node: Node, heartbeat: NodeHeartbeat) -> None:
        self.node = node
        self.heartbeat = heartbeat

    @property
    def id(self) -> str:
        return self.node.id

    def apply_config(self, updated: Node) -> None:
        """同步配置字段到自身节点；存活字段仍只由心跳写入。"""
        for field in CONFIG_FIELDS:
            setattr(self.node, field, getattr(updated, field))

    async def stop(self) -> None:
        await self.heartbeat.stop()


class NodeRegistrar:
    def __init__(
        self,
        *,
        events: Optional[EventBus] = None,
        metrics: Optional[SystemMetrics] = None,
        heartbeat_interval_seconds: Optional[float] = None,
    ) -> None:
        self._events = events or event_bus
        self._metrics = metrics
        self._heartbeat_interval = heartbeat_interval_seconds
        self._lock = asyncio.Lock()
        self.registered: Optional[RegisteredNode] = None

    def _load_existing(self, candidate: Node) -> Node:
        try:
            doc = sqlite_db.get_node(candidate.id)
        except Exception as exc:  # noqa: BLE001
            raise NodeRegistrationError(f"读取节点记录失败: {exc}") from exc
        if not doc:
            return candidate.model_copy(deep=True)
        merged = {**candidate.to_record(), **doc}
        return Node.from_record(merged)

    async def register(self, candidate: Node) -> RegisteredNode:
        async with self._lock:
            if self.registered is not None:
                raise NodeRegistrationError(f"节点已注册: {self.registered.id}")

            node = self._load_existing(candidate)
            if not node.name:
                node.name = generate_name()
            if not node.type:
                node.type = NODE_TYPE_MANAGEMENT
            node.timestamp = datetime.now()

            try:
                sqlite_db.upsert_node(node.id, node.identity_fields())
            except Exception as exc:  # noqa: BLE001
                raise NodeRegistrationError(f"写入节点记录失败: {exc}") from exc

            self._events.publish(NODE_CHANGE_TOPIC)

            heartbeat = NodeHeartbeat(
                node,
                metrics=self._metrics,
                interval_seconds=self._heartbeat_interval,
            )
            self.registered = RegisteredNode(node, heartbeat)
            await heartbeat.start()

            logger.info("节点已注册: id=%s name=%s type=%s", node.id, node.name, node.type)
            _safe_log_node_event(
                action="node.register",
                status="success",
                level="INFO",
                message=f"节点注册成功: {node.name}",
                node_id=node.id,
                metadata={"name": node.name, "type": node.type},
            )
            return self.registered


def commit_node(node: Node) -> None:
    """写入节点全部持久化字段（不存在则创建）。"""
    sqlite_db.upsert_node(node.id, node.to_record())


def commit_node_fields(node: Node, fields: Iterable[str]) -> None:
    """只写入指定字段（不存在则创建）。"""
    sqlite_db.upsert_node(node.id, node.to_record(tuple(fields)))


def _safe_log_node_event(
    *,
    action: str,
    status: str,
    level: str,
    message: str,
    node_id: str,
    metadata: Optional[dict] = None,
) -> None:
    try:
        sqlite_db.create_event_log(
            source="node",
            action=action,
            event=action.rsplit(".", 1)[-1],
            status=status,
            level=level,
            message=message,
            resource_type="node",
            resource_id=node_id,
            metadata=metadata,
        )
    except Exception:  # noqa: BLE001
        logger.warning("节点事件日志写入失败: %s", action, exc_info=True)


node_registrar = NodeRegistrar()
