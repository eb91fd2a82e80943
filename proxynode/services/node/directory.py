"""节点目录查询与配置修改。"""
from __future__ import annotations

import logging
from typing import List

from proxynode.db.sqlite import sqlite_db
from proxynode.models.node import CONFIG_FIELDS, Node, NodeUpdateRequest
from proxynode.services.event_bus import NODE_CHANGE_TOPIC, event_bus
from proxynode.services.node.errors import NodeNotFoundError, NodeValidationError
from proxynode.services.node.registrar import commit_node_fields
from proxynode.services.node.validator import validate_node

logger = logging.getLogger(__name__)


def list_nodes() -> List[Node]:
    return [Node.from_record(doc) for doc in sqlite_db.list_nodes()]


def get_node(node_id: str) -> Node:
    doc = sqlite_db.get_node(node_id)
    if not doc:
        raise NodeNotFoundError(node_id)
    return Node.from_record(doc)


def update_node_config(node_id: str, payload: NodeUpdateRequest) -> Node:
    """修改节点配置字段：校验通过后只写配置字段，并广播 node.change。"""
    node = get_node(node_id)
    patch = payload.model_dump(exclude_none=True)
    for key, value in patch.items():
        setattr(node, key, value)

    error = validate_node(node)
    if error is not None:
        raise NodeValidationError(error)

    commit_node_fields(node, CONFIG_FIELDS)
    event_bus.publish(NODE_CHANGE_TOPIC)
    logger.info("节点配置已更新: id=%s fields=%s", node.id, sorted(patch))
    return node
