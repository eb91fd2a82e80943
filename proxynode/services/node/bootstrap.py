"""根据进程配置构造待注册的候选节点。"""
from __future__ import annotations

import logging
import os
from typing import List, Optional
from uuid import uuid4

from proxynode.core.config import Settings, settings
from proxynode.models.node import Node
from proxynode.services.node.errors import NodeValidationError
from proxynode.services.node.validator import validate_node

logger = logging.getLogger(__name__)


def _parse_services(text: str) -> List[str]:
    return [item.strip() for item in str(text or "").split(",") if item.strip()]


def load_node_id(cfg: Optional[Settings] = None) -> str:
    """节点 id：优先读配置，其次读本地 id 文件，都没有时生成并写回文件。"""
    cfg = cfg or settings
    configured = str(cfg.node_id or "").strip()
    if configured:
        return configured

    path = cfg.node_id_file
    if os.path.exists(path):
        with open(path, "r", encoding="utf-8") as fh:
            stored = fh.read().strip()
        if stored:
            return stored

    node_id = uuid4().hex
    node_dir = os.path.dirname(path)
    if node_dir:
        os.makedirs(node_dir, exist_ok=True)
    with open(path, "w", encoding="utf-8") as fh:
        fh.write(node_id)
    logger.info("已生成节点 id: %s -> %s", node_id, path)
    return node_id


def build_node_candidate(cfg: Optional[Settings] = None) -> Node:
    cfg = cfg or settings
    node = Node(
        id=load_node_id(cfg),
        name=str(cfg.node_name or "").strip(),
        type=str(cfg.node_type or "").strip(),
        port=int(cfg.node_port),
        protocol=str(cfg.node_protocol or "").strip().lower(),
        management_domain=str(cfg.node_management_domain or "").strip(),
        services=_parse_services(cfg.node_services),
    )
    error = validate_node(node)
    if error is not None:
        raise NodeValidationError(error)
    return node
