"""节点配置校验与规范化。

`validate_node` 原地修改传入的节点：
- `services` 缺失时置为空列表；
- 非 management-proxy 类型的节点清空 `management_domain`；
- `services` 排序为规范顺序（不去重）。

校验失败以 `NodeErrorData` 返回而不是抛出，由调用方决定如何呈现。
"""
from __future__ import annotations

from typing import Optional

from proxynode.models.node import NODE_PROTOCOLS, NODE_TYPE_MANAGEMENT_PROXY, Node
from proxynode.services.node.errors import NodeErrorData

PORT_MIN = 1
PORT_MAX = 65535


def format_node(node: Node) -> None:
    node.services = sorted(node.services or [])


def validate_node(node: Node) -> Optional[NodeErrorData]:
    if node.services is None:
        node.services = []

    if node.protocol not in NODE_PROTOCOLS:
        return NodeErrorData(
            error="node_protocol_invalid",
            message="Invalid node server protocol",
        )

    if node.port < PORT_MIN or node.port > PORT_MAX:
        return NodeErrorData(
            error="node_port_invalid",
            message="Invalid node server port",
        )

    if node.type != NODE_TYPE_MANAGEMENT_PROXY:
        node.management_domain = ""

    format_node(node)
    return None
