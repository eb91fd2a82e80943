"""集群节点接口"""
from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, HTTPException, Request

from proxynode.models.node import NodeUpdateRequest
from proxynode.services.node import directory

router = APIRouter(prefix="/api/v1/nodes", tags=["nodes"])


@router.get("")
async def list_nodes() -> Dict[str, Any]:
    items = [node.model_dump(mode="json") for node in directory.list_nodes()]
    return {"items": items, "total": len(items)}


@router.get("/self")
async def get_self_node(request: Request) -> Dict[str, Any]:
    self_node = getattr(request.app.state, "self_node", None)
    if self_node is None:
        raise HTTPException(status_code=503, detail="节点尚未注册")
    data = self_node.node.model_dump(mode="json")
    data["heartbeat_cycles"] = self_node.heartbeat.cycles
    return data


@router.get("/{node_id}")
async def get_node(node_id: str) -> Dict[str, Any]:
    return directory.get_node(node_id).model_dump(mode="json")


@router.put("/{node_id}")
async def update_node(node_id: str, payload: NodeUpdateRequest, request: Request) -> Dict[str, Any]:
    node = directory.update_node_config(node_id, payload)
    self_node = getattr(request.app.state, "self_node", None)
    if self_node is not None and self_node.id == node.id:
        self_node.apply_config(node)
    return node.model_dump(mode="json")
