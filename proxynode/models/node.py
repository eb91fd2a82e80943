"""集群节点模型"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

NODE_TYPE_MANAGEMENT = "management"
NODE_TYPE_PROXY = "proxy"
NODE_TYPE_MANAGEMENT_PROXY = "management-proxy"

NODE_PROTOCOLS = ("http", "https")

# 注册阶段写入的身份字段
IDENTITY_FIELDS = ("_id", "name", "type", "timestamp")
# 心跳阶段写入的存活字段
LIVENESS_FIELDS = ("timestamp", "memory", "load1", "load5", "load15")
# 配置路径写入的字段
CONFIG_FIELDS = ("name", "type", "port", "protocol", "management_domain", "services")


class Node(BaseModel):
    """集群中的一个节点。

    持久化时主键字段名为 `_id`，对外 JSON 使用 `id`。
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id", min_length=1)
    name: str = ""
    type: str = ""
    timestamp: Optional[datetime] = None
    port: int = 0
    protocol: str = ""
    management_domain: str = ""
    memory: float = 0.0
    load1: float = 0.0
    load5: float = 0.0
    load15: float = 0.0
    services: Optional[List[str]] = None

    @field_validator("id")
    @classmethod
    def normalize_id(cls, value: str) -> str:
        text = str(value or "").strip()
        if not text:
            raise ValueError("节点 id 不能为空")
        return text

    @classmethod
    def from_record(cls, doc: Dict[str, Any]) -> "Node":
        """从存储文档构造节点；文档缺失 services（只经过注册的节点）时视为空列表。"""
        data = dict(doc)
        if data.get("services") is None:
            data["services"] = []
        return cls.model_validate(data)

    def to_record(self, fields: Optional[tuple] = None) -> Dict[str, Any]:
        """按持久化布局导出字段；`fields` 为空时导出全部。"""
        record = self.model_dump(by_alias=True)
        if fields is None:
            return record
        return {key: record[key] for key in fields}

    def identity_fields(self) -> Dict[str, Any]:
        return self.to_record(IDENTITY_FIELDS)

    def liveness_fields(self) -> Dict[str, Any]:
        return self.to_record(LIVENESS_FIELDS)


class NodeUpdateRequest(BaseModel):
    name: Optional[str] = None
    type: Optional[str] = None
    port: Optional[int] = None
    protocol: Optional[str] = None
    management_domain: Optional[str] = None
    services: Optional[List[str]] = None

    @field_validator("name", "type", "protocol")
    @classmethod
    def blank_as_unchanged(cls, value: Optional[str]) -> Optional[str]:
        # 空白视为不修改
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    @field_validator("management_domain")
    @classmethod
    def strip_domain(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return str(value).strip()
