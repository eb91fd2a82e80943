"""节点服务异常类型（轻量模块，避免引入重依赖）。"""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class NodeErrorData:
    """结构化校验失败：错误类型 + 面向用户的说明。"""

    error: str
    message: str


class NodeServiceError(Exception):
    """节点服务通用异常"""


class NodeValidationError(NodeServiceError):
    """节点配置校验失败"""

    def __init__(self, data: NodeErrorData):
        self.data = data
        super().__init__(f"{data.error}: {data.message}")


class NodeNotFoundError(NodeServiceError):
    """节点不存在"""


class NodeRegistrationError(NodeServiceError):
    """节点注册失败，进程不应以未注册状态继续运行"""


class MetricsError(NodeServiceError):
    """系统指标采集失败"""
