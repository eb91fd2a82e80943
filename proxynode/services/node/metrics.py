"""本机内存与负载指标采集。"""
from __future__ import annotations

from typing import NamedTuple

import psutil

from proxynode.services.node.errors import MetricsError


class LoadAverage(NamedTuple):
    load1: float
    load5: float
    load15: float


class SystemMetrics:
    def memory_utilization(self) -> float:
        """内存占用比例，范围 [0, 1]。"""
        try:
            percent = float(psutil.virtual_memory().percent)
        except Exception as exc:  # noqa: BLE001
            raise MetricsError(f"读取内存信息失败: {exc}") from exc
        return round(percent / 100.0, 4)

    def load_averages(self) -> LoadAverage:
        try:
            load1, load5, load15 = psutil.getloadavg()
        except Exception as exc:  # noqa: BLE001
            raise MetricsError(f"读取系统负载失败: {exc}") from exc
        return LoadAverage(round(float(load1), 2), round(float(load5), 2), round(float(load15), 2))


system_metrics = SystemMetrics()
