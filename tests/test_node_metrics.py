import re
from types import SimpleNamespace

import pytest

from proxynode.services.node.errors import MetricsError
from proxynode.services.node.metrics import SystemMetrics
from proxynode.services.node.names import generate_name

pytestmark = pytest.mark.unit


def test_memory_utilization_is_fraction(monkeypatch):
    monkeypatch.setattr("proxynode.services.node.metrics.psutil.virtual_memory", lambda: SimpleNamespace(percent=37.5))
    assert SystemMetrics().memory_utilization() == 0.375


def test_load_averages_rounded(monkeypatch):
    monkeypatch.setattr("proxynode.services.node.metrics.psutil.getloadavg", lambda: (1.234, 0.567, 0.891))
    load = SystemMetrics().load_averages()
    assert (load.load1, load.load5, load.load15) == (1.23, 0.57, 0.89)


def test_metric_failures_raise_metrics_error(monkeypatch):
    def _boom():
        raise OSError("no /proc")

    monkeypatch.setattr("proxynode.services.node.metrics.psutil.virtual_memory", _boom)
    monkeypatch.setattr("proxynode.services.node.metrics.psutil.getloadavg", _boom)
    with pytest.raises(MetricsError):
        SystemMetrics().memory_utilization()
    with pytest.raises(MetricsError):
        SystemMetrics().load_averages()


def test_generate_name_shape():
    assert re.fullmatch(r"[a-z]+-[a-z]+-\d{4}", generate_name())
