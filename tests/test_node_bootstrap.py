import pytest

from proxynode.core.config import Settings
from proxynode.services.node.bootstrap import build_node_candidate, load_node_id
from proxynode.services.node.errors import NodeValidationError

pytestmark = pytest.mark.unit


def _settings(tmp_path, **overrides):
    data = {"node_id_file": str(tmp_path / "data" / "node_id")}
    data.update(overrides)
    return Settings(**data)


def test_configured_node_id_wins(tmp_path):
    cfg = _settings(tmp_path, node_id="abc123")
    assert load_node_id(cfg) == "abc123"
    assert not (tmp_path / "data" / "node_id").exists()


def test_node_id_generated_once_and_persisted(tmp_path):
    cfg = _settings(tmp_path)
    first = load_node_id(cfg)
    second = load_node_id(cfg)
    assert first == second
    assert len(first) == 32
    assert (tmp_path / "data" / "node_id").read_text(encoding="utf-8") == first


def test_build_candidate_normalizes(tmp_path):
    cfg = _settings(
        tmp_path,
        node_id="n1",
        node_type="proxy",
        node_port=8443,
        node_protocol="HTTPS",
        node_management_domain="admin.example.com",
        node_services="svc-b, svc-a,,",
    )
    node = build_node_candidate(cfg)
    assert node.id == "n1"
    assert node.protocol == "https"
    assert node.port == 8443
    assert node.management_domain == ""
    assert node.services == ["svc-a", "svc-b"]


def test_build_candidate_rejects_invalid_port(tmp_path):
    cfg = _settings(tmp_path, node_id="n1", node_port=0)
    with pytest.raises(NodeValidationError) as exc_info:
        build_node_candidate(cfg)
    assert exc_info.value.data.error == "node_port_invalid"
