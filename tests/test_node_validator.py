import pytest

from proxynode.models.node import NODE_TYPE_MANAGEMENT, NODE_TYPE_MANAGEMENT_PROXY, NODE_TYPE_PROXY, Node
from proxynode.services.node.validator import validate_node

pytestmark = pytest.mark.unit


def _node(**overrides):
    data = {"id": "n1", "type": NODE_TYPE_MANAGEMENT, "port": 443, "protocol": "https"}
    data.update(overrides)
    return Node(**data)


@pytest.mark.parametrize("port,valid", [(0, False), (1, True), (443, True), (65535, True), (65536, False), (-1, False), (70000, False)])
def test_validate_port_range(port, valid):
    error = validate_node(_node(port=port))
    if valid:
        assert error is None
    else:
        assert error is not None and error.error == "node_port_invalid"


@pytest.mark.parametrize("protocol,valid", [("http", True), ("https", True), ("ftp", False), ("HTTP", False), ("", False)])
def test_validate_protocol(protocol, valid):
    error = validate_node(_node(protocol=protocol))
    if valid:
        assert error is None
    else:
        assert error is not None and error.error == "node_protocol_invalid"


def test_protocol_checked_before_port():
    error = validate_node(_node(protocol="ftp", port=443))
    assert error.error == "node_protocol_invalid"
    assert error.message == "Invalid node server protocol"

    error = validate_node(_node(protocol="https", port=70000))
    assert error.error == "node_port_invalid"
    assert error.message == "Invalid node server port"


def test_management_domain_kept_for_management_proxy():
    node = _node(type=NODE_TYPE_MANAGEMENT_PROXY, management_domain="x.example.com")
    assert validate_node(node) is None
    assert node.management_domain == "x.example.com"


@pytest.mark.parametrize("node_type", [NODE_TYPE_MANAGEMENT, NODE_TYPE_PROXY, "", "other"])
def test_management_domain_cleared_for_other_types(node_type):
    node = _node(type=node_type, management_domain="x.example.com")
    assert validate_node(node) is None
    assert node.management_domain == ""


def test_services_defaulted_even_when_invalid():
    node = _node(protocol="ftp", services=None)
    assert validate_node(node) is not None
    assert node.services == []


def test_services_sorted_and_idempotent():
    node = _node(services=["c", "a", "b", "a"])
    assert validate_node(node) is None
    assert node.services == ["a", "a", "b", "c"]

    assert validate_node(node) is None
    assert node.services == ["a", "a", "b", "c"]
