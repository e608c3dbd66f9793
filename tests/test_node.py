from clustercache.allocation import create_mock_allocation_info
from clustercache.node import HOSTNAME, NODE_PARTITION, RACKNAME, NodeInfo, node_info_from_proto
from clustercache.protocol import NewNodeInfo
from clustercache.resources import Resource


def _res(memory, vcore):
    return Resource({"memory": memory, "vcore": vcore})


def _node():
    return NodeInfo(
        "node-123",
        Resource({"a": 123, "b": 456}),
        {HOSTNAME: "host1", RACKNAME: "rack1", NODE_PARTITION: "partition1"},
    )


def test_node_info_initialisation():
    node = _node()
    assert node.hostname == "host1"
    assert node.rackname == "rack1"
    assert node.partition == "partition1"
    assert node.total_resource.resources["a"] == 123
    assert node.total_resource.resources["b"] == 456
    assert node.allocated_resource.resources.get("a", 0) == 0


def test_attributes_update():
    node = _node()
    node.initialize_attributes(
        {HOSTNAME: "host2", RACKNAME: "rack1", NODE_PARTITION: "partition1", "x": "y"}
    )
    assert node.hostname == "host2"
    assert node.get_attribute("x") == "y"
    assert node.get_attribute("missing") == ""


def test_add_allocations():
    node = _node()
    node.add_allocation(create_mock_allocation_info("app1", _res(100, 200), "1", "queue-1", "node-1"))
    assert node.get_allocation("1") is not None
    assert node.allocated_resource == _res(100, 200)

    node.add_allocation(create_mock_allocation_info("app1", _res(20, 200), "2", "queue-1", "node-1"))
    assert node.get_allocation("2") is not None
    assert node.allocated_resource == _res(120, 400)
    assert len(node.get_all_allocations()) == 2


def test_remove_allocation_restores_available():
    total = _res(1000, 1000)
    node = NodeInfo("node-1", total)
    assert node.available_resource == total
    node.add_allocation(create_mock_allocation_info("app1", _res(100, 200), "1", "q", "node-1"))
    assert node.available_resource != total
    removed = node.remove_allocation("1")
    assert removed is not None and removed.allocation_proto.uuid == "1"
    assert node.available_resource == total
    assert node.get_all_allocations() == []


def test_remove_unknown_allocation_returns_none():
    node = _node()
    assert node.remove_allocation("does-not-exist") is None
    assert node.get_all_allocations() == []


def test_node_from_proto():
    proto = NewNodeInfo("node-9", _res(10, 2), {NODE_PARTITION: "[rm1]default", HOSTNAME: "h"})
    node = node_info_from_proto(proto)
    assert node.node_id == "node-9"
    assert node.partition == "[rm1]default"
    assert node.hostname == "h"
    assert node.rackname == ""
    assert node.total_resource == _res(10, 2)
    assert node.available_resource == _res(10, 2)


def test_node_without_attributes():
    node = NodeInfo("node-1", Resource({"memory": 1}), None)
    assert node.hostname == ""
    assert node.partition == ""