"""Nodes registered in a partition and the allocations running on them."""

from __future__ import annotations

import threading
from collections.abc import Mapping

from . import resources
from .allocation import AllocationInfo
from .protocol import NewNodeInfo
from .resources import Resource

HOSTNAME = "si.io/hostname"
RACKNAME = "si.io/rackname"
NODE_PARTITION = "si.io/node-partition"


class NodeInfo:
    """A node with its total, allocated and available resources."""

    def __init__(
        self,
        node_id: str,
        total_resource: Resource | None,
        attributes: Mapping[str, str] | None = None,
    ) -> None:
        self.node_id = node_id
        self.total_resource = total_resource if total_resource is not None else Resource()
        self.hostname = ""
        self.rackname = ""
        self.partition = ""
        self._allocated = Resource()
        self._available = self.total_resource
        self._attributes: dict[str, str] = {}
        self._allocations: dict[str, AllocationInfo] = {}
        self._lock = threading.RLock()
        self.initialize_attributes(attributes)

    def __repr__(self) -> str:
        return f"NodeInfo({self.node_id!r}, total={self.total_resource})"

    @property
    def allocated_resource(self) -> Resource:
        with self._lock:
            return self._allocated

    @property
    def available_resource(self) -> Resource:
        with self._lock:
            return self._available

    def initialize_attributes(self, attributes: Mapping[str, str] | None) -> None:
        """Replace the attributes and refresh host, rack and partition."""
        with self._lock:
            self._attributes = dict(attributes) if attributes else {}
            self.hostname = self._attributes.get(HOSTNAME, "")
            self.rackname = self._attributes.get(RACKNAME, "")
            self.partition = self._attributes.get(NODE_PARTITION, "")

    def get_attribute(self, key: str) -> str:
        """Return an attribute value, or an empty string when not set."""
        with self._lock:
            return self._attributes.get(key, "")

    def get_allocation(self, uuid: str) -> AllocationInfo | None:
        with self._lock:
            return self._allocations.get(uuid)

    def add_allocation(self, info: AllocationInfo) -> None:
        """Record an allocation and update allocated and available resources."""
        with self._lock:
            self._allocations[info.allocation_proto.uuid] = info
            self._allocated = resources.add(self._allocated, info.allocated_resource)
            self._available = resources.sub(self.total_resource, self._allocated)

    def remove_allocation(self, uuid: str) -> AllocationInfo | None:
        """Remove an allocation and return it, or None when it is unknown."""
        with self._lock:
            info = self._allocations.pop(uuid, None)
            if info is not None:
                self._allocated = resources.sub(self._allocated, info.allocated_resource)
                self._available = resources.sub(self.total_resource, self._allocated)
            return info

    def get_all_allocations(self) -> list[AllocationInfo]:
        with self._lock:
            return list(self._allocations.values())


def node_info_from_proto(proto: NewNodeInfo) -> NodeInfo:
    """Create a node from its registration message."""
    total = proto.schedulable_resource.copy() if proto.schedulable_resource is not None else Resource()
    return NodeInfo(proto.node_id, total, proto.attributes)