"""Allocations confirmed by the cache."""

from __future__ import annotations

from dataclasses import dataclass

from .configs import partition_name_without_cluster_id
from .protocol import Allocation, AllocationProposal
from .resources import Resource


@dataclass
class AllocationInfo:
    """A confirmed allocation together with its protocol form."""

    allocation_proto: Allocation
    application_id: str
    allocated_resource: Resource

    @property
    def uuid(self) -> str:
        return self.allocation_proto.uuid


def new_allocation_info(uuid: str, proposal: AllocationProposal) -> AllocationInfo:
    """Create an allocation with the given uuid from a scheduler proposal."""
    resource = proposal.allocated_resource
    proto = Allocation(
        allocation_key=proposal.allocation_key,
        allocation_tags=proposal.tags,
        uuid=uuid,
        resource_per_alloc=resource.copy() if resource is not None else None,
        priority=proposal.priority,
        queue_name=proposal.queue_name,
        node_id=proposal.node_id,
        partition_name=partition_name_without_cluster_id(proposal.partition_name),
        application_id=proposal.application_id,
    )
    return AllocationInfo(
        allocation_proto=proto,
        application_id=proposal.application_id,
        allocated_resource=resource,
    )


def create_mock_allocation_info(
    app_id: str, resource: Resource, uuid: str, queue_name: str, node_id: str
) -> AllocationInfo:
    """Create a minimal allocation, mainly useful for tests."""
    return AllocationInfo(
        allocation_proto=Allocation(uuid=uuid, queue_name=queue_name, node_id=node_id),
        application_id=app_id,
        allocated_resource=resource,
    )