"""Messages exchanged with resource managers and the scheduler."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum

from .resources import Resource


class TerminationType(IntEnum):
    """Why an allocation was released."""

    STOPPED_BY_RM = 0
    TIMEOUT = 1
    PREEMPTED_BY_SCHEDULER = 2


@dataclass
class Allocation:
    """An allocation as reported to or by a resource manager."""

    allocation_key: str = ""
    allocation_tags: dict[str, str] = field(default_factory=dict)
    uuid: str = ""
    resource_per_alloc: Resource | None = None
    priority: int | None = None
    queue_name: str = ""
    node_id: str = ""
    partition_name: str = ""
    application_id: str = ""


@dataclass
class UserGroupInformation:
    """User and group details sent along with an application."""

    user: str = ""
    groups: list[str] = field(default_factory=list)


@dataclass
class NewNodeInfo:
    """A node registered by a resource manager, with allocations it already runs."""

    node_id: str
    schedulable_resource: Resource | None = None
    attributes: dict[str, str] = field(default_factory=dict)
    existing_allocations: list[Allocation] = field(default_factory=list)


@dataclass
class AllocationProposal:
    """An allocation proposed by the scheduler for the cache to confirm."""

    node_id: str
    application_id: str
    queue_name: str
    allocated_resource: Resource
    allocation_key: str = ""
    tags: dict[str, str] = field(default_factory=dict)
    priority: int | None = None
    partition_name: str = ""


@dataclass
class ReleaseAllocation:
    """A request to release one allocation, or all of an application's when uuid is empty."""

    uuid: str
    application_id: str
    partition_name: str
    message: str = ""
    release_type: TerminationType = TerminationType.STOPPED_BY_RM