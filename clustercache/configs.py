"""Scheduler configuration: parsing, validation and the shared config context."""

from __future__ import annotations

import hashlib
import re
import threading
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .resources import ResourceError, resource_from_conf
from .security import SecurityError, parse_acl

ROOT_QUEUE = "root"
QUEUE_NAME_PATTERN = re.compile(r"^[a-zA-Z0-9_-]{1,64}$")
DEFAULT_PARTITION = "default"

_TRUE = {"true", "yes", "on", "y"}
_FALSE = {"false", "no", "off", "n"}


class ConfigError(ValueError):
    """Raised when a configuration cannot be loaded or is invalid."""


@dataclass
class QueueConfig:
    """Configuration of a single queue and its children."""

    name: str
    parent: bool = False
    queues: list[QueueConfig] = field(default_factory=list)
    properties: dict[str, str] = field(default_factory=dict)
    max_resource: dict[str, str] = field(default_factory=dict)
    guaranteed_resource: dict[str, str] = field(default_factory=dict)
    submit_acl: str = ""
    admin_acl: str = ""


@dataclass
class PlacementRule:
    """A placement rule, optionally chained to a parent rule."""

    name: str
    create: bool = False
    parent: PlacementRule | None = None
    value: str = ""
    filter: dict[str, object] = field(default_factory=dict)


@dataclass
class PartitionConfig:
    """Configuration of a partition: its queue tree and placement rules."""

    name: str
    queues: list[QueueConfig] = field(default_factory=list)
    placement_rules: list[PlacementRule] = field(default_factory=list)
    preemption_enabled: bool = False


@dataclass
class SchedulerConfig:
    """A validated scheduler configuration."""

    partitions: list[PartitionConfig] = field(default_factory=list)
    checksum: str = ""


def _mapping(value: object, what: str) -> dict:
    if value is None or value == "":
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"{what} must be a mapping")
    return value


def _sequence(value: object, what: str) -> list:
    if value is None or value == "":
        return []
    if not isinstance(value, list):
        raise ConfigError(f"{what} must be a list")
    return value


def _scalar(value: object, what: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ConfigError(f"{what} must be a scalar value")
    return value


def _boolean(value: object, what: str) -> bool:
    text = _scalar(value, what).strip().lower()
    if text == "" or text in _FALSE:
        return False
    if text in _TRUE:
        return True
    raise ConfigError(f"{what} must be a boolean, got '{text}'")


def _string_map(value: object, what: str) -> dict[str, str]:
    return {str(key): _scalar(item, f"{what}.{key}") for key, item in _mapping(value, what).items()}


def _parse_queue(node: object, path: str) -> QueueConfig:
    data = _mapping(node, f"queue in {path}")
    name = _scalar(data.get("name"), f"queue name in {path}")
    if not QUEUE_NAME_PATTERN.match(name):
        raise ConfigError(
            f"invalid queue name '{name}' in {path}, a name must only have alphanumeric characters,"
            " - or _, and be no longer than 64 characters"
        )
    queue_path = f"{path}.{name}" if path else name
    resources = _mapping(data.get("resources"), f"resources of {queue_path}")
    max_resource = _string_map(resources.get("max"), f"max resources of {queue_path}")
    guaranteed = _string_map(resources.get("guaranteed"), f"guaranteed resources of {queue_path}")
    try:
        resource_from_conf(max_resource)
        resource_from_conf(guaranteed)
    except ResourceError as exc:
        raise ConfigError(f"queue {queue_path}: {exc}") from exc
    submit_acl = _scalar(data.get("submitacl"), f"submit ACL of {queue_path}")
    admin_acl = _scalar(data.get("adminacl"), f"admin ACL of {queue_path}")
    try:
        parse_acl(submit_acl)
        parse_acl(admin_acl)
    except SecurityError as exc:
        raise ConfigError(f"queue {queue_path}: {exc}") from exc
    return QueueConfig(
        name=name,
        parent=_boolean(data.get("parent"), f"parent flag of {queue_path}"),
        queues=_parse_queues(data.get("queues"), queue_path),
        properties=_string_map(data.get("properties"), f"properties of {queue_path}"),
        max_resource=max_resource,
        guaranteed_resource=guaranteed,
        submit_acl=submit_acl,
        admin_acl=admin_acl,
    )


def _parse_queues(value: object, path: str) -> list[QueueConfig]:
    queues = [_parse_queue(node, path) for node in _sequence(value, f"queues of {path}")]
    seen: set[str] = set()
    for queue in queues:
        key = queue.name.lower()
        if key in seen:
            raise ConfigError(f"duplicate queue name '{queue.name}' in {path or 'partition'}")
        seen.add(key)
    return queues


def _parse_rule(node: object) -> PlacementRule:
    data = _mapping(node, "placement rule")
    name = _scalar(data.get("name"), "placement rule name")
    if not name:
        raise ConfigError("placement rule must have a name")
    parent = data.get("parent")
    return PlacementRule(
        name=name,
        create=_boolean(data.get("create"), f"create flag of rule {name}"),
        parent=_parse_rule(parent) if parent not in (None, "") else None,
        value=_scalar(data.get("value"), f"value of rule {name}"),
        filter=dict(_mapping(data.get("filter"), f"filter of rule {name}")),
    )


def _parse_partition(node: object) -> PartitionConfig:
    data = _mapping(node, "partition")
    name = _scalar(data.get("name"), "partition name")
    if not name:
        raise ConfigError("partition must have a name")
    queues = _parse_queues(data.get("queues"), "")
    if len(queues) == 1 and queues[0].name.lower() == ROOT_QUEUE:
        root = queues[0]
        root.parent = True
    elif any(queue.name.lower() == ROOT_QUEUE for queue in queues):
        raise ConfigError(f"partition {name}: root queue must be the only top level queue")
    else:
        root = QueueConfig(name=ROOT_QUEUE, parent=True, queues=queues)
    preemption = _mapping(data.get("preemption"), f"preemption of {name}")
    return PartitionConfig(
        name=name,
        queues=[root],
        placement_rules=[_parse_rule(rule) for rule in _sequence(data.get("placementrules"), "placementrules")],
        preemption_enabled=_boolean(preemption.get("enabled"), f"preemption flag of {name}"),
    )


def parse_config(data: bytes | str) -> SchedulerConfig:
    """Parse and validate a YAML scheduler configuration."""
    raw = data.encode("utf-8") if isinstance(data, str) else bytes(data)
    try:
        document = yaml.load(raw, Loader=yaml.BaseLoader)
    except yaml.YAMLError as exc:
        raise ConfigError(f"invalid configuration: {exc}") from exc
    top = _mapping(document, "configuration")
    partitions = [_parse_partition(node) for node in _sequence(top.get("partitions"), "partitions")]
    if not partitions:
        raise ConfigError("configuration must define at least one partition")
    seen: set[str] = set()
    for partition in partitions:
        key = partition.name.lower()
        if key in seen:
            raise ConfigError(f"duplicate partition name '{partition.name}'")
        seen.add(key)
    return SchedulerConfig(partitions=partitions, checksum=hashlib.sha256(raw).hexdigest())


_lock = threading.Lock()
_pending_data: bytes | None = None
_context: dict[str, SchedulerConfig] = {}


def set_config_data(data: bytes | str | None) -> None:
    """Set the raw configuration that the loader returns; None reverts to files."""
    global _pending_data
    with _lock:
        if data is None:
            _pending_data = None
        else:
            _pending_data = data.encode("utf-8") if isinstance(data, str) else bytes(data)


def load_scheduler_config(policy_group: str) -> SchedulerConfig:
    """Load the configuration for a policy group.

    Uses the data given to :func:`set_config_data`, otherwise reads
    ``<policy_group>.yaml`` from the working directory.
    """
    with _lock:
        data = _pending_data
    if data is None:
        path = Path(f"{policy_group}.yaml")
        try:
            data = path.read_bytes()
        except OSError as exc:
            raise ConfigError(f"cannot read configuration for policy group {policy_group}: {exc}") from exc
    return parse_config(data)


def store_config(policy_group: str, config: SchedulerConfig) -> None:
    """Record the active configuration for a policy group."""
    with _lock:
        _context[policy_group] = config


def get_config(policy_group: str) -> SchedulerConfig | None:
    """Return the active configuration for a policy group, if any."""
    with _lock:
        return _context.get(policy_group)


def normalized_partition_name(name: str, rm_id: str) -> str:
    """Return the partition name qualified with the resource manager ID."""
    if not name:
        name = DEFAULT_PARTITION
    if not rm_id or name.startswith(f"[{rm_id}]"):
        return name
    return f"[{rm_id}]{name}"


def rm_id_from_partition_name(name: str) -> str:
    """Extract the resource manager ID from a qualified partition name."""
    if name.startswith("[") and "]" in name:
        return name[1 : name.index("]")]
    return ""


def partition_name_without_cluster_id(name: str) -> str:
    """Strip the resource manager ID prefix from a partition name."""
    if name.startswith("[") and "]" in name:
        return name[name.index("]") + 1 :]
    return name