"""Building blocks for a scheduler's cluster cache: resources, ACLs, configuration, messages, nodes, allocations and metrics."""

__version__ = "0.1.0"

__all__ = [
    "allocation",
    "configs",
    "metrics",
    "node",
    "protocol",
    "resources",
    "security",
]