"""Multi-dimensional resource quantities and the arithmetic used by the cache."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

MEMORY = "memory"
VCORE = "vcore"


class ResourceError(ValueError):
    """Raised when a resource definition cannot be parsed."""


@dataclass(eq=False)
class Resource:
    """A set of named integer quantities, such as memory and vcores."""

    resources: dict[str, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.resources = {name: int(value) for name, value in self.resources.items()}

    def copy(self) -> Resource:
        """Return an independent copy of this resource."""
        return Resource(dict(self.resources))

    def add_to(self, other: Resource | None) -> None:
        """Add the quantities of ``other`` to this resource in place."""
        if other is None:
            return
        for name, value in other.resources.items():
            self.resources[name] = self.resources.get(name, 0) + value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Resource):
            return NotImplemented
        return equals(self, other)

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        body = " ".join(f"{name}:{value}" for name, value in sorted(self.resources.items()))
        return f"map[{body}]"


def resource_from_conf(conf: Mapping[str, object] | None) -> Resource:
    """Build a resource from a configuration mapping of names to quantities."""
    result = Resource()
    if not conf:
        return result
    for name, value in conf.items():
        if isinstance(value, bool):
            raise ResourceError(f"invalid quantity {value!r} for resource {name}")
        if isinstance(value, int):
            result.resources[str(name)] = value
            continue
        try:
            result.resources[str(name)] = int(str(value).strip(), 10)
        except ValueError as exc:
            raise ResourceError(f"invalid quantity {value!r} for resource {name}") from exc
    return result


def add(left: Resource | None, right: Resource | None) -> Resource:
    """Return a new resource that is the sum of both arguments."""
    result = Resource()
    result.add_to(left)
    result.add_to(right)
    return result


def sub(left: Resource | None, right: Resource | None) -> Resource:
    """Return a new resource holding ``left`` minus ``right``; values may go negative."""
    result = left.copy() if left is not None else Resource()
    if right is not None:
        for name, value in right.resources.items():
            result.resources[name] = result.resources.get(name, 0) - value
    return result


def fit_in(larger: Resource | None, smaller: Resource | None) -> bool:
    """Check that every quantity of ``smaller`` fits within ``larger``."""
    if smaller is None:
        return True
    available = larger.resources if larger is not None else {}
    return all(available.get(name, 0) >= value for name, value in smaller.resources.items())


def is_zero(resource: Resource | None) -> bool:
    """Return True when the resource is absent or all its quantities are zero."""
    if resource is None:
        return True
    return all(value == 0 for value in resource.resources.values())


def equals(left: Resource | None, right: Resource | None) -> bool:
    """Compare two resources, treating a missing quantity as zero."""
    if left is right:
        return True
    if left is None or right is None:
        return False
    names = set(left.resources) | set(right.resources)
    return all(left.resources.get(name, 0) == right.resources.get(name, 0) for name in names)