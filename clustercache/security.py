"""Users, groups, access control lists and user resolution."""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field


class SecurityError(ValueError):
    """Raised for invalid ACLs or users that cannot be resolved."""


@dataclass(frozen=True)
class UserGroup:
    """A user together with the groups it belongs to."""

    user: str
    groups: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "groups", tuple(self.groups))


@dataclass(frozen=True)
class ACL:
    """An access control list of users and groups; wildcards allow everyone."""

    users: frozenset[str] = field(default_factory=frozenset)
    groups: frozenset[str] = field(default_factory=frozenset)
    all_users: bool = False
    all_groups: bool = False

    def check_access(self, user: UserGroup | None) -> bool:
        """Return True if the user or one of its groups is allowed."""
        if user is None:
            return False
        if self.all_users or user.user in self.users:
            return True
        if self.all_groups:
            return True
        return any(group in self.groups for group in user.groups)


def _parse_names(part: str) -> tuple[frozenset[str], bool]:
    names = [name.strip() for name in part.split(",")]
    names = [name for name in names if name]
    if "*" in names:
        return frozenset(), True
    return frozenset(names), False


def parse_acl(text: str | None) -> ACL:
    """Parse an ACL of the form ``"user1,user2 group1,group2"``.

    An empty string allows nobody, ``*`` allows everyone, a leading space
    gives a group-only list. More than one separating space is an error.
    """
    if not text:
        return ACL()
    fields = text.split(" ")
    if len(fields) > 2:
        raise SecurityError(f"multiple spaces found in ACL: '{text}'")
    users, all_users = _parse_names(fields[0])
    groups: frozenset[str] = frozenset()
    all_groups = False
    if len(fields) == 2:
        groups, all_groups = _parse_names(fields[1])
    return ACL(users=users, groups=groups, all_users=all_users, all_groups=all_groups)


def _no_groups(user: str) -> Iterable[str]:
    return ()


class UserGroupCache:
    """Resolves user information into :class:`UserGroup`, caching lookups."""

    def __init__(self, resolver: Callable[[str], Iterable[str]] | None = None) -> None:
        self._resolver = resolver or _no_groups
        self._cache: dict[str, UserGroup] = {}
        self._lock = threading.Lock()

    def convert_ugi(self, ugi) -> UserGroup:
        """Convert user group information (``user`` and ``groups``) to a UserGroup."""
        user = getattr(ugi, "user", None) if ugi is not None else None
        if not user:
            raise SecurityError("empty user cannot resolve")
        groups = getattr(ugi, "groups", None)
        if groups:
            return UserGroup(user, tuple(groups))
        with self._lock:
            cached = self._cache.get(user)
            if cached is not None:
                return cached
            try:
                resolved = UserGroup(user, tuple(self._resolver(user)))
            except (LookupError, OSError) as exc:
                raise SecurityError(f"user {user} cannot be resolved: {exc}") from exc
            self._cache[user] = resolved
            return resolved