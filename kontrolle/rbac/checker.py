"""Permission checking for kontrolle.

Answers role, permission and feature questions against a FlatIndex.
Lookups that find nothing answer False; only malformed configuration
raises.
"""

import threading
from typing import Any, Iterable, List, Mapping, NamedTuple, Optional, Sequence, Union

from ..common.logger import get_logger
from .models import Access, Feature, Role
from .naming import encode
from .transform import FlatIndex, build_index

logger = get_logger("rbac.checker")


class PermissionQuery(NamedTuple):
    """One (group, resource, action) question for can_any / can_all."""
    group: str
    resource: str
    action: str


QueryLike = Union[PermissionQuery, Sequence[str], Mapping[str, str]]


def _as_query(query: QueryLike) -> PermissionQuery:
    if isinstance(query, Mapping):
        return PermissionQuery(query["group"], query["resource"], query["action"])
    if isinstance(query, str):
        raise TypeError(f"Permission query must be a sequence of three strings, got {query!r}")
    return PermissionQuery(*query)


def _key(index: FlatIndex, group: str, resource: str) -> Optional[str]:
    # No indexed group contains the delimiter
    if group and index.delimiter in group:
        return None
    return encode(group, resource, index.delimiter)


class PermissionChecker:
    """Checks roles, permissions and features held in a FlatIndex."""

    def __init__(self, index: FlatIndex):
        """
        Initialize with a built index.

        Args:
            index: FlatIndex produced by build_index
        """
        self._index = index
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "PermissionChecker":
        """Build the index for ``config`` and wrap it in a checker."""
        return cls(build_index(config))

    @property
    def index(self) -> FlatIndex:
        return self._index

    def init(self, config: Mapping[str, Any]) -> None:
        """Rebuild the index from ``config`` and swap it in.

        The new index is built before the lock is taken, so a malformed
        config leaves the current index in place.
        """
        index = build_index(config)
        with self._lock:
            self._index = index
        logger.info(
            f"Authorization index replaced: {len(index.roles)} roles, "
            f"{len(index.permissions)} permissions"
        )

    # Roles

    def has_role(self, name: str) -> Union[Role, bool]:
        """Return the role called ``name``, or False."""
        return self._index.roles.get(name, False)

    def _count_roles(self, names: Iterable[str]) -> int:
        requested = set(names)
        return sum(1 for role in self._index.roles.values() if role.name in requested)

    def has_any_role(self, names: List[str]) -> bool:
        """Check if any of the given roles is defined."""
        return self._count_roles(names) > 0

    def has_all_roles(self, names: List[str]) -> bool:
        """Check if all of the given roles are defined."""
        return self._count_roles(names) == len(names)

    # Permissions

    def can(self, group: str, resource: str, action: str) -> bool:
        """Check if ``action`` is allowed on group/resource."""
        for permission in self._index.permissions.values():
            if permission.matches(group, resource, action):
                return True
        return False

    def can_any(self, queries: Iterable[QueryLike]) -> bool:
        """Check if any of the given queries is allowed."""
        return any(self.can(*_as_query(query)) for query in queries)

    def can_all(self, queries: Sequence[QueryLike]) -> bool:
        """Check if all of the given queries are allowed.

        Every query is evaluated; the answer compares the hit count with
        the number of queries.
        """
        found = 0
        for query in queries:
            if self.can(*_as_query(query)):
                found += 1
        return found == len(queries)

    def _count_actions(self, group: str, resource: str, actions: Iterable[str]) -> int:
        index = self._index
        key = _key(index, group, resource)
        permission = index.permissions.get(key) if key is not None else None
        if permission is None or (permission.group, permission.resource) != (group, resource):
            return 0
        return permission.count_matching(actions)

    def can_any_action(self, group: str, resource: str, actions: List[str]) -> bool:
        """Check if any of ``actions`` is allowed on group/resource."""
        return self._count_actions(group, resource, actions) > 0

    def can_all_actions(self, group: str, resource: str, actions: List[str]) -> bool:
        """Check if every one of ``actions`` is allowed on group/resource."""
        return self._count_actions(group, resource, actions) == len(actions)

    # Features

    def has_feature(self, group: str, resource: str) -> Union[Feature, bool]:
        """Return the feature defined for group/resource, or False."""
        index = self._index
        key = _key(index, group, resource)
        if key is None:
            return False
        return index.features.get(key, False)

    def can_access(self, group: str, resource: str, access: Union[int, str, Access]) -> bool:
        """Check that the feature on group/resource holds every ``access`` bit."""
        feature = self.has_feature(group, resource)
        if not feature:
            return False
        return feature.matches(group, resource, access)

    def role_features(self, role: str) -> List[str]:
        """Composite feature names assigned to ``role``."""
        return list(self._index.role_features.get(role, []))

    def has_role_feature(self, role: str, group: str, resource: str) -> bool:
        """Check if ``role`` was assigned the group/resource feature."""
        index = self._index
        key = _key(index, group, resource)
        return key is not None and key in index.role_features.get(role, [])
