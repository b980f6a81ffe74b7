"""Entity model for kontrolle RBAC.

Roles, permissions and features are immutable values. Each one is built
through a ``create`` factory that validates its input and raises
ConfigError on missing fields.

Permission: a (group, resource) pair with a set of allowed actions.
Feature:    a (group, resource) pair with an access bitmask.
"""

from dataclasses import dataclass
from enum import IntFlag
from typing import FrozenSet, Iterable, Optional, Union

from ..errors import ConfigError
from .naming import DEFAULT_DELIMITER, encode

PRERELEASE_TAGS = ("alpha", "beta")


class Access(IntFlag):
    """Access flags held by a feature."""

    NONE = 0
    CREATE = 1 << 1
    READ = 1 << 2
    UPDATE = 1 << 3
    DELETE = 1 << 4
    ALL = CREATE | READ | UPDATE | DELETE

    @classmethod
    def parse(cls, value: Union[int, str, Iterable[str], "Access"]) -> "Access":
        """Convert an int, a flag name, or a list of flag names to Access."""
        if isinstance(value, bool):
            raise ConfigError(f"Invalid access value: {value!r}")

        if isinstance(value, int):
            if value & ~int(cls.ALL):
                raise ConfigError(f"Invalid access bits: {value}")
            return cls(value)

        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                raise ConfigError(f"Unknown access flag: {value}") from None

        try:
            names = list(value)
        except TypeError:
            raise ConfigError(f"Invalid access value: {value!r}") from None

        access = cls.NONE
        for name in names:
            if not isinstance(name, str):
                raise ConfigError(f"Invalid access flag: {name!r}")
            access |= cls.parse(name)
        return access


@dataclass(frozen=True)
class Role:
    """A named role."""
    name: str

    @classmethod
    def create(cls, name: str) -> "Role":
        if not name or not isinstance(name, str):
            raise ConfigError(f"Invalid role name: {name!r}")
        return cls(name)


@dataclass(frozen=True)
class Permission:
    """Actions allowed on one (group, resource) pair."""
    name: str
    group: str
    resource: str
    actions: FrozenSet[str]
    version: Optional[str] = None

    @classmethod
    def create(
        cls,
        group: str,
        resource: str,
        actions: Union[str, Iterable[str]],
        version: Optional[str] = None,
        delimiter: str = DEFAULT_DELIMITER,
    ) -> "Permission":
        """Build a permission, accepting a single action or a list of them."""
        name = encode(group, resource, delimiter)

        if actions is None:
            raise ConfigError(f"Permission {name} has no actions")
        if isinstance(actions, str):
            actions = [actions]

        try:
            action_set = frozenset(actions)
        except TypeError:
            raise ConfigError(f"Permission {name} has invalid actions: {actions!r}") from None
        if not action_set:
            raise ConfigError(f"Permission {name} has no actions")
        for action in action_set:
            if not action or not isinstance(action, str):
                raise ConfigError(f"Permission {name} has an invalid action: {action!r}")

        return cls(
            name=name,
            group=group,
            resource=resource,
            actions=action_set,
            version=str(version) if version else None,
        )

    def matches(self, group: str, resource: str, action: str) -> bool:
        """Check whether this permission allows ``action`` on group/resource."""
        return (
            self.group == group
            and self.resource == resource
            and action in self.actions
        )

    def count_matching(self, actions: Iterable[str]) -> int:
        """Count how many of ``actions`` this permission allows."""
        return sum(1 for action in actions if action in self.actions)


@dataclass(frozen=True)
class Feature:
    """Access bitmask held on one (group, resource) pair."""
    name: str
    group: str
    resource: str
    access: Access
    version: Optional[str] = None

    @classmethod
    def create(
        cls,
        group: str,
        resource: str,
        access: Union[int, str, Iterable[str]],
        version: Optional[str] = None,
        delimiter: str = DEFAULT_DELIMITER,
    ) -> "Feature":
        name = encode(group, resource, delimiter)
        if access is None:
            raise ConfigError(f"Feature {name} has no access")
        return cls(
            name=name,
            group=group,
            resource=resource,
            access=Access.parse(access),
            version=str(version) if version else None,
        )

    @property
    def is_prerelease(self) -> bool:
        """True when the version is tagged alpha or beta."""
        if not self.version:
            return False
        version = self.version.lower()
        return any(tag in version for tag in PRERELEASE_TAGS)

    def matches(self, group: str, resource: str, required: Union[int, Access]) -> bool:
        """Check that every required access bit is held on group/resource.

        An empty requirement grants nothing.
        """
        required = Access.parse(required)
        if not required:
            return False
        return (
            self.group == group
            and self.resource == resource
            and self.access & required == required
        )
