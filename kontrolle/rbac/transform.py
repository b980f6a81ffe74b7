"""Config transform for kontrolle RBAC.

Turns the nested authorization configuration into the flat, read-only
index that queries run against. Configuration sections are walked in
insertion order; the collision policies below depend on it.

- roles:         duplicate names overwrite silently
- permissions:   identical action sets keep the first, different ones overwrite
- features:      the lower access bitmask is discarded
- role_features: flattened into composite names per role
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Tuple, Union

from ..common.config import KontrolleOptions, parse_options
from ..common.logger import get_logger
from ..errors import ConfigError
from .models import Feature, Permission, Role
from .naming import DEFAULT_DELIMITER, encode

logger = get_logger("rbac.transform")

GroupedConfig = Union[Mapping[str, Any], List[Mapping[str, Any]]]


@dataclass(frozen=True)
class FlatIndex:
    """Queryable structures built once from a configuration."""
    roles: Dict[str, Role]
    permissions: Dict[str, Permission] = field(default_factory=dict)
    features: Dict[str, Feature] = field(default_factory=dict)
    role_features: Dict[str, List[str]] = field(default_factory=dict)
    delimiter: str = DEFAULT_DELIMITER


def _iter_grouped(data: GroupedConfig, section: str) -> Iterator[Tuple[str, str, Any]]:
    """Yield (group, resource, entry) from a mapping or a list of mappings."""
    if isinstance(data, Mapping):
        blocks = [data]
    elif isinstance(data, list):
        blocks = data
    else:
        raise ConfigError(
            f"{section} must be a mapping or a list of mappings, "
            f"got {type(data).__name__}"
        )

    for block in blocks:
        if not isinstance(block, Mapping):
            raise ConfigError(f"{section} entries must be mappings, got {type(block).__name__}")
        for group, resources in block.items():
            if not isinstance(resources, Mapping):
                raise ConfigError(f"{section} group {group!r} must map resources to settings")
            for resource, entry in resources.items():
                yield group, resource, entry


def build_roles(data: Union[List[str], Mapping[str, str]]) -> Dict[str, Role]:
    """Build the role map from a list of names or an alias -> name mapping."""
    if isinstance(data, Mapping):
        names = list(data.values())
    elif isinstance(data, (list, tuple)):
        names = list(data)
    else:
        raise ConfigError(f"roles must be a list or a mapping, got {type(data).__name__}")

    roles: Dict[str, Role] = {}
    for name in names:
        role = Role.create(name)
        roles[role.name] = role
    return roles


def build_permissions(
    data: GroupedConfig, delimiter: str = DEFAULT_DELIMITER
) -> Dict[str, Permission]:
    """Build the permission map keyed by composite name.

    Each resource entry is either a mapping with ``action``/``actions`` and
    an optional ``version``, or the action(s) themselves.
    """
    permissions: Dict[str, Permission] = {}

    for group, resource, entry in _iter_grouped(data, "permissions"):
        if isinstance(entry, Mapping):
            actions = entry.get("actions", entry.get("action"))
            version = entry.get("version")
        else:
            actions, version = entry, None

        permission = Permission.create(group, resource, actions, version, delimiter)

        existing = permissions.get(permission.name)
        if existing is not None:
            if existing.actions == permission.actions:
                logger.debug(f"Skipping duplicate permission: {permission.name}")
                continue
            logger.warning(
                f"Permission {permission.name} redefined, "
                f"overwriting {sorted(existing.actions)} with {sorted(permission.actions)}"
            )

        permissions[permission.name] = permission

    return permissions


def _keeps_existing(existing: Feature, incoming: Feature) -> bool:
    if int(incoming.access) != int(existing.access):
        return int(incoming.access) < int(existing.access)
    # Equal access: a stable version replaces a pre-release one
    return not (existing.is_prerelease and not incoming.is_prerelease)


def build_features(
    data: GroupedConfig, delimiter: str = DEFAULT_DELIMITER
) -> Dict[str, Feature]:
    """Build the feature map keyed by composite name.

    Each resource entry is either a mapping with ``access`` and an optional
    ``version``, or the access value itself.
    """
    features: Dict[str, Feature] = {}

    for group, resource, entry in _iter_grouped(data, "features"):
        if isinstance(entry, Mapping):
            access = entry.get("access")
            version = entry.get("version")
        else:
            access, version = entry, None

        feature = Feature.create(group, resource, access, version, delimiter)

        existing = features.get(feature.name)
        if existing is not None and _keeps_existing(existing, feature):
            logger.debug(
                f"Discarding feature {feature.name} "
                f"(access {int(feature.access)}, version {feature.version})"
            )
            continue

        features[feature.name] = feature

    return features


def build_role_features(
    data: Mapping[str, Mapping[str, Any]], delimiter: str = DEFAULT_DELIMITER
) -> Dict[str, List[str]]:
    """Flatten ``role -> group -> [resources]`` into composite names per role."""
    if not isinstance(data, Mapping):
        raise ConfigError(f"role_features must be a mapping, got {type(data).__name__}")

    role_features: Dict[str, List[str]] = {}
    for role, groups in data.items():
        names = role_features.setdefault(role, [])
        if not groups:
            continue
        if not isinstance(groups, Mapping):
            raise ConfigError(f"role_features for {role!r} must map groups to resources")
        for group, resources in groups.items():
            if isinstance(resources, str):
                resources = [resources]
            for resource in resources or []:
                names.append(encode(group, resource, delimiter))

    return role_features


def build_index(config: Union[KontrolleOptions, Mapping[str, Any]]) -> FlatIndex:
    """Build the flat index for a whole configuration.

    Raises:
        ConfigError: If roles are missing or any section is malformed
    """
    if not isinstance(config, KontrolleOptions):
        config = parse_options(dict(config))

    if not config.roles:
        raise ConfigError("roles required")

    delimiter = config.delimiter
    roles = build_roles(config.roles)
    permissions = build_permissions(config.permissions, delimiter) if config.permissions else {}
    features = build_features(config.features, delimiter) if config.features else {}
    role_features = (
        build_role_features(config.role_features, delimiter) if config.role_features else {}
    )

    for role in role_features:
        if role not in roles:
            logger.warning(f"Features assigned to undefined role: {role}")

    logger.debug(
        f"Built index: {len(roles)} roles, {len(permissions)} permissions, "
        f"{len(features)} features"
    )

    return FlatIndex(
        roles=roles,
        permissions=permissions,
        features=features,
        role_features=role_features,
        delimiter=delimiter,
    )
