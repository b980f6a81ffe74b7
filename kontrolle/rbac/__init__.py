"""RBAC (Role-Based Access Control) module for kontrolle.

This module defines the naming codec, the entity model, the config
transform and the permission checker.
"""

from .naming import DecodedName, decode, encode
from .models import Access, Feature, Permission, Role
from .transform import (
    FlatIndex,
    build_features,
    build_index,
    build_permissions,
    build_role_features,
    build_roles,
)
from .checker import PermissionChecker, PermissionQuery

__all__ = [
    "Access",
    "DecodedName",
    "Feature",
    "FlatIndex",
    "Permission",
    "PermissionChecker",
    "PermissionQuery",
    "Role",
    "build_features",
    "build_index",
    "build_permissions",
    "build_role_features",
    "build_roles",
    "decode",
    "encode",
]
