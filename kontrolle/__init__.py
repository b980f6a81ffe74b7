"""kontrolle: in-process authorization decisions.

Two independent engines:

- rbac:  roles, permissions and features built once from configuration
  and queried through a PermissionChecker.
- rules: named requirements bound to a subject and evaluated with
  quorum policies through a Kontrolle context.
"""

from typing import Any, Mapping, Optional

from .common.config import load_options
from .errors import (
    ConfigError,
    DuplicateRuleError,
    KontrolleError,
    PredicateError,
    RuleLookupError,
)
from .rbac import (
    Access,
    Feature,
    FlatIndex,
    Permission,
    PermissionChecker,
    PermissionQuery,
    Role,
    build_index,
    decode,
    encode,
)
from .rules import Kontrolle, Rule, RuleSet, define_kontrolle, define_rules

__version__ = "1.0.0"


def init(config: Mapping[str, Any]) -> PermissionChecker:
    """Build a PermissionChecker from an authorization config mapping."""
    return PermissionChecker.from_config(config)


def load_checker(config_path: Optional[str] = None) -> PermissionChecker:
    """Build a PermissionChecker from a YAML authorization file."""
    return PermissionChecker(build_index(load_options(config_path)))


__all__ = [
    "Access",
    "ConfigError",
    "DuplicateRuleError",
    "Feature",
    "FlatIndex",
    "Kontrolle",
    "KontrolleError",
    "Permission",
    "PermissionChecker",
    "PermissionQuery",
    "PredicateError",
    "Role",
    "Rule",
    "RuleLookupError",
    "RuleSet",
    "build_index",
    "decode",
    "define_kontrolle",
    "define_rules",
    "encode",
    "init",
    "load_checker",
]
