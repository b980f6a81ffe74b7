"""Rule definitions for kontrolle.

A rule binds one or more rule names to a requirement: a callable that
receives the bound subject followed by any evaluation arguments.

    define_rules({
        "permissions": [
            {"rules": ["update-user", "delete-user"], "requirement": is_admin},
            {"rules": "delete-certificate", "requirement": owns_certificate},
        ],
        "roles": [{"rules": "admin", "requirement": is_admin}],
    })
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Tuple, Union

from ..errors import ConfigError

Requirement = Callable[..., Any]


@dataclass(frozen=True)
class Rule:
    """One or more rule names sharing a requirement."""
    rules: Union[str, Tuple[str, ...]]
    requirement: Requirement

    @property
    def names(self) -> Tuple[str, ...]:
        if isinstance(self.rules, str):
            return (self.rules,)
        return tuple(self.rules)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Rule":
        """Create a rule from a ``{rules, requirement}`` mapping."""
        if "rules" not in data or "requirement" not in data:
            raise ConfigError("Rule definitions need 'rules' and 'requirement'")

        rules = data["rules"]
        if isinstance(rules, str):
            names: Union[str, Tuple[str, ...]] = rules
        elif isinstance(rules, (list, tuple)):
            names = tuple(rules)
        else:
            raise ConfigError(f"Rule names must be a string or a list, got {type(rules).__name__}")

        rule = cls(rules=names, requirement=data["requirement"])
        for name in rule.names:
            if not name or not isinstance(name, str):
                raise ConfigError(f"Invalid rule name: {name!r}")
        return rule


@dataclass(frozen=True)
class RuleSet:
    """Permission rules and optional role rules."""
    permissions: List[Rule]
    roles: List[Rule] = field(default_factory=list)

    def __iter__(self):
        yield from self.permissions
        yield from self.roles


def _parse_rules(section: str, entries: Any) -> List[Rule]:
    if not isinstance(entries, (list, tuple)):
        raise ConfigError(f"{section} rules must be a list")
    return [
        entry if isinstance(entry, Rule) else Rule.from_dict(entry)
        for entry in entries
    ]


def define_rules(rules: Union[RuleSet, Mapping[str, Any]]) -> RuleSet:
    """Validate a rule configuration and return it as a RuleSet.

    Raises:
        ConfigError: If ``permissions`` is missing, or an entry is malformed
    """
    if isinstance(rules, RuleSet):
        data: Dict[str, Any] = {"permissions": rules.permissions, "roles": rules.roles}
    else:
        data = dict(rules)

    if data.get("permissions") is None:
        raise ConfigError("permissions rules required")

    return RuleSet(
        permissions=_parse_rules("permissions", data["permissions"]),
        roles=_parse_rules("roles", data.get("roles") or []),
    )
