"""Rule evaluation for kontrolle.

Named requirements bound to a subject, evaluated with quorum policies.
"""

from .definitions import Rule, RuleSet, define_rules
from .registry import RuleRegistry
from .engine import Kontrolle, RuleTally, define_kontrolle

__all__ = [
    "Kontrolle",
    "Rule",
    "RuleRegistry",
    "RuleSet",
    "RuleTally",
    "define_kontrolle",
    "define_rules",
]
