"""Quorum evaluation of kontrolle rules.

A Kontrolle context binds one subject to one rule registry. Every
question goes through a counting step that produces a RuleTally:

- total:     rules that were found and dispatched
- satisfied: dispatched rules whose requirement returned a truthy value

Unknown rule names are reported and left out of the tally. A
requirement that raises, or is not callable, is reported and counted as
dispatched but not satisfied, so it never aborts its siblings.

The quorum policies then read the tally:

    can / can_all           total > 0 and satisfied == total
    can_any                 satisfied > 0
    can_not / can_not_all   satisfied == 0
    can_not_any             satisfied < total

A single unknown name answers False for every policy. can and can_all
also need at least one dispatched rule; the other policies read an
empty tally literally, so can_not([]) is True.
"""

from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Sequence, Union

from ..common.logger import get_logger
from ..errors import PredicateError, RuleLookupError
from .definitions import RuleSet, define_rules
from .registry import RuleRegistry

logger = get_logger("rules.engine")

RuleNames = Union[str, Sequence[str]]


@dataclass(frozen=True)
class RuleTally:
    """Counts produced by evaluating a batch of rules."""
    total: int
    satisfied: int


class Kontrolle:
    """Evaluates named rules for a bound subject."""

    def __init__(self, subject: Any, registry: Optional[RuleRegistry] = None):
        """
        Initialize the evaluation context.

        Args:
            subject: User or context value passed first to every requirement
            registry: Registered rules, empty when omitted
        """
        self._subject = subject
        self._registry = registry if registry is not None else RuleRegistry()

    @property
    def subject(self) -> Any:
        return self._subject

    @property
    def registry(self) -> RuleRegistry:
        return self._registry

    def _dispatch(self, name: str, *args: Any) -> bool:
        requirement = self._registry.get(name)
        if not callable(requirement):
            logger.error(f"Requirement for the rule {name} has to be a function type.")
            return False

        try:
            return bool(requirement(self._subject, *args))
        except Exception as e:
            logger.error(str(PredicateError(name, e)))
            return False

    def evaluate(self, rules: RuleNames, *args: Any) -> Optional[RuleTally]:
        """Count dispatched and satisfied rules.

        Args:
            rules: A rule name or a list of rule names
            args: Extra arguments passed to each requirement after the subject

        Returns:
            RuleTally, or None when a single rule name is unknown
        """
        if isinstance(rules, str):
            if rules not in self._registry:
                logger.error(str(RuleLookupError(rules)))
                return None
            return RuleTally(total=1, satisfied=int(self._dispatch(rules, *args)))

        if not isinstance(rules, (list, tuple)):
            logger.error(f"Rules must be a name or a list of names, got {type(rules).__name__}")
            return None

        total = 0
        satisfied = 0
        for rule in rules:
            if rule not in self._registry:
                logger.error(str(RuleLookupError(rule)))
                continue
            if self._dispatch(rule, *args):
                satisfied += 1
            total += 1

        return RuleTally(total=total, satisfied=satisfied)

    def _check(
        self, policy: Callable[[RuleTally], bool], rules: RuleNames, *args: Any
    ) -> bool:
        tally = self.evaluate(rules, *args)
        if tally is None:
            return False
        return policy(tally)

    def can(self, rules: RuleNames, *args: Any) -> bool:
        """Check that all rules are satisfied."""
        return self._check(lambda t: t.total > 0 and t.satisfied == t.total, rules, *args)

    can_all = can

    def can_any(self, rules: RuleNames, *args: Any) -> bool:
        """Check that at least one rule is satisfied."""
        return self._check(lambda t: t.satisfied > 0, rules, *args)

    def can_not(self, rules: RuleNames, *args: Any) -> bool:
        """Check that no rule is satisfied."""
        return self._check(lambda t: t.satisfied == 0, rules, *args)

    can_not_all = can_not

    def can_not_any(self, rules: RuleNames, *args: Any) -> bool:
        """Check that at least one rule is not satisfied."""
        return self._check(lambda t: t.satisfied < t.total, rules, *args)


def define_kontrolle(
    subject: Any, rules: Union[RuleSet, Mapping[str, Any]]
) -> Kontrolle:
    """Bind ``subject`` to a fresh registry built from ``rules``."""
    registry = RuleRegistry()
    registry.parse(define_rules(rules))
    return Kontrolle(subject, registry)
