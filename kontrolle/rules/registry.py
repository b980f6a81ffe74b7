"""Registry for kontrolle rules.

Maps rule names to requirements. Registration is append-only: the first
requirement registered under a name wins and later ones are reported.
"""

from typing import Dict, Iterable, List, Union

from ..common.logger import get_logger
from ..errors import DuplicateRuleError, RuleLookupError
from .definitions import Requirement, RuleSet

logger = get_logger("rules.registry")


class RuleRegistry:
    """Registry of rule name -> requirement."""

    def __init__(self) -> None:
        self._rules: Dict[str, Requirement] = {}

    def apply_rule(self, name: str, requirement: Requirement) -> bool:
        """Register a single rule.

        Args:
            name: Rule name
            requirement: Callable evaluated against the subject

        Returns:
            True if registered, False if the name was already taken
        """
        if name in self._rules:
            logger.error(str(DuplicateRuleError(name)))
            return False

        self._rules[name] = requirement
        logger.debug(f"Registered rule: {name}")
        return True

    def apply_rules(
        self, names: Union[str, Iterable[str]], requirement: Requirement
    ) -> None:
        """Register one requirement under one or many rule names."""
        if isinstance(names, str):
            names = [names]
        for name in names:
            self.apply_rule(name, requirement)

    def parse(self, rules: RuleSet) -> None:
        """Register permission rules, then role rules."""
        for rule in rules:
            self.apply_rules(rule.names, rule.requirement)

    def get(self, name: str) -> Requirement:
        """Get the requirement registered under ``name``.

        Raises:
            RuleLookupError: If the rule is not registered
        """
        try:
            return self._rules[name]
        except KeyError:
            raise RuleLookupError(name) from None

    def names(self) -> List[str]:
        """Registered rule names in registration order."""
        return list(self._rules)

    def __contains__(self, name: object) -> bool:
        return name in self._rules

    def __len__(self) -> int:
        return len(self._rules)
