"""Exception types raised and reported by kontrolle.

Only malformed configuration is raised to callers. Lookup and predicate
failures are logged and turned into a negative answer by the evaluators.
"""

from typing import Optional


class KontrolleError(Exception):
    """Base exception for kontrolle."""


class ConfigError(KontrolleError, ValueError):
    """Raised when configuration is missing or malformed."""


class RuleLookupError(KontrolleError, LookupError):
    """Raised when a rule name is not registered."""

    def __init__(self, rule: str):
        super().__init__(
            f"Rule *{rule}* doesn't exist. Please define it in the config file."
        )
        self.rule = rule


class DuplicateRuleError(KontrolleError):
    """Condition reported when a rule name is registered twice."""

    def __init__(self, rule: str):
        super().__init__(f"Rule {rule} already exists.")
        self.rule = rule


class PredicateError(KontrolleError):
    """Wraps a failure raised while evaluating a rule requirement."""

    def __init__(self, rule: str, cause: Optional[BaseException] = None):
        detail = f": {cause!r}" if cause is not None else ""
        super().__init__(f"Requirement for rule {rule} failed{detail}")
        self.rule = rule
        self.cause = cause
