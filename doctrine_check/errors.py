"""Exception types for doctrine-check.

Repository non-conformance is never an exception: it is reported as
FAIL/WARN results. These types cover conditions that stop a run (bad
paths, bad configuration) and rule predicates that crash.

Unreadable paths raise the built-in ``PermissionError``.
"""

from __future__ import annotations


class DoctrineCheckError(Exception):
    """Base class for fatal doctrine-check errors."""


class PathNotFoundError(DoctrineCheckError):
    """The scan root does not exist or is not a directory."""

    def __init__(self, path: str, reason: str = "does not exist"):
        self.path = path
        self.reason = reason
        super().__init__(f"Path '{path}' {reason}")


class ConfigError(DoctrineCheckError):
    """The settings file is unreadable or malformed."""


class RuleEvaluationError(DoctrineCheckError):
    """A rule predicate raised instead of returning a check.

    Raised and caught inside the evaluator; it never escapes a run.
    """

    def __init__(self, rule_id: str, cause: BaseException):
        self.rule_id = rule_id
        self.cause = cause
        super().__init__(f"Rule {rule_id} raised {type(cause).__name__}: {cause}")
