"""Apply a rule catalog to a repository snapshot."""

from __future__ import annotations

import logging
from typing import Iterable

from ..errors import RuleEvaluationError
from ..models import Check, Report, RepoSnapshot, Rule, RuleResult, Severity, Status
from .catalog import RuleCatalog

logger = logging.getLogger(__name__)


def _status_for(check: Check, severity: Severity) -> Status:
    if check.outcome == "pass":
        return Status.PASS
    if check.outcome == "skip":
        return Status.SKIP
    if check.outcome == "warn":
        return Status.WARN
    if check.outcome == "fail":
        return Status.FAIL if severity is Severity.MUST else Status.WARN
    raise ValueError(f"Unknown check outcome: {check.outcome!r}")


def _run_predicate(rule: Rule, snapshot: RepoSnapshot) -> RuleResult:
    try:
        check = rule.predicate(snapshot)
        status = _status_for(check, rule.severity)
    except Exception as e:
        raise RuleEvaluationError(rule.id, e) from e

    return RuleResult(
        rule_id=rule.id,
        severity=rule.severity,
        status=status,
        message=check.message,
        file_ref=check.file_ref,
    )


def evaluate_rule(rule: Rule, snapshot: RepoSnapshot) -> RuleResult:
    """Evaluate one rule, isolating predicate crashes as SKIP results."""
    try:
        return _run_predicate(rule, snapshot)
    except RuleEvaluationError as e:
        logger.warning("Rule %s crashed; recording SKIP (%s)", e.rule_id, e.cause)
        logger.debug("Traceback for rule %s", e.rule_id, exc_info=e.cause)
        return RuleResult(
            rule_id=rule.id,
            severity=rule.severity,
            status=Status.SKIP,
            message=f"Internal error while evaluating rule: {type(e.cause).__name__}: {e.cause}",
        )


def evaluate(
    snapshot: RepoSnapshot,
    catalog: RuleCatalog,
    disabled: Iterable[str] = (),
) -> Report:
    """Evaluate every rule in catalog order.

    Args:
        snapshot: Repository snapshot (never mutated)
        catalog: Rules to apply
        disabled: Rule IDs to report as SKIP without running

    Returns:
        Report with one result per rule, in catalog order
    """
    disabled_ids = set(disabled)
    results: list[RuleResult] = []

    for rule in catalog:
        if rule.id in disabled_ids:
            results.append(
                RuleResult(
                    rule_id=rule.id,
                    severity=rule.severity,
                    status=Status.SKIP,
                    message="Disabled by configuration",
                )
            )
            continue

        result = evaluate_rule(rule, snapshot)
        logger.debug("%s -> %s", rule.id, result.status.value)
        results.append(result)

    return Report(results=tuple(results))
