"""Report rendering: human-readable text and JSON."""

from __future__ import annotations

import json
from collections import defaultdict

from rich.console import Console

from .models import SEVERITY_ORDER, Report, RuleResult, Status

STATUS_STYLES = {
    Status.PASS: "green",
    Status.FAIL: "bold red",
    Status.WARN: "yellow",
    Status.SKIP: "dim",
}


def result_to_dict(result: RuleResult) -> dict:
    """Convert RuleResult to a JSON-serializable dict (fixed key order)."""
    return {
        "rule_id": result.rule_id,
        "severity": result.severity.value,
        "status": result.status.value,
        "message": result.message,
        "file_ref": result.file_ref,
    }


def report_to_dicts(report: Report) -> list[dict]:
    return [result_to_dict(r) for r in report.results]


def render_json(report: Report) -> str:
    """Render the report as a JSON array, one object per result."""
    return json.dumps(report_to_dicts(report), indent=2, ensure_ascii=False) + "\n"


def summary_line(report: Report) -> str:
    counts = report.summary
    return (
        f"{len(report.results)} rule(s): "
        f"{counts[Status.PASS.value]} passed, "
        f"{counts[Status.FAIL.value]} failed, "
        f"{counts[Status.WARN.value]} warning(s), "
        f"{counts[Status.SKIP.value]} skipped"
    )


def format_result_line(result: RuleResult) -> str:
    loc = f"{result.file_ref} - " if result.file_ref else ""
    return f"  {result.status.value:<4}  {result.rule_id:<4} {loc}{result.message}"


def render_text(report: Report, console: Console) -> None:
    """Print results grouped by severity, then a summary line."""
    if not report.results:
        console.print("No rules evaluated.", style="dim")
        console.print(summary_line(report))
        return

    by_severity: dict = defaultdict(list)
    for result in report.results:
        by_severity[result.severity].append(result)

    for severity in SEVERITY_ORDER:
        results = by_severity.get(severity)
        if not results:
            continue
        console.print(severity.value, style="bold")
        for result in results:
            console.print(format_result_line(result), style=STATUS_STYLES[result.status])
        console.print()

    if report.has_failures:
        summary_style = "bold red"
    elif report.summary[Status.WARN.value]:
        summary_style = "yellow"
    else:
        summary_style = "bold green"
    console.print(summary_line(report), style=summary_style)


def make_console(stderr: bool = False) -> Console:
    """Console for report output; markup is off so messages print verbatim."""
    return Console(stderr=stderr, soft_wrap=True, markup=False, highlight=False, emoji=False)
