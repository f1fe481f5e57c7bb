"""Check command implementation."""

import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table

from ..config import load_settings
from ..errors import DoctrineCheckError
from ..models import Report
from ..repo.scanner import scan_repository
from ..report import make_console, render_json, render_text
from ..rules.catalog import build_catalog
from ..rules.evaluator import evaluate

EXIT_OK = 0
EXIT_FAILURES = 1
EXIT_ERROR = 2


def run_scan(repo_path: Path, config_path: Path | None = None) -> Report:
    """Scan a repository and evaluate the catalog against it.

    Raises:
        DoctrineCheckError: missing path or invalid config
        PermissionError: unreadable path
    """
    settings = load_settings(config_path)
    catalog = build_catalog(settings)
    snapshot = scan_repository(repo_path, settings)
    return evaluate(snapshot, catalog, disabled=settings.disable)


def _print_error(message: str) -> None:
    make_console(stderr=True).print(f"Error: {message}", style="bold red")


def run_check(
    repo_path: Path,
    output_format: str = "text",
    config_path: Path | None = None,
) -> int:
    """Run doctrine checks on a repository.

    Args:
        repo_path: Directory to scan
        output_format: "text" (grouped, human-readable) or "json"
        config_path: Optional settings TOML file

    Returns:
        Exit code (0 = no failures, 1 = MUST rule failed, 2 = fatal error)
    """
    try:
        report = run_scan(repo_path, config_path)
    except (DoctrineCheckError, PermissionError) as e:
        _print_error(str(e))
        return EXIT_ERROR

    if output_format == "json":
        # Bytes, so the output is UTF-8 whatever the locale encoding is
        sys.stdout.flush()
        sys.stdout.buffer.write(render_json(report).encode("utf-8"))
        sys.stdout.buffer.flush()
    else:
        render_text(report, make_console())

    return EXIT_FAILURES if report.has_failures else EXIT_OK


def run_explain(rule_id: str, config_path: Path | None = None) -> int:
    """Print the explanation for a rule, with thresholds from settings."""
    try:
        settings = load_settings(config_path)
    except DoctrineCheckError as e:
        _print_error(str(e))
        return EXIT_ERROR

    catalog = build_catalog(settings)
    rule = catalog.get(rule_id.strip().upper())
    if rule is None:
        _print_error(f"Unknown rule: {rule_id} (available: {', '.join(catalog.ids())})")
        return EXIT_ERROR

    console = make_console()
    console.print(f"{rule.id} [{rule.severity.value}] {rule.description}", style="bold")
    console.print()
    console.print(rule.explanation)
    return EXIT_OK


def run_list_rules(config_path: Path | None = None) -> int:
    """Print the rule catalog as a table."""
    try:
        settings = load_settings(config_path)
    except DoctrineCheckError as e:
        _print_error(str(e))
        return EXIT_ERROR

    table = Table(title="Doctrine rules")
    table.add_column("ID", style="bold")
    table.add_column("Severity")
    table.add_column("Description")
    table.add_column("Enabled")
    for rule in build_catalog(settings):
        enabled = "no" if rule.id in settings.disable else "yes"
        table.add_row(rule.id, rule.severity.value, rule.description, enabled)

    Console(highlight=False).print(table)
    return EXIT_OK
