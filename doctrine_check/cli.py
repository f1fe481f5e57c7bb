"""CLI entrypoint for doctrine-check."""

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler

from . import __version__

EXIT_INTERRUPTED = 130


def configure_logging(verbose: bool) -> None:
    """Send log records to stderr so stdout stays clean for reports."""
    handler = RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=verbose,
        rich_tracebacks=verbose,
    )
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(name)s: %(message)s",
        handlers=[handler],
        force=True,
    )


@click.command()
@click.version_option(__version__, prog_name="doctrine-check")
@click.argument(
    "path",
    type=click.Path(file_okay=True, dir_okay=True, readable=False, path_type=Path),
    default=Path("."),
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    show_default=True,
    help="Output format",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="TOML settings file (thresholds, ignored directories, disabled rules)",
)
@click.option(
    "--explain",
    "explain_rule",
    type=str,
    default=None,
    metavar="RULE_ID",
    help="Explain a specific rule and exit (e.g., --explain R2)",
)
@click.option(
    "--list-rules",
    is_flag=True,
    help="List the rule catalog and exit",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Debug logging on stderr",
)
def cli(
    path: Path,
    output_format: str,
    config_path: Path | None,
    explain_rule: str | None,
    list_rules: bool,
    verbose: bool,
) -> None:
    """Check a repository against the doctrine conventions.

    Scans PATH (default: current directory) for AGENTS.md, CLAUDE.md,
    GEMINI.md, .cursorrules and CHANGELOG.md and evaluates every rule.

    Exit codes: 0 = all MUST rules pass, 1 = a MUST rule failed,
    2 = internal error (e.g. missing or unreadable path).

    Examples:

        doctrine-check

        doctrine-check ../service --format json

        doctrine-check --explain R2
    """
    from .commands.check import run_check, run_explain, run_list_rules

    configure_logging(verbose)

    if explain_rule:
        sys.exit(run_explain(explain_rule, config_path))

    if list_rules:
        sys.exit(run_list_rules(config_path))

    sys.exit(run_check(path, output_format, config_path))


def main() -> None:
    """Main entrypoint.

    Runs in standalone_mode=False so interrupts and unexpected errors map to
    the documented exit codes instead of click's defaults.
    """
    try:
        code = cli.main(prog_name="doctrine-check", standalone_mode=False)
    except (click.exceptions.Abort, KeyboardInterrupt):
        click.echo("Interrupted.", err=True)
        sys.exit(EXIT_INTERRUPTED)
    except click.ClickException as e:
        e.show()
        sys.exit(e.exit_code)
    except Exception as e:
        click.echo(f"Error: internal error: {type(e).__name__}: {e}", err=True)
        sys.exit(2)
    sys.exit(code or 0)


if __name__ == "__main__":
    main()
