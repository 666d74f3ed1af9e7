#!/usr/bin/env python3
"""
Note App CLI.

Primary entry point for all application operations.
Use --service to select what to run.

Usage:
    python cli.py --help
    python cli.py --service tui
    python cli.py --service tui --debug
    python cli.py --service config
    python cli.py --service test --test-type unit
"""

import asyncio
import subprocess
import sys
from pathlib import Path

import click
import structlog

PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from noteapp.backend.core.logging import get_logger, setup_logging


def validate_project_root() -> Path:
    """Validate that we're running from the project root."""
    if not (PROJECT_ROOT / ".project_root").exists():
        click.echo(
            click.style("Error: .project_root not found. Run from project root.", fg="red"),
            err=True,
        )
        sys.exit(1)
    return PROJECT_ROOT


@click.command()
@click.option(
    "--service", "-s",
    type=click.Choice(["tui", "config", "test", "info"]),
    default="info",
    help="Service or command to run.",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Enable verbose output (INFO level logging).",
)
@click.option(
    "--debug", "-d",
    is_flag=True,
    help="Enable debug output (DEBUG level logging).",
)
@click.option(
    "--test-type",
    type=click.Choice(["all", "unit", "integration"]),
    default="all",
    help="Test type to run.",
)
@click.option(
    "--coverage",
    is_flag=True,
    help="Run tests with coverage.",
)
def main(
    service: str,
    verbose: bool,
    debug: bool,
    test_type: str,
    coverage: bool,
) -> None:
    """
    Note App CLI.

    Use --service to select what to run.

    \b
    Examples:
        python cli.py --service tui
        python cli.py --service tui --debug
        python cli.py --service config
        python cli.py --service test --test-type unit --coverage
        python cli.py --service info
    """
    validate_project_root()

    if debug:
        log_level = "DEBUG"
    elif verbose:
        log_level = "INFO"
    else:
        log_level = "WARNING"

    if service == "tui":
        # The TUI owns the terminal; records go to the JSONL file only
        setup_logging(level=log_level, enable_console=False)
        structlog.contextvars.bind_contextvars(source="tui")
    else:
        setup_logging(level=log_level, format_type="console")
        structlog.contextvars.bind_contextvars(source="cli")

    logger = get_logger(__name__)

    logger.debug("CLI invoked", extra={"service": service, "log_level": log_level})

    if service == "tui":
        run_tui(logger)
    elif service == "config":
        show_config(logger)
    elif service == "test":
        run_tests(logger, test_type, coverage)
    elif service == "info":
        show_info(logger)


def run_tui(logger) -> None:
    """Start the terminal interface."""
    from noteapp.tui.app import run_tui as run_app

    try:
        exit_code = asyncio.run(run_app())
    except Exception as e:
        logger.error("TUI failed to start", extra={"error": str(e)})
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)

    logger.info("TUI exited", extra={"exit_code": exit_code})
    sys.exit(exit_code)


def show_config(logger) -> None:
    """Display loaded configuration."""
    click.echo("Application Configuration:\n")

    try:
        from noteapp.backend.core.config import (
            get_app_config,
            get_database_path,
            get_preferences_path,
        )

        app_config = get_app_config()

        sections = [
            ("Application Settings (from YAML)", app_config.application.model_dump()),
            ("Database Settings (from YAML)", app_config.database.model_dump()),
            ("Logging Settings (from YAML)", app_config.logging.model_dump()),
            ("Concurrency Settings (from YAML)", app_config.concurrency.model_dump()),
        ]
        for heading, values in sections:
            click.echo(f"{heading}:")
            click.echo("-" * 40)
            _echo_mapping(values, indent=2)
            click.echo()

        click.echo("Resolved Paths:")
        click.echo("-" * 40)
        click.echo(f"  database: {get_database_path()}")
        click.echo(f"  preferences: {get_preferences_path()}")

        logger.info("Configuration displayed successfully")

    except Exception as e:
        logger.error("Failed to load configuration", extra={"error": str(e)})
        click.echo(click.style(f"Error loading configuration: {e}", fg="red"))
        sys.exit(1)


def _echo_mapping(values: dict, indent: int) -> None:
    for key, value in values.items():
        if isinstance(value, dict):
            click.echo(f"{' ' * indent}{key}:")
            _echo_mapping(value, indent + 2)
        else:
            click.echo(f"{' ' * indent}{key}: {value}")


def run_tests(logger, test_type: str, coverage: bool) -> None:
    """Run the test suite."""
    logger.info("Running tests", extra={"type": test_type, "coverage": coverage})

    cmd = [sys.executable, "-m", "pytest"]

    if test_type == "unit":
        cmd.append("tests/unit")
    elif test_type == "integration":
        cmd.append("tests/integration")
    else:
        cmd.append("tests/")

    cmd.append("-v")

    if coverage:
        cmd.extend(["--cov=noteapp", "--cov-report=term-missing"])

    click.echo(f"Running: {' '.join(cmd)}\n")

    try:
        result = subprocess.run(cmd, cwd=PROJECT_ROOT)
        sys.exit(result.returncode)
    except FileNotFoundError:
        logger.error("pytest not found. Install with: pip install -e '.[test]'")
        sys.exit(1)


def show_info(logger) -> None:
    """Display application information."""
    click.echo("Note App")
    click.echo("=" * 40)

    try:
        from noteapp.backend.core.config import get_app_config
        app_config = get_app_config()
        click.echo(f"Name: {app_config.application.name}")
        click.echo(f"Version: {app_config.application.version}")
        click.echo(f"Description: {app_config.application.description}")
    except Exception as e:
        logger.error(
            "Failed to load application configuration",
            extra={"error": str(e)},
        )
        click.echo(
            click.style(
                "Error: Could not load application.yaml configuration.",
                fg="red",
            ),
            err=True,
        )
        sys.exit(1)

    click.echo()
    click.echo("Services (--service):")
    click.echo("  tui            Terminal note-taking interface")
    click.echo("  config         Display configuration")
    click.echo("  test           Run test suite")
    click.echo("  info           Show this information")
    click.echo()
    click.echo("Options:")
    click.echo("  --verbose, -v  Enable INFO level logging")
    click.echo("  --debug, -d    Enable DEBUG level logging")
    click.echo()


if __name__ == "__main__":
    main()
