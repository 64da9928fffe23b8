#!/usr/bin/env python3
"""
NoteHub command-line entry script.

Usage:
    python run.py --help
    python run.py --action server --reload --verbose
    python run.py --action init-db
    python run.py --action config
    python run.py --action test --test-type unit --coverage
"""

import asyncio
import subprocess
import sys
from pathlib import Path
from typing import Any

import click

PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from notehub.backend.core.logging import get_logger, setup_logging

TEST_SUITES = {"all": "tests/", "unit": "tests/unit", "integration": "tests/integration"}


def validate_project_root() -> Path:
    if not (PROJECT_ROOT / ".project_root").exists():
        click.secho("Error: .project_root not found. Run from project root.", fg="red", err=True)
        sys.exit(1)
    return PROJECT_ROOT


def run_server(logger: Any, host: str | None = None, port: int | None = None, reload: bool = False, **_: Any) -> None:
    """Serve the API and the live publication WebSockets through uvicorn."""
    from notehub.backend.core.config import get_app_config

    server = get_app_config().application.server
    host = host or server.host
    port = port or server.port
    logger.info("Starting server", extra={"host": host, "port": port, "reload": reload})

    cmd = [sys.executable, "-m", "uvicorn", "notehub.backend.main:app", "--host", host, "--port", str(port)]
    if reload:
        cmd.append("--reload")

    click.echo(f"Serving NoteHub at http://{host}:{port} (Ctrl+C to stop)\n")
    try:
        subprocess.run(cmd, check=True)
    except KeyboardInterrupt:
        logger.info("Server stopped")
    except subprocess.CalledProcessError as e:
        logger.error("Server exited with an error", extra={"exit_code": e.returncode})
        sys.exit(e.returncode)


def init_db(logger: Any, **_: Any) -> None:
    """Create every table directly; managed deployments use alembic instead."""
    from notehub.backend.core.database import create_all_tables

    try:
        asyncio.run(create_all_tables())
    except Exception as e:
        logger.error("Database initialization failed", extra={"error": str(e)})
        click.secho(f"Error creating tables: {e}", fg="red")
        sys.exit(1)

    click.secho("Database tables created.", fg="green")
    click.echo("For managed schemas use: alembic upgrade head")


def _echo_mapping(values: dict, indent: int = 2) -> None:
    pad = " " * indent
    for key, value in values.items():
        if isinstance(value, dict):
            click.echo(f"{pad}{key}:")
            _echo_mapping(value, indent + 2)
        else:
            click.echo(f"{pad}{key}: {value}")


def show_config(logger: Any, **_: Any) -> None:
    """Print every validated YAML section. Secrets live in .env and are never shown."""
    from notehub.backend.core.config import CONFIG_SECTIONS, get_app_config

    try:
        app_config = get_app_config()
    except Exception as e:
        logger.error("Failed to load configuration", extra={"error": str(e)})
        click.secho(f"Error loading configuration: {e}", fg="red")
        sys.exit(1)

    for section, (filename, _schema) in CONFIG_SECTIONS.items():
        click.echo(f"\n[{section}] config/settings/{filename}")
        click.echo("-" * 40)
        _echo_mapping(getattr(app_config, section).model_dump())


def run_tests(logger: Any, test_type: str = "all", coverage: bool = False, **_: Any) -> None:
    cmd = [sys.executable, "-m", "pytest", TEST_SUITES[test_type], "-v"]
    if coverage:
        cmd.extend(["--cov=notehub/backend", "--cov-report=term-missing"])

    logger.info("Running tests", extra={"suite": test_type, "coverage": coverage})
    click.echo(f"Running: {' '.join(cmd)}\n")
    try:
        result = subprocess.run(cmd)
    except FileNotFoundError:
        logger.error("pytest not found. Install with: pip install -e '.[test]'")
        sys.exit(1)
    sys.exit(result.returncode)


def show_info(logger: Any, **_: Any) -> None:
    click.echo("NoteHub")
    click.echo("=" * 40)

    try:
        from notehub.backend.core.config import get_app_config
        from notehub.backend.services.publication import PUBLICATIONS

        application = get_app_config().application
        click.echo(f"Name: {application.name}")
        click.echo(f"Version: {application.version}")
        click.echo(f"Description: {application.description}")
        click.echo(f"Publications: {', '.join(sorted(PUBLICATIONS))}")
    except Exception as e:
        logger.warning("Could not load configuration", extra={"error": str(e)})
        click.echo("Configuration not available")

    click.echo("\nAvailable Actions:")
    for name, (_handler, summary) in ACTIONS.items():
        click.echo(f"  --action {name:<9} {summary}")
    click.echo("\nLogging Options:")
    click.echo("  --verbose, -v     Enable INFO level logging")
    click.echo("  --debug, -d       Enable DEBUG level logging")


ACTIONS = {
    "server": (run_server, "Start the development server"),
    "init-db": (init_db, "Create database tables"),
    "config": (show_config, "Display configuration"),
    "test": (run_tests, "Run test suite"),
    "info": (show_info, "Show this information"),
}


@click.command()
@click.option("--action", type=click.Choice(list(ACTIONS)), default="info", help="Action to perform.")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output (INFO level logging).")
@click.option("--debug", "-d", is_flag=True, help="Enable debug output (DEBUG level logging).")
@click.option("--host", default=None, help="Server host (for server action).")
@click.option("--port", default=None, type=int, help="Server port (for server action).")
@click.option("--reload", is_flag=True, help="Enable auto-reload (for server action).")
@click.option(
    "--test-type",
    type=click.Choice(list(TEST_SUITES)),
    default="all",
    help="Test suite to run (for test action).",
)
@click.option("--coverage", is_flag=True, help="Run tests with coverage (for test action).")
def main(action: str, verbose: bool, debug: bool, **options: Any) -> None:
    """
    NoteHub Entry Point.

    Serve the API, create the database schema, inspect the loaded
    configuration, or run the test suites.

    Examples:

        python run.py --action server --reload --verbose

        python run.py --action test --test-type unit --coverage
    """
    validate_project_root()

    log_level = "DEBUG" if debug else "INFO" if verbose else "WARNING"
    setup_logging(level=log_level, format_type="console")
    logger = get_logger(__name__)
    logger.debug("Starting application", extra={"action": action, "log_level": log_level})

    handler, _summary = ACTIONS[action]
    handler(logger, **options)


if __name__ == "__main__":
    main()
