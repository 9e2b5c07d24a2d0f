"""pgmodel CLI - Main entry point."""

import logging

import typer
from rich.console import Console
from rich.logging import RichHandler

from .commands import extract
from .config import settings
from .errors import ConfigurationError

app = typer.Typer(
    name="pgmodel",
    help="Extract entity models from PostgreSQL catalogs",
    add_completion=False,
)

# Add subcommands
app.add_typer(extract.app, name="db")

console = Console()


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def configure_logging(level: str):
    """Send extraction diagnostics to stderr through rich."""
    level = level.upper()
    if level not in LOG_LEVELS:
        raise ConfigurationError(
            f"Invalid log level: {level}. Use one of: {', '.join(LOG_LEVELS)}",
            details={"log_level": level},
        )
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.command()
def config():
    """Show current configuration."""
    console.print("[bold]Current Configuration[/bold]")
    console.print(f"  Host: {settings.pg_host}:{settings.pg_port}")
    console.print(f"  User: {settings.pg_user}")
    console.print(f"  Password configured: {'Yes' if settings.pg_password else 'No'}")
    console.print(f"  Database: {settings.pg_database or 'Not set'}")
    console.print(f"  SSL: {'Yes' if settings.pg_ssl else 'No'}")
    console.print(f"  Schemas: {', '.join(settings.schema_names)}")
    console.print(f"  Log level: {settings.log_level}")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug diagnostics"),
):
    """
    pgmodel - Extract entity models from PostgreSQL catalogs.

    Examples:

        pgmodel db extract --database shop

        pgmodel db extract -d shop --format json -o model.json

        pgmodel db exists shop
    """
    try:
        configure_logging("DEBUG" if verbose else settings.log_level)
    except ConfigurationError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
