"""Entity extraction commands - reads table structure from PostgreSQL catalogs."""

from pathlib import Path
from typing import List, Optional

import typer
from typing_extensions import Annotated
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from ..config import settings
from ..database import PostgresDriver, PostgresQueryExecutor, entities_to_json
from ..errors import ExtractorError

app = typer.Typer(help="Extract entity models from PostgreSQL databases")
console = Console()


def _create_executor(
    host: Optional[str] = None,
    port: Optional[int] = None,
    user: Optional[str] = None,
    password: Optional[str] = None,
    database: Optional[str] = None,
) -> PostgresQueryExecutor:
    """Create a query executor from settings and CLI overrides."""
    return PostgresQueryExecutor.from_settings(
        settings,
        host=host,
        port=port,
        user=user,
        password=password,
        database=database,
    )


@app.command("extract")
def extract(
    schema: Annotated[Optional[List[str]], typer.Option(
        "--schema", "-s",
        help="Schema to extract. Can be specified multiple times (default: SCHEMA_NAMES setting)."
    )] = None,
    host: Optional[str] = typer.Option(None, "--host", "-h", help="PostgreSQL host (or PG_HOST env)"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="PostgreSQL port (or PG_PORT env)"),
    user: Optional[str] = typer.Option(None, "--user", "-u", help="PostgreSQL user (or PG_USER env)"),
    password: Optional[str] = typer.Option(None, "--password", help="PostgreSQL password (or PG_PASSWORD env)"),
    database: Optional[str] = typer.Option(None, "--database", "-d", help="Database name (or PG_DATABASE env)"),
    output_format: str = typer.Option("table", "--format", "-f", help="Output format: 'table' or 'json'"),
    output_file: Optional[Path] = typer.Option(None, "--output", "-o", help="Write JSON entity model to this file"),
    indices: bool = typer.Option(True, "--indices/--no-indices", help="Extract indexes"),
    relations: bool = typer.Option(True, "--relations/--no-relations", help="Extract foreign-key relations"),
):
    """
    Extract tables, columns, indexes and relations into an entity model.

    Examples:
        pgmodel db extract --database shop
        pgmodel db extract -d shop -s public -s billing --format json -o model.json
    """
    if output_format not in ("table", "json"):
        console.print(f"[red]Unknown output format: {output_format}[/red]")
        raise typer.Exit(1)

    schemas = schema or settings.schema_names

    def _run():
        try:
            executor = _create_executor(host, port, user, password, database)
            with PostgresDriver(executor, schemas=schemas) as driver:
                return driver.extract(include_indices=indices, include_relations=relations)
        except ImportError as e:
            console.print(f"[red]{e}[/red]")
            raise typer.Exit(1)
        except ExtractorError as e:
            console.print(f"[red]Extraction failed: {e.message}[/red]")
            raise typer.Exit(1)

    # JSON on stdout must stay free of progress output
    if output_format == "json" and output_file is None:
        entities = _run()
    else:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            progress.add_task("Reading catalog...", total=None)
            entities = _run()

    if output_file is not None:
        output_file.write_text(entities_to_json(entities), encoding="utf-8")
        console.print(f"[green]Wrote {len(entities)} entities to {output_file}[/green]")
        return

    if output_format == "json":
        typer.echo(entities_to_json(entities))
        return

    console.print(Panel(
        f"[bold blue]Entity model[/bold blue]\n"
        f"Schemas: {', '.join(schemas)}",
        title="pgmodel"
    ))
    if not entities:
        console.print("[yellow]No tables found in the specified schemas[/yellow]")
        return

    summary = Table(title="Entities")
    summary.add_column("Table", style="cyan")
    summary.add_column("Schema")
    summary.add_column("Columns", justify="right")
    summary.add_column("Indices", justify="right")
    summary.add_column("Relations", justify="right")
    for entity in entities:
        summary.add_row(
            entity.name,
            entity.schema,
            str(len(entity.columns)),
            str(len(entity.indices)),
            str(len(entity.relations)),
        )
    console.print(summary)

    owned = [rel for entity in entities for rel in entity.relations if rel.relation_id in entity.relation_ids]
    if owned:
        rel_table = Table(title="Relations")
        rel_table.add_column("Owner")
        rel_table.add_column("Columns")
        rel_table.add_column("Related")
        rel_table.add_column("Columns")
        for rel in owned:
            rel_table.add_row(
                rel.owner_table,
                ", ".join(rel.owner_columns),
                rel.related_table,
                ", ".join(rel.related_columns),
            )
        console.print(rel_table)


@app.command("exists")
def exists(
    name: str = typer.Argument(..., help="Database name to look for"),
    host: Optional[str] = typer.Option(None, "--host", "-h", help="PostgreSQL host (or PG_HOST env)"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="PostgreSQL port (or PG_PORT env)"),
    user: Optional[str] = typer.Option(None, "--user", "-u", help="PostgreSQL user (or PG_USER env)"),
    password: Optional[str] = typer.Option(None, "--password", help="PostgreSQL password (or PG_PASSWORD env)"),
):
    """Check whether a database exists on the server."""
    try:
        # pg_database is shared, so any reachable database works for the lookup
        executor = _create_executor(host, port, user, password, database="postgres")
        with PostgresDriver(executor) as driver:
            found = driver.check_if_db_exists(name)
    except ImportError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    except ExtractorError as e:
        console.print(f"[red]Check failed: {e.message}[/red]")
        raise typer.Exit(1)

    if found:
        console.print(f"[green]Database {name} exists[/green]")
    else:
        console.print(f"[yellow]Database {name} not found[/yellow]")
        raise typer.Exit(1)
