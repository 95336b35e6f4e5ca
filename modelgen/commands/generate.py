"""Model generation commands - create model definitions from a database schema."""

from typing import List, Optional

import typer
from typing_extensions import Annotated
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from ..config import settings
from ..database import GenerationOptions, IntrospectorFactory
from ..errors import ModelGenError
from ..logging import log_run
from ..render import ModelRenderer, ModelWriter
from ..synthesis import BuildResult, ModelBuilder

console = Console()


def _connection_option_values(
    dialect: Optional[str],
    host: Optional[str],
    port: Optional[int],
    user: Optional[str],
    password: Optional[str],
    database: Optional[str],
    storage: Optional[str],
) -> dict:
    """Merge CLI options over configured settings."""
    return {
        "dialect": dialect or settings.db_dialect,
        "host": host or settings.db_host,
        "port": port or settings.db_port,
        "user": user or settings.db_user,
        "password": password or settings.db_password,
        "database": database or settings.db_name,
        "storage": storage or settings.db_storage,
    }


def _timestamp_field(option: Optional[str], configured: Optional[str]) -> Optional[str]:
    """CLI value over the configured one; an empty name disables the field."""
    value = option if option is not None else configured
    return value or None


def print_build_summary(result: BuildResult) -> None:
    """Print per-table results and failures."""
    summary = Table(title="Generated Models")
    summary.add_column("Table", style="cyan")
    summary.add_column("Model", style="green")
    summary.add_column("Attributes", justify="right")
    summary.add_column("References", justify="right", style="magenta")

    for table in result.succeeded:
        model = result.models[table]
        references = sum(1 for c in model.columns if c.reference is not None)
        summary.add_row(table, model.name, str(len(model.columns)), str(references))
    console.print(summary)

    if result.failures:
        failures = Table(title="Failed Tables", style="red")
        failures.add_column("Table", style="cyan")
        failures.add_column("Operation", style="yellow")
        failures.add_column("Error")
        for failure in result.failures:
            failures.add_row(failure.table, failure.operation, failure.error)
        console.print(failures)


def generate(
    dialect: Optional[str] = typer.Option(None, "--dialect", "-e", help="Database engine: postgres, mysql, mariadb, sqlite (or DB_DIALECT env)"),
    host: Optional[str] = typer.Option(None, "--host", "-h", help="Database host (or DB_HOST env)"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Database port (or DB_PORT env)"),
    user: Optional[str] = typer.Option(None, "--user", "-u", help="Database user (or DB_USER env)"),
    password: Optional[str] = typer.Option(None, "--password", "-x", help="Database password (or DB_PASSWORD env)"),
    database: Optional[str] = typer.Option(None, "--database", "-d", help="Database name (or DB_NAME env)"),
    storage: Optional[str] = typer.Option(None, "--storage", help="SQLite database file (or DB_STORAGE env)"),
    schema: Optional[str] = typer.Option(None, "--schema", "-s", help="Schema to introspect"),
    tables: Annotated[Optional[List[str]], typer.Option(
        "--tables", "-t",
        help="Only generate these tables. Can be specified multiple times."
    )] = None,
    skip_tables: Annotated[Optional[List[str]], typer.Option(
        "--skip-tables", "-T",
        help="Skip these tables. Can be specified multiple times."
    )] = None,
    camel_case: bool = typer.Option(False, "--camel-case", "-C", help="Render names in camelCase (or CAMEL_CASE env)"),
    timestamps: bool = typer.Option(False, "--timestamps", help="Leave the configured timestamp columns to the table timestamp option"),
    created_at: Optional[str] = typer.Option(None, "--created-at", help="Created timestamp column name, empty to disable (or CREATED_AT_FIELD env)"),
    updated_at: Optional[str] = typer.Option(None, "--updated-at", help="Updated timestamp column name, empty to disable (or UPDATED_AT_FIELD env)"),
    deleted_at: Optional[str] = typer.Option(None, "--deleted-at", help="Deleted timestamp column name, empty to disable (or DELETED_AT_FIELD env)"),
    output_dir: Optional[str] = typer.Option(None, "--output", "-o", help="Directory for model files (or OUTPUT_DIRECTORY env)"),
    workers: Optional[int] = typer.Option(None, "--workers", help="Tables introspected concurrently"),
    indentation: Optional[int] = typer.Option(None, "--indentation", help="Indentation width"),
    spaces: bool = typer.Option(False, "--spaces", help="Indent with spaces instead of tabs (or USE_SPACES env)"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print generated models instead of writing files"),
):
    """
    Generate model definitions for every table in a database.

    Examples:
        modelgen generate -e postgres -d shop -u admin -s public
        modelgen generate -e sqlite --storage ./shop.sqlite -C --dry-run
        modelgen generate -e mysql -d shop -t orders -t customers -o ./models
        modelgen generate -e postgres -d shop --timestamps --created-at created_at --updated-at updated_at
    """
    conn = _connection_option_values(dialect, host, port, user, password, database, storage)
    options = GenerationOptions(
        schema=schema,
        camel_case=camel_case or settings.camel_case,
        timestamps=timestamps,
        created_at=_timestamp_field(created_at, settings.created_at_field),
        updated_at=_timestamp_field(updated_at, settings.updated_at_field),
        deleted_at=_timestamp_field(deleted_at, settings.deleted_at_field),
        tables=frozenset(tables) if tables else None,
        skip_tables=frozenset(skip_tables) if skip_tables else None,
    )
    output_dir = output_dir or settings.output_directory
    max_workers = workers or settings.max_workers

    console.print(Panel(
        f"[bold blue]Generating Models[/bold blue]\n"
        f"Dialect: {conn['dialect']}\n"
        f"Database: {conn['database'] or conn['storage']}\n"
        f"Schema: {schema or 'default'}",
        title="modelgen"
    ))

    try:
        introspector = IntrospectorFactory.create_introspector(**conn)
    except ModelGenError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1)

    arguments = {
        "schema": schema,
        "tables": sorted(tables or []),
        "skip_tables": sorted(skip_tables or []),
        "camel_case": options.camel_case,
        "timestamps": timestamps,
        "timestamp_fields": list(options.timestamp_field_names),
        "output": output_dir,
        "dry_run": dry_run,
    }

    result: Optional[BuildResult] = None
    texts = {}
    try:
        with log_run(
            dialect=conn["dialect"],
            database_name=introspector.database,
            schema_filter=schema,
            arguments=arguments,
        ) as ctx:
            with introspector, Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                console=console,
            ) as progress:
                task = progress.add_task("Introspecting database schema...", total=None)
                done = []

                def on_table_done(table: str, ok: bool) -> None:
                    done.append(table)
                    progress.update(task, description=f"Described {len(done)} tables (last: {table})")

                builder = ModelBuilder(introspector, options, max_workers=max_workers, on_table_done=on_table_done)
                result = builder.build()

            ctx.tables_count = len(result.tables)
            ctx.models_count = len(result.models)
            ctx.columns_count = result.columns_count
            ctx.foreign_keys_count = result.foreign_keys_count
            ctx.failed_tables = [
                {"table": f.table, "operation": f.operation, "error": f.error}
                for f in result.failures
            ]

            renderer = ModelRenderer(
                indentation=indentation or settings.indentation,
                spaces=spaces or settings.use_spaces,
            )
            texts = renderer.render_all({t: result.models[t] for t in result.succeeded})

            if not dry_run and texts:
                ctx.files_written = ModelWriter(output_dir).write(texts)

    except ImportError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    except ModelGenError as e:
        console.print(f"[red]Error: {e.message}[/red]")
        raise typer.Exit(1)

    if not result.tables:
        console.print("[yellow]No tables found in the specified database/schema[/yellow]")
        raise typer.Exit(1)

    print_build_summary(result)

    if dry_run:
        for table, text in texts.items():
            console.print(f"\n[bold]// {table}[/bold]")
            console.print(text, markup=False, highlight=False)
    elif texts:
        console.print(f"\n[green]Wrote {len(texts)} model files to {output_dir}[/green]")

    if not result.models:
        console.print("[red]No table could be introspected[/red]")
        raise typer.Exit(1)


def list_tables(
    dialect: Optional[str] = typer.Option(None, "--dialect", "-e", help="Database engine"),
    host: Optional[str] = typer.Option(None, "--host", "-h", help="Database host"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Database port"),
    user: Optional[str] = typer.Option(None, "--user", "-u", help="Database user"),
    password: Optional[str] = typer.Option(None, "--password", "-x", help="Database password"),
    database: Optional[str] = typer.Option(None, "--database", "-d", help="Database name"),
    storage: Optional[str] = typer.Option(None, "--storage", help="SQLite database file"),
    schema: Optional[str] = typer.Option(None, "--schema", "-s", help="Schema to list"),
):
    """List tables in a database."""
    conn = _connection_option_values(dialect, host, port, user, password, database, storage)
    try:
        with IntrospectorFactory.create_introspector(**conn) as introspector:
            builder = ModelBuilder(introspector, GenerationOptions(schema=schema))
            names = builder.list_tables()
    except ImportError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    except ModelGenError as e:
        console.print(f"[red]Error: {e.message}[/red]")
        raise typer.Exit(1)

    table_display = Table(title=f"Tables in {conn['database'] or conn['storage']}")
    table_display.add_column("Table", style="cyan")
    for name in names:
        table_display.add_row(name)
    console.print(table_display)
