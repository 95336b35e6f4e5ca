"""Commands for inspecting the generation run log."""

import json
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from ..logging import get_run_logger

app = typer.Typer(help="Inspect recorded generation runs")
console = Console()


@app.command("list")
def list_runs(
    status: Optional[str] = typer.Option(None, "--status", help="Filter by status: success, partial, error"),
    dialect: Optional[str] = typer.Option(None, "--dialect", "-e", help="Filter by dialect"),
    since_hours: int = typer.Option(24, "--since-hours", help="Look back N hours"),
    limit: int = typer.Option(20, "--limit", "-n", help="Maximum number of runs"),
):
    """List recent generation runs."""
    run_logger = get_run_logger()
    if not run_logger.enabled:
        console.print("[yellow]Run logging is disabled[/yellow]")
        raise typer.Exit(1)

    runs = run_logger.query_runs(status=status, dialect=dialect, since_hours=since_hours, limit=limit)
    if not runs:
        console.print(f"[yellow]No runs in the last {since_hours} hours[/yellow]")
        return

    runs_table = Table(title="Generation Runs")
    runs_table.add_column("Run", style="cyan")
    runs_table.add_column("Time")
    runs_table.add_column("Dialect", style="magenta")
    runs_table.add_column("Database")
    runs_table.add_column("Status")
    runs_table.add_column("Tables", justify="right")
    runs_table.add_column("Failed", justify="right", style="red")
    runs_table.add_column("Duration", justify="right")

    status_styles = {"success": "green", "partial": "yellow", "error": "red"}
    for run in runs:
        failed = json.loads(run["failed_tables"]) if run.get("failed_tables") else []
        style = status_styles.get(run["status"], "white")
        runs_table.add_row(
            run["run_id"],
            run["timestamp"][:19].replace("T", " "),
            run["dialect"] or "",
            run["database_name"] or "",
            f"[{style}]{run['status']}[/{style}]",
            str(run["tables_count"] or 0),
            str(len(failed)),
            f"{run['duration_ms'] or 0}ms",
        )
    console.print(runs_table)


@app.command("show")
def show_run(
    run_id: str = typer.Argument(..., help="Run identifier"),
):
    """Show details of a single run."""
    run = get_run_logger().get_run(run_id)
    if run is None:
        console.print(f"[red]Run not found: {run_id}[/red]")
        raise typer.Exit(1)

    console.print(f"[bold]Run {run['run_id']}[/bold] ({run['status']})")
    for key in ("timestamp", "dialect", "database_name", "schema_filter", "duration_ms",
                "tables_count", "models_count", "columns_count", "foreign_keys_count"):
        console.print(f"  {key}: {run.get(key)}")

    for failure in json.loads(run["failed_tables"]) if run.get("failed_tables") else []:
        console.print(f"  [red]{failure['table']}[/red] ({failure['operation']}): {failure['error']}")

    for path in json.loads(run["files_written"]) if run.get("files_written") else []:
        console.print(f"  [green]wrote[/green] {path}")

    if run.get("error_message"):
        console.print(f"  [red]{run['error_type']}: {run['error_message']}[/red]")
