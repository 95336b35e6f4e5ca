"""modelgen - Main entry point."""

import logging

import typer
from rich.console import Console
from rich.logging import RichHandler

from .commands import generate, runs
from .config import settings

app = typer.Typer(
    name="modelgen",
    help="Generate ORM model definitions from a database schema",
    add_completion=False,
)

app.command("generate")(generate.generate)
app.command("tables")(generate.list_tables)
app.add_typer(runs.app, name="runs")

console = Console()


@app.command()
def config():
    """Show current configuration."""
    console.print("[bold]Current Configuration[/bold]")
    console.print(f"  Dialect: {settings.db_dialect}")
    console.print(f"  Host: {settings.db_host}:{settings.db_port or 'default'}")
    console.print(f"  Database: {settings.db_name or settings.db_storage or 'Not set'}")
    console.print(f"  User: {settings.db_user or 'Not set'}")
    console.print(f"  Password configured: {'Yes' if settings.db_password else 'No'}")
    console.print(f"  Output directory: {settings.output_directory}")
    console.print(f"  Max workers: {settings.max_workers}")
    console.print(f"  Camel case: {settings.camel_case}")
    console.print(
        "  Timestamp fields: "
        + (", ".join(n for n in (settings.created_at_field, settings.updated_at_field, settings.deleted_at_field) if n) or "None")
    )
    console.print(f"  Run logging: {'Enabled' if settings.run_logging_enabled else 'Disabled'}")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
):
    """
    modelgen - Generate ORM model definitions from a live database schema.

    Examples:

        modelgen generate -e postgres -d shop -u admin -s public

        modelgen generate -e sqlite --storage ./shop.sqlite --camel-case

        modelgen tables -e mysql -d shop -u root

        modelgen runs list --status partial
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


if __name__ == "__main__":
    app()
