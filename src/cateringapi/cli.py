"""CLI entry point for the Catering API."""

import os

import click
from rich.console import Console
from rich.table import Table

from cateringapi.config import load_settings
from cateringapi.logging_setup import configure_logging
from cateringapi.storage.database import Database
from cateringapi.storage.seed import has_data, seed as seed_data

console = Console(force_terminal=True)


@click.group()
@click.option(
    "--db",
    default=None,
    help="Database path (overrides CATERING_DB_PATH)",
    type=click.Path(),
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, db, verbose):
    """Catering API - manage the database and run the server."""
    ctx.ensure_object(dict)
    try:
        settings = load_settings(db)
    except ValueError as e:
        raise click.ClickException(str(e)) from e
    ctx.obj["settings"] = settings
    ctx.obj["db_path"] = settings.db_path
    configure_logging(settings.log_level, verbose)


@cli.command(name="init-db")
@click.pass_context
def init_db(ctx):
    """Create the database schema."""
    db_path = ctx.obj["db_path"]
    with Database(db_path):
        pass
    console.print(f"[green]Database ready[/green] at {db_path}")


@cli.command()
@click.option("--force", is_flag=True, help="Seed even if the database already has data")
@click.pass_context
def seed(ctx, force):
    """Load the sample locations, facilities, tags and employees."""
    with Database(ctx.obj["db_path"]) as db:
        if has_data(db) and not force:
            console.print(
                "[yellow]Database already has data.[/yellow] Use --force to seed anyway."
            )
            return
        counts = seed_data(db)

    table = Table(title="Seeded Rows")
    table.add_column("Table", style="cyan")
    table.add_column("Rows", justify="right")
    for name, count in counts.items():
        table.add_row(name, str(count))
    console.print(table)


@cli.command()
@click.option("--yes", is_flag=True, help="Skip the confirmation prompt")
@click.pass_context
def clear(ctx, yes):
    """Delete all rows from every table."""
    if not yes:
        click.confirm("Delete all catering data?", abort=True)
    with Database(ctx.obj["db_path"]) as db:
        db.clear()
    console.print("[green]All data cleared.[/green]")


@cli.command()
@click.pass_context
def status(ctx):
    """Show row counts per table."""
    db_path = ctx.obj["db_path"]

    if not db_path.exists():
        console.print("[yellow]No database found.[/yellow] Run 'init-db' first.")
        return

    with Database(db_path) as db:
        counts = db.table_counts()

    table = Table(title="Catering Database")
    table.add_column("Table", style="cyan")
    table.add_column("Rows", justify="right")
    for name, count in counts.items():
        table.add_row(name, str(count))
    table.add_row("[bold]Total[/bold]", f"[bold]{sum(counts.values())}[/bold]")
    console.print(f"[dim]{db_path}[/dim]")
    console.print(table)


@cli.command()
@click.option("--host", default="127.0.0.1", help="Interface to bind")
@click.option("--port", default=8000, type=int, help="Port to listen on")
@click.option("--reload", is_flag=True, help="Reload on code changes")
@click.pass_context
def serve(ctx, host, port, reload):
    """Run the API server."""
    import uvicorn

    from cateringapi.web.app import create_app

    console.print(f"[bold]Catering API[/bold] on http://{host}:{port}")
    if not reload:
        uvicorn.run(create_app(ctx.obj["settings"]), host=host, port=port)
        return

    # The reloader imports the factory in a child process, which only
    # sees settings through its environment
    os.environ["CATERING_DB_PATH"] = str(ctx.obj["db_path"])
    uvicorn.run(
        "cateringapi.web.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=True,
    )


if __name__ == "__main__":
    cli()
