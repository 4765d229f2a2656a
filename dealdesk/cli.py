"""DealDesk CLI - serve the API, run migrations, provision profiles."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table
from sqlalchemy.exc import IntegrityError

from .database import build_engine, build_session_factory
from .forms import validate_form
from .schemas.forms import ProfileCreate
from .services import dashboard_svc, profile_svc

app = typer.Typer(
    name="dealdesk",
    help="DealDesk - sales CRM backend",
    no_args_is_help=True,
)
console = Console()

db_app = typer.Typer(help="Database migrations")
profiles_app = typer.Typer(help="User profile provisioning")

app.add_typer(db_app, name="db")
app.add_typer(profiles_app, name="profiles")


async def _with_session(fn, *args, **kwargs):
    engine = build_engine()
    try:
        async with build_session_factory(engine)() as db:
            return await fn(db, *args, **kwargs)
    finally:
        await engine.dispose()


@app.command("serve")
def serve(
    port: int = typer.Option(8030, "--port", "-p", help="Port to run on"),
    host: str = typer.Option("127.0.0.1", "--host", help="Host to bind to"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
):
    """Launch the DealDesk JSON API."""
    import uvicorn

    console.print(f"[bold cyan]Starting DealDesk at http://{host}:{port}[/bold cyan]")
    uvicorn.run("dealdesk.app:app", host=host, port=port, reload=reload)


# ============================================================================
# Database Commands
# ============================================================================


@db_app.command("upgrade")
def db_upgrade(
    revision: str = typer.Argument("head", help="Target revision"),
):
    """Apply Alembic migrations to the configured database."""
    from alembic import command
    from alembic.config import Config

    cfg = Config(str(Path(__file__).resolve().parent / "alembic.ini"))
    command.upgrade(cfg, revision)
    console.print(f"[green]Database upgraded to {revision}[/green]")


# ============================================================================
# Profile Commands
# ============================================================================


@profiles_app.command("add")
def profiles_add(
    name: str = typer.Option(..., "--name", "-n", help="Display name"),
    email: str = typer.Option(..., "--email", "-e", help="Email address"),
    avatar: str = typer.Option("", "--avatar", help="Avatar image URL"),
):
    """Create the profile for an account provisioned by the identity provider."""
    result = validate_form(ProfileCreate, {"name": name, "email": email, "avatar": avatar})
    if not result.ok:
        for field, message in result.errors.items():
            console.print(f"[red]{field}: {message}[/red]")
        raise typer.Exit(1)

    values = result.values
    try:
        user = asyncio.run(_with_session(
            profile_svc.create_profile,
            name=values.name,
            email=values.email,
            avatar=values.avatar or None,
        ))
    except IntegrityError:
        console.print(f"[red]A profile with email {values.email} already exists[/red]")
        raise typer.Exit(1)

    console.print(f"[green]Created profile {user.name} ({user.id})[/green]")


@profiles_app.command("list")
def profiles_list(
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
):
    """List profiles available for deal assignment."""
    users = asyncio.run(_with_session(profile_svc.list_profiles))

    if json_output:
        console.print_json(json.dumps([u.model_dump(by_alias=True) for u in users]))
        return

    if not users:
        console.print("[yellow]No profiles found[/yellow]")
        return

    table = Table(title=f"Profiles ({len(users)})")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Email")
    for user in users:
        table.add_row(user.id, user.name, user.email)
    console.print(table)


@app.command("stats")
def stats(
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
):
    """Show the dashboard stat cards."""
    cards = asyncio.run(_with_session(dashboard_svc.get_stat_cards))

    if json_output:
        console.print_json(json.dumps([c.model_dump() for c in cards]))
        return

    table = Table(title="Dashboard")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="bold")
    table.add_column("Detail", style="dim")
    for card in cards:
        table.add_row(card.title, card.value, card.description)
    console.print(table)


if __name__ == "__main__":
    app()
