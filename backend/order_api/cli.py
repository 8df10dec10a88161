"""
Order API CLI.

Developer commands: create tables, seed the catalog, issue tokens for the
demo identities and check the health of a running server.
"""

import sys
import time

import httpx
import typer
from rich.console import Console
from rich.table import Table

from shared.config.constants import Regions, Roles
from shared.config.settings import settings

app = typer.Typer(
    name="order-api",
    help="Order API developer CLI",
    add_completion=False,
)
console = Console()


# =============================================================================
# Database Commands
# =============================================================================

@app.command()
def db_init():
    """Create all tables that do not exist yet."""
    from shared.infrastructure.db import engine
    from order_api.models import Base

    Base.metadata.create_all(bind=engine)
    console.print("[green]✓ Tables created/verified[/green]")


@app.command()
def db_seed(
    force: bool = typer.Option(False, "--force", "-f", help="Allow seeding production"),
):
    """Seed the sample restaurants and menus."""
    if settings.environment == "production" and not force:
        console.print("[red]Cannot seed production without --force[/red]")
        raise typer.Exit(1)

    from shared.infrastructure.db import get_db_context
    from order_api.seed import seed

    with get_db_context() as db:
        created = seed(db)

    console.print(f"[green]✓ {created} restaurant(s) created[/green]")


# =============================================================================
# Token Commands
# =============================================================================

@app.command()
def users():
    """List the demo identities available to issue-token."""
    from order_api.seed import SEED_USERS

    table = Table(title="Demo identities")
    table.add_column("sub", style="cyan")
    table.add_column("Name")
    table.add_column("Role", style="green")
    table.add_column("Region", style="yellow")

    for user in SEED_USERS:
        table.add_row(user["sub"], user["name"], user["role"], user["region"])

    console.print(table)


@app.command()
def issue_token(
    sub: str = typer.Argument(..., help="Demo identity (see `users`) or any user id"),
    role: str | None = typer.Option(None, help="Role for a custom user id"),
    region: str | None = typer.Option(None, help="Region for a custom user id"),
    ttl: int = typer.Option(3600, help="Token lifetime in seconds"),
):
    """Issue a bearer token for local testing."""
    if settings.environment == "production":
        console.print("[red]Tokens are issued by the identity service in production[/red]")
        raise typer.Exit(1)

    from order_api.seed import SEED_USERS
    from shared.security.auth import sign_jwt

    known = next((u for u in SEED_USERS if u["sub"] == sub), None)
    role = role or (known["role"] if known else None)
    region = region or (known["region"] if known else None)

    if role not in Roles.ALL:
        console.print(f"[red]Role must be one of: {', '.join(Roles.ALL)}[/red]")
        raise typer.Exit(1)
    if region not in Regions.ALL:
        console.print(f"[red]Region must be one of: {', '.join(Regions.ALL)}[/red]")
        raise typer.Exit(1)

    token = sign_jwt({"sub": sub, "role": role, "region": region}, ttl_seconds=ttl)
    # Plain output so it can be captured by a shell
    print(token)


# =============================================================================
# Health Commands
# =============================================================================

@app.command()
def health(
    url: str = typer.Option(
        f"http://localhost:{settings.rest_api_port}/api/health", help="Health endpoint"
    ),
):
    """Check a running server."""
    table = Table(title="Service Health")
    table.add_column("Service", style="cyan")
    table.add_column("Status", style="green")
    table.add_column("Response Time", style="yellow")

    start = time.time()
    try:
        response = httpx.get(url, timeout=5.0)
    except httpx.HTTPError as e:
        table.add_row("Order API", f"✗ {type(e).__name__}", "-")
        console.print(table)
        raise typer.Exit(1)

    elapsed = (time.time() - start) * 1000
    if response.status_code == 200:
        table.add_row("Order API", "✓ Healthy", f"{elapsed:.0f}ms")
    else:
        table.add_row("Order API", f"✗ Status {response.status_code}", f"{elapsed:.0f}ms")
    console.print(table)


@app.command()
def version():
    """Show version information."""
    table = Table(title="Order API Version")
    table.add_column("Component", style="cyan")
    table.add_column("Version", style="green")

    table.add_row("API", "0.1.0")
    table.add_row("Python", sys.version.split()[0])

    console.print(table)


if __name__ == "__main__":
    app()
