"""GitHub API verification commands."""

from datetime import UTC, datetime

import typer
from rich.table import Table

from fork_sync.cli.common import OrgOption, console, require_token, run_async_command
from fork_sync.config import get_settings
from fork_sync.github import (
    GitHubAuthenticationError,
    GitHubClient,
    GitHubNotFoundError,
    GitHubRateLimitError,
)

app = typer.Typer(help="GitHub API commands")


def _format_time_remaining(seconds: int) -> str:
    """Format seconds as human-readable time."""
    if seconds <= 0:
        return "Now"
    if seconds < 60:
        return f"{seconds}s"
    if seconds < 3600:
        return f"{seconds // 60}m {seconds % 60}s"
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    return f"{hours}h {minutes}m"


@app.command("test")
def test_connection(org: OrgOption = None) -> None:
    """Test GitHub API connectivity and token validity.

    Checks the rate limit and lists the organization's forks.

    Examples:
        forksync github test
        forksync github test --org fork-the-planet
    """
    settings = get_settings()
    require_token(settings)
    org_name = org or settings.org_name

    async def _test() -> None:
        try:
            async with GitHubClient() as client:
                # 1. Check rate limit
                console.print("[bold]Checking rate limit...[/bold]")
                rate = await client.get_rate_limit()
                reset_time = rate["reset"]
                if isinstance(reset_time, datetime):
                    reset_str = reset_time.strftime("%H:%M:%S UTC")
                else:
                    reset_str = str(reset_time)
                console.print(
                    f"  Rate limit: {rate['remaining']}/{rate['limit']} (resets at {reset_str})"
                )

                if isinstance(rate["remaining"], int) and rate["remaining"] < 10:
                    console.print("[yellow]Warning:[/yellow] Low rate limit remaining")

                # 2. List forks
                console.print(f"\n[bold]Listing forks in {org_name}...[/bold]")
                forks = await client.list_forks(org_name)
                console.print(f"  Found {len(forks)} fork(s)")
                for full_name in forks[:5]:
                    console.print(f"    - {full_name}")
                if len(forks) > 5:
                    console.print(f"    ... and {len(forks) - 5} more")

                console.print("\n[green]GitHub API connection verified![/green]")

        except GitHubAuthenticationError:
            console.print("[red]Error:[/red] Invalid GitHub token")
            raise typer.Exit(1) from None
        except GitHubRateLimitError as e:
            console.print("[red]Error:[/red] Rate limit exceeded")
            if e.reset_at:
                console.print(f"  Resets at: {e.reset_at.strftime('%H:%M:%S UTC')}")
            raise typer.Exit(1) from None
        except GitHubNotFoundError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise typer.Exit(1) from None

    run_async_command(_test())


@app.command("rate-limit")
def show_rate_limit() -> None:
    """Show current GitHub API rate limit status.

    Examples:
        forksync github rate-limit
    """
    settings = get_settings()
    require_token(settings)

    async def _check() -> dict[str, int | datetime]:
        async with GitHubClient() as client:
            return await client.get_rate_limit()

    rate = run_async_command(_check())

    limit = int(rate["limit"]) if isinstance(rate["limit"], int) else 0
    remaining = int(rate["remaining"]) if isinstance(rate["remaining"], int) else 0
    reset_at = rate["reset"]
    seconds_left = (
        int((reset_at - datetime.now(UTC)).total_seconds())
        if isinstance(reset_at, datetime)
        else 0
    )

    remaining_pct = (remaining / limit * 100) if limit else 0.0
    if remaining_pct > 50:
        remaining_str = f"[green]{remaining}[/green]"
    elif remaining_pct > 20:
        remaining_str = f"[yellow]{remaining}[/yellow]"
    else:
        remaining_str = f"[red]{remaining}[/red]"

    table = Table(title="GitHub API Rate Limit (core)")
    table.add_column("Remaining", justify="right")
    table.add_column("Limit", justify="right")
    table.add_column("Used", justify="right")
    table.add_column("Resets In", justify="right")
    table.add_row(
        remaining_str,
        str(limit),
        str(rate["used"]),
        _format_time_remaining(seconds_left),
    )

    console.print()
    console.print(table)

    if remaining == 0:
        console.print(
            f"\n[red]Rate limit exhausted![/red] "
            f"Wait {_format_time_remaining(seconds_left)} before syncing."
        )
