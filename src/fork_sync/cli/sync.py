"""Sync commands for Fork Sync."""

import json
from pathlib import Path
from typing import Any

import typer
from rich.table import Table

from fork_sync.cli.common import (
    OrgOption,
    OutputFormatOption,
    RepoArgument,
    console,
    create_syncer,
    require_token,
    run_async_command,
    validate_repo,
)
from fork_sync.config import get_settings
from fork_sync.github import GitHubClient, OutputFormat
from fork_sync.github.sync import (
    ForkSyncResult,
    ForkSyncScheduler,
    SyncOutcome,
    run_fork_sync,
)
from fork_sync.schemas import LAST_UPDATE_FORMAT
from fork_sync.storage import MetadataStore

app = typer.Typer(help="Sync organization forks with their upstreams")


def _metadata_store() -> MetadataStore:
    settings = get_settings()
    return MetadataStore(Path(settings.git.repo_dir) / settings.sync.metadata_file)


@app.command("run")
def sync_run(
    org: OrgOption = None,
    workflows: bool | None = typer.Option(
        None,
        "--workflows/--no-workflows",
        help="Run the workflow-disabling sweep after syncing (default: WORKFLOWS__ENABLED)",
    ),
    commit: bool | None = typer.Option(
        None,
        "--commit/--no-commit",
        help="Commit the metadata at each checkpoint and at the end (default: GIT__COMMIT)",
    ),
    push: bool | None = typer.Option(
        None,
        "--push/--no-push",
        help="Push the final commit (default: GIT__PUSH)",
    ),
    output_format: OutputFormatOption = OutputFormat.TEXT,
) -> None:
    """Sync every fork in the organization, least recently synced first.

    Stops at the first rate limit response. Failed and rate limited
    repositories are written to their outcome logs; the command still
    exits 0 when that happens.

    Examples:
        forksync sync run
        forksync sync run --org fork-the-planet --no-workflows
        forksync sync run --commit --push
        forksync -v sync run --format json
    """
    settings = get_settings()
    require_token(settings)

    async def _run() -> ForkSyncResult:
        async with GitHubClient() as client:
            return await run_fork_sync(
                client,
                settings,
                org=org,
                syncer=create_syncer(settings, client),
                disable_workflows=workflows,
                commit=commit,
                push=push,
            )

    if output_format == OutputFormat.TEXT:
        console.print(f"[dim]Syncing forks of {org or settings.org_name}...[/dim]")
        console.print()

    result = run_async_command(_run(), error_prefix="Sync failed")

    # JSON output
    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps(result.to_dict()))
        return

    _print_run_summary(result)


def _print_run_summary(result: ForkSyncResult) -> None:
    """Print the text summary of a sync run."""
    if result.halted:
        console.print("[bold yellow]Sync Stopped (rate limit)[/bold yellow]")
    else:
        console.print("[bold]Sync Complete[/bold]")
    console.print()

    console.print(f"  [green]Synced:[/green]        {result.succeeded}")
    if result.failed:
        console.print(f"  [red]Failed:[/red]        {len(result.failed)}")
    if result.rate_limited:
        console.print(f"  [yellow]Rate limited:[/yellow]  {len(result.rate_limited)}")
    if result.not_attempted:
        console.print(f"  [dim]Not attempted:[/dim] {result.not_attempted}")

    console.print()
    console.print(f"  Total forks: {result.total_forks}")
    console.print(f"  Duration: {result.duration_seconds:.1f}s")
    if result.last_run:
        console.print(f"  Last run: {result.last_run}")

    if result.failed:
        console.print()
        console.print("[bold]Failed repositories:[/bold]")
        errors = {a.repository: a.error for a in result.attempts}
        for repo in result.failed:
            console.print(f"  {repo}: {errors.get(repo) or 'Unknown error'}")

    if result.rate_limited:
        console.print()
        console.print("[bold]Rate limited at:[/bold]")
        for repo in result.rate_limited:
            console.print(f"  {repo}")

    summary = (result.workflows or {}).get("summary")
    if summary:
        console.print()
        console.print(
            f"[bold]Workflows:[/bold] disabled {summary.get('total_disabled', 0)} "
            f"across {summary.get('total_repos', 0)} repositories"
        )


@app.command("repo")
def sync_single_repo(
    repo: RepoArgument,
    output_format: OutputFormatOption = OutputFormat.TEXT,
) -> None:
    """Sync one fork and record it in the metadata file.

    Examples:
        forksync sync repo fork-the-planet/requests
        forksync sync repo fork-the-planet/requests --format json
    """
    validate_repo(repo)
    settings = get_settings()
    require_token(settings)
    store = _metadata_store()

    async def _sync() -> dict[str, Any]:
        metadata = store.load()
        async with GitHubClient() as client:
            scheduler = ForkSyncScheduler(
                create_syncer(settings, client),
                metadata,
                force=settings.sync.force,
            )
            attempt = await scheduler.sync_repository(repo)
        if attempt.outcome == SyncOutcome.SUCCESS:
            store.save(metadata)
        return attempt.to_dict()

    result = run_async_command(_sync(), error_prefix="Sync failed")

    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps(result))
    elif result["outcome"] == SyncOutcome.SUCCESS.value:
        merge_type = result.get("merge_type")
        detail = f" ({merge_type})" if merge_type else ""
        console.print(f"[green]Synced[/green] {repo}{detail}")
    elif result["outcome"] == SyncOutcome.RATE_LIMITED.value:
        console.print(f"[yellow]Rate limited:[/yellow] {result.get('error', '')}")
    else:
        console.print(f"[red]Error:[/red] {result.get('error', 'Unknown error')}")

    if result["outcome"] != SyncOutcome.SUCCESS.value:
        raise typer.Exit(1)


@app.command("plan")
def sync_plan(
    org: OrgOption = None,
    limit: int | None = typer.Option(
        None,
        "--limit",
        "-n",
        min=1,
        help="Show only the first N forks",
    ),
    output_format: OutputFormatOption = OutputFormat.TEXT,
) -> None:
    """Show the order the next run would visit forks in, without syncing.

    Examples:
        forksync sync plan
        forksync sync plan --limit 20
        forksync sync plan --format json
    """
    settings = get_settings()
    require_token(settings)
    store = _metadata_store()

    async def _plan() -> list[dict[str, str]]:
        metadata = store.load()
        async with GitHubClient() as client:
            forks = await client.list_forks(org or settings.org_name)
        ordered = ForkSyncScheduler(client, metadata).plan(forks)
        if limit is not None:
            ordered = ordered[:limit]
        return [
            {
                "repository": repo,
                "last_update": metadata.last_update(repo).strftime(LAST_UPDATE_FORMAT),
            }
            for repo in ordered
        ]

    entries = run_async_command(_plan())

    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps(entries))
        return

    if not entries:
        console.print("[yellow]No forks found.[/yellow]")
        return

    table = Table(title="Sync order")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Repository", style="cyan")
    table.add_column("Last update")

    for index, entry in enumerate(entries, start=1):
        table.add_row(str(index), entry["repository"], entry["last_update"])

    console.print(table)
