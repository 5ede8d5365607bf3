"""Workflow sweep commands."""

import json

import typer

from fork_sync.cli.common import (
    DryRunOption,
    OrgOption,
    OutputFormatOption,
    console,
    require_token,
    run_async_command,
)
from fork_sync.config import get_settings
from fork_sync.github import GitHubClient, OutputFormat
from fork_sync.github.workflows import WorkflowDisabler, WorkflowSweepResult

app = typer.Typer(help="Manage GitHub Actions workflows in organization repositories")


@app.command("disable")
def disable_workflows(
    org: OrgOption = None,
    dry_run: DryRunOption = False,
    output_format: OutputFormatOption = OutputFormat.TEXT,
) -> None:
    """Disable every active workflow that is not whitelisted.

    The whitelist comes from WORKFLOWS__WHITELIST (CodeQL, the fork sync
    workflow and Dependabot Updates by default).

    Examples:
        forksync workflows disable
        forksync workflows disable --dry-run
        forksync workflows disable --org fork-the-planet --format json
    """
    settings = get_settings()
    require_token(settings)
    org_name = org or settings.org_name

    async def _sweep() -> WorkflowSweepResult:
        async with GitHubClient() as client:
            repos = await client.list_org_repositories(org_name)
            disabler = WorkflowDisabler(
                client,
                settings.workflows.whitelist,
                max_concurrent=settings.workflows.max_concurrent,
                dry_run=dry_run,
            )
            return await disabler.run([repo.full_name for repo in repos])

    result = run_async_command(_sweep(), error_prefix="Workflow sweep failed")

    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps(result.to_dict()))
        return

    prefix = "[dim](dry-run)[/dim] " if dry_run else ""
    action = "Would disable" if dry_run else "Disabled"
    console.print(f"{prefix}[bold]Workflow Sweep Complete[/bold]")
    console.print()
    console.print(f"  Repositories:   {len(result.repo_results)}")
    console.print(f"  {action + ':':<15} {result.total_disabled}")
    if result.repos_with_errors:
        console.print(f"  [red]Errors:[/red]         {result.repos_with_errors}")
    console.print(f"  Duration: {result.duration_seconds:.1f}s")

    errored = [r for r in result.repo_results if r.error]
    if errored:
        console.print()
        console.print("[bold]Repositories with errors:[/bold]")
        for repo_result in errored:
            console.print(f"  {repo_result.repository}: {repo_result.error}")
