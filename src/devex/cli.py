"""Command-line interface for devex git metrics."""

import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from . import __version__
from .config import config, load_global_config
from .exceptions import DevexError
from .git.identifiers import resolve_repo_identifier
from .git.models import GitHubRepo
from .logging import get_logger
from .metrics.cache import MetricsCache, MetricsService
from .metrics.engine import create_metrics_engine
from .metrics.models import GitMetrics
from .paths import get_config_path, get_data_dir
from .state import get_current_block, load_block

app = typer.Typer(
    name="devex",
    help="Git activity metrics for developer-experience experiments",
    add_completion=False
)
console = Console()
logger = get_logger(__name__)

DataDirOption = typer.Option(
    None, "--data-dir", envvar="DEVEX_DATA_DIR", help="Devex data directory (default: ~/.config/devex)"
)


def _data_dir(override: Optional[Path]) -> Path:
    return get_data_dir(override or config.app.data_dir)


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[green]devex v{__version__}[/green]")


@app.command()
def repos(data_dir: Optional[Path] = DataDirOption) -> None:
    """List configured repositories and how each one is resolved."""
    root = _data_dir(data_dir)
    try:
        global_config = load_global_config(get_config_path(root))
    except DevexError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    if not global_config.repositories:
        console.print("[yellow]No repositories configured.[/yellow]")
        return

    table = Table(title="Repositories")
    table.add_column("Configured", style="cyan")
    table.add_column("Type")
    table.add_column("Target", style="green")
    table.add_column("Branch")

    for repository in global_config.repositories:
        identifier = resolve_repo_identifier(repository.path)
        if isinstance(identifier, GitHubRepo):
            kind, target = "github", identifier.full_name
        else:
            kind, target = "local", identifier.path
        table.add_row(repository.path, kind, target, repository.branch or "")

    console.print(table)


@app.command()
def metrics(
    block_id: Optional[str] = typer.Option(None, "--block", "-b", help="Block to compute metrics for (default: current)"),
    experiment: Optional[str] = typer.Option(None, "--experiment", "-e", help="Experiment name (default: active)"),
    refresh: bool = typer.Option(False, "--refresh", help="Force recompute (ignore cache)"),
    as_json: bool = typer.Option(False, "--json", help="Print the metrics document as JSON"),
    data_dir: Optional[Path] = DataDirOption,
) -> None:
    """Compute and display git metrics for a block."""
    root = _data_dir(data_dir)

    try:
        global_config = load_global_config(get_config_path(root))
        experiment = experiment or global_config.active_experiment
        if not experiment:
            console.print("[red]No active experiment. Specify one with --experiment.[/red]")
            raise typer.Exit(1)

        if block_id:
            block = load_block(root, experiment, block_id)
            if block is None:
                console.print(f"[red]Block not found: {block_id}[/red]")
                raise typer.Exit(1)
        else:
            block = get_current_block(root, experiment)
            if block is None:
                console.print("[red]No active block. Specify a block with --block <id>[/red]")
                raise typer.Exit(1)

        if not global_config.repositories:
            console.print("[red]No repositories configured.[/red]")
            console.print("Supported formats:")
            console.print("  Local:  /path/to/repo, ~/repo")
            console.print("  GitHub: owner/repo, https://github.com/owner/repo")
            raise typer.Exit(1)

        with create_metrics_engine(config.github, global_config) as engine:
            service = MetricsService(engine, MetricsCache(root))
            result = service.get_metrics(experiment, block, global_config.repositories, refresh=refresh)
    except DevexError as e:
        console.print(f"[red]Failed to compute metrics: {e}[/red]")
        raise typer.Exit(1)

    for repo_path, reason in engine.failures.items():
        console.print(f"[yellow]Warning: could not compute metrics for {repo_path}: {reason}[/yellow]")

    if as_json:
        typer.echo(json.dumps(result.to_document(), indent=2))
        return

    if service.last_from_cache:
        console.print("[blue]Using cached metrics (use --refresh to recompute)[/blue]")
    display_metrics(result)


def display_metrics(result: GitMetrics) -> None:
    """Render totals and, for several repositories, a per-repository breakdown."""
    totals = result.totals
    start = result.date_range.start.date().isoformat()
    end = result.date_range.end.date().isoformat()

    table = Table(title=f"Git Metrics: {result.block_id} ({start} - {end})")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green", justify="right")

    approx = "~" if totals.estimated else ""
    table.add_row("Commits", str(totals.commits))
    table.add_row("Lines added", f"{approx}+{totals.lines_added:,}")
    table.add_row("Lines removed", f"{approx}-{totals.lines_removed:,}")
    table.add_row("Files changed", str(totals.files_changed))
    table.add_row("Test files", str(totals.test_files_changed))
    table.add_row("Doc files", str(totals.doc_files_changed))
    table.add_row("Avg commits/day", f"{totals.avg_commits_per_day:.1f}")
    console.print(table)

    if len(result.repositories) > 1:
        per_repo = Table(title="Per Repository")
        per_repo.add_column("Repository", style="cyan")
        per_repo.add_column("Commits", justify="right")
        per_repo.add_column("Lines", justify="right")
        for name, repo_metrics in result.repositories.items():
            mark = "~" if repo_metrics.estimated else ""
            per_repo.add_row(
                name,
                str(repo_metrics.commits),
                f"{mark}+{repo_metrics.lines_added}/-{repo_metrics.lines_removed}",
            )
        console.print(per_repo)

    if totals.estimated:
        console.print("[dim]~ line counts extrapolated from a sample of GitHub commits[/dim]")


if __name__ == "__main__":
    app()
