"""CLI application for depsemver."""

import json
import logging
from dataclasses import dataclass
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn
from rich.table import Table

from depsemver.errors import StaleManifestError, VersionParseError
from depsemver.history import GitHistory
from depsemver.manifest import read_manifest
from depsemver.models import DEFAULT_SEED, Version, WalkResult
from depsemver.sync import SyncOutcome, sync_manifest
from depsemver.walker import infer_from_history

console = Console()
err_console = Console(stderr=True)

OUTPUT_FORMATS = ("text", "json")


@dataclass(frozen=True)
class RunConfig:
    """Options for one invocation."""

    manifest_path: Path
    verbose: bool = False
    progress: bool = True
    strict: bool = False
    latest_only: bool = False
    seed: Version = DEFAULT_SEED
    format_type: str = "text"


def configure_logging(verbose: bool) -> logging.Logger:
    """Attach a rich handler to the depsemver logger for this run."""
    logger = logging.getLogger("depsemver")
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(console=err_console, show_path=False, show_time=False)
    handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    return logger


def format_json_output(
    result: WalkResult, outcome: SyncOutcome | None, error: str | None = None
) -> str:
    """Format JSON output."""
    report = result.to_dict()
    report["outcome"] = outcome.value if outcome else "stale"
    if error:
        report["error"] = error
    return json.dumps(report, indent=2)


def format_steps_table(result: WalkResult) -> Table:
    """Table of the commits that moved the version."""
    table = Table(title="Version changes")
    table.add_column("Commit")
    table.add_column("Change")
    table.add_column("Groups")
    table.add_column("Version")

    for step in result.steps:
        groups = ", ".join(f"{name}: {sev.label}" for name, sev in step.groups.items())
        table.add_row(step.commit[:10], step.severity.label, groups, str(step.version))
    return table


def walk_manifest(config: RunConfig, logger: logging.Logger) -> WalkResult:
    """Infer the manifest version from its git history."""
    # Fail before touching git if the manifest is missing or unreadable
    read_manifest(config.manifest_path)
    history = GitHistory(config.manifest_path)

    if not config.progress:
        result = infer_from_history(
            history, latest_only=config.latest_only, seed=config.seed, logger=logger
        )
    else:
        with Progress(
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            console=err_console,
            transient=True,
        ) as progress:
            task = progress.add_task("Walking history", total=None)

            def advance(done: int, total: int, commit: str) -> None:
                progress.update(task, completed=done, total=total, description=commit[:10])

            result = infer_from_history(
                history,
                latest_only=config.latest_only,
                seed=config.seed,
                logger=logger,
                progress=advance,
            )

    return result


def _parse_seed(value: str) -> Version:
    try:
        return Version.parse(value)
    except VersionParseError as e:
        raise typer.BadParameter(str(e)) from e


app = typer.Typer(
    name="depsemver",
    help="depsemver - Infer a package.json version from its dependency history",
    add_completion=False,
)


@app.command()
def bump(
    file_path: str = typer.Argument(
        "package.json", envvar="DEPSEMVER_MANIFEST", help="Path to the package.json manifest"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every version change"),
    show_progress: bool = typer.Option(True, "--progress/--no-progress", help="Show a progress bar"),
    strict: bool = typer.Option(
        False, "--exit", "-e", envvar="DEPSEMVER_STRICT",
        help="Exit with an error instead of writing when the version is stale",
    ),
    latest: bool = typer.Option(
        False, "--latest", "-l", envvar="DEPSEMVER_LATEST",
        help="Only inspect the latest commit touching the manifest",
    ),
    seed: str = typer.Option(str(DEFAULT_SEED), "--seed", help="Starting version for a full-history walk"),
    format_type: str = typer.Option("text", "--format", help="Output format: text or json"),
) -> None:
    """depsemver - Bump the manifest version from dependency changes in git history."""

    if format_type not in OUTPUT_FORMATS:
        console.print(f"Error: Unsupported format: {format_type}", style="red")
        raise typer.Exit(1)

    config = RunConfig(
        manifest_path=Path(file_path),
        verbose=verbose,
        progress=show_progress,
        strict=strict,
        latest_only=latest,
        seed=_parse_seed(seed),
        format_type=format_type,
    )
    logger = configure_logging(config.verbose)

    try:
        result = walk_manifest(config, logger)
        try:
            outcome = sync_manifest(config.manifest_path, result, strict=config.strict)
        except StaleManifestError as e:
            if config.format_type == "json":
                typer.echo(format_json_output(result, None, error=str(e)))
            else:
                console.print(f"Error: {e}", style="red")
            raise typer.Exit(1)

        if config.format_type == "json":
            typer.echo(format_json_output(result, outcome))
            return

        if config.verbose and result.steps:
            console.print(format_steps_table(result))

        if outcome is SyncOutcome.WRITTEN:
            console.print(f"+ Updated {file_path} version to {result.version}")
        elif outcome is SyncOutcome.UP_TO_DATE:
            console.print(f"{file_path} version {result.version} is already up to date")
        else:
            console.print("No dependency changes found")

    except typer.Exit:
        raise
    except Exception as e:
        console.print(f"Error: {e}", style="red")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
