"""Scan command: sync the index and report duplicate files."""

import asyncio
from pathlib import Path
from typing import List, Optional, Tuple

import typer
from loguru import logger
from rich.console import Console
from rich.markup import escape
from rich.tree import Tree

from finddupfiles import db
from finddupfiles.cli.app import CAUTION, app, load_config
from finddupfiles.config import FindDupFilesConfig
from finddupfiles.repository import DuplicateRepository, FileRepository
from finddupfiles.services.duplicate_service import DuplicateGroup, DuplicateService
from finddupfiles.services.exceptions import FindDupFilesError
from finddupfiles.services.report_service import write_report
from finddupfiles.sync import Hasher, SyncReport, SyncService
from finddupfiles.utils import setup_logging

# stdout is reserved for report lines
console = Console(stderr=True)


async def run_scan(
    directories: List[Path],
    config: FindDupFilesConfig,
    reset: bool = False,
    include_empty_files: bool = False,
) -> Tuple[SyncReport, List[DuplicateGroup]]:
    """Sync the index for directories, then resolve duplicate groups."""
    new_db = not config.database_path.exists()
    if new_db:
        logger.info(f"Creating new index at {config.database_path}")

    async with db.engine_session_factory(db_path=config.database_path) as (
        engine,
        session_maker,
    ):
        file_repository = FileRepository(session_maker)
        duplicate_repository = DuplicateRepository(session_maker)

        sync_service = SyncService(
            file_repository,
            Hasher(config.hash_algorithm, config.chunk_size),
            hash_workers=config.hash_workers,
        )
        report = await sync_service.sync(directories, fresh=new_db or reset)

        duplicate_service = DuplicateService(file_repository, duplicate_repository)
        groups = await duplicate_service.resolve(include_empty_files=include_empty_files)

    return report, groups


def display_sync_summary(report: SyncReport, groups: List[DuplicateGroup]):
    """Display a one-line summary of the run."""
    changes = []
    if report.new:
        changes.append(f"[green]{len(report.new)} new[/green]")
    if report.modified:
        changes.append(f"[yellow]{len(report.modified)} modified[/yellow]")
    if report.deleted:
        changes.append(f"[red]{len(report.deleted)} deleted[/red]")

    if changes:
        console.print(f"Indexed {report.total_changes} changes ({', '.join(changes)})")
    else:
        console.print("[green]Index up to date[/green]")
    console.print(f"{len(groups)} duplicate groups, {report.hashed} files hashed")


def display_detailed_sync_results(report: SyncReport):
    """Display detailed sync results as a tree."""
    if report.total_changes == 0 and not report.errors:
        return

    tree = Tree("[bold]Sync Results[/bold]")
    if report.new:
        created = tree.add("[green]New[/green]")
        for path in sorted(report.new):
            created.add(f"[green]{escape(path)}[/green] ({report.digests.get(path, '')[:8]})")
    if report.modified:
        modified = tree.add("[yellow]Modified[/yellow]")
        for path in sorted(report.modified):
            modified.add(f"[yellow]{escape(path)}[/yellow] ({report.digests.get(path, '')[:8]})")
    if report.deleted:
        deleted = tree.add("[red]Deleted[/red]")
        for path in sorted(report.deleted):
            deleted.add(f"[red]{escape(path)}[/red]")
    if report.errors:
        errors = tree.add("[bold red]Errors[/bold red]")
        for path, error in sorted(report.errors.items()):
            errors.add(f"{escape(path)}: [red]{escape(error)}[/red]")
    console.print(tree)


@app.command(epilog=CAUTION)
def scan(
    directories: List[Path] = typer.Argument(..., help="Directories to search for duplicates."),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show progress and detailed sync information on stderr.",
    ),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only show warnings and errors."),
    reset: bool = typer.Option(
        False, "--reset", help="Discard the index and hash every file again."
    ),
    include_empty: Optional[bool] = typer.Option(
        None,
        "--include-empty/--exclude-empty",
        help="Report groups of zero-byte files.",
    ),
) -> None:
    """Index directories and print one DUPLICATES line per group of identical files."""
    config = load_config()
    level = "DEBUG" if verbose else "WARNING" if quiet else config.log_level
    setup_logging(level=level, log_file=config.log_path)

    include_empty_files = (
        config.include_empty_files if include_empty is None else include_empty
    )
    try:
        report, groups = asyncio.run(
            run_scan(
                directories,
                config,
                reset=reset,
                include_empty_files=include_empty_files,
            )
        )
    except FindDupFilesError as e:
        logger.error(str(e))
        raise typer.Exit(1)

    write_report(groups)

    if verbose:
        display_detailed_sync_results(report)
    if not quiet:
        display_sync_summary(report, groups)

    if report.error_count:
        console.print(f"[bold red]{report.error_count} ERRORS WERE ENCOUNTERED[/bold red]")
        raise typer.Exit(1)
