"""Status command for finddupfiles CLI."""

import asyncio
from dataclasses import dataclass
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from finddupfiles import db
from finddupfiles.cli.app import app, load_config
from finddupfiles.repository import DuplicateRepository, FileRepository

console = Console()


@dataclass
class IndexStatus:
    database_path: Path
    files: int
    total_bytes: int
    duplicate_files: int
    duplicate_groups: int


async def get_index_status(database_path: Path) -> IndexStatus:
    """Collect counts from an existing index."""
    async with db.engine_session_factory(db_path=database_path) as (engine, session_maker):
        file_repository = FileRepository(session_maker)
        duplicate_repository = DuplicateRepository(session_maker)
        return IndexStatus(
            database_path=database_path,
            files=await file_repository.count(),
            total_bytes=await file_repository.total_size(),
            duplicate_files=await duplicate_repository.count(),
            duplicate_groups=len(await duplicate_repository.find_digests()),
        )


def display_status(status: IndexStatus) -> None:
    table = Table(title="finddupfiles index", show_header=False)
    table.add_column("Item", style="bold")
    table.add_column("Value")
    table.add_row("Database", str(status.database_path))
    table.add_row("Indexed files", str(status.files))
    table.add_row("Indexed bytes", f"{status.total_bytes:,}")
    table.add_row("Duplicate groups", str(status.duplicate_groups))
    table.add_row("Files in duplicate groups", str(status.duplicate_files))
    console.print(table)


@app.command()
def status() -> None:
    """Show what the index contains."""
    config = load_config()
    if not config.database_path.exists():
        console.print(f"[yellow]No index yet at {config.database_path}[/yellow]")
        raise typer.Exit(0)

    display_status(asyncio.run(get_index_status(config.database_path)))
