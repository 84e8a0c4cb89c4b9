from typing import Optional

import typer
from loguru import logger

from finddupfiles.config import FindDupFilesConfig, get_config
from finddupfiles.services.exceptions import ConfigError

CAUTION = (
    "CAUTION: Reported files have the same digest. There is a very slight chance "
    "that files with the same digest are different. Use the diff utility to be certain."
)


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        import finddupfiles

        typer.echo(f"finddupfiles version {finddupfiles.__version__}")
        raise typer.Exit()


def load_config() -> FindDupFilesConfig:
    """Load settings, exiting with status 1 when they are unusable."""
    try:
        return get_config()
    except ConfigError as e:
        logger.error(str(e))
        raise typer.Exit(1)


app = typer.Typer(name="finddupfiles", help=f"Find files with identical content.\n\n{CAUTION}")


@app.callback()
def app_callback(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """Find Duplicate Files - locate files with identical content."""
