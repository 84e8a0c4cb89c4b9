"""Main CLI entry point for finddupfiles."""  # pragma: no cover

from finddupfiles.cli.app import app  # pragma: no cover

# Register commands
from finddupfiles.cli.commands import scan, status  # pragma: no cover

__all__ = ["app", "scan", "status"]  # pragma: no cover

if __name__ == "__main__":  # pragma: no cover
    app()
