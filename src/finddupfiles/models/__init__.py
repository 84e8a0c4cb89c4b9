"""Models package for finddupfiles."""

from finddupfiles.models.base import Base
from finddupfiles.models.files import Duplicate, FileRecord

__all__ = [
    "Base",
    "Duplicate",
    "FileRecord",
]
