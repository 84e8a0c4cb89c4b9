from .duplicate_repository import DuplicateRepository
from .file_repository import FileRepository
from .repository import Repository

__all__ = ["DuplicateRepository", "FileRepository", "Repository"]
