from pathlib import Path


class FindDupFilesError(Exception):
    """Base exception for finddupfiles"""

    pass


class InvalidRootError(FindDupFilesError):
    """Raised when a directory to scan does not exist or is not a directory"""

    def __init__(self, root: Path):
        self.root = root
        super().__init__(f"directory not found: {root}")


class WalkError(FindDupFilesError):
    """Raised in strict mode when a directory cannot be listed"""

    def __init__(self, directory: Path, reason: str):
        self.directory = directory
        super().__init__(f"directory not accessible: {directory}: {reason}")


class HashError(FindDupFilesError):
    """Raised when a file cannot be read for hashing"""

    def __init__(self, path: Path, reason: str):
        self.path = path
        super().__init__(f"cannot hash {path}: {reason}")


class IndexUnavailableError(FindDupFilesError):
    """Raised when the index database cannot be opened"""

    pass


class ConfigError(FindDupFilesError):
    """Raised when settings cannot be loaded or the home directory cannot be created"""

    pass
