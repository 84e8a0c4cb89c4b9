"""Depth-first directory traversal with visitor callbacks."""

import os
from pathlib import Path
from typing import Dict, List, Protocol

from loguru import logger

from finddupfiles.services.exceptions import InvalidRootError, WalkError


class Visitor(Protocol):
    """Callbacks invoked by TreeWalker. Return False to stop the walk."""

    def on_file(self, path: Path) -> bool: ...

    def on_directory(self, path: Path) -> bool: ...


class FileCollector:
    """Visitor that records every regular file found."""

    def __init__(self):
        self.files: List[Path] = []

    def on_file(self, path: Path) -> bool:
        self.files.append(path)
        return True

    def on_directory(self, path: Path) -> bool:
        return True


class TreeWalker:
    """
    Walks a directory tree depth first.

    At each level all regular files are visited before any subdirectory. Symlinks
    to files count as files; symlinked directories are not descended so a link
    cycle cannot trap the walk.

    Args:
        root: Directory to start from
        continue_on_errors: Log and skip unreadable directories instead of raising

    Raises:
        InvalidRootError: If root does not exist or is not a directory
    """

    def __init__(self, root: Path, continue_on_errors: bool = False):
        self.root = Path(os.path.abspath(root))
        if not self.root.is_dir():
            raise InvalidRootError(self.root)
        self.continue_on_errors = continue_on_errors
        self.errors: Dict[str, str] = {}

    @property
    def error_count(self) -> int:
        return len(self.errors)

    def walk(self, visitor: Visitor) -> bool:
        """
        Traverse the tree, calling visitor for each file and subdirectory.

        Returns:
            False if a visitor callback stopped the walk, True otherwise

        Raises:
            WalkError: On an unreadable directory when continue_on_errors is off
        """
        return self._recurse(self.root, visitor)

    def _record_error(self, path: Path, error: OSError) -> None:
        reason = error.strerror or str(error)
        self.errors[str(path)] = reason
        if not self.continue_on_errors:
            raise WalkError(path, reason) from error
        logger.error(f"not accessible: {path}: {reason}")

    def _list(self, directory: Path) -> List[os.DirEntry] | None:
        try:
            with os.scandir(directory) as it:
                return list(it)
        except OSError as e:
            self._record_error(directory, e)
            return None

    def _recurse(self, directory: Path, visitor: Visitor) -> bool:
        entries = self._list(directory)
        if entries is None:
            return True

        subdirs = []
        for entry in entries:
            try:
                if entry.is_dir(follow_symlinks=False):
                    subdirs.append(entry)
                    continue
                is_file = entry.is_file()
            except OSError as e:
                self._record_error(Path(entry.path), e)
                continue
            if is_file and not visitor.on_file(Path(entry.path)):
                return False

        for entry in subdirs:
            path = Path(entry.path)
            if not visitor.on_directory(path):
                return False
            if not self._recurse(path, visitor):
                return False
        return True
