"""Types and utilities for file sync."""

from dataclasses import dataclass, field
from typing import Dict, Set


@dataclass
class SyncReport:
    """Report of what a sync run did to the index.

    Attributes:
        new: Files found on disk without a record, now inserted
        modified: Files whose modification time changed, now rehashed
        deleted: Records whose path is no longer a regular file, now removed
        unchanged: Number of records left untouched
        digests: Digest of every file hashed during the run
        errors: Path -> message for files or directories that could not be read
        warnings: Path -> message for files whose read size did not match stat
        hashed: Number of digest computations performed
        fresh: True when the index was rebuilt from scratch
    """

    new: Set[str] = field(default_factory=set)
    modified: Set[str] = field(default_factory=set)
    deleted: Set[str] = field(default_factory=set)
    unchanged: int = 0
    digests: Dict[str, str] = field(default_factory=dict)
    errors: Dict[str, str] = field(default_factory=dict)
    warnings: Dict[str, str] = field(default_factory=dict)
    hashed: int = 0
    fresh: bool = False

    @property
    def total_changes(self) -> int:
        """Total number of records that were inserted, updated or removed."""
        return len(self.new) + len(self.modified) + len(self.deleted)

    @property
    def error_count(self) -> int:
        return len(self.errors)
