"""Service for grouping indexed files that share a digest."""

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, List

from loguru import logger

from finddupfiles.models import FileRecord
from finddupfiles.repository import DuplicateRepository, FileRepository


@dataclass
class DuplicateGroup:
    """Files sharing one digest, ordered by full path."""

    digest: str
    size: int
    members: List[FileRecord] = field(default_factory=list)

    @property
    def paths(self) -> List[str]:
        return [record.path for record in self.members]


class DuplicateService:
    """
    Computes duplicate groups from the synchronized index.

    Groups are rebuilt from scratch on every call; file records are only read.
    """

    def __init__(
        self, file_repository: FileRepository, duplicate_repository: DuplicateRepository
    ):
        self.file_repository = file_repository
        self.duplicate_repository = duplicate_repository

    async def resolve(self, include_empty_files: bool = False) -> List[DuplicateGroup]:
        """
        Find every group of two or more files sharing a digest.

        Zero-byte files all share one digest, so they are left out unless
        include_empty_files is set.

        Returns:
            Groups ordered by their first path, members ordered by path
        """
        records = await self.file_repository.find_all()

        by_digest: Dict[str, Dict[int, FileRecord]] = defaultdict(dict)
        for record in records:
            # keyed by id so a record never counts as its own duplicate
            by_digest[record.digest][record.id] = record

        groups = []
        for digest, members in by_digest.items():
            if len(members) < 2:
                continue
            ordered = sorted(members.values(), key=lambda r: r.path)
            if not include_empty_files and all(r.size == 0 for r in ordered):
                logger.debug(f"Skipping {len(ordered)} empty files")
                continue
            groups.append(DuplicateGroup(digest=digest, size=ordered[0].size, members=ordered))
        groups.sort(key=lambda g: g.paths[0])

        marked = await self.duplicate_repository.replace_all(
            (record.id, group.digest) for group in groups for record in group.members
        )
        logger.info(f"Found {len(groups)} duplicate groups covering {marked} files")
        return groups
