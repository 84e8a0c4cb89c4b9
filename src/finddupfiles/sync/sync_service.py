"""Service for syncing the file index with the filesystem."""

import asyncio
import os
import stat
import time
from pathlib import Path
from typing import Dict, List, Sequence, Set, Tuple

from loguru import logger

from finddupfiles.repository import FileRepository
from finddupfiles.services.exceptions import HashError
from finddupfiles.sync.hasher import DigestResult, Hasher, mtime_millis
from finddupfiles.sync.utils import SyncReport
from finddupfiles.sync.walker import FileCollector, TreeWalker

PROGRESS_INTERVAL = 1000


def now_millis() -> int:
    return time.time_ns() // 1_000_000


def storable(path: Path) -> bool:
    """Check that a path can be stored as UTF-8 text in the index."""
    try:
        str(path).encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def printable_path(path: Path) -> str:
    """Path as text with undecodable bytes shown as escapes."""
    return os.fsencode(path).decode("utf-8", "backslashreplace")


class SyncService:
    """
    Brings the file index up to date with one or more directory trees.

    The filesystem is the source of truth. A file is only hashed when it has no
    record yet or when its modification time differs from the recorded one.
    """

    def __init__(self, file_repository: FileRepository, hasher: Hasher, hash_workers: int = 4):
        self.file_repository = file_repository
        self.hasher = hasher
        self.hash_workers = max(1, hash_workers)

    async def sync(self, roots: Sequence[Path], fresh: bool = False) -> SyncReport:
        """
        Sync the index with every root directory.

        Args:
            roots: Directories to scan
            fresh: Drop every record and hash everything again

        Returns:
            SyncReport describing what changed

        Raises:
            InvalidRootError: If any root is not a directory; nothing is modified
        """
        # constructing the walkers validates every root before the index is touched
        walkers = [TreeWalker(root, continue_on_errors=True) for root in roots]
        report = SyncReport(fresh=fresh)

        if fresh:
            removed = await self.file_repository.delete_all()
            logger.info(f"Fresh sync, discarded {removed} records")
            known: Set[Tuple[str, str]] = set()
        else:
            await self.reconcile(report)
            known = await self.file_repository.find_all_keys()

        await self.discover(walkers, known, report)

        logger.info(
            f"Sync complete: {len(report.new)} new, {len(report.modified)} modified, "
            f"{len(report.deleted)} deleted, {report.unchanged} unchanged, "
            f"{report.hashed} hashed"
        )
        if report.errors:
            logger.warning(f"Encountered {report.error_count} errors while syncing")
        return report

    async def reconcile(self, report: SyncReport) -> None:
        """Check every existing record against the file it names."""
        records = await self.file_repository.find_all()
        logger.debug(f"Reconciling {len(records)} records")

        deletes: List[int] = []
        to_rehash: Dict[int, Path] = {}
        for count, record in enumerate(records, start=1):
            path = Path(record.path)
            try:
                stat_result = path.stat()
            except OSError:
                stat_result = None

            if stat_result is None or not stat.S_ISREG(stat_result.st_mode):
                logger.debug(f"Deleted: {path}")
                deletes.append(record.id)
                report.deleted.add(record.path)
            elif mtime_millis(stat_result) != record.modify_time:
                to_rehash[record.id] = path
            else:
                report.unchanged += 1

            if count % PROGRESS_INTERVAL == 0:
                logger.debug(f"{count} records reconciled")

        results = await self.hash_files(list(to_rehash.values()), report)

        updates: Dict[int, dict] = {}
        hash_time = now_millis()
        for record_id, path in to_rehash.items():
            result = results.get(path)
            if result is None:
                # rehash failed, record keeps its previous digest
                continue
            updates[record_id] = {
                "size": result.size,
                "modify_time": result.modify_time,
                "digest": result.digest,
                "hash_time": hash_time,
            }
            report.modified.add(str(path))

        await self.file_repository.apply_batch(updates=updates, deletes=deletes)

    async def discover(
        self, walkers: Sequence[TreeWalker], known: Set[Tuple[str, str]], report: SyncReport
    ) -> None:
        """Walk every root and insert a record for each file not yet indexed."""
        candidates: List[Path] = []
        for walker in walkers:
            logger.debug(f"Scanning directory: {walker.root}")
            collector = FileCollector()
            walker.walk(collector)
            report.errors.update(walker.errors)

            for path in collector.files:
                if not storable(path):
                    # names that are not valid UTF-8 cannot be indexed
                    shown = printable_path(path)
                    logger.error(f"cannot index {shown}: file name is not valid UTF-8")
                    report.errors[shown] = "file name is not valid UTF-8"
                    continue
                key = (str(path.parent), path.name)
                # overlapping roots can yield the same file twice
                if key in known:
                    continue
                known.add(key)
                candidates.append(path)

        logger.debug(f"Found {len(candidates)} files without a record")
        results = await self.hash_files(candidates, report)

        hash_time = now_millis()
        inserts = []
        for path in candidates:
            result = results.get(path)
            if result is None:
                continue
            inserts.append(
                {
                    "name": path.name,
                    "parent_path": str(path.parent),
                    "size": result.size,
                    "modify_time": result.modify_time,
                    "hash_time": hash_time,
                    "digest": result.digest,
                }
            )
            report.new.add(str(path))

        await self.file_repository.apply_batch(inserts=inserts)

    async def hash_files(
        self, paths: Sequence[Path], report: SyncReport
    ) -> Dict[Path, DigestResult]:
        """
        Hash files concurrently in worker threads.

        Failures are recorded in the report and left out of the result.
        """
        if not paths:
            return {}

        semaphore = asyncio.Semaphore(self.hash_workers)

        async def hash_one(path: Path) -> Tuple[Path, DigestResult | HashError]:
            async with semaphore:
                try:
                    return path, await asyncio.to_thread(self.hasher.digest, path)
                except HashError as e:
                    return path, e

        results: Dict[Path, DigestResult] = {}
        outcomes = await asyncio.gather(*(hash_one(path) for path in paths))
        for count, (path, outcome) in enumerate(outcomes, start=1):
            report.hashed += 1
            if isinstance(outcome, HashError):
                logger.error(str(outcome))
                report.errors[str(path)] = str(outcome)
                continue

            if outcome.size_mismatch:
                report.warnings[str(path)] = (
                    f"expected {outcome.size} bytes, read {outcome.bytes_read}"
                )
            report.digests[str(path)] = outcome.digest
            results[path] = outcome

            if count % PROGRESS_INTERVAL == 0:
                logger.debug(f"{count} files hashed")

        return results
