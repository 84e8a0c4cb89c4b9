"""Repository for the persisted file index."""

from typing import Iterable, List, Mapping, Optional, Sequence, Set, Tuple

from loguru import logger
from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from finddupfiles import db
from finddupfiles.models import FileRecord
from finddupfiles.repository.repository import Repository

# keep IN (...) lists well below SQLite's bound parameter limit
DELETE_BATCH_SIZE = 500


class FileRepository(Repository[FileRecord]):
    """Repository for FileRecord rows, keyed by (parent_path, name)."""

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        super().__init__(session_maker, FileRecord)

    async def find_by_path(self, parent_path: str, name: str) -> Optional[FileRecord]:
        """Find the record for a file by its directory and name."""
        query = self.select().where(
            FileRecord.parent_path == parent_path, FileRecord.name == name
        )
        return await self.find_one(query)

    async def find_by_digest(self, digest: str) -> Sequence[FileRecord]:
        """Find all records sharing a digest."""
        query = self.select().where(FileRecord.digest == digest).order_by(
            FileRecord.parent_path, FileRecord.name
        )
        result = await self.execute_query(query)
        return result.scalars().all()

    async def find_all_keys(self) -> Set[Tuple[str, str]]:
        """Get the (parent_path, name) key of every record."""
        result = await self.execute_query(select(FileRecord.parent_path, FileRecord.name))
        return {(parent_path, name) for parent_path, name in result.all()}

    async def total_size(self) -> int:
        result = await self.execute_query(select(func.coalesce(func.sum(FileRecord.size), 0)))
        return result.scalar() or 0

    async def apply_batch(
        self,
        inserts: Iterable[dict] = (),
        updates: Mapping[int, dict] | None = None,
        deletes: Iterable[int] = (),
    ) -> None:
        """
        Apply a batch of index mutations as one transaction.

        Either every insert, update and delete is committed or none is.

        Args:
            inserts: Column values for new records
            updates: Record id -> changed column values
            deletes: Ids of records to remove
        """
        insert_rows = [self.get_model_data(row) for row in inserts]
        update_rows = [
            {"id": record_id, **self.get_model_data(values)}
            for record_id, values in (updates or {}).items()
        ]
        delete_ids: List[int] = list(deletes)

        if not (insert_rows or update_rows or delete_ids):
            return

        async with db.scoped_session(self.session_maker) as session:
            for start in range(0, len(delete_ids), DELETE_BATCH_SIZE):
                chunk = delete_ids[start : start + DELETE_BATCH_SIZE]
                await session.execute(delete(FileRecord).where(FileRecord.id.in_(chunk)))
            if update_rows:
                await session.execute(update(FileRecord), update_rows)
            if insert_rows:
                await session.execute(insert(FileRecord), insert_rows)

        logger.debug(
            f"Applied batch: {len(insert_rows)} inserted, "
            f"{len(update_rows)} updated, {len(delete_ids)} deleted"
        )
