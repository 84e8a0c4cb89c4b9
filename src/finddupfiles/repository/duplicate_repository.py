"""Repository for duplicate group membership."""

from typing import Iterable, Sequence, Tuple

from sqlalchemy import delete, select
from sqlalchemy.dialects.sqlite import insert
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from finddupfiles import db
from finddupfiles.models import Duplicate
from finddupfiles.repository.repository import Repository


class DuplicateRepository(Repository[Duplicate]):
    """Repository for the derived duplicate membership table."""

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        super().__init__(session_maker, Duplicate)

    @staticmethod
    def _mark_statement(rows: list[dict]):
        return insert(Duplicate).values(rows).on_conflict_do_nothing(
            index_elements=[Duplicate.file_id]
        )

    async def mark_duplicate(self, file_id: int, digest: str) -> None:
        """
        Mark a file as member of the duplicate group for digest.

        Marking a file that is already marked is a no-op.
        """
        async with db.scoped_session(self.session_maker) as session:
            await session.execute(self._mark_statement([{"file_id": file_id, "digest": digest}]))

    async def replace_all(self, memberships: Iterable[Tuple[int, str]]) -> int:
        """
        Replace the whole membership table in one transaction.

        Args:
            memberships: (file_id, digest) pairs

        Returns:
            Number of files marked
        """
        by_file = dict(memberships)
        rows = [{"file_id": file_id, "digest": digest} for file_id, digest in by_file.items()]
        async with db.scoped_session(self.session_maker) as session:
            await session.execute(delete(Duplicate))
            # multi-row VALUES, chunked for SQLite's parameter limit
            for start in range(0, len(rows), 250):
                await session.execute(self._mark_statement(rows[start : start + 250]))
        return len(rows)

    async def find_digests(self) -> Sequence[str]:
        """Get every digest that has duplicate members."""
        result = await self.execute_query(
            select(Duplicate.digest).distinct().order_by(Duplicate.digest)
        )
        return result.scalars().all()
