"""Base repository implementation with generic CRUD operations."""

from typing import Any, Optional, Sequence, Type

from loguru import logger
from sqlalchemy import Column, Executable, Result, Select, delete, func, inspect, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from finddupfiles import db
from finddupfiles.models import Base


class Repository[T: Base]:
    """Base repository implementation with generic CRUD operations."""

    def __init__(self, session_maker: async_sessionmaker[AsyncSession], Model: Type[T]):
        self.session_maker = session_maker
        self.Model = Model
        self.mapper = inspect(self.Model).mapper
        self.primary_key: Column[Any] = self.mapper.primary_key[0]
        self.valid_columns = [column.key for column in self.mapper.columns]

    def get_model_data(self, entity_data: dict) -> dict:
        return {k: v for k, v in entity_data.items() if k in self.valid_columns}

    def select(self, *entities: Any) -> Select:
        """Wrap an sqlalchemy select for this repository's model."""
        if not entities:
            entities = (self.Model,)
        return select(*entities)

    async def find_all(self) -> Sequence[T]:
        """Fetch every record."""
        async with db.scoped_session(self.session_maker) as session:
            result = await session.execute(self.select())
            return result.scalars().all()

    async def find_by_id(self, entity_id: int) -> Optional[T]:
        """Fetch an entity by its unique identifier."""
        async with db.scoped_session(self.session_maker) as session:
            return await session.get(self.Model, entity_id)

    async def create(self, entity_data: dict) -> T:
        """Create a new record from the provided data."""
        async with db.scoped_session(self.session_maker) as session:
            entity = self.Model(**self.get_model_data(entity_data))
            session.add(entity)
            await session.flush()
            return entity

    async def update(self, entity_id: int, entity_data: dict) -> Optional[T]:
        """Update an entity with the given data."""
        async with db.scoped_session(self.session_maker) as session:
            entity = await session.get(self.Model, entity_id)
            if entity is None:
                return None
            for key, value in self.get_model_data(entity_data).items():
                setattr(entity, key, value)
            await session.flush()
            return entity

    async def delete(self, entity_id: int) -> bool:
        """Delete an entity from the database."""
        async with db.scoped_session(self.session_maker) as session:
            entity = await session.get(self.Model, entity_id)
            if entity is None:
                return False
            await session.delete(entity)
            return True

    async def delete_all(self) -> int:
        """Delete every row of this repository's table."""
        async with db.scoped_session(self.session_maker) as session:
            result = await session.execute(delete(self.Model))
            logger.debug(f"Deleted {result.rowcount} rows from {self.Model.__tablename__}")
            return result.rowcount

    async def count(self, query: Executable | None = None) -> int:
        """Count entities in the database table."""
        if query is None:
            query = select(func.count()).select_from(self.Model)
        result = await self.execute_query(query)
        scalar = result.scalar()
        return scalar if scalar is not None else 0

    async def execute_query(self, query: Executable) -> Result[Any]:
        """Execute a query asynchronously."""
        async with db.scoped_session(self.session_maker) as session:
            return await session.execute(query)

    async def find_one(self, query: Select[tuple[T]]) -> Optional[T]:
        """Execute a query and retrieve a single record."""
        async with db.scoped_session(self.session_maker) as session:
            result = await session.execute(query)
            return result.scalars().one_or_none()
