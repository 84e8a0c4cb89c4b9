"""Common test fixtures."""

from pathlib import Path
from typing import AsyncGenerator, List

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from finddupfiles import db
from finddupfiles.config import FindDupFilesConfig
from finddupfiles.db import DatabaseType
from finddupfiles.repository import DuplicateRepository, FileRepository
from finddupfiles.services.duplicate_service import DuplicateService
from finddupfiles.sync import DigestResult, Hasher, SyncService


class CountingHasher(Hasher):
    """Hasher that remembers every path it was asked to hash."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.calls: List[Path] = []

    def digest(self, path: Path) -> DigestResult:
        self.calls.append(Path(path))
        return super().digest(path)


@pytest.fixture
def config_home(tmp_path, monkeypatch) -> Path:
    home = tmp_path / "finddupfiles-home"
    monkeypatch.setenv("FINDDUPFILES_HOME", str(home))
    return home


@pytest.fixture
def app_config(config_home) -> FindDupFilesConfig:
    return FindDupFilesConfig(home=config_home)


@pytest.fixture
def scan_root(tmp_path) -> Path:
    """Directory tree to scan, separate from the config home."""
    root = tmp_path / "scan"
    root.mkdir()
    return root


@pytest_asyncio.fixture(scope="function")
async def engine_factory(
    app_config,
) -> AsyncGenerator[tuple[AsyncEngine, async_sessionmaker[AsyncSession]], None]:
    """Create an in-memory database for each test."""
    async with db.engine_session_factory(
        db_path=app_config.database_path, db_type=DatabaseType.MEMORY
    ) as (engine, session_maker):
        yield engine, session_maker


@pytest_asyncio.fixture
async def session_maker(engine_factory) -> async_sessionmaker[AsyncSession]:
    """Get session maker for tests."""
    _, session_maker = engine_factory
    return session_maker


## Repositories


@pytest_asyncio.fixture
async def file_repository(session_maker) -> FileRepository:
    return FileRepository(session_maker)


@pytest_asyncio.fixture
async def duplicate_repository(session_maker) -> DuplicateRepository:
    return DuplicateRepository(session_maker)


## Services


@pytest.fixture
def hasher() -> CountingHasher:
    return CountingHasher("md5", chunk_size=512)


@pytest_asyncio.fixture
async def sync_service(file_repository: FileRepository, hasher: CountingHasher) -> SyncService:
    return SyncService(file_repository, hasher, hash_workers=4)


@pytest_asyncio.fixture
async def duplicate_service(
    file_repository: FileRepository, duplicate_repository: DuplicateRepository
) -> DuplicateService:
    return DuplicateService(file_repository, duplicate_repository)

