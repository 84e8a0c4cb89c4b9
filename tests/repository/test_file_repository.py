"""Tests for the FileRepository and DuplicateRepository."""

import pytest
from sqlalchemy.exc import IntegrityError

from finddupfiles.repository import DuplicateRepository, FileRepository


def record_data(parent_path="/data", name="a.txt", digest="a" * 32, size=3, **kwargs) -> dict:
    return {
        "parent_path": parent_path,
        "name": name,
        "digest": digest,
        "size": size,
        "modify_time": kwargs.get("modify_time", 1000),
        "hash_time": kwargs.get("hash_time", 2000),
    }


@pytest.mark.asyncio
async def test_basic_record_operations(file_repository: FileRepository):
    """Smoke test for create, read, update and delete."""
    record = await file_repository.create(record_data())
    assert record.id is not None
    assert record.path == "/data/a.txt"

    found = await file_repository.find_by_path("/data", "a.txt")
    assert found is not None
    assert found.id == record.id

    updated = await file_repository.update(record.id, {"digest": "b" * 32, "size": 4})
    assert updated.digest == "b" * 32
    assert updated.size == 4
    assert (await file_repository.find_by_id(record.id)).digest == "b" * 32

    assert await file_repository.delete(record.id) is True
    assert await file_repository.find_by_path("/data", "a.txt") is None
    assert await file_repository.delete(record.id) is False


@pytest.mark.asyncio
async def test_update_missing_record(file_repository: FileRepository):
    assert await file_repository.update(12345, {"size": 1}) is None


@pytest.mark.asyncio
async def test_parent_and_name_are_unique(file_repository: FileRepository):
    await file_repository.create(record_data())
    with pytest.raises(IntegrityError):
        await file_repository.create(record_data(digest="c" * 32))


@pytest.mark.asyncio
async def test_find_by_digest(file_repository: FileRepository):
    await file_repository.create(record_data(name="z.txt", digest="d" * 32))
    await file_repository.create(record_data(name="b.txt", digest="d" * 32))
    await file_repository.create(record_data(name="c.txt", digest="e" * 32))

    records = await file_repository.find_by_digest("d" * 32)

    assert [r.name for r in records] == ["b.txt", "z.txt"]


@pytest.mark.asyncio
async def test_find_all_keys_and_total_size(file_repository: FileRepository):
    await file_repository.create(record_data(name="a.txt", size=10))
    await file_repository.create(record_data(parent_path="/other", name="a.txt", size=5))

    assert await file_repository.find_all_keys() == {("/data", "a.txt"), ("/other", "a.txt")}
    assert await file_repository.total_size() == 15


@pytest.mark.asyncio
async def test_total_size_empty(file_repository: FileRepository):
    assert await file_repository.total_size() == 0


@pytest.mark.asyncio
async def test_apply_batch(file_repository: FileRepository):
    keep = await file_repository.create(record_data(name="keep.txt"))
    drop = await file_repository.create(record_data(name="drop.txt"))

    await file_repository.apply_batch(
        inserts=[record_data(name="new.txt")],
        updates={keep.id: {"digest": "f" * 32, "size": 99}},
        deletes=[drop.id],
    )

    names = sorted(r.name for r in await file_repository.find_all())
    assert names == ["keep.txt", "new.txt"]
    kept = await file_repository.find_by_id(keep.id)
    assert kept.digest == "f" * 32
    assert kept.size == 99


@pytest.mark.asyncio
async def test_apply_batch_is_all_or_nothing(file_repository: FileRepository):
    existing = await file_repository.create(record_data(name="existing.txt"))

    with pytest.raises(IntegrityError):
        await file_repository.apply_batch(
            inserts=[record_data(name="dup.txt"), record_data(name="dup.txt")],
            deletes=[existing.id],
        )

    assert await file_repository.find_by_path("/data", "existing.txt") is not None
    assert await file_repository.find_by_path("/data", "dup.txt") is None


@pytest.mark.asyncio
async def test_delete_all(file_repository: FileRepository):
    for name in ("a", "b", "c"):
        await file_repository.create(record_data(name=name))

    assert await file_repository.delete_all() == 3
    assert await file_repository.count() == 0


@pytest.mark.asyncio
async def test_mark_duplicate_is_idempotent(
    file_repository: FileRepository, duplicate_repository: DuplicateRepository
):
    record = await file_repository.create(record_data())

    await duplicate_repository.mark_duplicate(record.id, record.digest)
    await duplicate_repository.mark_duplicate(record.id, record.digest)

    assert await duplicate_repository.count() == 1
    assert await duplicate_repository.find_digests() == [record.digest]


@pytest.mark.asyncio
async def test_replace_all_memberships(
    file_repository: FileRepository, duplicate_repository: DuplicateRepository
):
    a = await file_repository.create(record_data(name="a"))
    b = await file_repository.create(record_data(name="b"))
    await duplicate_repository.mark_duplicate(a.id, a.digest)

    written = await duplicate_repository.replace_all([(b.id, "x" * 32), (b.id, "x" * 32)])

    assert written == 1
    rows = await duplicate_repository.find_all()
    assert [(r.file_id, r.digest) for r in rows] == [(b.id, "x" * 32)]


@pytest.mark.asyncio
async def test_deleting_file_removes_membership(
    file_repository: FileRepository, duplicate_repository: DuplicateRepository
):
    record = await file_repository.create(record_data())
    await duplicate_repository.mark_duplicate(record.id, record.digest)

    await file_repository.apply_batch(deletes=[record.id])

    assert await duplicate_repository.count() == 0
