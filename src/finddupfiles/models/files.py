"""Models for the file index and derived duplicate membership."""

import os

from sqlalchemy import BigInteger, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from finddupfiles.models.base import Base


class FileRecord(Base):
    """
    One row per regular file observed on disk.

    The filesystem is the source of truth; this table remembers what a file looked
    like when it was last hashed so unchanged files are not read again.
    """

    __tablename__ = "file"
    __table_args__ = (
        UniqueConstraint("parent_path", "name", name="uix_file_parent_path_name"),
        Index("ix_file_digest", "digest"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String)
    # Absolute path of the containing directory
    parent_path: Mapped[str] = mapped_column(String)
    size: Mapped[int] = mapped_column(BigInteger)
    # Milliseconds since the epoch
    modify_time: Mapped[int] = mapped_column(BigInteger)
    hash_time: Mapped[int] = mapped_column(BigInteger)
    digest: Mapped[str] = mapped_column(String(128), nullable=False)

    @property
    def path(self) -> str:
        """Full path of the file."""
        return os.path.join(self.parent_path, self.name)

    def __repr__(self) -> str:
        return (
            f"FileRecord(id={self.id}, path='{self.path}', size={self.size}, "
            f"modify_time={self.modify_time}, digest='{self.digest}')"
        )


class Duplicate(Base):
    """Flat membership of files in a duplicate group, keyed by digest."""

    __tablename__ = "duplicate"

    file_id: Mapped[int] = mapped_column(
        ForeignKey("file.id", ondelete="CASCADE"), primary_key=True
    )
    digest: Mapped[str] = mapped_column(String(128), index=True)

    def __repr__(self) -> str:
        return f"Duplicate(file_id={self.file_id}, digest='{self.digest}')"
