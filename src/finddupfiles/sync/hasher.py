"""Content digests for files, computed by streaming fixed-size chunks."""

import hashlib
import os
from dataclasses import dataclass
from pathlib import Path

from loguru import logger

from finddupfiles.services.exceptions import HashError

DEFAULT_CHUNK_SIZE = 64 * 1024


def mtime_millis(stat_result: os.stat_result) -> int:
    """Modification time of a stat result in whole milliseconds."""
    return stat_result.st_mtime_ns // 1_000_000


@dataclass(frozen=True)
class DigestResult:
    """Digest of one file plus the metadata observed while reading it."""

    digest: str
    size: int
    modify_time: int
    bytes_read: int

    @property
    def size_mismatch(self) -> bool:
        """True when fewer or more bytes were read than the file reported."""
        return self.bytes_read != self.size


class Hasher:
    """
    Computes hex digests of file contents.

    Args:
        algorithm: Any name accepted by hashlib.new
        chunk_size: Bytes read per call; does not affect the digest
    """

    def __init__(self, algorithm: str = "md5", chunk_size: int = DEFAULT_CHUNK_SIZE):
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        # fail early on unknown algorithms
        self.digest_size = hashlib.new(algorithm).digest_size
        self.algorithm = algorithm
        self.chunk_size = chunk_size

    @property
    def hex_length(self) -> int:
        return self.digest_size * 2

    def digest(self, path: Path) -> DigestResult:
        """
        Hash the full contents of a file.

        A short (or long) read compared to the size reported by the filesystem is
        logged as a warning; the digest of the bytes actually read is still returned.

        Raises:
            HashError: If the file cannot be opened or read
        """
        state = hashlib.new(self.algorithm)
        total = 0
        try:
            with open(path, "rb") as f:
                stat_result = os.fstat(f.fileno())
                while chunk := f.read(self.chunk_size):
                    state.update(chunk)
                    total += len(chunk)
        except OSError as e:
            raise HashError(path, e.strerror or str(e)) from e

        digest = state.hexdigest().lower().rjust(self.hex_length, "0")
        assert len(digest) == self.hex_length, f"bad digest length for {path}"

        result = DigestResult(
            digest=digest,
            size=stat_result.st_size,
            modify_time=mtime_millis(stat_result),
            bytes_read=total,
        )
        if result.size_mismatch:
            logger.warning(
                f"file read size mismatch on {path} expected {result.size} read {total}"
            )
        return result
