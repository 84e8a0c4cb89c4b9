from .hasher import DigestResult, Hasher
from .sync_service import SyncService
from .utils import SyncReport
from .walker import FileCollector, TreeWalker, Visitor

__all__ = [
    "DigestResult",
    "FileCollector",
    "Hasher",
    "SyncReport",
    "SyncService",
    "TreeWalker",
    "Visitor",
]
