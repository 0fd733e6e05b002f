"""Backend selection. The choice is made once, from configuration, at startup."""
import logging
from typing import Iterator, Optional

from nightguard import config
from nightguard.database import SessionLocal, init_db
from nightguard.storage.base import Storage
from nightguard.storage.database import DatabaseStorage
from nightguard.storage.memory import MemStorage

logger = logging.getLogger(__name__)

BACKENDS = ("database", "memory")


class StorageProvider:
    """Hands out a Storage per request for the configured backend."""

    def __init__(self, backend: str = config.STORAGE_BACKEND):
        if backend not in BACKENDS:
            raise ValueError(f"Unknown storage backend {backend!r}; expected one of {', '.join(BACKENDS)}")
        self.backend = backend
        self._memory: Optional[MemStorage] = MemStorage() if backend == "memory" else None

    def startup(self) -> None:
        if self.backend == "database":
            init_db()
        logger.info("Storage backend: %s", self.backend)

    def __call__(self) -> Iterator[Storage]:
        """FastAPI dependency: the shared MemStorage, or one DatabaseStorage per request."""
        if self._memory is not None:
            yield self._memory
            return

        db = SessionLocal()
        try:
            yield DatabaseStorage(db)
        finally:
            db.close()


provider = StorageProvider()


def get_storage() -> Iterator[Storage]:
    """Dependency for FastAPI endpoints to get the configured storage."""
    yield from provider()
