"""
Store client construction from settings
"""

import logging
from typing import Optional

from database.documents import DocumentStore
from database.memory_store import MemoryDocumentStore
from database.postgres_store import PostgresDocumentStore

logger = logging.getLogger(__name__)


async def open_document_store(
    backend: str,
    database_url: Optional[str] = None,
    min_size: int = 2,
    max_size: int = 10,
    command_timeout: float = 60
) -> DocumentStore:
    """Build the one store client the application uses for its lifetime"""
    if backend == "memory":
        logger.info("Using in-memory document store")
        return MemoryDocumentStore()
    if backend == "postgres":
        if not database_url:
            raise ValueError("database_url is required for the postgres store backend")
        return await PostgresDocumentStore.connect(database_url, min_size, max_size, command_timeout)
    raise ValueError(f"Unknown store backend: {backend}")
