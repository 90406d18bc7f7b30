"""
Database connection and pool management
"""

import asyncpg
import logging

logger = logging.getLogger(__name__)

DOCUMENTS_SCHEMA = """
    CREATE TABLE IF NOT EXISTS documents (
        collection TEXT NOT NULL,
        id TEXT NOT NULL,
        data JSONB NOT NULL DEFAULT '{}'::jsonb,
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
        updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
        PRIMARY KEY (collection, id)
    );
    CREATE INDEX IF NOT EXISTS documents_collection_created_idx
        ON documents (collection, created_at);
"""


async def init_database(
    database_url: str,
    min_size: int = 2,
    max_size: int = 10,
    command_timeout: float = 60
) -> asyncpg.Pool:
    """Create the connection pool and make sure the documents table exists"""
    db_pool = await asyncpg.create_pool(
        database_url,
        min_size=min_size,
        max_size=max_size,
        command_timeout=command_timeout,
        statement_cache_size=0  # Fix for pgbouncer compatibility
    )

    async with db_pool.acquire() as conn:
        await conn.fetchval("SELECT 1")
        await conn.execute(DOCUMENTS_SCHEMA)

    logger.info("Database initialized successfully")
    return db_pool


async def close_database(db_pool: asyncpg.Pool):
    """Close database connection pool"""
    if db_pool:
        await db_pool.close()
    logger.info("Database connections closed")
