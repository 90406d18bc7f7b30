"""
PostgreSQL-backed document store

All collections share one JSONB table. Field access goes through the JSONB
operators so that equality and ordering follow JSON value semantics, and
range scans compare with the "C" collation so that string order is code
point order.
"""

import asyncio
import json
import logging
import uuid
from typing import Any, Dict, List, Optional

import asyncpg

from database.connection import close_database, init_database
from database.documents import (
    DocumentNotFound,
    DocumentSnapshot,
    DocumentStore,
    ORDERING_OPERATORS,
    StoreError,
)

logger = logging.getLogger(__name__)

_DRIVER_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError)

# null < bool < number < string < array < object, then the value itself
ORDER_BY_FIELD = (
    "CASE jsonb_typeof(data -> $2) WHEN 'null' THEN 0 WHEN 'boolean' THEN 1 WHEN 'number' THEN 2 "
    "WHEN 'string' THEN 3 WHEN 'array' THEN 4 ELSE 5 END, "
    "CASE WHEN jsonb_typeof(data -> $2) = 'string' THEN (data ->> $2) COLLATE \"C\" END, "
    "data -> $2"
)


def _decode(data: Any) -> Dict[str, Any]:
    # asyncpg hands JSONB back as text unless a codec is registered
    if isinstance(data, str):
        return json.loads(data)
    return dict(data or {})


def _row_to_snapshot(row) -> DocumentSnapshot:
    return DocumentSnapshot(id=row["id"], exists=True, data=_decode(row["data"]))


def build_where_clause(op: str) -> str:
    """SQL predicate for `data -> $2 <op> $3` where $3 is a JSON-encoded value"""
    if op == "==":
        return "data -> $2 = $3::jsonb"
    if op == "!=":
        return "data ? $2 AND data -> $2 <> $3::jsonb"
    if op in ORDERING_OPERATORS:
        # strings compare in code point order, like get_range
        return (
            f"jsonb_typeof(data -> $2) = jsonb_typeof($3::jsonb) AND CASE WHEN jsonb_typeof($3::jsonb) = 'string' "
            f"THEN (data ->> $2) COLLATE \"C\" {op} ($3::jsonb #>> '{{}}') ELSE data -> $2 {op} $3::jsonb END"
        )
    if op == "in":
        return "data -> $2 IN (SELECT jsonb_array_elements($3::jsonb))"
    if op == "not-in":
        return "data ? $2 AND data -> $2 NOT IN (SELECT jsonb_array_elements($3::jsonb))"
    if op == "array-contains":
        return "jsonb_typeof(data -> $2) = 'array' AND data -> $2 @> jsonb_build_array($3::jsonb)"
    raise StoreError(f"Unsupported where operator: {op}")


class PostgresDocumentStore(DocumentStore):
    """Document store on an asyncpg connection pool"""

    def __init__(self, db_pool: asyncpg.Pool):
        self.db_pool = db_pool

    @classmethod
    async def connect(
        cls,
        database_url: str,
        min_size: int = 2,
        max_size: int = 10,
        command_timeout: float = 60
    ) -> "PostgresDocumentStore":
        db_pool = await init_database(database_url, min_size, max_size, command_timeout)
        return cls(db_pool)

    async def close(self) -> None:
        await close_database(self.db_pool)

    async def _fetch(self, query: str, *params) -> List[asyncpg.Record]:
        logger.info(f"Executing query: {query}")
        logger.debug(f"Parameters: {params}")
        try:
            async with self.db_pool.acquire() as conn:
                return await conn.fetch(query, *params)
        except _DRIVER_ERRORS as e:
            logger.error(f"Database error: {e}")
            raise StoreError(f"Database query failed: {e}") from e

    async def _fetchrow(self, query: str, *params) -> Optional[asyncpg.Record]:
        logger.info(f"Executing query: {query}")
        try:
            async with self.db_pool.acquire() as conn:
                return await conn.fetchrow(query, *params)
        except _DRIVER_ERRORS as e:
            logger.error(f"Database error: {e}")
            raise StoreError(f"Database query failed: {e}") from e

    async def _execute(self, query: str, *params) -> str:
        logger.info(f"Executing statement: {query}")
        try:
            async with self.db_pool.acquire() as conn:
                return await conn.execute(query, *params)
        except _DRIVER_ERRORS as e:
            logger.error(f"Database error: {e}")
            raise StoreError(f"Database statement failed: {e}") from e

    async def ping(self) -> None:
        try:
            async with self.db_pool.acquire() as conn:
                await conn.fetchval("SELECT 1")
        except _DRIVER_ERRORS as e:
            raise StoreError(f"Database unreachable: {e}") from e

    async def add(self, collection: str, fields: Dict[str, Any]) -> str:
        doc_id = str(uuid.uuid4())
        row = await self._fetchrow(
            "INSERT INTO documents (collection, id, data) VALUES ($1, $2, $3::jsonb) RETURNING id",
            collection, doc_id, json.dumps(fields)
        )
        if not row:
            raise StoreError("Insert operation failed - no data returned")
        return row["id"]

    async def get_by_id(self, collection: str, doc_id: str) -> DocumentSnapshot:
        row = await self._fetchrow(
            "SELECT id, data FROM documents WHERE collection = $1 AND id = $2",
            collection, doc_id
        )
        if row is None:
            return DocumentSnapshot.missing(doc_id)
        return _row_to_snapshot(row)

    async def get_all(self, collection: str, order_by: Optional[str] = None) -> List[DocumentSnapshot]:
        if order_by is None:
            rows = await self._fetch(
                "SELECT id, data FROM documents WHERE collection = $1 ORDER BY created_at, id",
                collection
            )
        else:
            rows = await self._fetch(
                "SELECT id, data FROM documents WHERE collection = $1 AND data ? $2 "
                f"ORDER BY {ORDER_BY_FIELD}, created_at",
                collection, order_by
            )
        return [_row_to_snapshot(row) for row in rows]

    async def get_where(self, collection: str, field_name: str, op: str, value: Any) -> List[DocumentSnapshot]:
        if op in ("in", "not-in") and not isinstance(value, (list, tuple)):
            raise StoreError(f"Operator {op} requires a list value")
        predicate = build_where_clause(op)
        rows = await self._fetch(
            f"SELECT id, data FROM documents WHERE collection = $1 AND {predicate} ORDER BY created_at, id",
            collection, field_name, json.dumps(list(value) if isinstance(value, tuple) else value)
        )
        return [_row_to_snapshot(row) for row in rows]

    async def get_range(self, collection: str, field_name: str, lower: str, upper: str) -> List[DocumentSnapshot]:
        rows = await self._fetch(
            "SELECT id, data FROM documents WHERE collection = $1 "
            "AND jsonb_typeof(data -> $2) = 'string' "
            "AND (data ->> $2) COLLATE \"C\" >= $3 AND (data ->> $2) COLLATE \"C\" < $4 "
            "ORDER BY (data ->> $2) COLLATE \"C\"",
            collection, field_name, lower, upper
        )
        return [_row_to_snapshot(row) for row in rows]

    async def delete(self, collection: str, doc_id: str) -> None:
        await self._execute(
            "DELETE FROM documents WHERE collection = $1 AND id = $2",
            collection, doc_id
        )

    async def update(self, collection: str, doc_id: str, fields: Dict[str, Any]) -> None:
        result = await self._execute(
            "UPDATE documents SET data = data || $3::jsonb, updated_at = NOW() "
            "WHERE collection = $1 AND id = $2",
            collection, doc_id, json.dumps(fields)
        )
        # asyncpg returns "UPDATE N" where N is the number of rows
        updated_count = int(result.split()[-1]) if result else 0
        if updated_count == 0:
            raise DocumentNotFound(collection, doc_id)
