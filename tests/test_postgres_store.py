"""
PostgreSQL document store against a fake asyncpg pool
Checks the SQL issued per capability and the error translation.
"""

import json

import pytest

from database.documents import DocumentNotFound, StoreError
from database.postgres_store import PostgresDocumentStore, build_where_clause
from infrastructure import FakeConnection, FakePool


@pytest.fixture
def conn():
    return FakeConnection()


@pytest.fixture
def pg_store(conn):
    return PostgresDocumentStore(FakePool(conn))


class TestPostgresQueries:

    @pytest.mark.asyncio
    async def test_add_inserts_json_document(self, pg_store, conn):
        conn.fetchrow_result = {"id": "generated"}

        doc_id = await pg_store.add("items", {"title": "A", "content": "B"})

        method, query, params = conn.last_call
        assert doc_id == "generated"
        assert method == "fetchrow"
        assert "INSERT INTO documents" in query
        assert params[0] == "items"
        assert json.loads(params[2]) == {"title": "A", "content": "B"}

    @pytest.mark.asyncio
    async def test_get_by_id_decodes_jsonb_text(self, pg_store, conn):
        conn.fetchrow_result = {"id": "abc", "data": '{"title": "A"}'}

        snapshot = await pg_store.get_by_id("items", "abc")

        assert snapshot.exists is True
        assert snapshot.data == {"title": "A"}

    @pytest.mark.asyncio
    async def test_get_by_id_missing(self, pg_store, conn):
        conn.fetchrow_result = None

        snapshot = await pg_store.get_by_id("items", "abc")

        assert snapshot.exists is False
        assert snapshot.id == "abc"

    @pytest.mark.asyncio
    async def test_get_all_ordered_by_field(self, pg_store, conn):
        conn.fetch_result = [{"id": "1", "data": {"title": "a"}}, {"id": "2", "data": {"title": "b"}}]

        snapshots = await pg_store.get_all("items", order_by="title")

        method, query, params = conn.last_call
        assert "CASE jsonb_typeof(data -> $2) WHEN 'null' THEN 0" in query
        assert '(data ->> $2) COLLATE "C"' in query
        assert params == ("items", "title")
        assert [s.id for s in snapshots] == ["1", "2"]

    @pytest.mark.asyncio
    async def test_get_range_uses_code_point_collation(self, pg_store, conn):
        await pg_store.get_range("items", "title", "ap", "ap\U0010ffff")

        method, query, params = conn.last_call
        assert 'COLLATE "C" >= $3' in query
        assert 'COLLATE "C" < $4' in query
        assert params == ("items", "title", "ap", "ap\U0010ffff")

    @pytest.mark.asyncio
    async def test_get_where_sends_json_value(self, pg_store, conn):
        await pg_store.get_where("items", "rank", ">=", 3)

        method, query, params = conn.last_call
        assert "data -> $2 >= $3::jsonb" in query
        assert params == ("items", "rank", "3")

    @pytest.mark.asyncio
    async def test_update_missing_row_raises_not_found(self, pg_store, conn):
        conn.execute_result = "UPDATE 0"

        with pytest.raises(DocumentNotFound):
            await pg_store.update("items", "ghost", {"title": "A"})

    @pytest.mark.asyncio
    async def test_update_merges_with_jsonb_concat(self, pg_store, conn):
        conn.execute_result = "UPDATE 1"

        await pg_store.update("items", "abc", {"title": "A"})

        method, query, params = conn.last_call
        assert "data = data || $3::jsonb" in query
        assert params == ("items", "abc", '{"title": "A"}')

    @pytest.mark.asyncio
    async def test_delete_of_missing_row_succeeds(self, pg_store, conn):
        conn.execute_result = "DELETE 0"

        await pg_store.delete("items", "ghost")

    @pytest.mark.asyncio
    async def test_driver_errors_become_store_errors(self, pg_store, conn):
        conn.error = OSError("connection refused")

        with pytest.raises(StoreError) as exc_info:
            await pg_store.get_all("items")

        assert "connection refused" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_close_releases_pool(self, conn):
        pool = FakePool(conn)

        await PostgresDocumentStore(pool).close()

        assert pool.closed is True


class TestWhereClauseBuilder:

    @pytest.mark.parametrize("op,fragment", [
        ("==", "data -> $2 = $3::jsonb"),
        ("!=", "data ? $2 AND data -> $2 <> $3::jsonb"),
        ("<", "jsonb_typeof(data -> $2) = jsonb_typeof($3::jsonb)"),
        ("in", "jsonb_array_elements($3::jsonb)"),
        ("array-contains", "@> jsonb_build_array($3::jsonb)"),
    ])
    def test_predicates(self, op, fragment):
        assert fragment in build_where_clause(op)

    def test_string_ordering_uses_code_point_collation(self):
        clause = build_where_clause("<")

        assert "(data ->> $2) COLLATE \"C\" < ($3::jsonb #>> '{}')" in clause
        assert "ELSE data -> $2 < $3::jsonb" in clause

    def test_unknown_operator(self):
        with pytest.raises(StoreError):
            build_where_clause("LIKE")
