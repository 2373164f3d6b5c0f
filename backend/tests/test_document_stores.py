"""
Rentadora API - Document Store Tests
=====================================

What:  Contract tests run against both DocumentStore implementations.
How:   The `store` fixture is parametrized over InMemoryDocumentStore and
       SQLDocumentStore on a temporary SQLite file (aiosqlite), so both
       backends must behave identically.
"""

import pytest
import pytest_asyncio
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import create_async_engine

from rentadora.database import Base
from rentadora.exceptions import StoreError
from rentadora.models.document import Document  # noqa: F401
from rentadora.services.memory_store import InMemoryDocumentStore
from rentadora.services.sql_store import SQLDocumentStore


@pytest_asyncio.fixture(params=["memory", "sql"])
async def store(request, tmp_path):
    if request.param == "memory":
        document_store = InMemoryDocumentStore()
    else:
        engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'documents.db'}")
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        document_store = SQLDocumentStore(engine)
    yield document_store
    await document_store.close()


class TestDocumentStoreContract:

    @pytest.mark.asyncio
    async def test_insert_then_get(self, store):
        document_id = await store.insert("usuarios", {"nombre": "Ana", "edad": 30})

        assert document_id
        assert await store.get("usuarios", document_id) == {"nombre": "Ana", "edad": 30}

    @pytest.mark.asyncio
    async def test_ids_are_unique(self, store):
        first = await store.insert("categorias", {"nombre": "a"})
        second = await store.insert("categorias", {"nombre": "a"})
        assert first != second

    @pytest.mark.asyncio
    async def test_get_missing_returns_none(self, store):
        assert await store.get("usuarios", "does-not-exist") is None

    @pytest.mark.asyncio
    async def test_collections_are_isolated(self, store):
        document_id = await store.insert("usuarios", {"nombre": "Ana"})
        assert await store.get("trabajadores", document_id) is None

    @pytest.mark.asyncio
    async def test_merge_update_keeps_unnamed_fields(self, store):
        document_id = await store.insert("maquinas", {"nombre": "Grúa", "precio": 10})

        assert await store.merge_update("maquinas", document_id, {"precio": 0, "stock": 2})

        assert await store.get("maquinas", document_id) == {
            "nombre": "Grúa",
            "precio": 0,
            "stock": 2,
        }

    @pytest.mark.asyncio
    async def test_merge_update_missing_returns_false(self, store):
        assert await store.merge_update("maquinas", "nope", {"precio": 1}) is False

    @pytest.mark.asyncio
    async def test_delete(self, store):
        document_id = await store.insert("pagos", {"monto": 5})

        assert await store.delete("pagos", document_id) is True
        assert await store.get("pagos", document_id) is None
        assert await store.delete("pagos", document_id) is False

    @pytest.mark.asyncio
    async def test_returned_documents_are_copies(self, store):
        document_id = await store.insert("alquileres", {"usuario": {"id": "u1"}})

        document = await store.get("alquileres", document_id)
        document["usuario"]["id"] = "changed"

        assert (await store.get("alquileres", document_id))["usuario"]["id"] == "u1"

    @pytest.mark.asyncio
    async def test_ping(self, store):
        assert await store.ping() is True


class TestSQLDocumentStoreFailures:
    """Driver errors are translated into StoreError."""

    @pytest.mark.asyncio
    async def test_missing_table_raises_store_error(self, tmp_path):
        engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}")
        store = SQLDocumentStore(engine)

        with pytest.raises(StoreError) as exc_info:
            await store.get("usuarios", "abc")

        assert exc_info.value.context["operation"] == "get"
        assert exc_info.value.context["collection"] == "usuarios"
        assert isinstance(exc_info.value.__cause__, OperationalError)
        await store.close()

    @pytest.mark.asyncio
    async def test_ping_unreachable_database(self, tmp_path):
        missing_dir = tmp_path / "missing" / "db.sqlite"
        store = SQLDocumentStore(create_async_engine(f"sqlite+aiosqlite:///{missing_dir}"))

        assert await store.ping() is False
        await store.close()
