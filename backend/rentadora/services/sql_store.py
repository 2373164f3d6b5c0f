"""
Rentadora API - SQL Document Store
===================================

What:  DocumentStore backed by the `documents` table through async SQLAlchemy.
How:   Every primitive opens its own session and transaction, commits on
       success, rolls back on error and always closes the session. Driver
       errors (SQLAlchemyError) are translated into StoreError.
Who:   Built by main.build_document_store() when DOCUMENT_STORE=sql.

Query plan:
    get / merge_update:  primary-key lookup on (collection, id)
    delete:              DELETE ... WHERE collection = :c AND id = :id
    merge_update locks the row (SELECT ... FOR UPDATE on PostgreSQL) so the
    read-merge-write of one document is atomic.
"""

import logging
import uuid
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Mapping, Optional

from sqlalchemy import delete, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from rentadora.database import build_session_factory
from rentadora.exceptions import StoreError
from rentadora.models.document import Document
from rentadora.services.store_base import DocumentStore

logger = logging.getLogger(__name__)


class SQLDocumentStore(DocumentStore):
    """
    Document store over a relational database.

    Args:
        engine: Async engine; the store owns it and disposes it in close().
    """

    def __init__(self, engine: AsyncEngine) -> None:
        self.engine = engine
        self._session_factory = build_session_factory(engine)

    @asynccontextmanager
    async def _session(
        self, operation: str, collection: Optional[str] = None
    ) -> AsyncGenerator[AsyncSession, None]:
        """
        Session-per-operation with commit/rollback/close.

        Raises:
            StoreError: wrapping any SQLAlchemyError raised inside the block
                or during commit.
        """
        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                logger.error(
                    "Store operation %s on %s failed: %s",
                    operation,
                    collection,
                    str(e),
                )
                raise StoreError(
                    context={
                        "operation": operation,
                        "collection": collection,
                        "error_type": type(e).__name__,
                    }
                ) from e
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()

    async def get(self, collection: str, document_id: str) -> Optional[Dict[str, Any]]:
        async with self._session("get", collection) as session:
            document = await session.get(Document, (collection, document_id))
            return dict(document.data) if document is not None else None

    async def insert(self, collection: str, data: Mapping[str, Any]) -> str:
        document_id = uuid.uuid4().hex
        async with self._session("insert", collection) as session:
            session.add(Document(collection=collection, id=document_id, data=dict(data)))
        logger.debug("Inserted %s/%s", collection, document_id)
        return document_id

    async def merge_update(
        self, collection: str, document_id: str, data: Mapping[str, Any]
    ) -> bool:
        async with self._session("merge_update", collection) as session:
            result = await session.execute(
                select(Document)
                .where(Document.collection == collection, Document.id == document_id)
                .with_for_update()
            )
            document = result.scalar_one_or_none()
            if document is None:
                return False
            # Reassign so the JSON column is flagged as changed
            document.data = {**document.data, **data}
        return True

    async def delete(self, collection: str, document_id: str) -> bool:
        async with self._session("delete", collection) as session:
            result = await session.execute(
                delete(Document).where(
                    Document.collection == collection,
                    Document.id == document_id,
                )
            )
        return result.rowcount > 0

    async def ping(self) -> bool:
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except (SQLAlchemyError, OSError) as e:
            logger.warning("Store ping failed: %s", str(e))
            return False

    async def close(self) -> None:
        await self.engine.dispose()
