"""
Rentadora API - In-Memory Document Store
=========================================

Dict-backed DocumentStore for local development (DOCUMENT_STORE=memory)
and for tests. Documents live only as long as the process.

All mutations happen without an await between read and write, so each
operation is atomic with respect to other coroutines on the event loop.
"""

import copy
import logging
import uuid
from collections import defaultdict
from typing import Any, Dict, Mapping, Optional

from rentadora.services.store_base import DocumentStore

logger = logging.getLogger(__name__)


class InMemoryDocumentStore(DocumentStore):
    """Collections are plain dicts of id → field mapping."""

    def __init__(self) -> None:
        self._collections: Dict[str, Dict[str, Dict[str, Any]]] = defaultdict(dict)

    @staticmethod
    def _new_id() -> str:
        return uuid.uuid4().hex

    async def get(self, collection: str, document_id: str) -> Optional[Dict[str, Any]]:
        document = self._collections[collection].get(document_id)
        return copy.deepcopy(document) if document is not None else None

    async def insert(self, collection: str, data: Mapping[str, Any]) -> str:
        document_id = self._new_id()
        self._collections[collection][document_id] = copy.deepcopy(dict(data))
        logger.debug("Inserted %s/%s", collection, document_id)
        return document_id

    async def merge_update(
        self, collection: str, document_id: str, data: Mapping[str, Any]
    ) -> bool:
        document = self._collections[collection].get(document_id)
        if document is None:
            return False
        document.update(copy.deepcopy(dict(data)))
        return True

    async def delete(self, collection: str, document_id: str) -> bool:
        return self._collections[collection].pop(document_id, None) is not None

    def count(self, collection: str) -> int:
        """Number of documents in a collection (used by tests and debugging)."""
        return len(self._collections[collection])

    async def close(self) -> None:
        self._collections.clear()
