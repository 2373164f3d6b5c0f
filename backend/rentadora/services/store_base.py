"""
Rentadora API - Abstract Document Store Interface
==================================================

What:  Abstract base class defining the contract every document store
       implementation fulfils.
How:   Concrete stores (SQLDocumentStore, InMemoryDocumentStore) inherit
       from DocumentStore and implement the per-collection primitives.
Who:   Constructed once in main.create_app() and handed to every
       ResourceService; never imported as a global.

Atomicity:
    Each primitive is atomic on its own. Nothing spans two calls: an
    existence check followed by an update are two independent operations.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping, Optional


class DocumentStore(ABC):
    """
    Per-collection key/value access to schemaless documents.

    Contract:
        - Identifiers are generated by the store in insert(), never by callers
        - Returned mappings are copies; mutating them does not touch the store
        - Driver-specific failures are wrapped in StoreError
    """

    @abstractmethod
    async def get(self, collection: str, document_id: str) -> Optional[Dict[str, Any]]:
        """
        Fetch a document's fields.

        Returns:
            The stored field mapping (without the id), or None if no document
            with that id exists in the collection.
        """
        ...

    @abstractmethod
    async def insert(self, collection: str, data: Mapping[str, Any]) -> str:
        """
        Store a new document and return its freshly assigned identifier.
        """
        ...

    @abstractmethod
    async def merge_update(
        self, collection: str, document_id: str, data: Mapping[str, Any]
    ) -> bool:
        """
        Overwrite the named fields of an existing document.

        Fields absent from `data` are left untouched.

        Returns:
            False if the document no longer exists, True otherwise.
        """
        ...

    @abstractmethod
    async def delete(self, collection: str, document_id: str) -> bool:
        """Remove a document. Returns False if there was nothing to remove."""
        ...

    async def ping(self) -> bool:
        """Lightweight connectivity check used by GET /health."""
        return True

    async def close(self) -> None:
        """Release connections. Called once during application shutdown."""
        return None
