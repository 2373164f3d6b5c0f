"""
Rentadora API - Resource Service (CRUD Template)
=================================================

What:  The one generic handler implementation behind every resource.
How:   A ResourceService is constructed per ResourceDefinition with the shared
       DocumentStore. create/read/update/delete validate input, perform the
       store round-trips and return plain dicts for the route layer.
Who:   Instantiated in main.create_app(); called by the routes generated in
       routes/resources.py.

Operation Flow:
    create:  normalize → presence check → validators → defaults → insert
    read:    get → 404 if absent
    update:  get (404 if absent) → presence check → validators → merge_update
    delete:  get (404 if absent) → delete

    update and delete are two store round-trips that are not wrapped in a
    transaction; a concurrent delete between them surfaces as 404.

Error Handling Strategy:
    Application errors (ValidationError, NotFoundError, StoreError) propagate
    as-is. Anything else raised by the store is logged and wrapped in
    StoreError so the client only ever sees the generic 500 message.
"""

import logging
from typing import Any, Dict, List, Mapping

from rentadora.exceptions import NotFoundError, RentadoraError, StoreError, ValidationError
from rentadora.schemas.resource import ResourceDefinition
from rentadora.services.store_base import DocumentStore

logger = logging.getLogger(__name__)

# Keys a client may send but never gets to write
RESERVED_KEYS = frozenset({"id"})


class ResourceService:
    """
    CRUD operations for a single collection.

    Stateless apart from the definition and the injected store; one instance
    per resource serves every request.
    """

    def __init__(self, definition: ResourceDefinition, store: DocumentStore) -> None:
        self.definition = definition
        self.store = store

    @property
    def collection(self) -> str:
        return self.definition.collection

    # ── Validation ────────────────────────────────────────────────────────

    def _normalize(self, payload: Any) -> Dict[str, Any]:
        if not isinstance(payload, Mapping):
            raise ValidationError(
                message="El cuerpo de la solicitud debe ser un objeto JSON.",
                context={"received_type": type(payload).__name__},
            )
        # Server-computed fields are never written from a request body
        dropped = RESERVED_KEYS | set(self.definition.defaults)
        return {key: value for key, value in payload.items() if key not in dropped}

    def _is_missing(self, name: str, payload: Mapping[str, Any]) -> bool:
        """
        Definedness check: absent keys and nulls are missing. Empty strings
        are missing unless the field allows them. 0 and False are present.
        """
        if name not in payload or payload[name] is None:
            return True
        value = payload[name]
        if isinstance(value, str) and not value.strip():
            return name not in self.definition.allow_empty_fields
        return False

    def missing_fields(self, payload: Mapping[str, Any]) -> List[str]:
        return [
            name for name in self.definition.required_fields
            if self._is_missing(name, payload)
        ]

    def validate(self, payload: Mapping[str, Any]) -> None:
        """
        Run the presence check, then every extra validator.

        The error message always lists all required fields of the resource,
        the missing ones travel in the details.

        Raises:
            ValidationError: on the first failing rule
        """
        missing = self.missing_fields(payload)
        if missing:
            raise ValidationError(
                message=self.definition.missing_fields_message,
                context={
                    "missing": missing,
                    "required": self.definition.required_fields,
                },
            )
        for validator in self.definition.validators:
            validator(payload)

    # ── Store access ──────────────────────────────────────────────────────

    async def _call_store(self, operation: str, coro):
        try:
            return await coro
        except RentadoraError:
            raise
        except Exception as e:
            logger.error(
                "Unexpected store error during %s on %s: %s",
                operation,
                self.collection,
                str(e),
                exc_info=True,
            )
            raise StoreError(
                context={
                    "operation": operation,
                    "collection": self.collection,
                    "error_type": type(e).__name__,
                }
            ) from e

    async def _require(self, document_id: str) -> Dict[str, Any]:
        document = await self._call_store("get", self.store.get(self.collection, document_id))
        if document is None:
            raise NotFoundError(
                message=self.definition.not_found_message,
                collection=self.collection,
                document_id=document_id,
            )
        return document

    # ── Operations ────────────────────────────────────────────────────────

    async def create(self, payload: Any) -> Dict[str, Any]:
        """
        Validate and insert a new document.

        Returns:
            `{"id": <assigned>, **fields}` where fields are the submitted
            payload plus any creation defaults of the resource.

        Raises:
            ValidationError: missing field or validator failure (no insertion)
            StoreError: the insert failed
        """
        data = self._normalize(payload)
        self.validate(data)
        for name, factory in self.definition.defaults.items():
            data[name] = factory()

        document_id = await self._call_store("insert", self.store.insert(self.collection, data))
        logger.info("Created %s/%s", self.collection, document_id)
        return {"id": document_id, **data}

    async def read(self, document_id: str) -> Dict[str, Any]:
        """
        Returns:
            `{"id": document_id, **stored fields}`

        Raises:
            NotFoundError: no document with that id
        """
        document = await self._require(document_id)
        return {"id": document_id, **document}

    async def update(self, document_id: str, payload: Any) -> str:
        """
        Merge the submitted fields into an existing document.

        Existence is checked before validation. Fields not named in the
        payload keep their stored values.

        Returns:
            The resource's fixed update message.
        """
        await self._require(document_id)
        data = self._normalize(payload)
        self.validate(data)

        updated = await self._call_store(
            "merge_update", self.store.merge_update(self.collection, document_id, data)
        )
        if not updated:
            # Deleted between the existence check and the write
            raise NotFoundError(
                message=self.definition.not_found_message,
                collection=self.collection,
                document_id=document_id,
            )
        logger.info("Updated %s/%s fields=%s", self.collection, document_id, sorted(data))
        return self.definition.updated_message

    async def delete(self, document_id: str) -> str:
        """
        Remove an existing document. A second delete of the same id is a 404.

        Returns:
            The resource's fixed delete message.
        """
        await self._require(document_id)
        deleted = await self._call_store("delete", self.store.delete(self.collection, document_id))
        if not deleted:
            raise NotFoundError(
                message=self.definition.not_found_message,
                collection=self.collection,
                document_id=document_id,
            )
        logger.info("Deleted %s/%s", self.collection, document_id)
        return self.definition.deleted_message
