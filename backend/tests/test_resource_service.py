"""
Rentadora API - Resource Service Unit Tests
============================================

What:  Tests for the CRUD template behind every resource.
How:   Real ResourceService instances over InMemoryDocumentStore; store
       failures are simulated with AsyncMock.

What we test:
    ✅ Presence check uses definedness (0 and False are present)
    ✅ Missing-field message lists every required field
    ✅ Review rating validator on create and update
    ✅ Creation defaults (usuarios.fechaRegistro)
    ✅ Merge update, delete and not-found handling
    ✅ Unexpected store errors become StoreError
"""

import re
from unittest.mock import AsyncMock

import pytest

from rentadora.exceptions import NotFoundError, StoreError, ValidationError
from rentadora.schemas.catalog import (
    PAGOS,
    RESENAS,
    SOPORTE,
    UBICACIONES,
    USUARIOS,
)
from rentadora.services.memory_store import InMemoryDocumentStore
from rentadora.services.resource_service import ResourceService


class TestPresenceCheck:
    """Tests for missing_fields and validate."""

    def setup_method(self):
        self.service = ResourceService(UBICACIONES, InMemoryDocumentStore())

    def test_zero_coordinates_are_present(self):
        """Latitude and longitude of 0 must not count as missing."""
        payload = {"nombre": "Null Island", "direccion": "N/A", "latitud": 0, "longitud": 0}
        assert self.service.missing_fields(payload) == []

    def test_null_and_absent_are_missing(self):
        payload = {"nombre": "Centro", "direccion": None, "latitud": 1.5}
        assert self.service.missing_fields(payload) == ["direccion", "longitud"]

    def test_blank_string_is_missing(self):
        payload = {"nombre": "   ", "direccion": "x", "latitud": 1, "longitud": 1}
        assert self.service.missing_fields(payload) == ["nombre"]

    def test_false_is_present(self):
        payload = {"nombre": False, "direccion": "x", "latitud": 1, "longitud": 1}
        assert self.service.missing_fields(payload) == []

    def test_message_lists_all_required_fields(self):
        """The message names every required field, not just the missing one."""
        with pytest.raises(ValidationError) as exc_info:
            self.service.validate({"nombre": "Centro"})

        assert exc_info.value.message == (
            "Faltan datos obligatorios: nombre, direccion, latitud, longitud."
        )
        assert exc_info.value.context["missing"] == ["direccion", "latitud", "longitud"]

    def test_allow_empty_field_accepts_empty_string(self):
        """A review comment may be an empty string."""
        service = ResourceService(RESENAS, InMemoryDocumentStore())
        payload = {"usuarioId": "u1", "productoId": "m1", "calificacion": 3, "comentario": ""}
        service.validate(payload)

    def test_optional_field_is_not_required(self):
        """Payments do not require usuarioId."""
        service = ResourceService(PAGOS, InMemoryDocumentStore())
        assert "usuarioId" not in service.definition.required_fields


class TestRatingValidator:
    """Tests for the calificacion range rule on reviews."""

    def setup_method(self):
        self.service = ResourceService(RESENAS, InMemoryDocumentStore())

    def _payload(self, rating):
        return {"usuarioId": "u1", "productoId": "m1", "calificacion": rating, "comentario": "ok"}

    @pytest.mark.parametrize("rating", [1, 3, 5, 4.5])
    def test_in_range_accepted(self, rating):
        self.service.validate(self._payload(rating))

    @pytest.mark.parametrize("rating", [0, 6, -1, "5", True])
    def test_out_of_range_rejected(self, rating):
        with pytest.raises(ValidationError) as exc_info:
            self.service.validate(self._payload(rating))
        assert exc_info.value.message == "La calificación debe estar entre 1 y 5."
        assert exc_info.value.field == "calificacion"

    def test_presence_checked_before_range(self):
        """A missing rating reports the missing-fields message."""
        payload = self._payload(None)
        with pytest.raises(ValidationError) as exc_info:
            self.service.validate(payload)
        assert exc_info.value.message.startswith("Faltan datos obligatorios")


class TestCreate:
    """Tests for ResourceService.create."""

    def setup_method(self):
        self.store = InMemoryDocumentStore()
        self.service = ResourceService(USUARIOS, self.store)

    @pytest.mark.asyncio
    async def test_create_returns_id_and_fields(self):
        result = await self.service.create({"nombre": "Ana", "correo": "a@x.com", "rol": "admin"})

        assert result["id"]
        assert result["nombre"] == "Ana"
        assert await self.store.get("usuarios", result["id"]) is not None

    @pytest.mark.asyncio
    async def test_create_sets_registration_timestamp(self):
        """fechaRegistro is set by the server, overriding any client value."""
        result = await self.service.create(
            {"nombre": "Ana", "correo": "a@x.com", "rol": "admin", "fechaRegistro": "ayer"}
        )

        assert re.fullmatch(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z", result["fechaRegistro"])

    @pytest.mark.asyncio
    async def test_client_id_is_ignored(self):
        result = await self.service.create(
            {"id": "elegido", "nombre": "Ana", "correo": "a@x.com", "rol": "admin"}
        )

        assert result["id"] != "elegido"
        stored = await self.store.get("usuarios", result["id"])
        assert "id" not in stored

    @pytest.mark.asyncio
    async def test_update_ignores_server_computed_fields(self):
        created = await self.service.create({"nombre": "Ana", "correo": "a@x.com", "rol": "admin"})

        await self.service.update(
            created["id"],
            {"nombre": "Ana", "correo": "a@x.com", "rol": "admin", "fechaRegistro": "1999-01-01"},
        )

        stored = await self.store.get("usuarios", created["id"])
        assert stored["fechaRegistro"] == created["fechaRegistro"]

    @pytest.mark.asyncio
    async def test_invalid_create_inserts_nothing(self):
        with pytest.raises(ValidationError):
            await self.service.create({"nombre": "Ana"})
        assert self.store.count("usuarios") == 0

    @pytest.mark.asyncio
    async def test_non_object_body_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            await self.service.create(["nombre", "Ana"])
        assert exc_info.value.context["received_type"] == "list"

    @pytest.mark.asyncio
    async def test_extra_fields_are_stored(self):
        result = await self.service.create(
            {"nombre": "Ana", "correo": "a@x.com", "rol": "admin", "telefono": "555"}
        )
        assert (await self.service.read(result["id"]))["telefono"] == "555"


class TestUpdateAndDelete:
    """Tests for merge update, delete and not-found handling."""

    def setup_method(self):
        self.store = InMemoryDocumentStore()
        self.service = ResourceService(SOPORTE, self.store)
        self.payload = {
            "usuarioId": "u1",
            "descripcion": "No enciende",
            "fecha": "2024-03-02T10:00:00Z",
            "estado": "abierta",
        }

    @pytest.mark.asyncio
    async def test_update_merges_fields(self):
        created = await self.service.create({**self.payload, "prioridad": "alta"})

        message = await self.service.update(created["id"], {**self.payload, "estado": "cerrada"})

        assert message == "Solicitud actualizada con éxito"
        stored = await self.service.read(created["id"])
        assert stored["estado"] == "cerrada"
        assert stored["prioridad"] == "alta"

    @pytest.mark.asyncio
    async def test_update_missing_document_is_not_found(self):
        """Existence is checked before validation, even for an invalid body."""
        with pytest.raises(NotFoundError) as exc_info:
            await self.service.update("nope", {})
        assert exc_info.value.message == "Solicitud de soporte no encontrada."

    @pytest.mark.asyncio
    async def test_update_with_missing_field_leaves_document(self):
        created = await self.service.create(self.payload)

        with pytest.raises(ValidationError):
            await self.service.update(created["id"], {"estado": "cerrada"})

        assert (await self.service.read(created["id"]))["estado"] == "abierta"

    @pytest.mark.asyncio
    async def test_delete_then_read_is_not_found(self):
        created = await self.service.create(self.payload)

        assert await self.service.delete(created["id"]) == "Solicitud eliminada con éxito"

        with pytest.raises(NotFoundError):
            await self.service.read(created["id"])
        with pytest.raises(NotFoundError):
            await self.service.delete(created["id"])

    @pytest.mark.asyncio
    async def test_concurrent_delete_during_update(self):
        """merge_update reporting no document surfaces as NotFoundError."""
        created = await self.service.create(self.payload)
        self.store.merge_update = AsyncMock(return_value=False)

        with pytest.raises(NotFoundError):
            await self.service.update(created["id"], self.payload)


class TestStoreFailures:
    """Unexpected store errors are wrapped, application errors pass through."""

    def setup_method(self):
        self.store = AsyncMock()
        self.service = ResourceService(USUARIOS, self.store)

    @pytest.mark.asyncio
    async def test_unexpected_error_becomes_store_error(self):
        self.store.get.side_effect = ConnectionError("connection reset")

        with pytest.raises(StoreError) as exc_info:
            await self.service.read("abc")

        assert exc_info.value.message == "Error interno del servidor."
        assert exc_info.value.context["operation"] == "get"
        assert exc_info.value.context["error_type"] == "ConnectionError"

    @pytest.mark.asyncio
    async def test_store_error_passes_through(self):
        original = StoreError(context={"operation": "insert"})
        self.store.insert.side_effect = original

        with pytest.raises(StoreError) as exc_info:
            await self.service.create({"nombre": "Ana", "correo": "a@x.com", "rol": "admin"})

        assert exc_info.value is original
