"""
Rentadora API - Generated Resource Routes
==========================================

What:  Builds the four CRUD routes for one resource from its ResourceService.
How:   build_resource_router() closes over the service and registers
       POST {path}, GET/PUT/DELETE {path}/{id} on a fresh APIRouter.
Who:   Called once per ResourceDefinition by main.create_app().

Request bodies are read as raw JSON, so "absent" and "null" stay
distinguishable and presence errors come back as 400 with the resource's own
message. The OpenAPI request schema is attached through `openapi_extra`.
"""

import json
import logging
from typing import Any, Dict

from fastapi import APIRouter, Request

from rentadora.exceptions import ValidationError
from rentadora.schemas.resource import ErrorResponse, MessageResponse
from rentadora.services.resource_service import ResourceService

logger = logging.getLogger(__name__)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not a valid JSON value")


async def read_json_body(request: Request) -> Any:
    """
    Parse the request body as strict JSON.

    NaN, Infinity and -Infinity are rejected, as the response encoder does.

    Raises:
        ValidationError: empty, malformed or too deeply nested body
    """
    raw = await request.body()
    if not raw:
        raise ValidationError(message="El cuerpo de la solicitud es obligatorio.")
    try:
        return json.loads(raw, parse_constant=_reject_constant)
    except (ValueError, RecursionError) as e:
        raise ValidationError(
            message="El cuerpo de la solicitud no es JSON válido.",
            context={"error": str(e)},
        ) from e


def build_resource_router(service: ResourceService) -> APIRouter:
    """
    Create the router for one resource.

    Route table (for definition.path == "/usuarios"):
        POST   /usuarios        → 201 {id, ...}      | 400 | 500
        GET    /usuarios/{id}   → 200 {id, ...}      | 404 | 500
        PUT    /usuarios/{id}   → 200 {message}      | 404 | 400 | 500
        DELETE /usuarios/{id}   → 200 {message}      | 404 | 500
    """
    definition = service.definition
    router = APIRouter(prefix=definition.path, tags=[definition.tag])

    payload_schema = definition.payload_model().model_json_schema()
    document_model = definition.document_model()
    request_body = {
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": payload_schema}},
        }
    }
    label = definition.label.lower()

    @router.post(
        "",
        status_code=201,
        response_model=None,
        responses={
            201: {"description": "Documento creado", "model": document_model},
            400: {"description": definition.missing_fields_message, "model": ErrorResponse},
            500: {"description": "Error interno del servidor", "model": ErrorResponse},
        },
        summary=f"Crear {label}",
        operation_id=f"create_{definition.collection}",
        openapi_extra=request_body,
    )
    async def create_document(request: Request) -> Dict[str, Any]:
        payload = await read_json_body(request)
        return await service.create(payload)

    @router.get(
        "/{document_id}",
        response_model=None,
        responses={
            200: {"description": "Documento encontrado", "model": document_model},
            404: {"description": definition.not_found_message, "model": ErrorResponse},
            500: {"description": "Error interno del servidor", "model": ErrorResponse},
        },
        summary=f"Obtener {label} por ID",
        operation_id=f"get_{definition.collection}",
    )
    async def get_document(document_id: str) -> Dict[str, Any]:
        return await service.read(document_id)

    @router.put(
        "/{document_id}",
        response_model=MessageResponse,
        responses={
            400: {"description": "Datos inválidos", "model": ErrorResponse},
            404: {"description": definition.not_found_message, "model": ErrorResponse},
            500: {"description": "Error interno del servidor", "model": ErrorResponse},
        },
        summary=f"Actualizar {label} por ID",
        operation_id=f"update_{definition.collection}",
        openapi_extra=request_body,
    )
    async def update_document(document_id: str, request: Request) -> MessageResponse:
        payload = await read_json_body(request)
        message = await service.update(document_id, payload)
        return MessageResponse(message=message)

    @router.delete(
        "/{document_id}",
        response_model=MessageResponse,
        responses={
            404: {"description": definition.not_found_message, "model": ErrorResponse},
            500: {"description": "Error interno del servidor", "model": ErrorResponse},
        },
        summary=f"Eliminar {label} por ID",
        operation_id=f"delete_{definition.collection}",
    )
    async def delete_document(document_id: str) -> MessageResponse:
        message = await service.delete(document_id)
        return MessageResponse(message=message)

    logger.debug("Registered routes for %s at %s", definition.collection, definition.path)
    return router
