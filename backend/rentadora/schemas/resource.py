"""
Rentadora API - Resource Definitions and API Schemas
=====================================================

What:  The configuration type that parameterizes the CRUD template
       (ResourceDefinition), the field validators it can carry, and the
       Pydantic models used for OpenAPI documentation and responses.
How:   A ResourceDefinition names its collection, URL path, required fields,
       validators and creation defaults. Payload/document models are built
       from its FieldSpecs with pydantic.create_model so /docs shows one schema
       per resource (Usuario, Maquina, Alquiler, ...).
Who:   Read by ResourceService (validation, messages) and by
       build_resource_router (paths, tags, OpenAPI models).

Payload models declare every field as optional with `extra="allow"`.
Presence and range rules are enforced by ResourceService, which answers 400
with the resource's own message instead of FastAPI's generic 422.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from numbers import Real
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Type

from pydantic import BaseModel, ConfigDict, Field, create_model

from rentadora.exceptions import ValidationError

# A validator receives the full payload and raises ValidationError on failure.
FieldValidator = Callable[[Mapping[str, Any]], None]

# A default factory computes a server-side value at creation time.
DefaultFactory = Callable[[], Any]


# ══════════════════════════════════════════════════════════════════════════
# Field Specifications
# ══════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class FieldSpec:
    """
    Documentation and presence rules for one document field.

    Attributes:
        name:        Field name as it appears in the JSON body
        json_type:   OpenAPI type ("string", "number", "object", ...)
        description: Shown in the generated docs
        required:    Must be present on create and update
        allow_empty: An empty string counts as present (review `comentario`)
        format:      Optional OpenAPI format ("date-time", "float", "email")
        properties:  Sub-properties of a nested reference object
    """
    name: str
    json_type: str = "string"
    description: str = ""
    required: bool = True
    allow_empty: bool = False
    format: Optional[str] = None
    properties: Tuple[str, ...] = ()

    def json_schema(self) -> Dict[str, Any]:
        schema: Dict[str, Any] = {"type": self.json_type}
        if self.format:
            schema["format"] = self.format
        if self.properties:
            schema["properties"] = {prop: {"type": "string"} for prop in self.properties}
        return schema


def reference(name: str, description: str, *properties: str) -> FieldSpec:
    """Required nested reference object, e.g. `{"id": "...", "nombre": "..."}`."""
    return FieldSpec(
        name=name,
        json_type="object",
        description=description,
        properties=properties or ("id",),
    )


# ══════════════════════════════════════════════════════════════════════════
# Validators
# ══════════════════════════════════════════════════════════════════════════


def range_validator(field_name: str, low: float, high: float, message: str) -> FieldValidator:
    """
    Build a validator requiring `field_name` to be a number in [low, high].

    Booleans are rejected even though bool is a subclass of int.
    """

    def validate(payload: Mapping[str, Any]) -> None:
        value = payload.get(field_name)
        if isinstance(value, bool) or not isinstance(value, Real) or not low <= value <= high:
            raise ValidationError(
                message=message,
                field=field_name,
                context={"value": value, "min": low, "max": high},
            )

    return validate


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a Z suffix."""
    now = datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


# ══════════════════════════════════════════════════════════════════════════
# Resource Definition
# ══════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class ResourceDefinition:
    """
    Everything that distinguishes one resource from another.

    Attributes:
        collection:    Key into the document store ("usuarios")
        path:          URL prefix ("/usuarios")
        label:         Singular display name used in messages ("Usuario")
        schema_name:   OpenAPI component name ("Usuario")
        tag:           OpenAPI tag grouping the four routes ("Usuarios")
        fields:        Ordered FieldSpecs; required ones drive presence checks
        feminine:      Grammatical gender of `label` for the fixed messages
        success_label: Label used in update/delete messages when it differs
        validators:    Extra rules run on create AND update
        defaults:      Server-computed fields set at creation time
    """
    collection: str
    path: str
    label: str
    schema_name: str
    tag: str
    fields: Tuple[FieldSpec, ...]
    feminine: bool = False
    success_label: Optional[str] = None
    validators: Tuple[FieldValidator, ...] = ()
    defaults: Mapping[str, DefaultFactory] = field(default_factory=dict)

    @property
    def required_fields(self) -> List[str]:
        return [spec.name for spec in self.fields if spec.required]

    @property
    def allow_empty_fields(self) -> List[str]:
        return [spec.name for spec in self.fields if spec.allow_empty]

    # ── Fixed messages ────────────────────────────────────────────────────

    def _inflect(self, masculine: str) -> str:
        return masculine[:-1] + "a" if self.feminine else masculine

    @property
    def missing_fields_message(self) -> str:
        return "Faltan datos obligatorios: " + ", ".join(self.required_fields) + "."

    @property
    def not_found_message(self) -> str:
        return f"{self.label} no {self._inflect('encontrado')}."

    @property
    def updated_message(self) -> str:
        label = self.success_label or self.label
        return f"{label} {self._inflect('actualizado')} con éxito"

    @property
    def deleted_message(self) -> str:
        label = self.success_label or self.label
        return f"{label} {self._inflect('eliminado')} con éxito"

    # ── OpenAPI models ────────────────────────────────────────────────────

    def _field_definitions(self) -> Dict[str, Any]:
        return {
            spec.name: (
                Any,
                Field(
                    default=None,
                    description=spec.description,
                    json_schema_extra=spec.json_schema(),
                ),
            )
            for spec in self.fields
        }

    def payload_model(self) -> Type[BaseModel]:
        """Request body schema: every declared field, extra keys allowed."""
        return create_model(
            self.schema_name,
            __config__=ConfigDict(extra="allow"),
            **self._field_definitions(),
        )

    def document_model(self) -> Type[BaseModel]:
        """Response schema for a stored document: `id` plus the fields."""
        definitions = self._field_definitions()
        for name in self.defaults:
            definitions.setdefault(
                name,
                (Any, Field(default=None, json_schema_extra={"type": "string"})),
            )
        return create_model(
            f"{self.schema_name}Documento",
            __config__=ConfigDict(extra="allow"),
            id=(str, Field(description="Identificador asignado por el almacén")),
            **definitions,
        )


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class MessageResponse(BaseModel):
    """Body of successful PUT and DELETE responses."""
    message: str = Field(description="Mensaje de confirmación")


class ErrorResponse(BaseModel):
    """
    Standardized error envelope for every non-2xx response.

    Example:
        {
            "error": "not_found",
            "message": "Usuario no encontrado.",
            "request_id": "1f3a9c2e"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Returned by GET /health for monitoring and load balancer probes."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    store: str = Field(description="Document store connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
