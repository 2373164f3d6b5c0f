"""
Rentadora API - Custom Exception Hierarchy
===========================================

What:  Application-specific exceptions for the three failure classes of a
       resource request.
How:   Each exception carries a user-facing message and an optional context
       dict. Global exception handlers (registered in main.py) map them to
       HTTP status codes and the standard error envelope.
Who:   Raised by the document stores and ResourceService; caught by handlers.

Exception Hierarchy:
    RentadoraError (base)
    ├── ValidationError   → 400 Bad Request (missing or out-of-range input)
    ├── NotFoundError     → 404 Not Found (no document at the given id)
    └── StoreError        → 500 Internal Server Error (any store failure)

None of these are retried. Store failures are not split into transient and
permanent kinds; every one of them is a 500.
"""

from typing import Any, Dict, Optional


class RentadoraError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(RentadoraError):
    """
    Raised when client input fails validation.

    When:    A required field is missing, a validator rejects a value, or the
             request body is not a JSON object.
    HTTP:    400 Bad Request

    Example response:
        {
            "error": "validation_error",
            "message": "Faltan datos obligatorios: nombre, correo, rol.",
            "details": {"missing": ["rol"], "required": ["nombre", "correo", "rol"]}
        }
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(RentadoraError):
    """
    Raised when a document does not exist in its collection.

    The message is the fixed per-resource text ("Usuario no encontrado.");
    the collection and id travel in the context for logging.
    HTTP:    404 Not Found
    """

    def __init__(
        self,
        message: str = "Documento no encontrado.",
        collection: Optional[str] = None,
        document_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if collection:
            ctx["collection"] = collection
        if document_id:
            ctx["document_id"] = document_id
        super().__init__(message=message, context=ctx)


class StoreError(RentadoraError):
    """
    Raised when a document store operation fails.

    What:    Connectivity loss, driver error, serialization failure, or any
             other unexpected error while talking to the store.
    HTTP:    500 Internal Server Error

    Security Note:
        The client always receives a generic message. The driver error and
        the collection/operation are kept in `context` and logged server-side.
    """

    def __init__(
        self,
        message: str = "Error interno del servidor.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
