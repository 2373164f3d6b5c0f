"""
Rentadora API - Middleware Package
===================================

Cross-cutting concerns applied to every request.

Middleware Chain (outermost first):
    Request → [Request ID] → [Logging] → [Rate Limit] → [GZip] → [CORS] → Route

    - The request ID is set first, so every response (429 included) carries it
    - Logging records the final status, rejected requests included
    - Rate limiting rejects over-limit clients before any handler work
"""
