"""
Rentadora API - Application Package Initializer
================================================

What: Marks the `rentadora` directory as a Python package.
Who:  Imported by uvicorn (`rentadora.main:app`), Alembic and pytest.

Architecture Note:
    The backend follows a layered architecture:

    ┌─────────────────────────────────────┐
    │     Routes (generated per resource) │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   ResourceService (CRUD template)   │  ← presence checks, validators
    ├─────────────────────────────────────┤
    │   Schemas (ResourceDefinition)      │  ← per-resource configuration
    ├─────────────────────────────────────┤
    │   DocumentStore (SQL / in-memory)   │  ← persistence
    └─────────────────────────────────────┘

    Every resource (usuarios, maquinas, alquileres, ...) is one
    ResourceDefinition flowing through the same service and router factory.
"""

__version__ = "1.0.0"
