"""
Rentadora API - Test Configuration (conftest.py)
=================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Environment overrides are applied before any `rentadora` import so the
       settings singleton never points at a real database.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── memory_store: Empty InMemoryDocumentStore
    ├── app: FastAPI app wired to memory_store, rate limiting off
    ├── test_client: HTTPX AsyncClient for API endpoint testing
    └── valid_payloads: One complete, valid body per collection
"""

import copy
import os

# Override settings for testing BEFORE any app imports
os.environ["DOCUMENT_STORE"] = "memory"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["RATE_LIMIT_ENABLED"] = "false"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from rentadora.main import create_app
from rentadora.services.memory_store import InMemoryDocumentStore


# One complete body per collection; every required field present
VALID_PAYLOADS = {
    "usuarios": {
        "nombre": "Ana Pérez",
        "correo": "ana@example.com",
        "rol": "cliente",
    },
    "maquinas": {
        "nombre": "Retroexcavadora 420F",
        "descripcion": "Retroexcavadora con brazo extensible",
        "precio": 1500.5,
        "distribuidor": {"id": "d1", "nombre": "Maquinaria del Norte"},
    },
    "alquileres": {
        "usuario": {"id": "u1"},
        "maquina": {"id": "m1"},
        "fecha_inicio": "2024-03-01T08:00:00Z",
        "fecha_fin": "2024-03-05T18:00:00Z",
        "estado": "activo",
    },
    "pagos": {
        "alquilerId": "a1",
        "monto": 6002,
        "metodo": "tarjeta",
        "fecha_pago": "2024-03-01T09:00:00Z",
    },
    "distribuidores": {
        "nombre": "Maquinaria del Norte",
        "correo": "ventas@mdn.example.com",
        "telefono": "+52 81 5555 0000",
        "direccion": "Av. Industrial 100, Monterrey",
    },
    "resenas": {
        "usuarioId": "u1",
        "productoId": "m1",
        "calificacion": 4,
        "comentario": "Funcionó sin problemas",
    },
    "categorias": {
        "nombre": "Excavación",
        "descripcion": "Equipos para movimiento de tierra",
    },
    "ubicaciones": {
        "nombre": "Sucursal Centro",
        "direccion": "Calle 5 #120",
        "latitud": 19.4326,
        "longitud": -99.1332,
    },
    "soporte": {
        "usuarioId": "u1",
        "descripcion": "La máquina no enciende",
        "fecha": "2024-03-02T10:00:00Z",
        "estado": "abierta",
    },
    "trabajadores": {
        "nombre": "Luis Gómez",
        "puesto": "Mecánico",
        "salario": 18000,
        "fechaContratacion": "2023-01-15T00:00:00Z",
    },
}


@pytest.fixture
def valid_payloads():
    """Deep copy of VALID_PAYLOADS so tests can mutate freely."""
    return copy.deepcopy(VALID_PAYLOADS)


@pytest.fixture
def memory_store():
    return InMemoryDocumentStore()


@pytest.fixture
def app(memory_store):
    """Application wired to an empty in-memory store."""
    return create_app(store=memory_store, rate_limit=False)


@pytest_asyncio.fixture
async def test_client(app):
    """
    Provides an async HTTP test client for endpoint testing.

    Uses ASGITransport to route requests directly to the app without a
    server. Lifespan events are not run.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

