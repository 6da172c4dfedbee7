# backend/tests/conftest.py
# -*- coding: utf-8 -*-
"""
Config global de tests para EInvoiceMY.

- PYTHON_ENV=test ANTES de importar app (SQLite en memoria, llaves dummy)
- Engine aiosqlite por prueba (StaticPool) con el esquema completo
- Recursos globales inyectados en la app: blob store y colas en memoria,
  cliente IA con respuestas programadas y cliente LHDN sobre httpx.MockTransport
- Cliente HTTP asíncrono con ciclo de vida (asgi-lifespan)
"""

import os

os.environ["PYTHON_ENV"] = "test"

import copy
import json
import uuid
from collections.abc import AsyncIterator
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest
from asgi_lifespan import LifespanManager
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.core.db import import_all_models
from app.modules.businesses.models import Business
from app.modules.lhdn.services import LhdnApiClient, TokenCache
from app.shared.auth_context import create_access_token
from app.shared.database import Base, get_async_session
from app.shared.errors import AiExtractionError
from app.shared.integrations import DomainEventBus, InMemoryBlobStore, InMemoryJobQueue
from app.shared.security.crypto import encrypt

LHDN_TEST_BASE_URL = "https://lhdn.test"


# -----------------------------------------------------------------------------
# 1) Base de datos
# -----------------------------------------------------------------------------
@pytest.fixture
async def engine():
    """Engine SQLite en memoria con todas las tablas del dominio."""
    import_all_models()
    eng = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield eng
    finally:
        await eng.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, expire_on_commit=False, class_=AsyncSession, autoflush=False)


@pytest.fixture
async def db_session(session_factory) -> AsyncIterator[AsyncSession]:
    async with session_factory() as session:
        yield session


# -----------------------------------------------------------------------------
# 2) Negocios e identidad
# -----------------------------------------------------------------------------
async def _make_business(db: AsyncSession, *, name: str, tin: str, with_credentials: bool) -> Business:
    business = Business(
        name=name,
        tin=tin,
        registration_number="202301000001",
        city_name="Kuala Lumpur",
        email="billing@example.my",
        phone="+60312345678",
    )
    if with_credentials:
        business.lhdn_client_id_encrypted = encrypt("client-id")
        business.lhdn_client_secret_encrypted = encrypt("client-secret")
    db.add(business)
    await db.commit()
    return business


@pytest.fixture
async def business(db_session) -> Business:
    return await _make_business(db_session, name="Kedai Runcit Sdn Bhd", tin="C12345678901", with_credentials=True)


@pytest.fixture
async def other_business(db_session) -> Business:
    return await _make_business(db_session, name="Syarikat Lain Bhd", tin="C55555555555", with_credentials=True)


@pytest.fixture
async def business_without_credentials(db_session) -> Business:
    return await _make_business(db_session, name="Tanpa Kredensial Bhd", tin="C77777777777", with_credentials=False)


@pytest.fixture
def user_id() -> uuid.UUID:
    return uuid.uuid4()


@pytest.fixture
def auth_headers(business, user_id) -> Dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user_id, business.id)}"}


# -----------------------------------------------------------------------------
# 3) Datos de factura / extracción
# -----------------------------------------------------------------------------
def _invoice_payload(**overrides: Any) -> Dict[str, Any]:
    payload = {
        "invoice_number": "INV-2025-0001",
        "issue_date": "2025-11-01",
        "supplier_name": "Kedai Runcit Sdn Bhd",
        "supplier_tin": "C12345678901",
        "buyer_name": "Syarikat Pembeli Bhd",
        "buyer_tin": "C98765432109",
        "items": [
            {"description": "Consulting", "quantity": "2", "unit_price": "50.00", "tax_type": "01", "tax_rate": "6"},
        ],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def invoice_payload() -> Callable[..., Dict[str, Any]]:
    """Factura válida para finalizar (2 x 50.00 con 6% -> 106.00)."""
    return _invoice_payload


_EXTRACTION = {
    "supplier": {
        "name": "Kedai Runcit Sdn Bhd",
        "tin": "C12345678901",
        "registration_number": "202301000001",
        "address": "Jalan Ampang, Kuala Lumpur",
        "confidence": {"name": 0.95, "tin": 0.92, "registration_number": 0.9, "address": 0.85},
    },
    "buyer": {
        "name": "Syarikat Pembeli Bhd",
        "tin": "C98765432109",
        "registration_number": None,
        "email": "ap@pembeli.my",
        "phone": None,
        "address": None,
        "confidence": {"name": 0.9, "tin": 0.88},
    },
    "invoice": {
        "number": "INV-7788",
        "date": "2025-11-03",
        "currency": "MYR",
        "confidence": {"number": 0.97, "date": 0.93},
    },
    "line_items": [
        {
            "description": "Printer paper A4",
            "quantity": 3,
            "unit_price": 12.5,
            "tax_type": "01",
            "tax_rate": 10,
            "tax_amount": 99.0,
            "subtotal": 1.0,
            "total": 2.0,
            "confidence": 0.9,
        }
    ],
    "totals": {
        "subtotal": 37.5,
        "tax_total": 3.75,
        "grand_total": 41.25,
        "confidence": {"subtotal": 0.9, "tax_total": 0.9, "grand_total": 0.92},
    },
    "overall_confidence": 0.91,
}


def _extraction(**overrides: Any) -> Dict[str, Any]:
    data = copy.deepcopy(_EXTRACTION)
    for key, value in overrides.items():
        data[key] = value
    return data


@pytest.fixture
def extraction() -> Callable[..., Dict[str, Any]]:
    """Extracción IA de alta confianza (los montos de la IA son deliberadamente erróneos)."""
    return _extraction


# -----------------------------------------------------------------------------
# 4) Colaboradores externos falsos
# -----------------------------------------------------------------------------
class FakeAiClient:
    """Cliente IA con respuestas programadas en orden; registra cada llamada."""

    def __init__(self) -> None:
        self.calls: List[tuple] = []
        self.responses: List[Any] = []

    def queue(self, *responses: Any) -> None:
        for r in responses:
            self.responses.append(json.dumps(r) if isinstance(r, dict) else r)

    async def run(self, model: str, payload: Dict[str, Any]) -> Dict[str, str]:
        self.calls.append((model, payload))
        if not self.responses:
            raise AiExtractionError("No scripted AI response")
        nxt = self.responses.pop(0)
        if isinstance(nxt, Exception):
            raise nxt
        return {"response": nxt}


class FakeLhdn:
    """
    Servidor MyInvois simulado para httpx.MockTransport.

    Cada endpoint responde con (status, body) configurable; submit_error
    simula una falla de red en el envío.
    """

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self.token_calls = 0
        self.token_expires_in = 3600
        self.submit_error: Optional[Exception] = None
        self.submit_response = (
            202,
            {
                "submissionUid": "SUB-0001",
                "acceptedDocuments": [{"uuid": "DOC-UUID-0001", "invoiceCodeNumber": "INV-2025-0001"}],
                "rejectedDocuments": [],
            },
        )
        self.status_response = (
            200,
            {
                "submissionUid": "SUB-0001",
                "overallStatus": "in progress",
                "documentSummary": [],
            },
        )
        self.cancel_response = (200, {"uuid": "DOC-UUID-0001", "status": "Cancelled"})

    def requests_to(self, path_prefix: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.url.path.startswith(path_prefix)]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path == "/connect/token":
            self.token_calls += 1
            return httpx.Response(
                200,
                json={
                    "access_token": f"token-{self.token_calls}",
                    "token_type": "Bearer",
                    "expires_in": self.token_expires_in,
                },
            )
        if path == "/api/v1.0/documentsubmissions/" and request.method == "POST":
            if self.submit_error is not None:
                raise self.submit_error
            status, body = self.submit_response
            return httpx.Response(status, json=body)
        if path.startswith("/api/v1.0/documentsubmissions/") and request.method == "GET":
            status, body = self.status_response
            return httpx.Response(status, json=body)
        if path.startswith("/api/v1.0/documents/state/") and request.method == "PUT":
            status, body = self.cancel_response
            return httpx.Response(status, json=body)
        return httpx.Response(404, json={"error": f"unknown path {path}"})

    def valid_status(self, validated_at: str = "2025-11-04T10:00:00Z") -> None:
        self.status_response = (
            200,
            {
                "submissionUid": "SUB-0001",
                "overallStatus": "valid",
                "documentSummary": [
                    {"uuid": "DOC-UUID-0001", "status": "Valid", "dateTimeValidated": validated_at}
                ],
            },
        )

    def invalid_status(self, message: str = "Buyer TIN is invalid") -> None:
        self.status_response = (
            200,
            {
                "submissionUid": "SUB-0001",
                "overallStatus": "invalid",
                "documentSummary": [
                    {"uuid": "DOC-UUID-0001", "status": "Invalid", "error": {"code": "BadArgument", "message": message}}
                ],
            },
        )


@pytest.fixture
def fake_ai() -> FakeAiClient:
    return FakeAiClient()


@pytest.fixture
def fake_lhdn() -> FakeLhdn:
    return FakeLhdn()


@pytest.fixture
async def lhdn_client(fake_lhdn) -> AsyncIterator[LhdnApiClient]:
    http = httpx.AsyncClient(base_url=LHDN_TEST_BASE_URL, transport=httpx.MockTransport(fake_lhdn.handler))
    client = LhdnApiClient(http)
    try:
        yield client
    finally:
        await client.aclose()


@pytest.fixture
def token_cache(lhdn_client) -> TokenCache:
    return TokenCache(lhdn_client, buffer_seconds=60)


@pytest.fixture
def blob_store() -> InMemoryBlobStore:
    return InMemoryBlobStore()


@pytest.fixture
def ocr_queue() -> InMemoryJobQueue:
    return InMemoryJobQueue("ocr-queue", max_retries=3)


@pytest.fixture
def csv_queue() -> InMemoryJobQueue:
    return InMemoryJobQueue("csv-import-queue", max_retries=3)


@pytest.fixture
def published_events() -> list:
    return []


@pytest.fixture
def event_bus(published_events) -> DomainEventBus:
    bus = DomainEventBus()

    async def _collect(event):
        published_events.append(event)

    bus.subscribe(_collect)
    return bus


# -----------------------------------------------------------------------------
# 5) App FastAPI y cliente httpx (con ciclo de vida)
# -----------------------------------------------------------------------------
@pytest.fixture(scope="session")
def app():
    """Carga la aplicación principal **después** de fijar PYTHON_ENV=test."""
    from app.main import app as fastapi_app
    return fastapi_app


@pytest.fixture
async def async_client(
    app,
    session_factory,
    blob_store,
    ocr_queue,
    csv_queue,
    event_bus,
    fake_ai,
    lhdn_client,
    token_cache,
) -> AsyncIterator[AsyncClient]:
    """
    Cliente HTTP asíncrono contra la app (ASGITransport + asgi-lifespan),
    con la sesión de BD y los recursos globales de la prueba.
    """
    from app.shared.core import resources

    resources.blob_store = blob_store
    resources.ocr_queue = ocr_queue
    resources.csv_queue = csv_queue
    resources.event_bus = event_bus
    resources.ai_client = fake_ai
    resources.lhdn_client = lhdn_client
    resources.token_cache = token_cache

    async def _override_session() -> AsyncIterator[AsyncSession]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_async_session] = _override_session
    try:
        async with LifespanManager(app):
            transport = ASGITransport(app=app)
            async with AsyncClient(transport=transport, base_url="http://testserver") as client:
                yield client
    finally:
        app.dependency_overrides.clear()
        for name in (
            "blob_store", "ocr_queue", "csv_queue", "event_queue", "event_bus",
            "ai_client", "lhdn_client", "token_cache",
        ):
            setattr(resources, name, None)
        resources.initialized = False

# Fin del archivo backend/tests/conftest.py
