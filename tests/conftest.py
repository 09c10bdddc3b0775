"""
Fixtures compartidas para Pytest.
Configura base de datos de test y clientes HTTP.
"""

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app.config import get_settings
from app.core.security import hash_password
from app.database import Base, get_db
from app.main import app
from app.models.user import User
from app.services.tooth_catalog import tooth_label

settings = get_settings()

# ── Engine de test (SQLite async) ────────────────────
TEST_DATABASE_URL = "sqlite+aiosqlite:///./test_dental_lab.db"

# NullPool: cada test corre en su propio event loop
test_engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=NullPool)
test_session_factory = async_sessionmaker(
    test_engine, class_=AsyncSession, expire_on_commit=False
)


@pytest_asyncio.fixture(autouse=True)
async def setup_database():
    """Crea y destruye las tablas para cada test."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Provee una sesión de DB de test."""
    async with test_session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Cliente HTTP de test que usa la DB de test."""

    async def _get_test_db():
        yield db_session

    app.dependency_overrides[get_db] = _get_test_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> User:
    """Crea un usuario del panel de test."""
    user = User(
        username="admin",
        hashed_password=hash_password("TestPass123"),
        email="admin@test.com",
        full_name="Admin Test",
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest_asyncio.fixture
async def auth_client(client: AsyncClient, test_user: User) -> AsyncClient:
    """Cliente con la cookie de sesión ya establecida."""
    response = await client.post(
        f"{settings.API_PREFIX}/auth/login",
        json={"username": "admin", "password": "TestPass123"},
    )
    assert response.status_code == 200
    return client


@pytest.fixture
def upload_dir(tmp_path, monkeypatch):
    """Redirige UPLOAD_DIR a un directorio temporal."""
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(tmp_path))
    return tmp_path


def make_tooth(number: str, suffix: str = "1700000000000") -> dict:
    return {"number": number, "name": tooth_label(number), "id": f"tooth_{number}_{suffix}"}


@pytest.fixture
def order_payload() -> dict:
    """Payload válido del formulario: Maria Silva, dientes 11 y 21, sin configuración."""
    return {
        "patientName": "Maria Silva",
        "patientId": "P-001",
        "selectedTeeth": [make_tooth("11"), make_tooth("21")],
        "toothConfigurations": {},
        "observations": "",
    }
