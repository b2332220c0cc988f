import os

# must be set before app.core.config is imported
os.environ.setdefault("DATABASE_DSN", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENV", "dev")
os.environ.setdefault("JWT_SECRET", "test-secret")

from datetime import date

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.core.base import Base
from app.core.db import get_session
from app.core.security import Principal, get_principal
import app.modules.residents.models  # noqa: F401
import app.modules.medical_records.models  # noqa: F401


@pytest_asyncio.fixture
async def engine(tmp_path):
    # file-backed so the concurrent search sub-queries get their own connections
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'emr.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


@pytest_asyncio.fixture
async def session(session_factory):
    async with session_factory() as s:
        yield s


@pytest.fixture
def admin_principal():
    return Principal(user_id="nurse-1", email="nurse@example.com", admin=True)


@pytest_asyncio.fixture
async def client(session_factory, admin_principal):
    from app.main import app

    async def _session():
        async with session_factory() as s:
            yield s

    app.dependency_overrides[get_session] = _session
    app.dependency_overrides[get_principal] = lambda: admin_principal
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def resident_form():
    """Factory for a valid registration payload; keyword args override fields."""
    def make(**overrides):
        data = {
            "name": "田中 花子",
            "furigana": "タナカ ハナコ",
            "gender": "女性",
            "birth_date": date(1940, 5, 1),
            "room_number": "101",
            "admission_date": date(2022, 4, 1),
            "discharge_date": None,
            "medical_history": "高血圧症",
            "medications": ["アムロジピン"],
            "care_level": 3,
        }
        data.update(overrides)
        return data
    return make
