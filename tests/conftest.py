import pytest
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from httpx import ASGITransport, AsyncClient

from app.main import app
from app.database import init_models
from app.dependencies import get_kv
from app.repositories.kv_repo import KVNamespace

TEST_NAMESPACE = "Todo_KV_test"

@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"

@pytest.fixture
async def session_factory(tmp_path):
    # file-backed so each KV call can open its own connection
    engine_test = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'kv.db'}", future=True)
    await init_models(engine_test)
    yield async_sessionmaker(engine_test, class_=AsyncSession, expire_on_commit=False)
    await engine_test.dispose()

@pytest.fixture
def kv(session_factory):
    return KVNamespace(session_factory, TEST_NAMESPACE)

@pytest.fixture
async def client(kv):
    app.dependency_overrides[get_kv] = lambda: kv
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
