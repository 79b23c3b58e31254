"""
HTTP client fixture running the app in-process against the test database.
"""
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from agent_dashboard_service.db import get_db
from agent_dashboard_service.main import app
from agent_dashboard_service.services.mcp_service import McpService, get_mcp_service
from tests.fixtures.mcp_transport import FakeMcpTransport


@pytest.fixture
def mcp_transport():
    return FakeMcpTransport()


@pytest.fixture
def mcp_service(mcp_transport):
    """MCP service whose sessions are served by ``mcp_transport``."""
    return McpService(transport=mcp_transport)


@pytest_asyncio.fixture
async def client(test_engine, mcp_service):
    """AsyncClient for the app with get_db and the MCP service overridden."""
    session_factory = async_sessionmaker(
        bind=test_engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_mcp_service] = lambda: mcp_service

    # raise_app_exceptions=False lets tests observe 500 responses
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
    await mcp_service.disconnect_all()
