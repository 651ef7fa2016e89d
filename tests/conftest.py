"""
Test Configuration and Fixtures

Provides the async API test client and shared configuration fixtures.
"""

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from backend.main import app
from tests.factories import make_kpi_config


@pytest_asyncio.fixture(scope="function")
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Provide an async test client bound to the ASGI app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def kpi_config() -> dict:
    """Enabled KPI configuration: 1 point per cleaning, 3 per repair, 50 per point."""
    return make_kpi_config()


@pytest.fixture
def club_headers() -> dict[str, str]:
    """Headers identifying the calling club."""
    return {"X-Club-Id": "club-001"}
