"""Fixtures for API tests."""

from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

from invoiceflow.api.main import app


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Async client over the app; dependency overrides are cleared afterwards."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
