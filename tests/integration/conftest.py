"""
Fixtures for integration tests
"""

import pytest
from httpx import ASGITransport, AsyncClient

from paddock_picks.main import app
from paddock_picks.database import Database


@pytest.fixture
async def client(test_db):
    """
    HTTP client for testing API endpoints.

    Points the Database singleton at the test database.
    """
    # Store original db connection
    original_db = Database.db
    Database.db = test_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    # Restore original db
    Database.db = original_db
