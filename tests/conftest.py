import os

# Settings are read at import time
os.environ.setdefault("MONGODB_URI", "mongodb://localhost:27017/inventory_test")
os.environ.setdefault("SECRET_SECURITY_CODE", "1234")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
from httpx import ASGITransport, AsyncClient
from mongomock_motor import AsyncMongoMockClient

from app.core.database import init_db
from app.main import app



@pytest.fixture
async def db():
    """A fresh in-memory database with Beanie bound to it."""
    mongo = AsyncMongoMockClient()
    database = mongo["inventory_test"]
    await init_db(database=database)
    yield database


@pytest.fixture
async def client(db):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def make_item(client):
    async def _make_item(**overrides):
        payload = {
            "sku": "SKU-001",
            "name": "Widget",
            "category": "Parts",
            "quantity": 10,
            "unit_cost": 2.0,
            "unit_price": 5.0,
        }
        payload.update(overrides)
        response = await client.post("/api/inventory", json=payload)
        assert response.status_code == 201, response.text
        return response.json()

    return _make_item
