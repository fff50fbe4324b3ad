"""Shared test fixtures."""

import pytest
from httpx import ASGITransport, AsyncClient

from fintrack.client import FinanceClient
from tests.fake_api import PASSWORD, create_fake_api


@pytest.fixture
def fake_api():
    """Fresh in-memory API for each test."""
    return create_fake_api()


@pytest.fixture
def sent_requests():
    """Every request the client put on the wire, in order."""
    return []


@pytest.fixture
async def http_client(fake_api, sent_requests):
    async def record(request):
        sent_requests.append(request)

    async with AsyncClient(
        transport=ASGITransport(app=fake_api),
        base_url="http://testserver",
        event_hooks={"request": [record]},
    ) as ac:
        yield ac


@pytest.fixture
async def client(http_client):
    """Client without a session."""
    async with FinanceClient(http_client=http_client, page_size=500) as fc:
        yield fc


@pytest.fixture
async def session(client):
    """Client logged in against the fake API."""
    await client.auth.login("user@example.com", PASSWORD)
    return client
