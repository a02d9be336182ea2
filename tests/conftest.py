"""Pytest configuration and fixtures for registry_client.

The transport is always a test double: either an AsyncMock shaped like
RestService (client and cache tests) or an httpx.MockTransport wired into
a real RestService (transport tests). No test talks to a live registry.
"""

import json
from unittest.mock import AsyncMock

import pytest

from registry_client.infrastructure.rest.rest_service import RestService
from registry_client.services.schema_registry_client import SchemaRegistryClient

SCHEMA_A = json.dumps(
    {
        "type": "record",
        "name": "Order",
        "fields": [
            {"name": "id", "type": "string"},
            {"name": "amount", "type": "double"},
        ],
    }
)
SCHEMA_B = json.dumps(
    {
        "type": "record",
        "name": "Order",
        "fields": [
            {"name": "id", "type": "string"},
            {"name": "amount", "type": "double"},
            {"name": "currency", "type": ["null", "string"], "default": None},
        ],
    }
)


@pytest.fixture
def transport() -> AsyncMock:
    """Transport double; send_http_request is an AsyncMock returning {"id": 1} by default."""
    mock = AsyncMock(spec=RestService)
    mock.send_http_request.return_value = {"id": 1}
    return mock


@pytest.fixture
def client(transport: AsyncMock) -> SchemaRegistryClient:
    """Client with a fresh cache around the transport double."""
    return SchemaRegistryClient(transport)


def calls_with_method(transport: AsyncMock, method: str) -> list[tuple]:
    """Positional args of every send_http_request call made with method."""
    return [
        call.args
        for call in transport.send_http_request.call_args_list
        if call.args[1] == method
    ]
