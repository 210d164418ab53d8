import json

import httpx
import pytest

from httpbridge.client import BridgeClient
from httpbridge.config import Config

BASE_URL = "https://api.example.com"


def json_response(payload, status_code=200):
    return httpx.Response(
        status_code,
        content=json.dumps(payload).encode("utf-8"),
        headers={"Content-Type": "application/json; charset=utf-8"},
    )


@pytest.fixture
def config():
    return Config()


@pytest.fixture
def make_client(config):
    """Build a BridgeClient whose requests are answered by ``handler``."""
    clients = []

    def factory(handler):
        client = BridgeClient(config, transport=httpx.MockTransport(handler))
        clients.append(client)
        return client

    yield factory
    for client in clients:
        client.close()
