# -*- coding: utf-8 -*-

"""
Shared fixtures for Studio Gate tests.

The Turnstile endpoint is never contacted: every verifier is built on an
httpx.AsyncClient backed by httpx.MockTransport.
"""

import asyncio
import json
from typing import Callable, List

import httpx
import pytest
from fastapi.testclient import TestClient
from loguru import logger

from jumpgate.gate import StudioGate
from main import create_app
from jumpgate.turnstile import TurnstileVerifier

TEST_SECRET_KEY = "test-turnstile-secret"
TEST_VERIFY_URL = "https://turnstile.example.test/siteverify"


@pytest.fixture
def valid_goals() -> str:
    return "Grow my small bakery business into a regional chain"


@pytest.fixture
def valid_challenges() -> str:
    return "Limited marketing budget and no online presence"


@pytest.fixture
def valid_form(valid_goals, valid_challenges) -> dict:
    return {"goals": valid_goals, "challenges": valid_challenges}


@pytest.fixture
def recorded_requests() -> List[httpx.Request]:
    """Requests seen by the mocked Turnstile endpoint."""
    return []


@pytest.fixture
def make_turnstile_client(recorded_requests) -> Callable[..., httpx.AsyncClient]:
    """
    Factory for an AsyncClient whose transport answers like siteverify.

    Usage:
        client = make_turnstile_client(status_code=200, body={"success": True})
        client = make_turnstile_client(error=httpx.ConnectError("down"))
    """
    clients = []

    def _factory(status_code: int = 200, body=None, text=None, error=None):
        def handler(request: httpx.Request) -> httpx.Response:
            recorded_requests.append(request)
            if error is not None:
                raise error
            if text is not None:
                return httpx.Response(status_code, text=text)
            return httpx.Response(status_code, json=body if body is not None else {})

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        clients.append(client)
        return client

    _factory.clients = clients
    yield _factory

    # Closed on a private loop, never on the test event loop
    loop = asyncio.new_event_loop()
    try:
        for client in clients:
            loop.run_until_complete(client.aclose())
    finally:
        loop.close()


@pytest.fixture
def make_verifier(make_turnstile_client) -> Callable[..., TurnstileVerifier]:
    def _factory(**kwargs) -> TurnstileVerifier:
        return TurnstileVerifier(
            secret_key=TEST_SECRET_KEY,
            verify_url=TEST_VERIFY_URL,
            client=make_turnstile_client(**kwargs),
        )

    return _factory


@pytest.fixture
def log_records():
    """Capture loguru records emitted during a test."""
    records = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(handler_id)


@pytest.fixture
def make_test_client(make_verifier):
    """
    Build a TestClient whose gate uses a mocked Turnstile endpoint.

    The lifespan runs normally; the gate it creates is then swapped for one
    backed by the mock transport.
    """
    clients = []

    def _factory(require_token: bool = False, **verifier_kwargs) -> TestClient:
        app = create_app()
        client = TestClient(app)
        client.__enter__()
        clients.append(client)
        app.state.studio_gate = StudioGate(
            make_verifier(**verifier_kwargs), require_token=require_token
        )
        return client

    yield _factory

    for client in clients:
        client.__exit__(None, None, None)


@pytest.fixture
def test_client(make_test_client) -> TestClient:
    """TestClient whose Turnstile mock accepts every token."""
    return make_test_client(status_code=200, body={"success": True})


def _decode_json(request: httpx.Request) -> dict:
    return json.loads(request.content.decode("utf-8"))


@pytest.fixture
def sent_json() -> Callable[[httpx.Request], dict]:
    """Decode the JSON body of a recorded request."""
    return _decode_json


@pytest.fixture
def secret_key() -> str:
    return TEST_SECRET_KEY
