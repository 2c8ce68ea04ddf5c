"""Shared fixtures: signed tokens and a fake portal backend."""

from typing import Any, Callable

import httpx
import pytest
import structlog
from fastapi.testclient import TestClient
from jose import jwt

from pulse_api.config.settings import settings
from pulse_api.integrations.backend import BackendClient, get_backend_client
from pulse_api.main import app

BACKEND_URL = "http://backend.test/api"


def make_token(**claims: Any) -> str:
    """Sign a portal token with the shared secret."""
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def auth_headers(**claims: Any) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(**claims)}"}


class FakeBackend:
    """
    Routes backend paths to canned envelope bodies and records every request.

    Set ``responses[path]`` to a JSON body, or to an ``httpx.Response`` for
    status-code scenarios. The structlog context seen by each request is kept
    in ``log_contexts``.
    """

    def __init__(self):
        self.responses: dict[str, Any] = {}
        self.requests: list[httpx.Request] = []
        self.log_contexts: list[dict[str, Any]] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        self.log_contexts.append(structlog.contextvars.get_contextvars())
        path = request.url.path.removeprefix("/api")
        body = self.responses.get(path, {"success": True, "data": []})
        if isinstance(body, httpx.Response):
            return body
        return httpx.Response(200, json=body)

    def set_data(self, path: str, data: list[Any]) -> None:
        self.responses[path] = {"success": True, "data": data}

    def params_for(self, path: str) -> list[dict[str, str]]:
        return [
            dict(r.url.params)
            for r in self.requests
            if r.url.path.removeprefix("/api") == path
        ]

    def client(self, token: str = "test-token") -> BackendClient:
        return BackendClient(
            base_url=BACKEND_URL,
            token=token,
            transport=httpx.MockTransport(self.handler),
        )


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def client(backend: FakeBackend):
    app.dependency_overrides[get_backend_client] = lambda: backend.client()
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def employer_headers() -> dict[str, str]:
    return auth_headers(sub="r1", userType="employer", companyId="co1")


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return auth_headers(sub="admin1", userType="admin", companyId="co1")


@pytest.fixture
def activity() -> Callable[..., dict[str, Any]]:
    """Build a raw camelCase activity record as the backend returns it."""
    counter = iter(range(1, 10_000))

    def build(activity_type: str, user_id: str = "r1", **details: Any) -> dict[str, Any]:
        record = {
            "id": f"log-{next(counter)}",
            "userId": user_id,
            "activityType": activity_type,
            "details": details,
            "createdAt": "2025-01-15T10:00:00Z",
        }
        return record

    return build


@pytest.fixture
def headers_for() -> Callable[..., dict[str, str]]:
    """Authorization headers for arbitrary token claims."""
    return auth_headers
