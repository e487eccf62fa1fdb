"""
Shared fixtures: fake auth service and backend API behind httpx.MockTransport.
"""
from typing import Any, Callable, Dict, List, Optional, Tuple

import httpx
import pytest
from fastapi.testclient import TestClient

from src.api.dependencies import get_auth_service, get_backend_client
from src.api.main import app
from src.services import AuthService, BackendClient

USER_ID = "6f1c2a52-3f7e-4c1a-9d55-0b8d7a1e2f10"
ORG_ID = "a2b9c0d1-1111-4e2f-8a3b-123456789abc"
ACCESS_TOKEN = "access-token-1"
REFRESH_TOKEN = "refresh-token-1"
USER_EMAIL = "jane.doe@example.com"

Handler = Callable[[httpx.Request], httpx.Response]


class FakeService:
    """Routes requests made through an httpx.MockTransport to canned handlers."""

    def __init__(self):
        self.routes: Dict[Tuple[str, str], Handler] = {}
        self.calls: List[httpx.Request] = []

    def add(
        self,
        method: str,
        path: str,
        status_code: int = 200,
        json: Any = None,
        handler: Optional[Handler] = None,
    ) -> None:
        if handler is None:
            def handler(request, status_code=status_code, json=json):
                if json is None:
                    return httpx.Response(status_code)
                return httpx.Response(status_code, json=json)
        self.routes[(method, path)] = handler

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"detail": f"No fake route for {request.method} {request.url.path}"})
        return handler(request)

    def calls_to(self, method: str, path: str) -> List[httpx.Request]:
        return [c for c in self.calls if c.method == method and c.url.path == path]

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


def session_payload(access_token: str = ACCESS_TOKEN, refresh_token: str = REFRESH_TOKEN) -> Dict[str, Any]:
    return {
        "access_token": access_token,
        "refresh_token": refresh_token,
        "expires_at": 1900000000,
        "token_type": "bearer",
        "user": {"id": USER_ID, "email": USER_EMAIL},
    }


def make_query(**overrides: Any) -> Dict[str, Any]:
    query = {
        "id": "q-1",
        "organization_id": ORG_ID,
        "channel": "email",
        "sender_identifier": "alice.smith@customer.io",
        "sender_name": "Alice Smith",
        "subject": "Refund request",
        "body_text": "I would like a refund for order 42.",
        "status": "new",
        "received_at": "2026-10-12T09:30:00Z",
    }
    query.update(overrides)
    return query


def make_message(**overrides: Any) -> Dict[str, Any]:
    message = {
        "id": "m-1",
        "customer_query_id": "q-1",
        "organization_id": ORG_ID,
        "sender_type": "customer",
        "sender_identifier": "alice.smith@customer.io",
        "body_text": "I would like a refund for order 42.",
        "created_at": "2026-10-12T09:30:00Z",
    }
    message.update(overrides)
    return message


@pytest.fixture
def auth_api():
    """Auth service fake with a valid session and an onboarded profile."""
    fake = FakeService()
    fake.add("POST", "/auth/v1/token", json=session_payload())
    fake.add("GET", "/auth/v1/user", json={"id": USER_ID, "email": USER_EMAIL})
    fake.add("POST", "/auth/v1/logout", status_code=204)
    fake.add(
        "GET",
        "/rest/v1/profiles",
        json={"id": USER_ID, "full_name": "Jane Doe", "organization_id": ORG_ID},
    )
    return fake


@pytest.fixture
def backend_api():
    return FakeService()


@pytest.fixture
def auth_service(auth_api):
    return AuthService(base_url="http://auth.test", anon_key="anon-key", transport=auth_api.transport())


@pytest.fixture
def backend_client(backend_api):
    return BackendClient(base_url="http://backend.test", transport=backend_api.transport())


@pytest.fixture
def client(auth_service, backend_client):
    """Test client with both collaborators replaced by fakes."""
    app.dependency_overrides[get_auth_service] = lambda: auth_service
    app.dependency_overrides[get_backend_client] = lambda: backend_client
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def signed_in(client):
    """Client holding a session cookie for Jane Doe."""
    response = client.post(
        "/login",
        data={"email": USER_EMAIL, "password": "secret"},
        follow_redirects=False,
    )
    assert response.status_code == 303
    return client
