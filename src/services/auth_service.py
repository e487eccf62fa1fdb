"""
Client for the auth service.

Sessions come from the GoTrue endpoints under ``/auth/v1``; the ``profiles``
table is read through PostgREST under ``/rest/v1``. Both require the project's
anon key in the ``apikey`` header.
"""

from typing import Any, Dict, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from src.config.settings import get_settings
from src.models.auth import AuthSession, AuthUser, UserProfile
from src.services.errors import AuthError
from src.utils.logger import LoggerMixin
from src.utils.performance import monitor_performance

settings = get_settings()

ModelT = TypeVar("ModelT", bound=BaseModel)

# PostgREST answers a single-object request that matched no row with this code
NO_ROW_CODE = "PGRST116"
SINGLE_OBJECT = "application/vnd.pgrst.object+json"


def _auth_error_message(response: httpx.Response, fallback: str) -> str:
    try:
        body = response.json()
    except ValueError:
        return fallback
    if isinstance(body, dict):
        for key in ("error_description", "msg", "message", "error"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    return fallback


class AuthService(LoggerMixin):
    """Session and profile lookups against the auth service"""

    def __init__(
        self,
        base_url: Optional[str] = None,
        anon_key: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.auth_url).rstrip("/")
        self.anon_key = anon_key if anon_key is not None else settings.auth_anon_key
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout if timeout is not None else settings.request_timeout,
            transport=transport,
        )

    def _headers(self, access_token: Optional[str] = None) -> Dict[str, str]:
        headers = {}
        if self.anon_key:
            headers["apikey"] = self.anon_key
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"
        return headers

    async def _send(
        self,
        method: str,
        path: str,
        fallback: str,
        access_token: Optional[str] = None,
        **kwargs: Any,
    ) -> httpx.Response:
        headers = self._headers(access_token)
        headers.update(kwargs.pop("headers", {}))
        try:
            return await self._client.request(method, path, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            self.logger.error("Auth service unreachable", path=path, error=str(e))
            raise AuthError(f"{fallback}: auth service unavailable", 503) from e

    def _raise_for_status(self, response: httpx.Response, fallback: str) -> None:
        if response.is_error:
            raise AuthError(_auth_error_message(response, fallback), response.status_code)

    def _parse(self, model: Type[ModelT], response: httpx.Response, fallback: str) -> ModelT:
        try:
            return model.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            self.logger.warning("Unexpected auth service payload", model=model.__name__, error=type(e).__name__)
            raise AuthError(fallback, 502) from e

    @monitor_performance("auth.sign_in")
    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        response = await self._send(
            "POST",
            "/auth/v1/token",
            "Sign in failed",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        self._raise_for_status(response, "Sign in failed")
        session = self._parse(AuthSession, response, "Sign in failed")
        self.logger.info("Signed in", user_id=session.user.id)
        return session

    @monitor_performance("auth.sign_up")
    async def sign_up(
        self, email: str, password: str, full_name: Optional[str] = None
    ) -> Optional[AuthSession]:
        """Register a user. Returns None while email confirmation is pending."""
        payload: Dict[str, Any] = {"email": email, "password": password}
        if full_name:
            payload["data"] = {"full_name": full_name}
        response = await self._send("POST", "/auth/v1/signup", "Sign up failed", json=payload)
        self._raise_for_status(response, "Sign up failed")
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and not body.get("access_token"):
            return None
        return self._parse(AuthSession, response, "Sign up failed")

    @monitor_performance("auth.refresh")
    async def refresh_session(self, refresh_token: str) -> AuthSession:
        response = await self._send(
            "POST",
            "/auth/v1/token",
            "Session refresh failed",
            params={"grant_type": "refresh_token"},
            json={"refresh_token": refresh_token},
        )
        self._raise_for_status(response, "Session refresh failed")
        return self._parse(AuthSession, response, "Session refresh failed")

    @monitor_performance("auth.get_user")
    async def get_user(self, access_token: str) -> AuthUser:
        response = await self._send("GET", "/auth/v1/user", "Session lookup failed", access_token)
        self._raise_for_status(response, "Session lookup failed")
        return self._parse(AuthUser, response, "Session lookup failed")

    @monitor_performance("auth.sign_out")
    async def sign_out(self, access_token: str) -> None:
        response = await self._send("POST", "/auth/v1/logout", "Logout failed", access_token)
        # an already expired token is as good as signed out
        if response.status_code == 401:
            return
        self._raise_for_status(response, "Logout failed")

    @monitor_performance("auth.get_profile")
    async def get_profile(
        self,
        access_token: str,
        user_id: str,
        columns: str = "id,full_name,organization_id",
    ) -> Optional[UserProfile]:
        """Fetch one profile row; None when the user has no profile yet."""
        response = await self._send(
            "GET",
            "/rest/v1/profiles",
            "Failed to fetch user profile",
            access_token,
            params={"id": f"eq.{user_id}", "select": columns},
            headers={"Accept": SINGLE_OBJECT},
        )
        if response.status_code == 406:
            return None
        if response.is_error:
            try:
                code = response.json().get("code")
            except (ValueError, AttributeError):
                code = None
            if code == NO_ROW_CODE:
                return None
            raise AuthError(
                _auth_error_message(response, "Failed to fetch user profile"),
                response.status_code,
            )
        return self._parse(UserProfile, response, "Failed to fetch user profile")

    async def close(self) -> None:
        await self._client.aclose()
