"""HTTP client for the support backend API"""

from typing import Any, Dict, List, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from src.config.settings import get_settings
from src.services.errors import BackendError
from src.utils.logger import LoggerMixin, get_logger
from src.utils.performance import measure_time

settings = get_settings()
logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def error_detail(response: httpx.Response, fallback: str) -> str:
    """Pull the user-facing message out of an error response.

    FastAPI backends answer ``{"detail": "..."}``, or a list of validation
    errors under ``detail``; anything else falls back to ``fallback``.
    """
    try:
        body = response.json()
    except ValueError:
        return fallback
    if not isinstance(body, dict):
        return fallback
    detail = body.get("detail")
    if isinstance(detail, str) and detail:
        return detail
    if isinstance(detail, list):
        messages = [item.get("msg") for item in detail if isinstance(item, dict) and item.get("msg")]
        if messages:
            return "; ".join(messages)
    return fallback


class BackendClient(LoggerMixin):
    """Thin async wrapper around the backend's ``/api`` endpoints.

    Every call is authenticated with the agent's bearer token and timed under
    ``backend.<METHOD> <path template>``.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.backend_url).rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout if timeout is not None else settings.request_timeout,
            transport=transport,
        )

    async def request(
        self,
        method: str,
        path: str,
        token: str,
        *,
        path_params: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
        fallback_detail: str = "Request failed",
    ) -> Any:
        url = path.format(**path_params) if path_params else path
        operation = f"backend.{method} {path}"

        try:
            async with measure_time(operation):
                response = await self._client.request(
                    method,
                    url,
                    params=params,
                    json=json,
                    headers={"Authorization": f"Bearer {token}"},
                )
                if response.is_error:
                    raise BackendError(error_detail(response, fallback_detail), response.status_code)
        except httpx.HTTPError as e:
            self.logger.error("Backend unreachable", method=method, url=url, error=str(e))
            raise BackendError(f"{fallback_detail.rstrip('.')}: backend unavailable", 503) from e
        except BackendError as e:
            self.logger.warning(
                "Backend request failed",
                method=method,
                url=url,
                status_code=e.status_code,
                detail=e.message,
            )
            raise

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return None

    async def get(self, path: str, token: str, **kwargs: Any) -> Any:
        return await self.request("GET", path, token, **kwargs)

    async def post(self, path: str, token: str, **kwargs: Any) -> Any:
        return await self.request("POST", path, token, **kwargs)

    async def delete(self, path: str, token: str, **kwargs: Any) -> Any:
        return await self.request("DELETE", path, token, **kwargs)

    async def close(self) -> None:
        await self._client.aclose()


def parse_record(model: Type[ModelT], data: Any, fallback_detail: str) -> ModelT:
    """Validate one backend payload; a body that does not fit the model is a 502."""
    try:
        return model.model_validate(data)
    except ValidationError as e:
        logger.warning(
            "Unexpected backend payload",
            model=model.__name__,
            errors=e.error_count(),
            first_error=e.errors()[0]["msg"] if e.errors() else None,
        )
        raise BackendError(fallback_detail, 502) from e


def parse_records(model: Type[ModelT], data: Any, fallback_detail: str) -> List[ModelT]:
    """Validate a list payload; an empty body is an empty list."""
    if data is None:
        return []
    if not isinstance(data, list):
        logger.warning("Expected a list from backend", model=model.__name__, got=type(data).__name__)
        raise BackendError(fallback_detail, 502)
    return [parse_record(model, item, fallback_detail) for item in data]
