"""Per-provider API key storage"""

import logging

from src.models.api_key import ApiKeyStatus, SUPPORTED_PROVIDERS, provider_name
from src.services.backend_client import BackendClient, parse_record

logger = logging.getLogger(__name__)


class SettingsService:
    def __init__(self, client: BackendClient):
        self.client = client

    async def save_api_key(self, token: str, provider: str, api_key: str) -> None:
        """Store a provider key for the organization. The key is never logged."""
        if provider not in SUPPORTED_PROVIDERS:
            raise ValueError(f"Unsupported provider: {provider}")
        if not api_key or not api_key.strip():
            raise ValueError(f"{provider_name(provider)} API Key cannot be empty.")
        await self.client.post(
            "/api/settings/api-key",
            token,
            json={f"{provider}_api_key": api_key.strip()},
            fallback_detail="Failed to save API key",
        )
        logger.info(f"Stored {provider} API key")

    async def get_api_key_status(self, token: str) -> ApiKeyStatus:
        data = await self.client.get(
            "/api/settings/api-key/status",
            token,
            fallback_detail="Failed to fetch API key status",
        )
        return parse_record(ApiKeyStatus, data or {}, "Failed to fetch API key status")
