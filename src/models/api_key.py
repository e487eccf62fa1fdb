"""Per-provider API key presence"""

from typing import Dict

from .base import BackendRecord

SUPPORTED_PROVIDERS = ("openai",)

PROVIDER_NAMES = {"openai": "OpenAI", "anthropic": "Anthropic"}


def provider_name(provider: str) -> str:
    """Display name of a provider; unknown ones are title-cased from their key."""
    return PROVIDER_NAMES.get(provider, provider.replace("_", " ").title())


class ApiKeyStatus(BackendRecord):
    """Which providers have a key stored for the organization.

    Only presence is ever reported, never the key itself.
    """

    openai: bool = False

    def configured(self) -> Dict[str, bool]:
        status = {provider: bool(getattr(self, provider, False)) for provider in SUPPORTED_PROVIDERS}
        for provider, value in (self.model_extra or {}).items():
            if isinstance(value, bool):
                status[provider] = value
        return status
