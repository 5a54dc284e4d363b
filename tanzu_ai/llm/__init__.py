"""Generic OpenAI-compatible chat-completion client."""

from .api_client import ApiClient, ApiKeyHeader, AuthMethod, BearerToken, HttpConfig
from .base import ConfigKey, ModelConfig, ProviderMetadata, ProviderUsage, Usage
from .client import OpenAICompatibleProvider
from .errors import (
    AuthenticationError,
    ProviderConnectionError,
    ProviderError,
    RateLimitExceededError,
    RequestFailedError,
    ServerError,
)

__all__ = [
    "ApiClient",
    "ApiKeyHeader",
    "AuthMethod",
    "AuthenticationError",
    "BearerToken",
    "ConfigKey",
    "HttpConfig",
    "ModelConfig",
    "OpenAICompatibleProvider",
    "ProviderConnectionError",
    "ProviderError",
    "ProviderMetadata",
    "ProviderUsage",
    "RateLimitExceededError",
    "RequestFailedError",
    "ServerError",
    "Usage",
]
