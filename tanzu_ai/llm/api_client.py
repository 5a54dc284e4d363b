"""
Authenticated HTTP client for OpenAI-compatible gateways.

This module provides the transport the chat-completion client is built on:
- A host-bound httpx.AsyncClient with connection pooling
- Pluggable authentication (bearer token or custom API-key header)
- Construction-time validation of the host URL
- Normalized error mapping for non-success responses and transport failures

Retries and backoff are deliberately absent: a failed request surfaces
immediately as a ProviderError.
"""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncGenerator
from dataclasses import dataclass
from typing import Any

import httpx
from pydantic import BaseModel

from ..errors import ConstructionError
from .errors import ProviderConnectionError, map_status_error

logger = logging.getLogger(__name__)


class HttpConfig(BaseModel):
    """Connection settings for the gateway client."""

    timeout: float = 600.0
    connect_timeout: float = 30.0
    max_keepalive_connections: int = 20
    max_connections: int = 100
    keepalive_expiry: float = 30.0


@dataclass(frozen=True)
class BearerToken:
    token: str

    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}

    def __repr__(self) -> str:
        return "BearerToken(token='***')"


@dataclass(frozen=True)
class ApiKeyHeader:
    name: str
    key: str

    def headers(self) -> dict[str, str]:
        return {self.name: self.key}

    def __repr__(self) -> str:
        return f"ApiKeyHeader(name={self.name!r}, key='***')"


AuthMethod = BearerToken | ApiKeyHeader


def validate_host(host: str) -> str:
    """Return ``host`` without a trailing slash, or raise ConstructionError."""
    try:
        url = httpx.URL(host)
    except (httpx.InvalidURL, TypeError) as e:
        raise ConstructionError(f"Invalid API host '{host}': {e}") from e

    if url.scheme not in ("http", "https") or not url.host:
        raise ConstructionError(
            f"Invalid API host '{host}': expected an absolute http(s) URL"
        )
    return host.rstrip("/")


def create_async_client(config: HttpConfig, **kwargs: Any) -> httpx.AsyncClient:
    """An httpx.AsyncClient with timeouts and pool limits from ``config``."""
    return httpx.AsyncClient(
        timeout=httpx.Timeout(config.timeout, connect=config.connect_timeout),
        limits=httpx.Limits(
            max_keepalive_connections=config.max_keepalive_connections,
            max_connections=config.max_connections,
            keepalive_expiry=config.keepalive_expiry,
        ),
        **kwargs,
    )


class ApiClient:
    """
    HTTP client bound to one API host with fixed authentication.

    Paths passed to the request methods are resolved relative to the host,
    so a host of ``https://gw/plan/openai`` and a path of
    ``chat/completions`` address ``https://gw/plan/openai/chat/completions``.
    """

    def __init__(
        self,
        host: str,
        auth: AuthMethod,
        config: HttpConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the client.

        Args:
            host: Absolute base URL for all requests
            auth: Authentication applied to every request
            config: Connection settings
            transport: Optional transport override (used by tests)

        Raises:
            ConstructionError: If ``host`` is not an absolute http(s) URL.
        """
        self.host = validate_host(host)
        self.auth = auth
        self.config = config or HttpConfig()

        self.http = create_async_client(
            self.config,
            base_url=self.host,
            headers=auth.headers(),
            transport=transport,
        )

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        if response.is_success:
            return
        try:
            body: Any = response.json()
        except ValueError:
            body = None
        raise map_status_error(response.status_code, body, response.text)

    async def request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """Send a request and raise a ProviderError on failure."""
        try:
            response = await self.http.request(method, path, **kwargs)
        except httpx.TransportError as e:
            logger.warning(f"{method} {path} failed: {e}")
            raise ProviderConnectionError(f"Connection error: {e}") from e

        self._raise_for_status(response)
        return response

    async def get(self, path: str, **kwargs: Any) -> httpx.Response:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, payload: dict[str, Any]) -> httpx.Response:
        return await self.request("POST", path, json=payload)

    async def stream_events(
        self, path: str, payload: dict[str, Any]
    ) -> AsyncGenerator[dict[str, Any]]:
        """POST ``payload`` and yield decoded server-sent ``data:`` events."""
        try:
            async with self.http.stream("POST", path, json=payload) as response:
                if not response.is_success:
                    await response.aread()
                    self._raise_for_status(response)

                async for line in response.aiter_lines():
                    if not line.startswith("data: "):
                        continue
                    data = line[6:]
                    if data.strip() == "[DONE]":
                        return
                    yield json.loads(data)
        except httpx.TransportError as e:
            logger.warning(f"Streaming POST {path} failed: {e}")
            raise ProviderConnectionError(f"Connection error: {e}") from e

    async def close(self) -> None:
        """Close the HTTP client and clean up resources."""
        await self.http.aclose()

    async def __aenter__(self) -> ApiClient:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()


def create_http_config_from_dict(config_dict: dict[str, Any]) -> HttpConfig:
    """
    Create HttpConfig from a dictionary (e.g., from YAML config).

    Args:
        config_dict: Dictionary that may contain an ``http`` section

    Returns:
        HttpConfig instance with validated settings
    """
    return HttpConfig(**(config_dict.get("http") or {}))
