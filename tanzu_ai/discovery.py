"""Model discovery for Tanzu AI Services endpoints.

The config URL advertises models together with their capabilities. When it
is missing or unusable, the OpenAI ``/v1/models`` listing is used instead;
that listing carries no capability metadata, so every entry is reported as
chat-capable.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .credentials import Credentials, derive_openai_host
from .llm.api_client import HttpConfig, create_async_client

logger = logging.getLogger(__name__)

CHAT_CAPABILITIES = frozenset({"chat", "tools", "completion"})


class AdvertisedModel(BaseModel):
    name: str
    capabilities: list[str] = Field(default_factory=list)


class ConfigResponse(BaseModel):
    """Body of the config URL endpoint."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    advertised_models: list[AdvertisedModel] = Field(
        default_factory=list, alias="advertisedModels"
    )


async def _from_config_url(
    http: httpx.AsyncClient, config_url: str, headers: dict[str, str]
) -> list[AdvertisedModel]:
    try:
        resp = await http.get(config_url, headers=headers)
    except httpx.HTTPError as e:
        logger.debug(f"Config URL request failed, falling back: {e}")
        return []

    if not resp.is_success:
        logger.debug(f"Config URL returned HTTP {resp.status_code}, falling back")
        return []

    try:
        return ConfigResponse.model_validate_json(resp.content).advertised_models
    except ValidationError as e:
        logger.debug(f"Config URL body could not be parsed, falling back: {e}")
        return []


async def discover_models(
    creds: Credentials,
    http: httpx.AsyncClient | None = None,
    http_config: HttpConfig | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[AdvertisedModel]:
    """List the models available behind ``creds``.

    Args:
        creds: Resolved credentials.
        http: Client to use; a short-lived one is created when omitted.
        http_config: Settings for the short-lived client.
        transport: Optional transport for the short-lived client.

    Raises:
        httpx.HTTPError: If the ``/v1/models`` fallback request fails.
        ValueError: If the fallback response body is not JSON.
    """
    if http is None:
        async with create_async_client(
            http_config or HttpConfig(), transport=transport
        ) as client:
            return await discover_models(creds, client)

    headers = {"Authorization": f"Bearer {creds.api_key}"}

    if creds.config_url:
        models = await _from_config_url(http, creds.config_url, headers)
        if models:
            return models

    models_url = f"{derive_openai_host(creds.endpoint_base)}/v1/models"
    resp = await http.get(models_url, headers=headers)
    resp.raise_for_status()

    body = resp.json()
    data = body.get("data") if isinstance(body, dict) else None
    if not isinstance(data, list):
        return []
    return [
        AdvertisedModel(name=m["id"], capabilities=["CHAT"])
        for m in data
        if isinstance(m, dict) and isinstance(m.get("id"), str)
    ]


def filter_chat_models(models: Iterable[AdvertisedModel]) -> set[str]:
    """Names of models with a chat, tools or completion capability."""
    return {
        m.name
        for m in models
        if any(c.lower() in CHAT_CAPABILITIES for c in m.capabilities)
    }
