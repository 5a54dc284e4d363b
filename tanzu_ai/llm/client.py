# tanzu_ai/llm/client.py
from __future__ import annotations

import logging
from collections.abc import AsyncGenerator

from .api_client import ApiClient
from .base import JSON, ModelConfig, MsgList, ProviderAdapter, ProviderUsage, ToolList
from .providers.openai_compat import OpenAICompatibleAdapter

logger = logging.getLogger(__name__)


class OpenAICompatibleProvider:
    """
    Thin façade over an ApiClient speaking the Chat Completions format.

    ``path_prefix`` is prepended to every endpoint path; an empty prefix
    means paths are relative to the client's host.
    """

    def __init__(
        self,
        name: str,
        api_client: ApiClient,
        model: ModelConfig,
        path_prefix: str = "",
    ) -> None:
        self.name = name
        self.api_client = api_client
        self.model = model
        self.path_prefix = path_prefix
        self.adapter: ProviderAdapter = OpenAICompatibleAdapter(model)

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    # ---------- public ----------
    def get_model_config(self) -> ModelConfig:
        return self.model

    async def complete(
        self, system: str, messages: MsgList, tools: ToolList = None
    ) -> tuple[JSON, ProviderUsage]:
        payload = self.adapter.build_payload(system, messages, tools)
        r = await self.api_client.post(self._path("chat/completions"), payload)
        message, usage = self.adapter.parse_response(r.json())
        logger.debug(
            f"{self.name} completion: model={usage.model} "
            f"in={usage.usage.input_tokens} out={usage.usage.output_tokens}"
        )
        return message, usage

    async def stream(
        self, system: str, messages: MsgList, tools: ToolList = None
    ) -> AsyncGenerator[JSON]:
        """Yield raw ``chat.completion.chunk`` objects until ``[DONE]``."""
        payload = self.adapter.build_payload(system, messages, tools, stream=True)
        async for chunk in self.api_client.stream_events(
            self._path("chat/completions"), payload
        ):
            yield chunk

    async def fetch_supported_models(self) -> list[str]:
        r = await self.api_client.get(self._path("models"))
        data = r.json().get("data") or []
        return sorted(
            m["id"] for m in data if isinstance(m, dict) and isinstance(m.get("id"), str)
        )

    async def close(self) -> None:
        await self.api_client.close()

    # ---------- helpers ----------
    def _path(self, endpoint: str) -> str:
        return f"{self.path_prefix}{endpoint}"
