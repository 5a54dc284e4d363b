# tanzu_ai/llm/providers/openai_compat.py
from __future__ import annotations

import json
import logging
from typing import Any

from ..base import JSON, MsgList, ProviderAdapter, ProviderUsage, ToolList, Usage

logger = logging.getLogger(__name__)


class OpenAICompatibleAdapter(ProviderAdapter):
    """
    Chat Completions wire format. Works unchanged for:
      • api.openai.com
      • Tanzu AI Services ({endpoint}/openai)
      • any gateway that mirrors /chat/completions
    """

    def build_payload(
        self, system: str, messages: MsgList, tools: ToolList, stream: bool = False
    ) -> JSON:
        full_messages: MsgList = []
        if system:
            full_messages.append({"role": "system", "content": system})
        full_messages.extend(messages)

        payload: JSON = {
            "model": self.model.model_name,
            "messages": full_messages,
        }
        if self.model.temperature is not None:
            payload["temperature"] = self.model.temperature
        if self.model.max_tokens is not None:
            payload["max_tokens"] = self.model.max_tokens
        if self.model.top_p is not None:
            payload["top_p"] = self.model.top_p
        if tools:
            payload["tools"] = tools
        if stream:
            payload["stream"] = True
            payload["stream_options"] = {"include_usage": True}
        return payload

    def parse_response(self, data: JSON) -> tuple[JSON, ProviderUsage]:
        choice = (data.get("choices") or [{}])[0]
        raw = choice.get("message") or {}
        message: JSON = {
            "role": raw.get("role", "assistant"),
            "content": raw.get("content") or "",
            "tool_calls": parse_tool_calls(raw.get("tool_calls")),
            "finish_reason": choice.get("finish_reason"),
        }
        return message, ProviderUsage(
            model=data.get("model") or self.model.model_name,
            usage=parse_usage(data.get("usage")),
        )


def parse_usage(raw: Any) -> Usage:
    if not isinstance(raw, dict):
        return Usage()
    return Usage(
        input_tokens=raw.get("prompt_tokens"),
        output_tokens=raw.get("completion_tokens"),
        total_tokens=raw.get("total_tokens"),
    )


def parse_tool_calls(raw: Any) -> list[JSON]:
    """Flatten OpenAI tool calls to {id, name, arguments} with decoded args."""
    calls: list[JSON] = []
    for tc in raw or []:
        fn = tc.get("function") or {}
        args = fn.get("arguments") or "{}"
        try:
            arguments = json.loads(args) if isinstance(args, str) else args
        except json.JSONDecodeError:
            logger.warning(f"Tool call {tc.get('id')} has invalid JSON arguments")
            arguments = {"_raw": args}
        calls.append(
            {"id": tc.get("id", ""), "name": fn.get("name", ""), "arguments": arguments}
        )
    return calls
