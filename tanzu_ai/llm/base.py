# tanzu_ai/llm/base.py
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

JSON = dict[str, Any]
MsgList = list[dict[str, Any]]
ToolList = list[dict[str, Any]] | None


class ModelConfig(BaseModel):
    """The active model plus its sampling settings."""

    model_config = ConfigDict(protected_namespaces=())

    model_name: str
    temperature: float | None = None
    max_tokens: int | None = None
    top_p: float | None = None
    context_limit: int | None = None


class Usage(BaseModel):
    input_tokens: int | None = None
    output_tokens: int | None = None
    total_tokens: int | None = None


class ProviderUsage(BaseModel):
    model: str
    usage: Usage


class ConfigKey(BaseModel):
    name: str
    required: bool = False
    secret: bool = False
    default: str | None = None


class ProviderMetadata(BaseModel):
    """Static description of a provider and the settings it reads."""

    name: str
    display_name: str
    description: str
    default_model: str
    known_models: list[str] = Field(default_factory=list)
    model_doc_link: str = ""
    config_keys: list[ConfigKey] = Field(default_factory=list)
    allows_unlisted_models: bool = False


class ProviderAdapter(ABC):
    """
    Strategy interface for a wire format.
    Concrete adapters produce a request payload and normalize the response.
    """

    def __init__(self, model: ModelConfig):
        self.model = model

    # ---------- interface ----------
    @abstractmethod
    def build_payload(
        self, system: str, messages: MsgList, tools: ToolList, stream: bool = False
    ) -> JSON:
        ...

    @abstractmethod
    def parse_response(self, data: JSON) -> tuple[JSON, ProviderUsage]:
        """
        Normalize a provider response to:
          ({"role": "assistant", "content": str, "tool_calls": list},
           ProviderUsage)
        """
        ...
