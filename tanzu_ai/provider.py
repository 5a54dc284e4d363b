# tanzu_ai/provider.py
from __future__ import annotations

import logging

from .config import ConfigProvider, Configuration
from .credentials import (
    API_KEY_KEY,
    CONFIG_URL_KEY,
    ENDPOINT_KEY,
    MODEL_NAME_KEY,
    Credentials,
    derive_openai_host,
    resolve_credentials,
)
from .llm.api_client import ApiClient, BearerToken, HttpConfig
from .llm.base import ConfigKey, ModelConfig, ProviderMetadata
from .llm.client import OpenAICompatibleProvider

logger = logging.getLogger(__name__)

TANZU_PROVIDER_NAME = "tanzu_ai"
TANZU_DEFAULT_MODEL = "openai/gpt-oss-120b"
TANZU_DOC_URL = (
    "https://techdocs.broadcom.com/us/en/vmware-tanzu/platform/ai-services/10-3/ai/index.html"
)


class TanzuAIServicesProvider:
    """
    LLM access via VMware Tanzu Platform AI Services.

    Resolves credentials, then hands an authenticated client for
    ``{endpoint_base}/openai`` to the generic OpenAI-compatible provider.
    """

    @staticmethod
    def metadata() -> ProviderMetadata:
        return ProviderMetadata(
            name=TANZU_PROVIDER_NAME,
            display_name="Tanzu AI Services",
            description=(
                "LLM access via VMware Tanzu Platform AI Services (OpenAI-compatible)"
            ),
            default_model=TANZU_DEFAULT_MODEL,
            known_models=[TANZU_DEFAULT_MODEL],
            model_doc_link=TANZU_DOC_URL,
            config_keys=[
                ConfigKey(name=API_KEY_KEY, required=True, secret=True),
                ConfigKey(name=ENDPOINT_KEY, required=True),
                ConfigKey(name=CONFIG_URL_KEY),
                ConfigKey(name=MODEL_NAME_KEY),
            ],
            allows_unlisted_models=True,
        )

    @staticmethod
    def from_credentials(
        creds: Credentials,
        model: ModelConfig,
        http_config: HttpConfig | None = None,
    ) -> OpenAICompatibleProvider:
        """Build the provider for already-resolved credentials.

        Raises:
            ConstructionError: If the derived host is not a valid URL.
        """
        host = derive_openai_host(creds.endpoint_base)
        api_client = ApiClient(host, BearerToken(creds.api_key), config=http_config)
        logger.info(f"Tanzu AI provider bound to {host} (model {model.model_name})")

        # no extra prefix; paths are relative to host
        return OpenAICompatibleProvider(TANZU_PROVIDER_NAME, api_client, model, "")

    @classmethod
    async def from_env(
        cls,
        model: ModelConfig,
        config: ConfigProvider | None = None,
        http_config: HttpConfig | None = None,
    ) -> OpenAICompatibleProvider:
        """Resolve credentials from configuration and build the provider.

        Raises:
            ConfigurationError: If no credentials can be resolved.
            ConstructionError: If the derived host is not a valid URL.
        """
        if config is None:
            config = Configuration()
        if http_config is None and isinstance(config, Configuration):
            http_config = config.get_http_config()

        creds = resolve_credentials(config)
        return cls.from_credentials(creds, model, http_config)
