"""Configuration management for the Tanzu AI Services provider."""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Any, Protocol

import yaml
from dotenv import load_dotenv

from .llm.api_client import HttpConfig, create_http_config_from_dict
from .llm.base import ModelConfig

DEFAULT_CONFIG_PATH = os.path.join(os.path.dirname(__file__), "config.yaml")


class ConfigProvider(Protocol):
    """Read-only view of process configuration used by the resolver."""

    def get_param(self, key: str) -> str | None: ...
    def get_secret(self, key: str) -> str | None: ...
    def get_env(self, key: str) -> str | None: ...


class Configuration:
    """Manages configuration and environment variables for the provider.

    Parameters and secrets are looked up in the environment first and then
    in the ``params`` / ``secrets`` sections of the YAML file. Empty values
    count as unset.
    """

    def __init__(
        self,
        config_path: str | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        """Initialize configuration from YAML and environment variables.

        Args:
            config_path: YAML file to load; defaults to ``config.yaml``
                beside this module. A missing file yields empty settings.
            environ: Environment mapping to read instead of ``os.environ``.
                When given, ``.env`` is not loaded.
        """
        if environ is None:
            self.load_env()
            environ = os.environ
        self._environ = environ
        self._config = self._load_yaml_config(config_path or DEFAULT_CONFIG_PATH)

    @staticmethod
    def load_env() -> None:
        """Load environment variables from .env file."""
        load_dotenv()

    @staticmethod
    def _load_yaml_config(path: str) -> dict[str, Any]:
        """Load configuration from YAML file."""
        if not os.path.exists(path):
            return {}
        with open(path) as file:
            data = yaml.safe_load(file)
        return data if isinstance(data, dict) else {}

    def _section(self, name: str) -> dict[str, Any]:
        section = self._config.get(name)
        return section if isinstance(section, dict) else {}

    @staticmethod
    def _clean(value: Any) -> str | None:
        if value is None:
            return None
        value = str(value)
        return value if value.strip() else None

    # ---------- ConfigProvider ----------
    def get_env(self, key: str) -> str | None:
        """Get a raw environment variable, or None if unset or empty."""
        return self._clean(self._environ.get(key))

    def get_param(self, key: str) -> str | None:
        """Get a non-secret parameter from the environment or YAML ``params``."""
        value = self.get_env(key)
        if value is not None:
            return value
        return self._clean(self._section("params").get(key))

    def get_secret(self, key: str) -> str | None:
        """Get a secret from the environment or YAML ``secrets``."""
        value = self.get_env(key)
        if value is not None:
            return value
        return self._clean(self._section("secrets").get(key))

    # ---------- sections ----------
    def get_config_dict(self) -> dict[str, Any]:
        """Get the full configuration dictionary.

        Returns:
            The complete configuration dictionary.
        """
        return self._config

    def get_logging_config(self) -> dict[str, Any]:
        """Get logging configuration from YAML.

        Returns:
            Logging configuration dictionary.
        """
        return self._section("logging")

    def get_http_config(self) -> HttpConfig:
        """Get HTTP client settings from the YAML ``http`` section."""
        return create_http_config_from_dict(self._config)

    def get_model_config(self, default_model: str) -> ModelConfig:
        """Get the active model configuration.

        The model name comes from YAML ``provider.model``, falling back to
        ``default_model``. The remaining ``provider`` keys are sampling
        settings.
        """
        provider = dict(self._section("provider"))
        model_name = provider.pop("model", None) or default_model
        return ModelConfig(model_name=model_name, **provider)
