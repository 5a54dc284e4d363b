"""Tanzu AI Services provider: credential resolution plus an OpenAI-compatible client."""

from .credentials import Credentials, parse_vcap_services, resolve_credentials
from .errors import ConfigurationError, ConstructionError, TanzuError
from .provider import TANZU_DEFAULT_MODEL, TanzuAIServicesProvider

__all__ = [
    "ConfigurationError",
    "ConstructionError",
    "Credentials",
    "TANZU_DEFAULT_MODEL",
    "TanzuAIServicesProvider",
    "TanzuError",
    "parse_vcap_services",
    "resolve_credentials",
]
