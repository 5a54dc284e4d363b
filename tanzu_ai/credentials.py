"""
Credential resolution for Tanzu AI Services.

Credentials come from one of two places, first success wins:

1. Explicit configuration: ``TANZU_AI_ENDPOINT`` + ``TANZU_AI_API_KEY``
   (with optional ``TANZU_AI_CONFIG_URL`` / ``TANZU_AI_MODEL_NAME``).
2. A ``genai`` service binding in ``VCAP_SERVICES``, optionally selected
   by ``TANZU_AI_BINDING_NAME``.

Binding credentials come in two shapes, told apart by structure only:

- Endpoint block (multi-model, and single-model since 10.3)::

    {"endpoint": {"api_base": ..., "api_key": ..., "config_url": ...},
     "model_name": ...}

- Legacy flat single-model, whose ``api_base`` ends in ``/openai``::

    {"api_base": ".../openai", "api_key": ..., "model_name": ...}

Anything wrong with the catalog or a binding means "no credentials from
this source", never an exception.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any

from .config import ConfigProvider
from .errors import ConfigurationError

logger = logging.getLogger(__name__)

ENDPOINT_KEY = "TANZU_AI_ENDPOINT"
API_KEY_KEY = "TANZU_AI_API_KEY"
CONFIG_URL_KEY = "TANZU_AI_CONFIG_URL"
MODEL_NAME_KEY = "TANZU_AI_MODEL_NAME"
VCAP_SERVICES_KEY = "VCAP_SERVICES"
BINDING_NAME_KEY = "TANZU_AI_BINDING_NAME"

GENAI_SERVICE_KEY = "genai"
OPENAI_SUFFIX = "/openai"


@dataclass(frozen=True)
class Credentials:
    """Canonical connection details for one Tanzu AI Services endpoint."""

    endpoint_base: str
    api_key: str = field(repr=False)
    config_url: str | None = None
    model_name: str | None = None


# ---------- binding formats ----------

@dataclass(frozen=True)
class EndpointBinding:
    api_base: str
    api_key: str = field(repr=False)
    config_url: str | None = None
    model_name: str | None = None


@dataclass(frozen=True)
class LegacyBinding:
    api_base: str
    api_key: str = field(repr=False)
    model_name: str | None = None


@dataclass(frozen=True)
class UnrecognizedBinding:
    reason: str


BindingFormat = EndpointBinding | LegacyBinding | UnrecognizedBinding


def _str_field(obj: Any, key: str) -> str | None:
    value = obj.get(key) if isinstance(obj, dict) else None
    return value if isinstance(value, str) else None


def detect_binding_format(creds: Any) -> BindingFormat:
    """Classify a binding's ``credentials`` object.

    The presence of an ``endpoint`` key selects the endpoint-block format
    even when its fields are unusable; the legacy format is only tried when
    there is no ``endpoint`` key at all.
    """
    if not isinstance(creds, dict):
        return UnrecognizedBinding("credentials is not an object")

    model_name = _str_field(creds, "model_name")

    if "endpoint" in creds:
        endpoint = creds["endpoint"]
        api_base = _str_field(endpoint, "api_base")
        api_key = _str_field(endpoint, "api_key")
        if api_base is None or api_key is None:
            return UnrecognizedBinding("endpoint block lacks api_base or api_key")
        return EndpointBinding(
            api_base=api_base,
            api_key=api_key,
            config_url=_str_field(endpoint, "config_url"),
            model_name=model_name,
        )

    api_base = _str_field(creds, "api_base")
    api_key = _str_field(creds, "api_key")
    if api_base is None or api_key is None:
        return UnrecognizedBinding("no endpoint block and no top-level api_base/api_key")
    return LegacyBinding(api_base=api_base, api_key=api_key, model_name=model_name)


def parse_binding_credentials(creds: Any) -> Credentials | None:
    """Build Credentials from one binding's ``credentials`` object."""
    binding = detect_binding_format(creds)

    if isinstance(binding, EndpointBinding):
        return Credentials(
            endpoint_base=binding.api_base,
            api_key=binding.api_key,
            config_url=binding.config_url,
            model_name=binding.model_name,
        )
    if isinstance(binding, LegacyBinding):
        return Credentials(
            endpoint_base=strip_openai_suffix(binding.api_base),
            api_key=binding.api_key,
            config_url=None,
            model_name=binding.model_name,
        )

    logger.debug(f"Ignoring genai binding: {binding.reason}")
    return None


# ---------- service catalog ----------

def parse_vcap_services(
    vcap_json: str, binding_name: str | None = None
) -> Credentials | None:
    """Extract Credentials from a ``VCAP_SERVICES`` document.

    Args:
        vcap_json: Raw JSON text of the service catalog.
        binding_name: Select the ``genai`` binding with this ``name``;
            when None the first binding is used.

    Returns:
        Credentials, or None if the document is malformed, has no usable
        ``genai`` binding, or no binding matches ``binding_name``.
    """
    try:
        vcap = json.loads(vcap_json)
    except (ValueError, TypeError, RecursionError):
        logger.debug("VCAP_SERVICES is not valid JSON")
        return None

    bindings = vcap.get(GENAI_SERVICE_KEY) if isinstance(vcap, dict) else None
    if not isinstance(bindings, list) or not bindings:
        return None

    if binding_name is not None:
        binding = next(
            (
                b
                for b in bindings
                if isinstance(b, dict) and b.get("name") == binding_name
            ),
            None,
        )
        if binding is None:
            logger.debug(f"No genai binding named '{binding_name}'")
            return None
    else:
        binding = bindings[0]

    creds = binding.get("credentials") if isinstance(binding, dict) else None
    if not isinstance(creds, dict):
        return None
    return parse_binding_credentials(creds)


# ---------- resolution ----------

def resolve_credentials(config: ConfigProvider) -> Credentials:
    """Resolve credentials from explicit configuration or VCAP_SERVICES.

    Raises:
        ConfigurationError: If neither source yields credentials.
    """
    endpoint = config.get_param(ENDPOINT_KEY)
    api_key = config.get_secret(API_KEY_KEY)

    if endpoint is not None and api_key is not None:
        logger.info(f"Using Tanzu AI credentials from {ENDPOINT_KEY}")
        return Credentials(
            endpoint_base=endpoint,
            api_key=api_key,
            config_url=config.get_param(CONFIG_URL_KEY),
            model_name=config.get_param(MODEL_NAME_KEY),
        )

    vcap = config.get_env(VCAP_SERVICES_KEY)
    if vcap is not None:
        creds = parse_vcap_services(vcap, config.get_env(BINDING_NAME_KEY))
        if creds is not None:
            logger.info(
                f"Using Tanzu AI credentials from {VCAP_SERVICES_KEY} "
                f"({creds.endpoint_base})"
            )
            return creds

    raise ConfigurationError(
        f"Tanzu AI Services credentials not found. Set {ENDPOINT_KEY} and "
        f"{API_KEY_KEY}, or run on Cloud Foundry with a bound "
        f"{GENAI_SERVICE_KEY} service instance."
    )


# ---------- URL helpers ----------

def strip_openai_suffix(api_base: str) -> str:
    """Strip trailing slashes, then any trailing ``/openai`` segments."""
    base = api_base.rstrip("/")
    while base.endswith(OPENAI_SUFFIX):
        base = base[: -len(OPENAI_SUFFIX)]
    return base


def derive_openai_host(endpoint_base: str) -> str:
    """The OpenAI-compatible API root for an endpoint base."""
    return f"{endpoint_base.rstrip('/')}{OPENAI_SUFFIX}"
