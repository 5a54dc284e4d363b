import json

import pytest

# --- Test doubles ------------------------------------------------------------


class FakeConfig:
    """In-memory ConfigProvider; nothing touches the real environment."""

    def __init__(self, params=None, secrets=None, env=None):
        self.params = dict(params or {})
        self.secrets = dict(secrets or {})
        self.env = dict(env or {})

    def get_param(self, key: str) -> str | None:
        return self.params.get(key)

    def get_secret(self, key: str) -> str | None:
        return self.secrets.get(key)

    def get_env(self, key: str) -> str | None:
        return self.env.get(key)


# --- Fixtures ----------------------------------------------------------------


@pytest.fixture
def multi_model_binding():
    return {
        "binding_guid": "162e78b4-408b-4bdd-8df3-0ae1e4d6d13b",
        "binding_name": None,
        "credentials": {
            "endpoint": {
                "api_base": "https://genai-proxy.sys.example.com/all-models-9afff1f",
                "api_key": "eyJhbGciOiJIUzI1NiJ9.vcap",
                "config_url": "https://genai-proxy.sys.example.com/all-models-9afff1f/config/v1/endpoint",
                "name": "all-models-9afff1f",
            }
        },
        "instance_guid": "5008a1ec-c406-4ee8-8f9d-56c723af2f1f",
        "instance_name": "all-models",
        "label": "genai",
        "name": "all-models",
        "plan": "all-models",
        "tags": ["genai", "llm"],
    }


@pytest.fixture
def legacy_binding():
    return {
        "label": "genai",
        "name": "llama",
        "plan": "llama3-8b",
        "credentials": {
            "api_base": "https://genai-proxy.sys.example.com/some-guid/openai",
            "api_key": "eyJhbGciOiJIUzI1NiJ9.deprecated",
            "model_name": "llama3:8b",
            "model_capabilities": ["chat"],
            "wire_format": "openai",
        },
    }


@pytest.fixture
def vcap_json(multi_model_binding, legacy_binding):
    return json.dumps({"genai": [multi_model_binding, legacy_binding]})
