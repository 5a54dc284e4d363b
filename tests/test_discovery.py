import httpx
import pytest

from tanzu_ai.credentials import Credentials
from tanzu_ai.discovery import (
    AdvertisedModel,
    ConfigResponse,
    discover_models,
    filter_chat_models,
)
from tanzu_ai.llm.api_client import HttpConfig

CONFIG_URL = "https://gw.example.com/plan/config/v1/endpoint"
MODELS_URL = "https://gw.example.com/plan/openai/v1/models"

CONFIG_BODY = {
    "name": "all-models-9afff1f",
    "advertisedModels": [
        {"name": "llama3.2:1b", "capabilities": ["CHAT", "TOOLS"]},
        {"name": "mxbai-embed-large", "capabilities": ["EMBEDDING"]},
    ],
}
MODELS_BODY = {
    "object": "list",
    "data": [
        {"id": "openai/gpt-oss-120b", "object": "model"},
        {"id": "qwen3-30b", "object": "model"},
        {"object": "model"},
    ],
}


def _creds(config_url: str | None = CONFIG_URL) -> Credentials:
    return Credentials(
        endpoint_base="https://gw.example.com/plan",
        api_key="jwt",
        config_url=config_url,
    )


class Recorder:
    """MockTransport handler that records requested URLs."""

    def __init__(self, routes):
        self.routes = routes
        self.urls: list[str] = []
        self.auth: list[str | None] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.urls.append(url)
        self.auth.append(request.headers.get("Authorization"))
        route = self.routes.get(url)
        if route is None:
            return httpx.Response(404, json={"error": "not found"})
        if isinstance(route, Exception):
            raise route
        return route


def _client(recorder: Recorder) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(recorder))


# --- Parsing -----------------------------------------------------------------


def test_parse_config_response():
    config = ConfigResponse.model_validate(CONFIG_BODY)

    assert len(config.advertised_models) == 2
    assert config.advertised_models[0].name == "llama3.2:1b"
    assert config.advertised_models[0].capabilities == ["CHAT", "TOOLS"]


def test_config_response_defaults_to_no_models():
    assert ConfigResponse.model_validate({"name": "x"}).advertised_models == []


def test_filter_chat_models():
    models = [
        AdvertisedModel(name="llama3.2:1b", capabilities=["CHAT", "TOOLS"]),
        AdvertisedModel(name="mxbai-embed-large", capabilities=["EMBEDDING"]),
        AdvertisedModel(name="qwen3-30b", capabilities=["chat"]),
        AdvertisedModel(name="legacy", capabilities=["Completion"]),
        AdvertisedModel(name="bare"),
    ]

    assert filter_chat_models(models) == {"llama3.2:1b", "qwen3-30b", "legacy"}


# --- Discovery ---------------------------------------------------------------


@pytest.mark.asyncio
async def test_discovery_uses_config_url():
    rec = Recorder({CONFIG_URL: httpx.Response(200, json=CONFIG_BODY)})
    async with _client(rec) as http:
        models = await discover_models(_creds(), http)

    assert [m.name for m in models] == ["llama3.2:1b", "mxbai-embed-large"]
    assert rec.urls == [CONFIG_URL]
    assert rec.auth == ["Bearer jwt"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "config_route",
    [
        httpx.Response(503, json={"error": "unavailable"}),
        httpx.Response(200, content=b"<html>oops</html>"),
        httpx.Response(200, json={"advertisedModels": []}),
        httpx.Response(200, json={"advertisedModels": [{"capabilities": []}]}),
        httpx.ConnectError("connection refused"),
    ],
)
async def test_discovery_falls_back_to_models_listing(config_route):
    rec = Recorder(
        {
            CONFIG_URL: config_route,
            MODELS_URL: httpx.Response(200, json=MODELS_BODY),
        }
    )
    async with _client(rec) as http:
        models = await discover_models(_creds(), http)

    assert rec.urls == [CONFIG_URL, MODELS_URL]
    assert models == [
        AdvertisedModel(name="openai/gpt-oss-120b", capabilities=["CHAT"]),
        AdvertisedModel(name="qwen3-30b", capabilities=["CHAT"]),
    ]
    assert filter_chat_models(models) == {"openai/gpt-oss-120b", "qwen3-30b"}


@pytest.mark.asyncio
async def test_discovery_without_config_url_goes_straight_to_listing():
    rec = Recorder({MODELS_URL: httpx.Response(200, json=MODELS_BODY)})
    async with _client(rec) as http:
        models = await discover_models(_creds(config_url=None), http)

    assert rec.urls == [MODELS_URL]
    assert rec.auth == ["Bearer jwt"]
    assert len(models) == 2


@pytest.mark.asyncio
async def test_listing_without_data_is_empty():
    rec = Recorder({MODELS_URL: httpx.Response(200, json={"object": "list"})})
    async with _client(rec) as http:
        assert await discover_models(_creds(config_url=None), http) == []


@pytest.mark.asyncio
async def test_listing_failure_propagates():
    rec = Recorder({})
    async with _client(rec) as http:
        with pytest.raises(httpx.HTTPStatusError):
            await discover_models(_creds(config_url=None), http)


@pytest.mark.asyncio
async def test_owned_client_takes_timeouts_from_http_config():
    timeouts: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        timeouts.append(request.extensions["timeout"])
        return httpx.Response(200, json=MODELS_BODY)

    models = await discover_models(
        _creds(config_url=None),
        http_config=HttpConfig(timeout=7.5, connect_timeout=2.0),
        transport=httpx.MockTransport(handler),
    )

    assert len(models) == 2
    assert timeouts[0]["read"] == 7.5
    assert timeouts[0]["connect"] == 2.0
