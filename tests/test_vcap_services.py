import json

import pytest

from tanzu_ai.credentials import parse_vcap_services


def test_first_binding_is_used_without_override(vcap_json):
    creds = parse_vcap_services(vcap_json)

    assert creds is not None
    assert creds.endpoint_base == "https://genai-proxy.sys.example.com/all-models-9afff1f"
    assert creds.api_key == "eyJhbGciOiJIUzI1NiJ9.vcap"
    assert creds.config_url is not None
    assert creds.model_name is None


def test_binding_name_override_selects_matching_binding(vcap_json):
    creds = parse_vcap_services(vcap_json, binding_name="llama")

    assert creds is not None
    assert creds.endpoint_base == "https://genai-proxy.sys.example.com/some-guid"
    assert creds.model_name == "llama3:8b"
    assert creds.config_url is None


def test_binding_name_override_without_match_yields_nothing(vcap_json):
    assert parse_vcap_services(vcap_json, binding_name="missing") is None


def test_override_skips_bindings_without_name(legacy_binding):
    vcap = json.dumps({"genai": [{"credentials": {}}, "junk", legacy_binding]})
    creds = parse_vcap_services(vcap, binding_name="llama")
    assert creds is not None
    assert creds.model_name == "llama3:8b"


def test_no_genai_key():
    vcap = json.dumps({"mysql": [{"credentials": {"uri": "mysql://localhost"}}]})
    assert parse_vcap_services(vcap) is None


def test_empty_genai_array():
    assert parse_vcap_services(json.dumps({"genai": []})) is None


@pytest.mark.parametrize(
    "raw",
    [
        "not json",
        "",
        "{",
        "[]",
        '"genai"',
        "null",
        '{"genai": {"name": "x"}}',
        pytest.param('{"genai": [], "n": ' + "1" * 5000 + "}", id="huge-int"),
        pytest.param("[" * 100000, id="deep-nesting"),
    ],
)
def test_malformed_catalog_yields_nothing(raw):
    assert parse_vcap_services(raw) is None


def test_binding_without_credentials():
    vcap = json.dumps({"genai": [{"name": "all-models"}]})
    assert parse_vcap_services(vcap) is None


def test_first_binding_unusable_does_not_try_the_next(legacy_binding):
    vcap = json.dumps({"genai": [{"name": "broken", "credentials": {}}, legacy_binding]})
    assert parse_vcap_services(vcap) is None
