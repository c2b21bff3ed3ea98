"""Tests for request execution and response shaping (``keycloak_admin_sdk.request``)."""

import json

import pytest
import responses
from requests.exceptions import ConnectTimeout

from conftest import REALM_URL
from keycloak_admin_sdk.exceptions import (
    KeycloakNetworkError,
    KeycloakParseError,
    KeycloakRequestError,
)
from keycloak_admin_sdk.keycloak_models import UserRepresentation
from keycloak_admin_sdk.request import (
    Empty,
    ExtractedId,
    JsonValue,
    RawText,
    extracted_id,
    json_or,
    make_request,
)

USERS_URL = f"{REALM_URL}/users"

# =============================================================================
# Request Construction Tests
# =============================================================================


@responses.activate
def test_sends_bearer_token_and_json_content_type():
    responses.get(USERS_URL, json=[], status=200)

    make_request(USERS_URL, "GET", "token-abc")

    headers = responses.calls[0].request.headers
    assert headers["Authorization"] == "Bearer token-abc"
    assert headers["Content-Type"] == "application/json"


@responses.activate
def test_caller_headers_override_defaults():
    responses.put(f"{USERS_URL}/u1/credentials/c1/userLabel", status=204)

    make_request(
        f"{USERS_URL}/u1/credentials/c1/userLabel",
        "PUT",
        "token-abc",
        "My phone",
        headers={"Content-Type": "text/plain"},
    )

    request = responses.calls[0].request
    assert request.headers["Content-Type"] == "text/plain"
    assert request.body == "My phone"


@responses.activate
def test_model_body_is_serialized_by_alias():
    """Test that models are sent with camelCase keys and without unset fields."""
    responses.post(USERS_URL, status=201, headers={"Location": f"{USERS_URL}/abc123"})

    make_request(USERS_URL, "POST", "t", UserRepresentation(username="alice", first_name="Alice"))

    assert json.loads(responses.calls[0].request.body) == {"username": "alice", "firstName": "Alice"}


@responses.activate
def test_form_body_is_sent_url_encoded():
    url = f"{REALM_URL}/organizations/o1/members/invite-existing-user"
    responses.post(url, status=204)

    make_request(
        url,
        "POST",
        "t",
        {"id": "user-1"},
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )

    assert responses.calls[0].request.body == "id=user-1"


@responses.activate
def test_multipart_upload_lets_requests_set_content_type():
    url = f"{REALM_URL}/identity-provider/import-config"
    responses.post(url, json={"issuer": "https://idp"}, status=200)

    result = make_request(url, "POST", "t", files={"file": ("provider.json", "{}", "application/json")})

    assert result == JsonValue({"issuer": "https://idp"})
    assert responses.calls[0].request.headers["Content-Type"].startswith("multipart/form-data")


# =============================================================================
# Response Shaping Tests
# =============================================================================


@responses.activate
def test_created_with_location_on_whitelisted_collection():
    """Test that a POST to a known collection yields the id from Location."""
    responses.post(USERS_URL, status=201, headers={"Location": f"{USERS_URL}/abc123"})

    result = make_request(USERS_URL, "POST", "t", {"username": "alice"})

    assert result == ExtractedId("abc123")
    assert extracted_id(result) == "abc123"


@responses.activate
def test_created_with_location_on_other_path_is_empty():
    """Test that unrelated 201 responses are not mistaken for creates."""
    url = f"{USERS_URL}/u1/federated-identity/google"
    responses.post(url, status=201, headers={"Location": f"{url}/x1"})

    result = make_request(url, "POST", "t", {"userId": "g-1"})

    assert result == Empty()
    assert extracted_id(result) is None


@responses.activate
def test_created_with_location_on_put_is_empty():
    responses.put(USERS_URL, status=201, headers={"Location": f"{USERS_URL}/abc123"})

    assert make_request(USERS_URL, "PUT", "t") == Empty()


@responses.activate
def test_created_with_json_body_returns_json():
    url = f"{REALM_URL}/groups/g1/children"
    responses.post(url, json={"id": "child-1", "name": "child"}, status=201)

    result = make_request(url, "POST", "t", {"name": "child"})

    assert result == JsonValue({"id": "child-1", "name": "child"})
    assert extracted_id(result) == "child-1"


@pytest.mark.parametrize("method", ["GET", "POST", "PUT", "DELETE"])
@responses.activate
def test_no_content_is_empty(method):
    responses.add(method, USERS_URL, status=204)

    assert make_request(USERS_URL, method, "t") == Empty()


@responses.activate
def test_zero_content_length_is_empty():
    responses.get(USERS_URL, body="", status=200, headers={"Content-Length": "0"}, content_type="application/json")

    assert make_request(USERS_URL, "GET", "t") == Empty()


@responses.activate
def test_json_null_is_empty():
    responses.get(USERS_URL, body="null", status=200, content_type="application/json")

    assert make_request(USERS_URL, "GET", "t") == Empty()


@responses.activate
def test_json_list_is_returned():
    responses.get(USERS_URL, json=[{"id": "u1"}], status=200)

    result = make_request(USERS_URL, "GET", "t")

    assert result == JsonValue([{"id": "u1"}])
    assert json_or(result, []) == [{"id": "u1"}]


@responses.activate
def test_invalid_json_raises_parse_error():
    responses.get(USERS_URL, body="{not json", status=200, content_type="application/json")

    with pytest.raises(KeycloakParseError, match="Failed to parse JSON response"):
        make_request(USERS_URL, "GET", "t")


@responses.activate
def test_plain_text_is_raw_text():
    url = f"{REALM_URL}/localization/en/greeting"
    responses.get(url, body="Hello", status=200, content_type="text/plain")

    result = make_request(url, "GET", "t")

    assert isinstance(result, RawText)
    assert result.text == "Hello"
    assert json_or(result, "fallback") == "fallback"


@responses.activate
def test_binary_body_keeps_bytes():
    url = f"{REALM_URL}/clients/c1/certificates/jwt.credential/download"
    responses.post(url, body=b"\x00\x01keystore", status=200, content_type="application/octet-stream")

    result = make_request(url, "POST", "t", {"format": "JKS"})

    assert isinstance(result, RawText)
    assert result.content == b"\x00\x01keystore"


# =============================================================================
# Error Handling Tests
# =============================================================================


@responses.activate
def test_non_ok_raises_request_error_with_body():
    responses.get(f"{USERS_URL}/missing", json={"error": "User not found"}, status=404)

    with pytest.raises(KeycloakRequestError) as exc_info:
        make_request(f"{USERS_URL}/missing", "GET", "t")

    assert exc_info.value.status == 404
    assert exc_info.value.status_code == 404
    assert "User not found" in str(exc_info.value)
    assert "User not found" in exc_info.value.response_body


@responses.activate
def test_conflict_raises_request_error():
    responses.post(USERS_URL, json={"errorMessage": "User exists with same username"}, status=409)

    with pytest.raises(KeycloakRequestError, match="Request failed with status 409"):
        make_request(USERS_URL, "POST", "t", {"username": "alice"})


@pytest.mark.parametrize("status", [300, 304])
@responses.activate
def test_redirect_status_raises_request_error(status):
    """Test that only 2xx statuses count as success."""
    responses.get(USERS_URL, status=status)

    with pytest.raises(KeycloakRequestError) as exc_info:
        make_request(USERS_URL, "GET", "t")

    assert exc_info.value.status == status


@responses.activate
def test_transport_failure_raises_network_error():
    responses.get(USERS_URL, body=ConnectTimeout("timed out"))

    with pytest.raises(KeycloakNetworkError, match="Network error"):
        make_request(USERS_URL, "GET", "t")
