"""HTTP request execution and response shaping.

``make_request`` performs one authenticated call and turns the response into
one of four result variants:

- ``JsonValue``: a parsed JSON body
- ``ExtractedId``: the id of a freshly created resource, taken from the
  ``Location`` header of a 201 response
- ``Empty``: success without a body (204, zero length, blank or ``null`` JSON)
- ``RawText``: any non-JSON body (plain text values, binary keystores)

Callers unpack the variant explicitly, usually with ``json_or`` or
``extracted_id``.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Literal
from urllib.parse import urlparse

import requests

from keycloak_admin_sdk.exceptions import (
    KeycloakNetworkError,
    KeycloakParseError,
    KeycloakRequestError,
)
from keycloak_admin_sdk.keycloak_models import to_payload

logger = logging.getLogger(__name__)

HttpMethod = Literal["GET", "POST", "PUT", "DELETE", "PATCH"]

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
JSON_CONTENT_TYPE = "application/json"

# Collections whose POST answers "201 Created" with the new id in the Location header
CREATED_ID_COLLECTIONS = frozenset(
    {"users", "groups", "clients", "roles", "client-scopes", "organizations", "mappers"}
)


@dataclass(frozen=True)
class JsonValue:
    value: Any


@dataclass(frozen=True)
class ExtractedId:
    id: str


@dataclass(frozen=True)
class Empty:
    pass


@dataclass(frozen=True)
class RawText:
    text: str
    content: bytes = b""


Result = JsonValue | ExtractedId | Empty | RawText


def json_or(result: Result, default: Any = None) -> Any:
    """Return the JSON value of ``result``, or ``default`` for any other variant."""
    if isinstance(result, JsonValue):
        return result.value
    return default


def extracted_id(result: Result) -> str | None:
    """Return the created resource id carried by ``result``, if any.

    Besides ``ExtractedId`` this also accepts a JSON object with an ``id``
    field, which some endpoints return instead of a Location header.
    """
    if isinstance(result, ExtractedId):
        return result.id
    if isinstance(result, JsonValue) and isinstance(result.value, dict):
        value = result.value.get("id")
        return str(value) if value else None
    return None


def _has_header(headers: dict[str, str], name: str) -> bool:
    return any(key.lower() == name.lower() for key in headers)


def _header(headers: dict[str, str], name: str) -> str | None:
    for key, value in headers.items():
        if key.lower() == name.lower():
            return value
    return None


def _encode_body(body: Any, content_type: str | None) -> Any:
    """Serialize ``body`` for sending.

    Form bodies, strings and bytes go out verbatim; everything else is JSON.
    """
    if body is None:
        return None
    if content_type and content_type.split(";")[0].strip().lower() == FORM_CONTENT_TYPE:
        return body
    if isinstance(body, (str, bytes)):
        return body
    return json.dumps(to_payload(body))


def _is_created_collection(method: str, url: str) -> bool:
    if method.upper() != "POST":
        return False
    path = urlparse(url).path.rstrip("/")
    return path.rsplit("/", 1)[-1] in CREATED_ID_COLLECTIONS


def _is_json(content_type: str | None) -> bool:
    return bool(content_type) and "application/json" in content_type.lower()


def _parse_json(text: str) -> Result:
    if not text or not text.strip():
        return Empty()
    try:
        value = json.loads(text)
    except ValueError as e:
        logger.error(f"Error parsing JSON response: {e}")
        raise KeycloakParseError(f"Failed to parse JSON response: {e}") from e
    if value is None:
        return Empty()
    return JsonValue(value)


def interpret_response(response: requests.Response, method: str, url: str) -> Result:
    """Decide which result variant a successful response maps to.

    Args:
        response: A response with a 2xx status
        method: HTTP method the request was sent with
        url: Full request URL (used to recognise collection creates)
    """
    content_type = response.headers.get("Content-Type")

    if response.status_code == 201:
        if _is_json(content_type) and response.text.strip():
            result = _parse_json(response.text)
            if not isinstance(result, Empty):
                return result

        location = response.headers.get("Location")
        if location:
            resource_id = location.rstrip("/").rsplit("/", 1)[-1]
            if resource_id and _is_created_collection(method, url):
                return ExtractedId(resource_id)
        return Empty()

    if response.status_code == 204 or response.headers.get("Content-Length") == "0":
        return Empty()

    if _is_json(content_type):
        return _parse_json(response.text)

    return RawText(text=response.text, content=response.content)


def make_request(
    url: str,
    method: HttpMethod,
    token: str,
    body: Any = None,
    headers: dict[str, str] | None = None,
    files: dict[str, Any] | None = None,
    timeout: float = 10,
) -> Result:
    """Perform one authenticated Admin API call.

    Args:
        url: Full request URL, including any query string
        method: HTTP method (GET, POST, PUT, DELETE, PATCH)
        token: Bearer token for the Authorization header
        body: Optional request body (model, dict, list, str or bytes)
        headers: Header overrides; they win over the defaults
        files: Multipart parts, passed straight to ``requests``
        timeout: Transport timeout in seconds

    Returns:
        The result variant for the response

    Raises:
        KeycloakRequestError: If the response status is not 2xx
        KeycloakParseError: If a JSON response cannot be parsed
        KeycloakNetworkError: If the request could not be completed at all
    """
    request_headers = {"Authorization": f"Bearer {token}", **(headers or {})}

    # Multipart bodies need requests to set the boundary in the content type
    if files is None and not _has_header(request_headers, "Content-Type"):
        request_headers["Content-Type"] = JSON_CONTENT_TYPE

    data = _encode_body(body, _header(request_headers, "Content-Type"))

    logger.debug(f"{method} {url}")

    try:
        response = requests.request(
            method,
            url,
            headers=request_headers,
            data=data,
            files=files,
            timeout=timeout,
        )
    except requests.exceptions.RequestException as e:
        logger.error(f"Network error during {method} {url}: {e}")
        raise KeycloakNetworkError(f"Network error: {e}") from e

    if not 200 <= response.status_code < 300:
        try:
            error_text = response.text
        except requests.exceptions.RequestException:
            error_text = "No response body"
        logger.error(f"Request failed with status {response.status_code}: {error_text}")
        raise KeycloakRequestError(response.status_code, response.reason or "", error_text)

    return interpret_response(response, method, url)
