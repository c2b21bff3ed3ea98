"""Token acquisition for the Keycloak Admin API.

The token endpoint is part of the OpenID Connect standard and lives at
``{base_url}/realms/{realm}/protocol/openid-connect/token``. Three credential
modes are supported:

- ``bearer``: a token obtained elsewhere, returned without any request
- ``client-credentials``: the OAuth2 client credentials grant
- ``password``: the resource owner password grant (e.g. an admin user with ``admin-cli``)
"""

import logging

import requests
from pydantic import ValidationError

from keycloak_admin_sdk.exceptions import KeycloakAuthError, KeycloakConfigError
from keycloak_admin_sdk.keycloak_models import (
    BearerCredentials,
    ClientCredentials,
    KeycloakConfig,
    PasswordCredentials,
    TokenErrorResponse,
    TokenResponse,
)

logger = logging.getLogger(__name__)


def token_endpoint(config: KeycloakConfig) -> str:
    return f"{config.base_url}/realms/{config.realm}/protocol/openid-connect/token"


def _grant_form(config: KeycloakConfig) -> dict[str, str]:
    """Build the form body for the configured grant type."""
    credentials = config.credentials

    if config.auth_method == "client-credentials" and isinstance(credentials, ClientCredentials):
        return {
            "grant_type": "client_credentials",
            "client_id": credentials.client_id,
            "client_secret": credentials.client_secret,
        }
    if config.auth_method == "password" and isinstance(credentials, PasswordCredentials):
        return {
            "grant_type": "password",
            "client_id": credentials.client_id,
            "username": credentials.username,
            "password": credentials.password,
        }

    raise KeycloakConfigError(f"Invalid authentication method: {config.auth_method}")


def _error_body(data: object) -> TokenErrorResponse | None:
    try:
        return TokenErrorResponse.model_validate(data)
    except ValidationError:
        return None


def fetch_token(config: KeycloakConfig) -> TokenResponse:
    """Obtain a token response for the given configuration.

    Returns:
        The parsed token response. In ``bearer`` mode this wraps the configured
        token and carries no expiry.

    Raises:
        KeycloakConfigError: If the authentication method is unknown
        KeycloakAuthError: If the token endpoint fails or answers with an
            unusable body
    """
    if config.auth_method == "bearer":
        if not isinstance(config.credentials, BearerCredentials):
            raise KeycloakConfigError("bearer authentication requires a token")
        return TokenResponse(access_token=config.credentials.token)

    form = _grant_form(config)
    url = token_endpoint(config)

    try:
        response = requests.post(url, data=form, timeout=config.timeout)
    except requests.exceptions.RequestException as e:
        logger.error(f"Failed to reach token endpoint {url}: {e}")
        raise KeycloakAuthError(f"Authentication failed: {e}") from e

    try:
        data = response.json()
    except ValueError as e:
        logger.error(f"Failed to parse token response (status {response.status_code}): {response.text}")
        raise KeycloakAuthError(f"Failed to parse token response: {e}") from e

    error = _error_body(data)

    if not 200 <= response.status_code < 300:
        logger.error(f"Token request failed with status {response.status_code}")
        if error is None:
            raise KeycloakAuthError(
                f"Authentication failed: Unknown error (Status: {response.status_code})"
            )
        raise KeycloakAuthError(f"Authentication failed: {error.error_description or error.error}")

    if error is not None and not (isinstance(data, dict) and "access_token" in data):
        raise KeycloakAuthError(f"Authentication failed: {error.error_description or error.error}")

    try:
        token = TokenResponse.model_validate(data)
    except ValidationError as e:
        logger.error(f"Invalid token response: {data}")
        raise KeycloakAuthError("Invalid token response: Expected access_token in response") from e

    if not token.access_token:
        raise KeycloakAuthError("Invalid token response: access_token is empty")

    return token


def get_token(config: KeycloakConfig) -> str:
    """Obtain a bearer token string for the given configuration.

    Example:
        >>> token = get_token(config)
        >>> headers = {"Authorization": f"Bearer {token}"}
    """
    return fetch_token(config).access_token
