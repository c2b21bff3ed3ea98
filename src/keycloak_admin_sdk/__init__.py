"""Typed client for the Keycloak Admin REST API."""

from keycloak_admin_sdk.client import KeycloakAdminClient, build_query
from keycloak_admin_sdk.exceptions import (
    KeycloakAuthError,
    KeycloakConfigError,
    KeycloakError,
    KeycloakNetworkError,
    KeycloakParseError,
    KeycloakRequestError,
    KeycloakValidationError,
)
from keycloak_admin_sdk.keycloak_models import (
    BearerCredentials,
    ClientCredentials,
    KeycloakConfig,
    PasswordCredentials,
)
from keycloak_admin_sdk.request import Empty, ExtractedId, JsonValue, RawText, Result

__all__ = [
    "BearerCredentials",
    "ClientCredentials",
    "Empty",
    "ExtractedId",
    "JsonValue",
    "KeycloakAdminClient",
    "KeycloakAuthError",
    "KeycloakConfig",
    "KeycloakConfigError",
    "KeycloakError",
    "KeycloakNetworkError",
    "KeycloakParseError",
    "KeycloakRequestError",
    "KeycloakValidationError",
    "PasswordCredentials",
    "RawText",
    "Result",
    "build_query",
]
