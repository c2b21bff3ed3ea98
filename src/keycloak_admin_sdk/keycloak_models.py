"""Type definitions for the SDK configuration and Keycloak API payloads.

Keycloak speaks camelCase JSON (``firstName``, ``emailVerified``); the models
below expose snake_case attributes and map them to the wire names through an
alias generator. Unknown fields are kept (``extra="allow"``) because Keycloak
returns far more attributes than are worth declaring here.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

AuthMethod = Literal["bearer", "client-credentials", "password"]


# =============================================================================
# Configuration
# =============================================================================


class BearerCredentials(BaseModel):
    """A pre-obtained access token, used as-is."""

    model_config = ConfigDict(frozen=True)

    token: str = Field(min_length=1)


class ClientCredentials(BaseModel):
    """Confidential client credentials for the client credentials grant."""

    model_config = ConfigDict(frozen=True)

    client_id: str = Field(min_length=1)
    client_secret: str = Field(min_length=1)


class PasswordCredentials(BaseModel):
    """User credentials for the resource owner password grant."""

    model_config = ConfigDict(frozen=True)

    username: str = Field(min_length=1)
    password: str
    client_id: str = "admin-cli"


Credentials = BearerCredentials | ClientCredentials | PasswordCredentials

_CREDENTIALS_BY_METHOD: dict[str, type[BaseModel]] = {
    "bearer": BearerCredentials,
    "client-credentials": ClientCredentials,
    "password": PasswordCredentials,
}


class KeycloakConfig(BaseModel):
    """Connection settings for a ``KeycloakAdminClient``.

    Example:
        >>> config = KeycloakConfig(
        ...     base_url="http://localhost:8080",
        ...     realm="master",
        ...     auth_method="password",
        ...     credentials=PasswordCredentials(username="admin", password="admin"),
        ... )
    """

    model_config = ConfigDict(frozen=True)

    base_url: str = Field(min_length=1)
    realm: str = Field(min_length=1)
    auth_method: AuthMethod
    credentials: Credentials
    timeout: float = 10

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        value = value.rstrip("/")
        if not value:
            raise ValueError("base_url cannot be empty")
        return value

    @model_validator(mode="after")
    def _credentials_match_method(self) -> "KeycloakConfig":
        expected = _CREDENTIALS_BY_METHOD[self.auth_method]
        if not isinstance(self.credentials, expected):
            raise ValueError(
                f"auth_method '{self.auth_method}' requires {expected.__name__}, "
                f"got {type(self.credentials).__name__}"
            )
        return self


# =============================================================================
# Token endpoint payloads
# =============================================================================


class TokenResponse(BaseModel):
    """Represents an OAuth2 token response.

    Example JSON:
    {
        "access_token": "eyJhbGciOiJSUzI1NiIs...",
        "expires_in": 300,
        "refresh_expires_in": 1800,
        "token_type": "Bearer",
        "not-before-policy": 0,
        "scope": "profile email"
    }
    """

    model_config = ConfigDict(extra="allow")

    access_token: str
    expires_in: int | None = None
    refresh_expires_in: int | None = None
    token_type: str | None = None
    scope: str | None = None


class TokenErrorResponse(BaseModel):
    """Error body returned by the token endpoint, e.g. ``{"error": "invalid_grant"}``."""

    model_config = ConfigDict(extra="allow")

    error: str
    error_description: str | None = None


# =============================================================================
# Admin API representations
# =============================================================================


class KeycloakModel(BaseModel):
    """Base for Admin API representations (camelCase on the wire)."""

    model_config = ConfigDict(
        # Allow extra fields from API that we don't explicitly define
        extra="allow",
        alias_generator=to_camel,
        populate_by_name=True,
    )


class RealmRepresentation(KeycloakModel):
    """Represents a Keycloak realm.

    Example JSON from Keycloak API:
    {
        "id": "master",
        "realm": "master",
        "displayName": "Keycloak",
        "enabled": true,
        "sslRequired": "external",
        ...
    }
    """

    id: str | None = None
    realm: str | None = None
    display_name: str | None = None
    enabled: bool | None = None
    ssl_required: str | None = None
    registration_allowed: bool | None = None
    login_with_email_allowed: bool | None = None
    organizations_enabled: bool | None = None


class UserRepresentation(KeycloakModel):
    """Represents a Keycloak user.

    Example JSON from Keycloak API:
    {
        "id": "8a9b1c2d-3e4f-5a6b-7c8d-9e0f1a2b3c4d",
        "username": "john.doe",
        "enabled": true,
        "emailVerified": false,
        "firstName": "John",
        "lastName": "Doe",
        "email": "john.doe@example.com",
        "createdTimestamp": 1609459200000,
        ...
    }
    """

    id: str | None = None
    username: str | None = None
    enabled: bool | None = None
    email_verified: bool | None = None
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    created_timestamp: int | None = None
    attributes: dict[str, list[str]] | None = None
    required_actions: list[str] | None = None
    groups: list[str] | None = None


class CredentialRepresentation(KeycloakModel):
    id: str | None = None
    type: str | None = None
    user_label: str | None = None
    created_date: int | None = None
    value: str | None = None
    temporary: bool | None = None


class GroupRepresentation(KeycloakModel):
    id: str | None = None
    name: str | None = None
    path: str | None = None
    parent_id: str | None = None
    sub_group_count: int | None = None
    attributes: dict[str, list[str]] | None = None
    realm_roles: list[str] | None = None
    client_roles: dict[str, list[str]] | None = None


class RoleRepresentation(KeycloakModel):
    id: str | None = None
    name: str | None = None
    description: str | None = None
    composite: bool | None = None
    client_role: bool | None = None
    container_id: str | None = None
    attributes: dict[str, list[str]] | None = None


class MappingsRepresentation(KeycloakModel):
    """Realm and client role mappings of a user, group or scope."""

    realm_mappings: list[RoleRepresentation] | None = None
    client_mappings: dict[str, Any] | None = None


class ProtocolMapperRepresentation(KeycloakModel):
    id: str | None = None
    name: str | None = None
    protocol: str | None = None
    protocol_mapper: str | None = None
    config: dict[str, str] | None = None


class ClientRepresentation(KeycloakModel):
    """Represents an application registered in a realm."""

    id: str | None = None
    client_id: str | None = None
    name: str | None = None
    enabled: bool | None = None
    protocol: str | None = None
    public_client: bool | None = None
    service_accounts_enabled: bool | None = None
    authorization_services_enabled: bool | None = None
    redirect_uris: list[str] | None = None
    web_origins: list[str] | None = None
    secret: str | None = None
    registration_access_token: str | None = None
    attributes: dict[str, str] | None = None
    protocol_mappers: list[ProtocolMapperRepresentation] | None = None


class ClientScopeRepresentation(KeycloakModel):
    id: str | None = None
    name: str | None = None
    description: str | None = None
    protocol: str | None = None
    attributes: dict[str, str] | None = None
    protocol_mappers: list[ProtocolMapperRepresentation] | None = None


class CertificateRepresentation(KeycloakModel):
    private_key: str | None = None
    public_key: str | None = None
    certificate: str | None = None
    kid: str | None = None


class ClientInitialAccessPresentation(KeycloakModel):
    """An initial access token for dynamic client registration.

    Only ``expiration`` and ``count`` are sent on create; ``token`` is returned
    once, in the create response.
    """

    id: str | None = None
    token: str | None = None
    timestamp: int | None = None
    expiration: int | None = None
    count: int | None = None
    remaining_count: int | None = None


class ComponentTypeRepresentation(KeycloakModel):
    id: str | None = None
    help_text: str | None = None
    properties: list[dict[str, Any]] | None = None
    metadata: dict[str, Any] | None = None


class UserSessionRepresentation(KeycloakModel):
    id: str | None = None
    username: str | None = None
    user_id: str | None = None
    ip_address: str | None = None
    start: int | None = None
    last_access: int | None = None
    clients: dict[str, str] | None = None


class FederatedIdentityRepresentation(KeycloakModel):
    identity_provider: str | None = None
    user_id: str | None = None
    user_name: str | None = None


class ConsentRepresentation(KeycloakModel):
    client_id: str | None = None
    granted_client_scopes: list[str] | None = None
    created_date: int | None = None
    last_updated_date: int | None = None


class OrganizationDomainRepresentation(KeycloakModel):
    name: str | None = None
    verified: bool | None = None


class OrganizationRepresentation(KeycloakModel):
    id: str | None = None
    name: str | None = None
    alias: str | None = None
    enabled: bool | None = None
    description: str | None = None
    redirect_url: str | None = None
    domains: list[OrganizationDomainRepresentation] | None = None
    attributes: dict[str, list[str]] | None = None


class IdentityProviderRepresentation(KeycloakModel):
    alias: str | None = None
    display_name: str | None = None
    internal_id: str | None = None
    provider_id: str | None = None
    enabled: bool | None = None
    trust_email: bool | None = None
    first_broker_login_flow_alias: str | None = None
    config: dict[str, Any] | None = None


class IdentityProviderMapperRepresentation(KeycloakModel):
    id: str | None = None
    name: str | None = None
    identity_provider_alias: str | None = None
    identity_provider_mapper: str | None = None
    config: dict[str, Any] | None = None


class ComponentRepresentation(KeycloakModel):
    id: str | None = None
    name: str | None = None
    provider_id: str | None = None
    provider_type: str | None = None
    parent_id: str | None = None
    sub_type: str | None = None
    config: dict[str, list[str]] | None = None


class KeysMetadataRepresentation(KeycloakModel):
    active: dict[str, str] | None = None
    keys: list[dict[str, Any]] | None = None


class BruteForceStatus(KeycloakModel):
    num_failures: int | None = None
    disabled: bool | None = None
    last_ip_failure: str | None = None
    last_failure: int | None = None


class ManagementPermissionReference(KeycloakModel):
    enabled: bool | None = None
    resource: str | None = None
    scope_permissions: dict[str, str] | None = None


class EventRepresentation(KeycloakModel):
    time: int | None = None
    type: str | None = None
    realm_id: str | None = None
    client_id: str | None = None
    user_id: str | None = None
    session_id: str | None = None
    ip_address: str | None = None
    error: str | None = None
    details: dict[str, str] | None = None


class AdminEventRepresentation(KeycloakModel):
    time: int | None = None
    realm_id: str | None = None
    operation_type: str | None = None
    resource_type: str | None = None
    resource_path: str | None = None
    representation: str | None = None
    error: str | None = None
    auth_details: dict[str, Any] | None = None


class RealmEventsConfigRepresentation(KeycloakModel):
    events_enabled: bool | None = None
    events_expiration: int | None = None
    events_listeners: list[str] | None = None
    enabled_event_types: list[str] | None = None
    admin_events_enabled: bool | None = None
    admin_events_details_enabled: bool | None = None


class ResourceRepresentation(KeycloakModel):
    id: str | None = Field(default=None, alias="_id")
    name: str | None = None
    display_name: str | None = None
    type: str | None = None
    uris: list[str] | None = None
    scopes: list[dict[str, Any]] | None = None
    owner_managed_access: bool | None = None
    attributes: dict[str, list[str]] | None = None


class ScopeRepresentation(KeycloakModel):
    id: str | None = None
    name: str | None = None
    display_name: str | None = None
    icon_uri: str | None = None


class PolicyRepresentation(KeycloakModel):
    id: str | None = None
    name: str | None = None
    description: str | None = None
    type: str | None = None
    logic: str | None = None
    decision_strategy: str | None = None
    config: dict[str, str] | None = None


class ResourceServerRepresentation(KeycloakModel):
    id: str | None = None
    client_id: str | None = None
    name: str | None = None
    allow_remote_resource_management: bool | None = None
    policy_enforcement_mode: str | None = None
    decision_strategy: str | None = None


def to_payload(body: Any) -> Any:
    """Convert models (or lists of models) into JSON-ready wire dictionaries."""
    if isinstance(body, BaseModel):
        return body.model_dump(mode="json", by_alias=True, exclude_none=True)
    if isinstance(body, list):
        return [to_payload(item) for item in body]
    return body
