"""Keycloak Admin REST API client.

``KeycloakAdminClient`` owns the configuration and the cached access token,
builds full Admin API URLs and exposes one attribute per resource family:

    >>> client = KeycloakAdminClient(config)
    >>> users = client.users.list(search="john")
    >>> client.realms.delete("old-realm")

All resource APIs funnel through three request methods:

- ``request``: endpoints of the configured realm (``/admin/realms/{realm}...``)
- ``request_without_realm``: endpoints under ``/admin/realms`` itself
- ``request_for_realm``: endpoints of another, explicitly named realm
"""

import logging
import threading
import time
from collections.abc import Mapping
from typing import Any
from urllib.parse import quote

from keycloak_admin_sdk.api.attack_detection import AttackDetectionApi
from keycloak_admin_sdk.api.authorization import ResourceServerApi
from keycloak_admin_sdk.api.client_role_mappings import ClientRoleMappingsApi
from keycloak_admin_sdk.api.client_scopes import ClientScopesApi
from keycloak_admin_sdk.api.clients import ClientsApi
from keycloak_admin_sdk.api.components import ComponentsApi
from keycloak_admin_sdk.api.groups import GroupsApi
from keycloak_admin_sdk.api.identity_providers import IdentityProvidersApi
from keycloak_admin_sdk.api.keys import KeysApi
from keycloak_admin_sdk.api.mappings import RoleMappingsFactory, ScopeMappingsFactory
from keycloak_admin_sdk.api.organizations import OrganizationsApi
from keycloak_admin_sdk.api.realms import RealmsApi
from keycloak_admin_sdk.api.roles import RolesApi, RolesByIdApi
from keycloak_admin_sdk.api.users import UsersApi
from keycloak_admin_sdk.auth import fetch_token
from keycloak_admin_sdk.exceptions import KeycloakError, KeycloakRequestError
from keycloak_admin_sdk.keycloak_models import KeycloakConfig
from keycloak_admin_sdk.request import HttpMethod, Result, make_request

logger = logging.getLogger(__name__)

# Refresh tokens this many seconds before the server-side expiry
TOKEN_EXPIRY_MARGIN = 10

# Characters encodeURIComponent leaves alone besides letters, digits and "-_.~"
_QUERY_SAFE = "!*'()"


def _query_value(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return ",".join(_query_value(item) for item in value)
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def build_query(params: Mapping[str, Any]) -> str:
    """Encode ``params`` as a query string, keeping order and skipping None.

    Example:
        >>> build_query({"search": "al ice", "enabled": True, "max": None})
        'search=al%20ice&enabled=true'
    """
    return "&".join(
        f"{quote(str(key), safe=_QUERY_SAFE)}={quote(_query_value(value), safe=_QUERY_SAFE)}"
        for key, value in params.items()
        if value is not None
    )


def _split_options(
    options: Mapping[str, Any] | None,
) -> tuple[Mapping[str, Any] | None, dict[str, str] | None]:
    """Split request options into (query params, header overrides).

    Options without a ``headers`` key are all query parameters. With a
    ``headers`` key, query parameters may be given under ``params``.
    """
    if not options:
        return None, None
    if "headers" in options:
        return options.get("params"), dict(options["headers"] or {})
    return options, None


class KeycloakAdminClient:
    """Client for the Keycloak Admin REST API.

    The client obtains an access token on first use and caches it for this
    instance only; two clients never share a token. Tokens with a known
    lifetime are refreshed shortly before they expire, and a 401 response
    drops the cached token so the next call authenticates again.

    Attributes:
        config: The immutable connection configuration
        users, groups, realms, clients, ...: Resource APIs

    Example:
        >>> client = KeycloakAdminClient(
        ...     KeycloakConfig(
        ...         base_url="http://localhost:8080",
        ...         realm="master",
        ...         auth_method="client-credentials",
        ...         credentials=ClientCredentials(client_id="admin-cli", client_secret="secret"),
        ...     )
        ... )
        >>> realms = client.realms.list()
        >>> print(f"Found {len(realms)} realms")
    """

    def __init__(self, config: KeycloakConfig):
        self.config = config
        self.admin_url = f"{config.base_url}/admin"
        self.realm_url = f"{self.admin_url}/realms/{config.realm}"

        self._token: str | None = None
        self._token_expires_at: float | None = None
        self._token_lock = threading.Lock()

        self.users = UsersApi(self)
        self.groups = GroupsApi(self)
        self.realms = RealmsApi(self)
        self.clients = ClientsApi(self)
        self.client_scopes = ClientScopesApi(self)
        self.client_role_mappings = ClientRoleMappingsApi(self)
        self.organizations = OrganizationsApi(self)
        self.identity_providers = IdentityProvidersApi(self)
        self.roles = RolesApi(self)
        self.roles_by_id = RolesByIdApi(self)
        self.role_mappings = RoleMappingsFactory(self)
        self.scope_mappings = ScopeMappingsFactory(self)
        self.keys = KeysApi(self)
        self.attack_detection = AttackDetectionApi(self)
        self.components = ComponentsApi(self)
        self.resource_server = ResourceServerApi(self)

    # =========================================================================
    # Token management
    # =========================================================================

    def _cached_token(self) -> str | None:
        """Return the cached token if it has not expired, else None."""
        token = self._token
        expires_at = self._token_expires_at
        if not token:
            return None
        if expires_at is not None and time.time() >= expires_at:
            return None
        return token

    def get_valid_token(self) -> str:
        """Return the cached token, fetching a new one if needed.

        Concurrent callers wait for a single in-flight fetch instead of each
        hitting the token endpoint.

        Raises:
            KeycloakAuthError: If a token cannot be obtained
            KeycloakConfigError: If the authentication method is invalid
        """
        cached = self._cached_token()
        if cached:
            return cached

        with self._token_lock:
            cached = self._cached_token()
            if cached:
                return cached

            logger.debug("Token missing or expired, obtaining new token")
            token = fetch_token(self.config)

            self._token = token.access_token
            if token.expires_in:
                self._token_expires_at = time.time() + token.expires_in - TOKEN_EXPIRY_MARGIN
            else:
                self._token_expires_at = None
            return token.access_token

    def invalidate_token(self) -> None:
        """Forget the cached token; the next request authenticates again."""
        with self._token_lock:
            self._token = None
            self._token_expires_at = None

    # =========================================================================
    # Request dispatch
    # =========================================================================

    def _dispatch(
        self,
        url: str,
        method: HttpMethod,
        body: Any,
        options: Mapping[str, Any] | None,
        files: dict[str, Any] | None,
    ) -> Result:
        params, headers = _split_options(options)
        if params:
            query = build_query(params)
            if query:
                url = f"{url}{'&' if '?' in url else '?'}{query}"

        token = self.get_valid_token()
        try:
            return make_request(
                url,
                method,
                token,
                body,
                headers=headers,
                files=files,
                timeout=self.config.timeout,
            )
        except KeycloakRequestError as e:
            if e.status == 401:
                logger.info("Received 401, dropping cached token")
                self.invalidate_token()
            raise

    def request(
        self,
        endpoint: str,
        method: HttpMethod,
        body: Any = None,
        options: Mapping[str, Any] | None = None,
        files: dict[str, Any] | None = None,
    ) -> Result:
        """Call an endpoint of the configured realm.

        Args:
            endpoint: Path below ``/admin/realms/{realm}`` (e.g. "/users")
            method: HTTP method
            body: Optional request body
            options: Query parameters, or ``{"headers": {...}, "params": {...}}``
            files: Optional multipart parts

        Returns:
            The result variant produced by ``make_request``
        """
        try:
            return self._dispatch(f"{self.realm_url}{endpoint}", method, body, options, files)
        except KeycloakError as e:
            logger.error(f"Request failed for endpoint {endpoint}: {e}")
            raise

    def request_without_realm(
        self,
        endpoint: str,
        method: HttpMethod,
        body: Any = None,
        options: Mapping[str, Any] | None = None,
    ) -> Result:
        """Call an endpoint under ``/admin/realms`` (listing or creating realms)."""
        try:
            return self._dispatch(f"{self.admin_url}/realms{endpoint}", method, body, options, None)
        except KeycloakError as e:
            logger.error(f"Request without realm failed for endpoint {endpoint}: {e}")
            raise

    def request_for_realm(
        self,
        realm_name: str,
        endpoint: str,
        method: HttpMethod,
        body: Any = None,
        options: Mapping[str, Any] | None = None,
    ) -> Result:
        """Call an endpoint of ``realm_name`` rather than the configured realm."""
        try:
            return self._dispatch(
                f"{self.admin_url}/realms/{realm_name}{endpoint}", method, body, options, None
            )
        except KeycloakError as e:
            logger.error(f"Request for realm {realm_name} failed for endpoint {endpoint}: {e}")
            raise
