"""Realm administration endpoints.

Unlike the other resource APIs, these act on an explicitly named realm (or on
the realm collection itself), so they go through ``request_for_realm`` and
``request_without_realm`` instead of the configured realm.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from keycloak_admin_sdk.keycloak_models import (
    AdminEventRepresentation,
    EventRepresentation,
    GroupRepresentation,
    ManagementPermissionReference,
    RealmEventsConfigRepresentation,
    RealmRepresentation,
)
from keycloak_admin_sdk.request import RawText, json_or
from keycloak_admin_sdk.validation import require

if TYPE_CHECKING:
    from keycloak_admin_sdk.client import KeycloakAdminClient


class RealmsApi:
    """Realms on the Keycloak server.

    Example:
        >>> client.realms.create(RealmRepresentation(realm="staging", enabled=True))
        >>> client.realms.get("staging").enabled
        True
        >>> client.realms.delete("staging")
    """

    def __init__(self, client: "KeycloakAdminClient"):
        self._client = client

    # =========================================================================
    # Realm CRUD
    # =========================================================================

    def list(self, brief_representation: bool | None = None) -> list[RealmRepresentation]:
        """List the realms the caller is allowed to view."""
        result = self._client.request_without_realm(
            "", "GET", None, {"briefRepresentation": brief_representation}
        )
        return [RealmRepresentation.model_validate(realm) for realm in json_or(result, [])]

    def create(self, realm: RealmRepresentation | dict) -> None:
        """Import a realm from its (full) representation."""
        require(realm, "realm")
        name = realm.realm if isinstance(realm, RealmRepresentation) else realm.get("realm")
        require(name, "realm name")
        self._client.request_without_realm("", "POST", realm)

    def get(self, realm_name: str) -> RealmRepresentation:
        require(realm_name, "realm_name")
        result = self._client.request_for_realm(realm_name, "", "GET")
        return RealmRepresentation.model_validate(json_or(result, {}))

    def update(self, realm_name: str, realm: RealmRepresentation | dict) -> None:
        """Update top-level realm settings; nested users, roles and clients are ignored."""
        require(realm_name, "realm_name")
        require(realm, "realm")
        self._client.request_for_realm(realm_name, "", "PUT", realm)

    def delete(self, realm_name: str) -> None:
        require(realm_name, "realm_name")
        self._client.request_for_realm(realm_name, "", "DELETE")

    # =========================================================================
    # Events
    # =========================================================================

    def get_events_config(self, realm_name: str) -> RealmEventsConfigRepresentation:
        require(realm_name, "realm_name")
        result = self._client.request_for_realm(realm_name, "/events/config", "GET")
        return RealmEventsConfigRepresentation.model_validate(json_or(result, {}))

    def update_events_config(
        self, realm_name: str, config: RealmEventsConfigRepresentation | dict
    ) -> None:
        require(realm_name, "realm_name")
        require(config, "config")
        self._client.request_for_realm(realm_name, "/events/config", "PUT", config)

    def list_events(self, realm_name: str, **params: Any) -> list[EventRepresentation]:
        """List login events (``type``, ``client``, ``user``, ``dateFrom``, ``first``, ``max``, ...)."""
        require(realm_name, "realm_name")
        result = self._client.request_for_realm(realm_name, "/events", "GET", None, params)
        return [EventRepresentation.model_validate(event) for event in json_or(result, [])]

    def delete_events(self, realm_name: str) -> None:
        require(realm_name, "realm_name")
        self._client.request_for_realm(realm_name, "/events", "DELETE")

    def list_admin_events(self, realm_name: str, **params: Any) -> list[AdminEventRepresentation]:
        require(realm_name, "realm_name")
        result = self._client.request_for_realm(realm_name, "/admin-events", "GET", None, params)
        return [AdminEventRepresentation.model_validate(event) for event in json_or(result, [])]

    def delete_admin_events(self, realm_name: str) -> None:
        require(realm_name, "realm_name")
        self._client.request_for_realm(realm_name, "/admin-events", "DELETE")

    # =========================================================================
    # Sessions and revocation
    # =========================================================================

    def logout_all(self, realm_name: str) -> dict[str, Any]:
        """Remove all user sessions of the realm."""
        require(realm_name, "realm_name")
        return json_or(self._client.request_for_realm(realm_name, "/logout-all", "POST"), {})

    def push_revocation(self, realm_name: str) -> dict[str, Any]:
        require(realm_name, "realm_name")
        return json_or(self._client.request_for_realm(realm_name, "/push-revocation", "POST"), {})

    def get_client_session_stats(self, realm_name: str) -> list[dict[str, Any]]:
        require(realm_name, "realm_name")
        return json_or(self._client.request_for_realm(realm_name, "/client-session-stats", "GET"), [])

    def delete_session(self, realm_name: str, session_id: str, is_offline: bool | None = None) -> None:
        require(realm_name, "realm_name")
        require(session_id, "session_id")
        self._client.request_for_realm(
            realm_name, f"/sessions/{session_id}", "DELETE", None, {"isOffline": is_offline}
        )

    # =========================================================================
    # Import / export and maintenance
    # =========================================================================

    def partial_export(
        self,
        realm_name: str,
        export_clients: bool | None = None,
        export_groups_and_roles: bool | None = None,
    ) -> RealmRepresentation:
        require(realm_name, "realm_name")
        params = {"exportClients": export_clients, "exportGroupsAndRoles": export_groups_and_roles}
        result = self._client.request_for_realm(realm_name, "/partial-export", "POST", None, params)
        return RealmRepresentation.model_validate(json_or(result, {}))

    def partial_import(self, realm_name: str, data: RealmRepresentation | dict) -> dict[str, Any]:
        """Import users, clients, roles, groups and identity providers into an existing realm."""
        require(realm_name, "realm_name")
        require(data, "data")
        return json_or(self._client.request_for_realm(realm_name, "/partialImport", "POST", data), {})

    def test_smtp_connection(self, realm_name: str, config: dict[str, str]) -> None:
        require(realm_name, "realm_name")
        require(config, "config")
        self._client.request_for_realm(realm_name, "/testSMTPConnection", "POST", config)

    def convert_client_description(self, realm_name: str, description: str) -> dict[str, Any]:
        """Convert a client description (OIDC JSON or SAML XML) into a client representation."""
        require(realm_name, "realm_name")
        require(description, "description")
        result = self._client.request_for_realm(
            realm_name,
            "/client-description-converter",
            "POST",
            description,
            {"headers": {"Content-Type": "text/plain"}},
        )
        return json_or(result, {})

    def get_group_by_path(self, realm_name: str, path: str) -> GroupRepresentation:
        require(realm_name, "realm_name")
        require(path, "path")
        result = self._client.request_for_realm(realm_name, f"/group-by-path/{path.lstrip('/')}", "GET")
        return GroupRepresentation.model_validate(json_or(result, {}))

    # =========================================================================
    # Client policies, profiles and types
    # =========================================================================

    def get_client_policies(
        self, realm_name: str, include_global_policies: bool | None = None
    ) -> dict[str, Any]:
        require(realm_name, "realm_name")
        result = self._client.request_for_realm(
            realm_name,
            "/client-policies/policies",
            "GET",
            None,
            {"include-global-policies": include_global_policies},
        )
        value = json_or(result, {})
        return {
            "policies": value.get("policies") or [],
            "globalPolicies": value.get("globalPolicies") or [],
        }

    def update_client_policies(self, realm_name: str, policies: dict[str, Any]) -> None:
        require(realm_name, "realm_name")
        require(policies, "policies")
        self._client.request_for_realm(realm_name, "/client-policies/policies", "PUT", policies)

    def get_client_profiles(
        self, realm_name: str, include_global_profiles: bool | None = None
    ) -> dict[str, Any]:
        require(realm_name, "realm_name")
        result = self._client.request_for_realm(
            realm_name,
            "/client-policies/profiles",
            "GET",
            None,
            {"include-global-profiles": include_global_profiles},
        )
        value = json_or(result, {})
        return {
            "profiles": value.get("profiles") or [],
            "globalProfiles": value.get("globalProfiles") or [],
        }

    def update_client_profiles(self, realm_name: str, profiles: dict[str, Any]) -> None:
        require(realm_name, "realm_name")
        require(profiles, "profiles")
        self._client.request_for_realm(realm_name, "/client-policies/profiles", "PUT", profiles)

    def get_client_types(self, realm_name: str) -> dict[str, Any]:
        require(realm_name, "realm_name")
        return json_or(self._client.request_for_realm(realm_name, "/client-types", "GET"), {})

    def update_client_types(self, realm_name: str, client_types: dict[str, Any]) -> None:
        require(realm_name, "realm_name")
        require(client_types, "client_types")
        self._client.request_for_realm(realm_name, "/client-types", "PUT", client_types)

    def get_users_management_permissions(self, realm_name: str) -> ManagementPermissionReference:
        require(realm_name, "realm_name")
        result = self._client.request_for_realm(realm_name, "/users-management-permissions", "GET")
        return ManagementPermissionReference.model_validate(json_or(result, {}))

    def update_users_management_permissions(
        self, realm_name: str, enabled: bool
    ) -> ManagementPermissionReference:
        require(realm_name, "realm_name")
        result = self._client.request_for_realm(
            realm_name, "/users-management-permissions", "PUT", {"enabled": enabled}
        )
        return ManagementPermissionReference.model_validate(json_or(result, {}))

    # =========================================================================
    # Localization
    # =========================================================================

    def get_localization_locales(self, realm_name: str) -> list[str]:
        require(realm_name, "realm_name")
        return json_or(self._client.request_for_realm(realm_name, "/localization", "GET"), [])

    def get_localization_texts(
        self,
        realm_name: str,
        locale: str,
        use_realm_default_locale_fallback: bool | None = None,
    ) -> dict[str, str]:
        require(realm_name, "realm_name")
        require(locale, "locale")
        result = self._client.request_for_realm(
            realm_name,
            f"/localization/{locale}",
            "GET",
            None,
            {"useRealmDefaultLocaleFallback": use_realm_default_locale_fallback},
        )
        return json_or(result, {})

    def add_localization_texts(self, realm_name: str, locale: str, texts: dict[str, str]) -> None:
        require(realm_name, "realm_name")
        require(locale, "locale")
        require(texts, "texts")
        self._client.request_for_realm(realm_name, f"/localization/{locale}", "POST", texts)

    def delete_localization_texts(self, realm_name: str, locale: str) -> None:
        require(realm_name, "realm_name")
        require(locale, "locale")
        self._client.request_for_realm(realm_name, f"/localization/{locale}", "DELETE")

    def get_localization_text(self, realm_name: str, locale: str, key: str) -> str:
        """Return a single localized value; Keycloak serves it as plain text."""
        require(realm_name, "realm_name")
        require(locale, "locale")
        require(key, "key")
        result = self._client.request_for_realm(realm_name, f"/localization/{locale}/{key}", "GET")
        if isinstance(result, RawText):
            return result.text
        value = json_or(result, "")
        return value if isinstance(value, str) else str(value)

    def update_localization_text(self, realm_name: str, locale: str, key: str, text: str) -> None:
        require(realm_name, "realm_name")
        require(locale, "locale")
        require(key, "key")
        if text is None:
            require(text, "text")
        self._client.request_for_realm(
            realm_name,
            f"/localization/{locale}/{key}",
            "PUT",
            text,
            {"headers": {"Content-Type": "text/plain"}},
        )

    def delete_localization_text(self, realm_name: str, locale: str, key: str) -> None:
        require(realm_name, "realm_name")
        require(locale, "locale")
        require(key, "key")
        self._client.request_for_realm(realm_name, f"/localization/{locale}/{key}", "DELETE")
