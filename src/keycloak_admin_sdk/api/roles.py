"""Realm role endpoints, by name (``/roles``) and by id (``/roles-by-id``)."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from keycloak_admin_sdk.exceptions import KeycloakError
from keycloak_admin_sdk.keycloak_models import (
    GroupRepresentation,
    ManagementPermissionReference,
    RoleRepresentation,
    UserRepresentation,
)
from keycloak_admin_sdk.request import json_or
from keycloak_admin_sdk.validation import require, require_roles

if TYPE_CHECKING:
    from keycloak_admin_sdk.client import KeycloakAdminClient

logger = logging.getLogger(__name__)


def _roles(result) -> list[RoleRepresentation]:
    return [RoleRepresentation.model_validate(role) for role in json_or(result, [])]


class RolesApi:
    """Realm roles addressed by name.

    Example:
        >>> role_id = client.roles.create(RoleRepresentation(name="auditor"))
        >>> client.roles.add_composites("auditor", [client.roles.get_by_name("viewer")])
    """

    def __init__(self, client: "KeycloakAdminClient"):
        self._client = client

    def list(
        self,
        search: str | None = None,
        first: int | None = None,
        max_results: int | None = None,
        brief_representation: bool | None = None,
    ) -> list[RoleRepresentation]:
        params = {
            "search": search,
            "first": first,
            "max": max_results,
            "briefRepresentation": brief_representation,
        }
        return _roles(self._client.request("/roles", "GET", None, params))

    def create(self, role: RoleRepresentation | dict) -> str:
        """Create a realm role and return its id.

        The Location header of a role create ends in the role name, so the
        role is read back by name to learn its id.

        Raises:
            KeycloakError: If the role cannot be found after creation
        """
        require(role, "role")
        name = role.name if isinstance(role, RoleRepresentation) else role.get("name")
        require(name, "role name")

        self._client.request("/roles", "POST", role)
        created = self.get_by_name(name)
        if not created.id:
            raise KeycloakError(f"Role was created but could not be found by name: {name}")
        logger.debug(f"Created realm role with ID: {created.id}")
        return created.id

    def get_by_name(self, name: str) -> RoleRepresentation:
        require(name, "name")
        result = self._client.request(f"/roles/{name}", "GET")
        return RoleRepresentation.model_validate(json_or(result, {}))

    def update(self, name: str, role: RoleRepresentation | dict) -> None:
        require(name, "name")
        require(role, "role")
        self._client.request(f"/roles/{name}", "PUT", role)

    def delete(self, name: str) -> None:
        require(name, "name")
        self._client.request(f"/roles/{name}", "DELETE")

    # =========================================================================
    # Composites
    # =========================================================================

    def get_composites(self, name: str) -> list[RoleRepresentation]:
        require(name, "name")
        return _roles(self._client.request(f"/roles/{name}/composites", "GET"))

    def add_composites(self, name: str, roles: list[RoleRepresentation | dict]) -> None:
        require(name, "name")
        require_roles(roles)
        self._client.request(f"/roles/{name}/composites", "POST", roles)

    def remove_composites(self, name: str, roles: list[RoleRepresentation | dict]) -> None:
        require(name, "name")
        require_roles(roles)
        self._client.request(f"/roles/{name}/composites", "DELETE", roles)

    def get_realm_composites(self, name: str) -> list[RoleRepresentation]:
        require(name, "name")
        return _roles(self._client.request(f"/roles/{name}/composites/realm", "GET"))

    def get_client_composites(self, name: str, client_id: str) -> list[RoleRepresentation]:
        require(name, "name")
        require(client_id, "client_id")
        return _roles(self._client.request(f"/roles/{name}/composites/clients/{client_id}", "GET"))

    # =========================================================================
    # Holders and permissions
    # =========================================================================

    def get_users(
        self,
        name: str,
        first: int | None = None,
        max_results: int | None = None,
        brief_representation: bool | None = None,
    ) -> list[UserRepresentation]:
        """Users that have the role directly assigned."""
        require(name, "name")
        params = {"first": first, "max": max_results, "briefRepresentation": brief_representation}
        result = self._client.request(f"/roles/{name}/users", "GET", None, params)
        return [UserRepresentation.model_validate(user) for user in json_or(result, [])]

    def get_groups(
        self,
        name: str,
        first: int | None = None,
        max_results: int | None = None,
        brief_representation: bool | None = None,
    ) -> list[GroupRepresentation]:
        require(name, "name")
        params = {"first": first, "max": max_results, "briefRepresentation": brief_representation}
        result = self._client.request(f"/roles/{name}/groups", "GET", None, params)
        return [GroupRepresentation.model_validate(group) for group in json_or(result, [])]

    def get_permissions(self, name: str) -> ManagementPermissionReference:
        require(name, "name")
        result = self._client.request(f"/roles/{name}/management/permissions", "GET")
        return ManagementPermissionReference.model_validate(json_or(result, {}))

    def update_permissions(
        self, name: str, permissions: ManagementPermissionReference | dict
    ) -> ManagementPermissionReference:
        require(name, "name")
        require(permissions, "permissions")
        result = self._client.request(f"/roles/{name}/management/permissions", "PUT", permissions)
        return ManagementPermissionReference.model_validate(json_or(result, {}))


class RolesByIdApi:
    """Roles (realm or client) addressed by their id."""

    def __init__(self, client: "KeycloakAdminClient"):
        self._client = client

    def get(self, role_id: str) -> RoleRepresentation:
        require(role_id, "role_id")
        result = self._client.request(f"/roles-by-id/{role_id}", "GET")
        return RoleRepresentation.model_validate(json_or(result, {}))

    def update(self, role_id: str, role: RoleRepresentation | dict) -> None:
        require(role_id, "role_id")
        require(role, "role")
        self._client.request(f"/roles-by-id/{role_id}", "PUT", role)

    def delete(self, role_id: str) -> None:
        require(role_id, "role_id")
        self._client.request(f"/roles-by-id/{role_id}", "DELETE")

    def get_composites(self, role_id: str, **params: Any) -> list[RoleRepresentation]:
        """Composites of the role (``first``, ``max``, ``search``)."""
        require(role_id, "role_id")
        return _roles(self._client.request(f"/roles-by-id/{role_id}/composites", "GET", None, params))

    def add_composites(self, role_id: str, roles: list[RoleRepresentation | dict]) -> None:
        require(role_id, "role_id")
        require_roles(roles)
        self._client.request(f"/roles-by-id/{role_id}/composites", "POST", roles)

    def remove_composites(self, role_id: str, roles: list[RoleRepresentation | dict]) -> None:
        require(role_id, "role_id")
        require_roles(roles)
        self._client.request(f"/roles-by-id/{role_id}/composites", "DELETE", roles)

    def get_realm_composites(self, role_id: str) -> list[RoleRepresentation]:
        require(role_id, "role_id")
        return _roles(self._client.request(f"/roles-by-id/{role_id}/composites/realm", "GET"))

    def get_client_composites(self, role_id: str, client_id: str) -> list[RoleRepresentation]:
        require(role_id, "role_id")
        require(client_id, "client_id")
        return _roles(self._client.request(f"/roles-by-id/{role_id}/composites/clients/{client_id}", "GET"))

    def get_permissions(self, role_id: str) -> ManagementPermissionReference:
        require(role_id, "role_id")
        result = self._client.request(f"/roles-by-id/{role_id}/management/permissions", "GET")
        return ManagementPermissionReference.model_validate(json_or(result, {}))

    def update_permissions(
        self, role_id: str, permissions: ManagementPermissionReference | dict
    ) -> ManagementPermissionReference:
        require(role_id, "role_id")
        require(permissions, "permissions")
        result = self._client.request(f"/roles-by-id/{role_id}/management/permissions", "PUT", permissions)
        return ManagementPermissionReference.model_validate(json_or(result, {}))
