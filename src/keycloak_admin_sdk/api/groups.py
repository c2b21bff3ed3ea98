"""Group management endpoints (``/admin/realms/{realm}/groups``)."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from keycloak_admin_sdk.exceptions import KeycloakError
from keycloak_admin_sdk.keycloak_models import (
    GroupRepresentation,
    ManagementPermissionReference,
    UserRepresentation,
)
from keycloak_admin_sdk.request import extracted_id, json_or
from keycloak_admin_sdk.validation import require

if TYPE_CHECKING:
    from keycloak_admin_sdk.client import KeycloakAdminClient

logger = logging.getLogger(__name__)


class GroupsApi:
    """Groups of the configured realm, including the subgroup hierarchy."""

    def __init__(self, client: "KeycloakAdminClient"):
        self._client = client

    def list(self, **params: Any) -> list[GroupRepresentation]:
        """List top-level groups.

        Args:
            **params: ``search``, ``q``, ``exact``, ``first``, ``max``,
                ``briefRepresentation``, ``populateHierarchy``
        """
        result = self._client.request("/groups", "GET", None, params)
        return [GroupRepresentation.model_validate(group) for group in json_or(result, [])]

    def count(self, search: str | None = None, top: bool | None = None) -> int:
        result = self._client.request("/groups/count", "GET", None, {"search": search, "top": top})
        value = json_or(result, {})
        if isinstance(value, dict):
            return int(value.get("count", 0))
        return int(value)

    def create(self, group: GroupRepresentation | dict) -> str:
        """Create a top-level group and return its id.

        Keycloak reports the id in the Location header. If it is missing, the
        group is looked up by name instead.

        Raises:
            KeycloakError: If the group was created but its id cannot be found
        """
        require(group, "group")
        result = self._client.request("/groups", "POST", group)

        group_id = extracted_id(result)
        if group_id:
            logger.debug(f"Created group with ID: {group_id}")
            return group_id

        name = group.name if isinstance(group, GroupRepresentation) else group.get("name")
        if name:
            logger.debug("ID not found in response, falling back to finding group by name")
            for candidate in self.list(search=name, exact=True):
                if candidate.name == name and candidate.id:
                    return candidate.id

        raise KeycloakError("Group was created but could not be found")

    def get(self, group_id: str) -> GroupRepresentation:
        require(group_id, "group_id")
        result = self._client.request(f"/groups/{group_id}", "GET")
        return GroupRepresentation.model_validate(json_or(result, {}))

    def update(self, group_id: str, group: GroupRepresentation | dict) -> None:
        require(group_id, "group_id")
        require(group, "group")
        self._client.request(f"/groups/{group_id}", "PUT", group)

    def delete(self, group_id: str) -> None:
        require(group_id, "group_id")
        self._client.request(f"/groups/{group_id}", "DELETE")

    def list_children(self, group_id: str, **params: Any) -> list[GroupRepresentation]:
        require(group_id, "group_id")
        result = self._client.request(f"/groups/{group_id}/children", "GET", None, params)
        return [GroupRepresentation.model_validate(group) for group in json_or(result, [])]

    def create_child(self, group_id: str, child: GroupRepresentation | dict) -> str | None:
        """Create a subgroup, or move an existing group under ``group_id`` when ``child`` has an id."""
        require(group_id, "group_id")
        require(child, "child")
        result = self._client.request(f"/groups/{group_id}/children", "POST", child)
        return extracted_id(result)

    def list_members(self, group_id: str, **params: Any) -> list[UserRepresentation]:
        """List users in the group (``first``, ``max``, ``briefRepresentation``)."""
        require(group_id, "group_id")
        result = self._client.request(f"/groups/{group_id}/members", "GET", None, params)
        return [UserRepresentation.model_validate(user) for user in json_or(result, [])]

    def get_management_permissions(self, group_id: str) -> ManagementPermissionReference:
        require(group_id, "group_id")
        result = self._client.request(f"/groups/{group_id}/management/permissions", "GET")
        return ManagementPermissionReference.model_validate(json_or(result, {}))

    def set_management_permissions(
        self, group_id: str, permissions: ManagementPermissionReference | dict
    ) -> ManagementPermissionReference:
        require(group_id, "group_id")
        require(permissions, "permissions")
        result = self._client.request(f"/groups/{group_id}/management/permissions", "PUT", permissions)
        return ManagementPermissionReference.model_validate(json_or(result, {}))
