"""Organization endpoints (``/admin/realms/{realm}/organizations``).

Organizations must be enabled on the realm (``organizationsEnabled``).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from keycloak_admin_sdk.exceptions import KeycloakError
from keycloak_admin_sdk.keycloak_models import (
    IdentityProviderRepresentation,
    OrganizationRepresentation,
    UserRepresentation,
)
from keycloak_admin_sdk.request import FORM_CONTENT_TYPE, extracted_id, json_or
from keycloak_admin_sdk.validation import require

if TYPE_CHECKING:
    from keycloak_admin_sdk.client import KeycloakAdminClient

logger = logging.getLogger(__name__)

_FORM_OPTIONS = {"headers": {"Content-Type": FORM_CONTENT_TYPE}}


class OrganizationsApi:
    """Organizations, their members and linked identity providers.

    Example:
        >>> org_id = client.organizations.create(
        ...     OrganizationRepresentation(name="Acme", domains=[{"name": "acme.com"}])
        ... )
        >>> client.organizations.add_member(org_id, user_id)
    """

    def __init__(self, client: "KeycloakAdminClient"):
        self._client = client

    # =========================================================================
    # Organization CRUD
    # =========================================================================

    def list(
        self,
        search: str | None = None,
        first: int | None = None,
        max_results: int | None = None,
        exact: bool | None = None,
    ) -> list[OrganizationRepresentation]:
        params = {"search": search, "first": first, "max": max_results, "exact": exact}
        result = self._client.request("/organizations", "GET", None, params)
        return [OrganizationRepresentation.model_validate(item) for item in json_or(result, [])]

    def create(self, organization: OrganizationRepresentation | dict) -> str:
        """Create an organization and return its id.

        Raises:
            KeycloakError: If the organization was created but cannot be found
        """
        require(organization, "organization")
        name = (
            organization.name
            if isinstance(organization, OrganizationRepresentation)
            else organization.get("name")
        )
        require(name, "organization name")

        org_id = extracted_id(self._client.request("/organizations", "POST", organization))
        if org_id:
            return org_id

        logger.debug("ID not found in response, falling back to finding organization by name")
        for candidate in self.list(search=name, exact=True):
            if candidate.name == name and candidate.id:
                return candidate.id
        raise KeycloakError("Organization was created but could not be found")

    def get(self, org_id: str) -> OrganizationRepresentation:
        require(org_id, "org_id")
        result = self._client.request(f"/organizations/{org_id}", "GET")
        return OrganizationRepresentation.model_validate(json_or(result, {}))

    def update(self, org_id: str, organization: OrganizationRepresentation | dict) -> None:
        require(org_id, "org_id")
        require(organization, "organization")
        self._client.request(f"/organizations/{org_id}", "PUT", organization)

    def delete(self, org_id: str) -> None:
        require(org_id, "org_id")
        self._client.request(f"/organizations/{org_id}", "DELETE")

    # =========================================================================
    # Members
    # =========================================================================

    def list_members(
        self, org_id: str, first: int | None = None, max_results: int | None = None
    ) -> list[UserRepresentation]:
        require(org_id, "org_id")
        result = self._client.request(
            f"/organizations/{org_id}/members", "GET", None, {"first": first, "max": max_results}
        )
        return [UserRepresentation.model_validate(item) for item in json_or(result, [])]

    def count_members(self, org_id: str) -> int:
        require(org_id, "org_id")
        return int(json_or(self._client.request(f"/organizations/{org_id}/members/count", "GET"), 0))

    def add_member(self, org_id: str, user_id: str) -> None:
        """Add an existing realm user; Keycloak takes the bare user id as the body."""
        require(org_id, "org_id")
        require(user_id, "user_id")
        self._client.request(f"/organizations/{org_id}/members", "POST", user_id)

    def remove_member(self, org_id: str, user_id: str) -> None:
        require(org_id, "org_id")
        require(user_id, "user_id")
        self._client.request(f"/organizations/{org_id}/members/{user_id}", "DELETE")

    def invite_existing_user(self, org_id: str, user_id: str) -> None:
        require(org_id, "org_id")
        require(user_id, "user_id")
        self._client.request(
            f"/organizations/{org_id}/members/invite-existing-user",
            "POST",
            {"id": user_id},
            _FORM_OPTIONS,
        )

    def invite_user(
        self,
        org_id: str,
        email: str,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> None:
        """Email an invitation to join the organization, registering the user if needed."""
        require(org_id, "org_id")
        require(email, "email")
        form = {"email": email}
        if first_name:
            form["firstName"] = first_name
        if last_name:
            form["lastName"] = last_name
        self._client.request(f"/organizations/{org_id}/members/invite-user", "POST", form, _FORM_OPTIONS)

    # =========================================================================
    # Identity providers
    # =========================================================================

    def list_identity_providers(self, org_id: str) -> list[IdentityProviderRepresentation]:
        require(org_id, "org_id")
        result = self._client.request(f"/organizations/{org_id}/identity-providers", "GET")
        return [IdentityProviderRepresentation.model_validate(item) for item in json_or(result, [])]

    def get_identity_provider(self, org_id: str, alias: str) -> IdentityProviderRepresentation:
        require(org_id, "org_id")
        require(alias, "alias")
        result = self._client.request(f"/organizations/{org_id}/identity-providers/{alias}", "GET")
        return IdentityProviderRepresentation.model_validate(json_or(result, {}))

    def add_identity_provider(self, org_id: str, alias: str) -> None:
        require(org_id, "org_id")
        require(alias, "alias")
        self._client.request(f"/organizations/{org_id}/identity-providers", "POST", alias)

    def remove_identity_provider(self, org_id: str, alias: str) -> None:
        require(org_id, "org_id")
        require(alias, "alias")
        self._client.request(f"/organizations/{org_id}/identity-providers/{alias}", "DELETE")
