"""User management endpoints (``/admin/realms/{realm}/users``)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from keycloak_admin_sdk.keycloak_models import (
    ConsentRepresentation,
    CredentialRepresentation,
    FederatedIdentityRepresentation,
    GroupRepresentation,
    UserRepresentation,
    UserSessionRepresentation,
)
from keycloak_admin_sdk.request import extracted_id, json_or
from keycloak_admin_sdk.validation import require

if TYPE_CHECKING:
    from keycloak_admin_sdk.client import KeycloakAdminClient


class UserConsentsApi:
    """Consents a user has granted to clients."""

    def __init__(self, client: "KeycloakAdminClient"):
        self._client = client

    def list(self, user_id: str) -> list[ConsentRepresentation]:
        require(user_id, "user_id")
        result = self._client.request(f"/users/{user_id}/consents", "GET")
        return [ConsentRepresentation.model_validate(item) for item in json_or(result, [])]

    def revoke(self, user_id: str, client_id: str) -> None:
        """Revoke consent and offline tokens for a particular client."""
        require(user_id, "user_id")
        require(client_id, "client_id")
        self._client.request(f"/users/{user_id}/consents/{client_id}", "DELETE")


class UserCredentialsApi:
    """Stored credentials (passwords, OTP devices, ...) of a user."""

    def __init__(self, client: "KeycloakAdminClient"):
        self._client = client

    def list(self, user_id: str) -> list[CredentialRepresentation]:
        require(user_id, "user_id")
        result = self._client.request(f"/users/{user_id}/credentials", "GET")
        return [CredentialRepresentation.model_validate(item) for item in json_or(result, [])]

    def remove(self, user_id: str, credential_id: str) -> None:
        require(user_id, "user_id")
        require(credential_id, "credential_id")
        self._client.request(f"/users/{user_id}/credentials/{credential_id}", "DELETE")

    def move_after(self, user_id: str, credential_id: str, new_previous_credential_id: str) -> None:
        require(user_id, "user_id")
        require(credential_id, "credential_id")
        require(new_previous_credential_id, "new_previous_credential_id")
        self._client.request(
            f"/users/{user_id}/credentials/{credential_id}/moveAfter/{new_previous_credential_id}",
            "POST",
        )

    def move_to_first(self, user_id: str, credential_id: str) -> None:
        require(user_id, "user_id")
        require(credential_id, "credential_id")
        self._client.request(f"/users/{user_id}/credentials/{credential_id}/moveToFirst", "POST")

    def update_label(self, user_id: str, credential_id: str, label: str) -> None:
        """Set the user-visible label of a credential (sent as plain text)."""
        require(user_id, "user_id")
        require(credential_id, "credential_id")
        self._client.request(
            f"/users/{user_id}/credentials/{credential_id}/userLabel",
            "PUT",
            label,
            {"headers": {"Content-Type": "text/plain"}},
        )

    def disable_types(self, user_id: str, types: list[str]) -> None:
        """Disable all credentials of the given types (e.g. ``["otp"]``)."""
        require(user_id, "user_id")
        require(types, "types")
        self._client.request(f"/users/{user_id}/disable-credential-types", "PUT", types)


class UserGroupsApi:
    """Group membership of a single user."""

    def __init__(self, client: "KeycloakAdminClient"):
        self._client = client

    def list(
        self,
        user_id: str,
        search: str | None = None,
        first: int | None = None,
        max_results: int | None = None,
        brief_representation: bool | None = None,
    ) -> list[GroupRepresentation]:
        require(user_id, "user_id")
        params = {
            "search": search,
            "first": first,
            "max": max_results,
            "briefRepresentation": brief_representation,
        }
        result = self._client.request(f"/users/{user_id}/groups", "GET", None, params)
        return [GroupRepresentation.model_validate(item) for item in json_or(result, [])]

    def count(self, user_id: str, search: str | None = None) -> int:
        require(user_id, "user_id")
        result = self._client.request(f"/users/{user_id}/groups/count", "GET", None, {"search": search})
        value = json_or(result, 0)
        # Keycloak answers {"count": n} here
        if isinstance(value, dict):
            return int(value.get("count", 0))
        return int(value)

    def add(self, user_id: str, group_id: str) -> None:
        require(user_id, "user_id")
        require(group_id, "group_id")
        self._client.request(f"/users/{user_id}/groups/{group_id}", "PUT")

    def remove(self, user_id: str, group_id: str) -> None:
        require(user_id, "user_id")
        require(group_id, "group_id")
        self._client.request(f"/users/{user_id}/groups/{group_id}", "DELETE")


class UsersApi:
    """Users of the configured realm.

    Example:
        >>> user_id = client.users.create(UserRepresentation(username="alice", enabled=True))
        >>> client.users.groups.add(user_id, group_id)
    """

    def __init__(self, client: "KeycloakAdminClient"):
        self._client = client
        self.consents = UserConsentsApi(client)
        self.credentials = UserCredentialsApi(client)
        self.groups = UserGroupsApi(client)

    def list(self, **params: Any) -> list[UserRepresentation]:
        """List users, filtered by Keycloak query parameters.

        Args:
            **params: Query parameters as Keycloak names them, e.g.
                ``search``, ``username``, ``email``, ``exact``, ``first``,
                ``max``, ``briefRepresentation``, ``enabled``, ``q``

        Returns:
            A list of user representations
        """
        result = self._client.request("/users", "GET", None, params)
        return [UserRepresentation.model_validate(user) for user in json_or(result, [])]

    def create(self, user: UserRepresentation | dict) -> str | None:
        """Create a user.

        Returns:
            The id of the new user, taken from the Location header
        """
        require(user, "user")
        result = self._client.request("/users", "POST", user)
        return extracted_id(result)

    def get(self, user_id: str, user_profile_metadata: bool | None = None) -> UserRepresentation:
        require(user_id, "user_id")
        result = self._client.request(
            f"/users/{user_id}", "GET", None, {"userProfileMetadata": user_profile_metadata}
        )
        return UserRepresentation.model_validate(json_or(result, {}))

    def update(self, user_id: str, user: UserRepresentation | dict) -> None:
        require(user_id, "user_id")
        require(user, "user")
        self._client.request(f"/users/{user_id}", "PUT", user)

    def delete(self, user_id: str) -> None:
        require(user_id, "user_id")
        self._client.request(f"/users/{user_id}", "DELETE")

    def count(self, **params: Any) -> int:
        """Count users matching the same filters ``list`` accepts."""
        result = self._client.request("/users/count", "GET", None, params)
        return int(json_or(result, 0))

    def get_profile_config(self) -> dict[str, Any]:
        result = self._client.request("/users/profile", "GET")
        return json_or(result, {})

    def update_profile_config(self, config: dict[str, Any]) -> dict[str, Any]:
        require(config, "config")
        result = self._client.request("/users/profile", "PUT", config)
        return json_or(result, {})

    def get_profile_metadata(self) -> dict[str, Any]:
        result = self._client.request("/users/profile/metadata", "GET")
        return json_or(result, {})

    def get_storage_credential_types(self, user_id: str) -> list[str]:
        """Credential types a user storage provider (e.g. LDAP) manages for this user."""
        require(user_id, "user_id")
        result = self._client.request(f"/users/{user_id}/configured-user-storage-credential-types", "GET")
        return json_or(result, [])

    def execute_actions_email(
        self,
        user_id: str,
        actions: list[str],
        client_id: str | None = None,
        lifespan: int | None = None,
        redirect_uri: str | None = None,
    ) -> None:
        """Email the user a link to perform required actions (e.g. ``UPDATE_PASSWORD``)."""
        require(user_id, "user_id")
        require(actions, "actions")
        params = {"client_id": client_id, "lifespan": lifespan, "redirect_uri": redirect_uri}
        self._client.request(
            f"/users/{user_id}/execute-actions-email", "PUT", actions, params
        )

    def send_verify_email(
        self,
        user_id: str,
        client_id: str | None = None,
        redirect_uri: str | None = None,
    ) -> None:
        require(user_id, "user_id")
        params = {"client_id": client_id, "redirect_uri": redirect_uri}
        self._client.request(f"/users/{user_id}/send-verify-email", "PUT", None, params)

    def reset_password(self, user_id: str, credential: CredentialRepresentation | dict) -> None:
        require(user_id, "user_id")
        require(credential, "credential")
        self._client.request(f"/users/{user_id}/reset-password", "PUT", credential)

    def get_sessions(self, user_id: str) -> list[UserSessionRepresentation]:
        require(user_id, "user_id")
        result = self._client.request(f"/users/{user_id}/sessions", "GET")
        return [UserSessionRepresentation.model_validate(item) for item in json_or(result, [])]

    def logout(self, user_id: str) -> None:
        """Remove all sessions of the user."""
        require(user_id, "user_id")
        self._client.request(f"/users/{user_id}/logout", "POST")

    def get_federated_identities(self, user_id: str) -> list[FederatedIdentityRepresentation]:
        require(user_id, "user_id")
        result = self._client.request(f"/users/{user_id}/federated-identity", "GET")
        return [FederatedIdentityRepresentation.model_validate(item) for item in json_or(result, [])]

    def add_federated_identity(
        self,
        user_id: str,
        provider: str,
        identity: FederatedIdentityRepresentation | dict | None = None,
    ) -> None:
        require(user_id, "user_id")
        require(provider, "provider")
        self._client.request(f"/users/{user_id}/federated-identity/{provider}", "POST", identity)

    def remove_federated_identity(self, user_id: str, provider: str) -> None:
        require(user_id, "user_id")
        require(provider, "provider")
        self._client.request(f"/users/{user_id}/federated-identity/{provider}", "DELETE")
