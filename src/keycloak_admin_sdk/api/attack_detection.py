"""Brute-force detection endpoints (``/attack-detection/brute-force/users``)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from keycloak_admin_sdk.keycloak_models import BruteForceStatus
from keycloak_admin_sdk.request import json_or
from keycloak_admin_sdk.validation import require

if TYPE_CHECKING:
    from keycloak_admin_sdk.client import KeycloakAdminClient


class AttackDetectionApi:
    """Login failure tracking of the configured realm."""

    def __init__(self, client: "KeycloakAdminClient"):
        self._client = client

    def clear_all(self) -> None:
        """Clear login failures for all users, releasing temporarily locked accounts."""
        self._client.request("/attack-detection/brute-force/users", "DELETE")

    def clear_user(self, user_id: str) -> None:
        require(user_id, "user_id")
        self._client.request(f"/attack-detection/brute-force/users/{user_id}", "DELETE")

    def get_user_status(self, user_id: str) -> BruteForceStatus:
        require(user_id, "user_id")
        result = self._client.request(f"/attack-detection/brute-force/users/{user_id}", "GET")
        return BruteForceStatus.model_validate(json_or(result, {}))
