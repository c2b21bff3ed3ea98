"""Argument checks shared by the resource APIs.

They run before any request is sent, so a missing identifier never turns into
a confusing URL like ``/users//groups``.
"""

from typing import Any

from keycloak_admin_sdk.exceptions import KeycloakValidationError


def require(value: Any, name: str) -> None:
    """Raise ``KeycloakValidationError`` if ``value`` is empty or None."""
    if value is None or (isinstance(value, (str, list, dict, tuple)) and not value):
        raise KeycloakValidationError(f"{name} cannot be empty")


def require_roles(roles: list | None) -> None:
    if not roles:
        raise KeycloakValidationError("at least one role is required")
