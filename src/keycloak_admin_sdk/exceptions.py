"""Exceptions raised by the Keycloak Admin SDK.

Every exception derives from ``KeycloakError`` so callers can catch all SDK
failures with a single except clause, or pick out the specific case they care
about (an authentication problem, an HTTP error status, a broken network).
"""


class KeycloakError(Exception):
    """Base exception for all Keycloak-related errors."""

    pass


class KeycloakAuthError(KeycloakError):
    """Raised when a bearer token cannot be obtained.

    Examples:
        - Invalid client credentials or user password
        - Token endpoint unreachable
        - Token response without an ``access_token``
    """

    pass


class KeycloakRequestError(KeycloakError):
    """Raised when an Admin API request returns a non-2xx status.

    Examples:
        - 404 Not Found (realm or user doesn't exist)
        - 403 Forbidden (insufficient permissions)
        - 409 Conflict (resource already exists)
    """

    def __init__(self, status: int, status_text: str, response_body: str):
        """Initialize the request error.

        Args:
            status: HTTP status code of the failed response
            status_text: HTTP reason phrase (e.g. "Not Found")
            response_body: Raw response body text
        """
        super().__init__(f"Request failed with status {status} {status_text}: {response_body}")
        self.status = status
        self.status_text = status_text
        self.response_body = response_body

    @property
    def status_code(self) -> int:
        return self.status


class KeycloakNetworkError(KeycloakError):
    """Raised when the HTTP exchange itself fails (DNS, refused connection, timeout)."""

    pass


class KeycloakParseError(KeycloakError):
    """Raised when a response declared as JSON cannot be parsed."""

    pass


class KeycloakValidationError(KeycloakError):
    """Raised when a required argument is missing, before any request is made.

    Examples:
        - Empty user ID
        - Empty list of roles to assign
    """

    pass


class KeycloakConfigError(KeycloakError):
    """Raised when there's a configuration error.

    Examples:
        - Unknown authentication method
        - Missing environment variables
        - Credentials that don't match the authentication method
    """

    pass
