"""Delete every realm except ``master`` from a Keycloak server.

Useful for resetting a local or CI Keycloak after integration tests.
Connection settings come from the environment (or a ``.env`` file):

- ``KEYCLOAK_BASE_URL`` (default ``http://localhost:8080``)
- ``KEYCLOAK_ADMIN_USERNAME`` (default ``admin``)
- ``KEYCLOAK_ADMIN_PASSWORD`` (default ``admin``)
- ``KEYCLOAK_ADMIN_CLIENT_ID`` (default ``admin-cli``)

Run it as ``keycloak-cleanup-realms`` once the package is installed.
"""

import logging
import os
import sys
from dataclasses import dataclass, field

from dotenv import load_dotenv
from pydantic import ValidationError

from keycloak_admin_sdk.client import KeycloakAdminClient
from keycloak_admin_sdk.exceptions import KeycloakConfigError, KeycloakError
from keycloak_admin_sdk.keycloak_models import KeycloakConfig, PasswordCredentials

logger = logging.getLogger(__name__)

MASTER_REALM = "master"


@dataclass
class CleanupReport:
    deleted: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed


def load_config() -> KeycloakConfig:
    """Build an admin config for the ``master`` realm from the environment.

    Raises:
        KeycloakConfigError: If a setting is blank or invalid
    """
    load_dotenv()

    settings = {
        "KEYCLOAK_BASE_URL": os.getenv("KEYCLOAK_BASE_URL", "http://localhost:8080").strip(),
        "KEYCLOAK_ADMIN_USERNAME": os.getenv("KEYCLOAK_ADMIN_USERNAME", "admin").strip(),
        "KEYCLOAK_ADMIN_PASSWORD": os.getenv("KEYCLOAK_ADMIN_PASSWORD", "admin").strip(),
        "KEYCLOAK_ADMIN_CLIENT_ID": os.getenv("KEYCLOAK_ADMIN_CLIENT_ID", "admin-cli").strip(),
    }

    missing = [name for name, value in settings.items() if not value]
    if missing:
        raise KeycloakConfigError(
            f"Missing required environment variables: {', '.join(missing)}. "
            "Please check your .env file."
        )

    try:
        return KeycloakConfig(
            base_url=settings["KEYCLOAK_BASE_URL"],
            realm=MASTER_REALM,
            auth_method="password",
            credentials=PasswordCredentials(
                username=settings["KEYCLOAK_ADMIN_USERNAME"],
                password=settings["KEYCLOAK_ADMIN_PASSWORD"],
                client_id=settings["KEYCLOAK_ADMIN_CLIENT_ID"],
            ),
        )
    except ValidationError as e:
        raise KeycloakConfigError(f"Invalid Keycloak configuration: {e}") from e


def cleanup_realms(client: KeycloakAdminClient) -> CleanupReport:
    """Delete all realms but ``master``, continuing past individual failures.

    Raises:
        KeycloakError: If authentication or listing the realms fails
    """
    report = CleanupReport()

    realms = client.realms.list()
    names = [realm.realm for realm in realms if realm.realm and realm.realm != MASTER_REALM]
    logger.info(f"Found {len(realms)} realms, {len(names)} to delete")

    for name in names:
        try:
            client.realms.delete(name)
        except KeycloakError as e:
            logger.error(f"Failed to delete realm {name}: {e}")
            report.failed[name] = str(e)
        else:
            logger.info(f"Deleted realm {name}")
            report.deleted.append(name)

    return report


def main() -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        client = KeycloakAdminClient(load_config())
        report = cleanup_realms(client)
    except KeycloakConfigError as e:
        logger.error(f"Configuration error: {e}")
        return 1
    except KeycloakError as e:
        logger.error(f"Cleanup failed: {e}")
        return 1

    logger.info(f"Cleanup finished: {len(report.deleted)} deleted, {len(report.failed)} failed")
    return 0 if report.ok else 1


if __name__ == "__main__":
    sys.exit(main())
