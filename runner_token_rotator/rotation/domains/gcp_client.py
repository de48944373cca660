"""GCP Secret Manager client wrapper."""
import logging
from typing import Iterator, List, Optional
from google.api_core.exceptions import GoogleAPIError
from google.cloud import secretmanager

from .errors import SecretAccessError, SecretDestroyError, SecretListError, SecretWriteError
from .models import (
    SecretVersion,
    admin_token_version_name,
    registration_token_secret_name,
)

logger = logging.getLogger(__name__)


class GCPSecretClient:
    """Wrapper around GCP Secret Manager client, bound to one project."""

    def __init__(self, project_id: str, client: Optional[secretmanager.SecretManagerServiceClient] = None):
        self.project_id = project_id
        self._client = client

    @property
    def client(self) -> secretmanager.SecretManagerServiceClient:
        """Lazy-initialize client."""
        if self._client is None:
            self._client = secretmanager.SecretManagerServiceClient()
        return self._client

    def close(self) -> None:
        """Close the underlying transport if a client was created."""
        if self._client is not None:
            self._client.transport.close()
            self._client = None

    def access_admin_token(self, org: str) -> bytes:
        """
        Read the latest version of the org's admin token.

        Args:
            org: GitHub organization name

        Returns:
            Raw secret payload

        Raises:
            SecretAccessError: If the version cannot be accessed (no retry)
        """
        name = admin_token_version_name(self.project_id, org)
        try:
            response = self.client.access_secret_version(request={"name": name})
        except GoogleAPIError as e:
            raise SecretAccessError(f"Failed to access secret version {name}: {e}") from e

        logger.info(f"Access Token for org {org} found")
        return response.payload.data

    def list_registration_token_versions(self, org: str) -> Iterator[SecretVersion]:
        """
        Lazily list every version of the org's registration token secret.

        Pages are fetched while iterating, so the iterator is meant to be
        consumed once.

        Raises:
            SecretListError: If listing fails, including mid-iteration
        """
        parent = registration_token_secret_name(self.project_id, org)
        try:
            for version in self.client.list_secret_versions(request={"parent": parent}):
                yield SecretVersion(name=version.name, state=version.state.name)
        except GoogleAPIError as e:
            raise SecretListError(f"Failed to list secret versions of {parent}: {e}") from e

    def destroy_version(self, name: str) -> None:
        try:
            self.client.destroy_secret_version(request={"name": name})
        except GoogleAPIError as e:
            raise SecretDestroyError(f"Failed to destroy secret version {name}: {e}") from e

    def destroy_registration_token_versions(self, org: str) -> List[str]:
        """
        Destroy every registration token version that is not destroyed yet.

        Versions are handled in listing order. A failure stops the loop and
        leaves already destroyed versions destroyed.

        Returns:
            Names of the destroyed versions
        """
        destroyed = []
        for version in self.list_registration_token_versions(org):
            logger.info(f"Found secret version {version.name} with state {version.state}")
            if version.is_destroyed:
                continue

            logger.info(f"Destroying secret version {version.name}")
            self.destroy_version(version.name)
            destroyed.append(version.name)

        return destroyed

    def add_registration_token(self, org: str, token: bytes) -> str:
        """
        Store a registration token as the newest version of the org's secret.

        Args:
            org: GitHub organization name
            token: Token payload, stored verbatim

        Returns:
            Resource name of the added version

        Raises:
            SecretWriteError: If the version cannot be added
        """
        parent = registration_token_secret_name(self.project_id, org)
        try:
            response = self.client.add_secret_version(
                request={"parent": parent, "payload": {"data": token}}
            )
        except GoogleAPIError as e:
            raise SecretWriteError(f"Failed to add secret version to {parent}: {e}") from e

        logger.info(f"Added secret version: {response.name}")
        return response.name
