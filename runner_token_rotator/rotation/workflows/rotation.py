"""Workflow for rotating an org's runner registration token."""
import logging
from typing import Optional
from ..domains.config_loader import RotatorConfig
from ..domains.errors import InvalidOrganizationError
from ..domains.gcp_client import GCPSecretClient
from ..domains.github_client import GitHubClient
from ..domains.models import RotationResult

logger = logging.getLogger(__name__)


class RotationHandler:
    """
    Runs one rotation: read admin token, mint registration token, destroy
    old versions, store the new one.

    Steps run strictly in that order and nothing is rolled back. If
    destroying old versions fails, the freshly minted token is dropped.
    Two handlers rotating the same org at once are not coordinated.
    """

    def __init__(
        self,
        config: RotatorConfig,
        secret_client: Optional[GCPSecretClient] = None,
        github_client: Optional[GitHubClient] = None,
    ):
        self.config = config
        self.secret_client = secret_client or GCPSecretClient(config.project_id)
        self.github_client = github_client or GitHubClient(config)

    def rotate(self, org: str) -> RotationResult:
        """
        Rotate the registration token of ``org``.

        Raises:
            InvalidOrganizationError: If ``org`` is empty, before any remote call
            RotationError: Any step failure, propagated unchanged
        """
        if not org:
            raise InvalidOrganizationError("The name of the GH Org cannot be empty")

        try:
            admin_token = self.secret_client.access_admin_token(org)
            registration_token = self.github_client.request_registration_token(admin_token, org)
            destroyed = self.secret_client.destroy_registration_token_versions(org)
            new_version = self.secret_client.add_registration_token(org, registration_token)
        finally:
            try:
                self.secret_client.close()
            finally:
                self.github_client.close()

        logger.info(f"Rotated registration token for org {org}: {new_version} "
                    f"({len(destroyed)} old versions destroyed)")
        return RotationResult(organization=org, new_version=new_version, destroyed_versions=destroyed)
