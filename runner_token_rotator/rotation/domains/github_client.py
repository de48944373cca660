"""GitHub REST API client for self-hosted runner registration tokens."""
import logging
from typing import Optional, Union
import requests

from .config_loader import RotatorConfig
from .errors import TokenExchangeError

logger = logging.getLogger(__name__)


class GitHubClient:
    """Exchanges an org admin token for a runner registration token."""

    def __init__(self, config: RotatorConfig, session: Optional[requests.Session] = None):
        self.config = config
        self._session = session

    @property
    def session(self) -> requests.Session:
        if self._session is None:
            self._session = requests.Session()
        return self._session

    def close(self) -> None:
        """Close the HTTP session if one was created."""
        if self._session is not None:
            self._session.close()
            self._session = None

    def registration_token_url(self, org: str) -> str:
        return f"{self.config.api_base_url}/orgs/{org}/actions/runners/registration-token"

    def request_registration_token(self, admin_token: Union[bytes, str], org: str) -> bytes:
        """
        Ask GitHub for a new runner registration token.

        The response body is returned verbatim. The HTTP status is only
        checked when ``require_success_status`` is enabled; otherwise a
        non-2xx body is logged as a warning and still returned.

        Args:
            admin_token: Org admin token, sent as ``Authorization: token ...``
            org: GitHub organization name

        Returns:
            Raw response body

        Raises:
            TokenExchangeError: On request, transport or body-read failure
        """
        try:
            if isinstance(admin_token, bytes):
                admin_token = admin_token.decode("UTF-8")
        except UnicodeDecodeError as e:
            raise TokenExchangeError(f"Failed to create registration token request: {e}") from e

        url = self.registration_token_url(org)
        headers = {
            "Authorization": f"token {admin_token}",
            "Accept": self.config.accept_header,
        }

        try:
            response = self.session.post(url, headers=headers, timeout=self.config.request_timeout)
            body = response.content
        except requests.RequestException as e:
            raise TokenExchangeError(f"Failed to request registration token: {e}") from e

        if not 200 <= response.status_code < 300:
            if self.config.require_success_status:
                raise TokenExchangeError(
                    f"Registration token request for org {org} returned HTTP {response.status_code}"
                )
            logger.warning(
                f"Registration token request for org {org} returned HTTP {response.status_code}, "
                "storing the response body anyway"
            )

        return body
