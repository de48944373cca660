"""Tests for the GitHub registration token exchange."""
import logging
from unittest import mock

import pytest
import requests

from runner_token_rotator.rotation.domains.config_loader import RotatorConfig
from runner_token_rotator.rotation.domains.errors import TokenExchangeError
from runner_token_rotator.rotation.domains.github_client import GitHubClient


def response(status_code=201, content=b'{"token": "AREG", "expires_at": "2026-10-18T12:00:00Z"}'):
    return mock.Mock(status_code=status_code, content=content)


@pytest.fixture
def session():
    session = mock.Mock(spec=requests.Session)
    session.post.return_value = response()
    return session


@pytest.fixture
def config():
    return RotatorConfig(project_id="P")


class TestRequestRegistrationToken:

    def test_request_shape(self, config, session):
        client = GitHubClient(config, session=session)

        client.request_registration_token(b"ghs_abc123", "acme")

        session.post.assert_called_once_with(
            "https://api.github.com/orgs/acme/actions/runners/registration-token",
            headers={
                "Authorization": "token ghs_abc123",
                "Accept": "application/vnd.github.v3+json",
            },
            timeout=None,
        )

    def test_str_admin_token_accepted(self, config, session):
        GitHubClient(config, session=session).request_registration_token("ghs_str", "acme")

        headers = session.post.call_args.kwargs["headers"]
        assert headers["Authorization"] == "token ghs_str"

    def test_configured_host_accept_and_timeout(self, session):
        config = RotatorConfig(
            project_id="P",
            api_base_url="https://ghe.example.com/api/v3",
            accept_header="application/vnd.github+json",
            request_timeout=10.0,
        )

        GitHubClient(config, session=session).request_registration_token(b"t", "acme")

        args, kwargs = session.post.call_args
        assert args[0] == "https://ghe.example.com/api/v3/orgs/acme/actions/runners/registration-token"
        assert kwargs["headers"]["Accept"] == "application/vnd.github+json"
        assert kwargs["timeout"] == 10.0

    def test_body_returned_verbatim(self, config, session):
        session.post.return_value = response(content=b"AREG-TOKEN-XYZ")

        body = GitHubClient(config, session=session).request_registration_token(b"t", "acme")

        assert body == b"AREG-TOKEN-XYZ"

    def test_non_2xx_body_still_returned(self, config, session, caplog):
        error_body = b'{"message": "Bad credentials"}'
        session.post.return_value = response(status_code=401, content=error_body)

        with caplog.at_level(logging.WARNING):
            body = GitHubClient(config, session=session).request_registration_token(b"t", "acme")

        assert body == error_body
        assert "HTTP 401" in caplog.text

    def test_non_2xx_raises_when_success_required(self, session):
        config = RotatorConfig(project_id="P", require_success_status=True)
        session.post.return_value = response(status_code=403, content=b"forbidden")

        with pytest.raises(TokenExchangeError) as exc_info:
            GitHubClient(config, session=session).request_registration_token(b"t", "acme")

        assert "HTTP 403" in str(exc_info.value)

    def test_transport_error_raises(self, config, session):
        session.post.side_effect = requests.ConnectionError("connection reset")

        with pytest.raises(TokenExchangeError) as exc_info:
            GitHubClient(config, session=session).request_registration_token(b"t", "acme")

        assert isinstance(exc_info.value.__cause__, requests.ConnectionError)

    def test_undecodable_admin_token_raises(self, config, session):
        with pytest.raises(TokenExchangeError):
            GitHubClient(config, session=session).request_registration_token(b"\xff\xfe", "acme")

        session.post.assert_not_called()

    def test_admin_token_not_logged(self, config, session, caplog):
        session.post.return_value = response(status_code=500, content=b"oops")

        with caplog.at_level(logging.DEBUG):
            GitHubClient(config, session=session).request_registration_token(b"ghs_secret", "acme")

        assert "ghs_secret" not in caplog.text


def test_session_is_lazily_created(config):
    client = GitHubClient(config)
    assert isinstance(client.session, requests.Session)
    assert client.session is client.session


def test_close_closes_session(config, session):
    client = GitHubClient(config, session=session)

    client.close()

    session.close.assert_called_once_with()


def test_close_without_session_is_noop(config):
    GitHubClient(config).close()
