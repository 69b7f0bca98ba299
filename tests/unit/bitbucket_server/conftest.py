"""Pytest fixtures for Bitbucket Server tests."""

import os
from typing import Any
from unittest.mock import MagicMock, patch

import pytest

from bitbucket_provider.bitbucket_server.client import HttpBitbucketServerApiClient
from bitbucket_provider.bitbucket_server.oauth import BitbucketServerOAuthAuthenticator

SERVER_URL = "https://bitbucket.server.com"
SECOND_SERVER_URL = "https://bitbucket2.server.com"
API_ENDPOINT = "https://che.server.com"


def _make_response(
    json_data: Any = None, text: str = "", status_code: int = 200
) -> MagicMock:
    """Create a mocked successful httpx response."""
    response = MagicMock()
    response.status_code = status_code
    response.raise_for_status.return_value = None
    response.json.return_value = json_data
    response.text = text
    return response


@pytest.fixture
def make_response():
    """Factory for mocked successful httpx responses."""
    return _make_response


@pytest.fixture
def oauth_authenticator():
    """Authenticator deployed for the first Bitbucket Server."""
    return BitbucketServerOAuthAuthenticator(
        consumer_key="df",
        private_key="s3cr3t-private-key",
        bitbucket_endpoint=f" {SERVER_URL}/",
        api_endpoint=f" {API_ENDPOINT}",
    )


@pytest.fixture
def second_oauth_authenticator():
    """Authenticator deployed for the second Bitbucket Server."""
    return BitbucketServerOAuthAuthenticator(
        consumer_key="df2",
        private_key="private",
        bitbucket_endpoint=SECOND_SERVER_URL,
        api_endpoint=API_ENDPOINT,
    )


@pytest.fixture
def mock_oauth_api():
    """OAuth API handing out a fixed token."""
    oauth_api = MagicMock()
    oauth_api.get_token.return_value = "oauth-token"
    return oauth_api


@pytest.fixture
def http_client(oauth_authenticator, mock_oauth_api):
    """Create an authenticated HttpBitbucketServerApiClient with mocked session."""
    client = HttpBitbucketServerApiClient(
        SERVER_URL,
        oauth_authenticator,
        oauth_api=mock_oauth_api,
        api_endpoint=API_ENDPOINT,
    )
    client.session = MagicMock()
    return client


@pytest.fixture
def mock_env_vars():
    """Mock environment variables for a Bitbucket Server OAuth integration."""
    with patch.dict(
        os.environ,
        {
            "BITBUCKET_SERVER_ENDPOINTS": f"{SERVER_URL}, {SECOND_SERVER_URL}",
            "BITBUCKET_OAUTH_ENDPOINT": f"{SERVER_URL}/",
            "BITBUCKET_API_ENDPOINT": API_ENDPOINT,
            "BITBUCKET_OAUTH_CONSUMER_KEY": "df",
            "BITBUCKET_OAUTH_PRIVATE_KEY": "private",
            "BITBUCKET_OAUTH_ACCESS_TOKEN": "env-token",
        },
        clear=True,
    ):
        yield
