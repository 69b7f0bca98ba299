"""Bitbucket Server API clients."""

import logging
from abc import ABC, abstractmethod
from typing import Any
from urllib.parse import quote

import httpx

from ..exceptions import (
    ScmCommunicationError,
    ScmItemNotFoundError,
    ScmUnauthorizedError,
)
from ..models.bitbucket_server import (
    BitbucketServerPersonalAccessToken,
    BitbucketServerUser,
)
from ..utils.urls import normalize_url, urls_match
from .constants import (
    ACCESS_TOKENS_BASE_PATH,
    API_BASE_PATH,
    DEFAULT_PAGE_LIMIT,
    DEFAULT_SSL_VERIFY,
    WHOAMI_PATH,
)
from .oauth import NoopOAuthAuthenticator, OAuthAPI, OAuthAuthenticator

logger = logging.getLogger("bitbucket-provider.client")


class BitbucketServerApiClient(ABC):
    """Operations available against a Bitbucket Server instance."""

    @abstractmethod
    def is_connected(self, bitbucket_server_url: str | None) -> bool:
        """Check whether this client talks to the server at the given URL."""

    @abstractmethod
    def get_server_url(self) -> str:
        """Return the base URL of the connected server."""

    @abstractmethod
    def get_user(self, username: str | None = None) -> BitbucketServerUser:
        """Return a user, or the currently authorized user when no name is given."""

    @abstractmethod
    def get_users(self, filter_text: str | None = None) -> list[BitbucketServerUser]:
        """Return all users, optionally filtered by name."""

    @abstractmethod
    def get_personal_access_tokens(
        self, user_slug: str
    ) -> list[BitbucketServerPersonalAccessToken]:
        """Return the personal access tokens of a user."""

    @abstractmethod
    def get_personal_access_token(
        self, user_slug: str, token_id: str
    ) -> BitbucketServerPersonalAccessToken:
        """Return one personal access token of a user."""

    @abstractmethod
    def create_personal_access_token(
        self, user_slug: str, token_name: str, permissions: list[str]
    ) -> BitbucketServerPersonalAccessToken:
        """Create a personal access token for a user."""

    @abstractmethod
    def delete_personal_access_token(self, user_slug: str, token_id: str) -> None:
        """Delete a personal access token of a user."""

    @abstractmethod
    def get_oauth_authenticate_url(self) -> str | None:
        """Return the URL starting the OAuth dance, if OAuth is configured."""

    def close(self) -> None:
        """Release held resources."""

    def __enter__(self) -> "BitbucketServerApiClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


class HttpBitbucketServerApiClient(BitbucketServerApiClient):
    """Client for the Bitbucket Server REST API."""

    def __init__(
        self,
        server_url: str,
        authenticator: OAuthAuthenticator,
        oauth_api: OAuthAPI | None = None,
        api_endpoint: str | None = None,
        ssl_verify: bool = DEFAULT_SSL_VERIFY,
    ) -> None:
        """Initialize the Bitbucket Server HTTP client.

        Args:
            server_url: Bitbucket Server base URL
            authenticator: Authenticator computing the request authorization
            oauth_api: Source of OAuth tokens for the authenticator
            api_endpoint: Public API endpoint of the hosting application
            ssl_verify: Whether to verify SSL certificates
        """
        self.server_url = normalize_url(server_url)
        self.authenticator = authenticator
        self.oauth_api = oauth_api
        self.api_endpoint = normalize_url(api_endpoint)
        self.session = self._create_session(ssl_verify)

    def _create_session(self, ssl_verify: bool) -> httpx.Client:
        """Create HTTP session.

        Authorization is computed per request by the authenticator.
        """
        return httpx.Client(verify=ssl_verify, headers={"Accept": "application/json"})

    def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """Send an authorized request to Bitbucket Server.

        Raises:
            ScmUnauthorizedError: If authorization is missing or rejected
            ScmItemNotFoundError: If the requested item does not exist
            ScmCommunicationError: If the request fails otherwise
        """
        url = f"{self.server_url}{path}"
        headers = {
            "Authorization": self.authenticator.compute_authorization_header(
                self.oauth_api, method, url
            )
        }
        logger.debug(f"Sending {method} request to {url}")

        try:
            response = self.session.request(
                method, url, params=params, json=json, headers=headers
            )
            response.raise_for_status()
            return response
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            logger.error(f"HTTP error {status_code} for {url}: {e.response.text}")
            if status_code in (401, 403):
                raise ScmUnauthorizedError(
                    f"Unauthorized: {status_code} - {e.response.text}",
                    oauth_provider=self.authenticator.oauth_provider,
                    authenticate_url=self.get_oauth_authenticate_url(),
                    status_code=status_code,
                ) from e
            if status_code == 404:
                raise ScmItemNotFoundError(
                    f"Not found: {e.response.text}", status_code=status_code
                ) from e
            raise ScmCommunicationError(
                f"HTTP error: {status_code} - {e.response.text}",
                status_code=status_code,
            ) from e
        except httpx.RequestError as e:
            logger.error(f"Request error for {url}: {str(e)}")
            raise ScmCommunicationError(f"Request error: {str(e)}") from e

    def _get_json(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return self._request("GET", path, params=params).json()

    def _get_all_pages(
        self, path: str, params: dict[str, Any] | None = None
    ) -> list[dict[str, Any]]:
        """Collect the values of every page of a paged resource."""
        values: list[dict[str, Any]] = []
        page_params = dict(params or {})
        page_params.setdefault("limit", DEFAULT_PAGE_LIMIT)
        start = 0
        while True:
            page = self._get_json(path, params={**page_params, "start": start})
            values.extend(page.get("values", []))
            if page.get("isLastPage", True) or page.get("nextPageStart") is None:
                return values
            start = page["nextPageStart"]

    def is_connected(self, bitbucket_server_url: str | None) -> bool:
        return urls_match(self.server_url, bitbucket_server_url)

    def get_server_url(self) -> str:
        return self.server_url

    def get_user(self, username: str | None = None) -> BitbucketServerUser:
        if username is None:
            username = self._request("GET", WHOAMI_PATH).text.strip()
            if not username:
                raise ScmUnauthorizedError(
                    "Bitbucket Server did not identify the current user",
                    oauth_provider=self.authenticator.oauth_provider,
                    authenticate_url=self.get_oauth_authenticate_url(),
                )
        data = self._get_json(f"{API_BASE_PATH}/users/{quote(username, safe='')}")
        return BitbucketServerUser.from_raw(data)

    def get_users(self, filter_text: str | None = None) -> list[BitbucketServerUser]:
        params = {"filter": filter_text} if filter_text else None
        values = self._get_all_pages(f"{API_BASE_PATH}/users", params=params)
        return [BitbucketServerUser.from_raw(value) for value in values]

    def get_personal_access_tokens(
        self, user_slug: str
    ) -> list[BitbucketServerPersonalAccessToken]:
        values = self._get_all_pages(self._tokens_path(user_slug))
        return [BitbucketServerPersonalAccessToken.from_raw(value) for value in values]

    def get_personal_access_token(
        self, user_slug: str, token_id: str
    ) -> BitbucketServerPersonalAccessToken:
        data = self._get_json(f"{self._tokens_path(user_slug)}/{token_id}")
        return BitbucketServerPersonalAccessToken.from_raw(data)

    def create_personal_access_token(
        self, user_slug: str, token_name: str, permissions: list[str]
    ) -> BitbucketServerPersonalAccessToken:
        response = self._request(
            "PUT",
            self._tokens_path(user_slug),
            json={"name": token_name, "permissions": permissions},
        )
        return BitbucketServerPersonalAccessToken.from_raw(response.json())

    def delete_personal_access_token(self, user_slug: str, token_id: str) -> None:
        self._request("DELETE", f"{self._tokens_path(user_slug)}/{token_id}")

    def get_oauth_authenticate_url(self) -> str | None:
        if isinstance(self.authenticator, NoopOAuthAuthenticator):
            return None
        return self.authenticator.get_authenticate_url(self.api_endpoint or None)

    @staticmethod
    def _tokens_path(user_slug: str) -> str:
        return f"{ACCESS_TOKENS_BASE_PATH}/users/{quote(user_slug, safe='')}"

    def close(self) -> None:
        """Close HTTP session."""
        self.session.close()


class NoopBitbucketServerApiClient(BitbucketServerApiClient):
    """Stub client used when no Bitbucket Server integration is configured."""

    MESSAGE = (
        "The fallback noop api client cannot be used for real operation. "
        "Make sure Bitbucket Server OAuth is properly configured."
    )

    def is_connected(self, bitbucket_server_url: str | None) -> bool:
        return False

    def get_server_url(self) -> str:
        raise ScmCommunicationError(self.MESSAGE)

    def get_user(self, username: str | None = None) -> BitbucketServerUser:
        raise ScmCommunicationError(self.MESSAGE)

    def get_users(self, filter_text: str | None = None) -> list[BitbucketServerUser]:
        raise ScmCommunicationError(self.MESSAGE)

    def get_personal_access_tokens(
        self, user_slug: str
    ) -> list[BitbucketServerPersonalAccessToken]:
        raise ScmCommunicationError(self.MESSAGE)

    def get_personal_access_token(
        self, user_slug: str, token_id: str
    ) -> BitbucketServerPersonalAccessToken:
        raise ScmCommunicationError(self.MESSAGE)

    def create_personal_access_token(
        self, user_slug: str, token_name: str, permissions: list[str]
    ) -> BitbucketServerPersonalAccessToken:
        raise ScmCommunicationError(self.MESSAGE)

    def delete_personal_access_token(self, user_slug: str, token_id: str) -> None:
        raise ScmCommunicationError(self.MESSAGE)

    def get_oauth_authenticate_url(self) -> str | None:
        raise ScmCommunicationError(self.MESSAGE)
