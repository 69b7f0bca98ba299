"""OAuth authenticators for the Bitbucket Server integration.

This module provides:
- Authenticator records describing a deployed OAuth integration per endpoint
- A registry resolving the authenticator responsible for an endpoint
- The OAuthAPI protocol used to obtain tokens for outgoing requests
"""

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable
from urllib.parse import urlencode

from ..exceptions import ScmUnauthorizedError
from ..utils.urls import normalize_url
from .config import BitbucketServerIntegrationConfig
from .constants import OAUTH_AUTHENTICATE_PATH, OAUTH_PROVIDER_NAME

logger = logging.getLogger("bitbucket-provider.oauth")


@runtime_checkable
class OAuthAPI(Protocol):
    """Source of OAuth access tokens for the current user."""

    def get_token(self, oauth_provider: str) -> str:
        """Return the access token issued by ``oauth_provider``."""
        ...


class StaticTokenOAuthAPI:
    """OAuthAPI returning a pre-issued access token for every provider."""

    def __init__(self, access_token: str | None) -> None:
        self.access_token = access_token

    def get_token(self, oauth_provider: str) -> str:
        if not self.access_token:
            raise ScmUnauthorizedError(
                f"No access token available for {oauth_provider}",
                oauth_provider=oauth_provider,
            )
        return self.access_token


class OAuthAuthenticator:
    """Base class of OAuth authenticators."""

    oauth_provider: str = ""
    endpoint: str = ""

    def get_authenticate_url(self, api_endpoint: str | None = None) -> str | None:
        """Return the URL starting the OAuth dance, if there is one."""
        return None

    def compute_authorization_header(
        self, oauth_api: OAuthAPI | None, request_method: str, request_url: str
    ) -> str:
        """Compute the ``Authorization`` header for an outgoing request.

        Raises:
            ScmUnauthorizedError: If no authorization can be provided
        """
        raise NotImplementedError


@dataclass(frozen=True)
class BitbucketServerOAuthAuthenticator(OAuthAuthenticator):
    """OAuth integration deployed for one Bitbucket Server endpoint."""

    consumer_key: str
    private_key: str = field(repr=False)
    bitbucket_endpoint: str
    api_endpoint: str = ""
    oauth_provider: str = field(default=OAUTH_PROVIDER_NAME, init=False)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "bitbucket_endpoint", normalize_url(self.bitbucket_endpoint)
        )
        object.__setattr__(self, "api_endpoint", normalize_url(self.api_endpoint))

    @property
    def endpoint(self) -> str:  # type: ignore[override]
        return self.bitbucket_endpoint

    def get_authenticate_url(self, api_endpoint: str | None = None) -> str:
        base_url = normalize_url(api_endpoint) or self.api_endpoint
        params = {
            "oauth_provider": self.oauth_provider,
            "request_method": "POST",
            "signature_method": "rsa",
        }
        return f"{base_url}{OAUTH_AUTHENTICATE_PATH}?{urlencode(params)}"

    def compute_authorization_header(
        self, oauth_api: OAuthAPI | None, request_method: str, request_url: str
    ) -> str:
        if oauth_api is None:
            raise ScmUnauthorizedError(
                f"No OAuth API available to authorize {request_method} {request_url}",
                oauth_provider=self.oauth_provider,
                authenticate_url=self.get_authenticate_url(),
            )
        try:
            token = oauth_api.get_token(self.oauth_provider)
        except ScmUnauthorizedError as e:
            raise ScmUnauthorizedError(
                str(e),
                oauth_provider=self.oauth_provider,
                authenticate_url=self.get_authenticate_url(),
            ) from e
        logger.debug(f"Authorizing {request_method} {request_url}")
        return f"Bearer {token}"


@dataclass(frozen=True)
class NoopOAuthAuthenticator(OAuthAuthenticator):
    """Authenticator used when no OAuth integration is deployed."""

    oauth_provider: str = field(default=OAUTH_PROVIDER_NAME, init=False)

    def compute_authorization_header(
        self, oauth_api: OAuthAPI | None, request_method: str, request_url: str
    ) -> str:
        raise ScmUnauthorizedError(
            "OAuth is not configured for Bitbucket Server, "
            f"cannot authorize {request_method} {request_url}",
            oauth_provider=self.oauth_provider,
        )


class AuthenticatorRegistry:
    """Bitbucket Server authenticators indexed by normalized endpoint.

    Authenticators of other OAuth providers are ignored. When several
    authenticators name the same endpoint the first one wins.
    """

    def __init__(self, authenticators: Iterable[OAuthAuthenticator] | None = None):
        self._by_endpoint: dict[str, OAuthAuthenticator] = {}
        for authenticator in authenticators or ():
            if authenticator.oauth_provider != OAUTH_PROVIDER_NAME:
                continue
            endpoint = normalize_url(authenticator.endpoint)
            if not endpoint:
                continue
            if endpoint in self._by_endpoint:
                logger.warning(
                    f"Ignoring duplicate Bitbucket Server authenticator for {endpoint}"
                )
                continue
            self._by_endpoint[endpoint] = authenticator

    def find(self, endpoint: str | None) -> OAuthAuthenticator | None:
        """Return the authenticator deployed for ``endpoint``, if any."""
        return self._by_endpoint.get(normalize_url(endpoint))

    @property
    def endpoints(self) -> list[str]:
        return list(self._by_endpoint)

    def __contains__(self, endpoint: object) -> bool:
        return isinstance(endpoint, str) and self.find(endpoint) is not None

    def __iter__(self) -> Iterator[OAuthAuthenticator]:
        return iter(self._by_endpoint.values())

    def __len__(self) -> int:
        return len(self._by_endpoint)


def load_authenticators(
    config: BitbucketServerIntegrationConfig,
) -> list[OAuthAuthenticator]:
    """Build the authenticators deployed by the given configuration.

    Args:
        config: Bitbucket Server integration config

    Returns:
        A single Bitbucket Server authenticator when OAuth credentials are
        configured, otherwise an empty list
    """
    if not config.has_oauth_credentials:
        return []
    return [
        BitbucketServerOAuthAuthenticator(
            consumer_key=config.consumer_key or "",
            private_key=config.private_key or "",
            bitbucket_endpoint=config.oauth_endpoint,
            api_endpoint=config.api_endpoint,
        )
    ]
