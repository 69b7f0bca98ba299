"""Selection of the Bitbucket Server API client strategy.

The resolver turns the configured server endpoints, the OAuth endpoint and the
deployed OAuth authenticators into a single, immutable client decision. All
validation happens at construction time.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, ClassVar

from ..exceptions import ConfigurationError
from ..utils.urls import (
    is_bitbucket_cloud_url,
    normalize_url,
    split_endpoints,
    urls_match,
)
from .constants import CONFIG_KEY_OAUTH_ENDPOINT, CONFIG_KEY_SERVER_ENDPOINTS
from .oauth import AuthenticatorRegistry, OAuthAuthenticator

logger = logging.getLogger("bitbucket-provider.resolver")


@dataclass(frozen=True)
class Authenticated:
    """Use an HTTP client authorized through the OAuth authenticator."""

    endpoint: str
    authenticator: OAuthAuthenticator = field(repr=False)
    kind: ClassVar[str] = "authenticated"

    def is_connected(self, url: str | None) -> bool:
        return urls_match(self.endpoint, url)

    def to_dict(self) -> dict[str, Any]:
        return {"client": self.kind, "endpoint": self.endpoint}


@dataclass(frozen=True)
class BasicHttp:
    """Use an HTTP client without an OAuth integration."""

    endpoint: str
    kind: ClassVar[str] = "basic_http"

    def is_connected(self, url: str | None) -> bool:
        return urls_match(self.endpoint, url)

    def to_dict(self) -> dict[str, Any]:
        return {"client": self.kind, "endpoint": self.endpoint}


@dataclass(frozen=True)
class Noop:
    """Use the stub client, no Bitbucket Server is configured."""

    kind: ClassVar[str] = "noop"

    def is_connected(self, url: str | None) -> bool:
        return False

    def to_dict(self) -> dict[str, Any]:
        return {"client": self.kind, "endpoint": None}


ClientDecision = Authenticated | BasicHttp | Noop


class EndpointResolver:
    """Resolve which Bitbucket Server API client should be used."""

    def __init__(
        self,
        raw_endpoints: str | None,
        oauth_endpoint: str | None,
        api_endpoint: str | None = None,
        authenticators: AuthenticatorRegistry
        | Iterable[OAuthAuthenticator]
        | None = None,
    ) -> None:
        """Validate the configuration and select the client decision.

        Args:
            raw_endpoints: Comma or whitespace separated Bitbucket Server base URLs
            oauth_endpoint: Base URL of the OAuth-configured Bitbucket Server
            api_endpoint: Public API endpoint of the hosting application
            authenticators: Deployed OAuth authenticators

        Raises:
            ConfigurationError: If the endpoints, the OAuth endpoint and the
                authenticators do not agree
        """
        self.endpoints: tuple[str, ...] = tuple(split_endpoints(raw_endpoints))
        self.oauth_endpoint = normalize_url(oauth_endpoint)
        self.api_endpoint = normalize_url(api_endpoint)
        if isinstance(authenticators, AuthenticatorRegistry):
            self.authenticators = authenticators
        else:
            self.authenticators = AuthenticatorRegistry(authenticators)

        if is_bitbucket_cloud_url(self.oauth_endpoint):
            # Bitbucket Cloud OAuth does not configure a Bitbucket Server
            logger.debug(
                f"Ignoring Bitbucket Cloud OAuth endpoint {self.oauth_endpoint}"
            )
            self.oauth_endpoint = ""

        self._decision = self._resolve()
        logger.info(f"Resolved Bitbucket Server client: {self._decision.to_dict()}")

    @property
    def decision(self) -> ClientDecision:
        return self._decision

    def is_connected(self, url: str | None) -> bool:
        """Check whether the selected client talks to the server at ``url``."""
        return self._decision.is_connected(url)

    def _resolve(self) -> ClientDecision:
        if not self.endpoints:
            if self.oauth_endpoint:
                raise ConfigurationError(
                    f"`{CONFIG_KEY_SERVER_ENDPOINTS}` bitbucket configuration is "
                    f"missing. It should contain values from "
                    f"`{CONFIG_KEY_OAUTH_ENDPOINT}`"
                )
            return Noop()

        if not self.oauth_endpoint:
            return BasicHttp(self.endpoints[0])

        if self.oauth_endpoint not in self.endpoints:
            raise ConfigurationError(
                f"`{CONFIG_KEY_SERVER_ENDPOINTS}` must contain "
                f"`{self.oauth_endpoint}` value"
            )

        authenticator = self.authenticators.find(self.oauth_endpoint)
        if authenticator is None:
            raise ConfigurationError(
                f"`{CONFIG_KEY_OAUTH_ENDPOINT}` is set but "
                "BitbucketServerOAuthAuthenticator is not deployed correctly"
            )
        return Authenticated(self.oauth_endpoint, authenticator)

    @classmethod
    def try_resolve(
        cls,
        raw_endpoints: str | None,
        oauth_endpoint: str | None,
        api_endpoint: str | None = None,
        authenticators: AuthenticatorRegistry
        | Iterable[OAuthAuthenticator]
        | None = None,
    ) -> tuple[ClientDecision | None, ConfigurationError | None]:
        """Resolve without raising.

        Returns:
            ``(decision, None)`` on success, ``(None, error)`` on a configuration error
        """
        try:
            resolver = cls(raw_endpoints, oauth_endpoint, api_endpoint, authenticators)
        except ConfigurationError as e:
            return None, e
        return resolver.decision, None
