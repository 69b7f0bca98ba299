"""Provider of the Bitbucket Server API client."""

import logging
from collections.abc import Iterable

from .client import (
    BitbucketServerApiClient,
    HttpBitbucketServerApiClient,
    NoopBitbucketServerApiClient,
)
from .config import BitbucketServerIntegrationConfig
from .constants import DEFAULT_SSL_VERIFY
from .oauth import (
    AuthenticatorRegistry,
    NoopOAuthAuthenticator,
    OAuthAPI,
    OAuthAuthenticator,
    StaticTokenOAuthAPI,
    load_authenticators,
)
from .resolver import (
    Authenticated,
    BasicHttp,
    ClientDecision,
    EndpointResolver,
)

logger = logging.getLogger("bitbucket-provider.provider")


class BitbucketServerApiProvider:
    """Provides the Bitbucket Server API client matching the configuration.

    The configuration is validated and the client is built once, when the
    provider is constructed. ``get()`` always returns that same client.
    """

    def __init__(
        self,
        raw_endpoints: str | None,
        oauth_endpoint: str | None,
        api_endpoint: str | None,
        oauth_api: OAuthAPI | None,
        authenticators: AuthenticatorRegistry
        | Iterable[OAuthAuthenticator]
        | None = None,
        ssl_verify: bool = DEFAULT_SSL_VERIFY,
    ) -> None:
        """Initialize the provider.

        Args:
            raw_endpoints: Comma-separated Bitbucket Server base URLs
            oauth_endpoint: Base URL of the OAuth-configured Bitbucket Server
            api_endpoint: Public API endpoint of the hosting application
            oauth_api: Source of OAuth tokens for authenticated clients
            authenticators: Deployed OAuth authenticators
            ssl_verify: Whether HTTP clients verify SSL certificates

        Raises:
            ConfigurationError: If the configuration is inconsistent
        """
        self.resolver = EndpointResolver(
            raw_endpoints, oauth_endpoint, api_endpoint, authenticators
        )
        self.oauth_api = oauth_api
        self.ssl_verify = ssl_verify
        self._client = self._build_client(self.resolver.decision)

    @classmethod
    def from_config(
        cls,
        config: BitbucketServerIntegrationConfig,
        oauth_api: OAuthAPI | None = None,
        authenticators: AuthenticatorRegistry
        | Iterable[OAuthAuthenticator]
        | None = None,
    ) -> "BitbucketServerApiProvider":
        """Create a provider from an integration config.

        When no authenticators are given, they are loaded from the config, and
        the config access token backs the OAuth API when none is given.
        """
        if authenticators is None:
            authenticators = load_authenticators(config)
        if oauth_api is None and config.access_token:
            oauth_api = StaticTokenOAuthAPI(config.access_token)
        return cls(
            config.server_endpoints,
            config.oauth_endpoint,
            config.api_endpoint,
            oauth_api,
            authenticators,
            ssl_verify=config.ssl_verify,
        )

    @property
    def decision(self) -> ClientDecision:
        return self.resolver.decision

    def get(self) -> BitbucketServerApiClient:
        """Return the Bitbucket Server API client."""
        return self._client

    def _build_client(self, decision: ClientDecision) -> BitbucketServerApiClient:
        if isinstance(decision, Authenticated):
            authenticator: OAuthAuthenticator = decision.authenticator
        elif isinstance(decision, BasicHttp):
            authenticator = NoopOAuthAuthenticator()
        else:
            logger.debug("No Bitbucket Server configured, using the noop client")
            return NoopBitbucketServerApiClient()

        return HttpBitbucketServerApiClient(
            decision.endpoint,
            authenticator,
            oauth_api=self.oauth_api,
            api_endpoint=self.resolver.api_endpoint,
            ssl_verify=self.ssl_verify,
        )
