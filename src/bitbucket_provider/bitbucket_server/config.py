"""Config for the Bitbucket Server integration."""

from ..utils.env import getenv, is_env_ssl_verify
from .constants import (
    DEFAULT_SSL_VERIFY,
    ENV_BITBUCKET_API_ENDPOINT,
    ENV_BITBUCKET_OAUTH_ACCESS_TOKEN,
    ENV_BITBUCKET_OAUTH_CONSUMER_KEY,
    ENV_BITBUCKET_OAUTH_ENDPOINT,
    ENV_BITBUCKET_OAUTH_PRIVATE_KEY,
    ENV_BITBUCKET_SERVER_ENDPOINTS,
    ENV_BITBUCKET_SSL_VERIFY,
)


class BitbucketServerIntegrationConfig:
    """Raw configuration of the Bitbucket Server integration.

    Values are kept as configured. Normalization and validation happen when the
    configuration is resolved into a client decision.
    """

    def __init__(
        self,
        server_endpoints: str | None = None,
        oauth_endpoint: str | None = None,
        api_endpoint: str | None = None,
        consumer_key: str | None = None,
        private_key: str | None = None,
        access_token: str | None = None,
        ssl_verify: bool = DEFAULT_SSL_VERIFY,
    ) -> None:
        """Initialize Bitbucket Server integration config.

        Args:
            server_endpoints: Comma-separated list of Bitbucket Server base URLs
            oauth_endpoint: Base URL of the OAuth-configured Bitbucket Server
            api_endpoint: Public API endpoint of the hosting application
            consumer_key: OAuth consumer key of the Bitbucket Server application link
            private_key: OAuth private key of the Bitbucket Server application link
            access_token: Pre-issued OAuth access token
            ssl_verify: Whether to verify SSL certificates
        """
        self.server_endpoints = server_endpoints
        self.oauth_endpoint = oauth_endpoint or ""
        self.api_endpoint = api_endpoint or ""
        self.consumer_key = consumer_key
        self.private_key = private_key
        self.access_token = access_token
        self.ssl_verify = ssl_verify

    @property
    def has_oauth_credentials(self) -> bool:
        """Whether an OAuth application link is configured for the OAuth endpoint."""
        return bool(self.oauth_endpoint and self.consumer_key and self.private_key)

    @classmethod
    def from_env(
        cls, env: dict[str, str] | None = None
    ) -> "BitbucketServerIntegrationConfig":
        """Create Bitbucket Server integration config from environment variables.

        Args:
            env: Explicit values taking precedence over the process environment

        Returns:
            BitbucketServerIntegrationConfig instance
        """
        env = env or {}
        return cls(
            server_endpoints=getenv(env, ENV_BITBUCKET_SERVER_ENDPOINTS),
            oauth_endpoint=getenv(env, ENV_BITBUCKET_OAUTH_ENDPOINT, ""),
            api_endpoint=getenv(env, ENV_BITBUCKET_API_ENDPOINT, ""),
            consumer_key=getenv(env, ENV_BITBUCKET_OAUTH_CONSUMER_KEY),
            private_key=getenv(env, ENV_BITBUCKET_OAUTH_PRIVATE_KEY),
            access_token=getenv(env, ENV_BITBUCKET_OAUTH_ACCESS_TOKEN),
            ssl_verify=is_env_ssl_verify(env, ENV_BITBUCKET_SSL_VERIFY),
        )

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(server_endpoints={self.server_endpoints!r}, "
            f"oauth_endpoint={self.oauth_endpoint!r}, "
            f"api_endpoint={self.api_endpoint!r}, ssl_verify={self.ssl_verify!r})"
        )
