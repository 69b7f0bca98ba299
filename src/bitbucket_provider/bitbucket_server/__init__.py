"""Bitbucket Server integration: client selection and API clients."""

from .client import (
    BitbucketServerApiClient,
    HttpBitbucketServerApiClient,
    NoopBitbucketServerApiClient,
)
from .config import BitbucketServerIntegrationConfig
from .oauth import (
    AuthenticatorRegistry,
    BitbucketServerOAuthAuthenticator,
    NoopOAuthAuthenticator,
    OAuthAPI,
    OAuthAuthenticator,
    StaticTokenOAuthAPI,
    load_authenticators,
)
from .provider import BitbucketServerApiProvider
from .resolver import Authenticated, BasicHttp, ClientDecision, EndpointResolver, Noop

__all__ = [
    "Authenticated",
    "AuthenticatorRegistry",
    "BasicHttp",
    "BitbucketServerApiClient",
    "BitbucketServerApiProvider",
    "BitbucketServerIntegrationConfig",
    "BitbucketServerOAuthAuthenticator",
    "ClientDecision",
    "EndpointResolver",
    "HttpBitbucketServerApiClient",
    "Noop",
    "NoopBitbucketServerApiClient",
    "NoopOAuthAuthenticator",
    "OAuthAPI",
    "OAuthAuthenticator",
    "StaticTokenOAuthAPI",
    "load_authenticators",
]
