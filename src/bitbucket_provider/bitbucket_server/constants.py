"""Constants for the Bitbucket Server integration."""

from typing import Final

# OAuth provider identity
OAUTH_PROVIDER_NAME: Final[str] = "bitbucket-server"

# Configuration keys, as reported in configuration errors
CONFIG_KEY_SERVER_ENDPOINTS: Final[str] = "bitbucket.server_endpoints"
CONFIG_KEY_OAUTH_ENDPOINT: Final[str] = "bitbucket.oauth.endpoint"
CONFIG_KEY_API_ENDPOINT: Final[str] = "api.allowed_endpoint"

# Environment variable names
ENV_BITBUCKET_SERVER_ENDPOINTS: Final[str] = "BITBUCKET_SERVER_ENDPOINTS"
ENV_BITBUCKET_OAUTH_ENDPOINT: Final[str] = "BITBUCKET_OAUTH_ENDPOINT"
ENV_BITBUCKET_API_ENDPOINT: Final[str] = "BITBUCKET_API_ENDPOINT"
ENV_BITBUCKET_OAUTH_CONSUMER_KEY: Final[str] = "BITBUCKET_OAUTH_CONSUMER_KEY"
ENV_BITBUCKET_OAUTH_PRIVATE_KEY: Final[str] = "BITBUCKET_OAUTH_PRIVATE_KEY"
ENV_BITBUCKET_OAUTH_ACCESS_TOKEN: Final[str] = "BITBUCKET_OAUTH_ACCESS_TOKEN"
ENV_BITBUCKET_SSL_VERIFY: Final[str] = "BITBUCKET_SSL_VERIFY"

# API endpoints
API_BASE_PATH: Final[str] = "/rest/api/1.0"
ACCESS_TOKENS_BASE_PATH: Final[str] = "/rest/access-tokens/1.0"
WHOAMI_PATH: Final[str] = "/plugins/servlet/applinks/whoami"
OAUTH_AUTHENTICATE_PATH: Final[str] = "/oauth/1.0/authenticate"

# Default values
DEFAULT_SSL_VERIFY: Final[bool] = True
DEFAULT_PAGE_LIMIT: Final[int] = 25
