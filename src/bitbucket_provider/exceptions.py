class BitbucketProviderError(Exception):
    """Base exception for Bitbucket provider errors."""

    pass


class ConfigurationError(BitbucketProviderError):
    """Raised when the Bitbucket Server integration is misconfigured."""

    pass


class ScmCommunicationError(BitbucketProviderError):
    """Raised when Bitbucket Server cannot be reached or answers with an error."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ScmUnauthorizedError(ScmCommunicationError):
    """Raised when Bitbucket Server rejects or lacks the request authorization."""

    def __init__(
        self,
        message: str,
        oauth_provider: str | None = None,
        authenticate_url: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message, status_code=status_code)
        self.oauth_provider = oauth_provider
        self.authenticate_url = authenticate_url


class ScmItemNotFoundError(ScmCommunicationError):
    """Raised when the requested Bitbucket Server item does not exist (404)."""

    pass
