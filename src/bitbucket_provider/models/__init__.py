"""Bitbucket Server models."""

from .bitbucket_server import BitbucketServerPersonalAccessToken, BitbucketServerUser

__all__ = [
    "BitbucketServerPersonalAccessToken",
    "BitbucketServerUser",
]
