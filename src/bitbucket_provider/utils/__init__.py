"""
Utility functions for the Bitbucket provider.
This package provides URL and environment helpers used throughout the codebase.
"""

from .env import getenv, is_env_ssl_verify
from .urls import is_bitbucket_cloud_url, normalize_url, split_endpoints, urls_match

__all__ = [
    "getenv",
    "is_bitbucket_cloud_url",
    "is_env_ssl_verify",
    "normalize_url",
    "split_endpoints",
    "urls_match",
]
