"""URL-related utility functions for the Bitbucket provider."""

import re
from urllib.parse import urlparse

BITBUCKET_CLOUD_URL = "https://bitbucket.org"

_ENDPOINT_SEPARATOR = re.compile(r"[,\s]+")


def normalize_url(url: str | None) -> str:
    """Normalize a base URL for comparison.

    Surrounding whitespace and trailing slashes are removed. ``None`` and blank
    values normalize to an empty string.

    Args:
        url: The URL to normalize

    Returns:
        The normalized URL, or an empty string
    """
    if url is None:
        return ""
    return url.strip().rstrip("/")


def split_endpoints(raw_endpoints: str | None) -> list[str]:
    """Parse a comma or whitespace separated list of endpoints.

    Args:
        raw_endpoints: Raw configuration value, e.g. "https://a.com, https://b.com/"

    Returns:
        Normalized endpoints in input order, without empties or duplicates
    """
    if not raw_endpoints:
        return []

    endpoints: list[str] = []
    for part in _ENDPOINT_SEPARATOR.split(raw_endpoints):
        endpoint = normalize_url(part)
        if endpoint and endpoint not in endpoints:
            endpoints.append(endpoint)
    return endpoints


def urls_match(first: str | None, second: str | None) -> bool:
    """Check whether two base URLs point at the same server.

    Trailing slashes and surrounding whitespace are ignored. Blank URLs never match.
    """
    normalized = normalize_url(first)
    return bool(normalized) and normalized == normalize_url(second)


def is_bitbucket_cloud_url(url: str | None) -> bool:
    """Determine if a URL belongs to Bitbucket Cloud rather than Bitbucket Server.

    Args:
        url: The URL to check

    Returns:
        True if the URL is for bitbucket.org, False otherwise
    """
    if not url or not url.strip():
        return False

    hostname = (urlparse(normalize_url(url)).hostname or "").lower()
    return hostname in ("bitbucket.org", "www.bitbucket.org")
