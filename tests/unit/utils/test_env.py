"""Tests for the environment utilities module."""

import os
from unittest.mock import patch

import pytest

from bitbucket_provider.utils.env import getenv, is_env_ssl_verify


def test_getenv_prefers_explicit_values():
    """Test explicit values are checked before the process environment."""
    with patch.dict(os.environ, {"TEST_VAR": "from-env"}, clear=True):
        assert getenv({"TEST_VAR": "explicit"}, "TEST_VAR") == "explicit"
        assert getenv({}, "TEST_VAR") == "from-env"
        assert getenv({}, "MISSING_VAR") is None
        assert getenv({}, "MISSING_VAR", "default") == "default"


@pytest.mark.parametrize(
    "value,expected",
    [
        ("true", True),
        ("anything", True),
        ("false", False),
        ("FALSE", False),
        ("0", False),
        ("no", False),
    ],
)
def test_is_env_ssl_verify(value, expected):
    """Test SSL verification defaults to enabled."""
    with patch.dict(os.environ, {"SSL_VERIFY": value}, clear=True):
        assert is_env_ssl_verify({}, "SSL_VERIFY") is expected


def test_is_env_ssl_verify_default():
    """Test SSL verification is enabled when unset."""
    with patch.dict(os.environ, {}, clear=True):
        assert is_env_ssl_verify({}, "SSL_VERIFY") is True
