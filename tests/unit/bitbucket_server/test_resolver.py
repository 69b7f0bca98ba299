"""Tests for the Bitbucket Server client resolver."""

import dataclasses
import re

import pytest

from bitbucket_provider.bitbucket_server.oauth import (
    AuthenticatorRegistry,
    OAuthAuthenticator,
)
from bitbucket_provider.bitbucket_server.resolver import (
    Authenticated,
    BasicHttp,
    EndpointResolver,
    Noop,
)
from bitbucket_provider.exceptions import ConfigurationError

TWO_ENDPOINTS = "https://bitbucket.server.com, https://bitbucket2.server.com"

MISSING_ENDPOINTS_MESSAGE = re.escape(
    "`bitbucket.server_endpoints` bitbucket configuration is missing. "
    "It should contain values from `bitbucket.oauth.endpoint`"
)
NOT_DEPLOYED_MESSAGE = re.escape(
    "`bitbucket.oauth.endpoint` is set but "
    "BitbucketServerOAuthAuthenticator is not deployed correctly"
)


class GitHubAuthenticator(OAuthAuthenticator):
    oauth_provider = "github"
    endpoint = "https://bitbucket.server.com"


class TestAuthenticatedDecision:
    """Tests for the OAuth-authenticated client selection."""

    def test_resolves_authenticated_client(self, oauth_authenticator):
        resolver = EndpointResolver(
            TWO_ENDPOINTS,
            "https://bitbucket.server.com",
            "https://che.server.com",
            {oauth_authenticator},
        )

        assert resolver.decision == Authenticated(
            "https://bitbucket.server.com", oauth_authenticator
        )
        assert resolver.decision.authenticator is oauth_authenticator

    def test_normalizes_urls_before_matching(self, oauth_authenticator):
        resolver = EndpointResolver(
            TWO_ENDPOINTS,
            "https://bitbucket.server.com",
            "https://bitbucket.server.com",
            [oauth_authenticator],
        )

        # internal representation is always without trailing slashes
        assert resolver.is_connected("https://bitbucket.server.com/")
        assert resolver.is_connected("https://bitbucket.server.com")
        assert not resolver.is_connected("https://bitbucket2.server.com")

    def test_oauth_endpoint_with_trailing_slash(self, oauth_authenticator):
        resolver = EndpointResolver(
            "https://bitbucket.server.com/, https://bitbucket2.server.com/",
            "https://bitbucket.server.com/",
            "",
            [oauth_authenticator],
        )

        assert resolver.oauth_endpoint == "https://bitbucket.server.com"
        assert resolver.decision.endpoint == "https://bitbucket.server.com"

    def test_selects_authenticator_of_oauth_endpoint(
        self, oauth_authenticator, second_oauth_authenticator
    ):
        resolver = EndpointResolver(
            TWO_ENDPOINTS,
            "https://bitbucket2.server.com",
            "",
            [oauth_authenticator, second_oauth_authenticator],
        )

        assert resolver.decision == Authenticated(
            "https://bitbucket2.server.com", second_oauth_authenticator
        )

    def test_accepts_registry(self, oauth_authenticator):
        registry = AuthenticatorRegistry([oauth_authenticator])

        resolver = EndpointResolver(
            TWO_ENDPOINTS, "https://bitbucket.server.com", "", registry
        )

        assert resolver.authenticators is registry
        assert isinstance(resolver.decision, Authenticated)


class TestNoopDecision:
    """Tests for the noop client selection."""

    @pytest.mark.parametrize("endpoints", [None, "", "  ", " , "])
    @pytest.mark.parametrize("oauth_endpoint", [None, "", "https://bitbucket.org"])
    def test_resolves_noop_without_endpoints(self, endpoints, oauth_endpoint):
        resolver = EndpointResolver(endpoints, oauth_endpoint, "", None)

        assert resolver.decision == Noop()
        assert resolver.endpoints == ()

    def test_noop_never_connects(self):
        resolver = EndpointResolver(None, "", "", None)

        assert not resolver.is_connected("https://bitbucket.server.com")
        assert not resolver.is_connected("")
        assert not resolver.is_connected(None)


class TestBasicHttpDecision:
    """Tests for the basic HTTP client selection."""

    @pytest.mark.parametrize(
        "endpoints,with_authenticator",
        [
            ("https://bitbucket.server.com", False),
            (TWO_ENDPOINTS, False),
            (TWO_ENDPOINTS, True),
        ],
    )
    @pytest.mark.parametrize("oauth_endpoint", [None, "", "https://bitbucket.org/"])
    def test_resolves_basic_http_without_oauth(
        self, endpoints, with_authenticator, oauth_endpoint, oauth_authenticator
    ):
        authenticators = [oauth_authenticator] if with_authenticator else None

        resolver = EndpointResolver(endpoints, oauth_endpoint, "", authenticators)

        assert resolver.decision == BasicHttp("https://bitbucket.server.com")
        assert resolver.oauth_endpoint == ""

    def test_uses_first_configured_endpoint(self):
        resolver = EndpointResolver(
            "https://b.example.com/ https://a.example.com,https://b.example.com",
            "",
        )

        assert resolver.endpoints == ("https://b.example.com", "https://a.example.com")
        assert resolver.decision == BasicHttp("https://b.example.com")
        assert resolver.is_connected("https://b.example.com/")
        assert not resolver.is_connected("https://a.example.com")


class TestConfigurationErrors:
    """Tests for configuration validation at construction time."""

    @pytest.mark.parametrize("endpoints", [None, ""])
    def test_fails_when_endpoints_missing(self, endpoints, oauth_authenticator):
        with pytest.raises(ConfigurationError, match=MISSING_ENDPOINTS_MESSAGE):
            EndpointResolver(
                endpoints,
                "https://bitbucket.server.com",
                "https://bitbucket.server.com",
                [oauth_authenticator],
            )

    def test_fails_when_authenticator_not_deployed(self):
        with pytest.raises(ConfigurationError, match=NOT_DEPLOYED_MESSAGE):
            EndpointResolver(
                TWO_ENDPOINTS,
                "https://bitbucket.server.com",
                "https://bitbucket.server.com",
                set(),
            )

    @pytest.mark.parametrize(
        "endpoints",
        [
            "https://bitbucket.server.com",
            TWO_ENDPOINTS,
            "https://bitbucket2.server.com, https://bitbucket.server.com/",
        ],
    )
    def test_fails_when_only_other_authenticators_deployed(
        self, endpoints, second_oauth_authenticator
    ):
        with pytest.raises(ConfigurationError, match=NOT_DEPLOYED_MESSAGE):
            EndpointResolver(
                endpoints,
                "https://bitbucket.server.com",
                "",
                [second_oauth_authenticator, GitHubAuthenticator()],
            )

    def test_fails_when_endpoints_do_not_contain_oauth_endpoint(
        self, oauth_authenticator
    ):
        with pytest.raises(
            ConfigurationError,
            match=re.escape(
                "`bitbucket.server_endpoints` must contain "
                "`https://bitbucket.server.com` value"
            ),
        ):
            EndpointResolver(
                "https://bitbucket3.server.com, https://bitbucket2.server.com",
                "https://bitbucket.server.com",
                "https://bitbucket.server.com",
                [oauth_authenticator],
            )


class TestDecisionValues:
    """Tests for decision immutability and helpers."""

    def test_decision_is_stable(self, oauth_authenticator):
        resolver = EndpointResolver(
            TWO_ENDPOINTS, "https://bitbucket.server.com", "", [oauth_authenticator]
        )

        first = resolver.decision
        assert resolver.decision is first
        assert resolver.is_connected("https://bitbucket.server.com/")
        assert resolver.decision is first

    def test_decisions_are_frozen(self):
        decision = BasicHttp("https://bitbucket.server.com")

        with pytest.raises(dataclasses.FrozenInstanceError):
            decision.endpoint = "https://other.server.com"

    def test_to_dict(self, oauth_authenticator):
        assert Authenticated(
            "https://bitbucket.server.com", oauth_authenticator
        ).to_dict() == {
            "client": "authenticated",
            "endpoint": "https://bitbucket.server.com",
        }
        assert BasicHttp("https://bitbucket.server.com").to_dict() == {
            "client": "basic_http",
            "endpoint": "https://bitbucket.server.com",
        }
        assert Noop().to_dict() == {"client": "noop", "endpoint": None}

    def test_api_endpoint_is_normalized(self):
        resolver = EndpointResolver(None, None, " https://che.server.com/ ")

        assert resolver.api_endpoint == "https://che.server.com"


class TestTryResolve:
    """Tests for resolution without raising."""

    def test_returns_decision(self, oauth_authenticator):
        decision, error = EndpointResolver.try_resolve(
            TWO_ENDPOINTS, "https://bitbucket.server.com", "", [oauth_authenticator]
        )

        assert error is None
        assert decision == Authenticated(
            "https://bitbucket.server.com", oauth_authenticator
        )

    def test_returns_error(self):
        decision, error = EndpointResolver.try_resolve(
            "", "https://bitbucket.server.com", "", None
        )

        assert decision is None
        assert isinstance(error, ConfigurationError)
        assert "bitbucket.server_endpoints" in str(error)
