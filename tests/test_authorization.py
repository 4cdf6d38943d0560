"""
Tests for authorization URL construction and redirect parsing
"""

from unittest.mock import patch
from urllib.parse import parse_qsl, urlparse

import pytest

from platform_oauth import AuthorizationURLBuilder, MissingCredentials
from platform_oauth.pkce import derive_challenge

from conftest import CLIENT_ID, PLATFORM_URL, REDIRECT_URI


@pytest.fixture
def builder(config):
    return AuthorizationURLBuilder(config)


class TestAuthorizeURL:
    def test_url_targets_authorize_endpoint(self, builder):
        url = builder.get_authorize_url()
        assert url.startswith(f"{PLATFORM_URL}/accounts/authorize/?")

    def test_url_parameters_in_order(self, builder):
        url = builder.get_authorize_url()
        params = parse_qsl(urlparse(url).query, keep_blank_values=True)

        assert [name for name, _ in params] == [
            "response_type",
            "client_id",
            "redirect_uri",
            "code_challenge_method",
            "code_challenge",
            "scope",
            "state",
        ]
        values = dict(params)
        assert values["response_type"] == "code"
        assert values["client_id"] == CLIENT_ID
        assert values["redirect_uri"] == REDIRECT_URI
        assert values["code_challenge_method"] == "S256"
        assert values["scope"] == "read introspection"
        assert values["state"] == ""

    def test_scope_and_redirect_are_escaped(self, builder):
        url = builder.get_authorize_url()
        assert "scope=read+introspection" in url
        assert "redirect_uri=https%3A%2F%2Fexample.com%2Fcallback" in url
        assert url.endswith("&state=")

    def test_challenge_matches_remembered_verifier(self, builder):
        url = builder.get_authorize_url()
        challenge = dict(parse_qsl(urlparse(url).query))["code_challenge"]

        assert builder.pkce.code_verifier is not None
        assert challenge == derive_challenge(builder.pkce.code_verifier)

    def test_new_attempt_new_challenge(self, builder):
        assert builder.get_authorize_url() != builder.get_authorize_url()

    def test_missing_credentials(self, unconfigured):
        builder = AuthorizationURLBuilder(unconfigured)
        with pytest.raises(MissingCredentials):
            builder.get_authorize_url()
        assert builder.pkce.code_verifier is None

    def test_start_login_flow_opens_browser(self, builder):
        with patch("platform_oauth.authorization.webbrowser.open", return_value=True) as mock_open:
            url = builder.start_login_flow()
        mock_open.assert_called_once_with(url)


class TestRedirect:
    def test_is_redirect(self, builder):
        assert builder.is_redirect(f"{REDIRECT_URI}?code=abc")
        assert not builder.is_redirect(f"{PLATFORM_URL}/accounts/login/?next=x")

    def test_extract_code_parameter(self, builder):
        assert builder.extract_authorization_code(f"{REDIRECT_URI}?code=abc123") == "abc123"

    def test_extract_code_parameter_not_last(self, builder):
        url = f"{REDIRECT_URI}?code=abc123&state="
        assert builder.extract_authorization_code(url) == "abc123"

    def test_extract_falls_back_to_last_parameter(self, builder):
        url = f"{REDIRECT_URI}?foo=bar&authorization=xyz"
        assert builder.extract_authorization_code(url) == "xyz"

    def test_extract_ignores_other_urls(self, builder):
        assert builder.extract_authorization_code("https://other.example/?code=abc") is None

    def test_extract_without_query(self, builder):
        assert builder.extract_authorization_code(REDIRECT_URI) is None

    def test_extract_empty_code(self, builder):
        assert builder.extract_authorization_code(f"{REDIRECT_URI}?code=") is None
