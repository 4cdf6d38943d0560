"""
Tests for completing a login from the redirect URL
"""

from urllib.parse import parse_qs

import httpx
import pytest

from platform_oauth import (
    AuthorizationURLBuilder,
    CredentialState,
    PlatformAuthError,
    complete_login,
)

from conftest import REDIRECT_URI, token_response, user_response


@pytest.fixture
def auth_builder(config):
    builder = AuthorizationURLBuilder(config)
    builder.get_authorize_url()
    return builder


class TestCompleteLogin:
    @pytest.mark.asyncio
    async def test_full_login(self, manager, storage, auth_builder, token_route, introspect_route):
        verifier = auth_builder.pkce.code_verifier
        token_route.mock(return_value=token_response("A", "R"))
        introspect_route.mock(return_value=user_response())

        user = await complete_login(manager, auth_builder, f"{REDIRECT_URI}?code=auth-code")

        assert user.username == "bfranklin"
        assert storage.get() == "R"
        assert manager.state == CredentialState.VALID

        exchange = parse_qs(token_route.calls.last.request.content.decode())
        assert exchange["code"] == ["auth-code"]
        assert exchange["code_verifier"] == [verifier]
        assert introspect_route.calls.last.request.headers["Authorization"] == "Bearer A"

    @pytest.mark.asyncio
    async def test_pkce_cleared_after_login(self, manager, auth_builder, token_route, introspect_route):
        token_route.mock(return_value=token_response())
        introspect_route.mock(return_value=user_response())

        await complete_login(manager, auth_builder, f"{REDIRECT_URI}?code=auth-code")

        assert auth_builder.pkce.code_verifier is None

    @pytest.mark.asyncio
    async def test_no_code_in_redirect(self, manager, auth_builder, platform):
        with pytest.raises(PlatformAuthError):
            await complete_login(manager, auth_builder, REDIRECT_URI)

        assert platform.calls.call_count == 0
        assert auth_builder.pkce.code_verifier is None

    @pytest.mark.asyncio
    async def test_url_is_not_the_redirect(self, manager, auth_builder, platform):
        with pytest.raises(PlatformAuthError):
            await complete_login(manager, auth_builder, "https://evil.example/?code=stolen")
        assert platform.calls.call_count == 0

    @pytest.mark.asyncio
    async def test_login_without_attempt(self, manager, config, platform):
        builder = AuthorizationURLBuilder(config)

        with pytest.raises(PlatformAuthError):
            await complete_login(manager, builder, f"{REDIRECT_URI}?code=auth-code")
        assert platform.calls.call_count == 0

    @pytest.mark.asyncio
    async def test_exchange_failure(self, manager, auth_builder, token_route, introspect_route):
        token_route.mock(return_value=httpx.Response(400, json={"error": "invalid_grant"}))

        with pytest.raises(PlatformAuthError):
            await complete_login(manager, auth_builder, f"{REDIRECT_URI}?code=reused")

        assert introspect_route.call_count == 0
        assert manager.state == CredentialState.UNAUTHENTICATED
        assert auth_builder.pkce.code_verifier is None

    @pytest.mark.asyncio
    async def test_introspection_failure_keeps_tokens(self, manager, storage, auth_builder, token_route, introspect_route):
        token_route.mock(return_value=token_response("A", "R"))
        introspect_route.mock(return_value=httpx.Response(500))

        with pytest.raises(PlatformAuthError):
            await complete_login(manager, auth_builder, f"{REDIRECT_URI}?code=auth-code")

        assert storage.get() == "R"
        assert manager.state == CredentialState.VALID
