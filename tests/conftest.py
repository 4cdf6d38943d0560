"""Pytest configuration and fixtures for Penn Labs Platform Login tests."""

import datetime
from typing import Any, Dict

import httpx
import pytest
import respx

from platform_oauth import CredentialManager, OAuthConfig
from utils.storage import RefreshTokenStorage

PLATFORM_URL = "https://platform.test"
CLIENT_ID = "test-client-id"
REDIRECT_URI = "https://example.com/callback"

USER = {
    "first_name": "Benjamin",
    "last_name": "Franklin",
    "pennid": 12345678,
    "username": "bfranklin",
    "email": "bfranklin@upenn.edu",
    "affiliation": ["student", "member"],
}


def token_response(access_token: str = "A", refresh_token: str = "R", expires_in: int = 3600) -> httpx.Response:
    """A 200 response from the token endpoint."""
    return httpx.Response(
        200,
        json={
            "expires_in": expires_in,
            "access_token": access_token,
            "refresh_token": refresh_token,
            "token_type": "Bearer",
            "scope": "read introspection",
        },
    )


def error_response(error: str, status_code: int = 400) -> httpx.Response:
    return httpx.Response(status_code, json={"error": error})


def user_response(user: Dict[str, Any] = None) -> httpx.Response:
    return httpx.Response(200, json={"user": user or USER})


class FakeClock:
    """Manually advanced replacement for the wall clock."""

    def __init__(self):
        self.now = datetime.datetime(2024, 1, 15, 12, 0, tzinfo=datetime.timezone.utc)

    def __call__(self) -> datetime.datetime:
        return self.now

    def advance(self, seconds: float):
        self.now += datetime.timedelta(seconds=seconds)


@pytest.fixture
def config() -> OAuthConfig:
    return OAuthConfig(
        client_id=CLIENT_ID,
        redirect_uri=REDIRECT_URI,
        platform_url=PLATFORM_URL,
        timeout=5.0,
    )


@pytest.fixture
def unconfigured() -> OAuthConfig:
    return OAuthConfig(client_id=None, redirect_uri=None, platform_url=PLATFORM_URL)


@pytest.fixture
def storage(tmp_path) -> RefreshTokenStorage:
    return RefreshTokenStorage(str(tmp_path / "credentials.json"))


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def manager(config, storage, clock) -> CredentialManager:
    return CredentialManager(config, storage=storage, clock=clock)


@pytest.fixture
def platform():
    """Mocked Penn Labs Platform; unmatched requests fail the test."""
    with respx.mock(base_url=PLATFORM_URL, assert_all_called=False) as mock:
        yield mock


@pytest.fixture
def token_route(platform):
    return platform.post("/accounts/token/")


@pytest.fixture
def introspect_route(platform):
    return platform.post("/accounts/introspect/")
