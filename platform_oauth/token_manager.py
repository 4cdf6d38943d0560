"""Credential lifecycle manager for Penn Labs Platform login"""

import asyncio
import datetime
import logging
from typing import Callable, Optional

import httpx

from utils.storage import RefreshTokenStorage
from .errors import NoRefreshToken, RefreshTokenInvalid
from .introspection import get_user_info as introspect_user
from .models import AccessToken, CredentialState, Identity, OAuthConfig, TokenResponse
from .token_exchange import exchange_code_for_tokens
from .token_refresh import refresh_tokens

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime.datetime]


def utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


class CredentialManager:
    """Owns the access token cache and the stored refresh token

    One instance is built by the application's composition root and shared
    with every consumer that needs an access token. The access token lives
    only in memory; the refresh token lives in ``storage``.

    Concurrent callers that find the cache expired share one in-flight
    refresh and all observe its outcome.
    """

    def __init__(
        self,
        config: OAuthConfig,
        storage: Optional[RefreshTokenStorage] = None,
        client: Optional[httpx.AsyncClient] = None,
        clock: Clock = utcnow,
    ):
        """Initialize the credential manager

        Args:
            config: Client registration and platform location
            storage: Refresh token storage (creates default if None)
            client: Shared HTTP client (a short-lived one per request if None)
            clock: Source of the current timezone-aware time
        """
        self.config = config
        self.storage = storage or RefreshTokenStorage()
        self._client = client
        self._clock = clock
        self._current_access_token: Optional[AccessToken] = None
        self._refresh_task: Optional["asyncio.Task[AccessToken]"] = None

    @property
    def current_access_token(self) -> Optional[AccessToken]:
        return self._current_access_token

    @property
    def state(self) -> CredentialState:
        token = self._current_access_token
        if token is not None and not token.is_expired(self._clock()):
            return CredentialState.VALID
        if self.has_refresh_token():
            return CredentialState.EXPIRED
        return CredentialState.UNAUTHENTICATED

    def _accept(self, response: TokenResponse) -> AccessToken:
        """Cache the new access token and persist the rotated refresh token"""
        expiration = self._clock() + datetime.timedelta(seconds=response.expires_in)
        access_token = AccessToken(value=response.access_token, expiration=expiration)
        self.storage.set(response.refresh_token)
        self._current_access_token = access_token
        return access_token

    # Initial authentication
    async def exchange_code(self, code: str, code_verifier: str) -> AccessToken:
        """Exchange a one-time authorization code for an access token

        Saves the issued refresh token for future use.

        Raises:
            MissingCredentials: If the client is not configured
            PlatformAuthError: If the platform does not return a token pair
        """
        response = await exchange_code_for_tokens(
            code, code_verifier, self.config, client=self._client
        )
        access_token = self._accept(response)
        logger.info("Authentication complete, access token cached")
        return access_token

    # Get + refresh access token
    async def get_access_token(self) -> AccessToken:
        """Return an unexpired access token, refreshing if needed

        Raises:
            MissingCredentials: If a refresh is needed and the client is not configured
            NoRefreshToken: If a refresh is needed and none is stored
            RefreshTokenInvalid: If the stored refresh token was rejected
            PlatformAuthError: If the refresh failed for any other reason
        """
        access_token = self._current_access_token
        if access_token is not None and not access_token.is_expired(self._clock()):
            return access_token

        logger.debug("Access token missing or expired, refreshing")
        return await self.refresh()

    async def refresh(self) -> AccessToken:
        """Trade the stored refresh token for a new token pair

        Joins the in-flight refresh if one is already running. Cancelling the
        caller does not cancel the refresh itself.
        """
        self.config.require()
        if self._refresh_task is None:
            if not self.has_refresh_token():
                logger.warning("No refresh token available for refresh")
                raise NoRefreshToken("No refresh token stored; log in again")

            task = asyncio.ensure_future(self._refresh())
            task.add_done_callback(self._refresh_done)
            self._refresh_task = task

        return await asyncio.shield(self._refresh_task)

    def _refresh_done(self, task: "asyncio.Task[AccessToken]") -> None:
        if self._refresh_task is task:
            self._refresh_task = None
        # Mark the outcome retrieved even if every waiter was cancelled
        if not task.cancelled():
            task.exception()

    async def _refresh(self) -> AccessToken:
        refresh_token = self.storage.get()
        if refresh_token is None:
            raise NoRefreshToken("No refresh token stored; log in again")

        try:
            response = await refresh_tokens(refresh_token, self.config, client=self._client)
        except RefreshTokenInvalid:
            logger.warning("Stored refresh token is invalid, clearing it")
            # Keep a token that was stored by a newer login meanwhile
            if self.storage.get() == refresh_token:
                self.clear_refresh_token()
            raise

        access_token = self._accept(response)
        logger.info("Successfully refreshed access token")
        return access_token

    # Retrieve account
    async def get_user_info(self, access_token: AccessToken) -> Identity:
        """Fetch the identity behind ``access_token`` from the platform"""
        return await introspect_user(access_token, self.config, client=self._client)

    # Refresh token storage
    def has_refresh_token(self) -> bool:
        return self.storage.get() is not None

    def clear_refresh_token(self) -> None:
        """Erase the stored refresh token unconditionally

        A cached access token stays usable until it expires; use
        :meth:`logout` to drop both and return to ``UNAUTHENTICATED``.
        """
        self.storage.delete()

    def logout(self) -> None:
        """Forget every credential held for the current user"""
        self.clear_refresh_token()
        self._current_access_token = None
        logger.info("Logged out, credentials cleared")
