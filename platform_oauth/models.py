"""Data models for Penn Labs Platform OAuth"""

import datetime
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from settings import (
    CLIENT_ID,
    REDIRECT_URI,
    PLATFORM_URL,
    REQUEST_TIMEOUT,
    AUTHORIZE_PATH,
    TOKEN_PATH,
    INTROSPECT_PATH,
)
from .errors import MissingCredentials

# Ten years; anything longer is treated as a malformed token response
MAX_EXPIRES_IN = 10 * 365 * 24 * 60 * 60


@dataclass(frozen=True)
class AccessToken:
    """Short-lived bearer credential

    Attributes:
        value: Opaque bearer string (kept out of repr)
        expiration: Absolute, timezone-aware expiry time
    """
    value: str = field(repr=False)
    expiration: datetime.datetime

    def is_expired(self, now: datetime.datetime) -> bool:
        return now >= self.expiration


class CredentialState(str, Enum):
    """Where a credential manager sits in the login lifecycle"""
    UNAUTHENTICATED = "unauthenticated"
    VALID = "valid"
    EXPIRED = "expired"


class Identity(BaseModel):
    """A Penn Labs Platform user as returned by introspection"""
    model_config = ConfigDict(frozen=True)

    first_name: str
    last_name: str
    pennid: int
    username: str
    email: Optional[str] = None
    affiliation: List[str]

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class TokenResponse(BaseModel):
    """Successful response from the token endpoint (both grants)"""
    expires_in: int = Field(ge=0, le=MAX_EXPIRES_IN)
    access_token: str = Field(min_length=1)
    refresh_token: str = Field(min_length=1)


class TokenErrorResponse(BaseModel):
    """Error body returned by the token endpoint with HTTP 400"""
    error: str


class IntrospectionResponse(BaseModel):
    user: Identity


@dataclass(frozen=True)
class OAuthConfig:
    """Client registration and platform location

    Attributes:
        client_id: OAuth client identifier issued by Penn Labs
        redirect_uri: Registered redirect URI the login UI watches for
        platform_url: Base URL of the identity provider
        timeout: Total timeout for each platform request, in seconds
    """
    client_id: Optional[str]
    redirect_uri: Optional[str]
    platform_url: str = PLATFORM_URL
    timeout: float = REQUEST_TIMEOUT

    @classmethod
    def from_settings(cls) -> "OAuthConfig":
        return cls(
            client_id=CLIENT_ID,
            redirect_uri=REDIRECT_URI,
            platform_url=PLATFORM_URL,
            timeout=REQUEST_TIMEOUT,
        )

    def require(self) -> None:
        """Raise MissingCredentials unless both client ID and redirect URI are set"""
        missing = [
            name for name, value in (("client_id", self.client_id), ("redirect_uri", self.redirect_uri))
            if not value
        ]
        if missing:
            raise MissingCredentials(
                f"Platform login is missing credentials: {', '.join(missing)}. "
                "Set PLATFORM_CLIENT_ID and PLATFORM_REDIRECT_URI."
            )

    def _url(self, path: str) -> str:
        return f"{self.platform_url.rstrip('/')}{path}"

    @property
    def authorize_url(self) -> str:
        return self._url(AUTHORIZE_PATH)

    @property
    def token_url(self) -> str:
        return self._url(TOKEN_PATH)

    @property
    def introspect_url(self) -> str:
        return self._url(INTROSPECT_PATH)
