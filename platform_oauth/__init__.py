"""Penn Labs Platform OAuth module

OAuth2 Authorization Code flow with PKCE against the Penn Labs Platform,
with a credential manager that caches the access token and keeps it fresh
using the stored refresh token.
"""

from .errors import (
    AuthError,
    MissingCredentials,
    NoRefreshToken,
    RefreshTokenInvalid,
    PlatformAuthError,
)
from .models import AccessToken, CredentialState, Identity, OAuthConfig
from .pkce import PKCEManager, generate_verifier, derive_challenge
from .authorization import AuthorizationURLBuilder
from .token_exchange import exchange_code_for_tokens
from .token_refresh import refresh_tokens
from .introspection import get_user_info
from .token_manager import CredentialManager
from .login import complete_login

__all__ = [
    "AuthError",
    "MissingCredentials",
    "NoRefreshToken",
    "RefreshTokenInvalid",
    "PlatformAuthError",
    "AccessToken",
    "CredentialState",
    "Identity",
    "OAuthConfig",
    "PKCEManager",
    "generate_verifier",
    "derive_challenge",
    "AuthorizationURLBuilder",
    "exchange_code_for_tokens",
    "refresh_tokens",
    "get_user_info",
    "CredentialManager",
    "complete_login",
]
