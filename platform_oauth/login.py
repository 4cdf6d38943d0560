"""Completing a login once the user has been redirected back"""

import logging

from .authorization import AuthorizationURLBuilder
from .errors import PlatformAuthError
from .models import Identity
from .token_manager import CredentialManager

logger = logging.getLogger(__name__)


async def complete_login(
    manager: CredentialManager,
    auth_builder: AuthorizationURLBuilder,
    redirect_url: str,
) -> Identity:
    """Turn the redirect observed by the login UI into a logged-in identity

    Extracts the authorization code, exchanges it with the verifier of the
    current attempt, then introspects the new access token. The PKCE pair is
    dropped afterwards whether or not the login succeeded.

    Args:
        manager: Credential manager that will own the new tokens
        auth_builder: Builder whose authorize URL started this attempt
        redirect_url: Full URL the browser was sent to after consent

    Returns:
        The logged-in user's identity

    Raises:
        MissingCredentials: If the client is not configured
        PlatformAuthError: If the URL carries no code, or exchange or
            introspection fails
    """
    pkce = auth_builder.pkce
    try:
        code = auth_builder.extract_authorization_code(redirect_url)
        if not code:
            raise PlatformAuthError("No authorization code found in redirect URL")

        if not pkce.code_verifier:
            raise PlatformAuthError("No PKCE verifier for this login attempt; start the login again")

        access_token = await manager.exchange_code(code, pkce.code_verifier)
        user = await manager.get_user_info(access_token)
    finally:
        pkce.clear_pkce()

    logger.info(f"Logged in as {user.username}")
    return user
