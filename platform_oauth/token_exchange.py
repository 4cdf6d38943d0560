"""Authorization-code exchange against the Penn Labs Platform token endpoint"""

import logging
from typing import Optional

import httpx

from .errors import PlatformAuthError
from .models import OAuthConfig, TokenResponse
from .transport import decode, post_form

logger = logging.getLogger(__name__)


async def exchange_code_for_tokens(
    code: str,
    code_verifier: str,
    config: OAuthConfig,
    client: Optional[httpx.AsyncClient] = None,
) -> TokenResponse:
    """Exchange an authorization code for an access/refresh token pair

    Args:
        code: One-time authorization code from the redirect
        code_verifier: PKCE verifier whose challenge started the login
        config: Client registration
        client: Optional shared HTTP client

    Returns:
        The decoded token response

    Raises:
        MissingCredentials: If the client is not configured
        PlatformAuthError: On any non-200, malformed body, or network failure
    """
    config.require()

    data = {
        "code": code,
        "grant_type": "authorization_code",
        "client_id": config.client_id,
        "redirect_uri": config.redirect_uri,
        "code_verifier": code_verifier,
    }

    logger.info(f"Exchanging authorization code for tokens at {config.token_url}")
    response = await post_form(config.token_url, data, timeout=config.timeout, client=client)

    if response.status_code != 200:
        logger.error(f"Token exchange failed with status {response.status_code}: {response.text}")
        raise PlatformAuthError(
            f"Token exchange failed with status {response.status_code}",
            status_code=response.status_code,
        )

    return decode(response, TokenResponse)
