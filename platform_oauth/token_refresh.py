"""Refresh-token grant against the Penn Labs Platform token endpoint"""

import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from .errors import PlatformAuthError, RefreshTokenInvalid
from .models import OAuthConfig, TokenErrorResponse, TokenResponse
from .transport import decode, post_form

logger = logging.getLogger(__name__)

INVALID_GRANT = "invalid_grant"


def _error_code(response: httpx.Response) -> Optional[str]:
    try:
        return TokenErrorResponse.model_validate(response.json()).error
    except (ValueError, ValidationError):
        return None


async def refresh_tokens(
    refresh_token: str,
    config: OAuthConfig,
    client: Optional[httpx.AsyncClient] = None,
) -> TokenResponse:
    """Trade a refresh token for a new access/refresh token pair

    The platform rotates refresh tokens, so the returned refresh token
    supersedes ``refresh_token``.

    Raises:
        MissingCredentials: If the client is not configured
        RefreshTokenInvalid: If the platform answers 400 ``invalid_grant``
        PlatformAuthError: On any other failure
    """
    config.require()

    data = {
        "refresh_token": refresh_token,
        "grant_type": "refresh_token",
        "client_id": config.client_id,
    }

    logger.info("Attempting to refresh access token...")
    response = await post_form(config.token_url, data, timeout=config.timeout, client=client)

    if response.status_code == 200:
        return decode(response, TokenResponse)

    if response.status_code == 400 and _error_code(response) == INVALID_GRANT:
        raise RefreshTokenInvalid("Refresh token was rejected by the platform (invalid_grant)")

    logger.error(f"Token refresh failed with status {response.status_code}: {response.text}")
    raise PlatformAuthError(
        f"Token refresh failed with status {response.status_code}",
        status_code=response.status_code,
    )
