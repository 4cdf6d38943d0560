"""Identity lookup through the Penn Labs Platform introspection endpoint"""

import logging
from typing import Optional

import httpx

from .errors import PlatformAuthError
from .models import AccessToken, Identity, IntrospectionResponse, OAuthConfig
from .transport import bearer_headers, decode, post_form

logger = logging.getLogger(__name__)


async def get_user_info(
    access_token: AccessToken,
    config: OAuthConfig,
    client: Optional[httpx.AsyncClient] = None,
) -> Identity:
    """Fetch the identity that owns ``access_token``

    Does not refresh on 401; callers go through
    ``CredentialManager.get_access_token`` first.

    Raises:
        MissingCredentials: If the client is not configured
        PlatformAuthError: On any non-200, malformed body, or network failure
    """
    config.require()

    response = await post_form(
        config.introspect_url,
        {"token": access_token.value},
        timeout=config.timeout,
        client=client,
        headers=bearer_headers(access_token.value),
    )

    if response.status_code != 200:
        logger.error(f"Introspection failed with status {response.status_code}")
        raise PlatformAuthError(
            f"Introspection failed with status {response.status_code}",
            status_code=response.status_code,
        )

    user = decode(response, IntrospectionResponse).user
    logger.debug(f"Introspected user {user.username}")
    return user
