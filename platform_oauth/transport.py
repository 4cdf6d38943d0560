"""HTTP plumbing shared by the token and introspection calls"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Optional, Type, TypeVar
from urllib.parse import urlencode

import httpx
from pydantic import BaseModel, ValidationError

from .errors import PlatformAuthError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def bearer_headers(access_token: str) -> Dict[str, str]:
    """Headers carrying ``access_token`` as a bearer credential

    X-Authorization duplicates Authorization because some request
    environments silently drop the standard header.
    """
    value = f"Bearer {access_token}"
    return {"Authorization": value, "X-Authorization": value}


@asynccontextmanager
async def _client_session(client: Optional[httpx.AsyncClient]) -> AsyncIterator[httpx.AsyncClient]:
    if client is not None:
        yield client
        return
    async with httpx.AsyncClient() as session:
        yield session


async def post_form(
    url: str,
    data: Dict[str, str],
    *,
    timeout: float,
    client: Optional[httpx.AsyncClient] = None,
    headers: Optional[Dict[str, str]] = None,
) -> httpx.Response:
    """POST ``data`` form-encoded to ``url``

    Raises:
        PlatformAuthError: On timeout or any transport failure
    """
    request_headers = {"Content-Type": "application/x-www-form-urlencoded"}
    if headers:
        request_headers.update(headers)

    try:
        async with _client_session(client) as session:
            response = await session.post(
                url,
                content=urlencode(data),
                headers=request_headers,
                timeout=timeout,
            )
    except httpx.TimeoutException as e:
        logger.error(f"Request to {url} timed out after {timeout} seconds: {e}")
        raise PlatformAuthError(f"Request to {url} timed out") from e
    except httpx.HTTPError as e:
        logger.error(f"Request to {url} failed: {e}")
        raise PlatformAuthError(f"Request to {url} failed: {e}") from e

    logger.debug(f"{url} responded with status {response.status_code}")
    return response


def decode(response: httpx.Response, model: Type[ModelT]) -> ModelT:
    """Parse the JSON body of ``response`` into ``model``

    Raises:
        PlatformAuthError: If the body is not JSON or does not match ``model``
    """
    try:
        return model.model_validate(response.json())
    except (ValueError, ValidationError) as e:
        logger.error(f"Malformed {model.__name__} from {response.request.url}: {e}")
        raise PlatformAuthError(
            f"Malformed response from platform ({model.__name__})",
            status_code=response.status_code,
        ) from e
