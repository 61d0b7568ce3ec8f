"""HTTP utilities for the Content Delivery API."""

import asyncio
from typing import Any

import aiohttp
import structlog

from ..constants import CONSTANTS
from ..core.exceptions import FetchError

logger = structlog.get_logger(__name__)


def encode_params(params: dict[str, Any]) -> dict[str, str]:
    """Convert query values into the string form the API expects.

    Booleans become ``true``/``false`` and sequences are comma joined, which
    is how the API reads ``[in]`` style filters and ``select`` lists.
    """
    encoded = {}
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, bool):
            encoded[key] = "true" if value else "false"
        elif isinstance(value, (list, tuple, set, frozenset)):
            encoded[key] = ",".join(str(item) for item in value)
        else:
            encoded[key] = str(value)
    return encoded


def auth_headers(access_token: str) -> dict[str, str]:
    """Bearer authorization header for a delivery token."""
    return {"Authorization": f"Bearer {access_token}"}


def describe_error_status(status: int) -> str:
    """Short human readable reason for a failed API status."""
    if status == CONSTANTS.HTTP_STATUS_UNAUTHORIZED:
        return "access token rejected"
    if status == CONSTANTS.HTTP_STATUS_NOT_FOUND:
        return "space, environment or content type not found"
    if status >= CONSTANTS.HTTP_STATUS_SERVER_ERROR:
        return "server error"
    return "unexpected status"


async def get_json(
    session: aiohttp.ClientSession,
    url: str,
    params: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
    timeout: int | None = None,
) -> dict[str, Any]:
    """Perform a GET request and decode the JSON body.

    Args:
        session: aiohttp session
        url: URL to fetch
        params: Query parameters
        headers: Extra request headers
        timeout: Request timeout in seconds (uses default if None)

    Returns:
        Decoded JSON object

    Raises:
        FetchError: On connection errors, timeouts, non-2xx statuses or a
            body that is not a JSON object
    """
    timeout = timeout or CONSTANTS.DEFAULT_TIMEOUT
    query = encode_params(params or {})

    try:
        async with session.get(
            url,
            params=query,
            headers=headers,
            timeout=aiohttp.ClientTimeout(total=timeout),
        ) as response:
            if not 200 <= response.status < 300:
                reason = describe_error_status(response.status)
                logger.error("API request failed", url=url, status=response.status, reason=reason)
                raise FetchError(
                    f"Request failed with status {response.status}: {reason}",
                    status=response.status,
                )

            payload = await response.json(content_type=None)
            logger.debug("API request successful", url=url, status=response.status)

    except aiohttp.ClientError as e:
        logger.error("HTTP client error", url=url, error=str(e))
        raise FetchError(f"Failed to fetch {url}: {e}", cause=e) from e
    except asyncio.TimeoutError as e:
        logger.error("HTTP request timeout", url=url, timeout=timeout)
        raise FetchError(f"Request timed out after {timeout}s: {url}", cause=e) from e
    except ValueError as e:
        raise FetchError(f"Invalid JSON returned by {url}", cause=e) from e

    if not isinstance(payload, dict):
        raise FetchError(f"Expected a JSON object from {url}, got {type(payload).__name__}")
    return payload
