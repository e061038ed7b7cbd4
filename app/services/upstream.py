import logging
from typing import Any

import httpx

from app.config import settings
from app.utils.exceptions import AppException, InternalError, UpstreamError

logger = logging.getLogger(__name__)

API_KEY_MISSING = "API key is not configured on the server."
INTERNAL_ERROR = "An internal server error occurred."


def require_api_key(value: str, env_name: str) -> str:
    if not value:
        logger.error("%s environment variable not set", env_name)
        raise AppException(API_KEY_MISSING, status_code=500)
    return value


async def post_json(
    url: str,
    payload: dict,
    *,
    api_name: str,
    params: dict | None = None,
    client: httpx.AsyncClient | None = None,
) -> Any:
    """POST ``payload`` to an upstream JSON API and return the decoded reply.

    A non-2xx reply becomes ``UpstreamError`` with the upstream status and
    message; network failures and undecodable bodies become a 500.
    """
    owns_client = client is None
    http = client or httpx.AsyncClient(timeout=settings.upstream_timeout_seconds)
    try:
        response = await http.post(url, json=payload, params=params)
        logger.info("%s responded with status %d", api_name, response.status_code)
        data = response.json()
    except httpx.HTTPError as e:
        logger.error("%s request failed: %s", api_name, e)
        raise InternalError(INTERNAL_ERROR) from e
    except ValueError as e:
        logger.error("%s returned a non-JSON body", api_name)
        raise InternalError(INTERNAL_ERROR) from e
    finally:
        if owns_client:
            await http.aclose()

    if response.is_error:
        logger.error("%s error response: %s", api_name, data)
        raise UpstreamError(
            f"{api_name} request failed: {upstream_message(data, api_name)}",
            status_code=response.status_code,
        )
    return data


def upstream_message(data: Any, api_name: str) -> str:
    error = data.get("error") if isinstance(data, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return error["message"]
    return f"An unknown error occurred with the {api_name}."
