"""JSON retrieval over HTTP.

``fetch_json`` never raises: every failure is logged and turned into ``None``
so the orchestrator can decide what a missing resource means.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from migrationmap import config
from migrationmap.errors import ContentTypeError, HttpStatusError, NetworkError

logger = logging.getLogger(__name__)

TIMEOUT = httpx.Timeout(config.HTTP_TIMEOUT)


def make_client(**kwargs: Any) -> httpx.AsyncClient:
    """Build the async client used for a round of fetches."""
    kwargs.setdefault("timeout", TIMEOUT)
    kwargs.setdefault("follow_redirects", True)
    return httpx.AsyncClient(**kwargs)


async def _get_json(client: httpx.AsyncClient, url: str) -> Any:
    try:
        resp = await client.get(url)
    except httpx.HTTPError as exc:
        raise NetworkError(str(exc) or type(exc).__name__, url=url) from exc

    if not resp.is_success:
        raise HttpStatusError(resp.status_code, url=url)

    content_type = resp.headers.get("content-type")
    if not content_type or "application/json" not in content_type:
        raise ContentTypeError(content_type, url=url)

    try:
        return resp.json()
    except ValueError as exc:
        raise ContentTypeError(f"{content_type} (unparsable body)", url=url) from exc


async def fetch_json(client: httpx.AsyncClient, url: str) -> Any | None:
    """GET *url* and return its decoded JSON body, or None on any failure."""
    logger.info("Fetching %s", url)
    try:
        return await _get_json(client, url)
    except (NetworkError, ContentTypeError) as exc:
        logger.error(
            "Fetch failed | %s: %s (url=%s)",
            type(exc).__name__,
            exc,
            url,
        )
        return None
