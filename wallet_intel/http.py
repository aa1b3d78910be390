"""Shared aiohttp JSON fetch used by every provider adapter."""
from __future__ import annotations

import logging
import ssl
from typing import Any

import aiohttp
import certifi

logger = logging.getLogger(__name__)


async def fetch_json(
    url: str,
    params: dict[str, Any] | None = None,
    timeout: int = 30,
) -> Any | None:
    """GET ``url`` and decode JSON; ``None`` on non-200, network or decode errors."""
    ssl_context = ssl.create_default_context(cafile=certifi.where())
    connector = aiohttp.TCPConnector(ssl=ssl_context)

    try:
        async with aiohttp.ClientSession(connector=connector) as session:
            async with session.get(
                url,
                params=params,
                timeout=aiohttp.ClientTimeout(total=timeout),
            ) as response:
                if response.status != 200:
                    logger.warning("GET %s returned HTTP %s", url, response.status)
                    return None
                return await response.json(content_type=None)
    except Exception as e:
        logger.error("GET %s failed: %s", url, e)
        return None
