"""HTTP session utilities for safari-publisher."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import aiohttp

from safari_publisher.constants import DEFAULT_TIMEOUT_SECONDS


@asynccontextmanager
async def create_http_session(
    timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS,
) -> AsyncIterator[aiohttp.ClientSession]:
    """Create configured HTTP session.

    Uploads and downloads of packaged builds can take minutes; connect and
    read stalls still fail quickly.

    Args:
        timeout_seconds: Base timeout used to derive the individual limits

    Yields:
        Configured aiohttp.ClientSession

    """
    timeout = aiohttp.ClientTimeout(
        total=timeout_seconds * 20,
        sock_read=timeout_seconds * 3,
        sock_connect=timeout_seconds,
    )
    async with aiohttp.ClientSession(timeout=timeout) as session:
        yield session
