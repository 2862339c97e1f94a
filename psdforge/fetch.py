"""
Async byte fetcher.

Downloads templates and replacement images over HTTP(S) with httpx. Every
failure (bad status, transport error, timeout, oversize body) is raised as
FetchError; whether that is fatal is up to the caller.
"""

import logging
from typing import Optional

import httpx

from psdforge.errors import FetchError

logger = logging.getLogger(__name__)


class Fetcher:
    """Fetches the body of a URL."""

    def __init__(
        self,
        timeout: float = 30.0,
        max_bytes: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            timeout: Seconds before a request is abandoned
            max_bytes: Largest accepted body, None for no limit
            transport: httpx transport override (tests use MockTransport)
        """
        self.timeout = timeout
        self.max_bytes = max_bytes
        self._transport = transport

    async def fetch(self, url: str, max_bytes: Optional[int] = None) -> bytes:
        """
        Download a URL.

        Args:
            url: http(s) URL
            max_bytes: Overrides the fetcher's size limit for this request

        Returns:
            Response body

        Raises:
            FetchError: If the body cannot be retrieved
        """
        limit = max_bytes if max_bytes is not None else self.max_bytes
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                async with client.stream("GET", url) as response:
                    if response.status_code >= 400:
                        raise FetchError(
                            f"Failed to download {url}: HTTP {response.status_code}"
                        )
                    chunks = []
                    size = 0
                    async for chunk in response.aiter_bytes():
                        size += len(chunk)
                        if limit is not None and size > limit:
                            raise FetchError(f"Response from {url} exceeds {limit} bytes")
                        chunks.append(chunk)
        except httpx.TimeoutException as e:
            raise FetchError(f"Timed out downloading {url}") from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise FetchError(f"Failed to download {url}: {e}") from e

        data = b''.join(chunks)
        logger.debug(f"Fetched {url} ({len(data)} bytes)")
        return data
