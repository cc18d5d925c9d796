"""Asynchronous range probe and chunk fetcher using httpx."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx

from ..core.model import ChunkRequest, CommunicationError, ProbeResult, ProtocolError
from .base import BufferFiller, check_range_response, evaluate_range_support, range_request_headers

logger = logging.getLogger(__name__)


def _httpx_timeout(timeout) -> httpx.Timeout | None:
    """Translate a requests-style timeout (seconds or (connect, read)) for httpx."""
    if timeout is None:
        return None
    if isinstance(timeout, tuple):
        connect, read = timeout
        return httpx.Timeout(None, connect=connect, read=read)
    return httpx.Timeout(timeout)


@asynccontextmanager
async def _client_scope(client: Optional[httpx.AsyncClient], timeout):
    """Yield the caller's client, or a fresh one closed on exit."""
    if client is not None:
        yield client
        return
    async with httpx.AsyncClient(timeout=_httpx_timeout(timeout), follow_redirects=True) as own:
        yield own


async def probe_range_support_async(locator: str, *, timeout=None,
                                    client: Optional[httpx.AsyncClient] = None) -> ProbeResult:
    """Async twin of :func:`lazyhttp.io.http_sync.probe_range_support`."""
    async with _client_scope(client, timeout) as c:
        try:
            response = await c.head(locator, follow_redirects=True)
        except httpx.RequestError as e:
            raise CommunicationError(f"HEAD request failed for {locator}: {e}") from e

    result = evaluate_range_support(response.headers)
    logger.debug("Range support for %s: %s", locator, result)
    return result


async def fetch_chunk_into_async(request: ChunkRequest, buffer, *, timeout=None,
                                 client: Optional[httpx.AsyncClient] = None) -> None:
    """Async twin of :func:`lazyhttp.io.http_sync.fetch_chunk_into`."""
    filler = BufferFiller(buffer, request.length)
    headers = range_request_headers(request)
    logger.debug("GET %s Range: %s", request.locator, headers["Range"])

    async with _client_scope(client, timeout) as c:
        try:
            async with c.stream("GET", request.locator, headers=headers) as response:
                check_range_response(request, response.status_code, response.headers)
                async for data in response.aiter_raw():
                    if filler.feed(data):
                        break
                filler.finish()
        except httpx.RemoteProtocolError as e:
            raise ProtocolError(f"Truncated response body from {request.locator}: {e}") from e
        except httpx.RequestError as e:
            raise CommunicationError(f"Range request failed for {request.locator}: {e}") from e


async def fetch_chunk_async(request: ChunkRequest, *, timeout=None,
                            client: Optional[httpx.AsyncClient] = None) -> bytes:
    buffer = bytearray(request.length)
    await fetch_chunk_into_async(request, buffer, timeout=timeout, client=client)
    return bytes(buffer)
