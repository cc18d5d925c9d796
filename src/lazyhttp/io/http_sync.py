"""Synchronous range probe and chunk fetcher using requests."""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

import requests
import urllib3

from ..core.model import ChunkRequest, CommunicationError, ProbeResult, ProtocolError
from .base import BufferFiller, STREAM_CHUNK, check_range_response, evaluate_range_support, range_request_headers

logger = logging.getLogger(__name__)


@contextmanager
def session_scope(session: Optional[requests.Session]) -> Iterator[requests.Session]:
    """Yield the caller's session, or a fresh one closed on exit."""
    if session is not None:
        yield session
        return
    with requests.Session() as own:
        yield own


def probe_range_support(locator: str, *, timeout=None, session: Optional[requests.Session] = None) -> ProbeResult:
    """HEAD the locator and report whether byte-range reads are possible.

    A negative answer is a normal outcome; only transport failures raise
    (CommunicationError).
    """
    with session_scope(session) as s:
        try:
            with s.head(locator, allow_redirects=True, timeout=timeout) as response:
                result = evaluate_range_support(response.headers)
        except requests.RequestException as e:
            raise CommunicationError(f"HEAD request failed for {locator}: {e}") from e

    logger.debug("Range support for %s: %s", locator, result)
    return result


def fetch_chunk_into(request: ChunkRequest, buffer, *, timeout=None,
                     session: Optional[requests.Session] = None) -> None:
    """Fill ``buffer`` (exactly ``request.length`` bytes) with one range request."""
    filler = BufferFiller(buffer, request.length)
    headers = range_request_headers(request)
    logger.debug("GET %s Range: %s", request.locator, headers["Range"])

    with session_scope(session) as s:
        try:
            with s.get(request.locator, headers=headers, stream=True, timeout=timeout) as response:
                check_range_response(request, response.status_code, response.headers)
                # undecoded bytes: the declared length counts the wire encoding
                for data in response.raw.stream(STREAM_CHUNK, decode_content=False):
                    if filler.feed(data):
                        break
                filler.finish()
        except urllib3.exceptions.ProtocolError as e:
            raise ProtocolError(f"Truncated response body from {request.locator}: {e}") from e
        except urllib3.exceptions.HTTPError as e:
            raise CommunicationError(f"Reading response body failed for {request.locator}: {e}") from e
        except requests.RequestException as e:
            raise CommunicationError(f"Range request failed for {request.locator}: {e}") from e


def fetch_chunk(request: ChunkRequest, *, timeout=None, session: Optional[requests.Session] = None) -> bytes:
    """Return exactly ``request.length`` bytes starting at ``request.offset``."""
    buffer = bytearray(request.length)
    fetch_chunk_into(request, buffer, timeout=timeout, session=session)
    return bytes(buffer)
