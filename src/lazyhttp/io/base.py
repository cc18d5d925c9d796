"""Shared pieces of the sync and async HTTP transports."""

from __future__ import annotations
from typing import Dict, Mapping

from ..core.model import ChunkRequest, ProbeResult, ProtocolError
from .length import parse_content_length, response_length

PARTIAL_CONTENT = 206
STREAM_CHUNK = 64 * 1024


def evaluate_range_support(headers: Mapping[str, str]) -> ProbeResult:
    """Decide range support from HEAD response headers (case-insensitive mapping)."""
    accept_ranges = (headers.get("accept-ranges") or "").strip().lower()
    content_length = parse_content_length(headers.get("content-length"))
    if accept_ranges != "bytes" or content_length is None:
        return ProbeResult(supports_range=False, content_length=content_length)
    return ProbeResult(supports_range=True, content_length=content_length)


def range_request_headers(request: ChunkRequest) -> Dict[str, str]:
    # identity encoding keeps the declared length equal to the raw byte count
    return {"Range": request.range_header, "Accept-Encoding": "identity"}


def check_range_response(request: ChunkRequest, status_code: int, headers: Mapping[str, str]) -> None:
    """Validate status and length of a range response before any byte is copied."""
    if status_code != PARTIAL_CONTENT:
        raise ProtocolError(
            f"Expected a partial content response for {request.locator} (status: {status_code})"
        )
    received = response_length(headers)
    if received != request.length:
        raise ProtocolError(
            f"Received incorrect amount of data (expected: {request.length}B, received: {received}B)"
        )


class BufferFiller:
    """Copies streamed body chunks into a fixed-size writable buffer."""

    def __init__(self, buffer, length: int):
        view = memoryview(buffer).cast("B")
        if view.readonly:
            raise ValueError("Output buffer is read-only")
        if len(view) != length:
            raise ValueError(f"Output buffer holds {len(view)} bytes, chunk needs {length}")
        self._view = view
        self.filled = 0

    @property
    def full(self) -> bool:
        return self.filled >= len(self._view)

    def feed(self, data: bytes) -> bool:
        """Copy as much of ``data`` as fits; return True once the buffer is full."""
        n = min(len(data), len(self._view) - self.filled)
        self._view[self.filled:self.filled + n] = data[:n]
        self.filled += n
        return self.full

    def finish(self) -> None:
        if not self.full:
            raise ProtocolError(
                f"Unexpected end of stream: read {self.filled} of {len(self._view)} bytes"
            )
