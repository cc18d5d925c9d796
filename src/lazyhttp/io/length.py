"""Content-Length / Content-Range parsing shared by the probe and the fetcher."""

from __future__ import annotations
from typing import Mapping, Optional

from ..core.model import ProtocolError


def parse_content_length(value: Optional[str]) -> Optional[int]:
    """Return the header value as a non-negative int, or None if absent/unparseable."""
    if value is None:
        return None
    value = value.strip()
    if not (value.isascii() and value.isdigit()):
        return None
    return int(value)


def parse_content_range_length(value: Optional[str]) -> int:
    """Return ``end - start + 1`` for a ``bytes <start>-<end>/<total>`` header."""
    if value is None:
        raise ProtocolError("Content-Range header not available")
    if not value.startswith("bytes"):
        raise ProtocolError(f"Only 'bytes' range is supported: {value!r}")

    parts = value[len("bytes"):].strip().split("/")
    if len(parts) != 2:
        raise ProtocolError(f"Cannot parse Content-Range header: {value!r}")
    bounds = parts[0].split("-")
    if len(bounds) != 2:
        raise ProtocolError(f"Cannot interpret range in Content-Range header: {value!r}")
    try:
        start, end = int(bounds[0]), int(bounds[1])
    except ValueError as e:
        raise ProtocolError(f"Non-numeric range in Content-Range header: {value!r}") from e
    if start < 0 or end < start:
        raise ProtocolError(f"Invalid range in Content-Range header: {value!r}")
    return end - start + 1


def response_length(headers: Mapping[str, str]) -> int:
    """Byte count of a range response: Content-Length first, then Content-Range.

    ``headers`` must be case-insensitive (requests and httpx headers both are).
    """
    declared = parse_content_length(headers.get("content-length"))
    if declared is not None:
        return declared
    return parse_content_range_length(headers.get("content-range"))
