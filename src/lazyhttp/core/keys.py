"""Key codec for HTTP-backed virtual files.

A whole-file key is the raw UTF-8 locator. A chunk key prefixes the
locator with ``CHUNK_MARKER`` and the chunk index as 8 big-endian bytes.
"""

from __future__ import annotations
import struct

CHUNK_MARKER = 0x02
_INDEX = struct.Struct(">q")
KEY_PREFIX_LEN = 1 + _INDEX.size      # marker + chunk index


def file_key(locator: str) -> bytes:
    return locator.encode("utf-8")


def chunk_key(locator: str, index: int) -> bytes:
    if index < 0:
        raise ValueError(f"Chunk index cannot be negative: {index}")
    return bytes((CHUNK_MARKER,)) + _INDEX.pack(index) + file_key(locator)


def is_chunk_key(key: bytes) -> bool:
    return len(key) > KEY_PREFIX_LEN and key[0] == CHUNK_MARKER


def chunk_index(key: bytes) -> int:
    """Return the chunk index of a chunk key, 0 for a whole-file key."""
    if not is_chunk_key(key):
        return 0
    return _INDEX.unpack_from(key, 1)[0]


def decode_locator(key: bytes) -> str:
    """Strip the chunk prefix (if any) and return the locator."""
    raw = key[KEY_PREFIX_LEN:] if is_chunk_key(key) else key
    return raw.decode("utf-8")


def key_to_str(key: bytes) -> str:
    """Human-readable key: the locator, with ``#<index>`` for chunk keys."""
    if is_chunk_key(key):
        return f"{decode_locator(key)}#{chunk_index(key)}"
    return decode_locator(key)
