from __future__ import annotations
import threading
from dataclasses import dataclass
from typing import Dict, Union

from .config import DEFAULT_CHUNK_SIZE
from .keys import chunk_key, file_key
from .model import ChunkHandle, ChunkRequest, validate_locator


@dataclass(frozen=True, slots=True)
class VirtualFile:
    """A remote resource addressed as a sequence of fixed-size chunks."""
    locator: str
    length: int
    chunk_size: int = DEFAULT_CHUNK_SIZE

    def __post_init__(self):
        if self.length < 0:
            raise ValueError(f"Length cannot be negative: {self.length}")
        if self.chunk_size <= 0:
            raise ValueError(f"Chunk size must be positive: {self.chunk_size}")

    @property
    def key(self) -> bytes:
        return file_key(self.locator)

    @property
    def n_chunks(self) -> int:
        return -(-self.length // self.chunk_size)

    def _check(self, index: int) -> None:
        if not 0 <= index < self.n_chunks:
            raise IndexError(f"Chunk {index} out of range for {self.locator} ({self.n_chunks} chunks)")

    def chunk_offset(self, index: int) -> int:
        self._check(index)
        return index * self.chunk_size

    def chunk_length(self, index: int) -> int:
        # last chunk holds the remainder
        offset = self.chunk_offset(index)
        return min(self.chunk_size, self.length - offset)

    def chunk_handle(self, index: int) -> ChunkHandle:
        return ChunkHandle(chunk_key(self.locator, index), self.chunk_offset(index))

    def chunk_request(self, index: int) -> ChunkRequest:
        return self.chunk_handle(index).request(self.chunk_length(index))


Entry = Union[VirtualFile, bytes]


class VirtualFileRegistry:
    """Thread-safe map of file keys to lazily or eagerly registered resources."""

    def __init__(self, chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        self.chunk_size = chunk_size
        self._entries: Dict[bytes, Entry] = {}
        self._lock = threading.Lock()

    def register_lazy(self, locator: str, length: int) -> bytes:
        vf = VirtualFile(validate_locator(locator), length, self.chunk_size)
        with self._lock:
            self._entries[vf.key] = vf
        return vf.key

    def register_eager(self, locator: str, data: bytes) -> bytes:
        key = file_key(validate_locator(locator))
        with self._lock:
            self._entries[key] = bytes(data)
        return key

    def get(self, key: bytes) -> Entry:
        with self._lock:
            try:
                return self._entries[key]
            except KeyError:
                raise KeyError(f"No resource registered under {key!r}") from None

    def virtual_file(self, key: bytes) -> VirtualFile:
        entry = self.get(key)
        if not isinstance(entry, VirtualFile):
            raise TypeError(f"{key!r} was registered eagerly, not as a virtual file")
        return entry

    def eager_bytes(self, key: bytes) -> bytes:
        entry = self.get(key)
        if not isinstance(entry, bytes):
            raise TypeError(f"{key!r} is a lazily loaded virtual file")
        return entry

    def __contains__(self, key: bytes) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
