"""HTTP/HTTPS storage backend.

Read-only and range-addressable: chunks are loaded on demand with one range
request each. Writing, deleting and space reclamation are not available and
fail with UnsupportedOperationError.
"""

from __future__ import annotations
import enum
from typing import Iterable, Optional

from .core.config import Settings, load_settings
from .core.model import ChunkHandle, ImportReport, UnsupportedOperationError
from .core.registry import VirtualFileRegistry
from .importer import import_files
from .io.http_sync import fetch_chunk, fetch_chunk_into


class Capability(enum.Enum):
    READ = "read"
    IMPORT = "import"
    WRITE = "write"
    DELETE = "delete"
    CLEAN_UP = "clean_up"
    RESOLVE = "resolve"
    LIST = "list"


class HTTPBackend:
    name = "http"
    capabilities = frozenset({Capability.READ, Capability.IMPORT})

    def __init__(self, registry: VirtualFileRegistry | None = None, settings: Settings | None = None):
        self._settings = settings
        if registry is None:
            registry = VirtualFileRegistry(chunk_size=self.settings.chunk_size)
        self.registry = registry

    @property
    def settings(self) -> Settings:
        # re-read the environment unless pinned at construction
        return self._settings if self._settings is not None else load_settings()

    def supports(self, capability: Capability) -> bool:
        return capability in self.capabilities

    def _unsupported(self, operation: str) -> UnsupportedOperationError:
        return UnsupportedOperationError(operation, backend=self.name)

    # --- supported ---
    def import_files(self, locators: Iterable[str]) -> ImportReport:
        return import_files(locators, registry=self.registry, settings=self._settings)

    def load(self, handle: ChunkHandle, length: int) -> bytes:
        """Fetch ``length`` bytes of the chunk ``handle`` points at."""
        return fetch_chunk(handle.request(length), timeout=self.settings.timeout)

    def load_into(self, handle: ChunkHandle, buffer) -> None:
        request = handle.request(len(memoryview(buffer).cast("B")))
        fetch_chunk_into(request, buffer, timeout=self.settings.timeout)

    def read_chunk(self, key: bytes, index: int) -> bytes:
        """Fetch chunk ``index`` of a lazily registered virtual file."""
        vf = self.registry.virtual_file(key)
        return self.load(vf.chunk_handle(index), vf.chunk_length(index))

    # --- unsupported ---
    def store(self, handle: ChunkHandle, data: bytes, *, home: bool = True) -> None:
        if not home:
            return  # owned by another node, nothing to do here
        raise self._unsupported("store")

    def delete(self, handle: ChunkHandle) -> None:
        raise self._unsupported("delete")

    def clean_up(self) -> None:
        raise self._unsupported("clean_up")

    def uri_to_key(self, uri: str) -> bytes:
        raise self._unsupported("uri_to_key")

    def typeahead(self, prefix: str, limit: Optional[int] = None) -> list:
        raise self._unsupported("typeahead")
