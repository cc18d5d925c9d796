"""lazyhttp - read remote HTTP resources as chunked virtual files, on demand."""

from .core.model import (                                             # re-export
    ChunkHandle, ChunkRequest, ProbeResult, ImportReport,
    LazyRegistered, EagerRegistered, Failed,
    LazyHTTPError, CommunicationError, ProtocolError,
    RangeNotSupportedError, UnsupportedOperationError,
)
from .core.config import Settings, load_settings
from .core.registry import VirtualFile, VirtualFileRegistry
from .io import (
    probe_range_support, fetch_chunk, fetch_chunk_into,
    probe_range_support_async, fetch_chunk_async, fetch_chunk_into_async,
)
from .importer import import_file, import_files
from .backend import Capability, HTTPBackend
