from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Union

from .keys import decode_locator, key_to_str


class LazyHTTPError(IOError):
    """Base class for failures talking to an HTTP origin."""


class CommunicationError(LazyHTTPError):
    """Raised when the origin cannot be reached (connection, DNS, timeout)."""


class ProtocolError(LazyHTTPError):
    """Raised when the origin answers, but not the way a range read requires."""


class RangeNotSupportedError(RuntimeError):
    """Raised when the origin does not advertise byte-range support."""


class UnsupportedOperationError(NotImplementedError):
    """Raised for operations a storage backend does not implement."""

    def __init__(self, operation: str, backend: str = "http"):
        super().__init__(f"Operation '{operation}' is not supported for the {backend} backend")
        self.operation = operation
        self.backend = backend


def validate_locator(locator: str) -> str:
    if not isinstance(locator, str) or not locator.startswith(("http://", "https://")):
        raise ValueError(f"Not an absolute http(s) URI: {locator!r}")
    return locator


@dataclass(frozen=True, slots=True)
class ChunkRequest:
    locator: str
    offset: int
    length: int

    def __post_init__(self):
        if self.offset < 0:
            raise ValueError(f"Chunk offset cannot be negative: {self.offset}")
        if self.length <= 0:
            raise ValueError(f"Chunk length must be positive: {self.length}")

    @property
    def end(self) -> int:
        """Index of the last byte included in the chunk."""
        return self.offset + self.length - 1

    @property
    def range_header(self) -> str:
        return f"bytes={self.offset}-{self.end}"


@dataclass(frozen=True, slots=True)
class ChunkHandle:
    """Engine key of a chunk plus its byte offset in the virtual file."""
    key: bytes
    offset: int = 0               # 0 for a whole-file key

    def __post_init__(self):
        if self.offset < 0:
            raise ValueError(f"Chunk offset cannot be negative: {self.offset}")

    @property
    def locator(self) -> str:
        return decode_locator(self.key)

    def request(self, length: int) -> ChunkRequest:
        return ChunkRequest(self.locator, self.offset, length)


@dataclass(frozen=True, slots=True)
class ProbeResult:
    supports_range: bool
    content_length: int | None = None

    @property
    def total_length(self) -> int:
        if not self.supports_range or self.content_length is None:
            raise RangeNotSupportedError("Origin does not support byte-range requests")
        return self.content_length


# --- import outcomes ---
@dataclass(frozen=True, slots=True)
class LazyRegistered:
    locator: str
    key: bytes
    success: bool = field(default=True, init=False)


@dataclass(frozen=True, slots=True)
class EagerRegistered:
    locator: str
    key: bytes
    success: bool = field(default=True, init=False)


@dataclass(frozen=True, slots=True)
class Failed:
    locator: str
    reason: str | None = None
    success: bool = field(default=False, init=False)


ImportOutcome = Union[LazyRegistered, EagerRegistered, Failed]


@dataclass(slots=True)
class ImportReport:
    """Ordered result lists of a batch import.

    ``files[i]`` and ``keys[i]`` always describe the same locator; failed
    locators only appear in ``fails``.
    """
    files: List[str] = field(default_factory=list)
    keys: List[str] = field(default_factory=list)
    fails: List[str] = field(default_factory=list)
    outcomes: List[ImportOutcome] = field(default_factory=list)

    def add(self, outcome: ImportOutcome) -> None:
        if outcome.success:
            self.files.append(outcome.locator)
            self.keys.append(key_to_str(outcome.key))
        else:
            self.fails.append(outcome.locator)
        self.outcomes.append(outcome)

    @property
    def lazy_count(self) -> int:
        return sum(isinstance(o, LazyRegistered) for o in self.outcomes)

    def as_dict(self) -> Dict[str, Any]:
        """Return a JSON-serialisable view of the report."""
        return {
            "files": list(self.files),
            "keys": list(self.keys),
            "fails": list(self.fails),
            "lazy": self.lazy_count,
            "eager": len(self.files) - self.lazy_count,
        }

