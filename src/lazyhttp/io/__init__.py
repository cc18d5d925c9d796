"""I/O layer for lazyhttp - range probes and chunk fetches against HTTP origins."""

# Re-export these for import convenience
from .base import evaluate_range_support
from .http_sync import probe_range_support, fetch_chunk, fetch_chunk_into
from .http_async import probe_range_support_async, fetch_chunk_async, fetch_chunk_into_async
from .length import parse_content_length, parse_content_range_length, response_length
