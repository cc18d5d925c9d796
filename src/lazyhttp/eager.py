"""Eager whole-resource download, the fallback when range reads are unavailable."""

import logging
from typing import Optional

import requests

from .core.model import CommunicationError, ProtocolError
from .core.registry import VirtualFileRegistry
from .io.http_sync import session_scope

logger = logging.getLogger(__name__)


def download_whole(locator: str, registry: VirtualFileRegistry, *, timeout=None,
                   session: Optional[requests.Session] = None) -> bytes:
    """Download the entire resource and register it; return its key."""
    with session_scope(session) as s:
        try:
            with s.get(locator, timeout=timeout) as response:
                if response.status_code != 200:
                    raise ProtocolError(f"GET {locator} failed with status {response.status_code}")
                data = response.content
        except requests.RequestException as e:
            raise CommunicationError(f"GET request failed for {locator}: {e}") from e

    logger.debug("Downloaded %d bytes from %s", len(data), locator)
    return registry.register_eager(locator, data)
