"""Import decision: register a resource lazily when the origin supports byte
ranges, otherwise download it eagerly.

Failures never escape this module; they are returned as ``Failed`` outcomes
so a batch import always runs to the end.
"""

import logging
from typing import Callable, Iterable, Optional

from .core.config import Settings, load_settings
from .core.model import (
    EagerRegistered, Failed, ImportOutcome, ImportReport, LazyRegistered, ProbeResult,
    RangeNotSupportedError,
)
from .core.registry import VirtualFileRegistry
from .eager import download_whole
from .io.http_sync import probe_range_support

logger = logging.getLogger(__name__)

Prober = Callable[..., ProbeResult]
EagerLoader = Callable[..., bytes]


def _try_lazy(locator: str, registry: VirtualFileRegistry, settings: Settings,
              probe: Prober) -> Optional[LazyRegistered]:
    try:
        length = probe(locator, timeout=settings.timeout).total_length
        key = registry.register_lazy(locator, length)
    except RangeNotSupportedError:
        logger.debug("Range requests not supported by %s, loading eagerly", locator)
        return None
    except Exception as e:
        # probe or registration failure: fall back to the eager path
        logger.debug("Failed to detect range support for %s: %s", locator, e, exc_info=True)
        return None
    return LazyRegistered(locator, key)


def import_file(locator: str, *, registry: VirtualFileRegistry,
                eager_loader: Optional[EagerLoader] = None,
                settings: Optional[Settings] = None,
                probe: Prober = probe_range_support) -> ImportOutcome:
    """Import one locator, returning exactly one outcome."""
    if settings is None:
        settings = load_settings()
    if eager_loader is None:
        eager_loader = download_whole

    if settings.enable_lazy_load:
        outcome = _try_lazy(locator, registry, settings, probe)
        if outcome is not None:
            return outcome
    else:
        logger.debug("HTTP lazy load disabled, loading %s eagerly", locator)

    try:
        key = eager_loader(locator, registry, timeout=settings.timeout)
    except Exception as e:
        logger.info("Failed to import %s: %s", locator, e)
        return Failed(locator, str(e))
    return EagerRegistered(locator, key)


def import_files(locators: Iterable[str], **kwargs) -> ImportReport:
    """Import a batch of locators in order; see :func:`import_file` for kwargs."""
    report = ImportReport()
    for locator in locators:
        report.add(import_file(locator, **kwargs))
    return report
