"""Owns the sampling pool and rebuilds it from the catalog on request."""

from __future__ import annotations

import logging
import random
import time

from random_items.catalog.filter import FilterSnapshot, filter_catalog
from random_items.catalog.source import CatalogSource
from random_items.config import FilterConfig
from random_items.core.pool import AdmittedItem, SamplingPool

logger = logging.getLogger(__name__)


class ItemPicker:
    """Rebuilds the pool from the catalog and draws from the current one.

    A rebuild is the expensive step: it scans the whole catalog and blocks
    until done. The new pool replaces the old one only once it is complete.
    """

    def __init__(self, source: CatalogSource, filter_config: FilterConfig) -> None:
        self.source = source
        self.filter_config = filter_config
        self.pool = SamplingPool()
        self.rebuilds = 0

    def rebuild(self) -> bool:
        """Rescan the catalog. Returns False if the catalog was not loaded."""
        logger.info("Loading repository (this may stall for a few seconds)")
        snapshot = FilterSnapshot.from_config(self.filter_config)

        if not self.source.is_loaded():
            logger.info("Repository not loaded, keeping current pool (%d items)", len(self.pool))
            return False

        start = time.monotonic()
        pool = filter_catalog(self.source.entries(), snapshot)
        self.pool = pool
        self.rebuilds += 1
        logger.info(
            "Item pool rebuilt: %d items in %.2fs",
            len(pool),
            time.monotonic() - start,
        )
        return True

    def draw(self, rng: random.Random) -> AdmittedItem | None:
        if not self.pool.size():
            logger.info("Item pool is empty, rebuilding")
            self.rebuild()
        if not self.pool.size():
            logger.warning("Item pool still empty after rebuild, skipping draw")
            return None
        return self.pool.draw(rng)
