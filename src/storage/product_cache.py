# src/storage/product_cache.py

"""Process-wide in-memory mirror of the product collection."""

import asyncio
import logging
import time
from collections.abc import Callable

from src.models.product import Product

logger = logging.getLogger("storefront.cache")


class ProductCache:
    """Lazily populated snapshot of every product in the store.

    The cache is shared, mutable and unlocked.  Readers may see the
    snapshot before or after a concurrent write patches it; listing and
    recommendation reads therefore lag writes by at most one request
    cycle.  Two reads racing through an empty cache can both call the
    loader; the last ``replace_all`` wins, which is harmless because
    the loader is a read-only, idempotent fetch.

    All mutation goes through the methods below so a lock or a
    single-writer task can be added later without touching callers.
    """

    def __init__(self, loader: Callable[[], list[Product]]) -> None:
        self._loader = loader
        self._products: list[Product] = []
        self._populated: bool = False
        self._last_sync: float | None = None

    @property
    def is_populated(self) -> bool:
        return self._populated

    @property
    def last_sync(self) -> float | None:
        """Epoch seconds of the last full replace, ``None`` if never."""
        return self._last_sync

    def __len__(self) -> int:
        return len(self._products)

    # ── Population ───────────────────────────────────────

    async def ensure_populated(self) -> None:
        """Fetch from the backing store if the cache is empty.

        Loader errors propagate and leave the cache untouched.
        """
        if self._populated:
            return
        logger.info("Cache miss, loading products from store")
        await self.reload()

    async def reload(self) -> None:
        """Unconditionally refetch the full product set."""
        products = await asyncio.to_thread(self._loader)
        self.replace_all(products)

    def replace_all(self, items: list[Product]) -> None:
        """Overwrite the snapshot and stamp the sync time."""
        self._products = list(items)
        self._populated = True
        self._last_sync = time.time()
        logger.info("Cache replaced with %d products", len(items))

    # ── Reads ────────────────────────────────────────────

    def get_all(self) -> list[Product]:
        """Return the live snapshot.

        The list may be replaced or patched between awaits; callers
        that need a stable view should copy it.
        """
        return self._products

    def get(self, product_id: str) -> Product | None:
        for product in self._products:
            if product.id == product_id:
                return product
        return None

    # ── Patching ─────────────────────────────────────────

    def upsert_one(self, item: Product) -> None:
        """Replace the entry with the same id, or insert at the front."""
        for idx, existing in enumerate(self._products):
            if existing.id == item.id:
                self._products[idx] = item
                logger.debug("Cache updated product %s", item.id)
                return
        self._products.insert(0, item)
        logger.debug("Cache inserted product %s", item.id)

    def remove_one(self, product_id: str) -> None:
        """Drop the entry with *product_id*; no-op when absent."""
        before = len(self._products)
        self._products = [
            p for p in self._products if p.id != product_id
        ]
        if len(self._products) < before:
            logger.debug("Cache removed product %s", product_id)

    def clear(self) -> int:
        """Empty the cache so the next read repopulates it.

        Returns the number of entries that were removed.
        """
        count = len(self._products)
        self._products = []
        self._populated = False
        self._last_sync = None
        logger.info("Cache cleared (%d entries removed)", count)
        return count
