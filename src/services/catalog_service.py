# src/services/catalog_service.py

"""Catalog read and write paths over the product cache and store."""

import asyncio
import logging
from dataclasses import dataclass, field, replace

from src.config.settings import Settings
from src.filters.autocomplete import search_suggest, suggest
from src.filters.product_filter import CatalogQuery, ProductFilter
from src.filters.product_sorter import ProductSorter
from src.filters.product_validator import ProductValidator
from src.models.product import Product
from src.models.scored_product import ScoredProduct
from src.services.errors import (
    ProductNotFoundError,
    ProductValidationError,
)
from src.services.recommender import Recommender
from src.storage.product_cache import ProductCache
from src.storage.product_store import ProductStore

logger = logging.getLogger("storefront.catalog")


@dataclass
class CatalogPage:
    """One page of a filtered catalog listing."""

    products: list[Product] = field(
        default_factory=lambda: list[Product]()
    )
    total: int = 0
    page: int = 1
    has_more: bool = False


class CatalogService:
    """Coordinates the cache, filters, scorer and backing store.

    Reads go through the cache (populating it on first use).  Writes
    commit to the store first, then patch the cache: create and update
    upsert the stored copy, delete clears the whole cache so the next
    read reloads a consistent snapshot.
    """

    def __init__(
        self,
        store: ProductStore | None = None,
        cache: ProductCache | None = None,
        recommender: Recommender | None = None,
    ) -> None:
        self.store = store or ProductStore()
        self.cache = cache or ProductCache(self.store.fetch_all)
        self.recommender = recommender or Recommender()

    # ── Reads ────────────────────────────────────────────

    async def list_products(
        self,
        query: CatalogQuery,
        sort: str | None = None,
        page: int = 1,
        page_size: int = Settings.PAGE_SIZE,
    ) -> CatalogPage:
        """Filter, sort, and paginate the cached catalog.

        *sort* falls back to ``Settings.DEFAULT_SORT`` (newest first).

        Raises:
            ValueError: *sort* is not a known sort key.
        """
        await self.cache.ensure_populated()
        matched = ProductFilter.apply(self.cache.get_all(), query)
        matched = ProductSorter.sort(matched, sort or Settings.DEFAULT_SORT)

        page = max(page, 1)
        start = (page - 1) * page_size
        result = CatalogPage(
            products=matched[start:start + page_size],
            total=len(matched),
            page=page,
            has_more=page * page_size < len(matched),
        )
        logger.debug(
            "Listing page %d: %d of %d matches",
            page,
            len(result.products),
            result.total,
        )
        return result

    async def autocomplete(self, q: str) -> list[str]:
        await self.cache.ensure_populated()
        return suggest(self.cache.get_all(), q)

    async def search_suggest(self, q: str) -> list[Product]:
        await self.cache.ensure_populated()
        return search_suggest(self.cache.get_all(), q)

    async def recommendations(
        self, product_id: str,
    ) -> list[ScoredProduct]:
        """Related products for *product_id*, best first.

        Raises:
            ProductNotFoundError: the id is not in the cache.
        """
        await self.cache.ensure_populated()
        return self.recommender.recommend(
            product_id, self.cache.get_all()
        )

    async def get_product(self, product_id: str) -> Product:
        await self.cache.ensure_populated()
        product = self.cache.get(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        return product

    # ── Writes ───────────────────────────────────────────

    @staticmethod
    def _check(product: Product) -> None:
        messages = ProductValidator.errors(product)
        if messages:
            logger.info(
                "Rejected product '%s': %s",
                product.name,
                "; ".join(messages),
            )
            raise ProductValidationError(messages)

    async def create_product(self, product: Product) -> Product:
        """Validate, persist and expose a new product.

        Raises:
            ProductValidationError: the product is invalid.
        """
        self._check(product)
        stored = await asyncio.to_thread(self.store.create, product)
        self.cache.upsert_one(stored)
        return stored

    async def update_product(
        self, product_id: str, product: Product,
    ) -> Product:
        """Overwrite an existing product and patch the cache.

        Raises:
            ProductValidationError: the product is invalid.
            ProductNotFoundError: no product has *product_id*.
        """
        self._check(product)
        stored = await asyncio.to_thread(
            self.store.update, replace(product, id=product_id)
        )
        if stored is None:
            raise ProductNotFoundError(product_id)
        self.cache.upsert_one(stored)
        return stored

    async def delete_product(self, product_id: str) -> None:
        """Delete a product and invalidate the whole cache.

        Raises:
            ProductNotFoundError: no product has *product_id*.
        """
        deleted = await asyncio.to_thread(self.store.delete, product_id)
        if not deleted:
            raise ProductNotFoundError(product_id)
        self.cache.clear()

    async def refresh(self) -> int:
        """Reload the cache from the store; returns the product count."""
        await self.cache.reload()
        return len(self.cache)
