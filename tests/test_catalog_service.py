# tests/test_catalog_service.py

"""Tests for CatalogService read and write paths."""

import tempfile
import unittest
from datetime import datetime
from pathlib import Path
from unittest.mock import patch

from src.filters.product_filter import CatalogQuery
from src.services.catalog_service import CatalogPage, CatalogService
from src.services.errors import (
    ProductNotFoundError,
    ProductValidationError,
)
from src.storage.product_cache import ProductCache
from src.storage.product_store import ProductStore
from tests.factories import make_product


class CatalogServiceTestCase(unittest.IsolatedAsyncioTestCase):
    """Service wired to a real temp-dir store."""

    def setUp(self) -> None:
        tmp_dir = Path(tempfile.mkdtemp())
        self.store = ProductStore(db_path=tmp_dir / "test.db")
        self.service = CatalogService(store=self.store)

    def tearDown(self) -> None:
        self.store.close()

    def _seed(self, count: int) -> None:
        for i in range(count):
            self.store.create(
                make_product(f"p{i:02d}", name=f"Tee {i}", price=100.0 + i)
            )


class TestCatalogReads(CatalogServiceTestCase):
    """Listing, autocomplete, recommendations, single lookup."""

    async def test_list_populates_cache_once(self) -> None:
        self._seed(3)
        with patch.object(
            self.store, "fetch_all", wraps=self.store.fetch_all
        ) as spy:
            service = CatalogService(store=self.store)
            await service.list_products(CatalogQuery())
            await service.list_products(CatalogQuery())
            await service.autocomplete("tee")
        spy.assert_called_once()

    async def test_pagination(self) -> None:
        self._seed(25)
        first = await self.service.list_products(CatalogQuery())
        self.assertIsInstance(first, CatalogPage)
        self.assertEqual(len(first.products), 10)
        self.assertEqual(first.total, 25)
        self.assertTrue(first.has_more)

        last = await self.service.list_products(CatalogQuery(), page=3)
        self.assertEqual(len(last.products), 5)
        self.assertFalse(last.has_more)

    async def test_page_below_one_is_first_page(self) -> None:
        self._seed(3)
        result = await self.service.list_products(CatalogQuery(), page=0)
        self.assertEqual(result.page, 1)
        self.assertEqual(len(result.products), 3)

    async def test_filter_and_sort(self) -> None:
        self._seed(5)
        result = await self.service.list_products(
            CatalogQuery(min_price=101.0, max_price=103.0),
            sort="price_high",
        )
        self.assertEqual(
            [p.id for p in result.products], ["p03", "p02", "p01"]
        )

    async def test_default_sort_is_newest(self) -> None:
        snapshot = [
            make_product("old", created_at=datetime(2025, 3, 1)),
            make_product("new", created_at=datetime(2026, 5, 1)),
            make_product("mid", created_at=datetime(2025, 9, 1)),
        ]
        service = CatalogService(
            store=self.store, cache=ProductCache(lambda: snapshot)
        )
        result = await service.list_products(CatalogQuery())
        self.assertEqual(
            [p.id for p in result.products], ["new", "mid", "old"]
        )

    async def test_unknown_sort_raises(self) -> None:
        with self.assertRaises(ValueError):
            await self.service.list_products(CatalogQuery(), sort="nope")

    async def test_autocomplete(self) -> None:
        self.store.create(make_product("c", name="Polo", material="Cotton"))
        self.assertIn("Cotton", await self.service.autocomplete("cot"))
        self.assertEqual(await self.service.autocomplete(""), [])

    async def test_search_suggest(self) -> None:
        self._seed(8)
        hits = await self.service.search_suggest("tee")
        self.assertEqual(len(hits), 6)
        self.assertEqual(await self.service.search_suggest("t"), [])

    async def test_recommendations(self) -> None:
        self.store.create(make_product(
            "ref", category="Shirts", price=1000.0, tags=["casual"]
        ))
        self.store.create(make_product(
            "a", category="Shirts", price=1050.0, tags=["casual"]
        ))
        result = await self.service.recommendations("ref")
        self.assertEqual([s.product.id for s in result], ["a"])
        self.assertEqual(result[0].score, 105)

    async def test_recommendations_unknown_id(self) -> None:
        with self.assertRaises(ProductNotFoundError):
            await self.service.recommendations("missing")

    async def test_get_product(self) -> None:
        self.store.create(make_product("p1", name="Tee"))
        product = await self.service.get_product("p1")
        self.assertEqual(product.name, "Tee")
        with self.assertRaises(ProductNotFoundError):
            await self.service.get_product("missing")

    async def test_store_error_propagates(self) -> None:
        with patch.object(
            self.store, "fetch_all", side_effect=RuntimeError("db down")
        ):
            service = CatalogService(store=self.store)
            with self.assertRaises(RuntimeError):
                await service.list_products(CatalogQuery())


class TestCatalogWrites(CatalogServiceTestCase):
    """Create / update / delete keep the cache in step with the store."""

    async def test_create_visible_without_reload(self) -> None:
        self._seed(2)
        await self.service.list_products(CatalogQuery())
        created = await self.service.create_product(
            make_product("", name="Fresh")
        )
        self.assertEqual(self.service.cache.get_all()[0].id, created.id)
        result = await self.service.list_products(CatalogQuery())
        self.assertEqual(result.total, 3)

    async def test_create_invalid_rejected(self) -> None:
        with self.assertRaises(ProductValidationError) as ctx:
            await self.service.create_product(
                make_product("", name="", price=-1.0)
            )
        self.assertEqual(len(ctx.exception.messages), 2)
        self.assertEqual(self.store.count(), 0)

    async def test_update_patches_cache(self) -> None:
        self._seed(2)
        await self.service.list_products(CatalogQuery())
        await self.service.update_product(
            "p01", make_product("", name="Renamed", price=999.0)
        )
        cached = self.service.cache.get("p01")
        assert cached is not None
        self.assertEqual(cached.name, "Renamed")
        self.assertEqual(len(self.service.cache), 2)

    async def test_update_missing(self) -> None:
        with self.assertRaises(ProductNotFoundError):
            await self.service.update_product("ghost", make_product(""))

    async def test_delete_clears_cache(self) -> None:
        self._seed(3)
        await self.service.list_products(CatalogQuery())
        await self.service.delete_product("p01")
        self.assertFalse(self.service.cache.is_populated)

        result = await self.service.list_products(CatalogQuery())
        self.assertEqual(result.total, 2)
        self.assertNotIn("p01", [p.id for p in result.products])

    async def test_delete_missing(self) -> None:
        with self.assertRaises(ProductNotFoundError):
            await self.service.delete_product("ghost")

    async def test_refresh_picks_up_external_writes(self) -> None:
        self._seed(1)
        await self.service.list_products(CatalogQuery())
        self.store.create(make_product("outside"))
        self.assertEqual(await self.service.refresh(), 2)


if __name__ == "__main__":
    unittest.main()
