# src/filters/product_sorter.py

"""Explicit, stable ordering step applied after filtering."""

import logging
from collections.abc import Callable
from typing import Any

from src.filters.product_filter import is_numeric_price
from src.models.product import Product

logger = logging.getLogger("storefront.filters")


def _price_key(product: Product) -> float:
    price = product.price.current
    return float(price) if is_numeric_price(price) else 0.0


# sort key -> (key function, descending)
_SORTS: dict[str, tuple[Callable[[Product], Any], bool]] = {
    "newest": (lambda p: p.created_at, True),
    "price_low": (_price_key, False),
    "price_high": (_price_key, True),
    "bestseller": (lambda p: p.sales_count, True),
}

SORT_KEYS: tuple[str, ...] = tuple(_SORTS)


class ProductSorter:
    """Order a product list by one of the catalog sort keys."""

    @staticmethod
    def sort(products: list[Product], sort_key: str) -> list[Product]:
        """Return a new list ordered by *sort_key*.

        Python's sort is stable, so equal keys keep their input order
        (``reverse=True`` preserves it as well).

        Raises:
            ValueError: *sort_key* is not one of ``SORT_KEYS``.
        """
        if sort_key not in _SORTS:
            msg = (
                f"Unknown sort '{sort_key}', "
                f"expected one of: {', '.join(SORT_KEYS)}"
            )
            raise ValueError(msg)

        key_fn, descending = _SORTS[sort_key]
        logger.debug(
            "Sorting %d products by %s", len(products), sort_key,
        )
        return sorted(products, key=key_fn, reverse=descending)
