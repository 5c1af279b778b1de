# src/filters/product_filter.py

"""Catalog filtering over the cached product snapshot."""

import json
import logging
import math
import re
from collections.abc import Callable
from dataclasses import dataclass

from src.config.settings import Settings
from src.models.product import Product

logger = logging.getLogger("storefront.filters")

Predicate = Callable[[Product], bool]

_SEPARATORS_RE = re.compile(r"[-_\s]+")

# Category value that disables the category predicate
ALL_CATEGORIES = "All"


def slug_to_label(value: str) -> str:
    """Turn a URL slug into a display label.

    ``"shorts-boxers"`` becomes ``"Shorts Boxers"``.  Display labels
    pass through unchanged apart from separators, so both sides of a
    comparison can go through this function.
    """
    words = _SEPARATORS_RE.sub(" ", value).strip().split(" ")
    return " ".join(w[:1].upper() + w[1:] for w in words if w)


def is_numeric_price(value: object) -> bool:
    """True for finite int/float values (bools excluded)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def searchable_text(product: Product) -> str:
    """Lowercased serialisation of every product field."""
    return json.dumps(
        product.to_dict(), ensure_ascii=False
    ).lower()


@dataclass
class CatalogQuery:
    """Optional predicate inputs for a catalog listing.

    ``None`` (or an empty string) leaves a predicate switched off.
    """

    search: str | None = None
    category: str | None = None
    subcategory: str | None = None
    main_category: str | None = None
    size: str | None = None
    min_price: float | None = None
    max_price: float | None = None
    featured: bool | None = None
    brand: str | None = None
    discount_only: bool = False
    in_stock: bool = False

    @property
    def has_price_range(self) -> bool:
        return self.min_price is not None or self.max_price is not None


# ── Predicate factories ──────────────────────────────────


def featured_predicate(featured: bool) -> Predicate:
    return lambda p: p.featured == featured


def brand_predicate(brand: str) -> Predicate:
    return lambda p: p.brand == brand


def discount_predicate() -> Predicate:
    return lambda p: p.has_discount


def in_stock_predicate() -> Predicate:
    return lambda p: p.in_stock


def price_predicate(
    min_price: float | None, max_price: float | None,
) -> Predicate:
    """Inclusive ``[min, max]`` on the current price."""
    lo = 0.0 if min_price is None else min_price
    hi = Settings.MAX_PRICE if max_price is None else max_price

    def matches(product: Product) -> bool:
        price = product.price.current
        return is_numeric_price(price) and lo <= price <= hi

    return matches


def label_predicate(
    attribute: str, value: str,
) -> Predicate:
    """Equality on a category-like field after slug normalisation."""
    wanted = slug_to_label(value)

    def matches(product: Product) -> bool:
        actual: str = getattr(product, attribute)
        return slug_to_label(actual) == wanted

    return matches


def size_predicate(size: str) -> Predicate:
    """A ``sizes`` entry with this label and stock > 0."""
    return lambda p: any(
        s.size == size and s.quantity > 0 for s in p.sizes
    )


def text_predicate(search: str) -> Predicate:
    """Case-insensitive substring match on the serialised product."""
    needle = search.lower()
    return lambda p: needle in searchable_text(p)


class ProductFilter:
    """Build and apply the predicate pipeline for a catalog query."""

    @staticmethod
    def build_predicates(query: CatalogQuery) -> list[Predicate]:
        """Return the active predicates, cheapest first."""
        predicates: list[Predicate] = []

        if query.featured is not None:
            predicates.append(featured_predicate(query.featured))
        if query.brand:
            predicates.append(brand_predicate(query.brand))
        if query.discount_only:
            predicates.append(discount_predicate())
        if query.has_price_range:
            predicates.append(
                price_predicate(query.min_price, query.max_price)
            )
        if query.main_category:
            predicates.append(
                label_predicate("main_category", query.main_category)
            )
        if query.category and query.category != ALL_CATEGORIES:
            predicates.append(
                label_predicate("category", query.category)
            )
        if query.subcategory:
            predicates.append(
                label_predicate("subcategory", query.subcategory)
            )
        if query.size:
            predicates.append(size_predicate(query.size))
        if query.in_stock:
            predicates.append(in_stock_predicate())
        if query.search and query.search.strip():
            predicates.append(text_predicate(query.search.strip()))

        return predicates

    @staticmethod
    def apply(
        products: list[Product], query: CatalogQuery,
    ) -> list[Product]:
        """Keep the products matching every active predicate.

        Input order is preserved.
        """
        predicates = ProductFilter.build_predicates(query)
        if not predicates:
            return list(products)

        kept = [
            p for p in products
            if all(pred(p) for pred in predicates)
        ]

        excluded = len(products) - len(kept)
        if excluded:
            logger.debug(
                "Filtered out %d of %d products (%d predicates)",
                excluded,
                len(products),
                len(predicates),
            )
        return kept
