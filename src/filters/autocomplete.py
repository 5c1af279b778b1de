# src/filters/autocomplete.py

"""Search-box suggestions drawn from the cached products."""

import logging

from src.config.settings import Settings
from src.models.product import Product

logger = logging.getLogger("storefront.filters")


def _candidate_values(product: Product) -> list[str]:
    return [
        product.name,
        product.brand,
        product.material,
        *product.tags,
        *product.available_sizes,
    ]


def suggest(
    products: list[Product],
    query: str,
    limit: int = Settings.AUTOCOMPLETE_LIMIT,
) -> list[str]:
    """Distinct field values containing *query*, case-insensitively.

    Values keep the casing they have on the product and appear in the
    order they are first met while walking the snapshot.  An empty or
    blank query yields no suggestions.
    """
    needle = query.strip().lower()
    if not needle:
        return []

    suggestions: list[str] = []
    seen: set[str] = set()
    for product in products:
        for value in _candidate_values(product):
            if not value or value in seen:
                continue
            if needle in value.lower():
                seen.add(value)
                suggestions.append(value)
                if len(suggestions) >= limit:
                    return suggestions

    logger.debug(
        "Autocomplete '%s' produced %d suggestions",
        query,
        len(suggestions),
    )
    return suggestions


def _search_fields(product: Product) -> list[str]:
    return [product.name, product.category, product.material, *product.tags]


def search_suggest(
    products: list[Product],
    query: str,
    limit: int = Settings.SEARCH_SUGGEST_LIMIT,
) -> list[Product]:
    """Products whose name, category, material or a tag contains *query*.

    Unlike :func:`suggest` this returns whole products (the dropdown
    under the search box links straight to them).  Queries shorter than
    ``Settings.SEARCH_SUGGEST_MIN_CHARS`` after stripping match nothing.
    """
    needle = query.strip().lower()
    if len(needle) < Settings.SEARCH_SUGGEST_MIN_CHARS:
        return []

    hits: list[Product] = []
    for product in products:
        if any(needle in value.lower() for value in _search_fields(product)):
            hits.append(product)
            if len(hits) >= limit:
                break

    logger.debug("Search suggest '%s' matched %d products", query, len(hits))
    return hits
