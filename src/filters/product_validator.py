# src/filters/product_validator.py

"""Product validation before anything is written to the store."""

import logging

from src.config.settings import Settings
from src.filters.product_filter import is_numeric_price
from src.models.product import Product

logger = logging.getLogger("storefront.filters")


class ProductValidator:
    """Check products against the catalog's required fields and vocabularies."""

    @staticmethod
    def errors(product: Product) -> list[str]:
        """Return every validation message for *product* (empty if valid)."""
        messages: list[str] = []

        if not product.name.strip():
            messages.append("Product name is required")
        if not product.category.strip():
            messages.append("Product category is required")

        current = product.price.current
        if not is_numeric_price(current):
            messages.append("Current price must be a number")
        elif current < 0:
            messages.append("Current price must not be negative")

        old = product.price.old
        if old is not None:
            if not is_numeric_price(old):
                messages.append("Old price must be a number")
            elif old < 0:
                messages.append("Old price must not be negative")

        if product.main_category not in Settings.MAIN_CATEGORIES:
            messages.append(
                f"Main category '{product.main_category}' must be one of "
                f"{', '.join(Settings.MAIN_CATEGORIES)}"
            )

        for entry in product.sizes:
            if entry.size not in Settings.SIZE_OPTIONS:
                messages.append(f"Unknown size '{entry.size}'")
            if entry.quantity < 0:
                messages.append(
                    f"Quantity for size '{entry.size}' must not be negative"
                )

        return messages

    @staticmethod
    def validate(
        products: list[Product],
    ) -> tuple[list[Product], int]:
        """Drop invalid products from a batch.

        Returns the valid products and the count of dropped items.
        """
        valid: list[Product] = []
        dropped = 0

        for product in products:
            messages = ProductValidator.errors(product)
            if messages:
                logger.debug(
                    "Dropped product '%s': %s",
                    product.name,
                    "; ".join(messages),
                )
                dropped += 1
                continue
            valid.append(product)

        if dropped:
            logger.info(
                "Validation dropped %d invalid products",
                dropped,
            )

        return valid, dropped
