# src/services/errors.py

"""Exceptions raised by the catalog core."""


class ProductNotFoundError(LookupError):
    """No product with the requested id exists."""

    def __init__(self, product_id: str) -> None:
        super().__init__(f"Product not found: {product_id}")
        self.product_id = product_id


class ProductValidationError(ValueError):
    """A product failed write-side validation."""

    def __init__(self, messages: list[str]) -> None:
        super().__init__(". ".join(messages))
        self.messages = messages
