# src/models/scored_product.py

"""Recommendation output: a product annotated with its similarity score."""

from dataclasses import dataclass
from typing import Any

from src.models.product import Product


@dataclass
class ScoredProduct:
    """A candidate product and the score it earned against a reference."""

    product: Product
    score: float

    def to_dict(self) -> dict[str, Any]:
        """Product dict with an extra ``score`` key."""
        data = self.product.to_dict()
        data["score"] = self.score
        return data
