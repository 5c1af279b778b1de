# src/services/recommender.py

"""Related-product scoring for product detail pages."""

import logging
from dataclasses import dataclass

from src.config.settings import Settings
from src.filters.product_filter import is_numeric_price
from src.models.product import Product
from src.models.scored_product import ScoredProduct
from src.services.errors import ProductNotFoundError

logger = logging.getLogger("storefront.recommender")

# Score given to the reference product so it never survives the > 0 cut
SELF_SCORE = -1.0


@dataclass(frozen=True)
class ScoringWeights:
    """Points awarded per matching attribute."""

    category: float = 50
    main_category: float = 30
    price: float = 40
    tag: float = 15
    material: float = 10
    fit: float = 15
    sizes: float = 10
    # (max relative price difference, share of the price weight)
    price_tiers: tuple[tuple[float, float], ...] = (
        (0.10, 1.0),
        (0.25, 0.6),
        (0.40, 0.3),
    )


class Recommender:
    """Rank cached products by similarity to a reference product."""

    def __init__(
        self,
        weights: ScoringWeights | None = None,
        limit: int = Settings.RECOMMENDATION_LIMIT,
    ) -> None:
        self.weights = weights or ScoringWeights()
        self.limit = limit

    # ── Score components ─────────────────────────────────

    def _category_score(self, ref: Product, cand: Product) -> float:
        if cand.category == ref.category:
            return self.weights.category
        if cand.main_category == ref.main_category:
            return self.weights.main_category
        return 0.0

    def _price_score(self, ref: Product, cand: Product) -> float:
        """Tiered bonus for prices close to the reference price.

        A non-positive or non-numeric reference price skips the bonus.
        """
        ref_price = ref.price.current
        cand_price = cand.price.current
        if not is_numeric_price(ref_price) or ref_price <= 0:
            return 0.0
        if not is_numeric_price(cand_price):
            return 0.0

        pct = abs(cand_price - ref_price) / ref_price
        for threshold, share in self.weights.price_tiers:
            if pct < threshold:
                return self.weights.price * share
        return 0.0

    def _tag_score(self, ref: Product, cand: Product) -> float:
        common = set(ref.tags) & set(cand.tags)
        return len(common) * self.weights.tag

    def _material_score(self, ref: Product, cand: Product) -> float:
        if ref.material and ref.material == cand.material:
            return self.weights.material
        return 0.0

    def _fit_score(self, ref: Product, cand: Product) -> float:
        if ref.fit and ref.fit == cand.fit:
            return self.weights.fit
        return 0.0

    def _size_score(self, ref: Product, cand: Product) -> float:
        common = set(ref.available_sizes) & set(cand.available_sizes)
        return min(len(common) * self.weights.sizes, self.weights.sizes)

    # ── Public API ───────────────────────────────────────

    def score(self, reference: Product, candidate: Product) -> float:
        """Similarity of *candidate* to *reference* (-1 for itself)."""
        if candidate.id == reference.id:
            return SELF_SCORE

        return (
            self._category_score(reference, candidate)
            + self._price_score(reference, candidate)
            + self._tag_score(reference, candidate)
            + self._material_score(reference, candidate)
            + self._fit_score(reference, candidate)
            + self._size_score(reference, candidate)
        )

    def recommend(
        self, reference_id: str, products: list[Product],
    ) -> list[ScoredProduct]:
        """Top-scoring products related to *reference_id*.

        Candidates scoring <= 0 are dropped.  Ties keep the order they
        have in *products*.

        Raises:
            ProductNotFoundError: no product in *products* has that id.
        """
        reference = next(
            (p for p in products if p.id == reference_id), None
        )
        if reference is None:
            raise ProductNotFoundError(reference_id)

        scored = [
            ScoredProduct(product=p, score=self.score(reference, p))
            for p in products
        ]
        positive = [s for s in scored if s.score > 0]
        ranked = sorted(positive, key=lambda s: s.score, reverse=True)

        logger.debug(
            "Scored %d candidates for %s, %d positive",
            len(products) - 1,
            reference_id,
            len(positive),
        )
        return ranked[: self.limit]
