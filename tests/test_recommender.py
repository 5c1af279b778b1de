# tests/test_recommender.py

"""Tests for related-product scoring."""

import unittest

from src.services.errors import ProductNotFoundError
from src.services.recommender import (
    SELF_SCORE,
    Recommender,
    ScoringWeights,
)
from tests.factories import make_product


class TestScore(unittest.TestCase):
    """Recommender.score components."""

    def setUp(self) -> None:
        self.rec = Recommender()
        self.ref = make_product(
            "ref",
            category="Shirts",
            price=1000.0,
            tags=["casual", "cotton"],
        )

    def test_same_category_close_price_one_tag(self) -> None:
        """50 category + 40 price (5% off) + 15 for one shared tag."""
        cand = make_product(
            "a", category="Shirts", price=1050.0, tags=["casual"]
        )
        self.assertEqual(self.rec.score(self.ref, cand), 105)

    def test_main_category_only_far_price(self) -> None:
        """Different category, same main category, 60% price gap."""
        cand = make_product("b", category="Pants", price=1600.0)
        self.assertEqual(self.rec.score(self.ref, cand), 30)

    def test_reference_scores_sentinel(self) -> None:
        self.assertEqual(self.rec.score(self.ref, self.ref), SELF_SCORE)

    def test_category_bonus_is_exclusive(self) -> None:
        """Category match does not also collect the main-category bonus."""
        cand = make_product("c", category="Shirts", price=5000.0)
        self.assertEqual(self.rec.score(self.ref, cand), 50)

    def test_no_category_overlap(self) -> None:
        cand = make_product(
            "d", category="Watches", main_category="accessories",
            price=5000.0,
        )
        self.assertEqual(self.rec.score(self.ref, cand), 0)

    def test_price_tiers(self) -> None:
        cases = {
            1099.0: 40,   # 9.9%
            1100.0: 24,   # exactly 10% falls to the next tier
            1249.0: 24,
            1250.0: 12,
            1399.0: 12,
            1400.0: 0,
            700.0: 12,    # 30% below
        }
        for price, expected in cases.items():
            with self.subTest(price=price):
                cand = make_product(
                    "p", category="X", main_category="shoes", price=price,
                )
                self.assertAlmostEqual(
                    self.rec.score(self.ref, cand), expected
                )

    def test_zero_reference_price_skips_price_bonus(self) -> None:
        ref = make_product("free", category="Shirts", price=0.0)
        cand = make_product("a", category="Shirts", price=0.0)
        self.assertEqual(self.rec.score(ref, cand), 50)

    def test_non_numeric_candidate_price(self) -> None:
        cand = make_product("a", category="Shirts", price=None)
        self.assertEqual(self.rec.score(self.ref, cand), 50)

    def test_tag_overlap_uncapped(self) -> None:
        ref = make_product(
            "r", category="A", main_category="shoes", price=0.0,
            tags=["a", "b", "c", "d"],
        )
        cand = make_product(
            "c", category="B", main_category="accessories", price=0.0,
            tags=["a", "b", "c", "d", "e"],
        )
        self.assertEqual(self.rec.score(ref, cand), 60)

    def test_material_and_fit(self) -> None:
        ref = make_product(
            "r", category="A", main_category="shoes", price=0.0,
            material="Linen", fit="Slim",
        )
        both = make_product(
            "c", category="B", main_category="accessories",
            material="Linen", fit="Slim",
        )
        self.assertEqual(self.rec.score(ref, both), 25)

    def test_empty_material_never_matches(self) -> None:
        ref = make_product(
            "r", category="A", main_category="shoes", price=0.0,
        )
        cand = make_product(
            "c", category="B", main_category="accessories",
        )
        self.assertEqual(self.rec.score(ref, cand), 0)

    def test_size_overlap_capped(self) -> None:
        """Any number of common available sizes gives exactly 10."""
        ref = make_product(
            "r", category="A", main_category="shoes", price=0.0,
            sizes={"S": 1, "M": 1, "L": 1},
        )
        three = make_product(
            "c", category="B", main_category="accessories",
            sizes={"S": 5, "M": 5, "L": 5},
        )
        out_of_stock = make_product(
            "d", category="B", main_category="accessories",
            sizes={"S": 0, "M": 0},
        )
        self.assertEqual(self.rec.score(ref, three), 10)
        self.assertEqual(self.rec.score(ref, out_of_stock), 0)

    def test_custom_weights(self) -> None:
        rec = Recommender(weights=ScoringWeights(category=5, price=0))
        cand = make_product("a", category="Shirts", price=1000.0)
        self.assertEqual(rec.score(self.ref, cand), 5)


class TestRecommend(unittest.TestCase):
    """Recommender.recommend ranking."""

    def setUp(self) -> None:
        self.rec = Recommender()
        self.ref = make_product(
            "ref", category="Shirts", price=1000.0,
            tags=["casual", "cotton"],
        )
        self.a = make_product(
            "a", category="Shirts", price=1050.0, tags=["casual"]
        )
        self.b = make_product("b", category="Pants", price=1600.0)
        self.zero = make_product(
            "zero", category="Watches", main_category="accessories",
            price=9000.0,
        )

    def test_ranking_excludes_self_and_non_positive(self) -> None:
        products = [self.b, self.ref, self.zero, self.a]
        result = self.rec.recommend("ref", products)
        self.assertEqual([s.product.id for s in result], ["a", "b"])
        self.assertEqual([s.score for s in result], [105, 30])

    def test_ties_keep_snapshot_order(self) -> None:
        twins = [
            make_product(f"t{i}", category="Pants", price=1600.0)
            for i in range(5)
        ]
        products = [twins[3], self.ref, twins[0], twins[4], twins[1]]
        result = self.rec.recommend("ref", products)
        self.assertEqual(
            [s.product.id for s in result], ["t3", "t0", "t4", "t1"]
        )

    def test_limit_ten(self) -> None:
        many = [
            make_product(f"m{i}", category="Shirts", price=1000.0 + i)
            for i in range(15)
        ]
        result = self.rec.recommend("ref", [self.ref, *many])
        self.assertEqual(len(result), 10)
        self.assertEqual(result[0].product.id, "m0")

    def test_unknown_reference_raises(self) -> None:
        with self.assertRaises(ProductNotFoundError) as ctx:
            self.rec.recommend("missing", [self.a, self.b])
        self.assertEqual(ctx.exception.product_id, "missing")

    def test_only_reference_yields_empty(self) -> None:
        self.assertEqual(self.rec.recommend("ref", [self.ref]), [])


if __name__ == "__main__":
    unittest.main()
