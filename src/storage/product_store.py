# src/storage/product_store.py

"""SQLite-backed product store, the source of truth behind the cache."""

import json
import logging
import re
import sqlite3
import uuid
from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import Any, cast

from src.config.settings import Settings
from src.filters.product_validator import ProductValidator
from src.models.product import Price, Product, SizeStock

logger = logging.getLogger("storefront.store")

_SCHEMA = """\
CREATE TABLE IF NOT EXISTS products (
    id             TEXT    PRIMARY KEY,
    name           TEXT    NOT NULL,
    slug           TEXT    NOT NULL UNIQUE,
    brand          TEXT    NOT NULL,
    category       TEXT    NOT NULL,
    subcategory    TEXT    NOT NULL DEFAULT '',
    main_category  TEXT    NOT NULL DEFAULT 'clothes',
    price_current  REAL    NOT NULL,
    price_old      REAL,
    discount_text  TEXT    NOT NULL DEFAULT '',
    description    TEXT    NOT NULL DEFAULT '',
    material       TEXT    NOT NULL DEFAULT '',
    fit            TEXT    NOT NULL DEFAULT '',
    tags           TEXT    NOT NULL DEFAULT '[]',
    sizes          TEXT    NOT NULL DEFAULT '[]',
    is_new_arrival INTEGER NOT NULL DEFAULT 0,
    is_bestseller  INTEGER NOT NULL DEFAULT 0,
    featured       INTEGER NOT NULL DEFAULT 0,
    sales_count    INTEGER NOT NULL DEFAULT 0,
    created_at     TEXT    NOT NULL,
    updated_at     TEXT    NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_products_created
    ON products(created_at);
"""

_COLUMNS = (
    "id, name, slug, brand, category, subcategory, main_category, "
    "price_current, price_old, discount_text, description, material, "
    "fit, tags, sizes, is_new_arrival, is_bestseller, featured, "
    "sales_count, created_at, updated_at"
)


def slugify(name: str) -> str:
    """Lowercase, ASCII-alphanumeric words joined by hyphens."""
    lowered = name.lower()
    slug = re.sub(r"[^a-z0-9]+", "-", lowered).strip("-")
    return slug or "product"


def _row_to_product(row: tuple[Any, ...]) -> Product:
    sizes: list[dict[str, Any]] = json.loads(row[14])
    return Product(
        id=row[0],
        name=row[1],
        slug=row[2],
        brand=row[3],
        category=row[4],
        subcategory=row[5],
        main_category=row[6],
        price=Price(
            current=row[7], old=row[8], discount_text=row[9],
        ),
        description=row[10],
        material=row[11],
        fit=row[12],
        tags=json.loads(row[13]),
        sizes=[
            SizeStock(size=s["size"], quantity=s["quantity"])
            for s in sizes
        ],
        is_new_arrival=bool(row[15]),
        is_bestseller=bool(row[16]),
        featured=bool(row[17]),
        sales_count=row[18],
        created_at=datetime.fromisoformat(row[19]),
        updated_at=datetime.fromisoformat(row[20]),
    )


def _product_params(p: Product) -> tuple[Any, ...]:
    return (
        p.id,
        p.name,
        p.slug,
        p.brand,
        p.category,
        p.subcategory,
        p.main_category,
        p.price.current,
        p.price.old,
        p.price.discount_text,
        p.description,
        p.material,
        p.fit,
        json.dumps(p.tags, ensure_ascii=False),
        json.dumps(
            [{"size": s.size, "quantity": s.quantity} for s in p.sizes]
        ),
        int(p.is_new_arrival),
        int(p.is_bestseller),
        int(p.featured),
        p.sales_count,
        p.created_at.isoformat(),
        p.updated_at.isoformat(),
    )


class ProductStore:
    """SQLite-backed CRUD store for catalog products."""

    def __init__(
        self, db_path: Path | None = None,
    ) -> None:
        path = db_path or Settings.DB_PATH
        path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(
            str(path), check_same_thread=False,
        )
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.executescript(_SCHEMA)
        logger.debug("ProductStore opened at %s", path)

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()

    # ── Reads ────────────────────────────────────────────

    def fetch_all(self) -> list[Product]:
        """Every product, newest first."""
        rows = self._conn.execute(
            f"SELECT {_COLUMNS} FROM products "
            "ORDER BY created_at DESC, rowid DESC",
        ).fetchall()
        logger.debug("Fetched %d products", len(rows))
        return [_row_to_product(r) for r in rows]

    def get(self, product_id: str) -> Product | None:
        row = self._conn.execute(
            f"SELECT {_COLUMNS} FROM products WHERE id = ?",
            (product_id,),
        ).fetchone()
        return _row_to_product(row) if row else None

    def count(self) -> int:
        row = self._conn.execute(
            "SELECT COUNT(*) FROM products",
        ).fetchone()
        return int(row[0])

    # ── Writes ───────────────────────────────────────────

    def _unique_slug(
        self, name: str, exclude_id: str | None = None,
    ) -> str:
        """Slug for *name*, suffixed ``-1``, ``-2`` ... until unused."""
        base = slugify(name)
        slug = base
        suffix = 1
        while True:
            row = self._conn.execute(
                "SELECT id FROM products WHERE slug = ?", (slug,),
            ).fetchone()
            if row is None or row[0] == exclude_id:
                return slug
            slug = f"{base}-{suffix}"
            suffix += 1

    def create(self, product: Product) -> Product:
        """Insert a new product and return the stored copy.

        An id is generated when *product* has none; timestamps and the
        slug are always assigned here.
        """
        now = datetime.now()
        stored = replace(
            product,
            id=product.id or uuid.uuid4().hex,
            slug=self._unique_slug(product.name),
            created_at=now,
            updated_at=now,
        )
        self._conn.execute(
            f"INSERT INTO products ({_COLUMNS}) "
            f"VALUES ({', '.join('?' * 21)})",
            _product_params(stored),
        )
        self._conn.commit()
        logger.info("Created product %s (%s)", stored.id, stored.slug)
        return stored

    def update(self, product: Product) -> Product | None:
        """Overwrite an existing product.

        Returns the stored copy, or ``None`` when the id is unknown.
        ``created_at`` is kept from the existing row.
        """
        existing = self.get(product.id)
        if existing is None:
            return None

        slug = existing.slug
        if product.name != existing.name:
            slug = self._unique_slug(product.name, exclude_id=product.id)

        stored = replace(
            product,
            slug=slug,
            created_at=existing.created_at,
            updated_at=datetime.now(),
        )
        params = _product_params(stored)
        self._conn.execute(
            "UPDATE products SET "
            "name=?, slug=?, brand=?, category=?, subcategory=?, "
            "main_category=?, price_current=?, price_old=?, "
            "discount_text=?, description=?, material=?, fit=?, "
            "tags=?, sizes=?, is_new_arrival=?, is_bestseller=?, "
            "featured=?, sales_count=?, created_at=?, updated_at=? "
            "WHERE id = ?",
            (*params[1:], stored.id),
        )
        self._conn.commit()
        logger.info("Updated product %s", stored.id)
        return stored

    def delete(self, product_id: str) -> bool:
        """Delete a product. Returns ``False`` if it did not exist."""
        cur = self._conn.execute(
            "DELETE FROM products WHERE id = ?", (product_id,),
        )
        self._conn.commit()
        deleted = cur.rowcount > 0
        if deleted:
            logger.info("Deleted product %s", product_id)
        return deleted

    # ── Seed import ──────────────────────────────────────

    def import_json_file(self, filepath: Path) -> int:
        """Create products from a JSON array of product dicts.

        Invalid entries, and entries whose id is already stored, are
        skipped.  Returns the number created.
        """
        try:
            with open(filepath, encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as exc:
            logger.warning(
                "Failed to read %s: %s", filepath.name, exc,
            )
            return 0

        if not isinstance(data, list):
            logger.warning(
                "Seed file %s is not a JSON array", filepath.name,
            )
            return 0

        items: list[object] = cast(list[object], data)
        products: list[Product] = []
        for item in items:
            if not isinstance(item, dict):
                continue
            try:
                products.append(Product.from_dict(item))
            except (TypeError, ValueError) as exc:
                logger.debug("Skipped malformed entry: %s", exc)

        valid, dropped = ProductValidator.validate(products)
        created = 0
        for product in valid:
            try:
                self.create(product)
            except sqlite3.IntegrityError as exc:
                logger.warning(
                    "Skipped %s from %s: %s",
                    product.id or product.name,
                    filepath.name,
                    exc,
                )
                continue
            created += 1

        logger.info(
            "Imported %d products from %s (%d invalid, %d skipped)",
            created,
            filepath.name,
            dropped,
            len(valid) - created,
        )
        return created
