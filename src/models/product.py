# src/models/product.py

"""Product data model shared by the store, cache, filters and scorer."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from src.config.settings import Settings


@dataclass
class Price:
    """Current price plus the optional pre-discount price."""

    current: float
    old: float | None = None
    discount_text: str = ""


@dataclass
class SizeStock:
    """Stock level for one size label."""

    size: str
    quantity: int = 0


@dataclass
class Product:
    """A single catalog product."""

    name: str
    category: str
    price: Price
    id: str = ""
    slug: str = ""
    brand: str = Settings.DEFAULT_BRAND
    subcategory: str = ""
    main_category: str = "clothes"
    description: str = ""
    material: str = ""
    fit: str = ""
    tags: list[str] = field(default_factory=lambda: list[str]())
    sizes: list[SizeStock] = field(
        default_factory=lambda: list[SizeStock]()
    )
    is_new_arrival: bool = False
    is_bestseller: bool = False
    featured: bool = False
    sales_count: int = 0
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    @property
    def available_sizes(self) -> list[str]:
        """Size labels with stock, in inventory order."""
        return [s.size for s in self.sizes if s.quantity > 0]

    @property
    def total_stock(self) -> int:
        return sum(s.quantity for s in self.sizes)

    @property
    def in_stock(self) -> bool:
        return any(s.quantity > 0 for s in self.sizes)

    @property
    def has_discount(self) -> bool:
        """True when an old price exists and exceeds the current one."""
        old = self.price.old
        return old is not None and old > self.price.current

    def to_dict(self) -> dict[str, Any]:
        """Serialise to a JSON-safe dict."""
        return {
            "id": self.id,
            "name": self.name,
            "slug": self.slug,
            "brand": self.brand,
            "category": self.category,
            "subcategory": self.subcategory,
            "main_category": self.main_category,
            "price": {
                "current": self.price.current,
                "old": self.price.old,
                "discount_text": self.price.discount_text,
            },
            "description": self.description,
            "material": self.material,
            "fit": self.fit,
            "tags": list(self.tags),
            "sizes": [
                {"size": s.size, "quantity": s.quantity}
                for s in self.sizes
            ],
            "available_sizes": self.available_sizes,
            "is_new_arrival": self.is_new_arrival,
            "is_bestseller": self.is_bestseller,
            "featured": self.featured,
            "sales_count": self.sales_count,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Product":
        """Build a Product from a dict produced by ``to_dict`` or seed JSON.

        Missing optional keys fall back to the dataclass defaults.
        A bare number is accepted for ``price``.
        """
        raw_price = data.get("price", {})
        if isinstance(raw_price, dict):
            price = Price(
                current=raw_price.get("current", 0.0),
                old=raw_price.get("old"),
                discount_text=str(raw_price.get("discount_text") or ""),
            )
        else:
            price = Price(current=raw_price)

        sizes = [
            SizeStock(
                size=str(s.get("size", "")),
                quantity=int(s.get("quantity", 0)),
            )
            for s in data.get("sizes") or []
            if isinstance(s, dict)
        ]

        now = datetime.now()
        return cls(
            id=str(data.get("id") or ""),
            name=str(data.get("name") or ""),
            slug=str(data.get("slug") or ""),
            brand=str(data.get("brand") or Settings.DEFAULT_BRAND),
            category=str(data.get("category") or ""),
            subcategory=str(data.get("subcategory") or ""),
            main_category=str(data.get("main_category") or "clothes"),
            price=price,
            description=str(data.get("description") or ""),
            material=str(data.get("material") or ""),
            fit=str(data.get("fit") or ""),
            tags=[str(t) for t in data.get("tags") or []],
            sizes=sizes,
            is_new_arrival=bool(data.get("is_new_arrival", False)),
            is_bestseller=bool(data.get("is_bestseller", False)),
            featured=bool(data.get("featured", False)),
            sales_count=int(data.get("sales_count") or 0),
            created_at=_parse_datetime(data.get("created_at"), now),
            updated_at=_parse_datetime(data.get("updated_at"), now),
        )


def _parse_datetime(value: object, default: datetime) -> datetime:
    """Parse an ISO timestamp, falling back to *default*."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value:
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            return default
    return default
