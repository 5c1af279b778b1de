# src/api/app.py

"""HTTP API for catalog reads and admin product writes.

Install the ``serve`` extra, then run
``uvicorn --factory src.api.app:create_app``.
"""

import logging
from typing import Any

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from src.config.settings import Settings
from src.filters.product_filter import CatalogQuery
from src.models.product import Product
from src.services.catalog_service import CatalogService
from src.services.errors import (
    ProductNotFoundError,
    ProductValidationError,
)

logger = logging.getLogger("storefront.api")


# ---------------------------
# Pydantic schemas
# ---------------------------
class PriceIn(BaseModel):
    current: float
    old: float | None = None
    discount_text: str = ""


class SizeStockIn(BaseModel):
    size: str
    quantity: int = 0


class ProductIn(BaseModel):
    name: str
    category: str
    price: PriceIn
    brand: str = Settings.DEFAULT_BRAND
    subcategory: str = ""
    main_category: str = "clothes"
    description: str = ""
    material: str = ""
    fit: str = ""
    tags: list[str] = Field(default_factory=list)
    sizes: list[SizeStockIn] = Field(default_factory=list)
    is_new_arrival: bool = False
    is_bestseller: bool = False
    featured: bool = False
    sales_count: int = 0

    def to_product(self) -> Product:
        return Product.from_dict(self.model_dump())


# ---------------------------
# App factory
# ---------------------------
def create_app(service: CatalogService | None = None) -> FastAPI:
    """Build the API around *service* (a default one when omitted)."""
    catalog = service or CatalogService()

    app = FastAPI(title="storefront catalog")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def _not_found(exc: ProductNotFoundError) -> HTTPException:
        return HTTPException(status_code=404, detail=str(exc))

    def _invalid(exc: ProductValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={"status": "fail", "message": str(exc)},
        )

    # ---------------------------
    # Catalog reads
    # ---------------------------
    @app.get("/api/products")
    async def list_products(
        search: str | None = None,
        category: str | None = None,
        subcategory: str | None = None,
        main_category: str | None = None,
        size: str | None = None,
        brand: str | None = None,
        featured: bool | None = None,
        discount_only: bool = False,
        in_stock: bool = False,
        min_price: float | None = None,
        max_price: float | None = None,
        sort: str | None = None,
        page: int = Query(1, ge=1),
    ) -> dict[str, Any]:
        query = CatalogQuery(
            search=search,
            category=category,
            subcategory=subcategory,
            main_category=main_category,
            size=size,
            brand=brand,
            featured=featured,
            discount_only=discount_only,
            in_stock=in_stock,
            min_price=min_price,
            max_price=max_price,
        )
        try:
            result = await catalog.list_products(query, sort=sort, page=page)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return {
            "products": [p.to_dict() for p in result.products],
            "total": result.total,
            "page": result.page,
            "has_more": result.has_more,
        }

    @app.get("/api/products/autocomplete")
    async def autocomplete(q: str = "") -> dict[str, Any]:
        return {"suggestions": await catalog.autocomplete(q)}

    @app.get("/api/products/search-suggest")
    async def search_suggest(q: str = "") -> dict[str, Any]:
        hits = await catalog.search_suggest(q)
        return {
            "suggestions": [
                {
                    "id": p.id,
                    "name": p.name,
                    "slug": p.slug,
                    "category": p.category,
                    "price": p.to_dict()["price"],
                }
                for p in hits
            ]
        }

    @app.get("/api/products/recommendations")
    async def recommendations(
        product_id: str | None = Query(None, alias="id"),
    ) -> dict[str, Any]:
        if not product_id:
            raise HTTPException(
                status_code=400, detail="Product ID required"
            )
        try:
            scored = await catalog.recommendations(product_id)
        except ProductNotFoundError as exc:
            raise _not_found(exc) from exc
        return {"recommendations": [s.to_dict() for s in scored]}

    @app.get("/api/products/{product_id}")
    async def get_product(product_id: str) -> dict[str, Any]:
        try:
            product = await catalog.get_product(product_id)
        except ProductNotFoundError as exc:
            raise _not_found(exc) from exc
        return {"success": True, "product": product.to_dict()}

    # ---------------------------
    # Admin writes
    # ---------------------------
    @app.post("/api/products", status_code=201, response_model=None)
    async def create_product(
        payload: ProductIn,
    ) -> dict[str, Any] | JSONResponse:
        try:
            stored = await catalog.create_product(payload.to_product())
        except ProductValidationError as exc:
            return _invalid(exc)
        return {"status": "success", "product": stored.to_dict()}

    @app.put("/api/products/{product_id}", response_model=None)
    async def update_product(
        product_id: str, payload: ProductIn,
    ) -> dict[str, Any] | JSONResponse:
        try:
            stored = await catalog.update_product(
                product_id, payload.to_product()
            )
        except ProductValidationError as exc:
            return _invalid(exc)
        except ProductNotFoundError as exc:
            raise _not_found(exc) from exc
        return {"status": "success", "product": stored.to_dict()}

    @app.delete("/api/products/{product_id}")
    async def delete_product(product_id: str) -> dict[str, str]:
        try:
            await catalog.delete_product(product_id)
        except ProductNotFoundError as exc:
            raise _not_found(exc) from exc
        return {"status": "success", "message": "Product deleted"}

    logger.debug("API application created")
    return app
