# src/cli/runner.py

"""Headless CLI commands, reusing the async catalog service."""

import json
import logging
import sys
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.table import Table

from src.filters.product_filter import CatalogQuery
from src.models.product import Product
from src.services.catalog_service import CatalogService
from src.services.errors import ProductNotFoundError

logger = logging.getLogger("storefront.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)


def _dump_json(data: Any) -> None:
    json.dump(data, sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")


def _format_price(product: Product) -> str:
    price = f"₹{product.price.current:,.2f}"
    if product.has_discount and product.price.old is not None:
        price += f" [dim strike]₹{product.price.old:,.2f}[/dim strike]"
    return price


def _print_table(
    products: list[Product],
    title: str,
    scores: list[float] | None = None,
) -> None:
    """Render a Rich table of products to stdout."""
    table = Table(
        title=title,
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("#", style="dim", width=4)
    table.add_column("Name", max_width=40)
    table.add_column("Category", style="magenta")
    table.add_column("Price", justify="right", style="green")
    table.add_column("Sizes", justify="center")
    if scores is not None:
        table.add_column("Score", justify="right", style="bold")
    table.add_column("ID", overflow="fold", style="dim")

    for idx, p in enumerate(products, 1):
        row = [
            str(idx),
            p.name[:40],
            p.category,
            _format_price(p),
            " ".join(p.available_sizes) or "—",
        ]
        if scores is not None:
            row.append(f"{scores[idx - 1]:g}")
        row.append(p.id)
        table.add_row(*row)

    Console().print(table)


async def cli_list(
    service: CatalogService,
    query: CatalogQuery,
    sort: str | None,
    page: int,
    output_format: str,
) -> int:
    """List one page of the filtered catalog."""
    try:
        result = await service.list_products(query, sort=sort, page=page)
    except ValueError as exc:
        _err.print(f"[red]{exc}[/red]")
        return 1

    if not result.products:
        _err.print("[yellow]No products found.[/yellow]")
        return 1

    more = " (more available)" if result.has_more else ""
    _err.print(
        f"[green]✓ page {result.page}: {len(result.products)}"
        f" of {result.total} products{more}[/green]"
    )

    if output_format == "table":
        _print_table(result.products, "Catalog")
    else:
        _dump_json({
            "products": [p.to_dict() for p in result.products],
            "total": result.total,
            "page": result.page,
            "has_more": result.has_more,
        })
    return 0


async def cli_recommend(
    service: CatalogService,
    product_id: str,
    output_format: str,
) -> int:
    """Show products related to *product_id*."""
    try:
        scored = await service.recommendations(product_id)
    except ProductNotFoundError as exc:
        _err.print(f"[red]{exc}[/red]")
        return 1

    if not scored:
        _err.print("[yellow]No related products.[/yellow]")
        return 0

    if output_format == "table":
        _print_table(
            [s.product for s in scored],
            f"Related to {product_id}",
            scores=[s.score for s in scored],
        )
    else:
        _dump_json({"recommendations": [s.to_dict() for s in scored]})
    return 0


async def cli_suggest(service: CatalogService, query: str) -> int:
    """Print autocomplete suggestions, one per line."""
    suggestions = await service.autocomplete(query)
    if not suggestions:
        _err.print("[yellow]No suggestions.[/yellow]")
        return 1
    for value in suggestions:
        sys.stdout.write(f"{value}\n")
    return 0


def run_import(service: CatalogService, filepath: Path) -> int:
    """Seed the store from a JSON file of products."""
    if not filepath.exists():
        _err.print(f"[red]File not found: {filepath}[/red]")
        return 1

    _err.print(f"[bold]Importing products from {filepath}...[/bold]")
    count = service.store.import_json_file(filepath)
    service.cache.clear()
    if not count:
        _err.print("[yellow]No valid products imported.[/yellow]")
        return 1

    _err.print(f"[green]✓ Imported {count:,} products[/green]")
    return 0
