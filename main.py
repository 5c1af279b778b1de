# main.py

"""Entry point for the storefront catalog command line."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from src.config.logging_config import setup_logging
from src.config.settings import Settings
from src.filters.product_filter import CatalogQuery
from src.filters.product_sorter import SORT_KEYS

logger = logging.getLogger("storefront.main")


def _add_format_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="json",
        dest="output_format",
        help="Output format (default: json).",
    )


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="storefront",
        description="Storefront product catalog: listing, search, "
        "autocomplete and related products.",
    )
    parser.add_argument(
        "--db",
        default=None,
        help=f"SQLite database path (default: {Settings.DB_PATH}).",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    list_cmd = sub.add_parser("list", help="List the filtered catalog.")
    list_cmd.add_argument("-q", "--search", default=None)
    list_cmd.add_argument("--main-category", default=None,
                          choices=Settings.MAIN_CATEGORIES)
    list_cmd.add_argument("--category", default=None,
                          help="Category label or slug, e.g. t-shirts.")
    list_cmd.add_argument("--subcategory", default=None)
    list_cmd.add_argument("--size", default=None,
                          choices=Settings.SIZE_OPTIONS)
    list_cmd.add_argument("--brand", default=None)
    list_cmd.add_argument("--min-price", type=float, default=None)
    list_cmd.add_argument("--max-price", type=float, default=None)
    list_cmd.add_argument("--featured", action="store_true",
                          default=None)
    list_cmd.add_argument("--discount", action="store_true",
                          default=False, dest="discount_only")
    list_cmd.add_argument("--in-stock", action="store_true",
                          default=False)
    list_cmd.add_argument("--sort", default=None, choices=SORT_KEYS)
    list_cmd.add_argument("--page", type=int, default=1)
    _add_format_flag(list_cmd)

    rec_cmd = sub.add_parser(
        "recommend", help="Show products related to a product id."
    )
    rec_cmd.add_argument("product_id")
    _add_format_flag(rec_cmd)

    suggest_cmd = sub.add_parser(
        "suggest", help="Autocomplete a partial search query."
    )
    suggest_cmd.add_argument("query")

    import_cmd = sub.add_parser(
        "import", help="Seed the catalog from a JSON file."
    )
    import_cmd.add_argument("file", type=Path)

    return parser


def _query_from_args(args: argparse.Namespace) -> CatalogQuery:
    return CatalogQuery(
        search=args.search,
        category=args.category,
        subcategory=args.subcategory,
        main_category=args.main_category,
        size=args.size,
        brand=args.brand,
        min_price=args.min_price,
        max_price=args.max_price,
        featured=args.featured,
        discount_only=args.discount_only,
        in_stock=args.in_stock,
    )


def _dispatch(args: argparse.Namespace) -> int:
    """Run the selected sub-command and return its exit code."""
    from src.cli.runner import (
        cli_list,
        cli_recommend,
        cli_suggest,
        run_import,
    )
    from src.services.catalog_service import CatalogService
    from src.storage.product_store import ProductStore

    store = ProductStore(Path(args.db) if args.db else None)
    service = CatalogService(store=store)
    try:
        if args.command == "list":
            return asyncio.run(cli_list(
                service,
                _query_from_args(args),
                args.sort,
                args.page,
                args.output_format,
            ))
        if args.command == "recommend":
            return asyncio.run(cli_recommend(
                service, args.product_id, args.output_format,
            ))
        if args.command == "suggest":
            return asyncio.run(cli_suggest(service, args.query))
        return run_import(service, args.file)
    except Exception:
        logger.critical("Fatal error in '%s'", args.command, exc_info=True)
        raise
    finally:
        store.close()


def main() -> None:
    """Parse arguments and route to the matching command."""
    log_file = setup_logging()
    logger.info("storefront starting, log file: %s", log_file)

    parser = _build_parser()
    args = parser.parse_args()
    sys.exit(_dispatch(args))


if __name__ == "__main__":
    main()
