# src/config/settings.py

"""Central configuration for the storefront catalog."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Central configuration for the storefront catalog."""

    # --- Catalog listing ---
    PAGE_SIZE: int = 10                 # Products per listing page
    MAX_PRICE: float = 999999.0         # Upper bound when none is given
    DEFAULT_SORT: str = "newest"

    # --- Recommendations / autocomplete ---
    RECOMMENDATION_LIMIT: int = 10      # Top-N related products
    AUTOCOMPLETE_LIMIT: int = 10        # Max distinct suggestions
    SEARCH_SUGGEST_LIMIT: int = 6       # Product hits under the search box
    SEARCH_SUGGEST_MIN_CHARS: int = 2   # Shorter queries return nothing

    # --- Product vocabulary ---
    DEFAULT_BRAND: str = "Branded Collection"
    MAIN_CATEGORIES: list[str] = ["clothes", "shoes", "accessories"]
    SIZE_OPTIONS: list[str] = ["XS", "S", "M", "L", "XL", "XXL", "XXXL"]

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    DATA_DIR: Path = BASE_DIR / "data"
    DB_PATH: Path = Path(
        os.getenv("STOREFRONT_DB_PATH", str(DATA_DIR / "catalog.db"))
    )
    LOGS_DIR: Path = BASE_DIR / "logs"

    # --- Logging ---
    LOG_LEVEL: str = os.getenv("STOREFRONT_LOG_LEVEL", "WARNING")  # Console
    LOG_KEEP_RUNS: int = 20             # Run logs kept under LOGS_DIR
