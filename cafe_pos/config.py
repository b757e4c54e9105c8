"""
Configuration Module for Cafe POS
=================================

This module centralizes the environment variables and constants used by the
order fulfillment pipeline: cart gating, KOT routing, billing, and receipt
generation. Values are parsed once at import time.

Configuration Categories:
-------------------------
- **Venue**: Name printed on receipts and the fixed currency literal.

- **Billing**: Tax rate, tax base policy, and the discount ceiling.

- **KOT Routing**: Which menu categories go to which preparation station.
  The default map sends "Beverages" to the bar and everything else to the
  kitchen.

- **Receipt Generation**: Model name, deadline, and an on/off switch for the
  remote generator. The local fallback template needs no configuration.

- **Rate Limiting / CORS**: HTTP surface settings.

Environment Variables:
----------------------
- DATABASE_URL: SQLAlchemy URL (default: "sqlite:///./cafe_pos.db")
- VENUE_NAME: Receipt header (default: "Up & Above Cafe")
- CURRENCY_SYMBOL: Currency literal on receipts (default: "Rs.")
- TAX_RATE: Tax rate as a fraction (default: "0.05")
- TAX_ON_DISCOUNTED_SUBTOTAL: Tax the post-discount subtotal (default: "false")
- MAX_DISCOUNT_PERCENT: Discount ceiling (default: "20")
- KOT_STATION_MAP: Comma-separated "Category:station" pairs (default: "Beverages:bar")
- KOT_DEFAULT_STATION: Station for unmapped categories (default: "kitchen")
- OPENAI_MODEL / RECEIPT_MODEL: Receipt model (default: "gpt-4o-mini")
- RECEIPT_GENERATION_ENABLED: Use the remote generator (default: "true")
- RECEIPT_TIMEOUT_SECONDS: Remote deadline (default: "10")
- RATE_LIMIT_RECEIPT: Receipt preview limit (default: "20 per minute")
- RATE_LIMIT_ENABLED: Enable/disable rate limiting (default: "true")
- CORS_ORIGINS: Comma-separated allowed origins (default: "*")

Usage:
------
    from cafe_pos.config import TAX_RATE, VENUE_NAME, get_station_map_config
"""

import os
from decimal import Decimal
from pathlib import Path
from typing import Dict, List

from dotenv import load_dotenv

# Load .env from the project root (one level above cafe_pos/)
BASE_DIR = Path(__file__).resolve().parent.parent
load_dotenv(dotenv_path=BASE_DIR / ".env")


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


# =============================================================================
# Database Configuration
# =============================================================================

DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./cafe_pos.db")


# =============================================================================
# Venue Configuration
# =============================================================================

VENUE_NAME: str = os.getenv("VENUE_NAME", "Up & Above Cafe")

# Receipts always use this literal; "$" and "₹" are rejected in generated text
CURRENCY_SYMBOL: str = os.getenv("CURRENCY_SYMBOL", "Rs.")


# =============================================================================
# Billing Configuration
# =============================================================================

TAX_RATE: Decimal = Decimal(os.getenv("TAX_RATE", "0.05"))

# Observed behavior taxes the item total before discount. Flip to tax the
# discounted amount once the business rule is confirmed.
TAX_ON_DISCOUNTED_SUBTOTAL: bool = _env_bool("TAX_ON_DISCOUNTED_SUBTOTAL", "false")

MAX_DISCOUNT_PERCENT: Decimal = Decimal(os.getenv("MAX_DISCOUNT_PERCENT", "20"))


# =============================================================================
# KOT Routing Configuration
# =============================================================================

KOT_DEFAULT_STATION: str = os.getenv("KOT_DEFAULT_STATION", "kitchen")

_station_map_env = os.getenv("KOT_STATION_MAP", "Beverages:bar")


def parse_station_map(raw: str) -> Dict[str, str]:
    """
    Parse "Category:station" pairs into an ordered mapping.

    Malformed pairs (missing colon or empty side) are skipped.

    Returns:
        Mapping of category name to station name, in declaration order
    """
    mapping: Dict[str, str] = {}
    for pair in raw.split(","):
        category, sep, station = pair.partition(":")
        if not sep or not category.strip() or not station.strip():
            continue
        mapping[category.strip()] = station.strip()
    return mapping


KOT_STATION_MAP: Dict[str, str] = parse_station_map(_station_map_env)


def get_station_map_config() -> Dict[str, str]:
    """
    Return the configured category-to-station mapping.

    Exposed as a function so tests can override it without touching the
    module-level constant.
    """
    return dict(KOT_STATION_MAP)


# =============================================================================
# Receipt Generation Configuration
# =============================================================================

RECEIPT_MODEL: str = os.getenv("RECEIPT_MODEL", os.getenv("OPENAI_MODEL", "gpt-4o-mini"))
RECEIPT_GENERATION_ENABLED: bool = _env_bool("RECEIPT_GENERATION_ENABLED", "true")
RECEIPT_TIMEOUT_SECONDS: float = float(os.getenv("RECEIPT_TIMEOUT_SECONDS", "10"))


# =============================================================================
# Rate Limiting Configuration
# =============================================================================
# Receipt previews may hit the LLM, so they are throttled per client.

RATE_LIMIT_RECEIPT: str = os.getenv("RATE_LIMIT_RECEIPT", "20 per minute")
RATE_LIMIT_ENABLED: bool = _env_bool("RATE_LIMIT_ENABLED", "true")


def get_rate_limit_receipt() -> str:
    """
    Return the current receipt preview rate limit.

    This function allows dynamic override in tests without modifying
    the module-level constant.
    """
    return RATE_LIMIT_RECEIPT


# =============================================================================
# CORS Configuration
# =============================================================================

_cors_origins_env = os.getenv("CORS_ORIGINS", "")
CORS_ORIGINS: List[str] = [
    origin.strip()
    for origin in _cors_origins_env.split(",")
    if origin.strip()
] or ["*"]
