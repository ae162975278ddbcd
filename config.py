"""
CATTREE - Centralised configuration.

All tunables live here.  Every other module imports from config
instead of reading os.environ directly.
"""

from __future__ import annotations
import os
from pathlib import Path


# ── Paths ──────────────────────────────────────────────────────────────
# Import files given with -f are resolved against BASE_DIR
BASE_DIR  = Path(os.environ.get("CATTREE_BASE_DIR", Path(__file__).resolve().parent))
LOG_PATH  = Path(os.environ.get("CATTREE_LOG_PATH", BASE_DIR / "var" / "log" / "exception.log"))

# ── Database ───────────────────────────────────────────────────────────
DB_URL = os.environ.get("CATTREE_DB", f"sqlite:///{BASE_DIR / 'cattree.sqlite'}")

# ── Catalog bootstrap ──────────────────────────────────────────────────
ROOT_CATALOG_NAME     = os.environ.get("CATTREE_ROOT_CATALOG_NAME", "Root Catalog")
DEFAULT_CATEGORY_NAME = os.environ.get("CATTREE_DEFAULT_CATEGORY_NAME", "Default Category")
DEFAULT_STORE_CODE    = os.environ.get("CATTREE_DEFAULT_STORE", "default")

# Extra store views, e.g. "de:German,fr:French"
EXTRA_STORES = os.environ.get("CATTREE_STORES", "")

# ── URL rewrites ───────────────────────────────────────────────────────
URL_SUFFIX = os.environ.get("CATTREE_URL_SUFFIX", ".html")

# ── Import defaults ────────────────────────────────────────────────────
DEFAULT_DELIMITER = ","
DEFAULT_ENCLOSURE = '"'
TOP_LEVEL = 2          # level of first-column categories (root catalog = 0)


def parse_store_list(raw: str) -> list[tuple[str, str]]:
    """Split "code[:name],..." into [(code, name)], skipping blanks."""
    stores: list[tuple[str, str]] = []
    for item in raw.split(","):
        item = item.strip()
        if not item:
            continue
        code, _, name = item.partition(":")
        code = code.strip()
        if not code:
            continue
        stores.append((code, name.strip() or code))
    return stores
