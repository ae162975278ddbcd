"""
services - Catalog layer sitting between the import engine and DB.
"""

from services.index_service import batch_mode, reindex_all, set_all_modes   # noqa: F401
from services.catalog_service import (                                      # noqa: F401
    create_category, load_category, count_categories, delete_categories,
    set_store_name, format_url_key,
)
from services.store_service import (                                        # noqa: F401
    StoreNotFoundError, resolve_store, ensure_catalog,
)
