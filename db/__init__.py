"""
db - Database layer.

Public API:
    init_db()       → create engine + tables
    get_session()   → new Session
    Category, Store, CategoryStoreValue, UrlRewrite, IndexProcess → ORM models
"""

from db.engine import init_db, get_session, dispose_db                # noqa: F401
from db.models import (                                               # noqa: F401
    Base, Category, Store, CategoryStoreValue, UrlRewrite, IndexProcess,
    ADMIN_STORE_ID, MODE_MANUAL, MODE_REAL_TIME,
    STATUS_READY, STATUS_REQUIRE_REINDEX,
)
