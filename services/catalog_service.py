"""
services.catalog_service - CRUD operations on Category records.

All session management is the caller's responsibility (open before,
close/commit after).  Every save notifies the index service so the
URL-rewrite index follows the current indexing mode.
"""

from __future__ import annotations

import logging
import re
import unicodedata

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from db.models import (
    ADMIN_STORE_ID, Category, CategoryStoreValue, Store, UrlRewrite,
)
from services import index_service

logger = logging.getLogger(__name__)

# Characters NFKD does not decompose into ASCII
_TRANSLIT = {
    "ß": "ss", "æ": "ae", "Æ": "ae", "ø": "o", "Ø": "o",
    "œ": "oe", "Œ": "oe", "đ": "d", "Đ": "d", "ł": "l", "Ł": "l",
    "þ": "th", "Þ": "th",
}


class CategoryNotFoundError(LookupError):
    """Raised when a category id does not exist."""


def format_url_key(text: str) -> str:
    """
    Lower-case ASCII slug: "Herren & Damen" → "herren-damen".
    """
    text = "".join(_TRANSLIT.get(ch, ch) for ch in (text or ""))
    text = unicodedata.normalize("NFKD", text)
    text = text.encode("ascii", "ignore").decode("ascii").lower()
    return re.sub(r"[^a-z0-9]+", "-", text).strip("-")


def default_category_data(name: str) -> dict:
    """Attribute values for a freshly created category."""
    return {
        "name": name.strip(),
        "is_active": True,
        "include_in_menu": True,
        "is_anchor": False,
        "url_key": "",
        "description": "",
    }


# ── Read ──────────────────────────────────────────────────────────────

def load_category(session: Session, category_id: int) -> Category | None:
    return session.get(Category, category_id)


def count_categories(session: Session, level: int) -> int:
    return session.query(Category).filter(Category.level == level).count()


# ── Create ────────────────────────────────────────────────────────────

def create_category(
    session: Session,
    parent_id: int,
    name: str,
) -> Category:
    """
    Create a category under *parent_id*.  The new row's path is the
    parent's path plus its own id; its level is one below the parent.
    A name that gives no ASCII slug gets the id as url_key.
    """
    parent = load_category(session, parent_id)
    if parent is None:
        raise CategoryNotFoundError(f"Parent category {parent_id} does not exist")

    data = default_category_data(name)
    if not data["name"]:
        raise ValueError("Category name cannot be empty")
    if not data["url_key"]:
        data["url_key"] = format_url_key(data["name"])

    last_position = (session.query(func.max(Category.position))
                     .filter(Category.parent_id == parent.id)
                     .scalar())

    category = Category(
        parent_id=parent.id,
        level=parent.level + 1,
        position=(last_position or 0) + 1,
        path="",
        **data,
    )
    session.add(category)
    session.flush()

    category.path = f"{parent.path}/{category.id}"
    if not category.url_key:
        category.url_key = str(category.id)
    session.flush()

    index_service.category_saved(session, category)
    return category


# ── Update ────────────────────────────────────────────────────────────

def set_store_name(
    session: Session,
    category: Category,
    store: Store,
    name: str,
) -> Category:
    """
    Save *name* for *category* in the scope of *store*.  The url_key is
    cleared and regenerated from the new name.
    """
    name = name.strip()
    url_key = format_url_key(name) or str(category.id)

    if store.id == ADMIN_STORE_ID:
        category.name = name
        category.url_key = url_key
    else:
        value = category.store_value(store.id)
        if value is None:
            value = CategoryStoreValue(store_id=store.id)
            category.store_values.append(value)
        value.name = name
        value.url_key = url_key

    session.flush()
    index_service.category_saved(session, category)
    return category


# ── Delete ────────────────────────────────────────────────────────────

def delete_categories(session: Session, level: int) -> int:
    """
    Delete every category at *level* together with its subtree.
    Returns how many categories at *level* were removed.
    """
    tops = session.query(Category).filter(Category.level == level).all()
    if not tops:
        return 0

    clauses = []
    for top in tops:
        clauses.append(Category.id == top.id)
        clauses.append(Category.path.like(f"{top.path}/%"))
    ids = [cid for (cid,) in session.query(Category.id).filter(or_(*clauses))]

    (session.query(UrlRewrite)
     .filter(UrlRewrite.category_id.in_(ids))
     .delete(synchronize_session=False))
    (session.query(CategoryStoreValue)
     .filter(CategoryStoreValue.category_id.in_(ids))
     .delete(synchronize_session=False))
    (session.query(Category)
     .filter(Category.id.in_(ids))
     .delete(synchronize_session=False))
    session.expire_all()

    logger.info("Deleted %d categories at level %d (%d including subtrees)",
                len(tops), level, len(ids))
    return len(tops)
