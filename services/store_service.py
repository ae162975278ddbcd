"""
services.store_service - Store lookup and catalog bootstrap.

A fresh database gets the root catalog (level 0), the default category
(level 1), the admin store (id 0), the default store view and any extra
store views listed in config.EXTRA_STORES.
"""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

import config
from db.models import ADMIN_STORE_ID, Category, Store
from services.index_service import ensure_processes

logger = logging.getLogger(__name__)

ADMIN_STORE_CODE = "admin"


class StoreNotFoundError(LookupError):
    """Raised when no store matches the requested code."""

    def __init__(self, code: str):
        super().__init__(f"Could not find store with code '{code}'")
        self.code = code


def resolve_store(session: Session, code: str) -> Store:
    """Return the store with *code* or raise StoreNotFoundError."""
    store = session.query(Store).filter(Store.code == code).one_or_none()
    if store is None:
        raise StoreNotFoundError(code)
    return store


def get_default_store(session: Session) -> Store:
    store = session.query(Store).filter(Store.is_default.is_(True)).first()
    if store is None:
        raise StoreNotFoundError(config.DEFAULT_STORE_CODE)
    return store


def default_root_category_id(session: Session) -> int:
    """Root category id of the default store view."""
    return get_default_store(session).root_category_id


def ensure_catalog(session: Session) -> Store:
    """
    Create whatever part of the base catalog is missing and commit.
    Returns the default store view.
    """
    root = session.query(Category).filter(Category.level == 0).first()
    if root is None:
        root = _create_root(session, config.ROOT_CATALOG_NAME, parent=None)
        logger.info("Created root catalog id=%s", root.id)

    if session.get(Store, ADMIN_STORE_ID) is None:
        session.add(Store(id=ADMIN_STORE_ID, code=ADMIN_STORE_CODE, name="Admin"))
        session.flush()

    default = session.query(Store).filter(Store.is_default.is_(True)).first()
    if default is None:
        default_category = _create_root(session, config.DEFAULT_CATEGORY_NAME, parent=root)
        default = Store(
            code=config.DEFAULT_STORE_CODE,
            name="Default Store View",
            root_category_id=default_category.id,
            is_default=True,
        )
        session.add(default)
        session.flush()
        logger.info("Created default store '%s' with root category id=%s",
                    default.code, default_category.id)

    for code, name in config.parse_store_list(config.EXTRA_STORES):
        if session.query(Store).filter(Store.code == code).first() is None:
            session.add(Store(code=code, name=name,
                              root_category_id=default.root_category_id))
            logger.info("Created store view '%s'", code)

    ensure_processes(session)
    session.commit()
    return default


def _create_root(session: Session, name: str, parent: Category | None) -> Category:
    category = Category(
        name=name,
        parent_id=parent.id if parent else None,
        level=parent.level + 1 if parent else 0,
        position=1 if parent else 0,
        path="",
    )
    session.add(category)
    session.flush()
    category.path = f"{parent.path}/{category.id}" if parent else str(category.id)
    session.flush()
    return category
