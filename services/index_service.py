"""
services.index_service - Indexer registry and URL-rewrite index.

Every index process carries a mode flag:

  real_time  - each category save reindexes the affected rows at once
  manual     - saves only flag the process as require_reindex; a later
               reindex_all() brings it up to date

Bulk writers wrap their work in batch_mode() so N saves don't pay for
N reindexes.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterable, Iterator

from sqlalchemy import or_
from sqlalchemy.orm import Session

import config
from db.models import (
    ADMIN_STORE_ID, MODE_MANUAL, MODE_REAL_TIME, STATUS_READY,
    STATUS_REQUIRE_REINDEX, Category, IndexProcess, Store, UrlRewrite,
)

logger = logging.getLogger(__name__)

CATALOG_URL = "catalog_url"
PROCESS_CODES = (CATALOG_URL,)


# ── Registry ──────────────────────────────────────────────────────────

def ensure_processes(session: Session) -> None:
    """Register any missing index process in real-time mode (no commit)."""
    existing = {p.code for p in session.query(IndexProcess).all()}
    for code in PROCESS_CODES:
        if code not in existing:
            session.add(IndexProcess(code=code, mode=MODE_REAL_TIME,
                                     status=STATUS_READY))
    session.flush()


def get_processes(session: Session) -> list[IndexProcess]:
    return session.query(IndexProcess).order_by(IndexProcess.id).all()


def set_all_modes(session: Session, mode: str) -> None:
    if mode not in (MODE_REAL_TIME, MODE_MANUAL):
        raise ValueError(f"Unknown index mode: {mode}")
    for process in get_processes(session):
        process.mode = mode
    session.commit()
    logger.info("Index processes switched to %s mode", mode)


# ── Reindexing ────────────────────────────────────────────────────────

def category_saved(session: Session, category: Category) -> None:
    """Hook called after every category save."""
    for process in get_processes(session):
        if process.mode == MODE_REAL_TIME:
            _reindex_subtree(session, category)
            process.status = STATUS_READY
            process.ended_at = datetime.now(timezone.utc)
        else:
            process.status = STATUS_REQUIRE_REINDEX


def reindex_all(session: Session) -> int:
    """Rebuild all URL rewrites for every store view.  Returns row count."""
    session.query(UrlRewrite).delete(synchronize_session=False)

    count = 0
    for store in _store_views(session):
        root = session.get(Category, store.root_category_id)
        if root is None:
            continue
        categories = (session.query(Category)
                      .filter(Category.path.like(f"{root.path}/%"))
                      .order_by(Category.level, Category.position)
                      .all())
        count += _write_rewrites(session, store, root, categories)

    now = datetime.now(timezone.utc)
    for process in get_processes(session):
        process.status = STATUS_READY
        process.ended_at = now
    session.commit()
    logger.info("Reindexed all processes, %d url rewrites", count)
    return count


def _reindex_subtree(session: Session, category: Category) -> None:
    subtree = (session.query(Category)
               .filter(or_(Category.id == category.id,
                           Category.path.like(f"{category.path}/%")))
               .order_by(Category.level)
               .all())
    ids = [c.id for c in subtree]
    (session.query(UrlRewrite)
     .filter(UrlRewrite.category_id.in_(ids))
     .delete(synchronize_session=False))

    for store in _store_views(session):
        root = session.get(Category, store.root_category_id)
        if root is None or root.id not in category.path_ids[:-1]:
            continue
        _write_rewrites(session, store, root, subtree)


def _write_rewrites(
    session: Session,
    store: Store,
    root: Category,
    categories: Iterable[Category],
) -> int:
    """Insert one rewrite per category under *root* for *store*."""
    cache: dict[int, Category] = {}
    count = 0
    for category in categories:
        segments = []
        for cid in category.path_ids[root.level + 1:]:
            node = cache.get(cid) or session.get(Category, cid)
            cache[cid] = node
            segments.append(node.url_key_for(store.id))
        if not segments:
            continue
        if not all(segments):
            logger.warning("No url rewrite for category %d in store %s: empty url_key on its path",
                           category.id, store.code)
            continue
        session.add(UrlRewrite(
            store_id=store.id,
            category_id=category.id,
            request_path="/".join(segments) + config.URL_SUFFIX,
        ))
        count += 1
    session.flush()
    return count


def _store_views(session: Session) -> list[Store]:
    return (session.query(Store)
            .filter(Store.id != ADMIN_STORE_ID)
            .order_by(Store.id)
            .all())


# ── Batch scope ───────────────────────────────────────────────────────

@contextmanager
def batch_mode(session: Session) -> Iterator[None]:
    """
    Switch every index process to manual mode for the duration of the
    block.  On normal exit the processes go back to real-time and one
    full reindex runs.

    If the block raises, the processes stay in manual mode and the
    exception propagates; indexing has to be restored by hand.
    """
    set_all_modes(session, MODE_MANUAL)
    try:
        yield
    except BaseException:
        logger.warning("Import aborted - index processes left in %s mode",
                       MODE_MANUAL)
        raise
    set_all_modes(session, MODE_REAL_TIME)
    reindex_all(session)
