"""
db.models - SQLAlchemy ORM declarations.

Tables
------
categories            - the category tree.  ``path`` holds the slash-joined
                        ids from the root catalog down to the row itself;
                        ``level`` is the number of ancestors.
stores                - store views.  id 0 is the admin scope whose values
                        live directly on the category row.
category_store_values - store-scoped name / url_key overrides.
url_rewrites          - request paths rebuilt by the URL index.
index_processes       - indexer registry with its mode and status flags.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import (
    Boolean, Column, DateTime, ForeignKey, Index, Integer, String, Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, relationship


ADMIN_STORE_ID = 0

MODE_REAL_TIME = "real_time"
MODE_MANUAL    = "manual"

STATUS_READY           = "ready"
STATUS_REQUIRE_REINDEX = "require_reindex"


def _now():
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class Category(Base):
    __tablename__ = "categories"

    id        = Column(Integer, primary_key=True, autoincrement=True)
    parent_id = Column(Integer, ForeignKey("categories.id", ondelete="CASCADE"),
                       nullable=True, index=True)
    level     = Column(Integer, nullable=False, default=0, index=True)
    path      = Column(String(255), nullable=False, default="", index=True)
    position  = Column(Integer, nullable=False, default=1)

    # ── Admin-scope attributes ─────────────────────────────────────────
    name            = Column(String(255), nullable=False)
    url_key         = Column(String(255), default="")
    is_active       = Column(Boolean, default=True)
    include_in_menu = Column(Boolean, default=True)
    is_anchor       = Column(Boolean, default=False)
    description     = Column(Text, default="")

    # ── Timestamps ─────────────────────────────────────────────────────
    created_at = Column(DateTime, default=_now)
    updated_at = Column(DateTime, default=_now, onupdate=_now)

    store_values = relationship(
        "CategoryStoreValue", back_populates="category",
        cascade="all, delete-orphan", passive_deletes=True, lazy="selectin",
    )

    @property
    def path_ids(self) -> list[int]:
        return [int(p) for p in self.path.split("/") if p]

    def store_value(self, store_id: int):
        for value in self.store_values:
            if value.store_id == store_id:
                return value
        return None

    def name_for(self, store_id: int) -> str:
        value = self.store_value(store_id)
        if value is not None and value.name:
            return value.name
        return self.name

    def url_key_for(self, store_id: int) -> str:
        value = self.store_value(store_id)
        if value is not None and value.url_key:
            return value.url_key
        return self.url_key or ""

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "parent_id": self.parent_id,
            "level": self.level,
            "path": self.path,
            "position": self.position,
            "name": self.name,
            "url_key": self.url_key or "",
            "store_values": {v.store_id: v.name for v in self.store_values},
        }


class Store(Base):
    __tablename__ = "stores"

    id               = Column(Integer, primary_key=True, autoincrement=True)
    code             = Column(String(32), unique=True, nullable=False, index=True)
    name             = Column(String(255), default="")
    root_category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    is_default       = Column(Boolean, default=False)


class CategoryStoreValue(Base):
    __tablename__ = "category_store_values"

    id          = Column(Integer, primary_key=True, autoincrement=True)
    category_id = Column(Integer,
                         ForeignKey("categories.id", ondelete="CASCADE"),
                         nullable=False)
    store_id    = Column(Integer,
                         ForeignKey("stores.id", ondelete="CASCADE"),
                         nullable=False)
    name        = Column(String(255), default="")
    url_key     = Column(String(255), default="")

    category = relationship("Category", back_populates="store_values")

    __table_args__ = (
        UniqueConstraint("category_id", "store_id", name="uq_category_store"),
    )


class UrlRewrite(Base):
    __tablename__ = "url_rewrites"

    id           = Column(Integer, primary_key=True, autoincrement=True)
    store_id     = Column(Integer, ForeignKey("stores.id", ondelete="CASCADE"),
                          nullable=False)
    category_id  = Column(Integer,
                          ForeignKey("categories.id", ondelete="CASCADE"),
                          nullable=False)
    request_path = Column(String(1024), nullable=False)

    __table_args__ = (
        Index("ix_rewrite_lookup", "store_id", "category_id"),
    )


class IndexProcess(Base):
    __tablename__ = "index_processes"

    id       = Column(Integer, primary_key=True, autoincrement=True)
    code     = Column(String(64), unique=True, nullable=False)
    mode     = Column(String(16), nullable=False, default=MODE_REAL_TIME)
    status   = Column(String(16), nullable=False, default=STATUS_READY)
    ended_at = Column(DateTime, nullable=True)
