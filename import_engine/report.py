"""
import_engine.report - Structured result of a category import run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class ImportReport:
    lines: int = 0
    created: int = 0
    overrides: int = 0
    deleted: int = 0
    store_codes: list[str] = field(default_factory=list)
    started_at: datetime | None = None
    finished_at: datetime | None = None

    @property
    def duration(self) -> float:
        if self.started_at is None or self.finished_at is None:
            return 0.0
        return (self.finished_at - self.started_at).total_seconds()

    def to_dict(self) -> dict:
        return {
            "lines": self.lines,
            "created": self.created,
            "overrides": self.overrides,
            "deleted": self.deleted,
            "store_codes": self.store_codes,
            "started_at": self.started_at.isoformat() if self.started_at else "",
            "finished_at": self.finished_at.isoformat() if self.finished_at else "",
            "duration": round(self.duration, 3),
        }
