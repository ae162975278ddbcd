"""
import_engine.tree_builder - Turn CSV rows into category nodes.

Each row is a root→leaf path: column 0 hangs under the store root,
column i under whatever was last created at depth i.  A blank cell
inherits the node from an earlier row at that depth, so rows must be
grouped by branch:

    Men
    ,Shirts
    ,,Casual
    Women
    ,Dresses
"""

from __future__ import annotations

import sys
from typing import TextIO

from sqlalchemy.orm import Session

from import_engine.errors import MalformedRowError
from import_engine.locale_header import LocaleOverride, override_values, primary_bound
from import_engine.report import ImportReport
from services import catalog_service
from services.store_service import resolve_store


class DepthParentMap:
    """
    depth → id of the node last created at that depth.

    Recording a node at depth d forgets every deeper entry: those nodes
    belong to the previous branch and must not receive new children.
    """

    def __init__(self, root_id: int):
        self._ids: dict[int, int] = {0: root_id}

    def parent_for(self, depth: int) -> int | None:
        return self._ids.get(depth)

    def record(self, depth: int, node_id: int) -> None:
        for stale in [d for d in self._ids if d > depth]:
            del self._ids[stale]
        self._ids[depth] = node_id

    def __contains__(self, depth: int) -> bool:
        return depth in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def as_dict(self) -> dict[int, int]:
        return dict(self._ids)


class TreeBuilder:
    """
    Stateful processor: the depth map lives across rows of one run.
    Every create and every store-scoped revision is committed on its own.
    The store columns of a row are applied to each node the row creates.
    """

    def __init__(
        self,
        session: Session,
        root_id: int,
        overrides: list[LocaleOverride] | None = None,
        report: ImportReport | None = None,
        stream: TextIO | None = None,
    ):
        self.session = session
        self.parents = DepthParentMap(root_id)
        self.overrides = sorted(overrides or [], key=lambda o: o.column)
        self.report = report if report is not None else ImportReport()
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        return self._stream or sys.stdout

    def process(self, line: int, cells: list[str]) -> int:
        """Create the nodes of one row.  Returns how many were created."""
        bound = primary_bound(self.overrides, len(cells))
        created = 0

        for i in range(bound):
            label = cells[i].strip()
            if not label:
                continue

            parent_id = self.parents.parent_for(i)
            if parent_id is None:
                raise MalformedRowError(line, i, label, i)

            category = catalog_service.create_category(self.session, parent_id, label)
            self.session.commit()
            self.parents.record(i + 1, category.id)
            self.report.created += 1
            created += 1

            self._write("--" * (i + 1) + " " + label)
            self._apply_overrides(category, cells)
            self._write("\n")

        return created

    def _apply_overrides(self, category, cells: list[str]) -> None:
        for store_code, label in override_values(self.overrides, cells):
            store = resolve_store(self.session, store_code)
            catalog_service.set_store_name(self.session, category, store, label)
            self.session.commit()
            self.report.overrides += 1
            self._write(f" [{store_code}: {label}]")

    def _write(self, text: str) -> None:
        self.stream.write(text)
