"""
import_engine.importer - Top-level orchestrator.

Coordinates csv_parser → locale_header → tree_builder, brackets the
run with index batch mode and produces an ImportReport.

Failure model: nothing is rolled back.  Rows persisted before a failure
stay in the database and the index processes stay in manual mode;
a re-run needs force=True.
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import TextIO

from sqlalchemy.orm import Session

import config
from db.engine import get_session
from import_engine.csv_parser import check_dialect, open_source, read_rows
from import_engine.errors import ImportAbortedError, ImportSetupError
from import_engine.locale_header import is_header_row, parse_header
from import_engine.report import ImportReport
from import_engine.tree_builder import TreeBuilder
from services import catalog_service, index_service
from services.store_service import default_root_category_id

logger = logging.getLogger(__name__)


def run_import(
    path: str | Path,
    *,
    delimiter: str = config.DEFAULT_DELIMITER,
    enclosure: str = config.DEFAULT_ENCLOSURE,
    header: bool = False,
    force: bool = False,
    session: Session | None = None,
    stream: TextIO | None = None,
) -> ImportReport:
    """
    Build the category tree described by the CSV at *path*.

    Parameters
    ----------
    path : CSV file; each row is a root→leaf path
    delimiter, enclosure : single characters passed to the CSV reader
    header : treat row 1 as a store-code header even if its first cell is set
    force : delete existing top-level categories (and their subtrees) first
    session : optional session; one is opened and closed otherwise
    stream : progress output, defaults to stdout

    Raises
    ------
    ImportSetupError   before anything is created
    ImportAbortedError when the main loop fails part-way
    """
    report = ImportReport(started_at=datetime.now())
    out = _Writer(stream)

    check_dialect(delimiter, enclosure)

    with open_source(path) as fh:
        own_session = session is None
        if own_session:
            session = get_session()
        try:
            _reset_existing(session, force, report, out)
            try:
                root_id = default_root_category_id(session)
                with index_service.batch_mode(session):
                    _process_rows(session, fh, root_id, delimiter, enclosure,
                                  header, report, out)
                    out("\nReindexing all...\n")
            except Exception as exc:
                logger.exception("Category import failed after line %d", report.lines)
                session.rollback()
                message = str(exc) or exc.__class__.__name__
                raise ImportAbortedError(message, report) from exc
        finally:
            if own_session:
                session.close()

    report.finished_at = datetime.now()
    logger.info("Category import finished: %s", report.to_dict())
    return report


def _reset_existing(
    session: Session,
    force: bool,
    report: ImportReport,
    out: "_Writer",
) -> None:
    existing = catalog_service.count_categories(session, config.TOP_LEVEL)
    if not existing:
        return
    if not force:
        raise ImportSetupError(
            "Categories already created. Use --force option to delete "
            "old categories automatically."
        )
    report.deleted = catalog_service.delete_categories(session, config.TOP_LEVEL)
    session.commit()
    out(f"Deleted {report.deleted} old categories\n")


def _process_rows(
    session: Session,
    fh: TextIO,
    root_id: int,
    delimiter: str,
    enclosure: str,
    header: bool,
    report: ImportReport,
    out: "_Writer",
) -> None:
    builder = TreeBuilder(session, root_id, report=report, stream=out.stream)

    for line, cells in read_rows(fh, delimiter, enclosure):
        report.lines = line

        if line == 1 and is_header_row(cells, header):
            builder.overrides = parse_header(cells)
            report.store_codes = [o.store_code for o in builder.overrides]
            logger.info("Store header: %s",
                        {o.column: o.store_code for o in builder.overrides})
            continue

        if not cells:
            continue

        builder.process(line, cells)


class _Writer:
    """Progress output; resolves sys.stdout lazily."""

    def __init__(self, stream: TextIO | None):
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        return self._stream or sys.stdout

    def __call__(self, text: str) -> None:
        self.stream.write(text)
