"""
import_engine - CSV category tree import pipeline.

Public API:
    run_import(path, delimiter=",", enclosure='"', header=False, force=False) → ImportReport
"""

from import_engine.importer import run_import        # noqa: F401
from import_engine.report import ImportReport        # noqa: F401
from import_engine.errors import (                   # noqa: F401
    CategoryImportError, ImportAbortedError, ImportSetupError, MalformedRowError,
)
