"""
import_engine.errors - Exceptions raised by the category import.

Every fatal condition derives from CategoryImportError; its message is
the one line shown to the operator.
"""

from __future__ import annotations


class CategoryImportError(RuntimeError):
    """Base class for all fatal import conditions."""


class ImportSetupError(CategoryImportError):
    """Raised before any category is created (bad file, existing tree …)."""


class MalformedRowError(CategoryImportError):
    """Raised when a row needs a parent at a depth nobody populated."""

    def __init__(self, line: int, column: int, value: str, depth: int):
        super().__init__(
            f"Line {line}, column {column + 1}: no parent category at depth "
            f"{depth} for '{value}' (rows must be grouped by branch)"
        )
        self.line = line
        self.column = column
        self.value = value
        self.depth = depth


class ImportAbortedError(CategoryImportError):
    """
    Raised when the main loop fails.  Carries the partial report so the
    caller can tell what was already persisted.
    """

    def __init__(self, message: str, report=None):
        super().__init__(message)
        self.report = report
