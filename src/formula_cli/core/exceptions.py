"""
Error types raised by the formula model, the TeX builder and the codecs.
"""

from __future__ import annotations

from typing import Any, Optional


class FormulaError(Exception):
    """Base class for every error raised by formula-cli."""

    def __init__(self, message: str, detail: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail


class ConstructionError(FormulaError, ValueError):
    """A function was built with no arguments or mismatched argument nodes."""


class CursorColorMissingError(FormulaError, ValueError):
    """A cursor was rendered without a cursor color."""


class FormatError(FormulaError, ValueError):
    """An interchange document could not be decoded."""
