"""Exceptions raised by citekit.

Only style import is allowed to fail loudly; everything on the render path
degrades instead of raising.
"""

from __future__ import annotations


class CitekitError(Exception):
    """Base exception for citekit errors."""

    pass


class StyleImportError(CitekitError):
    """Raised when a style definition cannot be imported."""

    pass


class StyleValidationError(StyleImportError):
    """Raised when a style definition is missing a required field or placeholder."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class UnsupportedStyleFormatError(StyleImportError):
    """Raised for style formats that are recognized but not supported (CSL/XML)."""

    pass
