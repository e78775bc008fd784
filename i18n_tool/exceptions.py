"""Exceptions raised by the translation file toolchain."""

from __future__ import annotations

from typing import Optional


class I18NToolError(Exception):
    """Base class for every error raised by this package."""


class ParseError(I18NToolError):
    """Raised when a translation file cannot be turned into a document."""

    def __init__(self, message: str, line: Optional[int] = None) -> None:
        self.line = line
        if line is not None:
            message = f"Line {line}: {message}"
        super().__init__(message)


class InvalidStateError(I18NToolError, RuntimeError):
    """Raised when an operation needs a loaded document and there is none."""


class ScanError(I18NToolError):
    """Raised when a source file cannot be scanned for translatable strings."""
