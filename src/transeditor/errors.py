"""Exceptions raised by the model layer.

All of them are recoverable: the window reports the message and keeps
the previous session untouched.
"""

from __future__ import annotations


class EditorError(Exception):
    """Base class for editor errors."""


class LoadError(EditorError):
    """A source or destination file could not be opened or parsed."""


class SaveError(EditorError):
    """The destination file could not be written."""


class TranslationError(EditorError):
    """An auto-translate hook failed."""


class RecordNotFoundError(EditorError, LookupError):
    """An edit referenced a (page, resource) key that is not loaded."""

    def __init__(self, page_name: str, resource_name: str) -> None:
        super().__init__(f"No resource '{resource_name}' on page '{page_name}'")
        self.page_name = page_name
        self.resource_name = resource_name
