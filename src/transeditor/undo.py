"""Undo/Redo commands for localized value edits.

Commands mutate the TranslationSession only; the caller is responsible
for signalling the table model to refresh.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from PySide6.QtGui import QUndoCommand

if TYPE_CHECKING:
    from transeditor.models import TranslationSession


class EditValueCommand(QUndoCommand):
    """Replace the localized value of the record at *row*.

    Rows are indices into ``session.records`` (not grid rows), so the
    command stays valid when the pending-only filter changes.
    """

    def __init__(
        self,
        session: TranslationSession,
        row: int,
        old_text: str,
        new_text: str,
        *,
        description: str = "Edit value",
    ) -> None:
        super().__init__(description)
        self._session = session
        self._row = row
        self._old = old_text
        self._new = new_text

    @property
    def row(self) -> int:
        return self._row

    def redo(self) -> None:
        self._session.set_value(self._row, self._new)

    def undo(self) -> None:
        self._session.set_value(self._row, self._old)
