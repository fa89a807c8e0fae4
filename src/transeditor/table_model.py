"""Qt table model backed by a TranslationSession.

Uses QAbstractTableModel so that QTableView only requests data for
visible rows.  Grid rows map to record indices through an explicit
list, which also implements the "pending only" filter.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from PySide6.QtCore import QAbstractTableModel, QModelIndex, Qt, Signal
from PySide6.QtGui import QColor

if TYPE_CHECKING:
    from transeditor.models import TranslationSession

PENDING_COLOR = QColor(200, 0, 0)
READ_ONLY_BACKGROUND = QColor(240, 240, 240)


class TranslationTableModel(QAbstractTableModel):
    """Four-column model: Page, Resource, Original, Localized (editable)."""

    COLUMNS = ("Page", "Resource", "Original", "Localized")
    PAGE_COL, RESOURCE_COL, ORIGINAL_COL, LOCALIZED_COL = range(4)

    # record row, old text, new text
    edit_requested = Signal(int, str, str)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._session: TranslationSession | None = None
        self._rows: list[int] = []
        self._pending_only = False

    # ── Public API ──────────────────────────────────────────────

    @property
    def session(self):
        return self._session

    @property
    def pending_only(self) -> bool:
        return self._pending_only

    def set_session(self, session) -> None:
        """Replace the underlying session and refresh the view."""
        self.beginResetModel()
        self._session = session
        self._rebuild_rows()
        self.endResetModel()

    def set_pending_only(self, pending_only: bool) -> None:
        """Show only rows flagged as untranslated at the time of the call."""
        self.beginResetModel()
        self._pending_only = pending_only
        self._rebuild_rows()
        self.endResetModel()

    def notify_data_changed(self) -> None:
        """Repaint all cells after an edit, undo or redo.

        The visible row set is kept, so an edited row does not disappear
        from the pending-only view until it is refreshed.
        """
        if self.rowCount() == 0:
            return
        self.dataChanged.emit(
            self.index(0, 0),
            self.index(self.rowCount() - 1, self.columnCount() - 1),
        )

    def record_row(self, grid_row: int) -> int:
        """Map a grid row to an index into ``session.records``."""
        return self._rows[grid_row]

    def grid_row(self, record_row: int) -> int:
        """Map a record index to its grid row, or -1 if it is filtered out."""
        try:
            return self._rows.index(record_row)
        except ValueError:
            return -1

    def _rebuild_rows(self) -> None:
        if self._session is None:
            self._rows = []
        elif self._pending_only:
            self._rows = self._session.pending_rows()
        else:
            self._rows = list(range(self._session.row_count()))

    # ── QAbstractTableModel overrides ───────────────────────────

    def rowCount(self, parent: QModelIndex = QModelIndex()) -> int:
        if parent.isValid() or self._session is None:
            return 0
        return len(self._rows)

    def columnCount(self, parent: QModelIndex = QModelIndex()) -> int:
        if parent.isValid():
            return 0
        return len(self.COLUMNS)

    def data(self, index: QModelIndex, role: int = Qt.DisplayRole) -> Any:
        if not index.isValid() or self._session is None:
            return None
        record = self._session.record_at(self._rows[index.row()])
        col = index.column()
        if role in (Qt.DisplayRole, Qt.EditRole, Qt.ToolTipRole):
            if col == self.PAGE_COL:
                return record.page_name
            if col == self.RESOURCE_COL:
                return record.resource_name
            if col == self.ORIGINAL_COL:
                return record.source_value
            return record.localized_value
        if role == Qt.ForegroundRole and col == self.LOCALIZED_COL:
            return PENDING_COLOR if record.is_pending else None
        if role == Qt.BackgroundRole and col != self.LOCALIZED_COL:
            return READ_ONLY_BACKGROUND
        return None

    def setData(self, index: QModelIndex, value: Any, role: int = Qt.EditRole) -> bool:
        """Forward localized edits as ``edit_requested`` for the undo stack."""
        if (
            not index.isValid()
            or self._session is None
            or role != Qt.EditRole
            or index.column() != self.LOCALIZED_COL
        ):
            return False
        row = self._rows[index.row()]
        old = self._session.record_at(row).localized_value
        new = "" if value is None else str(value)
        if new == old:
            return False
        self.edit_requested.emit(row, old, new)
        return True

    def headerData(
        self, section: int, orientation: Qt.Orientation, role: int = Qt.DisplayRole
    ) -> Any:
        if role == Qt.DisplayRole:
            if orientation == Qt.Horizontal and 0 <= section < len(self.COLUMNS):
                label = self.COLUMNS[section]
                if self._session is not None:
                    if section == self.ORIGINAL_COL and self._session.source_code:
                        return f"{label} [{self._session.source_code}]"
                    if section == self.LOCALIZED_COL and self._session.destination_code:
                        return f"{label} [{self._session.destination_code}]"
                return label
            if orientation == Qt.Vertical:
                return str(section + 1)
        return None

    def flags(self, index: QModelIndex) -> Qt.ItemFlags:
        base = Qt.ItemIsEnabled | Qt.ItemIsSelectable
        if index.column() == self.LOCALIZED_COL:
            return base | Qt.ItemIsEditable
        return base
