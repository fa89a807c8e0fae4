"""Custom QTableView and delegate for the translation grid.

Provides:
  - Multi-line inline editor for the Localized column
  - Ctrl+Enter to confirm, Escape to cancel, focus loss commits
  - Wrapped text rendering with per-row height
  - Context menu with Auto Translate
"""

from __future__ import annotations

from PySide6.QtCore import QSize, Qt, QTimer, Signal
from PySide6.QtGui import QColor, QPen, QTextDocument, QTextOption
from PySide6.QtWidgets import (
    QAbstractItemView,
    QHeaderView,
    QMenu,
    QPlainTextEdit,
    QStyle,
    QStyledItemDelegate,
    QTableView,
    QWidget,
)

from transeditor import config


class _CellEditor(QPlainTextEdit):
    """In-cell editor for a localized value.

    Enter inserts a newline, Ctrl+Enter confirms, Escape cancels.
    """

    edit_confirmed = Signal()
    edit_cancelled = Signal()

    def __init__(self, parent: QWidget | None = None):
        super().__init__(parent)
        self.setFrameShape(QPlainTextEdit.NoFrame)
        self.setVerticalScrollBarPolicy(Qt.ScrollBarAsNeeded)
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        self.setWordWrapMode(QTextOption.WrapAtWordBoundaryOrAnywhere)
        self.setStyleSheet(
            "QPlainTextEdit { padding: 4px; background-color: #fffbe6; }"
        )

    def keyPressEvent(self, event) -> None:
        key = event.key()
        if key in (Qt.Key_Return, Qt.Key_Enter) and (event.modifiers() & Qt.ControlModifier):
            self.edit_confirmed.emit()
            event.accept()
            return
        if key == Qt.Key_Escape:
            self.edit_cancelled.emit()
            event.accept()
            return
        super().keyPressEvent(event)


class _TranslationDelegate(QStyledItemDelegate):
    """Paints wrapped text and creates multi-line editors."""

    _MIN_ROW_HEIGHT = 32

    def createEditor(self, parent, option, index):
        editor = _CellEditor(parent)
        font = editor.font()
        font.setPointSize(config.get_font_size())
        editor.setFont(font)
        editor.edit_confirmed.connect(lambda: self._commit_and_close(editor))
        editor.edit_cancelled.connect(
            lambda: self.closeEditor.emit(editor, QStyledItemDelegate.RevertModelCache)
        )
        return editor

    def setEditorData(self, editor, index):
        text = index.data(Qt.EditRole) or ""
        editor.setPlainText(text)
        cursor = editor.textCursor()
        cursor.movePosition(cursor.MoveOperation.End)
        editor.setTextCursor(cursor)

    def setModelData(self, editor, model, index):
        # The model turns this into an undoable edit
        model.setData(index, editor.toPlainText(), Qt.EditRole)

    def updateEditorGeometry(self, editor, option, index):
        editor.setGeometry(option.rect)

    def _commit_and_close(self, editor) -> None:
        self.commitData.emit(editor)
        self.closeEditor.emit(editor, QStyledItemDelegate.NoHint)

    def initStyleOption(self, option, index):
        super().initStyleOption(option, index)
        font = option.font
        font.setPointSize(config.get_font_size())
        option.font = font

    def _text_document(self, text: str, font, width: int) -> QTextDocument:
        doc = QTextDocument()
        doc.setDefaultFont(font)
        text_option = QTextOption()
        text_option.setWrapMode(QTextOption.WrapAtWordBoundaryOrAnywhere)
        doc.setDefaultTextOption(text_option)
        doc.setPlainText(text)
        doc.setTextWidth(max(width - 16, 50))  # 8px padding each side
        return doc

    def sizeHint(self, option, index):
        """Calculate cell height using QTextDocument for proper text wrapping."""
        text = index.data(Qt.DisplayRole) or ""
        width = option.rect.width() if option.rect.width() > 0 else 250
        if not text:
            return QSize(width, self._MIN_ROW_HEIGHT)
        font = option.font
        font.setPointSize(config.get_font_size())
        doc = self._text_document(text, font, width)
        height = int(doc.size().height()) + 12
        return QSize(width, max(height, self._MIN_ROW_HEIGHT))

    def paint(self, painter, option, index):
        self.initStyleOption(option, index)
        style = option.widget.style() if option.widget else None
        if style:
            # Background, selection and focus rect only
            option.text = ""
            style.drawControl(style.ControlElement.CE_ItemViewItem, option, painter, option.widget)

        painter.save()
        painter.setPen(QPen(QColor(220, 220, 220), 1))
        y = option.rect.bottom()
        painter.drawLine(option.rect.left(), y, option.rect.right(), y)
        painter.restore()

        text = index.data(Qt.DisplayRole) or ""
        if not text:
            return

        doc = self._text_document(text, option.font, option.rect.width())
        if option.state & QStyle.StateFlag.State_Selected:
            palette = option.palette
            color = palette.color(palette.ColorGroup.Active, palette.ColorRole.HighlightedText)
        else:
            color = index.data(Qt.ForegroundRole)
        if color is not None:
            doc.setDefaultStyleSheet(f"body {{ color: {color.name()}; }}")
            doc.setHtml(f"<body>{doc.toPlainText()}</body>")
            doc.setTextWidth(max(option.rect.width() - 16, 50))

        painter.save()
        painter.translate(option.rect.left() + 8, option.rect.top() + 6)
        doc.drawContents(painter)
        painter.restore()


class TranslationTableView(QTableView):
    """Translation grid; only the Localized column is editable."""

    # Emitted with the grid row when Auto Translate is picked
    auto_translate_requested = Signal(int)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._auto_translate_enabled = False

        self.setAlternatingRowColors(True)
        self.setWordWrap(True)
        self.setTextElideMode(Qt.ElideNone)
        self.setSelectionMode(QTableView.SingleSelection)
        self.setSelectionBehavior(QTableView.SelectItems)
        self.setEditTriggers(
            QAbstractItemView.SelectedClicked
            | QAbstractItemView.DoubleClicked
            | QAbstractItemView.EditKeyPressed
        )
        self.setItemDelegate(_TranslationDelegate(self))
        self.setShowGrid(False)
        self.setContextMenuPolicy(Qt.CustomContextMenu)
        self.customContextMenuRequested.connect(self._show_context_menu)

        header = self.horizontalHeader()
        header.setStretchLastSection(True)
        header.setSectionResizeMode(QHeaderView.Interactive)
        header.sectionResized.connect(self._on_column_resized)

        vheader = self.verticalHeader()
        vheader.setSectionResizeMode(QHeaderView.ResizeToContents)

    def set_auto_translate_enabled(self, enabled: bool) -> None:
        self._auto_translate_enabled = enabled

    # ── Row height helpers ──────────────────────────────────────

    def reflow_rows(self) -> None:
        """Force recalculation of all visible row heights."""
        self.verticalHeader().setSectionResizeMode(QHeaderView.ResizeToContents)

    def _schedule_reflow(self) -> None:
        """Freeze row heights during a resize and recalculate once it settles."""
        vheader = self.verticalHeader()
        if vheader.sectionResizeMode(0) != QHeaderView.Fixed:
            vheader.setSectionResizeMode(QHeaderView.Fixed)
        if not hasattr(self, "_reflow_timer"):
            self._reflow_timer = QTimer(self)
            self._reflow_timer.setSingleShot(True)
            self._reflow_timer.setInterval(150)
            self._reflow_timer.timeout.connect(self.reflow_rows)
        self._reflow_timer.start()

    def _on_column_resized(self, _logical_index: int, _old_size: int, _new_size: int) -> None:
        self._schedule_reflow()

    def resizeEvent(self, event) -> None:
        """Keep Page/Resource narrow and split the rest between the texts."""
        super().resizeEvent(event)
        model = self.model()
        total = self.viewport().width()
        if total > 0 and model is not None and model.columnCount() == 4:
            header = self.horizontalHeader()
            header.resizeSection(0, int(total * 0.12))
            header.resizeSection(1, int(total * 0.16))
            header.resizeSection(2, int(total * 0.36))
        self._schedule_reflow()

    # ── Navigation helpers ──────────────────────────────────────

    def current_row(self) -> int:
        idx = self.currentIndex()
        return idx.row() if idx.isValid() else -1

    def select_cell(self, row: int, col: int) -> None:
        """Move selection to a specific cell and restore focus."""
        model = self.model()
        if model is None:
            return
        if 0 <= row < model.rowCount() and 0 <= col < model.columnCount():
            idx = model.index(row, col)
            self.setCurrentIndex(idx)
            self.scrollTo(idx)
            self.setFocus(Qt.OtherFocusReason)

    def _show_context_menu(self, pos) -> None:
        idx = self.indexAt(pos)
        if not idx.isValid():
            return
        menu = QMenu(self)
        action = menu.addAction("Auto Translate")
        action.setEnabled(self._auto_translate_enabled)
        action.triggered.connect(lambda: self.auto_translate_requested.emit(idx.row()))
        menu.exec(self.viewport().mapToGlobal(pos))
