"""Modal dialogs for choosing a file pair and editing a value."""

from __future__ import annotations

from pathlib import Path

from PySide6.QtWidgets import (
    QDialog,
    QDialogButtonBox,
    QFileDialog,
    QFormLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMessageBox,
    QPushButton,
    QTextEdit,
    QVBoxLayout,
    QWidget,
)

XML_FILTER = "XML files (*.xml);;All files (*)"


# ── Open Pair Dialog ────────────────────────────────────────────


class OpenPairDialog(QDialog):
    """Pick the source (reference) and destination (edited) files.

    The chosen paths are available as ``source_path`` and
    ``destination_path`` once the dialog is accepted.
    """

    def __init__(self, source: str = "", destination: str = "", parent=None):
        super().__init__(parent)
        self.setWindowTitle("Open Translation Pair")
        self.setMinimumWidth(560)
        self.source_path: str = ""
        self.destination_path: str = ""

        layout = QVBoxLayout(self)
        form = QFormLayout()

        self._source_edit = QLineEdit(source)
        form.addRow(
            "Source translation:",
            self._path_row(self._source_edit, "Select a File as Source Translation"),
        )
        self._destination_edit = QLineEdit(destination)
        form.addRow(
            "Destination translation:",
            self._path_row(
                self._destination_edit, "Select the Language File you want to Translate"
            ),
        )
        layout.addLayout(form)

        buttons = QDialogButtonBox(
            QDialogButtonBox.Ok | QDialogButtonBox.Cancel
        )
        buttons.accepted.connect(self._accept)
        buttons.rejected.connect(self.reject)
        layout.addWidget(buttons)

    def _path_row(self, edit: QLineEdit, title: str) -> QWidget:
        row = QWidget()
        h = QHBoxLayout(row)
        h.setContentsMargins(0, 0, 0, 0)
        h.addWidget(edit)
        browse = QPushButton("Browse…")
        browse.clicked.connect(lambda: self._browse(edit, title))
        h.addWidget(browse)
        return row

    def _browse(self, edit: QLineEdit, title: str) -> None:
        start = str(Path(edit.text()).parent) if edit.text() else ""
        path, _ = QFileDialog.getOpenFileName(self, title, start, XML_FILTER)
        if path:
            edit.setText(path)

    def _accept(self) -> None:
        source = self._source_edit.text().strip()
        destination = self._destination_edit.text().strip()
        if not source or not destination:
            QMessageBox.warning(
                self,
                "Missing file",
                "Choose both a source and a destination translation file.",
            )
            return
        self.source_path = source
        self.destination_path = destination
        self.accept()


# ── Edit Dialog ─────────────────────────────────────────────────


class EditDialog(QDialog):
    """Modal dialog for editing a localized value next to its original.

    Returns the new text via ``result_text`` if accepted, or ``None``
    if cancelled.
    """

    def __init__(self, original: str, text: str, title: str = "Edit Value", parent=None):
        super().__init__(parent)
        self.setWindowTitle(title)
        self.setMinimumSize(600, 360)
        self.result_text: str | None = None

        layout = QVBoxLayout(self)

        layout.addWidget(QLabel("Original:"))
        reference = QTextEdit()
        reference.setPlainText(original)
        reference.setReadOnly(True)
        layout.addWidget(reference)

        layout.addWidget(QLabel("Localized:"))
        self._editor = QTextEdit()
        self._editor.setPlainText(text)
        self._editor.setAcceptRichText(False)
        layout.addWidget(self._editor)

        buttons = QDialogButtonBox(
            QDialogButtonBox.Ok | QDialogButtonBox.Cancel
        )
        buttons.accepted.connect(self._accept)
        buttons.rejected.connect(self.reject)
        layout.addWidget(buttons)

        self._editor.setFocus()

    def _accept(self) -> None:
        self.result_text = self._editor.toPlainText()
        self.accept()
