"""Main application window: wires session, model, view, undo stack, and dialogs."""

from __future__ import annotations

import logging
from pathlib import Path

from PySide6.QtCore import Qt
from PySide6.QtGui import QCursor, QKeySequence, QUndoStack
from PySide6.QtWidgets import (
    QApplication,
    QLabel,
    QMainWindow,
    QMessageBox,
    QProgressBar,
    QStatusBar,
)

from transeditor import config
from transeditor.dialogs import EditDialog, OpenPairDialog
from transeditor.errors import LoadError, SaveError, TranslationError
from transeditor.models import TranslationSession
from transeditor.resource_io import load_pair
from transeditor.table_model import TranslationTableModel
from transeditor.table_view import TranslationTableView
from transeditor.translate import auto_translate, get_translator
from transeditor.undo import EditValueCommand

log = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    def __init__(self):
        super().__init__()
        self.setWindowTitle("Translation Editor")
        self.resize(1200, 760)

        # Core state
        self._session: TranslationSession | None = None
        self._undo_stack = QUndoStack(self)

        # Table model & view
        self._model = TranslationTableModel(self)
        self._model.edit_requested.connect(self._on_edit_requested)
        self._view = TranslationTableView(self)
        self._view.setModel(self._model)
        self._view.auto_translate_requested.connect(self._auto_translate_row)
        self.setCentralWidget(self._view)

        # Status bar: counters on the left, load progress on the right
        self._status = QStatusBar(self)
        self._info_label = QLabel()
        self._status.addWidget(self._info_label, 1)
        self._progress = QProgressBar()
        self._progress.setMaximumWidth(220)
        self._progress.setVisible(False)
        self._status.addPermanentWidget(self._progress)
        self.setStatusBar(self._status)

        self._build_menus()

        self._undo_stack.cleanChanged.connect(self._on_clean_changed)
        self._undo_stack.indexChanged.connect(self._on_undo_redo)

        self._model.set_pending_only(config.get_show_pending_only())
        self._update_actions()
        self._update_title()
        self._update_status()

    # ── Menu construction ───────────────────────────────────────

    def _sc(self, action_name: str) -> str:
        """Shortcut helper."""
        return config.get_shortcut(action_name)

    def _build_menus(self) -> None:
        mb = self.menuBar()
        labels = config.ACTION_LABELS

        # File
        file_menu = mb.addMenu("&File")
        self._act_open = file_menu.addAction(labels["file_open"] + "…", self._file_open)
        self._act_open.setShortcut(QKeySequence(self._sc("file_open")))

        self._act_reload = file_menu.addAction(labels["file_reload"], self._file_reload)
        self._act_reload.setShortcut(QKeySequence(self._sc("file_reload")))

        self._act_save = file_menu.addAction(labels["file_save"], self._file_save)
        self._act_save.setShortcut(QKeySequence(self._sc("file_save")))

        file_menu.addSeparator()
        self._act_quit = file_menu.addAction(labels["file_quit"], self.close)
        self._act_quit.setShortcut(QKeySequence(self._sc("file_quit")))

        # Edit
        edit_menu = mb.addMenu("&Edit")
        self._act_undo = self._undo_stack.createUndoAction(self, labels["edit_undo"])
        self._act_undo.setShortcut(QKeySequence(self._sc("edit_undo")))
        edit_menu.addAction(self._act_undo)

        self._act_redo = self._undo_stack.createRedoAction(self, labels["edit_redo"])
        self._act_redo.setShortcut(QKeySequence(self._sc("edit_redo")))
        edit_menu.addAction(self._act_redo)

        edit_menu.addSeparator()
        self._act_edit = edit_menu.addAction(labels["op_edit_cell"] + "…", self._op_edit_value)
        self._act_edit.setShortcut(QKeySequence(self._sc("op_edit_cell")))

        self._act_auto = edit_menu.addAction(
            labels["op_auto_translate"], lambda: self._auto_translate_row(self._view.current_row())
        )
        self._act_auto.setShortcut(QKeySequence(self._sc("op_auto_translate")))

        # View
        view_menu = mb.addMenu("&View")
        self._act_pending = view_menu.addAction(labels["view_pending_only"], self._toggle_pending_only)
        self._act_pending.setCheckable(True)
        self._act_pending.setChecked(config.get_show_pending_only())
        self._act_pending.setShortcut(QKeySequence(self._sc("view_pending_only")))

        view_menu.addSeparator()
        self._act_font_up = view_menu.addAction("Increase Font", self._font_increase)
        self._act_font_up.setShortcut(QKeySequence("Ctrl+="))
        self._act_font_down = view_menu.addAction("Decrease Font", self._font_decrease)
        self._act_font_down.setShortcut(QKeySequence("Ctrl+-"))

    def _translator_name(self) -> str:
        name = config.get_translator_name()
        if not name:
            return ""
        try:
            get_translator(name)
        except KeyError:
            return ""
        return name

    def _update_actions(self) -> None:
        loaded = self._session is not None
        auto = loaded and bool(self._translator_name())
        self._act_reload.setEnabled(loaded)
        self._act_save.setEnabled(loaded)
        self._act_edit.setEnabled(loaded)
        self._act_auto.setEnabled(auto)
        self._view.set_auto_translate_enabled(auto)

    # ── Status bar ──────────────────────────────────────────────

    def _has_unsaved_changes(self) -> bool:
        if self._session is None:
            return False
        return not self._undo_stack.isClean() or self._session.structure_changed

    def _update_status(self) -> None:
        if self._session is None:
            self._info_label.setText("No files loaded")
            return
        stats = self._session.stats
        pending = len(self._session.pending_rows())
        self._info_label.setText(
            f"Total Resources: {stats.total}; "
            f"Resources Not Translated: {stats.untranslated}  |  "
            f"Pending now: {pending}"
        )

    def _update_title(self) -> None:
        if self._session is None or not self._session.destination_path:
            self.setWindowTitle("Translation Editor")
            return
        name = Path(self._session.destination_path).name
        dirty = " •" if self._has_unsaved_changes() else ""
        self.setWindowTitle(f"{name}{dirty} — Translation Editor")

    def _on_clean_changed(self, _clean: bool) -> None:
        self._update_title()

    def _on_undo_redo(self, _idx: int) -> None:
        self._model.notify_data_changed()
        self._view.reflow_rows()
        self._update_status()

    def _on_load_progress(self, done: int, total: int) -> None:
        self._progress.setMaximum(max(total, 1))
        self._progress.setValue(done)
        self._progress.repaint()

    # ── File operations ─────────────────────────────────────────

    def _confirm_discard(self) -> bool:
        """Ask to save pending changes; return False if the user cancels."""
        if not self._has_unsaved_changes():
            return True
        ans = QMessageBox.question(
            self,
            "Save",
            "Save changes before continuing?",
            QMessageBox.Save | QMessageBox.Discard | QMessageBox.Cancel,
            QMessageBox.Cancel,
        )
        if ans == QMessageBox.Save:
            return self._file_save()
        return ans == QMessageBox.Discard

    def _file_open(self) -> None:
        if not self._confirm_discard():
            return
        source, destination = config.get_last_paths()
        dlg = OpenPairDialog(source, destination, parent=self)
        if dlg.exec() != OpenPairDialog.Accepted:
            return
        self.load_pair(dlg.source_path, dlg.destination_path)

    def _file_reload(self) -> None:
        if self._session is None or not self._confirm_discard():
            return
        self.load_pair(self._session.source_path, self._session.destination_path)

    def restore_last_pair(self) -> bool:
        """Reopen the pair remembered from the previous run, if any."""
        source, destination = config.get_last_paths()
        if not source or not destination:
            return False
        return self.load_pair(source, destination)

    def load_pair(self, source: str | Path, destination: str | Path) -> bool:
        """Load a file pair and return True on success. Can be called externally."""
        self._progress.setValue(0)
        self._progress.setVisible(True)
        QApplication.setOverrideCursor(QCursor(Qt.WaitCursor))
        try:
            session = load_pair(source, destination, progress=self._on_load_progress)
        except LoadError as exc:
            log.warning("Load failed: %s", exc)
            QMessageBox.critical(self, "Error", f"Error loading files.\n{exc}")
            return False
        finally:
            QApplication.restoreOverrideCursor()
            self._progress.setVisible(False)

        self._session = session
        self._model.set_session(session)
        self._undo_stack.clear()
        self._undo_stack.setClean()
        config.set_last_paths(str(source), str(destination))
        config.save_settings()
        self._update_actions()
        self._update_title()
        self._update_status()
        if self._model.rowCount() > 0:
            self._view.select_cell(0, TranslationTableModel.LOCALIZED_COL)
        return True

    def _file_save(self) -> bool:
        if self._session is None:
            return False
        before = self._session.row_count()
        try:
            self._session.save(backup=True)
        except SaveError as exc:
            log.warning("Save failed: %s", exc)
            QMessageBox.critical(
                self, "Error", f"Error saving destination translation:\n{exc}"
            )
            return False

        if self._session.row_count() != before:
            # Duplicates were dropped; record indices in the undo history are stale
            self._model.set_session(self._session)
            self._undo_stack.clear()
        self._undo_stack.setClean()
        self._update_title()
        self._update_status()
        self._status.showMessage("Saved", 3000)
        return True

    # ── Editing ─────────────────────────────────────────────────

    def _push_cmd(self, cmd) -> None:
        """Push an undo command, then refresh the view."""
        self._undo_stack.push(cmd)
        self._model.notify_data_changed()
        self._update_status()

    def _on_edit_requested(self, row: int, old_text: str, new_text: str) -> None:
        if self._session is None:
            return
        self._push_cmd(EditValueCommand(self._session, row, old_text, new_text))

    def _op_edit_value(self) -> None:
        """Open modal edit dialog for the selected row."""
        grid_row = self._view.current_row()
        if self._session is None or grid_row < 0:
            return
        row = self._model.record_row(grid_row)
        record = self._session.record_at(row)
        dlg = EditDialog(
            record.source_value,
            record.localized_value,
            title=f"{record.page_name} / {record.resource_name}",
            parent=self,
        )
        if dlg.exec() != EditDialog.Accepted:
            return
        new_text = dlg.result_text
        if new_text is None or new_text == record.localized_value:
            return
        self._push_cmd(EditValueCommand(self._session, row, record.localized_value, new_text))

    def _auto_translate_row(self, grid_row: int) -> None:
        if self._session is None or grid_row < 0:
            return
        name = self._translator_name()
        if not name:
            QMessageBox.information(self, "Auto Translate", "No translator is configured.")
            return
        row = self._model.record_row(grid_row)
        record = self._session.record_at(row)
        try:
            text = auto_translate(record, get_translator(name))
        except TranslationError as exc:
            QMessageBox.warning(self, "Auto Translate", str(exc))
            return
        if text != record.localized_value:
            self._push_cmd(
                EditValueCommand(
                    self._session, row, record.localized_value, text,
                    description="Auto translate",
                )
            )

    # ── View ────────────────────────────────────────────────────

    def _toggle_pending_only(self) -> None:
        pending_only = self._act_pending.isChecked()
        config.set_show_pending_only(pending_only)
        config.save_settings()
        self._model.set_pending_only(pending_only)
        self._view.reflow_rows()

    def _change_font(self, delta: int) -> None:
        config.set_font_size(config.get_font_size() + delta)
        config.save_settings()
        self._model.notify_data_changed()
        self._view.reflow_rows()

    def _font_increase(self) -> None:
        self._change_font(+1)

    def _font_decrease(self) -> None:
        self._change_font(-1)

    # ── Overrides ───────────────────────────────────────────────

    def closeEvent(self, event) -> None:
        if self._confirm_discard():
            event.accept()
        else:
            event.ignore()
