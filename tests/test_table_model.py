"""Tests for the grid model: row mapping, pending filter, edit forwarding."""

from __future__ import annotations

from PySide6.QtCore import Qt

from transeditor.models import TranslationSession
from transeditor.table_model import PENDING_COLOR, TranslationTableModel

LOCALIZED = TranslationTableModel.LOCALIZED_COL


class TestTableModel:
    def test_rows_and_columns(self, sample_session: TranslationSession):
        model = TranslationTableModel()
        model.set_session(sample_session)
        assert model.rowCount() == 4
        assert model.columnCount() == 4
        assert model.data(model.index(0, 0)) == "General"
        assert model.data(model.index(0, 1)) == "Title"
        assert model.data(model.index(0, 2)) == "Hello"
        assert model.data(model.index(0, LOCALIZED)) == "Bonjour"

    def test_empty_without_session(self):
        model = TranslationTableModel()
        assert model.rowCount() == 0

    def test_only_localized_editable(self, sample_session: TranslationSession):
        model = TranslationTableModel()
        model.set_session(sample_session)
        assert model.flags(model.index(0, LOCALIZED)) & Qt.ItemIsEditable
        assert not model.flags(model.index(0, 0)) & Qt.ItemIsEditable

    def test_pending_rows_colored(self, sample_session: TranslationSession):
        model = TranslationTableModel()
        model.set_session(sample_session)
        assert model.data(model.index(1, LOCALIZED), Qt.ForegroundRole) == PENDING_COLOR
        assert model.data(model.index(0, LOCALIZED), Qt.ForegroundRole) is None

    def test_pending_only_filter_maps_rows(self, sample_session: TranslationSession):
        model = TranslationTableModel()
        model.set_session(sample_session)
        model.set_pending_only(True)
        assert model.rowCount() == 1
        assert model.record_row(0) == 1
        assert model.grid_row(1) == 0
        assert model.grid_row(0) == -1
        assert model.data(model.index(0, 1)) == "Ok"

    def test_set_data_emits_edit_request(self, sample_session: TranslationSession):
        model = TranslationTableModel()
        model.set_session(sample_session)
        model.set_pending_only(True)
        requests: list[tuple[int, str, str]] = []
        model.edit_requested.connect(lambda row, old, new: requests.append((row, old, new)))

        assert model.setData(model.index(0, LOCALIZED), "D'accord")
        assert requests == [(1, "OK", "D'accord")]
        # The model never writes directly; the undo command does
        assert sample_session.record_at(1).localized_value == "OK"

    def test_set_data_ignores_unchanged_and_read_only(self, sample_session: TranslationSession):
        model = TranslationTableModel()
        model.set_session(sample_session)
        requests = []
        model.edit_requested.connect(lambda *args: requests.append(args))
        assert not model.setData(model.index(0, LOCALIZED), "Bonjour")
        assert not model.setData(model.index(0, 0), "Other page")
        assert requests == []

    def test_header_shows_language_codes(self, sample_session: TranslationSession):
        model = TranslationTableModel()
        model.set_session(sample_session)
        assert model.headerData(2, Qt.Horizontal) == "Original [en]"
        assert model.headerData(LOCALIZED, Qt.Horizontal) == "Localized [fr]"
        assert model.headerData(0, Qt.Vertical) == "1"

    def test_session_type_is_annotation_only(self):
        from transeditor import table_model

        assert not hasattr(table_model, "TranslationSession")
