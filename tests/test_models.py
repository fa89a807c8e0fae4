"""Tests for the session model: lookup, edits, pending flags, deduplication."""

from __future__ import annotations

import copy

import pytest

from transeditor.errors import RecordNotFoundError, SaveError
from transeditor.models import TranslationRecord, TranslationSession, deduplicate


class TestRecord:
    def test_pending_ignores_case(self):
        assert TranslationRecord("General", "Ok", "ok", "OK").is_pending

    def test_translated_not_pending(self):
        assert not TranslationRecord("General", "Title", "Bonjour", "Hello").is_pending

    def test_key(self):
        assert TranslationRecord("General", "Title").key == ("General", "Title")


class TestEdit:
    def test_edit_updates_value(self, sample_session: TranslationSession):
        old = sample_session.edit("Profile", "Name", "Prénom")
        assert old == "Nom"
        assert sample_session.find("Profile", "Name").localized_value == "Prénom"

    def test_edit_isolation(self, sample_session: TranslationSession):
        before = copy.deepcopy(sample_session.records)
        others = [r for r in sample_session.records if r.key != ("General", "Ok")]

        sample_session.edit("General", "Ok", "D'accord")

        for i, record in enumerate(sample_session.records):
            if record.key == ("General", "Ok"):
                assert record.localized_value == "D'accord"
            else:
                assert record == before[i]
                assert record.source_value == before[i].source_value
        # Same objects, not replacements
        assert others == [r for r in sample_session.records if r.key != ("General", "Ok")]
        assert all(any(o is r for r in sample_session.records) for o in others)

    def test_edit_unknown_key_raises(self, sample_session: TranslationSession):
        with pytest.raises(RecordNotFoundError):
            sample_session.edit("General", "Missing", "x")
        assert [r.localized_value for r in sample_session.records] == ["Bonjour", "OK", "Nom", "Courriel"]

    def test_not_found_is_lookup_error(self, sample_session: TranslationSession):
        with pytest.raises(LookupError):
            sample_session.find("Nowhere", "Title")

    def test_edit_by_row(self, sample_session: TranslationSession):
        old = sample_session.set_value(3, "Adresse e-mail")
        assert old == "Courriel"
        assert sample_session.record_at(3).localized_value == "Adresse e-mail"

    def test_edit_on_duplicate_key_hits_first(self):
        session = TranslationSession(
            records=[
                TranslationRecord("General", "Title", "Bonjour", "Hello"),
                TranslationRecord("General", "Title", "Salut", "Hello"),
            ]
        )
        session.edit("General", "Title", "Allô")
        assert [r.localized_value for r in session.records] == ["Allô", "Salut"]

    def test_pending_rows(self, sample_session: TranslationSession):
        assert sample_session.pending_rows() == [1]
        sample_session.edit("Profile", "Name", "name")
        assert sample_session.pending_rows() == [1, 2]


class TestDeduplicate:
    def _with_duplicates(self) -> list[TranslationRecord]:
        return [
            TranslationRecord("General", "Title", "Bonjour"),
            TranslationRecord("General", "Ok", "OK"),
            TranslationRecord("General", "Title", "Salut"),
            TranslationRecord("Profile", "Title", "Titre"),
        ]

    def test_first_seen_wins(self):
        result = deduplicate(self._with_duplicates())
        assert [(r.key, r.localized_value) for r in result] == [
            (("General", "Title"), "Bonjour"),
            (("General", "Ok"), "OK"),
            (("Profile", "Title"), "Titre"),
        ]

    def test_later_edit_on_duplicate_is_lost(self):
        records = self._with_duplicates()
        records[2].localized_value = "Edited later"
        result = deduplicate(records)
        assert all(r.localized_value != "Edited later" for r in result)

    def test_idempotent(self):
        once = deduplicate(self._with_duplicates())
        assert deduplicate(once) == once

    def test_no_duplicates_unchanged(self, sample_session: TranslationSession):
        result = deduplicate(sample_session.records)
        assert result == sample_session.records
        assert all(a is b for a, b in zip(result, sample_session.records))

    def test_session_deduplicate_counts(self):
        session = TranslationSession(records=self._with_duplicates())
        assert session.deduplicate() == 1
        assert session.row_count() == 3


class TestSessionState:
    def test_edits_carry_no_saved_flag(self, sample_session: TranslationSession):
        sample_session.edit("General", "Ok", "D'accord")
        assert not hasattr(sample_session, "dirty")
        assert not hasattr(sample_session, "has_unsaved_changes")

    def test_save_clears_structure_changed(self, sample_session: TranslationSession, tmp_path):
        sample_session.structure_changed = True
        sample_session.save(tmp_path / "out.xml")
        assert sample_session.structure_changed is False
        assert sample_session.destination_path == str(tmp_path / "out.xml")

    def test_save_without_path_raises_save_error(self, sample_session: TranslationSession):
        with pytest.raises(SaveError, match="no destination path"):
            sample_session.save()
