"""Shared pytest fixtures for translation editor tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from transeditor import config
from transeditor.models import TranslationRecord, TranslationSession
from transeditor.resource_io import load_pair

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the settings file at a temporary directory for every test."""
    config_dir = tmp_path / "settings"
    monkeypatch.setattr(config, "_USER_CONFIG_DIR", config_dir)
    monkeypatch.setattr(config, "_USER_SETTINGS_PATH", config_dir / "settings.json")
    monkeypatch.setattr(config, "_loaded", False)
    return config_dir


@pytest.fixture
def source_path() -> Path:
    return FIXTURES_DIR / "source_en.xml"


@pytest.fixture
def destination_path() -> Path:
    return FIXTURES_DIR / "dest_fr.xml"


@pytest.fixture
def duplicates_path() -> Path:
    return FIXTURES_DIR / "dest_duplicates.xml"


@pytest.fixture
def malformed_path() -> Path:
    return FIXTURES_DIR / "malformed.xml"


@pytest.fixture
def session(source_path: Path, destination_path: Path) -> TranslationSession:
    return load_pair(source_path, destination_path)


@pytest.fixture
def sample_session() -> TranslationSession:
    """A simple in-memory session for unit tests (no file I/O)."""
    return TranslationSession(
        records=[
            TranslationRecord("General", "Title", "Bonjour", "Hello"),
            TranslationRecord("General", "Ok", "OK", "OK"),
            TranslationRecord("Profile", "Name", "Nom", "Name"),
            TranslationRecord("Profile", "Email", "Courriel", "E-mail"),
        ],
        attributes={"code": "fr"},
        source_code="en",
        destination_code="fr",
    )
