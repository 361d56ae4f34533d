from datetime import datetime

import pytest

from flashstudy.infrastructure.adapters.preferences import JsonPreferencesStore
from flashstudy.infrastructure.adapters.sqlite_store import SqliteFlashcardRepository


@pytest.fixture
def mock_home(tmp_path, monkeypatch):
    """Points HOME at a temp dir so no real config file or data dir is touched."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    for var in (
        "FLASHSTUDY_DATA_DIR",
        "FLASHSTUDY_DB_PATH",
        "FLASHSTUDY_PREFS_PATH",
        "FLASHSTUDY_VERBOSE",
    ):
        monkeypatch.delenv(var, raising=False)
    return home


@pytest.fixture
def prefs(tmp_path):
    return JsonPreferencesStore(tmp_path / "prefs.json")


@pytest.fixture
def repo(tmp_path, prefs):
    return SqliteFlashcardRepository(tmp_path / "cards.db", checklist_store=prefs)


@pytest.fixture
def fixed_now():
    return datetime(2024, 3, 1, 9, 30, 0)
