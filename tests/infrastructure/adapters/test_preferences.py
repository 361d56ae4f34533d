import json

import pytest

from flashstudy.domain.exceptions import PersistenceError
from flashstudy.domain.models import StudySettings
from flashstudy.infrastructure.adapters.preferences import JsonPreferencesStore


@pytest.mark.asyncio
async def test_checklist_state_round_trip(prefs):
    await prefs.save_checklist_state(5, {0: True, 1: False})
    assert await prefs.load_checklist_state(5) == {0: True, 1: False}

    raw = json.loads(prefs.path.read_text())
    assert raw["checklist_state_5"] == {"0": True, "1": False}


@pytest.mark.asyncio
async def test_missing_file_reads_empty(prefs):
    assert await prefs.load_checklist_state(1) == {}
    assert await prefs.load_study_settings() == StudySettings()


@pytest.mark.asyncio
async def test_none_card_id_is_ignored(prefs):
    await prefs.save_checklist_state(None, {0: True})
    assert not prefs.path.exists()
    assert await prefs.load_checklist_state(None) == {}
    await prefs.clear_checklist_state(None)


@pytest.mark.asyncio
async def test_clear_checklist_state(prefs):
    await prefs.save_checklist_state(1, {0: True})
    await prefs.save_checklist_state(2, {0: True})
    await prefs.clear_checklist_state(1)
    assert await prefs.load_checklist_state(1) == {}
    assert await prefs.load_checklist_state(2) == {0: True}


@pytest.mark.asyncio
async def test_invalid_entries_are_skipped(prefs):
    prefs.path.write_text(
        json.dumps({"checklist_state_3": {"0": True, "x": True, "2": "yes", "4": False}})
    )
    assert await prefs.load_checklist_state(3) == {0: True, 4: False}


@pytest.mark.asyncio
async def test_corrupt_file_reads_empty(prefs):
    prefs.path.write_text("{not json")
    assert await prefs.load_checklist_state(1) == {}
    prefs.path.write_text("[1, 2]")
    assert await prefs.load_study_settings() == StudySettings()


@pytest.mark.asyncio
async def test_study_settings_round_trip(prefs):
    await prefs.save_study_settings(StudySettings(False, True))
    assert await prefs.load_study_settings() == StudySettings(False, True)

    raw = json.loads(prefs.path.read_text())
    assert raw["study_setting_hide_unmarked_text_with_checkboxes"] is False
    assert raw["study_setting_show_previously_checked_items"] is True


@pytest.mark.asyncio
async def test_non_bool_settings_fall_back_to_defaults(prefs):
    prefs.path.write_text(
        json.dumps(
            {
                "study_setting_hide_unmarked_text_with_checkboxes": "no",
                "study_setting_show_previously_checked_items": False,
            }
        )
    )
    assert await prefs.load_study_settings() == StudySettings(True, False)


@pytest.mark.asyncio
async def test_settings_and_checklists_share_one_file(prefs):
    await prefs.save_checklist_state(1, {0: True})
    await prefs.save_study_settings(StudySettings(False, False))
    assert await prefs.load_checklist_state(1) == {0: True}


@pytest.mark.asyncio
async def test_unwritable_location_raises(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("x")
    store = JsonPreferencesStore(blocker / "prefs.json")
    with pytest.raises(PersistenceError):
        await store.save_checklist_state(1, {0: True})
