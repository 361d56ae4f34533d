"""
JSON Preferences Store — Infrastructure adapter for per-card UI state.

A single JSON object on disk used as a key-value store. Checklist state is
kept under "checklist_state_<card id>" as {"<original index>": bool}.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from flashstudy.domain.constants import (
    CHECKLIST_STATE_PREFIX,
    SETTING_HIDE_UNMARKED_KEY,
    SETTING_SHOW_CHECKED_KEY,
)
from flashstudy.domain.exceptions import PersistenceError
from flashstudy.domain.models import StudySettings
from flashstudy.domain.ports import ChecklistStateStore

logger = logging.getLogger(__name__)


def checklist_key(card_id: int) -> str:
    return f"{CHECKLIST_STATE_PREFIX}{card_id}"


class JsonPreferencesStore(ChecklistStateStore):
    """
    Preferences persisted as one JSON file.

    Reads are forgiving (a corrupt file reads as empty); writes replace the
    file atomically and raise PersistenceError on failure.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Could not read preferences from {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.error(f"Preferences file {self.path} does not hold a JSON object")
            return {}
        return data

    def _write(self, data: dict[str, Any]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=".prefs-", suffix=".json")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, indent=2, sort_keys=True)
                os.replace(tmp, self.path)
            except BaseException:
                Path(tmp).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise PersistenceError(f"Could not write preferences to {self.path}: {e}") from e

    # ---------- Checklist state ----------

    async def load_checklist_state(self, card_id: int | None) -> dict[int, bool]:
        if card_id is None:
            logger.warning("Attempted to load checklist state for a flashcard without an id")
            return {}

        raw = self._read().get(checklist_key(card_id))
        if not raw:
            return {}
        if not isinstance(raw, dict):
            logger.warning(f"Ignoring malformed checklist state for card {card_id}")
            return {}

        state: dict[int, bool] = {}
        for key, value in raw.items():
            try:
                index = int(key)
            except (TypeError, ValueError):
                index = None
            if index is None or not isinstance(value, bool):
                logger.warning(
                    f"Skipping invalid checklist entry for card {card_id}: {key!r}={value!r}"
                )
                continue
            state[index] = value
        return state

    async def save_checklist_state(self, card_id: int | None, state: dict[int, bool]) -> None:
        if card_id is None:
            logger.warning("Attempted to save checklist state for a flashcard without an id")
            return
        data = self._read()
        data[checklist_key(card_id)] = {str(k): bool(v) for k, v in state.items()}
        self._write(data)

    async def clear_checklist_state(self, card_id: int | None) -> None:
        if card_id is None:
            return
        data = self._read()
        if data.pop(checklist_key(card_id), None) is not None:
            self._write(data)
            logger.info(f"Cleared checklist state for card {card_id}")

    # ---------- Study settings ----------

    async def load_study_settings(self) -> StudySettings:
        data = self._read()
        hide = data.get(SETTING_HIDE_UNMARKED_KEY, True)
        show = data.get(SETTING_SHOW_CHECKED_KEY, True)
        return StudySettings(
            hide_unmarked_text_with_checkboxes=hide if isinstance(hide, bool) else True,
            show_previously_checked_items=show if isinstance(show, bool) else True,
        )

    async def save_study_settings(self, settings: StudySettings) -> None:
        data = self._read()
        data[SETTING_HIDE_UNMARKED_KEY] = settings.hide_unmarked_text_with_checkboxes
        data[SETTING_SHOW_CHECKED_KEY] = settings.show_previously_checked_items
        self._write(data)
        logger.debug(f"Saved study settings: {settings}")
