"""
Adapter Factory
Centralizes the wiring of storage adapters from configuration.
"""

from flashstudy.application.config import AppConfig
from flashstudy.infrastructure.adapters.preferences import JsonPreferencesStore
from flashstudy.infrastructure.adapters.sqlite_store import SqliteFlashcardRepository


def get_preferences_store(config: AppConfig) -> JsonPreferencesStore:
    return JsonPreferencesStore(config.prefs_path)


def get_repository(
    config: AppConfig, preferences: JsonPreferencesStore | None = None
) -> SqliteFlashcardRepository:
    """
    Returns the card repository. Deleting a card through it also clears the
    card's checklist state in the preferences store.
    """
    return SqliteFlashcardRepository(
        config.db_path, checklist_store=preferences or get_preferences_store(config)
    )

