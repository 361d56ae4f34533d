# Infrastructure Adapters Package
from .preferences import JsonPreferencesStore
from .sqlite_store import SqliteFlashcardRepository

__all__ = ["JsonPreferencesStore", "SqliteFlashcardRepository"]
