"""
Ports (interfaces) for card storage and per-card UI state.

These define the contract that infrastructure adapters must implement.
Application services depend on these abstractions, not concrete implementations.
Adapters raise PersistenceError when the underlying store fails.
"""

from abc import ABC, abstractmethod
from datetime import datetime

from .models import Flashcard, Folder, StudySettings


class FlashcardRepository(ABC):
    """
    Port for the relational flashcard/folder store.

    Implementations:
        - SqliteFlashcardRepository: Local SQLite database.
    """

    @abstractmethod
    async def get_due_flashcards(
        self, folder_id: int | None, now: datetime
    ) -> list[Flashcard]:
        """
        Fetch cards whose next_review is set and <= now.

        Args:
            folder_id: Folder to search; None means uncategorized cards.
            now: Reference instant.

        Returns:
            Cards ordered by ascending next_review.
        """
        pass

    @abstractmethod
    async def get_flashcards(self, folder_id: int | None) -> list[Flashcard]:
        """Fetch every card in a folder (None = uncategorized), ordered by id."""
        pass

    @abstractmethod
    async def get_flashcard(self, card_id: int) -> Flashcard | None:
        """Fetch one card by id, or None if it no longer exists."""
        pass

    @abstractmethod
    async def update_flashcard_review_data(
        self,
        card_id: int,
        easiness_factor: float,
        interval: int,
        repetitions: int,
        last_reviewed: datetime | None,
        next_review: datetime | None,
        last_rating_quality: int | None,
    ) -> None:
        """Persist the SM-2 fields and last submitted quality of a card."""
        pass

    @abstractmethod
    async def delete_flashcard(self, card_id: int) -> bool:
        """
        Permanently delete a card.

        Returns:
            True if a row was deleted.
        """
        pass

    @abstractmethod
    async def get_folder_path(self, folder_id: int | None) -> list[Folder]:
        """Ancestor chain of a folder, root first, ending with the folder itself."""
        pass


class ChecklistStateStore(ABC):
    """
    Port for the durable key-value store holding per-card UI state.

    Implementations:
        - JsonPreferencesStore: JSON file on disk.
    """

    @abstractmethod
    async def load_checklist_state(self, card_id: int | None) -> dict[int, bool]:
        """Return {original_index: is_checked}; {} if card_id is None or nothing is stored."""
        pass

    @abstractmethod
    async def save_checklist_state(
        self, card_id: int | None, state: dict[int, bool]
    ) -> None:
        """Overwrite the stored map. No-op if card_id is None."""
        pass

    @abstractmethod
    async def clear_checklist_state(self, card_id: int | None) -> None:
        """Remove the stored map for a card."""
        pass

    @abstractmethod
    async def load_study_settings(self) -> StudySettings:
        """Return persisted settings, defaults where absent."""
        pass

    @abstractmethod
    async def save_study_settings(self, settings: StudySettings) -> None:
        pass
