"""
Study Session — Application layer orchestrator.

Owns the queue of cards being studied in one folder and drives it through
LOADING -> ACTIVE -> COMPLETE. Storage is reached only through the
FlashcardRepository and ChecklistStateStore ports.

Callers must serialize operations on one instance; nothing here is
safe to interleave.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta

from flashstudy.domain.constants import NEXT_REVIEW_PADDING_SECONDS
from flashstudy.domain.exceptions import InconsistentStateError, PersistenceError
from flashstudy.domain.models import (
    Flashcard,
    SessionPhase,
    SRResult,
    StudyEntry,
    StudySettings,
    StudyState,
)
from flashstudy.domain.ports import ChecklistStateStore, FlashcardRepository

from . import checklist, study_state
from .sr_calculator import SRCalculator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RatingOutcome:
    """What the last rate_card() call decided for its card."""

    card_id: int
    quality: int
    result: SRResult
    reviewed_at: datetime
    next_review: datetime
    persisted: bool


def _study_order(card: Flashcard) -> tuple:
    """Never-studied cards first, then by ascending next_review."""
    if card.next_review is None:
        return (0, datetime.min, card.id or 0)
    return (1, card.next_review, card.id or 0)


class StudySession:
    """
    Application service for one study sitting.

    Follows Dependency Inversion: depends on the repository and store
    abstractions, not concrete adapter implementations.
    """

    def __init__(
        self,
        repository: FlashcardRepository,
        checklist_store: ChecklistStateStore,
        calculator: SRCalculator | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        """
        Args:
            repository: Port for flashcard/folder storage.
            checklist_store: Port for per-card checklist state and settings.
            calculator: Optional custom SM-2 calculator; uses default if not provided.
            clock: Returns "now"; defaults to datetime.now.
        """
        self._repo = repository
        self._store = checklist_store
        self._calc = calculator or SRCalculator()
        self._clock = clock or datetime.now
        self._state = StudyState()
        self._last_outcome: RatingOutcome | None = None

    @property
    def state(self) -> StudyState:
        return self._state

    @property
    def last_outcome(self) -> RatingOutcome | None:
        return self._last_outcome

    @property
    def is_active(self) -> bool:
        return self._state.phase is SessionPhase.ACTIVE

    # ------------------------------------------------------------------
    # Initialization
    # ------------------------------------------------------------------

    async def start(self, folder_id: int | None) -> StudyState:
        """
        Build a fresh session for a folder (None = uncategorized cards).

        Due cards are studied first. With nothing due, every card in the folder
        is queued, never-studied ones first. An empty folder yields a COMPLETE
        snapshot, not an error.

        Raises:
            PersistenceError: The card list could not be fetched at all.
        """
        self._state = StudyState(folder_id=folder_id)
        self._last_outcome = None

        settings = await self._store.load_study_settings()

        now = self._clock()
        logger.info(f"Fetching due cards for folder {folder_id}")
        cards = await self._repo.get_due_flashcards(folder_id, now)
        if not cards:
            logger.info(f"No due cards in folder {folder_id}. Queuing all cards.")
            cards = sorted(await self._repo.get_flashcards(folder_id), key=_study_order)

        entries = []
        for card in cards:
            saved = await self._store.load_checklist_state(card.id) if card.id is not None else {}
            entries.append(study_state.build_entry(card, saved))

        try:
            folder_path = await self._repo.get_folder_path(folder_id)
        except PersistenceError as e:
            logger.warning(f"Could not load folder path for {folder_id}: {e}")
            folder_path = []

        self._state = study_state.start(folder_id, folder_path, entries, settings)
        if self._state.session_complete:
            logger.info(f"No cards to study in folder {folder_id}")
        else:
            logger.info(
                f"Study session started with {len(entries)} card(s); "
                f"first card id={self._state.current_card.id}"
            )
        return self._state

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def toggle_answer_visibility(self) -> StudyState:
        if not self.is_active:
            return self._state
        return self._transition(study_state.toggle_answer_visibility)

    async def handle_checklist_changed(self, original_index: int, is_checked: bool) -> StudyState:
        """
        Check or uncheck one item of the current card and persist the card's map.

        A write failure keeps the in-memory change; the next successful write
        reconciles the store.
        """
        if not self.is_active:
            return self._state
        entry = self._current_entry()
        if entry is None:
            return self._state

        if not any(item.original_index == original_index for item in entry.checklist):
            logger.warning(
                f"Checklist item {original_index} not found on card {entry.card.id}; ignoring"
            )
            return self._state

        updated = checklist.toggle(entry.checklist, original_index, is_checked)
        self._transition(study_state.set_current_checklist, updated)

        card_id = entry.card.id
        if card_id is not None:
            try:
                await self._store.save_checklist_state(card_id, checklist.to_state_map(updated))
            except PersistenceError as e:
                logger.error(f"Failed to save checklist state for card {card_id}: {e}")

        return self._state

    def skip_card(self) -> StudyState:
        """Drop the current card from the queue without touching its schedule."""
        if not self.is_active:
            return self._state
        card = self._state.current_card
        logger.info(f"Skipping card index {self._state.current_index} (id={card.id if card else None})")
        return self._transition(study_state.advance, self._state.current_index)

    async def rate_card(self) -> StudyState:
        """
        Derive a quality from the current checklist, reschedule the card and advance.

        Cards without an id are only skipped. A failed write is logged and the
        session still advances with the new schedule applied in memory.

        Raises:
            InvalidArgumentError: The card carries SR fields the calculator rejects.
        """
        if not self.is_active:
            return self._state
        entry = self._current_entry()
        if entry is None:
            return self._state

        index = self._state.current_index
        card = entry.card
        if card.id is None:
            logger.warning("Cannot rate a card without an id. Skipping.")
            self._last_outcome = None
            return self._transition(study_state.advance, index)

        quality = checklist.derive_quality(entry.checklist)
        ratio = checklist.completion_ratio(entry.checklist)
        logger.info(
            f"Rating card {card.id}: {len(entry.checklist)} checklist item(s), "
            f"completion {ratio:.2f} -> quality {quality}"
        )

        result = self._calc.calculate(
            quality=quality,
            previous_easiness_factor=card.easiness_factor,
            previous_interval=card.interval,
            previous_repetitions=card.repetitions,
        )

        now = self._clock()
        next_review = now + timedelta(
            days=max(0, result.interval), seconds=NEXT_REVIEW_PADDING_SECONDS
        )

        persisted = True
        try:
            await self._repo.update_flashcard_review_data(
                card.id,
                easiness_factor=result.easiness_factor,
                interval=result.interval,
                repetitions=result.repetitions,
                last_reviewed=now,
                next_review=next_review,
                last_rating_quality=quality,
            )
            logger.info(f"Persisted {result} for card {card.id}; next review {next_review.isoformat()}")
        except PersistenceError as e:
            persisted = False
            logger.error(f"Failed to persist review data for card {card.id}: {e}")

        self._last_outcome = RatingOutcome(
            card_id=card.id,
            quality=quality,
            result=result,
            reviewed_at=now,
            next_review=next_review,
            persisted=persisted,
        )

        rated = card.with_review(
            easiness_factor=result.easiness_factor,
            interval=result.interval,
            repetitions=result.repetitions,
            last_reviewed=now,
            next_review=next_review,
            last_rating_quality=quality,
        )
        return self._transition(
            lambda state: study_state.advance(study_state.set_card(state, index, rated), index)
        )

    async def delete_card(self, card_id: int) -> StudyState:
        """
        Permanently delete a card and drop it from the queue if it is queued.

        Raises:
            PersistenceError: The store refused the delete; the queue is left as is.
        """
        try:
            deleted = await self._repo.delete_flashcard(card_id)
        except PersistenceError as e:
            logger.error(f"Failed to delete card {card_id}: {e}")
            raise

        if not deleted:
            logger.warning(f"Card {card_id} was already gone from storage")

        if not self.is_active:
            return self._state

        index = self._state.index_of(card_id)
        if index == -1:
            logger.debug(f"Deleted card {card_id} was not queued in this session")
            return self._state
        return self._transition(study_state.remove_entry, index)

    async def refresh_single_card(self, card_id: int) -> StudyState:
        """
        Reload one card after an external edit, in place.

        If the card vanished from storage (or from the queue) the whole
        session is rebuilt instead.
        """
        if not self.is_active:
            logger.info("Cannot refresh a card: session is not active")
            return self._state

        card = await self._repo.get_flashcard(card_id)
        index = self._state.index_of(card_id)
        if card is None or index == -1:
            logger.warning(f"Card {card_id} not found during refresh. Rebuilding session.")
            return await self.start(self._state.folder_id)

        saved = await self._store.load_checklist_state(card_id)
        entry = study_state.build_entry(card, saved)
        logger.debug(f"Refreshed card {card_id} at index {index}")
        return self._transition(study_state.replace_entry, index, entry)

    async def update_settings(self, settings: StudySettings) -> StudyState:
        self._state = study_state.with_settings(self._state, settings)
        try:
            await self._store.save_study_settings(settings)
        except PersistenceError as e:
            logger.error(f"Failed to save study settings: {e}")
        return self._state

    # ------------------------------------------------------------------

    def _current_entry(self) -> StudyEntry | None:
        """Current entry of an ACTIVE session; a missing one ends the session."""
        self._transition(study_state.check_current)
        return self._state.current_entry

    # ------------------------------------------------------------------

    def _transition(self, fn: Callable[..., StudyState], *args) -> StudyState:
        try:
            self._state = fn(self._state, *args)
        except InconsistentStateError as e:
            logger.error(f"Ending study session after inconsistent state: {e}")
            self._state = study_state.complete(self._state)
        return self._state
