"""
Domain models for flashcards, parsed answers and study sessions.

These are pure data structures with no I/O or external dependencies.
Every model is frozen; state changes produce copies via dataclasses.replace.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum

from .constants import DEFAULT_EASINESS_FACTOR, NOT_RATED_RGB


@dataclass(frozen=True)
class Folder:
    """
    A folder containing flashcards and subfolders.

    Attributes:
        id: Database identifier; None until persisted.
        name: Display name.
        parent_id: Parent folder id; None for root folders.
    """

    name: str
    id: int | None = None
    parent_id: int | None = None


@dataclass(frozen=True)
class Flashcard:
    """
    A flashcard with its SM-2 scheduling fields.

    folder_id None means "uncategorized".
    """

    question: str
    answer: str
    id: int | None = None
    folder_id: int | None = None

    # SM-2 scheduling fields
    easiness_factor: float = DEFAULT_EASINESS_FACTOR
    interval: int = 0  # days
    repetitions: int = 0  # consecutive correct reviews
    last_reviewed: datetime | None = None
    next_review: datetime | None = None
    last_rating_quality: int | None = None

    def with_review(
        self,
        easiness_factor: float,
        interval: int,
        repetitions: int,
        last_reviewed: datetime,
        next_review: datetime,
        last_rating_quality: int,
    ) -> "Flashcard":
        return replace(
            self,
            easiness_factor=easiness_factor,
            interval=interval,
            repetitions=repetitions,
            last_reviewed=last_reviewed,
            next_review=next_review,
            last_rating_quality=last_rating_quality,
        )


@dataclass(frozen=True)
class SRResult:
    """Outcome of one SM-2 calculation."""

    easiness_factor: float
    interval: int
    repetitions: int


@dataclass(frozen=True)
class TextLine:
    """A free-text answer line, kept exactly as written (untrimmed)."""

    content: str


@dataclass(frozen=True)
class ChecklistLine:
    """
    A checklist answer line.

    Attributes:
        text: Item text after the "* " prefix, trimmed.
        original_index: 0-based position among the checklist lines of the answer.
    """

    text: str
    original_index: int


ParsedAnswerLine = TextLine | ChecklistLine


@dataclass(frozen=True)
class ChecklistItem:
    """Checkable state of one checklist line, keyed by original_index."""

    original_index: int
    text: str
    is_checked: bool = False


@dataclass(frozen=True)
class Color:
    """An opaque RGB color."""

    red: int
    green: int
    blue: int

    @classmethod
    def from_rgb(cls, rgb: tuple[int, int, int]) -> "Color":
        return cls(*rgb)

    @property
    def rgb(self) -> tuple[int, int, int]:
        return (self.red, self.green, self.blue)

    @property
    def hex(self) -> str:
        return f"#{self.red:02X}{self.green:02X}{self.blue:02X}"


NOT_RATED_COLOR = Color.from_rgb(NOT_RATED_RGB)


@dataclass(frozen=True)
class StudySettings:
    """
    Presentation toggles for the answer view.

    They never influence scheduling; the session only carries them through.
    """

    hide_unmarked_text_with_checkboxes: bool = True
    show_previously_checked_items: bool = True


class SessionPhase(str, Enum):
    LOADING = "loading"
    ACTIVE = "active"
    COMPLETE = "complete"


@dataclass(frozen=True)
class StudyEntry:
    """Everything the session tracks for one queued card."""

    card: Flashcard
    ordered_lines: tuple[ParsedAnswerLine, ...] = ()
    checklist: tuple[ChecklistItem, ...] = ()
    answer_shown: bool = False


@dataclass(frozen=True)
class StudyState:
    """
    Immutable snapshot of a study session.

    current_index is a valid index into entries while the phase is ACTIVE.
    A COMPLETE snapshot has no entries and current_index 0.
    """

    phase: SessionPhase = SessionPhase.LOADING
    folder_id: int | None = None
    folder_path: tuple[Folder, ...] = ()
    entries: tuple[StudyEntry, ...] = ()
    current_index: int = 0
    live_color: Color = NOT_RATED_COLOR
    last_rating_quality: int | None = None
    settings: StudySettings = field(default_factory=StudySettings)

    @property
    def session_complete(self) -> bool:
        return self.phase is SessionPhase.COMPLETE

    @property
    def current_entry(self) -> StudyEntry | None:
        if self.phase is not SessionPhase.ACTIVE:
            return None
        if 0 <= self.current_index < len(self.entries):
            return self.entries[self.current_index]
        return None

    @property
    def current_card(self) -> Flashcard | None:
        entry = self.current_entry
        return entry.card if entry else None

    @property
    def current_lines(self) -> tuple[ParsedAnswerLine, ...]:
        entry = self.current_entry
        return entry.ordered_lines if entry else ()

    @property
    def current_checklist(self) -> tuple[ChecklistItem, ...]:
        entry = self.current_entry
        return entry.checklist if entry else ()

    @property
    def is_answer_shown(self) -> bool:
        entry = self.current_entry
        return entry.answer_shown if entry else False

    @property
    def total(self) -> int:
        return len(self.entries)

    @property
    def position(self) -> int:
        """1-based position of the current card, 0 when nothing is shown."""
        return self.current_index + 1 if self.current_entry else 0

    def index_of(self, card_id: int) -> int:
        for i, entry in enumerate(self.entries):
            if entry.card.id == card_id:
                return i
        return -1
