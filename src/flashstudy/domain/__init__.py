# Domain Package
from .exceptions import (
    FlashstudyError,
    InconsistentStateError,
    InvalidArgumentError,
    NotFoundError,
    PersistenceError,
)
from .models import (
    ChecklistItem,
    ChecklistLine,
    Color,
    Flashcard,
    Folder,
    ParsedAnswerLine,
    SessionPhase,
    SRResult,
    StudyEntry,
    StudySettings,
    StudyState,
    TextLine,
)
from .ports import ChecklistStateStore, FlashcardRepository

__all__ = [
    "FlashstudyError",
    "InvalidArgumentError",
    "NotFoundError",
    "PersistenceError",
    "InconsistentStateError",
    "ChecklistItem",
    "ChecklistLine",
    "Color",
    "Flashcard",
    "Folder",
    "ParsedAnswerLine",
    "SessionPhase",
    "SRResult",
    "StudyEntry",
    "StudySettings",
    "StudyState",
    "TextLine",
    "ChecklistStateStore",
    "FlashcardRepository",
]
