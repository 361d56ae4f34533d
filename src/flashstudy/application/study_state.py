"""
Pure transitions over StudyState snapshots.

Each function takes a snapshot and returns a new one; nothing here does I/O.
Transitions that detect a broken invariant raise InconsistentStateError and
leave it to the caller to end the session.
"""

from collections.abc import Mapping, Sequence
from dataclasses import replace

from flashstudy.domain.exceptions import InconsistentStateError
from flashstudy.domain.models import (
    NOT_RATED_COLOR,
    ChecklistItem,
    Flashcard,
    Folder,
    SessionPhase,
    StudyEntry,
    StudySettings,
    StudyState,
)

from .answer_parser import parse_answer
from .checklist import apply_persisted_state, live_color


def build_entry(card: Flashcard, saved: Mapping[int, bool]) -> StudyEntry:
    """Parse a card's answer and overlay its persisted checklist state."""
    parsed = parse_answer(card.answer)
    return StudyEntry(
        card=card,
        ordered_lines=parsed.ordered_lines,
        checklist=apply_persisted_state(parsed.checklist_items, saved),
        answer_shown=False,
    )


def complete(state: StudyState) -> StudyState:
    return replace(
        state,
        phase=SessionPhase.COMPLETE,
        entries=(),
        current_index=0,
        live_color=NOT_RATED_COLOR,
        last_rating_quality=None,
    )


def focus(state: StudyState, index: int) -> StudyState:
    """
    Make entries[index] the current card.

    The surfaced card always starts with its answer hidden; the live color and
    last-quality mirror are recomputed from its own data.
    """
    if not 0 <= index < len(state.entries):
        raise InconsistentStateError(
            f"Cannot focus index {index} in a queue of {len(state.entries)} card(s)"
        )

    entries = list(state.entries)
    entry = replace(entries[index], answer_shown=False)
    entries[index] = entry

    return replace(
        state,
        phase=SessionPhase.ACTIVE,
        entries=tuple(entries),
        current_index=index,
        live_color=live_color(entry.checklist),
        last_rating_quality=entry.card.last_rating_quality,
    )


def start(
    folder_id: int | None,
    folder_path: Sequence[Folder],
    entries: Sequence[StudyEntry],
    settings: StudySettings,
) -> StudyState:
    """Initial snapshot: ACTIVE on the first card, or COMPLETE for an empty queue."""
    state = StudyState(
        phase=SessionPhase.ACTIVE,
        folder_id=folder_id,
        folder_path=tuple(folder_path),
        entries=tuple(entries),
        settings=settings,
    )
    if not state.entries:
        return complete(state)
    return focus(state, 0)


def _require_current(state: StudyState) -> StudyEntry:
    entry = state.current_entry
    if entry is None:
        raise InconsistentStateError(
            f"No current card at index {state.current_index} "
            f"(phase={state.phase.value}, queue={len(state.entries)})"
        )
    return entry


def check_current(state: StudyState) -> StudyState:
    """Return the state unchanged if it has a current card; raise otherwise."""
    _require_current(state)
    return state


def toggle_answer_visibility(state: StudyState) -> StudyState:
    entry = _require_current(state)
    return _put(state, state.current_index, replace(entry, answer_shown=not entry.answer_shown))


def set_current_checklist(
    state: StudyState, checklist: Sequence[ChecklistItem]
) -> StudyState:
    entry = _require_current(state)
    checklist = tuple(checklist)
    new_state = _put(state, state.current_index, replace(entry, checklist=checklist))
    return replace(new_state, live_color=live_color(checklist))


def set_card(state: StudyState, index: int, card: Flashcard) -> StudyState:
    """Replace the card record at index, keeping its parsed answer and checklist."""
    entry = _entry_at(state, index)
    new_state = _put(state, index, replace(entry, card=card))
    if index == state.current_index:
        new_state = replace(new_state, last_rating_quality=card.last_rating_quality)
    return new_state


def replace_entry(state: StudyState, index: int, entry: StudyEntry) -> StudyState:
    """
    Swap in a freshly built entry (after an external edit).

    The current index and the entry's visibility flag are kept.
    """
    old = _entry_at(state, index)
    new_state = _put(state, index, replace(entry, answer_shown=old.answer_shown))
    if index == state.current_index:
        new_state = replace(
            new_state,
            live_color=live_color(entry.checklist),
            last_rating_quality=entry.card.last_rating_quality,
        )
    return new_state


def advance(state: StudyState, index: int) -> StudyState:
    """
    Remove the just-handled entry and surface the next card.

    The next card slides into the same index, or the queue wraps to 0 when
    the removed entry was last. An emptied queue completes the session.
    """
    _entry_at(state, index)
    entries = state.entries[:index] + state.entries[index + 1 :]
    state = replace(state, entries=entries)
    if not entries:
        return complete(state)
    next_index = index if index < len(entries) else 0
    return focus(state, next_index)


def remove_entry(state: StudyState, index: int) -> StudyState:
    """
    Remove an entry that may not be the current one.

    Removing the current entry advances. Otherwise the current card stays
    the one being viewed, with its index shifted if needed.
    """
    if index == state.current_index:
        return advance(state, index)

    _entry_at(state, index)
    entries = state.entries[:index] + state.entries[index + 1 :]
    current = state.current_index - 1 if index < state.current_index else state.current_index
    return replace(state, entries=entries, current_index=current)


def with_settings(state: StudyState, settings: StudySettings) -> StudyState:
    return replace(state, settings=settings)


def _entry_at(state: StudyState, index: int) -> StudyEntry:
    if not 0 <= index < len(state.entries):
        raise InconsistentStateError(
            f"Index {index} outside a queue of {len(state.entries)} card(s)"
        )
    return state.entries[index]


def _put(state: StudyState, index: int, entry: StudyEntry) -> StudyState:
    entries = list(state.entries)
    entries[index] = entry
    return replace(state, entries=tuple(entries))
