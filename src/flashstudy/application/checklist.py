"""
Checklist state operations.

Every function takes and returns immutable sequences of ChecklistItem.
Lists are kept sorted with unchecked items first; the sort is stable.
"""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import replace

from flashstudy.domain.constants import (
    AMBER_RGB,
    BLUE_RGB,
    EMPTY_CHECKLIST_QUALITY,
    GRADIENT_STOPS,
    GREEN_RGB,
    MAX_QUALITY,
    ORANGE_RGB,
    QUALITY_THRESHOLDS,
    ZERO_SCORE_RGB,
)
from flashstudy.domain.models import NOT_RATED_COLOR, ChecklistItem, Color

logger = logging.getLogger(__name__)

GRADIENT_COLORS = [
    Color.from_rgb(ZERO_SCORE_RGB),
    Color.from_rgb(ORANGE_RGB),
    Color.from_rgb(AMBER_RGB),
    Color.from_rgb(GREEN_RGB),
    Color.from_rgb(BLUE_RGB),
]


def sort_checklist(items: Sequence[ChecklistItem]) -> tuple[ChecklistItem, ...]:
    """Checked items last, relative order otherwise preserved."""
    return tuple(sorted(items, key=lambda item: item.is_checked))


def apply_persisted_state(
    items: Sequence[ChecklistItem], saved: Mapping[int, bool]
) -> tuple[ChecklistItem, ...]:
    """Overlay saved {original_index: is_checked} onto freshly parsed items, then sort."""
    merged = [
        replace(item, is_checked=saved.get(item.original_index, item.is_checked))
        for item in items
    ]
    return sort_checklist(merged)


def toggle(
    items: Sequence[ChecklistItem], original_index: int, is_checked: bool
) -> tuple[ChecklistItem, ...]:
    """
    Set one item's checked state and re-sort.

    An unknown original_index can only come from stale UI state; it is
    logged and the items are returned unchanged.
    """
    found = False
    updated = []
    for item in items:
        if item.original_index == original_index:
            updated.append(replace(item, is_checked=is_checked))
            found = True
        else:
            updated.append(item)

    if not found:
        logger.warning(f"Checklist item with original_index={original_index} not found")
        return tuple(items)

    return sort_checklist(updated)


def to_state_map(items: Sequence[ChecklistItem]) -> dict[int, bool]:
    """Persistence form of a checklist: {original_index: is_checked}."""
    return {item.original_index: item.is_checked for item in items}


def completion_ratio(items: Sequence[ChecklistItem]) -> float:
    if not items:
        return 0.0
    checked = sum(1 for item in items if item.is_checked)
    return checked / len(items)


def is_rated(items: Sequence[ChecklistItem]) -> bool:
    """True iff at least one item is checked. An empty checklist is never rated."""
    return any(item.is_checked for item in items)


def derive_quality(items: Sequence[ChecklistItem]) -> int:
    """
    Map checklist completion to an SM-2 quality.

    1.0 -> 5, [0.8, 1.0) -> 4, [0.5, 0.8) -> 3, [0.2, 0.5) -> 2,
    (0, 0.2) -> 1, 0 -> 0. An empty checklist yields the neutral default 3.
    """
    if not items:
        return EMPTY_CHECKLIST_QUALITY

    ratio = completion_ratio(items)
    if ratio >= 1.0:
        return MAX_QUALITY
    for threshold, quality in QUALITY_THRESHOLDS:
        if ratio >= threshold:
            return quality
    return 1 if ratio > 0 else 0


def _lerp_channel(a: int, b: int, t: float) -> int:
    return int(a + (b - a) * t)


def lerp_color(a: Color, b: Color, t: float) -> Color:
    return Color(
        _lerp_channel(a.red, b.red, t),
        _lerp_channel(a.green, b.green, t),
        _lerp_channel(a.blue, b.blue, t),
    )


def live_color(items: Sequence[ChecklistItem]) -> Color:
    """
    Visualize completion on the zero -> orange -> amber -> green -> blue gradient.

    Returns the neutral not-rated color while nothing is checked.
    """
    if not is_rated(items):
        return NOT_RATED_COLOR

    ratio = min(max(completion_ratio(items), 0.0), 1.0)
    for i in range(len(GRADIENT_STOPS) - 1):
        low, high = GRADIENT_STOPS[i], GRADIENT_STOPS[i + 1]
        if low <= ratio <= high:
            span = high - low
            t = 0.0 if span == 0 else (ratio - low) / span
            return lerp_color(GRADIENT_COLORS[i], GRADIENT_COLORS[i + 1], t)
    return GRADIENT_COLORS[-1]
