"""
Presentation policy for the answer view.

Decides which answer lines a renderer should show and what color the card
header takes. Settings only flow through here; scheduling never reads them.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from flashstudy.domain.constants import PASSING_QUALITY, ZERO_SCORE_RGB
from flashstudy.domain.models import (
    NOT_RATED_COLOR,
    ChecklistItem,
    ChecklistLine,
    Color,
    Folder,
    ParsedAnswerLine,
    StudySettings,
    TextLine,
)

ZERO_SCORE_COLOR = Color.from_rgb(ZERO_SCORE_RGB)


@dataclass(frozen=True)
class VisibleLine:
    """
    One renderable row.

    For checklist rows `item` carries the checked state and `line` is None.
    """

    line: TextLine | None = None
    item: ChecklistItem | None = None
    visible: bool = True

    @property
    def is_spacer(self) -> bool:
        return self.line is not None and not self.line.content.strip()


def _followed_by_checklist(lines: Sequence[ParsedAnswerLine], start: int) -> bool:
    """True if a checklist line comes after start before any non-blank text."""
    for line in lines[start + 1 :]:
        if isinstance(line, ChecklistLine):
            return True
        if line.content.strip():
            return False
    return False


def visible_answer_lines(
    lines: Sequence[ParsedAnswerLine],
    items: Sequence[ChecklistItem],
    answer_shown: bool,
    settings: StudySettings,
) -> list[VisibleLine]:
    """
    Lay out an answer for display.

    Text lines keep document order. Each contiguous run of checklist lines
    is emitted in the checklist's sorted order (unchecked first), so checked
    items sink within their group.

    While the answer is hidden, settings may keep some rows visible:
    hide_unmarked_text_with_checkboxes keeps text that introduces a checklist,
    show_previously_checked_items keeps checked items. Neither applies once
    every item is checked.
    """
    all_checked = bool(items) and all(item.is_checked for item in items)
    rows: list[VisibleLine] = []
    group: set[int] = set()

    def flush_group() -> None:
        for item in items:
            if item.original_index in group:
                keep = settings.show_previously_checked_items and item.is_checked
                rows.append(
                    VisibleLine(item=item, visible=answer_shown or (not all_checked and keep))
                )
        group.clear()

    for i, line in enumerate(lines):
        if isinstance(line, ChecklistLine):
            group.add(line.original_index)
            continue

        flush_group()
        keep = settings.hide_unmarked_text_with_checkboxes and _followed_by_checklist(lines, i)
        rows.append(VisibleLine(line=line, visible=answer_shown or (not all_checked and keep)))

    flush_group()
    return rows


def header_color(live: Color, last_rating_quality: int | None) -> Color:
    """
    Header color for the current card.

    Falls back to the zero-score color when nothing is checked yet and the
    previous review was a failing one.
    """
    if (
        live == NOT_RATED_COLOR
        and last_rating_quality is not None
        and last_rating_quality < PASSING_QUALITY
    ):
        return ZERO_SCORE_COLOR
    return live


def unchecked_preview(items: Sequence[ChecklistItem]) -> int:
    """Number of unchecked boxes to tease while the answer is hidden."""
    return sum(1 for item in items if not item.is_checked)


def folder_breadcrumb(folder_path: Sequence[Folder]) -> str:
    if not folder_path:
        return "Uncategorized"
    names: list[str] = []
    for folder in folder_path:
        if folder.name not in names:
            names.append(folder.name)
    return " > ".join(names)
