"""Split a flashcard answer into ordered text and checklist lines."""

from dataclasses import dataclass

from flashstudy.domain.constants import CHECKLIST_PREFIX
from flashstudy.domain.models import ChecklistItem, ChecklistLine, ParsedAnswerLine, TextLine


@dataclass(frozen=True)
class ParsedAnswer:
    """
    Two views of one answer.

    ordered_lines keeps document order for rendering; checklist_items is the
    flat list used for state. checklist_items[i].original_index == i.
    """

    ordered_lines: tuple[ParsedAnswerLine, ...]
    checklist_items: tuple[ChecklistItem, ...]


def parse_answer(answer: str) -> ParsedAnswer:
    """
    Classify every line of an answer.

    A line is a checklist item iff, trimmed, it starts with "* ". Other lines
    (blank ones included) are kept verbatim so markdown indentation survives.
    Checklist items are numbered 0.. in document order; that number is the
    persistence key for the item's checked state.
    """
    ordered: list[ParsedAnswerLine] = []
    items: list[ChecklistItem] = []

    for line in answer.split("\n"):
        stripped = line.strip()
        if stripped.startswith(CHECKLIST_PREFIX):
            text = stripped[len(CHECKLIST_PREFIX) :].strip()
            index = len(items)
            items.append(ChecklistItem(original_index=index, text=text))
            ordered.append(ChecklistLine(text=text, original_index=index))
        else:
            ordered.append(TextLine(content=line))

    return ParsedAnswer(ordered_lines=tuple(ordered), checklist_items=tuple(items))
