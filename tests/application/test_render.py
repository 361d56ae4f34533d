"""Tests for the answer-view presentation policy."""

from flashstudy.application.answer_parser import parse_answer
from flashstudy.application.checklist import apply_persisted_state
from flashstudy.application.render import (
    ZERO_SCORE_COLOR,
    folder_breadcrumb,
    header_color,
    unchecked_preview,
    visible_answer_lines,
)
from flashstudy.domain.models import NOT_RATED_COLOR, Color, Folder, StudySettings

ANSWER = "Intro\nSteps:\n* one\n* two\n\nFooter"


def layout(saved, answer_shown, settings=StudySettings()):
    parsed = parse_answer(ANSWER)
    items = apply_persisted_state(parsed.checklist_items, saved)
    return visible_answer_lines(parsed.ordered_lines, items, answer_shown, settings)


def describe(rows):
    out = []
    for row in rows:
        label = f"[{row.item.text}]" if row.item else row.line.content
        out.append((label, row.visible))
    return out


def test_shown_answer_reveals_everything_in_sorted_group_order():
    rows = layout({0: True}, answer_shown=True)
    assert describe(rows) == [
        ("Intro", True),
        ("Steps:", True),
        ("[two]", True),
        ("[one]", True),
        ("", True),
        ("Footer", True),
    ]


def test_hidden_answer_keeps_line_before_checklist_and_checked_items():
    rows = layout({0: True}, answer_shown=False)
    assert describe(rows) == [
        ("Intro", False),
        ("Steps:", True),
        ("[two]", False),
        ("[one]", True),
        ("", False),
        ("Footer", False),
    ]


def test_hidden_answer_with_settings_off_hides_everything():
    rows = layout({0: True}, answer_shown=False, settings=StudySettings(False, False))
    assert all(not row.visible for row in rows)


def test_all_checked_hides_everything_while_answer_hidden():
    rows = layout({0: True, 1: True}, answer_shown=False)
    assert all(not row.visible for row in rows)


def test_blank_text_is_spacer():
    rows = layout({}, answer_shown=True)
    assert [row.is_spacer for row in rows] == [False, False, False, False, True, False]


def test_header_color_rules():
    blue = Color(33, 150, 243)
    assert header_color(NOT_RATED_COLOR, 0) == ZERO_SCORE_COLOR
    assert header_color(NOT_RATED_COLOR, 1) == ZERO_SCORE_COLOR
    assert header_color(NOT_RATED_COLOR, 2) == ZERO_SCORE_COLOR
    assert header_color(NOT_RATED_COLOR, 3) == NOT_RATED_COLOR
    assert header_color(NOT_RATED_COLOR, 5) == NOT_RATED_COLOR
    assert header_color(NOT_RATED_COLOR, None) == NOT_RATED_COLOR
    assert header_color(blue, 0) == blue


def test_unchecked_preview():
    parsed = parse_answer(ANSWER)
    assert unchecked_preview(apply_persisted_state(parsed.checklist_items, {1: True})) == 1


def test_folder_breadcrumb():
    assert folder_breadcrumb([]) == "Uncategorized"
    path = [Folder(name="Bio", id=1), Folder(name="Cells", id=2, parent_id=1)]
    assert folder_breadcrumb(path) == "Bio > Cells"
