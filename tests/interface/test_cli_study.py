"""Tests for the interactive study command."""

import asyncio

import pytest
from typer.testing import CliRunner

from flashstudy.domain.models import Flashcard, Folder
from flashstudy.infrastructure.adapters.sqlite_store import SqliteFlashcardRepository
from flashstudy.interface.cli import app

runner = CliRunner()


@pytest.fixture
def data_dir(tmp_path, mock_home):
    return tmp_path / "data"


@pytest.fixture
def repo(data_dir):
    return SqliteFlashcardRepository(data_dir / "flashstudy.db")


def add_card(repo, question, answer, folder_id=None):
    return asyncio.run(
        repo.insert_flashcard(Flashcard(question=question, answer=answer, folder_id=folder_id))
    )


def study(data_dir, *args, input=""):
    return runner.invoke(app, ["--data-dir", str(data_dir), "study", *args], input=input)


def test_empty_folder(data_dir):
    result = study(data_dir)
    assert result.exit_code == 0
    assert "No cards to study in this folder." in result.stdout


def test_reveal_check_and_rate(data_dir, repo):
    folder_id = asyncio.run(repo.insert_folder(Folder(name="Bio")))
    card_id = add_card(repo, "Parts of a cell?", "Main ones:\n* nucleus\n* membrane", folder_id)

    result = study(data_dir, "--folder", str(folder_id), input="r\n1\na\n")

    assert result.exit_code == 0
    assert "Card 1 of 1" in result.stdout
    assert "Bio" in result.stdout
    assert "Parts of a cell?" in result.stdout
    assert "[x] nucleus" in result.stdout
    assert "Quality 3 -> next review in 1 day(s) (EF 2.36)" in result.stdout
    assert "SESSION COMPLETE" in result.stdout

    card = asyncio.run(repo.get_flashcard(card_id))
    assert card.interval == 1
    assert card.repetitions == 1
    assert card.last_rating_quality == 3
    assert card.next_review is not None


def test_hidden_answer_teases_checklist(data_dir, repo):
    add_card(repo, "Q", "* one\n* two")
    result = study(data_dir, input="q\n")
    assert "(2 item(s) to recall)" in result.stdout
    assert "Ending session early." in result.stdout


def test_blank_answer_placeholder(data_dir, repo):
    add_card(repo, "Q", "   ")
    result = study(data_dir, input="q\n")
    assert "(No answer content provided)" in result.stdout


def test_skip_moves_to_next_card(data_dir, repo):
    add_card(repo, "First?", "a")
    add_card(repo, "Second?", "b")
    result = study(data_dir, input="s\ns\n")
    assert "Card 1 of 2" in result.stdout
    assert "Card 1 of 1" in result.stdout
    assert "SESSION COMPLETE" in result.stdout
    assert asyncio.run(repo.get_flashcard(1)).next_review is None


def test_delete_current_card(data_dir, repo):
    card_id = add_card(repo, "Doomed?", "x")
    result = study(data_dir, input="d\ny\n")
    assert result.exit_code == 0
    assert "SESSION COMPLETE" in result.stdout
    assert asyncio.run(repo.get_flashcard(card_id)) is None


def test_edit_current_card(data_dir, repo):
    card_id = add_card(repo, "Q", "old")
    result = study(data_dir, input="e\nnew\\n* item\nq\n")
    assert result.exit_code == 0
    assert asyncio.run(repo.get_flashcard(card_id)).answer == "new\n* item"
    assert "(1 item(s) to recall)" in result.stdout


def test_unknown_choice_and_bad_item(data_dir, repo):
    add_card(repo, "Q", "* only")
    result = study(data_dir, input="x\n5\nq\n")
    assert "Unknown choice 'x'." in result.stdout
    assert "No checklist item 5." in result.stdout
