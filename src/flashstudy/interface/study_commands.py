"""Interactive terminal study loop."""

from typing import Annotated

import typer

from flashstudy.application.factory import get_preferences_store, get_repository
from flashstudy.application.render import (
    folder_breadcrumb,
    header_color,
    unchecked_preview,
    visible_answer_lines,
)
from flashstudy.application.study_session import StudySession
from flashstudy.domain.models import Flashcard, StudyState

from ._common import _resolve_with_overrides, run_async

PROMPT = "[r]eveal [a]rate [s]kip [e]dit [d]elete [q]uit, or item number"


def render_card(state: StudyState) -> None:
    """Print the current card the way the study screen lays it out."""
    entry = state.current_entry
    if entry is None:
        return

    color = header_color(state.live_color, state.last_rating_quality)
    typer.echo("")
    typer.secho(
        f" Card {state.position} of {state.total} ".ljust(40),
        fg=color.rgb,
        bold=True,
    )
    typer.secho(folder_breadcrumb(state.folder_path), dim=True)
    typer.echo("")
    typer.secho(entry.card.question, bold=True)
    typer.echo("")

    if not entry.card.answer.strip():
        typer.secho("(No answer content provided)", dim=True)
        return

    if not entry.answer_shown:
        hidden = unchecked_preview(entry.checklist)
        if hidden:
            typer.secho(f"{'[ ] ' * hidden}({hidden} item(s) to recall)", dim=True)

    numbers = {item.original_index: n for n, item in enumerate(entry.checklist, start=1)}
    for row in visible_answer_lines(
        entry.ordered_lines, entry.checklist, entry.answer_shown, state.settings
    ):
        if not row.visible:
            continue
        if row.item is not None:
            mark = "x" if row.item.is_checked else " "
            typer.secho(
                f"  {numbers[row.item.original_index]:>2}. [{mark}] {row.item.text}",
                dim=row.item.is_checked,
            )
        elif row.is_spacer:
            typer.echo("")
        else:
            typer.echo(row.line.content)


def _describe_outcome(session: StudySession) -> str:
    outcome = session.last_outcome
    if outcome is None:
        return "Card skipped (no id)."
    text = (
        f"Quality {outcome.quality} -> next review in {outcome.result.interval} day(s) "
        f"(EF {outcome.result.easiness_factor:.2f})"
    )
    if not outcome.persisted:
        text += " [not saved]"
    return text


async def study_loop(session: StudySession, repo, folder_id: int | None) -> None:
    state = await session.start(folder_id)
    if state.session_complete:
        typer.secho("No cards to study in this folder.", fg="yellow")
        return

    while not state.session_complete:
        render_card(state)
        try:
            choice = typer.prompt(PROMPT, default="r", show_default=False).strip().lower()
        except typer.Abort:
            typer.echo("\nSession ended.")
            return

        if choice == "q":
            typer.echo("Ending session early.")
            return
        elif choice == "r":
            state = session.toggle_answer_visibility()
        elif choice == "a":
            state = await session.rate_card()
            typer.secho(_describe_outcome(session), fg="cyan")
        elif choice == "s":
            state = session.skip_card()
        elif choice == "d":
            card = state.current_card
            if card.id is not None and typer.confirm(f"Delete card {card.id}?", default=False):
                state = await session.delete_card(card.id)
        elif choice == "e":
            state = await _edit_current(session, repo, state.current_card)
        elif choice.isdigit():
            checklist = state.current_checklist
            n = int(choice)
            if 1 <= n <= len(checklist):
                item = checklist[n - 1]
                state = await session.handle_checklist_changed(
                    item.original_index, not item.is_checked
                )
            else:
                typer.secho(f"No checklist item {n}.", fg="yellow")
        else:
            typer.secho(f"Unknown choice '{choice}'.", fg="yellow")

    typer.secho("\nSESSION COMPLETE", fg="green", bold=True)


async def _edit_current(session: StudySession, repo, card: Flashcard) -> StudyState:
    answer = typer.prompt("New answer (\\n for line breaks)", default=card.answer.replace("\n", "\\n"))
    await repo.update_flashcard(
        Flashcard(
            id=card.id,
            question=card.question,
            answer=answer.replace("\\n", "\n"),
            folder_id=card.folder_id,
        )
    )
    return await session.refresh_single_card(card.id)


def study(
    ctx: typer.Context,
    folder: Annotated[
        int | None, typer.Option("--folder", "-f", help="Folder id. Omit for uncategorized.")
    ] = None,
):
    """[bold green]Study[/bold green] the due cards of a folder."""
    config = _resolve_with_overrides(ctx)
    preferences = get_preferences_store(config)
    repo = get_repository(config, preferences)
    session = StudySession(repository=repo, checklist_store=preferences)
    run_async(study_loop(session, repo, folder))
