"""Folder and card management commands."""

from typing import Annotated

import typer

from flashstudy.application.factory import get_repository
from flashstudy.application.render import folder_breadcrumb
from flashstudy.domain.exceptions import NotFoundError
from flashstudy.domain.models import Flashcard, Folder

from ._common import _resolve_with_overrides, run_async

folder_app = typer.Typer(help="Manage folders.", no_args_is_help=True)
card_app = typer.Typer(help="Manage flashcards.", no_args_is_help=True)

FolderOption = Annotated[
    int | None, typer.Option("--folder", "-f", help="Folder id. Omit for uncategorized.")
]


def _describe_schedule(card: Flashcard) -> str:
    due = card.next_review.strftime("%Y-%m-%d %H:%M") if card.next_review else "new"
    return f"EF {card.easiness_factor:.2f}  ivl {card.interval}d  reps {card.repetitions}  due {due}"


def _first_line(text: str, width: int = 60) -> str:
    line = text.strip().split("\n", 1)[0]
    return line if len(line) <= width else line[: width - 3] + "..."


# ---------------------------------------------------------------------------
# Folders
# ---------------------------------------------------------------------------


@folder_app.command("add")
def folder_add(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Folder name.")],
    parent: Annotated[int | None, typer.Option(help="Parent folder id.")] = None,
):
    """Create a folder."""
    repo = get_repository(_resolve_with_overrides(ctx))

    async def run():
        if parent is not None and await repo.get_folder(parent) is None:
            raise NotFoundError(f"Folder {parent} does not exist")
        return await repo.insert_folder(Folder(name=name, parent_id=parent))

    folder_id = run_async(run())
    typer.secho(f"Created folder '{name}' (id {folder_id}).", fg="green")


@folder_app.command("list")
def folder_list(
    ctx: typer.Context,
    parent: Annotated[int | None, typer.Option(help="List children of this folder.")] = None,
):
    """List folders under a parent (root folders by default)."""
    repo = get_repository(_resolve_with_overrides(ctx))
    folders = run_async(repo.get_folders(parent))
    if not folders:
        typer.secho("No folders.", fg="yellow")
        return
    for folder in folders:
        typer.echo(f"{folder.id:>5}  {folder.name}")


@folder_app.command("path")
def folder_path(
    ctx: typer.Context,
    folder_id: Annotated[int, typer.Argument(help="Folder id.")],
):
    """Show the ancestor chain of a folder."""
    repo = get_repository(_resolve_with_overrides(ctx))
    path = run_async(repo.get_folder_path(folder_id))
    if not path:
        typer.secho(f"Folder {folder_id} not found.", fg="red", err=True)
        raise typer.Exit(1)
    typer.echo(folder_breadcrumb(path))


@folder_app.command("rename")
def folder_rename(
    ctx: typer.Context,
    folder_id: Annotated[int, typer.Argument(help="Folder id.")],
    name: Annotated[str, typer.Argument(help="New folder name.")],
):
    """Rename a folder, keeping its place in the tree."""
    repo = get_repository(_resolve_with_overrides(ctx))

    async def run():
        folder = await repo.get_folder(folder_id)
        if folder is None:
            raise NotFoundError(f"Folder {folder_id} does not exist")
        await repo.update_folder(Folder(id=folder.id, name=name, parent_id=folder.parent_id))

    run_async(run())
    typer.secho(f"Renamed folder {folder_id} to '{name}'.", fg="green")


@folder_app.command("delete")
def folder_delete(
    ctx: typer.Context,
    folder_id: Annotated[int, typer.Argument(help="Folder id.")],
    force: Annotated[bool, typer.Option("--force", help="Skip confirmation.")] = False,
):
    """Delete a folder with all of its subfolders and cards."""
    if not force:
        typer.confirm(f"Delete folder {folder_id} and everything in it?", abort=True)
    repo = get_repository(_resolve_with_overrides(ctx))
    if not run_async(repo.delete_folder(folder_id)):
        typer.secho(f"Folder {folder_id} not found.", fg="yellow")
        raise typer.Exit(1)
    typer.secho(f"Deleted folder {folder_id}.", fg="green")


# ---------------------------------------------------------------------------
# Cards
# ---------------------------------------------------------------------------


@card_app.command("add")
def card_add(
    ctx: typer.Context,
    question: Annotated[str, typer.Argument(help="Question text.")],
    answer: Annotated[
        str, typer.Argument(help="Answer text. Lines starting with '* ' become checklist items.")
    ],
    folder: FolderOption = None,
):
    """Add a flashcard. Use \\n in the answer for line breaks."""
    repo = get_repository(_resolve_with_overrides(ctx))
    card = Flashcard(question=question, answer=answer.replace("\\n", "\n"), folder_id=folder)
    card_id = run_async(repo.insert_flashcard(card))
    typer.secho(f"Added card {card_id}.", fg="green")


@card_app.command("list")
def card_list(ctx: typer.Context, folder: FolderOption = None):
    """List the cards of a folder with their schedule."""
    repo = get_repository(_resolve_with_overrides(ctx))
    cards = run_async(repo.get_flashcards(folder))
    if not cards:
        typer.secho("No cards.", fg="yellow")
        return
    for card in cards:
        typer.echo(f"{card.id:>5}  {_first_line(card.question)}")
        typer.echo(f"       {_describe_schedule(card)}")


@card_app.command("edit")
def card_edit(
    ctx: typer.Context,
    card_id: Annotated[int, typer.Argument(help="Card id.")],
    question: Annotated[str | None, typer.Option(help="New question.")] = None,
    answer: Annotated[str | None, typer.Option(help="New answer (\\n for line breaks).")] = None,
):
    """Edit the question and/or answer of a card."""
    repo = get_repository(_resolve_with_overrides(ctx))

    async def run():
        card = await repo.get_flashcard(card_id)
        if card is None:
            raise NotFoundError(f"Card {card_id} does not exist")
        updated = Flashcard(
            id=card.id,
            question=question if question is not None else card.question,
            answer=answer.replace("\\n", "\n") if answer is not None else card.answer,
            folder_id=card.folder_id,
        )
        await repo.update_flashcard(updated)

    run_async(run())
    typer.secho(f"Updated card {card_id}.", fg="green")


@card_app.command("delete")
def card_delete(
    ctx: typer.Context,
    card_id: Annotated[int, typer.Argument(help="Card id.")],
):
    """Delete a card and its saved checklist state."""
    repo = get_repository(_resolve_with_overrides(ctx))
    if not run_async(repo.delete_flashcard(card_id)):
        typer.secho(f"Card {card_id} not found.", fg="yellow")
        raise typer.Exit(1)
    typer.secho(f"Deleted card {card_id}.", fg="green")


@card_app.command("move")
def card_move(
    ctx: typer.Context,
    card_ids: Annotated[list[int], typer.Argument(help="Card ids.")],
    folder: FolderOption = None,
):
    """Move cards to another folder."""
    repo = get_repository(_resolve_with_overrides(ctx))
    run_async(repo.move_flashcards(card_ids, folder))
    typer.secho(f"Moved {len(card_ids)} card(s).", fg="green")


@card_app.command("copy")
def card_copy(
    ctx: typer.Context,
    card_ids: Annotated[list[int], typer.Argument(help="Card ids.")],
    folder: FolderOption = None,
):
    """Copy cards to another folder; copies start unscheduled."""
    repo = get_repository(_resolve_with_overrides(ctx))
    new_ids = run_async(repo.copy_flashcards(card_ids, folder))
    typer.secho(f"Copied {len(new_ids)} card(s).", fg="green")
