"""flashstudy CLI — root commands and subgroup registration."""

import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Annotated, Literal

import typer
import yaml

from flashstudy.application.factory import get_preferences_store, get_repository
from flashstudy.domain.exceptions import InvalidArgumentError
from flashstudy.domain.models import Flashcard, Folder, StudySettings
from flashstudy.interface._common import _resolve_with_overrides, run_async

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="flashstudy: checklist-driven spaced repetition in the terminal.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)

LOG_LEVELS = [logging.WARNING, logging.INFO, logging.DEBUG]

# ---------------------------------------------------------------------------
# Register subgroups
# ---------------------------------------------------------------------------

from flashstudy.interface.library_commands import card_app, folder_app  # noqa: E402
from flashstudy.interface.study_commands import study  # noqa: E402

app.add_typer(folder_app, name="folder")
app.add_typer(card_app, name="card")
app.command()(study)

settings_app = typer.Typer(help="Study screen display settings.", no_args_is_help=True)
app.add_typer(settings_app, name="settings")

config_app = typer.Typer(help="Inspect flashstudy configuration.")
app.add_typer(config_app, name="config")


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    ctx: typer.Context,
    data_dir: Annotated[
        Path | None,
        typer.Option("--data-dir", help="Directory holding the database and preferences."),
    ] = None,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 0,
):
    """Global settings for flashstudy."""
    ctx.ensure_object(dict)
    ctx.obj["overrides"] = {"data_dir": data_dir, "verbose": verbose or None}
    config = _resolve_with_overrides(ctx)
    logging.getLogger().setLevel(LOG_LEVELS[max(0, min(config.verbose, len(LOG_LEVELS) - 1))])


# ---------------------------------------------------------------------------
# Root commands
# ---------------------------------------------------------------------------


def _load_deck(path: Path) -> tuple[list[str], list[tuple[str, str]]]:
    """Parse a YAML deck file into (folder names, [(question, answer)])."""
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        raise InvalidArgumentError(f"Could not read deck {path}: {e}") from e

    if not isinstance(data, dict):
        raise InvalidArgumentError(f"Deck {path} must be a mapping with a 'cards' list")

    folder = data.get("folder") or ""
    if not isinstance(folder, str):
        raise InvalidArgumentError("'folder' must be a string such as 'Biology/Cells'")
    names = [part.strip() for part in folder.split("/") if part.strip()]

    cards = data.get("cards") or []
    if not isinstance(cards, list):
        raise InvalidArgumentError("'cards' must be a list")

    parsed = []
    for n, raw in enumerate(cards, start=1):
        if not isinstance(raw, dict) or not raw.get("question"):
            raise InvalidArgumentError(f"Card #{n} needs a 'question'")
        parsed.append((str(raw["question"]), str(raw.get("answer") or "")))
    return names, parsed


@app.command("import")
def import_deck(
    ctx: typer.Context,
    file: Annotated[
        Path, typer.Argument(help="YAML deck file.", exists=True, dir_okay=False, readable=True)
    ],
):
    """
    [bold]Import[/bold] a YAML deck.

    The deck names its folder as a slash path ([cyan]folder: "Biology/Cells"[/cyan]);
    missing folders along the path are created.
    """
    repo = get_repository(_resolve_with_overrides(ctx))

    async def run():
        names, cards = _load_deck(file)

        folder_id = None
        for name in names:
            existing = next(
                (f for f in await repo.get_folders(folder_id) if f.name == name), None
            )
            if existing is None:
                folder_id = await repo.insert_folder(Folder(name=name, parent_id=folder_id))
                logger.info(f"Created folder '{name}' (id {folder_id})")
            else:
                folder_id = existing.id

        await repo.insert_flashcards(
            [Flashcard(question=q, answer=a, folder_id=folder_id) for q, a in cards]
        )
        return folder_id, len(cards)

    folder_id, count = run_async(run())
    where = f"folder {folder_id}" if folder_id is not None else "uncategorized"
    typer.secho(f"Imported {count} card(s) into {where}.", fg="green")


@app.command()
def due(
    ctx: typer.Context,
    folder: Annotated[
        int | None, typer.Option("--folder", "-f", help="Folder id. Omit for uncategorized.")
    ] = None,
):
    """List the cards of a folder that are due for review now."""
    repo = get_repository(_resolve_with_overrides(ctx))
    cards = run_async(repo.get_due_flashcards(folder, datetime.now()))
    if not cards:
        typer.secho("Nothing due.", fg="green")
        return
    for card in cards:
        when = card.next_review.strftime("%Y-%m-%d %H:%M") if card.next_review else "new"
        title = card.question.split("\n", 1)[0]
        typer.echo(f"{card.id:>5}  {when:<16}  {title}")
    typer.secho(f"{len(cards)} card(s) due.", fg="cyan")


# ---------------------------------------------------------------------------
# Settings subgroup
# ---------------------------------------------------------------------------


def _print_settings(settings: StudySettings) -> None:
    typer.echo(f"hide-unmarked: {'on' if settings.hide_unmarked_text_with_checkboxes else 'off'}")
    typer.echo(f"show-checked:  {'on' if settings.show_previously_checked_items else 'off'}")


@settings_app.command("show")
def settings_show(ctx: typer.Context):
    """Show the current study display settings."""
    store = get_preferences_store(_resolve_with_overrides(ctx))
    _print_settings(run_async(store.load_study_settings()))


@settings_app.command("toggle")
def settings_toggle(
    ctx: typer.Context,
    name: Annotated[Literal["hide-unmarked", "show-checked"], typer.Argument(help="Setting.")],
):
    """Flip one study display setting."""
    store = get_preferences_store(_resolve_with_overrides(ctx))

    async def run():
        current = await store.load_study_settings()
        if name == "hide-unmarked":
            updated = StudySettings(
                hide_unmarked_text_with_checkboxes=not current.hide_unmarked_text_with_checkboxes,
                show_previously_checked_items=current.show_previously_checked_items,
            )
        else:
            updated = StudySettings(
                hide_unmarked_text_with_checkboxes=current.hide_unmarked_text_with_checkboxes,
                show_previously_checked_items=not current.show_previously_checked_items,
            )
        await store.save_study_settings(updated)
        return updated

    _print_settings(run_async(run()))


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show(ctx: typer.Context):
    """Display final resolved configuration."""
    config = _resolve_with_overrides(ctx)
    d = {k: str(v) if isinstance(v, Path) else v for k, v in config.model_dump().items()}
    typer.echo(json.dumps(d, indent=2))


if __name__ == "__main__":
    app()
