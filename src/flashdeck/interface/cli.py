"""flashdeck CLI: deck, note and review commands."""

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Annotated, Any

import typer

from flashdeck.application.config import AppConfig, resolve_config
from flashdeck.application.factory import get_card_service, get_note_store
from flashdeck.domain.errors import FlashdeckError
from flashdeck.domain.models import ReviewScore

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="flashdeck: markdown flashcards with spaced repetition.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(help="Manage flashdeck configuration.")
app.add_typer(config_app, name="config")

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)


def _log_level(verbose: int) -> int:
    if verbose <= 0:
        return logging.WARNING
    if verbose == 1:
        return logging.INFO
    return logging.DEBUG


LOG_FILE_NAME = "flashdeck.log"
_FILE_HANDLER_NAME = "flashdeck-file"


def _setup_file_logging(log_dir: Path) -> None:
    """Send log records to <log_dir>/flashdeck.log, replacing any earlier file handler."""
    root = logging.getLogger()
    for handler in list(root.handlers):
        if handler.get_name() == _FILE_HANDLER_NAME:
            root.removeHandler(handler)
            handler.close()

    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_dir / LOG_FILE_NAME, encoding="utf-8")
    except OSError as e:
        logger.warning(f"File logging disabled, cannot open {log_dir}: {e}")
        return
    handler.set_name(_FILE_HANDLER_NAME)
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s:%(name)s:%(message)s")
    )
    root.addHandler(handler)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _config(ctx: typer.Context) -> AppConfig:
    return ctx.obj["config"]


def _echo_json(data: Any) -> None:
    typer.echo(json.dumps(data, indent=2, ensure_ascii=False))


def _fail(e: FlashdeckError) -> typer.Exit:
    typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
    return typer.Exit(code=1)


def _parse_score(value: str) -> ReviewScore:
    try:
        return ReviewScore.from_label(value)
    except ValueError as e:
        raise typer.BadParameter(
            f"{value!r} is not one of: " + ", ".join(s.value.lower() for s in ReviewScore)
        ) from e


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    ctx: typer.Context,
    decks_root: Annotated[
        Path | None,
        typer.Option("--decks-root", help="Directory holding one sub-directory per deck."),
    ] = None,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 0,
    quiet: Annotated[
        bool, typer.Option("--quiet", "-q", help="Only log warnings and errors.")
    ] = False,
):
    """Global settings for flashdeck."""
    ctx.ensure_object(dict)
    config = resolve_config({"decks_root": decks_root})
    # -v counts up from the configured verbosity.
    config.verbose = 0 if quiet else config.verbose + verbose
    logging.getLogger().setLevel(_log_level(config.verbose))
    _setup_file_logging(config.log_dir)
    ctx.obj["config"] = config


# ---------------------------------------------------------------------------
# Decks & notes
# ---------------------------------------------------------------------------


@app.command("decks")
def list_decks(ctx: typer.Context):
    """List deck names."""
    _echo_json(get_note_store(_config(ctx)).list_decks())


@app.command("create-deck")
def create_deck(
    ctx: typer.Context,
    deck: Annotated[str, typer.Argument(help="Deck name.")],
):
    """Create an empty deck directory."""
    try:
        path = get_note_store(_config(ctx)).create_deck(deck)
    except FlashdeckError as e:
        raise _fail(e)
    typer.echo(str(path))


@app.command("notes")
def list_notes(
    ctx: typer.Context,
    deck: Annotated[str, typer.Argument(help="Deck name.")],
):
    """List the notes of a deck."""
    try:
        notes = get_card_service(_config(ctx)).list_notes(deck)
    except FlashdeckError as e:
        raise _fail(e)
    _echo_json([n.model_dump(mode="json") for n in notes])


@app.command("add")
def add_note(
    ctx: typer.Context,
    deck: Annotated[str, typer.Argument(help="Deck name.")],
    front: Annotated[str, typer.Option("--front", help="Front side text (markdown).")],
    back: Annotated[str, typer.Option("--back", help="Back side text (markdown).")],
    template: Annotated[str, typer.Option(help="Note template.")] = "basic",
):
    """[bold green]Add[/bold green] a note to a deck."""
    try:
        note = get_note_store(_config(ctx)).create(deck, template, {"Front": front, "Back": back})
    except FlashdeckError as e:
        raise _fail(e)
    typer.echo(note.note_id)


@app.command("show")
def show_card(
    ctx: typer.Context,
    deck: Annotated[str, typer.Argument(help="Deck name.")],
    note_id: Annotated[str, typer.Argument(help="Note id.")],
    back: Annotated[bool, typer.Option("--back", help="Also show the back side.")] = False,
):
    """Print the front (and optionally back) of a card."""
    service = get_card_service(_config(ctx))
    try:
        face = service.card_face(service.find_card(deck, note_id))
    except FlashdeckError as e:
        raise _fail(e)
    if back:
        typer.echo(f"{face.front}\n\n---\n\n{face.back}")
    else:
        typer.echo(face.front)


# ---------------------------------------------------------------------------
# Reviews
# ---------------------------------------------------------------------------


@app.command("due")
def list_due(
    ctx: typer.Context,
    deck: Annotated[str, typer.Argument(help="Deck name.")],
):
    """List cards due for review now."""
    try:
        cards = get_card_service(_config(ctx)).list_due(deck, datetime.now(timezone.utc))
    except FlashdeckError as e:
        raise _fail(e)
    _echo_json([c.model_dump(mode="json") for c in cards])


@app.command("review")
def review_card(
    ctx: typer.Context,
    deck: Annotated[str, typer.Argument(help="Deck name.")],
    note_id: Annotated[str, typer.Argument(help="Note id.")],
    score: Annotated[str, typer.Argument(help="again, hard, good or easy.")],
    card_num: Annotated[int, typer.Option(help="Card number within the note.")] = 1,
):
    """[bold green]Score[/bold green] a card and record the review."""
    parsed = _parse_score(score)
    service = get_card_service(_config(ctx))
    try:
        card = service.find_card(deck, note_id, card_num)
        review = service.review(card, parsed, datetime.now(timezone.utc))
    except FlashdeckError as e:
        raise _fail(e)
    _echo_json(review.model_dump(mode="json"))


@app.command("history")
def review_history(
    ctx: typer.Context,
    deck: Annotated[str, typer.Argument(help="Deck name.")],
    note_id: Annotated[str, typer.Argument(help="Note id.")],
):
    """Show every recorded review of a note, oldest first."""
    try:
        reviews = get_card_service(_config(ctx)).history(deck, note_id)
    except FlashdeckError as e:
        raise _fail(e)
    _echo_json([r.model_dump(mode="json") for r in reviews])


# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show(ctx: typer.Context):
    """Print the resolved configuration as JSON."""
    _echo_json(_config(ctx).model_dump(mode="json"))


def main():
    app()


if __name__ == "__main__":
    main()
