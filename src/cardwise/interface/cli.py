"""cardwise CLI — review, card management, stats, config and server commands."""

import json
import logging
import sys
from pathlib import Path
from typing import Annotated

import typer

from cardwise.application.config import resolve_config
from cardwise.interface._common import (
    _resolve_with_overrides,
    attach_log_file,
    humanize_error,
    verbosity_to_level,
)

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="cardwise: spaced-repetition flashcards in your terminal.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(help="Manage cardwise configuration.")
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

RATING_PROMPT = "Rating [0=again 1=hard 2=partial 3=good 4=easy, q=quit]"


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 0,
    data_file: Annotated[
        Path | None, typer.Option("--data-file", help="Card collection file (JSON).")
    ] = None,
):
    """Global settings for cardwise."""
    ctx.ensure_object(dict)
    # -v once for DEBUG on top of the default INFO level
    ctx.obj["verbose"] = verbose + 1
    ctx.obj["data_file"] = data_file
    logging.getLogger().setLevel(verbosity_to_level(verbose + 1))


def _config_from_ctx(ctx: typer.Context, **overrides):
    obj = ctx.obj or {}
    return _resolve_with_overrides(
        data_file=obj.get("data_file"),
        verbose=obj.get("verbose"),
        **overrides,
    )


def _parse_rating(value: str):
    from cardwise.domain.models import Quality

    if value.strip().lower() in ("q", "quit"):
        return None
    try:
        return Quality.parse(value)
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e


# ---------------------------------------------------------------------------
# Review
# ---------------------------------------------------------------------------


@app.command()
def review(
    ctx: typer.Context,
    source: Annotated[
        Path | None,
        typer.Option("--source", "-s", help="Import source (CSV with front,back header)."),
    ] = None,
    limit: Annotated[
        int | None, typer.Option("--limit", "-n", min=0, help="Maximum cards to queue.")
    ] = None,
):
    """[bold green]Review[/bold green] the cards due today."""
    from cardwise.application.factory import get_card_store
    from cardwise.application.session import ReviewSession

    config = _config_from_ctx(ctx, source_file=source, session_limit=limit)
    attach_log_file(config.log_dir)
    store = get_card_store(config)

    session = ReviewSession.start(
        store, source=config.source_file, limit=config.session_limit
    )

    while True:
        card = session.next_card()
        if card is None:
            break

        typer.echo("")
        typer.secho(f"Cards to review: {session.remaining + 1}", dim=True)
        typer.secho(card.front, bold=True)
        typer.prompt("Press Enter to show the answer", default="", show_default=False)
        typer.secho(card.back, fg="cyan")

        quality = typer.prompt(RATING_PROMPT, value_proc=_parse_rating)
        if quality is None:
            typer.secho(f"Stopped. Reviewed {session.reviewed_count} cards.", fg="yellow")
            raise typer.Exit()

        outcome = session.rate(quality)
        if not outcome.saved:
            typer.secho("Warning: progress could not be saved.", fg="red")
        if outcome.requeued:
            typer.secho("Again later this session.", fg="yellow")
        else:
            days = outcome.card.interval
            typer.secho(f"Next review in {days} day{'s' if days != 1 else ''}.", fg="green")

    typer.secho("All done for today!", fg="green", bold=True)
    typer.echo(
        f"Reviewed {session.reviewed_count} cards. "
        "Come back later for new cards or add more!"
    )


# ---------------------------------------------------------------------------
# Card management
# ---------------------------------------------------------------------------


@app.command()
def add(
    ctx: typer.Context,
    front: Annotated[str, typer.Argument(help="Prompt text.")],
    back: Annotated[str, typer.Argument(help="Answer text.")],
):
    """Add a new card to the collection."""
    from cardwise.application.factory import get_card_store
    from cardwise.application.session import ReviewSession
    from cardwise.domain.exceptions import CardwiseError

    config = _config_from_ctx(ctx)
    store = get_card_store(config)
    session = ReviewSession(store, store.load_all())

    try:
        card = session.add_card(front, back)
    except CardwiseError as e:
        typer.secho(humanize_error(e), fg="yellow")
        raise typer.Exit(1) from e

    typer.secho(f"Added card {card.id} ({len(session.cards)} total).", fg="green")


@app.command("import")
def import_cards(
    ctx: typer.Context,
    source: Annotated[Path, typer.Argument(help="Import source (CSV with front,back header).")],
):
    """Merge cards from an import source into the collection."""
    from cardwise.application.factory import get_card_store
    from cardwise.application.loader import load_collection

    config = _config_from_ctx(ctx)
    report = load_collection(get_card_store(config), source)

    if not report.imported:
        typer.secho(f"Could not read {source}; collection unchanged.", fg="red")
        raise typer.Exit(1)

    typer.echo(f"Added: {report.added}  Updated: {report.updated}  Total: {len(report.cards)}")
    if report.skipped_rows:
        typer.secho(f"Skipped malformed rows: {report.skipped_rows}", fg="yellow")


# ---------------------------------------------------------------------------
# Reporting
# ---------------------------------------------------------------------------


@app.command()
def due(
    ctx: typer.Context,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """List the cards due today."""
    from cardwise.application.factory import get_card_store
    from cardwise.application.queue_builder import due_cards, next_due_date

    config = _config_from_ctx(ctx)
    cards = due_cards(get_card_store(config).load_all())

    if json_output:
        typer.echo(
            json.dumps(
                [
                    {
                        "id": c.id,
                        "front": c.front,
                        "interval": c.interval,
                        "due": str(next_due_date(c)) if c.last_reviewed else None,
                    }
                    for c in cards
                ],
                indent=2,
            )
        )
        return

    if not cards:
        typer.secho("Nothing due today.", fg="green")
        return
    typer.echo(f"Cards to review: {len(cards)}")
    for c in cards:
        label = "new" if c.is_new else f"due {next_due_date(c)}"
        typer.echo(f"  {c.front}  ({label})")


@app.command()
def stats(
    ctx: typer.Context,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Show collection progress: new, learning, mature and due cards."""
    from cardwise.application.factory import get_card_store
    from cardwise.application.stats import MetricsCalculator

    config = _config_from_ctx(ctx)
    cards = get_card_store(config).load_all()
    result = MetricsCalculator(config.mature_interval).collection_stats(cards)

    if json_output:
        typer.echo(json.dumps(result.to_dict(), indent=2))
        return

    typer.echo(f"New:      {result.new}")
    typer.echo(f"Learning: {result.learning}")
    typer.echo(f"Mature:   {result.mature}")
    typer.echo(f"Due:      {result.due}")
    typer.echo(f"Total:    {result.total}")


# ---------------------------------------------------------------------------
# Server
# ---------------------------------------------------------------------------


@app.command()
def serve(
    ctx: typer.Context,
    port: Annotated[int | None, typer.Option(help="Port to bind the server to.")] = None,
    host: Annotated[str | None, typer.Option(help="Host to bind the server to.")] = None,
    reload: Annotated[bool, typer.Option(help="Enable auto-reload.")] = False,
):
    """Run the local HTTP API."""
    import uvicorn

    config = _config_from_ctx(ctx, host=host, port=port)
    attach_log_file(config.log_dir)
    uvicorn.run("cardwise.server:app", host=config.host, port=config.port, reload=reload)


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show():
    """Display final resolved configuration."""
    config = resolve_config()
    d = {k: str(v) if isinstance(v, Path) else v for k, v in config.model_dump().items()}
    typer.echo(json.dumps(d, indent=2))
