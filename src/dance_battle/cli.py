"""Click CLI for dance-battle.

Commands:
    add         -- Add a competitor to the roster.
    remove      -- Remove a competitor and their score.
    score       -- Submit a judge's score for a competitor.
    roster      -- List competitors in the order they were added.
    leaderboard -- Show the ranked leaderboard (optionally as HTML).
    reset       -- Clear all competitors and scores.
"""

from __future__ import annotations

import logging
import os
import sqlite3

import click
from dotenv import find_dotenv, load_dotenv

from dance_battle import DEFAULT_MAX_SCORE, DEFAULT_STORE_PATH
from dance_battle.errors import CorruptStateError, ScoreboardError

logger = logging.getLogger("dance_battle.cli")


def _resolve_store_path(ctx_store: str | None) -> str:
    """Return the store path from --store flag, env var, or default."""
    if ctx_store:
        return ctx_store
    env_path = os.environ.get("DANCE_BATTLE_STORE")
    if env_path:
        return env_path
    return DEFAULT_STORE_PATH


def _resolve_max_score(ctx_max_score: int | None) -> int | None:
    """Return the per-category cap from --max-score, env var, or default.

    ``0`` disables the cap and is returned as ``None``.
    """
    if ctx_max_score is not None:
        value = ctx_max_score
    else:
        env_value = os.environ.get("DANCE_BATTLE_MAX_SCORE", "").strip()
        if env_value:
            try:
                value = int(env_value)
            except ValueError:
                raise click.BadParameter(
                    f"DANCE_BATTLE_MAX_SCORE must be an integer, got {env_value!r}."
                )
            if value < 0:
                raise click.BadParameter(
                    "DANCE_BATTLE_MAX_SCORE must not be negative."
                )
        else:
            value = DEFAULT_MAX_SCORE
    return value or None


def _open_board(ctx: click.Context):
    """Open the configured store and load the scoreboard from it.

    The store is closed when the command finishes.  A corrupt store
    aborts the command with a hint to run ``reset``.
    """
    from dance_battle.engine import Scoreboard
    from dance_battle.storage import open_store

    try:
        store = open_store(ctx.obj["store_path"])
        ctx.call_on_close(store.close)
        return Scoreboard(store, max_score=ctx.obj["max_score"])
    except (CorruptStateError, sqlite3.DatabaseError) as exc:
        logger.error("Could not load scoreboard: %s", exc)
        click.echo(click.style(f"Error: {exc}", fg="red"), err=True)
        click.echo(
            "Run 'dance-battle reset' to start over with an empty scoreboard.",
            err=True,
        )
        raise SystemExit(1)


def _resolve_competitor(board, ref: str):
    """Look a competitor up by id first, then by exact name."""
    competitor = board.get_competitor(ref) or board.find_competitor(ref)
    if competitor is None:
        click.echo(click.style(f"Error: no competitor '{ref}'.", fg="red"), err=True)
        raise SystemExit(1)
    return competitor


@click.group()
@click.option(
    "--store",
    default=None,
    envvar="DANCE_BATTLE_STORE",
    help="Path to the scoreboard store (.db for SQLite, .json for JSON).",
)
@click.option(
    "--max-score",
    default=None,
    type=click.IntRange(min=0),
    help=(
        "Highest score allowed per category (0 disables the limit). "
        f"Falls back to DANCE_BATTLE_MAX_SCORE, then {DEFAULT_MAX_SCORE}."
    ),
)
@click.option(
    "--log-level",
    default="WARNING",
    show_default=True,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Logging verbosity.",
)
@click.pass_context
def main(
    ctx: click.Context,
    store: str | None,
    max_score: int | None,
    log_level: str,
) -> None:
    """dance-battle: Scoreboard and leaderboard for dance battles."""
    # Environment values are read below, after .env is loaded.
    load_dotenv(find_dotenv(usecwd=True))
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["store_path"] = _resolve_store_path(store)
    ctx.obj["max_score"] = _resolve_max_score(max_score)


@main.command()
@click.argument("name")
@click.pass_context
def add(ctx: click.Context, name: str) -> None:
    """Add a competitor called NAME."""
    board = _open_board(ctx)
    try:
        competitor = board.add_competitor(name)
    except ScoreboardError as exc:
        click.echo(click.style(f"Error: {exc}", fg="red"), err=True)
        raise SystemExit(1)

    click.echo(
        click.style(f"Added {competitor.name}", fg="green")
        + f" (id: {competitor.id})"
    )


@main.command()
@click.argument("competitor")
@click.pass_context
def remove(ctx: click.Context, competitor: str) -> None:
    """Remove COMPETITOR (id or name) and their score."""
    board = _open_board(ctx)
    target = _resolve_competitor(board, competitor)
    board.remove_competitor(target.id)
    click.echo(click.style(f"Removed {target.name}.", fg="yellow"))


@main.command()
@click.argument("competitor")
@click.option("--creativity", default=0, show_default=True, type=int)
@click.option("--technique", default=0, show_default=True, type=int)
@click.option("--presentation", default=0, show_default=True, type=int)
@click.pass_context
def score(
    ctx: click.Context,
    competitor: str,
    creativity: int,
    technique: int,
    presentation: int,
) -> None:
    """Submit a score for COMPETITOR (id or name).

    A new score replaces any score submitted earlier for the same
    competitor.
    """
    board = _open_board(ctx)
    target = _resolve_competitor(board, competitor)
    try:
        board.submit_score(
            target.id,
            {
                "creativity": creativity,
                "technique": technique,
                "presentation": presentation,
            },
        )
    except ScoreboardError as exc:
        click.echo(click.style(f"Error: {exc}", fg="red"), err=True)
        raise SystemExit(1)

    click.echo(
        click.style(f"Scored {target.name}: ", fg="green")
        + f"total {board.total_score(target.id)}"
    )


@main.command()
@click.pass_context
def roster(ctx: click.Context) -> None:
    """List competitors in the order they were added."""
    board = _open_board(ctx)
    if not board.competitors:
        click.echo("No competitors added yet.")
        return
    for competitor in board.competitors:
        click.echo(f"{competitor.name}\t{competitor.id}")


@main.command()
@click.option(
    "--html",
    "html_path",
    default=None,
    type=click.Path(dir_okay=False, writable=True),
    help="Also write the leaderboard as an HTML page to this file.",
)
@click.option(
    "--title",
    default="Dance Battle Scoreboard",
    show_default=True,
    help="Heading used for the HTML page.",
)
@click.pass_context
def leaderboard(ctx: click.Context, html_path: str | None, title: str) -> None:
    """Show competitors ranked by total score."""
    from dance_battle.reporting.composer import (
        format_leaderboard_text,
        render_leaderboard_html,
    )

    board = _open_board(ctx)
    rows = board.ranked()
    click.echo(format_leaderboard_text(rows))

    if html_path:
        html = render_leaderboard_html(rows, title=title)
        with open(html_path, "w", encoding="utf-8") as fh:
            fh.write(html)
        click.echo(click.style(f"HTML leaderboard written to {html_path}.", fg="cyan"))


@main.command()
@click.option("--yes", is_flag=True, help="Do not ask for confirmation.")
@click.pass_context
def reset(ctx: click.Context, yes: bool) -> None:
    """Delete all competitors and scores."""
    from dance_battle.state import StateStore
    from dance_battle.storage import open_store

    if not yes:
        click.confirm("Delete all competitors and scores?", abort=True)

    store_path = ctx.obj["store_path"]
    try:
        store = open_store(store_path)
    except (CorruptStateError, sqlite3.DatabaseError):
        # An unreadable store file (bad JSON, or not a SQLite database)
        # is replaced outright.
        logger.warning("Replacing unreadable store file %s", store_path)
        os.remove(store_path)
        store = open_store(store_path)

    ctx.call_on_close(store.close)
    StateStore(store).clear()
    click.echo(click.style("Scoreboard cleared.", fg="green"))
