"""Render the dance-battle leaderboard.

Both renderers take the rows produced by
:func:`dance_battle.scoring.rank_rows` (or ``Scoreboard.ranked()``):
rank, competitor, the three category values and the total.  The HTML
page is rendered from the Jinja2 template at
``templates/leaderboard.html``.
"""

import datetime
import logging
import pathlib
from typing import Sequence

from jinja2 import Environment, FileSystemLoader

from dance_battle.models import CATEGORIES, CATEGORY_LABELS
from dance_battle.scoring.leaderboard import LeaderboardRow

logger = logging.getLogger(__name__)

# Locate the templates directory relative to this file.
_TEMPLATE_DIR = pathlib.Path(__file__).parent / "templates"

DEFAULT_TITLE = "Dance Battle Scoreboard"
EMPTY_MESSAGE = "No competitors added yet."


def _format_number(value: float) -> str:
    """Show whole floats without a trailing ``.0``."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_leaderboard_text(
    rows: Sequence[LeaderboardRow],
    name_width: int = 24,
) -> str:
    """Return the leaderboard as a fixed-width text table.

    Names longer than *name_width* are truncated with ``...``.
    """
    if not rows:
        return EMPTY_MESSAGE

    labels = [CATEGORY_LABELS[c] for c in CATEGORIES]
    header = (
        f"{'Rank':<5} {'Competitor':<{name_width}} "
        + " ".join(f"{label:>12}" for label in labels)
        + f" {'Total':>7}"
    )
    lines = [header, "-" * len(header)]

    for row in rows:
        name = row.competitor.name
        if len(name) > name_width:
            name = name[: name_width - 3] + "..."
        values = (row.creativity, row.technique, row.presentation)
        lines.append(
            f"{row.rank:<5} {name:<{name_width}} "
            + " ".join(f"{_format_number(v):>12}" for v in values)
            + f" {_format_number(row.total):>7}"
        )

    return "\n".join(lines)


def render_leaderboard_html(
    rows: Sequence[LeaderboardRow],
    title: str = DEFAULT_TITLE,
) -> str:
    """Render the leaderboard as a standalone HTML page.

    Args:
        rows: Leaderboard rows in rank order.
        title: Page heading; HTML-escaped by the template.

    Returns:
        The rendered HTML document.
    """
    env = Environment(
        loader=FileSystemLoader(str(_TEMPLATE_DIR)),
        autoescape=True,
    )
    env.filters["number"] = _format_number
    template = env.get_template("leaderboard.html")

    html = template.render(
        title=title,
        generated_at=datetime.datetime.now().strftime("%Y-%m-%d %H:%M"),
        category_labels=[CATEGORY_LABELS[c] for c in CATEGORIES],
        rows=rows,
    )

    logger.info("Rendered HTML leaderboard with %d rows", len(rows))
    return html
