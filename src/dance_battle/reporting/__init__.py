"""Reporting sub-package for the dance-battle project.

Exports the two leaderboard renderers:

- ``format_leaderboard_text`` -- fixed-width table for the terminal.
- ``render_leaderboard_html`` -- standalone HTML page via Jinja2.

Usage::

    from dance_battle.reporting import render_leaderboard_html

    html = render_leaderboard_html(board.ranked(), title="Spring Jam")
"""

from dance_battle.reporting.composer import (
    format_leaderboard_text,
    render_leaderboard_html,
)

__all__ = ["format_leaderboard_text", "render_leaderboard_html"]
