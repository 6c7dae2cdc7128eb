"""dance-battle: Score dance-battle competitions and keep a live leaderboard."""

__version__ = "0.1.0"

import os
import pathlib

DEFAULT_STORE_PATH = os.path.join(
    os.path.expanduser("~"), ".dance-battle", "scoreboard.db"
)

DEFAULT_MAX_SCORE = 10

PACKAGE_DIR = pathlib.Path(__file__).parent
