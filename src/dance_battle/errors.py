"""Exception types raised by the dance-battle scoreboard."""


class ScoreboardError(Exception):
    """Base class for all scoreboard errors."""


class ValidationError(ScoreboardError):
    """A user action was rejected (blank or duplicate name, no competitor...).

    ``str(exc)`` is the human-readable message shown to the organizer.
    """


class CorruptStateError(ScoreboardError):
    """Persisted state exists but cannot be decoded."""

    def __init__(self, key: str, reason: str) -> None:
        super().__init__(f"Stored value for '{key}' is malformed: {reason}")
        self.key = key
        self.reason = reason
