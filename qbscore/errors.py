"""Exceptions raised by the match model."""


class QuizBowlError(Exception):
    """Base class for qbscore errors."""


class InvalidStateError(QuizBowlError):
    """A one-per-cycle invariant would be violated (e.g. a second correct buzz)."""


class InconsistentRosterError(QuizBowlError, ValueError):
    """A roster change references a player who isn't on the named team."""


class UnknownTeamError(QuizBowlError, ValueError):
    """A scored event belongs to a team that isn't in the roster."""


class IndexOutOfRangeError(QuizBowlError, IndexError):
    """A cycle or question index falls outside the recorded data."""
