"""Data models for qbscore: roster, packet, and buzz markers."""

from dataclasses import dataclass, field

from .constants import DEFAULT_BONUS_PART_VALUE


@dataclass(frozen=True)
class Player:
    """A player on a team's roster.

    Players are identified by (name, team_name); the starter flag only
    matters when building the opening lineup.
    """
    name: str
    team_name: str
    is_starter: bool = field(default=False, compare=False)


@dataclass(frozen=True)
class Tossup:
    """A tossup question from the packet."""
    question: str
    answer: str

    @property
    def words(self) -> list[str]:
        """Question text split into the word positions readers buzz on."""
        return self.question.split()

    @property
    def question_length(self) -> int:
        return len(self.words)


@dataclass(frozen=True)
class BonusPart:
    text: str
    answer: str
    value: int = DEFAULT_BONUS_PART_VALUE


@dataclass(frozen=True)
class Bonus:
    """A multi-part bonus question."""
    leadin: str
    parts: tuple[BonusPart, ...] = ()

    @property
    def max_points(self) -> int:
        return sum(part.value for part in self.parts)


@dataclass(frozen=True)
class PacketState:
    """Ordered tossups and bonuses supplied by a packet loader."""
    tossups: tuple[Tossup, ...] = ()
    bonuses: tuple[Bonus, ...] = ()


@dataclass(frozen=True)
class BuzzMarker:
    """Where and how a player buzzed.

    ``position`` is the zero-based word index in the tossup; a position equal
    to the question length means the buzz came after the last word.
    """
    player: Player
    position: int
    correct: bool
