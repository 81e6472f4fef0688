"""Event records stored in a cycle's log."""

from dataclasses import dataclass, field

from .models import BuzzMarker, Player


@dataclass
class SubstitutionEvent:
    in_player: Player
    out_player: Player


@dataclass
class PlayerJoinsEvent:
    in_player: Player


@dataclass
class PlayerLeavesEvent:
    out_player: Player


@dataclass
class TossupAnswerEvent:
    """A buzz on a tossup.

    Covers correct buzzes, negs and no-penalty buzzes; which of the last two
    an incorrect buzz is gets decided by the cycle that records it.
    """
    marker: BuzzMarker
    tossup_index: int


@dataclass
class ThrowOutQuestionEvent:
    question_index: int


@dataclass
class BonusAnswerPart:
    index: int
    points: int


@dataclass
class BonusAnswerEvent:
    """Parts of a bonus answered correctly by the team that won the tossup.

    The packet bonus that was read comes from GameState.bonus_index.
    """
    receiving_team: str
    correct_parts: list[BonusAnswerPart] = field(default_factory=list)

    @property
    def total_points(self) -> int:
        return sum(part.points for part in self.correct_parts)


@dataclass
class TossupProtestEvent:
    team_name: str
    question_index: int
    position: int
    reason: str = ''


@dataclass
class BonusProtestEvent:
    team_name: str
    question_index: int
    part: int
    reason: str = ''
