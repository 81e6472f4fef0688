from .models import Player, Tossup, Bonus, BonusPart, PacketState, BuzzMarker
from .events import (
    SubstitutionEvent,
    PlayerJoinsEvent,
    PlayerLeavesEvent,
    TossupAnswerEvent,
    ThrowOutQuestionEvent,
    BonusAnswerPart,
    BonusAnswerEvent,
    TossupProtestEvent,
    BonusProtestEvent,
)
from .errors import (
    QuizBowlError,
    InvalidStateError,
    InconsistentRosterError,
    UnknownTeamError,
    IndexOutOfRangeError,
)
from .cycle import Cycle
from .game import GameState
from .protest import ProtestStaging, PendingTossupProtest, PendingBonusProtest
from .scoring import score_cycle, score_bonus
from .snapshot import save_game, load_game, load_packet, load_roster
from .scoresheet import export_scoresheet, read_scoresheet_totals
from .validators import validate_roster, validate_cycle, validate_game

__all__ = [
    # Models
    'Player',
    'Tossup',
    'Bonus',
    'BonusPart',
    'PacketState',
    'BuzzMarker',
    # Events
    'SubstitutionEvent',
    'PlayerJoinsEvent',
    'PlayerLeavesEvent',
    'TossupAnswerEvent',
    'ThrowOutQuestionEvent',
    'BonusAnswerPart',
    'BonusAnswerEvent',
    'TossupProtestEvent',
    'BonusProtestEvent',
    # Errors
    'QuizBowlError',
    'InvalidStateError',
    'InconsistentRosterError',
    'UnknownTeamError',
    'IndexOutOfRangeError',
    # Match
    'Cycle',
    'GameState',
    'ProtestStaging',
    'PendingTossupProtest',
    'PendingBonusProtest',
    # Scoring
    'score_cycle',
    'score_bonus',
    # Persistence
    'save_game',
    'load_game',
    'load_packet',
    'load_roster',
    # Excel
    'export_scoresheet',
    'read_scoresheet_totals',
    # Validation
    'validate_roster',
    'validate_cycle',
    'validate_game',
]
