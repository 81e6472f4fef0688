"""Match state: roster, packet and the cycle log, plus everything derived from them."""

import logging
from typing import Dict, Iterable, Optional, Tuple

from .config import get_config
from .cycle import Cycle
from .errors import InconsistentRosterError, IndexOutOfRangeError
from .events import BonusAnswerEvent, TossupAnswerEvent
from .models import Bonus, BuzzMarker, PacketState, Player, Tossup
from .schemas import MatchConfig
from .scoring import score_cycle

logger = logging.getLogger('qbscore.game')


class GameState:
    """
    A two-team match.

    Owns the packet, the roster and one Cycle per question slot. Nothing
    derived (active players, question indexes, scores) is stored; every
    query replays the cycles from the start.
    """

    def __init__(self, config: Optional[MatchConfig] = None):
        """
        Initialize an empty match.

        Args:
            config: Scoring settings (default: qbscore/data/match_config.json)
        """
        self.config = config if config is not None else get_config()
        self.packet = PacketState()
        self.players: list[Player] = []
        self.cycles: list[Cycle] = []

    @property
    def is_loaded(self) -> bool:
        return len(self.packet.tossups) > 0

    @property
    def team_names(self) -> list[str]:
        """Distinct team names across the roster, sorted."""
        return sorted({player.team_name for player in self.players})

    @property
    def final_score(self) -> Tuple[int, ...]:
        """Score after the last cycle, or (0, 0) before any cycles exist."""
        scores = self.cumulative_scores()
        if not scores:
            return (0, 0)
        return scores[-1]

    # Setup

    def add_player(self, player: Player) -> None:
        self.players.append(player)

    def add_players(self, players: Iterable[Player]) -> None:
        self.players.extend(players)

    def clear(self) -> None:
        """Drop the packet, roster and every cycle."""
        self.packet = PacketState()
        self.players = []
        self.cycles = []

    def load_packet(self, packet: PacketState) -> None:
        """
        Replace the packet, adding empty cycles so every tossup has one.

        Existing cycles are never removed or reordered, so events recorded
        for questions still in range survive a packet reload.
        """
        self.packet = packet

        added = 0
        while len(self.cycles) < len(packet.tossups):
            self.cycles.append(Cycle())
            added += 1

        logger.info(
            f'Loaded packet with {len(packet.tossups)} tossups and {len(packet.bonuses)} bonuses '
            f'({added} new cycles)'
        )

    # Roster

    def get_players(self, team_name: str) -> list[Player]:
        """Full roster for a team, in the order players were added."""
        return [player for player in self.players if player.team_name == team_name]

    def active_players(self, team_name: str, cycle_index: int) -> set[Player]:
        """
        Players on the floor for a team during a cycle.

        Starts from the team's starters and replays every cycle up to and
        including ``cycle_index``: leaves, then joins, then substitutions.

        Args:
            team_name: Team to look up
            cycle_index: Zero-based cycle index

        Returns:
            Set of active players (empty if the cycle hasn't been created)

        Raises:
            InconsistentRosterError: If a roster change names a player who
                isn't on the team
            IndexOutOfRangeError: If cycle_index is negative
        """
        self._check_cycle_index(cycle_index)
        if cycle_index >= len(self.cycles):
            return set()

        players = self.get_players(team_name)
        active = {player for player in players if player.is_starter}

        for cycle in self.cycles[: cycle_index + 1]:
            for leave in cycle.player_leaves:
                if leave.out_player.team_name != team_name:
                    continue
                active.discard(_find_player(players, leave.out_player, team_name, 'take out'))

            for join in cycle.player_joins:
                if join.in_player.team_name != team_name:
                    continue
                active.add(_find_player(players, join.in_player, team_name, 'add'))

            for sub in cycle.subs:
                if sub.in_player.team_name != team_name:
                    continue
                in_player = _find_player(players, sub.in_player, team_name, 'substitute in')
                out_player = _find_player(players, sub.out_player, team_name, 'substitute out')
                active.add(in_player)
                active.discard(out_player)

        return active

    # Question indexes

    def tossup_index(self, cycle_index: int) -> int:
        """
        Packet index of the tossup played in a cycle.

        Thrown-out tossups use up a packet slot without a cycle of their own,
        so every one recorded at or before ``cycle_index`` shifts the index.
        """
        self._check_cycle_index(cycle_index)
        thrown_out = sum(len(cycle.thrown_out_tossups) for cycle in self.cycles[: cycle_index + 1])
        return cycle_index + thrown_out

    def get_tossup(self, cycle_index: int) -> Optional[Tossup]:
        index = self.tossup_index(cycle_index)
        if index >= len(self.packet.tossups):
            return None
        return self.packet.tossups[index]

    def bonus_index(self, cycle_index: int) -> Optional[int]:
        """
        Packet index of the bonus available in a cycle.

        Bonuses are used up by correct buzzes in earlier cycles (the bonus
        for this cycle's tossup is the one being counted towards) and by
        thrown-out bonuses up to and including this cycle.

        Returns:
            Bonus index, or None once the packet has run out of bonuses
        """
        self._check_cycle_index(cycle_index)

        used = 0
        for index, cycle in enumerate(self.cycles[: cycle_index + 1]):
            if cycle.correct_buzz is not None and index < cycle_index:
                used += 1
            used += len(cycle.thrown_out_bonuses)

        if used >= len(self.packet.bonuses):
            return None
        return used

    def get_bonus(self, cycle_index: int) -> Optional[Bonus]:
        index = self.bonus_index(cycle_index)
        if index is None:
            return None
        return self.packet.bonuses[index]

    # Recording

    def get_cycle(self, cycle_index: int) -> Cycle:
        """
        Get a recorded cycle.

        Raises:
            IndexOutOfRangeError: If the cycle doesn't exist
        """
        if not 0 <= cycle_index < len(self.cycles):
            raise IndexOutOfRangeError(
                f'Cycle {cycle_index} is out of range (match has {len(self.cycles)} cycles)'
            )
        return self.cycles[cycle_index]

    def add_buzz(
        self, cycle_index: int, player: Player, position: int, correct: bool
    ) -> TossupAnswerEvent:
        """
        Record a buzz on the tossup being played in a cycle.

        Looks up the tossup and bonus for the cycle, then records a correct
        buzz (starting the bonus answer if a bonus is left) or an incorrect
        one, which becomes a neg or a no-penalty buzz as Cycle.add_wrong_buzz
        decides.

        Args:
            cycle_index: Zero-based cycle index
            player: Player who buzzed
            position: Word index of the buzz (question length = end of question)
            correct: Whether the answer was correct

        Returns:
            The recorded TossupAnswerEvent

        Raises:
            IndexOutOfRangeError: If the cycle, its tossup, or the position is
                out of range
            InvalidStateError: If the cycle already has a correct buzz
        """
        cycle = self.get_cycle(cycle_index)
        tossup = self.get_tossup(cycle_index)
        if tossup is None:
            raise IndexOutOfRangeError(f'No tossup left in the packet for cycle {cycle_index + 1}')
        if not 0 <= position <= tossup.question_length:
            raise IndexOutOfRangeError(
                f'Buzz position {position} is outside the question '
                f'(0-{tossup.question_length})'
            )

        try:
            active = self.active_players(player.team_name, cycle_index)
        except InconsistentRosterError as e:
            logger.warning(f'Could not check active players for cycle {cycle_index + 1}: {e}')
        else:
            if player not in active:
                logger.warning(
                    f'{player.name} ({player.team_name}) buzzed in cycle {cycle_index + 1} '
                    'but is not an active player'
                )

        marker = BuzzMarker(player=player, position=position, correct=correct)
        tossup_index = self.tossup_index(cycle_index)
        if correct:
            return cycle.add_correct_buzz(marker, tossup_index, self.bonus_index(cycle_index))
        return cycle.add_wrong_buzz(marker, tossup_index, tossup.question_length)

    def throw_out_tossup(self, cycle_index: int) -> None:
        """Throw out the tossup currently being read in a cycle."""
        self.get_cycle(cycle_index).add_thrown_out_tossup(self.tossup_index(cycle_index))

    def throw_out_bonus(self, cycle_index: int) -> None:
        """
        Throw out the bonus currently being read in a cycle.

        Parts already marked on the thrown-out bonus are cleared. The team
        that won the tossup gets an empty answer for the replacement bonus,
        or no answer if the packet has run out.

        Raises:
            IndexOutOfRangeError: If there is no bonus left to throw out
        """
        bonus_index = self.bonus_index(cycle_index)
        if bonus_index is None:
            raise IndexOutOfRangeError(f'No bonus left in the packet for cycle {cycle_index + 1}')
        cycle = self.get_cycle(cycle_index)
        cycle.add_thrown_out_bonus(bonus_index)

        if cycle.bonus_answer is not None:
            if self.bonus_index(cycle_index) is None:
                cycle.bonus_answer = None
            else:
                cycle.bonus_answer = BonusAnswerEvent(
                    receiving_team=cycle.bonus_answer.receiving_team
                )

    # Scores

    def score_change(self, cycle_index: int) -> Tuple[int, ...]:
        """
        Points each team gained in a cycle, in team_names order.

        Raises:
            UnknownTeamError: If a buzz belongs to a team not in the roster
        """
        return self.score_breakdown(cycle_index)[0]

    def score_breakdown(
        self, cycle_index: int
    ) -> Tuple[Tuple[int, ...], Dict[str, Dict[str, int]]]:
        """Score change for a cycle along with the tossup/bonus split per team."""
        self._check_cycle_index(cycle_index)
        if cycle_index >= len(self.cycles):
            return (0, 0), {team_name: {'tossup': 0, 'bonus': 0} for team_name in self.team_names}

        return score_cycle(
            self.cycles[cycle_index],
            self.team_names,
            correct_points=self.config.correct_points,
            neg_points=self.config.neg_points,
        )

    def cumulative_scores(self) -> list[Tuple[int, ...]]:
        """Running score after each cycle; one entry per cycle."""
        scores: list[Tuple[int, ...]] = []
        totals: list[int] = []

        for cycle_index in range(len(self.cycles)):
            change = self.score_change(cycle_index)
            if not totals:
                totals = [0] * len(change)
            totals = [total + points for total, points in zip(totals, change)]
            scores.append(tuple(totals))

        return scores

    def _check_cycle_index(self, cycle_index: int) -> None:
        if cycle_index < 0:
            raise IndexOutOfRangeError(f'Cycle index must be non-negative, got {cycle_index}')


def _find_player(players: list[Player], player: Player, team_name: str, action: str) -> Player:
    for candidate in players:
        if candidate == player:
            return candidate
    raise InconsistentRosterError(
        f"Tried to {action} {player.name}, who isn't on team {team_name}"
    )
