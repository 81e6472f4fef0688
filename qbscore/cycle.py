"""Event log for a single question slot (one tossup and its bonus)."""

import logging
from dataclasses import dataclass, field
from typing import Optional

from .errors import InvalidStateError
from .events import (
    BonusAnswerEvent,
    BonusAnswerPart,
    BonusProtestEvent,
    PlayerJoinsEvent,
    PlayerLeavesEvent,
    SubstitutionEvent,
    ThrowOutQuestionEvent,
    TossupAnswerEvent,
    TossupProtestEvent,
)
from .models import BuzzMarker, Player

logger = logging.getLogger('qbscore.cycle')


@dataclass
class Cycle:
    """
    All events recorded while one question pair was played.

    Negs are tracked per team: ``neg_buzzes`` maps a team name to the entry
    of ``incorrect_buzzes`` that was penalised. Entries are matched by
    identity, so two buzzes that look alike are never both counted as the
    same neg.
    """

    subs: list[SubstitutionEvent] = field(default_factory=list)
    player_joins: list[PlayerJoinsEvent] = field(default_factory=list)
    player_leaves: list[PlayerLeavesEvent] = field(default_factory=list)
    correct_buzz: Optional[TossupAnswerEvent] = None
    incorrect_buzzes: list[TossupAnswerEvent] = field(default_factory=list)
    neg_buzzes: dict[str, TossupAnswerEvent] = field(default_factory=dict)
    thrown_out_tossups: list[ThrowOutQuestionEvent] = field(default_factory=list)
    thrown_out_bonuses: list[ThrowOutQuestionEvent] = field(default_factory=list)
    bonus_answer: Optional[BonusAnswerEvent] = None
    tossup_protests: list[TossupProtestEvent] = field(default_factory=list)
    bonus_protests: list[BonusProtestEvent] = field(default_factory=list)

    @property
    def ordered_buzzes(self) -> list[TossupAnswerEvent]:
        """
        Every buzz in the cycle, ordered by tossup and then word position.

        Wrong buzzes sort ahead of a correct buzz at the same position; the
        sort is stable otherwise, so buzzes keep the order they were entered.
        """
        buzzes = list(self.incorrect_buzzes)
        if self.correct_buzz is not None:
            buzzes.append(self.correct_buzz)

        return sorted(
            buzzes,
            key=lambda buzz: (buzz.tossup_index, buzz.marker.position, buzz.marker.correct),
        )

    def neg_buzz_for(self, team_name: str) -> Optional[TossupAnswerEvent]:
        """Get the penalised buzz for a team in this cycle, if any."""
        return self.neg_buzzes.get(team_name)

    def is_neg(self, buzz: TossupAnswerEvent) -> bool:
        """Whether a recorded incorrect buzz is one of the cycle's negs."""
        return any(neg is buzz for neg in self.neg_buzzes.values())

    # Buzzes

    def add_correct_buzz(
        self, marker: BuzzMarker, tossup_index: int, bonus_index: Optional[int] = None
    ) -> TossupAnswerEvent:
        """
        Record the correct buzz for this cycle.

        Args:
            marker: Buzz marker with ``correct=True``
            tossup_index: Packet index of the tossup that was buzzed on
            bonus_index: Packet index of the bonus the team earns, or None if
                the packet is out of bonuses. When given, starts an empty bonus
                answer for the buzzing team.

        Returns:
            The recorded TossupAnswerEvent

        Raises:
            InvalidStateError: If the cycle already has a correct buzz
            ValueError: If the marker isn't marked correct
        """
        if not marker.correct:
            raise ValueError(f'Buzz by {marker.player.name} is not marked correct')
        if self.correct_buzz is not None:
            raise InvalidStateError(
                f'Cycle already has a correct buzz by {self.correct_buzz.marker.player.name}; '
                'remove it before adding another'
            )

        self.correct_buzz = TossupAnswerEvent(marker=marker, tossup_index=tossup_index)
        if bonus_index is not None:
            self.bonus_answer = BonusAnswerEvent(receiving_team=marker.player.team_name)

        logger.debug(
            f'Correct buzz: {marker.player.name} ({marker.player.team_name}) on tossup '
            f'{tossup_index + 1} at word {marker.position + 1}'
        )
        return self.correct_buzz

    def remove_correct_buzz(self) -> None:
        """Remove the correct buzz and the bonus answer it earned."""
        if self.correct_buzz is None:
            return

        logger.debug(f'Removing correct buzz by {self.correct_buzz.marker.player.name}')
        self.correct_buzz = None
        self.bonus_answer = None

    def add_neg(self, marker: BuzzMarker, tossup_index: int) -> TossupAnswerEvent:
        """
        Record a penalised incorrect buzz.

        Raises:
            InvalidStateError: If the buzzing team already negged this cycle
            ValueError: If the marker is marked correct
        """
        if marker.correct:
            raise ValueError(f'Buzz by {marker.player.name} is marked correct, not a neg')

        team_name = marker.player.team_name
        if team_name in self.neg_buzzes:
            raise InvalidStateError(f'{team_name} already has a neg in this cycle')

        event = TossupAnswerEvent(marker=marker, tossup_index=tossup_index)
        self.incorrect_buzzes.append(event)
        self.neg_buzzes[team_name] = event
        logger.debug(f'Neg: {marker.player.name} ({team_name}) at word {marker.position + 1}')
        return event

    def add_no_penalty_buzz(self, marker: BuzzMarker, tossup_index: int) -> TossupAnswerEvent:
        """Record an incorrect buzz that doesn't cost the team points."""
        if marker.correct:
            raise ValueError(f'Buzz by {marker.player.name} is marked correct, not a wrong buzz')

        event = TossupAnswerEvent(marker=marker, tossup_index=tossup_index)
        self.incorrect_buzzes.append(event)
        logger.debug(
            f'No penalty buzz: {marker.player.name} ({marker.player.team_name}) '
            f'at word {marker.position + 1}'
        )
        return event

    def add_wrong_buzz(
        self, marker: BuzzMarker, tossup_index: int, question_length: int
    ) -> TossupAnswerEvent:
        """
        Record an incorrect buzz, deciding whether it's a neg.

        A buzz at or past the end of the question, or from a team that has
        already negged this cycle, is a no-penalty buzz. Anything else is a
        neg.

        Args:
            marker: Buzz marker with ``correct=False``
            tossup_index: Packet index of the tossup
            question_length: Number of words in the tossup

        Returns:
            The recorded TossupAnswerEvent
        """
        if marker.position >= question_length or marker.player.team_name in self.neg_buzzes:
            return self.add_no_penalty_buzz(marker, tossup_index)

        return self.add_neg(marker, tossup_index)

    def remove_wrong_buzz(self, player: Player) -> None:
        """Remove the first incorrect buzz by a player, clearing the neg if it was one."""
        for index, buzz in enumerate(self.incorrect_buzzes):
            if buzz.marker.player == player:
                del self.incorrect_buzzes[index]
                team_name = player.team_name
                if self.neg_buzzes.get(team_name) is buzz:
                    del self.neg_buzzes[team_name]
                logger.debug(f'Removed wrong buzz by {player.name} ({team_name})')
                return

    # Thrown out questions

    def add_thrown_out_tossup(self, question_index: int) -> None:
        self.thrown_out_tossups.append(ThrowOutQuestionEvent(question_index=question_index))
        logger.debug(f'Threw out tossup {question_index + 1}')

    def remove_thrown_out_tossup(self, question_index: int) -> None:
        _remove_first(
            self.thrown_out_tossups, lambda event: event.question_index == question_index
        )

    def add_thrown_out_bonus(self, question_index: int) -> None:
        self.thrown_out_bonuses.append(ThrowOutQuestionEvent(question_index=question_index))
        logger.debug(f'Threw out bonus {question_index + 1}')

    def remove_thrown_out_bonus(self, question_index: int) -> None:
        _remove_first(
            self.thrown_out_bonuses, lambda event: event.question_index == question_index
        )

    # Roster changes

    def add_swap_substitution(self, in_player: Player, out_player: Player) -> None:
        self.subs.append(SubstitutionEvent(in_player=in_player, out_player=out_player))
        logger.debug(
            f'Substitution ({in_player.team_name}): {in_player.name} in for {out_player.name}'
        )

    def remove_swap_substitution(self, in_player: Player, out_player: Player) -> None:
        _remove_first(
            self.subs,
            lambda sub: sub.in_player == in_player and sub.out_player == out_player,
        )

    def add_player_joins(self, player: Player) -> None:
        self.player_joins.append(PlayerJoinsEvent(in_player=player))

    def remove_player_joins(self, player: Player) -> None:
        _remove_first(self.player_joins, lambda join: join.in_player == player)

    def add_player_leaves(self, player: Player) -> None:
        self.player_leaves.append(PlayerLeavesEvent(out_player=player))

    def remove_player_leaves(self, player: Player) -> None:
        _remove_first(self.player_leaves, lambda leave: leave.out_player == player)

    # Bonus

    def set_bonus_answer(
        self,
        receiving_team: str,
        correct_parts: list[BonusAnswerPart],
    ) -> BonusAnswerEvent:
        """Replace the cycle's bonus answer."""
        self.bonus_answer = BonusAnswerEvent(
            receiving_team=receiving_team,
            correct_parts=sorted(correct_parts, key=lambda part: part.index),
        )
        return self.bonus_answer

    def set_bonus_part_answer(self, part_index: int, points: int, correct: bool) -> None:
        """
        Mark a single bonus part right or wrong.

        Raises:
            InvalidStateError: If no bonus answer has been started
        """
        if self.bonus_answer is None:
            raise InvalidStateError('No bonus answer to update; a correct buzz must come first')

        parts = [part for part in self.bonus_answer.correct_parts if part.index != part_index]
        if correct:
            parts.append(BonusAnswerPart(index=part_index, points=points))
        self.bonus_answer.correct_parts = sorted(parts, key=lambda part: part.index)

    # Protests

    def add_tossup_protest(
        self, team_name: str, question_index: int, position: int, reason: str
    ) -> TossupProtestEvent:
        """Record a team's tossup protest, replacing any earlier one from that team."""
        self.remove_tossup_protest(team_name)
        protest = TossupProtestEvent(
            team_name=team_name,
            question_index=question_index,
            position=position,
            reason=reason,
        )
        self.tossup_protests.append(protest)
        logger.debug(f'{team_name} protests tossup {question_index + 1} at word {position + 1}')
        return protest

    def remove_tossup_protest(self, team_name: str) -> None:
        self.tossup_protests = [
            protest for protest in self.tossup_protests if protest.team_name != team_name
        ]

    def add_bonus_protest(
        self, team_name: str, question_index: int, part: int, reason: str
    ) -> BonusProtestEvent:
        """Record a bonus protest, keyed by (team, part)."""
        self.remove_bonus_protest(team_name, part)
        protest = BonusProtestEvent(
            team_name=team_name,
            question_index=question_index,
            part=part,
            reason=reason,
        )
        self.bonus_protests.append(protest)
        logger.debug(f'{team_name} protests bonus {question_index + 1}, part {part + 1}')
        return protest

    def remove_bonus_protest(self, team_name: str, part: int) -> None:
        self.bonus_protests = [
            protest
            for protest in self.bonus_protests
            if not (protest.team_name == team_name and protest.part == part)
        ]


def _remove_first(events: list, matches) -> None:
    for index, event in enumerate(events):
        if matches(event):
            del events[index]
            return
