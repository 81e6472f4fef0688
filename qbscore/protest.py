"""Pending protest that a reader is filling in before it goes into the log."""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Union

from .events import BonusProtestEvent, TossupProtestEvent

if TYPE_CHECKING:
    from .game import GameState

logger = logging.getLogger('qbscore.protest')


@dataclass
class PendingTossupProtest:
    team_name: str
    cycle_index: int
    question_index: int
    position: int
    reason: str = ''


@dataclass
class PendingBonusProtest:
    team_name: str
    cycle_index: int
    question_index: int
    part: int
    reason: str = ''


PendingProtest = Union[PendingTossupProtest, PendingBonusProtest]


class ProtestStaging:
    """
    Holds at most one protest that hasn't been committed yet.

    Starting a new protest replaces an uncommitted one without complaint.
    """

    def __init__(self):
        self.pending: Optional[PendingProtest] = None

    @property
    def has_pending(self) -> bool:
        return self.pending is not None

    def start_tossup_protest(
        self, team_name: str, cycle_index: int, question_index: int, position: int
    ) -> PendingTossupProtest:
        self._discard_pending()
        self.pending = PendingTossupProtest(
            team_name=team_name,
            cycle_index=cycle_index,
            question_index=question_index,
            position=position,
        )
        return self.pending

    def start_bonus_protest(
        self, team_name: str, cycle_index: int, question_index: int, part: int
    ) -> PendingBonusProtest:
        self._discard_pending()
        self.pending = PendingBonusProtest(
            team_name=team_name,
            cycle_index=cycle_index,
            question_index=question_index,
            part=part,
        )
        return self.pending

    def update_reason(self, reason: str) -> None:
        """Update the reason on the pending protest (ignored if nothing is pending)."""
        if self.pending is not None:
            self.pending.reason = reason

    def commit(
        self, game: 'GameState'
    ) -> Optional[Union[TossupProtestEvent, BonusProtestEvent]]:
        """
        Write the pending protest into its cycle and clear the slot.

        Args:
            game: Match holding the cycle the protest belongs to

        Returns:
            The recorded protest event, or None if nothing was pending

        Raises:
            IndexOutOfRangeError: If the protest's cycle doesn't exist
        """
        pending = self.pending
        if pending is None:
            return None

        cycle = game.get_cycle(pending.cycle_index)
        if isinstance(pending, PendingTossupProtest):
            event = cycle.add_tossup_protest(
                pending.team_name, pending.question_index, pending.position, pending.reason
            )
        else:
            event = cycle.add_bonus_protest(
                pending.team_name, pending.question_index, pending.part, pending.reason
            )

        self.pending = None
        return event

    def cancel(self) -> None:
        self.pending = None

    def _discard_pending(self) -> None:
        if self.pending is not None:
            logger.debug(f'Discarding uncommitted protest from {self.pending.team_name}')
