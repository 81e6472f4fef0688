"""Scoring functions for a single cycle."""

from typing import Dict, Sequence, Tuple

from .constants import CORRECT_BUZZ_POINTS, MAX_TEAMS, NEG_BUZZ_POINTS
from .cycle import Cycle
from .errors import UnknownTeamError


def score_cycle(
    cycle: Cycle,
    team_names: Sequence[str],
    correct_points: int = CORRECT_BUZZ_POINTS,
    neg_points: int = NEG_BUZZ_POINTS,
) -> Tuple[Tuple[int, ...], Dict[str, Dict[str, int]]]:
    """
    Score one cycle for every team.

    Scoring:
        - Correct buzz: +10 to the buzzing team
        - Bonus: sum of the correct parts, to the team with the correct buzz
        - Neg: -5 to each team with a penalised buzz
        - No-penalty buzz: 0

    Args:
        cycle: Cycle to score
        team_names: Team names in score order (sorted, as GameState.team_names)
        correct_points: Points for a correct buzz
        neg_points: Points for a neg

    Returns:
        Tuple of (change, breakdown)
        - change: Points per team, in ``team_names`` order (at least two entries)
        - breakdown: team name -> {'tossup': points, 'bonus': points}

    Raises:
        UnknownTeamError: If a buzz belongs to a team not in ``team_names``
    """
    change = [0] * max(len(team_names), MAX_TEAMS)
    breakdown: Dict[str, Dict[str, int]] = {
        team_name: {'tossup': 0, 'bonus': 0} for team_name in team_names
    }

    if cycle.correct_buzz is not None:
        team_name = cycle.correct_buzz.marker.player.team_name
        index = _team_index(team_names, team_name, 'Correct buzz')

        change[index] += correct_points
        breakdown[team_name]['tossup'] += correct_points

        # Bonus points only count when the tossup was won
        if cycle.bonus_answer is not None:
            bonus_points = score_bonus(cycle)
            change[index] += bonus_points
            breakdown[team_name]['bonus'] += bonus_points

    for neg in cycle.neg_buzzes.values():
        team_name = neg.marker.player.team_name
        index = _team_index(team_names, team_name, 'Neg')
        change[index] += neg_points
        breakdown[team_name]['tossup'] += neg_points

    return tuple(change), breakdown


def score_bonus(cycle: Cycle) -> int:
    """Total points earned on the cycle's bonus (0 if there's no answer)."""
    if cycle.bonus_answer is None:
        return 0
    return cycle.bonus_answer.total_points


def _team_index(team_names: Sequence[str], team_name: str, what: str) -> int:
    try:
        return list(team_names).index(team_name)
    except ValueError:
        raise UnknownTeamError(f'{what} belongs to a non-existent team {team_name}') from None
