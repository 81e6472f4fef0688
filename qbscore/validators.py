"""Validation functions for rosters, cycles and whole matches."""

from .constants import MAX_TEAMS
from .errors import InconsistentRosterError, UnknownTeamError
from .game import GameState
from .models import Player


def validate_roster(players: list[Player], max_teams: int = MAX_TEAMS) -> list[str]:
    """
    Validate that a roster can be used for a match.

    Checks:
    - No more than two teams
    - No player listed twice on the same team
    - No blank player names

    Args:
        players: Full roster in entry order
        max_teams: Maximum number of teams allowed

    Returns:
        List of validation error messages (empty if valid)
    """
    errors = []

    team_names = sorted({player.team_name for player in players})
    if len(team_names) > max_teams:
        errors.append(
            f'Roster has {len(team_names)} teams ({", ".join(team_names)}); max {max_teams}'
        )

    seen = set()
    duplicates = set()
    for player in players:
        if not player.name.strip():
            errors.append(f'{player.team_name} has a player with a blank name')
            continue
        if player in seen:
            duplicates.add(f'{player.name} ({player.team_name})')
        seen.add(player)

    if duplicates:
        errors.append(f'Roster has duplicate players: {", ".join(sorted(duplicates))}')

    return errors


def validate_cycle(game: GameState, cycle_index: int) -> list[str]:
    """
    Check a cycle's events for things a reader probably got wrong.

    Sanity checks:
    - Buzzes come from active players, on tossups in the packet, at
      positions inside the question
    - A player doesn't have more than one wrong buzz
    - The bonus answer follows a correct buzz by the receiving team
    - Bonus part points don't exceed the part's value
    - Protests come from teams in the match

    Args:
        game: Match holding the cycle
        cycle_index: Zero-based cycle index

    Returns:
        List of warning messages (empty if no issues)

    Raises:
        InconsistentRosterError: If the roster changes up to this cycle
            reference players who aren't on their team
    """
    warnings = []
    cycle = game.get_cycle(cycle_index)
    label = f'Question {cycle_index + 1}'
    team_names = game.team_names

    for buzz in cycle.ordered_buzzes:
        player = buzz.marker.player
        if player.team_name not in team_names:
            # Reported as an error by validate_game
            continue

        if player not in game.active_players(player.team_name, cycle_index):
            warnings.append(f'{label}: {player.name} ({player.team_name}) buzzed but is not active')

        if buzz.tossup_index >= len(game.packet.tossups):
            warnings.append(
                f'{label}: buzz by {player.name} is on tossup {buzz.tossup_index + 1}, '
                'which is not in the packet'
            )
        else:
            length = game.packet.tossups[buzz.tossup_index].question_length
            if buzz.marker.position > length:
                warnings.append(
                    f'{label}: buzz by {player.name} at word {buzz.marker.position + 1} '
                    f'is past the end of the question ({length} words)'
                )

    wrong_buzzers = [buzz.marker.player for buzz in cycle.incorrect_buzzes]
    repeated = {player for player in wrong_buzzers if wrong_buzzers.count(player) > 1}
    for player in sorted(repeated, key=lambda p: (p.team_name, p.name)):
        warnings.append(f'{label}: {player.name} ({player.team_name}) has more than one wrong buzz')

    bonus_answer = cycle.bonus_answer
    if bonus_answer is not None:
        if cycle.correct_buzz is None:
            if bonus_answer.correct_parts:
                warnings.append(f'{label}: bonus answered without a correct tossup buzz')
        elif bonus_answer.receiving_team != cycle.correct_buzz.marker.player.team_name:
            warnings.append(
                f'{label}: bonus answered by {bonus_answer.receiving_team} but the tossup '
                f'was won by {cycle.correct_buzz.marker.player.team_name}'
            )

        bonus_index = game.bonus_index(cycle_index)
        if bonus_index is None:
            if bonus_answer.correct_parts:
                warnings.append(f'{label}: bonus answered but the packet has no bonus left')
        else:
            parts = game.packet.bonuses[bonus_index].parts
            for part in bonus_answer.correct_parts:
                if part.index >= len(parts):
                    warnings.append(
                        f'{label}: bonus {bonus_index + 1} has no part {part.index + 1}'
                    )
                elif part.points > parts[part.index].value:
                    warnings.append(
                        f'{label}: bonus {bonus_index + 1} part {part.index + 1} scored '
                        f'{part.points} pts (worth {parts[part.index].value})'
                    )

    protest_teams = [p.team_name for p in cycle.tossup_protests] + [
        p.team_name for p in cycle.bonus_protests
    ]
    for team_name in sorted(set(protest_teams)):
        if team_name not in team_names:
            warnings.append(f'{label}: protest from {team_name}, which is not in the match')

    return warnings


def validate_game(game: GameState) -> tuple[list[str], list[str]]:
    """
    Validate an entire match.

    Args:
        game: Match to validate

    Returns:
        Tuple of (errors, warnings)
        - errors: Problems that make the score unreliable (bad roster,
          roster changes for unknown players, buzzes from unknown teams)
        - warnings: Issues to review but not block scoring
    """
    errors: list[str] = validate_roster(game.players, max_teams=game.config.max_teams)
    warnings: list[str] = []

    for team_name in game.team_names:
        if not any(player.is_starter for player in game.get_players(team_name)):
            warnings.append(f'{team_name} has no starters')

    if not game.cycles:
        return errors, warnings

    last_cycle = len(game.cycles) - 1
    roster_ok = True
    for team_name in game.team_names:
        try:
            game.active_players(team_name, last_cycle)
        except InconsistentRosterError as e:
            errors.append(str(e))
            roster_ok = False

    for cycle_index in range(len(game.cycles)):
        try:
            game.score_change(cycle_index)
        except UnknownTeamError as e:
            errors.append(f'Question {cycle_index + 1}: {e}')

        if roster_ok:
            warnings.extend(validate_cycle(game, cycle_index))

    return errors, warnings
