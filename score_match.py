#!/usr/bin/env python3
"""
Quiz bowl match scorer CLI

Loads a saved match (packet, roster and cycle log), prints the score after
every question, checks the log for mistakes, and optionally writes an Excel
scoresheet.

Usage:
    python score_match.py matches/round_3.json
    python score_match.py matches/round_3.json --export scoresheets/round_3.xlsx
"""

import argparse
import logging
import sys
from pathlib import Path

from qbscore import GameState, TossupAnswerEvent, export_scoresheet, load_game, validate_game
from qbscore.constants import END_OF_QUESTION_MARKER
from qbscore.logging_config import setup_logging


def _buzz_position(game: GameState, buzz: TossupAnswerEvent) -> str:
    tossups = game.packet.tossups
    if buzz.tossup_index < len(tossups):
        if buzz.marker.position >= tossups[buzz.tossup_index].question_length:
            return END_OF_QUESTION_MARKER
    return f'word {buzz.marker.position + 1}'


def describe_cycle(game: GameState, cycle_index: int) -> list[str]:
    """One line per buzz, thrown-out question and bonus in a cycle."""
    cycle = game.cycles[cycle_index]
    lines = []

    for event in cycle.thrown_out_tossups:
        lines.append(f'Threw out tossup #{event.question_index + 1}')

    for buzz in cycle.ordered_buzzes:
        player = buzz.marker.player
        if buzz.marker.correct:
            result = 'CORRECTLY'
        elif cycle.is_neg(buzz):
            result = 'WRONGLY (neg)'
        else:
            result = 'WRONGLY (no penalty)'
        lines.append(
            f'{player.name} ({player.team_name}) answered {result} on tossup '
            f'#{buzz.tossup_index + 1} at {_buzz_position(game, buzz)}'
        )

    for event in cycle.thrown_out_bonuses:
        lines.append(f'Threw out bonus #{event.question_index + 1}')

    if cycle.bonus_answer is not None and cycle.correct_buzz is not None:
        parts = ', '.join(str(part.index + 1) for part in cycle.bonus_answer.correct_parts)
        parts_text = f'parts {parts}' if parts else 'no parts'
        bonus_index = game.bonus_index(cycle_index)
        bonus_text = f' of bonus #{bonus_index + 1}' if bonus_index is not None else ''
        lines.append(
            f'{cycle.bonus_answer.receiving_team} answered {parts_text}{bonus_text} correctly '
            f'for {cycle.bonus_answer.total_points} points'
        )

    for protest in cycle.tossup_protests:
        lines.append(
            f'{protest.team_name} protests tossup #{protest.question_index + 1} '
            f'at word {protest.position + 1}'
        )
    for protest in cycle.bonus_protests:
        lines.append(
            f'{protest.team_name} protests bonus #{protest.question_index + 1}, '
            f'part {protest.part + 1}'
        )

    return lines


def main():
    parser = argparse.ArgumentParser(description="Score a saved quiz bowl match")
    parser.add_argument(
        "match",
        help="Path to the saved match JSON",
    )
    parser.add_argument(
        "--export", "-e",
        default=None,
        help="Write an Excel scoresheet to this path",
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Only print the final score",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )

    args = parser.parse_args()
    setup_logging(level=getattr(logging, args.log_level), log_to_file=False)

    match_path = Path(args.match)
    if not match_path.exists():
        print(f"❌ Match file not found: {match_path}")
        sys.exit(1)

    game = load_game(match_path)
    team_names = game.team_names

    errors, warnings = validate_game(game)
    if errors:
        for error in errors:
            print(f"❌ {error}")
        sys.exit(1)

    if not args.quiet:
        for cycle_index, totals in enumerate(game.cumulative_scores()):
            print(f"\nQuestion #{cycle_index + 1}")
            for line in describe_cycle(game, cycle_index):
                print(f"  {line}")
            score_text = ", ".join(f"{name} {total}" for name, total in zip(team_names, totals))
            print(f"  Score: {score_text}")

    print("\n" + "=" * 60)
    print("FINAL SCORE")
    print("=" * 60)
    for name, total in zip(team_names, game.final_score):
        print(f"  {name}: {total}")

    for warning in warnings:
        print(f"⚠️  {warning}")

    if args.export:
        export_scoresheet(game, args.export)
        print(f"\nScoresheet saved to {args.export}")


if __name__ == "__main__":
    main()
