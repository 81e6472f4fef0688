"""Saving and restoring matches as JSON.

A saved match holds the packet, the roster and every cycle. On load each
event is rebuilt as its typed record, and each team's neg is linked back to
the matching entry of the cycle's incorrect buzzes.
"""

import logging
from pathlib import Path
from typing import Optional

from .cycle import Cycle
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
from .game import GameState
from .models import Bonus, BonusPart, BuzzMarker, PacketState, Player, Tossup
from .schemas import (
    BonusAnswerEventSchema,
    BonusAnswerPartSchema,
    BonusPartSchema,
    BonusProtestEventSchema,
    BonusSchema,
    BuzzMarkerSchema,
    CycleSchema,
    GameSnapshot,
    MatchConfig,
    PacketSchema,
    PlayerJoinsEventSchema,
    PlayerLeavesEventSchema,
    PlayerSchema,
    RosterFile,
    SubstitutionEventSchema,
    ThrowOutQuestionEventSchema,
    TossupAnswerEventSchema,
    TossupProtestEventSchema,
    TossupSchema,
    WrongBuzzSchema,
)
from .utils import load_json, save_json

logger = logging.getLogger('qbscore.snapshot')


# Model -> schema

def _player_to_schema(player: Player) -> PlayerSchema:
    return PlayerSchema(name=player.name, team_name=player.team_name, is_starter=player.is_starter)


def _buzz_to_schema(buzz: TossupAnswerEvent) -> TossupAnswerEventSchema:
    return TossupAnswerEventSchema(
        marker=BuzzMarkerSchema(
            player=_player_to_schema(buzz.marker.player),
            position=buzz.marker.position,
            correct=buzz.marker.correct,
        ),
        tossup_index=buzz.tossup_index,
    )


def packet_to_schema(packet: PacketState) -> PacketSchema:
    return PacketSchema(
        tossups=[TossupSchema(question=t.question, answer=t.answer) for t in packet.tossups],
        bonuses=[
            BonusSchema(
                leadin=bonus.leadin,
                parts=[
                    BonusPartSchema(text=part.text, answer=part.answer, value=part.value)
                    for part in bonus.parts
                ],
            )
            for bonus in packet.bonuses
        ],
    )


def cycle_to_schema(cycle: Cycle) -> CycleSchema:
    """Convert a cycle, flagging which incorrect buzzes are negs."""
    incorrect_buzzes = []
    for buzz in cycle.incorrect_buzzes:
        base = _buzz_to_schema(buzz)
        incorrect_buzzes.append(
            WrongBuzzSchema(
                marker=base.marker,
                tossup_index=base.tossup_index,
                is_neg=cycle.is_neg(buzz),
            )
        )

    bonus_answer = None
    if cycle.bonus_answer is not None:
        bonus_answer = BonusAnswerEventSchema(
            receiving_team=cycle.bonus_answer.receiving_team,
            correct_parts=[
                BonusAnswerPartSchema(index=part.index, points=part.points)
                for part in cycle.bonus_answer.correct_parts
            ],
        )

    return CycleSchema(
        subs=[
            SubstitutionEventSchema(
                in_player=_player_to_schema(sub.in_player),
                out_player=_player_to_schema(sub.out_player),
            )
            for sub in cycle.subs
        ],
        player_joins=[
            PlayerJoinsEventSchema(in_player=_player_to_schema(join.in_player))
            for join in cycle.player_joins
        ],
        player_leaves=[
            PlayerLeavesEventSchema(out_player=_player_to_schema(leave.out_player))
            for leave in cycle.player_leaves
        ],
        correct_buzz=_buzz_to_schema(cycle.correct_buzz) if cycle.correct_buzz is not None else None,
        incorrect_buzzes=incorrect_buzzes,
        thrown_out_tossups=[
            ThrowOutQuestionEventSchema(question_index=e.question_index)
            for e in cycle.thrown_out_tossups
        ],
        thrown_out_bonuses=[
            ThrowOutQuestionEventSchema(question_index=e.question_index)
            for e in cycle.thrown_out_bonuses
        ],
        bonus_answer=bonus_answer,
        tossup_protests=[
            TossupProtestEventSchema(
                team_name=p.team_name,
                question_index=p.question_index,
                position=p.position,
                reason=p.reason,
            )
            for p in cycle.tossup_protests
        ],
        bonus_protests=[
            BonusProtestEventSchema(
                team_name=p.team_name,
                question_index=p.question_index,
                part=p.part,
                reason=p.reason,
            )
            for p in cycle.bonus_protests
        ],
    )


def game_to_snapshot(game: GameState) -> GameSnapshot:
    return GameSnapshot(
        packet=packet_to_schema(game.packet),
        players=[_player_to_schema(player) for player in game.players],
        cycles=[cycle_to_schema(cycle) for cycle in game.cycles],
    )


# Schema -> model

def _player_from_schema(schema: PlayerSchema) -> Player:
    return Player(name=schema.name, team_name=schema.team_name, is_starter=schema.is_starter)


def _buzz_from_schema(schema: TossupAnswerEventSchema) -> TossupAnswerEvent:
    return TossupAnswerEvent(
        marker=BuzzMarker(
            player=_player_from_schema(schema.marker.player),
            position=schema.marker.position,
            correct=schema.marker.correct,
        ),
        tossup_index=schema.tossup_index,
    )


def packet_from_schema(schema: PacketSchema) -> PacketState:
    return PacketState(
        tossups=tuple(Tossup(question=t.question, answer=t.answer) for t in schema.tossups),
        bonuses=tuple(
            Bonus(
                leadin=bonus.leadin,
                parts=tuple(
                    BonusPart(text=part.text, answer=part.answer, value=part.value)
                    for part in bonus.parts
                ),
            )
            for bonus in schema.bonuses
        ),
    )


def cycle_from_schema(schema: CycleSchema) -> Cycle:
    """Rebuild a cycle with typed events and its per-team negs."""
    cycle = Cycle(
        subs=[
            SubstitutionEvent(
                in_player=_player_from_schema(sub.in_player),
                out_player=_player_from_schema(sub.out_player),
            )
            for sub in schema.subs
        ],
        player_joins=[
            PlayerJoinsEvent(in_player=_player_from_schema(join.in_player))
            for join in schema.player_joins
        ],
        player_leaves=[
            PlayerLeavesEvent(out_player=_player_from_schema(leave.out_player))
            for leave in schema.player_leaves
        ],
        correct_buzz=_buzz_from_schema(schema.correct_buzz) if schema.correct_buzz is not None else None,
        thrown_out_tossups=[
            ThrowOutQuestionEvent(question_index=e.question_index)
            for e in schema.thrown_out_tossups
        ],
        thrown_out_bonuses=[
            ThrowOutQuestionEvent(question_index=e.question_index)
            for e in schema.thrown_out_bonuses
        ],
        tossup_protests=[
            TossupProtestEvent(
                team_name=p.team_name,
                question_index=p.question_index,
                position=p.position,
                reason=p.reason,
            )
            for p in schema.tossup_protests
        ],
        bonus_protests=[
            BonusProtestEvent(
                team_name=p.team_name,
                question_index=p.question_index,
                part=p.part,
                reason=p.reason,
            )
            for p in schema.bonus_protests
        ],
    )

    for buzz_schema in schema.incorrect_buzzes:
        buzz = _buzz_from_schema(buzz_schema)
        cycle.incorrect_buzzes.append(buzz)
        if buzz_schema.is_neg:
            cycle.neg_buzzes[buzz.marker.player.team_name] = buzz

    if schema.bonus_answer is not None:
        cycle.bonus_answer = BonusAnswerEvent(
            receiving_team=schema.bonus_answer.receiving_team,
            correct_parts=[
                BonusAnswerPart(index=part.index, points=part.points)
                for part in schema.bonus_answer.correct_parts
            ],
        )

    return cycle


def game_from_snapshot(snapshot: GameSnapshot, config: Optional[MatchConfig] = None) -> GameState:
    """
    Rebuild a match from a snapshot.

    Cycles are restored as saved rather than regenerated, so a snapshot
    with more cycles than tossups keeps all of them.
    """
    game = GameState(config=config)
    game.add_players(_player_from_schema(player) for player in snapshot.players)
    game.cycles = [cycle_from_schema(cycle) for cycle in snapshot.cycles]
    game.load_packet(packet_from_schema(snapshot.packet))
    return game


# Files

def save_game(path: Path | str, game: GameState) -> None:
    """Write a match to a JSON file."""
    save_json(path, game_to_snapshot(game))
    logger.info(f'Saved match with {len(game.cycles)} cycles to {path}')


def load_game(path: Path | str, config: Optional[MatchConfig] = None) -> GameState:
    """
    Load a match from a JSON file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file doesn't match the GameSnapshot schema
    """
    snapshot = load_json(path, schema=GameSnapshot)
    game = game_from_snapshot(snapshot, config=config)
    logger.info(f'Loaded match with {len(game.cycles)} cycles from {path}')
    return game


def load_packet(path: Path | str) -> PacketState:
    """Load a packet file (same shape as a snapshot's ``packet``)."""
    return packet_from_schema(load_json(path, schema=PacketSchema))


def load_roster(path: Path | str) -> list[Player]:
    """Load a roster file: ``{"players": [{"name", "team_name", "is_starter"}]}``."""
    roster = load_json(path, schema=RosterFile)
    return [_player_from_schema(player) for player in roster.players]
