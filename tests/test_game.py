"""Tests for match-level derivations: rosters, question indexes and scores."""

import logging

import pytest

from qbscore.errors import (
    InconsistentRosterError,
    IndexOutOfRangeError,
    InvalidStateError,
    UnknownTeamError,
)
from qbscore.events import BonusAnswerPart
from qbscore.game import GameState
from qbscore.models import BuzzMarker, PacketState, Player, Tossup
from qbscore.schemas import MatchConfig


class TestScenarios:
    """End-to-end scoring scenarios."""

    def test_correct_buzz_with_bonus(self, packet):
        """Scenario A: correct buzz plus one bonus part is worth 20."""
        alice = Player('Alice', 'Team1', is_starter=True)
        bob = Player('Bob', 'Team1')
        carol = Player('Carol', 'Team2', is_starter=True)
        game = GameState()
        game.add_players([alice, bob, carol])
        game.load_packet(packet)

        game.add_buzz(0, alice, 5, correct=True)
        game.cycles[0].set_bonus_answer('Team1', [BonusAnswerPart(index=0, points=10)])

        assert game.score_change(0) == (20, 0)

    def test_neg_then_correct(self, game, bob, carol):
        """Scenario B: a neg by one team then a correct buzz by the other."""
        game.add_buzz(0, bob, 3, correct=False)
        game.add_buzz(0, carol, 10, correct=True)

        assert game.cycles[0].neg_buzz_for('Team1') is not None
        assert game.score_change(0) == (-5, 10)

    def test_wrong_buzz_at_end_is_no_penalty(self, game, bob, packet):
        """Scenario C: a wrong buzz after the last word costs nothing."""
        length = packet.tossups[0].question_length
        event = game.add_buzz(0, bob, length, correct=False)

        cycle = game.cycles[0]
        assert event in cycle.incorrect_buzzes
        assert cycle.neg_buzzes == {}
        assert game.score_change(0) == (0, 0)

    def test_substitution_changes_active_roster(self, game, bob, dave):
        """Scenario D: a substitution in cycle 2 takes effect from cycle 2."""
        game.cycles[2].add_swap_substitution(dave, bob)

        before = game.active_players('Team1', 1)
        after = game.active_players('Team1', 2)
        assert bob in before and dave not in before
        assert dave in after and bob not in after

    def test_thrown_out_tossup_shifts_index(self, game):
        """Scenario E: throwing out a tossup in cycle 0 shifts later cycles."""
        game.throw_out_tossup(0)
        assert game.tossup_index(1) == 2


class TestActivePlayers:
    """Tests for replaying roster changes."""

    def test_starters_only_at_start(self, game, alice, bob, dave):
        """Test the opening lineup is the starters."""
        assert game.active_players('Team1', 0) == {alice, bob}

    def test_join_and_leave(self, game, alice, dave):
        """Test leaves and joins apply from their cycle onward."""
        game.cycles[1].add_player_leaves(alice)
        game.cycles[3].add_player_joins(dave)

        assert alice in game.active_players('Team1', 0)
        assert alice not in game.active_players('Team1', 1)
        assert dave not in game.active_players('Team1', 2)
        assert dave in game.active_players('Team1', 3)

    def test_leave_applied_before_join(self, game, alice):
        """Test a leave and join of the same player in one cycle leaves them active."""
        game.cycles[1].add_player_leaves(alice)
        game.cycles[1].add_player_joins(alice)
        assert alice in game.active_players('Team1', 1)

    def test_other_team_changes_ignored(self, game, carol, alice):
        """Test roster changes for one team don't affect the other."""
        game.cycles[0].add_player_leaves(carol)
        assert game.active_players('Team1', 0) == {alice, Player('Bob', 'Team1')}
        assert game.active_players('Team2', 0) == set()

    def test_no_duplicates_or_outsiders(self, game, alice, bob, dave):
        """Test repeated joins don't duplicate and only team members appear."""
        game.cycles[0].add_player_joins(dave)
        game.cycles[1].add_player_joins(dave)
        game.cycles[2].add_swap_substitution(dave, alice)
        game.cycles[3].add_swap_substitution(alice, bob)

        roster = set(game.get_players('Team1'))
        for cycle_index in range(len(game.cycles)):
            active = game.active_players('Team1', cycle_index)
            assert active <= roster
        assert game.active_players('Team1', 3) == {alice, dave}

    def test_returns_roster_instances(self, game):
        """Test active players carry the roster's starter flags."""
        active = game.active_players('Team2', 0)
        assert all(player.is_starter for player in active)

    def test_unknown_player_joins(self, game):
        """Test joining a player who isn't on the team fails."""
        game.cycles[1].add_player_joins(Player('Eve', 'Team1'))
        with pytest.raises(InconsistentRosterError, match='Eve'):
            game.active_players('Team1', 1)

    def test_unknown_player_leaves(self, game):
        game.cycles[0].add_player_leaves(Player('Eve', 'Team1'))
        with pytest.raises(InconsistentRosterError):
            game.active_players('Team1', 0)

    def test_substitute_out_player_from_other_team(self, game, dave, carol):
        """Test a substitution can't swap in a player for the other team's player."""
        game.cycles[0].add_swap_substitution(dave, carol)
        with pytest.raises(InconsistentRosterError, match='substitute out'):
            game.active_players('Team1', 0)

    def test_error_only_once_reached(self, game):
        """Test a bad roster change in a later cycle doesn't affect earlier queries."""
        game.cycles[3].add_player_joins(Player('Eve', 'Team1'))
        assert game.active_players('Team1', 2)

    def test_past_recorded_cycles_is_empty(self, game):
        """Test querying a cycle that doesn't exist yet returns nobody."""
        assert game.active_players('Team1', len(game.cycles)) == set()
        assert GameState().active_players('Team1', 0) == set()

    def test_negative_index(self, game):
        with pytest.raises(IndexOutOfRangeError):
            game.active_players('Team1', -1)


class TestQuestionIndexes:
    """Tests for cycle to packet index mapping."""

    def test_no_throw_outs(self, game):
        assert [game.tossup_index(i) for i in range(5)] == [0, 1, 2, 3, 4]

    def test_tossup_index_monotonic(self, game):
        """Test each throw-out shifts the index from its own cycle onward."""
        game.cycles[1].add_thrown_out_tossup(1)
        game.cycles[3].add_thrown_out_tossup(4)
        game.cycles[3].add_thrown_out_tossup(5)

        indexes = [game.tossup_index(i) for i in range(5)]
        assert indexes == [0, 2, 3, 6, 7]
        assert indexes == sorted(indexes)

    def test_get_tossup_past_packet(self, game, packet):
        """Test running out of tossups returns None."""
        assert game.get_tossup(0) is packet.tossups[0]
        game.cycles[0].add_thrown_out_tossup(0)
        assert game.get_tossup(4) is None

    def test_bonus_index_follows_previous_correct_buzzes(self, game, alice, carol):
        """Test a cycle's bonus index counts correct buzzes in earlier cycles only."""
        game.add_buzz(0, alice, 5, correct=True)
        assert game.bonus_index(0) == 0
        assert game.bonus_index(1) == 1

        game.add_buzz(1, carol, 5, correct=True)
        assert game.bonus_index(1) == 1
        assert game.bonus_index(2) == 2

    def test_bonus_index_skips_dead_tossups(self, game, alice):
        """Test a cycle without a correct buzz doesn't use a bonus."""
        game.add_buzz(1, alice, 5, correct=True)
        assert game.bonus_index(1) == 0
        assert game.bonus_index(2) == 1

    def test_thrown_out_bonus_counts_in_same_cycle(self, game, alice):
        """Test a thrown-out bonus moves the bonus index in its own cycle."""
        game.add_buzz(0, alice, 5, correct=True)
        game.throw_out_bonus(0)
        assert game.cycles[0].thrown_out_bonuses[0].question_index == 0
        assert game.bonus_index(0) == 1
        assert game.get_bonus(0) is game.packet.bonuses[1]

    def test_bonus_index_none_once_exhausted(self, game, alice):
        """Test bonuses run out and stay out."""
        for cycle_index in range(3):
            game.add_buzz(cycle_index, alice, 5, correct=True)

        assert game.bonus_index(2) == 2
        assert game.bonus_index(3) is None
        assert game.bonus_index(4) is None
        assert game.get_bonus(4) is None

    def test_correct_buzz_without_bonus_left(self, game, alice):
        """Test a correct buzz after the bonuses run out starts no bonus answer."""
        for cycle_index in range(4):
            game.add_buzz(cycle_index, alice, 5, correct=True)
        assert game.cycles[2].bonus_answer is not None
        assert game.cycles[3].bonus_answer is None

    def test_throw_out_bonus_resets_answer(self, game, alice):
        """Test parts marked on a thrown-out bonus no longer score."""
        game.add_buzz(0, alice, 5, correct=True)
        game.cycles[0].set_bonus_part_answer(0, 10, correct=True)
        assert game.score_change(0) == (20, 0)

        game.throw_out_bonus(0)

        answer = game.cycles[0].bonus_answer
        assert game.bonus_index(0) == 1
        assert answer.receiving_team == 'Team1'
        assert answer.correct_parts == []
        assert game.score_change(0) == (10, 0)

    def test_throw_out_last_bonus_drops_answer(self, game, alice):
        """Test throwing out the packet's last bonus leaves nothing to answer."""
        game.packet = PacketState(tossups=game.packet.tossups, bonuses=game.packet.bonuses[:1])
        game.add_buzz(0, alice, 5, correct=True)
        game.cycles[0].set_bonus_part_answer(2, 10, correct=True)

        game.throw_out_bonus(0)

        assert game.bonus_index(0) is None
        assert game.cycles[0].bonus_answer is None
        assert game.score_change(0) == (10, 0)

    def test_bonus_follows_earlier_edits(self, game, alice, carol):
        """Test removing an earlier correct buzz moves later cycles back a bonus."""
        game.add_buzz(0, alice, 5, correct=True)
        game.add_buzz(1, carol, 5, correct=True)
        assert game.get_bonus(1) is game.packet.bonuses[1]

        game.cycles[0].remove_correct_buzz()
        assert game.get_bonus(1) is game.packet.bonuses[0]

    def test_throw_out_bonus_when_none_left(self, game):
        game.packet = PacketState(tossups=game.packet.tossups, bonuses=())
        with pytest.raises(IndexOutOfRangeError):
            game.throw_out_bonus(0)


class TestScores:
    """Tests for score changes and running totals."""

    def test_cumulative_scores(self, game, alice, bob, carol):
        """Test running totals across cycles."""
        game.add_buzz(0, alice, 5, correct=True)
        game.cycles[0].set_bonus_part_answer(0, 10, correct=True)
        game.cycles[0].set_bonus_part_answer(1, 10, correct=True)
        game.add_buzz(1, bob, 2, correct=False)
        game.add_buzz(1, carol, 20, correct=True)
        game.add_buzz(2, carol, 4, correct=False)

        assert game.cumulative_scores() == [(30, 0), (25, 10), (25, 5), (25, 5), (25, 5)]
        assert game.final_score == (25, 5)

    def test_cumulative_matches_score_changes(self, game, alice, bob, carol):
        """Test each running total differs from the last by that cycle's change."""
        game.add_buzz(0, bob, 1, correct=False)
        game.add_buzz(0, carol, 1, correct=False)
        game.add_buzz(1, carol, 9, correct=True)
        game.cycles[1].set_bonus_part_answer(2, 10, correct=True)
        game.add_buzz(3, alice, 25, correct=False)
        game.add_buzz(3, bob, 25, correct=True)

        scores = game.cumulative_scores()
        assert len(scores) == len(game.cycles)
        previous = (0, 0)
        for cycle_index, totals in enumerate(scores):
            change = game.score_change(cycle_index)
            assert tuple(t - p for t, p in zip(totals, previous)) == change
            previous = totals

    def test_both_teams_neg(self, game, bob, carol):
        """Test each team's neg is counted."""
        game.add_buzz(0, bob, 3, correct=False)
        game.add_buzz(0, carol, 8, correct=False)
        assert game.score_change(0) == (-5, -5)

    def test_only_one_neg_per_team(self, game, alice, bob):
        """Test two wrong buzzes from one team only cost one neg."""
        game.add_buzz(0, bob, 3, correct=False)
        game.add_buzz(0, alice, 8, correct=False)
        assert game.score_change(0) == (-5, 0)

    def test_bonus_ignored_without_correct_buzz(self, game):
        """Test a bonus answer with no correct buzz scores nothing."""
        game.cycles[0].set_bonus_answer('Team1', [BonusAnswerPart(0, 10)])
        assert game.score_change(0) == (0, 0)

    def test_unknown_team(self, game):
        """Test scoring a buzz from a team not in the roster fails."""
        stranger = Player('Zed', 'Team3')
        game.cycles[0].add_correct_buzz(BuzzMarker(stranger, 4, True), 0)
        with pytest.raises(UnknownTeamError, match='Team3'):
            game.score_change(0)

    def test_unknown_team_neg(self, game):
        stranger = Player('Zed', 'Team3')
        game.cycles[0].add_neg(BuzzMarker(stranger, 4, False), 0)
        with pytest.raises(UnknownTeamError):
            game.cumulative_scores()

    def test_out_of_range_cycle_scores_zero(self, game):
        assert game.score_change(len(game.cycles)) == (0, 0)

    def test_final_score_without_cycles(self):
        """Test a match with no cycles has a zero final score."""
        game = GameState()
        assert game.cumulative_scores() == []
        assert game.final_score == (0, 0)

    def test_configured_points(self, packet, alice, carol):
        """Test tossup values come from the match config."""
        game = GameState(config=MatchConfig(correct_points=15, neg_points=-10))
        game.add_players([alice, carol])
        game.load_packet(packet)
        game.add_buzz(0, alice, 2, correct=False)
        game.add_buzz(0, carol, 6, correct=True)
        assert game.score_change(0) == (-10, 15)

    def test_score_breakdown(self, game, alice):
        """Test the tossup/bonus split per team."""
        game.add_buzz(0, alice, 5, correct=True)
        game.cycles[0].set_bonus_part_answer(1, 10, correct=True)
        change, breakdown = game.score_breakdown(0)
        assert change == (20, 0)
        assert breakdown == {
            'Team1': {'tossup': 10, 'bonus': 10},
            'Team2': {'tossup': 0, 'bonus': 0},
        }


class TestRecording:
    """Tests for setup and buzz recording through the match."""

    def test_team_names_sorted(self):
        game = GameState()
        game.add_player(Player('Zoe', 'Zebras'))
        game.add_player(Player('Al', 'Aardvarks'))
        game.add_player(Player('Ann', 'Aardvarks'))
        assert game.team_names == ['Aardvarks', 'Zebras']

    def test_load_packet_creates_cycles(self, packet):
        game = GameState()
        assert not game.is_loaded
        game.load_packet(packet)
        assert game.is_loaded
        assert len(game.cycles) == len(packet.tossups)

    def test_reload_smaller_packet_keeps_cycles(self, game, alice):
        """Test replacing the packet never drops recorded cycles."""
        game.add_buzz(4, alice, 3, correct=True)
        game.load_packet(PacketState(tossups=(Tossup('One two three', 'Answer'),)))
        assert len(game.cycles) == 5
        assert game.cycles[4].correct_buzz is not None

    def test_reload_larger_packet_adds_cycles(self, game, packet):
        bigger = PacketState(tossups=packet.tossups * 2, bonuses=packet.bonuses)
        first_cycle = game.cycles[0]
        game.load_packet(bigger)
        assert len(game.cycles) == 10
        assert game.cycles[0] is first_cycle

    def test_clear(self, game):
        game.clear()
        assert game.players == []
        assert game.cycles == []
        assert not game.is_loaded

    def test_add_buzz_position_out_of_range(self, game, alice, packet):
        """Test buzzes past the end-of-question marker are rejected."""
        with pytest.raises(IndexOutOfRangeError):
            game.add_buzz(0, alice, packet.tossups[0].question_length + 1, correct=True)

    def test_add_buzz_unknown_cycle(self, game, alice):
        with pytest.raises(IndexOutOfRangeError):
            game.add_buzz(10, alice, 1, correct=True)

    def test_add_buzz_second_correct(self, game, alice, carol):
        game.add_buzz(0, alice, 5, correct=True)
        with pytest.raises(InvalidStateError):
            game.add_buzz(0, carol, 6, correct=True)

    def test_add_buzz_uses_shifted_tossup_index(self, game, alice):
        """Test buzzes are tagged with the packet tossup actually read."""
        game.throw_out_tossup(1)
        event = game.add_buzz(1, alice, 5, correct=True)
        assert event.tossup_index == 2

    def test_add_buzz_inactive_player_warns(self, game, dave, caplog):
        """Test a buzz from a bench player is recorded but logged."""
        with caplog.at_level(logging.WARNING, logger='qbscore.game'):
            game.add_buzz(0, dave, 5, correct=True)
        assert game.cycles[0].correct_buzz is not None
        assert 'not an active player' in caplog.text

    def test_add_buzz_with_bad_roster_change_still_records(self, game, alice, caplog):
        """Test an unknown player in a roster change doesn't block recording a buzz."""
        game.cycles[0].add_player_joins(Player('Eve', 'Team1'))

        with caplog.at_level(logging.WARNING, logger='qbscore.game'):
            event = game.add_buzz(0, alice, 5, correct=True)

        assert game.cycles[0].correct_buzz is event
        assert 'Could not check active players for cycle 1' in caplog.text
        assert 'Eve' in caplog.text

    def test_get_cycle_out_of_range(self, game):
        with pytest.raises(IndexOutOfRangeError):
            game.get_cycle(-1)
        with pytest.raises(IndexOutOfRangeError):
            game.get_cycle(5)
