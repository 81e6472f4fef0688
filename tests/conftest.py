"""Shared fixtures for match tests."""

import pytest

from qbscore.game import GameState
from qbscore.models import Bonus, BonusPart, PacketState, Player, Tossup

QUESTION = (
    'This author wrote about a man who wakes up as a giant insect '
    'in a novella. For 10 points, name this author of The Metamorphosis.'
)


@pytest.fixture
def alice():
    return Player('Alice', 'Team1', is_starter=True)


@pytest.fixture
def bob():
    return Player('Bob', 'Team1', is_starter=True)


@pytest.fixture
def dave():
    return Player('Dave', 'Team1')


@pytest.fixture
def carol():
    return Player('Carol', 'Team2', is_starter=True)


@pytest.fixture
def packet():
    """Five tossups (25 words each) and three three-part bonuses."""
    tossups = tuple(Tossup(question=QUESTION, answer=f'Answer {i}') for i in range(5))
    bonuses = tuple(
        Bonus(
            leadin=f'Bonus {i} leadin',
            parts=(
                BonusPart('Part one', 'One'),
                BonusPart('Part two', 'Two'),
                BonusPart('Part three', 'Three'),
            ),
        )
        for i in range(3)
    )
    return PacketState(tossups=tossups, bonuses=bonuses)


@pytest.fixture
def game(packet, alice, bob, dave, carol):
    """Match with both teams and the packet loaded."""
    game = GameState()
    game.add_players([alice, bob, dave, carol])
    game.load_packet(packet)
    return game
