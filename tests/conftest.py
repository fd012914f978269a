"""
Pytest configuration and shared fixtures for ChipSim tests.
"""

import pytest
from chipsim.core.game import PokerEngine
from chipsim.core.player import Player


@pytest.fixture
def engine():
    """An engine with no game started."""
    return PokerEngine()


@pytest.fixture
def heads_up():
    """Heads-up game, 100 chips each, blinds 5/10. Alice has the button."""
    engine = PokerEngine()
    engine.start_game([("Alice", 100), ("Bob", 100)], small_blind=5, big_blind=10)
    return engine


@pytest.fixture
def three_handed():
    """Three players with 100 chips each, blinds 1/2."""
    engine = PokerEngine()
    engine.start_game([("A", 100), ("B", 100), ("C", 100)], small_blind=1, big_blind=2)
    return engine


@pytest.fixture
def four_handed():
    """Four players with 100 chips each, blinds 5/10."""
    engine = PokerEngine()
    engine.start_game(
        [("North", 100), ("East", 100), ("South", 100), ("West", 100)],
        small_blind=5,
        big_blind=10,
    )
    return engine


@pytest.fixture
def sample_player():
    """A player with 1000 chips."""
    return Player(name="test_player", bankroll=1000)
