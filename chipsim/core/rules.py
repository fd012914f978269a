"""
Texas Hold'em Chip Tracking Rules and Constants.

Cards are dealt physically at the table, so the only rules enforced here
are the betting rules:

1. Heads-up (2 players): Dealer posts small blind, non-dealer posts big blind.
   Preflop: Dealer acts first. Postflop: first live seat left of the dealer.

2. Minimum raise: A raise must increase the current bet by at least the size
   of the last full raise (the big blind if nobody has raised this street).

3. All-in for less: A player may always commit their whole bankroll, even if
   that falls short of a full call or a full raise.

4. No side pots: the whole pot goes to the declared winner, or is split
   evenly between tied players.
"""

from enum import Enum
from typing import Tuple


class Phase(Enum):
    """Top-level phases of the table."""
    SETUP = "setup"          # No game in progress
    BETTING = "betting"      # Hand in progress, betting (or burn card) pending
    SHOWDOWN = "showdown"    # Waiting for the winner to be declared
    RESULT = "result"        # Hand (or game) is over


class Street(Enum):
    """The four betting rounds of a hand."""
    PREFLOP = "preflop"
    FLOP = "flop"
    TURN = "turn"
    RIVER = "river"

    @property
    def next(self) -> "Street":
        """The street that follows this one (river stays river)."""
        index = STREET_ORDER.index(self)
        return STREET_ORDER[min(index + 1, len(STREET_ORDER) - 1)]

    @property
    def label(self) -> str:
        return STREET_LABELS[self]


STREET_ORDER = [Street.PREFLOP, Street.FLOP, Street.TURN, Street.RIVER]

STREET_LABELS = {
    Street.PREFLOP: "Pre-Flop",
    Street.FLOP: "Flop",
    Street.TURN: "Turn",
    Street.RIVER: "River",
}


class ActionType(Enum):
    """Possible player actions."""
    FOLD = "FOLD"
    CHECK = "CHECK"
    CALL = "CALL"
    BET = "BET"
    RAISE = "RAISE"
    ALL_IN = "ALL_IN"


class ResultReason(Enum):
    """Why the last result message was produced."""
    FOLD = "fold"                # Everyone else folded
    WIN = "win"                  # Winner declared at showdown
    TIE = "tie"                  # Pot split at showdown
    GAME = "game"                # One player left with chips
    ELIMINATION = "elimination"  # Busted players removed before a new hand


class SoundEvent(Enum):
    """Cosmetic notifications fired for the audio collaborator."""
    PUSH = "push"
    WIN = "win"
    LOSE = "lose"
    DEAL = "deal"
    CHIP = "chip"


# Sentinel accepted by declare_winner() to split the pot
TIE = "tie"

# Default game settings
DEFAULT_SMALL_BLIND = 5
DEFAULT_BIG_BLIND = 10
DEFAULT_BUY_IN = 100
MIN_PLAYERS = 2
MAX_PLAYERS = 8

# Undo ring buffer and hand log bounds
MAX_HISTORY = 20
MAX_HAND_LOG = 50

# (max buy-in, small blind, big blind), checked in order
BLIND_TIERS = [
    (20, 1, 1),
    (50, 1, 2),
    (100, 1, 2),
    (200, 2, 5),
    (500, 5, 10),
    (1000, 5, 10),
    (2000, 10, 20),
]
TOP_TIER_BLINDS = (25, 50)


def default_player_name(seat: int) -> str:
    """Name used for a seat left blank at setup (seats are 0-indexed)."""
    return f"Player {seat + 1}"


def suggested_blinds(buy_in: int) -> Tuple[int, int]:
    """
    Pick small and big blinds that suit a starting stack.

    Args:
        buy_in: Starting bankroll of each player

    Returns:
        Tuple of (small_blind, big_blind)
    """
    for limit, small, big in BLIND_TIERS:
        if buy_in <= limit:
            return small, big
    return TOP_TIER_BLINDS


def min_raise_total(current_bet: int, min_raise: int) -> int:
    """
    Smallest total bet that counts as a full raise.

    Args:
        current_bet: Highest bet on the current street
        min_raise: Size of the last full raise (or the big blind)

    Returns:
        Minimum total bet amount (including the call)
    """
    return current_bet + min_raise


def is_full_raise(total_bet: int, current_bet: int, min_raise: int) -> bool:
    """Whether raising to total_bet increases the bet by at least min_raise."""
    return total_bet - current_bet >= min_raise


# Logical key the table is saved under
STORAGE_KEY = "poker"
