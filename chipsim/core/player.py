"""
Player class for the chip tracker.

Manages player state including:
- Bankroll (chips not currently wagered)
- Bet in the current betting round and contribution to the current hand
- Folded / all-in flags
- Per-game hand statistics
"""

from __future__ import annotations
from typing import Dict, Any
from dataclasses import dataclass, field


@dataclass
class PlayerStats:
    """Hand results for one player during a single game."""
    hands_won: int = 0
    hands_lost: int = 0
    hands_tied: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "hands_won": self.hands_won,
            "hands_lost": self.hands_lost,
            "hands_tied": self.hands_tied,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> PlayerStats:
        """Build stats from saved data, accepting the older wins/losses/ties keys."""
        data = data or {}
        return cls(
            hands_won=data.get("hands_won") or data.get("wins") or 0,
            hands_lost=data.get("hands_lost") or data.get("losses") or 0,
            hands_tied=data.get("hands_tied") or data.get("ties") or 0,
        )


@dataclass
class Player:
    """
    A player seated at the table.

    Attributes:
        name: Display name (not guaranteed unique)
        bankroll: Chips not currently wagered
        total_buy_in: Everything this player has ever bought in for
        bet: Chips committed in the current betting round
        round_contribution: Chips committed in the current hand, all streets
        acted: Whether the player has acted since the last bet or raise
        folded: Out of the current hand
        is_all_in: No bankroll left but chips still live in the pot
        stats: Hands won/lost/tied this game
    """
    name: str
    bankroll: int
    total_buy_in: int = -1
    bet: int = 0
    round_contribution: int = 0
    acted: bool = False
    folded: bool = False
    is_all_in: bool = False
    stats: PlayerStats = field(default_factory=PlayerStats)

    def __post_init__(self) -> None:
        if self.total_buy_in < 0:
            self.total_buy_in = self.bankroll

    def reset_for_new_hand(self) -> None:
        """Clear all hand-scoped fields."""
        self.bet = 0
        self.round_contribution = 0
        self.acted = False
        self.folded = False
        self.is_all_in = False

    def commit(self, amount: int) -> int:
        """
        Move chips from the bankroll into the current bet.

        Args:
            amount: Chips to add to the bet

        Returns:
            Actual amount committed (capped at the bankroll)
        """
        actual = max(0, min(amount, self.bankroll))
        self.bankroll -= actual
        self.bet += actual
        self.round_contribution += actual
        if self.bankroll == 0:
            self.is_all_in = True
        return actual

    def to_call(self, current_bet: int) -> int:
        """Chips needed to match the current bet (never negative)."""
        return max(0, current_bet - self.bet)

    @property
    def in_hand(self) -> bool:
        """Still contesting the pot (not folded)."""
        return not self.folded

    @property
    def can_act(self) -> bool:
        """Still able to make betting decisions this hand."""
        return not self.folded and not self.is_all_in

    @property
    def max_bet(self) -> int:
        """Largest total bet this player can reach on the current street."""
        return self.bet + self.bankroll

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "bankroll": self.bankroll,
            "total_buy_in": self.total_buy_in,
            "bet": self.bet,
            "round_contribution": self.round_contribution,
            "acted": self.acted,
            "folded": self.folded,
            "is_all_in": self.is_all_in,
            "stats": self.stats.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Player:
        """Rebuild a player from saved data, defaulting missing fields."""
        bankroll = data.get("bankroll") or 0
        bet = data.get("bet") or 0
        return cls(
            name=data.get("name") or "",
            bankroll=bankroll,
            total_buy_in=data.get("total_buy_in") or bankroll + bet,
            bet=bet,
            round_contribution=data.get("round_contribution") or 0,
            acted=bool(data.get("acted", False)),
            folded=bool(data.get("folded", False)),
            is_all_in=bool(data.get("is_all_in", False)),
            stats=PlayerStats.from_dict(data.get("stats")),
        )

    def __repr__(self) -> str:
        flags = "F" if self.folded else ("A" if self.is_all_in else "")
        return (
            f"Player({self.name}, bankroll={self.bankroll}, "
            f"bet={self.bet}{', ' + flags if flags else ''})"
        )
