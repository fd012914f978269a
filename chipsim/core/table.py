"""
Table state - the single mutable aggregate owned by the poker engine.

The whole aggregate is deep-copied for undo snapshots and serialised as a
plain dictionary for the persistence collaborator.
"""

from __future__ import annotations
from typing import List, Dict, Optional, Any
from dataclasses import dataclass, field

from chipsim.core.player import Player
from chipsim.core.rules import (
    Phase, Street, ResultReason,
    DEFAULT_SMALL_BLIND, DEFAULT_BIG_BLIND,
)


@dataclass
class HandResult:
    """Outcome message of the last hand (or of the game)."""
    message: str
    reason: ResultReason
    winner: Optional[int] = None  # Seat index for FOLD/WIN, otherwise None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "reason": self.reason.value,
            "winner": self.winner,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional[HandResult]:
        if not data:
            return None
        try:
            reason = ResultReason(data.get("reason"))
        except ValueError:
            reason = ResultReason.WIN
        return cls(
            message=data.get("message", ""),
            reason=reason,
            winner=data.get("winner"),
        )


@dataclass
class LastAction:
    """The most recent action, kept for display."""
    player: str
    action: str  # fold, check, call, raise, allin, blind
    amount: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"player": self.player, "action": self.action, "amount": self.amount}


@dataclass
class HandLogEntry:
    """One line of the current hand's action log."""
    player: str
    action: str
    street: Street
    amount: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "player": self.player,
            "action": self.action,
            "street": self.street.value,
            "amount": self.amount,
        }


def _enum_or_default(enum_cls, value, default):
    try:
        return enum_cls(value)
    except ValueError:
        return default


@dataclass
class TableState:
    """
    Everything that describes the table at one point in time.

    Hand-scoped fields are reset by the engine at each new hand; the
    bankrolls, buy-ins, stats and dealer position persist across hands.
    """
    players: List[Player] = field(default_factory=list)
    pot: int = 0
    phase: Phase = Phase.SETUP
    street: Street = Street.PREFLOP
    round: int = 0
    game_started: bool = False

    # Position tracking
    active_player_index: int = 0
    dealer_index: int = 0

    # Betting state
    small_blind: int = DEFAULT_SMALL_BLIND
    big_blind: int = DEFAULT_BIG_BLIND
    current_bet: int = 0
    min_raise: int = 0
    last_aggressor: int = -1
    blinds_posted: bool = False

    # Burn card gate
    burn_card_pending: bool = False
    burn_card_street: Optional[Street] = None

    last_result: Optional[HandResult] = None
    last_action: Optional[LastAction] = None
    hand_log: List[HandLogEntry] = field(default_factory=list)

    @property
    def active_player(self) -> Optional[Player]:
        if not self.players or self.phase != Phase.BETTING:
            return None
        return self.players[self.active_player_index]

    @property
    def live_players(self) -> List[Player]:
        """Players who have not folded this hand."""
        return [p for p in self.players if p.in_hand]

    @property
    def players_who_can_act(self) -> int:
        return sum(1 for p in self.players if p.can_act)

    @property
    def total_bets(self) -> int:
        """Chips committed on the current street, not yet swept into the pot."""
        return sum(p.bet for p in self.players)

    @property
    def pot_total(self) -> int:
        """Pot including the uncommitted bets of the current street."""
        return self.pot + self.total_bets

    @property
    def total_chips_in_play(self) -> int:
        return sum(p.bankroll + p.bet for p in self.players) + self.pot

    @property
    def chip_leader(self) -> Optional[Player]:
        if not self.players:
            return None
        leader = self.players[0]
        for player in self.players[1:]:
            if player.bankroll + player.bet > leader.bankroll + leader.bet:
                leader = player
        return leader

    @property
    def average_stack(self) -> int:
        if not self.players:
            return 0
        return sum(p.bankroll + p.bet for p in self.players) // len(self.players)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "players": [p.to_dict() for p in self.players],
            "pot": self.pot,
            "phase": self.phase.value,
            "street": self.street.value,
            "round": self.round,
            "game_started": self.game_started,
            "active_player_index": self.active_player_index,
            "dealer_index": self.dealer_index,
            "small_blind": self.small_blind,
            "big_blind": self.big_blind,
            "current_bet": self.current_bet,
            "min_raise": self.min_raise,
            "last_aggressor": self.last_aggressor,
            "blinds_posted": self.blinds_posted,
            "burn_card_pending": self.burn_card_pending,
            "burn_card_street": self.burn_card_street.value if self.burn_card_street else None,
            "last_result": self.last_result.to_dict() if self.last_result else None,
            "last_action": self.last_action.to_dict() if self.last_action else None,
            "hand_log": [entry.to_dict() for entry in self.hand_log],
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> TableState:
        """
        Rebuild table state from saved data.

        Missing or malformed fields fall back to safe defaults. A table with
        no players is always returned in the setup phase.

        Args:
            data: Dictionary produced by to_dict() (possibly partial)

        Returns:
            A new TableState
        """
        data = data or {}
        players = [Player.from_dict(p) for p in data.get("players") or []]
        if not players:
            return cls(
                small_blind=data.get("small_blind") or DEFAULT_SMALL_BLIND,
                big_blind=data.get("big_blind") or DEFAULT_BIG_BLIND,
            )

        big_blind = data.get("big_blind") or DEFAULT_BIG_BLIND
        burn_street = data.get("burn_card_street")
        last_action = data.get("last_action")
        hand_log: List[HandLogEntry] = []
        for entry in data.get("hand_log") or []:
            hand_log.append(HandLogEntry(
                player=entry.get("player", ""),
                action=entry.get("action", ""),
                street=_enum_or_default(Street, entry.get("street"), Street.PREFLOP),
                amount=entry.get("amount"),
            ))

        active = data.get("active_player_index") or 0
        dealer = data.get("dealer_index") or 0
        return cls(
            players=players,
            pot=data.get("pot") or 0,
            phase=_enum_or_default(Phase, data.get("phase"), Phase.SETUP),
            street=_enum_or_default(Street, data.get("street"), Street.PREFLOP),
            round=data.get("round") or 0,
            game_started=bool(data.get("game_started", False)),
            active_player_index=active if 0 <= active < len(players) else 0,
            dealer_index=dealer if 0 <= dealer < len(players) else 0,
            small_blind=data.get("small_blind") or DEFAULT_SMALL_BLIND,
            big_blind=big_blind,
            current_bet=data.get("current_bet") or 0,
            min_raise=data.get("min_raise") or big_blind,
            last_aggressor=data.get("last_aggressor") if data.get("last_aggressor") is not None else -1,
            blinds_posted=bool(data.get("blinds_posted", False)),
            burn_card_pending=bool(data.get("burn_card_pending", False)),
            burn_card_street=_enum_or_default(Street, burn_street, None) if burn_street else None,
            last_result=HandResult.from_dict(data.get("last_result")),
            last_action=LastAction(
                player=last_action.get("player", ""),
                action=last_action.get("action", ""),
                amount=last_action.get("amount"),
            ) if last_action else None,
            hand_log=hand_log,
        )

