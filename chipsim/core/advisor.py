"""
Raise suggestions for the active player.

Purely advisory: the engine validates every amount passed to raise_to()
on its own, whatever this module suggests.
"""

from __future__ import annotations
from typing import List, Dict, Optional, Any, Set
from dataclasses import dataclass

from chipsim.core.rules import Phase, Street, min_raise_total
from chipsim.core.table import TableState


@dataclass(frozen=True)
class RaiseOption:
    """A suggested total bet."""
    label: str
    amount: int
    hint: str  # chip colour for the button

    def to_dict(self) -> Dict[str, Any]:
        return {"label": self.label, "amount": self.amount, "hint": self.hint}


# (label, numerator, denominator, hint)
POT_FRACTIONS = [
    ("¼ Pot", 1, 4, "white"),
    ("⅓ Pot", 1, 3, "white"),
    ("½ Pot", 1, 2, "red"),
    ("⅔ Pot", 2, 3, "blue"),
    ("¾ Pot", 3, 4, "blue"),
    ("Pot", 1, 1, "gold"),
]

BET_MULTIPLIERS = [(2, "red"), (3, "blue"), (4, "green"), (5, "orange")]

PREFLOP_BB_MULTIPLES = [(2, "white"), (3, "red"), (4, "blue"), (5, "green"), (10, "black")]

OPENING_BB_MULTIPLES = [1, 2, 4, 5, 10, 20]


def _ladder_hint(amount: int, big_blind: int) -> str:
    if amount <= big_blind * 2:
        return "white"
    if amount <= big_blind * 5:
        return "red"
    if amount <= big_blind * 10:
        return "blue"
    return "black"


def get_valid_raises(state: TableState) -> List[RaiseOption]:
    """
    Suggest raise amounts for the active player.

    Facing a bet, the ladder is 2x-5x the current bet plus a pot-sized
    raise. When opening, it is a set of pot fractions plus big-blind
    multiples. A "Min" entry is always offered. Candidates outside
    [current bet + min raise, player's bet + bankroll] are dropped.

    Args:
        state: Current table state

    Returns:
        Suggestions sorted by amount, one per distinct amount
    """
    player = state.active_player
    if player is None:
        return []

    lowest = min_raise_total(state.current_bet, state.min_raise)
    highest = player.max_bet
    if highest <= state.current_bet:
        return []

    to_call = player.to_call(state.current_bet)
    pot = state.pot_total
    options: List[RaiseOption] = []
    seen: Set[int] = set()

    def add(label: str, amount: int, hint: str) -> None:
        amount = int(amount)
        if lowest <= amount <= highest and amount > 0 and amount not in seen:
            seen.add(amount)
            options.append(RaiseOption(label, amount, hint))

    add("Min", lowest, "white")

    if state.current_bet > 0:
        for multiplier, hint in BET_MULTIPLIERS:
            add(f"{multiplier}×", state.current_bet * multiplier, hint)
        add("Pot", state.current_bet + pot + to_call, "gold")
    else:
        if pot > 0:
            for label, num, den, hint in POT_FRACTIONS:
                add(label, pot * num // den, hint)

        big_blind = state.big_blind
        if state.street == Street.PREFLOP:
            for multiple, hint in PREFLOP_BB_MULTIPLES:
                add(f"${big_blind * multiple}", big_blind * multiple, hint)

        for multiple in OPENING_BB_MULTIPLES:
            amount = big_blind * multiple
            add(f"${amount}", amount, _ladder_hint(amount, big_blind))

    options.sort(key=lambda option: option.amount)
    return options


def get_pot_odds(state: TableState) -> Optional[Dict[str, Any]]:
    """
    Pot odds for the active player.

    Returns:
        Dict with ratio (pot after call / call), break-even percentage,
        to_call and pot; None if there is nothing to call.
    """
    player = state.active_player
    if player is None or state.phase != Phase.BETTING:
        return None

    to_call = player.to_call(state.current_bet)
    if to_call == 0:
        return None

    pot = state.pot_total
    pot_after_call = pot + to_call
    return {
        "ratio": round(pot_after_call / to_call, 1),
        "percentage": round(to_call / pot_after_call * 100, 1),
        "to_call": to_call,
        "pot": pot,
    }
