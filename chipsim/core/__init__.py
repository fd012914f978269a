"""
ChipSim Core - Pure Python betting state machine

This module contains all game logic without any network dependencies.
"""

from chipsim.core.player import Player, PlayerStats
from chipsim.core.table import TableState, HandResult
from chipsim.core.series import SeriesBook, SeriesStats
from chipsim.core.advisor import RaiseOption, get_valid_raises, get_pot_odds
from chipsim.core.game import PokerEngine, ActionResult
from chipsim.core.rules import Phase, Street, ActionType, ResultReason, SoundEvent, TIE
from chipsim.core.errors import (
    ChipSimError, IllegalAction, InvalidAmount, OutOfTurn, InsufficientPlayers,
)

__all__ = [
    "Player",
    "PlayerStats",
    "TableState",
    "HandResult",
    "SeriesBook",
    "SeriesStats",
    "RaiseOption",
    "get_valid_raises",
    "get_pot_odds",
    "PokerEngine",
    "ActionResult",
    "Phase",
    "Street",
    "ActionType",
    "ResultReason",
    "SoundEvent",
    "TIE",
    "ChipSimError",
    "IllegalAction",
    "InvalidAmount",
    "OutOfTurn",
    "InsufficientPlayers",
]
