"""
ChipSim - Chip tracker for Texas Hold'em played with physical cards

A betting state machine for home games:
- Pure Python engine enforcing blinds, turn order and raise sizes
- Undo, hand log, raise suggestions and series statistics
- Optional FastAPI service exposing a single mutation endpoint

Usage:
    from chipsim.core import PokerEngine, ActionType
    from chipsim.storage import JsonFileStore, load_engine
"""

__version__ = "0.1.0"

from chipsim.core.game import PokerEngine, ActionResult
from chipsim.core.rules import Phase, Street, ActionType, TIE
from chipsim.core.errors import ChipSimError

__all__ = [
    "PokerEngine",
    "ActionResult",
    "Phase",
    "Street",
    "ActionType",
    "TIE",
    "ChipSimError",
    "__version__",
]
