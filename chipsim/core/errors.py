"""
Typed rejections raised by the poker engine.

Every rejection is raised before any state is touched, so the caller can
simply re-prompt the user.
"""


class ChipSimError(Exception):
    """Base class for all engine rejections."""

    code = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self):
        return {"code": self.code, "message": self.message}


class IllegalAction(ChipSimError):
    """Action invoked in the wrong phase or while the table is paused."""

    code = "illegal_action"


class InvalidAmount(ChipSimError):
    """Non-positive amount, raise below the minimum, or more than the bankroll."""

    code = "invalid_amount"


class OutOfTurn(ChipSimError):
    """Action attempted for a seat other than the active one."""

    code = "out_of_turn"


class InsufficientPlayers(ChipSimError):
    """Fewer than two players at the table."""

    code = "insufficient_players"


class StorageError(Exception):
    """A store could not read or write saved state."""
