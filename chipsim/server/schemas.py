"""
Pydantic schemas for API request/response validation.
"""

from typing import List, Optional, Dict, Any, Union, Literal
from pydantic import BaseModel, Field

from chipsim.core.rules import MAX_PLAYERS


# ============= Request Schemas =============

class SeatSchema(BaseModel):
    """One seat at game setup."""
    name: str = ""
    buy_in: int = Field(gt=0)


class StartGameRequest(BaseModel):
    """Request to start a new game."""
    players: List[SeatSchema] = Field(max_length=MAX_PLAYERS)
    small_blind: Optional[int] = Field(default=None, gt=0)
    big_blind: Optional[int] = Field(default=None, gt=0)


class ActionRequest(BaseModel):
    """Single mutation request: an action name and its parameters."""
    action: str = Field(..., description="start_game, fold, check, call, raise, all_in, undo, ...")
    params: Dict[str, Any] = Field(default_factory=dict)


class BetParams(BaseModel):
    """Parameters for BET/RAISE."""
    amount: int
    player_index: Optional[int] = None


class TurnParams(BaseModel):
    """Optional acting seat for fold/check/call/all-in."""
    player_index: Optional[int] = None


class DeclareWinnerParams(BaseModel):
    """Seat index of the winner, or "tie" to split the pot."""
    winner: Union[int, Literal["tie"]]


class RebuyParams(BaseModel):
    """Parameters for a rebuy."""
    player_index: int = Field(ge=0)
    amount: int = Field(gt=0)


# ============= Response Schemas =============

class ErrorSchema(BaseModel):
    """Engine rejection."""
    code: str
    message: str


class ActionResponse(BaseModel):
    """Result of a mutation, always carrying the resulting state."""
    success: bool
    message: Optional[str] = None
    error: Optional[ErrorSchema] = None
    state: Dict[str, Any]


class RaiseOptionSchema(BaseModel):
    """Suggested raise."""
    label: str
    amount: int
    hint: str


class PotOddsSchema(BaseModel):
    ratio: float
    percentage: float
    to_call: int
    pot: int


class RaisesResponse(BaseModel):
    """Raise suggestions for the active player."""
    raises: List[RaiseOptionSchema]
    pot_odds: Optional[PotOddsSchema] = None
