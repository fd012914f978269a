"""
HTTP API Routes for ChipSim.

The table is changed through a single mutation endpoint, POST /action,
which always answers with the resulting state. Engine rejections are
reported in the response body with their error code; malformed requests
get a 400.
"""

from typing import Dict, Any, Optional
import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, ValidationError

from chipsim.core.errors import ChipSimError
from chipsim.core.game import PokerEngine
from chipsim.core.rules import ActionType
from chipsim.server.schemas import (
    StartGameRequest, ActionRequest, ActionResponse, ErrorSchema,
    BetParams, TurnParams, DeclareWinnerParams, RebuyParams, RaisesResponse,
)


logger = logging.getLogger(__name__)

router = APIRouter()

BETTING_ACTIONS = {
    "fold": ActionType.FOLD,
    "check": ActionType.CHECK,
    "call": ActionType.CALL,
    "bet": ActionType.BET,
    "raise": ActionType.RAISE,
    "all_in": ActionType.ALL_IN,
}


def get_engine(request: Request) -> PokerEngine:
    """Get the engine owned by the application."""
    return request.app.state.engine


def _parse(model: type, params: Dict[str, Any]) -> BaseModel:
    try:
        return model.model_validate(params)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.errors(include_url=False, include_context=False))


def _run_command(engine: PokerEngine, action: str, params: Dict[str, Any]) -> Optional[str]:
    """
    Apply one named action to the engine.

    Returns:
        A human-readable message for betting actions, otherwise None
    """
    if action in BETTING_ACTIONS:
        action_type = BETTING_ACTIONS[action]
        if action_type in (ActionType.BET, ActionType.RAISE):
            bet = _parse(BetParams, params)
            result = engine.take_action(action_type, bet.amount, bet.player_index)
        else:
            turn = _parse(TurnParams, params)
            result = engine.take_action(action_type, player_index=turn.player_index)
        return result.message

    if action == "start_game":
        req = _parse(StartGameRequest, params)
        engine.start_game(
            [(seat.name, seat.buy_in) for seat in req.players],
            req.small_blind,
            req.big_blind,
        )
    elif action == "post_blinds":
        engine.post_blinds()
    elif action == "acknowledge_burn_card":
        engine.acknowledge_burn_card()
    elif action == "declare_winner":
        engine.declare_winner(_parse(DeclareWinnerParams, params).winner)
    elif action == "new_hand":
        engine.new_hand()
    elif action == "undo":
        engine.undo()
    elif action == "rebuy":
        rebuy = _parse(RebuyParams, params)
        engine.rebuy(rebuy.player_index, rebuy.amount)
    elif action == "rematch":
        engine.rematch()
    elif action == "reset_game":
        engine.reset_game()
    elif action == "clear_series_stats":
        engine.clear_series_stats()
    else:
        raise HTTPException(status_code=400, detail=f"Unknown action: {action}")
    return None


def _apply(engine: PokerEngine, action: str, params: Dict[str, Any]) -> ActionResponse:
    try:
        message = _run_command(engine, action, params)
    except ChipSimError as e:
        logger.warning(f"Rejected {action}: {e.message}")
        return ActionResponse(
            success=False,
            error=ErrorSchema(**e.to_dict()),
            state=engine.get_state(),
        )
    return ActionResponse(success=True, message=message, state=engine.get_state())


@router.post("/action", response_model=ActionResponse)
async def take_action(req: ActionRequest, engine: PokerEngine = Depends(get_engine)):
    """
    Apply one action to the table.

    Body: {"action": "raise", "params": {"amount": 40}}
    """
    return _apply(engine, req.action.lower(), req.params)


@router.post("/start_game", response_model=ActionResponse)
async def start_game(req: StartGameRequest, engine: PokerEngine = Depends(get_engine)):
    """Start a new game (shortcut for action=start_game)."""
    return _apply(engine, "start_game", req.model_dump())


@router.get("/state")
async def get_state(engine: PokerEngine = Depends(get_engine)) -> Dict[str, Any]:
    """Get the current table state."""
    return engine.get_state()


@router.get("/legal_actions")
async def get_legal_actions(engine: PokerEngine = Depends(get_engine)) -> Dict[str, Any]:
    """Get legal actions for the active player."""
    if not engine.is_hand_running():
        return {"actions": [], "message": "No hand in progress"}
    return {"actions": engine.get_legal_actions()}


@router.get("/raises", response_model=RaisesResponse)
async def get_raises(engine: PokerEngine = Depends(get_engine)):
    """Get suggested raise amounts and pot odds for the active player."""
    return {
        "raises": [option.to_dict() for option in engine.get_valid_raises()],
        "pot_odds": engine.get_pot_odds(),
    }


@router.get("/hand_log")
async def get_hand_log(engine: PokerEngine = Depends(get_engine)) -> Dict[str, Any]:
    """Get the current hand's action log."""
    return {
        "entries": [entry.to_dict() for entry in engine.state.hand_log],
        "text": engine.format_hand_log(),
        "last_action": engine.format_last_action(),
    }


@router.get("/series")
async def get_series(engine: PokerEngine = Depends(get_engine)) -> Dict[str, Any]:
    """Get cross-game series statistics."""
    return {"series": engine.series.to_dict()}
