"""
Texas Hold'em Chip Tracking Engine - State Machine Implementation.

This module implements the betting logic for a table that deals real cards.
It handles:
- Game setup, blind posting and dealer button rotation
- Player actions (fold, check, call, bet/raise, all-in)
- Street advancement with a burn card acknowledgment gate
- All-in runouts, showdown winner declaration and split pots
- Eliminations, rematches, rebuys and multi-step undo

Cards are never dealt or evaluated here: the winner of a showdown is
declared by the user.
"""

from __future__ import annotations
from typing import List, Dict, Optional, Tuple, Any, Callable, Sequence, Union
from dataclasses import dataclass
from collections import deque
import copy
import logging

from chipsim.core.advisor import RaiseOption, get_valid_raises, get_pot_odds
from chipsim.core.errors import (
    IllegalAction, InvalidAmount, OutOfTurn, InsufficientPlayers, StorageError,
)
from chipsim.core.player import Player
from chipsim.core.rules import (
    Phase, Street, ActionType, ResultReason, SoundEvent,
    STREET_ORDER, TIE, MIN_PLAYERS, MAX_HISTORY, MAX_HAND_LOG,
    DEFAULT_BUY_IN, STORAGE_KEY,
    default_player_name, suggested_blinds, min_raise_total, is_full_raise,
)
from chipsim.core.series import SeriesBook
from chipsim.core.table import TableState, HandResult, LastAction, HandLogEntry


logger = logging.getLogger(__name__)

SoundListener = Callable[[SoundEvent], None]


@dataclass
class ActionResult:
    """Result of an accepted player action (rejections raise ChipSimError)."""
    message: str
    action_type: Optional[ActionType] = None
    amount: int = 0


class PokerEngine:
    """
    Chip tracking engine implementing the betting state machine.

    Every transition acts on the seat at ``state.active_player_index``;
    rejected transitions raise a ChipSimError and leave the state untouched.

    Usage:
        engine = PokerEngine()
        engine.start_game([("Alice", 100), ("Bob", 100)], small_blind=5, big_blind=10)

        while engine.state.phase == Phase.BETTING:
            if engine.state.burn_card_pending:
                engine.acknowledge_burn_card()   # after dealing the cards
            else:
                engine.take_action(ActionType.CALL)

        engine.declare_winner(0)
        engine.new_hand()
    """

    def __init__(
        self,
        store: Optional[Any] = None,
        series: Optional[SeriesBook] = None,
        state: Optional[TableState] = None,
    ):
        """
        Initialize the engine.

        Args:
            store: Optional persistence collaborator with save(key, data)
            series: Cross-game statistics (a fresh book by default)
            state: Table state to resume from (setup phase by default)
        """
        self.state = state or TableState()
        self.series = series or SeriesBook()
        self.store = store
        self._history: deque = deque(maxlen=MAX_HISTORY)
        self._listeners: List[SoundListener] = []

    # ============= Queries =============

    @property
    def can_undo(self) -> bool:
        return len(self._history) > 0

    @property
    def history_size(self) -> int:
        return len(self._history)

    @property
    def is_game_over(self) -> bool:
        result = self.state.last_result
        return result is not None and result.reason == ResultReason.GAME

    def is_hand_running(self) -> bool:
        """Check if a hand is currently in progress."""
        return self.state.phase in (Phase.BETTING, Phase.SHOWDOWN)

    def add_listener(self, listener: SoundListener) -> None:
        """Register a callback fired with a SoundEvent on every transition."""
        self._listeners.append(listener)

    # ============= Setup =============

    def start_game(
        self,
        players: Sequence[Tuple[str, int]],
        small_blind: Optional[int] = None,
        big_blind: Optional[int] = None,
    ) -> None:
        """
        Seat the players and start the first hand.

        Args:
            players: (name, buy_in) per seat, in seating order
            small_blind: Small blind (picked from the buy-in if omitted)
            big_blind: Big blind (picked from the buy-in if omitted)
        """
        if len(players) < MIN_PLAYERS:
            raise InsufficientPlayers(f"Need at least {MIN_PLAYERS} players, got {len(players)}")
        for _, buy_in in players:
            if buy_in is None or buy_in <= 0:
                raise InvalidAmount("Buy-in must be positive")

        suggested_small, suggested_big = suggested_blinds(players[0][1])
        small_blind = small_blind if small_blind is not None else suggested_small
        big_blind = big_blind if big_blind is not None else suggested_big
        if small_blind <= 0 or big_blind <= 0:
            raise InvalidAmount("Blinds must be positive")

        roster = []
        for seat, (name, buy_in) in enumerate(players):
            name = (name or "").strip() or default_player_name(seat)
            roster.append(Player(name=name, bankroll=buy_in))
            self.series.ensure(name)

        self.state = TableState(
            players=roster,
            phase=Phase.BETTING,
            street=Street.PREFLOP,
            round=1,
            game_started=True,
            dealer_index=0,
            small_blind=small_blind,
            big_blind=big_blind,
            min_raise=big_blind,
        )
        self._history.clear()
        logger.info(f"Starting game with {len(roster)} players, blinds {small_blind}/{big_blind}")

        self._emit(SoundEvent.PUSH)
        self._post_blinds()
        self._save()

    def post_blinds(self) -> None:
        """Post the blinds for the current hand (no-op if already posted)."""
        self._post_blinds()
        self._save()

    def _post_blinds(self) -> None:
        state = self.state
        if state.blinds_posted:
            return
        players = state.players
        if len(players) < MIN_PLAYERS:
            raise InsufficientPlayers("Not enough players to post blinds")

        self._push_history()
        self._emit(SoundEvent.PUSH)

        if len(players) == 2:
            # Heads-up: dealer posts the small blind
            sb_index = state.dealer_index
            bb_index = self._next_live_seat(sb_index)
        else:
            sb_index = self._next_live_seat(state.dealer_index)
            bb_index = self._next_live_seat(sb_index)

        sb_player = players[sb_index]
        bb_player = players[bb_index]
        sb_amount = sb_player.commit(state.small_blind)
        bb_amount = bb_player.commit(state.big_blind)
        self._log_hand_action(sb_player.name, "posts small blind", sb_amount)
        self._log_hand_action(bb_player.name, "posts big blind", bb_amount)
        state.last_action = LastAction(bb_player.name, "blind", bb_amount)

        state.current_bet = max(sb_amount, bb_amount)
        state.blinds_posted = True
        for player in players:
            player.acted = False
        state.last_aggressor = -1
        state.min_raise = state.big_blind

        if len(players) == 2:
            first = sb_index
        else:
            first = self._next_active_seat(bb_index)
        if not players[first].can_act:
            first = self._next_active_seat(first)
        state.active_player_index = first

        logger.debug(f"Blinds posted: SB={sb_amount} ({sb_player.name}) BB={bb_amount} ({bb_player.name})")

        if state.players_who_can_act == 0:
            # Both blinds put everyone all-in
            self._run_out_board()

    # ============= Betting actions =============

    def take_action(
        self,
        action_type: Union[ActionType, str],
        amount: int = 0,
        player_index: Optional[int] = None,
    ) -> ActionResult:
        """
        Process a betting action for the active player.

        Args:
            action_type: FOLD, CHECK, CALL, BET, RAISE or ALL_IN
            amount: Total bet for BET/RAISE (not the increment)
            player_index: Seat the caller believes is acting; must match the
                active seat when given

        Returns:
            ActionResult describing what happened
        """
        if isinstance(action_type, str):
            try:
                action_type = ActionType(action_type.upper())
            except ValueError:
                raise IllegalAction(f"Unknown action: {action_type}")

        if player_index is not None:
            self._require_betting()
            if player_index != self.state.active_player_index:
                raise OutOfTurn(
                    f"Seat {player_index} cannot act, it is seat "
                    f"{self.state.active_player_index}'s turn"
                )

        if action_type == ActionType.FOLD:
            return self.fold()
        elif action_type == ActionType.CHECK:
            return self.check()
        elif action_type == ActionType.CALL:
            return self.call()
        elif action_type in (ActionType.BET, ActionType.RAISE):
            return self.raise_to(amount)
        return self.all_in()

    def fold(self) -> ActionResult:
        """Give up the hand; ends it at once if a single player remains."""
        player = self._require_betting()
        state = self.state

        self._push_history()
        self._emit(SoundEvent.LOSE)

        player.folded = True
        player.stats.hands_lost += 1
        state.last_action = LastAction(player.name, "fold")
        self._log_hand_action(player.name, "folds")

        if len(state.live_players) == 1:
            winner = next(i for i, p in enumerate(state.players) if p.in_hand)
            self._award_pot(winner, ResultReason.FOLD)
        else:
            self._advance_action()

        self._save()
        return ActionResult(f"{player.name} folded", ActionType.FOLD, 0)

    def check(self) -> ActionResult:
        """Pass the action; only allowed with nothing to call."""
        player = self._require_betting()
        state = self.state

        to_call = player.to_call(state.current_bet)
        if to_call > 0:
            raise IllegalAction(f"Cannot check, must call ${to_call}")

        self._push_history()
        self._emit(SoundEvent.PUSH)

        player.acted = True
        state.last_action = LastAction(player.name, "check")
        self._log_hand_action(player.name, "checks")
        self._advance_action()

        self._save()
        return ActionResult(f"{player.name} checked", ActionType.CHECK, 0)

    def call(self) -> ActionResult:
        """Match the current bet, all-in for less if the bankroll is short."""
        player = self._require_betting()
        state = self.state

        to_call = player.to_call(state.current_bet)
        if to_call <= 0:
            return self.check()

        self._push_history()
        self._emit(SoundEvent.PUSH)

        actual = player.commit(to_call)
        player.acted = True
        state.last_action = LastAction(player.name, "call", actual)
        self._log_hand_action(player.name, "calls", actual)
        self._advance_action()

        self._save()
        return ActionResult(f"{player.name} called ${actual}", ActionType.CALL, actual)

    def raise_to(self, total_bet: int) -> ActionResult:
        """
        Bet or raise to a total amount for this street.

        A raise short of the minimum is only accepted when it puts the
        player all-in. Such a short all-in raises the current bet but does
        not reopen the action for players who already acted.

        Args:
            total_bet: Player's total bet after the raise

        Returns:
            ActionResult with the chips added to the bet
        """
        player = self._require_betting()
        state = self.state

        if total_bet is None or total_bet <= 0:
            raise InvalidAmount("Raise amount must be positive")
        if total_bet <= state.current_bet:
            raise InvalidAmount(f"Raise must be above the current bet of ${state.current_bet}")

        amount_to_add = total_bet - player.bet
        if amount_to_add > player.bankroll:
            raise InvalidAmount(f"Cannot bet more than bankroll (${player.bankroll})")

        going_all_in = amount_to_add == player.bankroll
        full_raise = is_full_raise(total_bet, state.current_bet, state.min_raise)
        if not full_raise and not going_all_in:
            raise InvalidAmount(
                f"Minimum raise is to ${min_raise_total(state.current_bet, state.min_raise)} "
                f"(current: ${state.current_bet}, min raise: ${state.min_raise})"
            )

        self._push_history()
        self._emit(SoundEvent.PUSH)

        opening = state.current_bet == 0
        actual = player.commit(amount_to_add)
        player.acted = True
        state.last_action = LastAction(player.name, "raise", total_bet)
        self._log_hand_action(player.name, "bets" if opening else "raises to", total_bet)

        if full_raise:
            self._reopen_action()
            state.last_aggressor = state.active_player_index
            state.min_raise = max(state.min_raise, total_bet - state.current_bet)
        state.current_bet = total_bet

        self._advance_action()

        self._save()
        action_type = ActionType.BET if opening else ActionType.RAISE
        return ActionResult(f"{player.name} raised to ${total_bet}", action_type, actual)

    def all_in(self) -> ActionResult:
        """
        Commit the whole bankroll.

        Any all-in that raises the current bet resets the acted flag of the
        other players who can still act, even when the raise is short of the
        minimum. The minimum raise only grows on a full raise.
        """
        player = self._require_betting()
        state = self.state

        if player.bankroll <= 0:
            raise IllegalAction(f"{player.name} is already all-in")

        total_bet = player.max_bet

        self._push_history()
        self._emit(SoundEvent.PUSH)

        if total_bet > state.current_bet:
            self._reopen_action()
            state.last_aggressor = state.active_player_index
            if is_full_raise(total_bet, state.current_bet, state.min_raise):
                state.min_raise = total_bet - state.current_bet
            state.current_bet = total_bet

        actual = player.commit(player.bankroll)
        player.acted = True
        state.last_action = LastAction(player.name, "allin", total_bet)
        self._log_hand_action(player.name, "ALL-IN", total_bet)
        self._advance_action()

        self._save()
        return ActionResult(f"{player.name} all-in for ${total_bet}", ActionType.ALL_IN, actual)

    def _require_betting(self) -> Player:
        """Return the active player, or raise if no betting action is possible now."""
        state = self.state
        if state.phase != Phase.BETTING:
            raise IllegalAction(f"Cannot act during {state.phase.value}")
        if not state.blinds_posted:
            raise IllegalAction("Blinds have not been posted")
        if state.burn_card_pending:
            raise IllegalAction(f"Deal the {state.burn_card_street.label} first")
        player = state.players[state.active_player_index]
        if not player.can_act:
            raise IllegalAction(f"{player.name} cannot act")
        return player

    def _reopen_action(self) -> None:
        """Everyone else who can still act must respond to the new bet."""
        for i, player in enumerate(self.state.players):
            if i != self.state.active_player_index and player.can_act:
                player.acted = False

    # ============= Turn progression =============

    def _advance_action(self) -> None:
        """Move to the next seat, or close the betting round."""
        state = self.state
        if not self._is_betting_round_complete():
            state.active_player_index = self._next_active_seat(state.active_player_index)
            return

        if len(state.live_players) == 1:
            winner = next(i for i, p in enumerate(state.players) if p.in_hand)
            self._award_pot(winner, ResultReason.FOLD)
        elif state.players_who_can_act <= 1:
            self._run_out_board()
        elif state.street == Street.RIVER:
            self._go_to_showdown()
        else:
            self._next_street()

    def _is_betting_round_complete(self) -> bool:
        live = self.state.live_players
        if len(live) <= 1:
            return True

        # All-in players are exempt
        for player in live:
            if player.is_all_in:
                continue
            if not player.acted:
                return False
            if player.bet < self.state.current_bet:
                return False
        return True

    def _next_seat(self, from_index: int, eligible: Callable[[Player], bool]) -> int:
        players = self.state.players
        count = len(players)
        for step in range(1, count + 1):
            index = (from_index + step) % count
            if eligible(players[index]):
                return index
        return (from_index + 1) % count

    def _next_active_seat(self, from_index: int) -> int:
        """Next seat clockwise that can still act (skips folded and all-in)."""
        return self._next_seat(from_index, lambda p: p.can_act)

    def _next_live_seat(self, from_index: int) -> int:
        """Next seat clockwise that has not folded."""
        return self._next_seat(from_index, lambda p: p.in_hand)

    def _sweep_bets(self) -> None:
        """Move every player's bet for the street into the pot."""
        state = self.state
        for player in state.players:
            state.pot += player.bet
            player.bet = 0

    def _reset_street(self) -> None:
        state = self.state
        self._sweep_bets()
        for player in state.players:
            player.acted = False
        state.current_bet = 0
        state.min_raise = state.big_blind

    def _next_street(self) -> None:
        state = self.state
        self._emit(SoundEvent.PUSH)
        self._reset_street()
        state.last_aggressor = -1
        state.street = state.street.next

        # Post-flop action starts left of the dealer
        state.active_player_index = self._next_active_seat(state.dealer_index)

        state.burn_card_pending = True
        state.burn_card_street = state.street
        logger.debug(f"Moving to {state.street.value}, pot={state.pot}")

    def _run_out_board(self) -> None:
        """Advance one street without betting, or go to showdown after the river."""
        state = self.state
        self._reset_street()

        if state.street != Street.RIVER:
            state.street = state.street.next
            state.burn_card_pending = True
            state.burn_card_street = state.street
            logger.debug(f"Running out the board: {state.street.value}")
        else:
            self._go_to_showdown()

    def acknowledge_burn_card(self) -> None:
        """Resume after the physical burn and deal for the new street."""
        state = self.state
        if state.phase != Phase.BETTING or not state.burn_card_pending:
            raise IllegalAction("No burn card pending")

        self._push_history()
        self._emit(SoundEvent.DEAL)

        state.burn_card_pending = False
        state.burn_card_street = None

        if state.players_who_can_act <= 1:
            if state.street == Street.RIVER:
                self._go_to_showdown()
            else:
                self._run_out_board()

        self._save()

    def _go_to_showdown(self) -> None:
        self._sweep_bets()
        self.state.phase = Phase.SHOWDOWN
        logger.debug(f"Showdown, pot={self.state.pot}")

    # ============= Hand resolution =============

    def declare_winner(self, winner: Union[int, str]) -> None:
        """
        Resolve the showdown.

        Args:
            winner: Seat index of the winning player, or TIE to split the
                pot evenly between every player still in the hand
        """
        state = self.state
        if state.phase != Phase.SHOWDOWN:
            raise IllegalAction("Winners can only be declared at showdown")

        if winner == TIE:
            self._push_history()
            self._split_pot()
        else:
            if (
                isinstance(winner, bool)
                or not isinstance(winner, int)
                or not 0 <= winner < len(state.players)
            ):
                raise IllegalAction(f"No player at seat {winner}")
            if state.players[winner].folded:
                raise IllegalAction(f"{state.players[winner].name} has folded")
            self._push_history()
            self._award_pot(winner, ResultReason.WIN)

        self._save()

    def _split_pot(self) -> None:
        """Split the pot evenly; odd chips go one each from the first live seat."""
        state = self.state
        live = state.live_players
        total_pot = state.pot_total
        share, remainder = divmod(total_pot, len(live))
        average_contribution = sum(p.round_contribution for p in live) // len(live)
        profit = share - average_contribution

        for player in state.players:
            if player.in_hand:
                odd_chip = 1 if remainder > 0 else 0
                player.bankroll += share + odd_chip
                remainder -= odd_chip
                player.stats.hands_tied += 1
            player.bet = 0

        state.pot = 0
        state.phase = Phase.RESULT
        sign = "+" if profit >= 0 else "-"
        state.last_result = HandResult(f"Split Pot! {sign}${abs(profit)} each", ResultReason.TIE)

        self._emit(SoundEvent.PUSH)
        logger.info(f"Pot of {total_pot} split {len(live)} ways")

    def _award_pot(self, winner_index: int, reason: ResultReason) -> None:
        state = self.state
        winner = state.players[winner_index]
        total_pot = state.pot_total
        profit = total_pot - winner.round_contribution

        winner.bankroll += total_pot
        winner.stats.hands_won += 1
        for i, player in enumerate(state.players):
            if i != winner_index and player.in_hand:
                player.stats.hands_lost += 1
            player.bet = 0

        state.pot = 0
        state.phase = Phase.RESULT
        state.burn_card_pending = False
        state.burn_card_street = None

        if reason == ResultReason.FOLD:
            message = f"{winner.name} wins +${profit}! (Others folded)"
            self._emit(SoundEvent.PUSH)
        else:
            message = f"{winner.name} wins +${profit}!"
            self._emit(SoundEvent.WIN)
        state.last_result = HandResult(message, reason, winner_index)

        logger.info(f"{winner.name} wins pot of {total_pot} ({reason.value})")

    # ============= Hand and game lifecycle =============

    def new_hand(self) -> None:
        """
        Start the next hand.

        Players without chips are removed. If one player (or nobody) is
        left, the game ends instead and the series stats are updated.
        """
        state = self.state
        if state.phase != Phase.RESULT:
            raise IllegalAction("Finish the current hand first")
        if self.is_game_over:
            raise IllegalAction("The game is over, start a rematch or a new game")

        self._emit(SoundEvent.PUSH)

        players = state.players
        survivors = [p for p in players if p.bankroll > 0]
        eliminated = [p for p in players if p.bankroll <= 0]

        if len(survivors) <= 1:
            if survivors:
                champion = survivors[0]
                self.series.record_game(champion.name, [p.name for p in players])
                state.last_result = HandResult(f"{champion.name} WINS THE GAME!", ResultReason.GAME)
                logger.info(f"Game over, {champion.name} wins")
            else:
                state.last_result = HandResult("Game over", ResultReason.GAME)
            state.phase = Phase.RESULT
            # The game result is final: nothing before it can be undone
            self._history.clear()
            self._save()
            return

        if eliminated:
            names = ", ".join(p.name for p in eliminated)
            state.last_result = HandResult(
                f"{names} eliminated. {len(survivors)} players remain.",
                ResultReason.ELIMINATION,
            )
        else:
            state.last_result = None

        # The button moves to the next seat (after the old dealer) still holding chips
        count = len(players)
        next_dealer = next(
            players[(state.dealer_index + step) % count]
            for step in range(1, count + 1)
            if players[(state.dealer_index + step) % count].bankroll > 0
        )

        state.players = survivors
        state.dealer_index = next(i for i, p in enumerate(survivors) if p is next_dealer)
        for player in survivors:
            player.reset_for_new_hand()

        state.phase = Phase.BETTING
        state.round += 1
        state.street = Street.PREFLOP
        state.pot = 0
        state.current_bet = 0
        state.min_raise = state.big_blind
        state.last_aggressor = -1
        state.blinds_posted = False
        state.burn_card_pending = False
        state.burn_card_street = None
        state.last_action = None
        state.hand_log = []
        self._history.clear()

        logger.info(f"Starting hand #{state.round}, dealer={next_dealer.name}")

        self._post_blinds()
        self._save()

    def rematch(self) -> None:
        """Start a new game with the same players and blinds."""
        state = self.state
        if not state.players:
            raise InsufficientPlayers("No players to rematch")
        buy_in = state.players[0].total_buy_in or DEFAULT_BUY_IN
        seats = [(p.name, buy_in) for p in state.players]
        self.start_game(seats, state.small_blind, state.big_blind)

    def reset_game(self) -> None:
        """Clear the table back to setup. Series stats are kept."""
        self.state = TableState()
        self._history.clear()
        self._emit(SoundEvent.PUSH)
        logger.info("Game reset")
        self._save()

    def rebuy(self, player_index: int, amount: int) -> None:
        """
        Add chips to a player's bankroll.

        Args:
            player_index: Seat of the player buying in
            amount: Chips to add
        """
        state = self.state
        if not 0 <= player_index < len(state.players):
            raise IllegalAction(f"No player at seat {player_index}")
        if amount is None or amount <= 0:
            raise InvalidAmount("Rebuy amount must be positive")

        player = state.players[player_index]
        if state.phase == Phase.BETTING and (player.bet > 0 or player.is_all_in):
            raise IllegalAction("Cannot rebuy during an active betting round with chips in the pot")

        player.bankroll += amount
        player.total_buy_in += amount
        self._emit(SoundEvent.CHIP)
        logger.info(f"{player.name} rebuys for {amount}")
        self._save()

    def clear_series_stats(self) -> None:
        self.series.clear()
        self._save()

    # ============= Undo =============

    def undo(self) -> None:
        """Restore the state from before the most recent recorded action."""
        if not self._history:
            raise IllegalAction("Nothing to undo")
        self.state = self._history.pop()
        self._emit(SoundEvent.PUSH)
        logger.info(f"Undo ({len(self._history)} steps left)")
        self._save()

    def _push_history(self) -> None:
        # Deep copy: snapshots must never share players with the live state
        self._history.append(copy.deepcopy(self.state))

    # ============= Advice and display helpers =============

    def get_legal_actions(self) -> List[Dict[str, Any]]:
        """
        Get legal actions for the active player.

        Returns:
            List of action dicts with type and constraints
        """
        try:
            player = self._require_betting()
        except IllegalAction:
            return []

        state = self.state
        to_call = player.to_call(state.current_bet)
        actions: List[Dict[str, Any]] = [{"type": ActionType.FOLD.value}]

        if to_call == 0:
            actions.append({"type": ActionType.CHECK.value})
        else:
            actions.append({"type": ActionType.CALL.value, "amount": min(to_call, player.bankroll)})

        if player.bankroll > to_call:
            lowest = min_raise_total(state.current_bet, state.min_raise)
            if player.max_bet >= lowest:
                action_type = ActionType.BET if state.current_bet == 0 else ActionType.RAISE
                actions.append({"type": action_type.value, "min": lowest, "max": player.max_bet})

        if player.bankroll > 0:
            actions.append({"type": ActionType.ALL_IN.value, "amount": player.max_bet})

        return actions

    def get_valid_raises(self) -> List[RaiseOption]:
        return get_valid_raises(self.state)

    def get_pot_odds(self) -> Optional[Dict[str, Any]]:
        return get_pot_odds(self.state)

    def format_hand_log(self) -> str:
        """Current hand's actions as text, grouped by street."""
        lines: List[str] = []
        for street in STREET_ORDER:
            entries = [e for e in self.state.hand_log if e.street == street]
            if not entries:
                continue
            lines.append(f"{street.label}:")
            for entry in entries:
                text = f"{entry.action} ${entry.amount}" if entry.amount else entry.action
                lines.append(f"  {entry.player} {text}")
        return "\n".join(lines)

    def format_last_action(self) -> str:
        last = self.state.last_action
        if last is None:
            return ""
        templates = {
            "fold": "{player} folded",
            "check": "{player} checked",
            "call": "{player} called ${amount}",
            "raise": "{player} raised to ${amount}",
            "allin": "{player} ALL-IN ${amount}",
            "blind": "{player} posted ${amount}",
        }
        template = templates.get(last.action)
        if template is None:
            return ""
        return template.format(player=last.player, amount=last.amount)

    def _log_hand_action(self, player: str, action: str, amount: Optional[int] = None) -> None:
        hand_log = self.state.hand_log
        hand_log.append(HandLogEntry(player, action, self.state.street, amount))
        if len(hand_log) > MAX_HAND_LOG:
            del hand_log[:-MAX_HAND_LOG]

    # ============= Collaborators =============

    def get_state(self) -> Dict[str, Any]:
        """
        Get the current table state for display.

        Returns:
            Serialised table plus derived values for the active player
        """
        state = self.state
        return {
            "table": state.to_dict(),
            "series": self.series.to_dict(),
            "can_undo": self.can_undo,
            "pot_total": state.pot_total,
            "total_chips_in_play": state.total_chips_in_play,
            "legal_actions": self.get_legal_actions(),
            "valid_raises": [option.to_dict() for option in self.get_valid_raises()],
            "pot_odds": self.get_pot_odds(),
        }

    def to_dict(self) -> Dict[str, Any]:
        """Persisted representation (history is never saved)."""
        data = self.state.to_dict()
        data["series"] = self.series.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]], store: Optional[Any] = None) -> PokerEngine:
        data = data or {}
        return cls(
            store=store,
            series=SeriesBook.from_dict(data.get("series")),
            state=TableState.from_dict(data),
        )

    def _emit(self, event: SoundEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception as e:
                logger.error(f"Sound listener failed on {event.value}: {e}")

    def _save(self) -> None:
        if self.store is None:
            return
        try:
            self.store.save(STORAGE_KEY, self.to_dict())
        except StorageError as e:
            # The transition already happened; only the save is lost
            logger.warning(f"Could not save table state: {e}")
