"""
Tests for betting actions and turn progression.
"""

import copy

import pytest
from chipsim.core.errors import IllegalAction, InvalidAmount, OutOfTurn
from chipsim.core.game import PokerEngine
from chipsim.core.rules import ActionType, Phase, Street


def _total_chips(engine):
    return engine.state.total_chips_in_play


class TestCheckAndCall:
    """Tests for check and call."""

    def test_call_then_check_moves_to_flop(self, heads_up):
        """Alice completes, Bob checks his option: the flop is next."""
        heads_up.call()
        assert heads_up.state.active_player_index == 1

        heads_up.check()

        state = heads_up.state
        assert state.street == Street.FLOP
        assert state.pot == 20
        assert all(p.bet == 0 for p in state.players)
        assert state.current_bet == 0
        assert state.burn_card_pending
        assert state.burn_card_street == Street.FLOP
        # Post-flop action starts left of the dealer
        assert state.active_player_index == 1

    def test_check_facing_bet_rejected(self, heads_up):
        before = copy.deepcopy(heads_up.state)

        with pytest.raises(IllegalAction):
            heads_up.check()

        assert heads_up.state == before

    def test_call_with_nothing_to_call_checks(self, heads_up):
        heads_up.call()
        result = heads_up.call()

        assert result.action_type == ActionType.CHECK
        assert heads_up.state.street == Street.FLOP

    def test_short_call_goes_all_in(self, engine):
        """Calling more than the bankroll commits what is left."""
        engine.start_game([("Alice", 100), ("Bob", 50)], 5, 10)
        engine.raise_to(80)

        result = engine.call()

        bob = engine.state.players[1]
        assert result.amount == 40
        assert bob.is_all_in
        assert bob.bankroll == 0
        # Only Alice can still act, so the board runs out
        assert engine.state.street == Street.FLOP
        assert engine.state.burn_card_pending
        assert engine.state.pot == 130
        assert _total_chips(engine) == 150

    def test_burn_card_blocks_betting(self, heads_up):
        heads_up.call()
        heads_up.check()

        with pytest.raises(IllegalAction):
            heads_up.check()
        assert heads_up.get_legal_actions() == []

        heads_up.acknowledge_burn_card()
        heads_up.check()
        assert heads_up.state.active_player_index == 0

    def test_acknowledge_without_burn_rejected(self, heads_up):
        with pytest.raises(IllegalAction):
            heads_up.acknowledge_burn_card()


class TestRaises:
    """Tests for bet/raise validation and the minimum raise."""

    def test_min_raise(self, heads_up):
        result = heads_up.raise_to(20)

        state = heads_up.state
        alice, bob = state.players
        assert result.action_type == ActionType.RAISE
        assert result.amount == 15
        assert alice.bet == 20
        assert alice.bankroll == 80
        assert state.current_bet == 20
        assert state.min_raise == 10
        assert state.last_aggressor == 0
        assert not bob.acted
        assert state.active_player_index == 1

    def test_below_min_raise_rejected(self, heads_up):
        before = copy.deepcopy(heads_up.state)

        with pytest.raises(InvalidAmount):
            heads_up.raise_to(15)

        assert heads_up.state == before

    @pytest.mark.parametrize("amount", [0, -5, 10, 5])
    def test_raise_not_above_current_bet_rejected(self, heads_up, amount):
        with pytest.raises(InvalidAmount):
            heads_up.raise_to(amount)

    def test_raise_beyond_bankroll_rejected(self, heads_up):
        with pytest.raises(InvalidAmount):
            heads_up.raise_to(101)

    def test_reraise_sets_new_minimum(self, heads_up):
        heads_up.raise_to(30)
        assert heads_up.state.min_raise == 20

        with pytest.raises(InvalidAmount):
            heads_up.raise_to(45)

        heads_up.raise_to(50)
        assert heads_up.state.current_bet == 50
        assert heads_up.state.min_raise == 20
        assert heads_up.state.last_aggressor == 1

    def test_opening_bet_on_flop(self, heads_up):
        heads_up.call()
        heads_up.check()
        heads_up.acknowledge_burn_card()

        result = heads_up.raise_to(10)

        assert result.action_type == ActionType.BET
        assert heads_up.state.current_bet == 10
        assert heads_up.state.hand_log[-1].action == "bets"

    def test_flop_bet_below_big_blind_rejected(self, heads_up):
        heads_up.call()
        heads_up.check()
        heads_up.acknowledge_burn_card()

        with pytest.raises(InvalidAmount):
            heads_up.raise_to(5)


class TestShortAllIn:
    """North is short and shoves for less than a full raise."""

    @pytest.fixture
    def short_north(self):
        engine = PokerEngine()
        engine.start_game(
            [("North", 15), ("East", 100), ("South", 100), ("West", 100)],
            small_blind=5,
            big_blind=10,
        )
        # West is under the gun and calls
        engine.call()
        return engine

    def test_short_raise_does_not_reopen_action(self, short_north):
        short_north.raise_to(15)

        state = short_north.state
        north, east, south, west = state.players
        assert north.is_all_in
        assert state.current_bet == 15
        assert state.min_raise == 10
        assert state.last_aggressor == -1
        assert west.acted
        assert state.active_player_index == 1

    def test_short_raise_still_requires_calls(self, short_north):
        """West already acted but must still match the new bet."""
        short_north.raise_to(15)
        short_north.call()  # East
        short_north.call()  # South

        assert short_north.state.street == Street.PREFLOP
        assert short_north.state.active_player_index == 3

        short_north.call()  # West

        state = short_north.state
        assert state.street == Street.FLOP
        assert state.pot == 60

    def test_short_all_in_action_reopens(self, short_north):
        """The all-in action always hands the action back to everyone else."""
        short_north.all_in()

        state = short_north.state
        west = state.players[3]
        assert not west.acted
        assert state.current_bet == 15
        assert state.min_raise == 10
        assert state.last_aggressor == 0

    def test_full_all_in_raises_minimum(self, heads_up):
        heads_up.all_in()

        state = heads_up.state
        assert state.current_bet == 100
        assert state.min_raise == 90
        assert state.players[0].is_all_in

    def test_all_in_call_runs_out_board(self, heads_up):
        heads_up.all_in()
        heads_up.call()

        state = heads_up.state
        assert state.pot == 200
        assert state.street == Street.FLOP
        assert state.burn_card_pending
        assert state.players_who_can_act == 0


class TestFolding:
    """Tests for folding and the fold-to-one win."""

    def test_heads_up_fold(self, heads_up):
        heads_up.fold()

        state = heads_up.state
        alice, bob = state.players
        assert state.phase == Phase.RESULT
        assert alice.bankroll == 95
        assert bob.bankroll == 105
        assert state.last_result.winner == 1
        assert state.last_result.message == "Bob wins +$5! (Others folded)"

    def test_fold_around_to_big_blind(self, three_handed):
        three_handed.fold()
        three_handed.fold()

        state = three_handed.state
        a, b, c = state.players
        assert state.phase == Phase.RESULT
        assert c.bankroll == 101
        assert c.stats.hands_won == 1
        assert a.stats.hands_lost == 1
        assert b.stats.hands_lost == 1
        assert c.stats.hands_lost == 0
        assert state.pot == 0
        assert _total_chips(three_handed) == 300

    def test_fold_counts_as_lost_hand(self, three_handed):
        """Folding under the gun is a lost hand for the folder only."""
        three_handed.fold()

        a, b, c = three_handed.state.players
        assert a.stats.hands_lost == 1
        assert b.stats.hands_lost == 0
        assert three_handed.state.phase == Phase.BETTING

    def test_no_action_after_result(self, heads_up):
        heads_up.fold()
        with pytest.raises(IllegalAction):
            heads_up.check()
        assert heads_up.get_legal_actions() == []


class TestTakeAction:
    """Tests for the action dispatcher."""

    def test_dispatch_by_name(self, heads_up):
        result = heads_up.take_action("call")

        assert result.action_type == ActionType.CALL
        assert result.message == "Alice called $5"
        assert heads_up.state.players[0].bet == 10

    def test_dispatch_raise(self, heads_up):
        heads_up.take_action(ActionType.RAISE, 30, player_index=0)
        assert heads_up.state.current_bet == 30

    def test_unknown_action(self, heads_up):
        with pytest.raises(IllegalAction):
            heads_up.take_action("shove")

    def test_out_of_turn(self, heads_up):
        before = copy.deepcopy(heads_up.state)

        with pytest.raises(OutOfTurn):
            heads_up.take_action(ActionType.CALL, player_index=1)

        assert heads_up.state == before

    def test_out_of_turn_error_code(self, heads_up):
        with pytest.raises(OutOfTurn) as exc_info:
            heads_up.take_action("fold", player_index=1)
        assert exc_info.value.code == "out_of_turn"


class TestLegalActions:
    """Tests for get_legal_actions."""

    def test_preflop_small_blind(self, heads_up):
        actions = {a["type"]: a for a in heads_up.get_legal_actions()}

        assert set(actions) == {"FOLD", "CALL", "RAISE", "ALL_IN"}
        assert actions["CALL"]["amount"] == 5
        assert actions["RAISE"]["min"] == 20
        assert actions["RAISE"]["max"] == 100
        assert actions["ALL_IN"]["amount"] == 100

    def test_big_blind_option(self, heads_up):
        heads_up.call()
        types = [a["type"] for a in heads_up.get_legal_actions()]
        assert types == ["FOLD", "CHECK", "RAISE", "ALL_IN"]

    def test_cannot_raise_when_covering_only_the_call(self, heads_up):
        heads_up.all_in()
        types = [a["type"] for a in heads_up.get_legal_actions()]
        assert types == ["FOLD", "CALL", "ALL_IN"]


class TestHandLog:
    """Tests for the per-hand action log."""

    def test_log_and_format(self, heads_up):
        heads_up.call()

        assert heads_up.format_hand_log() == (
            "Pre-Flop:\n"
            "  Alice posts small blind $5\n"
            "  Bob posts big blind $10\n"
            "  Alice calls $5"
        )
        assert heads_up.format_last_action() == "Alice called $5"

    def test_log_spans_streets(self, heads_up):
        heads_up.call()
        heads_up.check()
        heads_up.acknowledge_burn_card()
        heads_up.check()

        text = heads_up.format_hand_log()
        assert "Flop:\n  Bob checks" in text
        assert heads_up.format_last_action() == "Bob checked"

    def test_log_is_bounded(self, engine):
        engine.start_game([("A", 100000), ("B", 100000)], 5, 10)
        for i in range(60):
            engine.raise_to(20 + 10 * i)

        assert len(engine.state.hand_log) == 50
        assert engine.state.hand_log[-1].amount == 610
