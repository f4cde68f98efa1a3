"""
Tests for the reducer (state transitions).

Tests:
- Each click handler, legal and illegal paths
- Move rules (alternating colors, descending ranks, foundations)
- Cascade after tableau changes
- Dispatch and error handling
"""

import pytest

from ..engine_core.action import Action, ActionType
from ..engine_core.card import Card, Color, Suit
from ..engine_core.errors import InvariantError
from ..engine_core.reducer import (
    Reducer,
    apply_action,
    apply_click,
    can_add_to_foundation,
    is_alternating,
    is_descending,
)
from ..engine_core.serialize import board_to_json
from ..engine_core.slot import EMPTY, Occupied, Slot
from ..engine_core.state import NoOrigin, PlayingAreaOrigin, StackOrigin


KS = Card(13, Suit.SPADE)
QH = Card(12, Suit.HEART)
QS = Card(12, Suit.SPADE)
JS = Card(11, Suit.SPADE)
JH = Card(11, Suit.HEART)
TD = Card(10, Suit.DIAMOND)
NINE_S = Card(9, Suit.SPADE)
NINE_H = Card(9, Suit.HEART)
EIGHT_S = Card(8, Suit.SPADE)
EIGHT_H = Card(8, Suit.HEART)
EIGHT_D = Card(8, Suit.DIAMOND)
SEVEN_S = Card(7, Suit.SPADE)
FIVE_D = Card(5, Suit.DIAMOND)
SIX_D = Card(6, Suit.DIAMOND)
SIX_H = Card(6, Suit.HEART)
SEVEN_D = Card(7, Suit.DIAMOND)
ACE_H = Card(1, Suit.HEART)


class TestRules:
    """Tests for the move rules."""

    def test_alternating_descending_run(self):
        run = [KS, QH, JS]
        assert is_alternating(run)
        assert is_descending(run)

    def test_same_color_is_not_alternating(self):
        assert not is_alternating([KS, QS])
        assert is_descending([KS, QS])

    def test_skipped_rank_is_not_descending(self):
        assert is_alternating([KS, JH])
        assert not is_descending([KS, JH])

    def test_single_card_and_empty_runs(self):
        assert is_alternating([KS]) and is_descending([KS])
        assert is_alternating([]) and is_descending([])

    def test_long_run_checks_every_pair(self):
        run = [Card(n, Suit.SPADE if n % 2 else Suit.HEART) for n in range(13, 0, -1)]
        assert is_alternating(run) and is_descending(run)
        run[7] = Card(run[7].number, Suit.CLUB if run[7].color == Color.RED else Suit.HEART)
        assert not is_alternating(run)

    def test_foundation_rule(self):
        empty = Slot("ace0", EMPTY)
        for suit in Suit:
            assert can_add_to_foundation(empty, Card(1, suit))
        assert not can_add_to_foundation(empty, Card(2, Suit.SPADE))

        five = Slot("ace0", Occupied(FIVE_D))
        assert can_add_to_foundation(five, SIX_D)
        assert not can_add_to_foundation(five, SIX_H)
        assert not can_add_to_foundation(five, SEVEN_D)


class TestDeckClick:
    """Tests for drawing from the draw pile."""

    def test_draws_three(self, fresh_board, reducer):
        drawn = fresh_board.available_cards[-3:]
        result = reducer.apply_click(fresh_board, "deck")

        assert result.success and result.changed
        board = result.new_state
        assert len(board.available_cards) == 21
        assert board.stack.contents == drawn  # third popped card on top
        assert board.stack.top == fresh_board.available_cards[-3]
        assert board.deck is None

    def test_input_board_untouched(self, fresh_board, reducer):
        reducer.apply_click(fresh_board, "deck")
        assert len(fresh_board.available_cards) == 24
        assert fresh_board.stack.is_empty

    def test_last_draw_sets_redeal_marker(self, fresh_board, reducer):
        board = fresh_board
        for _ in range(8):
            board = reducer.apply_click(board, "deck0").new_state

        assert board.available_cards == []
        assert len(board.stack.contents) == 24
        assert board.deck == Slot("deck0", EMPTY)
        assert all(s.is_occupied for s in board.stack.available_slots)

    def test_partial_draw(self, build_board, reducer):
        board = build_board(available=[SIX_H, FIVE_D])
        result = reducer.apply_click(board, "deck")

        assert result.new_state.available_cards == []
        assert result.new_state.stack.contents == [SIX_H, FIVE_D]
        assert result.new_state.deck is not None

    def test_redeal_is_not_implemented(self, build_board, reducer):
        board = build_board(stack=[SIX_H, FIVE_D])
        assert board.deck is not None

        result = reducer.apply_click(board, "deck")

        assert not result.success
        assert result.error_code == "NOT_IMPLEMENTED"

    def test_empty_draw_pile_without_marker_is_a_bug(self, build_board, reducer):
        board = build_board()._copy_with(deck=None)
        with pytest.raises(InvariantError):
            reducer.apply_click(board, "deck")

    def test_custom_draw_count(self, fresh_board):
        result = Reducer(draw_count=1).apply_click(fresh_board, "deck")
        assert len(result.new_state.available_cards) == 23


class TestStackClick:
    """Tests for lifting from the waste pile."""

    def test_lifts_top_card(self, build_board, reducer):
        board = build_board(stack=[SIX_H, FIVE_D, KS])
        result = reducer.apply_click(board, "stack")

        new_board = result.new_state
        assert result.changed
        assert new_board.selection.origin == StackOrigin()
        assert new_board.selection.cards == [KS]
        assert new_board.stack.contents == [FIVE_D, SIX_H]

    def test_waste_pile_is_lifo(self, build_board, reducer):
        board = build_board(stack=[SIX_H, FIVE_D, KS])
        board = reducer.apply_click(board, "s0").new_state
        assert board.selection.cards == [KS]

        board = reducer.apply_click(board, "return").new_state
        assert board.stack.top == KS
        _, popped = board.stack.pop()
        assert popped.top == FIVE_D

    def test_noop_when_selection_active(self, build_board, reducer):
        board = build_board(stack=[SIX_H], selected=[KS], origin=PlayingAreaOrigin("a0"))
        result = reducer.apply_click(board, "stack")
        assert result.success
        assert not result.changed
        assert result.new_state is board

    def test_noop_on_empty_waste(self, build_board, reducer):
        result = reducer.apply_click(build_board(), "selection0")
        assert result.success and not result.changed


class TestPlayingAreaSource:
    """Tests for lifting runs from the tableau."""

    def test_lift_alternating_run(self, build_board, reducer):
        board = build_board(columns={0: [KS, QH, JS]})
        result = reducer.apply_click(board, "a0")

        new_board = result.new_state
        assert new_board.selection.cards == [KS, QH, JS]
        assert new_board.selection.origin == PlayingAreaOrigin("a0")
        assert new_board.playing_area.at(0, 0).is_empty  # top of an empty column
        assert all(new_board.playing_area.at(0, r).is_blank for r in range(1, 13))

    def test_lift_part_of_column(self, build_board, reducer):
        board = build_board(columns={0: [FIVE_D, QH, JS]})
        new_board = reducer.apply_click(board, "a1").new_state

        assert new_board.selection.cards == [QH, JS]
        assert new_board.playing_area.at(0, 0).card == FIVE_D
        assert new_board.playing_area.at(0, 1).is_empty
        assert new_board.playing_area.at(0, 2).is_blank

    def test_same_color_run_cannot_be_lifted(self, build_board, reducer):
        board = build_board(columns={0: [KS, QS]})
        result = reducer.apply_click(board, "a0")
        assert result.success and not result.changed
        assert isinstance(result.new_state.selection.origin, NoOrigin)

    def test_non_descending_run_cannot_be_lifted(self, build_board, reducer):
        board = build_board(columns={0: [KS, JH]})
        result = reducer.apply_click(board, "a0")
        assert not result.changed

    def test_noop_when_selection_active(self, build_board, reducer):
        board = build_board(columns={0: [KS]}, selected=[FIVE_D])
        result = reducer.apply_click(board, "a0")
        assert not result.changed

    def test_blank_slot_click_is_noop(self, build_board, reducer):
        board = build_board(columns={0: [KS]})
        result = reducer.apply_click(board, "a5")
        assert result.success and not result.changed


class TestPlayingAreaDestination:
    """Tests for placing the selection on the tableau."""

    def test_noop_without_selection(self, build_board, reducer):
        board = build_board(columns={0: [KS]})
        result = reducer.apply_click(board, "a1")
        assert not result.changed

    def test_any_card_starts_an_empty_column(self, build_board, reducer):
        board = build_board(columns={0: [KS]})
        board = reducer.apply_click(board, "a0").new_state
        result = reducer.apply_click(board, "b0")

        new_board = result.new_state
        assert new_board.playing_area.at(1, 0).card == KS
        assert new_board.playing_area.at(1, 1).is_empty
        assert new_board.playing_area.at(0, 0).is_empty
        assert isinstance(new_board.selection.origin, NoOrigin)

    def test_place_run_below_matching_card(self, build_board, reducer):
        board = build_board(columns={0: [TD], 1: [NINE_S, EIGHT_H]})
        board = reducer.apply_click(board, "b0").new_state
        new_board = reducer.apply_click(board, "a1").new_state

        tableau = new_board.playing_area
        assert [tableau.at(0, r).card for r in range(3)] == [TD, NINE_S, EIGHT_H]
        assert tableau.at(0, 3).is_empty
        assert tableau.at(0, 4).is_blank
        assert tableau.at(1, 0).is_empty
        assert new_board.selection.cards == []

    def test_same_color_rejected(self, build_board, reducer):
        board = build_board(columns={0: [NINE_H]}, selected=[EIGHT_D])
        result = reducer.apply_click(board, "a1")
        assert not result.changed
        assert result.new_state.selection.cards == [EIGHT_D]

    def test_wrong_rank_rejected(self, build_board, reducer):
        board = build_board(columns={0: [NINE_H]}, selected=[SEVEN_S])
        assert not reducer.apply_click(board, "a1").changed

    def test_run_that_does_not_fit_is_rejected(self, build_board, reducer):
        column = [Card(n, Suit.CLUB) for n in range(1, 12)] + [Card(5, Suit.HEART)]
        run = [Card(4, Suit.SPADE), Card(3, Suit.HEART)]
        board = build_board(columns={0: column, 1: run})
        board = reducer.apply_click(board, "b0").new_state
        assert board.playing_area.at(0, 12).is_empty

        result = reducer.apply_click(board, "ac")

        assert result.success and not result.changed
        assert result.new_state.selection.cards == run
        assert result.new_state.selection.origin == PlayingAreaOrigin("b0")

    def test_placing_flips_only_the_next_slot(self, build_board, reducer):
        board = build_board(columns={0: [NINE_H]}, selected=[EIGHT_S])
        new_board = reducer.apply_click(board, "a1").new_state
        assert new_board.playing_area.at(0, 1).card == EIGHT_S
        assert new_board.playing_area.at(0, 2).is_empty
        assert new_board.playing_area.at(0, 3).is_blank


class TestAceClick:
    """Tests for foundation placement."""

    def test_empty_pile_takes_an_ace(self, build_board, reducer):
        board = build_board(columns={0: [ACE_H]})
        board = reducer.apply_click(board, "a0").new_state
        new_board = reducer.apply_click(board, "ace2").new_state

        assert new_board.aces[2].state == Occupied(ACE_H)
        assert new_board.playing_area.at(0, 0).is_empty
        assert isinstance(new_board.selection.origin, NoOrigin)

    def test_builds_up_in_suit(self, build_board, reducer):
        board = build_board(aces=[FIVE_D], selected=[SIX_D])
        new_board = reducer.apply_click(board, "ace0").new_state
        assert new_board.aces[0].card == SIX_D
        assert new_board.selection.cards == []

    @pytest.mark.parametrize("card", [SIX_H, SEVEN_D])
    def test_rejects_wrong_card(self, build_board, reducer, card):
        board = build_board(aces=[FIVE_D], selected=[card])
        result = reducer.apply_click(board, "ace0")
        assert not result.changed
        assert result.new_state.aces[0].card == FIVE_D

    def test_empty_pile_rejects_non_ace(self, build_board, reducer):
        board = build_board(selected=[SIX_D])
        assert not reducer.apply_click(board, "ace1").changed

    def test_needs_exactly_one_card(self, build_board, reducer):
        board = build_board(selected=[Card(2, Suit.HEART), Card(1, Suit.SPADE)])
        assert not reducer.apply_click(board, "ace0").changed
        assert not reducer.apply_click(build_board(), "ace0").changed


class TestReturnClick:
    """Tests for returning the selection to its origin."""

    def test_noop_without_selection(self, fresh_board, reducer):
        before = board_to_json(fresh_board)
        result = reducer.apply_click(fresh_board, "return")

        assert result.success and not result.changed
        assert board_to_json(result.new_state) == before

    def test_returns_run_to_tableau(self, build_board, reducer):
        original = build_board(columns={0: [FIVE_D, QH, JS]})
        lifted = reducer.apply_click(original, "a1").new_state
        returned = reducer.apply_click(lifted, "return").new_state
        assert returned == original

    def test_returns_card_to_waste(self, build_board, reducer):
        original = build_board(stack=[SIX_H, FIVE_D, KS])
        lifted = reducer.apply_click(original, "stack").new_state
        returned = reducer.apply_click(lifted, "return").new_state
        assert returned == original
        assert returned.stack.top == KS


class TestClearSelection:
    """Tests for the debug clear-selection action."""

    def test_drops_the_selection(self, build_board):
        board = build_board(stack=[SIX_H, KS])
        board = apply_click(board, "stack").new_state

        result = apply_action(board, Action.clear_selection())

        assert isinstance(result.new_state.selection.origin, NoOrigin)
        assert all(s.is_blank for s in result.new_state.selection.contents)
        assert result.new_state.stack.contents == [SIX_H]


class TestDispatch:
    """Tests for event routing and error reporting."""

    @pytest.mark.parametrize("event_id", ["", "h0", "ad", "ace9", "nonsense", "x"])
    def test_decode_errors_are_reported(self, fresh_board, reducer, event_id):
        result = reducer.apply_click(fresh_board, event_id)
        assert not result.success
        assert result.error_code == "DECODE_ERROR"
        assert result.new_state is None

    def test_invalid_action_payload(self, fresh_board, reducer):
        result = reducer.apply(fresh_board, Action(action_type=ActionType.ACE, index=7))
        assert not result.success
        assert result.error_code == "INVALID_ACTION"


class TestEndToEnd:
    """Full click sequences."""

    def test_draw_lift_and_place(self, build_board, filler_cards, reducer):
        available = filler_cards + [EIGHT_S, Card(2, Suit.HEART), Card(3, Suit.HEART)]
        board = build_board(columns={0: [NINE_H]}, available=available)
        assert len(board.available_cards) == 24

        board = reducer.apply_click(board, "deck").new_state
        assert len(board.available_cards) == 21
        assert len(board.stack.contents) == 3
        assert board.stack.top == EIGHT_S

        board = reducer.apply_click(board, "stack").new_state
        assert board.selection.cards == [EIGHT_S]
        assert board.selection.origin == StackOrigin()

        result = reducer.apply_click(board, "a1")
        board = result.new_state
        assert result.changed
        assert board.playing_area.at(0, 1).card == EIGHT_S
        assert board.playing_area.at(0, 2).is_empty
        assert isinstance(board.selection.origin, NoOrigin)
        assert len(board.available_cards) == 21
        assert board.stack.top == Card(2, Suit.HEART)

    def test_fresh_board_draw_then_lift(self, fresh_board, reducer):
        third_popped = fresh_board.available_cards[-3]

        board = reducer.apply_click(fresh_board, "deck").new_state
        board = reducer.apply_click(board, "stack").new_state

        assert board.selection.cards == [third_popped]
        assert board.selection.origin == StackOrigin()
        assert len(board.stack.contents) == 2

    def test_action_factories_match_click_ids(self, build_board, reducer):
        board = build_board(columns={0: [ACE_H]}, available=[SIX_H])

        by_click = reducer.apply_click(board, "deck").new_state
        assert reducer.apply(board, Action.deck()).new_state == by_click

        board = reducer.apply(board, Action.playing_area("a0")).new_state
        assert board.selection.cards == [ACE_H]
        board = reducer.apply(board, Action.return_selection()).new_state
        assert board.playing_area.at(0, 0).card == ACE_H

        board = reducer.apply(board, Action.playing_area("a0")).new_state
        board = reducer.apply(board, Action.ace(3)).new_state
        assert board.aces[3].card == ACE_H

        board = reducer.apply(board, Action.deck()).new_state
        board = reducer.apply(board, Action.stack()).new_state
        assert board.selection.cards == [SIX_H]
