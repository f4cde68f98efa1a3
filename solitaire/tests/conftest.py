"""
Pytest fixtures for Solitaire tests.
"""

import pytest

from ..engine_core.card import Card, Suit
from ..engine_core.ids import DECK_MARKER_ID
from ..engine_core.reducer import Reducer
from ..engine_core.setup import new_board, generate_foundations
from ..engine_core.slot import EMPTY, Occupied, Slot
from ..engine_core.state import Board, Origin, Selection, Stack, StackOrigin, Tableau


@pytest.fixture
def reducer() -> Reducer:
    return Reducer()


@pytest.fixture
def fresh_board() -> Board:
    """A freshly dealt board with a fixed seed."""
    return new_board(seed=1234)


@pytest.fixture
def build_board():
    """
    Factory for hand-built boards.

    Args (all optional):
        columns: {column index: [cards top to bottom]}
        available: draw pile, last card is drawn first
        stack: waste cards in push order (last one ends on top)
        aces: top card (or None) per foundation pile
        selected: cards to put in the selection
        origin: origin of the selection (defaults to the waste pile)
    """
    def _build(
        columns: dict[int, list[Card]] | None = None,
        available: list[Card] | None = None,
        stack: list[Card] | None = None,
        aces: list[Card | None] | None = None,
        selected: list[Card] | None = None,
        origin: Origin | None = None,
    ) -> Board:
        tableau = Tableau.create()
        for column, cards in (columns or {}).items():
            if cards:
                tableau = tableau.placed(tableau.at(column, 0).id, cards)
        tableau = tableau.cascaded()

        waste = Stack.create()
        for card in stack or []:
            waste = waste.push(card)

        foundations = generate_foundations()
        for i, card in enumerate(aces or []):
            if card is not None:
                foundations[i] = foundations[i].with_state(Occupied(card))

        selection = Selection.create()
        if selected:
            selection = selection.with_contents(origin or StackOrigin(), selected)

        available = list(available or [])
        return Board(
            available_cards=available,
            deck=None if available else Slot(DECK_MARKER_ID, EMPTY),
            stack=waste,
            selection=selection,
            playing_area=tableau,
            aces=foundations,
        )

    return _build


@pytest.fixture
def filler_cards() -> list[Card]:
    """Twenty-one distinct cards: all clubs and the diamonds ace to eight."""
    return (
        [Card(n, Suit.CLUB) for n in range(1, 14)]
        + [Card(n, Suit.DIAMOND) for n in range(1, 9)]
    )
