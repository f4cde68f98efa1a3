"""
Game Setup - Creates the initial board.

This module handles:
- Building and shuffling the 52-card deck
- Dealing the triangular tableau
- Creating the empty waste pile, selection and foundations

Shuffling takes an explicit random.Random so games can be replayed
from a seed.
"""

from __future__ import annotations
import random

from .card import Card, DECK_SUITS, MIN_RANK, MAX_RANK
from .ids import COLUMNS, ROWS, FOUNDATION_COUNT, encode_tableau_id
from .slot import BLANK, EMPTY, Slot, state_for
from .state import Board, Selection, Stack, Tableau


DECK_SIZE = len(DECK_SUITS) * (MAX_RANK - MIN_RANK + 1)
TABLEAU_CARD_COUNT = sum(range(1, COLUMNS + 1))  # 1 + 2 + ... + 7 = 28


def new_board(rng: random.Random | None = None, seed: int | None = None) -> Board:
    """
    Set up a new game.

    Args:
        rng: Randomness source for the shuffle
        seed: Seed for a fresh random.Random when rng is not given

    Returns:
        Board with 24 cards in the draw pile and 28 on the tableau
    """
    if rng is None:
        rng = random.Random(seed)

    deck = generate_deck(rng)
    playing_area, available_cards = generate_tableau(deck)

    return Board(
        available_cards=available_cards,
        deck=None,
        stack=generate_stack(),
        selection=generate_selection_slots(),
        playing_area=playing_area,
        aces=generate_foundations(),
    )


def generate_deck(rng: random.Random) -> list[Card]:
    """All 52 cards exactly once, in a uniformly random order."""
    deck = [
        Card(number, suit)
        for suit in DECK_SUITS
        for number in range(MIN_RANK, MAX_RANK + 1)
    ]
    rng.shuffle(deck)
    return deck


def generate_tableau(deck: list[Card]) -> tuple[Tableau, list[Card]]:
    """
    Deal the tableau from the end of the deck.

    Column c gets c + 1 face cards in rows 0..c, an Empty slot below
    them and Blank slots for the rest of the column.

    Returns:
        (tableau, remaining deck)
    """
    if len(deck) < TABLEAU_CARD_COUNT:
        raise ValueError(f"Need {TABLEAU_CARD_COUNT} cards to deal, got {len(deck)}")

    remaining = deck.copy()
    columns = []
    for column in range(COLUMNS):
        dealt = column + 1
        slots = []
        for row in range(ROWS):
            slot_id = encode_tableau_id(column, row)
            if row < dealt:
                slots.append(Slot(slot_id, state_for(remaining.pop())))
            elif row == dealt:
                slots.append(Slot(slot_id, EMPTY))
            else:
                slots.append(Slot(slot_id, BLANK))
        columns.append(slots)

    return Tableau(columns=columns), remaining


def generate_stack() -> Stack:
    return Stack.create()


def generate_selection_slots() -> Selection:
    return Selection.create()


def generate_foundations() -> list[Slot]:
    return [Slot(f"ace{i}", EMPTY) for i in range(FOUNDATION_COUNT)]
