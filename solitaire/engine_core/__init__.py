"""
Engine Core - Deterministic board state management and move validation.

The engine is the runtime that:
1. Deals a new Board
2. Decodes click event ids
3. Validates the move against the solitaire rules
4. Applies it via the reducer and returns the next Board
5. Converts boards to and from their serialized snapshot
"""

from .card import Card, Suit, Color
from .slot import Slot, SlotState, Occupied, Empty, Blank
from .state import (
    Board,
    Stack,
    Selection,
    Tableau,
    Origin,
    NoOrigin,
    DeckOrigin,
    StackOrigin,
    PlayingAreaOrigin,
)
from .errors import SolitaireError, DecodeError, DecodeErrorKind, InvariantError
from .ids import EventTarget, parse_event, decode_tableau_id, encode_tableau_id
from .action import Action, ActionType, ActionResult
from .reducer import Reducer, apply_action, apply_click
from .setup import new_board, generate_deck, generate_tableau
from .serialize import board_to_dict, board_from_dict, board_to_json, board_from_json

__all__ = [
    "Card",
    "Suit",
    "Color",
    "Slot",
    "SlotState",
    "Occupied",
    "Empty",
    "Blank",
    "Board",
    "Stack",
    "Selection",
    "Tableau",
    "Origin",
    "NoOrigin",
    "DeckOrigin",
    "StackOrigin",
    "PlayingAreaOrigin",
    "SolitaireError",
    "DecodeError",
    "DecodeErrorKind",
    "InvariantError",
    "EventTarget",
    "parse_event",
    "decode_tableau_id",
    "encode_tableau_id",
    "Action",
    "ActionType",
    "ActionResult",
    "Reducer",
    "apply_action",
    "apply_click",
    "new_board",
    "generate_deck",
    "generate_tableau",
    "board_to_dict",
    "board_from_dict",
    "board_to_json",
    "board_from_json",
]
