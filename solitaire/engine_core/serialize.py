"""
Board Serialization - The snapshot exchanged with the presentation layer.

The serialized board is the only state that crosses the engine boundary.
It is a JSON-friendly dict with externally tagged variants:

    Card      {"number": 12, "suit": "Heart", "color": "Red"}
    SlotState "Empty" | "Blank" | {"Occupied": Card}
    Slot      {"id": "a3", "state": SlotState}
    Origin    "None" | "Deck" | "Stack" | {"PlayingAreaId": "a3"}

    {
        "available_cards": [Card, ...],
        "deck": null | Slot,
        "stack": {"available_slots": [Slot x 9], "contents": [Card, ...]},
        "selection": {"origin": Origin, "contents": [Slot x 13]},
        "playing_area": [[Slot x 13] x 7],
        "aces": [Slot x 4]
    }

Decoding checks shape and invariants; anything off raises DecodeError.
"""

from __future__ import annotations
import json
from typing import Any, Mapping

from .card import Card, Suit
from .errors import DecodeError, DecodeErrorKind
from .ids import (
    COLUMNS,
    ROWS,
    STACK_SIZE,
    SELECTION_SIZE,
    FOUNDATION_COUNT,
    DECK_MARKER_ID,
    STACK_SLOT_PREFIX,
    SELECTION_SLOT_PREFIX,
    decode_tableau_id,
    encode_tableau_id,
)
from .slot import BLANK, EMPTY, Blank, Empty, Occupied, Slot, SlotState
from .state import (
    Board,
    DeckOrigin,
    NoOrigin,
    Origin,
    PlayingAreaOrigin,
    Selection,
    Stack,
    StackOrigin,
    Tableau,
)


BOARD_KEYS = ("available_cards", "deck", "stack", "selection", "playing_area", "aces")


def _fail(path: str, message: str) -> DecodeError:
    return DecodeError(DecodeErrorKind.MALFORMED_BOARD, f"{path}: {message}", path)


def _expect_list(data: Any, path: str, length: int | None = None) -> list:
    if not isinstance(data, list):
        raise _fail(path, f"expected a list, got {type(data).__name__}")
    if length is not None and len(data) != length:
        raise _fail(path, f"expected {length} entries, got {len(data)}")
    return data


def _expect_mapping(data: Any, path: str, keys: tuple[str, ...]) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise _fail(path, f"expected an object, got {type(data).__name__}")
    missing = [key for key in keys if key not in data]
    if missing:
        raise _fail(path, f"missing field(s) {', '.join(missing)}")
    return data


# =============================================================================
# Encoding
# =============================================================================

def card_to_dict(card: Card) -> dict[str, Any]:
    return {"number": card.number, "suit": card.suit.value, "color": card.color.value}


def slot_state_to_wire(state: SlotState) -> Any:
    if isinstance(state, Occupied):
        return {"Occupied": card_to_dict(state.card)}
    if isinstance(state, Empty):
        return "Empty"
    if isinstance(state, Blank):
        return "Blank"
    raise TypeError(f"Unknown slot state: {state!r}")


def slot_to_dict(slot: Slot) -> dict[str, Any]:
    return {"id": slot.id, "state": slot_state_to_wire(slot.state)}


def origin_to_wire(origin: Origin) -> Any:
    if isinstance(origin, NoOrigin):
        return "None"
    if isinstance(origin, DeckOrigin):
        return "Deck"
    if isinstance(origin, StackOrigin):
        return "Stack"
    if isinstance(origin, PlayingAreaOrigin):
        return {"PlayingAreaId": origin.slot_id}
    raise TypeError(f"Unknown origin: {origin!r}")


def board_to_dict(board: Board) -> dict[str, Any]:
    """Convert a Board into its serialized snapshot."""
    return {
        "available_cards": [card_to_dict(c) for c in board.available_cards],
        "deck": slot_to_dict(board.deck) if board.deck is not None else None,
        "stack": {
            "available_slots": [slot_to_dict(s) for s in board.stack.available_slots],
            "contents": [card_to_dict(c) for c in board.stack.contents],
        },
        "selection": {
            "origin": origin_to_wire(board.selection.origin),
            "contents": [slot_to_dict(s) for s in board.selection.contents],
        },
        "playing_area": [
            [slot_to_dict(s) for s in column] for column in board.playing_area.columns
        ],
        "aces": [slot_to_dict(s) for s in board.aces],
    }


def board_to_json(board: Board, indent: int | None = None) -> str:
    return json.dumps(board_to_dict(board), indent=indent, ensure_ascii=False)


# =============================================================================
# Decoding
# =============================================================================

def card_from_dict(data: Any, path: str = "card") -> Card:
    data = _expect_mapping(data, path, ("number", "suit", "color"))

    number = data["number"]
    if isinstance(number, bool) or not isinstance(number, int):
        raise _fail(f"{path}.number", f"expected an integer, got {number!r}")

    try:
        suit = Suit(data["suit"])
    except ValueError:
        raise _fail(f"{path}.suit", f"unknown suit {data['suit']!r}")

    try:
        card = Card(number, suit)
    except ValueError as e:
        raise _fail(f"{path}.number", str(e))

    if data["color"] != card.color.value:
        raise _fail(f"{path}.color", f"{data['color']!r} does not match suit {suit.value}")
    return card


def slot_state_from_wire(data: Any, path: str = "state") -> SlotState:
    if data == "Empty":
        return EMPTY
    if data == "Blank":
        return BLANK
    if isinstance(data, Mapping) and set(data) == {"Occupied"}:
        return Occupied(card_from_dict(data["Occupied"], f"{path}.Occupied"))
    raise _fail(path, f"unknown slot state {data!r}")


def slot_from_dict(data: Any, path: str = "slot", expected_id: str | None = None) -> Slot:
    data = _expect_mapping(data, path, ("id", "state"))
    slot_id = data["id"]
    if not isinstance(slot_id, str):
        raise _fail(f"{path}.id", f"expected a string, got {slot_id!r}")
    if expected_id is not None and slot_id != expected_id:
        raise _fail(f"{path}.id", f"expected {expected_id!r}, got {slot_id!r}")
    return Slot(slot_id, slot_state_from_wire(data["state"], f"{path}.state"))


def origin_from_wire(data: Any, path: str = "origin") -> Origin:
    if data == "None":
        return NoOrigin()
    if data == "Deck":
        return DeckOrigin()
    if data == "Stack":
        return StackOrigin()
    if isinstance(data, Mapping) and set(data) == {"PlayingAreaId"}:
        slot_id = data["PlayingAreaId"]
        try:
            decode_tableau_id(slot_id)
        except DecodeError as e:
            raise _fail(f"{path}.PlayingAreaId", str(e))
        return PlayingAreaOrigin(slot_id)
    raise _fail(path, f"unknown origin {data!r}")


def _cards_from_list(data: Any, path: str) -> list[Card]:
    return [card_from_dict(c, f"{path}[{i}]") for i, c in enumerate(_expect_list(data, path))]


def _stack_from_dict(data: Any, path: str = "stack") -> Stack:
    data = _expect_mapping(data, path, ("available_slots", "contents"))
    slots_data = _expect_list(data["available_slots"], f"{path}.available_slots", STACK_SIZE)
    slots = [
        slot_from_dict(s, f"{path}.available_slots[{i}]", f"{STACK_SLOT_PREFIX}{i}")
        for i, s in enumerate(slots_data)
    ]
    contents = _cards_from_list(data["contents"], f"{path}.contents")

    stack = Stack(available_slots=slots, contents=[])
    for card in reversed(contents):
        stack = stack.push(card)
    if stack.available_slots != slots:
        raise _fail(f"{path}.available_slots", "display slots do not mirror the contents")
    return stack


def _selection_from_dict(data: Any, path: str = "selection") -> Selection:
    data = _expect_mapping(data, path, ("origin", "contents"))
    origin = origin_from_wire(data["origin"], f"{path}.origin")
    slots_data = _expect_list(data["contents"], f"{path}.contents", SELECTION_SIZE)
    slots = [
        slot_from_dict(s, f"{path}.contents[{i}]", f"{SELECTION_SLOT_PREFIX}{i:x}")
        for i, s in enumerate(slots_data)
    ]

    all_blank = all(isinstance(s.state, Blank) for s in slots)
    if isinstance(origin, NoOrigin) != all_blank:
        raise _fail(path, "origin must be None exactly when no cards are selected")
    if any(isinstance(s.state, Empty) for s in slots):
        raise _fail(f"{path}.contents", "selection slots are either Occupied or Blank")
    occupied = [isinstance(s.state, Occupied) for s in slots]
    if occupied != sorted(occupied, reverse=True):
        raise _fail(f"{path}.contents", "selected cards must fill the first slots")
    return Selection(origin=origin, contents=slots)


def _tableau_from_dict(data: Any, path: str = "playing_area") -> Tableau:
    columns_data = _expect_list(data, path, COLUMNS)
    columns = []
    for c, column_data in enumerate(columns_data):
        rows = _expect_list(column_data, f"{path}[{c}]", ROWS)
        columns.append([
            slot_from_dict(s, f"{path}[{c}][{r}]", encode_tableau_id(c, r))
            for r, s in enumerate(rows)
        ])
        _check_column(columns[-1], f"{path}[{c}]")
    return Tableau(columns=columns)


def _check_column(column: list[Slot], path: str) -> None:
    """Cards sit in an unbroken run from the top of the column."""
    for r, (upper, lower) in enumerate(zip(column, column[1:]), start=1):
        if lower.is_occupied and not upper.is_occupied:
            raise _fail(f"{path}[{r}]", "card below a slot without a card")


def _check_selection_origin(board: Board) -> None:
    """A tableau selection must be able to go back where it came from."""
    origin = board.selection.origin
    if not isinstance(origin, PlayingAreaOrigin):
        return
    column, row = decode_tableau_id(origin.slot_id)
    if row + len(board.selection.cards) > ROWS:
        raise _fail("selection.origin", f"selection does not fit back at {origin.slot_id}")
    if board.playing_area.at(column, row).is_occupied:
        raise _fail("selection.origin", f"origin {origin.slot_id} holds a card")


def _check_unique_cards(board: Board) -> None:
    seen: set[Card] = set()
    cards = (
        list(board.available_cards)
        + list(board.stack.contents)
        + board.selection.cards
        + [s.card for col in board.playing_area.columns for s in col if s.card]
    )
    for card in cards:
        if card in seen:
            raise _fail("board", f"card {card.label} appears more than once")
        seen.add(card)


def board_from_dict(data: Any) -> Board:
    """
    Reconstruct a Board from its serialized snapshot.

    Raises:
        DecodeError: the payload is not a well-formed board
    """
    data = _expect_mapping(data, "board", BOARD_KEYS)

    deck = None
    if data["deck"] is not None:
        deck = slot_from_dict(data["deck"], "deck", DECK_MARKER_ID)

    aces_data = _expect_list(data["aces"], "aces", FOUNDATION_COUNT)
    aces = [slot_from_dict(s, f"aces[{i}]", f"ace{i}") for i, s in enumerate(aces_data)]
    if any(isinstance(s.state, Blank) for s in aces):
        raise _fail("aces", "foundation piles are either Occupied or Empty")

    available_cards = _cards_from_list(data["available_cards"], "available_cards")
    if (deck is None) != bool(available_cards):
        raise _fail("deck", "redeal marker must be set exactly when the draw pile is empty")

    board = Board(
        available_cards=available_cards,
        deck=deck,
        stack=_stack_from_dict(data["stack"]),
        selection=_selection_from_dict(data["selection"]),
        playing_area=_tableau_from_dict(data["playing_area"]),
        aces=aces,
    )
    _check_selection_origin(board)
    _check_unique_cards(board)
    return board


def board_from_json(text: str | bytes) -> Board:
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError, TypeError) as e:
        raise DecodeError(DecodeErrorKind.MALFORMED_BOARD, f"Board is not valid JSON: {e}")
    return board_from_dict(data)
