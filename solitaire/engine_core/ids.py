"""
Identifier Codec - Slot ids and click event ids.

Every addressable element of the board has a stable id:

    a0 .. gc      tableau slot: column letter a-g, row hex digit 0-c
    s0 .. s8      waste pile display slots
    selected0 ..  selection slots (hex suffix)
    ace0 .. ace3  foundation piles
    deck0         redeal marker

Click events use the same ids plus a few named targets:

    deck, deck0                          draw pile
    stack, stack<d>, s<d>, selection<d>  waste pile
    ace<d>                               foundation pile d (0-3)
    return                               return selection to origin

Decoding never crashes: anything outside the grammar raises DecodeError.
"""

from __future__ import annotations
from dataclasses import dataclass

from .action import ActionType
from .errors import DecodeError, DecodeErrorKind


COLUMNS = 7
ROWS = 13
STACK_SIZE = 9
FOUNDATION_COUNT = 4
SELECTION_SIZE = ROWS

# Column letters are base-36 digits offset by 10 ('a' == 10)
_COLUMN_OFFSET = 10
_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"
_HEX_DIGITS = "0123456789abcdef"

DECK_IDS = frozenset({"deck", "deck0"})
RETURN_ID = "return"
ACE_PREFIX = "ace"

DECK_MARKER_ID = "deck0"
STACK_SLOT_PREFIX = "s"
SELECTION_SLOT_PREFIX = "selected"


@dataclass(frozen=True)
class EventTarget:
    """A decoded click event."""
    kind: ActionType
    slot_id: str | None = None  # Tableau slot id for PLAYING_AREA
    index: int | None = None  # Pile index for ACE


def encode_tableau_id(column: int, row: int) -> str:
    """Build the id of the tableau slot at (column, row)."""
    if not 0 <= column < COLUMNS:
        raise ValueError(f"Column index {column} is out of range")
    if not 0 <= row < ROWS:
        raise ValueError(f"Row index {row} is out of range")
    return _BASE36_DIGITS[column + _COLUMN_OFFSET] + _HEX_DIGITS[row]


def decode_tableau_id(slot_id: str) -> tuple[int, int]:
    """
    Decode a tableau slot id into (column, row).

    Raises:
        DecodeError: missing characters, extra characters, or a digit
            outside the board
    """
    if not isinstance(slot_id, str) or len(slot_id) != 2:
        raise DecodeError(
            DecodeErrorKind.MALFORMED_ID,
            f"Malformed tableau id: {slot_id!r}",
            slot_id,
        )

    column_char, row_char = slot_id[0], slot_id[1]

    column = _BASE36_DIGITS.find(column_char) - _COLUMN_OFFSET
    if column_char not in _BASE36_DIGITS or not 0 <= column < COLUMNS:
        raise DecodeError(
            DecodeErrorKind.BAD_COLUMN,
            f"Invalid column {column_char!r} in id {slot_id!r}",
            slot_id,
        )

    row = _HEX_DIGITS.find(row_char)
    if row_char not in _HEX_DIGITS or not 0 <= row < ROWS:
        raise DecodeError(
            DecodeErrorKind.BAD_ROW,
            f"Invalid row {row_char!r} in id {slot_id!r}",
            slot_id,
        )

    return column, row


def _decimal_suffix(event_id: str, prefix: str) -> int | None:
    """Parse the single decimal digit after prefix, None if there is none."""
    suffix = event_id[len(prefix):]
    if suffix == "":
        return None
    if len(suffix) != 1 or suffix not in "0123456789":
        raise DecodeError(
            DecodeErrorKind.BAD_INDEX,
            f"Invalid index {suffix!r} in id {event_id!r}",
            event_id,
        )
    return int(suffix)


def parse_event(event_id: str) -> EventTarget:
    """
    Decode a click event id into the handler it targets.

    Raises:
        DecodeError: the id matches no known target
    """
    if not isinstance(event_id, str) or event_id == "":
        raise DecodeError(DecodeErrorKind.MALFORMED_ID, "Empty event id", event_id)

    if event_id in DECK_IDS:
        return EventTarget(kind=ActionType.DECK)

    if event_id == RETURN_ID:
        return EventTarget(kind=ActionType.RETURN)

    if event_id.startswith(ACE_PREFIX):
        index = _decimal_suffix(event_id, ACE_PREFIX)
        if index is None or index >= FOUNDATION_COUNT:
            raise DecodeError(
                DecodeErrorKind.BAD_INDEX,
                f"Foundation id needs an index 0-{FOUNDATION_COUNT - 1}: {event_id!r}",
                event_id,
            )
        return EventTarget(kind=ActionType.ACE, index=index)

    if event_id.startswith("selection"):
        if _decimal_suffix(event_id, "selection") is None:
            raise DecodeError(
                DecodeErrorKind.BAD_INDEX,
                f"Selection id needs an index: {event_id!r}",
                event_id,
            )
        return EventTarget(kind=ActionType.STACK)

    if event_id.startswith("stack"):
        _decimal_suffix(event_id, "stack")
        return EventTarget(kind=ActionType.STACK)

    # Single-letter prefix: tableau, or a waste pile display slot
    if len(event_id) == 2:
        if event_id[0] == STACK_SLOT_PREFIX:
            index = _decimal_suffix(event_id, STACK_SLOT_PREFIX)
            if index is None or index >= STACK_SIZE:
                raise DecodeError(
                    DecodeErrorKind.BAD_INDEX,
                    f"Waste slot id needs an index 0-{STACK_SIZE - 1}: {event_id!r}",
                    event_id,
                )
            return EventTarget(kind=ActionType.STACK)
        decode_tableau_id(event_id)
        return EventTarget(kind=ActionType.PLAYING_AREA, slot_id=event_id)

    if len(event_id) == 1:
        raise DecodeError(
            DecodeErrorKind.MALFORMED_ID,
            f"Event id is missing characters: {event_id!r}",
            event_id,
        )

    raise DecodeError(
        DecodeErrorKind.UNKNOWN_PREFIX,
        f"Invalid ID: {event_id!r}",
        event_id,
    )
