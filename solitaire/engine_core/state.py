"""
Board State - The full game state and its parts.

Design principles:
- Immutable-friendly: all mutations return new values
- Serializable: see serialize.py for the wire format
- Self-protecting: bounds checks and the Blank->Empty cascade live on
  the Tableau, next to the grid they guard

Board layout:
- available_cards: face-down draw pile (back = next drawn)
- deck: redeal marker, present once the draw pile is exhausted
- stack: waste pile, LIFO (front = top)
- selection: clipboard for cards lifted from exactly one source
- playing_area: 7 x 13 tableau grid
- aces: 4 foundation piles
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Union

from .card import Card
from .errors import InvariantError
from .ids import (
    COLUMNS,
    ROWS,
    STACK_SIZE,
    SELECTION_SIZE,
    STACK_SLOT_PREFIX,
    SELECTION_SLOT_PREFIX,
    decode_tableau_id,
    encode_tableau_id,
)
from .slot import BLANK, EMPTY, Blank, Occupied, Slot, SlotState, slots_to_cards, state_for


# =============================================================================
# Waste pile
# =============================================================================

@dataclass
class Stack:
    """
    The waste pile.

    contents is the source of truth (front = most recently pushed).
    available_slots is the display projection: slot i mirrors
    contents[i], slots past the end of contents are Empty.
    """
    available_slots: list[Slot]
    contents: list[Card] = field(default_factory=list)

    @classmethod
    def create(cls) -> Stack:
        slots = [Slot(f"{STACK_SLOT_PREFIX}{i}", EMPTY) for i in range(STACK_SIZE)]
        return cls(available_slots=slots)

    @property
    def top(self) -> Card | None:
        return self.contents[0] if self.contents else None

    @property
    def is_empty(self) -> bool:
        return len(self.contents) == 0

    def _with_contents(self, contents: list[Card]) -> Stack:
        slots = [
            slot.with_state(state_for(contents[i] if i < len(contents) else None))
            for i, slot in enumerate(self.available_slots)
        ]
        return Stack(available_slots=slots, contents=contents)

    def push(self, card: Card) -> Stack:
        """Return new stack with card on top."""
        return self._with_contents([card] + self.contents)

    def pop(self) -> tuple[Card, Stack]:
        """Return (top card, new stack)."""
        if not self.contents:
            raise InvariantError("Cannot pop from an empty waste pile")
        return self.contents[0], self._with_contents(self.contents[1:])


# =============================================================================
# Selection
# =============================================================================

@dataclass(frozen=True)
class NoOrigin:
    """Nothing is selected."""


@dataclass(frozen=True)
class DeckOrigin:
    """Selection came from the deck."""


@dataclass(frozen=True)
class StackOrigin:
    """Selection came from the waste pile."""


@dataclass(frozen=True)
class PlayingAreaOrigin:
    """Selection was lifted from a tableau slot."""
    slot_id: str


Origin = Union[NoOrigin, DeckOrigin, StackOrigin, PlayingAreaOrigin]


@dataclass
class Selection:
    """
    The clipboard holding lifted cards until they are placed.

    Invariant: origin is NoOrigin exactly when every slot is Blank.
    """
    origin: Origin
    contents: list[Slot]

    @classmethod
    def create(cls) -> Selection:
        slots = [
            Slot(f"{SELECTION_SLOT_PREFIX}{i:x}", BLANK) for i in range(SELECTION_SIZE)
        ]
        return cls(origin=NoOrigin(), contents=slots)

    @property
    def cards(self) -> list[Card]:
        return slots_to_cards(self.contents)

    @property
    def is_active(self) -> bool:
        return not isinstance(self.origin, NoOrigin)

    def with_contents(self, origin: Origin, cards: list[Card]) -> Selection:
        """Return a selection holding cards. An active selection is kept as is."""
        if self.is_active:
            return self
        if len(cards) > len(self.contents):
            raise InvariantError(
                f"Selection holds {len(self.contents)} cards, got {len(cards)}"
            )
        slots = [
            slot.with_state(Occupied(cards[i]) if i < len(cards) else BLANK)
            for i, slot in enumerate(self.contents)
        ]
        return Selection(origin=origin, contents=slots)

    def cleared(self) -> Selection:
        """Return an empty selection."""
        return Selection(
            origin=NoOrigin(),
            contents=[slot.with_state(BLANK) for slot in self.contents],
        )


# =============================================================================
# Tableau
# =============================================================================

@dataclass
class Tableau:
    """
    The 7 x 13 playing area, addressed by column then row.

    Slot ids encode their own coordinates (see ids.py), so every lookup
    by id goes through the codec and out-of-board ids are rejected.
    """
    columns: list[list[Slot]]

    @classmethod
    def create(cls) -> Tableau:
        """An all-Blank grid."""
        return cls(columns=[
            [Slot(encode_tableau_id(c, r), BLANK) for r in range(ROWS)]
            for c in range(COLUMNS)
        ])

    def at(self, column: int, row: int) -> Slot:
        if not 0 <= column < len(self.columns):
            raise InvariantError(f"Column index {column} is too large")
        if not 0 <= row < len(self.columns[column]):
            raise InvariantError(f"Row index {row} is too large")
        return self.columns[column][row]

    def get(self, slot_id: str) -> Slot:
        """Look up a slot by id. Raises DecodeError for ids off the board."""
        column, row = decode_tableau_id(slot_id)
        return self.at(column, row)

    def run_from(self, column: int, row: int) -> list[Card]:
        """The cards from (column, row) down to the end of the column."""
        return slots_to_cards(self.columns[column][row:])

    @property
    def card_count(self) -> int:
        return sum(1 for col in self.columns for slot in col if slot.is_occupied)

    def _with_states(self, states: dict[tuple[int, int], SlotState]) -> Tableau:
        return Tableau(columns=[
            [
                slot.with_state(states[(c, r)]) if (c, r) in states else slot
                for r, slot in enumerate(col)
            ]
            for c, col in enumerate(self.columns)
        ])

    def cleared_from(self, column: int, row: int) -> Tableau:
        """Return new tableau with every slot from row to the column end Blank."""
        return self._with_states({
            (column, r): BLANK for r in range(row, len(self.columns[column]))
        })

    def placed(self, slot_id: str, cards: list[Card]) -> Tableau | None:
        """
        Write cards into the column starting at slot_id.

        Returns None when the run would not fit in the column.
        """
        column, row = decode_tableau_id(slot_id)
        if row + len(cards) > len(self.columns[column]):
            return None
        return self._with_states({
            (column, row + i): Occupied(card) for i, card in enumerate(cards)
        })

    def cascaded(self) -> Tableau:
        """
        Promote reachable Blank slots to Empty.

        The first slot of a column, and any Blank slot directly below an
        Occupied one, becomes Empty. One pass, top to bottom.
        """
        new_columns = []
        for col in self.columns:
            new_col = []
            for r, slot in enumerate(col):
                if isinstance(slot.state, Blank) and (r == 0 or new_col[r - 1].is_occupied):
                    slot = slot.with_state(EMPTY)
                new_col.append(slot)
            new_columns.append(new_col)
        return Tableau(columns=new_columns)


# =============================================================================
# Board
# =============================================================================

@dataclass
class Board:
    """
    Complete game state at a point in time.

    Handlers take a Board and return a new Board; nothing holds a
    reference into it between calls.
    """
    available_cards: list[Card]
    deck: Slot | None
    stack: Stack
    selection: Selection
    playing_area: Tableau
    aces: list[Slot]

    def with_ace(self, index: int, slot: Slot) -> Board:
        """Return new board with one foundation pile replaced."""
        new_aces = self.aces.copy()
        new_aces[index] = slot
        return self._copy_with(aces=new_aces)

    def _copy_with(self, **kwargs) -> Board:
        """Create a copy with some fields replaced."""
        return replace(self, **kwargs)
