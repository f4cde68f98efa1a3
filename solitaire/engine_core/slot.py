"""
Slot Model - Addressable board cells and their tri-state occupancy.

SlotState is a closed union of three variants:
- Occupied: holds a card
- Empty: reachable, no card, can receive a placement
- Blank: not reachable yet (nothing resolved above it)

Consumers match on the variant with isinstance, never with flags.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Union

from .card import Card


@dataclass(frozen=True)
class Occupied:
    """A slot holding a card."""
    card: Card


@dataclass(frozen=True)
class Empty:
    """A reachable slot with no card."""


@dataclass(frozen=True)
class Blank:
    """A slot that cannot be reached yet."""


SlotState = Union[Occupied, Empty, Blank]

EMPTY = Empty()
BLANK = Blank()


def is_occupied(state: SlotState) -> bool:
    return isinstance(state, Occupied)


def state_for(card: Card | None) -> SlotState:
    """Occupied(card) for a card, Empty for None."""
    if card is None:
        return EMPTY
    return Occupied(card)


@dataclass(frozen=True)
class Slot:
    """
    A board cell.

    The id is a positional address assigned at creation ("a0", "s3",
    "ace1", ...) and never changes. State changes produce a new Slot.
    """
    id: str
    state: SlotState

    @property
    def is_occupied(self) -> bool:
        return is_occupied(self.state)

    @property
    def is_empty(self) -> bool:
        return isinstance(self.state, Empty)

    @property
    def is_blank(self) -> bool:
        return isinstance(self.state, Blank)

    @property
    def card(self) -> Card | None:
        if isinstance(self.state, Occupied):
            return self.state.card
        return None

    def with_state(self, state: SlotState) -> Slot:
        """Return this slot with a different state."""
        return replace(self, state=state)


def slots_to_cards(slots: list[Slot]) -> list[Card]:
    """Cards of the occupied slots, in order."""
    return [slot.state.card for slot in slots if isinstance(slot.state, Occupied)]
