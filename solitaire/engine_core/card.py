"""
Card Model - Rank, suit and the color derived from the suit.

Cards are frozen values. Color is never stored independently: it is a
property of the suit, so a red spade cannot exist.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum


# Ace (1) to king (13)
MIN_RANK = 1
MAX_RANK = 13


class Color(Enum):
    """Card colors."""
    BLACK = "Black"
    RED = "Red"


class Suit(Enum):
    """Card suits. Values match the serialized board format."""
    SPADE = "Spade"
    HEART = "Heart"
    DIAMOND = "Diamond"
    CLUB = "Club"

    @property
    def color(self) -> Color:
        if self in (Suit.SPADE, Suit.CLUB):
            return Color.BLACK
        return Color.RED

    @property
    def symbol(self) -> str:
        return _SUIT_SYMBOLS[self]


_SUIT_SYMBOLS = {
    Suit.SPADE: "♠",
    Suit.HEART: "♥",
    Suit.DIAMOND: "♦",
    Suit.CLUB: "♣",
}

_RANK_NAMES = {1: "A", 11: "J", 12: "Q", 13: "K"}

# Order used when building a fresh deck (before shuffling)
DECK_SUITS = (Suit.CLUB, Suit.DIAMOND, Suit.HEART, Suit.SPADE)


@dataclass(frozen=True)
class Card:
    """
    A playing card.

    Example:
        Card(13, Suit.SPADE)  # K♠, black
    """
    number: int
    suit: Suit

    def __post_init__(self):
        if not MIN_RANK <= self.number <= MAX_RANK:
            raise ValueError(f"Card rank must be {MIN_RANK}-{MAX_RANK}, got {self.number}")

    @property
    def color(self) -> Color:
        return self.suit.color

    @property
    def label(self) -> str:
        """Short display label, e.g. 'A♠' or '10♥'."""
        rank = _RANK_NAMES.get(self.number, str(self.number))
        return f"{rank}{self.suit.symbol}"

    def __str__(self) -> str:
        return self.label
