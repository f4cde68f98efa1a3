"""
Engine Errors - The three ways a request can go wrong.

- DecodeError: the caller sent something we cannot read (bad event id,
  malformed board payload). Reported back, never fatal.
- InvariantError: the engine reached a state its own rules forbid.
  This is a bug and is never caught by the reducer.
- NotImplementedError (builtin): the redeal branch of the deck click.

Illegal moves are NOT errors. The reducer answers them with the
unchanged board.
"""

from __future__ import annotations
from enum import Enum
from typing import Any


class DecodeErrorKind(Enum):
    """What part of a request failed to decode."""
    MALFORMED_ID = "malformed_id"
    UNKNOWN_PREFIX = "unknown_prefix"
    BAD_COLUMN = "bad_column"
    BAD_ROW = "bad_row"
    BAD_INDEX = "bad_index"
    MALFORMED_BOARD = "malformed_board"


class SolitaireError(Exception):
    """Base class for engine errors."""


class DecodeError(SolitaireError, ValueError):
    """An event identifier or serialized board could not be decoded."""

    def __init__(self, kind: DecodeErrorKind, message: str, value: Any = None):
        super().__init__(message)
        self.kind = kind
        self.value = value

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind.value, "value": self.value}


class InvariantError(SolitaireError, AssertionError):
    """The engine broke one of its own invariants."""
