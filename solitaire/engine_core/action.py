"""
Action System - Click actions and their results.

Every player interaction is a click on an addressable element. The
event id is decoded into an Action, and the reducer answers with an
ActionResult:

- success + changed:      the move was legal, new_state differs
- success + not changed:  illegal move, new_state is the input board
- failure:                decode error or unimplemented feature
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ActionType(Enum):
    """Types of actions the engine understands."""
    DECK = "deck"  # Draw pile
    STACK = "stack"  # Waste pile
    PLAYING_AREA = "playing_area"  # Tableau slot
    ACE = "ace"  # Foundation pile
    RETURN = "return"  # Put the selection back

    # Debug escape hatch, never produced by a click
    CLEAR_SELECTION = "clear_selection"


@dataclass
class Action:
    """
    A decoded action to apply to the board.

    slot_id is set for tableau clicks, index for foundation clicks.
    event_id keeps the raw identifier for logging.
    """
    action_type: ActionType
    slot_id: str | None = None
    index: int | None = None
    event_id: str | None = None

    @classmethod
    def deck(cls) -> Action:
        return cls(action_type=ActionType.DECK, event_id="deck")

    @classmethod
    def stack(cls) -> Action:
        return cls(action_type=ActionType.STACK, event_id="stack")

    @classmethod
    def playing_area(cls, slot_id: str) -> Action:
        return cls(action_type=ActionType.PLAYING_AREA, slot_id=slot_id, event_id=slot_id)

    @classmethod
    def ace(cls, index: int) -> Action:
        return cls(action_type=ActionType.ACE, index=index, event_id=f"ace{index}")

    @classmethod
    def return_selection(cls) -> Action:
        return cls(action_type=ActionType.RETURN, event_id="return")

    @classmethod
    def clear_selection(cls) -> Action:
        return cls(action_type=ActionType.CLEAR_SELECTION)


@dataclass
class ActionResult:
    """
    Result of applying an action.

    Contains:
    - Whether the request was understood
    - New board (the input board when the move was rejected)
    - Errors (if the request could not be decoded or handled)
    """
    success: bool
    new_state: Any | None = None  # Board
    changed: bool = False
    error: str | None = None
    error_code: str | None = None
    details: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def failure(
        cls,
        error: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> ActionResult:
        """Create a failure result."""
        return cls(success=False, error=error, error_code=error_code, details=details or {})

    @classmethod
    def success_with_state(cls, state: Any, changed: bool = True) -> ActionResult:
        """Create a success result with new state."""
        return cls(success=True, new_state=state, changed=changed)
