"""
Solitaire - Klondike Rule Engine

A deterministic, rules-driven engine for a Klondike-style solitaire game.
The presentation layer forwards click events by identifier together with
the current serialized board; the engine provides:
- Deck generation and the initial deal
- Move validation for every click target
- The next board state
"""

__version__ = "0.1.0"
