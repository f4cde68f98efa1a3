"""
Solitaire CLI - Command-line interface for the engine.

Usage:
    solitaire start [--seed N] [-o FILE]           Deal a new board
    solitaire click <event_id> <board_file> [-o]   Apply a click
    solitaire clear-selection <board_file> [-o]    Drop the selection (debug)
    solitaire show <board_file>                    Print the board as text
    solitaire serve [--host H] [--port P]          Run the HTTP API

Board files hold the serialized board as JSON; use "-" to read stdin.
"""

import argparse
import json
import logging
import sys

from .config import load_settings
from .engine_core import Board, DecodeError, board_from_dict
from .engine_core.ids import COLUMNS, ROWS
from .engine_core.slot import Empty, Occupied, Slot


EMPTY_MARK = "□□"
BLANK_MARK = "  "


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Solitaire - Klondike Rule Engine",
        prog="solitaire",
    )
    parser.add_argument("--log-level", help="Logging level (default from SOLITAIRE_LOG_LEVEL)")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Start command
    start_parser = subparsers.add_parser("start", help="Deal a new board")
    start_parser.add_argument("--seed", type=int, help="Shuffle seed")
    start_parser.add_argument("--output", "-o", help="Output board file")

    # Click command
    click_parser = subparsers.add_parser("click", help="Apply a click to a board")
    click_parser.add_argument("event_id", help="Clicked element id (deck, a3, ace0, return, ...)")
    click_parser.add_argument("board_file", help="Path to board JSON, or - for stdin")
    click_parser.add_argument("--output", "-o", help="Output board file")

    # Clear selection command
    clear_parser = subparsers.add_parser("clear-selection", help="Drop the selection (debug)")
    clear_parser.add_argument("board_file", help="Path to board JSON, or - for stdin")
    clear_parser.add_argument("--output", "-o", help="Output board file")

    # Show command
    show_parser = subparsers.add_parser("show", help="Print a board as text")
    show_parser.add_argument("board_file", help="Path to board JSON, or - for stdin")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve_parser.add_argument("--port", type=int, default=8000, help="Bind port")

    args = parser.parse_args(argv)

    settings = load_settings()
    logging.basicConfig(
        level=(args.log_level or settings.log_level).upper(),
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "start":
        cmd_start(args)
    elif args.command == "click":
        cmd_click(args)
    elif args.command == "clear-selection":
        cmd_clear_selection(args)
    elif args.command == "show":
        cmd_show(args)
    elif args.command == "serve":
        cmd_serve(args)
    else:
        parser.print_help()
        sys.exit(1)


def _read_board_payload(path):
    """Load board JSON from a file or stdin."""
    try:
        if path == "-":
            return json.load(sys.stdin)
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError:
        print(f"Error: File not found: {path}")
        sys.exit(1)
    except json.JSONDecodeError as e:
        print(f"Error: Board is not valid JSON: {e}")
        sys.exit(1)


def _write_board(board_payload, output):
    text = json.dumps(board_payload, indent=2, ensure_ascii=False)
    if output:
        with open(output, "w", encoding="utf-8") as f:
            f.write(text + "\n")
    else:
        print(text)


def _exit_on_error(response):
    if hasattr(response, "error"):
        print(f"Error: [{response.error_code.value}] {response.error}")
        sys.exit(1)


def cmd_start(args):
    """Deal a new board."""
    from .api.service import SolitaireService

    response = SolitaireService().start(seed=args.seed)
    _write_board(response.board, args.output)


def cmd_click(args):
    """Apply a click to a board."""
    from .api.service import SolitaireService

    payload = _read_board_payload(args.board_file)
    response = SolitaireService().handle_click(args.event_id, payload)
    _exit_on_error(response)

    if not response.changed:
        print(f"Click on {args.event_id} was not a legal move", file=sys.stderr)
    _write_board(response.board, args.output)


def cmd_clear_selection(args):
    """Drop the selection."""
    from .api.service import SolitaireService

    payload = _read_board_payload(args.board_file)
    response = SolitaireService().debug_clear_selection(payload)
    _exit_on_error(response)
    _write_board(response.board, args.output)


def cmd_show(args):
    """Print a board as text."""
    payload = _read_board_payload(args.board_file)
    try:
        board = board_from_dict(payload)
    except DecodeError as e:
        print(f"Error: {e}")
        sys.exit(1)
    print(render_board(board))


def cmd_serve(args):
    """Run the HTTP API with uvicorn."""
    import uvicorn

    uvicorn.run("solitaire.api.app:app", host=args.host, port=args.port)


def _cell(slot: Slot) -> str:
    if isinstance(slot.state, Occupied):
        return slot.state.card.label
    if isinstance(slot.state, Empty):
        return EMPTY_MARK
    return BLANK_MARK


def render_board(board: Board) -> str:
    """
    Render a board as plain text.

    Occupied slots show rank and suit, Empty slots show □□ and Blank
    slots are left blank.
    """
    if board.deck is not None:
        deck = EMPTY_MARK
    else:
        deck = f"## ({len(board.available_cards)})"
    waste = " ".join(_cell(slot) for slot in board.stack.available_slots)
    aces = " ".join(_cell(slot) for slot in board.aces)
    selected = " ".join(card.label for card in board.selection.cards) or "-"

    lines = [
        f"deck: {deck}   waste: {waste}",
        f"aces: {aces}",
        f"selection: {selected}",
        "",
        "  ".join(f"{chr(ord('a') + c):>3}" for c in range(COLUMNS)),
    ]

    last_row = 0
    for c in range(COLUMNS):
        for r in range(ROWS):
            if not board.playing_area.at(c, r).is_blank:
                last_row = max(last_row, r)

    for r in range(last_row + 1):
        cells = [_cell(board.playing_area.at(c, r)) for c in range(COLUMNS)]
        lines.append("  ".join(f"{cell:>3}" for cell in cells).rstrip() + f"   {r:x}")

    return "\n".join(lines)


if __name__ == "__main__":
    main()
