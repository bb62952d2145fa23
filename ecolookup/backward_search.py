"""
Backward search: find the deepest known opening for a game in progress.

The current position is looked up first. If it is not a catalog position
(the game has left book), moves are undone one at a time until a known
opening appears or the ply budget runs out. The game is always put back
where it started.

Usage:
  board = chess.Board()
  for san in ("e4", "e5", "Nf3", "Nf6", "Nxe5"):
      board.push_san(san)
  result = lookup_board(board, openings, position_index=build_position_index(openings))
  result.opening.name, result.plies_back  # ("Petrov's Defense", 1)
"""

from typing import Mapping, Protocol, runtime_checkable

import chess

from ecolookup.models import LookupResult, Opening
from ecolookup.position_index import PositionIndex
from ecolookup.resolver import find_opening


@runtime_checkable
class GameHandle(Protocol):
    """
    Game state the search borrows for one call.

    undo() returns something truthy when a move was taken back; a falsy
    result or an exception means there is no more history. Handles may also
    provide history_length() (see lookup_by_moves).
    """

    def current(self) -> str: ...

    def undo(self) -> object: ...

    def load(self, fen: str) -> None: ...


def ply_from_fen(fen: str) -> int | None:
    """Half-moves played before this position, from the turn and fullmove fields."""
    fields = fen.split()
    if len(fields) < 6:
        return None
    try:
        fullmove = int(fields[5])
    except ValueError:
        return None
    return max(fullmove - 1, 0) * 2 + (1 if fields[1] == "b" else 0)


def starting_depth(game: GameHandle) -> int | None:
    """Explicit move history wins; the FEN counters are the fallback."""
    history_length = getattr(game, "history_length", None)
    if callable(history_length):
        return history_length()
    return ply_from_fen(game.current())


def _undo(game: GameHandle) -> bool:
    try:
        return bool(game.undo())
    except Exception:
        # Some handles raise instead of returning a sentinel at the first move.
        return False


def lookup_by_moves(
    game: GameHandle,
    openings: Mapping[str, Opening],
    max_plies: int | None = None,
    position_index: PositionIndex | None = None,
    max_depth: int | None = None,
) -> LookupResult:
    """
    Walk backward from the current position to the nearest cataloged opening.

    max_plies caps the number of undos (0 checks only the current position).
    It defaults to the game's depth: history_length() when the handle has
    it, else the ply count encoded in the FEN; with neither the walk runs
    until the handle runs out of history. When max_depth is set, positions
    deeper than max_depth plies are skipped without a lookup; those undos
    count toward plies_back and the budget.

    Not found, whether from an exhausted history or an exhausted budget,
    is LookupResult(None, 0). Errors raised by undo() end the walk like an
    empty history; errors raised while restoring the start position
    propagate.
    """
    starting_fen = game.current()
    plies_back = 0
    try:
        depth = starting_depth(game)
        if max_plies is None:
            max_plies = depth

        if max_depth is not None and depth is not None:
            while depth - plies_back > max_depth:
                if max_plies is not None and plies_back >= max_plies:
                    return LookupResult()
                if not _undo(game):
                    return LookupResult()
                plies_back += 1

        while True:
            fen = game.current()
            opening = find_opening(openings, fen, position_index)
            if opening is not None:
                return LookupResult(opening, plies_back, fen)
            if max_plies is not None and plies_back >= max_plies:
                break
            if not _undo(game):
                break
            plies_back += 1

        return LookupResult()
    finally:
        game.load(starting_fen)


class BoardHandle:
    """GameHandle over a python-chess Board.

    load() replays the moves this handle took back when that reaches the
    requested FEN, so the board keeps its move stack after a search.
    """

    def __init__(self, board: chess.Board):
        self.board = board
        self._undone: list[chess.Move] = []

    def current(self) -> str:
        return self.board.fen()

    def undo(self) -> bool:
        if not self.board.move_stack:
            return False
        self._undone.append(self.board.pop())
        return True

    def load(self, fen: str) -> None:
        while self._undone and self.board.fen() != fen:
            self.board.push(self._undone.pop())
        if self.board.fen() != fen:
            self.board.set_fen(fen)
        self._undone.clear()

    def history_length(self) -> int:
        return len(self.board.move_stack)


def lookup_board(
    board: chess.Board,
    openings: Mapping[str, Opening],
    max_plies: int | None = None,
    position_index: PositionIndex | None = None,
) -> LookupResult:
    """lookup_by_moves for a python-chess Board."""
    return lookup_by_moves(BoardHandle(board), openings, max_plies, position_index)
