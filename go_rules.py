"""
Go rules engine: move validation (bounds, occupancy, suicide, ko) and
capture resolution.

Boards are treated as immutable snapshots. Validation works on a scratch
copy and apply_move returns a fresh read-only board.
"""
import numpy as np
from enum import Enum
from typing import FrozenSet, List, Optional, Set, Tuple

from go_board import EMPTY, Coordinate, opponent, in_bounds, empty_points, freeze, color_name
from go_errors import MovePreconditionError
from go_groups import adjacent, group, has_liberty


class MoveStatus(Enum):
    LEGAL = 'legal'
    OUT_OF_BOUNDS = 'out_of_bounds'
    OCCUPIED = 'occupied'
    SUICIDE = 'suicide'
    KO = 'ko'

    @property
    def is_legal(self) -> bool:
        return self is MoveStatus.LEGAL


def find_captures(board: np.ndarray, coord: Coordinate, color: int) -> Set[Coordinate]:
    """Opponent stones captured by the stone of `color` already placed at coord.

    Every adjacent opponent group left without liberties is captured; several
    groups are taken together in one move.
    """
    captured = set()
    enemy = opponent(color)

    for nx, ny in adjacent(board, coord):
        if board[ny, nx] != enemy or (nx, ny) in captured:
            continue
        if not has_liberty(board, (nx, ny)):
            captured.update(group(board, (nx, ny)))

    return captured


def _resolve(board: np.ndarray, coord: Coordinate, color: int) -> Tuple[np.ndarray, Set[Coordinate]]:
    """Place the stone on a copy and remove captures"""
    x, y = coord
    result = board.copy()
    result[y, x] = color
    captured = find_captures(result, coord, color)
    for cx, cy in captured:
        result[cy, cx] = EMPTY
    return result, captured


def check_move(board: np.ndarray, coord: Coordinate, color: int,
               previous_board: Optional[np.ndarray] = None) -> MoveStatus:
    """Classify a candidate move.

    previous_board is the position before the opponent's last move; a move
    whose resulting board equals it is a ko violation. Pass None to skip the
    ko check (e.g. on the first move of a game).
    """
    if not in_bounds(board, coord):
        return MoveStatus.OUT_OF_BOUNDS
    x, y = coord
    if board[y, x] != EMPTY:
        return MoveStatus.OCCUPIED

    result, captured = _resolve(board, coord, color)

    # Captures take precedence over suicide
    if not captured and not has_liberty(result, coord):
        return MoveStatus.SUICIDE

    if previous_board is not None and np.array_equal(result, previous_board):
        return MoveStatus.KO

    return MoveStatus.LEGAL


def is_legal_move(board: np.ndarray, coord: Coordinate, color: int,
                  previous_board: Optional[np.ndarray] = None) -> bool:
    """Check if a move is legal (on board, empty, not suicide, not ko)"""
    return check_move(board, coord, color, previous_board).is_legal


def apply_move(board: np.ndarray, coord: Coordinate,
               color: int) -> Tuple[np.ndarray, FrozenSet[Coordinate]]:
    """Play a validated move and return (new_board, captured_coordinates).

    The input board is left untouched. Raises MovePreconditionError if the
    target is off the board, occupied, or suicide; ko needs the game history
    and is the caller's responsibility (see is_legal_move).
    """
    status = check_move(board, coord, color)
    if not status.is_legal:
        raise MovePreconditionError(
            f"Cannot apply move: {status.value}",
            context={'coordinate': tuple(coord), 'color': color_name(color)},
        )

    result, captured = _resolve(board, coord, color)
    return freeze(result), frozenset(captured)


def legal_moves(board: np.ndarray, color: int,
                previous_board: Optional[np.ndarray] = None) -> List[Coordinate]:
    """Get all legal moves for color in row-major order"""
    return [coord for coord in empty_points(board)
            if is_legal_move(board, coord, color, previous_board)]
