"""
Connectivity queries over a board: neighbours, groups and liberties.

All functions are pure; they read the board and never modify it. Group
discovery uses an explicit stack so 19x19 boards cannot hit the recursion
limit.
"""
import numpy as np
from typing import Iterable, Iterator, Set

from go_board import EMPTY, Coordinate

NEIGHBOR_OFFSETS = ((-1, 0), (1, 0), (0, -1), (0, 1))
DIAGONAL_OFFSETS = ((-1, -1), (1, -1), (-1, 1), (1, 1))


def _offset_points(board: np.ndarray, coord: Coordinate, offsets) -> Set[Coordinate]:
    x, y = coord
    size = board.shape[0]
    points = set()
    for dx, dy in offsets:
        nx, ny = x + dx, y + dy
        if 0 <= nx < size and 0 <= ny < size:
            points.add((nx, ny))
    return points


def adjacent(board: np.ndarray, coord: Coordinate) -> Set[Coordinate]:
    """Orthogonal neighbours of coord, clipped at the board edge"""
    return _offset_points(board, coord, NEIGHBOR_OFFSETS)


def diagonals(board: np.ndarray, coord: Coordinate) -> Set[Coordinate]:
    """Diagonal neighbours of coord (shape heuristics only)"""
    return _offset_points(board, coord, DIAGONAL_OFFSETS)


def group(board: np.ndarray, coord: Coordinate) -> Set[Coordinate]:
    """Get all stones in the same group as coord (empty set for an empty point)"""
    x, y = coord
    color = board[y, x]
    if color == EMPTY:
        return set()

    members = set()
    stack = [coord]

    while stack:
        current = stack.pop()
        if current in members:
            continue
        members.add(current)

        for nx, ny in adjacent(board, current):
            if board[ny, nx] == color and (nx, ny) not in members:
                stack.append((nx, ny))

    return members


def liberties(board: np.ndarray, stones: Iterable[Coordinate]) -> Set[Coordinate]:
    """Empty points orthogonally adjacent to any of the given stones"""
    libs = set()
    for stone in stones:
        for nx, ny in adjacent(board, stone):
            if board[ny, nx] == EMPTY:
                libs.add((nx, ny))
    return libs


def has_liberty(board: np.ndarray, coord: Coordinate) -> bool:
    """True iff the group containing coord has at least one liberty.

    Stops at the first liberty found, so it is cheaper than
    len(liberties(...)) for the common case of a group with room to breathe.
    """
    x, y = coord
    color = board[y, x]
    if color == EMPTY:
        return False

    visited = set()
    stack = [coord]

    while stack:
        current = stack.pop()
        if current in visited:
            continue
        visited.add(current)

        for nx, ny in adjacent(board, current):
            value = board[ny, nx]
            if value == EMPTY:
                return True
            if value == color and (nx, ny) not in visited:
                stack.append((nx, ny))

    return False


def iter_groups(board: np.ndarray, color: int) -> Iterator[Set[Coordinate]]:
    """Yield every group of the given color exactly once"""
    seen = set()
    for y, x in np.argwhere(board == color):
        point = (int(x), int(y))
        if point in seen:
            continue
        members = group(board, point)
        seen.update(members)
        yield members


def weak_group_liberties(board: np.ndarray, color: int, max_liberties: int = 2) -> Set[Coordinate]:
    """Liberties of every group of color that has at most max_liberties"""
    points = set()
    for members in iter_groups(board, color):
        libs = liberties(board, members)
        if len(libs) <= max_liberties:
            points.update(libs)
    return points
