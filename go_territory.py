"""
Territory scoring by flood fill over empty regions.
"""
import numpy as np
from collections import deque
from dataclasses import dataclass
from typing import FrozenSet, List, NamedTuple, Optional

from go_board import EMPTY, BLACK, WHITE, Coordinate, color_name
from go_groups import adjacent


@dataclass(frozen=True)
class TerritoryRegion:
    """A maximal connected set of empty points"""
    points: FrozenSet[Coordinate]
    border_colors: FrozenSet[int]

    @property
    def owner(self) -> int:
        """The single bordering color, or EMPTY for neutral/contested regions"""
        if len(self.border_colors) == 1:
            return next(iter(self.border_colors))
        return EMPTY

    @property
    def size(self) -> int:
        return len(self.points)


class TerritoryScore(NamedTuple):
    black: int
    white: int
    territory_map: np.ndarray


@dataclass(frozen=True)
class GameResult:
    black_territory: int
    white_territory: int
    black_captures: int
    white_captures: int

    @property
    def black_total(self) -> int:
        return self.black_territory + self.black_captures

    @property
    def white_total(self) -> int:
        return self.white_territory + self.white_captures

    @property
    def winner(self) -> Optional[int]:
        """BLACK or WHITE for a strictly higher total, None for a draw"""
        if self.black_total > self.white_total:
            return BLACK
        if self.white_total > self.black_total:
            return WHITE
        return None

    def to_dict(self) -> dict:
        return {
            'black': {'territory': self.black_territory, 'captures': self.black_captures,
                      'total': self.black_total},
            'white': {'territory': self.white_territory, 'captures': self.white_captures,
                      'total': self.white_total},
            'winner': color_name(self.winner) if self.winner is not None else None,
        }


def _flood_fill_region(board: np.ndarray, start: Coordinate, visited: np.ndarray) -> TerritoryRegion:
    """Flood fill to find an empty region and the stone colors bordering it"""
    queue = deque([start])
    sx, sy = start
    visited[sy, sx] = True
    points = []
    bordering_colors = set()

    while queue:
        point = queue.popleft()
        points.append(point)

        for nx, ny in adjacent(board, point):
            value = int(board[ny, nx])
            if value != EMPTY:
                bordering_colors.add(value)
            elif not visited[ny, nx]:
                visited[ny, nx] = True
                queue.append((nx, ny))

    return TerritoryRegion(frozenset(points), frozenset(bordering_colors))


def find_regions(board: np.ndarray) -> List[TerritoryRegion]:
    """Partition all empty points into regions, in row-major discovery order"""
    visited = np.zeros(board.shape, dtype=bool)
    regions = []

    for y, x in np.argwhere(board == EMPTY):
        if not visited[y, x]:
            regions.append(_flood_fill_region(board, (int(x), int(y)), visited))

    return regions


def score_territory(board: np.ndarray) -> TerritoryScore:
    """Count territory for both players.

    A region belongs to a color only if that color alone borders it. Regions
    touching both colors, or no stones at all, are neutral.
    """
    territory_map = np.zeros(board.shape, dtype=np.int8)
    totals = {BLACK: 0, WHITE: 0}

    for region in find_regions(board):
        owner = region.owner
        if owner == EMPTY:
            continue
        totals[owner] += region.size
        for x, y in region.points:
            territory_map[y, x] = owner

    return TerritoryScore(totals[BLACK], totals[WHITE], territory_map)


def final_result(board: np.ndarray, black_captures: int, white_captures: int) -> GameResult:
    """Score = territory + captures for each color"""
    black, white, _ = score_territory(board)
    return GameResult(black, white, int(black_captures), int(white_captures))
