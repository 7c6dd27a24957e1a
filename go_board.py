"""
Board model for the Go engine: stone constants, board construction helpers,
move records and the short board history used for ko checks.
"""
import numpy as np
from collections import deque
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

# Constants for board representation
EMPTY = 0
BLACK = 1
WHITE = 2

Coordinate = Tuple[int, int]

_COLOR_NAMES = {EMPTY: None, BLACK: 'black', WHITE: 'white'}
_ROW_SYMBOLS = {'.': EMPTY, '+': EMPTY, 'B': BLACK, 'X': BLACK, 'W': WHITE, 'O': WHITE}


def opponent(color: int) -> int:
    """Get opponent color"""
    return WHITE if color == BLACK else BLACK


def color_name(color: int) -> Optional[str]:
    """Convert integer color to 'black' / 'white' (None for empty)"""
    return _COLOR_NAMES[int(color)]


def parse_color(color) -> int:
    """Convert 'black'/'white' (or an int constant) to the integer color"""
    if isinstance(color, str):
        lowered = color.lower()
        if lowered == 'black':
            return BLACK
        if lowered == 'white':
            return WHITE
        raise ValueError(f"Unknown color: {color!r}")
    if color in (BLACK, WHITE):
        return int(color)
    raise ValueError(f"Unknown color: {color!r}")


def empty_board(size: int) -> np.ndarray:
    """Create an empty size x size board, indexed board[y, x]"""
    return np.zeros((size, size), dtype=np.int8)


def board_from_rows(rows: Iterable[str]) -> np.ndarray:
    """Build a board from text rows such as ". B W . ."

    Whitespace is ignored; '.'/'+' are empty, 'B'/'X' black, 'W'/'O' white.
    """
    parsed = []
    for row in rows:
        cells = [_ROW_SYMBOLS[ch] for ch in row if not ch.isspace()]
        if cells:
            parsed.append(cells)
    size = len(parsed)
    if any(len(r) != size for r in parsed):
        raise ValueError("Board rows must form a square")
    return np.array(parsed, dtype=np.int8)


def board_to_rows(board: np.ndarray) -> List[str]:
    """Inverse of board_from_rows, used for display and debugging"""
    symbols = {EMPTY: '.', BLACK: 'B', WHITE: 'W'}
    return [' '.join(symbols[int(v)] for v in row) for row in board]


def in_bounds(board: np.ndarray, coord: Coordinate) -> bool:
    x, y = coord
    size = board.shape[0]
    return 0 <= x < size and 0 <= y < size


def empty_points(board: np.ndarray) -> List[Coordinate]:
    """All empty intersections in row-major order as (x, y)"""
    return [(int(x), int(y)) for y, x in np.argwhere(board == EMPTY)]


def stone_count(board: np.ndarray) -> int:
    return int(np.count_nonzero(board))


def freeze(board: np.ndarray) -> np.ndarray:
    """Mark a board snapshot read-only so it cannot be mutated in place"""
    board.flags.writeable = False
    return board


@dataclass(frozen=True)
class MoveRecord:
    """One ply of the game; coordinate None means a pass"""
    color: int
    coordinate: Optional[Coordinate]
    captures: int = 0

    @property
    def is_pass(self) -> bool:
        return self.coordinate is None

    def to_dict(self) -> dict:
        return {
            'color': color_name(self.color),
            'coordinate': list(self.coordinate) if self.coordinate is not None else None,
            'captures': self.captures,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'MoveRecord':
        coord = data.get('coordinate')
        return cls(
            color=parse_color(data['color']),
            coordinate=(int(coord[0]), int(coord[1])) if coord is not None else None,
            captures=int(data.get('captures', 0)),
        )


class BoardHistory:
    """Fixed window of the current board and the two boards before it"""

    WINDOW = 3

    def __init__(self, initial: np.ndarray):
        self._boards = deque(maxlen=self.WINDOW)
        self._boards.append(freeze(initial.copy()))

    @property
    def current(self) -> np.ndarray:
        return self._boards[-1]

    @property
    def previous(self) -> Optional[np.ndarray]:
        """Board one ply back"""
        return self._boards[-2] if len(self._boards) > 1 else None

    @property
    def previous_two(self) -> Optional[np.ndarray]:
        """Board two plies back"""
        return self._boards[-3] if len(self._boards) > 2 else None

    @property
    def ko_reference(self) -> Optional[np.ndarray]:
        """Position a move by the side to play must not recreate.

        This is the board before the opponent's last move, i.e. two plies
        before the board that the candidate move would produce.
        """
        return self.previous

    def push(self, board: np.ndarray) -> None:
        if board.flags.writeable:
            board = freeze(board.copy())
        self._boards.append(board)

    def __len__(self) -> int:
        return len(self._boards)
