"""
Classic Go AI using one-ply heuristics.

Every legal move is scored from an influence map, opening star points, atari
threats, shape and the liberties of weak groups; the difficulty tier then
decides how much randomness goes into picking among the scored moves.
"""

import logging
import random
import numpy as np
from typing import Dict, List, Optional, Sequence, Set, Tuple

from go_board import BLACK, WHITE, Coordinate, opponent, stone_count, color_name
from go_config import Difficulty, validate_board_size
from go_errors import ConfigurationError
from go_groups import adjacent, diagonals, group, liberties, weak_group_liberties
from go_rules import legal_moves

logger = logging.getLogger(__name__)

INFLUENCE_RADIUS = 3
OPENING_STONES = 12  # positions with fewer stones count as the opening

# Share of the ranked move list each tier picks from
TOP_FRACTION = {
    Difficulty.MEDIUM: 0.4,
    Difficulty.HARD: 0.2,
}
EASY_RANDOM_RATE = 0.6


def _influence_kernel(radius: int = INFLUENCE_RADIUS) -> np.ndarray:
    """Strength 1.0 at the stone decaying linearly to 0 at `radius`"""
    dy, dx = np.ogrid[-radius:radius + 1, -radius:radius + 1]
    distance = np.sqrt(dx * dx + dy * dy)
    return np.clip(1.0 - distance / radius, 0.0, None)


class ClassicGoAI:
    """Fast heuristic Go AI with five difficulty tiers"""

    def __init__(self, board_size: int = 19, difficulty=Difficulty.EASY,
                 color: int = WHITE, rng: Optional[random.Random] = None):
        self.board_size = validate_board_size(board_size)
        self.difficulty = Difficulty.parse(difficulty)
        self.color = color
        self.rng = rng if rng is not None else random.Random()
        self._kernel = _influence_kernel()

        # Pattern weights for evaluation
        self.pattern_weights = {
            'opening_edge': -5,
            'strategic_point': 10,
            'influence': 3,
            'opponent_area': -8,
            'atari_attack': 15,
            'atari_group_size': 2,
            'liberty_pressure': 5,
            'connection': 5,
            'diagonal_shape': 3,
            'weak_enemy_liberty': 20,
            'weak_own_liberty': 18,
        }

    def influence_field(self, board: np.ndarray, color: int) -> np.ndarray:
        """Sum of every `color` stone's radial influence, clipped to the board"""
        size = board.shape[0]
        r = INFLUENCE_RADIUS
        field = np.zeros((size, size), dtype=np.float64)

        for y, x in np.argwhere(board == color):
            y0, y1 = max(0, y - r), min(size, y + r + 1)
            x0, x1 = max(0, x - r), min(size, x + r + 1)
            field[y0:y1, x0:x1] += self._kernel[y0 - (y - r):y1 - (y - r),
                                                x0 - (x - r):x1 - (x - r)]

        return field

    def strategic_points(self) -> Set[Coordinate]:
        """Star points: corners always, sides from 13x13, tengen on 19x19"""
        size = self.board_size
        edge = 3 if size == 19 else 2
        far = size - edge - 1
        points = {(edge, edge), (far, edge), (edge, far), (far, far)}

        if size >= 13:
            mid = size // 2
            points.update({(mid, edge), (mid, far), (edge, mid), (far, mid)})
            if size == 19:
                points.add((mid, mid))

        return points

    def evaluate_move(self, board: np.ndarray, coord: Coordinate,
                      influence: Dict[int, np.ndarray], strategic: Set[Coordinate],
                      opening: bool) -> float:
        """Evaluate a potential move using position, influence, atari and shape"""
        w = self.pattern_weights
        x, y = coord
        size = board.shape[0]
        player = self.color
        enemy = opponent(player)
        score = 0.0

        if opening:
            if x <= 1 or y <= 1 or x >= size - 2 or y >= size - 2:
                score += w['opening_edge']
            if coord in strategic:
                score += w['strategic_point']

        own_influence = influence[player][y, x]
        enemy_influence = influence[enemy][y, x]
        score += (own_influence - enemy_influence) * w['influence']

        # Deep inside the opponent's sphere
        if enemy_influence > 2 * own_influence + 1:
            score += w['opponent_area']

        # Pressure on adjacent opponent groups, each group counted once
        seen = set()
        neighbours = adjacent(board, coord)
        for nx, ny in neighbours:
            if board[ny, nx] != enemy or (nx, ny) in seen:
                continue
            members = group(board, (nx, ny))
            seen.update(members)
            remaining = liberties(board, members) - {coord}
            if len(remaining) == 1:
                score += w['atari_attack'] + len(members) * w['atari_group_size']
            elif len(remaining) == 2:
                score += w['liberty_pressure']

        if any(board[ny, nx] == player for nx, ny in neighbours):
            score += w['connection']
            for dx, dy in diagonals(board, coord):
                if board[dy, dx] == player:
                    score += w['diagonal_shape']

        return score

    def rate_moves(self, board: np.ndarray, moves: Sequence[Coordinate]) -> List[Tuple[Coordinate, float]]:
        """Score every move; the result keeps the order of `moves`"""
        enemy = opponent(self.color)
        influence = {
            BLACK: self.influence_field(board, BLACK),
            WHITE: self.influence_field(board, WHITE),
        }
        strategic = self.strategic_points()
        opening = stone_count(board) < OPENING_STONES

        weak_enemy = weak_group_liberties(board, enemy)
        weak_own = weak_group_liberties(board, self.color)

        rated = []
        for move in moves:
            score = self.evaluate_move(board, move, influence, strategic, opening)
            # Attacking weak groups first, defending our own second
            if move in weak_enemy:
                score += self.pattern_weights['weak_enemy_liberty']
            if move in weak_own:
                score += self.pattern_weights['weak_own_liberty']
            rated.append((move, score))
        return rated

    def _best(self, rated: List[Tuple[Coordinate, float]]) -> Coordinate:
        top = max(score for _, score in rated)
        return self.rng.choice([move for move, score in rated if score == top])

    def select_move(self, board: np.ndarray,
                    previous_board: Optional[np.ndarray] = None) -> Optional[Coordinate]:
        """Pick a move for self.color, or None to pass when nothing is legal"""
        if board.shape != (self.board_size, self.board_size):
            raise ConfigurationError(
                "Board does not match the configured size",
                context={'board_size': self.board_size, 'shape': board.shape},
            )

        moves = legal_moves(board, self.color, previous_board)
        if not moves:
            logger.debug("%s has no legal move, passing", color_name(self.color))
            return None

        if self.difficulty is Difficulty.VERY_EASY:
            return self.rng.choice(moves)

        rated = self.rate_moves(board, moves)

        if self.difficulty is Difficulty.EASY:
            if self.rng.random() < EASY_RANDOM_RATE:
                return self.rng.choice(moves)
            return self._best(rated)

        if self.difficulty in TOP_FRACTION:
            ranked = sorted(rated, key=lambda item: item[1], reverse=True)
            band = max(1, int(len(ranked) * TOP_FRACTION[self.difficulty]))
            move, score = self.rng.choice(ranked[:band])
            logger.debug("Picked %s (score %.2f) from top %d of %d", move, score, band, len(ranked))
            return move

        return self._best(rated)


def select_ai_move(board: np.ndarray, previous_board: Optional[np.ndarray],
                   difficulty, board_size: int, rng: Optional[random.Random] = None,
                   color: int = WHITE) -> Optional[Coordinate]:
    """Functional entry point: the AI's move for this position or None (pass)"""
    return ClassicGoAI(board_size, difficulty, color=color, rng=rng).select_move(board, previous_board)
