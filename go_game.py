"""
Game session: one human-vs-AI game on top of the rules engine.

Keeps the board history window for ko, the move records, capture totals,
pass handling and end-of-game scoring. Everything here is synchronous;
timing (AI thinking delay, forfeit on timeout) belongs to the server.
"""
import logging
import random
import numpy as np
from typing import Dict, List, Optional

from classic_go_ai import ClassicGoAI
from go_board import (BLACK, WHITE, BoardHistory, Coordinate, MoveRecord,
                      empty_board, opponent, color_name, board_to_rows)
from go_config import GameConfig
from go_errors import GameStateError
from go_rules import check_move, apply_move
from go_territory import GameResult, final_result, score_territory

logger = logging.getLogger(__name__)

AI_PLAY_AFTER_PASS_RATE = 0.3  # chance the AI plays on instead of answering a pass


class GoGame:
    """A single game between a human (black by default) and the AI"""

    def __init__(self, config: Optional[GameConfig] = None):
        self.config = config or GameConfig()
        self.size = self.config.board_size
        self.history = BoardHistory(empty_board(self.size))
        self.moves: List[MoveRecord] = []
        self.captures = {BLACK: 0, WHITE: 0}
        self.current_player = BLACK
        self.game_over = False
        self.winner: Optional[int] = None
        self.result: Optional[GameResult] = None
        self.last_move: Optional[Coordinate] = None

    @property
    def board(self) -> np.ndarray:
        return self.history.current

    @property
    def previous_board(self) -> Optional[np.ndarray]:
        return self.history.previous

    def _require_active(self) -> None:
        if self.game_over:
            raise GameStateError("Game is already over")

    def make_ai(self, rng: Optional[random.Random] = None) -> ClassicGoAI:
        """AI opponent configured for this game"""
        if rng is None and self.config.seed is not None:
            rng = random.Random(self.config.seed)
        return ClassicGoAI(self.size, self.config.difficulty, color=self.config.ai_color, rng=rng)

    def play(self, coord: Coordinate) -> Optional[MoveRecord]:
        """Play a stone for the side to move.

        Returns the MoveRecord, or None when the move is illegal (the game is
        unchanged in that case).
        """
        self._require_active()
        coord = (int(coord[0]), int(coord[1]))
        status = check_move(self.board, coord, self.current_player, self.history.ko_reference)
        if not status.is_legal:
            logger.debug("Rejected %s at %s: %s", color_name(self.current_player), coord, status.value)
            return None

        new_board, captured = apply_move(self.board, coord, self.current_player)
        record = MoveRecord(self.current_player, coord, len(captured))
        self.history.push(new_board)
        self.captures[self.current_player] += len(captured)
        self._record(record)
        self.last_move = coord
        return record

    def pass_turn(self) -> MoveRecord:
        """Pass for the side to move; two passes in a row end the game"""
        self._require_active()
        record = MoveRecord(self.current_player, None, 0)
        # The position repeats after a pass, so the ko window advances too
        self.history.push(self.board)
        self._record(record)
        self.last_move = None

        if self.consecutive_passes() >= 2:
            self.end_game()
        return record

    def resign(self, color: int) -> None:
        self._require_active()
        self.game_over = True
        self.winner = opponent(color)
        logger.info("%s resigned", color_name(color))

    def forfeit(self, color: int) -> None:
        """End the game against `color`, e.g. when the AI runs out of time"""
        if self.game_over:
            return
        self.game_over = True
        self.winner = opponent(color)
        logger.info("%s forfeited", color_name(color))

    def choose_ai_move(self, ai: ClassicGoAI) -> Optional[Coordinate]:
        """The AI's decision for this turn without playing it; None means pass.

        After the human passes the AI usually passes as well, but plays on
        with probability AI_PLAY_AFTER_PASS_RATE. With no legal move it passes.
        Only reads the current snapshot, so it may run in a worker thread.
        """
        self._require_active()
        if self.current_player != ai.color:
            raise GameStateError("It is not the AI's turn",
                                 context={'to_move': color_name(self.current_player)})

        if self.moves and self.moves[-1].is_pass and ai.rng.random() >= AI_PLAY_AFTER_PASS_RATE:
            return None

        return ai.select_move(self.board, self.history.ko_reference)

    def ai_turn(self, ai: ClassicGoAI) -> MoveRecord:
        """Choose and play the AI's move"""
        return self.commit_ai_move(self.choose_ai_move(ai))

    def commit_ai_move(self, move: Optional[Coordinate]) -> MoveRecord:
        if move is None:
            return self.pass_turn()

        record = self.play(move)
        if record is None:
            # select_move only returns legal moves
            raise GameStateError("AI proposed an illegal move", context={'coordinate': move})
        return record

    def consecutive_passes(self) -> int:
        count = 0
        for record in reversed(self.moves):
            if not record.is_pass:
                break
            count += 1
        return count

    def territory(self) -> np.ndarray:
        """Territory map of the current position, computed on demand"""
        return score_territory(self.board).territory_map

    def end_game(self) -> GameResult:
        self.result = final_result(self.board, self.captures[BLACK], self.captures[WHITE])
        self.game_over = True
        self.winner = self.result.winner
        logger.info("Game over: black %d, white %d, winner %s",
                    self.result.black_total, self.result.white_total,
                    color_name(self.winner) if self.winner else 'draw')
        return self.result

    def _record(self, record: MoveRecord) -> None:
        self.moves.append(record)
        self.current_player = opponent(record.color)

    def get_state(self) -> Dict:
        """Game state in a JSON-friendly format for clients"""
        board_list = [[color_name(int(v)) for v in row] for row in self.board]
        state = {
            'board': board_list,
            'boardSize': self.size,
            'difficulty': self.config.difficulty.value,
            'currentPlayer': color_name(self.current_player),
            'captures': {'black': self.captures[BLACK], 'white': self.captures[WHITE]},
            'moveHistory': [record.to_dict() for record in self.moves],
            'gameOver': self.game_over,
            'winner': color_name(self.winner) if self.winner else None,
            'lastMove': {'x': self.last_move[0], 'y': self.last_move[1]} if self.last_move else None,
            'territoryMap': None,
            'score': self.result.to_dict() if self.result else None,
        }
        if self.result is not None:
            state['territoryMap'] = [[color_name(int(v)) for v in row] for row in self.territory()]
        return state

    def to_dict(self) -> Dict:
        """Persistable state: enough to rebuild the game by replay"""
        return {
            'config': self.config.to_dict(),
            'moves': [record.to_dict() for record in self.moves],
            'captures': {'black': self.captures[BLACK], 'white': self.captures[WHITE]},
            'gameOver': self.game_over,
            'winner': color_name(self.winner) if self.winner else None,
        }

    @classmethod
    def replay(cls, config: GameConfig, moves: List[MoveRecord]) -> 'GoGame':
        """Rebuild a game by playing the recorded moves in order"""
        game = cls(config)
        for index, record in enumerate(moves):
            if game.game_over:
                raise GameStateError("Moves recorded after the end of the game", context={'ply': index})
            if record.color != game.current_player:
                raise GameStateError("Move out of turn", context={'ply': index})
            if record.is_pass:
                game.pass_turn()
                continue
            played = game.play(record.coordinate)
            if played is None or played.captures != record.captures:
                raise GameStateError("Recorded move does not replay",
                                     context={'ply': index, 'coordinate': record.coordinate})
        return game

    @classmethod
    def from_dict(cls, data: Dict) -> 'GoGame':
        config = GameConfig.from_dict(data.get('config', {}))
        moves = [MoveRecord.from_dict(m) for m in data.get('moves', [])]
        game = cls.replay(config, moves)

        captures = data.get('captures')
        if captures is not None:
            if captures.get('black') != game.captures[BLACK] or captures.get('white') != game.captures[WHITE]:
                raise GameStateError("Capture totals do not match the move history",
                                     context={'saved': captures})

        # Resignations and forfeits are not moves; restore their outcome
        if data.get('gameOver') and not game.game_over:
            game.game_over = True
            winner = data.get('winner')
            game.winner = {'black': BLACK, 'white': WHITE}.get(winner)
        return game

    def __str__(self) -> str:
        return '\n'.join(board_to_rows(self.board))
