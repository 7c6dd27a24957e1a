"""
Pytest tests for the Go rules engine: legality, captures and ko.
"""

import pytest
import numpy as np

from go_board import BLACK, WHITE, EMPTY, board_from_rows, empty_points
from go_errors import MovePreconditionError
from go_rules import (MoveStatus, check_move, is_legal_move, find_captures,
                      apply_move, legal_moves)


class TestMoveValidation:

    @pytest.mark.unit
    def test_basic_move_is_legal(self, empty_board_9x9):
        assert is_legal_move(empty_board_9x9, (4, 4), BLACK)
        assert check_move(empty_board_9x9, (4, 4), BLACK) is MoveStatus.LEGAL

    @pytest.mark.unit
    def test_out_of_bounds(self, empty_board_9x9):
        for coord in [(-1, 0), (0, -1), (9, 0), (0, 9)]:
            assert check_move(empty_board_9x9, coord, BLACK) is MoveStatus.OUT_OF_BOUNDS
            assert not is_legal_move(empty_board_9x9, coord, BLACK)

    @pytest.mark.unit
    def test_occupied_points_are_never_legal(self, capture_position):
        for y, x in np.argwhere(capture_position != EMPTY):
            for color in (BLACK, WHITE):
                assert check_move(capture_position, (int(x), int(y)), color) is MoveStatus.OCCUPIED

    @pytest.mark.unit
    def test_suicide_is_rejected(self):
        board = board_from_rows([
            ". W . . .",
            "W . . . .",
            ". . . . .",
            ". . . . .",
            ". . . . .",
        ])
        assert check_move(board, (0, 0), BLACK) is MoveStatus.SUICIDE
        # White filling its own corner still has liberties
        assert is_legal_move(board, (0, 0), WHITE)

    @pytest.mark.unit
    def test_multi_stone_suicide_is_rejected(self):
        #   0 1 2
        # 0 B . B
        # 1 . B .
        # 2 B . B
        board = board_from_rows([
            "B . B",
            ". B .",
            "B . B",
        ])
        assert check_move(board, (1, 0), WHITE) is MoveStatus.SUICIDE

    @pytest.mark.unit
    def test_filling_own_last_liberty_is_suicide(self):
        board = board_from_rows([
            "B W . . .",
            ". W . . .",
            "W . . . .",
            ". . . . .",
            ". . . . .",
        ])
        # Black's stone at (0,0) has its last liberty at (0,1)
        assert check_move(board, (0, 1), BLACK) is MoveStatus.SUICIDE

    @pytest.mark.unit
    def test_capture_takes_precedence_over_suicide(self):
        board = board_from_rows([
            ". W B . .",
            "W B . . .",
            "B . . . .",
            ". . . . .",
            ". . . . .",
        ])
        # Black at (0,0) has no liberties of its own but captures both white stones
        assert check_move(board, (0, 0), BLACK) is MoveStatus.LEGAL

    @pytest.mark.unit
    def test_validation_does_not_modify_board(self, capture_position):
        before = capture_position.copy()
        check_move(capture_position, (5, 4), BLACK)
        check_move(capture_position, (0, 0), WHITE)
        assert np.array_equal(before, capture_position)


class TestCaptures:

    @pytest.mark.unit
    def test_single_stone_capture(self, capture_position):
        new_board, captured = apply_move(capture_position, (5, 4), BLACK)
        assert captured == {(4, 4)}
        assert new_board[4, 4] == EMPTY
        assert new_board[4, 5] == BLACK

    @pytest.mark.unit
    def test_apply_move_is_copy_on_write(self, capture_position):
        before = capture_position.copy()
        new_board, _ = apply_move(capture_position, (5, 4), BLACK)
        assert np.array_equal(before, capture_position)
        assert not new_board.flags.writeable

    @pytest.mark.unit
    def test_group_capture(self):
        board = board_from_rows([
            ". B B . .",
            "B W W B .",
            ". B . . .",
            ". . . . .",
            ". . . . .",
        ])
        new_board, captured = apply_move(board, (2, 2), BLACK)
        assert captured == {(1, 1), (2, 1)}
        assert len(captured) == 2
        assert new_board[1, 1] == EMPTY and new_board[1, 2] == EMPTY

    @pytest.mark.unit
    def test_multiple_groups_captured_together(self):
        board = board_from_rows([
            ". W B . .",
            "W B . . .",
            "B . . . .",
            ". . . . .",
            ". . . . .",
        ])
        new_board, captured = apply_move(board, (0, 0), BLACK)
        assert captured == {(1, 0), (0, 1)}
        assert new_board[0, 0] == BLACK

    @pytest.mark.unit
    def test_only_the_captured_group_is_removed(self):
        board = board_from_rows([
            ". B . . .",
            "B W B . .",
            ". . . . .",
            ". . . W W",
            ". . . W .",
        ])
        new_board, captured = apply_move(board, (1, 2), BLACK)
        assert captured == {(1, 1)}
        expected = board.copy()
        expected[2, 1] = BLACK
        expected[1, 1] = EMPTY
        assert np.array_equal(new_board, expected)

    @pytest.mark.unit
    def test_find_captures_on_placed_stone(self, capture_position):
        placed = capture_position.copy()
        placed[4, 5] = BLACK
        assert find_captures(placed, (5, 4), BLACK) == {(4, 4)}
        # Nothing to capture for a stone placed elsewhere
        assert find_captures(placed, (5, 4), WHITE) == set()

    @pytest.mark.unit
    def test_no_capture_when_group_keeps_a_liberty(self, capture_position):
        _, captured = apply_move(capture_position, (0, 0), BLACK)
        assert captured == frozenset()

    @pytest.mark.unit
    @pytest.mark.parametrize("coord", [(4, 3), (4, 4), (-1, 2)])
    def test_apply_move_rejects_invalid_target(self, capture_position, coord):
        with pytest.raises(MovePreconditionError):
            apply_move(capture_position, coord, WHITE)

    @pytest.mark.unit
    def test_apply_move_rejects_suicide(self):
        board = board_from_rows([
            ". W .",
            "W . .",
            ". . .",
        ])
        with pytest.raises(MovePreconditionError) as excinfo:
            apply_move(board, (0, 0), BLACK)
        assert excinfo.value.code == "MOVE_PRECONDITION"


class TestKo:

    @pytest.mark.unit
    def test_immediate_recapture_is_ko(self, ko_position):
        after_capture, captured = apply_move(ko_position, (2, 2), BLACK)
        assert captured == {(3, 2)}

        # White recapturing at (3, 2) would recreate ko_position
        assert check_move(after_capture, (3, 2), WHITE, ko_position) is MoveStatus.KO
        assert not is_legal_move(after_capture, (3, 2), WHITE, ko_position)

    @pytest.mark.unit
    def test_recapture_reproduces_previous_board(self, ko_position):
        after_capture, _ = apply_move(ko_position, (2, 2), BLACK)
        recaptured, captured = apply_move(after_capture, (3, 2), WHITE)
        assert captured == {(2, 2)}
        assert np.array_equal(recaptured, ko_position)

    @pytest.mark.unit
    def test_recapture_allowed_without_history(self, ko_position):
        after_capture, _ = apply_move(ko_position, (2, 2), BLACK)
        assert is_legal_move(after_capture, (3, 2), WHITE, None)

    @pytest.mark.unit
    def test_recapture_allowed_after_exchange_elsewhere(self, ko_position):
        after_capture, _ = apply_move(ko_position, (2, 2), BLACK)
        white_elsewhere, _ = apply_move(after_capture, (8, 8), WHITE)
        black_elsewhere, _ = apply_move(white_elsewhere, (0, 8), BLACK)
        # Only the position two plies back is compared
        assert is_legal_move(black_elsewhere, (3, 2), WHITE, white_elsewhere)

    @pytest.mark.unit
    def test_ko_only_applies_to_the_repeating_point(self, ko_position):
        after_capture, _ = apply_move(ko_position, (2, 2), BLACK)
        assert is_legal_move(after_capture, (6, 6), WHITE, ko_position)


class TestLegalMoves:

    @pytest.mark.unit
    def test_every_empty_point_is_legal_on_empty_board(self, empty_board_9x9):
        moves = legal_moves(empty_board_9x9, BLACK)
        assert len(moves) == 81
        assert moves == empty_points(empty_board_9x9)

    @pytest.mark.unit
    def test_excludes_suicide_points(self):
        board = board_from_rows([
            ". W . . .",
            "W . . . .",
            ". . . . .",
            ". . . . .",
            ". . . . .",
        ])
        moves = legal_moves(board, BLACK)
        assert (0, 0) not in moves
        assert len(moves) == 22

    @pytest.mark.unit
    def test_full_board_has_no_moves(self):
        board = np.full((9, 9), BLACK, dtype=np.int8)
        assert legal_moves(board, WHITE) == []
