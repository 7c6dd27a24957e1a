"""Shared pytest fixtures and configuration for all tests."""

import pytest
import random
import sys
import os

# Add parent directory to path so we can import modules
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from go_board import empty_board, board_from_rows


@pytest.fixture
def empty_board_9x9():
    """Fixture for empty 9x9 board."""
    return empty_board(9)


@pytest.fixture
def empty_board_13x13():
    """Fixture for empty 13x13 board."""
    return empty_board(13)


@pytest.fixture
def empty_board_19x19():
    """Fixture for empty 19x19 board."""
    return empty_board(19)


@pytest.fixture
def capture_position():
    """White stone at (4, 4) with black on three sides; (5, 4) is its last liberty."""
    return board_from_rows([
        ". . . . . . . . .",
        ". . . . . . . . .",
        ". . . . . . . . .",
        ". . . . B . . . .",
        ". . . B W . . . .",
        ". . . . B . . . .",
        ". . . . . . . . .",
        ". . . . . . . . .",
        ". . . . . . . . .",
    ])


@pytest.fixture
def ko_position():
    """Black to play at (2, 2) capturing the white stone at (3, 2)."""
    return board_from_rows([
        ". . . . . . . . .",
        ". . W B . . . . .",
        ". W . W B . . . .",
        ". . W B . . . . .",
        ". . . . . . . . .",
        ". . . . . . . . .",
        ". . . . . . . . .",
        ". . . . . . . . .",
        ". . . . . . . . .",
    ])


@pytest.fixture
def rng():
    """Seeded random source for reproducible AI choices."""
    return random.Random(42)


@pytest.fixture
def small_board_size():
    """Small board size for quick tests."""
    return 9
