"""Unit tests for /src/chess/position.py"""

import pytest

from src.chess.position import BOARD_DIMENSIONS, Position, all_positions


@pytest.mark.parametrize(
    "name, row, col",
    [
        ("a8", 0, 0),
        ("h8", 0, 7),
        ("a1", 7, 0),
        ("h1", 7, 7),
        ("e2", 6, 4),
        ("d5", 3, 3),
    ],
)
def test_from_algebraic(name: str, row: int, col: int) -> None:
    """Row 0 is the 8th rank (black's home rank), column 0 the a-file"""
    assert Position.from_algebraic(name) == Position(row, col)


@pytest.mark.parametrize("name", ["a1", "c3", "e4", "h8", "b7"])
def test_to_algebraic(name: str) -> None:
    assert Position.from_algebraic(name).to_algebraic() == name


@pytest.mark.parametrize(
    "row, col, expected",
    [
        (0, 0, True),
        (7, 7, True),
        (-1, 0, False),
        (0, 8, False),
        (8, 3, False),
        (3, -1, False),
    ],
)
def test_is_within_bounds(row: int, col: int, expected: bool) -> None:
    assert Position(row, col).is_within_bounds() == expected


def test_offset() -> None:
    assert Position(3, 3).offset(-1, 2) == Position(2, 5)


def test_all_positions_covers_the_board() -> None:
    positions = all_positions()
    assert len(positions) == BOARD_DIMENSIONS[0] * BOARD_DIMENSIONS[1]
    assert len(set(positions)) == len(positions)
    assert positions[0] == Position(0, 0)
