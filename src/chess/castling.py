"""Helpers for implementing Castling rules. Need to be imported by multiple modules"""

from dataclasses import dataclass
from enum import Enum
from typing import Self

from src.chess.position import Position
from src.core.shared_types import Color


class CastlingSide(Enum):
    KING_SIDE = "king side"
    QUEEN_SIDE = "queen side"


@dataclass(frozen=True)
class CastlingSquares:
    """
    Store the squares where king/rook start from/end up in by castling.

    * between: squares that must be empty
    * king_path: squares that must not be attacked (the king's own square, the one it passes, and where it lands)
    """

    king_from: Position
    king_to: Position
    rook_from: Position
    rook_to: Position
    between: tuple[Position, ...]
    king_path: tuple[Position, ...]

    @classmethod
    def from_algebraic(
        cls, k_from: str, k_to: str, r_from: str, r_to: str
    ) -> Self:
        """Convenience method: to make mapping shown below more readable"""
        king_from = Position.from_algebraic(k_from)
        king_to = Position.from_algebraic(k_to)
        rook_from = Position.from_algebraic(r_from)
        rook_to = Position.from_algebraic(r_to)
        return cls(
            king_from,
            king_to,
            rook_from,
            rook_to,
            between=squares_between_on_row(king_from, rook_from),
            king_path=(king_from, *squares_between_on_row(king_from, king_to), king_to),
        )


def squares_between_on_row(from_position: Position, to_position: Position) -> tuple[Position, ...]:
    """Squares strictly in between two squares on the same row"""
    if from_position.row != to_position.row:
        raise ValueError(
            f"squares_between_on_row requires both squares to lie on the same row. \n from: {from_position}\n to:{to_position}"
        )
    step = 1 if to_position.col > from_position.col else -1
    return tuple(
        Position(from_position.row, col)
        for col in range(from_position.col + step, to_position.col, step)
    )


# The moves (in classical chess) made when castling
CASTLING_RULES: dict[tuple[Color, CastlingSide], CastlingSquares] = {
    (Color.WHITE, CastlingSide.KING_SIDE): CastlingSquares.from_algebraic(
        "e1", "g1", "h1", "f1"
    ),
    (Color.WHITE, CastlingSide.QUEEN_SIDE): CastlingSquares.from_algebraic(
        "e1", "c1", "a1", "d1"
    ),
    (Color.BLACK, CastlingSide.KING_SIDE): CastlingSquares.from_algebraic(
        "e8", "g8", "h8", "f8"
    ),
    (Color.BLACK, CastlingSide.QUEEN_SIDE): CastlingSquares.from_algebraic(
        "e8", "c8", "a8", "d8"
    ),
}


def castling_rule_for_king_move(
    color: Color, from_position: Position, to_position: Position
) -> CastlingSquares | None:
    """Find the castling rule (if any) that matches a king move. A castle is the only way a king travels two columns."""
    for side in CastlingSide:
        rule = CASTLING_RULES[(color, side)]
        if rule.king_from == from_position and rule.king_to == to_position:
            return rule
    return None
