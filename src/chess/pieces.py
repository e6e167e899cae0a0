"""Defines the chess pieces"""

from dataclasses import dataclass, replace
from typing import Any, Self

from src.core.shared_types import Color, PieceType

FEN_TO_PIECE: dict[str, PieceType] = {
    "p": PieceType.PAWN,
    "n": PieceType.KNIGHT,
    "b": PieceType.BISHOP,
    "r": PieceType.ROOK,
    "q": PieceType.QUEEN,
    "k": PieceType.KING,
}

PIECE_TO_FEN: dict[PieceType, str] = {value: key for key, value in FEN_TO_PIECE.items()}

# Letter used in move notation. Pawns have none.
PIECE_TO_NOTATION: dict[PieceType, str] = {
    PieceType.PAWN: "",
    PieceType.KNIGHT: "N",
    PieceType.BISHOP: "B",
    PieceType.ROOK: "R",
    PieceType.QUEEN: "Q",
    PieceType.KING: "K",
}

# NOTE: The King's worth is undefined, it never gets captured so counts for nothing.
PIECE_VALUES: dict[PieceType, int] = {
    PieceType.PAWN: 1,
    PieceType.KNIGHT: 3,
    PieceType.BISHOP: 3,
    PieceType.ROOK: 5,
    PieceType.QUEEN: 9,
    PieceType.KING: 0,
}

PROMOTION_OPTIONS: tuple[PieceType, ...] = (
    PieceType.QUEEN,
    PieceType.ROOK,
    PieceType.BISHOP,
    PieceType.KNIGHT,
)


def opponent(color: Color) -> Color:
    return Color.WHITE if color == Color.BLACK else Color.BLACK


@dataclass(frozen=True)
class Piece:
    """
    Value-like record. Pieces are never mutated in place: moving or promoting produces a new Piece,
    which keeps scratch boards (used to test a move for legality) independent of the real one.
    """

    type: PieceType
    color: Color
    has_moved: bool = False

    @property
    def value(self) -> int:
        return PIECE_VALUES[self.type]

    @classmethod
    def from_fen(cls, character: str) -> Self:
        # lower case: Black pieces, upper case: White pieces
        color = Color.WHITE if character.isupper() else Color.BLACK
        piece_type = FEN_TO_PIECE[character.lower()]
        return cls(piece_type, color)

    def to_fen(self) -> str:
        return (
            PIECE_TO_FEN[self.type].upper()
            if self.color == Color.WHITE
            else PIECE_TO_FEN[self.type].lower()
        )

    def moved(self) -> Self:
        return replace(self, has_moved=True)

    def promoted_to(self, new_type: PieceType) -> Self:
        return replace(self, type=new_type)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "color": self.color.value,
            "has_moved": self.has_moved,
            "value": self.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(
            PieceType(data["type"]), Color(data["color"]), bool(data["has_moved"])
        )
