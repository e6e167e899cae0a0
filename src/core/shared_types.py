"""
Type definitions used across layers
"""

from enum import StrEnum


class Status(StrEnum):
    PLAYING = "playing"
    CHECK = "check"
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"


TERMINAL_STATUSES: frozenset[Status] = frozenset({Status.CHECKMATE, Status.STALEMATE})


class Color(StrEnum):
    WHITE = "white"
    BLACK = "black"


class PieceType(StrEnum):
    PAWN = "pawn"
    KNIGHT = "knight"
    BISHOP = "bishop"
    ROOK = "rook"
    QUEEN = "queen"
    KING = "king"


class Difficulty(StrEnum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    EXPERT = "expert"
    MASTER = "master"


class HintStrategy(StrEnum):
    """How the advisor picks from its scored candidates."""

    RANKED = "ranked"
    WEIGHTED = "weighted"
