"""Presentation only: how pieces are drawn. The rules engine never looks at these."""

from typing import Optional

from src.chess.board import Board
from src.chess.pieces import Piece
from src.chess.position import BOARD_DIMENSIONS, Position
from src.core.shared_types import Color, PieceType

PIECE_SYMBOLS: dict[tuple[PieceType, Color], str] = {
    (PieceType.PAWN, Color.WHITE): "♙",
    (PieceType.ROOK, Color.WHITE): "♖",
    (PieceType.KNIGHT, Color.WHITE): "♘",
    (PieceType.BISHOP, Color.WHITE): "♗",
    (PieceType.QUEEN, Color.WHITE): "♕",
    (PieceType.KING, Color.WHITE): "♔",
    (PieceType.PAWN, Color.BLACK): "♟",
    (PieceType.ROOK, Color.BLACK): "♜",
    (PieceType.KNIGHT, Color.BLACK): "♞",
    (PieceType.BISHOP, Color.BLACK): "♝",
    (PieceType.QUEEN, Color.BLACK): "♛",
    (PieceType.KING, Color.BLACK): "♚",
}


def piece_symbol(piece: Optional[Piece]) -> Optional[str]:
    if piece is None:
        return None
    return PIECE_SYMBOLS[(piece.type, piece.color)]


def render_board(board: Board) -> list[list[Optional[str]]]:
    """Row 0 (black's home rank) first, like the board is drawn for the white seat"""
    return [
        [piece_symbol(board.piece(Position(row, col))) for col in range(BOARD_DIMENSIONS[1])]
        for row in range(BOARD_DIMENSIONS[0])
    ]
