"""The Game board: the 8x8 grid of pieces plus the last move played on it (needed for en passant)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from src.chess.fen import (
    is_valid_placement,
    placement_from_full_fen,
)
from src.chess.pieces import Piece
from src.chess.position import BOARD_DIMENSIONS, Position, all_positions
from src.core.exceptions import InvalidFENError, InvariantViolationError
from src.core.shared_types import Color, PieceType

if TYPE_CHECKING:
    from src.chess.moves import Move

BACK_RANK: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)


@dataclass
class Board:
    squares: dict[Position, Optional[Piece]]
    last_move: Optional[Move] = field(default=None)

    @classmethod
    def empty(cls) -> Board:
        return cls({position: None for position in all_positions()})

    @classmethod
    def initialize(cls) -> Board:
        """Canonical starting position: black on rows 0/1, white on rows 6/7, nothing has moved yet."""
        board = cls.empty()
        for col, piece_type in enumerate(BACK_RANK):
            board.place_piece(Piece(piece_type, Color.BLACK), Position(0, col))
            board.place_piece(Piece(PieceType.PAWN, Color.BLACK), Position(1, col))
            board.place_piece(Piece(PieceType.PAWN, Color.WHITE), Position(6, col))
            board.place_piece(Piece(piece_type, Color.WHITE), Position(7, col))
        return board

    @classmethod
    def from_fen(cls, fen_str: str) -> Board:
        """Construct a board using the placement part of a FEN string.

        ex. standard starting position:
        rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR
        means:
        * black pieces fill row 0 (the 8th rank), read from the a-file to the h-file
        * black pawns cover row 1 entirely
        * rows 2 through 5 have 8 consecutive empty squares
        * row 6 are the white pawns (capital letters)
        * row 7 are the white pieces

        NOTE: A FEN does not record whether a piece has moved. Every piece is created with has_moved=False.
        """
        placement = placement_from_full_fen(fen_str)
        if not is_valid_placement(placement):
            raise InvalidFENError(f"Cannot interpret supplied string as FEN: {fen_str}")

        board = cls.empty()
        for row, fen_one_row in enumerate(placement.split("/")):
            col = 0
            for character in fen_one_row:
                if character.isalpha():
                    board.place_piece(Piece.from_fen(character), Position(row, col))
                    col += 1
                else:
                    # A number denotes the amount of empty squares after each other
                    col += int(character)
        return board

    def to_fen(self) -> str:
        """Rows are separated by slashes in FEN string."""
        return "/".join(self._row_to_fen(row) for row in range(BOARD_DIMENSIONS[0]))

    def _row_to_fen(self, row: int) -> str:
        fen_characters: list[str] = []
        empty_count = 0
        for col in range(BOARD_DIMENSIONS[1]):
            piece = self.piece(Position(row, col))
            if piece is not None:
                if empty_count > 0:
                    fen_characters.append(str(empty_count))
                    empty_count = 0
                fen_characters.append(piece.to_fen())
            else:
                empty_count += 1

        # if the entire row is empty, then we still place this number in the string
        if empty_count > 0:
            fen_characters.append(str(empty_count))
        return "".join(fen_characters)

    def copy(self) -> Board:
        """Scratch copy. Pieces are immutable, so copying the mapping is enough."""
        return Board(dict(self.squares), self.last_move)

    def piece(self, position: Position) -> Optional[Piece]:
        return self.squares.get(position)

    def is_empty(self, position: Position) -> bool:
        return self.piece(position) is None

    def is_any_occupied(self, positions: tuple[Position, ...] | list[Position]) -> bool:
        return any(not self.is_empty(position) for position in positions)

    def place_piece(self, piece: Piece, position: Position) -> None:
        self.squares[position] = piece

    def remove_piece(self, position: Position) -> Optional[Piece]:
        removed = self.squares[position]
        self.squares[position] = None
        return removed

    def move_piece(self, from_position: Position, to_position: Position) -> None:
        """Relocate a piece. Whatever stood on the target square is simply overwritten."""
        piece_that_moved = self.squares[from_position]
        self.squares[from_position] = None
        self.squares[to_position] = piece_that_moved

    def locate_color(self, color: Color) -> list[Position]:
        return [
            position
            for position, piece in self.squares.items()
            if piece is not None and piece.color == color
        ]

    def locate_king(self, color: Color) -> Position:
        """Every position during play has exactly one king per color. Anything else is a bug."""
        kings = [
            position
            for position, piece in self.squares.items()
            if piece is not None and piece.type == PieceType.KING and piece.color == color
        ]
        if len(kings) != 1:
            raise InvariantViolationError(
                f"Expected exactly one {color} king on the board, found {len(kings)}.\n{self.to_fen()}"
            )
        return kings[0]

    def count_pieces(self, color: Color) -> int:
        return len(self.locate_color(color))

    def count_material(self) -> dict[Color, int]:
        """Tally the points of material each player has on the board"""
        return {color: self._count_material_player(color) for color in Color}

    def _count_material_player(self, color: Color) -> int:
        return sum(
            piece.value
            for piece in self.squares.values()
            if piece is not None and piece.color == color
        )
