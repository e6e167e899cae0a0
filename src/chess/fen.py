"""
Board placement in FEN notation.

Only the first field of a FEN string is used here (the piece placement). Everything else a full FEN carries
(side to move, castling rights, en passant square, counters) lives on the Game / pieces themselves.
"""

from src.chess.pieces import FEN_TO_PIECE
from src.chess.position import BOARD_DIMENSIONS

STARTING_PLACEMENT = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"
EMPTY_PLACEMENT = "/".join(["8"] * BOARD_DIMENSIONS[0])


def is_valid_placement(placement: str) -> bool:
    """Check the piece placement part of a FEN encoding."""
    num_ranks, num_files = BOARD_DIMENSIONS
    rank_fens = placement.split("/")
    if len(rank_fens) != num_ranks:
        return False

    for rank_fen in rank_fens:
        file_count = 0
        for character in rank_fen:
            # make sure every character is valid
            if character.isdigit():
                file_count += int(character)
            elif character.lower() in FEN_TO_PIECE:
                file_count += 1
            else:
                # immediately invalidate if the character is anything else
                return False

        # make sure you are creating a correctly sized board
        if file_count != num_files:
            return False
    return True


def placement_from_full_fen(fen: str) -> str:
    """Accept a full FEN string as well, and just keep the placement part."""
    return fen.strip().split(" ")[0]
