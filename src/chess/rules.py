"""
Check/Mate oracle and the legality filter.

moves.py knows how pieces move. This module knows which of those moves are actually allowed:
a move is legal when, after making it on a scratch copy of the board, your own king is not attacked.
It also holds the board update for a committed move (`execute_move`), shared by the game and by analysis code.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from src.chess.board import Board
from src.chess.castling import (
    CASTLING_RULES,
    CastlingSide,
    CastlingSquares,
    castling_rule_for_king_move,
)
from src.chess.moves import (
    MOVEMENT_RULES,
    Move,
    attackers_of,
    candidate_king_moves,
    en_passant_capture_position,
    is_castling_move,
    is_en_passant_move,
    move_notation,
)
from src.chess.pieces import opponent
from src.chess.position import Position
from src.core.exceptions import InvariantViolationError
from src.core.shared_types import TERMINAL_STATUSES, Color, PieceType, Status

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CheckReport:
    in_check: bool
    attackers: list[Position] = field(default_factory=list)


@dataclass(frozen=True)
class PositionAssessment:
    """Outcome of evaluating the position for the side to move"""

    status: Status
    check: CheckReport

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES


# --- CHECK DETECTION ---
def is_square_attacked(board: Board, position: Position, by_color: Color) -> bool:
    return bool(attackers_of(position, by_color, board))


def is_king_in_check(board: Board, color: Color) -> CheckReport:
    """
    Find the king of `color` and collect every enemy piece attacking it.
    More than one attacker means double check.
    """
    king_position = board.locate_king(color)
    attackers = attackers_of(king_position, opponent(color), board)
    return CheckReport(in_check=bool(attackers), attackers=attackers)


def simulate_move(board: Board, from_position: Position, to_position: Position) -> Board:
    """
    Make the move on a scratch copy of the board.

    Only the pieces that matter for king safety are moved: the moving piece (and the pawn taken en passant).
    NOTE: a castling rook is left where it is. It cannot change whether its own king is attacked.
    """
    scratch = board.copy()
    piece = scratch.piece(from_position)
    if piece is None:
        raise InvariantViolationError(f"No piece to move on {from_position.to_algebraic()}")

    captured = scratch.piece(to_position)
    if captured is not None and captured.type == PieceType.KING:
        raise InvariantViolationError(
            f"Move {from_position.to_algebraic()}{to_position.to_algebraic()} would capture a king.\n{board.to_fen()}"
        )

    if is_en_passant_move(from_position, to_position, scratch):
        scratch.remove_piece(en_passant_capture_position(from_position, to_position))
    scratch.move_piece(from_position, to_position)
    scratch.place_piece(piece.moved(), to_position)
    return scratch


def leaves_king_in_check(board: Board, from_position: Position, to_position: Position) -> bool:
    piece = board.piece(from_position)
    assert piece is not None
    after = simulate_move(board, from_position, to_position)
    return is_king_in_check(after, piece.color).in_check


# --- KING MOVES (filtered inline) + CASTLING ---
def king_moves(board: Board, position: Position) -> list[Position]:
    """
    The king never walks into check: adjacent squares are filtered right away.
    On top of those come the castling moves.
    """
    king = board.piece(position)
    assert king is not None
    destinations = [
        target
        for target in candidate_king_moves(position, board)
        if not leaves_king_in_check(board, position, target)
    ]
    destinations.extend(castling_moves(board, king.color))
    return destinations


def castling_moves(board: Board, color: Color) -> list[Position]:
    return [
        CASTLING_RULES[(color, side)].king_to
        for side in CastlingSide
        if can_castle(board, CASTLING_RULES[(color, side)], color)
    ]


def can_castle(board: Board, rule: CastlingSquares, color: Color) -> bool:
    """
    **you are allowed to castle if**

    * Neither the king nor the rook of choice has ever moved.
    * All squares between them are empty.
    * The king is not in check now, and does not pass through or land on an attacked square.
    """
    king = board.piece(rule.king_from)
    rook = board.piece(rule.rook_from)
    if king is None or king.type != PieceType.KING or king.color != color or king.has_moved:
        return False
    if rook is None or rook.type != PieceType.ROOK or rook.color != color or rook.has_moved:
        return False

    if board.is_any_occupied(rule.between):
        return False

    return not any(
        is_square_attacked(board, square, opponent(color)) for square in rule.king_path
    )


# --- LEGAL MOVES ---
def pseudo_legal_moves(board: Board, position: Position) -> list[Position]:
    """Destinations following the piece's movement geometry. Kings are already safety-filtered."""
    piece = board.piece(position)
    if piece is None:
        return []
    if piece.type == PieceType.KING:
        return king_moves(board, position)
    return MOVEMENT_RULES[piece.type](position, board)


def legal_moves(board: Board, position: Position) -> list[Position]:
    """Keep those moves that do not put (or leave) you in check"""
    return [
        target
        for target in pseudo_legal_moves(board, position)
        if not leaves_king_in_check(board, position, target)
    ]


def all_legal_moves(board: Board, color: Color) -> list[tuple[Position, Position]]:
    """Every (from, to) pair available to `color`, in board order"""
    return [
        (from_position, to_position)
        for from_position in board.locate_color(color)
        for to_position in legal_moves(board, from_position)
    ]


def has_any_legal_move(board: Board, color: Color) -> bool:
    """Stops at the first piece that can move"""
    return any(legal_moves(board, position) for position in board.locate_color(color))


# --- GAME STATUS ---
def assess_position(board: Board, color_to_move: Color) -> PositionAssessment:
    """
    Classify the position for the side to move
    ----

    * in check, no legal move   --> checkmate (opponent wins)
    * in check, legal move      --> check
    * not in check, no move     --> stalemate (draw)
    * otherwise                 --> playing
    """
    # NOTE: both kings must be on the board, whoever is to move.
    board.locate_king(opponent(color_to_move))

    check = is_king_in_check(board, color_to_move)
    can_move = has_any_legal_move(board, color_to_move)

    if check.in_check:
        status = Status.CHECK if can_move else Status.CHECKMATE
    else:
        status = Status.PLAYING if can_move else Status.STALEMATE

    logger.debug("Position assessed for %s: %s", color_to_move, status)
    return PositionAssessment(status=status, check=check)


# --- MOVE EXECUTION ---
def execute_move(
    board: Board,
    from_position: Position,
    to_position: Position,
    promotion: Optional[PieceType] = None,
    castling_moves_rook: bool = True,
) -> Move:
    """
    Update the board for a move that is already known to be legal, and record it as the board's last move.

    * en passant: the pawn taken is removed from next to the capturing pawn
    * castling: the rook is relocated as well (see `castling_moves_rook`)
    * promotion: the pawn is replaced by a piece of the requested type

    NOTE: Earlier releases only moved the king when castling and left the rook in its corner.
    That behaviour is kept available behind `castling_moves_rook=False`.
    """
    piece = board.piece(from_position)
    if piece is None:
        raise InvariantViolationError(f"No piece to move on {from_position.to_algebraic()}")

    is_en_passant = is_en_passant_move(from_position, to_position, board)
    is_castling = is_castling_move(from_position, to_position, board)
    captured_position = (
        en_passant_capture_position(from_position, to_position) if is_en_passant else to_position
    )
    captured = board.piece(captured_position)
    if captured is not None and captured.type == PieceType.KING:
        raise InvariantViolationError(
            f"Move {from_position.to_algebraic()}{to_position.to_algebraic()} captures a king"
        )

    if is_en_passant:
        board.remove_piece(captured_position)
    moved_piece = piece.moved()
    if promotion is not None:
        moved_piece = moved_piece.promoted_to(promotion)
    board.move_piece(from_position, to_position)
    board.place_piece(moved_piece, to_position)
    if is_castling:
        _move_castling_rook(board, piece.color, from_position, to_position, castling_moves_rook)

    move = Move(
        from_position=from_position,
        to_position=to_position,
        piece=piece,
        captured=captured,
        promotion=promotion,
        notation=move_notation(from_position, to_position, piece, captured, promotion),
        is_en_passant=is_en_passant,
        is_castling=is_castling,
    )
    board.last_move = move
    return move


def _move_castling_rook(
    board: Board, color: Color, king_from: Position, king_to: Position, castling_moves_rook: bool
) -> None:
    if not castling_moves_rook:
        logger.debug("Castling without relocating the rook (castling_moves_rook=False)")
        return
    rule = castling_rule_for_king_move(color, king_from, king_to)
    assert rule is not None
    rook = board.piece(rule.rook_from)
    assert rook is not None
    board.move_piece(rule.rook_from, rule.rook_to)
    board.place_piece(rook.moved(), rule.rook_to)
