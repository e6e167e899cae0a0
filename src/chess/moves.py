"""
Geometry/Base movement and capturing/attacking rules

Key idea: Use strategy pattern to define the move sets (and attack patterns) for each piece type.


Legality (not leaving your own king in check) is checked later in rules.py
"""

from dataclasses import dataclass, field
from time import time
from typing import Any, Callable, Optional, Protocol, Self

from src.chess.pieces import PIECE_TO_NOTATION, Piece, opponent
from src.chess.position import Position
from src.core.shared_types import Color, PieceType


class Board(Protocol):
    """Just the parts the movement strategies need"""

    last_move: Optional["Move"]

    def piece(self, position: Position) -> Optional[Piece]: ...
    def is_empty(self, position: Position) -> bool: ...
    def locate_color(self, color: Color) -> list[Position]: ...


Vector = tuple[int, int]

STRAIGHTS: list[Vector] = [(1, 0), (-1, 0), (0, 1), (0, -1)]
DIAGONALS: list[Vector] = [(1, 1), (1, -1), (-1, 1), (-1, -1)]
KNIGHT_DELTAS: list[Vector] = [
    (-2, -1),
    (-2, 1),
    (-1, -2),
    (-1, 2),
    (1, -2),
    (1, 2),
    (2, -1),
    (2, 1),
]
KING_DELTAS: list[Vector] = [
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, -1),
    (0, 1),
    (1, -1),
    (1, 0),
    (1, 1),
]


@dataclass(frozen=True)
class Move:
    """
    A committed move: immutable historical record.

    `piece` is a snapshot of the moving piece BEFORE the move (so has_moved still shows its old value
    and a promoting pawn is still a pawn).
    """

    from_position: Position
    to_position: Position
    piece: Piece
    captured: Optional[Piece] = None
    promotion: Optional[PieceType] = None
    notation: str = ""
    timestamp: float = field(default_factory=time)
    is_en_passant: bool = False
    is_castling: bool = False

    @property
    def color(self) -> Color:
        return self.piece.color

    def to_dict(self) -> dict[str, Any]:
        """JSON friendly encoding (used to persist finished games)"""
        return {
            "from": self.from_position.to_algebraic(),
            "to": self.to_position.to_algebraic(),
            "piece": self.piece.to_dict(),
            "captured": self.captured.to_dict() if self.captured else None,
            "promotion": self.promotion.value if self.promotion else None,
            "notation": self.notation,
            "timestamp": self.timestamp,
            "is_en_passant": self.is_en_passant,
            "is_castling": self.is_castling,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(
            from_position=Position.from_algebraic(data["from"]),
            to_position=Position.from_algebraic(data["to"]),
            piece=Piece.from_dict(data["piece"]),
            captured=Piece.from_dict(data["captured"]) if data["captured"] else None,
            promotion=PieceType(data["promotion"]) if data["promotion"] else None,
            notation=data["notation"],
            timestamp=data["timestamp"],
            is_en_passant=data.get("is_en_passant", False),
            is_castling=data.get("is_castling", False),
        )


def move_notation(
    from_position: Position,
    to_position: Position,
    piece: Piece,
    captured: Optional[Piece] = None,
    promotion: Optional[PieceType] = None,
) -> str:
    """
    Long algebraic-style notation
    ----

    <piece letter><origin><x if capture><destination><=promotion letter>

    examples:
    * "e2e4": pawn push (pawns have no letter)
    * "Ng1f3": knight move
    * "Qd1xh5": queen captures on h5
    * "a7a8=Q": promotion
    * "Ke1g1": castling is written as the king's move
    """
    capture = "x" if captured else ""
    promotion_text = f"={PIECE_TO_NOTATION[promotion]}" if promotion else ""
    return f"{PIECE_TO_NOTATION[piece.type]}{from_position.to_algebraic()}{capture}{to_position.to_algebraic()}{promotion_text}"


# --- MOVEMENT RULES ---
def raycasting_move(
    position: Position, board: Board, directions: list[Vector]
) -> list[Position]:
    """
    Raycasting algorithm
    -----

    We define move directions and move along them until we hit another piece or
    the edge of the board.
    The first occupied square is only included if it holds an opponent's piece (it can be captured).
    """
    moving_piece = board.piece(position)
    assert moving_piece is not None

    destinations: list[Position] = []
    for d_row, d_col in directions:
        target = position.offset(d_row, d_col)
        while target.is_within_bounds():
            piece_found = board.piece(target)
            if piece_found is not None:
                if piece_found.color != moving_piece.color:
                    destinations.append(target)
                break
            destinations.append(target)
            target = target.offset(d_row, d_col)
    return destinations


def single_step_move(
    position: Position, board: Board, deltas: list[Vector]
) -> list[Position]:
    """Raycasting is for sliding pieces. This is the equivalent for kings and knights that just jump a single step"""
    moving_piece = board.piece(position)
    assert moving_piece is not None

    destinations: list[Position] = []
    for d_row, d_col in deltas:
        target = position.offset(d_row, d_col)
        if not target.is_within_bounds():
            continue
        piece_found = board.piece(target)
        if piece_found is None or piece_found.color != moving_piece.color:
            destinations.append(target)
    return destinations


def pawn_direction(color: Color) -> int:
    """White moves UP the board (towards row 0), black moves DOWN"""
    return -1 if color == Color.WHITE else 1


def pawn_starting_row(color: Color) -> int:
    return 6 if color == Color.WHITE else 1


def promotion_row(color: Color) -> int:
    return 0 if color == Color.WHITE else 7


def candidate_pawn_moves(position: Position, board: Board) -> list[Position]:
    """
    A pawn:
    - moves by a single square forward (if empty)
    - can move by two from its starting row (if both squares are empty)
    - takes diagonally
    - takes en passant
    """
    pawn = board.piece(position)
    assert pawn is not None
    direction = pawn_direction(pawn.color)

    destinations: list[Position] = []
    one_step = position.offset(direction, 0)
    if one_step.is_within_bounds() and board.is_empty(one_step):
        destinations.append(one_step)

        two_steps = position.offset(2 * direction, 0)
        if position.row == pawn_starting_row(pawn.color) and board.is_empty(two_steps):
            destinations.append(two_steps)

    for d_col in (-1, 1):
        target = position.offset(direction, d_col)
        if not target.is_within_bounds():
            continue
        piece_found = board.piece(target)
        if piece_found is not None and piece_found.color != pawn.color:
            destinations.append(target)
        elif piece_found is None and _is_en_passant_target(position, target, board):
            destinations.append(target)
    return destinations


def _is_en_passant_target(position: Position, target: Position, board: Board) -> bool:
    """
    The previous move must have been an opponent's two-square pawn advance,
    landing right next to this pawn (same row) in the column we are moving into.
    """
    last_move = board.last_move
    pawn = board.piece(position)
    if last_move is None or pawn is None:
        return False
    return (
        last_move.piece.type == PieceType.PAWN
        and last_move.piece.color == opponent(pawn.color)
        and abs(last_move.from_position.row - last_move.to_position.row) == 2
        and last_move.to_position.row == position.row
        and last_move.to_position.col == target.col
    )


def candidate_knight_moves(position: Position, board: Board) -> list[Position]:
    """Knights always move such that |delta_row| + |delta_col| = 3"""
    return single_step_move(position, board, KNIGHT_DELTAS)


def candidate_bishop_moves(position: Position, board: Board) -> list[Position]:
    """Bishops move diagonally: |delta_row| = |delta_col|"""
    return raycasting_move(position, board, DIAGONALS)


def candidate_rook_moves(position: Position, board: Board) -> list[Position]:
    """Rooks move either horizontally or vertically"""
    return raycasting_move(position, board, STRAIGHTS)


def candidate_queen_moves(position: Position, board: Board) -> list[Position]:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    return raycasting_move(position, board, STRAIGHTS + DIAGONALS)


def candidate_king_moves(position: Position, board: Board) -> list[Position]:
    """
    The king can move by a single square at the time.

    NOTE: Only the geometry. Filtering squares that would walk into check, and castling, is done in rules.py
    """
    return single_step_move(position, board, KING_DELTAS)


# -- STRATEGY PATTERN: MOVEMENT RULES ---
CandidateMovesFn = Callable[[Position, Board], list[Position]]
MOVEMENT_RULES: dict[PieceType, CandidateMovesFn] = {
    PieceType.PAWN: candidate_pawn_moves,
    PieceType.KNIGHT: candidate_knight_moves,
    PieceType.BISHOP: candidate_bishop_moves,
    PieceType.ROOK: candidate_rook_moves,
    PieceType.QUEEN: candidate_queen_moves,
    PieceType.KING: candidate_king_moves,
}


# --- SPECIAL MOVES, DETECTED FROM GEOMETRY ---
def is_en_passant_move(from_position: Position, to_position: Position, board: Board) -> bool:
    """A pawn moving diagonally onto an empty square can only be capturing en passant"""
    piece = board.piece(from_position)
    return (
        piece is not None
        and piece.type == PieceType.PAWN
        and from_position.col != to_position.col
        and board.is_empty(to_position)
    )


def en_passant_capture_position(from_position: Position, to_position: Position) -> Position:
    """The pawn taken en passant stands on the capturing pawn's row, in the destination column"""
    return Position(from_position.row, to_position.col)


def is_castling_move(from_position: Position, to_position: Position, board: Board) -> bool:
    """Castling is the only way a king travels two columns"""
    piece = board.piece(from_position)
    return (
        piece is not None
        and piece.type == PieceType.KING
        and from_position.row == to_position.row
        and abs(from_position.col - to_position.col) == 2
    )


def is_pawn_move_to_promotion_row(
    from_position: Position, to_position: Position, board: Board
) -> bool:
    piece = board.piece(from_position)
    return (
        piece is not None
        and piece.type == PieceType.PAWN
        and to_position.row == promotion_row(piece.color)
    )


# --- CAPTURING RULES / ATTACKING RULES ---
def pawn_attacks(from_position: Position, target: Position, board: Board) -> bool:
    """Pawns only attack diagonally forward (never straight ahead)"""
    pawn = board.piece(from_position)
    assert pawn is not None
    return target.row == from_position.row + pawn_direction(pawn.color) and abs(
        target.col - from_position.col
    ) == 1


def knight_attacks(from_position: Position, target: Position, board: Board) -> bool:
    return (target.row - from_position.row, target.col - from_position.col) in KNIGHT_DELTAS


def king_attacks(from_position: Position, target: Position, board: Board) -> bool:
    return (target.row - from_position.row, target.col - from_position.col) in KING_DELTAS


def _sliding_attack(
    from_position: Position, target: Position, board: Board, directions: list[Vector]
) -> bool:
    """
    Is the target on one of the given lines through from_position, with nothing in between?

    The target itself may be occupied (that is exactly the piece being attacked).
    """
    d_row = target.row - from_position.row
    d_col = target.col - from_position.col
    if d_row == 0 and d_col == 0:
        return False
    step: Vector = ((d_row > 0) - (d_row < 0), (d_col > 0) - (d_col < 0))
    if step not in directions:
        return False
    if d_row != 0 and d_col != 0 and abs(d_row) != abs(d_col):
        return False

    square = from_position.offset(*step)
    while square != target:
        if not board.is_empty(square):
            return False
        square = square.offset(*step)
    return True


def bishop_attacks(from_position: Position, target: Position, board: Board) -> bool:
    return _sliding_attack(from_position, target, board, DIAGONALS)


def rook_attacks(from_position: Position, target: Position, board: Board) -> bool:
    return _sliding_attack(from_position, target, board, STRAIGHTS)


def queen_attacks(from_position: Position, target: Position, board: Board) -> bool:
    return _sliding_attack(from_position, target, board, STRAIGHTS + DIAGONALS)


# --- STRATEGY PATTERN: ATTACKING RULES ---
AttacksFn = Callable[[Position, Position, Board], bool]
ATTACK_RULES: dict[PieceType, AttacksFn] = {
    PieceType.PAWN: pawn_attacks,
    PieceType.KNIGHT: knight_attacks,
    PieceType.BISHOP: bishop_attacks,
    PieceType.ROOK: rook_attacks,
    PieceType.QUEEN: queen_attacks,
    PieceType.KING: king_attacks,
}


def can_attack(from_position: Position, target: Position, board: Board) -> bool:
    """Could the piece standing on from_position capture on target (if an enemy stood there)?"""
    piece = board.piece(from_position)
    if piece is None:
        return False
    return ATTACK_RULES[piece.type](from_position, target, board)


def attackers_of(target: Position, by_color: Color, board: Board) -> list[Position]:
    """All squares holding a piece of `by_color` that attacks the target"""
    attackers: list[Position] = []
    for position in board.locate_color(by_color):
        if can_attack(position, target, board):
            attackers.append(position)
    return attackers
