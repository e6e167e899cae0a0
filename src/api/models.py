"""Requests and Response models exchanged with the host shell"""

from datetime import datetime
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from src.chess.position import BOARD_DIMENSIONS, FILES
from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Color, Difficulty, PieceType, Status

PieceColor = str
SquareName = str


def _is_algebraic_notation(value: str) -> bool:
    if len(value) != 2:
        return False

    file_character, rank_character = value[0], value[1]
    if file_character not in FILES[: BOARD_DIMENSIONS[1]]:
        return False
    if not rank_character.isdigit():
        return False
    return 1 <= int(rank_character) <= BOARD_DIMENSIONS[0]


def validate_square_name(value: str) -> str:
    if not _is_algebraic_notation(value):
        raise InvalidRequestError(
            f"Cannot interpret {value!r} as a valid square name."
        )
    return value


# --- REQUEST MODELS ---
class NewGameRequest(BaseModel):
    difficulty: Optional[Difficulty] = None


class SquareRequest(BaseModel):
    square: SquareName

    @field_validator("square")
    @classmethod
    def validate_square(cls, value: str) -> str:
        return validate_square_name(value)


class MoveRequest(BaseModel):
    from_square: SquareName
    to_square: SquareName

    @field_validator(*["from_square", "to_square"])
    @classmethod
    def validate_square(cls, value: str) -> str:
        return validate_square_name(value)


class PromotionRequest(BaseModel):
    piece_type: PieceType

    @field_validator("piece_type")
    @classmethod
    def validate_piece_type(cls, value: PieceType) -> PieceType:
        if value in (PieceType.PAWN, PieceType.KING):
            raise InvalidRequestError(f"A pawn cannot promote into a {value}.")
        return value


class HintRequest(BaseModel):
    difficulty: Optional[Difficulty] = None


# --- RESPONSE MODELS ---
class SelectionResponse(BaseModel):
    selected_square: Optional[SquareName]
    legal_destinations: list[SquareName]


class MoveRecordResponse(BaseModel):
    from_square: SquareName
    to_square: SquareName
    piece_type: PieceType
    color: Color
    captured: Optional[PieceType]
    promotion: Optional[PieceType]
    notation: str
    timestamp: float


class MoveResponse(BaseModel):
    outcome: Literal["moved", "promotion_pending", "ignored"]
    move: Optional[MoveRecordResponse] = None
    pending_from: Optional[SquareName] = None
    pending_to: Optional[SquareName] = None


class HintResponse(BaseModel):
    from_square: Optional[SquareName]
    to_square: Optional[SquareName]
    display_seconds: float


class StatusResponse(BaseModel):
    status: Status
    checking_squares: list[SquareName]
    current_player: Color
    clocks: dict[PieceColor, float]
    capture_totals: dict[PieceColor, int]
    move_count: int
    evaluation: float
    difficulty: Difficulty
    winner: Optional[Color]
    result: Optional[str]
    last_move: Optional[MoveRecordResponse]
    pending_promotion: bool
    selection: SelectionResponse
    hint: Optional[HintResponse]
    board: list[list[Optional[str]]]


class GameRecordResponse(BaseModel):
    record_id: UUID
    moves: list[str]
    result: str
    date: datetime
    white_time_remaining: float
    black_time_remaining: float
