"""
Heuristic advisor used for the "hint" button.

Intentionally shallow: a move is worth ten times the value of what it captures, plus a bonus for landing
close to the centre. The ranked list is then sampled with some randomness that depends on the difficulty,
so the hint is not always the same (and not always the best) move.
"""

import logging
import random
from bisect import bisect_right
from dataclasses import dataclass
from itertools import accumulate
from math import floor
from typing import Optional

from src.chess.board import Board
from src.chess.moves import en_passant_capture_position, is_en_passant_move
from src.chess.position import Position
from src.chess.rules import all_legal_moves
from src.core.shared_types import Color, Difficulty, HintStrategy

logger = logging.getLogger(__name__)

CAPTURE_WEIGHT = 10
POSITIONAL_WEIGHT = 0.1

# Exponent applied to the uniform draw: random() ** weight.
# NOTE: A weight closer to 1 makes the draw less skewed towards the end of the ranked list.
DIFFICULTY_WEIGHTS: dict[Difficulty, float] = {
    Difficulty.BEGINNER: 0.3,
    Difficulty.INTERMEDIATE: 0.6,
    Difficulty.EXPERT: 0.8,
    Difficulty.MASTER: 0.95,
}

# Exponent applied to the shifted scores of the weighted strategy: (score - lowest + 1) ** sharpness.
# NOTE: A larger exponent concentrates the probability mass on the best scored moves.
DIFFICULTY_SHARPNESS: dict[Difficulty, float] = {
    Difficulty.BEGINNER: 0.5,
    Difficulty.INTERMEDIATE: 1.0,
    Difficulty.EXPERT: 2.0,
    Difficulty.MASTER: 4.0,
}


@dataclass(frozen=True)
class ScoredMove:
    from_position: Position
    to_position: Position
    score: float


@dataclass(frozen=True)
class Hint:
    from_position: Position
    to_position: Position


def center_control_bonus(position: Position) -> float:
    """
    Distance to the centre of the board, measured per axis: 2.5 for the four centre rows/cols, down to -0.5 on the edge.
    The better of the two axes counts.
    """
    return max(3 - abs(position.row - 3.5), 3 - abs(position.col - 3.5))


def score_move(board: Board, from_position: Position, to_position: Position) -> float:
    captured = board.piece(to_position)
    if captured is None and is_en_passant_move(from_position, to_position, board):
        captured = board.piece(en_passant_capture_position(from_position, to_position))
    capture_value = captured.value if captured is not None else 0
    return capture_value * CAPTURE_WEIGHT + center_control_bonus(to_position)


def ranked_moves(board: Board, color: Color) -> list[ScoredMove]:
    """All legal moves for `color`, best score first. Ties keep board order."""
    scored = [
        ScoredMove(from_position, to_position, score_move(board, from_position, to_position))
        for from_position, to_position in all_legal_moves(board, color)
    ]
    return sorted(scored, key=lambda move: move.score, reverse=True)


def select_rank(count: int, difficulty: Difficulty, rng: random.Random) -> int:
    """floor(random() ** weight * count)"""
    weight = DIFFICULTY_WEIGHTS[difficulty]
    index = floor((rng.random() ** weight) * count)
    return min(index, count - 1)


def select_weighted(scores: list[float], difficulty: Difficulty, rng: random.Random) -> int:
    """
    Pick an index with probability growing with its score.

    Scores are shifted so that every candidate keeps a non-zero chance and raised to the difficulty's
    sharpness, then a uniform draw is located in the cumulative weights with a binary search.
    """
    lowest = min(scores)
    sharpness = DIFFICULTY_SHARPNESS[difficulty]
    weights = [(score - lowest + 1) ** sharpness for score in scores]
    cumulative = list(accumulate(weights))
    draw = rng.random() * cumulative[-1]
    return min(bisect_right(cumulative, draw), len(scores) - 1)


def suggest_move(
    board: Board,
    color: Color,
    difficulty: Difficulty = Difficulty.INTERMEDIATE,
    rng: Optional[random.Random] = None,
    strategy: HintStrategy = HintStrategy.RANKED,
) -> Optional[Hint]:
    """Returns None if `color` has no legal move at all"""
    rng = rng or random.Random()
    candidates = ranked_moves(board, color)
    if not candidates:
        return None

    if strategy == HintStrategy.WEIGHTED:
        index = select_weighted([move.score for move in candidates], difficulty, rng)
    else:
        index = select_rank(len(candidates), difficulty, rng)

    chosen = candidates[index]
    logger.debug(
        "Hint for %s (%s, %s): %s%s, rank %d of %d",
        color,
        difficulty,
        strategy,
        chosen.from_position.to_algebraic(),
        chosen.to_position.to_algebraic(),
        index,
        len(candidates),
    )
    return Hint(chosen.from_position, chosen.to_position)


def evaluate_position(board: Board) -> float:
    """
    Material plus a small positional term for every piece. Positive favours white.
    """
    material = board.count_material()
    positional: dict[Color, float] = {Color.WHITE: 0.0, Color.BLACK: 0.0}
    for position, piece in board.squares.items():
        if piece is not None:
            positional[piece.color] += center_control_bonus(position) * POSITIONAL_WEIGHT
    return (material[Color.WHITE] - material[Color.BLACK]) + (
        positional[Color.WHITE] - positional[Color.BLACK]
    )
