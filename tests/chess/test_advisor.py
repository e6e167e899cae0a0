"""Unit tests for /src/chess/advisor.py"""

import random

import pytest

from src.chess.advisor import (
    DIFFICULTY_WEIGHTS,
    Hint,
    center_control_bonus,
    evaluate_position,
    ranked_moves,
    score_move,
    select_rank,
    select_weighted,
    suggest_move,
)
from src.chess.board import Board
from src.chess.moves import Move
from src.chess.pieces import Piece
from src.chess.position import Position
from src.core.shared_types import Color, Difficulty, HintStrategy, PieceType


def sq(name: str) -> Position:
    return Position.from_algebraic(name)


@pytest.mark.parametrize(
    "name, bonus",
    [("d4", 2.5), ("e5", 2.5), ("a1", -0.5), ("h8", -0.5), ("a4", 2.5), ("b2", 0.5)],
)
def test_center_control_bonus(name: str, bonus: float) -> None:
    assert center_control_bonus(sq(name)) == pytest.approx(bonus)


def test_score_move_rewards_captures() -> None:
    board = Board.from_fen("4k3/8/8/3q4/4P3/8/8/4K3")
    assert score_move(board, sq("e4"), sq("d5")) == pytest.approx(90 + 2.5)
    assert score_move(board, sq("e4"), sq("e5")) == pytest.approx(2.5)


def test_score_move_counts_en_passant_capture() -> None:
    board = Board.from_fen("4k3/8/8/3pP3/8/8/8/4K3")
    board.last_move = Move(sq("d7"), sq("d5"), Piece(PieceType.PAWN, Color.BLACK))
    assert score_move(board, sq("e5"), sq("d6")) == pytest.approx(10 + 2.5)


def test_ranked_moves_best_first() -> None:
    board = Board.from_fen("4k3/8/8/3q4/4P3/8/8/4K3")
    ranked = ranked_moves(board, Color.WHITE)
    assert (ranked[0].from_position, ranked[0].to_position) == (sq("e4"), sq("d5"))
    scores = [move.score for move in ranked]
    assert scores == sorted(scores, reverse=True)


def test_difficulty_weights_grow_with_difficulty() -> None:
    weights = [DIFFICULTY_WEIGHTS[difficulty] for difficulty in Difficulty]
    assert weights == sorted(weights)


def test_select_rank_stays_in_range() -> None:
    rng = random.Random(7)
    for difficulty in Difficulty:
        for _ in range(200):
            assert 0 <= select_rank(5, difficulty, rng) < 5
    assert select_rank(1, Difficulty.BEGINNER, rng) == 0


def test_harder_difficulty_suggests_top_move_more_often() -> None:
    """
    index = floor(random() ** weight * count): the top move (index 0) needs random() ** weight < 1/count.
    The larger the exponent, the more likely that is.
    """
    top_hits: dict[Difficulty, int] = {}
    for difficulty in Difficulty:
        rng = random.Random(42)
        top_hits[difficulty] = sum(
            select_rank(10, difficulty, rng) == 0 for _ in range(5000)
        )
    assert (
        top_hits[Difficulty.BEGINNER]
        < top_hits[Difficulty.INTERMEDIATE]
        < top_hits[Difficulty.EXPERT]
        < top_hits[Difficulty.MASTER]
    )


def test_select_weighted_favours_high_scores() -> None:
    rng = random.Random(3)
    picks = [select_weighted([100.0, 0.0, 0.0], Difficulty.INTERMEDIATE, rng) for _ in range(1000)]
    assert all(0 <= pick < 3 for pick in picks)
    assert picks.count(0) > 900


def test_harder_difficulty_favours_best_score_in_weighted_sampling() -> None:
    """Shifted weights (11, 6, 1, 1, 1) raised to a larger power give the best move a larger share"""
    scores = [10.0, 5.0, 0.0, 0.0, 0.0]
    top_hits: dict[Difficulty, int] = {}
    for difficulty in Difficulty:
        rng = random.Random(42)
        top_hits[difficulty] = sum(
            select_weighted(scores, difficulty, rng) == 0 for _ in range(5000)
        )
    assert (
        top_hits[Difficulty.BEGINNER]
        < top_hits[Difficulty.INTERMEDIATE]
        < top_hits[Difficulty.EXPERT]
        < top_hits[Difficulty.MASTER]
    )


def test_weighted_hints_depend_on_difficulty() -> None:
    board = Board.initialize()
    hints: dict[Difficulty, list[Hint | None]] = {}
    for difficulty in (Difficulty.BEGINNER, Difficulty.MASTER):
        rng = random.Random(1)
        hints[difficulty] = [
            suggest_move(board, Color.WHITE, difficulty, rng, HintStrategy.WEIGHTED)
            for _ in range(50)
        ]
    assert hints[Difficulty.BEGINNER] != hints[Difficulty.MASTER]


def test_select_weighted_equal_scores_are_uniform_enough() -> None:
    rng = random.Random(3)
    picks = [select_weighted([1.0, 1.0], Difficulty.MASTER, rng) for _ in range(1000)]
    assert 400 < picks.count(0) < 600


@pytest.mark.parametrize("strategy", list(HintStrategy))
@pytest.mark.parametrize("difficulty", list(Difficulty))
def test_suggest_move_is_always_legal(difficulty: Difficulty, strategy: HintStrategy) -> None:
    board = Board.initialize()
    hint = suggest_move(board, Color.WHITE, difficulty, random.Random(0), strategy)
    assert isinstance(hint, Hint)
    piece = board.piece(hint.from_position)
    assert piece is not None and piece.color == Color.WHITE


def test_suggest_move_never_changes_the_board() -> None:
    board = Board.initialize()
    suggest_move(board, Color.BLACK, Difficulty.MASTER, random.Random(0))
    assert board.to_fen() == Board.initialize().to_fen()


def test_suggest_move_without_legal_moves() -> None:
    board = Board.from_fen("k7/2Q5/2K5/8/8/8/8/8")
    assert suggest_move(board, Color.BLACK, rng=random.Random(0)) is None


def test_evaluate_position() -> None:
    assert evaluate_position(Board.initialize()) == pytest.approx(0)
    assert evaluate_position(Board.from_fen("4k3/8/8/8/3Q4/8/8/4K3")) == pytest.approx(9.25)
    assert evaluate_position(Board.from_fen("4k3/8/8/8/3q4/8/8/4K3")) == pytest.approx(-9.25)
