"""Unit tests for src/services/chess_service.py"""

import random
from typing import Iterator
from uuid import uuid4

import pytest
from sqlalchemy.orm import Session

from src.api.models import (
    HintRequest,
    MoveRequest,
    MoveResponse,
    NewGameRequest,
    PromotionRequest,
    SelectionResponse,
    SquareRequest,
)
from src.chess.board import Board
from src.chess.game import Game
from src.core.config import GameSettings
from src.core.exceptions import RepositoryError
from src.core.shared_types import Color, Difficulty, PieceType, Status
from src.db.sql_repository import SQLGameHistory
from src.services.chess_service import ChessService

FOOLS_MATE = ["f2f3", "e7e5", "g2g4", "d8h4"]


@pytest.fixture
def service(settings: GameSettings, rng: random.Random) -> Iterator[ChessService]:
    service = ChessService(settings=settings, rng=rng)
    yield service
    service.close()


def play(service: ChessService, *moves: str) -> list[MoveResponse]:
    return [
        service.attempt_move(MoveRequest(from_square=move[:2], to_square=move[2:4]))
        for move in moves
    ]


def test_new_game(service: ChessService) -> None:
    status = service.new_game()
    assert status.status == Status.PLAYING
    assert status.current_player == Color.WHITE
    assert status.clocks == {"white": 600, "black": 600}
    assert status.capture_totals == {"white": 0, "black": 0}
    assert status.move_count == 0
    assert status.evaluation == pytest.approx(0)
    assert status.difficulty == Difficulty.INTERMEDIATE
    assert status.winner is None
    assert status.last_move is None
    assert not status.pending_promotion
    assert status.selection.selected_square is None
    assert status.board[7][4] == "♔"


def test_new_game_with_difficulty(service: ChessService) -> None:
    status = service.new_game(NewGameRequest(difficulty=Difficulty.MASTER))
    assert status.difficulty == Difficulty.MASTER


def test_select_square(service: ChessService) -> None:
    response = service.select_square(SquareRequest(square="b1"))
    assert response == SelectionResponse(selected_square="b1", legal_destinations=["a3", "c3"])

    response = service.select_square(SquareRequest(square="b8"))
    assert response == SelectionResponse(selected_square=None, legal_destinations=[])


def test_tap_select_then_move(service: ChessService) -> None:
    selection = service.tap(SquareRequest(square="e2"))
    assert isinstance(selection, SelectionResponse)
    assert selection.legal_destinations == ["e3", "e4"]

    response = service.tap(SquareRequest(square="e4"))
    assert isinstance(response, MoveResponse)
    assert response.outcome == "moved"
    assert response.move is not None
    assert response.move.notation == "e2e4"
    assert response.move.piece_type == PieceType.PAWN
    assert response.move.color == Color.WHITE

    status = service.get_status()
    assert status.current_player == Color.BLACK
    assert status.last_move is not None
    assert status.last_move.to_square == "e4"
    assert status.board[4][4] == "♙"


def test_illegal_move_is_ignored(service: ChessService) -> None:
    response = service.attempt_move(MoveRequest(from_square="e2", to_square="e5"))
    assert response == MoveResponse(outcome="ignored")
    assert service.get_status().move_count == 0


def test_finished_game_lands_in_history(service: ChessService) -> None:
    responses = play(service, *FOOLS_MATE)
    assert all(response.outcome == "moved" for response in responses)

    status = service.get_status()
    assert status.status == Status.CHECKMATE
    assert status.winner == Color.BLACK
    assert status.result == "Black wins by Checkmate"
    assert status.checking_squares == ["h4"]

    history = service.game_history()
    assert len(history) == 1
    assert history[0].result == "Black wins"
    assert history[0].moves == ["f2f3", "e7e5", "g2g4", "Qd8h4"]
    assert service.get_record(history[0].record_id) == history[0]


def test_history_keeps_most_recent_games(rng: random.Random) -> None:
    service = ChessService(settings=GameSettings(clock_autorun=False, history_limit=2), rng=rng)
    for _ in range(3):
        service.new_game()
        play(service, *FOOLS_MATE)
    assert len(service.game_history()) == 2


def test_get_unknown_record(service: ChessService) -> None:
    with pytest.raises(RepositoryError):
        service.get_record(uuid4())


def test_promotion_flow(service: ChessService, settings: GameSettings) -> None:
    service.game = Game.from_board(
        Board.from_fen("4k3/P7/8/8/8/8/8/4K3"),
        Color.WHITE,
        settings=settings,
        on_game_over=service._store_record,
    )
    response = service.attempt_move(MoveRequest(from_square="a7", to_square="a8"))
    assert response.outcome == "promotion_pending"
    assert (response.pending_from, response.pending_to) == ("a7", "a8")
    assert service.get_status().pending_promotion

    response = service.resolve_promotion(PromotionRequest(piece_type=PieceType.QUEEN))
    assert response.outcome == "moved"
    assert response.move is not None
    assert response.move.notation == "a7a8=Q"
    assert response.move.promotion == PieceType.QUEEN
    assert service.get_status().status == Status.CHECK


def test_resolve_promotion_without_pending_is_ignored(service: ChessService) -> None:
    response = service.resolve_promotion(PromotionRequest(piece_type=PieceType.ROOK))
    assert response.outcome == "ignored"


def test_request_hint(service: ChessService) -> None:
    hint = service.request_hint(HintRequest(difficulty=Difficulty.EXPERT))
    assert hint.from_square is not None
    assert hint.to_square is not None
    assert hint.display_seconds == 3.0
    assert service.get_status().hint == hint


def test_no_hint_after_game_over(service: ChessService) -> None:
    play(service, *FOOLS_MATE)
    hint = service.request_hint()
    assert hint.from_square is None
    assert hint.to_square is None


def test_durable_history(db_session_repo: Session, settings: GameSettings) -> None:
    service = ChessService(repository=SQLGameHistory(db_session_repo), settings=settings)
    play(service, *FOOLS_MATE)
    service.close()

    stored = SQLGameHistory(db_session_repo).list_records()
    assert len(stored) == 1
    assert stored[0].notation == ["f2f3", "e7e5", "g2g4", "Qd8h4"]


def test_close_stops_clock(service: ChessService) -> None:
    service.close()
    assert not service.game.clock.is_running


def test_with_sql_history(rng: random.Random) -> None:
    settings = GameSettings(clock_autorun=False, database_url="sqlite://", history_limit=3)
    service = ChessService.with_sql_history(settings, rng)
    assert isinstance(service.repo, SQLGameHistory)
    assert service.repo.limit == 3

    play(service, *FOOLS_MATE)
    history = service.game_history()
    assert len(history) == 1
    assert history[0].moves == ["f2f3", "e7e5", "g2g4", "Qd8h4"]
    assert history[0].date.tzinfo is not None
    service.close()
