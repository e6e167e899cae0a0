"""Orchestration between the host shell (request/response models), the Game and the game history."""

import random
from typing import Optional
from uuid import UUID

from src.api.display import render_board
from src.api.models import (
    GameRecordResponse,
    HintRequest,
    HintResponse,
    MoveRecordResponse,
    MoveRequest,
    MoveResponse,
    NewGameRequest,
    PromotionRequest,
    SelectionResponse,
    SquareRequest,
    StatusResponse,
)
from src.chess.advisor import Hint
from src.chess.game import Game, PromotionPending, Selection
from src.chess.game_record import GameRecord
from src.chess.moves import Move
from src.chess.position import Position
from src.core.config import GameSettings
from src.core.exceptions import RepositoryError
from src.db.database import create_session_factory
from src.db.memory_repository import InMemoryGameHistory
from src.db.repository import GameHistoryRepository
from src.db.sql_repository import SQLGameHistory


class ChessService:
    """One running game session plus the history of finished games."""

    def __init__(
        self,
        repository: Optional[GameHistoryRepository] = None,
        settings: Optional[GameSettings] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.settings = settings or GameSettings()
        self.repo = repository or InMemoryGameHistory(self.settings.history_limit)
        self.game = Game(self.settings, rng=rng, on_game_over=self._store_record)

    @classmethod
    def with_sql_history(
        cls,
        settings: Optional[GameSettings] = None,
        rng: Optional[random.Random] = None,
    ) -> "ChessService":
        """Keep finished games in the database configured by `settings.database_url`"""
        settings = settings or GameSettings()
        session_factory = create_session_factory(settings)
        repository = SQLGameHistory(session_factory(), settings.history_limit)
        return cls(repository, settings, rng)

    # -- Host-facing operations --
    def new_game(self, request: Optional[NewGameRequest] = None) -> StatusResponse:
        """Reset the board. Called when the screen mounts and on 'New Game'."""
        self.game.new_game()
        if request is not None and request.difficulty is not None:
            self.game.set_difficulty(request.difficulty)
        return self.get_status()

    def select_square(self, request: SquareRequest) -> SelectionResponse:
        selection = self.game.select_square(Position.from_algebraic(request.square))
        return self._create_selection_response(selection)

    def tap(self, request: SquareRequest) -> SelectionResponse | MoveResponse:
        """A tap either (de)selects or moves, depending on what is on the board"""
        outcome = self.game.tap(Position.from_algebraic(request.square))
        if isinstance(outcome, Selection):
            return self._create_selection_response(outcome)
        return self._create_move_response(outcome)

    def attempt_move(self, request: MoveRequest) -> MoveResponse:
        outcome = self.game.attempt_move(
            Position.from_algebraic(request.from_square),
            Position.from_algebraic(request.to_square),
        )
        return self._create_move_response(outcome)

    def resolve_promotion(self, request: PromotionRequest) -> MoveResponse:
        move = self.game.resolve_promotion(request.piece_type)
        return self._create_move_response(move)

    def request_hint(self, request: Optional[HintRequest] = None) -> HintResponse:
        difficulty = request.difficulty if request is not None else None
        hint = self.game.request_hint(difficulty)
        return self._create_hint_response(hint)

    def get_status(self) -> StatusResponse:
        report = self.game.get_status()
        return StatusResponse(
            status=report.status,
            checking_squares=[square.to_algebraic() for square in report.checking_squares],
            current_player=report.current_player,
            clocks={color.value: seconds for color, seconds in report.clocks.items()},
            capture_totals={color.value: total for color, total in report.capture_totals.items()},
            move_count=report.move_count,
            evaluation=report.evaluation,
            difficulty=report.difficulty,
            winner=report.winner,
            result=report.result,
            last_move=self._create_move_record_response(report.last_move) if report.last_move else None,
            pending_promotion=report.pending_promotion is not None,
            selection=self._create_selection_response(report.selection),
            hint=self._create_hint_response(report.hint) if report.hint else None,
            board=render_board(self.game.board),
        )

    def game_history(self) -> list[GameRecordResponse]:
        return [self._create_record_response(record) for record in self.repo.list_records()]

    def get_record(self, record_id: UUID) -> GameRecordResponse:
        record = self.repo.get_record(record_id)
        if record is None:
            raise RepositoryError(f"Game record with {record_id=} not found.")
        return self._create_record_response(record)

    def close(self) -> None:
        """Tear down: stop the clock of the running session and release the history store"""
        self.game.close()
        self.repo.close()

    # -- Internal helpers --
    def _store_record(self, record: GameRecord) -> None:
        """Called by the Game exactly once, when it reaches checkmate or stalemate"""
        self.repo.add_record(record)

    def _create_selection_response(self, selection: Selection) -> SelectionResponse:
        return SelectionResponse(
            selected_square=selection.selected_piece.to_algebraic() if selection.selected_piece else None,
            legal_destinations=sorted(square.to_algebraic() for square in selection.legal_destinations),
        )

    def _create_move_response(self, outcome: Move | PromotionPending | Selection | None) -> MoveResponse:
        if isinstance(outcome, Move):
            return MoveResponse(outcome="moved", move=self._create_move_record_response(outcome))
        if isinstance(outcome, PromotionPending):
            return MoveResponse(
                outcome="promotion_pending",
                pending_from=outcome.from_position.to_algebraic(),
                pending_to=outcome.to_position.to_algebraic(),
            )
        return MoveResponse(outcome="ignored")

    def _create_move_record_response(self, move: Move) -> MoveRecordResponse:
        return MoveRecordResponse(
            from_square=move.from_position.to_algebraic(),
            to_square=move.to_position.to_algebraic(),
            piece_type=move.piece.type,
            color=move.piece.color,
            captured=move.captured.type if move.captured else None,
            promotion=move.promotion,
            notation=move.notation,
            timestamp=move.timestamp,
        )

    def _create_hint_response(self, hint: Optional[Hint]) -> HintResponse:
        return HintResponse(
            from_square=hint.from_position.to_algebraic() if hint else None,
            to_square=hint.to_position.to_algebraic() if hint else None,
            display_seconds=self.settings.hint_display_seconds,
        )

    def _create_record_response(self, record: GameRecord) -> GameRecordResponse:
        return GameRecordResponse(
            record_id=record.id,
            moves=record.notation,
            result=record.result,
            date=record.date,
            white_time_remaining=record.white_time_remaining,
            black_time_remaining=record.black_time_remaining,
        )
