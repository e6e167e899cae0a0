"""
The Game class is the entrypoint into the domain layer for the service layer.

It owns the complete state of one game session (board, side to move, status, history, clocks, selection)
and is the only thing allowed to change the board: every change goes through the move executor (`make_move`).

Input from the touch UI is forgiving: tapping an out-of-turn piece or an illegal destination is silently ignored.
Broken invariants (a missing or captured king) raise immediately.
"""

import logging
import random
from dataclasses import dataclass, field
from time import monotonic
from typing import Callable, Optional

from src.chess.advisor import Hint, evaluate_position, suggest_move
from src.chess.board import Board
from src.chess.clock import TurnClock
from src.chess.game_record import GameRecord
from src.chess.moves import Move, is_pawn_move_to_promotion_row
from src.chess.pieces import PROMOTION_OPTIONS, Piece, opponent
from src.chess.position import Position
from src.chess.rules import CheckReport, assess_position, execute_move, legal_moves
from src.core.config import GameSettings
from src.core.exceptions import (
    GameError,
    IllegalMoveError,
    InvalidPromotionError,
)
from src.core.shared_types import (
    TERMINAL_STATUSES,
    Color,
    Difficulty,
    PieceType,
    Status,
)

logger = logging.getLogger(__name__)

DIFFICULTY_CYCLE: tuple[Difficulty, ...] = (
    Difficulty.BEGINNER,
    Difficulty.INTERMEDIATE,
    Difficulty.EXPERT,
    Difficulty.MASTER,
)

GameOverCallback = Callable[[GameRecord], None]


@dataclass(frozen=True)
class Selection:
    selected_piece: Optional[Position]
    legal_destinations: frozenset[Position] = frozenset()


@dataclass(frozen=True)
class PromotionPending:
    """A pawn move to the last row is on hold until the player picks a piece to promote into"""

    from_position: Position
    to_position: Position


@dataclass(frozen=True)
class StatusReport:
    """Everything the host needs to render the game"""

    status: Status
    checking_squares: list[Position]
    current_player: Color
    clocks: dict[Color, float]
    capture_totals: dict[Color, int]
    move_count: int
    evaluation: float
    difficulty: Difficulty
    winner: Optional[Color] = None
    result: Optional[str] = None
    last_move: Optional[Move] = None
    pending_promotion: Optional[PromotionPending] = None
    selection: Selection = field(default_factory=lambda: Selection(None))
    hint: Optional[Hint] = None


class Game:
    def __init__(
        self,
        settings: Optional[GameSettings] = None,
        clock: Optional[TurnClock] = None,
        rng: Optional[random.Random] = None,
        on_game_over: Optional[GameOverCallback] = None,
    ) -> None:
        self.settings = settings or GameSettings()
        self.clock = clock or TurnClock(
            initial_seconds=self.settings.initial_clock_seconds,
            interval_seconds=self.settings.tick_interval_seconds,
            autorun=self.settings.clock_autorun,
        )
        self.rng = rng or random.Random()
        self.on_game_over = on_game_over
        self.difficulty = self.settings.default_difficulty
        self.new_game()

    @classmethod
    def from_board(
        cls,
        board: Board,
        current_player: Color = Color.WHITE,
        settings: Optional[GameSettings] = None,
        clock: Optional[TurnClock] = None,
        rng: Optional[random.Random] = None,
        on_game_over: Optional[GameOverCallback] = None,
    ) -> "Game":
        """Start a session from an arbitrary position (puzzles, tests, ...)"""
        game = cls(settings, clock, rng, on_game_over)
        game._setup(board, current_player)
        return game

    # --- SESSION LIFECYCLE ---
    def new_game(self) -> "Game":
        """(Re)start from the canonical starting position. Called on mount and on 'New Game'."""
        self._setup(Board.initialize(), Color.WHITE)
        logger.info("New game started")
        return self

    def close(self) -> None:
        """The screen went away: make sure no timer keeps running for a discarded session"""
        self.clock.stop()

    def _setup(self, board: Board, current_player: Color) -> None:
        self.board = board
        self.current_player = current_player
        self.move_history: list[Move] = []
        self.captures: dict[Color, list[Piece]] = {Color.WHITE: [], Color.BLACK: []}
        self.move_count = 0
        self.selected_piece: Optional[Position] = None
        self.legal_destinations: frozenset[Position] = frozenset()
        self.pending_promotion: Optional[PromotionPending] = None
        self.hint: Optional[Hint] = None
        self._hint_expires_at = 0.0
        self.result: Optional[str] = None

        self.clock.reset(self.settings.initial_clock_seconds)
        self._update_status(notify=False)
        if not self.is_over:
            self.clock.start(self.current_player)

    # --- STATE QUERIES ---
    @property
    def is_over(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @property
    def winner(self) -> Optional[Color]:
        """
        Only a checkmate has a winner.
        The side to move just got mated, so the opponent must be the winner.
        """
        if self.status != Status.CHECKMATE:
            return None
        return opponent(self.current_player)

    @property
    def last_move(self) -> Optional[Move]:
        return self.board.last_move

    def capture_totals(self) -> dict[Color, int]:
        """Material each side has taken so far"""
        return {
            color: sum(piece.value for piece in pieces)
            for color, pieces in self.captures.items()
        }

    def active_hint(self) -> Optional[Hint]:
        """A hint is only shown for a few seconds"""
        if self.hint is not None and monotonic() >= self._hint_expires_at:
            self.hint = None
        return self.hint

    def get_status(self) -> StatusReport:
        return StatusReport(
            status=self.status,
            checking_squares=list(self.check.attackers),
            current_player=self.current_player,
            clocks=self.clock.snapshot(),
            capture_totals=self.capture_totals(),
            move_count=self.move_count,
            evaluation=evaluate_position(self.board),
            difficulty=self.difficulty,
            winner=self.winner,
            result=self.result,
            last_move=self.last_move,
            pending_promotion=self.pending_promotion,
            selection=Selection(self.selected_piece, self.legal_destinations),
            hint=self.active_hint(),
        )

    # --- INPUT HANDLING ---
    def select_square(self, position: Position) -> Selection:
        """
        Select one of your own pieces and compute where it can go.
        Anything else (empty square, opponent's piece) clears the selection.
        """
        if self.is_over or self.pending_promotion is not None:
            return Selection(self.selected_piece, self.legal_destinations)

        piece = self.board.piece(position)
        if piece is None or piece.color != self.current_player:
            self._clear_selection()
            return Selection(None)

        self.selected_piece = position
        self.legal_destinations = frozenset(legal_moves(self.board, position))
        logger.debug(
            "Selected %s on %s: %d legal moves",
            piece.type,
            position.to_algebraic(),
            len(self.legal_destinations),
        )
        return Selection(self.selected_piece, self.legal_destinations)

    def tap(self, position: Position) -> Selection | Move | PromotionPending | None:
        """
        Single entry point for a tap on the board
        ----

        1. your own piece        --> select it
        2. a highlighted square  --> move the selected piece there
        3. anything else         --> clear the selection
        """
        if self.is_over or self.pending_promotion is not None:
            return None

        piece = self.board.piece(position)
        if piece is not None and piece.color == self.current_player:
            return self.select_square(position)

        if self.selected_piece is not None and position in self.legal_destinations:
            return self.attempt_move(self.selected_piece, position)

        self._clear_selection()
        return Selection(None)

    def attempt_move(
        self, from_position: Position, to_position: Position
    ) -> Move | PromotionPending | None:
        """
        Execute the move if it is legal. Otherwise the attempt is ignored (and the selection cleared).

        A pawn reaching the last row does not move yet: the caller gets a PromotionPending back
        and must call `resolve_promotion()`.
        """
        if self.is_over or self.pending_promotion is not None:
            return None

        piece = self.board.piece(from_position)
        if piece is None or piece.color != self.current_player:
            self._clear_selection()
            return None

        if to_position not in legal_moves(self.board, from_position):
            logger.debug(
                "Ignored illegal move attempt %s%s",
                from_position.to_algebraic(),
                to_position.to_algebraic(),
            )
            self._clear_selection()
            return None

        if is_pawn_move_to_promotion_row(from_position, to_position, self.board):
            self.pending_promotion = PromotionPending(from_position, to_position)
            self.selected_piece = from_position
            return self.pending_promotion

        return self.make_move(from_position, to_position)

    def resolve_promotion(self, piece_type: PieceType) -> Optional[Move]:
        """Finish the pawn move that was put on hold. Without a pending promotion this does nothing."""
        if self.pending_promotion is None:
            logger.warning("Promotion to %s requested, but no promotion is pending", piece_type)
            return None
        if piece_type not in PROMOTION_OPTIONS:
            raise InvalidPromotionError(
                f"Cannot promote into a {piece_type}. Pick one of {', '.join(PROMOTION_OPTIONS)}"
            )

        pending = self.pending_promotion
        self.pending_promotion = None
        return self.make_move(pending.from_position, pending.to_position, piece_type)

    def cancel_promotion(self) -> None:
        """The player closed the promotion picker: the pawn stays where it was"""
        self.pending_promotion = None
        self._clear_selection()

    # --- HINTS ---
    def set_difficulty(self, difficulty: Difficulty) -> None:
        self.difficulty = difficulty

    def cycle_difficulty(self) -> Difficulty:
        """beginner -> intermediate -> expert -> master -> beginner"""
        index = DIFFICULTY_CYCLE.index(self.difficulty)
        self.difficulty = DIFFICULTY_CYCLE[(index + 1) % len(DIFFICULTY_CYCLE)]
        return self.difficulty

    def request_hint(self, difficulty: Optional[Difficulty] = None) -> Optional[Hint]:
        """Suggest a move for the side to move. Never plays it."""
        if self.is_over:
            return None
        self.hint = suggest_move(
            self.board,
            self.current_player,
            difficulty or self.difficulty,
            self.rng,
            self.settings.hint_strategy,
        )
        self._hint_expires_at = monotonic() + self.settings.hint_display_seconds
        return self.hint

    # --- MOVE EXECUTOR ---
    def make_move(
        self,
        from_position: Position,
        to_position: Position,
        promotion: Optional[PieceType] = None,
    ) -> Move:
        """
        Commit a move
        -----

        1. validate (it must be one of the legal moves of the side to move)
        2. update the board (en passant: also remove the pawn taken, castling: also move the rook)
        3. record the Move (with notation) and the capture
        4. hand the turn (and the clock) to the opponent
        5. update game status / check for end condition
        """
        if self.is_over:
            raise GameError(f"Game is over. status: {self.status}")

        piece = self.board.piece(from_position)
        if piece is None or piece.color != self.current_player:
            raise IllegalMoveError(
                f"No piece of {self.current_player} on {from_position.to_algebraic()}"
            )
        if to_position not in legal_moves(self.board, from_position):
            raise IllegalMoveError(
                f"Move not allowed: {from_position.to_algebraic()}{to_position.to_algebraic()}"
            )
        self._validate_promotion(from_position, to_position, promotion)

        move = execute_move(
            self.board, from_position, to_position, promotion, self.settings.castling_moves_rook
        )
        self.move_history.append(move)
        if move.captured is not None:
            self.captures[piece.color].append(move.captured)
        self.move_count += 1
        logger.debug("%s played %s", piece.color, move.notation)

        # hand over the turn
        self.current_player = opponent(self.current_player)
        self.clock.switch(self.current_player)
        self._clear_selection()
        # a direct call supersedes any promotion still waiting for a piece choice
        self.pending_promotion = None
        self.hint = None

        self._update_status()
        return move

    def _validate_promotion(
        self,
        from_position: Position,
        to_position: Position,
        promotion: Optional[PieceType],
    ) -> None:
        needs_promotion = is_pawn_move_to_promotion_row(from_position, to_position, self.board)
        if needs_promotion and promotion is None:
            raise IllegalMoveError(
                f"Pawn reaching {to_position.to_algebraic()} must be promoted. Pick one of {', '.join(PROMOTION_OPTIONS)}"
            )
        if not needs_promotion and promotion is not None:
            raise IllegalMoveError(
                f"Move {from_position.to_algebraic()}{to_position.to_algebraic()} is not a promotion"
            )
        if promotion is not None and promotion not in PROMOTION_OPTIONS:
            raise InvalidPromotionError(f"Cannot promote into a {promotion}")

    # --- STATUS ---
    def _update_status(self, notify: bool = True) -> None:
        """
        Evaluate the position for the side that is now to move.

        NOTE: on checkmate / stalemate the current player is NOT switched any further: it stays the side that got mated.
        """
        assessment = assess_position(self.board, self.current_player)
        self.status = assessment.status
        self.check: CheckReport = assessment.check

        if assessment.is_terminal:
            self._end_game(notify)

    def _end_game(self, notify: bool) -> None:
        self.clock.stop()
        winner = self.winner
        if winner is not None:
            self.result = f"{winner.value.capitalize()} wins by Checkmate"
            record_result = f"{winner.value.capitalize()} wins"
        else:
            self.result = "Draw by Stalemate"
            record_result = "Draw"
        logger.info("Game over after %d moves: %s", self.move_count, self.result)

        if notify and self.on_game_over is not None:
            self.on_game_over(self.to_record(record_result))

    def to_record(self, result: str) -> GameRecord:
        clocks = self.clock.snapshot()
        return GameRecord(
            moves=list(self.move_history),
            result=result,
            white_time_remaining=clocks[Color.WHITE],
            black_time_remaining=clocks[Color.BLACK],
        )

    def _clear_selection(self) -> None:
        self.selected_piece = None
        self.legal_destinations = frozenset()
